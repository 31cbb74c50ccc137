# core/diff_engine.py
"""
Line-diff engine boundary: turns two documents (texts or file paths) into a DiffResult.

Lines are compared on a normalized form (optionally case-folded and with whitespace
collapsed) while the emitted hunk lines always carry the original text. Changes are
grouped into hunks with `context_lines` unchanged lines around them, in the same way
difflib's grouped opcodes are built. The default matcher is difflib.SequenceMatcher;
a Myers shortest-edit-script matcher is available as an alternative.
"""
import codecs
import difflib
import logging
import os
import re
from typing import Dict, Iterator, List, Optional, Sequence, Tuple

from .diff_models import Algorithm, DiffOptions, DiffResult, FileKind, FileMeta, Hunk, Line, LineOp, validateHunk
from .exceptions import DiffEngineError

logger: logging.Logger = logging.getLogger(__name__)

# (tag, i1, i2, j1, j2) as produced by difflib.SequenceMatcher.get_opcodes()
Opcode = Tuple[str, int, int, int, int]

BINARY_SNIFF_BYTES: int = 8192
WHITESPACE_RUN_REGEX: re.Pattern = re.compile(r'\s+')

_BOM_ENCODINGS: List[Tuple[bytes, str]] = [
	(codecs.BOM_UTF8, 'utf-8-sig'),
	(codecs.BOM_UTF16_LE, 'utf-16'),
	(codecs.BOM_UTF16_BE, 'utf-16'),
]


# --- Text helpers ---

def splitLines(text: str) -> List[str]:
	"""
	Splits a document into lines without their terminators.
	A trailing newline does not start an extra line; an empty document has no lines.
	"""
	if not text:
		return []
	lines: List[str] = text.split("\n")
	if lines[-1] == "":
		lines.pop()
	return [line[:-1] if line.endswith("\r") else line for line in lines]


def normalizeLine(text: str, options: DiffOptions) -> str:
	""" Applies the case/whitespace options to one line for comparison purposes. """
	out: str = text.lower() if options.ignore_case else text
	if options.ignore_whitespace:
		out = WHITESPACE_RUN_REGEX.sub(" ", out).strip()
	return out


# --- Matchers ---

def _sequenceOpcodes(a: Sequence[str], b: Sequence[str]) -> List[Opcode]:
	matcher = difflib.SequenceMatcher(None, a, b, autojunk=False)
	return list(matcher.get_opcodes())


def _myersOpcodes(a: Sequence[str], b: Sequence[str]) -> List[Opcode]:
	""" Myers O(ND) shortest edit script, collapsed into equal/delete/insert opcodes. """
	n, m = len(a), len(b)
	v: Dict[int, int] = {1: 0}
	trace: List[Dict[int, int]] = []
	for d in range(n + m + 1):
		trace.append(dict(v))
		done: bool = False
		for k in range(-d, d + 1, 2):
			if k == -d or (k != d and v.get(k - 1, 0) < v.get(k + 1, 0)):
				x = v.get(k + 1, 0)
			else:
				x = v.get(k - 1, 0) + 1
			y = x - k
			while x < n and y < m and a[x] == b[y]:
				x += 1
				y += 1
			v[k] = x
			if x >= n and y >= m:
				done = True
				break
		if done:
			break

	# Backtrack into single-line steps, last to first
	steps: List[str] = []
	x, y = n, m
	for d in range(len(trace) - 1, -1, -1):
		vd: Dict[int, int] = trace[d]
		k = x - y
		if k == -d or (k != d and vd.get(k - 1, 0) < vd.get(k + 1, 0)):
			prevK = k + 1
		else:
			prevK = k - 1
		prevX = vd.get(prevK, 0)
		prevY = prevX - prevK
		while x > prevX and y > prevY:
			steps.append("equal")
			x -= 1
			y -= 1
		if d > 0:
			steps.append("insert" if x == prevX else "delete")
		x, y = prevX, prevY
	steps.reverse()

	opcodes: List[Opcode] = []
	i = j = 0
	for tag in steps:
		di, dj = (1, 1) if tag == "equal" else ((1, 0) if tag == "delete" else (0, 1))
		if opcodes and opcodes[-1][0] == tag:
			last = opcodes[-1]
			opcodes[-1] = (tag, last[1], i + di, last[3], j + dj)
		else:
			opcodes.append((tag, i, i + di, j, j + dj))
		i += di
		j += dj
	return opcodes


def groupOpcodes(opcodes: Sequence[Opcode], context: int) -> Iterator[List[Opcode]]:
	"""
	Groups opcodes into hunks with up to `context` lines of equal context around each change.
	Yields nothing when there are no changes at all.
	"""
	codes: List[Opcode] = list(opcodes)
	if not codes or all(code[0] == "equal" for code in codes):
		return
	context = max(0, context)
	# Trim leading/trailing equal runs to the context size
	tag, i1, i2, j1, j2 = codes[0]
	if tag == "equal":
		codes[0] = (tag, max(i1, i2 - context), i2, max(j1, j2 - context), j2)
	tag, i1, i2, j1, j2 = codes[-1]
	if tag == "equal":
		codes[-1] = (tag, i1, min(i2, i1 + context), j1, min(j2, j1 + context))

	span: int = context + context
	group: List[Opcode] = []
	for tag, i1, i2, j1, j2 in codes:
		# Split the hunk at any long equal run
		if tag == "equal" and i2 - i1 > span:
			group.append((tag, i1, min(i2, i1 + context), j1, min(j2, j1 + context)))
			yield group
			group = []
			i1, j1 = max(i1, i2 - context), max(j1, j2 - context)
		group.append((tag, i1, i2, j1, j2))
	if group and not (len(group) == 1 and group[0][0] == "equal"):
		yield group


def _buildHunk(group: Sequence[Opcode], aLines: Sequence[str], bLines: Sequence[str]) -> Hunk:
	lines: List[Line] = []
	for tag, i1, i2, j1, j2 in group:
		if tag == "equal":
			lines.extend(Line(op=LineOp.EQUAL, text=text) for text in aLines[i1:i2])
			continue
		if tag in ("delete", "replace"):
			lines.extend(Line(op=LineOp.DELETE, text=text) for text in aLines[i1:i2])
		if tag in ("insert", "replace"):
			lines.extend(Line(op=LineOp.INSERT, text=text) for text in bLines[j1:j2])

	first: Opcode = group[0]
	last: Opcode = group[-1]
	hunk = Hunk(
		a_start=first[1] + 1,
		a_lines=last[2] - first[1],
		b_start=first[3] + 1,
		b_lines=last[4] - first[3],
		lines=tuple(lines),
	)
	return validateHunk(hunk)


def buildHunks(aText: str, bText: str, options: Optional[DiffOptions] = None) -> List[Hunk]:
	"""
	Computes the grouped hunks between two texts.

	Args:
		aText (str): Document A.
		bText (str): Document B.
		options (Optional[DiffOptions]): Matching options; defaults apply if None.

	Returns:
		List[Hunk]: Hunks sorted by a_start.

	Raises:
		DiffEngineError: If the requested algorithm is not supported.
	"""
	opts: DiffOptions = options or DiffOptions()
	aLines: List[str] = splitLines(aText)
	bLines: List[str] = splitLines(bText)
	aKeys: List[str] = [normalizeLine(line, opts) for line in aLines]
	bKeys: List[str] = [normalizeLine(line, opts) for line in bLines]

	if opts.algorithm == Algorithm.SEQUENCE:
		opcodes = _sequenceOpcodes(aKeys, bKeys)
	elif opts.algorithm == Algorithm.MYERS:
		opcodes = _myersOpcodes(aKeys, bKeys)
	else:
		raise DiffEngineError(f"Unsupported diff algorithm: {opts.algorithm!r}")

	hunks: List[Hunk] = [_buildHunk(group, aLines, bLines) for group in groupOpcodes(opcodes, opts.context_lines)]
	logger.debug(f"Diffed {len(aLines)} vs {len(bLines)} lines with '{opts.algorithm.value}': {len(hunks)} hunks.")
	return hunks


# --- Public boundary ---

def diffText(aText: str, bText: str, options: Optional[DiffOptions] = None) -> DiffResult:
	""" Diffs two in-memory documents. """
	metaA = FileMeta(kind=FileKind.TEXT, encoding="utf-8", size_bytes=len(aText.encode("utf-8")))
	metaB = FileMeta(kind=FileKind.TEXT, encoding="utf-8", size_bytes=len(bText.encode("utf-8")))
	return DiffResult(hunks=tuple(buildHunks(aText, bText, options)), a=metaA, b=metaB)


def loadFileText(path: str) -> Tuple[FileMeta, Optional[str]]:
	"""
	Loads a file for diffing, detecting binary content and text encoding.

	Args:
		path (str): Path of the file to read.

	Returns:
		Tuple[FileMeta, Optional[str]]: Metadata plus the decoded text, or None for missing/binary files.

	Raises:
		DiffEngineError: If the file exists but cannot be read.
	"""
	if not os.path.exists(path):
		logger.warning(f"Diff input not found: {path}")
		return FileMeta(kind=FileKind.MISSING, path=path, encoding=None), None
	try:
		with open(path, 'rb') as f:
			raw: bytes = f.read()
	except OSError as e:
		logger.error(f"Failed to read diff input '{path}': {e}", exc_info=True)
		raise DiffEngineError(f"file read error: {path}: {e}") from e

	size: int = len(raw)
	for bom, encoding in _BOM_ENCODINGS:
		if raw.startswith(bom):
			text = raw.decode(encoding, errors='replace')
			return FileMeta(kind=FileKind.TEXT, path=path, encoding=encoding, size_bytes=size), text

	# BOM-marked UTF-16 contains NUL bytes, so the sniff only applies to unmarked input
	if b"\x00" in raw[:BINARY_SNIFF_BYTES]:
		logger.info(f"Diff input '{path}' looks binary; skipping line diff.")
		return FileMeta(kind=FileKind.BINARY, path=path, encoding=None, size_bytes=size), None
	try:
		return FileMeta(kind=FileKind.TEXT, path=path, encoding="utf-8", size_bytes=size), raw.decode("utf-8")
	except UnicodeDecodeError:
		logger.debug(f"'{path}' is not valid UTF-8; decoding as latin-1.")
		return FileMeta(kind=FileKind.TEXT, path=path, encoding="latin-1", size_bytes=size), raw.decode("latin-1")


def diffPaths(aPath: str, bPath: str, options: Optional[DiffOptions] = None) -> DiffResult:
	"""
	Diffs two files. If either side is missing or binary the result has no hunks
	and the FileMeta entries say why.
	"""
	metaA, textA = loadFileText(aPath)
	metaB, textB = loadFileText(bPath)
	if textA is None or textB is None:
		return DiffResult(hunks=(), a=metaA, b=metaB)
	return DiffResult(hunks=tuple(buildHunks(textA, textB, options)), a=metaA, b=metaB)
