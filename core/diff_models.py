# core/diff_models.py
"""
Data model shared by the diff engine, the row aligner and the line mapper.

A DiffResult is an ordered list of hunks; each hunk interleaves equal, insert and
delete lines so that replaying them reconstructs the covered region of both documents.
All model objects are immutable and are recreated on every diff run.
"""
import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional, Tuple

from .exceptions import HunkContractError

logger: logging.Logger = logging.getLogger(__name__)


class LineOp(str, Enum):
	""" Classification of a line within a hunk. """
	EQUAL = "equal"
	INSERT = "insert"
	DELETE = "delete"


class Algorithm(str, Enum):
	""" Line-diff algorithms understood by the diff engine. """
	SEQUENCE = "sequence" # difflib.SequenceMatcher
	MYERS = "myers"


class FileKind(str, Enum):
	TEXT = "text"
	BINARY = "binary"
	MISSING = "missing"


@dataclass(frozen=True)
class Line:
	op: LineOp
	text: str

	def toDict(self: 'Line') -> Dict[str, str]:
		return {"op": self.op.value, "text": self.text}

	@classmethod
	def fromDict(cls, data: Dict[str, Any]) -> 'Line':
		return cls(op=LineOp(data["op"]), text=str(data.get("text", "")))


@dataclass(frozen=True)
class Hunk:
	"""
	A contiguous block of change between document A and document B.

	Attributes:
		a_start (int): 1-based line number where the hunk begins in document A.
		a_lines (int): Number of document A lines covered (0 for a pure insertion).
		b_start (int): 1-based line number where the hunk begins in document B.
		b_lines (int): Number of document B lines covered (0 for a pure deletion).
		lines (Tuple[Line, ...]): Ordered interleaving of line operations.
	"""
	a_start: int
	a_lines: int
	b_start: int
	b_lines: int
	lines: Tuple[Line, ...] = ()

	def countSides(self: 'Hunk') -> Tuple[int, int]:
		""" Returns (lines consumed from A, lines consumed from B) by replaying `lines`. """
		aCount: int = sum(1 for line in self.lines if line.op != LineOp.INSERT)
		bCount: int = sum(1 for line in self.lines if line.op != LineOp.DELETE)
		return aCount, bCount

	def isConsistent(self: 'Hunk') -> bool:
		return self.countSides() == (self.a_lines, self.b_lines)

	def aRange(self: 'Hunk') -> Optional[Tuple[int, int]]:
		""" Inclusive 0-based (first, last) lines of A covered by the hunk; None when it covers none. """
		if self.a_lines <= 0:
			return None
		first: int = max(0, self.a_start - 1)
		return first, first + self.a_lines - 1

	def bRange(self: 'Hunk') -> Optional[Tuple[int, int]]:
		""" Inclusive 0-based (first, last) lines of B covered by the hunk; None when it covers none. """
		if self.b_lines <= 0:
			return None
		first: int = max(0, self.b_start - 1)
		return first, first + self.b_lines - 1

	def toDict(self: 'Hunk') -> Dict[str, Any]:
		return {
			"a_start": self.a_start,
			"a_lines": self.a_lines,
			"b_start": self.b_start,
			"b_lines": self.b_lines,
			"lines": [line.toDict() for line in self.lines],
		}

	@classmethod
	def fromDict(cls, data: Dict[str, Any]) -> 'Hunk':
		return cls(
			a_start=int(data["a_start"]),
			a_lines=int(data["a_lines"]),
			b_start=int(data["b_start"]),
			b_lines=int(data["b_lines"]),
			lines=tuple(Line.fromDict(item) for item in data.get("lines", [])),
		)


def validateHunk(hunk: Hunk) -> Hunk:
	"""
	Enforces the hunk line-count contract.

	Args:
		hunk (Hunk): The hunk to check.

	Returns:
		Hunk: The same hunk, for chaining.

	Raises:
		HunkContractError: If replaying the hunk's lines does not consume exactly
						   a_lines lines of A and b_lines lines of B.
	"""
	aCount, bCount = hunk.countSides()
	if (aCount, bCount) != (hunk.a_lines, hunk.b_lines):
		errMsg = (f"Hunk @@ -{hunk.a_start},{hunk.a_lines} +{hunk.b_start},{hunk.b_lines} @@ "
				  f"replays {aCount} A-lines and {bCount} B-lines.")
		logger.error(errMsg)
		raise HunkContractError(errMsg)
	return hunk


@dataclass(frozen=True)
class FileMeta:
	""" Describes one input of a comparison, as reported by the diff engine. """
	kind: FileKind = FileKind.TEXT
	path: Optional[str] = None
	encoding: Optional[str] = "utf-8"
	size_bytes: Optional[int] = None

	def toDict(self: 'FileMeta') -> Dict[str, Any]:
		return {"kind": self.kind.value, "path": self.path, "encoding": self.encoding, "size_bytes": self.size_bytes}

	@classmethod
	def fromDict(cls, data: Dict[str, Any]) -> 'FileMeta':
		return cls(
			kind=FileKind(data.get("kind", FileKind.TEXT.value)),
			path=data.get("path"),
			encoding=data.get("encoding"),
			size_bytes=data.get("size_bytes"),
		)


@dataclass(frozen=True)
class DiffResult:
	""" Ordered, non-overlapping hunks sorted by a_start, plus optional input metadata. """
	hunks: Tuple[Hunk, ...] = ()
	a: Optional[FileMeta] = None
	b: Optional[FileMeta] = None

	def toDict(self: 'DiffResult') -> Dict[str, Any]:
		data: Dict[str, Any] = {"hunks": [hunk.toDict() for hunk in self.hunks]}
		if self.a is not None:
			data["a"] = self.a.toDict()
		if self.b is not None:
			data["b"] = self.b.toDict()
		return data

	@classmethod
	def fromDict(cls, data: Dict[str, Any]) -> 'DiffResult':
		"""
		Builds a DiffResult from its plain-dict form, validating every hunk.

		Raises:
			HunkContractError: If a hunk breaks the line-count contract.
			KeyError, ValueError: If required fields are missing or malformed.
		"""
		hunks: List[Hunk] = [validateHunk(Hunk.fromDict(item)) for item in data.get("hunks", [])]
		metaA = FileMeta.fromDict(data["a"]) if data.get("a") else None
		metaB = FileMeta.fromDict(data["b"]) if data.get("b") else None
		return cls(hunks=tuple(hunks), a=metaA, b=metaB)


@dataclass(frozen=True)
class DiffOptions:
	"""
	Options record passed to the diff engine.

	Attributes:
		algorithm (Algorithm): Line-matching algorithm.
		ignore_case (bool): Compare lines case-insensitively.
		ignore_whitespace (bool): Collapse whitespace runs and trim before comparing.
		context_lines (int): Unchanged lines kept around each change.
	"""
	algorithm: Algorithm = Algorithm.SEQUENCE
	ignore_case: bool = False
	ignore_whitespace: bool = False
	context_lines: int = 3

	def toDict(self: 'DiffOptions') -> Dict[str, Any]:
		return {
			"algorithm": self.algorithm.value,
			"ignore_case": self.ignore_case,
			"ignore_whitespace": self.ignore_whitespace,
			"context_lines": self.context_lines,
		}


# --- Rendering model (Row Aligner / Token Differ output) ---

@dataclass(frozen=True)
class Token:
	""" Word or whitespace unit of an intra-line diff. Neither flag set means unchanged. """
	text: str
	deleted: bool = False
	inserted: bool = False


@dataclass(frozen=True)
class TokenDiff:
	aTokens: Tuple[Token, ...] = ()
	bTokens: Tuple[Token, ...] = ()


@dataclass(frozen=True)
class RowCell:
	"""
	One side of a display row.

	`op` is equal/delete on the left and equal/insert on the right; `ln` is the
	1-based line number in that document; `tokens` is only set on paired replace rows.
	"""
	text: str
	op: LineOp
	ln: int
	tokens: Optional[Tuple[Token, ...]] = None


@dataclass(frozen=True)
class Row:
	left: Optional[RowCell] = None
	right: Optional[RowCell] = None

	@property
	def isReplace(self: 'Row') -> bool:
		return (self.left is not None and self.right is not None
				and self.left.op == LineOp.DELETE and self.right.op == LineOp.INSERT)


@dataclass(frozen=True)
class AlignedHunk:
	a_start: int
	b_start: int
	rows: Tuple[Row, ...] = field(default_factory=tuple)
