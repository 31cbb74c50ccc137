# core/line_mapper.py
"""
Builds total line-index maps between the two documents of a comparison.

mapAtoB(i) gives, for every 0-based line i of document A, the best corresponding
0-based line of document B: equal lines map to their partner, deleted lines snap to
the surviving position in B, and regions outside any hunk shift by the accumulated
insert/delete offset. The inverse map is built by transposing the diff and running
the same algorithm. Every result is clamped into the target document.
"""
import logging
from dataclasses import replace
from typing import List, Optional, Sequence, Tuple

from .diff_models import DiffResult, Hunk, Line, LineOp

logger: logging.Logger = logging.getLogger(__name__)


def _clamp(index: int, total: int) -> int:
	""" Clamps an index into [0, total - 1]; an empty document maps everything to 0. """
	return max(0, min(total - 1, index))


def clampLineRange(lineRange: Optional[Tuple[int, int]], total: int) -> Optional[Tuple[int, int]]:
	"""
	Fits an inclusive 0-based line range into a document of `total` lines.
	Returns None for no range or an empty document; a reversed range is reordered.
	"""
	if lineRange is None or total <= 0:
		return None
	first, last = sorted(lineRange)
	return _clamp(first, total), _clamp(last, total)


class LineMap:
	"""
	Total, monotonically non-decreasing function from source line index to target line index.
	Out-of-range queries are clamped to the source range before lookup.
	"""

	def __init__(self: 'LineMap', table: Sequence[int], targetTotal: int) -> None:
		self._table: Tuple[int, ...] = tuple(table)
		self._targetTotal: int = targetTotal

	def __call__(self: 'LineMap', index: int) -> int:
		if not self._table:
			return 0
		return self._table[_clamp(index, len(self._table))]

	def __len__(self: 'LineMap') -> int:
		return len(self._table)

	@property
	def sourceTotal(self: 'LineMap') -> int:
		return len(self._table)

	@property
	def targetTotal(self: 'LineMap') -> int:
		return self._targetTotal

	def asList(self: 'LineMap') -> List[int]:
		return list(self._table)


def buildLineMapAtoB(diff: Optional[DiffResult], aTotal: int, bTotal: int) -> LineMap:
	"""
	Builds the A→B line map.

	Args:
		diff (Optional[DiffResult]): The diff result, or None for a pure clamped identity.
		aTotal (int): Number of lines in document A (source).
		bTotal (int): Number of lines in document B (target).

	Returns:
		LineMap: Total function over [0, aTotal).
	"""
	aTotal = max(0, aTotal)
	bTotal = max(0, bTotal)
	table: List[int] = [_clamp(i, bTotal) for i in range(aTotal)]

	if diff is None or not diff.hunks:
		return LineMap(table, bTotal)

	aIdx: int = 0
	bIdx: int = 0
	for hunk in sorted(diff.hunks, key=lambda h: h.a_start):
		aStart: int = max(0, hunk.a_start - 1)
		bStart: int = max(0, hunk.b_start - 1)

		# Untouched region before this hunk keeps the offset accumulated so far
		delta: int = bIdx - aIdx
		for i in range(aIdx, min(aStart, aTotal)):
			table[i] = _clamp(i + delta, bTotal)

		aIdx, bIdx = aStart, bStart
		for line in hunk.lines:
			if line.op == LineOp.EQUAL:
				if aIdx < aTotal:
					table[aIdx] = _clamp(bIdx, bTotal)
				aIdx += 1
				bIdx += 1
			elif line.op == LineOp.DELETE:
				# Deleted line snaps to the current surviving position in B
				if aIdx < aTotal:
					table[aIdx] = _clamp(bIdx, bTotal)
				aIdx += 1
			else:
				bIdx += 1

	tailDelta: int = bIdx - aIdx
	for i in range(aIdx, aTotal):
		table[i] = _clamp(i + tailDelta, bTotal)

	# Stale or overlapping hunks must never make the map go backwards
	for i in range(1, aTotal):
		if table[i] < table[i - 1]:
			table[i] = table[i - 1]

	logger.debug(f"Built line map over {aTotal} source lines ({len(diff.hunks)} hunks, target {bTotal} lines).")
	return LineMap(table, bTotal)


def transposeDiff(diff: DiffResult) -> DiffResult:
	""" Swaps the A and B sides of every hunk, turning insertions into deletions and vice versa. """
	def flipLine(line: Line) -> Line:
		if line.op == LineOp.INSERT:
			return Line(op=LineOp.DELETE, text=line.text)
		if line.op == LineOp.DELETE:
			return Line(op=LineOp.INSERT, text=line.text)
		return line

	flipped: List[Hunk] = [
		Hunk(
			a_start=hunk.b_start,
			a_lines=hunk.b_lines,
			b_start=hunk.a_start,
			b_lines=hunk.a_lines,
			lines=tuple(flipLine(line) for line in hunk.lines),
		)
		for hunk in diff.hunks
	]
	return replace(diff, hunks=tuple(flipped), a=diff.b, b=diff.a)


def invertMap(diff: Optional[DiffResult], aTotal: int, bTotal: int) -> LineMap:
	"""
	Builds the B→A line map by transposing the diff.

	Args:
		diff (Optional[DiffResult]): The A→B diff result, or None.
		aTotal (int): Number of lines in document A (target of this map).
		bTotal (int): Number of lines in document B (source of this map).
	"""
	if diff is None:
		return buildLineMapAtoB(None, bTotal, aTotal)
	return buildLineMapAtoB(transposeDiff(diff), bTotal, aTotal)


class LineMapCache:
	"""
	Memoises the pair of line maps for the current comparison.

	Maps are rebuilt only when the diff result object or either document's line count
	changes, so recomputing on every keystroke stays linear in the document size.
	"""

	def __init__(self: 'LineMapCache') -> None:
		self._diff: Optional[DiffResult] = None
		self._totals: Optional[Tuple[int, int]] = None
		self._maps: Optional[Tuple[LineMap, LineMap]] = None

	def getMaps(self: 'LineMapCache', diff: Optional[DiffResult], aTotal: int, bTotal: int) -> Tuple[LineMap, LineMap]:
		""" Returns (mapAtoB, mapBtoA), rebuilding them only when the inputs changed. """
		if self._maps is not None and self._diff is diff and self._totals == (aTotal, bTotal):
			return self._maps
		self._diff = diff
		self._totals = (aTotal, bTotal)
		self._maps = (buildLineMapAtoB(diff, aTotal, bTotal), invertMap(diff, aTotal, bTotal))
		return self._maps

	def clear(self: 'LineMapCache') -> None:
		self._diff = None
		self._totals = None
		self._maps = None
