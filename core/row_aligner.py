# core/row_aligner.py
"""
Turns one hunk's line-operation stream into side-by-side display rows.

Equal lines become rows with both sides populated. A change block (a run of deletions
and a run of insertions, in either order) is paired positionally: old line k sits next
to new line k, and the longer run finishes with one-sided rows. Paired rows carry
token-level highlights from the word differ.
"""
import logging
from typing import List, Optional, Sequence

from .diff_models import AlignedHunk, DiffResult, Hunk, Line, LineOp, Row, RowCell, TokenDiff
from .token_differ import wordDiff

logger: logging.Logger = logging.getLogger(__name__)


def _takeRun(lines: Sequence[Line], start: int, op: LineOp) -> List[Line]:
	""" Returns the maximal run of lines with the given op beginning at `start`. """
	run: List[Line] = []
	index: int = start
	while index < len(lines) and lines[index].op == op:
		run.append(lines[index])
		index += 1
	return run


def alignHunk(hunk: Hunk) -> AlignedHunk:
	"""
	Aligns a single hunk into display rows.

	Args:
		hunk (Hunk): The hunk to align.

	Returns:
		AlignedHunk: The hunk's start positions and its ordered rows.
	"""
	lines: Sequence[Line] = hunk.lines
	rows: List[Row] = []
	aLn: int = hunk.a_start
	bLn: int = hunk.b_start
	index: int = 0

	while index < len(lines):
		op: LineOp = lines[index].op

		if op == LineOp.EQUAL:
			for line in _takeRun(lines, index, LineOp.EQUAL):
				rows.append(Row(
					left=RowCell(text=line.text, op=LineOp.EQUAL, ln=aLn),
					right=RowCell(text=line.text, op=LineOp.EQUAL, ln=bLn),
				))
				aLn += 1
				bLn += 1
				index += 1
			continue

		# Change block: deletes then inserts, or the swapped order
		firstRun: List[Line] = _takeRun(lines, index, op)
		index += len(firstRun)
		partnerOp: LineOp = LineOp.INSERT if op == LineOp.DELETE else LineOp.DELETE
		secondRun: List[Line] = _takeRun(lines, index, partnerOp)
		index += len(secondRun)
		delRun, insRun = (firstRun, secondRun) if op == LineOp.DELETE else (secondRun, firstRun)

		for k in range(max(len(delRun), len(insRun))):
			deleted: Optional[Line] = delRun[k] if k < len(delRun) else None
			inserted: Optional[Line] = insRun[k] if k < len(insRun) else None
			tokens: Optional[TokenDiff] = None
			if deleted is not None and inserted is not None:
				tokens = wordDiff(deleted.text, inserted.text)

			left: Optional[RowCell] = None
			right: Optional[RowCell] = None
			if deleted is not None:
				left = RowCell(text=deleted.text, op=LineOp.DELETE, ln=aLn, tokens=tokens.aTokens if tokens else None)
				aLn += 1
			if inserted is not None:
				right = RowCell(text=inserted.text, op=LineOp.INSERT, ln=bLn, tokens=tokens.bTokens if tokens else None)
				bLn += 1
			rows.append(Row(left=left, right=right))

	return AlignedHunk(a_start=hunk.a_start, b_start=hunk.b_start, rows=tuple(rows))


def alignAllHunks(diff: Optional[DiffResult]) -> List[AlignedHunk]:
	""" Aligns every hunk of a diff result; an absent result yields no hunks. """
	if diff is None:
		return []
	aligned: List[AlignedHunk] = [alignHunk(hunk) for hunk in diff.hunks]
	logger.debug(f"Aligned {len(aligned)} hunks into {sum(len(h.rows) for h in aligned)} rows.")
	return aligned
