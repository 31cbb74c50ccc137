# core/diff_stats.py
"""
Summary counts for a comparison, shown in the toolbar readout.

Two modes are offered. CODER counts hunk lines by operation. WRITER counts words:
a delete line directly followed by an insert (or the reverse) is treated as an
edited sentence and scored with the word-level diff, every other line contributes
all of its words to its operation's count.
"""
import logging
import math
import re
from dataclasses import dataclass
from enum import Enum
from typing import List, Optional, Tuple

from .diff_models import DiffResult, Hunk, Line, LineOp, Token
from .token_differ import wordDiff

logger: logging.Logger = logging.getLogger(__name__)

# Letter/digit clusters, allowing one inner apostrophe ("don't")
WORD_REGEX: re.Pattern = re.compile(r"[A-Za-z0-9]+(?:'[A-Za-z0-9]+)?")


class StatsMode(str, Enum):
	CODER = "coder"
	WRITER = "writer"


@dataclass(frozen=True)
class DiffStats:
	added: int = 0
	removed: int = 0
	unchanged: int = 0
	total: int = 0
	similarity_pct: int = 0


def countWords(text: str) -> int:
	return len(WORD_REGEX.findall(text or ""))


def _similarity(unchanged: int, total: int) -> int:
	if total == 0:
		return 100
	# Half-up rounding; round() would round 12.5 down to 12
	return int(math.floor(unchanged * 100 / total + 0.5))


def _isWord(token: Token) -> bool:
	return bool(token.text.strip())


def _coderCounts(hunks: Tuple[Hunk, ...]) -> Tuple[int, int, int]:
	added = removed = unchanged = 0
	for hunk in hunks:
		for line in hunk.lines:
			if line.op == LineOp.INSERT:
				added += 1
			elif line.op == LineOp.DELETE:
				removed += 1
			else:
				unchanged += 1
	return added, removed, unchanged


def _writerCounts(hunks: Tuple[Hunk, ...]) -> Tuple[int, int, int]:
	added = removed = unchanged = 0
	for hunk in hunks:
		lines: List[Line] = list(hunk.lines)
		i: int = 0
		while i < len(lines):
			current: Line = lines[i]
			following: Optional[Line] = lines[i + 1] if i + 1 < len(lines) else None
			if following is not None and {current.op, following.op} == {LineOp.DELETE, LineOp.INSERT}:
				deleted, inserted = (current, following) if current.op == LineOp.DELETE else (following, current)
				tokens = wordDiff(deleted.text, inserted.text)
				removed += sum(1 for t in tokens.aTokens if t.deleted and _isWord(t))
				added += sum(1 for t in tokens.bTokens if t.inserted and _isWord(t))
				# Kept words appear on both sides; count them once
				unchanged += min(
					sum(1 for t in tokens.aTokens if not t.deleted and _isWord(t)),
					sum(1 for t in tokens.bTokens if not t.inserted and _isWord(t)),
				)
				i += 2
				continue
			words: int = countWords(current.text)
			if current.op == LineOp.EQUAL:
				unchanged += words
			elif current.op == LineOp.INSERT:
				added += words
			else:
				removed += words
			i += 1
	return added, removed, unchanged


def computeStats(diff: Optional[DiffResult], mode: StatsMode = StatsMode.CODER) -> DiffStats:
	"""
	Counts added, removed and unchanged units over every hunk of a diff.

	Only lines inside hunks are counted, so context outside the hunks does not raise
	the similarity. An empty diff is 100% similar; no diff at all gives all zeros.

	Args:
		diff (Optional[DiffResult]): The comparison to summarise.
		mode (StatsMode): CODER counts lines, WRITER counts words.

	Returns:
		DiffStats: The counts and the rounded similarity percentage.
	"""
	if diff is None:
		return DiffStats()
	mode = StatsMode(mode)
	counter = _coderCounts if mode == StatsMode.CODER else _writerCounts
	added, removed, unchanged = counter(diff.hunks)
	total: int = added + removed + unchanged
	return DiffStats(added=added, removed=removed, unchanged=unchanged, total=total,
					 similarity_pct=_similarity(unchanged, total))
