# core/recent_diffs.py
"""
Recent-comparisons history.

Externally-owned application state with an explicit lifecycle: create it at start-up,
`load()` from disk, mutate through `add()` / `clear()`, and `save()` on demand. Entries
are deduplicated by the diff fingerprint and capped at a fixed count, newest first.
"""
import json
import logging
import os
import time
import uuid
from dataclasses import dataclass
from typing import Any, Dict, List, Optional

from .diff_hash import makeDiffHash
from .diff_models import DiffResult
from .exceptions import FileProcessingError, HunkContractError

logger: logging.Logger = logging.getLogger(__name__)

DEFAULT_MAX_ENTRIES: int = 5
PREVIEW_MAX_CHARS: int = 80
HISTORY_FORMAT_VERSION: int = 2


@dataclass(frozen=True)
class RecentDiffMeta:
	id: str
	hash: str
	createdAt: float
	aLabel: str
	bLabel: str
	hunksCount: int
	aPreview: Optional[str] = None
	bPreview: Optional[str] = None


@dataclass(frozen=True)
class RecentDiffEntry:
	meta: RecentDiffMeta
	result: DiffResult
	aText: Optional[str] = None
	bText: Optional[str] = None

	def toDict(self: 'RecentDiffEntry') -> Dict[str, Any]:
		return {
			"meta": dict(self.meta.__dict__),
			"result": self.result.toDict(),
			"aText": self.aText,
			"bText": self.bText,
		}

	@classmethod
	def fromDict(cls, data: Dict[str, Any]) -> 'RecentDiffEntry':
		return cls(
			meta=RecentDiffMeta(**data["meta"]),
			result=DiffResult.fromDict(data["result"]),
			aText=data.get("aText"),
			bText=data.get("bText"),
		)


def _findPreview(text: Optional[str], result: DiffResult) -> Optional[str]:
	""" First line of the text, or else the first non-blank line appearing in the diff. """
	if text and text.strip():
		return text.splitlines()[0][:PREVIEW_MAX_CHARS]
	for hunk in result.hunks:
		for line in hunk.lines:
			if line.text.strip():
				return line.text[:PREVIEW_MAX_CHARS]
	return None


class RecentDiffsStore:
	"""
	Bounded, de-duplicated list of recent comparisons, persisted as JSON.
	"""

	def __init__(self: 'RecentDiffsStore', historyFilePath: Optional[str] = None, maxEntries: int = DEFAULT_MAX_ENTRIES) -> None:
		"""
		Args:
			historyFilePath (Optional[str]): JSON file used by load()/save(); None keeps history in memory only.
			maxEntries (int): Maximum number of entries kept. Defaults to 5.
		"""
		self._historyFilePath: Optional[str] = historyFilePath
		self._maxEntries: int = max(1, maxEntries)
		self._items: List[RecentDiffEntry] = []

	@property
	def items(self: 'RecentDiffsStore') -> List[RecentDiffEntry]:
		return list(self._items)

	def add(
		self: 'RecentDiffsStore',
		result: DiffResult,
		aText: Optional[str] = None,
		bText: Optional[str] = None,
		aLabel: str = "Original",
		bLabel: str = "New",
	) -> Optional[RecentDiffEntry]:
		"""
		Records a comparison at the front of the history.

		Returns:
			Optional[RecentDiffEntry]: The new entry, or None if an identical diff is already recorded.
		"""
		diffHash: str = makeDiffHash(result)
		if any(item.meta.hash == diffHash for item in self._items):
			logger.debug(f"Diff {diffHash[:12]} already in history; not adding.")
			return None

		meta = RecentDiffMeta(
			id=uuid.uuid4().hex,
			hash=diffHash,
			createdAt=time.time(),
			aLabel=aLabel,
			bLabel=bLabel,
			hunksCount=len(result.hunks),
			aPreview=_findPreview(aText, result),
			bPreview=_findPreview(bText, result),
		)
		entry = RecentDiffEntry(meta=meta, result=result, aText=aText, bText=bText)
		self._items = [entry] + self._items[:self._maxEntries - 1]
		logger.info(f"Added comparison to history ({meta.hunksCount} hunks, {len(self._items)} entries).")
		return entry

	def find(self: 'RecentDiffsStore', entryId: str) -> Optional[RecentDiffEntry]:
		return next((item for item in self._items if item.meta.id == entryId), None)

	def clear(self: 'RecentDiffsStore') -> None:
		self._items = []
		logger.info("Recent comparisons cleared.")

	def load(self: 'RecentDiffsStore') -> int:
		"""
		Loads history from the JSON file. A missing file gives an empty history;
		an unreadable or malformed file is logged and ignored.

		Returns:
			int: Number of entries loaded.

		Raises:
			FileProcessingError: If the file exists but cannot be opened.
		"""
		if not self._historyFilePath:
			return 0
		if not os.path.exists(self._historyFilePath):
			logger.debug(f"No history file at '{self._historyFilePath}'. Starting empty.")
			self._items = []
			return 0
		try:
			with open(self._historyFilePath, 'r', encoding='utf-8') as f:
				raw: Any = json.load(f)
		except json.JSONDecodeError as e:
			logger.warning(f"History file '{self._historyFilePath}' is not valid JSON ({e}). Starting empty.")
			self._items = []
			return 0
		except OSError as e:
			logger.error(f"Failed to read history file '{self._historyFilePath}': {e}", exc_info=True)
			raise FileProcessingError(f"Error reading history file '{self._historyFilePath}': {e}") from e

		entries: List[Any] = raw.get("items", []) if isinstance(raw, dict) else []
		loaded: List[RecentDiffEntry] = []
		for item in entries:
			try:
				loaded.append(RecentDiffEntry.fromDict(item))
			except (KeyError, TypeError, ValueError, HunkContractError) as e:
				logger.warning(f"Skipping malformed history entry: {e}")
		self._items = loaded[:self._maxEntries]
		logger.info(f"Loaded {len(self._items)} recent comparisons from '{self._historyFilePath}'.")
		return len(self._items)

	def save(self: 'RecentDiffsStore') -> None:
		"""
		Writes the history to the JSON file.

		Raises:
			FileProcessingError: If the file or its directory cannot be written.
		"""
		if not self._historyFilePath:
			logger.debug("No history file configured; history not persisted.")
			return
		payload: Dict[str, Any] = {
			"version": HISTORY_FORMAT_VERSION,
			"items": [item.toDict() for item in self._items],
		}
		try:
			historyDir: str = os.path.dirname(self._historyFilePath)
			if historyDir:
				os.makedirs(historyDir, exist_ok=True)
			with open(self._historyFilePath, 'w', encoding='utf-8') as f:
				json.dump(payload, f, ensure_ascii=False, indent=1)
			logger.debug(f"Saved {len(self._items)} recent comparisons to '{self._historyFilePath}'.")
		except OSError as e:
			logger.error(f"Failed to write history file '{self._historyFilePath}': {e}", exc_info=True)
			raise FileProcessingError(f"Error writing history file '{self._historyFilePath}': {e}") from e
