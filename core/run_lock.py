# core/run_lock.py
"""
Tracks whether the comparison inputs changed since the last successful diff run.
The GUI disables its "Run Diff" action while locked, i.e. while re-running would
produce the same result.
"""
import logging
from dataclasses import dataclass, field
from typing import Any, Dict, Optional

logger: logging.Logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RunSnapshot:
	left: str
	right: str
	options: Dict[str, Any] = field(default_factory=dict)


class DiffRunLock:

	def __init__(self: 'DiffRunLock') -> None:
		self._lastRun: Optional[RunSnapshot] = None
		self._isLocked: bool = False

	@property
	def isLocked(self: 'DiffRunLock') -> bool:
		return self._isLocked

	def noteRun(self: 'DiffRunLock', left: str, right: str, options: Optional[Dict[str, Any]] = None) -> None:
		""" Call right after a successful diff run. """
		self._lastRun = RunSnapshot(left=left, right=right, options=dict(options or {}))
		self._isLocked = True

	def updateDirty(self: 'DiffRunLock', left: str, right: str, options: Optional[Dict[str, Any]] = None) -> bool:
		"""
		Re-evaluates the lock after an editor or option change.

		Returns:
			bool: The new locked state.
		"""
		last: Optional[RunSnapshot] = self._lastRun
		if last is None:
			self._isLocked = False
		else:
			self._isLocked = left == last.left and right == last.right and dict(options or {}) == last.options
		return self._isLocked

	def clearLock(self: 'DiffRunLock') -> None:
		self._lastRun = None
		self._isLocked = False
		logger.debug("Diff run lock cleared.")
