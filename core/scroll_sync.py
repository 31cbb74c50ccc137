# core/scroll_sync.py
"""
Keeps two scrollable views of a comparison in lock-step.

Scrolling one view to a top line moves the partner view to the mapped line. A
two-state machine (IDLE / FORWARDING) guards against feedback: while the partner is
being scrolled, any scroll event it reports synchronously is ignored, so each event
propagates exactly one hop.
"""
import logging
from dataclasses import dataclass
from enum import Enum
from typing import Callable, Optional, Protocol

from .diff_models import DiffResult

logger: logging.Logger = logging.getLogger(__name__)

LineMapFunc = Callable[[int], int]


class ScrollAlign(str, Enum):
	""" Where the requested line should land in the viewport. """
	TOP = "top"
	CENTER = "center"
	NEAREST = "nearest"


class SyncState(Enum):
	IDLE = "idle"
	FORWARDING = "forwarding"


@dataclass(frozen=True)
class ScrollInfo:
	""" Scroll report from a view: the 0-based line currently at the top of its viewport. """
	topLine: int


class ScrollableView(Protocol):
	""" Capability every editor view must offer to the coordinator. """

	def scrollToLine(self, line: int, align: ScrollAlign) -> None:
		...


def _identity(index: int) -> int:
	return index


def nextHunkIndex(current: int, count: int, step: int) -> int:
	"""
	Returns the hunk index reached by moving `step` from `current`, wrapping around.
	A current index of -1 (nothing focused) starts from the first or last hunk.
	"""
	if count <= 0:
		return -1
	if current < 0 or current >= count:
		return 0 if step >= 0 else count - 1
	return (current + step) % count


class ScrollSyncCoordinator:
	"""
	Wires a left (document A) and right (document B) view together.

	Passive scroll-following uses TOP alignment; deliberate navigation to a hunk
	uses CENTER alignment on both views.
	"""

	def __init__(self: 'ScrollSyncCoordinator', leftView: ScrollableView, rightView: ScrollableView, enabled: bool = False) -> None:
		"""
		Args:
			leftView (ScrollableView): View showing document A.
			rightView (ScrollableView): View showing document B.
			enabled (bool): Initial state of scroll linking. Defaults to False.
		"""
		self._leftView: ScrollableView = leftView
		self._rightView: ScrollableView = rightView
		self._enabled: bool = enabled
		self._state: SyncState = SyncState.IDLE
		self._mapAtoB: LineMapFunc = _identity
		self._mapBtoA: LineMapFunc = _identity

	@property
	def isEnabled(self: 'ScrollSyncCoordinator') -> bool:
		return self._enabled

	@property
	def state(self: 'ScrollSyncCoordinator') -> SyncState:
		return self._state

	def setEnabled(self: 'ScrollSyncCoordinator', enabled: bool) -> None:
		self._enabled = bool(enabled)
		logger.debug(f"Scroll linking {'enabled' if self._enabled else 'disabled'}.")

	def setMaps(self: 'ScrollSyncCoordinator', mapAtoB: Optional[LineMapFunc], mapBtoA: Optional[LineMapFunc]) -> None:
		""" Installs the current line maps; None falls back to the identity. """
		self._mapAtoB = mapAtoB or _identity
		self._mapBtoA = mapBtoA or _identity

	def _forward(self: 'ScrollSyncCoordinator', target: ScrollableView, line: int, align: ScrollAlign) -> None:
		self._state = SyncState.FORWARDING
		try:
			target.scrollToLine(line, align)
		finally:
			self._state = SyncState.IDLE

	def handleLeftScroll(self: 'ScrollSyncCoordinator', info: ScrollInfo) -> None:
		""" Left view scrolled: drive the right view to the A→B mapped line. """
		if not self._enabled or self._state is not SyncState.IDLE:
			return
		self._forward(self._rightView, self._mapAtoB(info.topLine), ScrollAlign.TOP)

	def handleRightScroll(self: 'ScrollSyncCoordinator', info: ScrollInfo) -> None:
		""" Right view scrolled: drive the left view to the B→A mapped line. """
		if not self._enabled or self._state is not SyncState.IDLE:
			return
		self._forward(self._leftView, self._mapBtoA(info.topLine), ScrollAlign.TOP)

	def centerOnHunk(self: 'ScrollSyncCoordinator', diff: Optional[DiffResult], index: int) -> bool:
		"""
		Centers both views on the given hunk.

		The first changed line of A is `a_start - 1`; its B counterpart comes from the
		A→B map. Both scroll requests run while FORWARDING so that scroll-following
		does not re-align either view to the top afterwards.

		Args:
			diff (Optional[DiffResult]): Current diff result.
			index (int): 0-based hunk index.

		Returns:
			bool: True if the views were scrolled, False if there was no such hunk.
		"""
		if diff is None or not (0 <= index < len(diff.hunks)):
			logger.debug(f"centerOnHunk: no hunk at index {index}.")
			return False
		if self._state is not SyncState.IDLE:
			return False
		aLine: int = max(0, diff.hunks[index].a_start - 1)
		bLine: int = self._mapAtoB(aLine)
		self._state = SyncState.FORWARDING
		try:
			self._leftView.scrollToLine(aLine, ScrollAlign.CENTER)
			self._rightView.scrollToLine(bLine, ScrollAlign.CENTER)
		finally:
			self._state = SyncState.IDLE
		logger.debug(f"Centered on hunk {index}: A line {aLine}, B line {bLine}.")
		return True
