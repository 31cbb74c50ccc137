import unittest
from unittest.mock import MagicMock

from core.diff_models import DiffResult, Hunk, Line, LineOp
from core.scroll_sync import ScrollAlign, ScrollInfo, ScrollSyncCoordinator, SyncState, nextHunkIndex


class TestScrollSyncCoordinator(unittest.TestCase):
	"""
	Linked scrolling between two mocked views.
	"""

	def setUp(self: 'TestScrollSyncCoordinator') -> None:
		self.leftView = MagicMock()
		self.rightView = MagicMock()
		self.coordinator = ScrollSyncCoordinator(self.leftView, self.rightView, enabled=True)
		self.coordinator.setMaps(lambda i: i + 2, lambda i: max(0, i - 2))

	def test_left_scroll_drives_right_view_once(self: 'TestScrollSyncCoordinator') -> None:
		self.coordinator.handleLeftScroll(ScrollInfo(topLine=5))
		self.rightView.scrollToLine.assert_called_once_with(7, ScrollAlign.TOP)
		self.leftView.scrollToLine.assert_not_called()
		self.assertIs(self.coordinator.state, SyncState.IDLE)

	def test_right_scroll_uses_inverse_map(self: 'TestScrollSyncCoordinator') -> None:
		self.coordinator.handleRightScroll(ScrollInfo(topLine=9))
		self.leftView.scrollToLine.assert_called_once_with(7, ScrollAlign.TOP)
		self.rightView.scrollToLine.assert_not_called()

	def test_disabled_is_a_no_op(self: 'TestScrollSyncCoordinator') -> None:
		self.coordinator.setEnabled(False)
		self.coordinator.handleLeftScroll(ScrollInfo(topLine=5))
		self.coordinator.handleRightScroll(ScrollInfo(topLine=5))
		self.leftView.scrollToLine.assert_not_called()
		self.rightView.scrollToLine.assert_not_called()
		self.assertFalse(self.coordinator.isEnabled)

	def test_echo_scroll_is_ignored(self: 'TestScrollSyncCoordinator') -> None:
		# The programmatic scroll of the right view reports back synchronously
		self.rightView.scrollToLine.side_effect = lambda line, align: self.coordinator.handleRightScroll(ScrollInfo(topLine=line))
		self.coordinator.handleLeftScroll(ScrollInfo(topLine=5))
		self.rightView.scrollToLine.assert_called_once()
		self.leftView.scrollToLine.assert_not_called()
		self.assertIs(self.coordinator.state, SyncState.IDLE)

	def test_state_resets_after_view_error(self: 'TestScrollSyncCoordinator') -> None:
		self.rightView.scrollToLine.side_effect = RuntimeError("view gone")
		with self.assertRaises(RuntimeError):
			self.coordinator.handleLeftScroll(ScrollInfo(topLine=1))
		self.assertIs(self.coordinator.state, SyncState.IDLE)

	def test_missing_maps_fall_back_to_identity(self: 'TestScrollSyncCoordinator') -> None:
		self.coordinator.setMaps(None, None)
		self.coordinator.handleLeftScroll(ScrollInfo(topLine=4))
		self.rightView.scrollToLine.assert_called_once_with(4, ScrollAlign.TOP)

	def test_center_on_hunk(self: 'TestScrollSyncCoordinator') -> None:
		diff = DiffResult(hunks=(
			Hunk(3, 1, 5, 1, (Line(LineOp.DELETE, "b"), Line(LineOp.INSERT, "x"))),
		))
		self.assertTrue(self.coordinator.centerOnHunk(diff, 0))
		self.leftView.scrollToLine.assert_called_once_with(2, ScrollAlign.CENTER)
		self.rightView.scrollToLine.assert_called_once_with(4, ScrollAlign.CENTER)

	def test_center_on_hunk_does_not_trigger_following(self: 'TestScrollSyncCoordinator') -> None:
		diff = DiffResult(hunks=(Hunk(1, 0, 1, 1, (Line(LineOp.INSERT, "x"),)),))
		self.leftView.scrollToLine.side_effect = lambda line, align: self.coordinator.handleLeftScroll(ScrollInfo(topLine=line))
		self.coordinator.centerOnHunk(diff, 0)
		self.assertEqual(self.rightView.scrollToLine.call_count, 1)
		self.assertEqual(self.rightView.scrollToLine.call_args[0][1], ScrollAlign.CENTER)

	def test_center_on_missing_hunk(self: 'TestScrollSyncCoordinator') -> None:
		self.assertFalse(self.coordinator.centerOnHunk(None, 0))
		self.assertFalse(self.coordinator.centerOnHunk(DiffResult(), 0))
		self.leftView.scrollToLine.assert_not_called()


class TestNextHunkIndex(unittest.TestCase):

	def test_wraps_forward_and_backward(self: 'TestNextHunkIndex') -> None:
		self.assertEqual(nextHunkIndex(2, 3, 1), 0)
		self.assertEqual(nextHunkIndex(0, 3, -1), 2)
		self.assertEqual(nextHunkIndex(1, 3, 1), 2)

	def test_nothing_focused(self: 'TestNextHunkIndex') -> None:
		self.assertEqual(nextHunkIndex(-1, 3, 1), 0)
		self.assertEqual(nextHunkIndex(-1, 3, -1), 2)

	def test_no_hunks(self: 'TestNextHunkIndex') -> None:
		self.assertEqual(nextHunkIndex(0, 0, 1), -1)


if __name__ == '__main__':
	unittest.main()
