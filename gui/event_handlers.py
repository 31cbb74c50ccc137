# gui/event_handlers.py
"""
Module containing the primary event handling slots for user interactions
in the MainWindow (button clicks, list selections, editor edits, shortcuts).
These functions are connected to widget signals in signal_connections.py.
"""

import logging
import os
from typing import Any, Dict, Optional, TYPE_CHECKING

from PySide6.QtWidgets import QFileDialog, QListWidgetItem, QMessageBox

from core.diff_engine import loadFileText
from core.diff_models import DiffOptions, FileKind, Hunk
from core.diff_stats import StatsMode
from core.exceptions import ConfigurationError, DiffEngineError, FileProcessingError
from core.recent_diffs import RecentDiffEntry
from core.scroll_sync import nextHunkIndex
from . import diff_view
from .callback_handlers import refresh_line_maps

if TYPE_CHECKING:
	from .main_window import MainWindow

logger: logging.Logger = logging.getLogger(__name__)

# Context lines used by the interactive "Run Diff" action
RUN_DIFF_CONTEXT_LINES: int = 2


def _currentOptions(window: 'MainWindow') -> Optional[DiffOptions]:
	try:
		return window._configManager.getDiffOptions(contextLines=RUN_DIFF_CONTEXT_LINES)
	except ConfigurationError as e:
		logger.error(f"Invalid diff configuration: {e}")
		window._showError("Configuration Error", f"The [Diff] settings are invalid:\n{e}")
		return None


def _optionsSnapshot(window: 'MainWindow') -> Optional[Dict[str, Any]]:
	""" Options as compared by the run lock; None while the [Diff] settings are invalid. """
	try:
		return window._configManager.getDiffOptions(contextLines=RUN_DIFF_CONTEXT_LINES).toDict()
	except ConfigurationError as e:
		logger.debug(f"Run lock compares without options: {e}")
		return None


# --- Diff Run ---

def handle_run_diff(window: 'MainWindow') -> None:
	"""
	Handles the 'Run Diff' button. Snapshots both editors and hands them to the
	diff worker; the result arrives in callback_handlers.on_diff_finished.

	Args:
		window (MainWindow): The main application window instance.
	"""
	if window._isBusy:
		logger.warning("Run Diff ignored: a diff is already running.")
		return
	options: Optional[DiffOptions] = _currentOptions(window)
	if options is None:
		return

	aText: str = window._leftEditor.toPlainText()
	bText: str = window._rightEditor.toPlainText()
	window._pendingRun = (aText, bText, options.toDict())
	window._isBusy = True
	window._updateWidgetStates()
	logger.info(f"Starting diff ({options.algorithm.value}, context {options.context_lines}).")
	window._diffWorker.startDiffText(aText, bText, options)


def handle_reset(window: 'MainWindow') -> None:
	""" Restores the sample documents and clears the current diff, run lock and navigation state. """
	if window._isBusy:
		return
	window._leftEditor.setPlainText(window.SAMPLE_ORIGINAL)
	window._rightEditor.setPlainText(window.SAMPLE_NEW)
	window._setDiff(None)
	window._runLock.clearLock()
	window._updateWidgetStates()
	window._updateStatusBar("Reset to sample documents.", 3000)


def handle_open_file(window: 'MainWindow', side: str) -> None:
	"""
	Handles the 'Open A...' / 'Open B...' buttons. Loads a text file into the
	chosen editor; binary and unreadable files are rejected with a message.

	Args:
		window (MainWindow): The main application window instance.
		side (str): 'left' or 'right'.
	"""
	startDir: str = window._lastOpenDir or os.path.expanduser("~")
	filePath, _ = QFileDialog.getOpenFileName(window, f"Open {'Original (A)' if side == 'left' else 'New (B)'}", startDir)
	if not filePath:
		return
	window._lastOpenDir = os.path.dirname(filePath)

	try:
		meta, text = loadFileText(filePath)
	except DiffEngineError as e:
		window._showError("Open Failed", str(e))
		return
	if meta.kind == FileKind.BINARY or text is None:
		window._showWarning("Binary File", f"'{os.path.basename(filePath)}' looks like a binary file and cannot be compared as text.")
		return

	editor = window._leftEditor if side == 'left' else window._rightEditor
	editor.setPlainText(text)
	if side == 'left':
		window._leftLabel = os.path.basename(filePath)
	else:
		window._rightLabel = os.path.basename(filePath)
	logger.info(f"Loaded '{filePath}' into the {side} editor ({meta.encoding}, {meta.size_bytes} bytes).")
	window._updateStatusBar(f"Opened {os.path.basename(filePath)}", 3000)


def handle_editor_text_changed(window: 'MainWindow') -> None:
	""" Re-evaluates the run lock and refreshes the line maps for the new line totals. """
	window._runLock.updateDirty(
		window._leftEditor.toPlainText(),
		window._rightEditor.toPlainText(),
		_optionsSnapshot(window)
	)
	refresh_line_maps(window)
	window._updateWidgetStates()


# --- Scroll Sync / Navigation ---

def handle_link_scroll_toggled(window: 'MainWindow', checked: bool) -> None:
	window._syncCoordinator.setEnabled(checked)
	logger.debug(f"Link scroll {'enabled' if checked else 'disabled'}.")


def _jump_to_hunk(window: 'MainWindow', index: int) -> None:
	if window._syncCoordinator.centerOnHunk(window._diff, index):
		window._currentHunk = index
		window._hunkListWidget.blockSignals(True)
		window._hunkListWidget.setCurrentRow(index)
		window._hunkListWidget.blockSignals(False)
		window._updateStatusBar(f"Change {index + 1} of {len(window._diff.hunks)}", 2000)


def handle_next_hunk(window: 'MainWindow') -> None:
	count: int = len(window._diff.hunks) if window._diff else 0
	index: int = nextHunkIndex(window._currentHunk, count, 1)
	if index >= 0:
		_jump_to_hunk(window, index)


def handle_prev_hunk(window: 'MainWindow') -> None:
	count: int = len(window._diff.hunks) if window._diff else 0
	index: int = nextHunkIndex(window._currentHunk, count, -1)
	if index >= 0:
		_jump_to_hunk(window, index)


def handle_hunk_selected(window: 'MainWindow', row: int) -> None:
	if row >= 0:
		_jump_to_hunk(window, row)


def handle_hunk_hovered(window: 'MainWindow', index: int) -> None:
	""" Shades the hovered hunk's lines in both editors; an index of -1 clears the shading. """
	hunk: Optional[Hunk] = None
	if window._diff is not None and 0 <= index < len(window._diff.hunks):
		hunk = window._diff.hunks[index]
	window._leftView.setGhostRange(hunk.aRange() if hunk else None)
	window._rightView.setGhostRange(hunk.bRange() if hunk else None)


def handle_diff_link_hovered(window: 'MainWindow', url: str) -> None:
	link = diff_view.parseHunkLink(url)
	handle_hunk_hovered(window, link[1] if link else -1)


def handle_diff_link_clicked(window: 'MainWindow', url: str) -> None:
	"""
	Handles clicks on a hunk header in the side-by-side tab: the arrow folds or
	unfolds the hunk, the header text centers both editors on it.
	"""
	link = diff_view.parseHunkLink(url)
	if link is None or window._diff is None:
		return
	action, index = link
	if not 0 <= index < len(window._diff.hunks):
		return
	if action == diff_view.LINK_TOGGLE:
		window._collapsedHunks ^= {index}
		diff_view.render_diff_html(window)
	else:
		_jump_to_hunk(window, index)


# --- Statistics ---

def handle_stats_mode_changed(window: 'MainWindow', index: int) -> None:
	""" Switches the toolbar statistics between line and word counts and remembers the choice. """
	value = window._statsModeCombo.itemData(index)
	if value is None:
		return
	window._statsMode = StatsMode(value)
	diff_view.display_stats(window)
	try:
		window._configManager.setConfigValue('GUI', 'StatsMode', window._statsMode.value)
		window._configManager.saveConfig()
	except ConfigurationError as e:
		logger.error(f"Failed to save statistics mode: {e}")


# --- Recent Comparisons ---

def handle_history_selected(window: 'MainWindow', item: Optional[QListWidgetItem]) -> None:
	"""
	Reopens a recent comparison: restores both texts (when stored) and shows the
	recorded diff without re-running the engine.
	"""
	if item is None or window._isBusy:
		return
	entry: Optional[RecentDiffEntry] = window._recentDiffs.find(item.data(window.HISTORY_ID_ROLE))
	if entry is None:
		logger.warning("Selected history entry no longer exists.")
		return

	if entry.aText is not None:
		window._leftEditor.setPlainText(entry.aText)
	if entry.bText is not None:
		window._rightEditor.setPlainText(entry.bText)
	window._leftLabel = entry.meta.aLabel
	window._rightLabel = entry.meta.bLabel
	window._setDiff(entry.result)
	window._runLock.noteRun(window._leftEditor.toPlainText(), window._rightEditor.toPlainText(), _optionsSnapshot(window))
	window._updateWidgetStates()
	window._updateStatusBar(f"Reopened comparison ({entry.meta.hunksCount} changes).", 3000)


def handle_clear_history(window: 'MainWindow') -> None:
	if not window._recentDiffs.items:
		return
	reply = QMessageBox.question(window, "Clear History", "Remove all recent comparisons?",
								 QMessageBox.StandardButton.Yes | QMessageBox.StandardButton.No)
	if reply != QMessageBox.StandardButton.Yes:
		return
	window._recentDiffs.clear()
	try:
		window._recentDiffs.save()
	except FileProcessingError as e:
		window._showError("History Error", str(e))
	window._refreshHistoryList()


# --- Font Scale ---

def handle_font_grow(window: 'MainWindow') -> None:
	window._fontScale.grow()
	window._applyFontScale()


def handle_font_shrink(window: 'MainWindow') -> None:
	window._fontScale.shrink()
	window._applyFontScale()


def handle_font_reset(window: 'MainWindow') -> None:
	window._fontScale.reset()
	window._applyFontScale()
