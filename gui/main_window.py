# gui/main_window.py
"""
Main application window module for the GUI application.

Holds the comparison state (current diff, line-map cache, scroll coordinator,
run lock, recent comparisons, font scale), owns the background diff worker and
routes logging into the Application Log tab.
"""

import logging
from typing import Any, Dict, Optional, Set, Tuple

from PySide6.QtCore import QEvent, Qt, Signal, Slot
from PySide6.QtWidgets import QListWidgetItem, QMainWindow, QMessageBox, QWidget

from core.config_manager import ConfigManager
from core.diff_models import DiffResult
from core.diff_stats import StatsMode
from core.exceptions import ConfigurationError, FileProcessingError
from core.font_scale import FontScale
from core.line_mapper import LineMapCache
from core.recent_diffs import DEFAULT_MAX_ENTRIES, RecentDiffsStore
from core.run_lock import DiffRunLock
from core.scroll_sync import ScrollSyncCoordinator
from gui.gui_utils import QtLogHandler, apply_code_font

from . import callback_handlers
from . import diff_view
from . import signal_connections
from . import ui_setup
from .threads import DiffWorker

logger: logging.Logger = logging.getLogger(__name__)

DEFAULT_HISTORY_FILE: str = 'recent_diffs.json'


class MainWindow(QMainWindow):
	"""
	Main application window class.

	Two editors are compared by a background DiffWorker; the result is rendered
	side by side and drives linked scrolling and jump-to-change navigation.
	"""

	signalLogMessage: Signal = Signal(str)

	SAMPLE_ORIGINAL: str = "hello\nworld\n123\nhello\nworld\n123"
	SAMPLE_NEW: str = "hello\nthere\nworld\nsdsadfasdsd\nhello\nworld\n123"
	HISTORY_ID_ROLE: int = Qt.ItemDataRole.UserRole

	def __init__(self: 'MainWindow', configManager: ConfigManager, parent: Optional[QWidget] = None) -> None:
		"""
		Initialise the main window.

		Args:
			configManager (ConfigManager): Instance for managing application configuration.
			parent (Optional[QWidget]): Optional parent widget. Defaults to None.
		"""
		super().__init__(parent)
		logger.info("Initialising MainWindow...")
		self._configManager: ConfigManager = configManager

		# --- State Variables ---
		self._diff: Optional[DiffResult] = None
		self._currentHunk: int = -1
		self._isBusy: bool = False
		self._pendingRun: Optional[Tuple[str, str, Dict[str, Any]]] = None # Inputs of the run in flight
		self._leftLabel: str = "Original"
		self._rightLabel: str = "New"
		self._lastOpenDir: Optional[str] = None
		self._collapsedHunks: Set[int] = set()
		self._statsMode: StatsMode = self._readStatsMode()

		# --- Externally owned state ---
		self._lineMapCache: LineMapCache = LineMapCache()
		self._runLock: DiffRunLock = DiffRunLock()
		self._fontScale: FontScale = FontScale(configManager=self._configManager)
		self._recentDiffs: RecentDiffsStore = self._createHistoryStore()

		ui_setup.setup_ui(self)

		linkScroll: bool = self._readBool('Sync', 'LinkScroll', False)
		self._syncCoordinator: ScrollSyncCoordinator = ScrollSyncCoordinator(self._leftView, self._rightView, enabled=linkScroll)
		self._linkScrollCheckBox.setChecked(linkScroll)
		self._statsModeCombo.setCurrentIndex(max(0, self._statsModeCombo.findData(self._statsMode.value)))

		self._diffWorker: DiffWorker = DiffWorker(parent=self)

		signal_connections.connect_signals(self)
		self._setupGuiLogging()

		self._leftEditor.setPlainText(self.SAMPLE_ORIGINAL)
		self._rightEditor.setPlainText(self.SAMPLE_NEW)
		self._applyFontScale()
		diff_view.display_stats(self)
		self._loadHistory()
		self._updateWidgetStates()
		logger.info("MainWindow initialisation complete.")

	# --- Settings ---
	def _readBool(self: 'MainWindow', section: str, key: str, fallback: bool) -> bool:
		try:
			value: Optional[bool] = self._configManager.getConfigValueBool(section, key, fallback=fallback)
			return fallback if value is None else value
		except ConfigurationError as e:
			logger.warning(f"Invalid [{section}] {key} setting, using {fallback}: {e}")
			return fallback

	def _readStatsMode(self: 'MainWindow') -> StatsMode:
		try:
			value: str = self._configManager.getConfigValue('GUI', 'StatsMode', fallback=StatsMode.CODER.value)
			return StatsMode(str(value).strip().lower())
		except (ConfigurationError, ValueError) as e:
			logger.warning(f"Invalid [GUI] StatsMode setting, using coder: {e}")
			return StatsMode.CODER

	def _createHistoryStore(self: 'MainWindow') -> RecentDiffsStore:
		try:
			historyFile: str = self._configManager.getConfigValue('History', 'HistoryFile', fallback=DEFAULT_HISTORY_FILE)
			maxEntries: int = self._configManager.getConfigValueInt('History', 'MaxEntries', fallback=DEFAULT_MAX_ENTRIES)
		except ConfigurationError as e:
			logger.warning(f"Invalid [History] settings, using defaults: {e}")
			historyFile, maxEntries = DEFAULT_HISTORY_FILE, DEFAULT_MAX_ENTRIES
		return RecentDiffsStore(historyFilePath=historyFile, maxEntries=maxEntries)

	def _loadHistory(self: 'MainWindow') -> None:
		try:
			self._recentDiffs.load()
		except FileProcessingError as e:
			callback_handlers.handle_history_load_error(self, e)
		self._refreshHistoryList()

	# --- GUI Logging Setup ---
	def _setupGuiLogging(self: 'MainWindow') -> None:
		""" Configures and adds the custom QtLogHandler to the root logger. """
		try:
			guiHandler: QtLogHandler = QtLogHandler(signal_emitter=self.signalLogMessage.emit, parent=self)
			guiLogLevelName: str = self._configManager.getConfigValue('Logging', 'GuiLogLevel', fallback='INFO')
			guiLogLevel: int = getattr(logging, str(guiLogLevelName).upper(), logging.INFO)
			logFormat: str = self._configManager.getConfigValue('Logging', 'GuiLogFormat', fallback='%(asctime)s - %(levelname)s - %(message)s')
			dateFormat: str = self._configManager.getConfigValue('Logging', 'GuiLogDateFormat', fallback='%H:%M:%S')

			guiHandler.setLevel(guiLogLevel)
			guiHandler.setFormatter(logging.Formatter(logFormat, datefmt=dateFormat))
			logging.getLogger().addHandler(guiHandler)
			self._guiLogHandler = guiHandler
			logger.info(f"GUI logging handler added with level {logging.getLevelName(guiLogLevel)}.")
		except ConfigurationError as e:
			logger.error(f"Configuration error setting up GUI logging: {e}", exc_info=True)

	# --- Core State and UI Update Methods ---

	def _setDiff(self: 'MainWindow', diff: Optional[DiffResult]) -> None:
		""" Installs a new current diff: re-renders, resets navigation and rebuilds the line maps. """
		self._diff = diff
		self._currentHunk = -1
		self._collapsedHunks.clear()
		diff_view.display_diff(self, diff)
		diff_view.display_stats(self)
		self._leftView.setGhostRange(None)
		self._rightView.setGhostRange(None)
		callback_handlers.refresh_line_maps(self)

	def _applyFontScale(self: 'MainWindow') -> None:
		metrics = self._fontScale.metrics
		apply_code_font((self._leftEditor, self._rightEditor), metrics)
		diff_view.display_diff(self, self._diff)
		self._updateStatusBar(f"Font size: {self._fontScale.size}", 2000)

	def _refreshHistoryList(self: 'MainWindow') -> None:
		self._historyListWidget.clear()
		for entry in self._recentDiffs.items:
			meta = entry.meta
			label: str = f"{meta.aLabel} → {meta.bLabel} ({meta.hunksCount} changes)"
			item = QListWidgetItem(label)
			item.setData(self.HISTORY_ID_ROLE, meta.id)
			item.setToolTip(f"A: {meta.aPreview or ''}\nB: {meta.bPreview or ''}")
			self._historyListWidget.addItem(item)

	def _updateWidgetStates(self: 'MainWindow') -> None:
		""" Enables or disables widgets based on busy state, run lock and current diff. """
		enabledIfNotBusy: bool = not self._isBusy
		hasHunks: bool = bool(self._diff and self._diff.hunks)

		self._runDiffButton.setEnabled(enabledIfNotBusy and not self._runLock.isLocked)
		self._resetButton.setEnabled(enabledIfNotBusy)
		self._openLeftButton.setEnabled(enabledIfNotBusy)
		self._openRightButton.setEnabled(enabledIfNotBusy)
		self._prevHunkButton.setEnabled(hasHunks)
		self._nextHunkButton.setEnabled(hasHunks)
		self._historyListWidget.setEnabled(enabledIfNotBusy)
		self._clearHistoryButton.setEnabled(enabledIfNotBusy and bool(self._recentDiffs.items))

	def _resetTaskState(self: 'MainWindow') -> None:
		""" Resets the busy flag, updates UI elements, and resets progress/status after a task. """
		logger.debug("Resetting application task state (busy=False).")
		self._isBusy = False
		self._updateWidgetStates()
		self._updateProgress(101, "")
		self._updateStatusBar("Idle.")

	@Slot(int, str)
	def _updateProgress(self: 'MainWindow', value: int, message: str) -> None:
		"""
		Updates the progress bar visibility, value, and displayed message.

		Args:
			value (int): Progress percentage (0-100), -1 for indeterminate, >100 to hide.
			message (str): Text message to display alongside progress.
		"""
		if not self._isBusy and value <= 100:
			self._progressBar.setVisible(False)
			return

		if value == -1:
			self._progressBar.setVisible(True)
			self._progressBar.setRange(0, 0)
			self._progressBar.setFormat(message or "Working...")
		elif 0 <= value <= 100:
			self._progressBar.setVisible(True)
			self._progressBar.setRange(0, 100)
			self._progressBar.setValue(value)
			self._progressBar.setFormat(f"{message} (%p%)" if message else "%p%")
		else:
			self._progressBar.setVisible(False)
			self._progressBar.setRange(0, 100)
			self._progressBar.setValue(0)
			self._progressBar.setFormat("%p%")

	@Slot(str, int)
	def _updateStatusBar(self: 'MainWindow', message: str, timeout: int = 0) -> None:
		if hasattr(self, '_statusBar') and self._statusBar:
			self._statusBar.showMessage(message, timeout)

	@Slot(str)
	def _appendLogMessage(self: 'MainWindow', message: str) -> None:
		if hasattr(self, '_appLogArea') and self._appLogArea:
			self._appLogArea.append(message)

	# --- Message Box Convenience Methods ---
	def _showError(self: 'MainWindow', title: str, message: str) -> None:
		logger.error(f"Displaying Error Dialog - Title: '{title}', Message: '{message}'")
		QMessageBox.critical(self, title, str(message))

	def _showWarning(self: 'MainWindow', title: str, message: str) -> None:
		logger.warning(f"Displaying Warning Dialog - Title: '{title}', Message: '{message}'")
		QMessageBox.warning(self, title, str(message))

	# --- Shutdown ---
	def closeEvent(self: 'MainWindow', event: QEvent) -> None:
		""" Handles the window close event: confirms if busy, stops the worker and persists history. """
		if self._isBusy:
			reply: QMessageBox.StandardButton = QMessageBox.question(
				self, 'Confirm Exit',
				"A comparison is still running.\nAre you sure you want to exit?",
				QMessageBox.StandardButton.Yes | QMessageBox.StandardButton.Cancel,
				QMessageBox.StandardButton.Cancel
			)
			if reply == QMessageBox.StandardButton.Cancel:
				event.ignore()
				return

		self._stop_worker_threads()
		try:
			self._recentDiffs.save()
		except FileProcessingError as e:
			logger.error(f"Could not save recent comparisons on exit: {e}")
		logging.getLogger().removeHandler(getattr(self, '_guiLogHandler', None))
		logger.info("Shutdown sequence complete. Closing application window.")
		super().closeEvent(event)

	def _stop_worker_threads(self: 'MainWindow') -> None:
		""" Waits briefly for a running diff worker to finish. """
		worker: DiffWorker = self._diffWorker
		if worker.isRunning():
			logger.debug("Waiting for DiffWorker to finish...")
			worker.requestInterruption()
			if not worker.wait(1000):
				logger.warning("DiffWorker did not finish within the shutdown timeout.")
