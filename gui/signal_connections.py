# gui/signal_connections.py
"""
Module responsible for connecting signals to slots in the MainWindow.
"""

import logging
from typing import Dict, Tuple, TYPE_CHECKING

from PySide6.QtGui import QKeySequence, QShortcut

from . import callback_handlers
from . import event_handlers

if TYPE_CHECKING:
	from .main_window import MainWindow

logger = logging.getLogger(__name__)

# Both '=' and '+' grow the font, so the shortcut works with or without Shift
FONT_SCALE_SHORTCUTS: Dict[str, Tuple[str, ...]] = {
	'grow': ("Ctrl+=", "Ctrl++"),
	'shrink': ("Ctrl+-",),
	'reset': ("Ctrl+0",),
}


def connect_signals(window: 'MainWindow') -> None:
	"""
	Connects all signals to their corresponding slots in the application.

	Args:
		window: The MainWindow instance whose signals/slots need connecting.
	"""
	logger.debug("Connecting signals to slots.")

	# --- Internal Window Signals ---
	window.signalLogMessage.connect(window._appendLogMessage)

	# --- Toolbar ---
	window._openLeftButton.clicked.connect(lambda: event_handlers.handle_open_file(window, 'left'))
	window._openRightButton.clicked.connect(lambda: event_handlers.handle_open_file(window, 'right'))
	window._runDiffButton.clicked.connect(lambda: event_handlers.handle_run_diff(window))
	window._resetButton.clicked.connect(lambda: event_handlers.handle_reset(window))
	window._linkScrollCheckBox.toggled.connect(lambda checked: event_handlers.handle_link_scroll_toggled(window, checked))
	window._prevHunkButton.clicked.connect(lambda: event_handlers.handle_prev_hunk(window))
	window._nextHunkButton.clicked.connect(lambda: event_handlers.handle_next_hunk(window))

	# --- Editors ---
	window._leftEditor.textChanged.connect(lambda: event_handlers.handle_editor_text_changed(window))
	window._rightEditor.textChanged.connect(lambda: event_handlers.handle_editor_text_changed(window))
	window._leftView.scrolled.connect(window._syncCoordinator.handleLeftScroll)
	window._rightView.scrolled.connect(window._syncCoordinator.handleRightScroll)

	# --- Lists ---
	window._hunkListWidget.currentRowChanged.connect(lambda row: event_handlers.handle_hunk_selected(window, row))
	window._hunkListWidget.hunkHovered.connect(lambda row: event_handlers.handle_hunk_hovered(window, row))
	window._diffBrowser.anchorClicked.connect(lambda url: event_handlers.handle_diff_link_clicked(window, url.toString()))
	window._diffBrowser.highlighted.connect(lambda url: event_handlers.handle_diff_link_hovered(window, url.toString()))
	window._statsModeCombo.currentIndexChanged.connect(lambda index: event_handlers.handle_stats_mode_changed(window, index))
	window._historyListWidget.itemClicked.connect(lambda item: event_handlers.handle_history_selected(window, item))
	window._clearHistoryButton.clicked.connect(lambda: event_handlers.handle_clear_history(window))

	# --- Font Scale Shortcuts ---
	window._fontShortcuts = []
	for action, keys in FONT_SCALE_SHORTCUTS.items():
		handler = getattr(event_handlers, f"handle_font_{action}")
		for key in keys:
			shortcut = QShortcut(QKeySequence(key), window)
			shortcut.activated.connect(lambda handler=handler: handler(window))
			window._fontShortcuts.append(shortcut)

	# --- Worker Signals ---
	window._diffWorker.statusUpdate.connect(window._updateStatusBar)
	window._diffWorker.progressUpdate.connect(window._updateProgress)
	window._diffWorker.errorOccurred.connect(lambda msg: callback_handlers.handle_worker_error(window, msg, "DiffWorker"))
	window._diffWorker.diffEngineError.connect(lambda msg: callback_handlers.handle_diff_engine_error(window, msg))
	window._diffWorker.diffFinished.connect(lambda result: callback_handlers.on_diff_finished(window, result))

	logger.debug("Signal connections established.")
