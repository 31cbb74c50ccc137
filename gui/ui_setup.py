# gui/ui_setup.py
"""
Module responsible for creating and laying out the UI widgets for the MainWindow:
the toolbar row, the recent-comparisons sidebar, the two document editors, the
rendered diff / hunk navigation tab and the application log tab.
"""

import logging

from PySide6.QtCore import Qt
from PySide6.QtGui import QFont
from PySide6.QtWidgets import (
	QCheckBox, QComboBox, QHBoxLayout, QLabel, QListWidget, QMainWindow, QPlainTextEdit,
	QProgressBar, QPushButton, QSplitter, QStatusBar, QTabWidget, QTextBrowser,
	QTextEdit, QVBoxLayout, QWidget
)

from core.diff_stats import StatsMode

from .diff_view import HunkListWidget
from .editor_view import EditorView

logger = logging.getLogger(__name__)

CODE_FONT_FAMILY: str = "Courier New"


def makeCodeFont(pointSize: int) -> QFont:
	""" Monospace font used by the editors and the diff view. """
	font = QFont(CODE_FONT_FAMILY)
	font.setStyleHint(QFont.StyleHint.Monospace)
	font.setPointSize(pointSize)
	return font


def _makeEditorPane(title: str, placeholder: str) -> tuple:
	layout = QVBoxLayout()
	layout.addWidget(QLabel(title))
	editor = QPlainTextEdit()
	editor.setPlaceholderText(placeholder)
	layout.addWidget(editor)
	container = QWidget()
	container.setLayout(layout)
	return container, editor


def setup_ui(window: QMainWindow) -> None:
	"""
	Sets up the user interface layout and widgets for the main window.

	Args:
		window: The QMainWindow instance to set up.
	"""
	logger.debug("Setting up UI elements.")
	window.setWindowTitle("DiffSync - Side-by-Side Compare")

	window._centralWidget = QWidget()
	window.setCentralWidget(window._centralWidget)
	window._mainLayout = QVBoxLayout(window._centralWidget)

	# --- Top: Controls ---
	controlsLayout = QHBoxLayout()
	window._openLeftButton = QPushButton("Open A...")
	window._openLeftButton.setToolTip("Load a file into the left (original) editor.")
	window._openRightButton = QPushButton("Open B...")
	window._openRightButton.setToolTip("Load a file into the right (new) editor.")
	window._runDiffButton = QPushButton("Run Diff")
	window._runDiffButton.setToolTip("Compare the two documents. Disabled while nothing has changed since the last run.")
	window._resetButton = QPushButton("Reset")
	window._resetButton.setToolTip("Restore the sample documents and clear the current diff.")
	window._linkScrollCheckBox = QCheckBox("Link scroll")
	window._linkScrollCheckBox.setToolTip("Keep both editors aligned on corresponding lines while scrolling.")
	window._prevHunkButton = QPushButton("Prev Change")
	window._nextHunkButton = QPushButton("Next Change")
	for widget in (window._openLeftButton, window._openRightButton, window._runDiffButton, window._resetButton,
				   window._linkScrollCheckBox, window._prevHunkButton, window._nextHunkButton):
		controlsLayout.addWidget(widget)
	controlsLayout.addStretch(1)
	window._statsModeCombo = QComboBox()
	window._statsModeCombo.addItem("Coder (lines)", StatsMode.CODER.value)
	window._statsModeCombo.addItem("Writer (words)", StatsMode.WRITER.value)
	window._statsModeCombo.setToolTip("Count changes by line or by word.")
	window._statsLabel = QLabel("")
	controlsLayout.addWidget(window._statsModeCombo)
	controlsLayout.addWidget(window._statsLabel)
	window._mainLayout.addLayout(controlsLayout)

	mainSplitter = QSplitter(Qt.Orientation.Horizontal)

	# --- Left: Recent comparisons ---
	sidebarLayout = QVBoxLayout()
	sidebarLayout.addWidget(QLabel("Recent Comparisons:"))
	window._historyListWidget = QListWidget()
	window._historyListWidget.setToolTip("Click an entry to reopen that comparison.")
	window._clearHistoryButton = QPushButton("Clear History")
	sidebarLayout.addWidget(window._historyListWidget, 1)
	sidebarLayout.addWidget(window._clearHistoryButton)
	sidebarContainer = QWidget()
	sidebarContainer.setLayout(sidebarLayout)
	mainSplitter.addWidget(sidebarContainer)

	# --- Right: Editors over tabs ---
	workSplitter = QSplitter(Qt.Orientation.Vertical)

	editorSplitter = QSplitter(Qt.Orientation.Horizontal)
	leftContainer, window._leftEditor = _makeEditorPane("Original (A):", "Paste or open the original document...")
	rightContainer, window._rightEditor = _makeEditorPane("New (B):", "Paste or open the new document...")
	editorSplitter.addWidget(leftContainer)
	editorSplitter.addWidget(rightContainer)
	workSplitter.addWidget(editorSplitter)
	window._leftView = EditorView(window._leftEditor, parent=window)
	window._rightView = EditorView(window._rightEditor, parent=window)

	window._bottomTabWidget = QTabWidget()

	diffWidget = QWidget()
	diffLayout = QHBoxLayout(diffWidget)
	window._hunkListWidget = HunkListWidget()
	window._hunkListWidget.setToolTip("Changes in this comparison. Hover to shade them in the editors, select one to center both editors on it.")
	window._diffBrowser = QTextBrowser()
	window._diffBrowser.setReadOnly(True)
	window._diffBrowser.setLineWrapMode(QTextEdit.LineWrapMode.NoWrap)
	window._diffBrowser.setOpenLinks(False)
	diffLayout.addWidget(window._hunkListWidget, 1)
	diffLayout.addWidget(window._diffBrowser, 4)
	window._bottomTabWidget.addTab(diffWidget, "Side-by-Side Diff")

	window._appLogArea = QTextEdit()
	window._appLogArea.setReadOnly(True)
	window._appLogArea.setLineWrapMode(QTextEdit.LineWrapMode.NoWrap)
	window._appLogArea.setFont(makeCodeFont(9))
	window._bottomTabWidget.addTab(window._appLogArea, "Application Log")

	workSplitter.addWidget(window._bottomTabWidget)
	workSplitter.setSizes([450, 350])
	mainSplitter.addWidget(workSplitter)
	mainSplitter.setSizes([220, 880])
	window._mainLayout.addWidget(mainSplitter, stretch=1)

	# --- Status Bar ---
	window._statusBar = QStatusBar()
	window.setStatusBar(window._statusBar)
	window._progressBar = QProgressBar()
	window._progressBar.setVisible(False)
	window._progressBar.setRange(0, 100)
	window._statusBar.addPermanentWidget(window._progressBar)

	logger.debug("UI setup complete.")
