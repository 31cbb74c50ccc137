# gui/callback_handlers.py
"""
Module containing callback functions (slots) that handle signals emitted
by the background diff worker, plus the shared view-refresh helpers those
callbacks and the event handlers both use.
"""

import logging
from typing import Optional, Tuple, TYPE_CHECKING

from core.diff_models import DiffResult
from core.exceptions import FileProcessingError
from core.line_mapper import LineMap

if TYPE_CHECKING:
	from .main_window import MainWindow

logger: logging.Logger = logging.getLogger(__name__)


# --- Shared helpers ---

def refresh_line_maps(window: 'MainWindow') -> Tuple[LineMap, LineMap]:
	"""
	Recomputes (or fetches from cache) the A->B and B->A line maps for the current
	diff and the current editor line totals, and hands them to the scroll coordinator.
	"""
	aTotal: int = window._leftView.lineCount()
	bTotal: int = window._rightView.lineCount()
	mapAtoB, mapBtoA = window._lineMapCache.getMaps(window._diff, aTotal, bTotal)
	window._syncCoordinator.setMaps(mapAtoB, mapBtoA)
	logger.debug(f"Line maps refreshed: A->B {mapAtoB.sourceTotal}->{mapAtoB.targetTotal}, B->A {mapBtoA.sourceTotal}->{mapBtoA.targetTotal}.")
	return mapAtoB, mapBtoA


# --- Diff Worker Callbacks ---

def on_diff_finished(window: 'MainWindow', result: DiffResult) -> None:
	"""
	Handles a successful diff run: shows the result, rebuilds the line maps,
	locks the Run action until the inputs change and records the comparison.

	Args:
		window (MainWindow): The main application window instance.
		result (DiffResult): Hunks produced by the diff engine.
	"""
	pending = window._pendingRun
	window._pendingRun = None
	window._isBusy = False
	window._setDiff(result)

	if pending is not None:
		aText, bText, options = pending
		# Editors may have been edited while the worker ran
		window._runLock.noteRun(aText, bText, options)
		window._runLock.updateDirty(window._leftEditor.toPlainText(), window._rightEditor.toPlainText(), options)
		entry = window._recentDiffs.add(result, aText, bText, aLabel=window._leftLabel, bLabel=window._rightLabel)
		if entry is not None:
			_save_history(window)
			window._refreshHistoryList()

	hunkCount: int = len(result.hunks)
	window._updateStatusBar("No differences." if hunkCount == 0 else f"Diff complete: {hunkCount} change(s).", 5000)
	window._updateWidgetStates()


def _save_history(window: 'MainWindow') -> None:
	try:
		window._recentDiffs.save()
	except FileProcessingError as e:
		logger.error(f"Could not persist recent comparisons: {e}")
		window._appendLogMessage(f"ERROR: {e}")


# --- Error Handling Callbacks ---

def handle_worker_error(window: 'MainWindow', errorMessage: str, worker_name: str) -> None:
	""" Handles generic, unexpected errors reported by worker threads. """
	logger.critical(f"Unexpected error signal received from {worker_name}: {errorMessage}")
	window._pendingRun = None
	window._resetTaskState()
	window._showError("Unexpected Background Task Error",
					  f"A critical internal error occurred in the {worker_name}:\n{errorMessage}\n\n"
					  f"Please check the Application Log tab for more details.")


def handle_diff_engine_error(window: 'MainWindow', errorMessage: str) -> None:
	""" Handles errors reported by the diff engine (bad options, unreadable input). """
	logger.error(f"Diff engine error: {errorMessage}")
	window._pendingRun = None
	window._resetTaskState()
	window._showError("Diff Error", f"The comparison could not be computed:\n{errorMessage}")


def handle_history_load_error(window: 'MainWindow', error: Optional[Exception]) -> None:
	""" Reports a history file that exists but could not be read at start-up. """
	logger.warning(f"Recent comparisons unavailable: {error}")
	window._showWarning("History Unavailable", f"Recent comparisons could not be loaded:\n{error}")
