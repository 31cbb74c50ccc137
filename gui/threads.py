"""
Threading module for background task execution in the GUI application.
Runs the line-diff engine off the UI thread so large documents do not freeze the window.

Alignment, line mapping and scroll coordination stay on the UI thread; only the
diff computation itself is handed to a worker.
"""

# Standard library imports
import logging
from typing import Any, Optional

# Qt imports
from PySide6.QtCore import QThread, Signal, Slot

# Local imports
from core.diff_engine import diffText
from core.diff_models import DiffOptions
from core.exceptions import DiffEngineError

# Initialize logging
logger: logging.Logger = logging.getLogger(__name__)


class BaseWorker(QThread):
    """
    Base class for worker threads providing common functionality and signals.

    Signals:
        progressUpdate (int, str): Emitted to update progress percentage and message
        statusUpdate (str): Emitted to update status message
        errorOccurred (str): Emitted when an unexpected error occurs
    """

    progressUpdate = Signal(int, str)
    statusUpdate = Signal(str)
    errorOccurred = Signal(str)

    def __init__(self: 'BaseWorker', parent: Optional[Any] = None) -> None:
        super().__init__(parent)
        self._task: Optional[str] = None
        self._args: list = []
        self._kwargs: dict = {}
        self._isRunning = False

    @property
    def isBusy(self: 'BaseWorker') -> bool:
        return self._isRunning

    def setTask(self: 'BaseWorker', taskName: str, args: list, kwargs: dict) -> None:
        self._task = taskName
        self._args = args
        self._kwargs = kwargs

    def start(self, priority=QThread.Priority.InheritPriority) -> None:
        if self._isRunning:
            logger.warning(f"{self.__class__.__name__} already running. Ignoring start request.")
            return
        self._isRunning = True
        super().start(priority)

    def run(self: 'BaseWorker') -> None:
        if not self._task:
            logger.warning(f"{self.__class__.__name__} started without a task.")
            self.errorOccurred.emit(f"{self.__class__.__name__} started without task.")
            self._isRunning = False
            return
        try:
            self._executeTask()
        except Exception as e:
            logger.critical(f"Unhandled exception in {self.__class__.__name__} task '{self._task}': {e}", exc_info=True)
            self.errorOccurred.emit(f"Critical internal error in {self.__class__.__name__}: {e}")
        finally:
            self._task = None
            self._isRunning = False
            try:
                self.progressUpdate.emit(0, "Task finished.")
            except RuntimeError as e:
                logger.error(f"Error emitting final signals in {self.__class__.__name__}: {e}")

    def _executeTask(self: 'BaseWorker') -> None:
        raise NotImplementedError("Subclasses must implement _executeTask.")


class DiffWorker(BaseWorker):
    """
    Worker thread computing a DiffResult from two texts.

    Signals:
        diffFinished (object): The DiffResult of a successful run
        diffEngineError (str): Diff-engine specific error message
    """

    diffFinished = Signal(object)
    diffEngineError = Signal(str)

    @Slot(str, str, object)
    def startDiffText(self: 'DiffWorker', aText: str, bText: str, options: DiffOptions) -> None:
        if self._isRunning:
            return
        self.setTask('diffText', [aText, bText], {'options': options})
        self.start()

    def _executeTask(self: 'DiffWorker') -> None:
        self.statusUpdate.emit("Computing diff...")
        self.progressUpdate.emit(-1, "Diffing...")
        try:
            if self._task == 'diffText':
                result = diffText(*self._args, **self._kwargs)
            else:
                raise ValueError(f"Unknown DiffWorker task: {self._task}")
            logger.info(f"Diff finished: {len(result.hunks)} hunks.")
            self.diffFinished.emit(result)
        except DiffEngineError as e:
            logger.error(f"Diff engine error: {e}")
            self.diffEngineError.emit(str(e))
