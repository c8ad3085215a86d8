"""
Qt Main Thread Dispatcher Module.

Runs callables on the Qt main thread. Used as the Scan Result Publisher's
dispatcher and as the controller's UI dispatcher, so outcomes and
background-call results always reach the controller on the GUI thread.
"""

import logging
from typing import Callable

from PySide6.QtCore import QObject, Qt, Signal, Slot


logger = logging.getLogger(__name__)


class QtMainThreadDispatcher(QObject):
    """
    Callable dispatcher backed by a queued signal.

    Must be created on the main thread. Calling the instance from any
    thread posts the task to the main event loop; tasks run in posting
    order.
    """

    taskPosted = Signal(object)

    def __init__(self, parent: QObject = None):
        super().__init__(parent)
        self.taskPosted.connect(self._runTask, Qt.ConnectionType.QueuedConnection)

    def __call__(self, task: Callable[[], None]) -> None:
        self.taskPosted.emit(task)

    @Slot(object)
    def _runTask(self, task: Callable[[], None]) -> None:
        try:
            task()
        except Exception as e:
            logger.error(f"Dispatched task failed: {e}", exc_info=True)
