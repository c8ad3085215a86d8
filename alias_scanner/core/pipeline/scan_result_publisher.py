"""
Scan Result Publisher Module.

Single exit point of the pipeline. Hands every ScanOutcome to the
registered consumer through a dispatcher that runs it on the UI context.
"""

import logging
from typing import Callable, Optional

from alias_scanner.core.pipeline.scan_outcome import ScanOutcome


logger = logging.getLogger(__name__)


Dispatcher = Callable[[Callable[[], None]], None]
ScanOutcomeConsumer = Callable[[ScanOutcome], None]


def immediateDispatcher(task: Callable[[], None]) -> None:
    """Run the task on the calling thread."""
    task()


class ScanResultPublisher:
    """
    Marshals outcomes from the capture thread to the consumer's context.

    The dispatcher decides where the consumer runs. In the application
    it is a QtMainThreadDispatcher; headless hosts and tests use
    immediateDispatcher.
    """

    def __init__(
        self,
        consumer: Optional[ScanOutcomeConsumer] = None,
        dispatcher: Optional[Dispatcher] = None
    ):
        self._consumer = consumer
        self._dispatcher = dispatcher or immediateDispatcher

    def setConsumer(self, consumer: Optional[ScanOutcomeConsumer]) -> None:
        self._consumer = consumer

    def publish(self, outcome: ScanOutcome) -> None:
        consumer = self._consumer
        if consumer is None:
            logger.debug(f"No consumer registered, dropping {outcome!r}")
            return

        logger.debug(f"Publishing {outcome!r}")
        self._dispatcher(lambda: consumer(outcome))
