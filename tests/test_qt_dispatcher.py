"""
Tests for QtMainThreadDispatcher

Run with: python -m pytest tests/test_qt_dispatcher.py -v
"""

import threading

from alias_scanner.core.pipeline.scan_outcome import ScanOutcome
from alias_scanner.core.pipeline.scan_result_publisher import ScanResultPublisher
from alias_scanner.ui.qt_dispatcher import QtMainThreadDispatcher


class TestQtMainThreadDispatcher:

    def test_task_posted_from_worker_runs_on_main_thread(self, qtbot):
        dispatcher = QtMainThreadDispatcher()
        ranOn = []

        worker = threading.Thread(target=lambda: dispatcher(lambda: ranOn.append(threading.current_thread())))
        worker.start()
        worker.join()

        qtbot.waitUntil(lambda: len(ranOn) == 1, timeout=2000)
        assert ranOn[0] is threading.main_thread()

    def test_tasks_run_in_posting_order(self, qtbot):
        dispatcher = QtMainThreadDispatcher()
        order = []
        for i in range(5):
            dispatcher(lambda i=i: order.append(i))

        qtbot.waitUntil(lambda: len(order) == 5, timeout=2000)
        assert order == [0, 1, 2, 3, 4]

    def test_failing_task_does_not_stop_later_tasks(self, qtbot):
        dispatcher = QtMainThreadDispatcher()
        done = []

        def failing():
            raise RuntimeError("boom")

        dispatcher(failing)
        dispatcher(lambda: done.append(True))

        qtbot.waitUntil(lambda: done == [True], timeout=2000)

    def test_publisher_delivers_outcome_on_main_thread(self, qtbot):
        received = []
        publisher = ScanResultPublisher(
            consumer=lambda outcome: received.append((outcome, threading.current_thread())),
            dispatcher=QtMainThreadDispatcher()
        )

        worker = threading.Thread(target=lambda: publisher.publish(ScanOutcome.qrCode("pay.me.now")))
        worker.start()
        worker.join()

        qtbot.waitUntil(lambda: len(received) == 1, timeout=2000)
        outcome, thread = received[0]
        assert outcome == ScanOutcome.qrCode("pay.me.now")
        assert thread is threading.main_thread()
