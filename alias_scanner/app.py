"""
Alias Scanner Application

Entry point for the headless scanner host.
Uses PipelineOrchestrator to wire camera, pipeline and services, and runs
a Qt event loop as the UI context that receives scan outcomes.

Architecture:
- PipelineOrchestrator: Reads config and creates all components with parameters
- ScanSession: Capture thread feeding the frame-classification pipeline
- ScanController: Consumes outcomes on the Qt main thread
"""

import argparse
import logging
import os
import signal
import sys
from typing import List, Optional, Tuple

from PySide6.QtCore import QCoreApplication, QTimer

from alias_scanner import __version__
from alias_scanner.core.pipeline.scan_session import SessionStartError
from alias_scanner.ui.pipeline_orchestrator import PipelineOrchestrator
from alias_scanner.ui.qt_dispatcher import QtMainThreadDispatcher
from alias_scanner.ui.scan_controller import ScanController, ScanState


def setupLogging(debugMode: bool = False) -> None:
    """
    Setup application logging.

    Args:
        debugMode: If True, set log level to DEBUG.
    """
    level = logging.DEBUG if debugMode else logging.INFO
    logging.basicConfig(
        level=level,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        handlers=[
            logging.StreamHandler(sys.stdout)
        ]
    )


def parseArguments(argv: Optional[List[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="alias-scanner",
        description="Scan QR codes, barcodes and bank aliases from a camera feed."
    )
    parser.add_argument(
        "--config",
        default="config/application_config.json",
        help="Path to the application configuration file"
    )
    parser.add_argument(
        "--camera",
        type=int,
        default=None,
        help="Camera index (overrides camera.index from config)"
    )
    parser.add_argument(
        "--debug",
        action="store_true",
        help="Enable DEBUG logging and debug output"
    )
    return parser.parse_args(argv)


def createApplication(
    configPath: str = "config/application_config.json",
    cameraIndex: Optional[int] = None
) -> Tuple[QCoreApplication, PipelineOrchestrator]:
    """
    Create and wire up all application components using PipelineOrchestrator.

    Args:
        configPath: Path to the application configuration file.
        cameraIndex: Camera index override.

    Returns:
        Tuple of (QCoreApplication, PipelineOrchestrator).
    """
    app = QCoreApplication.instance() or QCoreApplication(sys.argv)
    app.setApplicationName("Alias Scanner")
    app.setApplicationVersion(__version__)

    # Created on the main thread so queued tasks run there
    dispatcher = QtMainThreadDispatcher(app)

    orchestrator = PipelineOrchestrator(
        configPath,
        dispatcher=dispatcher,
        cameraIndex=cameraIndex
    )

    return app, orchestrator


def _logStateChanges(controller: ScanController) -> None:
    logger = logging.getLogger("alias_scanner")

    def onStateChanged(state: ScanState) -> None:
        if state is ScanState.CODE_FOUND:
            logger.info(f"{controller.codeKind.value} found: {controller.codePayload}")
        elif state is ScanState.SELECTING:
            payloads = [code.payload for code in controller.candidates]
            logger.info(f"Several codes in view, choose one: {payloads}")
        elif state is ScanState.ALIAS_FOUND:
            data = controller.aliasData
            logger.info(f"Alias {data.alias}: {data.fullName} ({data.entity}, {data.accountType})")
        elif state is ScanState.ALIAS_REJECTED:
            logger.info(f"Alias {controller.alias} rejected ({controller.lastError.value})")

    controller.setStateListener(onStateChanged)


def main(argv: Optional[List[str]] = None):
    """Main entry point."""
    args = parseArguments(argv)
    setupLogging(debugMode=args.debug or os.environ.get("DEBUG", "").lower() == "true")

    logger = logging.getLogger(__name__)
    logger.info(f"Starting Alias Scanner v{__version__}")

    try:
        app, orchestrator = createApplication(args.config, args.camera)
    except Exception as e:
        logger.error(f"Application failed to start: {e}")
        sys.exit(1)

    if args.debug:
        orchestrator.setDebugEnabled(True)

    try:
        controller = orchestrator.startSession()
    except SessionStartError as e:
        logger.error(f"Cannot start scanning: {e}")
        orchestrator.shutdown()
        sys.exit(1)

    _logStateChanges(controller)

    signal.signal(signal.SIGINT, lambda *_: app.quit())

    # Lets the interpreter run the SIGINT handler while Qt owns the loop
    heartbeat = QTimer()
    heartbeat.timeout.connect(lambda: None)
    heartbeat.start(200)

    exitCode = app.exec()

    orchestrator.shutdown()
    logger.info("Application terminated")
    sys.exit(exitCode)


if __name__ == "__main__":
    main()
