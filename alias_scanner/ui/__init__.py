# UI module for Alias Scanner
# Contains the outcome consumer, the Qt dispatcher and the wiring

from alias_scanner.ui.scan_controller import ScanController, ScanState
from alias_scanner.ui.pipeline_orchestrator import PipelineOrchestrator

__all__ = [
    "ScanController",
    "ScanState",
    "PipelineOrchestrator",
]
