"""
Scan Controller Module.

Consumer of ScanOutcome. Turns pipeline decisions into the user-facing
scan flow: code found, code selection, remote alias recognition and
validation, and the transfer to a validated alias.

Runs on the UI context. Remote calls run on a worker pool and report
back through the UI dispatcher.
"""

import logging
from concurrent.futures import Executor, ThreadPoolExecutor
from enum import Enum
from typing import Callable, List, Optional

import numpy as np

from alias_scanner.core.interfaces.code_detector_interface import DetectedCode
from alias_scanner.core.pipeline.scan_outcome import ScanOutcome, ScanOutcomeKind
from alias_scanner.core.pipeline.scan_result_publisher import Dispatcher, immediateDispatcher
from alias_scanner.core.pipeline.scan_session import ScanSession
from alias_scanner.services.interfaces.alias_validation_service_interface import (
    AliasData,
    AliasValidationResult,
    IAliasValidationService
)
from alias_scanner.services.interfaces.auth_service_interface import IAuthTokenService
from alias_scanner.services.interfaces.base_service_interface import ServiceErrorKind
from alias_scanner.services.interfaces.remote_classification_service_interface import (
    ClassificationResult,
    IRemoteClassificationService
)
from alias_scanner.services.interfaces.transfer_service_interface import (
    ITransferService,
    TransferResult
)


logger = logging.getLogger(__name__)


class ScanState(Enum):
    IDLE = "idle"
    ANALYZING = "analyzing"                     # remote classification in flight
    VALIDATING = "validating"                   # alias lookup in flight
    ALIAS_FOUND = "aliasFound"
    ALIAS_REJECTED = "aliasRejected"
    CODE_FOUND = "codeFound"
    SELECTING = "selecting"                     # user must pick one of several codes
    TRANSFERRING = "transferring"
    TRANSFER_COMPLETED = "transferCompleted"
    TRANSFER_FAILED = "transferFailed"


StateListener = Callable[[ScanState], None]


class ScanController:
    """
    Scan flow state machine.

    New outcomes are only taken in IDLE; while a remote call is in flight,
    a result is shown, or a selection is pending, they are ignored. The
    one exception is the outcome answering the user's own selection.
    """

    def __init__(
        self,
        session: ScanSession,
        classificationService: IRemoteClassificationService,
        aliasValidationService: IAliasValidationService,
        transferService: ITransferService,
        authService: IAuthTokenService,
        uiDispatcher: Optional[Dispatcher] = None,
        executor: Optional[Executor] = None,
        currency: str = "ars"
    ):
        """
        Initialize ScanController.

        Args:
            session: Scan session receiving UI commands.
            classificationService: Remote alias recognition.
            aliasValidationService: Alias lookup.
            transferService: Transfers.
            authService: Backend login, warmed up on start().
            uiDispatcher: Runs callbacks on the UI context.
            executor: Worker pool for remote calls.
            currency: Account currency for alias lookups.
        """
        self._session = session
        self._classificationService = classificationService
        self._aliasValidationService = aliasValidationService
        self._transferService = transferService
        self._authService = authService
        self._uiDispatcher = uiDispatcher or immediateDispatcher
        self._executor = executor or ThreadPoolExecutor(max_workers=2, thread_name_prefix="scan-remote")
        self._currency = currency

        self._state = ScanState.IDLE
        self._listener: Optional[StateListener] = None
        self._analysisId = 0
        self._closed = False
        self._resetResults()

    def _resetResults(self) -> None:
        self._codePayload: Optional[str] = None
        self._codeKind: Optional[ScanOutcomeKind] = None
        self._candidates: List[DetectedCode] = []
        self._selectedPayload: Optional[str] = None
        self._alias: Optional[str] = None
        self._aliasData: Optional[AliasData] = None
        self._lastError: Optional[ServiceErrorKind] = None
        self._transferResult: Optional[TransferResult] = None

    # ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
    # State Access
    # ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━

    @property
    def state(self) -> ScanState:
        return self._state

    @property
    def isBusy(self) -> bool:
        return self._state is not ScanState.IDLE

    @property
    def codePayload(self) -> Optional[str]:
        return self._codePayload

    @property
    def codeKind(self) -> Optional[ScanOutcomeKind]:
        return self._codeKind

    @property
    def candidates(self) -> List[DetectedCode]:
        return list(self._candidates)

    @property
    def alias(self) -> Optional[str]:
        return self._alias

    @property
    def aliasData(self) -> Optional[AliasData]:
        return self._aliasData

    @property
    def lastError(self) -> Optional[ServiceErrorKind]:
        return self._lastError

    @property
    def transferResult(self) -> Optional[TransferResult]:
        return self._transferResult

    def setStateListener(self, listener: Optional[StateListener]) -> None:
        self._listener = listener

    def _setState(self, state: ScanState) -> None:
        if state is self._state:
            return
        logger.info(f"Scan state: {self._state.value} -> {state.value}")
        self._state = state
        if self._listener is not None:
            self._listener(state)

    # ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
    # Lifecycle
    # ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━

    def start(self) -> None:
        """Warm up the backend login so the first alias lookup is fast."""
        self._executor.submit(self._authService.ensureValidToken)

    def shutdown(self) -> None:
        """Stop taking outcomes and release the worker pool."""
        self._closed = True
        self._executor.shutdown(wait=False)

    # ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
    # Pipeline Outcomes
    # ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━

    def onScanOutcome(self, outcome: ScanOutcome) -> None:
        """Consume one pipeline outcome (UI context)."""
        if self._closed:
            return

        kind = outcome.kind

        if self._state is ScanState.SELECTING:
            if (
                kind in (ScanOutcomeKind.QR_CODE, ScanOutcomeKind.BARCODE)
                and self._selectedPayload is not None
                and outcome.payload == self._selectedPayload
            ):
                self._showCode(outcome)
            return

        if self.isBusy:
            logger.debug(f"Busy ({self._state.value}), ignoring {outcome!r}")
            return

        if kind in (ScanOutcomeKind.QR_CODE, ScanOutcomeKind.BARCODE):
            self._showCode(outcome)

        elif kind is ScanOutcomeKind.MULTIPLE_CODES:
            self._candidates = list(outcome.codes)
            self._selectedPayload = None
            self._setState(ScanState.SELECTING)

        elif kind is ScanOutcomeKind.NEEDS_REMOTE_CLASSIFICATION:
            self._analysisId += 1
            self._setState(ScanState.ANALYZING)
            self._executor.submit(self._classifyInBackground, self._analysisId, outcome.image)

    def _showCode(self, outcome: ScanOutcome) -> None:
        self._codePayload = outcome.payload
        self._codeKind = outcome.kind
        self._candidates = []
        self._selectedPayload = None
        self._setState(ScanState.CODE_FOUND)

    # ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
    # User Commands
    # ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━

    def selectCode(self, code: DetectedCode) -> None:
        """
        Pick one of the codes of a MultipleCodes outcome.

        The pipeline answers with a single-code outcome, which moves the
        controller to CODE_FOUND.
        """
        if self._state is not ScanState.SELECTING:
            logger.warning("selectCode called without a pending selection")
            return
        if not any(candidate.payload == code.payload for candidate in self._candidates):
            raise ValueError(f"Code {code.payload!r} is not among the candidates")

        self._selectedPayload = code.payload
        self._session.resolveSelection(code)

    def cancelSelection(self) -> None:
        if self._state is not ScanState.SELECTING:
            return
        self._session.cancelSelection()
        self._candidates = []
        self._selectedPayload = None
        self._setState(ScanState.IDLE)

    def reset(self) -> None:
        """Return to scanning and allow the last barcode to be detected again."""
        if self._state is ScanState.SELECTING:
            self._session.cancelSelection()
        self._resetResults()
        self._session.resetDebounce()
        self._setState(ScanState.IDLE)

    def startTransfer(self, amount: float, category: str) -> None:
        if self._state is not ScanState.ALIAS_FOUND or self._aliasData is None:
            logger.warning("startTransfer called without a validated alias")
            return
        if amount <= 0:
            raise ValueError(f"Transfer amount must be positive, got {amount}")

        self._setState(ScanState.TRANSFERRING)
        self._executor.submit(self._transferInBackground, amount, self._aliasData, category)

    # ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
    # Background Calls
    # ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━

    def _classifyInBackground(self, analysisId: int, image: np.ndarray) -> None:
        try:
            result = self._classificationService.classify(image)
        except Exception as e:
            logger.error(f"Remote classification crashed: {e}", exc_info=True)
            result = ClassificationResult(success=False, error=ServiceErrorKind.NETWORK_ERROR)
        self._uiDispatcher(lambda: self._onClassified(analysisId, result))

    def _onClassified(self, analysisId: int, result: ClassificationResult) -> None:
        # Drop results of an analysis abandoned by reset()
        if self._state is not ScanState.ANALYZING or analysisId != self._analysisId:
            return

        if not result.hasAlias:
            if not result.success:
                logger.warning(f"Remote classification failed: {result.error.value}")
            self._setState(ScanState.IDLE)
            return

        self._alias = result.alias
        self._setState(ScanState.VALIDATING)
        self._executor.submit(self._validateInBackground, result.alias)

    def _validateInBackground(self, alias: str) -> None:
        try:
            result = self._aliasValidationService.validateAlias(alias, self._currency)
        except Exception as e:
            logger.error(f"Alias validation crashed: {e}", exc_info=True)
            result = AliasValidationResult(success=False, error=ServiceErrorKind.NETWORK_ERROR)
        self._uiDispatcher(lambda: self._onValidated(alias, result))

    def _onValidated(self, alias: str, result: AliasValidationResult) -> None:
        if self._state is not ScanState.VALIDATING or alias != self._alias:
            return

        if result.success and result.aliasInfo is not None:
            self._aliasData = result.aliasInfo.toAliasData(alias)
            self._setState(ScanState.ALIAS_FOUND)
        else:
            self._lastError = result.error
            self._setState(ScanState.ALIAS_REJECTED)

    def _transferInBackground(self, amount: float, aliasData: AliasData, category: str) -> None:
        try:
            result = self._transferService.executeTransfer(amount, aliasData, category)
        except Exception as e:
            logger.error(f"Transfer crashed: {e}", exc_info=True)
            result = TransferResult(success=False, error=ServiceErrorKind.NETWORK_ERROR)
        self._uiDispatcher(lambda: self._onTransferred(result))

    def _onTransferred(self, result: TransferResult) -> None:
        if self._state is not ScanState.TRANSFERRING:
            return

        self._transferResult = result
        if result.success:
            self._setState(ScanState.TRANSFER_COMPLETED)
        else:
            self._lastError = result.error
            self._setState(ScanState.TRANSFER_FAILED)
