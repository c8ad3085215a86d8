"""
Transfer Service Interface Module.

Defines the interface for executing a transfer to a validated alias.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Optional

from alias_scanner.services.interfaces.alias_validation_service_interface import AliasData
from alias_scanner.services.interfaces.base_service_interface import ServiceErrorKind


@dataclass
class TransferResult:
    """
    Result of a transfer request.

    Attributes:
        success: Whether the backend accepted the transfer.
        transactionId: Backend transaction id, if returned.
        authorizationId: Backend authorization id, if returned.
        error: Failure category when success is False.
        statusCode: HTTP status of the last response, 0 when none was received.
        message: Response body for server errors.
    """
    success: bool
    transactionId: Optional[str] = None
    authorizationId: Optional[str] = None
    error: Optional[ServiceErrorKind] = None
    statusCode: int = 0
    message: str = ""


class ITransferService(ABC):
    """
    Interface for transfers.
    """

    @abstractmethod
    def executeTransfer(self, amount: float, aliasData: AliasData, category: str) -> TransferResult:
        """
        Send money to the account behind a validated alias.

        Blocking; call it off the UI thread.

        Args:
            amount: Amount in account currency.
            aliasData: Recipient from alias validation.
            category: Transfer category.

        Returns:
            TransferResult
        """
        pass
