"""
Alias Validation Service Interface Module.

Defines the account metadata returned for a bank alias and the interface
of the service that looks it up.

Follows:
- SRP: Only handles alias lookups
- DIP: Consumers depend on this abstraction
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any, Dict, Optional

from alias_scanner.services.interfaces.base_service_interface import ServiceErrorKind


@dataclass
class AliasData:
    """
    Transfer-ready recipient data.

    Attributes:
        alias: Bank alias.
        accountType: "CVU" or "CBU".
        entity: Financial entity display name.
        fullName: Recipient name.
        taxDocument: CUIT/CUIL of the recipient.
        cvu: Destination account key.
        bankId: Backend bank identifier.
    """
    alias: str
    accountType: str
    entity: str
    fullName: str
    taxDocument: str
    cvu: str
    bankId: str


@dataclass
class AliasInfo:
    """Account metadata as returned by the identifiers endpoint."""
    identifier: Optional[str] = None
    name: Optional[str] = None
    bank: Optional[str] = None
    cuit: Optional[str] = None
    accountType: Optional[str] = None
    cbu: Optional[str] = None
    cvu: Optional[str] = None
    alias: Optional[str] = None
    cuil: Optional[str] = None
    bankId: Optional[str] = None

    @property
    def displayName(self) -> str:
        return self.name or "Unknown"

    @property
    def displayBank(self) -> str:
        return self.bank or "Unknown entity"

    @classmethod
    def fromResponse(cls, data: Dict[str, Any]) -> "AliasInfo":
        """
        Build from the snake_case JSON body.

        Unknown keys are ignored.
        """
        def text(key: str) -> Optional[str]:
            value = data.get(key)
            return None if value is None else str(value)

        return cls(
            identifier=text("identifier"),
            name=text("name"),
            bank=text("bank"),
            cuit=text("cuit"),
            accountType=text("account_type"),
            cbu=text("cbu"),
            cvu=text("cvu"),
            alias=text("alias"),
            cuil=text("cuil"),
            bankId=text("bank_id")
        )

    def toAliasData(self, scannedAlias: str) -> AliasData:
        """
        Convert to transfer-ready data.

        Args:
            scannedAlias: Alias that was looked up, used when the response has none.
        """
        return AliasData(
            alias=self.alias or scannedAlias,
            accountType="CVU" if self.cvu else "CBU",
            entity=self.displayBank,
            fullName=self.displayName,
            taxDocument=self.cuil or "?",
            cvu=self.cvu or "",
            bankId=self.bankId or ""
        )


@dataclass
class AliasValidationResult:
    """
    Result of an alias lookup.

    Attributes:
        success: Whether the alias exists.
        aliasInfo: Account metadata when success is True.
        error: Failure category when success is False.
        statusCode: HTTP status of the last response, 0 when none was received.
    """
    success: bool
    aliasInfo: Optional[AliasInfo] = None
    error: Optional[ServiceErrorKind] = None
    statusCode: int = 0


class IAliasValidationService(ABC):
    """
    Interface for alias lookups against the backend.
    """

    @abstractmethod
    def validateAlias(self, alias: str, currency: str = "ars") -> AliasValidationResult:
        """
        Look up the account behind an alias.

        Blocking; call it off the UI thread.

        Args:
            alias: Bank alias (e.g., "pay.me.now").
            currency: Account currency.

        Returns:
            AliasValidationResult
        """
        pass
