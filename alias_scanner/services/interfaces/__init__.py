"""
Services Interfaces Package.

Exports all service interfaces for the alias scanner.
"""

from alias_scanner.services.interfaces.base_service_interface import (
    ServiceErrorKind,
    IBaseService,
    BaseService
)

from alias_scanner.services.interfaces.config_service_interface import IConfigService

from alias_scanner.services.interfaces.auth_service_interface import (
    IAccessTokenProvider,
    IAuthTokenService
)

from alias_scanner.services.interfaces.remote_classification_service_interface import (
    ClassificationResult,
    IRemoteClassificationService
)

from alias_scanner.services.interfaces.alias_validation_service_interface import (
    AliasData,
    AliasInfo,
    AliasValidationResult,
    IAliasValidationService
)

from alias_scanner.services.interfaces.transfer_service_interface import (
    TransferResult,
    ITransferService
)


__all__ = [
    # Base
    "ServiceErrorKind",
    "IBaseService",
    "BaseService",
    # Config
    "IConfigService",
    # Auth
    "IAccessTokenProvider",
    "IAuthTokenService",
    # Remote classification
    "ClassificationResult",
    "IRemoteClassificationService",
    # Alias validation
    "AliasData",
    "AliasInfo",
    "AliasValidationResult",
    "IAliasValidationService",
    # Transfer
    "TransferResult",
    "ITransferService",
]
