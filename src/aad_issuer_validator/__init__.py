"""AAD Issuer Validator: issuer validation for Microsoft identity platform tokens."""

from aad_issuer_validator.exceptions import (
    ArgumentMissingError,
    DiscoveryError,
    InvalidIssuerError,
    IssuerValidationError,
    TokenFormatError,
)
from aad_issuer_validator.registry import ValidatorRegistry, get_validator
from aad_issuer_validator.tokens import ClaimsToken, SecurityToken, UnverifiedJwt
from aad_issuer_validator.validator import IssuerValidator, ValidationParameters

__version__ = "0.1.0"

__all__ = [
    "ArgumentMissingError",
    "ClaimsToken",
    "DiscoveryError",
    "InvalidIssuerError",
    "IssuerValidationError",
    "IssuerValidator",
    "SecurityToken",
    "TokenFormatError",
    "UnverifiedJwt",
    "ValidationParameters",
    "ValidatorRegistry",
    "get_validator",
]
