"""Issuer validation for tokens of one Microsoft identity platform authority."""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass
from threading import Lock
from typing import TYPE_CHECKING, Protocol

from aad_issuer_validator.authority import AuthorityResolver
from aad_issuer_validator.constants import TENANT_ID_CLAIM, TID_CLAIM, V2_SEGMENT
from aad_issuer_validator.exceptions import ArgumentMissingError, InvalidIssuerError
from aad_issuer_validator.logging import get_logger
from aad_issuer_validator.matching import is_valid_issuer
from aad_issuer_validator.tenant import get_tenant_id

if TYPE_CHECKING:
    from aad_issuer_validator.discovery import DiscoveryClient
    from aad_issuer_validator.tokens import SecurityToken

TENANT_ID_MISSING_MESSAGE = (
    f"Neither '{TID_CLAIM}' nor '{TENANT_ID_CLAIM}' claim is present in the token "
    "and no tenant id could be read from its issuer"
)


def no_match_message(issuer: str) -> str:
    return f"Issuer '{issuer}' does not match any of the valid issuers provided for this application"


class IssuerParameters(Protocol):
    """Valid-issuer configuration read by ``IssuerValidator.validate``."""

    @property
    def valid_issuer(self) -> str | None: ...

    @property
    def valid_issuers(self) -> Sequence[str] | None: ...


@dataclass(frozen=True)
class ValidationParameters:
    """Plain implementation of ``IssuerParameters``."""

    valid_issuer: str | None = None
    valid_issuers: Sequence[str] | None = None


class DiscoveredIssuer:
    """Compute-once cell holding the discovery issuer of one authority URL.

    Concurrent callers wait for a single in-flight fetch. A failed fetch
    leaves the cell empty so the next caller tries again.
    """

    def __init__(self, authority_url: str) -> None:
        self.authority_url = authority_url
        self._lock = Lock()
        self._value: str | None = None

    @property
    def value(self) -> str | None:
        return self._value

    def resolve(self, client: DiscoveryClient) -> str:
        value = self._value
        if value is not None:
            return value

        with self._lock:
            if self._value is None:
                self._value = client.get_issuer(self.authority_url)
            return self._value


class IssuerValidator:
    """
    Validates issuers of single- and multi-tenant tokens for one authority.

    An issuer is valid when it equals one of the configured templates (with
    ``{tenantid}`` replaced by the token's tenant id) or, failing that, the
    issuer published in the authority's discovery document for the
    matching endpoint version.

    Instances are created through ``ValidatorRegistry`` so each authority is
    discovered at most once per process. The instance itself is callable
    and can be plugged into a token validation pipeline as its issuer
    validator.
    """

    def __init__(self, authority: str, discovery_client: DiscoveryClient) -> None:
        if not authority:
            raise ArgumentMissingError("authority")

        self._authority = AuthorityResolver.from_authority(authority)
        self._discovery_client = discovery_client
        self._issuer_v1 = DiscoveredIssuer(self._authority.authority_v1)
        self._issuer_v2 = DiscoveredIssuer(self._authority.authority_v2)
        self._logger = get_logger(__name__)

    @property
    def authority_v1(self) -> str:
        return self._authority.authority_v1

    @property
    def authority_v2(self) -> str:
        return self._authority.authority_v2

    @property
    def is_v2_authority(self) -> bool:
        return self._authority.is_v2

    @property
    def issuer_v1(self) -> str | None:
        """Discovery issuer of the V1 endpoint, once fetched."""
        return self._issuer_v1.value

    @property
    def issuer_v2(self) -> str | None:
        """Discovery issuer of the V2 endpoint, once fetched."""
        return self._issuer_v2.value

    def validate(
        self,
        issuer: str,
        token: SecurityToken,
        parameters: IssuerParameters,
    ) -> str:
        """
        Validate ``issuer`` for ``token``.

        Returns:
            ``issuer`` unchanged when it is valid

        Raises:
            ArgumentMissingError: if issuer, token or parameters is missing
            InvalidIssuerError: if no tenant id is found, the issuer is an
                unsupported B2C issuer, discovery fails, or nothing matches
        """
        if not issuer:
            raise ArgumentMissingError("issuer")
        if token is None:
            raise ArgumentMissingError("token")
        if parameters is None:
            raise ArgumentMissingError("parameters")

        tenant_id = get_tenant_id(token)
        if not tenant_id or not tenant_id.strip():
            self._logger.warning("Token has no tenant id", extra={"issuer": issuer})
            raise InvalidIssuerError(
                TENANT_ID_MISSING_MESSAGE, issuer=issuer, reason="tenant_id_missing"
            )

        for template in parameters.valid_issuers or ():
            if is_valid_issuer(template, tenant_id, issuer):
                self._logger.debug(
                    "Issuer matched valid issuers", extra={"issuer": issuer, "template": template}
                )
                return issuer

        if is_valid_issuer(parameters.valid_issuer, tenant_id, issuer):
            self._logger.debug("Issuer matched valid issuer", extra={"issuer": issuer})
            return issuer

        discovered = self._resolve_discovered_issuer(issuer)
        # Multi-tenant discovery documents publish the placeholder literally, e.g.
        # https://login.microsoftonline.com/{tenantid}/v2.0
        if is_valid_issuer(discovered, tenant_id, issuer):
            self._logger.debug(
                "Issuer matched discovery document",
                extra={"issuer": issuer, "discovered_issuer": discovered},
            )
            return issuer

        self._logger.warning(
            "Issuer rejected",
            extra={"issuer": issuer, "tenant_id": tenant_id, "discovered_issuer": discovered},
        )
        raise InvalidIssuerError(no_match_message(issuer), issuer=issuer, reason="no_match")

    __call__ = validate

    def _resolve_discovered_issuer(self, issuer: str) -> str:
        """Fetch (once) the discovery issuer for the version the claimed issuer names."""
        cell = self._issuer_v2 if issuer.lower().endswith(V2_SEGMENT) else self._issuer_v1
        try:
            return cell.resolve(self._discovery_client)
        except Exception as exc:
            self._logger.warning(
                "Discovery failed during issuer validation",
                extra={"issuer": issuer, "authority": cell.authority_url, "error": str(exc)},
            )
            raise InvalidIssuerError(
                no_match_message(issuer), issuer=issuer, reason="discovery_failed"
            ) from exc
