"""Per-authority cache of issuer validators."""

from __future__ import annotations

from collections.abc import Callable
from threading import Lock
from typing import TYPE_CHECKING

from aad_issuer_validator.discovery import HttpDiscoveryClient
from aad_issuer_validator.exceptions import ArgumentMissingError
from aad_issuer_validator.logging import get_logger
from aad_issuer_validator.validator import IssuerValidator

if TYPE_CHECKING:
    import httpx

    from aad_issuer_validator.config import Settings
    from aad_issuer_validator.discovery import DiscoveryClient

DiscoveryClientFactory = Callable[["httpx.BaseTransport | None"], "DiscoveryClient"]


def _default_discovery_client(transport: httpx.BaseTransport | None) -> DiscoveryClient:
    return HttpDiscoveryClient(transport=transport)


class ValidatorRegistry:
    """
    Maps raw authority strings to their ``IssuerValidator``.

    Entries are never evicted. Lookup and insertion happen under one lock,
    so concurrent callers asking for the same authority always receive the
    same instance.

    The registry owns the discovery clients it creates; ``close()`` releases
    them together with every cached validator.
    """

    def __init__(self, discovery_client_factory: DiscoveryClientFactory | None = None) -> None:
        self._discovery_client_factory = discovery_client_factory or _default_discovery_client
        self._validators: dict[str, IssuerValidator] = {}
        self._discovery_clients: list[DiscoveryClient] = []
        self._lock = Lock()
        self._logger = get_logger(__name__)

    @classmethod
    def from_settings(cls, settings: Settings) -> ValidatorRegistry:
        """Build a registry whose discovery clients follow ``settings.discovery``."""
        discovery = settings.discovery

        def factory(transport: httpx.BaseTransport | None) -> DiscoveryClient:
            return HttpDiscoveryClient(
                transport=transport,
                timeout_seconds=discovery.timeout_seconds,
                metadata_path=discovery.metadata_path,
            )

        return cls(discovery_client_factory=factory)

    def get_or_create(
        self,
        authority: str,
        transport: httpx.BaseTransport | None = None,
    ) -> IssuerValidator:
        """
        Return the validator for ``authority``, creating it on first use.

        ``transport`` only applies when the validator is created; later
        calls reuse the existing instance as-is.

        Raises:
            ArgumentMissingError: if authority is None or empty
        """
        if not authority:
            raise ArgumentMissingError("authority")

        validator = self._validators.get(authority)
        if validator is not None:
            return validator

        with self._lock:
            validator = self._validators.get(authority)
            if validator is None:
                discovery_client = self._discovery_client_factory(transport)
                validator = IssuerValidator(authority, discovery_client)
                self._discovery_clients.append(discovery_client)
                self._validators[authority] = validator
                self._logger.info(
                    "Issuer validator created",
                    extra={
                        "authority": authority,
                        "authority_v1": validator.authority_v1,
                        "authority_v2": validator.authority_v2,
                    },
                )
            return validator

    def close(self) -> None:
        """Close owned discovery clients and forget every cached validator."""
        with self._lock:
            clients = self._discovery_clients
            self._discovery_clients = []
            self._validators.clear()

        for client in clients:
            close = getattr(client, "close", None)
            if close is not None:
                close()
        if clients:
            self._logger.info(
                "Issuer validator registry closed", extra={"clients": len(clients)}
            )

    def __contains__(self, authority: object) -> bool:
        return authority in self._validators

    def __len__(self) -> int:
        return len(self._validators)


# Module-level mutable container to avoid `global` statement
_registry_holder: dict[str, ValidatorRegistry] = {}
_registry_holder_lock = Lock()


def get_default_registry() -> ValidatorRegistry:
    """Get the process-wide registry, creating it on first use."""
    with _registry_holder_lock:
        registry = _registry_holder.get("current")
        if registry is None:
            registry = ValidatorRegistry()
            _registry_holder["current"] = registry
        return registry


def reset_default_registry() -> None:
    """Close and drop the process-wide registry."""
    with _registry_holder_lock:
        registry = _registry_holder.pop("current", None)
    if registry is not None:
        registry.close()


def get_validator(
    authority: str,
    transport: httpx.BaseTransport | None = None,
) -> IssuerValidator:
    """
    Get the issuer validator for an authority from the process-wide registry.

    Example::

        validator = get_validator("https://login.microsoftonline.com/organizations/v2.0")
        validator.validate(issuer, ClaimsToken(claims), ValidationParameters())
    """
    return get_default_registry().get_or_create(authority, transport)
