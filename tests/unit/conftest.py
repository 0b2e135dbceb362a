"""Unit test fixtures that clear caches between tests."""

from __future__ import annotations

import logging

import pytest

from aad_issuer_validator.config import clear_settings_cache
from aad_issuer_validator.logging import PACKAGE_LOGGER_NAME
from aad_issuer_validator.registry import reset_default_registry
from tests.helpers import (
    AUTHORITY_V1,
    AUTHORITY_V2,
    ISSUER_V1_TEMPLATE,
    ISSUER_V2_TEMPLATE,
    FakeDiscoveryClient,
)


@pytest.fixture(autouse=True)
def _clear_caches():
    """Clear settings cache and the default registry between tests."""
    clear_settings_cache()
    reset_default_registry()
    yield
    clear_settings_cache()
    reset_default_registry()


@pytest.fixture(autouse=True)
def _reset_package_logger():
    """Undo setup_logging so handlers never outlive a captured stream."""
    yield
    logger = logging.getLogger(PACKAGE_LOGGER_NAME)
    for handler in logger.handlers:
        handler.close()
    logger.handlers.clear()
    logger.setLevel(logging.NOTSET)
    logger.propagate = True


@pytest.fixture()
def discovery_client() -> FakeDiscoveryClient:
    """Fake discovery publishing multi-tenant templates like the real endpoints."""
    return FakeDiscoveryClient(
        {
            AUTHORITY_V2: ISSUER_V2_TEMPLATE,
            AUTHORITY_V1: ISSUER_V1_TEMPLATE,
        }
    )
