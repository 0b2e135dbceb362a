"""Comparison of a claimed issuer against a valid-issuer template."""

from __future__ import annotations

from aad_issuer_validator.constants import TENANT_ID_PLACEHOLDER
from aad_issuer_validator.logging import get_logger

logger = get_logger(__name__)


def is_valid_issuer(template: str | None, tenant_id: str, actual_issuer: str) -> bool:
    """
    Check ``actual_issuer`` against one template.

    Templates containing ``{tenantid}`` have the tenant id substituted first.
    Comparison is exact and case-sensitive. A substitution that fails is a
    non-match rather than an error, so one malformed template cannot break
    validation against the remaining ones.
    """
    if not template or not template.strip():
        return False

    if TENANT_ID_PLACEHOLDER not in template:
        return template == actual_issuer

    try:
        issuer_from_template = template.replace(TENANT_ID_PLACEHOLDER, tenant_id)
    except TypeError:
        logger.debug(
            "Tenant id substitution failed",
            extra={"template": template, "tenant_id_type": type(tenant_id).__name__},
        )
        return False

    return issuer_from_template == actual_issuer
