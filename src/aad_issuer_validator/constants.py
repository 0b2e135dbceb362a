"""Well-known literals of the Microsoft identity platform issuer format."""

from __future__ import annotations

OIDC_METADATA_PATH = "/.well-known/openid-configuration"

TENANT_ID_PLACEHOLDER = "{tenantid}"

TID_CLAIM = "tid"
TENANT_ID_CLAIM = "tenantId"
ISSUER_CLAIM = "iss"

# B2C user-flow issuers look like {domain}/tfp/{tid}/{userFlow}/v2.0/
TFP_SEGMENT = "tfp"

V2_SEGMENT = "v2.0"
ORGANIZATIONS = "organizations"
COMMON = "common"
