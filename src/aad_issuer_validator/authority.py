"""Authority normalization and V1/V2 companion derivation."""

from __future__ import annotations

from dataclasses import dataclass

from aad_issuer_validator.constants import COMMON, ORGANIZATIONS, V2_SEGMENT


def create_v1_authority(authority_v2: str) -> str:
    """Derive the V1 endpoint of a V2 authority.

    ``organizations`` only exists on the V2 endpoint; its V1 equivalent is
    the ``common`` alias.
    """
    if ORGANIZATIONS in authority_v2:
        return authority_v2.replace(f"{ORGANIZATIONS}/{V2_SEGMENT}", COMMON)
    return authority_v2.replace(f"/{V2_SEGMENT}", "")


@dataclass(frozen=True)
class AuthorityResolver:
    """Both versions of an authority, derived once from the raw string."""

    authority_v1: str
    authority_v2: str
    is_v2: bool

    @classmethod
    def from_authority(cls, authority: str) -> AuthorityResolver:
        """Normalize ``authority`` and compute its companion version."""
        if V2_SEGMENT in authority:
            authority_v2 = authority.rstrip("/")
            return cls(
                authority_v1=create_v1_authority(authority_v2),
                authority_v2=authority_v2,
                is_v2=True,
            )

        authority_v1 = authority.rstrip("/")
        return cls(
            authority_v1=authority_v1,
            authority_v2=f"{authority_v1}/{V2_SEGMENT}",
            is_v2=False,
        )

    def for_version(self, v2: bool) -> str:
        """Return the authority URL matching the requested version."""
        return self.authority_v2 if v2 else self.authority_v1
