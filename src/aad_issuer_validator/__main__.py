"""CLI entry point: check the issuer of a compact token against config.yaml.

Usage::

    python -m aad_issuer_validator <token> [--config path/to/config.yaml]
"""

from __future__ import annotations

import argparse
import json
import sys
from pathlib import Path

from aad_issuer_validator.config import get_config_path, load_settings
from aad_issuer_validator.exceptions import IssuerValidationError
from aad_issuer_validator.logging import setup_logging
from aad_issuer_validator.registry import ValidatorRegistry
from aad_issuer_validator.tokens import UnverifiedJwt


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(
        description="Validate the issuer of a Microsoft identity platform token."
    )
    parser.add_argument("token", help="Compact JWT whose 'iss' claim is checked.")
    parser.add_argument(
        "--config",
        type=Path,
        metavar="PATH",
        help="Configuration file (default: $CONFIG_PATH or config.yaml).",
    )
    args = parser.parse_args(argv)

    settings = load_settings(args.config or get_config_path())
    setup_logging(settings.logging.level)

    registry = ValidatorRegistry.from_settings(settings)
    try:
        token = UnverifiedJwt.from_compact(args.token)
        validator = registry.get_or_create(settings.validation.authority)
        issuer = validator.validate(token.issuer, token, settings.validation)
    except IssuerValidationError as exc:
        print(json.dumps(exc.to_dict()), file=sys.stderr)
        return 1
    finally:
        registry.close()

    print(issuer)
    return 0


if __name__ == "__main__":
    sys.exit(main())
