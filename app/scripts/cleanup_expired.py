"""
Name: Expired Sessions / Activation Tokens Cleanup

Responsibilities:
  - Delete expired or inactive sessions
  - Delete expired activation tokens
  - Print the deleted counts (cron / Kubernetes CronJob friendly)

Usage:
  python -m app.scripts.cleanup_expired [--sessions-only | --tokens-only]
"""

from __future__ import annotations

import argparse
import sys

from app.container import (
    get_cleanup_expired_sessions_use_case,
    get_cleanup_expired_tokens_use_case,
)
from app.crosscutting.config import get_settings
from app.crosscutting.logger import configure_logging, logger
from app.infrastructure.db import close_pool, init_pool


def _parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="Delete expired sessions and activation tokens."
    )
    scope = parser.add_mutually_exclusive_group()
    scope.add_argument(
        "--sessions-only", action="store_true", help="Only clean up sessions"
    )
    scope.add_argument(
        "--tokens-only", action="store_true", help="Only clean up activation tokens"
    )
    return parser.parse_args(argv)


def run_cleanup(*, sessions: bool = True, tokens: bool = True) -> dict[str, int]:
    """Ejecuta los casos de uso de limpieza y devuelve los conteos."""
    result: dict[str, int] = {}
    if sessions:
        result["sessions_deleted"] = get_cleanup_expired_sessions_use_case().execute()
    if tokens:
        result["tokens_deleted"] = get_cleanup_expired_tokens_use_case().execute()
    return result


def main(argv: list[str] | None = None) -> int:
    args = _parse_args(argv)
    settings = get_settings()
    configure_logging(settings)

    uses_database = not settings.is_test()
    if uses_database:
        init_pool(
            database_url=settings.database_url,
            min_size=1,
            max_size=2,
        )

    try:
        counts = run_cleanup(sessions=not args.tokens_only, tokens=not args.sessions_only)
    finally:
        if uses_database:
            close_pool()

    logger.info("Limpieza completada", extra=counts)
    for name, value in counts.items():
        print(f"{name}={value}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
