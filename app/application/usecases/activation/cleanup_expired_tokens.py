"""USE CASE: borrar tokens de activación expirados (mantenimiento)."""

from __future__ import annotations

from ....crosscutting.logger import logger
from ....domain.repositories import ActivationTokenRepository


class CleanupExpiredTokensUseCase:
    def __init__(self, token_repository: ActivationTokenRepository) -> None:
        self._tokens = token_repository

    def execute(self) -> int:
        deleted = self._tokens.cleanup_expired()
        logger.info("Limpieza de tokens de activación", extra={"deleted": deleted})
        return deleted
