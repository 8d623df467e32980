"""
===============================================================================
TARJETA CRC - identity/passwords.py (Hashing de passwords)
===============================================================================

Responsabilidades:
  - Implementar el puerto PasswordHasher con Argon2 (argon2-cffi).
  - Tratar hashes corruptos / inválidos como "no coincide" (nunca 500).

Colaboradores:
  - domain.services.PasswordHasher (puerto)
  - application.usecases.* (registro, login, cambio de password)
===============================================================================
"""

from __future__ import annotations

from argon2 import PasswordHasher as _Argon2
from argon2.exceptions import InvalidHashError, VerificationError, VerifyMismatchError

from ..crosscutting.logger import logger


class Argon2PasswordHasher:
    """Hasher Argon2id con parámetros por defecto de argon2-cffi."""

    def __init__(self, hasher: _Argon2 | None = None) -> None:
        self._hasher = hasher or _Argon2()

    def hash(self, password: str) -> str:
        return self._hasher.hash(password)

    def verify(self, password: str, password_hash: str) -> bool:
        try:
            return self._hasher.verify(password_hash, password)
        except VerifyMismatchError:
            return False
        except (VerificationError, InvalidHashError):
            logger.warning("Hash de password inválido o corrupto")
            return False

    def needs_rehash(self, password_hash: str) -> bool:
        return self._hasher.check_needs_rehash(password_hash)
