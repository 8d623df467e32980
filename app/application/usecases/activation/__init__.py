"""
===============================================================================
ACTIVATION USE CASES PACKAGE (Public API / Exports)
===============================================================================
"""

from __future__ import annotations

from .activate_user import ActivateUserUseCase
from .activation_results import ActivationTokenResult
from .cleanup_expired_tokens import CleanupExpiredTokensUseCase
from .deactivate_user import DeactivateUserUseCase
from .request_activation import RequestActivationUseCase

__all__ = [
    "RequestActivationUseCase",
    "ActivateUserUseCase",
    "DeactivateUserUseCase",
    "CleanupExpiredTokensUseCase",
    "ActivationTokenResult",
]
