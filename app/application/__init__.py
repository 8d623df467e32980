"""
===============================================================================
APPLICATION LAYER (Public API / Exports)
===============================================================================

Expone los servicios de aplicación compartidos:
  - EventBus: publish/subscribe síncrono en proceso (fail-closed)
  - AttemptLimiter: límite de intentos de login / registro

Nota:
  - Los casos de uso se importan desde `usecases/` subdirectories.
===============================================================================
"""

from .event_bus import WILDCARD, EventBus, EventHandler
from .rate_limiting import (
    AttemptLimiter,
    RateLimitDecision,
    login_key,
    register_key,
)

__all__ = [
    # Event Bus
    "EventBus",
    "EventHandler",
    "WILDCARD",
    # Rate limiting
    "AttemptLimiter",
    "RateLimitDecision",
    "login_key",
    "register_key",
]
