"""
In-Memory Repository Implementations.

For testing and local development. NOT FOR PRODUCTION.
Data is lost on process restart.
"""

from .activation_token import InMemoryActivationTokenRepository
from .audit_event import InMemoryAuditEventRepository
from .session import InMemorySessionRepository
from .unit_of_work import InMemoryUnitOfWork
from .user import InMemoryUserRepository

__all__ = [
    "InMemoryUserRepository",
    "InMemorySessionRepository",
    "InMemoryActivationTokenRepository",
    "InMemoryAuditEventRepository",
    "InMemoryUnitOfWork",
]
