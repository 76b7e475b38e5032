"""Agent transports used by the session adapter."""

from .base import AgentBackend
from .router import BACKEND_NAMES, create_backend, detect_backend, resolve_credentials

__all__ = [
    'AgentBackend',
    'BACKEND_NAMES',
    'create_backend',
    'detect_backend',
    'resolve_credentials',
]
