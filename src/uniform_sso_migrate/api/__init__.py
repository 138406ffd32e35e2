"""Uniform API client."""

from .client import (
    APIResponse,
    UniformClient,
    UniformClientFactory,
    projects_to_invites,
)
from .exceptions import (
    UniformAPIError,
    UniformAuthenticationError,
    UniformConnectionError,
)

__all__ = [
    'APIResponse',
    'UniformClient',
    'UniformClientFactory',
    'projects_to_invites',
    'UniformAPIError',
    'UniformAuthenticationError',
    'UniformConnectionError',
]
