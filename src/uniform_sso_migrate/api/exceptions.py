"""Uniform API exceptions."""


class UniformAPIError(Exception):
    """Base exception for Uniform API errors."""

    pass


class UniformAuthenticationError(UniformAPIError):
    """No usable API key for a request."""

    pass


class UniformConnectionError(UniformAPIError):
    """The request never produced an HTTP response (DNS, refused, timeout)."""

    pass
