"""Infrastructure services implementing the domain gateway interface."""

from .http_auth_gateway import HttpAuthGateway

__all__ = ["HttpAuthGateway"]
