"""Domain interfaces for dependency inversion.

The flow controller depends only on these abstractions; concrete gateways and
stores live in the infrastructure package and are injected at construction.
"""

from .auth_gateway import IAuthGateway
from .session import ISessionHost
from .storage import IProfileCache, ITokenVault

__all__ = ["IAuthGateway", "ISessionHost", "IProfileCache", "ITokenVault"]
