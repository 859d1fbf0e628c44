"""Auth0 directory adapter."""

from .client import Auth0Directory, RealAuth0Directory
from .inmemory import InMemoryAuth0Directory

__all__ = ["Auth0Directory", "RealAuth0Directory", "InMemoryAuth0Directory"]
