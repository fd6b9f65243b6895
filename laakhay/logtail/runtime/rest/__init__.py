"""Runtime REST helpers."""

from .authorizer import SessionAuthorizer
from .http import HTTPClient, HTTPError

__all__ = ["HTTPClient", "HTTPError", "SessionAuthorizer"]
