"""HTTP middleware."""

from .cors import CORSHeadersMiddleware

__all__ = ["CORSHeadersMiddleware"]
