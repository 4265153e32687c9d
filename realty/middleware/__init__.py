"""
Middleware package for the Realty Marketplace API.
"""

from .request_logging import RequestContextMiddleware

__all__ = ["RequestContextMiddleware"]
