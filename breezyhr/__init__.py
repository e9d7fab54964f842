# breezyhr/__init__.py
import logging

from .client import BreezyApiClient, DEFAULT_URL
from .response import ApiResponse
from .exceptions import BreezyError, TransportError, ApiError, MissingTokenError

logging.getLogger(__name__).addHandler(logging.NullHandler())

__version__ = "0.1.0"
__all__ = [
    "BreezyApiClient",
    "DEFAULT_URL",
    "ApiResponse",
    "BreezyError",
    "TransportError",
    "ApiError",
    "MissingTokenError",
]
