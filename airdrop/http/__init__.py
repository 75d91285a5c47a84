"""
HTTP Client Module

HTTP client for dataset downloads and node RPC.
"""

from .client import HttpClient, HttpResponse

__all__ = [
    "HttpClient",
    "HttpResponse",
]
