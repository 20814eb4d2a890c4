"""Generative-language client implementations.

All clients implement the BaseLLMClient interface.
"""

from .base import BaseLLMClient
from .google import GoogleClient

__all__ = [
    "BaseLLMClient",
    "GoogleClient",
]
