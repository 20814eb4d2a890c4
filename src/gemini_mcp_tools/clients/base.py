"""Base class for generative-language clients.

Tools only depend on ``generate_content``: one prompt in, one text out.
Provider specific request building and error mapping stay inside each
client implementation.
"""

from abc import ABC, abstractmethod
from typing import Any


class BaseLLMClient(ABC):
    """Abstract base class for all generative-language clients."""

    def __init__(self, client_config: dict | None = None):
        """Initialize the client.
        Args:
            client_config: Optional dictionary of configuration parameters
                           (e.g. temperature, max_output_tokens, etc.)
        """
        self.client_config = client_config or {}

    @abstractmethod
    def generate_content(self, prompt: str) -> str:
        """Generate text for a single prompt.

        Args:
            prompt: The full prompt text

        Returns:
            The generated text

        Raises:
            ExternalServiceError: If the provider call fails
        """

    @abstractmethod
    def _parse_response(self, response: Any) -> str:
        """Extract the generated text from a raw provider response."""
