"""Google Gemini client implementation using the google-genai SDK.

Every tool talks to Gemini through a single operation: send one prompt,
read back the text of the first candidate.

Supported models:
- gemini-2.0-flash (default)
- gemini-2.5-flash
- gemini-2.5-pro
"""

from typing import Any

from google import genai
from google.genai import types
from google.genai.errors import APIError, ClientError, ServerError

from ..config import GenerationConfig
from ..exceptions import (
    AuthenticationError,
    InvalidResponseError,
    ProviderUnavailableError,
    RateLimitError,
)
from ..logging import get_logger
from .base import BaseLLMClient

logger = get_logger(__name__)

# supported configuration keys for google
SUPPORTED_CONFIG_KEYS = {
    "temperature",
    "top_p",
    "top_k",
    "max_output_tokens",
}


class GoogleClient(BaseLLMClient):
    """Google Gemini API client."""

    def __init__(
        self,
        api_key: str,
        model: str = "gemini-2.0-flash",
        client_config: dict | None = None,
    ):
        """Initialize the Google client.

        Args:
            api_key: Gemini API key.
            model: Model to use. Defaults to gemini-2.0-flash.
            client_config: Optional generation parameters:
                - temperature: float
                - top_p: float
                - top_k: int
                - max_output_tokens: int
        """
        super().__init__(client_config)

        if not api_key:
            raise ValueError("Gemini API key is required.")

        self.client = genai.Client(api_key=api_key)
        self.model_name = model
        self._validate_config()

    @classmethod
    def from_generation_config(
        cls, api_key: str, model: str, generation: GenerationConfig
    ) -> "GoogleClient":
        """Create a client from the server's generation settings."""
        return cls(
            api_key=api_key,
            model=model,
            client_config={
                "temperature": generation.temperature,
                "top_p": generation.top_p,
                "top_k": generation.top_k,
                "max_output_tokens": generation.max_output_tokens,
            },
        )

    def _validate_config(self) -> None:
        """Validate the client configuration."""
        if not self.client_config:
            return

        unsupported = set(self.client_config.keys()) - SUPPORTED_CONFIG_KEYS
        if unsupported:
            raise ValueError(f"Unsupported config keys for Google: {unsupported}")

    def generate_content(self, prompt: str) -> str:
        """Generate a response from Google Gemini."""
        config = self._build_generation_config()
        logger.debug(f"sending {len(prompt)} char prompt to {self.model_name}")

        try:
            response = self.client.models.generate_content(
                model=self.model_name,
                contents=prompt,
                config=config,
            )
        except ClientError as e:
            error_msg = str(e).lower()
            if "unauthorized" in error_msg or "authentication" in error_msg or "api key" in error_msg:
                raise AuthenticationError(f"Google authentication failed: {e}") from e
            if getattr(e, "code", None) == 429 or "quota" in error_msg or "exhausted" in error_msg:
                raise RateLimitError("Google rate limit exceeded") from e
            raise InvalidResponseError(f"Invalid request to Google API: {e}") from e
        except ServerError as e:
            raise ProviderUnavailableError(f"Google API unavailable: {e}") from e
        except APIError as e:
            raise InvalidResponseError(f"Google API error: {e}") from e

        return self._parse_response(response)

    def _build_generation_config(self) -> types.GenerateContentConfig:
        """Build the generation config from client configuration."""
        cfg = self.client_config or {}
        config_kwargs: dict[str, Any] = {}

        if "temperature" in cfg:
            config_kwargs["temperature"] = cfg["temperature"]
        if "top_p" in cfg:
            config_kwargs["top_p"] = cfg["top_p"]
        if "top_k" in cfg:
            config_kwargs["top_k"] = cfg["top_k"]
        if "max_output_tokens" in cfg:
            config_kwargs["max_output_tokens"] = cfg["max_output_tokens"]

        return types.GenerateContentConfig(**config_kwargs)

    def _parse_response(self, response: Any) -> str:
        """Join the text parts of the first candidate, skipping thoughts."""
        try:
            candidate = response.candidates[0]
            parts = candidate.content.parts or []
        except (AttributeError, IndexError, TypeError) as e:
            raise InvalidResponseError(f"Failed to parse Google response: {e}") from e

        text = "".join(
            part.text for part in parts
            if getattr(part, "text", None) and not getattr(part, "thought", False)
        )
        if not text:
            reason = getattr(candidate, "finish_reason", None)
            raise InvalidResponseError(f"Google response contained no text (finish reason: {reason})")
        return text
