"""Free-form generation tool: prompt in, rendered answer out."""

from pathlib import Path
from typing import Any

from ..clients.base import BaseLLMClient
from ..logging import get_logger
from . import templates
from .base import BaseTool, ensure_dir, timestamp_ms
from .markdown import render_markdown
from .validation import GenerateThinkingArgs

logger = get_logger(__name__)


class GenerateThinkingTool(BaseTool):
    """Send a prompt to Gemini, save the answer and return it as HTML."""

    ARGUMENTS = GenerateThinkingArgs

    def __init__(self, client: BaseLLMClient):
        self.client = client

    @property
    def name(self) -> str:
        return "generate-thinking"

    @property
    def description(self) -> str:
        return "Generate detailed thinking process text using Gemini Flash 2 model"

    @property
    def parameters(self) -> dict[str, Any]:
        return {
            "type": "object",
            "properties": {
                "prompt": {
                    "type": "string",
                    "description": "Prompt for generating thinking process text",
                },
                "outputDir": {
                    "type": "string",
                    "description": "Directory to save output responses (optional)",
                },
            },
            "required": ["prompt"],
        }

    def execute(self, arguments: GenerateThinkingArgs) -> str:
        save_dir = ensure_dir(arguments.output_dir)

        logger.info(f'sending prompt to Gemini: "{arguments.prompt[:80]}"')
        response_text = self.client.generate_content(arguments.prompt)
        logger.info(f"received response from Gemini ({len(response_text)} chars)")

        file_path = Path(save_dir) / f"gemini_thinking_{timestamp_ms()}.txt"
        file_path.write_text(response_text, encoding="utf-8")
        logger.info(f"saved response to: {file_path}")

        return templates.thinking_response(
            arguments.prompt, render_markdown(response_text), file_path
        )
