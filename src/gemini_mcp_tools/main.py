"""Main entry point for the tool server CLI.

Loads configuration, builds the Gemini client and the tools once, then
serves MCP over stdio until the host disconnects.
"""

import argparse
import asyncio
import sys

from .clients.base import BaseLLMClient
from .clients.google import GoogleClient
from .config import ServerConfig, get_settings, load_yaml_config
from .core.dispatcher import ToolDispatcher
from .exceptions import ConfigurationError
from .logging import get_logger, setup_logging
from .mail import MailTransport
from .server import create_server, run_stdio
from .tools import get_default_tools
from .tools.base import ensure_dir
from .tools.validation import RequestValidator

logger = get_logger(__name__)


def build_dispatcher(
    config: ServerConfig,
    client: BaseLLMClient | None = None,
    transport: MailTransport | None = None,
) -> ToolDispatcher:
    """Wire the client, tools and validator together.

    Args:
        config: Server configuration
        client: Generative-language client; a GoogleClient is created if omitted
        transport: Mail transport; SMTP is used if omitted

    Raises:
        ConfigurationError: If no client is given and the API key is missing
    """
    if client is None:
        client = GoogleClient.from_generation_config(
            config.require_api_key(), config.model, config.generation
        )
    tools = get_default_tools(client, config, transport)
    return ToolDispatcher(tools, RequestValidator(config.default_output_dir))


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="MCP tool server exposing Gemini generation, email and data analysis tools"
    )
    parser.add_argument(
        "--log-level",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Log level (also settable via GEMINI_TOOLS_LOG_LEVEL env var)"
    )
    parser.add_argument(
        "--output-dir",
        help="Default directory for generated files (default: ./output)"
    )
    parser.add_argument(
        "--model",
        help="Gemini model to use (overrides config)"
    )
    parser.add_argument(
        "--config",
        default="config.yaml",
        help="Path to an optional yaml config file (default: config.yaml)"
    )
    return parser.parse_args(argv)


def main(argv: list[str] | None = None) -> None:
    """Main entry point for the tool server."""
    args = parse_args(argv)
    settings = get_settings()
    setup_logging(args.log_level or settings.log_level)

    config = ServerConfig.from_sources(
        settings,
        load_yaml_config(args.config),
        {"output_dir": args.output_dir, "model": args.model},
    )

    try:
        dispatcher = build_dispatcher(config)
    except ConfigurationError as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)

    ensure_dir(config.default_output_dir)
    if config.mail_credentials is None:
        logger.warning("SMTP credentials not set, send-email calls will fail")

    try:
        asyncio.run(run_stdio(create_server(dispatcher)))
    except KeyboardInterrupt:
        pass
    except Exception as e:
        logger.error(f"fatal error in main(): {e}")
        sys.exit(1)


if __name__ == "__main__":
    main()
