import base64
import sys
from pathlib import Path

from dotenv import load_dotenv

# Import the necessary components
from gemini_mcp_tools.config import ServerConfig, get_settings, load_yaml_config
from gemini_mcp_tools.exceptions import ConfigurationError, ToolServerError
from gemini_mcp_tools.logging import setup_logging
from gemini_mcp_tools.main import build_dispatcher

# Load environment variables (API key, SMTP login)
load_dotenv()


def main():
    setup_logging("INFO")

    # 1. Build the configuration the same way the server does
    config = ServerConfig.from_sources(get_settings(), load_yaml_config())

    # 2. Build the dispatcher; this creates the Gemini client
    try:
        dispatcher = build_dispatcher(config)
    except ConfigurationError as e:
        print(e)
        return

    print("Available tools:", ", ".join(t["name"] for t in dispatcher.list_tools()))

    # 3. Call a tool directly, without an MCP host
    result = dispatcher.dispatch("generate-thinking", {
        "prompt": "Explain how a histogram's bin count affects what it shows",
    })
    print(result.text)

    # 4. Analyze a local CSV file if one is given
    if len(sys.argv) > 1:
        path = Path(sys.argv[1])
        try:
            result = dispatcher.dispatch("analyze-data", {
                "fileData": base64.b64encode(path.read_bytes()).decode("ascii"),
                "fileName": path.name,
                "analysisType": "basic",
            })
        except ToolServerError as e:
            print(f"Analysis failed: {e}")
            return
        print(result.text)


if __name__ == "__main__":
    main()
