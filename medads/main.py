"""Main entry point for the medical sponsor pipeline service."""

import asyncio
import logging
import sys

from dotenv import load_dotenv

from medads.config import get_settings
from medads.query import ServiceContainer
from medads.web_server import WebServer

# Load environment variables
load_dotenv()

logger = logging.getLogger(__name__)


async def main() -> None:
    """Main application entry point."""
    settings = get_settings()

    logging.basicConfig(
        level=settings.log_level.upper(),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )
    logger.info(f"Starting medical sponsor pipeline in {settings.environment.value} mode")
    logger.info(f"Using LLM provider: {settings.llm_provider.value}")

    # Validate configuration
    try:
        settings.validate_provider_config()
        container = ServiceContainer.from_settings(settings)
    except ValueError as e:
        logger.error(f"Configuration error: {e}")
        sys.exit(1)

    web_server = WebServer(container, host=settings.host, port=settings.port)
    web_runner = await web_server.start()

    try:
        # Keep web server running
        await asyncio.Event().wait()
    finally:
        logger.info("Shutting down...")
        await web_server.stop(web_runner)


def run() -> None:
    """Console script entry point."""
    try:
        asyncio.run(main())
    except KeyboardInterrupt:
        pass


if __name__ == "__main__":
    run()
