"""Main entry point for the Nicodemos assistant service."""

import asyncio
import logging
import sys

from dotenv import load_dotenv

from nicodemos.config import get_settings
from nicodemos.deliberation import DeliberationOrchestrator
from nicodemos.errors import ConfigurationError
from nicodemos.query import QueryProcessor
from nicodemos.web_server import WebServer

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
    logger.info(f"Starting Nicodemos assistant in {settings.environment.value} mode")

    # Validate configuration
    try:
        processor = QueryProcessor.from_settings(settings)
    except ConfigurationError as e:
        logger.error(f"Configuration error: {e}")
        sys.exit(1)

    try:
        orchestrator = DeliberationOrchestrator.from_settings(settings)
        logger.info(f"Deliberation enabled with provider: {settings.deliberation_provider.value}")
    except ConfigurationError as e:
        logger.warning(f"Deliberation disabled: {e}")
        orchestrator = None

    web_server = WebServer(processor, orchestrator, host=settings.host, port=settings.port)
    runner = await web_server.start()

    try:
        await asyncio.Event().wait()
    finally:
        logger.info("Shutting down...")
        await web_server.stop(runner)


def run() -> None:
    try:
        asyncio.run(main())
    except KeyboardInterrupt:
        pass


if __name__ == "__main__":
    run()
