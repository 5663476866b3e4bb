"""Application entry point for the Tablebase server."""

import structlog

from tablebase.app import App
from tablebase.config import Config
from tablebase.logging import setup_logging
from tablebase.web.runner import run_server

logger = structlog.get_logger(__name__)


def main() -> None:
    """Run the API server configured from TABLEBASE_* environment variables."""
    config = Config()
    setup_logging(config.debug)
    logger.info(
        "starting_server",
        host=config.host,
        port=config.port,
        enrichment_max_depth=config.enrichment_max_depth,
        max_page_limit=config.max_page_limit,
    )
    run_server(App(config), config)


if __name__ == "__main__":
    main()
