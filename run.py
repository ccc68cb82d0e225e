#!/usr/bin/env python3
"""
Ledger Service Entry Point

Starts the FastAPI server with the double-entry ledger API.
"""

import sys

import uvicorn

from ledger_core.config import get_config
from ledger_core.logging_config import setup_logging


def main() -> None:
    config = get_config()
    logger = setup_logging(config.log_level, "ledger", config.log_format)
    logger.info(
        "Starting ledger API on %s:%d (default currency %s)",
        config.api_host, config.api_port, config.default_currency
    )

    try:
        uvicorn.run(
            "ledger_core.api:app",
            host=config.api_host,
            port=config.api_port,
            workers=config.api_workers,
            log_level=config.log_level.lower()
        )
    except KeyboardInterrupt:
        logger.info("Shutting down ledger API")
    except Exception:
        logger.exception("Error starting server")
        sys.exit(1)


if __name__ == "__main__":
    main()
