"""Application entry point for the scan-to-Gantt API server."""

import argparse
from pathlib import Path

import uvicorn

from ocr_gantt.api.app import app
from ocr_gantt.utils.config import load_config
from ocr_gantt.utils.logger import get_logger, setup_logging

logger = get_logger(__name__)


def main(argv: list[str] | None = None) -> None:
    """Start the FastAPI application server.

    Host and port come from the ``server`` config section unless overridden
    on the command line.
    """
    parser = argparse.ArgumentParser(description="Scan-to-Gantt API server")
    parser.add_argument("-c", "--config", type=Path, default=None, help="Config YAML file")
    parser.add_argument("--host", default=None, help="Bind address")
    parser.add_argument("--port", type=int, default=None, help="Listen port")
    args = parser.parse_args(argv)

    config = load_config(args.config)
    setup_logging(config.log_level)
    host = args.host or config.server.host
    port = args.port or config.server.port
    logger.info("Serving on %s:%d", host, port)
    uvicorn.run(app, host=host, port=port)


if __name__ == "__main__":
    main()
