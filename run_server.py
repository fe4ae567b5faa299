"""Convenience script for running the Content Extract API locally."""

from __future__ import annotations

import logging
import sys
from pathlib import Path

import uvicorn

# Ensure the src directory is on the Python path so the contentextract package can be imported
SRC_PATH = Path(__file__).resolve().parent / "src"
if str(SRC_PATH) not in sys.path:
    sys.path.insert(0, str(SRC_PATH))

from contentextract.api.app import create_app  # noqa: E402  (import after path setup)
from contentextract.config import ServiceConfig  # noqa: E402


def main() -> None:
    """Load configuration from the environment and serve the API."""

    logging.basicConfig(level=logging.INFO, format="%(levelname)s: %(message)s")

    try:
        config = ServiceConfig.from_env()
    except ValueError as exc:
        logging.error("%s", exc)
        sys.exit(1)

    if config.api_token is None:
        logging.warning("HUGGINGFACE_API_KEY is not set; summarization requests will be unauthenticated")

    logging.info("Server running on port %d", config.port)
    uvicorn.run(create_app(config), host="0.0.0.0", port=config.port, log_level="info")


if __name__ == "__main__":
    main()
