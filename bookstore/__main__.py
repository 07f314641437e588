"""Run the API with uvicorn: ``python -m bookstore``."""

import logging

import uvicorn

from .settings import get_settings


def configure_logging(level: str) -> None:
    """Set up root logging once for the server process."""
    logging.basicConfig(
        level=level.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    logging.getLogger("bookstore").setLevel(level.upper())


def main() -> None:
    settings = get_settings()
    configure_logging(settings.log_level)
    uvicorn.run(
        "bookstore.main:app",
        host=settings.host,
        port=settings.port,
        log_level=settings.log_level.lower(),
    )


if __name__ == "__main__":
    main()
