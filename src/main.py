from __future__ import annotations

# Entrypoint module for ASGI servers: `uvicorn src.main:app`
# Also runnable directly with `python -m src.main`.
import logging

from src.api.routes import app
from src.core.config import HOST, LOG_LEVEL, get_port


def configure_logging(level: str = LOG_LEVEL) -> None:
    logging.basicConfig(
        level=getattr(logging, level, logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


def run() -> None:
    import uvicorn

    configure_logging()
    uvicorn.run(app, host=HOST, port=get_port(), log_level=LOG_LEVEL.lower())


if __name__ == "__main__":
    run()

__all__ = ["app", "configure_logging", "run"]
