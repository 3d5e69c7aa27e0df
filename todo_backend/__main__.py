import logging

import uvicorn

from todo_backend.config import Settings, configure_logging, resolve_log_level
from todo_backend.main import create_app

logger = logging.getLogger("todo_backend")


def run() -> None:
    settings = Settings.from_env()
    configure_logging(settings.log_level)
    app = create_app(settings)
    logger.info("Server is running on http://localhost:%s", settings.port)
    uvicorn.run(
        app,
        host=settings.host,
        port=settings.port,
        log_level=resolve_log_level(settings.log_level).lower(),
    )


if __name__ == "__main__":
    run()
