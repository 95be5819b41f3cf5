"""Main entry point for the Qaku cache node."""

from pathlib import Path

import uvicorn
from dotenv import load_dotenv

from qaku_cache.api import create_fastapi_app
from qaku_cache.app import Application
from qaku_cache.config import Settings
from qaku_cache.logging_config import setup_logging
from qaku_cache.metrics import start_metrics_server


def main():
    """Run the cache node."""
    load_dotenv(Path.cwd() / ".env")
    setup_logging()

    settings = Settings.from_env()
    application = Application(settings=settings)
    start_metrics_server(settings.metrics_port, application.registry)

    app = create_fastapi_app(application)

    # Run with uvicorn
    uvicorn.run(
        app,
        host=settings.api_host,
        port=settings.api_port,
        log_config=None,
    )


if __name__ == "__main__":
    main()
