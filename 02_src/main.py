"""Main entry point for nestbot."""

import os
from pathlib import Path

import uvicorn
from dotenv import load_dotenv

from nestbot.api import create_fastapi_app
from nestbot.app import Application
from nestbot.config import Settings
from nestbot.logging_config import setup_logging
from sim import Sim


def main():
    """Run the application."""
    project_root = Path(__file__).resolve().parent.parent
    load_dotenv(project_root / ".env")
    setup_logging()

    api_host = os.getenv("API_HOST", "localhost")
    api_port = int(os.getenv("API_PORT", "3000"))
    api_url = f"http://{api_host}:{api_port}"

    # Missing credentials stop the process here
    settings = Settings.from_env()

    from nestbot.api.routes import control
    control.set_sim_instance(Sim(api_url=api_url, app_secret=settings.app_secret))

    app = create_fastapi_app(Application(settings=settings))

    uvicorn.run(
        app,
        host=api_host,
        port=api_port,
        log_config=None,
    )


if __name__ == "__main__":
    main()
