"""Main entry point for the scene RPC host."""

import os
from pathlib import Path

import uvicorn
from dotenv import load_dotenv

from scenecore.api import create_fastapi_app
from scenecore.config import set_current_project
from scenecore.logging_config import setup_logging


def main():
    """Run the application."""
    project_root = Path(__file__).resolve().parent.parent
    load_dotenv(project_root / ".env")
    setup_logging()
    set_current_project(os.getenv("SCENE_PROJECT", ""))

    # Get configuration from environment
    api_host = os.getenv("API_HOST", "localhost")
    api_port = int(os.getenv("API_PORT", "8000"))

    app = create_fastapi_app()

    uvicorn.run(
        app,
        host=api_host,
        port=api_port,
        log_level="info",
    )


if __name__ == "__main__":
    main()
