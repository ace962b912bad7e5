"""
Uvicorn server runner with configurable logging.

Usage:
    python run.py

Environment variables (set in .env file):
    DEBUG=true - Enable debug logging
    PERSIST=true - Save the workspace to DATA_FILE after every change
    PORT=8000 - Set server port (default: 8000)
    HOST=127.0.0.1 - Set server host (default: 127.0.0.1)
"""

import uvicorn
from parley.config import get_settings

if __name__ == "__main__":
    import os

    settings = get_settings()

    host = os.getenv("HOST", "127.0.0.1")
    port = int(os.getenv("PORT", "8000"))

    log_level = "debug" if settings.debug else "info"

    print(f"Starting {settings.app_name} server...")
    print(f"Host: {host}")
    print(f"Port: {port}")
    print(f"Persistence: {settings.data_file if settings.persist else 'off'}")
    print(f"Docs available at: http://{host}:{port}/docs")

    # Single process: the workspace and its timers live in memory
    uvicorn.run(
        "parley.main:app",
        host=host,
        port=port,
        log_level=log_level,
        access_log=True,
    )
