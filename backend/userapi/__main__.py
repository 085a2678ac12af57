"""
Start the user backend.

Usage:
    python -m userapi

Or with uvicorn directly:
    uvicorn userapi.main:app --host 0.0.0.0 --port 4000 --reload
"""

import uvicorn

from userapi.core.config import settings


def main():
    debug = settings.app_env == "dev"
    uvicorn.run(
        "userapi.main:app",
        host=settings.host,
        port=settings.port,
        reload=debug,
        log_level="info" if debug else "warning",
    )


if __name__ == "__main__":
    main()
