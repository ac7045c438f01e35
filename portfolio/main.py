"""
Portfolio backend - main entry point.

    portfolio-api              # run with settings from the environment / .env
    uvicorn portfolio.main:app
"""

from __future__ import annotations

import uvicorn

from portfolio.api.app import create_app
from portfolio.config import get_settings

app = create_app()


def main():
    """Main entry point."""
    settings = get_settings()
    uvicorn.run(
        "portfolio.main:app",
        host=settings.api_host,
        port=settings.api_port,
        reload=settings.debug and not settings.is_production,
        log_level=settings.log_level.lower(),
    )


if __name__ == "__main__":
    main()
