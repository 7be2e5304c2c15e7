"""
Storefront API - main entry point.

    python -m storefront.main
"""

from __future__ import annotations

import uvicorn

from storefront.config import get_settings


def main() -> None:
    settings = get_settings()
    uvicorn.run(
        "storefront.api.app:create_app",
        factory=True,
        host=settings.api_host,
        port=settings.api_port,
        reload=settings.debug and not settings.is_production,
        log_level=settings.log_level.lower(),
    )


if __name__ == "__main__":
    main()
