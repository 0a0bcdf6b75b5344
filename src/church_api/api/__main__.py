"""
church_api.api.__main__

`python -m church_api.api` runs the API under uvicorn.
"""

from __future__ import annotations

import uvicorn

from church_api.api.app import create_app
from church_api.settings import get_settings


def main() -> None:
    settings = get_settings()
    # Fails fast on a missing signing secret before binding the port.
    app = create_app(settings=settings)
    uvicorn.run(
        app,
        host=settings.api_host,
        port=settings.api_port,
        log_level=settings.log_level.lower(),
        log_config=None,
        proxy_headers=True,
    )


if __name__ == "__main__":
    main()
