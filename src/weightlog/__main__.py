"""weightlog entrypoint.

Run with:
  python -m weightlog
"""

import logging

import uvicorn

from weightlog.config import load_settings


def main() -> None:
    settings = load_settings()
    logging.basicConfig(
        level=settings.log_level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    uvicorn.run(
        "weightlog.app:create_app",
        factory=True,
        host=settings.host,
        port=settings.port,
        reload=settings.reload,
    )

if __name__ == "__main__":
    main()
