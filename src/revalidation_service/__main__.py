"""Entrypoint: python -m revalidation_service"""
from __future__ import annotations

import uvicorn

from revalidation_service.logging_config import configure_logging


def main() -> None:
    configure_logging()
    uvicorn.run(
        "revalidation_service.app:create_app",
        factory=True,
        host="0.0.0.0",
        port=8000,
        log_level="info",
        log_config=None,
    )


if __name__ == "__main__":
    main()
