#!/usr/bin/env python3
"""
Backend server launcher script.

Configures logging from settings and starts the uvicorn server.
"""

import logging
import os

from epoxymix.settings import AppSettings


def main() -> None:
    import uvicorn

    config = AppSettings.get_config()
    logging.basicConfig(
        level=config.log_level,
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )
    uvicorn.run(
        "epoxymix.api:app",
        host=os.environ.get("EPOXYMIX_HOST", "127.0.0.1"),
        port=int(os.environ.get("EPOXYMIX_PORT", "8000")),
        log_level=config.log_level.lower(),
    )


if __name__ == "__main__":
    main()
