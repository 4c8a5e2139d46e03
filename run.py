#!/usr/bin/env python3
"""Run script for recurwidget."""

import uvicorn

from recurwidget.config import configure_logging, get_server_options

if __name__ == "__main__":
    configure_logging()
    uvicorn.run(
        "recurwidget.api.app:app",
        reload=True,
        **get_server_options()
    )
