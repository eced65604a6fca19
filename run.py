#!/usr/bin/env python3
"""Run script for dailyplan."""

import os

import uvicorn

from dailyplan.logging_config import configure_logging

if __name__ == "__main__":
    configure_logging()
    uvicorn.run(
        "dailyplan.api.app:app",
        host=os.getenv("HOST", "127.0.0.1"),
        port=int(os.getenv("PORT", "8000")),
        reload=os.getenv("DEBUG", "False").lower() == "true",
    )
