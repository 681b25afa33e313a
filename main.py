#!/usr/bin/env python3
"""
LottoLens FastAPI Application Entrypoint

The analysis routes live in lottolens/api_analysis_endpoints.py.
Reads HOST, PORT, LOG_LEVEL from environment (loaded from .env when available).
"""
import os
import sys

# Load environment variables from .env if available
try:
    from dotenv import load_dotenv  # type: ignore
    load_dotenv()
except ImportError:
    # dotenv is optional; proceed if not installed
    pass

from loguru import logger

log_level = os.getenv("LOG_LEVEL", "info").lower()
# Uvicorn supported levels: critical, error, warning, info, debug, trace
if log_level not in {"critical", "error", "warning", "info", "debug", "trace"}:
    log_level = "info"

logger.remove()
logger.add(sys.stderr, level=log_level.upper())

from lottolens.api import app

if __name__ == "__main__":
    import uvicorn

    host = os.getenv("HOST", "0.0.0.0")

    port_str = os.getenv("PORT", "8000")
    try:
        port = int(port_str)
    except ValueError:
        port = 8000

    uvicorn.run(app, host=host, port=port, log_level=log_level)
