# ---
# File: monitor_editor/config.py
# Purpose: Environment configuration and logging setup for the monitor editor
# ---

import logging
import os

# ---
# Monitors API Configuration
# ---
# Configuration via Environment Variables:
#   - MONITOR_API_BASE_URL: Base URL of the monitors API (default: http://localhost:8000)
#   - MONITOR_API_TIMEOUT_SECONDS: HTTP request timeout (default: 10 seconds)
#   - LOG_LEVEL: Root log level name (default: INFO)
# ---
MONITOR_API_BASE_URL = os.environ.get("MONITOR_API_BASE_URL", "http://localhost:8000").strip().rstrip("/")
MONITOR_API_TIMEOUT_SECONDS = float(os.environ.get("MONITOR_API_TIMEOUT_SECONDS", "10"))
LOG_LEVEL = os.environ.get("LOG_LEVEL", "INFO").strip().upper()


def configure_logging(level: str = LOG_LEVEL) -> None:
    logging.basicConfig(
        level=getattr(logging, level, logging.INFO),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )
