"""
Application Configuration Module.

This module loads environment variables (optionally from a `.env` file)
and exposes the configuration constants used throughout the application:
- Logging level
- Batch processing (worker pool size)
- Export formatting (CSV separator, table style, default layout)
- HTTP API (CORS origins)
"""

import os
from dotenv import load_dotenv

load_dotenv()

# ==============================================================================
# LOGGING
# ==============================================================================
LOG_LEVEL = os.getenv("SBOM_LICENSES_LOG_LEVEL", "INFO")

# ==============================================================================
# BATCH PROCESSING
# ==============================================================================

# 1 keeps the single-threaded pass; higher values fan out on a thread pool
MAX_WORKERS = int(os.getenv("SBOM_LICENSES_MAX_WORKERS", "1"))

# ==============================================================================
# EXPORT
# ==============================================================================
CSV_SEPARATOR = os.getenv("SBOM_LICENSES_CSV_SEPARATOR", "; ")
TABLE_FORMAT = os.getenv("SBOM_LICENSES_TABLE_FORMAT", "grid")
DEFAULT_LAYOUT = os.getenv("SBOM_LICENSES_LAYOUT", "package")

# ==============================================================================
# HTTP API
# ==============================================================================
ALLOWED_ORIGINS = [
    origin.strip()
    for origin in os.getenv(
        "SBOM_LICENSES_ALLOWED_ORIGINS",
        "http://localhost:5173,http://127.0.0.1:5173",
    ).split(",")
    if origin.strip()
]
