# ===== IMPORTS & DEPENDENCIES =====
import logging
import os
from aiohttp import web

# --- Configuration ---
from gamescout.config import LOG_LEVEL, HOST, PORT, REQUEST_TIMEOUT

# --- HTTP Surface ---
from gamescout.core.server import create_app

# ===== CONFIGURATION & CONSTANTS =====
logging.basicConfig(
    level=LOG_LEVEL,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
    datefmt='%Y-%m-%d %H:%M:%S'
)
logger = logging.getLogger(__name__)

# Fetch the extraction service key from environment variable
YELLOWCAKE_API_KEY = os.getenv("YELLOWCAKE_API_KEY")

# ===== INITIALIZATION & STARTUP =====
def main():
    """Builds the app and serves it until interrupted."""
    if not YELLOWCAKE_API_KEY:
        logger.warning("YELLOWCAKE_API_KEY is not set. URL analysis and /enrich will fail; identifier paths still work.")

    app = create_app(extraction_api_key=YELLOWCAKE_API_KEY, timeout=REQUEST_TIMEOUT)
    logger.info(f"🚀 GameScout backend starting on http://{HOST}:{PORT}")
    web.run_app(app, host=HOST, port=PORT, print=None)

if __name__ == "__main__":
    main()
