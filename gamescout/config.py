# ===== CONFIGURATION & CONSTANTS =====
import os

# --- General Settings ---
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()
HOST = os.getenv("HOST", "0.0.0.0")
PORT = int(os.getenv("PORT", "3001"))
REQUEST_TIMEOUT = float(os.getenv("REQUEST_TIMEOUT", "25"))  # seconds, per outbound call
CORS_ALLOW_ORIGIN = os.getenv("CORS_ALLOW_ORIGIN", "*")
DEBUG_MAX_CHARS = 600

# --- Web Scraping & API Headers ---
JSON_HEADERS = {
    'User-Agent': 'Mozilla/5.0',
    'Accept': 'application/json',
}
HTML_HEADERS = {
    'User-Agent': 'Mozilla/5.0',
    'Accept': 'text/html,*/*',
}

# --- Steam Storefront ---
DEFAULT_REGION = os.getenv("DEFAULT_REGION", "ca")
DEFAULT_LANGUAGE = os.getenv("DEFAULT_LANGUAGE", "en")
STEAM_APPDETAILS_URL = "https://store.steampowered.com/api/appdetails"
STEAM_SUGGEST_URL = "https://store.steampowered.com/search/suggest"
STEAM_STORE_APP_URL = "https://store.steampowered.com/app/{identifier}/"

# --- Extraction Service (Yellowcake) ---
YELLOWCAKE_EXTRACT_URL = os.getenv("YELLOWCAKE_EXTRACT_URL", "https://api.yellowcake.dev/v1/extract-stream")
EVENT_STREAM_DATA_PREFIX = "data:"
EXTRACTION_PROMPT = """Extract as JSON with these keys:
- game_title
- current_price
- original_price (if discounted)
- discount_percent
- release_date
- tags
- review_summary"""

# --- Batch Caps ---
COMPARE_CAP = 12
SEARCH_DEFAULT_LIMIT = 10
SEARCH_MAX_LIMIT = 20
ENRICH_DEFAULT_LIMIT = 5
ENRICH_MAX_LIMIT = 10

# --- Deal Scoring ---
# (minimum discount percent, score, verdict), checked top to bottom
DISCOUNT_TIERS = [
    (70, 95, "Amazing deal"),
    (50, 88, "Great deal"),
    (25, 78, "Good deal"),
    (10, 68, "Small discount"),
]
BARELY_ON_SALE_TIER = (60, "Barely on sale")
BUY_NOW_MIN_DISCOUNT = 25
STRONG_BUY_MIN_DISCOUNT = 50
GOOD_TONE_MIN_SCORE = 85
BAD_TONE_MAX_SCORE = 60
