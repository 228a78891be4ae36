# ===== IMPORTS & DEPENDENCIES =====
import logging
import re
import aiohttp
from typing import Optional, Dict, Any, List, Tuple
from urllib.parse import urlencode
from bs4 import BeautifulSoup

from gamescout.core.base_client import BaseWebClient
from gamescout.core.errors import InvalidInput, NoDataError
from gamescout.models.game import GameRecord, SearchResult
from gamescout.config import (
    STEAM_APPDETAILS_URL, STEAM_SUGGEST_URL, STEAM_STORE_APP_URL,
    DEFAULT_REGION, DEFAULT_LANGUAGE, JSON_HEADERS, HTML_HEADERS,
    REQUEST_TIMEOUT, SEARCH_DEFAULT_LIMIT, SEARCH_MAX_LIMIT
)

# ===== CONFIGURATION & CONSTANTS =====
logger = logging.getLogger(__name__)

_IDENTIFIER_RE = re.compile(r'^\d+$')

# ===== UTILITY FUNCTIONS =====
def normalize_identifier(identifier: Any) -> str:
    """Returns the identifier as a digit string, or raises InvalidInput."""
    if isinstance(identifier, bool):
        raise InvalidInput("Identifier must be numeric", debug=repr(identifier))
    text = str(identifier).strip() if identifier is not None else ""
    if not _IDENTIFIER_RE.match(text):
        raise InvalidInput("Identifier must be numeric", debug=repr(identifier))
    return text


def app_details_params(identifier: str, region: str = DEFAULT_REGION, language: str = DEFAULT_LANGUAGE) -> Dict[str, str]:
    return {'appids': identifier, 'cc': region, 'l': language}


def suggest_params(query: str, region: str = DEFAULT_REGION, language: str = DEFAULT_LANGUAGE) -> Dict[str, str]:
    return {'term': query, 'f': 'games', 'cc': region, 'l': language, 'realm': '1'}


def build_app_details_url(identifier: str, region: str = DEFAULT_REGION, language: str = DEFAULT_LANGUAGE) -> str:
    return f"{STEAM_APPDETAILS_URL}?{urlencode(app_details_params(identifier, region, language))}"


def build_suggest_url(query: str, region: str = DEFAULT_REGION, language: str = DEFAULT_LANGUAGE) -> str:
    return f"{STEAM_SUGGEST_URL}?{urlencode(suggest_params(query, region, language))}"


def store_url_for(identifier: str) -> str:
    return STEAM_STORE_APP_URL.format(identifier=identifier)


def clamp_search_limit(limit: Any) -> int:
    """Caps a requested result count to [1, SEARCH_MAX_LIMIT]; missing or junk means the default."""
    try:
        requested = int(limit) if limit is not None else SEARCH_DEFAULT_LIMIT
    except (TypeError, ValueError):
        requested = SEARCH_DEFAULT_LIMIT
    return min(max(1, requested), SEARCH_MAX_LIMIT)


def _cents_to_amount(value: Any) -> Optional[float]:
    if value is None:
        return None
    try:
        return float(value) / 100
    except (TypeError, ValueError):
        return None


def _as_discount(value: Any) -> Optional[float]:
    if value is None:
        return None
    try:
        return float(value)
    except (TypeError, ValueError):
        return None


def parse_app_details(identifier: str, response_data: Any) -> GameRecord:
    """
    Parses an appdetails response into a GameRecord.
    Raises NoDataError when the entry for `identifier` is missing or unsuccessful.
    """
    root = response_data.get(identifier) if isinstance(response_data, dict) else None
    if not isinstance(root, dict) or not root.get('success'):
        raise NoDataError("Storefront returned no data for this identifier.", debug=f"identifier={identifier}")

    details = root.get('data')
    if details is None:
        details = {}
    elif not isinstance(details, dict):
        raise NoDataError("Storefront returned malformed data for this identifier.",
                          debug=f"identifier={identifier} data={type(details).__name__}")

    release_block = details.get('release_date')
    release_date = release_block.get('date') if isinstance(release_block, dict) else None
    # Genres stand in for user tags; appdetails does not expose the tag cloud.
    tags = tuple(
        genre['description'] for genre in details.get('genres') or []
        if isinstance(genre, dict) and genre.get('description')
    )

    current_price = original_price = discount_percent = None
    price_overview = details.get('price_overview')
    if not isinstance(price_overview, dict):
        price_overview = None
    if details.get('is_free') is True:
        current_price = 0.0
        if price_overview:
            original_price = _cents_to_amount(price_overview.get('initial'))
            discount_percent = _as_discount(price_overview.get('discount_percent'))
    elif price_overview:
        current_price = _cents_to_amount(price_overview.get('final'))
        original_price = _cents_to_amount(price_overview.get('initial'))
        discount_percent = _as_discount(price_overview.get('discount_percent'))

    return GameRecord(
        title=details.get('name'),
        current_price=current_price,
        original_price=original_price,
        discount_percent=discount_percent,
        release_date=release_date or None,
        tags=tags,
        review_summary=None,
    )


def parse_suggest_html(html_content: str, limit: int = SEARCH_DEFAULT_LIMIT) -> List[SearchResult]:
    """
    Extracts (identifier, title) rows from the storefront suggestion markup.
    Best effort: rows without a numeric identifier or a name are skipped.
    """
    if not html_content:
        return []

    soup = BeautifulSoup(html_content, 'html.parser')
    results: List[SearchResult] = []
    for row in soup.select('[data-ds-appid]'):
        if len(results) >= limit:
            break
        identifier = (row.get('data-ds-appid') or '').strip()
        name_tag = row.select_one('.match_name')
        if not _IDENTIFIER_RE.match(identifier) or name_tag is None:
            logger.debug(f"[parse_suggest_html] Skipping row with appid={identifier!r}")
            continue
        title = " ".join(name_tag.get_text().split())
        if not title:
            continue
        results.append(SearchResult(identifier=identifier, title=title, store_url=store_url_for(identifier)))
    return results

# ===== CORE BUSINESS LOGIC =====
class SteamStoreSource(BaseWebClient):
    """Resolves games through the Steam storefront: the appdetails JSON API and the search suggestion HTML."""

    def __init__(self, session: aiohttp.ClientSession, timeout: float = REQUEST_TIMEOUT):
        super().__init__(session=session, timeout=timeout)

    async def fetch_app_details(
        self,
        identifier: Any,
        region: str = DEFAULT_REGION,
        language: str = DEFAULT_LANGUAGE
    ) -> Tuple[GameRecord, str]:
        """Fetches one title by identifier. Returns the record and the URL it came from."""
        app_id = normalize_identifier(identifier)
        params = app_details_params(app_id, region, language)
        api_url = build_app_details_url(app_id, region, language)

        response_data = await self._fetch(STEAM_APPDETAILS_URL, is_json=True, headers=JSON_HEADERS, params=params)
        game = parse_app_details(app_id, response_data)
        logger.info(f"✅ [{self.__class__.__name__}] Resolved App ID {app_id}: '{game.title}'")
        return game, api_url

    async def search(
        self,
        query: str,
        limit: Any = SEARCH_DEFAULT_LIMIT,
        region: str = DEFAULT_REGION,
        language: str = DEFAULT_LANGUAGE
    ) -> Tuple[List[SearchResult], str]:
        """Runs a free-text suggestion search. Returns the results and the URL queried."""
        cap = clamp_search_limit(limit)
        params = suggest_params(query.strip(), region, language)
        search_url = build_suggest_url(query.strip(), region, language)

        html_content = await self._fetch(STEAM_SUGGEST_URL, is_json=False, headers=HTML_HEADERS, params=params)
        results = parse_suggest_html(html_content, cap)
        logger.info(f"[{self.__class__.__name__}] Search '{query.strip()}' matched {len(results)} result(s).")
        return results, search_url
