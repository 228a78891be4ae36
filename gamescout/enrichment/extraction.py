# ===== IMPORTS & DEPENDENCIES =====
import logging
import json
import re
import aiohttp
from typing import Optional, Dict, Any, Tuple

from gamescout.core.base_client import BaseWebClient
from gamescout.core.errors import NoDataError, UnparsableStreamError, UpstreamTransportError
from gamescout.models.game import GameRecord
from gamescout.config import (
    YELLOWCAKE_EXTRACT_URL, EVENT_STREAM_DATA_PREFIX, EXTRACTION_PROMPT, REQUEST_TIMEOUT
)

# ===== CONFIGURATION & CONSTANTS =====
logger = logging.getLogger(__name__)

_NUMBER_RE = re.compile(r'-?\d+(?:\.\d+)?')

# ===== UTILITY FUNCTIONS =====
def parse_event_stream(stream_text: str) -> Any:
    """
    Returns the last decodable JSON payload of a server-sent event stream.

    Only `data:` lines are considered. They are tried from the last one backward,
    so a truncated or malformed final frame still lets an earlier complete frame win.
    Raises UnparsableStreamError when no frame decodes.
    """
    data_lines = [
        line[len(EVENT_STREAM_DATA_PREFIX):].strip()
        for line in (raw.strip() for raw in str(stream_text or '').splitlines())
        if line.startswith(EVENT_STREAM_DATA_PREFIX)
    ]

    for candidate in reversed(data_lines):
        try:
            return json.loads(candidate)
        except json.JSONDecodeError:
            continue

    raise UnparsableStreamError(
        "Failed to parse extraction stream output",
        debug=f"{len(data_lines)} data frame(s), none decodable",
    )


def unwrap_payload(payload: Any) -> Any:
    """Game fields may sit at `.data[0]`, `.data`, or the payload root; first non-null wins."""
    if isinstance(payload, dict):
        data = payload.get('data')
        if isinstance(data, list) and data and data[0] is not None:
            return data[0]
        if data is not None:
            return data
    return payload


def _to_number(value: Any, free_means_zero: bool = False) -> Optional[float]:
    """Coerces an extracted price or percent ("$9.99", "50%", 12) to a float."""
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        return float(value)
    text = str(value).strip()
    if free_means_zero and text.lower() == 'free':
        return 0.0
    match = _NUMBER_RE.search(text.replace(',', ''))
    return float(match.group(0)) if match else None


def _to_discount(value: Any) -> Optional[float]:
    """Like _to_number, but drops the sign of storefront labels such as "-50%"."""
    number = _to_number(value)
    if number is None or isinstance(value, (int, float)):
        return number
    return abs(number)


def _to_tags(value: Any) -> Tuple[str, ...]:
    if isinstance(value, str):
        value = value.split(',')
    if not isinstance(value, list):
        return tuple()
    return tuple(str(tag).strip() for tag in value if tag is not None and str(tag).strip())


def _to_text(value: Any) -> Optional[str]:
    if value is None:
        return None
    text = value if isinstance(value, str) else json.dumps(value, ensure_ascii=False)
    return text.strip() or None


def normalize_extracted_game(raw_game: Any) -> GameRecord:
    """Maps the extractor's loosely-typed fields onto a GameRecord."""
    if not isinstance(raw_game, dict):
        raise NoDataError("Extraction returned no game fields.", debug=type(raw_game).__name__)

    return GameRecord(
        title=_to_text(raw_game.get('game_title') or raw_game.get('title')),
        current_price=_to_number(raw_game.get('current_price'), free_means_zero=True),
        original_price=_to_number(raw_game.get('original_price'), free_means_zero=True),
        discount_percent=_to_discount(raw_game.get('discount_percent')),
        release_date=_to_text(raw_game.get('release_date')),
        tags=_to_tags(raw_game.get('tags')),
        review_summary=_to_text(raw_game.get('review_summary')),
    )

# ===== CORE BUSINESS LOGIC =====
class YellowcakeExtractor(BaseWebClient):
    """Extracts game fields from an arbitrary store page through the Yellowcake extract-stream API."""

    def __init__(
        self,
        session: aiohttp.ClientSession,
        api_key: Optional[str],
        endpoint: str = YELLOWCAKE_EXTRACT_URL,
        prompt: str = EXTRACTION_PROMPT,
        timeout: float = REQUEST_TIMEOUT
    ):
        super().__init__(session=session, timeout=timeout)
        self._api_key = api_key
        self._endpoint = endpoint
        self._prompt = prompt

    def _headers(self) -> Dict[str, str]:
        return {
            'Content-Type': 'application/json',
            'Accept': 'text/event-stream',
            'X-API-Key': self._api_key or '',
        }

    async def extract(self, url: str) -> GameRecord:
        """Sends one page URL to the extractor and waits for its stream to finish."""
        if not self._api_key:
            logger.error(f"❌ [{self.__class__.__name__}] No API key configured; cannot extract '{url}'.")
            raise UpstreamTransportError("Extraction service is not configured (missing API key).")

        stream_text = await self._fetch(
            self._endpoint,
            method='POST',
            is_json=False,
            headers=self._headers(),
            payload={'url': url, 'prompt': self._prompt},
        )
        game = normalize_extracted_game(unwrap_payload(parse_event_stream(stream_text)))
        logger.info(f"✅ [{self.__class__.__name__}] Extracted '{game.title}' from {url}")
        return game
