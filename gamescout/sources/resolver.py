# ===== IMPORTS & DEPENDENCIES =====
import logging
import aiohttp
from typing import Optional, Any, List, Tuple

from gamescout.config import DEFAULT_REGION, DEFAULT_LANGUAGE, SEARCH_DEFAULT_LIMIT, REQUEST_TIMEOUT
from gamescout.enrichment.extraction import YellowcakeExtractor
from gamescout.models.game import GameRecord, SearchResult
from gamescout.sources.steam_store import SteamStoreSource

# ===== CONFIGURATION & CONSTANTS =====
logger = logging.getLogger(__name__)

# ===== CORE BUSINESS LOGIC =====
class SourceResolver:
    """
    Single entry point for the three resolution strategies.

    The caller picks the strategy; nothing here falls back from one to another.
    Storefront markup or extractor changes stay behind this class.
    """

    def __init__(self, store: SteamStoreSource, extractor: YellowcakeExtractor):
        self.store = store
        self.extractor = extractor

    @classmethod
    def from_session(
        cls,
        session: aiohttp.ClientSession,
        extraction_api_key: Optional[str],
        timeout: float = REQUEST_TIMEOUT
    ) -> "SourceResolver":
        return cls(
            store=SteamStoreSource(session, timeout=timeout),
            extractor=YellowcakeExtractor(session, api_key=extraction_api_key, timeout=timeout),
        )

    async def resolve_identifier(
        self,
        identifier: Any,
        region: str = DEFAULT_REGION,
        language: str = DEFAULT_LANGUAGE
    ) -> Tuple[GameRecord, str]:
        return await self.store.fetch_app_details(identifier, region, language)

    async def resolve_url(self, url: str) -> GameRecord:
        return await self.extractor.extract(url)

    async def search(self, query: str, limit: Any = SEARCH_DEFAULT_LIMIT) -> Tuple[List[SearchResult], str]:
        return await self.store.search(query, limit)
