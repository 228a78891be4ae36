# ===== IMPORTS & DEPENDENCIES =====
import logging
import asyncio
import json
import aiohttp
from typing import Optional, Any, Dict

from gamescout.config import JSON_HEADERS, REQUEST_TIMEOUT
from gamescout.core.errors import UpstreamTransportError

# ===== CONFIGURATION & CONSTANTS =====
logger = logging.getLogger(__name__)

# ===== CORE BUSINESS LOGIC =====
class BaseWebClient:
    """A base class for upstream clients sharing one aiohttp session and one failure contract."""

    def __init__(self, session: aiohttp.ClientSession, timeout: float = REQUEST_TIMEOUT):
        self._session = session
        self._timeout = aiohttp.ClientTimeout(total=timeout)
        logger.debug(f"[{self.__class__.__name__}] Initialized with timeout: {timeout}s")

    async def _fetch(
        self,
        url: str,
        method: str = 'GET',
        is_json: bool = True,
        headers: Optional[Dict[str, str]] = None,
        params: Optional[Dict[str, str]] = None,
        payload: Optional[Dict[str, Any]] = None
    ) -> Any:
        """
        Performs a single request and returns decoded JSON or raw text.
        There are no retries: any network, HTTP or decoding failure is raised as
        UpstreamTransportError so the caller decides whether to skip or surface it.
        """
        logger.info(f"➡️ [{self.__class__.__name__}] {method} {url}")
        request_headers = headers or JSON_HEADERS

        try:
            async with self._session.request(
                method, url, headers=request_headers, params=params, json=payload, timeout=self._timeout
            ) as response:
                response.raise_for_status()
                if is_json:
                    # content_type=None handles non-standard API content-types
                    return await response.json(content_type=None)
                return await response.text()

        except aiohttp.ClientResponseError as e:
            logger.warning(f"⚠️ [{self.__class__.__name__}] HTTP error on {url}: Status {e.status}")
            raise UpstreamTransportError(f"Upstream returned HTTP {e.status}", debug=e.message) from e
        except asyncio.TimeoutError as e:
            logger.warning(f"⚠️ [{self.__class__.__name__}] Timed out after {self._timeout.total}s on {url}")
            raise UpstreamTransportError("Upstream request timed out") from e
        except aiohttp.ClientError as e:
            logger.warning(f"⚠️ [{self.__class__.__name__}] Network error on {url}: {type(e).__name__}")
            raise UpstreamTransportError("Could not reach upstream service", debug=f"{type(e).__name__}: {e}") from e
        except json.JSONDecodeError as e:
            logger.warning(f"⚠️ [{self.__class__.__name__}] Invalid JSON from {url}")
            raise UpstreamTransportError("Upstream returned invalid JSON", debug=str(e)) from e
