# ===== IMPORTS & DEPENDENCIES =====
import logging
import json
import aiohttp
from aiohttp import web
from typing import Optional, Dict, Any

from gamescout.config import (
    DEFAULT_REGION, DEFAULT_LANGUAGE, CORS_ALLOW_ORIGIN, REQUEST_TIMEOUT,
    SEARCH_DEFAULT_LIMIT, ENRICH_DEFAULT_LIMIT
)
from gamescout.core.errors import GameScoutError, InvalidInput
from gamescout.core.orchestrator import DealScout
from gamescout.sources.resolver import SourceResolver

# ===== CONFIGURATION & CONSTANTS =====
logger = logging.getLogger(__name__)

SCOUT_KEY = web.AppKey("scout", DealScout)
SESSION_KEY = web.AppKey("session", aiohttp.ClientSession)

# ===== UTILITY FUNCTIONS =====
async def _read_body(request: web.Request) -> Dict[str, Any]:
    try:
        body = await request.json()
    except (json.JSONDecodeError, UnicodeDecodeError) as e:
        raise InvalidInput("Request body must be a JSON object", debug=str(e)) from e
    if not isinstance(body, dict):
        raise InvalidInput("Request body must be a JSON object")
    return body


def _first(body: Dict[str, Any], *names: str, default: Any = None) -> Any:
    """Returns the first non-empty field among `names`; older clients send appid/steamUrl/cc/lang."""
    for name in names:
        value = body.get(name)
        if value is not None and value != "":
            return value
    return default


def _locale(body: Dict[str, Any]) -> Dict[str, str]:
    return {
        'region': str(_first(body, 'region', 'cc', default=DEFAULT_REGION)),
        'language': str(_first(body, 'language', 'lang', default=DEFAULT_LANGUAGE)),
    }

# ===== MIDDLEWARES =====
@web.middleware
async def cors_middleware(request: web.Request, handler) -> web.StreamResponse:
    if request.method == 'OPTIONS':
        response = web.Response(status=204)
    else:
        response = await handler(request)
    response.headers['Access-Control-Allow-Origin'] = CORS_ALLOW_ORIGIN
    response.headers['Access-Control-Allow-Methods'] = 'GET, POST, OPTIONS'
    response.headers['Access-Control-Allow-Headers'] = 'Content-Type'
    return response


@web.middleware
async def error_middleware(request: web.Request, handler) -> web.StreamResponse:
    """Turns every failure into the `{success: false, error, debug?}` envelope."""
    try:
        return await handler(request)
    except GameScoutError as e:
        logger.warning(f"⚠️ {request.method} {request.path} -> {e.status}: {e.message}")
        return web.json_response(e.to_payload(), status=e.status)
    except web.HTTPException as e:
        return web.json_response({'success': False, 'error': e.reason}, status=e.status)
    except Exception as e:
        logger.error(f"❌ Unhandled error on {request.method} {request.path}: {e}", exc_info=True)
        return web.json_response({'success': False, 'error': "Internal server error"}, status=500)

# ===== ROUTE HANDLERS =====
async def handle_root(request: web.Request) -> web.Response:
    return web.Response(text="GameScout backend is running")


async def handle_analyze(request: web.Request) -> web.Response:
    body = await _read_body(request)
    analysis = await request.app[SCOUT_KEY].analyze(
        identifier=_first(body, 'identifier', 'appid'),
        url=_first(body, 'url', 'steamUrl'),
        **_locale(body),
    )
    return web.json_response({'success': True, **analysis.to_dict()})


async def handle_compare(request: web.Request) -> web.Response:
    body = await _read_body(request)
    ranked = await request.app[SCOUT_KEY].compare(_first(body, 'identifiers', 'appids'), **_locale(body))
    return web.json_response({
        'success': True,
        'count': len(ranked),
        'ranked': [result.to_dict() for result in ranked],
    })


async def handle_search(request: web.Request) -> web.Response:
    body = await _read_body(request)
    results, source_url = await request.app[SCOUT_KEY].search(
        body.get('query'), body.get('limit', SEARCH_DEFAULT_LIMIT)
    )
    return web.json_response({
        'success': True,
        'source_url': source_url,
        'results': [result.to_dict() for result in results],
    })


async def handle_enrich(request: web.Request) -> web.Response:
    body = await _read_body(request)
    enriched = await request.app[SCOUT_KEY].enrich(body.get('urls'), body.get('limit', ENRICH_DEFAULT_LIMIT))
    return web.json_response({
        'success': True,
        'enriched': [entry.to_dict() for entry in enriched],
    })

# ===== INITIALIZATION & STARTUP =====
def create_app(
    scout: Optional[DealScout] = None,
    extraction_api_key: Optional[str] = None,
    timeout: float = REQUEST_TIMEOUT
) -> web.Application:
    """
    Builds the aiohttp application.

    When `scout` is omitted, a shared ClientSession and the real upstream clients are
    created on startup and torn down on cleanup.
    """
    app = web.Application(middlewares=[cors_middleware, error_middleware])
    app.router.add_get('/', handle_root)
    app.router.add_post('/analyze', handle_analyze)
    app.router.add_post('/compare', handle_compare)
    app.router.add_post('/search', handle_search)
    app.router.add_post('/enrich', handle_enrich)

    if scout is not None:
        app[SCOUT_KEY] = scout
        return app

    async def _start_session(app: web.Application) -> None:
        session = aiohttp.ClientSession()
        app[SESSION_KEY] = session
        app[SCOUT_KEY] = DealScout(SourceResolver.from_session(session, extraction_api_key, timeout=timeout))
        logger.info("Upstream HTTP session opened.")

    async def _close_session(app: web.Application) -> None:
        await app[SESSION_KEY].close()
        logger.info("Upstream HTTP session closed.")

    app.on_startup.append(_start_session)
    app.on_cleanup.append(_close_session)
    return app
