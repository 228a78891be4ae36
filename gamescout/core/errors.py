# ===== IMPORTS & DEPENDENCIES =====
from typing import Optional, Dict, Any

from gamescout.config import DEBUG_MAX_CHARS


# ===== TYPES & INTERFACES =====
class GameScoutError(Exception):
    """
    Base class for every error GameScout surfaces to a caller.

    `message` is short and human-readable. `debug` is an optional diagnostic string
    that is truncated before it leaves the process; it must never hold secrets.
    """
    status = 500

    def __init__(self, message: str, debug: Optional[Any] = None):
        super().__init__(message)
        self.message = message
        self.debug = truncate_debug(debug)

    def to_payload(self) -> Dict[str, Any]:
        payload: Dict[str, Any] = {'success': False, 'error': self.message}
        if self.debug:
            payload['debug'] = self.debug
        return payload


class InvalidInput(GameScoutError):
    """Missing or malformed request fields. No upstream call is attempted."""
    status = 400


class NoDataError(GameScoutError):
    """The upstream reported no data (or failure) for an otherwise valid request."""
    status = 404


class UnparsableStreamError(GameScoutError):
    """The extraction stream contained no frame that decodes as JSON."""
    status = 502


class UpstreamTransportError(GameScoutError):
    """Network or HTTP failure reaching the storefront or the extraction service."""
    status = 502


# ===== UTILITY FUNCTIONS =====
def truncate_debug(debug: Optional[Any], limit: int = DEBUG_MAX_CHARS) -> Optional[str]:
    """Flattens a diagnostic value to a string no longer than `limit` characters."""
    if debug is None:
        return None
    text = str(debug)
    return text[:limit] if text else None
