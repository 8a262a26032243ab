import hmac
import logging
from fastapi import Header, HTTPException
from motorpicks.core.config import settings

logger = logging.getLogger(__name__)

def current_user_id(x_user_id: str | None = Header(default=None)) -> str:
    """Authenticated user id, injected by the identity-provider gateway."""
    if not x_user_id:
        raise HTTPException(401, "Unauthorized")
    return x_user_id

def require_internal_key(x_internal_key: str | None = Header(default=None)) -> None:
    if not settings.internal_api_key:
        logger.error("Security check failed: INTERNAL_API_KEY not configured on server.")
        raise HTTPException(500, "Server misconfigured")
    if not x_internal_key:
        logger.warning("Internal API check: missing 'x-internal-key' header.")
        raise HTTPException(401, "Unauthorized")
    if not hmac.compare_digest(x_internal_key, settings.internal_api_key):
        logger.warning("Internal API check: invalid key received.")
        raise HTTPException(401, "Unauthorized")
