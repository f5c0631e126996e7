# api/receiptapi/security.py
import logging
import os

from fastapi import Header, HTTPException, status

logger = logging.getLogger(__name__)


def _load_key_map() -> dict[str, str]:
    """API_KEYS="key1:user_a,key2:user_b" -> {key: user_id}."""
    raw = os.getenv("API_KEYS", "").strip()
    if not raw:
        raw = "dev_123:user_demo"
        logger.info("API_KEYS not set, using default: dev_123:user_demo")

    mapping: dict[str, str] = {}
    for token in [s.strip() for s in raw.split(",") if s.strip()]:
        if ":" in token:
            k, u = token.split(":", 1)
        else:
            k, u = token, "default"
        mapping[k.strip()] = u.strip()
    logger.info(f"Loaded {len(mapping)} API keys from env vars")
    return mapping


API_KEY_USERS = _load_key_map()


def _extract_key(authorization: str | None, x_api_key: str | None) -> str:
    # x-api-key wins over Authorization: Bearer
    if x_api_key and isinstance(x_api_key, str) and x_api_key.strip():
        return x_api_key.strip()
    if authorization and isinstance(authorization, str) and authorization.lower().startswith("bearer "):
        return authorization.split(None, 1)[1].strip()
    raise HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail="Missing API key. Please provide either 'x-api-key' header or 'Authorization: Bearer <token>' header"
    )


def verify_api_key(authorization: str | None, x_api_key: str | None) -> tuple[str, str]:
    """Return (api_key, user_id) or raise 401/403."""
    key = _extract_key(authorization, x_api_key)
    user_id = API_KEY_USERS.get(key)
    if not user_id:
        preview = key[:4] + "..." if len(key) > 4 else key
        logger.warning(f"Unknown API key: {preview}")
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Invalid API key")
    return key, user_id


def current_user(
    authorization: str | None = Header(None),
    x_api_key: str | None = Header(None, alias="x-api-key"),
) -> str:
    """FastAPI dependency: the user id behind the caller's API key."""
    _, user_id = verify_api_key(authorization, x_api_key)
    return user_id
