import os, uuid, re, logging
from pathlib import Path

LOCAL_STORAGE_DIR = Path(os.getenv("LOCAL_STORAGE_DIR", "./storage"))
PUBLIC_BASE_URL = os.getenv("PUBLIC_BASE_URL", "http://localhost:8000").rstrip("/")

ALLOWED_IMAGE_TYPES = {
    ".jpg": "image/jpeg",
    ".jpeg": "image/jpeg",
    ".png": "image/png",
}


def is_allowed_image(filename: str | None, content_type: str | None = None) -> bool:
    ext = Path(filename or "").suffix.lower()
    if ext not in ALLOWED_IMAGE_TYPES:
        return False
    return content_type is None or content_type in ALLOWED_IMAGE_TYPES.values()


def get_object_key(filename: str) -> str:
    """Unique key for an uploaded receipt image."""
    safe = re.sub(r'[^A-Za-z0-9._-]+', '_', os.path.basename(filename or "receipt.jpg"))[:80]
    return f"transactions/{uuid.uuid4().hex}/{safe}"


def public_url(key: str) -> str:
    return f"{PUBLIC_BASE_URL}/storage/{key}"


def save_image(filename: str, data: bytes) -> tuple[str, str]:
    """Write the image under LOCAL_STORAGE_DIR; returns (object_key, public_url)."""
    key = get_object_key(filename)
    file_path = LOCAL_STORAGE_DIR / key
    file_path.parent.mkdir(parents=True, exist_ok=True)
    with open(file_path, 'wb') as f:
        f.write(data)
    logging.getLogger(__name__).info("Stored receipt image", extra={"object_key": key})
    return key, public_url(key)


def ensure_storage_dir() -> bool:
    try:
        LOCAL_STORAGE_DIR.mkdir(parents=True, exist_ok=True)
        logging.info(f"Using local file storage at: {LOCAL_STORAGE_DIR}")
        return True
    except Exception as e:
        logging.error(f"Could not create local storage directory: {e}")
        return False
