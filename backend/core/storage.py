from typing import Optional

from core.config import settings


def public_image_url(image_key: Optional[str], base_url: Optional[str] = None) -> Optional[str]:
    """Resolve an object-storage key to its public URL; no key, no URL."""
    key = (image_key or "").strip()
    if not key:
        return None
    base = (base_url if base_url is not None else settings.image_public_base_url).rstrip("/")
    return f"{base}/{key.lstrip('/')}"
