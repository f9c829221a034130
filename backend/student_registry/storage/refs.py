"""
AssetRef helpers.

New records store their AssetRef explicitly. Rows written under the older
URL-only scheme only have a photo URL, and for those the key has to be
recovered from the URL the same way it was built at upload time.
"""

from typing import Optional
from urllib.parse import urlparse

DEFAULT_FOLDER = "students"


def derive_asset_ref(url: str, folder: str = DEFAULT_FOLDER) -> Optional[str]:
    """
    Recover an AssetRef from a stored photo URL.

    Takes the last path segment, drops its file extension and places it in
    the fixed folder namespace:

        https://cdn.example.com/v1/students/abc123.jpg -> students/abc123

    Returns None for empty URLs.
    """
    if not url:
        return None
    path = urlparse(url).path or url
    segment = path.rstrip("/").split("/")[-1]
    public_id = segment.split(".")[0]
    if not public_id:
        return None
    return f"{folder}/{public_id}"


def resolve_asset_ref(asset_ref: Optional[str], image_url: Optional[str],
                      folder: str = DEFAULT_FOLDER) -> Optional[str]:
    """Prefer the stored AssetRef; fall back to deriving it from the URL."""
    if asset_ref:
        return asset_ref
    return derive_asset_ref(image_url, folder)
