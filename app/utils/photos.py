"""
Photo list helpers.

Audits keep their photo URLs in a single comma-joined text column. Both the
write and the read path go through these helpers so that "no photos" (NULL)
and "one photo" never get confused by stray whitespace or empty entries.
"""
from typing import Iterable, List, Optional, Union


def split_photos(photos: Optional[str]) -> List[str]:
    """Split a stored photo string into URLs, trimming each and dropping empties."""
    if not photos:
        return []
    return [url.strip() for url in photos.split(",") if url.strip()]


def join_photos(urls: Iterable[str]) -> Optional[str]:
    """Join photo URLs for storage; None when there is nothing to store."""
    cleaned = [url.strip() for url in urls if url and url.strip()]
    return ",".join(cleaned) if cleaned else None


def normalize_photos(photos: Union[str, List[str], None]) -> Optional[str]:
    """Normalize caller input (comma-joined string or list) to the stored form."""
    if photos is None:
        return None
    if isinstance(photos, str):
        return join_photos(split_photos(photos))
    return join_photos(photos)
