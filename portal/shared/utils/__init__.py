"""Small shared helpers (ids, UTC datetimes, phone numbers)."""

from portal.shared.utils.datetime import ensure_utc, utc_now
from portal.shared.utils.generators import generate_cuid
from portal.shared.utils.phone import looks_like_phone, normalize_phone_number

__all__ = [
    "ensure_utc",
    "generate_cuid",
    "looks_like_phone",
    "normalize_phone_number",
    "utc_now",
]
