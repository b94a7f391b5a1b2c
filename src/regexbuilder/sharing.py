"""Encoding of a pattern and its flags into a shareable link."""

import base64
import binascii
import json
import logging
from urllib.parse import parse_qs, urlencode, urlsplit

from pydantic import BaseModel, ValidationError

logger = logging.getLogger(__name__)

SHARE_QUERY_PARAM = "pattern"


class SharedPattern(BaseModel):
    """The pattern and flag string carried by a shareable link."""

    pattern: str = ""
    flags: str = ""


def encode_share(pattern: str, flags: str) -> str:
    """Encode a pattern and flag string as a URL-safe token."""
    payload = json.dumps(SharedPattern(pattern=pattern, flags=flags).model_dump(), ensure_ascii=False)
    return base64.urlsafe_b64encode(payload.encode("utf-8")).decode("ascii")


def decode_share(token: str) -> SharedPattern | None:
    """
    Decode a token produced by `encode_share`.

    Tokens using the standard base64 alphabet, with or without padding, are
    accepted as well.

    Returns:
        The decoded SharedPattern, or None if the token cannot be decoded.

    """
    normalized = token.strip().replace("+", "-").replace("/", "_")
    normalized += "=" * (-len(normalized) % 4)
    try:
        raw = base64.urlsafe_b64decode(normalized.encode("ascii"))
        return SharedPattern.model_validate(json.loads(raw.decode("utf-8")))
    except (binascii.Error, UnicodeError, ValueError, ValidationError) as e:
        logger.warning("Failed to load shared pattern: %s", e)
        return None


def build_share_url(base_url: str, pattern: str, flags: str) -> str:
    """Return `base_url` with the encoded pattern attached as a query parameter."""
    separator = "&" if urlsplit(base_url).query else "?"
    return f"{base_url}{separator}{urlencode({SHARE_QUERY_PARAM: encode_share(pattern, flags)})}"


def parse_share_url(url: str) -> SharedPattern | None:
    """Extract and decode the shared pattern from a link, or None if it carries none."""
    values = parse_qs(urlsplit(url).query).get(SHARE_QUERY_PARAM)
    if not values:
        return None
    return decode_share(values[0])
