"""Text helpers for migration names."""

import re
import unicodedata

__all__ = ("slugify",)

_SLUGIFY_INVALID_RE = re.compile(r"[^\w]+", re.UNICODE)


def slugify(value: str, separator: str = "-") -> str:
    """Slugify a migration name.

    Converts to ASCII, lowercases, and replaces every run of characters that
    aren't alphanumerics or underscores with ``separator``. Leading and
    trailing separators are stripped.

    Args:
        value: The string to slugify.
        separator: Word delimiter. Defaults to ``-``.

    Returns:
        The slugified value.
    """
    value = unicodedata.normalize("NFKD", value).encode("ascii", "ignore").decode("ascii")
    value = _SLUGIFY_INVALID_RE.sub(separator, value.lower().strip())
    value = re.sub(rf"^{re.escape(separator)}+|{re.escape(separator)}+$", "", value)
    return re.sub(rf"{re.escape(separator)}+", separator, value)
