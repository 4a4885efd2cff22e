"""Short random identifiers for tags and files."""

import secrets
from typing import Final

from django.conf import settings

# URL-safe alphabet, same as nanoid
_ALPHABET: Final = (
    '_-0123456789abcdefghijklmnopqrstuvwxyzABCDEFGHIJKLMNOPQRSTUVWXYZ'
)


def get_id_length() -> int:
    """Get length of generated identifiers.

    Returns:
        Identifier length from settings or default of 10.
    """
    return getattr(settings, 'ID_LENGTH', 10)


def generate_id(length: int | None = None) -> str:
    """Generate a short random identifier.

    Args:
        length: Number of characters. Defaults to ``ID_LENGTH`` setting.

    Returns:
        Random string drawn from a URL-safe alphabet.
    """
    size = length or get_id_length()
    return ''.join(secrets.choice(_ALPHABET) for _ in range(size))
