"""Short alphanumeric identifiers for notes and mentions."""

import secrets

from .constants import NOTE_ID_ALPHABET, NOTE_ID_LENGTH


def generate_id() -> str:
    """Random id of NOTE_ID_LENGTH characters from [A-Za-z0-9]."""
    return "".join(secrets.choice(NOTE_ID_ALPHABET) for _ in range(NOTE_ID_LENGTH))

