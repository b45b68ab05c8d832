"""Domain constants shared by models, parsers and services."""

import string

# Note and mention ids are fixed length alphanumeric strings
NOTE_ID_LENGTH = 6
NOTE_ID_ALPHABET = string.ascii_letters + string.digits

MAX_NOTE_LENGTH = 1000

# Two levels: root (0) and direct replies (1)
ROOT_DEPTH = 0
MAX_DEPTH = 1
