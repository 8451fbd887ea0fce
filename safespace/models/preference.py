"""
Preference keys
Preferences are plain string key/value pairs; booleans are stored as "true"/"false".
"""

DARK_MODE = "darkMode"


def encode_bool(value: bool) -> str:
    return "true" if value else "false"


def decode_bool(value) -> bool:
    return value == "true"
