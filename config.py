# config.py
import os

from dotenv import load_dotenv

load_dotenv()

CREDENTIALS_FILE = os.getenv("GMAIL_CREDENTIALS_FILE", "credentials.json")
TOKEN_PICKLE = os.getenv("GMAIL_TOKEN_FILE", "token.pickle")
GMAIL_QUERY = os.getenv("GMAIL_QUERY", "in:inbox is:unread")
GMAIL_USER = os.getenv("GMAIL_USER", "me")
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")

_TRUTHY = {"1", "true", "yes", "on"}


def env_flag(name: str, default: bool = False) -> bool:
    """Read a boolean switch from the environment."""
    value = os.getenv(name)
    if value is None or value.strip() == "":
        return default
    return value.strip().lower() in _TRUTHY


def env_int(name: str, default: int) -> int:
    value = os.getenv(name)
    if value is None or value.strip() == "":
        return default
    try:
        return int(value)
    except ValueError:
        raise ValueError(f"{name} must be an integer, got {value!r}")
