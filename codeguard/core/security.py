"""API key and share token generation, plus hashing. API keys are stored only as SHA-256 digests."""

import hashlib
import secrets

# Prefix makes leaked keys easy to spot (and to catch with our own secret rule).
API_KEY_PREFIX = "cg_"
API_KEY_RANDOM_BYTES = 32

KEY_NAME_MIN_LEN = 1
KEY_NAME_MAX_LEN = 255


def generate_api_key() -> str:
    """Return a new random plaintext API key. Show it once; persist only its hash."""
    return API_KEY_PREFIX + secrets.token_urlsafe(API_KEY_RANDOM_BYTES)


def hash_api_key(plain_key: str) -> str:
    """Hex SHA-256 of the key; deterministic so it can be used as a lookup column."""
    return hashlib.sha256(plain_key.encode("utf-8")).hexdigest()


def hash_code(code: str) -> str:
    """Content hash of scanned source (not a vulnerability fingerprint)."""
    return hashlib.sha256(code.encode("utf-8")).hexdigest()


SHARE_TOKEN_RANDOM_BYTES = 24


def generate_share_token() -> str:
    """Unguessable URL-safe token for a read-only report link. Stored as-is; it grants no write access."""
    return secrets.token_urlsafe(SHARE_TOKEN_RANDOM_BYTES)
