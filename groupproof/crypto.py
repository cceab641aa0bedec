"""Hashing and randomness helpers used by the proof schemes.

`hash_hex` is the commitment hash (SHA-256 over the concatenated parts) and
`RandomSource` supplies hex-encoded random bytes. Proof generators take a
random source explicitly so callers can substitute a deterministic one.
"""
import os
import re
import hmac
import hashlib
import logging

from .errors import RandomSourceError

logger = logging.getLogger(__name__)

DIGEST_HEX_LEN = 64
HEX64_RE = re.compile(r'^[0-9a-f]{64}\Z')


def _to_bytes(part) -> bytes:
    if isinstance(part, (bytes, bytearray)):
        return bytes(part)
    if isinstance(part, str):
        return part.encode('utf-8')
    raise TypeError(f'cannot hash object of type {type(part).__name__}')


def hash_hex(*parts) -> str:
    """Return the SHA-256 hex digest of the concatenation of `parts`.

    Strings are hashed as their UTF-8 text, so hashing hex strings hashes the
    hex characters, not the decoded bytes.
    """
    h = hashlib.sha256()
    for p in parts:
        h.update(_to_bytes(p))
    return h.hexdigest()


def constant_time_equal(a: str, b: str) -> bool:
    return hmac.compare_digest(a.encode('utf-8'), b.encode('utf-8'))


class RandomSource:
    """Cryptographically strong random bytes from the operating system."""

    def random_bytes(self, n: int) -> str:
        try:
            return os.urandom(n).hex()
        except (OSError, NotImplementedError) as e:
            logger.error('entropy unavailable: %s', e)
            raise RandomSourceError(f'could not read {n} random bytes') from e


_default_source = RandomSource()


def default_random_source() -> RandomSource:
    return _default_source
