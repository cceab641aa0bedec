"""secp256k1 key pairs and public point encoding.

Key operations go through a `KeyPairProvider`. The default provider uses
libsecp256k1 via `coincurve`. `FileKeyStore` keeps one hex private key per
participant on disk so the CLI can reuse identities between runs.
"""
import logging
from pathlib import Path
from typing import Optional, Union

from coincurve import PrivateKey, PublicKey

from .config import get_key_dir
from .errors import CurveError

logger = logging.getLogger(__name__)

CURVE_NAME = 'secp256k1'
CURVE_ORDER = 0xFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFEBAAEDCE6AF48A03BBFD25E8CD0364141


class KeyPair:
    """A private scalar and its public point. Never mutated after creation."""

    def __init__(self, private_key: PrivateKey):
        self._sk = private_key

    @property
    def public_point(self) -> PublicKey:
        return self._sk.public_key

    @property
    def private_scalar(self) -> int:
        return int.from_bytes(self._sk.secret, 'big')

    def private_hex(self) -> str:
        return self._sk.to_hex()

    def __repr__(self):
        return f"KeyPair(public={encode_public(self.public_point)})"


def encode_public(point: PublicKey, compressed: bool = True) -> str:
    """Return the SEC1 hex encoding of a public point (33 or 65 bytes)."""
    if not isinstance(point, PublicKey):
        raise CurveError(f'not a {CURVE_NAME} public point: {type(point).__name__}')
    return point.format(compressed=compressed).hex()


def decode_public(data: str) -> PublicKey:
    """Parse a compressed or uncompressed hex public point."""
    try:
        return PublicKey(bytes.fromhex(data))
    except (TypeError, ValueError) as e:
        raise CurveError(f'invalid public key encoding: {data!r}') from e


def as_public_point(value: Union[PublicKey, str]) -> PublicKey:
    if isinstance(value, PublicKey):
        return value
    return decode_public(value)


def scalar_to_hex(value: int) -> str:
    """Treat `value` as a private key seed and return its scalar as hex.

    The seed is reduced modulo the curve order and written without leading
    zeros, so the result is between 1 and 64 characters long (a seed equal
    to the order gives "0").
    """
    return format(value % CURVE_ORDER, 'x')


class KeyPairProvider:
    curve = CURVE_NAME

    def generate_keypair(self) -> KeyPair:
        raise NotImplementedError()

    def keypair_from_hex(self, private_hex: str) -> KeyPair:
        raise NotImplementedError()


class Secp256k1Provider(KeyPairProvider):
    def generate_keypair(self) -> KeyPair:
        return KeyPair(PrivateKey())

    def keypair_from_hex(self, private_hex: str) -> KeyPair:
        try:
            return KeyPair(PrivateKey.from_hex(private_hex.strip()))
        except (AttributeError, ValueError) as e:
            raise CurveError('invalid private key encoding') from e


class FileKeyStore:
    def __init__(self, keys_dir: Optional[str] = None, provider: Optional[KeyPairProvider] = None):
        self.keys_dir = Path(keys_dir or get_key_dir())
        self.provider = provider or get_provider()

    def _key_path(self, name: str) -> Path:
        return self.keys_dir / f"{name}.key"

    def load(self, name: str) -> KeyPair:
        path = self._key_path(name)
        if not path.exists():
            raise FileNotFoundError(f'Key {name} not found at {path}')
        return self.provider.keypair_from_hex(path.read_text())

    def ensure_keypair(self, name: str) -> KeyPair:
        path = self._key_path(name)
        if path.exists():
            return self.load(name)
        self.keys_dir.mkdir(parents=True, exist_ok=True)
        kp = self.provider.generate_keypair()
        path.write_text(kp.private_hex())
        path.chmod(0o600)
        logger.info('Created key pair %s at %s', name, path)
        return kp


_provider = Secp256k1Provider()


def get_provider() -> KeyPairProvider:
    return _provider


def generate_keypair() -> KeyPair:
    return get_provider().generate_keypair()


def keypair_from_hex(private_hex: str) -> KeyPair:
    return get_provider().keypair_from_hex(private_hex)
