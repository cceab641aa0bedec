import hashlib
import sys, os
sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))
import pytest
from groupproof import crypto, keys
from groupproof.errors import CurveError, RandomSourceError

GENERATOR_HEX = '0279be667ef9dcbbac55a06295ce870b07029bfcdb2dce28d959f2815b16f81798'


def test_hash_hex_concatenates_parts():
    assert crypto.hash_hex('ab', 'cd') == hashlib.sha256(b'abcd').hexdigest()
    assert crypto.hash_hex(b'ab', 'cd') == crypto.hash_hex('abcd')
    assert len(crypto.hash_hex('Admin')) == crypto.DIGEST_HEX_LEN


def test_random_source_returns_hex():
    value = crypto.RandomSource().random_bytes(32)
    assert len(value) == 64
    assert crypto.HEX64_RE.match(value)


def test_random_source_failure(monkeypatch):
    def broken(n):
        raise OSError('no entropy')

    monkeypatch.setattr(crypto.os, 'urandom', broken)
    with pytest.raises(RandomSourceError):
        crypto.RandomSource().random_bytes(32)


def test_encode_decode_round_trip():
    kp = keys.generate_keypair()
    encoded = keys.encode_public(kp.public_point)
    assert len(encoded) == 66 and encoded[:2] in ('02', '03')
    decoded = keys.decode_public(encoded)
    assert decoded.format() == kp.public_point.format()
    # uncompressed form decodes to the same point
    full = keys.encode_public(kp.public_point, compressed=False)
    assert len(full) == 130
    assert keys.encode_public(keys.decode_public(full)) == encoded


def test_known_key_encoding():
    kp = keys.keypair_from_hex('00' * 31 + '01')
    assert kp.private_scalar == 1
    assert keys.encode_public(kp.public_point) == GENERATOR_HEX


def test_decode_rejects_malformed():
    with pytest.raises(CurveError):
        keys.decode_public('zz')
    with pytest.raises(CurveError):
        keys.decode_public('02' + 'ff' * 32)
    with pytest.raises(CurveError):
        keys.encode_public('not a point')


def test_invalid_private_key():
    with pytest.raises(CurveError):
        keys.keypair_from_hex('00' * 32)
    with pytest.raises(CurveError):
        keys.keypair_from_hex(f'{keys.CURVE_ORDER:064x}')


def test_scalar_to_hex_reduces_modulo_order():
    assert keys.scalar_to_hex(5) == '5'
    assert keys.scalar_to_hex(0x0abc) == 'abc'
    assert keys.scalar_to_hex(keys.CURVE_ORDER + 7) == '7'
    assert keys.scalar_to_hex(keys.CURVE_ORDER) == '0'
    assert len(keys.scalar_to_hex(keys.CURVE_ORDER - 1)) == 64


def test_hex64_rejects_trailing_newline():
    digest = crypto.hash_hex('Admin')
    assert crypto.HEX64_RE.match(digest)
    assert not crypto.HEX64_RE.match(digest + '\n')


def test_file_key_store(tmp_path):
    store = keys.FileKeyStore(str(tmp_path / 'keys'))
    with pytest.raises(FileNotFoundError):
        store.load('alice')
    kp = store.ensure_keypair('alice')
    again = store.ensure_keypair('alice')
    assert again.private_scalar == kp.private_scalar
    assert (tmp_path / 'keys' / 'alice.key').read_text() == kp.private_hex()
    assert (tmp_path / 'keys' / 'alice.key').stat().st_mode & 0o777 == 0o600
    assert store.load('alice').public_point.format() == kp.public_point.format()
