"""Schnorr-style group membership proofs on secp256k1.

Unlike the hash-commit scheme in `zk_proofs`, the response here depends on
the prover's private scalar, so a valid proof shows knowledge of the key
behind `commitment`. Non-interactive via Fiat-Shamir over the group
commitment:

    R = k*G
    e = SHA256(group_commitment || commitment || R) mod n
    s = k + e*x mod n

and the verifier checks s*G == R + e*P.
"""
import logging
from dataclasses import dataclass
from typing import Optional, Union

from coincurve import PrivateKey, PublicKey

from . import metrics
from .crypto import HEX64_RE, RandomSource, constant_time_equal, default_random_source, hash_hex
from .errors import CurveError
from .keys import CURVE_ORDER, KeyPair, as_public_point, decode_public, encode_public
from .zk_proofs import NONCE_BYTES, Proof

logger = logging.getLogger(__name__)

SCHEME = 'schnorr'


@dataclass(frozen=True)
class SchnorrProof(Proof):
    nonce_point: str


def _challenge_scalar(group_commitment: str, commitment: str, nonce_point: str) -> int:
    return int(hash_hex(group_commitment, commitment, nonce_point), 16) % CURVE_ORDER


class SchnorrProver:
    def __init__(self, random_source: Optional[RandomSource] = None):
        self.random_source = random_source or default_random_source()

    def prove(self, key_pair: KeyPair, group_commitment: str) -> SchnorrProof:
        commitment = encode_public(key_pair.public_point, compressed=True)
        k = int(self.random_source.random_bytes(NONCE_BYTES), 16) % CURVE_ORDER
        if k == 0:
            raise CurveError('nonce reduced to zero')
        nonce_point = encode_public(PrivateKey.from_int(k).public_key, compressed=True)
        e = _challenge_scalar(group_commitment, commitment, nonce_point)
        s = (k + e * key_pair.private_scalar) % CURVE_ORDER
        metrics.record_generated(SCHEME)
        logger.debug('Generated Schnorr membership proof for %s', commitment)
        return SchnorrProof(commitment=commitment, challenge=f'{e:064x}', response=f'{s:064x}',
                            nonce_point=nonce_point)


class SchnorrVerifier:
    def verify(self, proof: SchnorrProof, group_commitment: str, public_key: Union[PublicKey, str]) -> bool:
        pk = as_public_point(public_key)
        ok = self._check(proof, group_commitment, pk)
        metrics.record_verified(SCHEME, ok)
        logger.debug('Schnorr membership proof for %s verified=%s', proof.commitment, ok)
        return ok

    def _check(self, proof: SchnorrProof, group_commitment: str, pk: PublicKey) -> bool:
        if not constant_time_equal(encode_public(pk, compressed=True), proof.commitment):
            return False
        e = _challenge_scalar(group_commitment, proof.commitment, proof.nonce_point)
        if not constant_time_equal(f'{e:064x}', proof.challenge):
            return False
        if not HEX64_RE.match(proof.response):
            return False
        s = int(proof.response, 16)
        if not 0 < s < CURVE_ORDER:
            return False
        try:
            r_point = decode_public(proof.nonce_point)
        except CurveError:
            return False
        lhs = PrivateKey.from_int(s).public_key
        if e == 0:
            rhs = r_point
        else:
            try:
                rhs = PublicKey.combine_keys([r_point, pk.multiply(e.to_bytes(32, 'big'))])
            except ValueError:
                # R + e*P is the point at infinity
                return False
        return lhs.format() == rhs.format()


def generate_schnorr_proof(key_pair: KeyPair, group_commitment: str,
                           random_source: Optional[RandomSource] = None) -> SchnorrProof:
    return SchnorrProver(random_source).prove(key_pair, group_commitment)


def verify_schnorr_proof(proof: SchnorrProof, group_commitment: str, public_key: Union[PublicKey, str]) -> bool:
    return SchnorrVerifier().verify(proof, group_commitment, public_key)
