"""Hash-commit group membership proofs.

A prover binds its compressed public key to a group commitment and a fresh
nonce:

    commitment = compressed public key (hex)
    challenge  = SHA256(group_commitment || commitment || nonce)
    response   = nonce taken as a secp256k1 private key seed (hex scalar)

The verifier recomputes the challenge from `response` rather than `nonce`.
The response is the reduced scalar without leading zeros, so the two strings
are equal only when the nonce is below the curve order and has no leading
zero nibble. Otherwise an honest proof does not verify. This scheme does not
involve the prover's private scalar at all; see `groupproof.schnorr` for a proof of knowledge of the key.
"""
import json
import logging
from dataclasses import dataclass, asdict, fields
from typing import Optional, Union

from coincurve import PublicKey

from . import metrics
from .crypto import RandomSource, constant_time_equal, default_random_source, hash_hex
from .keys import KeyPair, as_public_point, encode_public, scalar_to_hex

logger = logging.getLogger(__name__)

SCHEME = 'hash'
NONCE_BYTES = 32


@dataclass(frozen=True)
class Proof:
    commitment: str
    challenge: str
    response: str

    def to_dict(self) -> dict:
        return asdict(self)

    def to_json(self) -> str:
        return json.dumps(self.to_dict(), sort_keys=True)

    @classmethod
    def from_dict(cls, d: dict) -> 'Proof':
        if not isinstance(d, dict):
            raise ValueError('proof must be a JSON object')
        names = [f.name for f in fields(cls)]
        missing = [k for k in names if not isinstance(d.get(k), str)]
        if missing:
            raise ValueError(f'proof fields missing or not strings: {", ".join(missing)}')
        return cls(**{k: d[k] for k in names})

    @classmethod
    def from_json(cls, s: str) -> 'Proof':
        return cls.from_dict(json.loads(s))


class ProofGenerator:
    def __init__(self, random_source: Optional[RandomSource] = None):
        self.random_source = random_source or default_random_source()

    def generate(self, key_pair: KeyPair, group_commitment: str) -> Proof:
        commitment = encode_public(key_pair.public_point, compressed=True)
        nonce = self.random_source.random_bytes(NONCE_BYTES)
        challenge = hash_hex(group_commitment, commitment, nonce)
        response = scalar_to_hex(int(nonce, 16))
        metrics.record_generated(SCHEME)
        logger.debug('Generated membership proof for %s', commitment)
        return Proof(commitment=commitment, challenge=challenge, response=response)


class ProofVerifier:
    def verify(self, proof: Proof, group_commitment: str, public_key: Union[PublicKey, str]) -> bool:
        """Check `proof` against a group commitment and the claimed public key.

        Raises CurveError only when `public_key` cannot be decoded; a proof
        that does not match is reported as False.
        """
        pk_commitment = encode_public(as_public_point(public_key), compressed=True)
        recomputed = hash_hex(group_commitment, proof.commitment, proof.response)
        ok = constant_time_equal(recomputed, proof.challenge) and constant_time_equal(pk_commitment, proof.commitment)
        metrics.record_verified(SCHEME, ok)
        logger.debug('Membership proof for %s verified=%s', proof.commitment, ok)
        return ok


def generate_membership_proof(key_pair: KeyPair, group_commitment: str,
                              random_source: Optional[RandomSource] = None) -> Proof:
    return ProofGenerator(random_source).generate(key_pair, group_commitment)


def verify_membership_proof(proof: Proof, group_commitment: str, public_key: Union[PublicKey, str]) -> bool:
    return ProofVerifier().verify(proof, group_commitment, public_key)
