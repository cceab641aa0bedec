import argparse
import json
import logging
import os
import sys
from logging.handlers import RotatingFileHandler
from pathlib import Path

from . import config
from .errors import GroupProofError
from .groups import group_commitment, resolve_group
from .keys import FileKeyStore, encode_public, generate_keypair
from .metrics import render_metrics
from .schnorr import SchnorrProof, generate_schnorr_proof, verify_schnorr_proof
from .zk_proofs import Proof, generate_membership_proof, verify_membership_proof

logger = logging.getLogger(__name__)

SCHEMES = {
    'hash': (Proof, generate_membership_proof, verify_membership_proof),
    'schnorr': (SchnorrProof, generate_schnorr_proof, verify_schnorr_proof),
}


def configure_logging(log_path=None, level=logging.INFO):
    # one rotating file handler per path on the root logger
    path = Path(log_path or config.get_log_path())
    root = logging.getLogger()
    root.setLevel(level)
    for existing in root.handlers:
        if isinstance(existing, RotatingFileHandler) and existing.baseFilename == os.path.abspath(str(path)):
            return existing
    path.parent.mkdir(parents=True, exist_ok=True)
    handler = RotatingFileHandler(str(path), maxBytes=5_000_000, backupCount=5)
    handler.setFormatter(logging.Formatter('%(asctime)s %(levelname)s %(name)s %(message)s'))
    root.addHandler(handler)
    return handler


def run_demo(scheme: str, out=None, random_source=None, show_metrics=False):
    """Two participants: A proves membership of Admin, B of Member.

    Both proofs are then checked against Admin. Returns (valid_a, valid_b).
    """
    out = out or sys.stdout
    _, generate, verify = SCHEMES[scheme]
    user_a = generate_keypair()
    user_b = generate_keypair()
    admin = group_commitment('Admin')
    member = group_commitment('Member')

    proof_a = generate(user_a, admin, random_source)
    proof_b = generate(user_b, member, random_source)
    print('User A proof:', proof_a.to_json(), file=out)
    print('User B proof:', proof_b.to_json(), file=out)

    valid_a = verify(proof_a, admin, user_a.public_point)
    valid_b = verify(proof_b, admin, user_b.public_point)
    print('Is UserA member of group Admin?', valid_a, file=out)
    print('Is UserB member of group Admin?', valid_b, file=out)
    logger.info('Demo (%s): user A valid=%s, user B valid=%s', scheme, valid_a, valid_b)
    if show_metrics:
        print(render_metrics(), end='', file=out)
    return valid_a, valid_b


def _read_proof_arg(value: str) -> dict:
    raw = sys.stdin.read() if value == '-' else value
    return json.loads(raw)


def build_parser():
    parser = argparse.ArgumentParser(prog='groupproof', description='Group membership proofs on secp256k1')
    sub = parser.add_subparsers(dest='cmd')
    demop = sub.add_parser('demo')
    demop.add_argument('--scheme', choices=sorted(SCHEMES))
    demop.add_argument('--metrics', action='store_true', help='Print proof counters after the demo')
    keyp = sub.add_parser('keygen')
    keyp.add_argument('name')
    groupp = sub.add_parser('group')
    groupp.add_argument('label')
    provep = sub.add_parser('prove')
    provep.add_argument('name')
    provep.add_argument('group', help='Group label, or a 64-char hex group commitment')
    provep.add_argument('--scheme', choices=sorted(SCHEMES))
    verp = sub.add_parser('verify')
    verp.add_argument('proof', help='Proof JSON, or - to read it from stdin')
    verp.add_argument('group', help='Group label, or a 64-char hex group commitment')
    verp.add_argument('public_key', help='Hex-encoded public key of the claimed prover')
    verp.add_argument('--scheme', choices=sorted(SCHEMES))
    schemep = sub.add_parser('scheme-set')
    schemep.add_argument('scheme', choices=sorted(SCHEMES))
    parser.add_argument('--log-file', help='Override the log file path')
    return parser


def main(argv=None):
    parser = build_parser()
    args = parser.parse_args(argv)
    configure_logging(args.log_file)
    if not args.cmd:
        parser.print_help()
        return 1
    try:
        return _dispatch(args)
    except (GroupProofError, FileNotFoundError) as e:
        logger.error('%s failed: %s', args.cmd, e)
        print('error:', e, file=sys.stderr)
        return 2


def _scheme(args) -> str:
    return args.scheme or config.get_scheme()


def _dispatch(args):
    if args.cmd == 'demo':
        run_demo(_scheme(args), show_metrics=args.metrics)
        return 0
    if args.cmd == 'keygen':
        kp = FileKeyStore().ensure_keypair(args.name)
        print(encode_public(kp.public_point))
        return 0
    if args.cmd == 'group':
        print(group_commitment(args.label))
        return 0
    if args.cmd == 'prove':
        kp = FileKeyStore().load(args.name)
        _, generate, _ = SCHEMES[_scheme(args)]
        proof = generate(kp, resolve_group(args.group))
        print(proof.to_json())
        return 0
    if args.cmd == 'verify':
        proof_cls, _, verify = SCHEMES[_scheme(args)]
        try:
            proof = proof_cls.from_dict(_read_proof_arg(args.proof))
        except ValueError as e:
            print('error: malformed proof:', e, file=sys.stderr)
            return 2
        ok = verify(proof, resolve_group(args.group), args.public_key)
        print('valid' if ok else 'invalid')
        return 0 if ok else 1
    if args.cmd == 'scheme-set':
        config.set_scheme(args.scheme)
        print('default scheme set to', args.scheme)
        return 0
    return 1


if __name__ == '__main__':
    sys.exit(main())
