import os
import json
from pathlib import Path

from .errors import ConfigError

CFG_PATH = Path(os.environ.get('GP_CONFIG_PATH', Path(__file__).resolve().parents[1] / 'groupproof_config.json'))

SCHEMES = ('hash', 'schnorr')
DEFAULT_SCHEME = 'hash'


def read_config():
    if not CFG_PATH.exists():
        return {}
    try:
        return json.loads(CFG_PATH.read_text(encoding='utf-8'))
    except (OSError, ValueError):
        return {}


def write_config(d: dict):
    CFG_PATH.parent.mkdir(parents=True, exist_ok=True)
    CFG_PATH.write_text(json.dumps(d, indent=2), encoding='utf-8')


def get_scheme() -> str:
    scheme = os.environ.get('GP_SCHEME') or read_config().get('scheme') or DEFAULT_SCHEME
    if scheme not in SCHEMES:
        raise ConfigError(f'unknown proof scheme {scheme!r}, expected one of {SCHEMES}')
    return scheme


def set_scheme(scheme: str):
    if scheme not in SCHEMES:
        raise ConfigError(f'unknown proof scheme {scheme!r}, expected one of {SCHEMES}')
    cfg = read_config()
    cfg['scheme'] = scheme
    write_config(cfg)


def get_key_dir() -> str:
    return os.environ.get('GP_KEY_DIR') or read_config().get('key_dir') or 'keys'


def get_log_path() -> str:
    return os.environ.get('GP_LOG_FILE') or read_config().get('log_file') or 'logs/groupproof.log'
