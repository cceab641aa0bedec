"""Error types raised by the membership proof helpers.

A proof that fails verification is not an error; `verify` returns False for
it. These exceptions cover inputs that cannot be processed at all.
"""


class GroupProofError(Exception):
    pass


class CurveError(GroupProofError, ValueError):
    """Malformed or invalid point/scalar encoding on the curve."""


class RandomSourceError(GroupProofError, RuntimeError):
    """Entropy could not be obtained from the random source."""


class ConfigError(GroupProofError, ValueError):
    """Invalid value in the config file or environment."""
