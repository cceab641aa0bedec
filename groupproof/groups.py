"""Group labels and their commitments.

A group commitment is the hash of the group label; it identifies the group
without reference to any member.
"""
from enum import Enum
from typing import Optional

from .crypto import HEX64_RE, hash_hex


class Role(Enum):
    OWNER = 'Owner'
    ADMIN = 'Admin'
    MODERATOR = 'Moderator'
    USER = 'User'

    @classmethod
    def from_str(cls, label: str) -> Optional['Role']:
        for role in cls:
            if role.value == label:
                return role
        return None

    def __str__(self):
        return self.value


def group_commitment(label) -> str:
    if isinstance(label, Role):
        label = label.value
    return hash_hex(label)


def resolve_group(value: str) -> str:
    """Use `value` as a commitment if it already looks like one, else hash it."""
    if HEX64_RE.match(value):
        return value
    return group_commitment(value)
