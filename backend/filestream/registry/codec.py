"""Key codec: derive public keys from remote file identifiers.

A key is the last six characters of the identifier followed by the whole
identifier, with no separator::

    generate_key(5374720841938813007) == "8130075374720841938813007"

The full identifier keeps keys unique; the short hash only makes links easier
to tell apart at a glance. ``split_key`` is the exact inverse of
``generate_key`` and the two must change together.
"""
from typing import Tuple, Union

HASH_LENGTH = 6


def short_hash(remote_file_id: Union[int, str]) -> str:
    """Return the last ``HASH_LENGTH`` characters of the identifier."""
    return str(remote_file_id)[-HASH_LENGTH:]


def generate_key(remote_file_id: Union[int, str]) -> str:
    """Build the public key for a remote file identifier.

    Identifiers shorter than ``HASH_LENGTH`` characters yield a shorter hash
    (the identifier itself), so their keys are simply the identifier twice.
    """
    file_id = str(remote_file_id)
    if not file_id:
        raise ValueError("remote_file_id must not be empty")
    return short_hash(file_id) + file_id


def split_key(key: str) -> Tuple[str, str]:
    """Split a key back into ``(short_hash, remote_file_id)``.

    Keys shorter than ``2 * HASH_LENGTH`` can only come from identifiers
    shorter than ``HASH_LENGTH``, whose hash is the identifier itself, so
    they split in half.

    Raises:
        ValueError: If the key could not have been produced by ``generate_key``.
    """
    if len(key) >= 2 * HASH_LENGTH:
        hash_part, file_id = key[:HASH_LENGTH], key[HASH_LENGTH:]
    elif key and len(key) % 2 == 0:
        half = len(key) // 2
        hash_part, file_id = key[:half], key[half:]
    else:
        raise ValueError(f"Malformed key: {key!r}")

    if short_hash(file_id) != hash_part:
        raise ValueError(f"Malformed key: {key!r}")
    return hash_part, file_id
