from __future__ import annotations
import hashlib
from pathlib import Path
from typing import Union

DIGEST_BLOCK_SIZE = 1 << 16

DEFAULT_ALGORITHM = "sha256"

# Guaranteed algorithms with a fixed-length hex digest (the SHAKE variants need
# a length argument)
ALGORITHMS = sorted(
    a for a in hashlib.algorithms_guaranteed if not a.startswith("shake_")
)


def filedigest(filepath: Union[str, Path], algorithm: str = DEFAULT_ALGORITHM) -> str:
    """
    Compute the digest of the file at ``filepath`` and return it as a
    lowercase hexadecimal string.  Raises `OSError` if the file cannot be
    read and `ValueError` if ``algorithm`` is unknown.
    """
    dgst = hashlib.new(algorithm)
    with open(filepath, "rb") as fp:
        while True:
            block = fp.read(DIGEST_BLOCK_SIZE)
            if not block:
                break
            dgst.update(block)
    return dgst.hexdigest()
