from __future__ import annotations
import hashlib
from pathlib import Path
import pytest
from treedigest import ALGORITHMS, DEFAULT_ALGORITHM, filedigest
from treedigest.digest import DIGEST_BLOCK_SIZE


def test_sha256_hello(tmp_path: Path) -> None:
    p = tmp_path / "a.txt"
    p.write_text("hello")
    assert (
        filedigest(p)
        == "2cf24dba5fb0a30e26e83b2ac5b9e29e1b161e5c1fa7425e73043362938b9824"
    )


def test_default_algorithm() -> None:
    assert DEFAULT_ALGORITHM == "sha256"
    assert DEFAULT_ALGORITHM in ALGORITHMS


def test_algorithms_have_fixed_length_digests() -> None:
    assert "md5" in ALGORITHMS
    assert not any(a.startswith("shake_") for a in ALGORITHMS)


def test_empty_file(tmp_path: Path) -> None:
    p = tmp_path / "empty"
    p.touch()
    assert filedigest(p) == hashlib.sha256(b"").hexdigest()


@pytest.mark.parametrize("algorithm", ["md5", "sha1", "sha512", "blake2b"])
def test_multiblock_file(tmp_path: Path, algorithm: str) -> None:
    data = bytes(range(256)) * (DIGEST_BLOCK_SIZE // 128 + 3)
    assert len(data) > 2 * DIGEST_BLOCK_SIZE
    p = tmp_path / "big.bin"
    p.write_bytes(data)
    dgst = filedigest(str(p), algorithm)
    assert dgst == hashlib.new(algorithm, data).hexdigest()
    assert dgst == dgst.lower()


def test_repeatable(tmp_path: Path) -> None:
    p = tmp_path / "a.txt"
    p.write_text("some content\n")
    assert filedigest(p) == filedigest(p)


def test_missing_file(tmp_path: Path) -> None:
    with pytest.raises(FileNotFoundError):
        filedigest(tmp_path / "nonexistent")


def test_unknown_algorithm(tmp_path: Path) -> None:
    p = tmp_path / "a.txt"
    p.write_text("hello")
    with pytest.raises(ValueError):
        filedigest(p, "no-such-hash")
