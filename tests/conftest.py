from __future__ import annotations
from pathlib import Path
import pytest
from tests.helpers import create_tree


@pytest.fixture
def sample_tree(tmp_path: Path) -> Path:
    root = tmp_path / "tree"
    create_tree(
        root,
        {
            "a.txt": "hello",
            "empty.dat": b"",
            "sub": {
                "b.txt": "world",
                "deeper": {"c.bin": bytes(range(256)) * 1024},
            },
            "other": {"d.txt": "hello"},
        },
    )
    return root
