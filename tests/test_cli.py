from __future__ import annotations
import hashlib
from pathlib import Path
import re
from click.testing import CliRunner
import pytest
from tests.helpers import create_tree, error_records
from treedigest import __version__
from treedigest.__main__ import main

DIGEST_LINE = re.compile(r"^[0-9a-f]{32,128} /")


def digest_lines(output: str) -> list[str]:
    return [line for line in output.splitlines() if DIGEST_LINE.match(line)]


def test_cli_scenario(tmp_path: Path) -> None:
    create_tree(tmp_path, {"a.txt": "hello", "sub": {"b.txt": "world"}})
    r = CliRunner().invoke(main, [str(tmp_path)])
    assert r.exit_code == 0, r.output
    base = tmp_path.resolve()
    assert sorted(digest_lines(r.stdout)) == sorted(
        [
            f"{hashlib.sha256(b'hello').hexdigest()} {base / 'a.txt'}",
            f"{hashlib.sha256(b'world').hexdigest()} {base / 'sub' / 'b.txt'}",
        ]
    )


def test_cli_default_root(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    create_tree(tmp_path, {"only.txt": "x"})
    monkeypatch.chdir(tmp_path)
    r = CliRunner().invoke(main, ["--threads", "1"])
    assert r.exit_code == 0, r.output
    assert digest_lines(r.stdout) == [
        f"{hashlib.sha256(b'x').hexdigest()} {tmp_path.resolve() / 'only.txt'}"
    ]


def test_cli_algorithm(tmp_path: Path) -> None:
    create_tree(tmp_path, {"a.txt": "hello"})
    r = CliRunner().invoke(main, ["-a", "md5", str(tmp_path)])
    assert r.exit_code == 0, r.output
    assert digest_lines(r.stdout) == [
        f"{hashlib.md5(b'hello').hexdigest()} {tmp_path.resolve() / 'a.txt'}"
    ]


def test_cli_skip(sample_tree: Path) -> None:
    r = CliRunner().invoke(
        main, ["--skip", str(sample_tree / "sub"), "-Q", "2", str(sample_tree)]
    )
    assert r.exit_code == 0, r.output
    names = sorted(Path(line.split(" ", 1)[1]).name for line in digest_lines(r.stdout))
    assert names == ["a.txt", "d.txt", "empty.dat"]


def test_cli_nonexistent_root(
    tmp_path: Path, caplog: pytest.LogCaptureFixture
) -> None:
    root = tmp_path / "nonexistent"
    r = CliRunner().invoke(main, [str(root)])
    assert r.exit_code == 0, r.output
    assert digest_lines(r.stdout) == []
    (record,) = error_records(caplog)
    assert str(root) in record.getMessage()


def test_cli_empty_root(tmp_path: Path, caplog: pytest.LogCaptureFixture) -> None:
    r = CliRunner().invoke(main, [str(tmp_path)])
    assert r.exit_code == 0, r.output
    assert r.stdout == ""
    assert error_records(caplog) == []


@pytest.mark.parametrize(
    "args",
    [["--threads", "0"], ["--algorithm", "crc32"], ["--max-queue", "-1"]],
)
def test_cli_bad_options(tmp_path: Path, args: list[str]) -> None:
    r = CliRunner().invoke(main, [*args, str(tmp_path)])
    assert r.exit_code == 2


def test_cli_version() -> None:
    r = CliRunner().invoke(main, ["--version"])
    assert r.exit_code == 0
    assert __version__ in r.output
