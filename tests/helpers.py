from __future__ import annotations
import io
import logging
from pathlib import Path
import re
from typing import Dict, Set, Tuple, Union
import pytest
from treedigest import DigestPipeline, ResultSink, ScanStats

Layout = Dict[str, Union[str, bytes, "Layout"]]

RESULT_RGX = re.compile(r"^([0-9a-f]+) (.+)$")


def create_tree(root: Path, layout: Layout) -> None:
    """
    Populate ``root`` according to ``layout``: a mapping from names to either
    file contents (`str` or `bytes`) or nested layouts for subdirectories
    """
    root.mkdir(parents=True, exist_ok=True)
    for name, sublayout in layout.items():
        p = root / name
        if isinstance(sublayout, dict):
            create_tree(p, sublayout)
        elif isinstance(sublayout, bytes):
            p.write_bytes(sublayout)
        else:
            p.write_text(sublayout)


def parse_results(output: str) -> Set[Tuple[str, str]]:
    results = set()
    lines = output.splitlines()
    for line in lines:
        m = RESULT_RGX.fullmatch(line)
        assert m, f"Malformed result line: {line!r}"
        results.add((m[1], m[2]))
    assert len(results) == len(lines), "Duplicate result lines"
    return results


def run_pipeline(
    root: Union[str, Path], **kwargs
) -> Tuple[Set[Tuple[str, str]], ScanStats]:
    kwargs.setdefault("threads", 4)
    fp = io.StringIO()
    stats = DigestPipeline(**kwargs).run(root, ResultSink(fp))
    return parse_results(fp.getvalue()), stats


def error_records(caplog: pytest.LogCaptureFixture) -> list[logging.LogRecord]:
    return [r for r in caplog.records if r.levelno >= logging.ERROR]
