#!/usr/bin/env python3
from __future__ import annotations
import json
import logging
import os
from pathlib import Path
from timeit import timeit
from typing import Optional
import click
from treedigest import (
    ALGORITHMS,
    DEFAULT_ALGORITHM,
    DigestPipeline,
    ResultSink,
    detect_parallelism,
)

log = logging.getLogger()


@click.command()
@click.option(
    "-a",
    "--algorithm",
    type=click.Choice(ALGORITHMS),
    default=DEFAULT_ALGORITHM,
    show_default=True,
    help="Digest algorithm to compute for each file",
)
@click.option(
    "-n",
    "--number",
    default=10,
    show_default=True,
    help="Number of times to digest the tree",
)
@click.option(
    "-Q",
    "--max-queue",
    type=click.IntRange(min=0),
    default=0,
    show_default=True,
    help="Bound on the work queue (0 = unbounded)",
)
@click.option(
    "-R",
    "--report",
    type=click.Path(dir_okay=False, writable=True, path_type=Path),
    help="Append a report as a line of JSON to this file",
)
@click.option(
    "-T",
    "--threads",
    type=click.IntRange(min=1),
    default=detect_parallelism(),
    show_default=True,
    help="Number of digest worker threads",
)
@click.option(
    "-v",
    "--verbose",
    count=True,
    help="Log the statistics of each run.  Repeat option for more logs.",
)
@click.argument(
    "dirpath", type=click.Path(exists=True, file_okay=False, path_type=Path)
)
def main(
    dirpath: Path,
    algorithm: str,
    number: int,
    max_queue: int,
    threads: int,
    report: Optional[Path],
    verbose: int,
) -> None:
    if verbose == 0:
        log_level = logging.WARNING
    elif verbose == 1:
        log_level = logging.INFO
    else:
        log_level = logging.DEBUG
    logging.basicConfig(format="%(asctime)s %(levelname)s %(message)s", level=log_level)
    pipeline = DigestPipeline(
        threads=threads, algorithm=algorithm, max_queue=max_queue, skip_prefixes=()
    )
    with open(os.devnull, "w") as devnull:
        sink = ResultSink(devnull)
        files = pipeline.run(dirpath, sink).files_digested
        log.info("Starting ...")
        avgtime = (
            timeit(
                "pipeline.run(dirpath, sink)",
                number=number,
                globals={"pipeline": pipeline, "dirpath": dirpath, "sink": sink},
            )
            / number
        )
    print(avgtime)
    if report is not None:
        data = {
            "dirpath": str(dirpath),
            "algorithm": algorithm,
            "threads": threads,
            "max_queue": max_queue,
            "number": number,
            "files": files,
            "avgtime": avgtime,
        }
        with report.open("a") as fp:
            print(json.dumps(data), file=fp)


if __name__ == "__main__":
    main()
