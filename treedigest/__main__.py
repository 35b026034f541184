from __future__ import annotations
import logging
from pathlib import Path
from typing import Optional, Tuple
import click
from . import __version__
from .digest import ALGORITHMS, DEFAULT_ALGORITHM
from .pipeline import DigestPipeline, detect_parallelism
from .results import ResultSink
from .walker import DEFAULT_SKIP_PREFIXES

log = logging.getLogger("treedigest")


@click.command()
@click.version_option(__version__, "-V", "--version", message="%(prog)s %(version)s")
@click.option(
    "-a",
    "--algorithm",
    type=click.Choice(ALGORITHMS),
    default=DEFAULT_ALGORITHM,
    show_default=True,
    help="Digest algorithm to compute for each file",
)
@click.option(
    "--default-skip/--no-default-skip",
    default=True,
    show_default=True,
    help=f"Skip the pseudo-filesystems {', '.join(DEFAULT_SKIP_PREFIXES)}",
)
@click.option(
    "--follow-symlinks/--no-follow-symlinks",
    "-L/-P",
    default=True,
    show_default=True,
    help="Follow symbolic links to files and directories",
)
@click.option(
    "-Q",
    "--max-queue",
    type=click.IntRange(min=0),
    default=0,
    show_default=True,
    help="Maximum number of discovered paths waiting to be digested (0 = unbounded)",
)
@click.option(
    "-x",
    "--skip",
    type=click.Path(path_type=Path),
    multiple=True,
    help="Do not descend into or digest paths under this prefix.  May be given multiple times.",
)
@click.option(
    "-T",
    "--threads",
    type=click.IntRange(min=1),
    default=None,
    help="Number of digest worker threads  [default: number of available CPUs]",
)
@click.option(
    "-v",
    "--verbose",
    count=True,
    help="Increase logging verbosity.  Repeat option for more logs.",
)
@click.argument(
    "root", type=click.Path(path_type=Path), default=".", required=False
)
def main(
    root: Path,
    algorithm: str,
    default_skip: bool,
    follow_symlinks: bool,
    max_queue: int,
    skip: Tuple[Path, ...],
    threads: Optional[int],
    verbose: int,
) -> None:
    """
    Print a digest for every regular file under ROOT (default: the current
    directory).

    Each output line consists of the file's digest in lowercase hexadecimal
    followed by a space and the file's canonical path.  Lines appear in no
    particular order.  Files and directories that cannot be read are reported
    on standard error and skipped.
    """
    if verbose == 0:
        log_level = logging.WARNING
    elif verbose == 1:
        log_level = logging.INFO
    elif verbose == 2:
        log_level = logging.DEBUG
    else:
        log_level = 1
    logging.basicConfig(format="%(asctime)s %(levelname)s %(message)s", level=log_level)
    skip_prefixes = list(skip)
    if default_skip:
        skip_prefixes.extend(DEFAULT_SKIP_PREFIXES)
    pipeline = DigestPipeline(
        threads=threads if threads is not None else detect_parallelism(),
        algorithm=algorithm,
        skip_prefixes=skip_prefixes,
        max_queue=max_queue,
        follow_symlinks=follow_symlinks,
    )
    job = pipeline.start(root, ResultSink())
    try:
        job.join()
    except KeyboardInterrupt:
        log.warning("Interrupted; waiting for in-progress digests to finish")
        job.cancel()
        job.join()


if __name__ == "__main__":
    main()
