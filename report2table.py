#!/usr/bin/env python3
from __future__ import annotations
import argparse
from dataclasses import dataclass, field
from textwrap import indent
from typing import Dict, List, Set
from pydantic import BaseModel
from txtble import ASCII_EQ_BORDERS, Txtble


class ReportEntry(BaseModel):
    dirpath: str
    algorithm: str
    threads: int
    max_queue: int
    number: int
    files: int
    avgtime: float

    @property
    def row_id(self) -> RowID:
        return RowID(threads=self.threads, max_queue=self.max_queue)

    @property
    def value(self) -> Average:
        return Average.from_average(self.number, self.avgtime)


@dataclass(frozen=True, order=True)
class RowID:
    threads: int
    max_queue: int = 0

    def __str__(self) -> str:
        s = f"{self.threads} threads"
        if self.max_queue:
            s += f", max queue {self.max_queue}"
        return s


@dataclass
class Average:
    qty: int
    total: float

    @classmethod
    def from_average(cls, qty: int, avg: float) -> Average:
        return cls(qty=qty, total=avg * qty)

    def __add__(self, other: Average) -> Average:
        return type(self)(qty=self.qty + other.qty, total=self.total + other.total)

    def __float__(self) -> float:
        return self.total / self.qty

    def __str__(self) -> str:
        return "{:g}".format(float(self))


@dataclass
class Table:
    dirpath: str
    files: int
    headers: List[str]
    rows: List[List[str]]

    def as_rst(self) -> str:
        return f".. table:: ``{self.dirpath}`` ({self.files} files)\n\n" + indent(
            Txtble(
                headers=self.headers,
                data=self.rows,
                header_border=ASCII_EQ_BORDERS,
                row_border=True,
                padding=1,
            ).show(),
            " " * 4,
        )

    def as_markdown(self) -> str:
        return (
            f"### `{self.dirpath}` ({self.files} files)\n\n"
            + self.draw_row(self.headers)
            + "\n"
            + self.draw_row(["---"] * len(self.headers))
            + "\n"
            + "\n".join(map(self.draw_row, self.rows))
        )

    @staticmethod
    def draw_row(row: List[str]) -> str:
        return "| " + " | ".join(row) + " |"


@dataclass
class TableBuilder:
    dirpath: str
    files: int = 0
    algorithms: Set[str] = field(default_factory=set)
    cells: Dict[RowID, Dict[str, Average]] = field(default_factory=dict)

    def add_entry(self, entry: ReportEntry) -> None:
        row = self.cells.setdefault(entry.row_id, {})
        if entry.algorithm in row:
            row[entry.algorithm] += entry.value
        else:
            row[entry.algorithm] = entry.value
        self.algorithms.add(entry.algorithm)
        self.files = max(self.files, entry.files)

    def compile(self) -> Table:
        columns = sorted(self.algorithms)
        headers = [""] + columns
        rows = [
            [str(row_id)] + [str(row.get(c, "\u2014")) for c in columns]
            for row_id, row in sorted(self.cells.items())
        ]
        return Table(dirpath=self.dirpath, files=self.files, headers=headers, rows=rows)


def report2tables(report: List[ReportEntry]) -> List[Table]:
    builders: Dict[str, TableBuilder] = {}
    for entry in report:
        builders.setdefault(entry.dirpath, TableBuilder(entry.dirpath)).add_entry(
            entry
        )
    return [b.compile() for _, b in sorted(builders.items())]


def main() -> None:
    parser = argparse.ArgumentParser(
        description="Convert treedigest-timings JSON Lines reports to tables",
    )
    parser.add_argument("-f", "--format", choices=["rst", "md"], default="rst")
    parser.add_argument("-o", "--outfile", type=argparse.FileType("w"), default="-")
    parser.add_argument("-t", "--title")
    parser.add_argument("report", type=argparse.FileType("r"))
    args = parser.parse_args()
    with args.report:
        report = [
            ReportEntry.model_validate_json(line) for line in args.report if line.strip()
        ]
    tables = report2tables(report)
    with args.outfile:
        if args.title:
            print(args.title, file=args.outfile)
            print("=" * len(args.title), file=args.outfile)
            print(file=args.outfile)
        for tbl in tables:
            if args.format == "rst":
                print(tbl.as_rst(), file=args.outfile)
            else:
                print(tbl.as_markdown(), file=args.outfile)
            print(file=args.outfile)
        if args.format == "rst":
            print(".. vim:set nowrap:", file=args.outfile)
        else:
            print("<!-- vim:set nowrap: -->", file=args.outfile)


if __name__ == "__main__":
    main()
