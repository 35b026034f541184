#!/usr/bin/env python3
import argparse
import csv
import json

FIELDS = [
    "dirpath",
    "algorithm",
    "threads",
    "max_queue",
    "number",
    "files",
    "avgtime",
]


def main() -> None:
    parser = argparse.ArgumentParser(
        description="Convert a file of JSON Lines treedigest-timings reports to CSV"
    )
    parser.add_argument("-o", "--outfile", type=argparse.FileType("w"), default="-")
    parser.add_argument("report", type=argparse.FileType("r"))
    args = parser.parse_args()
    with args.outfile:
        out = csv.DictWriter(args.outfile, FIELDS)
        out.writeheader()
        with args.report:
            for line in args.report:
                if line.strip():
                    out.writerow(json.loads(line))


if __name__ == "__main__":
    main()
