"""Command line: fit the NG and OK sheets of a workbook and report or chart the results."""

from __future__ import annotations

import argparse
import sys
from collections.abc import Sequence

from .charts import box_chart, scatter_chart
from .results import HEADERS, ResultTable, clipboard_text, load_results
from .xlsx import WorkbookError

NG_TITLE = "NG 결과"
OK_TITLE = "OK 결과"

_CHARTS = {"box": box_chart, "scatter": scatter_chart}


def build_parser() -> argparse.ArgumentParser:
    """Argument parser for the command."""
    parser = argparse.ArgumentParser(
        prog="bandfit",
        description=(
            "Fit a Gaussian dip on a linear baseline to every numeric column "
            "of the NG and OK sheets of a workbook."
        ),
    )
    parser.add_argument("workbook", help="path of the .xlsx workbook")
    parser.add_argument("--ng-sheet", default="NG", help="name of the NG sheet")
    parser.add_argument("--ok-sheet", default="OK", help="name of the OK sheet")
    parser.add_argument(
        "-o", "--output", help="write the result tables to this file instead of stdout"
    )
    parser.add_argument("--chart", choices=sorted(_CHARTS), help="kind of chart to draw")
    parser.add_argument("--parameter", choices=HEADERS, help="result column to chart")
    parser.add_argument("--save", help="image file the chart is written to")
    return parser


def main(argv: Sequence[str] | None = None) -> int:
    """Run the command; returns the exit status."""
    parser = build_parser()
    args = parser.parse_args(argv)
    if args.parameter is not None and args.chart is None:
        parser.error("--parameter needs --chart to choose the chart type")
    if args.chart is not None and args.parameter is None:
        parser.error("--chart needs --parameter to choose the column")
    if args.chart is not None and args.save is None:
        parser.error("--chart needs --save to name the image file")

    tables: dict[str, ResultTable] = {}
    loaded = False
    for title, sheet in ((NG_TITLE, args.ng_sheet), (OK_TITLE, args.ok_sheet)):
        try:
            tables[title] = load_results(args.workbook, sheet)
            loaded = True
        except WorkbookError as exc:
            print(f"error: {exc}", file=sys.stderr)
            tables[title] = ResultTable()

    if not loaded:
        print("error: no data loaded", file=sys.stderr)
        return 1

    text = clipboard_text(tables)
    if args.output:
        with open(args.output, "w", encoding="utf-8", newline="") as handle:
            handle.write(text)
    else:
        sys.stdout.write(text)

    if args.chart is not None:
        ng = tables[NG_TITLE].column(args.parameter)
        ok = tables[OK_TITLE].column(args.parameter)
        figure = _CHARTS[args.chart](ng, ok, args.parameter)
        try:
            figure.savefig(args.save)
        except (OSError, ValueError) as exc:
            print(f"error: cannot save chart: {exc}", file=sys.stderr)
            return 1
    return 0


if __name__ == "__main__":
    raise SystemExit(main())