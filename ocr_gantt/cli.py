"""Command-line interface for turning schedule scans into Gantt PDFs.

Subcommands:
    extract  recognize an image and print the table and tasks as JSON
    gantt    recognize an image and write the chart PDF
    derive   rebuild tasks (and optionally the PDF) from an edited CSV table
"""

import argparse
import json
import sys
from pathlib import Path

from ocr_gantt.pipeline import SchedulePipeline, ScheduleResult
from ocr_gantt.render.pdf_export import export_pdf
from ocr_gantt.render.timeline import TimelineRenderer
from ocr_gantt.schedule.editing import EditableTable
from ocr_gantt.table.csv_io import read_table_csv, write_table_csv
from ocr_gantt.utils.config import AppConfig, load_config
from ocr_gantt.utils.logger import get_logger, setup_logging

logger = get_logger(__name__)


def parse_cell_edit(raw: str) -> tuple[int, str, str]:
    """Parse a ``ROW:HEADER=VALUE`` edit, ROW being 1-based.

    Returns:
        ``(row_index, header, value)`` with a 0-based row index.

    Raises:
        argparse.ArgumentTypeError: If the edit is malformed.
    """
    target, sep, value = raw.partition("=")
    row, colon, key = target.partition(":")
    if not sep or not colon or not key:
        raise argparse.ArgumentTypeError(f"Expected ROW:HEADER=VALUE, got {raw!r}")
    try:
        row_number = int(row)
    except ValueError as exc:
        raise argparse.ArgumentTypeError(f"Row must be a number: {row!r}") from exc
    if row_number < 1:
        raise argparse.ArgumentTypeError(f"Row numbers start at 1, got {row_number}")
    return row_number - 1, key, value


def result_to_dict(result: ScheduleResult) -> dict[str, object]:
    """Flatten a pipeline result into a JSON-serializable dict."""
    return {
        "filename": result.source_file,
        "raw_text": result.text,
        "ocr_confidence": round(result.ocr_result.confidence, 3),
        "headers": result.table.headers,
        "rows": result.table.rows,
        "tasks": [task.to_dict() for task in result.tasks],
    }


def write_chart(
    tasks_table: EditableTable,
    config: AppConfig,
    output_pdf: Path,
    output_png: Path | None = None,
) -> bool:
    """Render the table's tasks and write the PDF (and PNG if asked).

    Args:
        tasks_table: Table whose derived tasks are drawn.
        config: Application configuration.
        output_pdf: PDF destination.
        output_png: Optional destination for the chart bitmap.

    Returns:
        ``False`` when there is nothing to render.
    """
    tasks = tasks_table.tasks
    if not tasks:
        print("No tasks could be derived; nothing to render.", file=sys.stderr)
        return False

    png = TimelineRenderer(config.chart).render(tasks)
    if output_png is not None:
        output_png.parent.mkdir(parents=True, exist_ok=True)
        output_png.write_bytes(png)
        print(f"Chart image written to {output_png}")

    export_pdf(png, config.export, output_pdf)
    print(f"PDF written to {output_pdf} ({len(tasks)} tasks)")
    return True


def _print_tasks(tasks_table: EditableTable) -> None:
    print(f"\n{'=' * 50}")
    print(f"Rows:  {len(tasks_table)}")
    print(f"Tasks: {len(tasks_table.tasks)}")
    print(f"{'=' * 50}")
    for task in tasks_table.tasks:
        print(f"{task.id:>4}  {task.name}  {task.start} .. {task.end}  {task.progress:g}%")


def _cmd_extract(args: argparse.Namespace, config: AppConfig) -> int:
    result = SchedulePipeline(config).run(args.file, args.file.name, lang=args.lang)
    if args.csv:
        write_table_csv(result.table, args.csv)
        print(f"Table written to {args.csv}")

    output_str = json.dumps(result_to_dict(result), indent=2, ensure_ascii=False)
    if args.output:
        args.output.parent.mkdir(parents=True, exist_ok=True)
        args.output.write_text(output_str, encoding="utf-8")
        print(f"Output written to {args.output}")
    else:
        print(output_str)
    return 0


def _cmd_gantt(args: argparse.Namespace, config: AppConfig) -> int:
    result = SchedulePipeline(config).run(args.file, args.file.name, lang=args.lang)
    tasks_table = EditableTable(result.table, config.schedule)
    _print_tasks(tasks_table)
    return 0 if write_chart(tasks_table, config, args.output, args.png) else 1


def _cmd_derive(args: argparse.Namespace, config: AppConfig) -> int:
    tasks_table = EditableTable(read_table_csv(args.table), config.schedule)
    for row_index, key, value in args.set or []:
        try:
            tasks_table.edit_cell(row_index, key, value)
        except IndexError as exc:
            print(f"Error: {exc}", file=sys.stderr)
            return 1
    if args.set and args.save:
        write_table_csv(tasks_table.to_table(), args.table)

    _print_tasks(tasks_table)
    if args.output is None:
        return 0
    return 0 if write_chart(tasks_table, config, args.output, args.png) else 1


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Scanned schedule sheet to Gantt chart",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument("-c", "--config", type=Path, help="YAML configuration file")

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    extract_parser = subparsers.add_parser("extract", help="Recognize an image to JSON")
    extract_parser.add_argument("file", type=Path, help="Image or scanned PDF")
    extract_parser.add_argument("-o", "--output", type=Path, help="Output JSON file")
    extract_parser.add_argument("--csv", type=Path, help="Also write the table as CSV")
    extract_parser.add_argument("-l", "--lang", help="Tesseract language (default: config)")

    gantt_parser = subparsers.add_parser("gantt", help="Recognize an image to a PDF chart")
    gantt_parser.add_argument("file", type=Path, help="Image or scanned PDF")
    gantt_parser.add_argument(
        "-o",
        "--output",
        type=Path,
        default=Path("gantt_chart.pdf"),
        help="Output PDF file (default: gantt_chart.pdf)",
    )
    gantt_parser.add_argument("--png", type=Path, help="Also write the chart as PNG")
    gantt_parser.add_argument("-l", "--lang", help="Tesseract language (default: config)")

    derive_parser = subparsers.add_parser("derive", help="Derive tasks from an edited CSV table")
    derive_parser.add_argument("table", type=Path, help="CSV written by 'extract --csv'")
    derive_parser.add_argument(
        "--set",
        action="append",
        type=parse_cell_edit,
        metavar="ROW:HEADER=VALUE",
        help="Edit a cell before deriving (ROW is 1-based; repeatable)",
    )
    derive_parser.add_argument(
        "--save", action="store_true", help="Write --set edits back to the CSV"
    )
    derive_parser.add_argument("-o", "--output", type=Path, help="Output PDF file")
    derive_parser.add_argument("--png", type=Path, help="Also write the chart as PNG")

    return parser


def main(argv: list[str] | None = None) -> None:
    """Parse CLI arguments and dispatch to the appropriate command.

    Args:
        argv: Command-line arguments (defaults to sys.argv).
    """
    parser = build_parser()
    args = parser.parse_args(argv)

    config = load_config(args.config)
    setup_logging(config.log_level)

    commands = {"extract": _cmd_extract, "gantt": _cmd_gantt, "derive": _cmd_derive}
    if args.command not in commands:
        parser.print_help()
        sys.exit(0)

    source = args.table if args.command == "derive" else args.file
    if not source.exists():
        print(f"Error: {source} does not exist", file=sys.stderr)
        sys.exit(1)

    try:
        code = commands[args.command](args, config)
    except Exception as exc:
        logger.error("%s failed: %s", args.command, exc)
        print(f"Error: {exc}", file=sys.stderr)
        sys.exit(1)
    if code:
        sys.exit(code)


if __name__ == "__main__":
    main()
