"""CLI entrypoint for the photo gallery.

Usage:
    python -m photogallery [--config config.yaml] [--root DIR] [--json] [--verbose] <command>

Commands:
    add [--count N]                                   add random images
    list                                              list saved images in rank order
    sort --by {author,acquired_at,manual} [--descending]
    delete ID [ID ...]                                delete images and their files
    report                                            collection summary
"""

from __future__ import annotations

import argparse
import asyncio
import json
import logging
import sys
from pathlib import Path

import yaml
from pydantic import ValidationError
from rich.console import Console
from rich.logging import RichHandler
from rich.panel import Panel
from rich.table import Table

from photogallery.config import GalleryConfig
from photogallery.errors import GalleryError
from photogallery.report import GalleryReport, build_report
from photogallery.service import AcquisitionService
from photogallery.types import ImageRecord, SortKey, SortState
from photogallery.utils.image import probe_dimensions

console = Console()
logger = logging.getLogger("photogallery")


def _format_time(record: ImageRecord) -> str:
    if record.acquired_at is None:
        return "-"
    return record.acquired_at.strftime("%b-%d-%Y %H:%M")


def _build_records_table(records: list[ImageRecord], sizes: dict[str, str], title: str) -> Table:
    table = Table(title=title, show_lines=False)
    table.add_column("Rank", justify="right", width=5)
    table.add_column("ID", style="cyan")
    table.add_column("Author")
    table.add_column("Acquired")
    table.add_column("Size", justify="right")
    table.add_column("Download", justify="right")

    for record in records:
        duration = "-" if record.download_duration is None else f"{record.download_duration:.2f}s"
        table.add_row(
            str(record.rank),
            record.id,
            record.display_author,
            _format_time(record),
            sizes.get(record.id, "-"),
            duration,
        )
    return table


def _build_report_panel(report: GalleryReport) -> Panel:
    lines = [
        f"[bold]Number of photos:[/bold] {report.total}",
        f"[bold]Photos downloaded today:[/bold] {report.acquired_today}",
        f"[bold]Unique authors:[/bold] {report.unique_authors}",
    ]
    if report.by_author:
        lines.append("[bold]Authors:[/bold]")
        lines.extend(f"  {author}: {count}" for author, count in report.by_author)
    else:
        lines.append("[bold]Authors:[/bold] No authors")
    return Panel("\n".join(lines), title="Gallery Report", border_style="green")


async def _image_sizes(service: AcquisitionService, records: list[ImageRecord]) -> dict[str, str]:
    sizes: dict[str, str] = {}
    for record in records:
        try:
            data = await service.store.read_bytes(record)
        except GalleryError as exc:
            logger.warning("%s", exc)
            continue
        dims = probe_dimensions(data)
        if dims is not None:
            sizes[record.id] = f"{dims[0]}x{dims[1]}"
    return sizes


async def _run(args: argparse.Namespace, service: AcquisitionService) -> dict | None:
    """Execute one command. Returns a JSON-serializable result."""
    if args.command == "add":
        added: list[ImageRecord] = []
        for _ in range(args.count):
            record = await service.add_random_image()
            if record is None:
                logger.warning("Listing returned no images")
                break
            added.append(record)
            logger.info("Added image %s by %s", record.id, record.display_author)
        return {"added": [r.to_dict() for r in added]}

    if args.command == "list":
        records = await service.load_all()
        if not args.json:
            sizes = await _image_sizes(service, records)
            console.print(_build_records_table(records, sizes, f"{len(records)} image(s)"))
        return {"images": [r.to_dict() for r in records]}

    if args.command == "sort":
        state = SortState(SortKey(args.by), ascending=not args.descending)
        records = await service.apply_sort(await service.load_all(), state)
        if not args.json:
            console.print(_build_records_table(records, {}, f"Sorted by {state.key.value}"))
        return {"images": [r.to_dict() for r in records]}

    if args.command == "delete":
        stored = {record.id for record in await service.load_all()}
        requested = list(dict.fromkeys(args.ids))
        existing = [record_id for record_id in requested if record_id in stored]
        unknown = [record_id for record_id in requested if record_id not in stored]
        if unknown:
            logger.warning("No image with id: %s", ", ".join(unknown))
        await service.delete(existing)
        logger.info("Deleted %d image(s)", len(existing))
        return {"deleted": existing}

    if args.command == "report":
        report = build_report(await service.load_all())
        if not args.json:
            console.print(_build_report_panel(report))
        return report.to_dict()

    raise ValueError(f"Unknown command: {args.command!r}")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Fetch, store and organize random photos.",
        prog="photogallery",
    )
    parser.add_argument("--config", type=Path, default=None, help="Gallery config YAML")
    parser.add_argument("--root", type=Path, default=None, help="Override the storage directory")
    parser.add_argument("--json", action="store_true", help="Output JSON")
    parser.add_argument("--verbose", "-v", action="store_true", help="Debug logging")

    sub = parser.add_subparsers(dest="command", required=True)

    add = sub.add_parser("add", help="Add random images from the listing endpoint")
    add.add_argument("--count", "-n", type=int, default=1, help="Images to add (default: 1)")

    sub.add_parser("list", help="List saved images in display order")

    sort = sub.add_parser("sort", help="Reorder saved images")
    sort.add_argument(
        "--by", choices=[k.value for k in SortKey], required=True, help="Sort field",
    )
    sort.add_argument("--descending", action="store_true", help="Reverse the direction")

    delete = sub.add_parser("delete", help="Delete images by id")
    delete.add_argument("ids", nargs="+", help="Image ids")

    sub.add_parser("report", help="Summarize the collection")
    return parser


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)

    if args.json:
        logging.basicConfig(level=logging.WARNING)
    else:
        logging.basicConfig(
            level=logging.DEBUG if args.verbose else logging.INFO,
            format="%(message)s",
            handlers=[RichHandler(console=console, show_time=True, show_path=False)],
        )

    if args.config is not None and not args.config.is_file():
        console.print(f"[red]Error: {args.config} not found[/red]")
        return 1

    try:
        config = GalleryConfig.from_yaml(args.config) if args.config else GalleryConfig.default()
    except (yaml.YAMLError, ValidationError) as exc:
        console.print(f"[red]Error: invalid config {args.config}: {exc}[/red]")
        return 1
    if args.root is not None:
        config.storage.root_dir = args.root

    try:
        service = AcquisitionService.from_config(config)
        try:
            result = asyncio.run(_run(args, service))
        finally:
            service.store.close()
    except GalleryError as exc:
        console.print(f"[red]Error: {exc}[/red]")
        return 1

    if args.json:
        print(json.dumps(result, indent=2))
    return 0


if __name__ == "__main__":
    sys.exit(main())
