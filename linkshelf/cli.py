"""
linkshelf CLI - save links and browse them by category
"""
import argparse
import asyncio
import logging
import sys
from pathlib import Path
from typing import Any, Dict, List, Optional

from dotenv import load_dotenv
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from .config import Config, get_config
from .errors import LinkShelfError
from .link_service import LinkService
from .logging_config import get_logger, setup_logging
from .models import Owner

logger = get_logger("cli")

console = Console()


def build_service(args) -> LinkService:
    """Create a LinkService from the config file and command line overrides."""
    config = Config.load(Path(args.config)) if args.config else get_config()
    if args.db:
        config.storage.db_path = args.db
    return LinkService.from_config(config)


def print_links(links: List[Dict[str, Any]], title: str) -> None:
    if not links:
        console.print("No links found.")
        return

    table = Table(title=title)
    table.add_column("ID", justify="right", style="cyan")
    table.add_column("Category", style="magenta")
    table.add_column("Title")
    table.add_column("URL", style="blue", overflow="fold")
    table.add_column("Saved", style="dim")

    for link in links:
        table.add_row(
            str(link["id"]),
            escape(link["category"]),
            escape(link["title"]),
            escape(link["url"]),
            link["createdAt"][:16].replace("T", " "),
        )
    console.print(table)


def cmd_add(service: LinkService, owner: Owner, args) -> int:
    """Ingest one or more URLs."""
    async def run() -> int:
        failed = 0
        for url in args.urls:
            try:
                result = await service.ingest(owner, url)
            except LinkShelfError as e:
                console.print(f"[red]Failed:[/red] {escape(url)}: {escape(str(e))}")
                failed += 1
                continue

            record = result.record
            console.print(f"[green]Saved[/green] #{record.id} {escape(record.category)} | {escape(record.title)}")
            if result.degraded:
                console.print(f"  [yellow]{escape(result.reason or '')}[/yellow]")
        return 1 if failed else 0

    return asyncio.run(run())


def cmd_list(service: LinkService, owner: Owner, args) -> int:
    if args.category:
        links = service.list_links_by_category(owner, args.category)
        print_links(links, f"Links in {args.category}")
    else:
        print_links(service.list_links(owner), "All links")
    return 0


def cmd_recent(service: LinkService, owner: Owner, args) -> int:
    print_links(service.recent_links(owner, args.limit), "Recently saved")
    return 0


def cmd_opened(service: LinkService, owner: Owner, args) -> int:
    print_links(service.recently_opened_links(owner, args.limit), "Recently opened")
    return 0


def cmd_show(service: LinkService, owner: Owner, args) -> int:
    """Show one link; counts as opening it."""
    link = service.get_link(owner, args.id)
    for key in ["id", "url", "category", "title", "description", "thumbnail", "createdAt"]:
        console.print(f"[bold]{key}:[/bold] {escape(str(link[key]))}")
    return 0


def cmd_delete(service: LinkService, owner: Owner, args) -> int:
    service.delete_link(owner, args.id)
    console.print(f"Deleted link #{args.id}")
    return 0


def cmd_count(service: LinkService, owner: Owner, args) -> int:
    console.print(f"Total: {service.count_links(owner)['total']} links")
    return 0


def cmd_categories(service: LinkService, owner: Owner, args) -> int:
    taxonomy = service.taxonomy
    table = Table(title="Categories")
    table.add_column("Category", style="magenta")
    table.add_column("Description")
    for category in taxonomy.categories:
        table.add_row(escape(category), escape(taxonomy.describe(category)))
    for category in taxonomy.pseudo_categories:
        table.add_row(escape(category), "[dim]pipeline status[/dim]")
    console.print(table)
    return 0


def create_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="linkshelf",
        description="linkshelf - save links and have them categorized automatically"
    )
    parser.add_argument("--db", help="SQLite database path (overrides config)")
    parser.add_argument("--owner", type=int, default=1, help="Owner id (default: 1)")
    parser.add_argument("--config", help="Path to config.yaml")
    parser.add_argument("-v", "--verbose", action="store_true", help="Debug logging on the console")
    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    # add command
    add_parser = subparsers.add_parser("add", help="Save and categorize links")
    add_parser.add_argument("urls", nargs="+", help="URLs to save")
    add_parser.set_defaults(func=cmd_add)

    # list command
    list_parser = subparsers.add_parser("list", help="List saved links, newest first")
    list_parser.add_argument("-c", "--category", help="Only links in this category")
    list_parser.set_defaults(func=cmd_list)

    # recent command
    recent_parser = subparsers.add_parser("recent", help="Recently saved links")
    recent_parser.add_argument("-l", "--limit", type=int, default=5, help="Max links to show")
    recent_parser.set_defaults(func=cmd_recent)

    # opened command
    opened_parser = subparsers.add_parser("opened", help="Recently opened links")
    opened_parser.add_argument("-l", "--limit", type=int, default=5, help="Max links to show")
    opened_parser.set_defaults(func=cmd_opened)

    # show command
    show_parser = subparsers.add_parser("show", help="Show a link")
    show_parser.add_argument("id", type=int, help="Link id")
    show_parser.set_defaults(func=cmd_show)

    # delete command
    delete_parser = subparsers.add_parser("delete", help="Delete a link")
    delete_parser.add_argument("id", type=int, help="Link id")
    delete_parser.set_defaults(func=cmd_delete)

    # count command
    count_parser = subparsers.add_parser("count", help="Count saved links")
    count_parser.set_defaults(func=cmd_count)

    # categories command
    categories_parser = subparsers.add_parser("categories", help="List categories")
    categories_parser.set_defaults(func=cmd_categories)

    return parser


def main(argv: Optional[List[str]] = None) -> int:
    parser = create_parser()
    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        return 1

    load_dotenv()
    setup_logging(logging.DEBUG if args.verbose else logging.WARNING)

    service = build_service(args)
    owner = Owner(id=args.owner)
    try:
        return args.func(service, owner, args)
    except LinkShelfError as e:
        logger.debug("Command %s failed: %r", args.command, e)
        console.print(f"[red]Error:[/red] {escape(str(e))}")
        return 1
    finally:
        service.store.close()


if __name__ == "__main__":
    sys.exit(main())
