"""Display functions for news commands - pure functions for Rich output."""

from __future__ import annotations

import json
from typing import Any, Optional

from rich.console import Console
from rich.markdown import Markdown
from rich.panel import Panel
from rich.table import Table

from newsdesk.utils.timestamps import format_local, parse_timestamp_lenient


def show_json(console: Console, data: Any) -> None:
    """Print ``data`` as plain JSON (no markup, no highlighting)."""
    console.print_json(json.dumps(data, ensure_ascii=False))


def _published(value: Optional[str]) -> str:
    parsed = parse_timestamp_lenient(value)
    return format_local(parsed) if parsed else "-"


def show_articles(console: Console, data: dict[str, Any], title: str = "Headlines") -> None:
    """Display a page of articles with its pagination footer."""
    articles = data.get("articles", [])
    pagination = data.get("pagination", {})

    if not articles:
        console.print("[yellow]No articles found.[/yellow]")
        return

    table = Table(title=title, show_lines=False)
    table.add_column("#", style="dim", justify="right")
    table.add_column("Title", style="bold", overflow="fold")
    table.add_column("Source", style="cyan")
    table.add_column("Category", style="magenta")
    table.add_column("Published", style="green")

    offset = (pagination.get("page", 1) - 1) * pagination.get("pageSize", len(articles))
    for i, article in enumerate(articles, start=offset + 1):
        table.add_row(
            str(i),
            article.get("title", ""),
            article.get("source", ""),
            article.get("category", ""),
            _published(article.get("publishedAt")),
        )

    console.print(table)

    footer = f"Page {pagination.get('page', 1)}"
    if pagination.get("total") is not None:
        footer += f" | {pagination['total']} cached"
    if pagination.get("hasMore"):
        footer += " | more available (use --page)"
    console.print(f"[dim]{footer}[/dim]")


def show_enriched(console: Console, url: str, data: dict[str, Any]) -> None:
    """Display extracted article text."""
    lines = [f"[dim]{url}[/dim]"]
    if data.get("author"):
        lines.append(f"Author: [cyan]{data['author']}[/cyan]")
    if data.get("publishedAt"):
        lines.append(f"Published: [green]{_published(data['publishedAt'])}[/green]")
    if data.get("imageUrl"):
        lines.append(f"Image: [dim]{data['imageUrl']}[/dim]")

    console.print(Panel("\n".join(lines), title="Article", border_style="cyan"))
    console.print(data.get("content", ""))


def show_answer(console: Console, answer: str) -> None:
    console.print(Panel(Markdown(answer), title="News Assistant", border_style="green"))


def show_sources(console: Console, stats: dict[str, Any]) -> None:
    """Display the configured source chain."""
    table = Table(title=f"News Sources (country: {stats.get('country', '-')})")
    table.add_column("Priority", justify="right")
    table.add_column("Source", style="cyan")
    table.add_column("Enabled")
    table.add_column("Credentials")

    for source in stats.get("sources", []):
        table.add_row(
            str(source["priority"]),
            source["name"],
            "[green]yes[/green]" if source["enabled"] else "[dim]no[/dim]",
            "[green]ok[/green]" if source.get("configured") else "[yellow]missing[/yellow]",
        )

    console.print(table)
    keywords = stats.get("breaking_keywords") or []
    if keywords:
        console.print(f"[dim]Breaking keywords: {', '.join(keywords)}[/dim]")


def show_removed(console: Console, action: str, count: int) -> None:
    if count:
        console.print(f"[green]{action}: removed {count} article(s).[/green]")
    else:
        console.print(f"[dim]{action}: nothing to remove.[/dim]")
