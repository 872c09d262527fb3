"""News CLI commands - thin wrappers orchestrating validation, service and display."""

from __future__ import annotations

from typing import Optional

import typer

from newsdesk.constants import PAGE_SIZE_DEFAULT
from newsdesk.news.errors import NewsdeskError

from ..core.console import console, print_error, print_success, print_warning
from ..core.types import Failure
from .display import (
    show_answer,
    show_articles,
    show_enriched,
    show_json,
    show_removed,
    show_sources,
)
from .service import run_with_service, source_stats
from .validators import validate_category, validate_paging, validate_url


def _fail(result: Failure) -> None:
    print_error(result.error, result.details)
    raise typer.Exit(1)


def headlines(
    category: Optional[str] = typer.Option(None, "--category", "-c", help="Category filter (default: all)"),
    page: int = typer.Option(1, "--page", "-p", help="Page number (1-based)"),
    page_size: int = typer.Option(PAGE_SIZE_DEFAULT, "--page-size", "-n", help="Articles per page"),
    search: Optional[str] = typer.Option(None, "--search", "-s", help="Keyword search instead of listing"),
    as_json: bool = typer.Option(False, "--json", help="Print the raw response as JSON"),
) -> None:
    """Show recent headlines, from cache when it is fresh."""
    category_result = validate_category(category)
    if isinstance(category_result, Failure):
        _fail(category_result)
    paging = validate_paging(page, page_size)
    if isinstance(paging, Failure):
        _fail(paging)

    try:
        data = run_with_service(lambda service: service.get_articles(
            category=category_result.value,
            page=page,
            page_size=page_size,
            search=search,
        ))
    except NewsdeskError as e:
        print_error(str(e))
        raise typer.Exit(1)

    if as_json:
        show_json(console, data)
        return
    if search:
        title = f"Search: {search}"
    else:
        label = category_result.value.display_name if category_result.value else "All"
        title = f"Headlines: {label}"
    show_articles(console, data, title=title)


def refresh(
    force: bool = typer.Option(False, "--force", "-f", help="Purge expired rows and refetch"),
    category: Optional[str] = typer.Option(None, "--category", "-c", help="Category filter (default: all)"),
    page: int = typer.Option(1, "--page", "-p", help="Page number (1-based)"),
    page_size: int = typer.Option(PAGE_SIZE_DEFAULT, "--page-size", "-n", help="Articles per page"),
    as_json: bool = typer.Option(False, "--json", help="Print the raw response as JSON"),
) -> None:
    """Refresh headlines. With --force, bypass the cache entirely."""
    category_result = validate_category(category)
    if isinstance(category_result, Failure):
        _fail(category_result)
    paging = validate_paging(page, page_size)
    if isinstance(paging, Failure):
        _fail(paging)

    try:
        data = run_with_service(lambda service: service.refresh(
            force_refresh=force,
            category=category_result.value,
            page=page,
            page_size=page_size,
        ))
    except NewsdeskError as e:
        print_error(str(e))
        raise typer.Exit(1)

    if as_json:
        show_json(console, data)
        return
    show_articles(console, data, title="Refreshed Headlines")


def top_stories(
    page_size: int = typer.Option(30, "--page-size", "-n", help="Number of stories"),
    as_json: bool = typer.Option(False, "--json", help="Print the raw response as JSON"),
) -> None:
    """Show the latest stories across local and international feeds."""
    paging = validate_paging(1, page_size)
    if isinstance(paging, Failure):
        _fail(paging)

    data = run_with_service(lambda service: service.top_stories(page_size))
    if as_json:
        show_json(console, data)
        return
    show_articles(console, data, title="Top Stories")


def enrich(
    url: str = typer.Argument(..., help="Article URL"),
    as_json: bool = typer.Option(False, "--json", help="Print the raw response as JSON"),
) -> None:
    """Render an article page and extract its full text."""
    url_result = validate_url(url)
    if isinstance(url_result, Failure):
        _fail(url_result)

    data = run_with_service(lambda service: service.enrich(url_result.value))
    if as_json:
        show_json(console, data)
        return
    show_enriched(console, url_result.value, data)


def ask(
    message: str = typer.Argument(..., help="Question about the news"),
    category: Optional[str] = typer.Option(None, "--category", "-c", help="Restrict context to a category"),
    web: bool = typer.Option(False, "--web", "-w", help="Add web search results to the context"),
) -> None:
    """Ask the news assistant about current headlines."""
    category_result = validate_category(category)
    if isinstance(category_result, Failure):
        _fail(category_result)

    try:
        answer = run_with_service(lambda service: service.ask(message, category_result.value, web_search=web))
    except NewsdeskError as e:
        print_error(str(e))
        raise typer.Exit(1)
    show_answer(console, answer)


def sources(
    as_json: bool = typer.Option(False, "--json", help="Print the raw response as JSON"),
) -> None:
    """List configured news sources in fallback order."""
    stats = source_stats()
    if as_json:
        show_json(console, stats)
        return
    show_sources(console, stats)


def purge() -> None:
    """Delete cached articles past the retention windows (pinned rows are kept)."""
    removed = run_with_service(lambda service: service.purge())
    show_removed(console, "Purge", removed)


def clear(
    yes: bool = typer.Option(False, "--yes", "-y", help="Skip the confirmation prompt"),
) -> None:
    """Delete every unpinned cached article."""
    if not yes and not typer.confirm("Delete all unpinned cached articles?"):
        print_warning("Clear cancelled, nothing deleted.")
        raise typer.Exit(0)
    removed = run_with_service(lambda service: service.clear())
    show_removed(console, "Clear", removed)


def pin(
    url: str = typer.Argument(..., help="Article URL to keep through purges"),
) -> None:
    """Pin an article so purges never delete it."""
    url_result = validate_url(url)
    if isinstance(url_result, Failure):
        _fail(url_result)
    run_with_service(lambda service: service.pin(url_result.value))
    print_success(f"Pinned {url_result.value}")


def unpin(
    url: str = typer.Argument(..., help="Pinned article URL"),
) -> None:
    """Remove a pin."""
    url_result = validate_url(url)
    if isinstance(url_result, Failure):
        _fail(url_result)
    run_with_service(lambda service: service.unpin(url_result.value))
    print_success(f"Unpinned {url_result.value}")
