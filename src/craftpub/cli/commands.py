"""CLI command implementations"""

import asyncio
import logging
from typing import Annotated, Optional

import httpx
import typer

from craftpub.clients.craft import CraftClient
from craftpub.config import Settings, load_config
from craftpub.core.pipeline import run_publish
from craftpub.errors import CraftpubError, DocumentNotFoundError


LOG_FORMAT = "%(asctime)s - %(levelname)s - %(message)s"

CRAFT_CREDENTIALS = ("craft_api_url", "craft_token")
SANITY_CREDENTIALS = ("sanity_project_id", "sanity_dataset", "sanity_token")


def _fail(msg: str, cause: Exception = None) -> None:
    """Print a user-friendly error to stderr and exit 1."""
    typer.echo(f"Error: {msg}", err=True)
    if cause:
        typer.echo(f"  {cause}", err=True)
    raise typer.Exit(1)


def _settings(required: tuple[str, ...], overrides: dict = None) -> Settings:
    """Load config with standard CLI error handling and check required credentials."""
    try:
        settings = load_config(overrides=overrides)
    except ValueError as e:
        _fail(str(e))
    if missing := settings.missing(*required):
        _fail("Missing configuration: " + ", ".join(missing),
              "Set them in config.yaml or as CRAFTPUB_<NAME> environment variables.")
    return settings


def _configure_logging(verbose: bool) -> None:
    logging.basicConfig(level=logging.INFO if verbose else logging.WARNING, format=LOG_FORMAT)
    logging.getLogger("httpx").setLevel(logging.WARNING)


def _echo_titles(titles: list[str]) -> None:
    for i, title in enumerate(titles):
        typer.echo(f"  {i}: {title}")


def publish_cmd(
    title: Annotated[str, typer.Argument(help="Full or partial title of the Craft document")],
    draft: Annotated[bool, typer.Option("--draft", help="Save as drafts.<id> instead of publishing")] = False,
    threshold: Annotated[Optional[int], typer.Option("--match-threshold", help="Max edit distance for name matching")] = None,
    verbose: Annotated[bool, typer.Option("--verbose", "-v", help="Log each pipeline step")] = False,
    ):
    """Publish one Craft document to Sanity (or save it as a draft)."""
    _configure_logging(verbose)
    settings = _settings(CRAFT_CREDENTIALS + SANITY_CREDENTIALS, overrides={"match_threshold": threshold})
    typer.echo("Draft mode - saving to drafts.<id>" if draft else "Publish mode - saving to the published document")

    try:
        result = asyncio.run(run_publish(settings, title, draft=draft))
    except DocumentNotFoundError as e:
        typer.echo("Available documents:", err=True)
        _echo_titles(e.available)
        _fail(str(e))
    except Exception as e:
        _fail("Publish failed", e)

    post = result.post
    slug = post.get(settings.sanity.post.slug_field) or {}
    typer.echo(f"Success: {result.document_title}")
    typer.echo(f"  ID:    {post.get('_id')}")
    typer.echo(f"  Title: {post.get(settings.sanity.post.fields.get('title') or 'title')}")
    typer.echo(f"  Slug:  {slug.get('current') if isinstance(slug, dict) else slug}")
    typer.echo("  Saved as draft" if result.is_draft else "  Published")


def list_cmd():
    """List the titles of all Craft documents visible to the configured token."""
    settings = _settings(CRAFT_CREDENTIALS)

    async def _list():
        async with httpx.AsyncClient(timeout=settings.timeout) as http:
            return await CraftClient(settings.craft_api_url, settings.craft_token, http).list_documents()

    try:
        documents = asyncio.run(_list())
    except (CraftpubError, httpx.HTTPError) as e:
        _fail("Could not list documents", e)
    if not documents:
        typer.echo("No documents found.")
        raise typer.Exit(1)
    _echo_titles([d.title or "Untitled" for d in documents])
