"""CLI entry point — Click commands for rebuilding, syncing and inspecting the feed."""

import time

import click

from postfeed import config as cfg
from postfeed.cache import CacheStore
from postfeed.display import console, display_document
from postfeed.engine import SyncEngine
from postfeed.errors import PostfeedError
from postfeed.gateway import slug_from_url
from postfeed.hooks import translate
from postfeed.log import setup_logging
from postfeed.wordpress import WordPressGateway

user_config = cfg.load()


def build_engine(site_url: str, config: dict) -> SyncEngine:
    """Wire a WordPress gateway and cache store for `site_url`."""
    gateway = WordPressGateway(
        site_url,
        username=config["username"],
        app_password=config["app_password"],
        language=config["language"],
        timeout=config["timeout"],
    )
    store = CacheStore(config["cache_dir"], slug_from_url(site_url), lock_timeout=config["lock_timeout"])
    return SyncEngine(store, gateway, max_posts=config["max_posts"], expiry_field=config["expiry_field"])


def _fail(message: str) -> None:
    console.print(f"[red]{message}[/red]")
    raise SystemExit(1)


@click.group()
@click.option("--site", default=None, help="Site URL, overrides site_url from the config file.")
@click.option("--debug", is_flag=True, help="Verbose logging.")
@click.pass_context
def main(ctx: click.Context, site: str | None, debug: bool) -> None:
    """Maintain a static JSON feed of a blog's published posts."""
    setup_logging(debug)
    site_url = site or user_config["site_url"]
    if not site_url:
        console.print("[red]No site configured.[/red]")
        console.print(f"[dim]Pass --site or set site_url in {cfg.CONFIG_PATH}.[/dim]")
        raise SystemExit(1)
    ctx.obj = build_engine(site_url, user_config)


@main.command()
@click.option("--watch", "-w", is_flag=True, help="Rebuild periodically to drop expired posts.")
@click.option("--interval", "-i", default=None, type=int, help="Watch rebuild interval in seconds.")
@click.pass_obj
def rebuild(engine: SyncEngine, watch: bool, interval: int | None) -> None:
    """Rebuild the feed from the currently published posts."""
    watch_interval = interval or user_config["watch_interval"]

    def run_once() -> None:
        count = engine.rebuild()
        console.print(f"[green]Rebuilt[/green] {engine.store.path} [dim]({count} posts)[/dim]")

    if not watch:
        try:
            run_once()
        except PostfeedError as exc:
            _fail(f"Rebuild failed: {exc}")
        return

    try:
        while True:
            try:
                run_once()
            except PostfeedError as exc:
                console.print(f"[red]Rebuild failed: {exc}[/red]")
            console.print(f"[dim]Rebuilding in {watch_interval}s… (Ctrl+C to quit)[/dim]")
            time.sleep(watch_interval)
    except KeyboardInterrupt:
        console.print("\n[dim]Goodbye![/dim]")


@main.command()
@click.pass_obj
def regenerate(engine: SyncEngine) -> None:
    """Delete the feed file and regenerate it from scratch."""
    console.print("Clearing Cache...")

    def report_delete(deleted: bool) -> None:
        status = "[green]Success![/green]" if deleted else "[yellow]Failed![/yellow]"
        console.print(f"Deleting {engine.store.path}... {status}")
        console.print("Re-Generating Cache...")

    try:
        engine.regenerate(on_deleted=report_delete)
    except PostfeedError as exc:
        _fail(f"Re-generating failed: {exc}")
    console.print("All finished!")


@main.command()
@click.argument("kind")
@click.argument("post_id", required=False, default=None, type=int)
@click.option("--revision-of", "parent_id", default=None, type=int, help="POST_ID is a revision of this post.")
@click.option("--autosave", is_flag=True, help="Event comes from an autosave; nothing is done.")
@click.pass_obj
def sync(engine: SyncEngine, kind: str, post_id: int | None, parent_id: int | None, autosave: bool) -> None:
    """Apply one mutation event (saved, trashed, deleted or a save_post-style topic)."""
    try:
        event = translate(kind, post_id, parent_id=parent_id, autosave=autosave)
    except ValueError:
        console.print(f"[red]Unknown event kind: {kind}[/red]")
        console.print("[dim]Use saved, trashed, deleted, save_post, trashed_post or delete_post.[/dim]")
        raise SystemExit(1)
    try:
        action = engine.handle(event)
    except PostfeedError as exc:
        _fail(f"Sync failed: {exc}")
    target = f"post {post_id}" if post_id is not None else "all posts"
    console.print(f"[green]{action.value}[/green] {target}")


@main.command()
@click.pass_obj
def sweep(engine: SyncEngine) -> None:
    """Remove cached posts whose expiry date has passed."""
    try:
        removed = engine.sweep()
    except PostfeedError as exc:
        _fail(f"Sweep failed: {exc}")
    console.print(f"Removed {removed} expired posts.")


@main.command()
@click.option("--limit", "-l", default=None, type=int, help="Show at most this many posts.")
@click.option("--no-excerpt", is_flag=True, help="Titles only, hide excerpts.")
@click.pass_obj
def show(engine: SyncEngine, limit: int | None, no_excerpt: bool) -> None:
    """Display the cached feed."""
    doc = engine.store.read()
    if doc is None:
        _fail(f"No feed cached at {engine.store.path}")
    display_document(doc, show_excerpt=not no_excerpt, limit=limit)


@main.command()
@click.pass_obj
def path(engine: SyncEngine) -> None:
    """Print the location of the feed file."""
    click.echo(str(engine.store.path))
