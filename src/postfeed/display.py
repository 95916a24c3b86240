"""Rich terminal display of a cached feed document."""

from rich.console import Console
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from postfeed.models import CacheDocument
from postfeed.utils import time_ago, truncate

console = Console()

TITLE_COLOR = "bright_cyan"


def display_document(doc: CacheDocument, show_excerpt: bool = True, limit: int | None = None) -> int:
    """Display cached posts as a Rich panel. Returns count of posts shown."""
    posts = list(doc.posts.values())
    if limit is not None:
        posts = posts[:limit]

    table = Table(
        show_header=False,
        box=None,
        padding=(0, 1),
        expand=True,
    )
    table.add_column("#", style="dim", width=6, justify="right")
    table.add_column("Post", ratio=1)
    table.add_column("Author", style="dim", width=18, justify="right")
    table.add_column("Time", style="dim", width=8, justify="right")

    for post in posts:
        title = Text(post.get("title", ""), style=f"bold {TITLE_COLOR}")
        categories = post.get("categories") or []
        if categories:
            title.append(f"  [{', '.join(categories)}]", style="magenta")
        if show_excerpt and post.get("excerpt"):
            title.append(f"\n{truncate(post['excerpt'], 120)}", style="dim")
        table.add_row(str(post.get("id", "")), title, post.get("author", ""), time_ago(post.get("pubDate")))

    meta = doc.metadata
    panel = Panel(
        table if posts else Text("No posts cached.", style="dim"),
        title=f"[bold]{meta.title or meta.slug}[/bold]",
        subtitle=f"[dim]{meta.slug} · {len(doc.posts)} posts[/dim]",
        border_style=TITLE_COLOR,
        padding=(0, 1),
    )
    console.print(panel)
    return len(posts)
