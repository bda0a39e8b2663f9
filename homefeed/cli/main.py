import typer
from rich import print
from rich.markup import escape
from rich.table import Table
from homefeed.config.settings import get_settings
from homefeed.services.feed_client import FeedError
from homefeed.services.feed_service import ALL, get_feed_service
from homefeed.tools.logging_setup import setup_logging
setup_logging()


app = typer.Typer(help="Fetch and browse the public home screen feed")


class SourceCollector:
    def __init__(self) -> None:
        self.names: list[str] = []

    def add_source(self, name: str) -> None:
        self.names.append(name)


class TableRetriever:
    def __init__(self, title: str) -> None:
        self.table = Table(title=title, show_lines=True)
        self.table.add_column("Title", style="bold")
        self.table.add_column("Description")
        self.table.add_column("Link", style="cyan")
        self.rows = 0

    def add_feed(self, title: str, description: str, image: str, link: str) -> None:
        self.table.add_row(escape(title), escape(description), escape(link))
        self.rows += 1

    def finish(self) -> None:
        if self.rows:
            print(self.table)
        else:
            print("[yellow]No entries[/yellow]")


def _load(locale: str, proxy: str | None, provider=None) -> None:
    s = get_settings()
    proxy_addr = s.proxy_addr if proxy is None else proxy
    try:
        ok = get_feed_service().get_feed(locale, proxy_addr, provider)
    except FeedError as e:
        print(f"[bold red]Feed rejected[/bold red]: {escape(str(e))}")
        raise SystemExit(1)
    if not ok:
        print("[bold red]Fetch failed[/bold red] (see log for details)")
        raise SystemExit(1)


@app.command()
def doctor(locale: str = typer.Option("en_US", help="Locale to resolve")):
    """Show config and the feed URL that would be fetched."""
    s = get_settings()
    print("[bold green]Config loaded[/bold green]")
    print("Endpoint:", s.feed_endpoint)
    print("Locales:", s.supported_locales, "| Default:", s.default_locale)
    print("Proxy:", s.proxy_addr or "(direct)")
    print("Feed URL:", get_feed_service().feed_url(locale))


@app.command()
def sources(
    locale: str = typer.Option("en_US", help="Feed locale"),
    proxy: str = typer.Option(None, help="Proxy address, overrides FEED_PROXY_ADDR"),
):
    """Fetch the feed and list its sources."""
    collector = SourceCollector()
    _load(locale, proxy, collector)
    for name in collector.names:
        print("-", escape(name))
    print(f"[bold green]{len(collector.names)} sources[/bold green]")


@app.command()
def show(
    name: str = typer.Argument(ALL, help="'all' or a source title"),
    locale: str = typer.Option("en_US", help="Feed locale"),
    proxy: str = typer.Option(None, help="Proxy address, overrides FEED_PROXY_ADDR"),
):
    """Fetch the feed and print the entries of one source."""
    _load(locale, proxy)
    get_feed_service().feed_by_name(name, TableRetriever(name))


if __name__ == "__main__":
    app()
