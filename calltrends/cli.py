import json
from typing import Optional

import typer
from rich.console import Console
from rich.table import Table

from .core import config
from .core.alerts import get_complaint_alert
from .core.composer import EmptyQueryError, resolve_visualization_request
from .core.generator import seed_calls
from .core.llm import default_client
from .core.storage import CallStore
from .core.timewindow import resolve_range, trailing_window
from .core.views import VIEWS, UnknownViewError, run_view

app = typer.Typer(help="Call Trends analytics CLI")
console = Console()

_store: Optional[CallStore] = None


def get_store() -> CallStore:
    global _store
    if _store is None:
        _store = CallStore(seed_calls)
    return _store


def _format_mmss(sec: int) -> str:
    m = sec // 60
    s = sec % 60
    return f"{m:02d}:{s:02d}"


@app.callback()
def main(log_level: str = typer.Option(config.LOG_LEVEL, help="Logging level")):
    config.configure_logging(log_level)


@app.command("views")
def list_views():
    table = Table(title="Dashboard views")
    table.add_column("View", style="cyan")
    table.add_column("Section", style="magenta")
    table.add_column("Default range")
    for v in VIEWS.values():
        table.add_row(v.name, v.section, v.default_range.value)
    console.print(table)


@app.command()
def view(name: str, range_: Optional[str] = typer.Option(None, "--range", help="1h|6h|24h|7d|30d")):
    try:
        result = run_view(get_store(), name, range_)
    except UnknownViewError:
        console.print(f"[red]Unknown view '{name}'. Run 'views' to list them.[/red]")
        raise typer.Exit(1)
    console.print_json(json.dumps(result))


@app.command()
def kpis(range_: str = typer.Option("24h", "--range", help="1h|6h|24h|7d|30d")):
    data = run_view(get_store(), "kpis", range_)["data"]
    table = Table(title=f"KPIs ({range_})")
    table.add_column("Metric", style="cyan")
    table.add_column("Value", justify="right")
    for k, v in data.items():
        table.add_row(k, _format_mmss(v) if k == "avg_duration_sec" else str(v))
    console.print(table)


@app.command()
def calls(range_: str = typer.Option("24h", "--range", help="1h|6h|24h|7d|30d"),
          limit: int = typer.Option(20, help="Max rows (1-200)"),
          intent: Optional[str] = typer.Option(None, help="Only this primary intent"),
          topic: Optional[str] = typer.Option(None, help="Only this primary topic"),
          complaints: bool = typer.Option(False, help="Complaint calls only")):
    rows = get_store().list_calls(resolve_range(range_), intent=intent, topic=topic,
                                  complaints_only=complaints, limit=limit)
    if not rows:
        console.print("No calls in range.")
        raise typer.Exit(0)
    table = Table(title="Calls")
    table.add_column("External ID", style="cyan")
    table.add_column("Ended (UTC)")
    table.add_column("Duration", justify="right")
    table.add_column("Intent", style="magenta")
    table.add_column("Topic")
    table.add_column("Sentiment", justify="right")
    for c in rows:
        table.add_row(
            c.external_id,
            c.ended_at.strftime("%Y-%m-%d %H:%M"),
            _format_mmss(c.duration_seconds),
            c.primary_intent,
            c.primary_topic,
            f"{c.member_sentiment:g}" + (" [red]complaint[/red]" if c.is_complaint else ""),
        )
    console.print(table)


@app.command()
def alerts():
    window = trailing_window(config.ALERT_WINDOW_MINUTES)
    alert = get_complaint_alert(get_store().in_window(window))
    if alert["complaints_elevated"]:
        console.print(f"[bold red]{alert['message']}[/bold red]")
    else:
        console.print(f"[green]{alert['complaint_count']} complaints in the last "
                      f"{alert['window_minutes']} minutes (threshold {alert['threshold']}).[/green]")


@app.command()
def chart(query: str):
    try:
        result = resolve_visualization_request(query, default_client())
    except EmptyQueryError:
        console.print("[red]Missing query[/red]")
        raise typer.Exit(1)
    console.print(result["message"])
    console.print_json(json.dumps(result["config"]))


@app.command()
def serve(host: str = typer.Option("0.0.0.0"), port: int = typer.Option(8000),
          reload: bool = typer.Option(False, help="Auto-reload on code changes")):
    """Run the HTTP API."""
    from server.app import run_server
    run_server(host=host, port=port, reload=reload)


if __name__ == "__main__":
    app()
