#!filepath: simdash/cli.py
from __future__ import annotations

from typing import Optional

import typer
from rich import print
from rich.markup import escape
from rich.table import Table

from simdash import logs
from simdash.config.app_config import AppConfig
from simdash.utils.errors import ConfigError

app = typer.Typer(help="simdash - simulation scheduler + live dashboard sync")

__version__ = "0.1.0"


def _load(config: Optional[str]) -> AppConfig:
    try:
        cfg = AppConfig.load(config)
    except (ConfigError, FileNotFoundError) as e:
        print(f"[red]{escape(str(e))}[/red]")
        raise typer.Exit(code=2)
    logs.configure(cfg.log)
    return cfg


@app.command()
def version():
    print(f"v{__version__}")


@app.command()
def daemon(config: Optional[str] = typer.Option(None, help="YAML config path")):
    """
    Serve the dashboard and run the simulation cycle on a fixed interval.
    """
    from simdash.orchestrator import Orchestrator, Scheduler
    from simdash.server import create_app

    cfg = _load(config)
    orchestrator = Orchestrator.from_config(cfg.scheduler)
    scheduler = Scheduler(orchestrator, cfg.scheduler.interval_seconds)

    server = create_app(cfg.server, orchestrator=orchestrator)
    logs.info(f"Dashboard: http://localhost:{cfg.server.port}{cfg.server.entry_point}index.html")

    scheduler.start()
    try:
        server.run(host=cfg.server.host, port=cfg.server.port, threaded=True, use_reloader=False)
    finally:
        scheduler.stop(timeout=1.0)


@app.command()
def serve(config: Optional[str] = typer.Option(None, help="YAML config path")):
    """
    Static/live-data server only (no scheduler).
    """
    from simdash.server import create_app

    cfg = _load(config)
    create_app(cfg.server).run(host=cfg.server.host, port=cfg.server.port, threaded=True)


@app.command()
def cycle(config: Optional[str] = typer.Option(None, help="YAML config path")):
    """
    Run exactly one refresh + simulation cycle and exit.
    """
    from simdash.orchestrator import Orchestrator

    cfg = _load(config)
    orchestrator = Orchestrator.from_config(cfg.scheduler)

    run = logs.catch(msg="cycle failed", log_time=True)(orchestrator.trigger_cycle)
    run("manual")

    record = orchestrator.registry.last()
    status = record.status if record is not None else "FAILED"
    color = "green" if status == "SUCCESS" else "red"
    print(f"[{color}]cycle {status}[/{color}]")
    if status != "SUCCESS":
        raise typer.Exit(code=1)


@app.command()
def watch(
    config: Optional[str] = typer.Option(None, help="YAML config path"),
    once: bool = typer.Option(False, "--once", help="poll a single time and exit"),
    events: int = typer.Option(10, help="event log lines to show"),
):
    """
    Follow the live snapshot and print a summary on every commit change.
    """
    from simdash.client import SnapshotFetcher, SyncSession

    cfg = _load(config)
    fetcher = SnapshotFetcher(cfg.client.live_url, timeout=cfg.client.request_timeout)
    session = SyncSession(
        fetcher,
        poll_interval=cfg.client.poll_interval,
        on_change=lambda data: render_summary(data, cfg.client.initial_capital, events),
    )

    if once:
        session.poll()
        if session.error:
            print(f"[red]{session.error}[/red]")
            raise typer.Exit(code=1)
        return

    try:
        session.run()
    except KeyboardInterrupt:
        session.stop()


def render_summary(data, initial_capital: float, n_events: int = 10) -> None:
    from simdash.analytics import compute_metrics
    from simdash.client.formatting import (
        fmt_int, fmt_num, fmt_usd, format_event, position_label, recent_trades,
        total_pnl, total_trades,
    )
    from simdash.client.types import STRATEGIES

    metrics = compute_metrics(data)
    port = metrics["portfolio"]

    print(f"[bold]{data.state.date}[/bold]  Day {fmt_int(data.state.seq)}  commit {data.commit}")
    print(
        f"Portfolio {fmt_usd(data.state.capital)}  "
        f"P&L {fmt_usd(total_pnl(data, initial_capital), signed=True)}"
    )
    print(
        f"├─ sharpe {fmt_num(port.sharpe)}\n"
        f"├─ max dd {fmt_num(port.max_drawdown)}%\n"
        f"├─ trades {fmt_int(total_trades(data))}\n"
        f"└─ days {fmt_int(data.state.seq)}"
    )

    table = Table("Strategy", "Pos", "Equity", "P&L", "Trades", "Sharpe", "Max DD")
    for sid, snap in data.strategies.items():
        m = metrics[sid]
        table.add_row(
            STRATEGIES[sid].title,
            position_label(snap.core.position),
            fmt_usd(snap.core.equity),
            fmt_usd(snap.core.pnl, signed=True),
            fmt_int(snap.core.trades),
            fmt_num(m.sharpe),
            f"{fmt_num(m.max_drawdown)}%",
        )
    print(table)

    trades = recent_trades(data.events, n=5)
    if trades:
        print("Recent trades: " + "  ·  ".join(format_event(t) for t in trades))

    if n_events <= 0:
        return
    for ev in list(data.events)[-n_events:][::-1]:
        print(f"{ev.date}  {ev.type:<7} {format_event(ev)}")


@app.command()
def chart(
    out: str = typer.Option("equity.svg", help="output SVG path"),
    strategies: str = typer.Option("", help="comma separated overlays, e.g. s1,s4"),
    config: Optional[str] = typer.Option(None, help="YAML config path"),
):
    """
    Fetch the live snapshot once and write the equity chart as SVG.
    """
    from simdash.client import STRATEGIES, SnapshotFetcher
    from simdash.utils.errors import SnapshotFetchError

    cfg = _load(config)
    fetcher = SnapshotFetcher(cfg.client.live_url, timeout=cfg.client.request_timeout)
    try:
        data = fetcher.fetch_app_data()
    except SnapshotFetchError as e:
        print(f"[red]{escape(str(e))}[/red]")
        raise typer.Exit(code=1)

    ids = [s.strip() for s in strategies.split(",") if s.strip()]
    unknown = [s for s in ids if s not in STRATEGIES]
    if unknown:
        print(f"[red]unknown strategies: {', '.join(unknown)}[/red]")
        raise typer.Exit(code=2)

    svg = render_chart_svg(
        data.equity,
        [(data.strategy_equities[s], STRATEGIES[s].color) for s in ids],
        data.benchmark,
    )
    with open(out, "w", encoding="utf-8") as f:
        f.write(svg)
    print(f"[green]wrote {out}[/green]")


def render_chart_svg(portfolio, overlays, benchmark) -> str:
    from simdash.analytics.chart import compute_chart, polyline

    layout = compute_chart(portfolio, [o for o, _ in overlays], benchmark)
    w, h, pad = layout.width, layout.height, layout.padding

    parts = [f'<svg xmlns="http://www.w3.org/2000/svg" viewBox="0 0 {w:g} {h:g}">']
    if not layout.ready:
        parts.append(f'<text x="{w / 2:g}" y="{h / 2:g}" text-anchor="middle">Waiting for data...</text>')
        parts.append("</svg>")
        return "\n".join(parts)

    for g in layout.gridlines:
        parts.append(
            f'<line x1="{pad.left:g}" y1="{g.y:g}" x2="{w - pad.right:g}" y2="{g.y:g}" '
            f'stroke="#28324a" stroke-width="0.5"/>'
        )
        parts.append(
            f'<text x="{pad.left - 8:g}" y="{g.y + 4:g}" text-anchor="end" '
            f'fill="#8c96aa" font-size="10">{g.label}</text>'
        )
    parts.append(f'<polygon points="{polyline(layout.area)}" fill="#63b3ed" fill-opacity="0.08"/>')
    if layout.benchmark:
        parts.append(
            f'<polyline points="{polyline(layout.benchmark)}" fill="none" stroke="#505a6e" '
            f'stroke-width="1.5" stroke-dasharray="6 3" opacity="0.6"/>'
        )
    for pts, (_, color) in zip(layout.overlays, overlays):
        parts.append(
            f'<polyline points="{polyline(pts)}" fill="none" stroke="{color}" stroke-width="1.5" opacity="0.7"/>'
        )
    parts.append(f'<polyline points="{polyline(layout.primary)}" fill="none" stroke="#63b3ed" stroke-width="2"/>')
    cx, cy = layout.last_point
    parts.append(f'<circle cx="{cx:g}" cy="{cy:g}" r="3" fill="#63b3ed"/>')
    parts.append("</svg>")
    return "\n".join(parts)


if __name__ == "__main__":
    app()

# python -m simdash.cli daemon
