"""CLI entry point for flowguess."""

from __future__ import annotations

import asyncio
import json
import logging
import sys

import click

from flowguess.api.data_api import LeaderboardAggregator, format_flow
from flowguess.config import load_config
from flowguess.errors import FlowguessError
from flowguess.leaderboard.service import LeaderboardService
from flowguess.models.config import ServiceConfig
from flowguess.models.snapshots import LeaderboardSnapshot, to_dict
from flowguess.models.stats import SortBy
from flowguess.watcher import run_watcher

SORT_CHOICES = click.Choice([s.value for s in SortBy])


def _load(ctx: click.Context) -> ServiceConfig:
    try:
        cfg = load_config(ctx.obj["config_path"])
    except FlowguessError as exc:
        click.echo(f"Error: {exc}", err=True)
        sys.exit(1)

    # --verbose wins over the configured level
    if not ctx.obj["verbose"]:
        level = logging.getLevelName(cfg.log_level.upper())
        if isinstance(level, int):
            logging.getLogger().setLevel(level)
    return cfg


def _run(coro):
    """Run a coroutine, turning flowguess errors into a clean exit."""
    try:
        return asyncio.run(coro)
    except FlowguessError as exc:
        click.echo(f"Error: {exc}", err=True)
        sys.exit(1)


def _print_rows(snapshot: LeaderboardSnapshot, limit: int | None) -> None:
    rows = snapshot.rows if limit is None else snapshot.rows[:limit]
    if not rows:
        click.echo("No players yet.")
        return
    click.echo(f"{'#':>3}  {'Player':<42}  {'Wins':>5}  {'Guesses':>7}  {'Rate':>6}  Prizes")
    for r in rows:
        click.echo(
            f"{r.rank:>3}  {r.player:<42}  {r.total_wins:>5}  {r.total_guesses:>7}  "
            f"{r.win_rate_pct:>6}  {format_flow(int(r.total_prizes_won), places=2)}"
        )


@click.group()
@click.option("-c", "--config", "config_path", default=None, help="Path to config TOML file")
@click.option("-v", "--verbose", is_flag=True, help="Enable debug logging")
@click.pass_context
def cli(ctx: click.Context, config_path: str | None, verbose: bool) -> None:
    """flowguess - leaderboard for the Flow prompt-guessing game."""
    ctx.ensure_object(dict)
    ctx.obj["config_path"] = config_path
    ctx.obj["verbose"] = verbose

    level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(
        level=level,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )


# ── Info ───────────────────────────────────────────────


@cli.command()
@click.pass_context
def status(ctx: click.Context) -> None:
    """Show effective configuration."""
    cfg = _load(ctx)
    click.echo(f"Explorer:   {cfg.base_url}")
    click.echo(f"Contract:   {cfg.contract_address}")
    click.echo(f"Timeout:    {cfg.request_timeout}s ({cfg.fetch_retries} attempts)")
    click.echo(f"Page delay: {cfg.page_delay}s")
    click.echo(f"Cache TTL:  {cfg.cache_ttl}s")
    click.echo(f"Sort:       {cfg.default_sort.value}")
    click.echo(f"Log level:  {cfg.log_level}")


# ── Leaderboard ────────────────────────────────────────


@cli.command()
@click.option("--sort-by", type=SORT_CHOICES, default=None, help="Ordering policy")
@click.option("--limit", type=int, default=None, help="Show only the top N rows")
@click.option("--json", "as_json", is_flag=True, help="Print the snapshot as JSON")
@click.pass_context
def leaderboard(ctx: click.Context, sort_by: str | None, limit: int | None, as_json: bool) -> None:
    """Fetch contract history and print the ranked leaderboard."""
    cfg = _load(ctx)
    data_api = LeaderboardAggregator(LeaderboardService.from_config(cfg))
    snapshot = _run(data_api.get_leaderboard(sort_by or cfg.default_sort))

    if as_json:
        if limit is not None:
            snapshot.rows = snapshot.rows[:limit]
        click.echo(json.dumps(to_dict(snapshot), indent=2))
        return

    o = snapshot.overview
    click.echo(f"Leaderboard by {snapshot.sort_by}")
    click.echo(
        f"Players: {o.total_players}  Challenges: {o.total_challenges}  "
        f"Guesses: {o.total_guesses}  Prizes: {o.total_prizes_awarded_flow}"
    )
    click.echo("")
    _print_rows(snapshot, limit)


@cli.command()
@click.argument("address")
@click.option("--json", "as_json", is_flag=True, help="Print the snapshot as JSON")
@click.pass_context
def player(ctx: click.Context, address: str, as_json: bool) -> None:
    """Show statistics for one player ADDRESS."""
    cfg = _load(ctx)
    data_api = LeaderboardAggregator(LeaderboardService.from_config(cfg))
    snap = _run(data_api.get_player(address))

    if snap is None:
        click.echo(f"No activity found for {address}")
        return
    if as_json:
        click.echo(json.dumps(to_dict(snap), indent=2))
        return

    click.echo(f"Player:      {snap.player}")
    click.echo(f"Rank:        #{snap.rank}")
    click.echo(f"Wins:        {snap.total_wins}")
    click.echo(f"Guesses:     {snap.total_guesses} ({snap.win_rate_pct} correct)")
    click.echo(f"Prizes won:  {snap.total_prizes_won_flow}")
    click.echo(f"Challenges:  {snap.challenges_created}")
    click.echo(f"Last block:  {snap.last_activity}")


@cli.command("cache-status")
@click.pass_context
def cache_status(ctx: click.Context) -> None:
    """Fetch once through the cache and report cache state."""
    cfg = _load(ctx)
    service = LeaderboardService.from_config(cfg)

    async def _fetch() -> int:
        logs = await service.fetch_all_logs()
        return len(logs)

    count = _run(_fetch())
    cache = LeaderboardAggregator(service).get_cache()
    click.echo(f"Logs:     {count}")
    click.echo(f"Cached:   {cache.cached}")
    click.echo(f"Age:      {cache.label}")
    click.echo(f"TTL:      {service.cache.ttl_seconds}s")


@cli.command()
@click.option("--sort-by", type=SORT_CHOICES, default=None, help="Ordering policy")
@click.option("--limit", type=int, default=None, help="Rows to print per refresh (default: top_limit)")
@click.pass_context
def watch(ctx: click.Context, sort_by: str | None, limit: int | None) -> None:
    """Refresh the leaderboard periodically until interrupted."""
    cfg = _load(ctx)
    if limit is None:
        limit = cfg.top_limit
    click.echo(f"Watching leaderboard (refresh every {cfg.refresh_interval}s, Ctrl-C to stop)")

    def _on_update(snapshot: LeaderboardSnapshot) -> None:
        click.echo("")
        _print_rows(snapshot, limit)

    _run(run_watcher(cfg, sort_by=sort_by, on_update=_on_update))


def main() -> None:
    cli()


if __name__ == "__main__":
    main()
