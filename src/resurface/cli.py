"""Command line interface for Resurface."""

from __future__ import annotations

import difflib
import logging
from datetime import datetime
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Any, Optional

import click
import yaml
from rich.console import Console
from rich.logging import RichHandler
from rich.syntax import Syntax
from rich.table import Table

from resurface.behaviour import BehaviourScorer, Resurfacer, ScoredItem
from resurface.capture import CaptureEvent, CaptureTrigger, FeatureExtractor
from resurface.classification import HeuristicClassifier, StackType
from resurface.config import ConfigError, ConfigManager, ResurfaceConfig
from resurface.config.models import LoggingSettings
from resurface.ingestion import CapturePipeline
from resurface.state import ItemFactory, JsonItemStore, StateError, StoredItem, find_item
from resurface.state.seed import seed_items

console = Console()
err_console = Console(stderr=True)

_STACK_CHOICE = click.Choice([stack.value for stack in StackType], case_sensitive=False)
_TRIGGER_CHOICE = click.Choice([trigger.value for trigger in CaptureTrigger], case_sensitive=False)


def _configure_logging(settings: LoggingSettings, *, verbose: bool = False) -> None:
    """Install a Rich console handler and an optional rotating file handler.

    Args:
        settings: Logging section of the active configuration.
        verbose: Force DEBUG level regardless of configuration.
    """
    root = logging.getLogger("resurface")
    level = logging.DEBUG if verbose else logging.getLevelName(settings.level.upper())
    if not isinstance(level, int):
        level = logging.WARNING
    root.setLevel(level)
    for handler in list(root.handlers):
        root.removeHandler(handler)
        handler.close()

    root.addHandler(RichHandler(console=err_console, show_path=False, rich_tracebacks=True))
    if settings.file:
        log_path = Path(settings.file).expanduser()
        log_path.parent.mkdir(parents=True, exist_ok=True)
        file_handler = RotatingFileHandler(
            log_path,
            maxBytes=settings.max_size_mb * 1024 * 1024,
            backupCount=settings.backup_count,
            encoding="utf-8",
        )
        file_handler.setFormatter(
            logging.Formatter("%(asctime)s %(levelname)s %(name)s: %(message)s")
        )
        root.addHandler(file_handler)


def _load_config(ctx: click.Context) -> ResurfaceConfig:
    """Load configuration and configure logging once per invocation."""
    obj = ctx.ensure_object(dict)
    if "config" in obj:
        return obj["config"]
    try:
        config = ConfigManager().load()
    except ConfigError as exc:
        raise click.ClickException(str(exc)) from exc
    _configure_logging(config.logging, verbose=obj.get("verbose", False))
    obj["config"] = config
    return config


def _open_store(config: ResurfaceConfig) -> JsonItemStore:
    store = JsonItemStore(Path(config.storage.path))
    try:
        store.open()
    except StateError as exc:
        raise click.ClickException(str(exc)) from exc
    return store


def _parse_when(value: Optional[str]) -> datetime:
    """Parse an ISO timestamp option, defaulting to the current local time."""
    if not value:
        return datetime.now()
    try:
        return datetime.fromisoformat(value)
    except ValueError as exc:
        raise click.BadParameter(f"Expected an ISO 8601 timestamp, got '{value}'.") from exc


def _resolve_item(store: JsonItemStore, prefix: str) -> StoredItem:
    try:
        item = find_item(store.fetch_all(), prefix)
    except StateError as exc:
        raise click.ClickException(str(exc)) from exc
    if item is None:
        raise click.ClickException(f"No stored item matches id '{prefix}'.")
    return item


def _item_payload(item: StoredItem) -> dict[str, Any]:
    return item.model_dump(mode="json")


def _items_table(items: list[StoredItem], *, title: str) -> Table:
    table = Table(title=title)
    table.add_column("Id", style="dim")
    table.add_column("Stack")
    table.add_column("Category")
    table.add_column("State")
    table.add_column("Acted", justify="right")
    table.add_column("Dismissed", justify="right")
    table.add_column("Created")
    table.add_column("Item")
    for item in items:
        table.add_row(
            str(item.id)[:8],
            f"{item.stack.emoji} {item.stack.display_name}",
            item.category.value,
            item.state.value,
            str(item.times_acted_on),
            str(item.times_dismissed),
            item.created_at.isoformat(timespec="minutes"),
            item.title,
        )
    return table


def _ranking_table(ranking: list[ScoredItem], stack: StackType) -> Table:
    table = Table(title=f"{stack.emoji} {stack.display_name} ranking")
    for column in ("Score", "Fresh", "Shown", "Dismissals", "Actions", "State", "Item"):
        table.add_column(column, justify="left" if column == "Item" else "right")
    for candidate in ranking:
        terms = candidate.breakdown
        table.add_row(
            f"{candidate.score:.1f}",
            f"{terms.freshness:.1f}",
            f"{terms.suppression:.0f}",
            f"{terms.dismissals:.0f}",
            f"{terms.actions:.0f}",
            f"{terms.state:.0f}",
            candidate.item.title,
        )
    return table


@click.group(context_settings={"help_option_names": ["-h", "--help"]})
@click.version_option(package_name="resurface")
@click.option("-v", "--verbose", is_flag=True, help="Enable debug logging.")
@click.pass_context
def cli(ctx: click.Context, verbose: bool) -> None:
    """Resurface saves links, snippets and images and brings the right one back later."""
    ctx.ensure_object(dict)["verbose"] = verbose


@cli.command()
@click.argument("text", required=False)
@click.option("--url", type=str, help="URL of the captured content.")
@click.option("--source-app", type=str, help="Identifier of the app the content came from.")
@click.option(
    "--trigger",
    type=_TRIGGER_CHOICE,
    default=CaptureTrigger.QUICK_SAVE.value,
    show_default=True,
    help="How the capture was initiated.",
)
@click.option(
    "--image",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    help="Image file to attach (stored, never decoded).",
)
@click.option("--json", "json_output", is_flag=True, help="Emit the stored item as JSON.")
@click.pass_context
def capture(
    ctx: click.Context,
    text: Optional[str],
    url: Optional[str],
    source_app: Optional[str],
    trigger: str,
    image: Optional[Path],
    json_output: bool,
) -> None:
    """Capture TEXT and/or a URL, classify it, and store it."""
    config = _load_config(ctx)
    event = CaptureEvent(
        trigger=CaptureTrigger(trigger.lower()),
        source_app=source_app,
        url=url,
        raw_text=text,
        image_data=image.read_bytes() if image else None,
    )
    with _open_store(config) as store:
        pipeline = CapturePipeline(
            extractor=FeatureExtractor(config.classification.snippet_max_length),
            classifier=HeuristicClassifier(config.classification.confidence_floor),
            factory=ItemFactory(),
            store=store,
        )
        batch = pipeline.run([event])

    if batch.errors:
        raise click.ClickException("; ".join(batch.errors))
    if batch.duplicates:
        raise click.ClickException(f"Capture {event.id} is already stored.")

    item = batch.stored[0]
    if json_output:
        console.print_json(data=_item_payload(item))
        return
    console.print(
        f"[green]Saved to {item.stack.emoji} {item.stack.display_name} "
        f"as {item.category.value} ({str(item.id)[:8]}).[/green]"
    )
    if batch.uncategorized:
        console.print("[yellow]No confident category; filed under Other.[/yellow]")


@cli.command("list")
@click.option("--stack", type=_STACK_CHOICE, help="Only list items in this stack.")
@click.option("--json", "json_output", is_flag=True, help="Emit items as JSON.")
@click.pass_context
def list_items(ctx: click.Context, stack: Optional[str], json_output: bool) -> None:
    """List stored items."""
    config = _load_config(ctx)
    with _open_store(config) as store:
        items = store.fetch_all()
    if stack:
        items = [item for item in items if item.stack == StackType(stack.lower())]

    if json_output:
        console.print_json(data={"items": [_item_payload(item) for item in items]})
        return
    if not items:
        console.print("[yellow]No items stored yet.[/yellow]")
        return
    console.print(_items_table(items, title="Stored items"))


@cli.command()
@click.argument("stack", type=_STACK_CHOICE)
@click.option("--at", "at_value", type=str, help="Reference time (ISO 8601); defaults to now.")
@click.option(
    "--record/--no-record",
    default=True,
    show_default=True,
    help="Record the winner as shown.",
)
@click.option("--explain", is_flag=True, help="Show the full score breakdown.")
@click.option("--json", "json_output", is_flag=True, help="Emit the result as JSON.")
@click.pass_context
def best(
    ctx: click.Context,
    stack: str,
    at_value: Optional[str],
    record: bool,
    explain: bool,
    json_output: bool,
) -> None:
    """Pick the best item to resurface in STACK."""
    config = _load_config(ctx)
    at = _parse_when(at_value)
    stack_type = StackType(stack.lower())

    with _open_store(config) as store:
        resurfacer = Resurfacer(store, BehaviourScorer(config.scoring))
        ranking = resurfacer.explain(stack_type, at) if explain else []
        winner = resurfacer.surface(stack_type, at, record=record)

    if json_output:
        payload: dict[str, Any] = {
            "stack": stack_type.value,
            "at": at.isoformat(),
            "item": _item_payload(winner) if winner else None,
        }
        if explain:
            payload["ranking"] = [
                {"id": str(candidate.item.id), "score": candidate.score} for candidate in ranking
            ]
        console.print_json(data=payload)
        return

    if explain and ranking:
        console.print(_ranking_table(ranking, stack_type))
    if winner is None:
        console.print(f"[yellow]Nothing to resurface in {stack_type.display_name}.[/yellow]")
        return
    console.print(f"[green]{stack_type.emoji} {winner.title}[/green]")
    if winner.url:
        console.print(winner.url)
    console.print(f"[dim]id {winner.id}[/dim]")


@cli.command()
@click.argument("item_id")
@click.option("--at", "at_value", type=str, help="Action time (ISO 8601); defaults to now.")
@click.pass_context
def act(ctx: click.Context, item_id: str, at_value: Optional[str]) -> None:
    """Record that ITEM_ID (or a unique id prefix) was acted on."""
    config = _load_config(ctx)
    with _open_store(config) as store:
        item = _resolve_item(store, item_id)
        updated = Resurfacer(store).act(item.id, _parse_when(at_value))
    console.print(f"[green]Acted on {updated.title} ({updated.times_acted_on} total).[/green]")


@cli.command()
@click.argument("item_id")
@click.option("--at", "at_value", type=str, help="Dismissal time (ISO 8601); defaults to now.")
@click.pass_context
def dismiss(ctx: click.Context, item_id: str, at_value: Optional[str]) -> None:
    """Record that ITEM_ID (or a unique id prefix) was dismissed."""
    config = _load_config(ctx)
    with _open_store(config) as store:
        item = _resolve_item(store, item_id)
        updated = Resurfacer(store).dismiss(item.id, _parse_when(at_value))
    console.print(
        f"[yellow]Dismissed {updated.title} ({updated.times_dismissed} total).[/yellow]"
    )


@cli.command()
@click.pass_context
def seed(ctx: click.Context) -> None:
    """Add sample items, one per populated stack."""
    config = _load_config(ctx)
    with _open_store(config) as store:
        items = seed_items(datetime.now())
        for item in items:
            store.save(item)
    console.print(f"[green]Seeded {len(items)} items.[/green]")


@cli.group()
def config() -> None:
    """Manage Resurface configuration."""


@config.command("view")
@click.option("--no-env", is_flag=True, help="Ignore environment overrides when displaying output.")
def config_view(no_env: bool) -> None:
    """Display the effective configuration after applying precedence rules."""
    manager = ConfigManager()
    try:
        loaded = manager.load(include_env=not no_env)
    except ConfigError as exc:
        raise click.ClickException(str(exc)) from exc

    yaml_text = yaml.safe_dump(loaded.model_dump(mode="python"), sort_keys=False)
    console.print(Syntax(yaml_text, "yaml", word_wrap=True))


@config.command("set")
@click.argument("key")
@click.option("--value", required=True, help="Value to assign to KEY.")
def config_set(key: str, value: str) -> None:
    """Persist a configuration value expressed as a dotted KEY."""
    manager = ConfigManager()
    try:
        before, after = manager.set_value(key, value)
    except ConfigError as exc:
        raise click.ClickException(str(exc)) from exc

    if before == after:
        console.print("[yellow]No changes applied; value already up to date.[/yellow]")
        return

    diff = difflib.unified_diff(
        before.splitlines(),
        after.splitlines(),
        fromfile="config.yaml (before)",
        tofile="config.yaml (after)",
        lineterm="",
    )
    console.print(Syntax("\n".join(diff), "diff", word_wrap=False))
    console.print(f"[green]Updated {key.strip()}.[/green]")


def main() -> None:
    """Console script entry point."""
    cli()


if __name__ == "__main__":
    main()
