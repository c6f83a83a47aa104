"""CLI interface for the model catalog."""

import csv
import json
import logging
from pathlib import Path
from typing import Any, NoReturn

import typer
from pydantic import ValidationError
from rich.console import Console
from rich.table import Table

from model_catalog.errors import CatalogError
from model_catalog.filters.engine import format_evaluation_result
from model_catalog.filters.service import rank_evaluations
from model_catalog.models.model_catalog import CatalogModel
from model_catalog.models.model_filter import Filter, Visibility
from model_catalog.pipeline import (
    load_latest_models,
    resolve_data_dir,
    run_filter_evaluation,
    run_sync_pipeline,
)
from model_catalog.storage.file_manager import FileManager

app = typer.Typer(
    name="mcat",
    help="Model catalog - Sync AI model metadata and rank models with saved filters",
)

console = Console()

# Set by the app callback, read by commands
_state: dict[str, Any] = {"data_dir": None}

# Rules file key -> Filter field; ownership and counters never come from the file
RULES_FILE_KEYS = {
    "rules": "rules",
    "name": "name",
    "description": "description",
    "visibility": "visibility",
    "teamId": "team_id",
    "team_id": "team_id",
}


def _get_score_color(score: float) -> str:
    """Get color for a 0-1 score."""
    if score >= 0.7:
        return "green"
    elif score >= 0.4:
        return "yellow"
    else:
        return "red"


def _truncate(text: str, max_len: int = 60) -> str:
    """Truncate text with ellipsis."""
    if len(text) <= max_len:
        return text
    return text[: max_len - 3] + "..."


def _format_cost(cost: float) -> str:
    return f"{cost:g}" if cost else "-"


def _file_manager() -> FileManager:
    return FileManager(resolve_data_dir(_state["data_dir"]))


def _fail(message: str) -> NoReturn:
    console.print(f"[red]Error:[/red] {message}")
    raise typer.Exit(1)


def _load_rules_file(path: Path) -> dict[str, Any]:
    """Read a rules file: either a list of clauses or an object with a 'rules' key."""
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except (OSError, json.JSONDecodeError) as e:
        raise CatalogError(f"Cannot read rules file {path}: {e}") from e

    if isinstance(data, list):
        return {"rules": data}
    if isinstance(data, dict) and "rules" in data:
        return data
    raise CatalogError(f"Rules file {path} must be a list of clauses or an object with 'rules'")


@app.callback()
def main(
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug logging"),
    data_dir: Path = typer.Option(
        None, "--data-dir", help="Data directory (default: $MODEL_CATALOG_DATA_DIR or ./data)"
    ),
) -> None:
    """Sync AI model metadata and rank models with saved filters."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    )
    _state["data_dir"] = data_dir


@app.command()
def sync(
    sources: str = typer.Option(
        None,
        "--sources",
        "-s",
        help="Sources: preset ('all', 'default', 'registries') or comma-separated list "
        "(e.g., 'models.dev,openrouter'). Default: $MODEL_CATALOG_SOURCES or all",
    ),
) -> None:
    """Fetch all sources, normalize and store a new catalog snapshot."""
    names = [name.strip() for name in sources.split(",") if name.strip()] if sources else None

    console.print("\n[bold]Syncing model catalog...[/bold]\n")
    try:
        model_sync, models = run_sync_pipeline(names, data_dir=_state["data_dir"])
    except (CatalogError, ValueError) as e:
        _fail(str(e))

    table = Table(title=f"Sync {model_sync.id}")
    table.add_column("Source", style="cyan")
    table.add_column("Models", justify="right", style="magenta")
    for source, count in model_sync.sources.items():
        table.add_row(source, str(count))
    console.print(table)
    console.print(f"\n[bold green]Sync complete![/bold green] {len(models)} models stored")


@app.command()
def models(
    source: str = typer.Option(None, "--source", "-s", help="Only models from this source"),
    provider: str = typer.Option(None, "--provider", "-p", help="Only models of this provider"),
    search: str = typer.Option(None, "--search", help="Substring of id or name"),
    new_only: bool = typer.Option(False, "--new", help="Only models released in the last 30 days"),
    limit: int = typer.Option(20, "--limit", "-l", help="Number of results"),
) -> None:
    """List models from the latest sync."""
    try:
        catalog = load_latest_models(source=source, provider=provider, data_dir=_state["data_dir"])
    except CatalogError as e:
        _fail(str(e))

    if search:
        query = search.lower()
        catalog = [m for m in catalog if query in m.id.lower() or query in m.name.lower()]
    if new_only:
        catalog = [m for m in catalog if m.is_new]

    if not catalog:
        console.print("[yellow]No models found. Run 'mcat sync' first.[/yellow]")
        return

    shown = catalog[:limit]
    table = Table(title=f"Models ({len(shown)} of {len(catalog)})")
    table.add_column("ID", style="cyan")
    table.add_column("Provider", style="blue")
    table.add_column("Context", justify="right")
    table.add_column("In $", justify="right", style="green")
    table.add_column("Out $", justify="right", style="green")
    table.add_column("Capabilities", style="dim")
    table.add_column("New", justify="center")

    for model in shown:
        table.add_row(
            _truncate(model.id, 50),
            model.provider,
            f"{model.context_window:,}",
            _format_cost(model.input_cost),
            _format_cost(model.output_cost),
            ", ".join(model.capabilities[:3]),
            "[green]✓[/green]" if model.is_new else "",
        )

    console.print(table)


@app.command("filter-create")
def filter_create(
    rules_file: Path = typer.Argument(..., help="JSON file with the rule clauses"),
    name: str = typer.Option(None, "--name", "-n", help="Filter name (overrides the file)"),
    owner: str = typer.Option("cli", "--owner", help="Owner user id"),
    description: str = typer.Option(None, "--description", "-d", help="Filter description"),
    visibility: Visibility = typer.Option(None, "--visibility", help="private, team or public"),
    team: str = typer.Option(None, "--team", help="Team id for team visibility"),
) -> None:
    """Create a saved filter from a rules file."""
    try:
        file_data = _load_rules_file(rules_file)
        data = {
            field: file_data[key] for key, field in RULES_FILE_KEYS.items() if key in file_data
        }
        overrides = {
            "name": name,
            "description": description,
            "visibility": visibility,
            "team_id": team,
        }
        data.update({key: value for key, value in overrides.items() if value is not None})
        data["owner_id"] = owner
        data.setdefault("name", rules_file.stem)
        filter_ = _file_manager().create_filter(Filter.model_validate(data))
    except (CatalogError, ValidationError) as e:
        _fail(str(e))

    console.print(f"[green]Created filter {filter_.id}[/green] ({filter_.name}, {len(filter_.rules)} rules)")


@app.command("filter-update")
def filter_update(
    filter_id: str = typer.Argument(..., help="Filter id"),
    rules_file: Path = typer.Option(None, "--rules", "-r", help="Replace rules from JSON file"),
    name: str = typer.Option(None, "--name", "-n", help="New name"),
    description: str = typer.Option(None, "--description", "-d", help="New description"),
    visibility: Visibility = typer.Option(None, "--visibility", help="private, team or public"),
) -> None:
    """Update a saved filter (bumps its version)."""
    updates: dict[str, Any] = {
        key: value
        for key, value in {"name": name, "description": description, "visibility": visibility}.items()
        if value is not None
    }
    try:
        if rules_file is not None:
            updates["rules"] = _load_rules_file(rules_file)["rules"]
        if not updates:
            _fail("Nothing to update. Pass --rules, --name, --description or --visibility.")
        filter_ = _file_manager().update_filter(filter_id, updates)
    except (CatalogError, ValidationError) as e:
        _fail(str(e))

    console.print(f"[green]Updated filter {filter_.id}[/green] to version {filter_.version}")


@app.command("filters")
def list_filters(
    owner: str = typer.Option(None, "--owner", help="Only filters of this owner"),
) -> None:
    """List saved filters."""
    filters = _file_manager().list_filters(owner_id=owner)

    if not filters:
        console.print("[yellow]No filters found.[/yellow]")
        return

    table = Table(title=f"Saved Filters ({len(filters)})")
    table.add_column("ID", style="cyan")
    table.add_column("Name", style="bold")
    table.add_column("Owner", style="blue")
    table.add_column("Visibility")
    table.add_column("Rules", justify="right")
    table.add_column("Version", justify="right")
    table.add_column("Used", justify="right", style="magenta")

    for filter_ in filters:
        table.add_row(
            filter_.id,
            _truncate(filter_.name, 30),
            filter_.owner_id,
            filter_.visibility.value,
            str(len(filter_.rules)),
            str(filter_.version),
            str(filter_.usage_count),
        )

    console.print(table)


@app.command("filter-show")
def filter_show(filter_id: str = typer.Argument(..., help="Filter id")) -> None:
    """Show a filter and its rules."""
    try:
        filter_ = _file_manager().load_filter(filter_id)
    except CatalogError as e:
        _fail(str(e))

    console.print(f"\n[bold]{filter_.name}[/bold] ({filter_.id})")
    if filter_.description:
        console.print(filter_.description)
    last_used = filter_.last_used_at.isoformat() if filter_.last_used_at else "never"
    console.print(
        f"Owner: {filter_.owner_id}  Visibility: {filter_.visibility.value}  "
        f"Version: {filter_.version}  Used: {filter_.usage_count} (last {last_used})\n"
    )

    table = Table(title="Rules")
    table.add_column("#", justify="right", style="cyan")
    table.add_column("Type")
    table.add_column("Field", style="bold")
    table.add_column("Operator")
    table.add_column("Value")
    table.add_column("Weight", justify="right", style="dim")

    for index, clause in enumerate(filter_.rules, 1):
        clause_type = getattr(clause.type, "value", clause.type)
        table.add_row(
            str(index),
            f"[red]{clause_type}[/red]" if clause_type == "hard" else clause_type,
            clause.field,
            getattr(clause.operator, "value", clause.operator),
            json.dumps(clause.value),
            "" if clause.weight is None else f"{clause.weight:g}",
        )

    console.print(table)


@app.command("filter-delete")
def filter_delete(filter_id: str = typer.Argument(..., help="Filter id")) -> None:
    """Delete a saved filter. Its run history is kept."""
    if not _file_manager().delete_filter(filter_id):
        _fail(f"Filter not found: {filter_id}")
    console.print(f"[green]Deleted filter {filter_id}[/green]")


@app.command()
def evaluate(
    filter_id: str = typer.Argument(..., help="Filter id"),
    user: str = typer.Option("cli", "--user", "-u", help="User id recorded on the run"),
    model_ids: list[str] = typer.Option(None, "--model", "-m", help="Only evaluate these model ids"),
    limit: int = typer.Option(None, "--limit", "-l", help="Keep at most this many results"),
    show_all: bool = typer.Option(False, "--all", help="Also show rejected models"),
) -> None:
    """Evaluate a saved filter against the latest models and record the run."""
    try:
        evaluation, run = run_filter_evaluation(
            filter_id,
            user,
            model_ids=model_ids or None,
            limit=limit,
            data_dir=_state["data_dir"],
        )
    except (CatalogError, ValidationError) as e:
        _fail(str(e))

    ranked = rank_evaluations(evaluation.results)
    if not show_all:
        ranked = [result for result in ranked if result.match]

    console.print(
        f"\n[bold]{evaluation.filter_name}[/bold]: {evaluation.match_count}/"
        f"{evaluation.total_evaluated} models matched in {evaluation.duration_ms}ms (run {run.id})\n"
    )
    if not ranked:
        console.print("[yellow]No matching models.[/yellow]")
        return

    table = Table(title="Results")
    table.add_column("Rank", justify="right", style="cyan")
    table.add_column("Model", style="bold")
    table.add_column("Score", justify="right")
    table.add_column("Verdict")
    table.add_column("Rationale", style="dim")

    for rank, result in enumerate(ranked, 1):
        color = _get_score_color(result.score) if result.match else "red"
        table.add_row(
            str(rank),
            _truncate(result.model_id or result.model_name, 40),
            f"[{color}]{result.score * 100:.1f}%[/{color}]",
            format_evaluation_result(result),
            _truncate(result.rationale, 60),
        )

    console.print(table)


@app.command()
def runs(
    filter_id: str = typer.Argument(..., help="Filter id"),
    limit: int = typer.Option(10, "--limit", "-l", help="Number of runs"),
) -> None:
    """Show the run history of a filter."""
    history = _file_manager().list_filter_runs(filter_id, limit=limit)

    if not history:
        console.print(f"[yellow]No runs found for filter {filter_id}.[/yellow]")
        return

    table = Table(title=f"Runs of {filter_id}")
    table.add_column("Run", style="cyan")
    table.add_column("Executed At")
    table.add_column("By", style="blue")
    table.add_column("Version", justify="right")
    table.add_column("Matched", justify="right", style="magenta")
    table.add_column("Duration", justify="right", style="dim")

    for run in history:
        table.add_row(
            run.id,
            run.executed_at.strftime("%Y-%m-%d %H:%M:%S"),
            run.executed_by,
            str(run.filter_snapshot.version),
            f"{run.match_count}/{run.total_evaluated}",
            f"{run.duration_ms}ms",
        )

    console.print(table)


def _csv_row(model: CatalogModel) -> list[Any]:
    return [
        model.id,
        model.name,
        model.provider,
        model.context_window,
        model.max_output_tokens,
        model.input_cost,
        model.output_cost,
        model.cache_read_cost,
        model.cache_write_cost,
        "; ".join(model.modalities),
        "; ".join(model.capabilities),
        model.release_date,
        model.open_weights,
        model.is_new,
    ]


@app.command()
def export(
    format: str = typer.Option("json", "--format", "-f", help="Export format (json, csv)"),
    output: str = typer.Option("models.json", "--output", "-o", help="Output file path"),
    source: str = typer.Option(None, "--source", "-s", help="Only models from this source"),
    provider: str = typer.Option(None, "--provider", "-p", help="Only models of this provider"),
) -> None:
    """Export the latest models to a file."""
    try:
        catalog = load_latest_models(source=source, provider=provider, data_dir=_state["data_dir"])
    except CatalogError as e:
        _fail(str(e))

    if not catalog:
        console.print("[yellow]No models found to export.[/yellow]")
        return

    if format not in ("json", "csv"):
        _fail(f"Unsupported format '{format}'. Use 'json' or 'csv'.")

    output_path = Path(output)
    try:
        if format == "json":
            data = [model.to_record() for model in catalog]
            output_path.write_text(json.dumps(data, indent=2), encoding="utf-8")
        else:
            with output_path.open("w", newline="", encoding="utf-8") as f:
                writer = csv.writer(f)
                writer.writerow([
                    "id",
                    "name",
                    "provider",
                    "context_window",
                    "max_output_tokens",
                    "input_cost",
                    "output_cost",
                    "cache_read_cost",
                    "cache_write_cost",
                    "modalities",
                    "capabilities",
                    "release_date",
                    "open_weights",
                    "new",
                ])
                writer.writerows(_csv_row(model) for model in catalog)
    except OSError as e:
        console.print(f"[red]Error exporting:[/red] {e}")
        raise typer.Exit(1)

    console.print(f"[green]Exported {len(catalog)} models to {output_path}[/green]")


if __name__ == "__main__":
    app()
