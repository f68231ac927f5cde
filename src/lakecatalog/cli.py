"""Command line interface for browsing OneLake catalogs."""

from __future__ import annotations

import asyncio
import difflib
import logging
from pathlib import Path
from typing import Any, Optional

import click
import yaml
from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape
from rich.syntax import Syntax
from rich.table import Table

from lakecatalog.catalog.builder import BuildReport
from lakecatalog.catalog.diagnostics import CollectingDiagnosticSink, LoggingDiagnosticSink
from lakecatalog.catalog.models import FileRecord
from lakecatalog.clients.fabric import FabricClient
from lakecatalog.config import (
    ConfigError,
    ConfigManager,
    LakeCatalogConfig,
    assign_dotted,
    resolve_with_precedence,
)
from lakecatalog.preview.mime import is_image, is_pdf, is_previewable
from lakecatalog.session import CatalogSession
from lakecatalog.state.models import PreviewStatus

console = Console()


def _create_client(config: LakeCatalogConfig) -> FabricClient:
    """Return the collaborator used by CLI commands for workspace and storage calls."""
    return FabricClient(config.fabric)


def _configure_logging(level: str) -> None:
    logging.basicConfig(
        level=level.upper(),
        format="%(message)s",
        handlers=[RichHandler(console=Console(stderr=True), show_path=False)],
        force=True,
    )


def _load_config(token: Optional[str]) -> LakeCatalogConfig:
    """Load configuration with CLI overrides applied.

    Raises:
        click.ClickException: If configuration cannot be loaded.
    """
    overrides: dict[str, Any] = {}
    if token:
        overrides["fabric.access_token"] = token
    try:
        config = ConfigManager().load(cli_overrides=overrides or None)
    except ConfigError as exc:
        raise click.ClickException(str(exc)) from exc
    _configure_logging(config.logging.level)
    return config


def _handle_cli_error(message: str, *, code: str, json_output: bool) -> None:
    """Emit a standardized error and terminate the command.

    Raises:
        SystemExit: When emitting JSON output.
        click.ClickException: For non-JSON flows.
    """
    if json_output:
        console.print_json(data={"error": {"code": code, "message": message}})
        raise SystemExit(1)
    raise click.ClickException(message)


def _format_size(size: int) -> str:
    value = float(size)
    for unit in ("B", "KB", "MB", "GB"):
        if value < 1024 or unit == "GB":
            return f"{int(value)} {unit}" if unit == "B" else f"{value:.1f} {unit}"
        value /= 1024
    return f"{size} B"


def _preview_kind(name: str) -> str:
    if is_pdf(name):
        return "pdf"
    if is_image(name):
        return "image"
    return "-"


def _record_payload(record: FileRecord) -> dict[str, Any]:
    payload = record.model_dump(mode="json")
    payload["previewable"] = is_previewable(record.name)
    return payload


def _files_table(files: list[FileRecord]) -> Table:
    table = Table(show_header=True, header_style="bold")
    table.add_column("Lakehouse")
    table.add_column("Path")
    table.add_column("Size", justify="right")
    table.add_column("Modified")
    table.add_column("Preview")
    for record in files:
        table.add_row(
            record.container_name,
            record.relative_path,
            _format_size(record.size),
            record.last_modified,
            _preview_kind(record.name),
        )
    return table


async def _build_session(session: CatalogSession, client: FabricClient) -> BuildReport:
    try:
        return await session.build()
    finally:
        await client.aclose()


@click.group(context_settings={"help_option_names": ["-h", "--help"]})
@click.version_option(package_name="lakecatalog")
def cli() -> None:
    """Browse and download files stored in OneLake Lakehouses."""


@cli.command("list")
@click.option("--item-id", type=str, help="Item whose workspace should be listed.")
@click.option("--filter", "query", type=str, default="", help="Filter by file or Lakehouse name.")
@click.option("--token", type=str, envvar="LAKECATALOG_TOKEN", help="Bearer token for Fabric APIs.")
@click.option("--json", "json_output", is_flag=True, help="Emit the listing as JSON.")
@click.option("--quiet", is_flag=True, help="Only print the summary line.")
def list_files(
    item_id: Optional[str],
    query: str,
    token: Optional[str],
    json_output: bool,
    quiet: bool,
) -> None:
    """List every file beneath the Files folder of each Lakehouse."""
    config = _load_config(token)
    json_output = json_output or config.cli.json_default
    quiet = quiet or config.cli.quiet_default

    client = _create_client(config)
    sink = CollectingDiagnosticSink(forward=LoggingDiagnosticSink())
    session = CatalogSession(client, client, item_id=item_id, config=config, sink=sink)
    report = asyncio.run(_build_session(session, client))
    session.set_filter_query(query)
    visible = session.files

    if json_output:
        console.print_json(
            data={
                "workspace_id": session.workspace_id,
                "error": session.error,
                "counts": {**report.counts(), "visible": len(visible)},
                "skipped": report.skipped,
                "diagnostics": [
                    {
                        "code": event.code,
                        "message": event.message,
                        "container_id": event.container_id,
                    }
                    for event in sink.events
                ],
                "files": [_record_payload(record) for record in visible],
            }
        )
        return

    if session.error:
        console.print(f"[yellow]{escape(session.error)}[/yellow]")
    for event in sink.events:
        console.print(f"[yellow]{escape(event.message)}[/yellow]")
    if visible and not quiet:
        console.print(_files_table(visible))
    metrics = ", ".join(f"{key}={value}" for key, value in report.counts().items())
    console.print(
        f"[green]list summary for {session.workspace_id or '-'}: "
        f"{metrics}, visible={len(visible)}.[/green]"
    )


@cli.command()
@click.argument("full_path")
@click.option("--item-id", type=str, help="Item whose workspace should be listed.")
@click.option(
    "--output",
    type=click.Path(file_okay=False, path_type=Path),
    help="Directory to save into (defaults to preview.downloads_dir).",
)
@click.option("--token", type=str, envvar="LAKECATALOG_TOKEN", help="Bearer token for Fabric APIs.")
@click.option("--json", "json_output", is_flag=True, help="Emit the result as JSON.")
def download(
    full_path: str,
    item_id: Optional[str],
    output: Optional[Path],
    token: Optional[str],
    json_output: bool,
) -> None:
    """Download FULL_PATH as listed by `lakecatalog list --json`."""
    config = _load_config(token)
    client = _create_client(config)
    session = CatalogSession(client, client, item_id=item_id, config=config)

    async def _run() -> tuple[Optional[Path], str, str]:
        async with session:
            try:
                await session.build()
                if session.error:
                    return None, "catalog_error", session.error
                record = session.find(full_path)
                if record is None:
                    return None, "not_found", f"{full_path} was not found in the catalog."
                await session.select(record)
                preview = session.preview
                if preview is not None and preview.status is PreviewStatus.ERROR:
                    return None, "preview_error", preview.error_detail or "Failed to load file."
                return session.download(output), "", ""
            finally:
                await client.aclose()

    try:
        saved, code, message = asyncio.run(_run())
    except OSError as exc:
        _handle_cli_error(
            f"Could not save file: {exc}", code="write_failed", json_output=json_output
        )
        return

    if saved is None:
        _handle_cli_error(
            message or "Nothing to download.", code=code or "not_ready", json_output=json_output
        )
        return

    if json_output:
        console.print_json(data={"full_path": full_path, "saved_to": str(saved)})
        return
    console.print(f"[green]Saved {full_path} to {saved}.[/green]")


@cli.group()
def config() -> None:
    """Manage lakecatalog configuration files and overrides."""


@config.command("view")
@click.option("--no-env", is_flag=True, help="Ignore environment overrides when displaying output.")
def config_view(no_env: bool) -> None:
    """Display the effective configuration after applying precedence rules."""
    manager = ConfigManager()
    try:
        config_data = manager.load(include_env=not no_env)
    except ConfigError as exc:
        raise click.ClickException(str(exc)) from exc

    yaml_text = yaml.safe_dump(config_data.model_dump(mode="python"), sort_keys=False)
    console.print(Syntax(yaml_text, "yaml", word_wrap=True))


@config.command("set")
@click.argument("key")
@click.option("--value", required=True, help="Value to assign to KEY.")
def config_set(key: str, value: str) -> None:
    """Persist a configuration value expressed as a dotted KEY."""
    manager = ConfigManager()
    manager.ensure_exists()

    before = manager.read_text().splitlines()
    segments = [segment.strip() for segment in key.split(".") if segment.strip()]
    if not segments:
        raise click.ClickException("KEY must be a dotted path such as 'catalog.max_concurrency'.")

    try:
        parsed_value = yaml.safe_load(value)
    except yaml.YAMLError as exc:
        raise click.ClickException(f"Unable to parse value: {exc}") from exc

    try:
        file_data = manager.load_file_overrides()
        assign_dotted(file_data, segments, parsed_value)
        resolve_with_precedence(defaults=LakeCatalogConfig(), file_overrides=file_data)
    except ConfigError as exc:
        raise click.ClickException(str(exc)) from exc

    manager.save(file_data)
    diff = list(
        difflib.unified_diff(
            before,
            manager.read_text().splitlines(),
            fromfile="config.yaml (before)",
            tofile="config.yaml (after)",
            lineterm="",
        )
    )
    if diff:
        console.print(Syntax("\n".join(diff), "diff", word_wrap=False))
    console.print(f"[green]Updated {'.'.join(segments)}.[/green]")


def main() -> None:
    """Invoke the Click CLI as the console script entry point."""
    cli()


if __name__ == "__main__":
    main()
