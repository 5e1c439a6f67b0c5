from __future__ import annotations

import json
import logging
from dataclasses import replace
from pathlib import Path
from typing import List, NoReturn, Optional

import typer

from uselsp.completion import CompletionProvider, InsertFormat
from uselsp.config import ServerSettings, load_settings, parse_log_level
from uselsp.diagnostics import DiagnosticEngine, Finding
from uselsp.exceptions import ConfigurationFault, UnresolvedEntry
from uselsp.schema import (
    CheckResponse,
    CompletionEntryDTO,
    CompletionResolutionDTO,
    FileCheckDTO,
    FindingDTO,
)
from uselsp.snippets import parse_snippet

app = typer.Typer(add_completion=False, help="Language server for USE scripts.")

_LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def _settings(
    config: Optional[Path],
    log_level: Optional[str] = None,
    log_file: Optional[Path] = None,
) -> ServerSettings:
    settings = load_settings(config_path=config)
    if log_level is not None:
        level = parse_log_level(log_level)
        if level is None:
            raise typer.BadParameter(f"unknown log level: {log_level}", param_hint="--log-level")
        settings = replace(settings, log_level=level)
    if log_file is not None:
        settings = replace(settings, log_file=log_file)
    return settings


def _configure_logging(settings: ServerSettings) -> None:
    # stdout carries the protocol when serving over stdio; log elsewhere.
    if settings.log_file is not None:
        handler: logging.Handler = logging.FileHandler(settings.log_file, encoding="utf-8")
    else:
        handler = logging.StreamHandler()
    handler.setFormatter(logging.Formatter(_LOG_FORMAT))
    root = logging.getLogger()
    root.handlers[:] = [handler]
    root.setLevel(settings.log_level)


def _fail(message: str) -> NoReturn:
    typer.echo(message, err=True)
    raise typer.Exit(code=2)


def _format_finding(path: str, finding: Finding) -> str:
    line = finding.start.line + 1
    col = finding.start.character + 1
    return f"{path}:{line}:{col}: {finding.source} {finding.message}"


def _provider() -> CompletionProvider:
    try:
        return CompletionProvider()
    except ConfigurationFault as exc:
        _fail(f"completion tables are inconsistent: {exc}")


@app.command()
def serve(
    tcp: bool = typer.Option(False, "--tcp", help="Serve over TCP instead of stdio."),
    host: str = typer.Option("127.0.0.1", "--host"),
    port: int = typer.Option(2087, "--port"),
    log_level: Optional[str] = typer.Option(None, "--log-level"),
    log_file: Optional[Path] = typer.Option(None, "--log-file"),
    config: Optional[Path] = typer.Option(None, "--config"),
) -> None:
    """Run the language server."""
    settings = _settings(config, log_level, log_file)
    _configure_logging(settings)
    try:
        from uselsp import server
    except ConfigurationFault as exc:
        _fail(f"cannot start: {exc}")
    server.configure(settings)
    if tcp:
        server.serve_tcp(host, port)
    else:
        server.start()


@app.command()
def check(
    paths: List[Path] = typer.Argument(..., help="USE script files to validate."),
    as_json: bool = typer.Option(False, "--json", help="Emit findings as JSON."),
    config: Optional[Path] = typer.Option(None, "--config"),
) -> None:
    """Validate files offline and print the findings."""
    settings = _settings(config)
    engine = DiagnosticEngine(source=settings.diagnostic_source)
    response = CheckResponse()
    lines: list[str] = []
    for path in paths:
        try:
            text = path.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as exc:
            response.errors.append(f"{path}: {exc}")
            continue
        findings = engine.validate_text(text)
        response.files.append(
            FileCheckDTO(
                path=str(path),
                findings=[FindingDTO.from_finding(finding) for finding in findings],
            )
        )
        lines.extend(_format_finding(str(path), finding) for finding in findings)
    if as_json:
        typer.echo(json.dumps(response.model_dump(), indent=2))
    else:
        for line in lines:
            typer.echo(line)
        for error in response.errors:
            typer.echo(error, err=True)
    if response.errors:
        raise typer.Exit(code=2)
    if response.finding_count:
        raise typer.Exit(code=1)


@app.command()
def catalog(
    as_json: bool = typer.Option(False, "--json", help="Emit the catalog as JSON."),
) -> None:
    """List the completion catalog in display order."""
    entries = _provider().list_completions()
    if as_json:
        payload = [CompletionEntryDTO.from_entry(entry).model_dump() for entry in entries]
        typer.echo(json.dumps(payload, indent=2))
        return
    for entry in entries:
        typer.echo(f"{entry.id}\t{entry.label}")


@app.command()
def resolve(
    entry_id: int = typer.Argument(..., help="Catalog id to resolve."),
    as_json: bool = typer.Option(False, "--json", help="Emit the resolution as JSON."),
) -> None:
    """Show the snippet and documentation behind one catalog id."""
    try:
        resolution = _provider().resolve(entry_id)
    except UnresolvedEntry as exc:
        _fail(str(exc))
    if as_json:
        dto = CompletionResolutionDTO.from_resolution(entry_id, resolution)
        typer.echo(json.dumps(dto.model_dump(), indent=2))
        return
    typer.echo(resolution.label)
    typer.echo(resolution.insert_text)
    if resolution.insert_format is InsertFormat.SNIPPET:
        typer.echo(f"-> {parse_snippet(resolution.insert_text).plain_text()}")
    typer.echo("")
    typer.echo(resolution.documentation)


def main() -> None:  # pragma: no cover
    app()


if __name__ == "__main__":  # pragma: no cover
    main()
