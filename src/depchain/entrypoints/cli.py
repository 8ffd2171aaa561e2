from pathlib import Path
import asyncio
import json
import logging

import typer

from depchain.adapters.config.yaml_config import load_config
from depchain.adapters.errors import AdapterError, SourceParseError, SourceReadError
from depchain.adapters.packages.package_json import discover_packages, workspace_globs
from depchain.adapters.parser.tree_sitter_walker import TreeSitterImportWalker
from depchain.adapters.reporter.console import ConsoleReporter, RecordingReporter
from depchain.adapters.sources.glob_finder import GlobSourceFinder
from depchain.application.check_workspace import check_workspace, error_diagnostic
from depchain.application.result_serialization import serialize_result
from depchain.domain.chain import ChainReport
from depchain.domain.diagnostics import Diagnostic, Severity, ValueLocation
from depchain.domain.imports import (
    BuiltInImport,
    ClassifiedImport,
    InternalImport,
    classify_reference,
)
from depchain.domain.result import Result

app = typer.Typer(add_completion=False)

_SEVERITY_COLORS = {
    Severity.ERROR: typer.colors.RED,
    Severity.WARN: typer.colors.YELLOW,
    Severity.INFO: typer.colors.BLUE,
}


def _configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )


def _missing_packages(requested: list[str], known: set[str]) -> list[Diagnostic]:
    return [
        Diagnostic(
            code="PACKAGE_NOT_FOUND",
            rule="workspace.package",
            severity=Severity.ERROR,
            message=f"Package not found in workspace: {name}",
            location=ValueLocation("package", name),
            is_execution=True,
        )
        for name in requested
        if name not in known
    ]


def _run_check(
    root: Path,
    packages: list[str],
    areas: list[str],
    strict: bool,
    reporter: ConsoleReporter | RecordingReporter,
) -> Result[list[ChainReport]]:
    try:
        config = load_config(root)
        found = discover_packages(root, config.package_globs or workspace_globs(root))
    except AdapterError as e:
        return Result(diagnostics=[error_diagnostic(e)])
    if packages:
        missing = _missing_packages(packages, {p.package_name for p in found})
        if missing:
            return Result(diagnostics=missing)
        found = [p for p in found if p.package_name in packages]
    # One walker for the whole run; grammars are loaded once.
    walker = TreeSitterImportWalker()
    return asyncio.run(
        check_workspace(
            found,
            walker=walker,
            reporter=reporter,
            finder=GlobSourceFinder(),
            config=config,
            areas=areas or None,
            strict=strict,
        )
    )


@app.command()
def check(
    root: Path = typer.Argument(Path("."), file_okay=False, exists=True),
    package: list[str] = typer.Option(None, "--package", "-p"),
    area: list[str] = typer.Option(None, "--area", "-a"),
    strict: bool = typer.Option(False, "--strict"),
    verbose: bool = typer.Option(False, "--verbose", "-v"),
    json_output: bool = typer.Option(False, "--json"),
):
    _configure_logging(verbose)
    reporter = RecordingReporter() if json_output else ConsoleReporter(verbose=verbose)
    result = _run_check(root, package or [], area or [], strict, reporter)
    if json_output:
        if isinstance(reporter, RecordingReporter):
            result.artifacts.append(
                {
                    "kind": "log",
                    "warnings": list(reporter.warnings),
                    "verbose": list(reporter.verbose_lines),
                }
            )
        data = serialize_result(result, command="check", args=[str(root)])
        typer.echo(json.dumps(data))
        raise typer.Exit(result.exit_code)

    for diag in result.diagnostics:
        if diag.severity == Severity.INFO and not verbose:
            continue
        typer.secho(
            f"{diag.severity.value}: {diag.message}",
            fg=_SEVERITY_COLORS[diag.severity],
            err=True,
        )
    checked = {r.package_name for r in result.value or []}
    typer.echo(f"Checked {len(checked)} package(s)", err=True)
    raise typer.Exit(result.exit_code)


def _describe(classified: ClassifiedImport) -> str:
    if isinstance(classified, BuiltInImport):
        return f"builtin   {classified.name}"
    if isinstance(classified, InternalImport):
        return f"internal  {classified.relative_path}"
    label = " (types only)" if classified.is_type_only else ""
    return f"external  {classified.full_specifier}{label}"


def _read_file(path: Path) -> str:
    try:
        return path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        raise SourceReadError(
            f"Failed to read {path}", details={"path": str(path)}, cause=e
        ) from e


@app.command()
def imports(file: Path = typer.Argument(..., exists=True, dir_okay=False)):
    walker = TreeSitterImportWalker()
    try:
        if not walker.supports(file):
            raise SourceParseError(
                f"Unsupported source file: {file}",
                details={"path": str(file)},
            )
        refs = walker.extract(_read_file(file), file)
    except AdapterError as e:
        typer.secho(str(e), fg=typer.colors.RED, err=True)
        raise typer.Exit(3)
    for ref in refs:
        typer.echo(f"{ref.line}\t{_describe(classify_reference(ref))}")
