from __future__ import annotations

import asyncio
from collections.abc import Sequence
from dataclasses import dataclass, field
import logging

from depchain.adapters.errors import (
    AdapterError,
    ConfigParseError,
    ConfigReadError,
    ManifestParseError,
    ManifestReadError,
    SourceParseError,
    SourceReadError,
)
from depchain.application.check_dependency_chain import check_dependency_chain
from depchain.application.result_serialization import serialize_report
from depchain.domain.chain import ChainReport, ChainState
from depchain.domain.config import CheckConfig
from depchain.domain.diagnostics import (
    Diagnostic,
    FileLocation,
    Location,
    PackageLocation,
    Severity,
)
from depchain.domain.errors import (
    AreaSelectorError,
    DependencyChainError,
    InvalidDependencyChainError,
)
from depchain.domain.json_types import JsonDict
from depchain.domain.package import PackageArea
from depchain.domain.result import Result, apply_strictness
from depchain.ports.import_walker import ImportWalkerPort
from depchain.ports.package import PackagePort
from depchain.ports.reporter import ReporterPort
from depchain.ports.source_finder import SourceFinderPort

_LOG = logging.getLogger("depchain.application.workspace")

_ERROR_CODES: dict[type[Exception], tuple[str, str]] = {
    SourceParseError: ("SOURCE_PARSE_FAILED", "source.parse"),
    SourceReadError: ("SOURCE_READ_FAILED", "source.read"),
    ManifestReadError: ("MANIFEST_READ_FAILED", "package.manifest"),
    ManifestParseError: ("MANIFEST_PARSE_FAILED", "package.manifest"),
    ConfigReadError: ("CONFIG_INVALID", "config"),
    ConfigParseError: ("CONFIG_INVALID", "config"),
    AreaSelectorError: ("AREA_SELECTOR_INVALID", "config.area"),
}


def error_diagnostic(
    error: AdapterError | DependencyChainError, location: Location | None = None
) -> Diagnostic:
    code, rule = _ERROR_CODES.get(type(error), ("EXECUTION_FAILED", "execution"))
    details = dict(error.details) if error.details else None
    if location is None and details and isinstance(details.get("path"), str):
        line = details.get("line")
        location = FileLocation(
            str(details["path"]), line if isinstance(line, int) else None
        )
    return Diagnostic(
        code=code,
        rule=rule,
        severity=Severity.ERROR,
        message=error.message,
        location=location,
        hint=error.hint,
        details=details,
        is_execution=True,
    )


class _PackageReporter:
    def __init__(self, reporter: ReporterPort, package_name: str) -> None:
        self._reporter = reporter
        self._prefix = f"[{package_name}] "

    def warn(self, message: str) -> None:
        self._reporter.warn(self._prefix + message)

    def verbose(self, message: str) -> None:
        self._reporter.verbose(self._prefix + message)


@dataclass
class _PackageOutcome:
    reports: list[ChainReport] = field(default_factory=list)
    diagnostics: list[Diagnostic] = field(default_factory=list)


def _invalid_chain_diagnostic(error: InvalidDependencyChainError) -> Diagnostic:
    area = error.report.area.value if error.report else PackageArea.PACKAGE.value
    return Diagnostic(
        code="DEPENDENCY_CHAIN_INVALID",
        rule="dependency_chain.declared",
        severity=Severity.ERROR,
        message=error.message,
        location=PackageLocation(error.package_name, area),
        hint=error.hint,
        details=error.details,
    )


def _types_only_diagnostic(report: ChainReport) -> Diagnostic:
    return Diagnostic(
        code="DEPENDENCY_CHAIN_TYPES_ONLY",
        rule="dependency_chain.declared",
        severity=Severity.WARN,
        message=(
            f"{report.package_name} imports types from undeclared packages: "
            + ", ".join(report.invalid_packages)
        ),
        location=PackageLocation(report.package_name, report.area.value),
        details={"invalid": report.invalid_packages},
        upgradeable=True,
    )


async def _check_package(
    package: PackagePort,
    areas: Sequence[PackageArea],
    *,
    walker: ImportWalkerPort,
    reporter: ReporterPort,
    finder: SourceFinderPort,
    config: CheckConfig,
) -> _PackageOutcome:
    outcome = _PackageOutcome()
    name = package.package_name
    scoped = _PackageReporter(reporter, name)
    for area in areas:
        if area is not PackageArea.PACKAGE and not area.root(package.path).is_dir():
            continue
        try:
            report = await check_dependency_chain(
                package, area, walker=walker, reporter=scoped, finder=finder, config=config
            )
        except InvalidDependencyChainError as e:
            if e.report is not None:
                outcome.reports.append(e.report)
            outcome.diagnostics.append(_invalid_chain_diagnostic(e))
            break
        except (AdapterError, DependencyChainError) as e:
            _LOG.debug("%s (%s) aborted: %s", name, area.value, e)
            location = (
                None
                if isinstance(e, SourceParseError)
                else PackageLocation(name, area.value)
            )
            outcome.diagnostics.append(error_diagnostic(e, location))
            break
        outcome.reports.append(report)
        if report.state is ChainState.SKIPPED:
            outcome.diagnostics.append(
                Diagnostic(
                    code="PACKAGE_IGNORED",
                    rule="dependency_chain.ignored",
                    severity=Severity.INFO,
                    message=f"Package {name} is ignored",
                    location=PackageLocation(name, area.value),
                )
            )
            break
        if report.state is ChainState.REPORTED:
            outcome.diagnostics.append(_types_only_diagnostic(report))
    return outcome


async def check_workspace(
    packages: Sequence[PackagePort],
    *,
    walker: ImportWalkerPort,
    reporter: ReporterPort,
    finder: SourceFinderPort,
    config: CheckConfig | None = None,
    areas: Sequence[PackageArea | str] | None = None,
    strict: bool = False,
) -> Result[list[ChainReport]]:
    config = config or CheckConfig()
    try:
        selected = [PackageArea.parse(a) for a in (areas or config.areas)]
    except AreaSelectorError as e:
        return Result(diagnostics=[error_diagnostic(e)])

    outcomes = await asyncio.gather(
        *(
            _check_package(
                package,
                selected,
                walker=walker,
                reporter=reporter,
                finder=finder,
                config=config,
            )
            for package in packages
        )
    )

    reports: list[ChainReport] = []
    diagnostics: list[Diagnostic] = []
    artifacts: list[JsonDict] = []
    for package, outcome in zip(packages, outcomes):
        reports.extend(outcome.reports)
        diagnostics.extend(outcome.diagnostics)
        artifacts.extend(serialize_report(r, str(package.path)) for r in outcome.reports)
    return Result(
        value=reports,
        diagnostics=apply_strictness(diagnostics, strict),
        artifacts=artifacts,
    )
