from __future__ import annotations

import asyncio
import logging

from depchain.adapters.errors import SourceReadError
from depchain.domain.allow_set import build_allow_set, is_allowed
from depchain.domain.chain import (
    ChainReport,
    ChainState,
    InvalidImport,
    detail_line,
    summary_line,
)
from depchain.domain.config import CheckConfig
from depchain.domain.errors import InvalidDependencyChainError
from depchain.domain.imports import ExternalImport, classify_reference
from depchain.domain.package import ALL_DEPENDENCY_KINDS, PackageArea, SourceFile
from depchain.ports.import_walker import ImportWalkerPort
from depchain.ports.package import PackagePort
from depchain.ports.reporter import ReporterPort
from depchain.ports.source_finder import SourceFinderPort

_LOG = logging.getLogger("depchain.application.chain")

ExternalRef = tuple[ExternalImport, int | None]


async def _read_source(source_file: SourceFile) -> str:
    try:
        return await asyncio.to_thread(source_file.path.read_text, encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        raise SourceReadError(
            f"Failed to read {source_file.path}",
            details={"path": str(source_file.path)},
            cause=e,
        ) from e


async def _external_imports(
    walker: ImportWalkerPort, source_file: SourceFile
) -> list[ExternalRef]:
    text = await _read_source(source_file)
    externals: list[ExternalRef] = []
    for ref in walker.extract(text, source_file.path):
        classified = classify_reference(ref)
        if isinstance(classified, ExternalImport):
            externals.append((classified, ref.line))
    return externals


async def discover_sources(
    package: PackagePort, area: PackageArea, finder: SourceFinderPort
) -> list[SourceFile]:
    root = area.root(package.path)
    paths = await asyncio.to_thread(finder.find_sources, root)
    return [SourceFile.from_path(path, root) for path in paths]


async def check_dependency_chain(
    package: PackagePort,
    area: PackageArea | str = PackageArea.PACKAGE,
    *,
    walker: ImportWalkerPort,
    reporter: ReporterPort,
    finder: SourceFinderPort,
    config: CheckConfig | None = None,
) -> ChainReport:
    """Check that every external import of a package area is declared.

    Returns the report when all imports are declared, or when the only
    undeclared ones are type imports (those are reported as warnings).
    Raises InvalidDependencyChainError once at least one undeclared value
    import was found, after the full list has been reported.
    """
    config = config or CheckConfig()
    name = package.package_name
    if config.is_package_ignored(name):
        reporter.verbose(f"Skipping ignored package {name}")
        return ChainReport(name, PackageArea.parse(area), state=ChainState.SKIPPED)

    report = ChainReport(name, PackageArea.parse(area))
    report.state = ChainState.DISCOVERING
    report.files = await discover_sources(package, report.area, finder)
    sources = [f for f in report.files if f.is_source]
    _LOG.debug(
        "%s (%s): %d source files, %d test files",
        name,
        report.area.value,
        len(sources),
        len(report.files) - len(sources),
    )
    if not sources:
        report.state = ChainState.CLEAN
        return report

    report.state = ChainState.EXTRACTING
    per_file = await asyncio.gather(*(_external_imports(walker, f) for f in sources))

    report.state = ChainState.VALIDATING
    allow_set = build_allow_set(
        package.get_dependencies(ALL_DEPENDENCY_KINDS), config.ignored_imports
    )
    for source_file, externals in zip(sources, per_file):
        for external, line in externals:
            if not is_allowed(name, allow_set, external.package_name):
                report.invalid_imports.append(
                    InvalidImport(
                        source_file=source_file, classified_import=external, line=line
                    )
                )

    if not report.invalid_imports:
        report.state = ChainState.CLEAN
        return report

    report.state = ChainState.REPORTED
    reporter.warn(summary_line(report))
    for invalid in report.invalid_imports:
        reporter.verbose(detail_line(invalid, package.path))

    if not report.types_only:
        raise InvalidDependencyChainError.for_report(report)
    return report
