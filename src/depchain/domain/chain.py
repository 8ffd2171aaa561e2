from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
import os
from pathlib import Path

from depchain.domain.imports import ExternalImport
from depchain.domain.package import PackageArea, SourceFile

TYPES_ONLY_LABEL = " (types only)"


class ChainState(str, Enum):
    IDLE = "idle"
    DISCOVERING = "discovering"
    EXTRACTING = "extracting"
    VALIDATING = "validating"
    CLEAN = "clean"
    REPORTED = "reported"
    SKIPPED = "skipped"


@dataclass(frozen=True)
class InvalidImport:
    source_file: SourceFile
    classified_import: ExternalImport
    line: int | None = None

    @property
    def is_type_only(self) -> bool:
        return self.classified_import.is_type_only


def _new_files() -> list[SourceFile]:
    return []


def _new_invalid() -> list[InvalidImport]:
    return []


@dataclass
class ChainReport:
    package_name: str
    area: PackageArea
    state: ChainState = ChainState.IDLE
    files: list[SourceFile] = field(default_factory=_new_files)
    invalid_imports: list[InvalidImport] = field(default_factory=_new_invalid)

    @property
    def types_only(self) -> bool:
        # All-or-nothing: a single value import fails the whole package.
        return bool(self.invalid_imports) and all(
            invalid.is_type_only for invalid in self.invalid_imports
        )

    @property
    def invalid_packages(self) -> list[str]:
        return list(
            dict.fromkeys(i.classified_import.package_name for i in self.invalid_imports)
        )

    @property
    def failed(self) -> bool:
        return self.state is ChainState.REPORTED and not self.types_only


def summary_line(report: ChainReport) -> str:
    names = report.invalid_packages
    noun = "dependency" if len(names) == 1 else "dependencies"
    label = TYPES_ONLY_LABEL if report.types_only else ""
    return f"📦 Invalid {noun}{label}: {', '.join(names)}"


def detail_line(invalid: InvalidImport, package_path: Path) -> str:
    relative = Path(os.path.relpath(invalid.source_file.path, package_path)).as_posix()
    label = TYPES_ONLY_LABEL if invalid.is_type_only else ""
    return f"     > {relative} - {invalid.classified_import.full_specifier}{label}"
