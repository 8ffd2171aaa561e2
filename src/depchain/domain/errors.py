from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

from depchain.domain.json_types import JsonDict

if TYPE_CHECKING:
    from depchain.domain.chain import ChainReport


@dataclass
class DependencyChainError(Exception):
    message: str
    details: JsonDict | None = None
    hint: str | None = None
    cause: Exception | None = None

    def __str__(self) -> str:
        return self.message


class AreaSelectorError(DependencyChainError):
    pass


@dataclass
class InvalidDependencyChainError(DependencyChainError):
    package_name: str = ""
    report: ChainReport | None = None

    @classmethod
    def for_report(cls, report: ChainReport) -> InvalidDependencyChainError:
        return cls(
            f"{report.package_name} has invalid dependency chains.",
            details={
                "package": report.package_name,
                "area": report.area.value,
                "invalid": list(report.invalid_packages),
            },
            hint="Declare the packages in package.json or remove the imports",
            package_name=report.package_name,
            report=report,
        )
