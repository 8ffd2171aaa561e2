from __future__ import annotations

from dataclasses import dataclass, field

from depchain.domain.ignores import IGNORED_IMPORTS, IGNORED_PACKAGES
from depchain.domain.package import PackageArea

DEFAULT_PACKAGE_GLOBS: tuple[str, ...] = ("packages/*",)


def _all_areas() -> tuple[PackageArea, ...]:
    return tuple(PackageArea)


@dataclass(frozen=True)
class CheckConfig:
    ignored_imports: tuple[str, ...] = IGNORED_IMPORTS
    ignored_packages: tuple[str, ...] = IGNORED_PACKAGES
    package_globs: tuple[str, ...] = ()
    areas: tuple[PackageArea, ...] = field(default_factory=_all_areas)

    def is_package_ignored(self, package_name: str) -> bool:
        return package_name in self.ignored_packages

    def extend(
        self,
        ignored_imports: list[str] | None = None,
        ignored_packages: list[str] | None = None,
    ) -> CheckConfig:
        return CheckConfig(
            ignored_imports=_merge(self.ignored_imports, ignored_imports or []),
            ignored_packages=_merge(self.ignored_packages, ignored_packages or []),
            package_globs=self.package_globs,
            areas=self.areas,
        )


def _merge(base: tuple[str, ...], extra: list[str]) -> tuple[str, ...]:
    merged = list(base)
    for name in extra:
        if name not in merged:
            merged.append(name)
    return tuple(merged)
