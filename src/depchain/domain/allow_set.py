from __future__ import annotations

from collections.abc import Iterable, Mapping
from types import MappingProxyType
from typing import TypeAlias

from depchain.domain.package import DependencyDeclaration

AllowSet: TypeAlias = Mapping[str, DependencyDeclaration | None]


def build_allow_set(
    declarations: Iterable[DependencyDeclaration],
    ignored_imports: Iterable[str] = (),
) -> AllowSet:
    """Map every importable package name to its declaration.

    Ignored names map to None. Declarations are applied last, so a name
    that is both ignored and declared keeps its declaration.
    """
    entries: dict[str, DependencyDeclaration | None] = {}
    for name in ignored_imports:
        entries[name] = None
    for declaration in declarations:
        entries[declaration.name] = declaration
    return MappingProxyType(entries)


def is_allowed(own_package_name: str, allow_set: AllowSet, package_name: str) -> bool:
    return package_name == own_package_name or package_name in allow_set


def declared_names(allow_set: AllowSet) -> set[str]:
    return {name for name, declaration in allow_set.items() if declaration is not None}
