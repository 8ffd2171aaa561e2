from collections.abc import Iterable
from pathlib import Path
from typing import Protocol

from depchain.domain.package import DependencyDeclaration, DependencyKind


class PackagePort(Protocol):
    @property
    def package_name(self) -> str: ...

    @property
    def path(self) -> Path: ...

    def get_dependencies(
        self, kinds: Iterable[DependencyKind]
    ) -> list[DependencyDeclaration]: ...
