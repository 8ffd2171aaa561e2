from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from pathlib import Path

from depchain.domain.errors import AreaSelectorError

TEST_DIRECTORIES = frozenset({"__tests__", "__mocks__"})


class DependencyKind(str, Enum):
    NORMAL = "dependencies"
    DEV = "devDependencies"
    PEER = "peerDependencies"


ALL_DEPENDENCY_KINDS = (DependencyKind.NORMAL, DependencyKind.DEV, DependencyKind.PEER)


@dataclass(frozen=True)
class DependencyDeclaration:
    name: str
    kind: DependencyKind
    version_range: str | None = None


class PackageArea(str, Enum):
    PACKAGE = "package"
    PLUGIN = "plugin"
    CLI = "cli"
    UTILS = "utils"

    @classmethod
    def parse(cls, value: str | PackageArea) -> PackageArea:
        if isinstance(value, PackageArea):
            return value
        try:
            return cls(value)
        except ValueError:
            raise AreaSelectorError(
                f"Unexpected package type received: {value}",
                details={"area": value},
                hint="Use one of: " + ", ".join(a.value for a in cls),
            ) from None

    def root(self, package_path: Path) -> Path:
        if self is PackageArea.PACKAGE:
            return package_path
        return package_path / self.value


class SourceRole(str, Enum):
    SOURCE = "source"
    TEST = "test"


@dataclass(frozen=True)
class SourceFile:
    path: Path
    role: SourceRole

    @classmethod
    def from_path(cls, path: Path, root: Path) -> SourceFile:
        try:
            parts = path.relative_to(root).parts
        except ValueError:
            parts = path.parts
        if TEST_DIRECTORIES.intersection(parts):
            return cls(path=path, role=SourceRole.TEST)
        return cls(path=path, role=SourceRole.SOURCE)

    @property
    def is_source(self) -> bool:
        return self.role is SourceRole.SOURCE
