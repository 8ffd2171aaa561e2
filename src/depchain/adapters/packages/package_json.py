from __future__ import annotations

from collections.abc import Iterable
import json
from pathlib import Path

from depchain.adapters.errors import ManifestParseError, ManifestReadError
from depchain.domain.config import DEFAULT_PACKAGE_GLOBS
from depchain.domain.json_types import JsonDict, as_json_dict, as_string_list, as_string_map
from depchain.domain.package import DependencyDeclaration, DependencyKind

MANIFEST_NAME = "package.json"


def load_manifest(manifest_path: Path) -> JsonDict:
    try:
        text = manifest_path.read_text(encoding="utf-8")
    except OSError as e:
        raise ManifestReadError(
            f"Could not read {manifest_path}",
            details={"path": str(manifest_path)},
            cause=e,
        ) from e
    try:
        raw: object = json.loads(text)
    except json.JSONDecodeError as e:
        raise ManifestParseError(
            f"Invalid JSON in {manifest_path}: {e.msg}",
            details={"path": str(manifest_path), "line": e.lineno},
            cause=e,
        ) from e
    if not isinstance(raw, dict):
        raise ManifestParseError(
            f"{manifest_path} must contain a JSON object",
            details={"path": str(manifest_path)},
        )
    return as_json_dict(raw)


class PackageJsonPackage:
    def __init__(self, path: Path, manifest: JsonDict) -> None:
        name = manifest.get("name")
        if not isinstance(name, str) or not name:
            raise ManifestParseError(
                f"{path / MANIFEST_NAME} has no package name",
                details={"path": str(path / MANIFEST_NAME)},
            )
        self._name = name
        self._path = path
        self._manifest = manifest

    @classmethod
    def load(cls, package_dir: Path) -> PackageJsonPackage:
        package_dir = package_dir.resolve()
        return cls(package_dir, load_manifest(package_dir / MANIFEST_NAME))

    @property
    def package_name(self) -> str:
        return self._name

    @property
    def path(self) -> Path:
        return self._path

    def get_dependencies(
        self, kinds: Iterable[DependencyKind]
    ) -> list[DependencyDeclaration]:
        declarations: list[DependencyDeclaration] = []
        for kind in kinds:
            for name, version in as_string_map(self._manifest.get(kind.value)).items():
                declarations.append(
                    DependencyDeclaration(name=name, kind=kind, version_range=version)
                )
        return declarations

    def __repr__(self) -> str:
        return f"PackageJsonPackage({self._name!r}, {str(self._path)!r})"


def workspace_globs(root: Path) -> list[str]:
    manifest_path = root / MANIFEST_NAME
    if not manifest_path.is_file():
        return list(DEFAULT_PACKAGE_GLOBS)
    workspaces = load_manifest(manifest_path).get("workspaces")
    if isinstance(workspaces, dict):
        workspaces = workspaces.get("packages")
    globs = as_string_list(workspaces)
    return globs or list(DEFAULT_PACKAGE_GLOBS)


def discover_packages(root: Path, patterns: Iterable[str]) -> list[PackageJsonPackage]:
    root = root.resolve()
    patterns = list(patterns)
    includes = [p for p in patterns if not p.startswith("!")]
    excludes = [p[1:] for p in patterns if p.startswith("!")]
    excluded: set[Path] = set()
    for pattern in excludes:
        excluded.update(path.resolve() for path in root.glob(pattern))

    found: dict[Path, PackageJsonPackage] = {}
    for pattern in includes:
        for match in root.glob(pattern):
            if "node_modules" in match.relative_to(root).parts:
                continue
            candidate = match.resolve()
            if candidate in found or candidate in excluded:
                continue
            if candidate.is_dir() and (candidate / MANIFEST_NAME).is_file():
                found[candidate] = PackageJsonPackage.load(candidate)
    return [found[path] for path in sorted(found)]
