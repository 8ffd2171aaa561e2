from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Callable

import pytest

from depchain.adapters.packages.package_json import PackageJsonPackage
from depchain.adapters.parser.tree_sitter_walker import TreeSitterImportWalker
from depchain.adapters.reporter.console import RecordingReporter
from depchain.adapters.sources.glob_finder import GlobSourceFinder

MakePackage = Callable[..., PackageJsonPackage]


def write_package(
    root: Path,
    name: str,
    files: dict[str, str] | None = None,
    dependencies: dict[str, str] | None = None,
    dev_dependencies: dict[str, str] | None = None,
    peer_dependencies: dict[str, str] | None = None,
) -> Path:
    root.mkdir(parents=True, exist_ok=True)
    manifest: dict[str, Any] = {"name": name, "version": "1.0.0"}
    if dependencies:
        manifest["dependencies"] = dependencies
    if dev_dependencies:
        manifest["devDependencies"] = dev_dependencies
    if peer_dependencies:
        manifest["peerDependencies"] = peer_dependencies
    (root / "package.json").write_text(json.dumps(manifest), encoding="utf-8")
    for rel, text in (files or {}).items():
        path = root / rel
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(text, encoding="utf-8")
    return root


@pytest.fixture(scope="session")
def walker() -> TreeSitterImportWalker:
    return TreeSitterImportWalker()


@pytest.fixture
def reporter() -> RecordingReporter:
    return RecordingReporter()


@pytest.fixture
def finder() -> GlobSourceFinder:
    return GlobSourceFinder()


@pytest.fixture
def make_package(tmp_path: Path) -> MakePackage:
    def _make(name: str = "foo", subdir: str | None = None, **kwargs: Any) -> PackageJsonPackage:
        root = tmp_path / (subdir or name.replace("/", "__").lstrip("@"))
        write_package(root, name, **kwargs)
        return PackageJsonPackage.load(root)

    return _make


@pytest.fixture
def write_workspace_package() -> Callable[..., Path]:
    return write_package
