from __future__ import annotations

from pathlib import Path

SOURCE_EXTENSIONS = frozenset({".ts", ".tsx", ".js", ".jsx"})
SKIPPED_DIRECTORIES = frozenset({"node_modules"})


class GlobSourceFinder:
    def __init__(
        self,
        source_dir: str = "src",
        extensions: frozenset[str] = SOURCE_EXTENSIONS,
    ) -> None:
        self.source_dir = source_dir
        self.extensions = extensions

    def _is_candidate(self, path: Path, root: Path) -> bool:
        if path.suffix not in self.extensions or not path.is_file():
            return False
        parts = path.relative_to(root).parts
        return not any(
            part.startswith(".") or part in SKIPPED_DIRECTORIES for part in parts
        )

    def find_sources(self, root: Path) -> list[Path]:
        base = root / self.source_dir
        if not base.is_dir():
            return []
        return sorted(
            path.resolve() for path in base.rglob("*") if self._is_candidate(path, root)
        )
