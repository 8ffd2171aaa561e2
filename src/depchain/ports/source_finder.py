from pathlib import Path
from typing import Protocol


class SourceFinderPort(Protocol):
    def find_sources(self, root: Path) -> list[Path]: ...
