from pathlib import Path
from typing import Protocol

from depchain.domain.imports import ImportReference


class ImportWalkerPort(Protocol):
    def extract(self, text: str, path: Path) -> list[ImportReference]: ...
