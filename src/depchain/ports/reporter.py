from typing import Protocol


class ReporterPort(Protocol):
    def warn(self, message: str) -> None: ...

    def verbose(self, message: str) -> None: ...
