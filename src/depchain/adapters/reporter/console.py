from __future__ import annotations

import typer


class ConsoleReporter:
    def __init__(self, verbose: bool = False, err: bool = True) -> None:
        self.verbose_enabled = verbose
        self.err = err

    def warn(self, message: str) -> None:
        typer.secho(message, fg=typer.colors.YELLOW, err=self.err)

    def verbose(self, message: str) -> None:
        if self.verbose_enabled:
            typer.secho(message, dim=True, err=self.err)


class RecordingReporter:
    def __init__(self) -> None:
        self.warnings: list[str] = []
        self.verbose_lines: list[str] = []

    def warn(self, message: str) -> None:
        self.warnings.append(message)

    def verbose(self, message: str) -> None:
        self.verbose_lines.append(message)
