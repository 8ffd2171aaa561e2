from __future__ import annotations

from dataclasses import asdict, is_dataclass
from datetime import datetime, timezone
import os
from typing import TypeVar

from depchain.domain.chain import ChainReport
from depchain.domain.diagnostics import Diagnostic, Location
from depchain.domain.json_types import JsonDict, as_json_dict
from depchain.domain.result import Result

T = TypeVar("T")


def _serialize_location(location: Location | None) -> JsonDict | None:
    if location is None:
        return None
    if is_dataclass(location):
        return as_json_dict(asdict(location))
    return as_json_dict({"kind": str(getattr(location, "kind", "unknown"))})


def serialize_diagnostic(diag: Diagnostic) -> JsonDict:
    return as_json_dict(
        {
            "id": diag.id,
            "code": diag.code,
            "rule": diag.rule,
            "severity": diag.severity.value,
            "message": diag.message,
            "hint": diag.hint,
            "details": diag.details,
            "is_execution": diag.is_execution,
            "location": _serialize_location(diag.location),
        }
    )


def serialize_report(report: ChainReport, package_path: str | None = None) -> JsonDict:
    def _path(path: os.PathLike[str]) -> str:
        if package_path is None:
            return os.fspath(path)
        return os.path.relpath(path, package_path).replace(os.sep, "/")

    return as_json_dict(
        {
            "kind": "dependency_chain",
            "package": report.package_name,
            "area": report.area.value,
            "state": report.state.value,
            "files": len([f for f in report.files if f.is_source]),
            "types_only": report.types_only,
            "invalid_imports": [
                {
                    "path": _path(invalid.source_file.path),
                    "line": invalid.line,
                    "package": invalid.classified_import.package_name,
                    "specifier": invalid.classified_import.full_specifier,
                    "types_only": invalid.is_type_only,
                }
                for invalid in report.invalid_imports
            ],
        }
    )


def serialize_result(
    result: Result[T],
    command: str,
    args: list[str],
) -> JsonDict:
    return as_json_dict(
        {
            "result_schema_version": 1,
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "command": command,
            "args": args,
            "exit_code": result.exit_code,
            "diagnostics": [serialize_diagnostic(d) for d in result.diagnostics],
            "artifacts": result.artifacts,
        }
    )
