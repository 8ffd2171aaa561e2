from dataclasses import dataclass

from depchain.domain.json_types import JsonDict


@dataclass
class AdapterError(Exception):
    message: str
    details: JsonDict | None = None
    hint: str | None = None
    cause: Exception | None = None

    def __str__(self) -> str:
        return self.message


class SourceReadError(AdapterError):
    pass


class SourceParseError(AdapterError):
    pass


class ManifestReadError(AdapterError):
    pass


class ManifestParseError(AdapterError):
    pass


class ConfigReadError(AdapterError):
    pass


class ConfigParseError(AdapterError):
    pass
