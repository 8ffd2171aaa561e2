from __future__ import annotations

from dataclasses import dataclass
from typing import TypeAlias

NODE_BUILTIN_MODULES = frozenset(
    {
        "_http_agent",
        "_http_client",
        "_http_common",
        "_http_incoming",
        "_http_outgoing",
        "_http_server",
        "_stream_duplex",
        "_stream_passthrough",
        "_stream_readable",
        "_stream_transform",
        "_stream_wrap",
        "_stream_writable",
        "_tls_common",
        "_tls_wrap",
        "assert",
        "assert/strict",
        "async_hooks",
        "buffer",
        "child_process",
        "cluster",
        "console",
        "constants",
        "crypto",
        "dgram",
        "diagnostics_channel",
        "dns",
        "dns/promises",
        "domain",
        "events",
        "fs",
        "fs/promises",
        "http",
        "http2",
        "https",
        "inspector",
        "inspector/promises",
        "module",
        "net",
        "os",
        "path",
        "path/posix",
        "path/win32",
        "perf_hooks",
        "process",
        "punycode",
        "querystring",
        "readline",
        "readline/promises",
        "repl",
        "stream",
        "stream/consumers",
        "stream/promises",
        "stream/web",
        "string_decoder",
        "sys",
        "timers",
        "timers/promises",
        "tls",
        "trace_events",
        "tty",
        "url",
        "util",
        "util/types",
        "v8",
        "vm",
        "wasi",
        "worker_threads",
        "zlib",
    }
)

# Only resolvable with the `node:` scheme.
NODE_SCHEME_ONLY_MODULES = frozenset({"sea", "sqlite", "test", "test/reporters"})

NODE_SCHEME = "node:"
QUOTE_CHARS = "'\""


@dataclass(frozen=True)
class ImportReference:
    raw_specifier: str
    is_type_only: bool = False
    line: int | None = None


@dataclass(frozen=True)
class BuiltInImport:
    name: str


@dataclass(frozen=True)
class InternalImport:
    relative_path: str


@dataclass(frozen=True)
class ExternalImport:
    package_name: str
    sub_path: str = ""
    is_type_only: bool = False

    @property
    def full_specifier(self) -> str:
        if self.sub_path:
            return f"{self.package_name}/{self.sub_path}"
        return self.package_name


ClassifiedImport: TypeAlias = BuiltInImport | InternalImport | ExternalImport


def is_builtin(specifier: str) -> bool:
    if specifier.startswith(NODE_SCHEME):
        name = specifier[len(NODE_SCHEME) :]
        return name in NODE_BUILTIN_MODULES or name in NODE_SCHEME_ONLY_MODULES
    return specifier in NODE_BUILTIN_MODULES


def strip_quotes(specifier: str) -> str:
    return specifier.strip().strip(QUOTE_CHARS)


def classify(raw_specifier: str, is_type_only: bool = False) -> ClassifiedImport:
    """Classify a module specifier as written in source.

    Built-ins are checked before relative paths, and relative paths before
    scoped packages, so `node:fs` or `fs` never reach the package split.
    """
    specifier = strip_quotes(raw_specifier)
    if is_builtin(specifier):
        return BuiltInImport(name=specifier)
    if specifier.startswith("."):
        return InternalImport(relative_path=specifier)
    segments = specifier.split("/")
    if specifier.startswith("@"):
        package_name = "/".join(segments[:2])
        sub_path = "/".join(segments[2:])
    else:
        package_name = segments[0]
        sub_path = "/".join(segments[1:])
    return ExternalImport(
        package_name=package_name, sub_path=sub_path, is_type_only=is_type_only
    )


def classify_reference(ref: ImportReference) -> ClassifiedImport:
    return classify(ref.raw_specifier, ref.is_type_only)
