"""
Tree-sitter based extraction of module references from JS/TS sources.
"""

from __future__ import annotations

from collections.abc import Iterator
import logging
from pathlib import Path

from tree_sitter import Language, Node, Parser

from depchain.adapters.errors import SourceParseError
from depchain.domain.imports import ImportReference

_LOG = logging.getLogger("depchain.adapters.parser")

GRAMMAR_BY_SUFFIX = {
    ".ts": "typescript",
    ".mts": "typescript",
    ".cts": "typescript",
    ".tsx": "tsx",
    ".js": "javascript",
    ".jsx": "javascript",
    ".mjs": "javascript",
    ".cjs": "javascript",
}


def _load_language(grammar: str) -> Language:
    if grammar == "javascript":
        import tree_sitter_javascript as tsjs

        return Language(tsjs.language())

    import tree_sitter_typescript as tsts

    # TS and TSX are two grammars shipped in the same package.
    if grammar == "tsx":
        return Language(tsts.language_tsx())
    return Language(tsts.language_typescript())


def _text(node: Node) -> str:
    raw = node.text
    return raw.decode("utf-8") if raw is not None else ""


def _line(node: Node) -> int:
    return node.start_point[0] + 1


def _static_import(node: Node) -> ImportReference | None:
    source = node.child_by_field_name("source")
    if source is None:
        # `import x = require("y")` is a runtime require, even as `import type`
        for child in node.named_children:
            if child.type == "import_require_clause":
                source = child.child_by_field_name("source")
        if source is None:
            return None
        return ImportReference(_text(source), is_type_only=False, line=_line(node))
    type_only = any(
        child.type == "type" and not child.is_named for child in node.children
    )
    return ImportReference(_text(source), is_type_only=type_only, line=_line(node))


def _is_require(node: Node) -> bool:
    function = node.child_by_field_name("function")
    return (
        function is not None
        and function.type == "identifier"
        and _text(function) == "require"
    )


def _require_call(node: Node) -> ImportReference | None:
    if not _is_require(node):
        return None
    arguments = node.child_by_field_name("arguments")
    if arguments is None or arguments.type != "arguments":
        return None
    values = [arg for arg in arguments.named_children if arg.type != "comment"]
    # require(resolveFrom(...)) and friends cannot be resolved statically
    if len(values) != 1 or values[0].type != "string":
        return None
    return ImportReference(_text(values[0]), is_type_only=False, line=_line(node))


def _exported_require(node: Node) -> ImportReference | None:
    # The grammar has no rule for `export import x = require("y")`: the alias
    # stops at `require` and `("y");` is left as the next statement.
    values = node.named_children
    if not values or values[-1].type != "identifier" or _text(values[-1]) != "require":
        return None
    parent = node.parent
    if parent is None or parent.type != "export_statement":
        return None
    following = parent.next_named_sibling
    if following is None or following.type != "expression_statement":
        return None
    expression = following.named_children[0] if following.named_children else None
    if expression is None or expression.type != "parenthesized_expression":
        return None
    specifiers = [c for c in expression.named_children if c.type != "comment"]
    if len(specifiers) != 1 or specifiers[0].type != "string":
        return None
    return ImportReference(_text(specifiers[0]), is_type_only=False, line=_line(node))


def _import_reference(node: Node) -> ImportReference | None:
    if node.type == "import_statement":
        return _static_import(node)
    if node.type == "call_expression":
        return _require_call(node)
    if node.type == "import_alias":
        return _exported_require(node)
    return None


def iter_import_references(root: Node) -> Iterator[ImportReference]:
    stack = [root]
    while stack:
        node = stack.pop()
        ref = _import_reference(node)
        if ref is not None:
            yield ref
            continue
        # ERROR nodes are walked too; recovered statements still count.
        stack.extend(reversed(node.children))


def iter_errors(root: Node) -> Iterator[Node]:
    stack = [root]
    while stack:
        node = stack.pop()
        if node.is_error or node.is_missing:
            yield node
        if node.has_error:
            stack.extend(reversed(node.children))


def _mentions_import(node: Node) -> bool:
    stack = [node]
    while stack:
        current = stack.pop()
        if current.type == "import" and not current.is_named:
            return True
        if current.type == "identifier" and _text(current) == "require":
            return True
        stack.extend(current.children)
    return False


def breaks_import(error: Node) -> bool:
    """Whether a syntax error makes the extracted imports untrustworthy.

    True when the error sits inside an import declaration or a `require`
    call, or when an ERROR node swallowed an `import` keyword or a
    `require` identifier. Errors elsewhere come from syntax the grammar
    does not know yet and leave every import intact.
    """
    ancestor = error.parent
    while ancestor is not None:
        if ancestor.type in ("import_statement", "import_require_clause"):
            return True
        if ancestor.type == "call_expression" and _is_require(ancestor):
            return True
        ancestor = ancestor.parent
    return error.is_error and _mentions_import(error)


class TreeSitterImportWalker:
    """Parses sources and yields their import references in document order.

    One instance is meant to be shared by every validation of a run.
    Parsers are created per grammar on first use and reused afterwards;
    `extract` is synchronous, so callers on one event loop never parse
    concurrently with the same parser.
    """

    def __init__(self) -> None:
        self._parsers: dict[str, Parser] = {}

    def supports(self, path: Path) -> bool:
        return path.suffix.lower() in GRAMMAR_BY_SUFFIX

    def _parser_for(self, path: Path) -> Parser:
        grammar = GRAMMAR_BY_SUFFIX.get(path.suffix.lower())
        if grammar is None:
            raise SourceParseError(
                f"Failed to parse {path}: unsupported file extension",
                details={"path": str(path)},
            )
        parser = self._parsers.get(grammar)
        if parser is None:
            _LOG.debug("Loading %s grammar", grammar)
            parser = Parser(_load_language(grammar))
            self._parsers[grammar] = parser
        return parser

    def extract(self, text: str, path: Path) -> list[ImportReference]:
        root = self._parser_for(path).parse(text.encode("utf-8")).root_node
        if root.has_error:
            for error in iter_errors(root):
                row, column = error.start_point[0] + 1, error.start_point[1] + 1
                kind = "missing token" if error.is_missing else "syntax error"
                if not breaks_import(error):
                    _LOG.debug("%s: %s at line %d, column %d", path, kind, row, column)
                    continue
                raise SourceParseError(
                    f"Failed to parse {path}: {kind} at line {row}, column {column}",
                    details={"path": str(path), "line": row, "column": column},
                )
        return list(iter_import_references(root))
