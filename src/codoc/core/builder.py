"""Build a SchemaNode forest from CoDoc outline text.

The builder walks the document once, keeping a stack of ``(node, indent)``
pairs. Every structural problem is auto-corrected and reported as a
diagnostic; only lines that fail to lex or parse are dropped.
"""

import hashlib
import logging
from dataclasses import dataclass, field

from codoc.core.errors import CodocSyntaxError, IncompleteInputError
from codoc.core.grammar import (
    CodocLineParser,
    ComponentDecl,
    DirectoryDecl,
    FileDecl,
    FunctionDecl,
    NoteDecl,
    ReferenceDecl,
    Statement,
    VariableDecl,
)
from codoc.models import (
    CONTAINER_KINDS,
    INDENT_UNIT,
    Diagnostic,
    NodeKind,
    ParseResult,
    SchemaNode,
    Severity,
    can_be_child,
)

logger = logging.getLogger(__name__)


def compute_content_hash(line: str) -> str:
    normalized = line.strip().lower()
    return hashlib.sha256(normalized.encode("utf-8")).hexdigest()[:16]


def leading_whitespace(line: str) -> int:
    return len(line) - len(line.lstrip())


@dataclass
class _ParseContext:
    stack: list[tuple[SchemaNode, int]] = field(default_factory=list)
    all_nodes: list[SchemaNode] = field(default_factory=list)
    diagnostics: list[Diagnostic] = field(default_factory=list)
    container_paths: dict[str, int] = field(default_factory=dict)

    def report(self, line: int, message: str, severity: Severity = "warning") -> None:
        self.diagnostics.append(Diagnostic(line=line, message=message, severity=severity))


class CodocParser:
    """Parses whole documents. Instances carry only read-only configuration."""

    indent_unit = INDENT_UNIT

    def __init__(self, line_parser: CodocLineParser | None = None) -> None:
        self._line_parser = line_parser or CodocLineParser()

    def parse(self, content: str) -> ParseResult:
        context = _ParseContext()

        for index, line in enumerate(content.split("\n")):
            line_number = index + 1
            trimmed = line.strip()
            if not trimmed:
                continue

            spaces = leading_whitespace(line)
            if spaces % self.indent_unit != 0:
                context.report(
                    line_number,
                    f"Inconsistent indentation ({spaces} spaces). Should be multiple of {self.indent_unit}.",
                )
            indent_level = spaces // self.indent_unit

            try:
                statement = self._line_parser.parse_line(trimmed)
            except IncompleteInputError:
                continue
            except CodocSyntaxError as exc:
                context.report(line_number, f"Syntax error: {exc}", severity="error")
                continue

            node = self._build_node(statement, trimmed, line_number, indent_level)
            if node is None:
                continue
            self._attach(node, indent_level, context)

        roots = [n for n in context.all_nodes if n.parent is None]
        logger.debug(
            "Parsed %d node(s), %d root(s), %d diagnostic(s)",
            len(context.all_nodes),
            len(roots),
            len(context.diagnostics),
        )
        return ParseResult(nodes=roots, diagnostics=context.diagnostics, all_nodes=context.all_nodes)

    def _build_node(self, statement: Statement, text: str, line_number: int, indent_level: int) -> SchemaNode | None:
        kind: NodeKind
        extension: str | None = None
        content: str | None = None
        dependencies: list[str] = []

        match statement:
            case DirectoryDecl(name=name):
                kind = NodeKind.DIRECTORY
            case FileDecl(extension=extension):
                kind, name = NodeKind.FILE, statement.name
            case ComponentDecl(name=name):
                kind = NodeKind.COMPONENT
            case FunctionDecl(name=name):
                kind = NodeKind.FUNCTION
            case ReferenceDecl(name=name):
                kind, dependencies = NodeKind.REFERENCE, [name]
            case NoteDecl(text=name):
                kind, content = NodeKind.NOTE, name
            case VariableDecl():
                # variables are recognized but not tracked in the outline
                return None
            case _:
                return None

        return SchemaNode(
            kind=kind,
            name=name,
            path=name if kind in CONTAINER_KINDS else _leaf_path(kind, name),
            line_number=line_number,
            column=indent_level * self.indent_unit,
            content_hash=compute_content_hash(text),
            extension=extension,
            content=content,
            dependencies=dependencies,
        )

    def _attach(self, node: SchemaNode, indent_level: int, context: _ParseContext) -> None:
        stack = context.stack
        while stack and stack[-1][1] >= indent_level:
            stack.pop()

        if not stack:
            if indent_level > 0:
                context.report(
                    node.line_number,
                    f"Made top-level ({node.kind.value} is indented {indent_level} level(s) with no enclosing parent)",
                )
        else:
            nearest = stack[-1][0]
            if can_be_child(node.kind, nearest.kind):
                self._adopt(nearest, node)
            else:
                parent = next((n for n, _ in reversed(stack) if can_be_child(node.kind, n.kind)), None)
                if parent is not None:
                    self._adopt(parent, node)
                    context.report(
                        node.line_number,
                        f"Auto-corrected parent ({node.kind.value} cannot be child of {nearest.kind.value})",
                    )
                else:
                    context.report(node.line_number, "Made top-level (no valid parent found)")

        if node.kind in CONTAINER_KINDS:
            self._ensure_unique_path(node, context)

        stack.append((node, indent_level))
        context.all_nodes.append(node)

    @staticmethod
    def _adopt(parent: SchemaNode, node: SchemaNode) -> None:
        parent.add_child(node)
        owner = parent.path
        if node.kind in CONTAINER_KINDS:
            node.path = f"{owner}/{node.name}" if owner else node.name
        else:
            node.path = _leaf_path(node.kind, node.name, owner)

    @staticmethod
    def _ensure_unique_path(node: SchemaNode, context: _ParseContext) -> None:
        seen = context.container_paths.get(node.path, 0)
        context.container_paths[node.path] = seen + 1
        if seen:
            original = node.path
            node.path = f"{original}~{seen + 1}"
            context.container_paths[node.path] = 1
            context.report(
                node.line_number,
                f"Duplicate {node.kind.value} path '{original}' (tracked as '{node.path}')",
            )


_LEAF_MARKERS = {
    NodeKind.FUNCTION: "",
    NodeKind.COMPONENT: "",
    NodeKind.REFERENCE: "@",
    NodeKind.NOTE: "#",
}


def _leaf_path(kind: NodeKind, name: str, owner: str = "") -> str:
    return f"{owner}#{_LEAF_MARKERS[kind]}{name}"


def parse_codoc(content: str) -> ParseResult:
    return CodocParser().parse(content)
