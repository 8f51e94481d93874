from __future__ import annotations

import weakref
from collections.abc import Iterable, Iterator
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

INDENT_UNIT = 2


class NodeKind(str, Enum):
    DIRECTORY = "directory"
    FILE = "file"
    FUNCTION = "function"
    COMPONENT = "component"
    REFERENCE = "reference"
    NOTE = "note"


CONTAINER_KINDS = frozenset({NodeKind.DIRECTORY, NodeKind.FILE})

# parent kind -> kinds allowed directly beneath it
LEGAL_CHILDREN: dict[NodeKind, frozenset[NodeKind]] = {
    NodeKind.DIRECTORY: frozenset({NodeKind.DIRECTORY, NodeKind.FILE}),
    NodeKind.FILE: frozenset({NodeKind.FUNCTION, NodeKind.COMPONENT, NodeKind.REFERENCE, NodeKind.NOTE}),
    NodeKind.FUNCTION: frozenset(),
    NodeKind.COMPONENT: frozenset(),
    NodeKind.REFERENCE: frozenset(),
    NodeKind.NOTE: frozenset(),
}


def can_be_child(child: NodeKind, parent: NodeKind) -> bool:
    return child in LEGAL_CHILDREN[parent]


@dataclass(eq=False)
class SchemaNode:
    """One element of a CoDoc outline.

    ``children`` owns the subtree. The parent link is a weak reference so a
    node never keeps its ancestors alive; it exists only to rebuild paths.
    """

    kind: NodeKind
    name: str
    path: str
    line_number: int
    column: int
    content_hash: str
    extension: str | None = None
    content: str | None = None
    dependencies: list[str] = field(default_factory=list)
    dependents: list[str] = field(default_factory=list)
    children: list[SchemaNode] = field(default_factory=list, repr=False)
    is_exported: bool | None = None
    _parent: weakref.ReferenceType[SchemaNode] | None = field(default=None, init=False, repr=False)

    @property
    def parent(self) -> SchemaNode | None:
        return self._parent() if self._parent is not None else None

    @property
    def indent_level(self) -> int:
        return self.column // INDENT_UNIT

    @property
    def owner_file_path(self) -> str:
        """Path of the owning file for ``#`` paths, otherwise the path itself."""
        return self.path.partition("#")[0]

    def add_child(self, child: SchemaNode) -> None:
        child._parent = weakref.ref(self)
        self.children.append(child)

    def detach(self) -> None:
        parent = self.parent
        if parent is not None:
            parent.children.remove(self)
        self._parent = None

    def iter_ancestors(self) -> Iterator[SchemaNode]:
        current = self.parent
        while current is not None:
            yield current
            current = current.parent


def flatten(forest: Iterable[SchemaNode]) -> list[SchemaNode]:
    """Return every node of *forest* in pre-order."""
    result: list[SchemaNode] = []
    stack = list(reversed(list(forest)))
    while stack:
        node = stack.pop()
        result.append(node)
        stack.extend(reversed(node.children))
    return result


Severity = Literal["error", "warning", "info"]


@dataclass(frozen=True)
class Diagnostic:
    line: int
    message: str
    severity: Severity = "warning"

    def __str__(self) -> str:
        return f"Line {self.line}: {self.message}"


@dataclass
class ParseResult:
    nodes: list[SchemaNode]
    diagnostics: list[Diagnostic]
    all_nodes: list[SchemaNode]

    @property
    def messages(self) -> list[str]:
        return [str(d) for d in self.diagnostics]

    @property
    def has_errors(self) -> bool:
        return any(d.severity == "error" for d in self.diagnostics)


@dataclass(frozen=True)
class RenamedNode:
    from_node: SchemaNode
    to_node: SchemaNode
    confidence: float = 1.0


@dataclass
class StructuralDiff:
    added: list[SchemaNode] = field(default_factory=list)
    removed: list[SchemaNode] = field(default_factory=list)
    modified: list[SchemaNode] = field(default_factory=list)
    renamed: list[RenamedNode] = field(default_factory=list)

    def is_empty(self) -> bool:
        return not (self.added or self.removed or self.modified or self.renamed)


RefactorType = Literal["extract", "inline", "split"]


@dataclass(frozen=True)
class RefactorMatch:
    refactor_type: RefactorType
    source: SchemaNode
    targets: tuple[SchemaNode, ...]
    confidence: float


# --- Wire models: records exchanged with external consumers ---


class _WireModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


ChangeType = Literal["add", "remove", "modify", "rename", "move", "refactor"]


class ChangeElement(_WireModel):
    kind: NodeKind
    name: str
    path: str


class AIChange(_WireModel):
    id: str
    type: ChangeType
    element: ChangeElement
    line_number: int
    indent_level: int
    content: str | None = None
    original_content: str | None = None
    from_path: str | None = None
    to_path: str | None = None
    from_name: str | None = None
    to_name: str | None = None
    refactor_type: RefactorType | None = None
    targets: list[str] = Field(default_factory=list)
    confidence: float = 1.0
    timestamp: datetime


ElementType = Literal["function", "component", "class", "interface", "type"]


class CodeElement(_WireModel):
    name: str
    type: ElementType
    line: int = 0
    column: int = 0
    is_exported: bool = False
    content: str = ""
    calls: list[str] = Field(default_factory=list)
    references: list[str] = Field(default_factory=list)


class FileStructure(_WireModel):
    path: str
    elements: list[CodeElement] = Field(default_factory=list)
    content_hash: str = ""
    language: str | None = None


class DependencyNode(_WireModel):
    id: str
    name: str = ""
    upstream: list[str] = Field(default_factory=list)
    downstream: list[str] = Field(default_factory=list)


class DependencyGraph(_WireModel):
    nodes: dict[str, DependencyNode] = Field(default_factory=dict)
    edges: list[dict[str, object]] = Field(default_factory=list)


class CodebaseSnapshot(_WireModel):
    files: list[FileStructure] = Field(default_factory=list)
    directories: list[str] = Field(default_factory=list)
    dependency_graph: DependencyGraph = Field(default_factory=DependencyGraph)
    workspace_root: str | None = None
    timestamp: int | None = None
