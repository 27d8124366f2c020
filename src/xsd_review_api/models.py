"""Core data structures for the structural model of XSD documents.

These lightweight dataclasses are produced by the tree builder, the reference
resolver, the dependency extractor and the role classifier, and consumed by
higher level layers (REST endpoints, CLI output, comment anchoring). They
avoid framework dependencies so they can be serialized or transported easily.

Overview:
        * ``SchemaNode`` is one element of a parsed schema. Its ``path`` is
            the stable key used to anchor comments and search results.
        * ``SchemaTree`` is the arena owning every node of one parse. Parents
            are stored as arena indices, never as object references, so the
            tree has a single owner and no reference cycles.
        * ``Dependency`` / ``FileRole`` / ``DependencyLink`` describe how a
            file relates to the other files of a schema group.

Typical construction (simplified)::

        from xsd_review_api.models import SchemaTree

        tree = SchemaTree()
        root = tree.allocate(name="", kind="schema", path="")
        bar = tree.allocate(
                name="Bar",
                kind="complexType",
                path="/complexType[@name='Bar']",
                attributes={"name": "Bar"},
                parent=root,
        )
        root.children.append(bar)

        tree.parent_of(bar) is root      # True
        [n.path for n in tree.ancestors(bar)]  # ['', "/complexType[@name='Bar']"]

Design notes:
        * Identifiers are handed out by the arena of a single parse, starting at
            zero, so repeated or concurrent parses never interfere.
        * ``to_dict`` produces stable keys to simplify client-side caching / hashing.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, Iterator, List, Optional


@dataclass
class SchemaNode:
    """One element of a parsed XSD document.

    Attributes:
        id: Arena index, unique within one parse, assigned in document order.
        name: ``name`` attribute, else ``ref`` attribute, else empty.
        kind: Tag name with the ``xs:``/``xsd:`` prefix removed.
        path: Parent path plus ``/kind`` or ``/kind[@name='value']``. The
            schema root has the empty path.
        attributes: Attribute map in document order. Keys are kept verbatim.
        documentation: Trimmed text of the first ``annotation/documentation``.
        children: Element children in document order.
        parent_id: Arena index of the parent (``None`` for the root).
        is_reference: True when the element carries a ``ref`` attribute.
        reference_name: Raw ``ref`` value (reference nodes only).
        resolved_target_path: Path of the referenced definition once resolved.

    Example:
        >>> node = SchemaNode(id=0, name="Foo", kind="element", path="/element[@name='Foo']")
        >>> node.display_name
        'Foo'
    """

    id: int
    name: str
    kind: str
    path: str
    attributes: Dict[str, str] = field(default_factory=dict)
    documentation: Optional[str] = None
    children: List["SchemaNode"] = field(default_factory=list)
    parent_id: Optional[int] = None
    is_reference: bool = False
    reference_name: Optional[str] = None
    resolved_target_path: Optional[str] = None

    @property
    def display_name(self) -> str:
        """Label shown in tree views; unnamed nodes fall back to their kind."""
        return self.name or self.kind

    def iter_nodes(self) -> "List[SchemaNode]":
        """Return a depth-first (pre-order) list of this node and all descendants.

        Example:
            >>> parent = SchemaNode(id=0, name="", kind="schema", path="")
            >>> child = SchemaNode(id=1, name="", kind="sequence", path="/sequence", parent_id=0)
            >>> parent.children.append(child)
            >>> [n.path for n in parent.iter_nodes()]
            ['', '/sequence']
        """
        nodes: List[SchemaNode] = [self]
        for child in self.children:
            nodes.extend(child.iter_nodes())
        return nodes

    def to_dict(self) -> dict:
        """Convert the node (recursively) into a JSON-serializable dictionary."""
        return {
            "id": self.id,
            "name": self.name,
            "kind": self.kind,
            "path": self.path,
            "attributes": dict(self.attributes),
            "documentation": self.documentation,
            "parent_id": self.parent_id,
            "is_reference": self.is_reference,
            "reference_name": self.reference_name,
            "resolved_target_path": self.resolved_target_path,
            "children": [child.to_dict() for child in self.children],
        }


class SchemaTree:
    """Arena owning every :class:`SchemaNode` of one parse.

    Nodes are stored in allocation order, so ``tree.get(i).id == i``. The
    arena is the only owner of the nodes; a node's parent is recovered via
    its ``parent_id``.
    """

    def __init__(self) -> None:
        self.nodes: List[SchemaNode] = []

    def allocate(
        self,
        name: str,
        kind: str,
        path: str,
        attributes: Optional[Dict[str, str]] = None,
        documentation: Optional[str] = None,
        parent: Optional[SchemaNode] = None,
    ) -> SchemaNode:
        """Create a node with the next local identifier and register it."""
        node = SchemaNode(
            id=len(self.nodes),
            name=name,
            kind=kind,
            path=path,
            attributes=dict(attributes or {}),
            documentation=documentation,
            parent_id=parent.id if parent is not None else None,
        )
        self.nodes.append(node)
        return node

    @property
    def root(self) -> Optional[SchemaNode]:
        return self.nodes[0] if self.nodes else None

    def get(self, node_id: int) -> Optional[SchemaNode]:
        if 0 <= node_id < len(self.nodes):
            return self.nodes[node_id]
        return None

    def parent_of(self, node: SchemaNode) -> Optional[SchemaNode]:
        if node.parent_id is None:
            return None
        return self.get(node.parent_id)

    def ancestors(self, node: SchemaNode) -> List[SchemaNode]:
        """Return the chain from the root down to ``node`` (inclusive)."""
        chain: List[SchemaNode] = []
        current: Optional[SchemaNode] = node
        while current is not None:
            chain.append(current)
            current = self.parent_of(current)
        chain.reverse()
        return chain

    def find(self, path: str) -> Optional[SchemaNode]:
        """Return the first node (in document order) whose path equals ``path``."""
        for node in self.nodes:
            if node.path == path:
                return node
        return None

    def iter_nodes(self) -> Iterator[SchemaNode]:
        return iter(self.nodes)

    def __len__(self) -> int:
        return len(self.nodes)


class DependencyKind(str, Enum):
    IMPORT = "import"
    INCLUDE = "include"


class FileRole(str, Enum):
    """Role of a file inside a schema group."""

    MASTER = "master"
    IMPORTED = "imported"
    INCLUDED = "included"
    STANDALONE = "standalone"


@dataclass
class Dependency:
    """A declared ``xs:import`` or ``xs:include`` of one schema file.

    Attributes:
        kind: ``import`` or ``include``.
        schema_location: Raw ``schemaLocation`` value.
        namespace: ``namespace`` attribute (imports only, optional).
    """

    kind: DependencyKind
    schema_location: str
    namespace: Optional[str] = None

    @property
    def filename(self) -> str:
        """Final ``/``-delimited segment of ``schema_location``, verbatim."""
        return self.schema_location.split("/")[-1]

    def to_dict(self) -> dict:
        return {
            "kind": self.kind.value,
            "schema_location": self.schema_location,
            "namespace": self.namespace,
        }


@dataclass
class SchemaFile:
    """One uploaded file of a group; ``is_master`` is the uploader's override."""

    filename: str
    content: str
    is_master: bool = False


@dataclass
class DependencyLink:
    """A dependency whose target file is part of the same group."""

    source: str
    target: str
    kind: DependencyKind
    schema_location: str
    namespace: Optional[str] = None

    def to_dict(self) -> dict:
        return {
            "source": self.source,
            "target": self.target,
            "kind": self.kind.value,
            "schema_location": self.schema_location,
            "namespace": self.namespace,
        }


@dataclass
class SchemaGroupMember:
    filename: str
    name: str
    role: FileRole
    dependencies: List[Dependency] = field(default_factory=list)

    def to_dict(self) -> dict:
        return {
            "filename": self.filename,
            "name": self.name,
            "role": self.role.value,
            "dependencies": [dep.to_dict() for dep in self.dependencies],
        }


@dataclass
class SchemaGroup:
    """Classification of a whole file set: members in input order plus links."""

    members: List[SchemaGroupMember] = field(default_factory=list)
    links: List[DependencyLink] = field(default_factory=list)

    @property
    def roles(self) -> Dict[str, FileRole]:
        return {member.filename: member.role for member in self.members}

    def to_dict(self) -> dict:
        return {
            "schemas": [member.to_dict() for member in self.members],
            "links": [link.to_dict() for link in self.links],
        }
