"""Parse raw XSD text into a navigable, uniquely addressable node tree.

This module converts XML Schema (XSD) text into a tree of
:class:`~xsd_review_api.models.SchemaNode` objects owned by a per-parse
:class:`~xsd_review_api.models.SchemaTree` arena. Every node receives a
deterministic XPath-like ``path`` that downstream consumers (comment anchors,
search) rely on across re-parses of unmodified text.

Path rule:
* ``parent_path + "/" + kind`` when the element has neither ``name`` nor
    ``ref``
* ``parent_path + "/" + kind + "[@name='" + ident + "']"`` otherwise, where
    ``ident`` is ``name`` if present, else ``ref``
* the ``xs:schema`` root itself has the empty path

Typical usage:
        from xsd_review_api.xsd_parser import parse_schema, find_node_by_path

        tree = parse_schema(text)
        if tree is None:
                print("could not parse")
        else:
                foo = tree.find("/complexType[@name='Bar']/sequence/element[@name='Foo']")
                print([n.display_name for n in tree.ancestors(foo)])

Notes:
* The parser is a structural, best-effort reader, not a conformant XSD
    processor. It does not validate instance documents.
* Two anonymous siblings of the same kind (e.g. two ``sequence`` nodes under
    one parent) share a path. The schema itself offers no disambiguator, and
    inventing suffixes would break previously anchored paths.
* Malformed input never raises: :func:`parse_schema` returns ``None``.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import List, Optional, Tuple, Union
from xml.parsers import expat

from .models import SchemaNode, SchemaTree
from .references import resolve_references, unresolved_references
from .tag_reader import SCHEMA_PREFIXES, XmlNode, is_schema_root, read_tag, tokenize

logger = logging.getLogger(__name__)

NODE_KIND_LABELS = {
    "schema": "Schema",
    "element": "Element",
    "complexType": "Complex Type",
    "simpleType": "Simple Type",
    "attribute": "Attribute",
    "attributeGroup": "Attribute Group",
    "group": "Group",
    "sequence": "Sequence",
    "choice": "Choice",
    "all": "All",
    "annotation": "Annotation",
    "documentation": "Documentation",
    "restriction": "Restriction",
    "extension": "Extension",
    "enumeration": "Enumeration",
    "import": "Import",
    "include": "Include",
}


@dataclass
class ParserConfig:
    """Configuration for XSD parsing behavior.

    Args:
        resolve_references: Run the reference resolver on the finished tree
            so ``ref`` nodes carry ``resolved_target_path``.
        schema_prefixes: Namespace prefixes recognised as the XML Schema
            namespace when locating the root and stripping tag names.
        search_limit: Default maximum number of results for
            :func:`search_nodes` callers that do not pass a limit.
    """

    resolve_references: bool = True
    schema_prefixes: Tuple[str, ...] = SCHEMA_PREFIXES
    search_limit: int = 50


class XSDParser:
    """Build a :class:`SchemaTree` from XSD text.

    Each call to :meth:`parse` allocates a fresh arena, so node identifiers
    start at zero for every parse and independent parses can run in parallel.

    Example:
        from xsd_review_api.xsd_parser import XSDParser, ParserConfig

        parser = XSDParser(ParserConfig(resolve_references=False))
        tree = parser.parse(text)
        if tree is not None:
            print(len(tree), "nodes")
    """

    def __init__(self, config: Optional[ParserConfig] = None) -> None:
        self.config = config or ParserConfig()

    def parse(self, text: Union[str, bytes]) -> Optional[SchemaTree]:
        """Parse schema text.

        Returns:
            The populated :class:`SchemaTree`, or ``None`` when the text is
            not well-formed XML or has no ``xs:schema``/``xsd:schema`` root.
        """
        try:
            top_level = tokenize(text)
        except expat.ExpatError as exc:
            logger.warning(f"Could not parse schema text: {exc}")
            return None

        schema_node = next(
            (
                node
                for node in top_level
                if is_schema_root(node, self.config.schema_prefixes)
            ),
            None,
        )
        if schema_node is None:
            logger.warning("No schema root element found in document")
            return None

        tree = SchemaTree()
        root = self.build_node(schema_node, "", tree)
        if root is None:
            return None

        if self.config.resolve_references:
            resolve_references(root)
            dangling = unresolved_references(root)
            if dangling:
                logger.debug(
                    f"{len(dangling)} reference(s) left unresolved: "
                    f"{', '.join(n.reference_name or '' for n in dangling[:10])}"
                )
        return tree

    def build_node(
        self,
        xml_node: XmlNode,
        parent_path: str,
        tree: SchemaTree,
        parent: Optional[SchemaNode] = None,
    ) -> Optional[SchemaNode]:
        """Convert one tokenizer node (and its subtree) into a :class:`SchemaNode`.

        Returns ``None`` for text and comment nodes so the caller skips them.
        A node built without ``parent`` is the tree root and uses
        ``parent_path`` unchanged as its own path. The node's documentation
        is read from its own children before the children themselves are
        converted (they remain in ``children``).
        """
        info = read_tag(xml_node, self.config.schema_prefixes)
        if info is None:
            return None

        attributes = info.attributes
        ident = attributes.get("name") or attributes.get("ref") or ""
        if parent is None:
            # The schema root keeps the path it is given (the empty path)
            path = parent_path
        else:
            path = build_path(parent_path, info.kind, ident)

        node = tree.allocate(
            name=ident,
            kind=info.kind,
            path=path,
            attributes=attributes,
            documentation=info.documentation,
            parent=parent,
        )
        if "ref" in attributes:
            node.is_reference = True
            node.reference_name = attributes["ref"]

        for child in xml_node.children:
            child_node = self.build_node(child, path, tree, node)
            if child_node is not None:
                node.children.append(child_node)
        return node


def build_path(parent_path: str, kind: str, ident: str = "") -> str:
    """Apply the path rule for one step below ``parent_path``."""
    if ident:
        return f"{parent_path}/{kind}[@name='{ident}']"
    return f"{parent_path}/{kind}"


def parse_schema(
    text: Union[str, bytes], config: Optional[ParserConfig] = None
) -> Optional[SchemaTree]:
    """Parse XSD text into a :class:`SchemaTree` (``None`` on malformed input)."""
    return XSDParser(config).parse(text)


def parse_xsd(
    text: Union[str, bytes], config: Optional[ParserConfig] = None
) -> Optional[SchemaNode]:
    """Parse XSD text and return the root node.

    This is a convenience wrapper around :class:`XSDParser` for callers that
    only need the node tree.

    Args:
        text: Raw schema text.
        config: Optional :class:`ParserConfig`.

    Returns:
        Root :class:`SchemaNode` (kind ``schema``, empty path), or ``None``
        when the text could not be parsed.

    Example:
        root = parse_xsd(open("order.xsd").read())
        print([child.display_name for child in root.children])
    """
    tree = parse_schema(text, config)
    return tree.root if tree is not None else None


def flatten_nodes(root: SchemaNode) -> List[SchemaNode]:
    """Return ``root`` and all descendants in document (pre-)order."""
    return root.iter_nodes()


def find_node_by_path(root: SchemaNode, path: str) -> Optional[SchemaNode]:
    """Return the first node whose ``path`` equals ``path``.

    Linear scan of the flattened traversal; no index is kept between calls.
    """
    for node in flatten_nodes(root):
        if node.path == path:
            return node
    return None


def search_nodes(
    root: SchemaNode,
    query: str,
    kind: Optional[str] = None,
    limit: int = 50,
) -> List[SchemaNode]:
    """Case-insensitive search over node names, kinds and documentation.

    Args:
        root: Tree to search.
        query: Substring to look for. Blank queries match nothing.
        kind: Optional exact kind filter (e.g. ``element``).
        limit: Maximum number of results, in document order. A limit below
            one matches nothing.
    """
    needle = query.strip().lower()
    if not needle or limit < 1:
        return []
    matches: List[SchemaNode] = []
    for node in flatten_nodes(root):
        if kind and node.kind != kind:
            continue
        if (
            needle in node.name.lower()
            or needle in node.kind.lower()
            or needle in (node.documentation or "").lower()
        ):
            matches.append(node)
            if len(matches) >= limit:
                break
    return matches


def node_kind_label(kind: str) -> str:
    """Human readable label for a node kind; unknown kinds pass through."""
    return NODE_KIND_LABELS.get(kind, kind)
