"""Link ``ref`` declarations to the named definitions they point at.

The resolver annotates an already-built :class:`SchemaNode` tree in place.
It is a two pass walk with no I/O:

1. **Index pass** – every node carrying a ``name`` attribute that is not
    itself a reference is registered under ``"<kind>:<name>"`` and, unless
    the key is already taken, under the bare ``"<name>"``. The first
    definition of a name therefore owns the bare key even when later
    definitions of other kinds share that name.
2. **Resolve pass** – every reference node strips a leading ``prefix:``
    from its ``ref`` value, looks up ``"<kind>:<name>"`` first and then the
    bare name, and records the target's ``path`` as ``resolved_target_path``.

The index is completed over the whole tree before any lookup happens, so a
``ref`` appearing before its definition in document order still resolves.

A miss is not an error: the reference usually points into another file of
the group (imported or included) and is reported through
:func:`unresolved_references` so the UI can flag it.

Example:
        from xsd_review_api.xsd_parser import ParserConfig, parse_xsd
        from xsd_review_api.references import resolve_references

        root = parse_xsd(text, ParserConfig(resolve_references=False))
        resolve_references(root)
        for node in root.iter_nodes():
                if node.is_reference:
                        print(node.reference_name, "->", node.resolved_target_path)
"""

from __future__ import annotations

from typing import Dict, List, Optional

from .models import SchemaNode


class ReferenceResolver:
    """Symbol table over one tree's definitions."""

    def __init__(self) -> None:
        self.index: Dict[str, SchemaNode] = {}

    def build_index(self, root: SchemaNode) -> Dict[str, SchemaNode]:
        self.index = {}
        for node in root.iter_nodes():
            name = node.attributes.get("name")
            if not name or node.is_reference:
                continue
            self.index[f"{node.kind}:{name}"] = node
            if name not in self.index:
                self.index[name] = node
        return self.index

    def lookup(self, kind: str, reference_name: str) -> Optional[SchemaNode]:
        """Find the definition for a ``ref`` value seen on a node of ``kind``."""
        local_name = _strip_prefix(reference_name)
        target = self.index.get(f"{kind}:{local_name}")
        if target is None:
            target = self.index.get(local_name)
        return target

    def resolve(self, root: SchemaNode) -> int:
        """Index ``root`` and annotate its reference nodes.

        Returns:
            Number of references that were resolved.
        """
        self.build_index(root)
        resolved = 0
        for node in root.iter_nodes():
            if not node.is_reference or not node.reference_name:
                continue
            target = self.lookup(node.kind, node.reference_name)
            if target is not None:
                node.resolved_target_path = target.path
                resolved += 1
        return resolved


def _strip_prefix(reference_name: str) -> str:
    if ":" in reference_name:
        return reference_name.split(":", 1)[1]
    return reference_name


def resolve_references(root: SchemaNode) -> SchemaNode:
    """Resolve every reference in ``root`` in place and return ``root``."""
    ReferenceResolver().resolve(root)
    return root


def unresolved_references(root: SchemaNode) -> List[SchemaNode]:
    """Reference nodes whose target was not found in this tree."""
    return [
        node
        for node in root.iter_nodes()
        if node.is_reference and node.resolved_target_path is None
    ]
