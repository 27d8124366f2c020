"""XSD Review API
==============

Structural model of XML Schema (XSD) documents for schema review tooling:
a parser that turns schema text into a uniquely addressable node tree, a
resolver linking ``ref`` declarations to their definitions, and a
dependency analyzer that classifies each file of an upload as ``master``,
``imported``, ``included`` or ``standalone``.

Key capabilities
----------------
- Parse XSD text into a tree of :class:`~xsd_review_api.models.SchemaNode`
  objects with deterministic, XPath-like paths used as comment anchors.
- Resolve ``ref`` nodes to the path of their named definition.
- Extract ``xs:import`` / ``xs:include`` declarations straight from the text,
  even when the document is not well-formed.
- Classify the files of a schema group and link their dependencies.
- Thin FastAPI service and ``xsd-review`` CLI over the pure core.

Design principles
-----------------
1. **Deterministic parsing** – Pure transformations; parsing unmodified text
   twice yields identical paths.
2. **No fatal inputs** – Malformed input produces ``None``, an empty list,
   or a role, never an exception across the package boundary.
3. **Per-call state** – Each parse owns its own node arena, so identifiers
   never drift between calls and parsing is safe to run in parallel.

Docstring style
---------------
Public functions follow the Google style docstring convention (Args,
Returns, Raises, Examples).

Minimal quick start
-------------------
>>> from xsd_review_api import parse_xsd
>>> root = parse_xsd(open("order.xsd").read())
>>> [child.path for child in root.children][:3]

Public surface
--------------
Only a curated subset is exported at the package level to keep the import
surface stable; advanced modules can be imported explicitly.
"""

__version__ = "0.1.0"

from .dependency_parser import extract_filename, parse_xsd_dependencies
from .models import Dependency, FileRole, SchemaFile, SchemaNode, SchemaTree
from .references import resolve_references
from .roles import build_schema_group, classify_roles, determine_schema_role
from .xsd_parser import ParserConfig, find_node_by_path, parse_schema, parse_xsd

__all__ = [
    "Dependency",
    "FileRole",
    "ParserConfig",
    "SchemaFile",
    "SchemaNode",
    "SchemaTree",
    "build_schema_group",
    "classify_roles",
    "determine_schema_role",
    "extract_filename",
    "find_node_by_path",
    "parse_schema",
    "parse_xsd",
    "parse_xsd_dependencies",
    "resolve_references",
]
