"""Extract ``xs:import`` / ``xs:include`` declarations from raw schema text.

This scanner works on the text, not on the parsed tree: it must run on files
that are not well-formed XML and before any file of a multi-file upload has
been parsed. It therefore never raises.

Rules:
* Start tags ``xs:import``, ``xsd:import``, ``xs:include`` and
    ``xsd:include`` are recognised, self-closing or not, case-insensitively.
* ``schemaLocation`` is required; a declaration without it is dropped.
* ``namespace`` is read for imports only and is optional.
* Attribute values may use single or double quotes.
* Imports come first in source order, followed by includes in source order.

Example:
        from xsd_review_api.dependency_parser import parse_xsd_dependencies

        deps = parse_xsd_dependencies(
                '<xs:import namespace="urn:x" schemaLocation="common/other.xsd"/>'
        )
        deps[0].kind.value      # 'import'
        deps[0].filename        # 'other.xsd'
"""

from __future__ import annotations

import re
from typing import List, Optional

from .models import Dependency, DependencyKind

IMPORT_PATTERN = re.compile(r"<(?:xs|xsd):import\s+([^>]*?)(?:/>|>)", re.IGNORECASE)
INCLUDE_PATTERN = re.compile(r"<(?:xs|xsd):include\s+([^>]*?)(?:/>|>)", re.IGNORECASE)


def _extract_attribute(attribute_text: str, attribute_name: str) -> Optional[str]:
    """Return the value of ``attribute_name`` in a start tag's attribute text."""
    pattern = re.compile(
        r"(?<![\w:.-])%s\s*=\s*[\"']([^\"']+)[\"']" % re.escape(attribute_name),
        re.IGNORECASE,
    )
    match = pattern.search(attribute_text)
    return match.group(1) if match else None


def parse_xsd_dependencies(xsd_content: str) -> List[Dependency]:
    """Return the import and include dependencies declared in ``xsd_content``."""
    dependencies: List[Dependency] = []

    for match in IMPORT_PATTERN.finditer(xsd_content):
        attributes = match.group(1)
        schema_location = _extract_attribute(attributes, "schemaLocation")
        if not schema_location:
            continue
        dependencies.append(
            Dependency(
                kind=DependencyKind.IMPORT,
                schema_location=schema_location,
                namespace=_extract_attribute(attributes, "namespace"),
            )
        )

    for match in INCLUDE_PATTERN.finditer(xsd_content):
        schema_location = _extract_attribute(match.group(1), "schemaLocation")
        if not schema_location:
            continue
        dependencies.append(
            Dependency(kind=DependencyKind.INCLUDE, schema_location=schema_location)
        )

    return dependencies


def extract_filename(schema_location: str) -> str:
    """Final ``/``-delimited segment of a ``schemaLocation`` value, verbatim.

    No URL-decoding or query-string stripping is performed.
    """
    return schema_location.split("/")[-1]
