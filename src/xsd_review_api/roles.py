"""Classify the files of a schema group by their import/include relationships.

Given a set of ``{filename, content}`` files, each file receives one role:

* ``master`` – it references other files and no other file references it
* ``imported`` / ``included`` – another file references it; the kind of the
    *first* referencing dependency found (in set iteration order) decides
* ``standalone`` – it neither references nor is referenced

A file flagged ``is_master`` by the uploader is recorded as ``master``
unconditionally; it can still be the target of other files' dependencies.

Only :mod:`~xsd_review_api.dependency_parser` output is consulted, never the
parsed tree, so classification also works for files that fail to parse.

Known limitations:
* The first-match rule makes the result depend on the order of ``files``;
    callers wanting reproducible output must pass a stable order. A file both
    imported and included by different files gets whichever is seen first.
    :func:`relationship_roles` exposes every relationship instead.
* Cycles (A imports B, B imports A) yield no master: every file in the cycle
    is referenced and is classified through the referenced branch.

Example:
        from xsd_review_api.models import SchemaFile
        from xsd_review_api.roles import classify_roles

        roles = classify_roles([
                SchemaFile("main.xsd", '<xs:import schemaLocation="types.xsd"/>'),
                SchemaFile("types.xsd", "<xs:schema/>"),
        ])
        roles["main.xsd"].value   # 'master'
        roles["types.xsd"].value  # 'imported'
"""

from __future__ import annotations

import logging
import re
from typing import Dict, List, Optional, Sequence, Set

from .dependency_parser import extract_filename, parse_xsd_dependencies
from .models import (
    Dependency,
    DependencyKind,
    DependencyLink,
    FileRole,
    SchemaFile,
    SchemaGroup,
    SchemaGroupMember,
)

logger = logging.getLogger(__name__)


def _extract_all(files: Sequence[SchemaFile]) -> List[List[Dependency]]:
    return [parse_xsd_dependencies(file.content) for file in files]


def _role_for(kind: DependencyKind) -> FileRole:
    return FileRole.IMPORTED if kind is DependencyKind.IMPORT else FileRole.INCLUDED


def determine_schema_role(
    filename: str,
    files: Sequence[SchemaFile],
    dependencies: Optional[List[List[Dependency]]] = None,
) -> FileRole:
    """Determine the role of ``filename`` within ``files``.

    Args:
        filename: File to classify.
        files: The whole group, in the order used for first-match decisions.
        dependencies: Optional pre-extracted dependencies, parallel to
            ``files``; extracted on demand when omitted.
    """
    if dependencies is None:
        dependencies = _extract_all(files)

    references_others = False
    is_referenced = False
    for file, deps in zip(files, dependencies):
        if file.filename == filename:
            if deps:
                references_others = True
        elif any(extract_filename(dep.schema_location) == filename for dep in deps):
            is_referenced = True

    if references_others and not is_referenced:
        return FileRole.MASTER

    if is_referenced:
        for file, deps in zip(files, dependencies):
            if file.filename == filename:
                continue
            for dep in deps:
                if extract_filename(dep.schema_location) == filename:
                    return _role_for(dep.kind)
        return FileRole.INCLUDED

    return FileRole.STANDALONE


def classify_roles(files: Sequence[SchemaFile]) -> Dict[str, FileRole]:
    """Return ``filename -> role`` for every file of the group."""
    dependencies = _extract_all(files)
    roles: Dict[str, FileRole] = {}
    for file in files:
        if file.is_master:
            roles[file.filename] = FileRole.MASTER
        else:
            roles[file.filename] = determine_schema_role(file.filename, files, dependencies)
    logger.debug(
        f"Classified {len(files)} file(s): "
        + ", ".join(f"{name}={role.value}" for name, role in roles.items())
    )
    return roles


def relationship_roles(filename: str, files: Sequence[SchemaFile]) -> Set[FileRole]:
    """Every relationship role ``filename`` has in the group.

    Unlike :func:`determine_schema_role` this does not stop at the first
    referencing dependency, so a file imported by one file and included by
    another yields ``{IMPORTED, INCLUDED}``. Unreferenced files yield an
    empty set.
    """
    roles: Set[FileRole] = set()
    for file, deps in zip(files, _extract_all(files)):
        if file.filename == filename:
            continue
        for dep in deps:
            if extract_filename(dep.schema_location) == filename:
                roles.add(_role_for(dep.kind))
    return roles


def link_dependencies(
    files: Sequence[SchemaFile],
    dependencies: Optional[List[List[Dependency]]] = None,
) -> List[DependencyLink]:
    """Dependencies whose target filename is part of the group.

    Dependencies on files outside the set (remote or not uploaded) are
    skipped; they are never fetched.
    """
    if dependencies is None:
        dependencies = _extract_all(files)
    filenames = {file.filename for file in files}
    links: List[DependencyLink] = []
    for file, deps in zip(files, dependencies):
        for dep in deps:
            target = extract_filename(dep.schema_location)
            if target not in filenames:
                continue
            links.append(
                DependencyLink(
                    source=file.filename,
                    target=target,
                    kind=dep.kind,
                    schema_location=dep.schema_location,
                    namespace=dep.namespace,
                )
            )
    return links


def schema_name_from_filename(filename: str) -> str:
    """Schema display name: the filename without a trailing ``.xsd``."""
    return re.sub(r"\.xsd$", "", filename, flags=re.IGNORECASE)


def build_schema_group(files: Sequence[SchemaFile]) -> SchemaGroup:
    """Classify a file set and collect its internal dependency links."""
    dependencies = _extract_all(files)
    members: List[SchemaGroupMember] = []
    for file, deps in zip(files, dependencies):
        role = (
            FileRole.MASTER
            if file.is_master
            else determine_schema_role(file.filename, files, dependencies)
        )
        members.append(
            SchemaGroupMember(
                filename=file.filename,
                name=schema_name_from_filename(file.filename),
                role=role,
                dependencies=deps,
            )
        )
    links = link_dependencies(files, dependencies)
    logger.info(f"Built schema group with {len(members)} file(s) and {len(links)} link(s)")
    return SchemaGroup(members=members, links=links)
