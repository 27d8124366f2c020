"""
CLI commands for inspecting XSD files.
"""

import argparse
import sys
import logging
from pathlib import Path

from .dependency_parser import extract_filename, parse_xsd_dependencies
from .models import FileRole, SchemaFile
from .roles import build_schema_group
from .xsd_parser import node_kind_label, parse_schema

logger = logging.getLogger(__name__)


def setup_logging(verbose: bool = False):
    """Setup logging configuration."""
    level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(
        level=level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    )


def _read(path: Path):
    try:
        return path.read_text(encoding="utf-8")
    except OSError as e:
        logger.error(f"Cannot read {path}: {e}")
        return None


def _print_node(node, indent: int, depth):
    ref = ""
    if node.is_reference:
        ref = f" -> {node.resolved_target_path or '(unresolved)'}"
    print(f"{'  ' * indent}{node_kind_label(node.kind)}: {node.display_name}  [{node.path}]{ref}")
    if depth is not None and indent >= depth:
        return
    for child in node.children:
        _print_node(child, indent + 1, depth)


def cmd_tree(args):
    """Print the node tree of one schema."""
    setup_logging(args.verbose)

    content = _read(Path(args.file))
    if content is None:
        return 1
    tree = parse_schema(content)
    if tree is None:
        print(f"✗ Could not parse {args.file}")
        return 1
    _print_node(tree.root, 0, args.depth)
    return 0


def cmd_deps(args):
    """Print the import/include declarations of one schema."""
    setup_logging(args.verbose)

    content = _read(Path(args.file))
    if content is None:
        return 1
    deps = parse_xsd_dependencies(content)
    if not deps:
        print(f"○ {args.file} declares no dependencies")
        return 0
    for dep in deps:
        namespace = f" ({dep.namespace})" if dep.namespace else ""
        print(f"  {dep.kind.value:<8} {extract_filename(dep.schema_location)}  {dep.schema_location}{namespace}")
    return 0


def cmd_roles(args):
    """Classify a set of schema files."""
    setup_logging(args.verbose)

    files = []
    masters = set(args.master or [])
    for name in args.files:
        path = Path(name)
        content = _read(path)
        if content is None:
            return 1
        files.append(SchemaFile(filename=path.name, content=content, is_master=path.name in masters))

    group = build_schema_group(files)
    for member in group.members:
        marker = "✓" if member.role is FileRole.MASTER else "○"
        print(f"  {marker} {member.filename} ({member.role.value})")
    for link in group.links:
        print(f"    {link.source} --{link.kind.value}--> {link.target}")
    return 0


def cmd_find(args):
    """Show a single node by path."""
    setup_logging(args.verbose)

    content = _read(Path(args.file))
    if content is None:
        return 1
    tree = parse_schema(content)
    if tree is None:
        print(f"✗ Could not parse {args.file}")
        return 1
    node = tree.find(args.path)
    if node is None:
        print(f"✗ No node at {args.path}")
        return 1
    print(f"✓ {node_kind_label(node.kind)}: {node.display_name}")
    print("  " + " > ".join(n.display_name for n in tree.ancestors(node)))
    for key, value in node.attributes.items():
        print(f"  @{key} = {value}")
    if node.documentation:
        print(f"  {node.documentation}")
    return 0


def main(argv=None):
    """Main CLI entry point."""
    parser = argparse.ArgumentParser(
        description="XSD structure inspection CLI",
        prog="xsd-review"
    )
    parser.add_argument(
        "-v", "--verbose",
        action="store_true",
        help="Enable verbose logging"
    )

    subparsers = parser.add_subparsers(
        dest="command",
        help="Available commands"
    )

    # Tree command
    tree_parser = subparsers.add_parser(
        "tree",
        help="Print the node tree of a schema"
    )
    tree_parser.add_argument("file", help="XSD file")
    tree_parser.add_argument(
        "--depth",
        type=int,
        default=None,
        help="Maximum depth to print"
    )
    tree_parser.set_defaults(func=cmd_tree)

    # Deps command
    deps_parser = subparsers.add_parser(
        "deps",
        help="List xs:import / xs:include declarations"
    )
    deps_parser.add_argument("file", help="XSD file")
    deps_parser.set_defaults(func=cmd_deps)

    # Roles command
    roles_parser = subparsers.add_parser(
        "roles",
        help="Classify a group of schema files"
    )
    roles_parser.add_argument("files", nargs="+", help="XSD files of the group")
    roles_parser.add_argument(
        "--master",
        action="append",
        help="Filename to record as master regardless of dependencies (repeatable)"
    )
    roles_parser.set_defaults(func=cmd_roles)

    # Find command
    find_parser = subparsers.add_parser(
        "find",
        help="Show the node at a path"
    )
    find_parser.add_argument("file", help="XSD file")
    find_parser.add_argument("path", help="Node path, e.g. /complexType[@name='Bar']")
    find_parser.set_defaults(func=cmd_find)

    args = parser.parse_args(argv)

    if not hasattr(args, 'func'):
        parser.print_help()
        return 1

    return args.func(args)


if __name__ == "__main__":
    sys.exit(main())
