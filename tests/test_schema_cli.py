from pathlib import Path

from xsd_review_api.schema_cli import main

FIXTURES = Path(__file__).resolve().parent / "fixtures" / "schema"


def test_tree_command(capsys):
    assert main(["tree", str(FIXTURES / "order.xsd"), "--depth", "1"]) == 0
    out = capsys.readouterr().out
    assert "Schema: schema  []" in out
    assert "Complex Type: Bar  [/complexType[@name='Bar']]" in out
    # depth 1 stops before grandchildren
    assert "element[@name='Foo']" not in out


def test_tree_command_marks_references(capsys):
    assert main(["tree", str(FIXTURES / "order.xsd")]) == 0
    out = capsys.readouterr().out
    assert "-> /element[@name='Customer']" in out
    assert "-> (unresolved)" in out


def test_tree_command_unparsable(tmp_path, capsys):
    broken = tmp_path / "broken.xsd"
    broken.write_text("<xs:schema", encoding="utf-8")
    assert main(["tree", str(broken)]) == 1
    assert "Could not parse" in capsys.readouterr().out


def test_missing_file(tmp_path):
    assert main(["deps", str(tmp_path / "missing.xsd")]) == 1


def test_deps_command(capsys):
    assert main(["deps", str(FIXTURES / "order.xsd")]) == 0
    out = capsys.readouterr().out
    assert "import" in out and "common.xsd" in out and "urn:example:common" in out
    assert "include" in out and "types.xsd" in out


def test_roles_command(capsys):
    paths = [str(FIXTURES / name) for name in ("order.xsd", "common.xsd", "types.xsd")]
    assert main(["roles", *paths]) == 0
    out = capsys.readouterr().out
    assert "✓ order.xsd (master)" in out
    assert "○ common.xsd (imported)" in out
    assert "types.xsd (included)" in out
    assert "order.xsd --import--> common.xsd" in out


def test_roles_command_master_override(capsys):
    paths = [str(FIXTURES / name) for name in ("order.xsd", "types.xsd")]
    assert main(["roles", *paths, "--master", "types.xsd"]) == 0
    assert "✓ types.xsd (master)" in capsys.readouterr().out


def test_find_command(capsys):
    path = "/element[@name='Customer']"
    assert main(["find", str(FIXTURES / "order.xsd"), path]) == 0
    out = capsys.readouterr().out
    assert "Element: Customer" in out
    assert "@type = xs:string" in out
    assert "The ordering customer." in out


def test_find_command_unknown_path(capsys):
    assert main(["find", str(FIXTURES / "order.xsd"), "/nothing"]) == 1


def test_no_command():
    assert main([]) == 1
