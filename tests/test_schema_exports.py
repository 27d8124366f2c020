import json
import subprocess
import sys
from pathlib import Path

from xsd_review_api.app import app

ROOT = Path(__file__).resolve().parent.parent


def test_openapi_contains_core_paths():
    spec = app.openapi()
    for path in ("/parse", "/node", "/search", "/dependencies", "/groups/classify"):
        assert path in spec["paths"]
    assert spec["info"]["title"]


def test_export_script_runs(tmp_path):
    out_dir = tmp_path / "schemas"
    cmd = [sys.executable, str(ROOT / "scripts" / "export_schemas.py"), "--out-dir", str(out_dir)]
    subprocess.check_call(cmd)
    openapi_path = out_dir / "openapi.json"
    assert openapi_path.exists()
    data = json.loads(openapi_path.read_text())
    assert data.get("openapi")
