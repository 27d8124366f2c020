#!/usr/bin/env python
"""Export the OpenAPI schema artifact.

Usage:
    python scripts/export_schemas.py --out-dir build/schemas

Outputs:
    openapi.json              FastAPI OpenAPI spec
"""
from __future__ import annotations

import argparse
import json
from pathlib import Path

from xsd_review_api.app import app


def export_openapi(out_dir: Path) -> Path:
    spec = app.openapi()
    path = out_dir / "openapi.json"
    path.write_text(json.dumps(spec, indent=2))
    return path


def main():
    parser = argparse.ArgumentParser()
    parser.add_argument("--out-dir", default="build/schemas", help="Output directory")
    args = parser.parse_args()

    out_dir = Path(args.out_dir)
    out_dir.mkdir(parents=True, exist_ok=True)

    openapi_path = export_openapi(out_dir)

    print(f"Exported OpenAPI -> {openapi_path}")


if __name__ == "__main__":  # pragma: no cover
    main()
