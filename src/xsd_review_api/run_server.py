"""Executable entry point for launching the XSD Review FastAPI application.

Process managers (uvicorn / gunicorn / ASGI workers) can import the stable
`app` object from `xsd_review_api.app`, or run
`python -m xsd_review_api.run_server` directly for local development.

Environment Variables:
    PORT (int): Override listening port (default 8000).
    XSD_REVIEW_PARSER_CONFIG (str): Parser options, see :mod:`xsd_review_api.app`.

Example:
    $ python -m xsd_review_api.run_server
    $ PORT=9000 python -m xsd_review_api.run_server
"""

from __future__ import annotations

import os

import uvicorn

from .app import app


def main() -> None:
    """Launch the ASGI server with development-friendly defaults."""
    uvicorn.run(app, host="0.0.0.0", port=int(os.getenv("PORT", "8000")))


if __name__ == "__main__":
    main()
