#!/usr/bin/env python3
"""
Example client for the XSD Review API.

This script demonstrates how to interact with the XSD Review API for
schema exploration, reference checking and schema group classification.
"""

import sys
from pathlib import Path
from typing import Dict, List, Optional

import httpx


class XSDReviewClient:
    """Client for interacting with the XSD Review API."""

    def __init__(self, base_url: str = "http://localhost:8000"):
        """Initialize the client with the API base URL."""
        self.base_url = base_url
        self.client = httpx.Client(base_url=base_url, timeout=30.0)

    def __enter__(self):
        """Context manager entry."""
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        """Context manager exit - close the client."""
        self.client.close()

    def get_health(self) -> Dict:
        """Check API health status."""
        response = self.client.get("/health")
        response.raise_for_status()
        return response.json()

    def parse(self, content: str, depth: Optional[int] = None) -> Dict:
        """
        Parse schema text into a node tree.

        Args:
            content: Raw XSD text
            depth: Optional maximum depth of returned children

        Returns:
            Parse result (``parsed`` is False for unparsable text)
        """
        payload = {"content": content}
        if depth is not None:
            payload["depth"] = depth
        response = self.client.post("/parse", json=payload)
        response.raise_for_status()
        return response.json()

    def get_node(self, content: str, path: str) -> Optional[Dict]:
        """Look up one node by path; None when the path does not exist."""
        response = self.client.post("/node", json={"content": content, "path": path})
        if response.status_code == 404:
            return None
        response.raise_for_status()
        return response.json()

    def search(self, content: str, query: str, kind: Optional[str] = None, limit: int = 20) -> List[Dict]:
        """Search node names, kinds and documentation."""
        payload = {"content": content, "query": query, "limit": limit}
        if kind:
            payload["kind"] = kind
        response = self.client.post("/search", json=payload)
        response.raise_for_status()
        return response.json()["results"]

    def classify(self, paths: List[Path], master: Optional[str] = None) -> Dict:
        """Classify a group of files read from disk."""
        files = [
            {
                "filename": path.name,
                "content": path.read_text(encoding="utf-8"),
                "is_master": path.name == master,
            }
            for path in paths
        ]
        response = self.client.post("/groups/classify", json={"files": files})
        response.raise_for_status()
        return response.json()


def main():
    """Demonstrate API usage with the XSD files given on the command line."""
    paths = [Path(p) for p in sys.argv[1:]]
    if not paths:
        print("Usage: api_client.py FILE.xsd [FILE.xsd ...]")
        return

    with XSDReviewClient() as client:
        print("1. Checking API health...")
        print(f"   Status: {client.get_health()['status']}")

        content = paths[0].read_text(encoding="utf-8")

        print(f"\n2. Parsing {paths[0].name}...")
        result = client.parse(content, depth=1)
        if not result["parsed"]:
            print("   Could not parse")
            return
        print(f"   Nodes: {result['node_count']}")
        for child in result["node"]["children"]:
            print(f"   {child['kind']:<16} {child['path']}")

        print("\n3. Unresolved references...")
        for ref in result["unresolved_references"] or []:
            print(f"   {ref['reference_name']} at {ref['path']}")

        print("\n4. Searching for 'type'...")
        for hit in client.search(content, "type", limit=5):
            print(f"   {hit['label']}: {hit['name'] or hit['kind']}  {hit['path']}")

        if len(paths) > 1:
            print("\n5. Classifying the group...")
            group = client.classify(paths)
            for filename, role in group["roles"].items():
                print(f"   {filename}: {role}")
            for link in group["links"]:
                print(f"   {link['source']} --{link['kind']}--> {link['target']}")


if __name__ == "__main__":
    try:
        main()
    except httpx.ConnectError:
        print("\nError: Could not connect to API server.")
        print("Make sure the server is running: python -m xsd_review_api.run_server")
