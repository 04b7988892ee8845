#!/usr/bin/env python3
"""Example: retoml quickstart

Minimal working example: parse a TOML document, edit it without
losing comments or spacing, and export the data.

Usage:
    python examples/01_quickstart.py

Requirements:
    pip install retoml
"""
from __future__ import annotations

import retoml
from retoml.model import DocumentSerializer, Table

TOML_SOURCE = '''\
# Service configuration
[server]
host = "localhost"   # bind address
port = 8080

[[upstream]]
name = "api"
url = 'http://10.0.0.1:9000'
'''


def main() -> None:
    print(f"retoml version: {retoml.__version__}")

    # Step 1: Parse; an unmodified document re-encodes unchanged
    doc = retoml.parse(TOML_SOURCE)
    print(f"Round-trip exact: {str(doc) == TOML_SOURCE}")

    # Step 2: Edit values in place; the comment after host survives
    server = doc["server"]
    assert isinstance(server, Table)
    server["host"] = "0.0.0.0"
    server["port"] = 9090
    server["workers"] = 4

    # Step 3: Add a new section
    doc["logging"] = Table({"level": "info"})
    print("\nEdited document:")
    print(str(doc))

    # Step 4: Export plain data
    print("JSON export:")
    print(DocumentSerializer().to_json(doc))


if __name__ == "__main__":
    main()
