"""Shared test fixtures for retoml.

Fixtures defined here are available to all tests in the suite without
needing an explicit import. Add project-wide fixtures here; keep
domain-specific fixtures close to the tests that use them.
"""
from __future__ import annotations

from pathlib import Path

import pytest

SAMPLE_DOCUMENT = """\
# This is a TOML document.

title = "TOML Example"

[owner]
name = "Tom Preston-Werner"
dob = 1979-05-27T07:32:00-08:00 # First class dates

[database]
server = "192.168.1.1"
ports = [ 8000, 8001, 8002 ]
connection_max = 5000
enabled = true

[servers]

  # Indentation (tabs and/or spaces) is allowed but not required
  [servers.alpha]
  ip = "10.0.0.1"
  dc = "eqdc10"

  [servers.beta]
  ip = "10.0.0.2"
  dc = "eqdc10"

[clients]
data = [ ["gamma", "delta"], [1, 2] ]

# Line breaks are OK when inside arrays
hosts = [
  "alpha",
  "omega"
]

[[products]]
name = "Hammer"
sku = 738594937

[[products]]
name = "Nail"
sku = 284758393
color = "gray"
"""


@pytest.fixture()
def package_name() -> str:
    """Return the importable package name for assertions."""
    return "retoml"


@pytest.fixture()
def expected_version() -> str:
    """Return the current expected version string.

    Update this fixture when cutting a release so that the version
    test immediately catches stale ``__version__`` values.
    """
    return "0.1.0"


@pytest.fixture()
def sample_text() -> str:
    """Return a document exercising tables, arrays of tables and comments."""
    return SAMPLE_DOCUMENT


@pytest.fixture()
def sample_file(tmp_path: Path) -> Path:
    """Write the sample document to a temporary ``.toml`` file."""
    path = tmp_path / "sample.toml"
    path.write_text(SAMPLE_DOCUMENT, encoding="utf-8")
    return path


@pytest.fixture()
def invalid_file(tmp_path: Path) -> Path:
    """Write a document with a duplicate key to a temporary file."""
    path = tmp_path / "invalid.toml"
    path.write_text("a = 1\na = 2\n", encoding="utf-8")
    return path
