"""
Pytest Configuration and Shared Fixtures
"""

import json

import pytest
from pathlib import Path

from src.models.entities import ContactRecord
from src.models.graph import NetworkGraph, build_graph


@pytest.fixture
def sample_contact() -> ContactRecord:
    """Create a sample contact for testing."""
    return ContactRecord(
        id="test_contact_001",
        name="Jane Smith",
        email="jane.smith@example.com",
        company="Acme Corp",
        position="Senior Engineer",
        connections=["test_contact_002"],
    )


@pytest.fixture
def four_contacts() -> list[ContactRecord]:
    """A-B-C triangle with D hanging off B."""
    return [
        ContactRecord(id="A", name="Alice", company="Tech Corp", position="CEO", connections=["B", "C"]),
        ContactRecord(id="B", name="Bob", company="Dev Inc", position="CTO", connections=["A", "C", "D"]),
        ContactRecord(id="C", name="Carol", company="Design Studio", position="Designer", connections=["A", "B"]),
        ContactRecord(id="D", name="Dave", company="Marketing Co", position="CMO", connections=["B"]),
    ]


@pytest.fixture
def four_graph(four_contacts) -> NetworkGraph:
    return build_graph(four_contacts)


@pytest.fixture
def disconnected_contacts() -> list[ContactRecord]:
    """Two contacts with no links."""
    return [
        ContactRecord(id="1", name="Alice", connections=[]),
        ContactRecord(id="2", name="Bob", connections=[]),
    ]


@pytest.fixture
def messy_contacts() -> list[ContactRecord]:
    """Contacts with self links, duplicates, reverse duplicates and dangling ids."""
    return [
        ContactRecord(id="p1", name="Priya", connections=["p1", "p2", "p2", "ghost"]),
        ContactRecord(id="p2", name="Quinn", connections=["p1", "p3"]),
        ContactRecord(id="p3", name="Ravi", connections=["p2", "missing", "ghost"]),
        ContactRecord(id="p4", name="Sara", connections=[]),
    ]


@pytest.fixture
def bridge_graph() -> NetworkGraph:
    """Two triangles joined through a single bridge contact m.

    a1-a2-a3 triangle, b1-b2-b3 triangle, a3-m-b1.
    """
    return build_graph([
        ContactRecord(id="a1", name="Ann", connections=["a2", "a3"]),
        ContactRecord(id="a2", name="Abe", connections=["a3"]),
        ContactRecord(id="a3", name="Ada", connections=["m"]),
        ContactRecord(id="m", name="Max", connections=["b1"]),
        ContactRecord(id="b1", name="Ben", connections=["b2", "b3"]),
        ContactRecord(id="b2", name="Bea", connections=["b3"]),
        ContactRecord(id="b3", name="Bo", connections=[]),
    ])


@pytest.fixture
def two_triangles_graph() -> NetworkGraph:
    """Two separate triangles."""
    return build_graph([
        ContactRecord(id="x1", name="Xena", connections=["x2", "x3"]),
        ContactRecord(id="x2", name="Xavi", connections=["x3"]),
        ContactRecord(id="x3", name="Xiu", connections=[]),
        ContactRecord(id="y1", name="Yara", connections=["y2", "y3"]),
        ContactRecord(id="y2", name="Yuri", connections=["y3"]),
        ContactRecord(id="y3", name="Yosef", connections=[]),
    ])


@pytest.fixture
def star_graph() -> NetworkGraph:
    """Hub connected to three leaves."""
    return build_graph([
        ContactRecord(id="hub", name="Hannah", connections=["l1", "l2", "l3"]),
        ContactRecord(id="l1", name="Leo"),
        ContactRecord(id="l2", name="Lia"),
        ContactRecord(id="l3", name="Luz"),
    ])


@pytest.fixture
def snapshot_json(tmp_path, four_contacts) -> Path:
    """Write the four-contact fixture as a JSON snapshot."""
    filepath = tmp_path / "contacts.json"
    filepath.write_text(json.dumps([c.model_dump() for c in four_contacts]))
    return filepath
