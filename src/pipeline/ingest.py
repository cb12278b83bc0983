"""
Contact Snapshot Ingestion

Loads contact snapshots exported from the relationship store (JSON or CSV).
"""

import json
import logging
import re
from datetime import datetime
from pathlib import Path
from typing import Any, Optional

import pandas as pd
from pydantic import BaseModel, Field, ValidationError

from src.models.entities import ContactRecord

logger = logging.getLogger(__name__)

CONNECTION_SEPARATORS = re.compile(r"[;|]")

# Column name variations seen in store exports
ID_COLUMNS = ["id", "contact_id", "uuid"]
NAME_COLUMNS = ["name", "full_name", "display_name"]
CONNECTION_COLUMNS = ["connections", "linkedin_connections", "connection_ids"]


class ContactSnapshot(BaseModel):
    """Container for a loaded contact snapshot."""
    contacts: list[ContactRecord] = Field(default_factory=list)

    # Metadata
    source_file: Optional[str] = None
    loaded_at: datetime = Field(default_factory=datetime.now)
    skipped_rows: int = 0

    @property
    def has_contacts(self) -> bool:
        return len(self.contacts) > 0

    @property
    def contact_ids(self) -> list[str]:
        return [c.id for c in self.contacts]


def _clean_value(value: Any) -> Optional[str]:
    """Normalise a cell value to a stripped string or None."""
    if value is None:
        return None
    if not isinstance(value, (list, tuple)) and pd.isna(value):
        return None
    text = str(value).strip()
    return text or None


def _first_present(row: dict, columns: list[str]) -> Any:
    for column in columns:
        value = row.get(column)
        if _clean_value(value) is not None:
            return value
    return None


def _split_connections(value: Any) -> list[str]:
    """Split a connection cell ("a;b;c" or "a|b") into identifiers."""
    text = _clean_value(value)
    if text is None:
        return []
    if text.startswith("["):
        try:
            return [str(v) for v in json.loads(text) if v is not None]
        except json.JSONDecodeError:
            logger.warning(f"Could not parse connection list: {text[:40]}")
    return [part.strip() for part in CONNECTION_SEPARATORS.split(text) if part.strip()]


def _load_json(filepath: Path) -> tuple[list[ContactRecord], int]:
    with open(filepath, encoding="utf-8") as f:
        data = json.load(f)

    if isinstance(data, dict):
        data = data.get("contacts", [])
    if not isinstance(data, list):
        raise ValueError(f"Expected a list of contacts in {filepath.name}")

    records = []
    skipped = 0
    for item in data:
        try:
            records.append(ContactRecord.model_validate(item))
        except ValidationError as e:
            skipped += 1
            logger.warning(f"Skipping malformed contact: {e.error_count()} validation errors")

    return records, skipped


def _load_csv(filepath: Path) -> tuple[list[ContactRecord], int]:
    df = pd.read_csv(filepath, dtype=str)

    # Normalize column names
    df.columns = [col.strip().lower().replace(" ", "_") for col in df.columns]

    records = []
    skipped = 0
    for row in df.to_dict(orient="records"):
        contact_id = _clean_value(_first_present(row, ID_COLUMNS))
        if contact_id is None:
            skipped += 1
            logger.warning("Skipping contact row without an id")
            continue

        try:
            records.append(ContactRecord(
                id=contact_id,
                name=_clean_value(_first_present(row, NAME_COLUMNS)) or "",
                email=_clean_value(row.get("email")),
                company=_clean_value(row.get("company")),
                position=_clean_value(row.get("position")),
                connections=_split_connections(_first_present(row, CONNECTION_COLUMNS)),
            ))
        except ValidationError as e:
            skipped += 1
            logger.warning(f"Skipping malformed contact row {contact_id}: {e}")

    return records, skipped


def load_contacts(path: str | Path) -> ContactSnapshot:
    """Load a contact snapshot from a JSON or CSV file.

    Args:
        path: Path to the snapshot file

    Returns:
        ContactSnapshot with the parsed contacts

    Raises:
        FileNotFoundError: If the file does not exist
        ValueError: If the format is unsupported or no contacts were loaded
    """
    filepath = Path(path)

    if not filepath.exists():
        raise FileNotFoundError(f"Snapshot file not found: {filepath}")

    suffix = filepath.suffix.lower()
    if suffix == ".json":
        contacts, skipped = _load_json(filepath)
    elif suffix == ".csv":
        contacts, skipped = _load_csv(filepath)
    else:
        raise ValueError(f"Unsupported snapshot format: {filepath.suffix or filepath.name}")

    if not contacts:
        raise ValueError(f"No contacts loaded from {filepath.name}")

    logger.info(f"Loaded {len(contacts)} contacts from {filepath.name} ({skipped} skipped)")

    return ContactSnapshot(
        contacts=contacts,
        source_file=str(filepath),
        skipped_rows=skipped,
    )
