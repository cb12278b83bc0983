"""
Connection Name Resolution

Some stores record connections by display name rather than contact id.
Resolves those names to ids before the graph is built.
"""

import logging
import re
from typing import Iterable, Optional

from src.models.entities import ContactRecord

logger = logging.getLogger(__name__)

HONORIFICS = re.compile(r"^(dr|prof|mr|ms|mrs)\.?\s+", re.IGNORECASE)


def normalize_name(name: str) -> str:
    """Normalize a name for matching."""
    name = HONORIFICS.sub("", name.lower().strip())
    # Remove special characters, collapse spaces
    name = re.sub(r"[^\w\s]", "", name)
    return re.sub(r"\s+", " ", name).strip()


def name_similarity(name1: str, name2: str) -> float:
    """Similarity between two names in [0, 1].

    Exact match scores 1.0, one name containing the other 0.8, otherwise
    the share of matching words.
    """
    n1 = normalize_name(name1)
    n2 = normalize_name(name2)

    if not n1 or not n2:
        return 0.0
    if n1 == n2:
        return 1.0
    if n1 in n2 or n2 in n1:
        return 0.8

    words1 = n1.split(" ")
    words2 = n2.split(" ")
    matching = sum(1 for w in words1 if w in words2)
    return matching / max(len(words1), len(words2))


class ConnectionResolver:
    """Maps connection references (ids or names) to contact ids."""

    def __init__(self, contacts: Iterable[ContactRecord], threshold: float = 0.7):
        """Initialize resolver.

        Args:
            contacts: Contacts in the snapshot
            threshold: Minimum name similarity for a fuzzy match
        """
        self.threshold = threshold
        self._contacts = list(contacts)
        self._ids = {c.id for c in self._contacts}
        self._name_to_id: dict[str, str] = {}

        for contact in self._contacts:
            key = normalize_name(contact.name)
            if key and key not in self._name_to_id:
                self._name_to_id[key] = contact.id

    def resolve(self, reference: str) -> Optional[str]:
        """Resolve a reference to a contact id, or None."""
        if reference in self._ids:
            return reference

        key = normalize_name(reference)
        if not key:
            return None
        if key in self._name_to_id:
            return self._name_to_id[key]

        best_id = None
        best_score = 0.0
        for contact in self._contacts:
            score = name_similarity(reference, contact.name)
            if score >= self.threshold and score > best_score:
                best_id, best_score = contact.id, score

        return best_id


def resolve_connection_names(
    contacts: Iterable[ContactRecord],
    threshold: float = 0.7,
) -> list[ContactRecord]:
    """Rewrite name-based connection entries as contact ids.

    Unresolvable entries are kept as-is; the graph builder drops them as
    dangling references.

    Args:
        contacts: Contact snapshot
        threshold: Minimum similarity for fuzzy name matches

    Returns:
        New ContactRecord list (input records are not modified)
    """
    contacts = list(contacts)
    resolver = ConnectionResolver(contacts, threshold=threshold)

    resolved_records = []
    rewritten = 0
    for contact in contacts:
        connections = []
        for reference in contact.connections:
            contact_id = resolver.resolve(reference)
            if contact_id is not None and contact_id != reference:
                rewritten += 1
                connections.append(contact_id)
            else:
                connections.append(reference)
        resolved_records.append(contact.model_copy(update={"connections": connections}))

    logger.info(f"Resolved {rewritten} name-based connection references")
    return resolved_records
