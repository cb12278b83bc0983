"""
Core Data Models

Pydantic models for contacts and the results of network graph queries.
"""

from typing import Any, Optional

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator


class ContactRecord(BaseModel):
    """A contact from the relationship store."""
    model_config = ConfigDict(populate_by_name=True)

    id: str = Field(description="Unique contact identifier")
    name: str = ""
    email: Optional[str] = None
    company: Optional[str] = None
    position: Optional[str] = None
    connections: list[str] = Field(
        default_factory=list,
        validation_alias=AliasChoices(
            "connections", "linkedin_connections", "linkedinConnections"
        ),
        description="Identifiers of contacts this person declared a link to",
    )

    @field_validator("id", mode="before")
    @classmethod
    def _coerce_id(cls, value: Any) -> Any:
        if isinstance(value, int):
            return str(value)
        return value

    @field_validator("connections", mode="before")
    @classmethod
    def _coerce_connections(cls, value: Any) -> list[str]:
        """Accept None, scalars and mixed lists."""
        if value is None:
            return []
        if isinstance(value, (str, int)):
            value = [value]
        cleaned = []
        for item in value:
            if item is None:
                continue
            item = str(item).strip()
            if item:
                cleaned.append(item)
        return cleaned

    @property
    def display_name(self) -> str:
        """Human-readable name for display."""
        return self.name or self.id


class GraphNode(BaseModel):
    """A node in the network graph."""
    model_config = ConfigDict(frozen=True)

    id: str
    contact: ContactRecord


class Edge(BaseModel):
    """An undirected link between two distinct contacts."""
    model_config = ConfigDict(frozen=True)

    source: str
    target: str

    @property
    def key(self) -> frozenset[str]:
        """Direction-free identity of the edge."""
        return frozenset((self.source, self.target))


class NetworkMetrics(BaseModel):
    """Aggregate statistics for a network graph."""
    model_config = ConfigDict(frozen=True)

    total_nodes: int = 0
    total_edges: int = 0
    avg_degree: float = 0.0
    network_density: float = Field(default=0.0, ge=0.0, le=1.0)


class ConnectionDiagnostics(BaseModel):
    """How well declared connections matched contacts in the snapshot."""
    model_config = ConfigDict(frozen=True)

    total_connection_references: int = 0
    matched_connections: int = 0
    self_references: int = 0
    unmatched_connections: list[str] = Field(default_factory=list)
    isolated_contacts: list[str] = Field(default_factory=list)
    match_rate: int = Field(default=0, ge=0, le=100)


class IntroductionPath(BaseModel):
    """A chain of contacts from source to target."""
    model_config = ConfigDict(frozen=True)

    contact_ids: tuple[str, ...] = Field(min_length=1)
    contacts: tuple[ContactRecord, ...] = ()
    warmth_score: int = Field(ge=1, le=100)

    @property
    def hops(self) -> int:
        """Number of edges in the path."""
        return len(self.contact_ids) - 1

    @property
    def source_id(self) -> str:
        return self.contact_ids[0]

    @property
    def target_id(self) -> str:
        return self.contact_ids[-1]

    @property
    def intermediaries(self) -> tuple[ContactRecord, ...]:
        """Contacts strictly between source and target."""
        return self.contacts[1:-1]


class MutualConnection(BaseModel):
    """A second-degree contact and the direct contacts that bridge to it."""
    model_config = ConfigDict(frozen=True)

    contact_id: str
    name: str = ""
    via: tuple[str, ...] = ()

    @property
    def mutual_count(self) -> int:
        return len(self.via)


class ConnectorScore(BaseModel):
    """A contact ranked by betweenness centrality."""
    model_config = ConfigDict(frozen=True)

    contact_id: str
    name: str = ""
    centrality: float = Field(ge=0.0)
    degree: int = 0
    rank: int = Field(ge=1)


class Community(BaseModel):
    """A cluster of closely connected contacts."""
    model_config = ConfigDict(frozen=True)

    id: str
    member_ids: tuple[str, ...]
    density: float = 0.0
    avg_degree: float = 0.0

    @property
    def size(self) -> int:
        return len(self.member_ids)


class InfluenceScore(BaseModel):
    """Composite influence of a contact, scaled to 0-100."""
    model_config = ConfigDict(frozen=True)

    contact_id: str
    score: float = Field(ge=0.0)
    rank: int = Field(ge=1)
    degree: float = 0.0
    betweenness: float = 0.0
    clustering: float = 0.0
    eigenvector: float = 0.0


class NetworkSummary(BaseModel):
    """Extended network statistics for dashboards and reports."""
    model_config = ConfigDict(frozen=True)

    metrics: NetworkMetrics
    largest_component_size: int = 0
    component_count: int = 0
    avg_path_length: float = 0.0
    avg_clustering: float = 0.0
    key_connectors: list[ConnectorScore] = Field(default_factory=list)
