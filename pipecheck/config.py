"""Configuration models for pipecheck."""

from enum import Enum
from typing import FrozenSet, List, Optional

from pydantic import BaseModel, Field, field_validator, model_validator


class ElementType(str, Enum):
    """Pipeline element kinds a graph node can be."""

    # External connectors
    SOURCE = "source"
    SINK = "sink"

    # Data channels
    STREAM = "stream"
    TABLE = "table"
    TRIGGER = "trigger"

    # Processing stages
    WINDOW = "window"
    FILTER = "filter"
    PROJECTION = "projection"
    AGGREGATION = "aggregation"
    GROUP_BY = "groupBy"
    JOIN = "join"
    PATTERN = "pattern"
    PARTITION = "partition"


class LogLevel(str, Enum):
    """Logging levels."""

    DEBUG = "DEBUG"
    INFO = "INFO"
    WARNING = "WARNING"
    ERROR = "ERROR"


class CardinalityRule(BaseModel):
    """
    Structural contract for one element type.

    * `max_inputs` / `max_outputs` - edge bounds, `None` means unbounded.
    * `can_be_source` / `can_be_sink` - whether the type may begin or end a
      pipeline. Informational; the adjacency whitelists are what is enforced.
    * `allowed_sources` - element types permitted to connect into this type.
    * `allowed_targets` - element types this type is permitted to connect to.

    A whitelist of `None` means no restriction beyond cardinality.
    """

    model_config = {"frozen": True}

    max_inputs: Optional[int] = Field(default=None, ge=0)
    max_outputs: Optional[int] = Field(default=None, ge=0)
    can_be_source: bool = False
    can_be_sink: bool = False
    allowed_sources: Optional[FrozenSet[ElementType]] = None
    allowed_targets: Optional[FrozenSet[ElementType]] = None


class GraphNode(BaseModel):
    """One element in the pipeline graph.

    `type` is kept as a plain string so that tags outside
    :class:`ElementType` can reach the validator, which rejects them.
    """

    model_config = {"frozen": True}

    id: str
    type: str

    @field_validator("type", mode="before")
    @classmethod
    def normalize_type(cls, v):
        if isinstance(v, ElementType):
            return v.value
        return v


class GraphEdge(BaseModel):
    """Directed connection from one node id to another."""

    model_config = {"frozen": True, "populate_by_name": True}

    source: str = Field(alias="sourceId")
    target: str = Field(alias="targetId")


class LoggingConfig(BaseModel):
    """Logging configuration."""

    level: LogLevel = LogLevel.INFO
    structured: bool = Field(default=False, description="Output JSON logs")


class GraphConfig(BaseModel):
    """
    A graph document: the nodes and edges of one pipeline.

    Example:
    ```yaml
    name: orders
    logging:
      level: INFO
    nodes:
      - id: src1
        type: source
      - id: strm1
        type: stream
    edges:
      - source: src1
        target: strm1
    ```
    """

    name: str
    description: Optional[str] = None
    logging: LoggingConfig = Field(default_factory=LoggingConfig)
    nodes: List[GraphNode] = Field(default_factory=list)
    edges: List[GraphEdge] = Field(default_factory=list)

    @model_validator(mode="after")
    def check_unique_node_ids(self):
        """Ensure node ids are unique within the document."""
        seen = set()
        duplicates = []
        for node in self.nodes:
            if node.id in seen and node.id not in duplicates:
                duplicates.append(node.id)
            seen.add(node.id)
        if duplicates:
            raise ValueError(f"Duplicate node ids: {', '.join(duplicates)}")
        return self
