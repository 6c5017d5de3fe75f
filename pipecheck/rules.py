"""Connection cardinality rules for each element type."""

from types import MappingProxyType
from typing import Mapping, NamedTuple, Optional, Union

from pipecheck.config import CardinalityRule, ElementType

E = ElementType

UNBOUNDED_LABEL = "∞"
UNKNOWN_LABEL = "?"

CARDINALITY_RULES: Mapping[ElementType, CardinalityRule] = MappingProxyType(
    {
        # External connectors
        E.SOURCE: CardinalityRule(
            max_inputs=0,  # data comes from the external system
            max_outputs=1,
            can_be_source=True,
            allowed_targets=frozenset({E.STREAM}),
        ),
        E.SINK: CardinalityRule(
            max_inputs=1,
            max_outputs=0,  # data goes to the external system
            can_be_sink=True,
            allowed_sources=frozenset({E.STREAM}),
        ),
        # Data channels
        E.STREAM: CardinalityRule(
            can_be_source=True,
            can_be_sink=True,  # target of INSERT INTO
            allowed_sources=frozenset(
                {
                    E.SOURCE,
                    E.WINDOW,
                    E.FILTER,
                    E.PROJECTION,
                    E.AGGREGATION,
                    E.GROUP_BY,
                    E.JOIN,
                    E.PATTERN,
                    E.PARTITION,
                }
            ),
            allowed_targets=frozenset(
                {
                    E.WINDOW,
                    E.FILTER,
                    E.PROJECTION,
                    E.AGGREGATION,
                    E.GROUP_BY,
                    E.JOIN,
                    E.PATTERN,
                    E.PARTITION,
                    E.SINK,
                    E.STREAM,
                }
            ),
        ),
        E.TRIGGER: CardinalityRule(
            max_inputs=0,
            can_be_source=True,
            allowed_targets=frozenset(
                {E.WINDOW, E.FILTER, E.PROJECTION, E.AGGREGATION, E.GROUP_BY, E.STREAM}
            ),
        ),
        E.TABLE: CardinalityRule(
            can_be_source=True,
            can_be_sink=True,
            allowed_targets=frozenset(
                {E.WINDOW, E.FILTER, E.PROJECTION, E.AGGREGATION, E.GROUP_BY, E.JOIN, E.STREAM}
            ),
        ),
        # Processing stages, 1:1 unless noted
        E.WINDOW: CardinalityRule(
            max_inputs=1,
            max_outputs=1,
            allowed_sources=frozenset({E.STREAM, E.TABLE, E.TRIGGER}),
            allowed_targets=frozenset(
                {E.FILTER, E.PROJECTION, E.AGGREGATION, E.GROUP_BY, E.STREAM}
            ),
        ),
        E.FILTER: CardinalityRule(
            max_inputs=1,
            max_outputs=1,
            allowed_sources=frozenset({E.STREAM, E.TABLE, E.TRIGGER, E.WINDOW}),
            allowed_targets=frozenset(
                {E.WINDOW, E.FILTER, E.PROJECTION, E.AGGREGATION, E.GROUP_BY, E.JOIN, E.STREAM}
            ),
        ),
        E.PROJECTION: CardinalityRule(
            max_inputs=1,
            max_outputs=1,
            allowed_sources=frozenset(
                {
                    E.STREAM,
                    E.TABLE,
                    E.TRIGGER,
                    E.WINDOW,
                    E.FILTER,
                    E.AGGREGATION,
                    E.GROUP_BY,
                    E.JOIN,
                }
            ),
            allowed_targets=frozenset({E.FILTER, E.PROJECTION, E.STREAM}),
        ),
        E.AGGREGATION: CardinalityRule(
            max_inputs=1,
            max_outputs=1,
            allowed_sources=frozenset(
                {E.STREAM, E.TABLE, E.TRIGGER, E.WINDOW, E.FILTER, E.GROUP_BY}
            ),
            allowed_targets=frozenset({E.PROJECTION, E.FILTER, E.STREAM}),
        ),
        E.GROUP_BY: CardinalityRule(
            max_inputs=1,
            max_outputs=1,
            allowed_sources=frozenset({E.STREAM, E.TABLE, E.TRIGGER, E.WINDOW, E.FILTER}),
            allowed_targets=frozenset({E.AGGREGATION, E.PROJECTION, E.STREAM}),
        ),
        E.JOIN: CardinalityRule(
            max_inputs=2,  # left and right side
            max_outputs=1,
            allowed_sources=frozenset({E.STREAM, E.TABLE, E.WINDOW, E.FILTER}),
            allowed_targets=frozenset(
                {E.FILTER, E.PROJECTION, E.AGGREGATION, E.GROUP_BY, E.STREAM}
            ),
        ),
        E.PATTERN: CardinalityRule(
            max_outputs=1,  # any number of streams take part in a pattern
            allowed_sources=frozenset({E.STREAM}),
            allowed_targets=frozenset({E.FILTER, E.PROJECTION, E.STREAM}),
        ),
        E.PARTITION: CardinalityRule(
            max_inputs=1,
            max_outputs=1,
            allowed_sources=frozenset({E.STREAM, E.WINDOW, E.FILTER}),
            allowed_targets=frozenset(
                {E.WINDOW, E.FILTER, E.PROJECTION, E.AGGREGATION, E.GROUP_BY, E.STREAM}
            ),
        ),
    }
)

ELEMENT_LABELS: Mapping[ElementType, str] = MappingProxyType(
    {
        E.SOURCE: "Source",
        E.SINK: "Sink",
        E.STREAM: "Stream",
        E.TABLE: "Table",
        E.TRIGGER: "Trigger",
        E.WINDOW: "Window",
        E.FILTER: "Filter",
        E.PROJECTION: "Projection",
        E.AGGREGATION: "Aggregation",
        E.GROUP_BY: "Group By",
        E.JOIN: "Join",
        E.PATTERN: "Pattern",
        E.PARTITION: "Partition",
    }
)


class ConnectionInfo(NamedTuple):
    """Display strings for a type's input and output bounds."""

    inputs: str
    outputs: str


def resolve_type(element_type: Union[str, ElementType, None]) -> Optional[ElementType]:
    """Map a type tag onto :class:`ElementType`, or None if it is not one."""
    if element_type is None:
        return None
    try:
        return ElementType(element_type)
    except ValueError:
        return None


def get_rule(element_type: Union[str, ElementType, None]) -> Optional[CardinalityRule]:
    """Look up the rule for a type tag.

    Returns None for unknown tags; callers must treat that as a rejection.
    """
    resolved = resolve_type(element_type)
    if resolved is None:
        return None
    return CARDINALITY_RULES[resolved]


def get_element_label(element_type: Union[str, ElementType]) -> str:
    """Display label for a type tag; unknown tags are returned unchanged."""
    resolved = resolve_type(element_type)
    if resolved is None:
        return str(element_type)
    return ELEMENT_LABELS[resolved]


def _bound_label(bound: Optional[int]) -> str:
    return UNBOUNDED_LABEL if bound is None else str(bound)


def get_connection_info(element_type: Union[str, ElementType]) -> ConnectionInfo:
    """Input/output bounds of a type formatted for display."""
    rule = get_rule(element_type)
    if rule is None:
        return ConnectionInfo(inputs=UNKNOWN_LABEL, outputs=UNKNOWN_LABEL)
    return ConnectionInfo(
        inputs=_bound_label(rule.max_inputs),
        outputs=_bound_label(rule.max_outputs),
    )
