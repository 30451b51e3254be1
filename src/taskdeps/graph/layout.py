# src/taskdeps/graph/layout.py

from __future__ import annotations

"""
Hierarchical layout for the dependency graph screen.

Each level is a row, centred horizontally; connections run from the bottom centre of
the prerequisite box to the top centre of the dependent box. Nothing here is persisted.
"""

from dataclasses import dataclass, field

from .assembler import GraphEdge, GraphNode


@dataclass(frozen=True, slots=True)
class LayoutMetrics:
    node_width: float
    node_height: float
    level_height: float
    node_spacing: float

    @classmethod
    def for_mode(cls, compact: bool) -> LayoutMetrics:
        if compact:
            return cls(node_width=120, node_height=60, level_height=100, node_spacing=20)
        return cls(node_width=160, node_height=80, level_height=120, node_spacing=30)


@dataclass(frozen=True, slots=True)
class PositionedNode:
    node: GraphNode
    x: float  # centre
    y: float  # centre


@dataclass(frozen=True, slots=True)
class Connection:
    id: str
    from_node_id: str
    to_node_id: str
    from_x: float
    from_y: float
    to_x: float
    to_y: float


@dataclass(slots=True)
class GraphLayout:
    nodes: list[PositionedNode] = field(default_factory=list)
    edges: list[GraphEdge] = field(default_factory=list)
    connections: list[Connection] = field(default_factory=list)
    width: float = 0
    height: float = 0
    node_width: float = 160
    node_height: float = 80


# Margin kept on each side of the viewport.
_VIEWPORT_MARGIN = 40
_TOP_PADDING = 20


def compute_layout(
    levels: list[list[GraphNode]],
    edges: list[GraphEdge],
    *,
    viewport_width: float = 0,
    compact: bool = False,
) -> GraphLayout:
    if not levels:
        return GraphLayout()

    m = LayoutMetrics.for_mode(compact)

    max_nodes_in_level = max(len(level) for level in levels)
    width = max(viewport_width - _VIEWPORT_MARGIN, max_nodes_in_level * (m.node_width + m.node_spacing))
    height = len(levels) * m.level_height

    positioned: dict[str, PositionedNode] = {}
    for level_index, level in enumerate(levels):
        level_width = len(level) * m.node_width + (len(level) - 1) * m.node_spacing
        start_x = (width - level_width) / 2
        y = level_index * m.level_height + _TOP_PADDING

        for node_index, node in enumerate(level):
            x = start_x + node_index * (m.node_width + m.node_spacing)
            positioned[node.id] = PositionedNode(
                node=node,
                x=x + m.node_width / 2,
                y=y + m.node_height / 2,
            )

    connections: list[Connection] = []
    for edge in edges:
        src = positioned.get(edge.from_id)
        dst = positioned.get(edge.to_id)
        if src is None or dst is None:
            continue
        connections.append(
            Connection(
                id=f"{edge.from_id}-{edge.to_id}",
                from_node_id=edge.from_id,
                to_node_id=edge.to_id,
                from_x=src.x,
                from_y=src.y + m.node_height / 2,
                to_x=dst.x,
                to_y=dst.y - m.node_height / 2,
            )
        )

    return GraphLayout(
        nodes=list(positioned.values()),
        edges=list(edges),
        connections=connections,
        width=width,
        height=height,
        node_width=m.node_width,
        node_height=m.node_height,
    )
