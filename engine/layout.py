"""
Layout Engine

Pure geometry for drawing a bracket. Rounds are columns; first-round
matches are stacked with a fixed gap and every later match is centred
between the two matches feeding it. Connectors are right-angle paths from
a match's right edge to its slot on the parent's left edge.

Nothing here touches a graphics library, so the same layout drives the
on-screen widget, PNG rasterisation and the PDF export.
"""

from dataclasses import dataclass
from typing import Optional

from engine.bracket import Bracket, Side


@dataclass(frozen=True)
class LayoutDimensions:
    """Sizes in layout units (pixels on screen, points in PDF)."""
    match_width: float = 220
    match_height: float = 84
    round_gap_x: float = 70
    match_gap_y: float = 22

    def __post_init__(self):
        if self.match_width <= 0 or self.match_height <= 0:
            raise ValueError("Match width and height must be positive")
        if self.round_gap_x < 0 or self.match_gap_y < 0:
            raise ValueError("Gaps cannot be negative")


@dataclass(frozen=True)
class LayoutNode:
    """Rectangle occupied by one match."""
    match_id: int
    round_number: int
    match_number: int
    x: float
    y: float
    width: float
    height: float

    @property
    def right(self) -> float:
        return self.x + self.width

    @property
    def bottom(self) -> float:
        return self.y + self.height

    @property
    def center_y(self) -> float:
        return self.y + self.height / 2

    def slot_y(self, side: Side) -> float:
        """Vertical centre of the home (upper) or away (lower) half."""
        if side is Side.HOME:
            return self.y + self.height / 4
        return self.y + self.height * 3 / 4


@dataclass(frozen=True)
class Connector:
    """Orthogonal path from a match to the slot it feeds."""
    from_match_id: int
    to_match_id: int
    side: Side
    points: tuple[tuple[float, float], ...]

    @property
    def mid_x(self) -> float:
        return self.points[1][0]

    def svg_path(self) -> str:
        head, *rest = self.points
        return f"M {head[0]:g} {head[1]:g} " + " ".join(f"L {x:g} {y:g}" for x, y in rest)


@dataclass(frozen=True)
class BracketLayout:
    width: float
    height: float
    nodes: tuple[LayoutNode, ...]
    connectors: tuple[Connector, ...]

    def node_for(self, match_id: int) -> Optional[LayoutNode]:
        for node in self.nodes:
            if node.match_id == match_id:
                return node
        return None


def layout(
    bracket: Bracket,
    match_width: float = 220,
    match_height: float = 84,
    round_gap_x: float = 70,
    match_gap_y: float = 22,
) -> BracketLayout:
    """Compute node rectangles, connectors and the overall size for ``bracket``."""
    dims = LayoutDimensions(match_width, match_height, round_gap_x, match_gap_y)
    pitch = dims.match_height + dims.match_gap_y

    nodes: dict[tuple[int, int], LayoutNode] = {}
    ordered: list[LayoutNode] = []

    for rnd in bracket.rounds:
        x = (rnd.round_number - 1) * (dims.match_width + dims.round_gap_x)
        # Fallback spacing for a match whose feeders are missing
        spacing = pitch * (2 ** (rnd.round_number - 1))

        for index, match in enumerate(sorted(rnd.matches, key=lambda m: m.match_number)):
            if rnd.round_number == 1:
                y = (match.match_number - 1) * pitch
            else:
                feeders = [
                    nodes[(rnd.round_number - 1, number)]
                    for number in (match.match_number * 2 - 1, match.match_number * 2)
                    if (rnd.round_number - 1, number) in nodes
                ]
                if feeders:
                    center = sum(n.center_y for n in feeders) / len(feeders)
                    y = center - dims.match_height / 2
                else:
                    y = index * spacing + (spacing - dims.match_height) / 2

            node = LayoutNode(
                match_id=match.id,
                round_number=match.round_number,
                match_number=match.match_number,
                x=x,
                y=y,
                width=dims.match_width,
                height=dims.match_height,
            )
            nodes[(match.round_number, match.match_number)] = node
            ordered.append(node)

    connectors = []
    for node in ordered:
        match = bracket.get_match(node.match_id)
        parent, side = bracket.parent_slot(match)
        if parent is None:
            continue
        target = nodes[(parent.round_number, parent.match_number)]

        x1, y1 = node.right, node.center_y
        mid_x = x1 + dims.round_gap_x / 2
        y2 = target.slot_y(side)
        connectors.append(Connector(
            from_match_id=node.match_id,
            to_match_id=target.match_id,
            side=side,
            points=((x1, y1), (mid_x, y1), (mid_x, y2), (target.x, y2)),
        ))

    width = max((n.right for n in ordered), default=0) + dims.match_width
    height = max((n.bottom for n in ordered), default=0) + dims.match_height

    return BracketLayout(
        width=width,
        height=height,
        nodes=tuple(ordered),
        connectors=tuple(connectors),
    )
