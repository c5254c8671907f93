"""
City layout for a namespace tree.

Each namespace below the root becomes a platform ("district") and each type
record a building standing on its namespace's position. Children and records
are laid out on roughly square grids around their parent's centre, and every
footprint is clamped so degenerate metrics never yield empty or unbounded
boxes. The whole computation is a pure function of the tree.
"""

import math
from typing import List, Tuple

from phpcity.config import (
    BUILDING_BASE_OFFSET,
    BUILDING_COLORS,
    BUILDING_DEPTH_BASE,
    BUILDING_DEPTH_PER_LINE,
    BUILDING_HEIGHT_PER_LINE,
    BUILDING_HEIGHT_PER_METHOD,
    BUILDING_MAX_DEPTH,
    BUILDING_MAX_HEIGHT,
    BUILDING_MAX_WIDTH,
    BUILDING_MIN_DEPTH,
    BUILDING_MIN_HEIGHT,
    BUILDING_MIN_WIDTH,
    BUILDING_SPACING,
    BUILDING_WIDTH_BASE,
    BUILDING_WIDTH_PER_ATTR,
    CAMERA_DISTANCE_FACTOR,
    CAMERA_MIN_DISTANCE,
    CAMERA_OFFSET,
    CITY_MIN_SIZE,
    CITY_SIZE_PER_BREADTH,
    CITY_SIZE_PER_DEPTH,
    DISTRICT_LABEL_BASE_FONT_SIZE,
    DISTRICT_LABEL_BASE_Y,
    DISTRICT_LABEL_COLOR,
    DISTRICT_LABEL_FONT_SIZE_PER_LEVEL,
    DISTRICT_LABEL_Y_PER_LEVEL,
    DISTRICT_MIN_SPACING,
    DISTRICT_SPACING_BASE,
    DISTRICT_SPACING_PER_LEVEL,
    PLATFORM_BASE_HEIGHT,
    PLATFORM_COLORS,
    PLATFORM_HEIGHT_PER_LEVEL,
    PLATFORM_MAX_SIZE,
    PLATFORM_MIN_SIZE,
    PLATFORM_SIZE_BASE,
    PLATFORM_SIZE_PER_RECORD,
    RECORDS_LABEL_BASE_Y,
    RECORDS_LABEL_COLOR,
    RECORDS_LABEL_FONT_SIZE,
    RECORDS_LABEL_Y_PER_LEVEL,
)
from phpcity.models import (
    BuildingPlacement,
    CameraFraming,
    Footprint,
    LayoutResult,
    NamespaceLabel,
    NamespaceNode,
    PlatformPlacement,
    TypeMetrics,
    Vec3,
)
from phpcity.services.hierarchy import max_breadth, max_depth

Geometry = Tuple[List[BuildingPlacement], List[PlatformPlacement], List[NamespaceLabel]]


def clamp(value: float, lower: float, upper: float) -> float:
    return max(lower, min(upper, value))


def grid_offsets(count: int, spacing: float) -> List[Tuple[float, float]]:
    """(x, z) offsets of `count` cells on a square grid centred on the origin."""
    if count <= 0:
        return []
    side = math.ceil(math.sqrt(count))
    offsets = []
    for index in range(count):
        row = index // side
        col = index % side
        offsets.append(((col - side / 2) * spacing, (row - side / 2) * spacing))
    return offsets


def building_footprint(record: TypeMetrics) -> Footprint:
    # Wider with more attributes, deeper with more lines, taller with both
    # lines and methods.
    width = clamp(
        record.attribute_count * BUILDING_WIDTH_PER_ATTR + BUILDING_WIDTH_BASE,
        BUILDING_MIN_WIDTH,
        BUILDING_MAX_WIDTH,
    )
    height = clamp(
        record.line_span * BUILDING_HEIGHT_PER_LINE + record.method_count * BUILDING_HEIGHT_PER_METHOD,
        BUILDING_MIN_HEIGHT,
        BUILDING_MAX_HEIGHT,
    )
    depth = clamp(
        record.line_span * BUILDING_DEPTH_PER_LINE + BUILDING_DEPTH_BASE,
        BUILDING_MIN_DEPTH,
        BUILDING_MAX_DEPTH,
    )
    return Footprint(width=width, height=height, depth=depth)


def platform_size(record_count: int) -> float:
    return clamp(
        PLATFORM_SIZE_BASE + record_count * PLATFORM_SIZE_PER_RECORD,
        PLATFORM_MIN_SIZE,
        PLATFORM_MAX_SIZE,
    )


def district_spacing(level: int) -> float:
    """Spacing between child platforms of a node at `level`; grows with depth."""
    return max(DISTRICT_MIN_SPACING, DISTRICT_SPACING_BASE + level * DISTRICT_SPACING_PER_LEVEL)


def platform_color(level: int) -> str:
    return PLATFORM_COLORS[min(level, len(PLATFORM_COLORS) - 1)]


def camera_framing(root: NamespaceNode) -> CameraFraming:
    depth = max_depth(root)
    breadth = max_breadth(root)
    city_size = max(CITY_MIN_SIZE, breadth * CITY_SIZE_PER_BREADTH + depth * CITY_SIZE_PER_DEPTH)
    distance = max(city_size * CAMERA_DISTANCE_FACTOR, CAMERA_MIN_DISTANCE)
    offset_x, offset_y, offset_z = CAMERA_OFFSET

    return CameraFraming(
        max_depth=depth,
        max_breadth=breadth,
        city_size=city_size,
        distance=distance,
        position=Vec3(x=distance * offset_x, y=distance * offset_y, z=distance * offset_z),
        look_at=Vec3(),
    )


def compute_layout(root: NamespaceNode) -> LayoutResult:
    """
    Lay out the whole tree starting at the origin. An empty tree yields no
    geometry and the minimum camera framing.
    """
    buildings, platforms, labels = _place_node(root, 0.0, 0.0, 0)
    return LayoutResult(
        buildings=buildings,
        platforms=platforms,
        labels=labels,
        camera=camera_framing(root),
    )


def _place_node(node: NamespaceNode, base_x: float, base_z: float, level: int) -> Geometry:
    buildings: List[BuildingPlacement] = []
    platforms: List[PlatformPlacement] = []
    labels: List[NamespaceLabel] = []
    is_root = level == 0

    if node.records and not is_root:
        buildings.extend(_place_records(node, base_x, base_z))
        labels.append(
            NamespaceLabel(
                text=node.name,
                full_path=node.full_path,
                kind="records",
                position=Vec3(x=base_x, y=RECORDS_LABEL_BASE_Y + level * RECORDS_LABEL_Y_PER_LEVEL, z=base_z),
                font_size=RECORDS_LABEL_FONT_SIZE,
                color=RECORDS_LABEL_COLOR,
            )
        )

    if node.children:
        children = list(node.children.values())
        offsets = grid_offsets(len(children), district_spacing(level))

        for child, (offset_x, offset_z) in zip(children, offsets):
            child_x = base_x + offset_x
            child_z = base_z + offset_z
            platforms.append(_platform(child, child_x, child_z, level))

            child_buildings, child_platforms, child_labels = _place_node(child, child_x, child_z, level + 1)
            buildings.extend(child_buildings)
            platforms.extend(child_platforms)
            labels.extend(child_labels)

        if not is_root:
            labels.append(
                NamespaceLabel(
                    text=node.name,
                    full_path=node.full_path,
                    kind="district",
                    position=Vec3(x=base_x, y=DISTRICT_LABEL_BASE_Y + level * DISTRICT_LABEL_Y_PER_LEVEL, z=base_z),
                    font_size=DISTRICT_LABEL_BASE_FONT_SIZE + level * DISTRICT_LABEL_FONT_SIZE_PER_LEVEL,
                    color=DISTRICT_LABEL_COLOR,
                )
            )

    return buildings, platforms, labels


def _place_records(node: NamespaceNode, base_x: float, base_z: float) -> List[BuildingPlacement]:
    placements = []
    offsets = grid_offsets(len(node.records), BUILDING_SPACING)

    for record, (offset_x, offset_z) in zip(node.records, offsets):
        footprint = building_footprint(record)
        style = record.style
        placements.append(
            BuildingPlacement(
                record=record,
                namespace_path=node.full_path,
                position=Vec3(
                    x=base_x + offset_x,
                    y=footprint.height / 2 + BUILDING_BASE_OFFSET,
                    z=base_z + offset_z,
                ),
                footprint=footprint,
                style=style,
                color=BUILDING_COLORS[style],
            )
        )

    return placements


def _platform(child: NamespaceNode, x: float, z: float, level: int) -> PlatformPlacement:
    # `level` is the depth of the parent being laid out.
    height = PLATFORM_BASE_HEIGHT + level * PLATFORM_HEIGHT_PER_LEVEL
    return PlatformPlacement(
        name=child.name,
        full_path=child.full_path,
        level=level + 1,
        record_count=len(child.records),
        position=Vec3(x=x, y=height / 2, z=z),
        size=platform_size(len(child.records)),
        height=height,
        color=platform_color(level),
    )
