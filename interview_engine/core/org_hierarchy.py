"""Company org hierarchy and role path building.

business unit → region → site → asset group → work group → role
"""

from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from enum import Enum
from typing import Any


class OrgLevel(str, Enum):
    BUSINESS_UNIT = "business_unit"
    REGION = "region"
    SITE = "site"
    ASSET_GROUP = "asset_group"
    WORK_GROUP = "work_group"


# Each level's parent level and the foreign key column pointing at it
PARENT_LINKS: dict[OrgLevel, tuple[OrgLevel, str]] = {
    OrgLevel.WORK_GROUP: (OrgLevel.ASSET_GROUP, "asset_group_id"),
    OrgLevel.ASSET_GROUP: (OrgLevel.SITE, "site_id"),
    OrgLevel.SITE: (OrgLevel.REGION, "region_id"),
    OrgLevel.REGION: (OrgLevel.BUSINESS_UNIT, "business_unit_id"),
}

MAX_PATH_DEPTH = len(OrgLevel)

PATH_SEPARATOR = " > "


@dataclass(frozen=True)
class OrgNode:
    level: OrgLevel
    id: int
    name: str
    parent_id: int | None = None

    @property
    def parent_level(self) -> OrgLevel | None:
        link = PARENT_LINKS.get(self.level)
        return link[0] if link else None


class OrgHierarchy:
    """Adjacency structure over one company's org nodes."""

    def __init__(self, nodes: Iterable[OrgNode] = ()):
        self._nodes: dict[tuple[OrgLevel, int], OrgNode] = {}
        for node in nodes:
            self.add(node)

    def add(self, node: OrgNode) -> None:
        self._nodes[(node.level, node.id)] = node

    def get(self, level: OrgLevel, node_id: int | None) -> OrgNode | None:
        if node_id is None:
            return None
        return self._nodes.get((level, node_id))

    def __len__(self) -> int:
        return len(self._nodes)

    @classmethod
    def from_rows(cls, rows_by_level: Mapping[OrgLevel, Iterable[Mapping[str, Any]]]) -> "OrgHierarchy":
        """Build from raw table rows keyed by level."""
        hierarchy = cls()
        for level, rows in rows_by_level.items():
            link = PARENT_LINKS.get(level)
            for row in rows:
                hierarchy.add(
                    OrgNode(
                        level=level,
                        id=row["id"],
                        name=row.get("name") or "",
                        parent_id=row.get(link[1]) if link else None,
                    )
                )
        return hierarchy

    def ancestor_nodes(
        self, work_group_id: int | None, max_depth: int = MAX_PATH_DEPTH
    ) -> list[OrgNode]:
        """
        Nodes from the top of the hierarchy down to a work group.

        Walking stops at the first missing node, so a work group whose asset
        group is gone still yields itself.
        """
        nodes: list[OrgNode] = []
        node = self.get(OrgLevel.WORK_GROUP, work_group_id)
        while node is not None and len(nodes) < max_depth:
            nodes.append(node)
            parent_level = node.parent_level
            node = self.get(parent_level, node.parent_id) if parent_level else None
        nodes.reverse()
        return nodes

    def ancestors(self, work_group_id: int | None, max_depth: int = MAX_PATH_DEPTH) -> list[str]:
        """Non-empty names from the top of the hierarchy down to a work group."""
        return [n.name for n in self.ancestor_nodes(work_group_id, max_depth) if n.name]

    def build_role_path(self, work_group_id: int | None) -> str:
        return PATH_SEPARATOR.join(self.ancestors(work_group_id))
