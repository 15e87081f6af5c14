"""Tests for interview_engine.core.org_hierarchy."""

from interview_engine.core.org_hierarchy import OrgHierarchy, OrgLevel, OrgNode


def _rows() -> dict:
    return {
        OrgLevel.BUSINESS_UNIT: [{"id": 1, "name": "North America"}],
        OrgLevel.REGION: [{"id": 2, "name": "West", "business_unit_id": 1}],
        OrgLevel.SITE: [{"id": 3, "name": "Plant A", "region_id": 2}],
        OrgLevel.ASSET_GROUP: [
            {"id": 4, "name": "Line 1", "site_id": 3},
            {"id": 5, "name": "Orphaned Line", "site_id": 99},
        ],
        OrgLevel.WORK_GROUP: [
            {"id": 6, "name": "Maintenance", "asset_group_id": 4},
            {"id": 7, "name": "Night Shift", "asset_group_id": 5},
            {"id": 8, "name": "Loose", "asset_group_id": None},
        ],
    }


class TestOrgHierarchy:
    def test_from_rows_links_parents(self):
        hierarchy = OrgHierarchy.from_rows(_rows())

        assert len(hierarchy) == 8
        node = hierarchy.get(OrgLevel.SITE, 3)
        assert node.parent_id == 2
        assert node.parent_level == OrgLevel.REGION
        assert hierarchy.get(OrgLevel.BUSINESS_UNIT, 1).parent_level is None

    def test_full_path(self):
        hierarchy = OrgHierarchy.from_rows(_rows())

        assert hierarchy.ancestors(6) == ["North America", "West", "Plant A", "Line 1", "Maintenance"]
        assert hierarchy.build_role_path(6) == "North America > West > Plant A > Line 1 > Maintenance"

    def test_missing_link_truncates_path(self):
        hierarchy = OrgHierarchy.from_rows(_rows())

        assert hierarchy.build_role_path(7) == "Orphaned Line > Night Shift"
        assert hierarchy.build_role_path(8) == "Loose"

    def test_unknown_or_missing_work_group(self):
        hierarchy = OrgHierarchy.from_rows(_rows())

        assert hierarchy.ancestors(None) == []
        assert hierarchy.build_role_path(404) == ""

    def test_depth_is_bounded(self):
        hierarchy = OrgHierarchy.from_rows(_rows())

        assert hierarchy.ancestors(6, max_depth=2) == ["Line 1", "Maintenance"]

    def test_unnamed_nodes_are_skipped(self):
        hierarchy = OrgHierarchy(
            [
                OrgNode(OrgLevel.ASSET_GROUP, 1, ""),
                OrgNode(OrgLevel.WORK_GROUP, 2, "Crew", parent_id=1),
            ]
        )

        assert hierarchy.build_role_path(2) == "Crew"

    def test_ancestor_nodes_root_first(self):
        hierarchy = OrgHierarchy.from_rows(_rows())

        nodes = hierarchy.ancestor_nodes(6)

        assert [n.level for n in nodes] == [
            OrgLevel.BUSINESS_UNIT,
            OrgLevel.REGION,
            OrgLevel.SITE,
            OrgLevel.ASSET_GROUP,
            OrgLevel.WORK_GROUP,
        ]
        assert [n.id for n in hierarchy.ancestor_nodes(7)] == [5, 7]
