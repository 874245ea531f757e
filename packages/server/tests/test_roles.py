"""
Unit tests for the role model: priority tables and comparisons.
"""

from __future__ import annotations

import pytest

from taskboard_shared.schemas.common import (
    ACCESS_LEVEL_MIN_PROJECT_ROLE,
    ORG_ROLE_PRIORITY,
    PROJECT_ROLE_PRIORITY,
    AccessLevel,
    OrgRole,
    ProjectRole,
    org_role_at_least,
    project_role_at_least,
)


class TestPriorityTables:

    def test_org_role_order(self):
        assert ORG_ROLE_PRIORITY[OrgRole.MEMBER] < ORG_ROLE_PRIORITY[OrgRole.ADMIN]
        assert ORG_ROLE_PRIORITY[OrgRole.ADMIN] < ORG_ROLE_PRIORITY[OrgRole.OWNER]

    def test_project_role_order(self):
        assert PROJECT_ROLE_PRIORITY[ProjectRole.MEMBER] < PROJECT_ROLE_PRIORITY[ProjectRole.LEAD]

    def test_every_role_has_a_priority(self):
        assert set(ORG_ROLE_PRIORITY) == set(OrgRole)
        assert set(PROJECT_ROLE_PRIORITY) == set(ProjectRole)
        assert set(ACCESS_LEVEL_MIN_PROJECT_ROLE) == set(AccessLevel)

    def test_access_level_requirements(self):
        assert ACCESS_LEVEL_MIN_PROJECT_ROLE[AccessLevel.VIEW] == ProjectRole.MEMBER
        assert ACCESS_LEVEL_MIN_PROJECT_ROLE[AccessLevel.EDIT] == ProjectRole.LEAD
        assert ACCESS_LEVEL_MIN_PROJECT_ROLE[AccessLevel.ADMIN] == ProjectRole.LEAD

    def test_tables_are_read_only(self):
        with pytest.raises(TypeError):
            ORG_ROLE_PRIORITY[OrgRole.MEMBER] = 99  # type: ignore[index]
        with pytest.raises(TypeError):
            ACCESS_LEVEL_MIN_PROJECT_ROLE[AccessLevel.EDIT] = ProjectRole.MEMBER  # type: ignore[index]


class TestComparisons:

    @pytest.mark.parametrize("minimum", list(OrgRole))
    def test_none_never_satisfies(self, minimum):
        assert not org_role_at_least(None, minimum)

    def test_org_monotonicity(self):
        """A role that meets a minimum meets every lower minimum too."""
        for role in OrgRole:
            for minimum in OrgRole:
                if org_role_at_least(role, minimum):
                    for lower in OrgRole:
                        if ORG_ROLE_PRIORITY[lower] <= ORG_ROLE_PRIORITY[minimum]:
                            assert org_role_at_least(role, lower)

    def test_project_comparisons(self):
        assert project_role_at_least(ProjectRole.LEAD, ProjectRole.MEMBER)
        assert not project_role_at_least(ProjectRole.MEMBER, ProjectRole.LEAD)
        assert not project_role_at_least(None, ProjectRole.MEMBER)

    def test_roles_parse_from_strings(self):
        assert OrgRole("owner") is OrgRole.OWNER
        assert AccessLevel("edit") is AccessLevel.EDIT
