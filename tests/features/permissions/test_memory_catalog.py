"""Tests for MemoryPermissionCatalog."""

from uuid import uuid4

import pytest

from canopy.config.constants import DEFAULT_ROLE_PERMISSIONS, Roles
from canopy.core.exceptions import CatalogError
from canopy.core.value_objects import NavigatorId, ResourceId
from canopy.features.permissions.entities import PermissionCatalog
from canopy.features.permissions.repositories import MemoryPermissionCatalog


RESOURCE_TYPE = "content_block"


@pytest.fixture
def resource_id():
    return ResourceId(uuid4())


class TestCatalogData:
    """Static role data."""

    def test_satisfies_protocol(self, memory_catalog):
        assert isinstance(memory_catalog, PermissionCatalog)

    @pytest.mark.asyncio
    async def test_seeded_roles(self, memory_catalog):
        for role_name, permissions in DEFAULT_ROLE_PERMISSIONS.items():
            assert await memory_catalog.get_role_permissions(role_name) == set(permissions)

    @pytest.mark.asyncio
    async def test_unknown_role_has_no_permissions(self, memory_catalog):
        assert await memory_catalog.get_role_permissions("ghost") == set()

    @pytest.mark.asyncio
    async def test_custom_roles(self):
        catalog = MemoryPermissionCatalog({"admin": {"content:read:all"}})
        catalog.define_role("viewer", ["content:read"], "Read only")

        assert await catalog.get_role_permissions("viewer") == {"content:read"}
        assert await catalog.get_role_permissions(Roles.EDITOR) == set()


class TestGlobalRoles:
    """Global assignments."""

    @pytest.mark.asyncio
    async def test_grant_is_idempotent(self, memory_catalog, sample_navigator_id):
        assert await memory_catalog.grant_global_role(sample_navigator_id, Roles.ADMIN) is True
        assert await memory_catalog.grant_global_role(sample_navigator_id, Roles.ADMIN) is False

        roles = await memory_catalog.get_navigator_roles(sample_navigator_id)
        assert [r.role_name for r in roles] == [Roles.ADMIN]

    @pytest.mark.asyncio
    async def test_permissions_are_union_of_roles(self, memory_catalog, sample_navigator_id):
        await memory_catalog.grant_global_role(sample_navigator_id, Roles.VIEWER)
        await memory_catalog.grant_global_role(sample_navigator_id, Roles.AUTHOR)

        assert await memory_catalog.get_navigator_permissions(sample_navigator_id) == {
            "content_blocks:read",
            "content_blocks:read:own",
            "content_blocks:write:own",
        }
        assert await memory_catalog.has_global_permission(sample_navigator_id, "content_blocks:write:own")
        assert not await memory_catalog.has_global_permission(sample_navigator_id, "content_blocks:write")

    @pytest.mark.asyncio
    async def test_revoke(self, memory_catalog, sample_navigator_id):
        await memory_catalog.grant_global_role(sample_navigator_id, Roles.ADMIN)

        assert await memory_catalog.revoke_global_role(sample_navigator_id, Roles.ADMIN) is True
        assert await memory_catalog.revoke_global_role(sample_navigator_id, Roles.ADMIN) is False
        assert not await memory_catalog.has_global_permission(sample_navigator_id, "content_blocks:read:all")

    @pytest.mark.asyncio
    async def test_grant_unknown_role(self, memory_catalog, sample_navigator_id):
        with pytest.raises(CatalogError) as exc_info:
            await memory_catalog.grant_global_role(sample_navigator_id, "ghost")
        assert exc_info.value.details["role_name"] == "ghost"


class TestResourceRoles:
    """Resource-scoped assignments."""

    @pytest.mark.asyncio
    async def test_grant_applies_to_exact_resource_only(self, memory_catalog, sample_navigator_id, resource_id):
        await memory_catalog.grant_resource_role(sample_navigator_id, Roles.VIEWER, RESOURCE_TYPE, resource_id)

        assert await memory_catalog.has_resource_permission(
            sample_navigator_id, "content_blocks:read", RESOURCE_TYPE, resource_id
        )
        assert not await memory_catalog.has_resource_permission(
            sample_navigator_id, "content_blocks:read", RESOURCE_TYPE, ResourceId(uuid4())
        )
        assert not await memory_catalog.has_resource_permission(
            sample_navigator_id, "content_blocks:read", "other_type", resource_id
        )
        assert not await memory_catalog.has_global_permission(sample_navigator_id, "content_blocks:read")

    @pytest.mark.asyncio
    async def test_grant_is_idempotent(self, memory_catalog, sample_navigator_id, resource_id):
        assert await memory_catalog.grant_resource_role(sample_navigator_id, Roles.EDITOR, RESOURCE_TYPE, resource_id)
        assert not await memory_catalog.grant_resource_role(sample_navigator_id, Roles.EDITOR, RESOURCE_TYPE, resource_id)

        assert len(await memory_catalog.get_navigator_resource_roles(sample_navigator_id)) == 1

    @pytest.mark.asyncio
    async def test_anonymous_grant(self, memory_catalog, sample_navigator_id, resource_id):
        await memory_catalog.grant_resource_role(None, Roles.VIEWER, RESOURCE_TYPE, resource_id)

        assert await memory_catalog.has_resource_permission(None, "content_blocks:read", RESOURCE_TYPE, resource_id)
        assert not await memory_catalog.has_resource_permission(
            sample_navigator_id, "content_blocks:read", RESOURCE_TYPE, resource_id
        )
        [assignment] = await memory_catalog.get_navigator_resource_roles(None)
        assert assignment.is_anonymous

    @pytest.mark.asyncio
    async def test_filtering(self, memory_catalog, sample_navigator_id, resource_id):
        other = ResourceId(uuid4())
        await memory_catalog.grant_resource_role(sample_navigator_id, Roles.VIEWER, RESOURCE_TYPE, resource_id)
        await memory_catalog.grant_resource_role(sample_navigator_id, Roles.EDITOR, RESOURCE_TYPE, other)

        assert len(await memory_catalog.get_navigator_resource_roles(sample_navigator_id, RESOURCE_TYPE)) == 2
        [only] = await memory_catalog.get_navigator_resource_roles(sample_navigator_id, RESOURCE_TYPE, other)
        assert only.role_name == Roles.EDITOR
        assert await memory_catalog.get_navigator_resource_roles(NavigatorId(uuid4())) == []

    @pytest.mark.asyncio
    async def test_revoke(self, memory_catalog, sample_navigator_id, resource_id):
        await memory_catalog.grant_resource_role(sample_navigator_id, Roles.VIEWER, RESOURCE_TYPE, resource_id)

        assert await memory_catalog.revoke_resource_role(sample_navigator_id, Roles.VIEWER, RESOURCE_TYPE, resource_id)
        assert not await memory_catalog.revoke_resource_role(sample_navigator_id, Roles.VIEWER, RESOURCE_TYPE, resource_id)
        assert not await memory_catalog.has_resource_permission(
            sample_navigator_id, "content_blocks:read", RESOURCE_TYPE, resource_id
        )

    @pytest.mark.asyncio
    async def test_grant_unknown_role(self, memory_catalog, sample_navigator_id, resource_id):
        with pytest.raises(CatalogError):
            await memory_catalog.grant_resource_role(sample_navigator_id, "ghost", RESOURCE_TYPE, resource_id)
