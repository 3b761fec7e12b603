"""Tests for AccessResolver tiers and the PermissionCheck builder."""

from uuid import uuid4

import pytest

from canopy.config.constants import Roles
from canopy.core.exceptions import (
    MissingPermissionError,
    PermissionCheckError,
    PermissionDeniedError,
)
from canopy.core.value_objects import ContentId, NavigatorId, ResourceId
from canopy.features.access.entities import PermissionCheck, PermissionResult
from canopy.features.access.services import AccessResolver, OwnershipLookup
from canopy.features.permissions.repositories import MemoryPermissionCatalog


BLOCK = "content_block"


def check(navigator_id, permission, resource_id=None):
    builder = PermissionCheck.builder().navigator(navigator_id).permission(permission)
    if resource_id is not None:
        builder = builder.resource(BLOCK, resource_id)
    return builder.build()


class TestPermissionCheck:
    """Construction and validation of checks."""

    def test_builder(self, sample_navigator_id, sample_content_id):
        built = check(sample_navigator_id, "content_blocks:read", sample_content_id)

        assert built.navigator_id == sample_navigator_id
        assert built.resource_id == ResourceId(sample_content_id.value)
        assert built.has_resource
        assert built.describe_resource() == f"{BLOCK}:{sample_content_id}"

    def test_missing_permission(self, sample_navigator_id):
        with pytest.raises(MissingPermissionError):
            PermissionCheck.builder().navigator(sample_navigator_id).build()
        with pytest.raises(MissingPermissionError):
            PermissionCheck("")

    def test_resource_requires_type(self, sample_content_id):
        with pytest.raises(PermissionCheckError):
            PermissionCheck.builder().resource("", sample_content_id)

    def test_global_check_has_no_resource(self, sample_navigator_id):
        built = check(sample_navigator_id, "content_blocks:read:all")

        assert not built.has_resource
        assert built.describe_resource() is None

    def test_for_resource(self, sample_navigator_id, sample_content_id):
        other = ResourceId(uuid4())
        moved = check(sample_navigator_id, "content_blocks:read", sample_content_id).for_resource(other)

        assert moved.resource_id == other
        assert moved.resource_type == BLOCK
        assert moved.permission == "content_blocks:read"


class TestPermissionResult:
    """The closed result type."""

    def test_granted(self):
        assert PermissionResult.GRANTED_GLOBAL.granted
        assert PermissionResult.GRANTED_RESOURCE
        assert PermissionResult.GRANTED_OWNERSHIP
        assert not PermissionResult.DENIED
        assert PermissionResult("denied") is PermissionResult.DENIED


class TestTiers:
    """Each tier on its own."""

    @pytest.mark.asyncio
    async def test_no_navigator_is_denied(self, resolver, memory_catalog, chain):
        await memory_catalog.grant_resource_role(None, Roles.VIEWER, BLOCK, chain[0].id.as_resource())

        result = await resolver.check(check(None, "content_blocks:read", chain[0].id))

        assert result is PermissionResult.DENIED

    @pytest.mark.asyncio
    async def test_global(self, resolver, memory_catalog, sample_navigator_id):
        await memory_catalog.grant_global_role(sample_navigator_id, Roles.ADMIN)

        result = await resolver.check(check(sample_navigator_id, "content_blocks:read:all"))

        assert result is PermissionResult.GRANTED_GLOBAL

    @pytest.mark.asyncio
    async def test_resource(self, resolver, memory_catalog, sample_navigator_id, chain):
        mid = chain[1]
        await memory_catalog.grant_resource_role(sample_navigator_id, Roles.VIEWER, BLOCK, mid.id.as_resource())

        assert await resolver.check(check(sample_navigator_id, "content_blocks:read", mid.id)) is PermissionResult.GRANTED_RESOURCE
        assert await resolver.check(check(sample_navigator_id, "content_blocks:write", mid.id)) is PermissionResult.DENIED
        assert await resolver.check(check(sample_navigator_id, "content_blocks:read", chain[2].id)) is PermissionResult.DENIED

    @pytest.mark.asyncio
    async def test_ownership(self, resolver, memory_catalog, sample_navigator_id, chain):
        await memory_catalog.grant_global_role(sample_navigator_id, Roles.AUTHOR)

        result = await resolver.check(check(sample_navigator_id, "content_blocks:write:own", chain[2].id))

        assert result is PermissionResult.GRANTED_OWNERSHIP

    @pytest.mark.asyncio
    async def test_nothing_granted(self, resolver, sample_navigator_id, chain):
        result = await resolver.check(check(sample_navigator_id, "content_blocks:read", chain[0].id))

        assert result is PermissionResult.DENIED


class TestPrecedence:
    """Earlier tiers win."""

    @pytest.mark.asyncio
    async def test_global_beats_resource(self, sample_navigator_id, sample_content_id):
        catalog = MemoryPermissionCatalog({"admin": {"content:read:all"}, "viewer": {"content:read"}})
        resolver = AccessResolver(catalog)
        await catalog.grant_global_role(sample_navigator_id, "admin")
        await catalog.grant_resource_role(sample_navigator_id, "viewer", BLOCK, sample_content_id.as_resource())

        result = await resolver.check(check(sample_navigator_id, "content:read:all", sample_content_id))

        assert result is PermissionResult.GRANTED_GLOBAL

    @pytest.mark.asyncio
    async def test_same_permission_global_and_resource(self, resolver, memory_catalog, sample_navigator_id, chain):
        await memory_catalog.grant_global_role(sample_navigator_id, Roles.VIEWER)
        await memory_catalog.grant_resource_role(sample_navigator_id, Roles.VIEWER, BLOCK, chain[0].id.as_resource())

        result = await resolver.check(check(sample_navigator_id, "content_blocks:read", chain[0].id))

        assert result is PermissionResult.GRANTED_GLOBAL

    @pytest.mark.asyncio
    async def test_resource_beats_ownership(self, resolver, memory_catalog, sample_navigator_id, chain):
        root = chain[0]
        await memory_catalog.grant_global_role(sample_navigator_id, Roles.AUTHOR)
        memory_catalog.define_role("own_reader", {"content_blocks:read:own"})
        await memory_catalog.grant_resource_role(sample_navigator_id, "own_reader", BLOCK, root.id.as_resource())

        result = await resolver.check(check(sample_navigator_id, "content_blocks:read:own", root.id))

        assert result is PermissionResult.GRANTED_RESOURCE


class TestOwnershipRequiresBothFacts:
    """Owner plus global ``:own`` permission."""

    @pytest.mark.asyncio
    async def test_owner_without_permission(self, resolver, sample_navigator_id, chain):
        result = await resolver.check(check(sample_navigator_id, "content_blocks:read:own", chain[0].id))

        assert result is PermissionResult.DENIED

    @pytest.mark.asyncio
    async def test_permission_without_ownership(self, resolver, memory_catalog, chain):
        stranger = NavigatorId(uuid4())
        await memory_catalog.grant_global_role(stranger, Roles.AUTHOR)

        result = await resolver.check(check(stranger, "content_blocks:read:own", chain[0].id))

        assert result is PermissionResult.DENIED

    @pytest.mark.asyncio
    async def test_own_permission_without_resource_is_global(self, resolver, memory_catalog, sample_navigator_id):
        await memory_catalog.grant_global_role(sample_navigator_id, Roles.AUTHOR)

        result = await resolver.check(check(sample_navigator_id, "content_blocks:read:own"))

        assert result is PermissionResult.GRANTED_GLOBAL

    @pytest.mark.asyncio
    async def test_ownership_of_other_resource_type(self, resolver, memory_catalog, sample_navigator_id, chain):
        await memory_catalog.grant_global_role(sample_navigator_id, Roles.AUTHOR)
        built = (
            PermissionCheck.builder()
            .navigator(sample_navigator_id)
            .permission("content_blocks:read:own")
            .resource("workspace", chain[0].id)
            .build()
        )

        assert await resolver.check(built) is PermissionResult.DENIED

    @pytest.mark.asyncio
    async def test_without_ownership_lookup(self, memory_catalog, sample_navigator_id, chain):
        await memory_catalog.grant_global_role(sample_navigator_id, Roles.AUTHOR)
        resolver = AccessResolver(memory_catalog)

        result = await resolver.check(check(sample_navigator_id, "content_blocks:read:own", chain[0].id))

        assert result is PermissionResult.DENIED

    @pytest.mark.asyncio
    async def test_custom_lookup(self, memory_catalog, sample_navigator_id, mocker):
        lookup = mocker.AsyncMock(spec=OwnershipLookup)
        lookup.is_owner.return_value = True
        resolver = AccessResolver(memory_catalog, lookup)
        await memory_catalog.grant_global_role(sample_navigator_id, Roles.AUTHOR)
        resource = ContentId(uuid4())

        result = await resolver.check(check(sample_navigator_id, "content_blocks:write:own", resource))

        assert result is PermissionResult.GRANTED_OWNERSHIP
        lookup.is_owner.assert_awaited_once_with(sample_navigator_id, BLOCK, resource.as_resource())


class TestRequire:
    """Raising helpers."""

    @pytest.mark.asyncio
    async def test_require_denied(self, resolver, sample_navigator_id, sample_content_id):
        with pytest.raises(PermissionDeniedError) as exc_info:
            await resolver.require(check(sample_navigator_id, "content_blocks:read", sample_content_id))

        error = exc_info.value
        assert error.navigator_id == str(sample_navigator_id)
        assert error.permission == "content_blocks:read"
        assert error.resource == f"{BLOCK}:{sample_content_id}"

    @pytest.mark.asyncio
    async def test_require_granted(self, resolver, memory_catalog, sample_navigator_id):
        await memory_catalog.grant_global_role(sample_navigator_id, Roles.ADMIN)

        result = await resolver.require(check(sample_navigator_id, "content_blocks:write:all"))

        assert result is PermissionResult.GRANTED_GLOBAL

    @pytest.mark.asyncio
    async def test_on_helpers(self, resolver, memory_catalog, sample_navigator_id, chain):
        resource = chain[0].id.as_resource()
        await memory_catalog.grant_resource_role(sample_navigator_id, Roles.EDITOR, BLOCK, resource)

        assert await resolver.can_on(sample_navigator_id, "content_blocks:write", BLOCK, resource)
        assert not await resolver.can_on(sample_navigator_id, "content_blocks:write")
        assert await resolver.require_on(sample_navigator_id, "content_blocks:read", BLOCK, resource) is PermissionResult.GRANTED_RESOURCE
        with pytest.raises(PermissionDeniedError):
            await resolver.require_on(None, "content_blocks:read", BLOCK, resource)
