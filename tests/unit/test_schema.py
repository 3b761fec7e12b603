"""Tests for schema DDL and catalog seeding."""

import asyncpg
import pytest

from canopy.config.constants import DEFAULT_PERMISSIONS, DEFAULT_ROLE_PERMISSIONS
from canopy.core.exceptions import PersistenceError
from canopy.database import auth_schema_sql, content_schema_sql, create_schema, seed_rows


class TestDDL:
    """Generated SQL."""

    def test_content_schema(self):
        sql = content_schema_sql("content", "auth", "content_block")

        assert "CREATE TABLE IF NOT EXISTS content.blocks" in sql
        assert 'order_key TEXT NOT NULL COLLATE "C"' in sql
        assert "CONSTRAINT links_source_target_unique UNIQUE (source_id, target_id)" in sql
        assert "DELETE FROM auth.resource_roles" in sql
        assert "cleanup_resource_roles('content_block')" in sql

    def test_parent_delete_is_not_cascaded(self):
        sql = content_schema_sql("content", "auth", "content_block")

        assert "parent_id UUID REFERENCES content.blocks(id)," in sql

    def test_auth_schema(self):
        sql = auth_schema_sql("acl")

        assert "CREATE TABLE IF NOT EXISTS acl.navigator_roles" in sql
        assert "UNIQUE (navigator_id, role_name)" in sql
        assert "NULLS NOT DISTINCT" in sql


class TestSeedRows:
    """Default catalog rows."""

    def test_seed_rows_cover_catalog(self):
        permissions, roles, grants = seed_rows()

        assert {name for name, _ in permissions} == set(DEFAULT_PERMISSIONS)
        assert {name for name, _ in roles} == set(DEFAULT_ROLE_PERMISSIONS)
        assert len(grants) == sum(len(p) for p in DEFAULT_ROLE_PERMISSIONS.values())

    def test_every_granted_permission_is_declared(self):
        permissions, _, grants = seed_rows()
        declared = {name for name, _ in permissions}

        assert {permission for _, permission in grants} <= declared


class TestCreateSchema:
    """Running the DDL."""

    @pytest.mark.asyncio
    async def test_creates_auth_before_content_and_seeds(self, mock_database, mock_connection, settings):
        await create_schema(mock_database, settings)

        statements = [call.args[0] for call in mock_connection.execute.call_args_list]
        assert "auth.navigator_roles" in statements[0]
        assert "content.blocks" in statements[1]
        assert mock_connection.executemany.call_count == 3
        mock_database.transaction.assert_called_once()

    @pytest.mark.asyncio
    async def test_without_seed(self, mock_database, mock_connection, settings):
        await create_schema(mock_database, settings, seed=False)

        assert mock_connection.execute.call_count == 2
        mock_connection.executemany.assert_not_called()

    @pytest.mark.asyncio
    async def test_failure_is_wrapped(self, mock_database, mock_connection, settings):
        mock_connection.execute.side_effect = asyncpg.InsufficientPrivilegeError("permission denied for database")

        with pytest.raises(PersistenceError) as exc_info:
            await create_schema(mock_database, settings)

        assert exc_info.value.operation == "create schema"
