"""
DDL and seed data for the ``content`` and ``auth`` schemas.

Everything is idempotent (``IF NOT EXISTS`` / ``ON CONFLICT DO NOTHING``) so
``create_schema`` can run on every startup.
"""
import logging
from typing import List, Optional, Tuple

from ..config.constants import (
    DEFAULT_PERMISSIONS,
    DEFAULT_ROLE_DESCRIPTIONS,
    DEFAULT_ROLE_PERMISSIONS,
)
from ..config.settings import CanopySettings, get_settings
from ..core.exceptions import PersistenceError
from .connection import DatabaseManager
from .error_handling import persistence_operation

logger = logging.getLogger(__name__)


def content_schema_sql(schema: str, auth_schema: str, resource_type: str) -> str:
    """DDL for blocks, links and the resource-role cleanup trigger."""
    return f"""
        CREATE SCHEMA IF NOT EXISTS {schema};

        CREATE TABLE IF NOT EXISTS {schema}.blocks (
            id UUID PRIMARY KEY,
            short_id VARCHAR(7),
            parent_id UUID REFERENCES {schema}.blocks(id),
            owner_id UUID,
            order_key TEXT NOT NULL COLLATE "C",
            content JSONB NOT NULL,
            created_at TIMESTAMP WITH TIME ZONE DEFAULT CURRENT_TIMESTAMP NOT NULL,
            updated_at TIMESTAMP WITH TIME ZONE DEFAULT CURRENT_TIMESTAMP NOT NULL
        );

        CREATE UNIQUE INDEX IF NOT EXISTS blocks_short_id_idx
            ON {schema}.blocks(short_id) WHERE short_id IS NOT NULL;
        CREATE INDEX IF NOT EXISTS blocks_parent_id_idx ON {schema}.blocks(parent_id);
        CREATE INDEX IF NOT EXISTS blocks_owner_id_idx ON {schema}.blocks(owner_id);

        CREATE TABLE IF NOT EXISTS {schema}.links (
            id UUID PRIMARY KEY,
            source_id UUID NOT NULL REFERENCES {schema}.blocks(id) ON DELETE CASCADE,
            target_id UUID NOT NULL REFERENCES {schema}.blocks(id) ON DELETE CASCADE,
            created_at TIMESTAMP WITH TIME ZONE DEFAULT CURRENT_TIMESTAMP NOT NULL,
            CONSTRAINT links_source_target_unique UNIQUE (source_id, target_id)
        );

        CREATE INDEX IF NOT EXISTS links_source_id_idx ON {schema}.links(source_id);
        CREATE INDEX IF NOT EXISTS links_target_id_idx ON {schema}.links(target_id);

        CREATE OR REPLACE FUNCTION {schema}.cleanup_resource_roles()
        RETURNS TRIGGER AS $$
        BEGIN
            DELETE FROM {auth_schema}.resource_roles
            WHERE resource_type = TG_ARGV[0] AND resource_id = OLD.id;
            RETURN OLD;
        END;
        $$ LANGUAGE plpgsql;

        DROP TRIGGER IF EXISTS cleanup_block_resource_roles_trigger ON {schema}.blocks;
        CREATE TRIGGER cleanup_block_resource_roles_trigger
            BEFORE DELETE ON {schema}.blocks
            FOR EACH ROW
            EXECUTE FUNCTION {schema}.cleanup_resource_roles('{resource_type}');
    """


def auth_schema_sql(schema: str) -> str:
    """DDL for the role and permission catalog."""
    return f"""
        CREATE SCHEMA IF NOT EXISTS {schema};

        CREATE TABLE IF NOT EXISTS {schema}.permissions (
            name VARCHAR(100) PRIMARY KEY,
            description TEXT
        );

        CREATE TABLE IF NOT EXISTS {schema}.roles (
            name VARCHAR(100) PRIMARY KEY,
            description TEXT
        );

        CREATE TABLE IF NOT EXISTS {schema}.role_permissions (
            role_name VARCHAR(100) NOT NULL REFERENCES {schema}.roles(name) ON DELETE CASCADE,
            permission_name VARCHAR(100) NOT NULL REFERENCES {schema}.permissions(name) ON DELETE CASCADE,
            PRIMARY KEY (role_name, permission_name)
        );

        CREATE INDEX IF NOT EXISTS role_permissions_permission_name_idx
            ON {schema}.role_permissions(permission_name);

        CREATE TABLE IF NOT EXISTS {schema}.navigator_roles (
            id UUID PRIMARY KEY,
            navigator_id UUID NOT NULL,
            role_name VARCHAR(100) NOT NULL REFERENCES {schema}.roles(name) ON DELETE CASCADE,
            created_at TIMESTAMP WITH TIME ZONE DEFAULT CURRENT_TIMESTAMP NOT NULL,
            CONSTRAINT navigator_roles_unique UNIQUE (navigator_id, role_name)
        );

        CREATE INDEX IF NOT EXISTS navigator_roles_navigator_id_idx
            ON {schema}.navigator_roles(navigator_id);

        -- navigator_id NULL grants the role to anonymous visitors
        CREATE TABLE IF NOT EXISTS {schema}.resource_roles (
            id UUID PRIMARY KEY,
            navigator_id UUID,
            role_name VARCHAR(100) NOT NULL REFERENCES {schema}.roles(name) ON DELETE CASCADE,
            resource_type VARCHAR(50) NOT NULL,
            resource_id UUID NOT NULL,
            created_at TIMESTAMP WITH TIME ZONE DEFAULT CURRENT_TIMESTAMP NOT NULL
        );

        CREATE UNIQUE INDEX IF NOT EXISTS resource_roles_unique_idx
            ON {schema}.resource_roles(navigator_id, role_name, resource_type, resource_id)
            NULLS NOT DISTINCT;
        CREATE INDEX IF NOT EXISTS resource_roles_navigator_id_idx
            ON {schema}.resource_roles(navigator_id);
        CREATE INDEX IF NOT EXISTS resource_roles_resource_idx
            ON {schema}.resource_roles(resource_type, resource_id);
    """


def seed_rows() -> Tuple[List[tuple], List[tuple], List[tuple]]:
    """Permission, role and role-permission rows of the default catalog."""
    permissions = sorted(DEFAULT_PERMISSIONS.items())
    roles = sorted(DEFAULT_ROLE_DESCRIPTIONS.items())
    grants = sorted(
        (role, permission)
        for role, granted in DEFAULT_ROLE_PERMISSIONS.items()
        for permission in granted
    )
    return permissions, roles, grants


@persistence_operation("create schema", PersistenceError)
async def create_schema(
    database: DatabaseManager,
    settings: Optional[CanopySettings] = None,
    seed: bool = True,
) -> None:
    """Create both schemas and, optionally, seed the default role catalog."""
    settings = settings or get_settings()
    auth = settings.auth_schema

    async with database.transaction() as conn:
        # The cleanup trigger references auth tables, so auth goes first
        await conn.execute(auth_schema_sql(auth))
        await conn.execute(content_schema_sql(
            settings.content_schema, auth, settings.content_resource_type
        ))

        if seed:
            permissions, roles, grants = seed_rows()
            await conn.executemany(
                f"INSERT INTO {auth}.permissions (name, description) VALUES ($1, $2) "
                f"ON CONFLICT (name) DO NOTHING",
                permissions,
            )
            await conn.executemany(
                f"INSERT INTO {auth}.roles (name, description) VALUES ($1, $2) "
                f"ON CONFLICT (name) DO NOTHING",
                roles,
            )
            await conn.executemany(
                f"INSERT INTO {auth}.role_permissions (role_name, permission_name) VALUES ($1, $2) "
                f"ON CONFLICT DO NOTHING",
                grants,
            )

    logger.info(
        f"Schemas {settings.content_schema} and {auth} are ready"
        + (" (catalog seeded)" if seed else "")
    )
