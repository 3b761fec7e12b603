"""AsyncPG-based permission catalog implementation.

Concrete implementation of the PermissionCatalog protocol over the ``auth``
schema. Grants are idempotent: an existing assignment is reported as
unchanged, never as an error.
"""

from typing import List, Optional, Set
import logging

import asyncpg

from ....config.settings import CanopySettings, get_settings
from ....core.exceptions import CatalogError
from ....core.value_objects import NavigatorId, ResourceId
from ....database.connection import DatabaseManager
from ....database.error_handling import persistence_operation
from ....utils import generate_uuid_v7
from ..entities.role import GlobalRoleAssignment, ResourceRoleAssignment


logger = logging.getLogger(__name__)


def _navigator_value(navigator_id: Optional[NavigatorId]):
    return navigator_id.value if navigator_id is not None else None


class AsyncPGPermissionCatalog:
    """AsyncPG implementation of the PermissionCatalog protocol."""

    def __init__(self, database: DatabaseManager, settings: Optional[CanopySettings] = None):
        self.database = database
        self.settings = settings or get_settings()
        self.schema = self.settings.auth_schema

    def _build_global_assignment_from_row(self, row: asyncpg.Record) -> GlobalRoleAssignment:
        """Build GlobalRoleAssignment entity from database row."""
        return GlobalRoleAssignment(
            id=row['id'],
            navigator_id=NavigatorId(row['navigator_id']),
            role_name=row['role_name'],
            created_at=row['created_at'],
        )

    def _build_resource_assignment_from_row(self, row: asyncpg.Record) -> ResourceRoleAssignment:
        """Build ResourceRoleAssignment entity from database row."""
        return ResourceRoleAssignment(
            id=row['id'],
            navigator_id=NavigatorId(row['navigator_id']) if row['navigator_id'] else None,
            role_name=row['role_name'],
            resource_type=row['resource_type'],
            resource_id=ResourceId(row['resource_id']),
            created_at=row['created_at'],
        )

    @persistence_operation("check global permission", CatalogError)
    async def has_global_permission(self, navigator_id: NavigatorId, permission: str) -> bool:
        query = f"""
            SELECT EXISTS(
                SELECT 1
                FROM {self.schema}.navigator_roles nr
                JOIN {self.schema}.role_permissions rp ON rp.role_name = nr.role_name
                WHERE nr.navigator_id = $1 AND rp.permission_name = $2
            )
        """
        return bool(await self.database.fetchval(query, navigator_id.value, permission))

    @persistence_operation("check resource permission", CatalogError)
    async def has_resource_permission(
        self,
        navigator_id: Optional[NavigatorId],
        permission: str,
        resource_type: str,
        resource_id: ResourceId,
    ) -> bool:
        query = f"""
            SELECT EXISTS(
                SELECT 1
                FROM {self.schema}.resource_roles rr
                JOIN {self.schema}.role_permissions rp ON rp.role_name = rr.role_name
                WHERE rr.navigator_id IS NOT DISTINCT FROM $1
                  AND rr.resource_type = $2
                  AND rr.resource_id = $3
                  AND rp.permission_name = $4
            )
        """
        return bool(await self.database.fetchval(
            query, _navigator_value(navigator_id), resource_type, resource_id.value, permission
        ))

    @persistence_operation("load navigator permissions", CatalogError)
    async def get_navigator_permissions(self, navigator_id: NavigatorId) -> Set[str]:
        query = f"""
            SELECT DISTINCT rp.permission_name
            FROM {self.schema}.navigator_roles nr
            JOIN {self.schema}.role_permissions rp ON rp.role_name = nr.role_name
            WHERE nr.navigator_id = $1
        """
        rows = await self.database.fetch(query, navigator_id.value)
        return {row['permission_name'] for row in rows}

    @persistence_operation("load navigator roles", CatalogError)
    async def get_navigator_roles(self, navigator_id: NavigatorId) -> List[GlobalRoleAssignment]:
        query = f"""
            SELECT id, navigator_id, role_name, created_at
            FROM {self.schema}.navigator_roles
            WHERE navigator_id = $1
            ORDER BY created_at, role_name
        """
        rows = await self.database.fetch(query, navigator_id.value)
        return [self._build_global_assignment_from_row(row) for row in rows]

    @persistence_operation("load navigator resource roles", CatalogError)
    async def get_navigator_resource_roles(
        self,
        navigator_id: Optional[NavigatorId],
        resource_type: Optional[str] = None,
        resource_id: Optional[ResourceId] = None,
    ) -> List[ResourceRoleAssignment]:
        query = f"""
            SELECT id, navigator_id, role_name, resource_type, resource_id, created_at
            FROM {self.schema}.resource_roles
            WHERE navigator_id IS NOT DISTINCT FROM $1
              AND ($2::varchar IS NULL OR resource_type = $2)
              AND ($3::uuid IS NULL OR resource_id = $3)
            ORDER BY created_at, role_name
        """
        rows = await self.database.fetch(
            query,
            _navigator_value(navigator_id),
            resource_type,
            resource_id.value if resource_id is not None else None,
        )
        return [self._build_resource_assignment_from_row(row) for row in rows]

    @persistence_operation("load role permissions", CatalogError)
    async def get_role_permissions(self, role_name: str) -> Set[str]:
        query = f"""
            SELECT permission_name
            FROM {self.schema}.role_permissions
            WHERE role_name = $1
        """
        rows = await self.database.fetch(query, role_name)
        return {row['permission_name'] for row in rows}

    @persistence_operation("grant global role", CatalogError)
    async def grant_global_role(self, navigator_id: NavigatorId, role_name: str) -> bool:
        query = f"""
            INSERT INTO {self.schema}.navigator_roles (id, navigator_id, role_name)
            VALUES ($1, $2, $3)
            ON CONFLICT (navigator_id, role_name) DO NOTHING
            RETURNING id
        """
        try:
            inserted = await self.database.fetchval(
                query, generate_uuid_v7(), navigator_id.value, role_name
            )
        except asyncpg.UniqueViolationError:
            return False

        if inserted is None:
            return False
        logger.info(f"Granted global role {role_name} to navigator {navigator_id}")
        return True

    @persistence_operation("revoke global role", CatalogError)
    async def revoke_global_role(self, navigator_id: NavigatorId, role_name: str) -> bool:
        query = f"""
            DELETE FROM {self.schema}.navigator_roles
            WHERE navigator_id = $1 AND role_name = $2
            RETURNING id
        """
        deleted = await self.database.fetchval(query, navigator_id.value, role_name)
        if deleted is None:
            return False
        logger.info(f"Revoked global role {role_name} from navigator {navigator_id}")
        return True

    @persistence_operation("grant resource role", CatalogError)
    async def grant_resource_role(
        self,
        navigator_id: Optional[NavigatorId],
        role_name: str,
        resource_type: str,
        resource_id: ResourceId,
    ) -> bool:
        query = f"""
            INSERT INTO {self.schema}.resource_roles
                (id, navigator_id, role_name, resource_type, resource_id)
            VALUES ($1, $2, $3, $4, $5)
            ON CONFLICT DO NOTHING
            RETURNING id
        """
        try:
            inserted = await self.database.fetchval(
                query,
                generate_uuid_v7(),
                _navigator_value(navigator_id),
                role_name,
                resource_type,
                resource_id.value,
            )
        except asyncpg.UniqueViolationError:
            return False

        if inserted is None:
            return False
        logger.info(
            f"Granted role {role_name} on {resource_type} {resource_id} to navigator {navigator_id}"
        )
        return True

    @persistence_operation("revoke resource role", CatalogError)
    async def revoke_resource_role(
        self,
        navigator_id: Optional[NavigatorId],
        role_name: str,
        resource_type: str,
        resource_id: ResourceId,
    ) -> bool:
        query = f"""
            DELETE FROM {self.schema}.resource_roles
            WHERE navigator_id IS NOT DISTINCT FROM $1
              AND role_name = $2
              AND resource_type = $3
              AND resource_id = $4
            RETURNING id
        """
        deleted = await self.database.fetchval(
            query, _navigator_value(navigator_id), role_name, resource_type, resource_id.value
        )
        if deleted is None:
            return False
        logger.info(
            f"Revoked role {role_name} on {resource_type} {resource_id} from navigator {navigator_id}"
        )
        return True
