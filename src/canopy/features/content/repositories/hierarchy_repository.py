"""AsyncPG-based hierarchy store implementation.

Concrete implementation of the HierarchyStore protocol. Ancestor and
descendant walks are recursive CTEs bounded by ``max_hierarchy_depth``;
transactional sessions share one connection inside ``connection.transaction()``.
"""

from contextlib import asynccontextmanager
from typing import AsyncIterator, Iterable, List, Optional, Tuple
import logging

import asyncpg

from ....config.settings import CanopySettings, get_settings
from ....core.exceptions import HierarchyStoreError
from ....core.value_objects import ContentId, LinkId, NavigatorId, NodeRef, ShortId
from ....database.connection import DatabaseManager
from ....database.error_handling import persistence_operation
from ..entities.block_content import dump_content, load_content
from ..entities.content_node import ContentNode
from ..entities.fractional_index import FractionalIndex
from ..entities.link_edge import LinkDiff, LinkEdge


logger = logging.getLogger(__name__)

NODE_COLUMNS = "id, short_id, parent_id, owner_id, order_key, content, created_at, updated_at"


def _ref_clause(ref: NodeRef) -> Tuple[str, object]:
    """Column and bound value that select the block a reference names."""
    if isinstance(ref, ShortId):
        return "short_id", ref.value
    return "id", ref.value


class AsyncPGHierarchySession:
    """HierarchySession bound to a single asyncpg connection."""

    def __init__(self, conn: asyncpg.Connection, schema: str, max_depth: int):
        self.conn = conn
        self.schema = schema
        self.max_depth = max_depth

    def _build_node_from_row(self, row: asyncpg.Record) -> ContentNode:
        """Build ContentNode entity from database row."""
        return ContentNode(
            id=ContentId(row['id']),
            short_id=ShortId(row['short_id']) if row['short_id'] else None,
            parent_id=ContentId(row['parent_id']) if row['parent_id'] else None,
            owner_id=NavigatorId(row['owner_id']) if row['owner_id'] else None,
            order_key=FractionalIndex.parse(row['order_key']),
            content=load_content(row['content']),
            created_at=row['created_at'],
            updated_at=row['updated_at'],
        )

    def _build_link_from_row(self, row: asyncpg.Record) -> LinkEdge:
        """Build LinkEdge entity from database row."""
        return LinkEdge(
            id=LinkId(row['id']),
            source_id=ContentId(row['source_id']),
            target_id=ContentId(row['target_id']),
        )

    @persistence_operation("resolve content block", HierarchyStoreError)
    async def resolve(self, ref: NodeRef) -> Optional[ContentId]:
        column, value = _ref_clause(ref)
        query = f"SELECT id FROM {self.schema}.blocks WHERE {column} = $1"
        found = await self.conn.fetchval(query, value)
        return ContentId(found) if found else None

    @persistence_operation("resolve short ids", HierarchyStoreError)
    async def resolve_short_ids(self, short_ids: Iterable[str]) -> List[ContentId]:
        wanted = list(dict.fromkeys(short_ids))
        if not wanted:
            return []

        query = f"""
            SELECT id, short_id
            FROM {self.schema}.blocks
            WHERE short_id = ANY($1::varchar[])
        """
        rows = await self.conn.fetch(query, wanted)
        by_short_id = {row['short_id']: ContentId(row['id']) for row in rows}

        resolved: List[ContentId] = []
        for short_id in wanted:
            node_id = by_short_id.get(short_id)
            if node_id is not None and node_id not in resolved:
                resolved.append(node_id)
        return resolved

    @persistence_operation("get content block", HierarchyStoreError)
    async def get(self, ref: NodeRef) -> Optional[ContentNode]:
        column, value = _ref_clause(ref)
        query = f"SELECT {NODE_COLUMNS} FROM {self.schema}.blocks WHERE {column} = $1"
        row = await self.conn.fetchrow(query, value)
        return self._build_node_from_row(row) if row else None

    @persistence_operation("load ancestors", HierarchyStoreError)
    async def ancestors(self, ref: NodeRef) -> List[ContentNode]:
        """Ancestors nearest-first, the root last."""
        column, value = _ref_clause(ref)
        query = f"""
            WITH RECURSIVE chain AS (
                SELECT {NODE_COLUMNS}, 0 AS depth
                FROM {self.schema}.blocks
                WHERE {column} = $1
                UNION ALL
                SELECT b.id, b.short_id, b.parent_id, b.owner_id, b.order_key,
                       b.content, b.created_at, b.updated_at, c.depth + 1
                FROM {self.schema}.blocks b
                JOIN chain c ON b.id = c.parent_id
                WHERE c.depth < $2
            )
            SELECT {NODE_COLUMNS}
            FROM chain
            WHERE depth > 0
            ORDER BY depth
        """
        rows = await self.conn.fetch(query, value, self.max_depth)
        return self._unique_nodes(rows)

    @persistence_operation("load descendants", HierarchyStoreError)
    async def descendants(self, ref: NodeRef) -> List[ContentNode]:
        """Descendants breadth-first, siblings in order key order."""
        column, value = _ref_clause(ref)
        query = f"""
            WITH RECURSIVE tree AS (
                SELECT {NODE_COLUMNS}, 0 AS depth
                FROM {self.schema}.blocks
                WHERE {column} = $1
                UNION ALL
                SELECT b.id, b.short_id, b.parent_id, b.owner_id, b.order_key,
                       b.content, b.created_at, b.updated_at, t.depth + 1
                FROM {self.schema}.blocks b
                JOIN tree t ON b.parent_id = t.id
                WHERE t.depth < $2
            )
            SELECT {NODE_COLUMNS}
            FROM tree
            WHERE depth > 0
            ORDER BY depth, order_key
        """
        rows = await self.conn.fetch(query, value, self.max_depth)
        return self._unique_nodes(rows)

    def _unique_nodes(self, rows: List[asyncpg.Record]) -> List[ContentNode]:
        # A corrupted cycle repeats rows until the depth bound; keep first sightings
        seen = set()
        nodes = []
        for row in rows:
            if row['id'] in seen:
                continue
            seen.add(row['id'])
            nodes.append(self._build_node_from_row(row))
        return nodes

    @persistence_operation("load outgoing links", HierarchyStoreError)
    async def links_from(self, node_id: ContentId) -> List[LinkEdge]:
        query = f"""
            SELECT id, source_id, target_id
            FROM {self.schema}.links
            WHERE source_id = $1
            ORDER BY created_at, id
        """
        rows = await self.conn.fetch(query, node_id.value)
        return [self._build_link_from_row(row) for row in rows]

    @persistence_operation("load backlinks", HierarchyStoreError)
    async def links_to(self, node_id: ContentId) -> List[LinkEdge]:
        query = f"""
            SELECT id, source_id, target_id
            FROM {self.schema}.links
            WHERE target_id = $1
            ORDER BY created_at, id
        """
        rows = await self.conn.fetch(query, node_id.value)
        return [self._build_link_from_row(row) for row in rows]

    @persistence_operation("check link", HierarchyStoreError)
    async def is_linked(self, source_id: ContentId, target_id: ContentId) -> bool:
        query = f"""
            SELECT EXISTS(
                SELECT 1 FROM {self.schema}.links
                WHERE source_id = $1 AND target_id = $2
            )
        """
        return bool(await self.conn.fetchval(query, source_id.value, target_id.value))

    @persistence_operation("upsert content block", HierarchyStoreError)
    async def upsert(self, node: ContentNode) -> ContentNode:
        query = f"""
            INSERT INTO {self.schema}.blocks (id, short_id, parent_id, owner_id, order_key, content)
            VALUES ($1, $2, $3, $4, $5, $6::jsonb)
            ON CONFLICT (id) DO UPDATE SET
                short_id = EXCLUDED.short_id,
                parent_id = EXCLUDED.parent_id,
                owner_id = EXCLUDED.owner_id,
                order_key = EXCLUDED.order_key,
                content = EXCLUDED.content,
                updated_at = CURRENT_TIMESTAMP
            RETURNING {NODE_COLUMNS}
        """
        row = await self.conn.fetchrow(
            query,
            node.id.value,
            node.short_id.value if node.short_id else None,
            node.parent_id.value if node.parent_id else None,
            node.owner_id.value if node.owner_id else None,
            node.order_key.value,
            dump_content(node.content),
        )
        return self._build_node_from_row(row)

    @persistence_operation("replace content links", HierarchyStoreError)
    async def replace_links(
        self,
        source_id: ContentId,
        target_ids: Iterable[ContentId],
    ) -> LinkDiff:
        desired = list(dict.fromkeys(target_ids))
        desired_set = set(desired)
        current = await self.links_from(source_id)
        current_targets = {edge.target_id for edge in current}

        removed = [edge for edge in current if edge.target_id not in desired_set]
        if removed:
            await self.conn.execute(
                f"DELETE FROM {self.schema}.links WHERE id = ANY($1::uuid[])",
                [edge.id.value for edge in removed],
            )

        insert_query = f"""
            INSERT INTO {self.schema}.links (id, source_id, target_id)
            VALUES ($1, $2, $3)
            ON CONFLICT (source_id, target_id) DO NOTHING
            RETURNING id
        """
        added = []
        for target_id in desired:
            if target_id in current_targets:
                continue
            edge = LinkEdge.create(source_id, target_id)
            inserted = await self.conn.fetchval(
                insert_query, edge.id.value, source_id.value, target_id.value
            )
            # None means a concurrent writer already created the same edge
            if inserted is not None:
                added.append(edge)

        return LinkDiff(added=tuple(added), removed=tuple(removed))

    @persistence_operation("delete content block", HierarchyStoreError)
    async def delete(self, ref: NodeRef) -> bool:
        column, value = _ref_clause(ref)
        query = f"DELETE FROM {self.schema}.blocks WHERE {column} = $1 RETURNING id"
        return await self.conn.fetchval(query, value) is not None


class AsyncPGHierarchyStore:
    """AsyncPG implementation of the HierarchyStore protocol."""

    def __init__(self, database: DatabaseManager, settings: Optional[CanopySettings] = None):
        self.database = database
        self.settings = settings or get_settings()
        self.schema = self.settings.content_schema
        self.max_depth = self.settings.max_hierarchy_depth

    def _session(self, conn: asyncpg.Connection) -> AsyncPGHierarchySession:
        return AsyncPGHierarchySession(conn, self.schema, self.max_depth)

    @asynccontextmanager
    async def transaction(self) -> AsyncIterator[AsyncPGHierarchySession]:
        """Session whose statements commit or roll back together."""
        async with self.database.transaction() as conn:
            yield self._session(conn)

    @asynccontextmanager
    async def _reader(self) -> AsyncIterator[AsyncPGHierarchySession]:
        async with self.database.acquire() as conn:
            yield self._session(conn)

    async def resolve(self, ref: NodeRef) -> Optional[ContentId]:
        async with self._reader() as session:
            return await session.resolve(ref)

    async def resolve_short_ids(self, short_ids: Iterable[str]) -> List[ContentId]:
        async with self._reader() as session:
            return await session.resolve_short_ids(short_ids)

    async def get(self, ref: NodeRef) -> Optional[ContentNode]:
        async with self._reader() as session:
            return await session.get(ref)

    async def ancestors(self, ref: NodeRef) -> List[ContentNode]:
        async with self._reader() as session:
            return await session.ancestors(ref)

    async def descendants(self, ref: NodeRef) -> List[ContentNode]:
        async with self._reader() as session:
            return await session.descendants(ref)

    async def links_from(self, node_id: ContentId) -> List[LinkEdge]:
        async with self._reader() as session:
            return await session.links_from(node_id)

    async def links_to(self, node_id: ContentId) -> List[LinkEdge]:
        async with self._reader() as session:
            return await session.links_to(node_id)

    async def is_linked(self, source_id: ContentId, target_id: ContentId) -> bool:
        async with self._reader() as session:
            return await session.is_linked(source_id, target_id)

    async def upsert(self, node: ContentNode) -> ContentNode:
        async with self.transaction() as session:
            return await session.upsert(node)

    async def replace_links(
        self,
        source_id: ContentId,
        target_ids: Iterable[ContentId],
    ) -> LinkDiff:
        async with self.transaction() as session:
            return await session.replace_links(source_id, target_ids)

    async def delete(self, ref: NodeRef) -> bool:
        async with self.transaction() as session:
            deleted = await session.delete(ref)
        if deleted:
            logger.info(f"Deleted content block {ref}")
        return deleted
