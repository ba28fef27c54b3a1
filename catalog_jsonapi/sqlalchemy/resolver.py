"""Resolve relationship targets from SQLAlchemy models."""

from __future__ import annotations

import asyncio
import logging
from typing import Any, Mapping

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import Session, selectinload

from catalog_jsonapi.resolvers.base import Resolver
from catalog_jsonapi.serializers.base import JSONAPISerializer

logger = logging.getLogger(__name__)


class SQLAlchemyResolver(Resolver):
    """Bridge the resolver capability with SQLAlchemy models.

    Each resource type maps to a ``JSONAPISerializer`` subclass whose
    ``Meta.model`` is queried by primary key ``id``. Queries through an
    ``AsyncSession`` are serialized, since one session must not run
    statements concurrently.
    """

    def __init__(
        self,
        *,
        session: Session | AsyncSession,
        serializers: Mapping[str, type[JSONAPISerializer]],
    ) -> None:
        """Store the session and the type-to-serializer registry."""
        self.session = session
        self.serializers = dict(serializers)
        self.type_map = {
            serializer.Meta.model: resource_type
            for resource_type, serializer in self.serializers.items()
        }
        self._lock = asyncio.Lock()

    async def _execute(self, statement: Any) -> Any:
        if isinstance(self.session, AsyncSession):
            async with self._lock:
                return await self.session.execute(statement)
        return self.session.execute(statement)

    async def resolve(self, resource_type: str, resource_id: str) -> dict[str, Any] | None:
        """Return the serialized resource, or ``None`` for unknown types and ids."""
        serializer_class = self.serializers.get(resource_type)
        if serializer_class is None:
            logger.debug("No serializer registered for type %s", resource_type)
            return None
        model = serializer_class.Meta.model
        statement = (
            select(model).where(model.id == resource_id).options(selectinload("*"))
        )
        result = await self._execute(statement)
        instance = result.scalars().first()
        if instance is None:
            return None
        return serializer_class(type_map=self.type_map).to_resource(instance)
