"""Serialize SQLAlchemy models into JSON:API resource objects."""

from __future__ import annotations

from typing import Any, Mapping

from sqlalchemy.inspection import inspect
from sqlalchemy.orm.attributes import NO_VALUE


class JSONAPISerializer:
    """Serialize SQLAlchemy models into JSON:API resource objects."""

    class Meta:
        """Serializer metadata (type, model, fields)."""

        type_: str = ""
        model: Any = None
        fields: list[str] = []

    def __init__(self, *, type_map: Mapping[type, str] | None = None) -> None:
        """``type_map`` names the resource type of related model classes."""
        self.type_map = dict(type_map or {})

    def to_resource(self, instance: Any) -> dict[str, Any]:
        """Serialize a model instance into a JSON:API resource object."""
        resource: dict[str, Any] = {
            "type": self.Meta.type_,
            "id": self.get_id(instance),
            "attributes": self.get_attributes(instance),
        }
        relationships = self.get_relationships(instance)
        if relationships:
            resource["relationships"] = relationships
        return resource

    def get_id(self, instance: Any) -> str:
        """Return the resource id as a string."""
        value = getattr(instance, "id", None)
        return "" if value is None else str(value)

    def get_attributes(self, instance: Any) -> dict[str, Any]:
        """Return JSON:API attributes derived from serializer fields."""
        if self.Meta.fields:
            return {
                field: getattr(instance, field)
                for field in self.Meta.fields
                if field != "id"
            }
        mapper = inspect(instance.__class__)
        return {
            column.key: getattr(instance, column.key)
            for column in mapper.column_attrs
            if column.key != "id" and not column.key.startswith("_")
        }

    def get_relationships(self, instance: Any) -> dict[str, Any]:
        """Return relationship linkage for every mapped relationship."""
        mapper = inspect(instance.__class__)
        return {
            relationship.key: {"data": self._relationship_data(instance, relationship)}
            for relationship in mapper.relationships
        }

    def _relationship_data(self, instance: Any, relationship: Any) -> Any:
        state = inspect(instance)
        if state.attrs[relationship.key].loaded_value is NO_VALUE:
            return [] if relationship.uselist else None
        related = getattr(instance, relationship.key, None)
        if relationship.uselist:
            return [self._identifier(item) for item in related or []]
        if related is None:
            return None
        return self._identifier(related)

    def _identifier(self, related: Any) -> dict[str, str]:
        type_name = self.type_map.get(
            type(related), getattr(related, "__tablename__", type(related).__name__.lower())
        )
        value = getattr(related, "id", None)
        return {"type": type_name, "id": "" if value is None else str(value)}
