"""
Schema definitions for vector indexing.

Documents are the unit of storage and retrieval. Every document carries the
common fields (id, source type, source name, text and embedding) plus fields
specific to the kind of source it was built from.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, ClassVar


class SourceType(str, Enum):
    SQL = "SQL"
    API = "API"


@dataclass(frozen=True)
class Document:
    """
    Base class for indexed documents.

    Documents are immutable; updating a document in an index means replacing
    it with a new Document that has the same id and source_name.
    """

    source_type: ClassVar[SourceType]

    id: str
    source_name: str
    text: str
    embedding: list[float] = field(repr=False)

    @property
    def dimensions(self) -> int:
        return len(self.embedding)

    def to_attributes(self) -> dict[str, Any]:
        """Serialize the document into a flat attribute bag, without the vector."""
        return {
            "docId": self.id,
            "sourceName": self.source_name,
            "sourceType": self.source_type.value,
            "text": self.text,
        }


@dataclass(frozen=True)
class SQLDocument(Document):
    """A document built from a SQL data source (a schema or a query result)."""

    source_type: ClassVar[SourceType] = SourceType.SQL

    dialect: str = ""
    schema: str = ""
    query: str = ""

    def to_attributes(self) -> dict[str, Any]:
        return {
            **super().to_attributes(),
            "dialect": self.dialect,
            "schema": self.schema,
            "query": self.query,
        }


@dataclass(frozen=True)
class APIDocument(Document):
    """A document built from an HTTP API response."""

    source_type: ClassVar[SourceType] = SourceType.API

    base_url: str = ""
    endpoint: str = ""

    def to_attributes(self) -> dict[str, Any]:
        return {
            **super().to_attributes(),
            "baseUrl": self.base_url,
            "endpoint": self.endpoint,
        }


def document_from_attributes(
    attributes: dict[str, Any], embedding: list[float]
) -> Document:
    """Rebuild a Document from a backend attribute bag.

    Raises ValueError for an unknown or missing ``sourceType``.
    """
    try:
        source_type = SourceType(attributes.get("sourceType"))
    except ValueError as e:
        raise ValueError(
            f"Invalid source type: {attributes.get('sourceType')!r}"
        ) from e

    common = {
        "id": attributes["docId"],
        "source_name": attributes["sourceName"],
        "text": attributes["text"],
        "embedding": [float(value) for value in embedding],
    }

    if source_type is SourceType.SQL:
        return SQLDocument(
            **common,
            dialect=attributes.get("dialect", ""),
            schema=attributes.get("schema", ""),
            query=attributes.get("query", ""),
        )
    elif source_type is SourceType.API:
        return APIDocument(
            **common,
            base_url=attributes.get("baseUrl", ""),
            endpoint=attributes.get("endpoint", ""),
        )

    raise ValueError(f"Unhandled source type: {source_type}")
