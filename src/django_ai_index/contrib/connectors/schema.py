"""
Data sources and query results.

Data sources are value objects describing where data lives. Query results are
what a connector reads from a data source, before it is embedded and turned
into a Document.
"""

import json
from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from django.core.serializers.json import DjangoJSONEncoder


class DatabaseType(str, Enum):
    MYSQL = "mysql"
    POSTGRESQL = "postgresql"
    SQLITE = "sqlite"
    H2 = "h2"


class HttpMethod(str, Enum):
    GET = "GET"
    POST = "POST"
    PUT = "PUT"
    PATCH = "PATCH"
    DELETE = "DELETE"


@dataclass(frozen=True, kw_only=True)
class DataSource:
    identifier: str


@dataclass(frozen=True, kw_only=True)
class SQLDataSource(DataSource):
    """Connection details for a relational database, plus an optional read query."""

    database_type: DatabaseType
    host: str
    database_name: str
    username: str = ""
    password: str = field(default="", repr=False)
    query: str | None = None


@dataclass(frozen=True, kw_only=True)
class APIDataSource(DataSource):
    base_url: str
    endpoint: str
    method: HttpMethod = HttpMethod.GET
    headers: dict[str, str] = field(default_factory=dict, repr=False)
    body: dict[str, Any] = field(default_factory=dict)


class ResultType(str, Enum):
    SUCCESS = "SUCCESS"
    FAILURE = "FAILURE"


class QueryResultEncoder(DjangoJSONEncoder):
    """JSON encoder for row values: dates, decimals and UUIDs via Django, bytes as hex."""

    def default(self, o):
        if isinstance(o, (bytes, bytearray, memoryview)):
            return bytes(o).hex()
        return super().default(o)


@dataclass(frozen=True, kw_only=True)
class QueryResult:
    result_type: ResultType = ResultType.SUCCESS

    @property
    def succeeded(self) -> bool:
        return self.result_type is ResultType.SUCCESS

    def payload(self) -> dict[str, Any]:
        raise NotImplementedError

    def is_empty(self) -> bool:
        return not any(self.payload().values())

    def to_text(self) -> str:
        """Serialize the result into the text that gets embedded."""
        return json.dumps(self.payload(), cls=QueryResultEncoder)

    def __post_init__(self):
        if self.result_type is ResultType.FAILURE and not self.is_empty():
            raise ValueError("A failed query result cannot carry data")


@dataclass(frozen=True, kw_only=True)
class TableQuery(QueryResult):
    table_name: str = ""
    column_names: frozenset[str] = frozenset()
    rows: list[dict[str, Any]] = field(default_factory=list)

    @classmethod
    def failure(cls) -> "TableQuery":
        return cls(result_type=ResultType.FAILURE)

    def payload(self) -> dict[str, Any]:
        return {
            "table": self.table_name,
            "columns": sorted(self.column_names),
            "rows": self.rows,
        }


@dataclass(frozen=True, kw_only=True)
class SchemaQuery(QueryResult):
    schema: dict[str, dict[str, str]] = field(default_factory=dict)

    @classmethod
    def failure(cls) -> "SchemaQuery":
        return cls(result_type=ResultType.FAILURE)

    def payload(self) -> dict[str, Any]:
        return {"schema": self.schema}
