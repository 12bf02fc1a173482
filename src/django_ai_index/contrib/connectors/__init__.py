from .registry import DataSourceRegistry, registry
from .schema import (
    APIDataSource,
    DatabaseType,
    DataSource,
    QueryResult,
    ResultType,
    SchemaQuery,
    SQLDataSource,
    TableQuery,
)
from .sql import DataConnectorError, SQLDataConnector, SQLExecutionError

__all__ = [
    "APIDataSource",
    "DataConnectorError",
    "DataSource",
    "DataSourceRegistry",
    "DatabaseType",
    "QueryResult",
    "ResultType",
    "SQLDataConnector",
    "SQLDataSource",
    "SQLExecutionError",
    "SchemaQuery",
    "TableQuery",
    "registry",
]
