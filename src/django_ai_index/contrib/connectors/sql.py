"""SQL data connector: schema introspection, query execution and document building."""

import logging
import re
from contextlib import contextmanager
from typing import TYPE_CHECKING, Callable, Iterator

from asgiref.sync import sync_to_async
from sqlalchemy import create_engine
from sqlalchemy.engine import URL, Connection, CursorResult, Engine
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.pool import NullPool

from django_ai_index.contrib.index.schema import SQLDocument

from .schema import (
    DatabaseType,
    DataSource,
    QueryResult,
    ResultType,
    SchemaQuery,
    SQLDataSource,
    TableQuery,
)

if TYPE_CHECKING:
    from django_ai_index.contrib.index.embedding import EmbeddingProvider
    from django_ai_index.contrib.index.storage import Index

    from .registry import DataSourceRegistry

logger = logging.getLogger(__name__)


class DataConnectorError(RuntimeError):
    """Raised when a connector cannot perform an operation."""


class SQLExecutionError(DataConnectorError):
    """Raised when a statement cannot be executed against a data source."""


# Each query returns (table name, column name, data type) rows
INTROSPECTION_QUERIES: dict[DatabaseType, str] = {
    DatabaseType.MYSQL: """
        SELECT TABLE_NAME, COLUMN_NAME, DATA_TYPE
        FROM INFORMATION_SCHEMA.COLUMNS
        WHERE TABLE_SCHEMA = DATABASE()
          AND TABLE_NAME NOT LIKE 'mysql.%'
          AND TABLE_NAME NOT LIKE 'information_schema.%'
          AND TABLE_NAME NOT LIKE 'performance_schema.%'
          AND TABLE_NAME NOT LIKE 'sys.%'
    """,
    DatabaseType.POSTGRESQL: """
        SELECT table_name, column_name, data_type
        FROM information_schema.columns
        WHERE table_schema NOT IN ('pg_catalog', 'information_schema')
    """,
    # sqlite_master and pragma_table_info both have name and type columns
    DatabaseType.SQLITE: """
        SELECT m.tbl_name AS table_name, p.name AS column_name, p.type AS data_type
        FROM sqlite_master AS m
        JOIN pragma_table_info(m.name) AS p
        WHERE m.type = 'table' AND m.tbl_name NOT LIKE 'sqlite_%'
    """,
    DatabaseType.H2: """
        SELECT TABLE_NAME, COLUMN_NAME, DATA_TYPE
        FROM INFORMATION_SCHEMA.COLUMNS
        WHERE TABLE_SCHEMA NOT LIKE 'INFORMATION_SCHEMA'
    """,
}


def _split_host(host: str) -> tuple[str, int | None]:
    name, _, port = host.partition(":")
    if port and not port.isdigit():
        raise ValueError(f"Invalid port in host {host!r}")
    return name, int(port) if port else None


def _server_url(drivername: str, source: SQLDataSource) -> URL:
    host, port = _split_host(source.host)
    return URL.create(
        drivername,
        username=source.username or None,
        password=source.password or None,
        host=host,
        port=port,
        database=source.database_name,
    )


# H2 is reached through its PostgreSQL-compatible server mode (``-pg``)
URL_BUILDERS: dict[DatabaseType, Callable[[SQLDataSource], URL]] = {
    DatabaseType.MYSQL: lambda source: _server_url("mysql+pymysql", source),
    DatabaseType.POSTGRESQL: lambda source: _server_url("postgresql+psycopg", source),
    DatabaseType.SQLITE: lambda source: URL.create("sqlite", database=source.host),
    DatabaseType.H2: lambda source: _server_url("postgresql+psycopg", source),
}

FROM_CLAUSE = re.compile(r"\bFROM\s+([`\"\[]?[\w.$]+[`\"\]]?)", re.IGNORECASE)


def connection_url(source: SQLDataSource) -> URL:
    return URL_BUILDERS[DatabaseType(source.database_type)](source)


def default_engine_factory(url: URL) -> Engine:
    # NullPool: every call gets its own connection, released on close
    return create_engine(url, poolclass=NullPool)


def table_name_from_query(query: str) -> str:
    """Best-effort name of the first table a SELECT reads from."""
    match = FROM_CLAUSE.search(query)
    if not match:
        return ""
    name = match.group(1).strip('`"[]')
    return name.rsplit(".", 1)[-1]


class SQLDataConnector:
    """Reads relational data sources and indexes them as documents.

    Every operation opens one connection and closes it before returning,
    whether the operation succeeds or raises.
    """

    def __init__(
        self,
        *,
        embedding_provider: "EmbeddingProvider",
        index: "Index",
        registry: "DataSourceRegistry | None" = None,
        engine_factory: Callable[[URL], Engine] = default_engine_factory,
    ):
        self.embedding_provider = embedding_provider
        self.index = index
        if registry is None:
            from .registry import registry

        self.registry = registry
        self.engine_factory = engine_factory

    @contextmanager
    def connect(self, source: SQLDataSource) -> Iterator[Connection]:
        try:
            engine = self.engine_factory(connection_url(source))
        except (SQLAlchemyError, ImportError, ValueError) as e:
            raise SQLExecutionError(
                f"Failed to create engine for {source.identifier}: {e}"
            ) from e

        try:
            try:
                connection = engine.connect()
            except SQLAlchemyError as e:
                raise SQLExecutionError(
                    f"Failed to connect to {source.identifier}: {e}"
                ) from e
            with connection:
                yield connection
        finally:
            engine.dispose()

    def execute(self, connection: Connection, query: str) -> CursorResult:
        try:
            # Sent to the driver as-is: no bind parameter parsing, no % interpolation
            return connection.exec_driver_sql(
                query, execution_options={"no_parameters": True}
            )
        except SQLAlchemyError as e:
            raise SQLExecutionError(f"Failed to execute query: {e}") from e

    def fetch_schema(self, source: DataSource) -> SchemaQuery:
        """Read the table/column/type layout of a database."""
        if not isinstance(source, SQLDataSource):
            logger.warning(f"Cannot fetch a schema from non-SQL source {source}")
            return SchemaQuery.failure()

        query = INTROSPECTION_QUERIES[DatabaseType(source.database_type)]
        schema: dict[str, dict[str, str]] = {}
        with self.connect(source) as connection:
            result = self.execute(connection, query)
            try:
                for table_name, column_name, data_type in result:
                    schema.setdefault(str(table_name), {})[str(column_name)] = str(
                        data_type
                    )
            except SQLAlchemyError as e:
                raise SQLExecutionError(f"Failed to read schema: {e}") from e

        logger.info(f"Fetched schema of {len(schema)} table(s) from {source.identifier}")
        return SchemaQuery(schema=schema)

    def fetch_data(self, source: DataSource) -> TableQuery:
        """Run the source's query and materialize every row."""
        if not isinstance(source, SQLDataSource):
            logger.warning(f"Cannot fetch data from non-SQL source {source}")
            return TableQuery.failure()

        if source.query is None:
            logger.warning(f"Source {source.identifier} has no query to fetch data with")
            return TableQuery.failure()

        with self.connect(source) as connection:
            result = self.execute(connection, source.query)
            try:
                column_names = frozenset(result.keys())
                rows = [dict(row._mapping) for row in result]
            except SQLAlchemyError as e:
                raise SQLExecutionError(f"Failed to read query results: {e}") from e

        logger.info(f"Fetched {len(rows)} row(s) from {source.identifier}")
        return TableQuery(
            table_name=table_name_from_query(source.query),
            column_names=column_names,
            rows=rows,
        )

    def update_data(self, source: DataSource, query: str) -> TableQuery:
        """Run a data-modifying statement. Succeeds only if it touched at least one row."""
        if not isinstance(source, SQLDataSource):
            logger.warning(f"Cannot update non-SQL source {source}")
            return TableQuery.failure()

        with self.connect(source) as connection:
            result = self.execute(connection, query)
            rows_updated = result.rowcount
            try:
                connection.commit()
            except SQLAlchemyError as e:
                raise SQLExecutionError(f"Failed to commit update: {e}") from e

        logger.info(f"Update on {source.identifier} affected {rows_updated} row(s)")
        if rows_updated > 0:
            return TableQuery(result_type=ResultType.SUCCESS)
        return TableQuery(result_type=ResultType.FAILURE)

    def build_document(
        self, result: QueryResult, source: DataSource, embedding: list[float]
    ) -> SQLDocument:
        """Build the document for a fetched schema or table.

        Raises:
            ValueError: if the source is not a SQL source, the result failed, or
                the embedding is empty.
        """
        if not isinstance(source, SQLDataSource):
            raise ValueError("Data source is not an SQL data source.")
        if result.result_type is ResultType.FAILURE:
            raise ValueError("Cannot create document from failed query result")
        if not embedding:
            raise ValueError("Cannot create document without an embedding")

        if isinstance(result, SchemaQuery):
            kind, schema, query = "schema", result.to_text(), ""
        elif isinstance(result, TableQuery):
            kind, schema, query = "table", "", source.query or ""
        else:
            raise ValueError(f"Unsupported query result: {type(result).__name__}")

        return SQLDocument(
            id=f"{source.identifier}:{kind}",
            source_name=source.database_name,
            text=result.to_text(),
            embedding=list(embedding),
            dialect=DatabaseType(source.database_type).name,
            schema=schema,
            query=query,
        )

    def index_data(self, source: DataSource) -> bool:
        """Index a source's schema and query results as two documents.

        Only returns True when both documents were indexed. A document that was
        indexed before the other one failed stays in the index.
        """
        documents = []
        for result in (self.fetch_schema(source), self.fetch_data(source)):
            if result.result_type is ResultType.FAILURE:
                logger.warning(
                    f"Skipping {type(result).__name__} for {source.identifier}: "
                    "the fetch did not succeed"
                )
                continue
            embedding = self.embedding_provider.get_embedding(result.to_text())
            documents.append(self.build_document(result, source, embedding))

        indexed = [self.index.index_document(document) for document in documents]
        for document, success in zip(documents, indexed):
            if not success:
                logger.warning(f"Failed to index document {document.id}")

        return len(indexed) == 2 and all(indexed)

    def index_source(self, identifier: str) -> bool:
        """Index a source looked up by identifier in the data source registry."""
        return self.index_data(self.registry.get(identifier))

    async def afetch_schema(self, source: DataSource) -> SchemaQuery:
        return await sync_to_async(self.fetch_schema, thread_sensitive=False)(source)

    async def afetch_data(self, source: DataSource) -> TableQuery:
        return await sync_to_async(self.fetch_data, thread_sensitive=False)(source)

    async def aupdate_data(self, source: DataSource, query: str) -> TableQuery:
        return await sync_to_async(self.update_data, thread_sensitive=False)(
            source, query
        )

    async def aindex_data(self, source: DataSource) -> bool:
        return await sync_to_async(self.index_data, thread_sensitive=False)(source)

    async def aindex_source(self, identifier: str) -> bool:
        return await sync_to_async(self.index_source, thread_sensitive=False)(
            identifier
        )
