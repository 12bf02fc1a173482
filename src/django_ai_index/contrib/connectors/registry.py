from .schema import DataSource


class DataSourceRegistry:
    """Tracks the data sources known to the project, keyed by identifier."""

    def __init__(self):
        self._sources: dict[str, DataSource] = {}

    def register(self, source: DataSource) -> DataSource:
        self._sources[source.identifier] = source
        return source

    def unregister(self, identifier: str):
        self._sources.pop(identifier, None)

    def get(self, identifier: str) -> DataSource:
        if identifier not in self._sources:
            raise KeyError(f"Data source '{identifier}' not found")
        return self._sources[identifier]

    def list(self) -> dict[str, DataSource]:
        return self._sources.copy()


registry = DataSourceRegistry()
