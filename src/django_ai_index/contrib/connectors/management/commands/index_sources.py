"""
Index registered SQL data sources.

For each source the schema and the result of its query are embedded and written
to the configured vector index as two documents.
"""

import logging
import time
import traceback

from django.core.management.base import BaseCommand, CommandError

from django_ai_index.conf import get_embedding_provider, get_index
from django_ai_index.contrib.connectors.registry import registry
from django_ai_index.contrib.connectors.schema import SQLDataSource
from django_ai_index.contrib.connectors.sql import SQLDataConnector

logger = logging.getLogger(__name__)


class Command(BaseCommand):
    help = "Index registered SQL data sources into the configured vector index"

    def add_arguments(self, parser):
        parser.add_argument(
            "identifiers",
            nargs="*",
            help="Identifiers of the data sources to index (default: all SQL sources)",
        )
        parser.add_argument(
            "--dry-run",
            action="store_true",
            help="List the sources that would be indexed and exit",
        )
        parser.add_argument(
            "--verbose",
            action="store_true",
            help="Log debug output and print tracebacks for failed sources",
        )

    def handle(self, *args, **options):
        self.verbose = options["verbose"]
        if self.verbose:
            logging.getLogger("django_ai_index").setLevel(logging.DEBUG)

        identifiers = self.select_sources(options.get("identifiers") or [])
        if not identifiers:
            self.stdout.write(self.style.WARNING("No data sources registered"))
            return

        self.stdout.write(f"Found {len(identifiers)} data source(s) to index:")
        for identifier in identifiers:
            self.stdout.write(f"  - {identifier}")

        if options["dry_run"]:
            self.stdout.write(self.style.WARNING("DRY RUN: nothing was indexed"))
            return

        connector = SQLDataConnector(
            embedding_provider=get_embedding_provider(),
            index=get_index(),
            registry=registry,
        )

        started = time.monotonic()
        failed = [
            identifier
            for identifier in identifiers
            if not self.index_source(connector, identifier)
        ]
        elapsed = time.monotonic() - started

        self.stdout.write("")
        self.stdout.write(
            f"Successfully indexed: {len(identifiers) - len(failed)} "
            f"in {elapsed:.2f} seconds"
        )
        if failed:
            self.stdout.write(self.style.ERROR(f"Failed: {', '.join(failed)}"))
            raise CommandError(f"Failed to index {len(failed)} data source(s)")

    def select_sources(self, requested: list[str]) -> list[str]:
        # API sources have no connector yet, so only SQL sources are indexable
        available = [
            identifier
            for identifier, source in registry.list().items()
            if isinstance(source, SQLDataSource)
        ]
        if not requested:
            return available

        unknown = [identifier for identifier in requested if identifier not in available]
        if unknown:
            raise CommandError(f"Unknown data sources: {unknown}")
        return requested

    def index_source(self, connector: SQLDataConnector, identifier: str) -> bool:
        self.stdout.write(f"Indexing '{identifier}'...")
        try:
            indexed = connector.index_source(identifier)
        except Exception as e:
            self.stdout.write(self.style.ERROR(f"  Failed to index '{identifier}': {e}"))
            if self.verbose:
                self.stdout.write(traceback.format_exc())
            return False

        if indexed:
            self.stdout.write(self.style.SUCCESS(f"  Indexed '{identifier}'"))
        else:
            self.stdout.write(
                self.style.ERROR(f"  '{identifier}' was only partially indexed")
            )
        return indexed
