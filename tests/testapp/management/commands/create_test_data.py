from django.conf import settings
from django.core.management.base import BaseCommand, CommandError
from sqlalchemy import create_engine, text

CUSTOMERS = [
    (1, "Ada", 36),
    (2, "Grace", 45),
    (3, "Linus", 28),
]


class Command(BaseCommand):
    help = "Create the SQLite database behind the 'demo' data source"

    def add_arguments(self, parser):
        parser.add_argument(
            "--path",
            help="Where to create the database (defaults to the demo source's HOST)",
        )

    def handle(self, *args, **options):
        path = options.get("path") or self.demo_source_path()
        engine = create_engine(f"sqlite:///{path}")
        try:
            with engine.begin() as connection:
                connection.execute(text("DROP TABLE IF EXISTS customers"))
                connection.execute(
                    text(
                        "CREATE TABLE customers "
                        "(id INT PRIMARY KEY, name VARCHAR(255), age INT)"
                    )
                )
                connection.execute(
                    text("INSERT INTO customers (id, name, age) VALUES (:id, :name, :age)"),
                    [{"id": id, "name": name, "age": age} for id, name, age in CUSTOMERS],
                )
        finally:
            engine.dispose()

        self.stdout.write(f"Created {len(CUSTOMERS)} customers in {path}")

    def demo_source_path(self) -> str:
        for options in settings.AI_INDEX.get("DATA_SOURCES", []):
            if options["IDENTIFIER"] == "demo":
                return options["HOST"]
        raise CommandError("No 'demo' data source configured")
