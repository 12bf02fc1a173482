import datetime
import json
from decimal import Decimal

import pytest

from django_ai_index.contrib.connectors.schema import (
    ResultType,
    SchemaQuery,
    TableQuery,
)


def test_table_query_text():
    result = TableQuery(
        table_name="customers",
        column_names=frozenset({"name", "id"}),
        rows=[{"id": 1, "name": "Ada"}],
    )

    assert json.loads(result.to_text()) == {
        "table": "customers",
        "columns": ["id", "name"],
        "rows": [{"id": 1, "name": "Ada"}],
    }


def test_table_query_text_encodes_database_values():
    result = TableQuery(
        table_name="payments",
        column_names=frozenset({"amount", "paid_on", "reference"}),
        rows=[
            {
                "amount": Decimal("12.50"),
                "paid_on": datetime.date(2024, 1, 2),
                "reference": b"\x01\xff",
            }
        ],
    )

    assert json.loads(result.to_text())["rows"] == [
        {"amount": "12.50", "paid_on": "2024-01-02", "reference": "01ff"}
    ]


def test_schema_query_text():
    result = SchemaQuery(schema={"customers": {"id": "INT"}})

    assert json.loads(result.to_text()) == {"schema": {"customers": {"id": "INT"}}}


def test_failures_are_empty():
    assert not TableQuery.failure().succeeded
    assert TableQuery.failure().is_empty()
    assert SchemaQuery.failure().is_empty()


def test_failed_result_cannot_carry_data():
    with pytest.raises(ValueError):
        TableQuery(result_type=ResultType.FAILURE, rows=[{"id": 1}])

    with pytest.raises(ValueError):
        SchemaQuery(result_type=ResultType.FAILURE, schema={"customers": {}})


def test_successful_result_can_be_empty():
    result = TableQuery(table_name="customers", column_names=frozenset({"id"}))

    assert result.succeeded
    assert result.rows == []
