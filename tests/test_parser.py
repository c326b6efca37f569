from rwa_core.parser import parse, parse_float_prefix, parse_int_prefix
from rwa_core.schemas import ColumnRule, Schema, get_schema

from conftest import COMMODITY_CSV, DATED_TOTAL_CSV

TOTAL_SCHEMA = Schema("test_total", (ColumnRule(0, "date", "string"), ColumnRule(1, "total", "integer")))


def test_end_to_end_dated_total():
    series = parse(DATED_TOTAL_CSV, TOTAL_SCHEMA)
    assert series.to_records() == [
        {"date": "2024-01-01", "total": 500},
        {"date": "2024-02-01", "total": 1500},
    ]


def test_header_is_always_discarded():
    series = parse("2024-01-01,7\n2024-02-01,8\n", TOTAL_SCHEMA)
    assert series.field_values("total") == [8]


def test_empty_and_header_only_yield_empty_series():
    assert parse("", TOTAL_SCHEMA).empty
    assert parse("date,total", TOTAL_SCHEMA).empty
    assert parse("date,total\n", TOTAL_SCHEMA).empty


def test_short_rows_are_dropped_not_partially_populated():
    text = "date,total\n2024-01-01\n2024-02-01,5\n,\n"
    series = parse(text, TOTAL_SCHEMA)
    assert series.to_records() == [{"date": "2024-02-01", "total": 5}, {"date": "", "total": 0}]


def test_required_columns_follow_highest_index():
    schema = get_schema("real_estate_volume")
    assert schema.required_columns == 8
    text = "h\n2024-01-01,1,2,3,4,5,6\n2024-02-01,1,2,3,4,5,6,77\n"
    assert parse(text, schema).to_records() == [{"date": "2024-02-01", "total": 77}]


def test_non_numeric_cells_take_the_default():
    schema = Schema(
        "defaults",
        (
            ColumnRule(0, "date", "string"),
            ColumnRule(1, "count", "integer", default=-1),
            ColumnRule(2, "amount", "float", default=0.0),
        ),
    )
    series = parse("h\n2024-01-01,n/a,\n", schema)
    assert series.to_records() == [{"date": "2024-01-01", "count": -1, "amount": 0.0}]


def test_numeric_prefix_semantics():
    assert parse_int_prefix("12.7") == 12
    assert parse_int_prefix(" 42abc") == 42
    assert parse_int_prefix("-3") == -3
    assert parse_int_prefix("abc") is None
    assert parse_float_prefix("1.5e3x") == 1500.0
    assert parse_float_prefix(".5") == 0.5
    assert parse_float_prefix("") is None


def test_non_adjacent_columns_map_to_fields():
    schema = get_schema("micropayment_volume")
    text = "date,algo,stable,total,x,y,hafn\n2024-01-01,1.5,2.5,10.0,0,0,6.0\n"
    assert parse(text, schema).to_records() == [
        {"date": "2024-01-01", "algo": 1.5, "stable": 2.5, "hafn": 6.0, "total": 10.0}
    ]


def test_commodity_breakdown_fields():
    series = parse(COMMODITY_CSV, get_schema("commodity_breakdown"))
    assert series.last == {"date": "2024-02-01", "gold$": 200, "silver$": 300, "gold": 400, "total": 900}


def test_snapshot_schema_has_no_date():
    series = parse("total\n42\n", get_schema("commodity_holders"))
    assert series.to_records() == [{"total": 42}]
    assert not get_schema("commodity_holders").time_indexed


def test_crlf_line_endings():
    series = parse("date,total\r\n2024-01-01,5\r\n", TOTAL_SCHEMA)
    assert series.to_records() == [{"date": "2024-01-01", "total": 5}]


def test_order_preserved_and_duplicates_kept():
    text = "h\n2024-03-01,3\n2024-01-01,1\n2024-01-01,1\n"
    assert parse(text, TOTAL_SCHEMA).field_values("date") == ["2024-03-01", "2024-01-01", "2024-01-01"]


def test_parse_is_pure():
    first = parse(COMMODITY_CSV, get_schema("commodity_breakdown"))
    second = parse(COMMODITY_CSV, get_schema("commodity_breakdown"))
    assert first == second


def test_records_are_read_only():
    series = parse(DATED_TOTAL_CSV, TOTAL_SCHEMA)
    try:
        series.records[0]["total"] = 0  # type: ignore[index]
    except TypeError:
        pass
    else:
        raise AssertionError("record mutation should fail")
    assert series.records[0]["total"] == 500


def test_float_overflow_takes_the_default():
    assert parse_float_prefix("1e400") is None
    series = parse("date,value,cumulative\n2024-01-01,1e400,5\n", get_schema("overview_volume"))
    assert series.to_records() == [{"date": "2024-01-01", "value": 0.0, "cumulative": 5.0}]
