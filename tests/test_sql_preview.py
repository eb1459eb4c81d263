"""
Tests for the SQL preview text and performance estimate.
"""

from extract_query.core.models import AggregateConfig, FilterCondition, JoinCondition, SortConfig
from extract_query.query import model
from extract_query.query.sql_preview import estimate_query_performance, generate_sql_preview


def test_no_sources_renders_nothing(empty_query):
    assert generate_sql_preview(empty_query) == ""


def test_full_statement(claims_members_query, field_factory):
    member_id = claims_members_query.selected_fields[2]
    paid = claims_members_query.selected_fields[3]
    query = model.add_filter(
        claims_members_query,
        FilterCondition(field=member_id, operator="in", value=["M1", "M2"], logical_operator="OR"),
    )
    query = model.add_aggregate(query, AggregateConfig(field=paid, function="SUM", alias="total_paid"))
    query = model.set_group_by(query, [member_id])
    query = model.add_sort(query, SortConfig(field=member_id, direction="DESC"))
    query = model.set_limit(query, 100)

    assert generate_sql_preview(query).splitlines() == [
        "SELECT s1.claim_id, s1.member_id, s2.member_id, s1.paid_amount, SUM(s1.paid_amount) AS total_paid",
        "FROM claims s1",
        "INNER JOIN members s2 ON s1.member_id = s2.member_id",
        "WHERE s1.paid_amount > 100 OR s2.member_id IN ('M1', 'M2')",
        "GROUP BY s2.member_id",
        "ORDER BY s2.member_id DESC",
        "LIMIT 100",
    ]


def test_filter_rendering(empty_query, field_factory):
    name = field_factory("name", "string", "s1")
    born = field_factory("born", "date", "s1")
    query = model.add_source(empty_query, "member-data", "members")
    query = model.add_field(query, name)
    for condition in (
        FilterCondition(field=name, operator="contains", value="O'Neil"),
        FilterCondition(field=name, operator="notEquals", value="x"),
        FilterCondition(field=born, operator="between", value=["2024-01-01", "2024-12-31"]),
        FilterCondition(field=born, operator="between", value="2024"),
    ):
        query = model.add_filter(query, condition)

    where = generate_sql_preview(query).splitlines()[2]

    assert where == (
        "WHERE s1.name LIKE '%O''Neil%' AND s1.name <> 'x' "
        "AND s1.born BETWEEN '2024-01-01' AND '2024-12-31' "
        "AND s1.born BETWEEN ? AND ?"
    )


def test_contains_without_value(empty_query, field_factory):
    name = field_factory("name", "string", "s1")
    query = model.add_source(empty_query, "member-data", "members")
    query = model.add_filter(query, FilterCondition(field=name, operator="contains"))

    assert generate_sql_preview(query).splitlines()[2] == "WHERE s1.name LIKE NULL"


def test_join_type_and_source_without_table(empty_query, field_factory):
    left = field_factory("id", "string", "s1")
    right = field_factory("id", "string", "s2")
    query = model.add_source(empty_query, "claims-db")
    query = model.add_source(query, "member-data", "members")
    query = model.add_join(query, JoinCondition(left_field=left, right_field=right, type="LEFT"))

    lines = generate_sql_preview(query).splitlines()

    assert lines[0] == "SELECT *"
    assert lines[1] == "FROM claims-db s1"
    assert lines[2] == "LEFT JOIN members s2 ON s1.id = s2.id"


def test_performance_estimate(claims_members_query, field_factory):
    estimate = estimate_query_performance(claims_members_query)
    assert estimate == {"estimated_rows": 1000, "estimated_time": 1.0, "recommendations": []}

    query = model.remove_filter(claims_members_query, 0)
    for _ in range(2):
        query = model.add_join(query, claims_members_query.joins[0])
    for i in range(12):
        query = model.add_field(query, field_factory(f"c{i}", "string", "s1"))

    estimate = estimate_query_performance(query)

    assert estimate["estimated_rows"] == 1_000_000
    assert estimate["recommendations"] == [
        "Consider reducing the number of table joins",
        "Adding filters would improve query performance",
        "Consider reducing the number of selected fields",
    ]
