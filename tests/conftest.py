"""
Shared fixtures: a claims/members/providers source registry, its catalog,
and ready-made query definitions.
"""

import pytest
from typing import Dict, List

from extract_query.catalog.resolver import SourceCatalog
from extract_query.core.models import (
    FilterCondition,
    JoinCondition,
    QueryDefinition,
    QueryField,
    QuerySource,
)
from extract_query.core.sources import DataSource
from extract_query.execution.stub import SamplePreviewBackend
from extract_query.query import model


def _fields(*pairs) -> List[Dict[str, object]]:
    return [{"name": name, "type": ftype, "nullable": False} for name, ftype in pairs]


@pytest.fixture
def data_sources() -> List[DataSource]:
    claims = DataSource.model_validate({
        "id": "claims-db",
        "name": "Claims Database",
        "type": "database",
        "status": "active",
        "connectionDetails": {
            "kind": "database",
            "type": "postgresql",
            "host": "claims.example.com",
            "database": "claims_prod",
            "username": "reader",
            "password": "secret",
        },
        "metadata": {
            "tables": [{
                "name": "claims",
                "schema": "public",
                "fields": _fields(
                    ("claim_id", "string"),
                    ("member_id", "varchar(20)"),
                    ("service_date", "date"),
                    ("provider_id", "string"),
                    ("paid_amount", "numeric(12,2)"),
                ),
            }]
        },
    })
    members = DataSource.model_validate({
        "id": "member-data",
        "name": "Member Database",
        "type": "database",
        "connectionDetails": {"kind": "database", "type": "mysql", "database": "members"},
        "metadata": {
            "tables": [{
                "name": "Members",
                "fields": _fields(
                    ("member_id", "string"),
                    ("first_name", "string"),
                    ("date_of_birth", "timestamp"),
                ),
            }]
        },
    })
    providers = DataSource.model_validate({
        "id": "provider-feed",
        "name": "Provider File",
        "type": "file",
        "connectionDetails": {"kind": "file", "type": "csv", "location": "/data/providers"},
        "metadata": {
            "tables": [{
                "name": "providers",
                "fields": _fields(
                    ("provider_id", "str"),
                    ("specialty", "str"),
                    ("panel_size", "int64"),
                ),
            }]
        },
    })
    return [claims, members, providers]


@pytest.fixture
def catalog(data_sources) -> SourceCatalog:
    return SourceCatalog(data_sources)


def make_field(name: str, ftype: str, source: str, table: str = None) -> QueryField:
    return QueryField(name=name, type=ftype, source=source, table=table)


@pytest.fixture
def field_factory():
    return make_field


@pytest.fixture
def claims_members_query() -> QueryDefinition:
    """Two sources, a string-to-string join and one filter: valid."""
    claim_id = make_field("claim_id", "string", "s1", "claims")
    claim_member = make_field("member_id", "string", "s1", "claims")
    member_id = make_field("member_id", "string", "s2", "members")
    paid = make_field("paid_amount", "decimal", "s1", "claims")

    query = model.new_query("Claims with members", query_id="query-1")
    query = model.add_source(query, "claims-db", "claims")
    query = model.add_source(query, "member-data", "members")
    for field in (claim_id, claim_member, member_id, paid):
        query = model.add_field(query, field)
    query = model.add_join(query, JoinCondition(left_field=claim_member, right_field=member_id))
    query = model.add_filter(
        query, FilterCondition(field=paid, operator="greaterThan", value=100)
    )
    return query


@pytest.fixture
def backend() -> SamplePreviewBackend:
    return SamplePreviewBackend(latency=0)


@pytest.fixture
def empty_query() -> QueryDefinition:
    return QueryDefinition(id="empty", name="Empty")


@pytest.fixture
def source() -> QuerySource:
    return QuerySource(source_id="claims-db", table="CLAIMS", alias="s1")
