"""
Example usage of the extract query engine.

Builds a claims/members extract step by step, showing the validation
verdict after each change, then saves and previews it with sample data.
"""

import asyncio
import json

from dotenv import load_dotenv

from extract_query import EngineSettings, QueryWorkbench
from extract_query.core.models import FilterCondition, JoinCondition
from extract_query.core.sources import DataSource
from extract_query.utils import configure_logging

load_dotenv()


def sample_data_sources():
    """Claims and member databases registered with table metadata."""
    claims = DataSource.model_validate({
        "id": "claims-db",
        "name": "Claims Database",
        "type": "database",
        "connectionDetails": {"kind": "database", "type": "postgresql", "database": "claims_prod"},
        "metadata": {"tables": [{
            "name": "claims",
            "fields": [
                {"name": "claim_id", "type": "varchar(36)"},
                {"name": "member_id", "type": "varchar(20)"},
                {"name": "service_date", "type": "date"},
                {"name": "paid_amount", "type": "numeric(12,2)"},
            ],
        }]},
    })
    members = DataSource.model_validate({
        "id": "member-data",
        "name": "Member Database",
        "type": "database",
        "connectionDetails": {"kind": "database", "type": "mysql", "database": "members"},
        "metadata": {"tables": [{
            "name": "members",
            "fields": [
                {"name": "member_id", "type": "varchar(20)"},
                {"name": "first_name", "type": "text"},
                {"name": "date_of_birth", "type": "datetime"},
            ],
        }]},
    })
    return [claims, members]


def show(step, validation):
    status = "valid" if validation.is_valid else "invalid"
    print(f"\n{step}: {status}")
    for message in validation.messages:
        print(f"  [{message.severity.value}] {message.code}: {message.message}")


async def main():
    settings = EngineSettings.from_env(preview_latency=0.2)
    configure_logging(settings.log_level)

    workbench = QueryWorkbench.from_settings(sample_data_sources(), settings=settings)
    workbench.start_new("High-value claims by member")

    show("Add claims source", workbench.add_source("claims-db", "claims"))
    show("Add members source", workbench.add_source("member-data", "members"))

    claims = {f.name: f for f in workbench.fields_for_source("s1")}
    members = {f.name: f for f in workbench.fields_for_source("s2")}
    for field in (claims["claim_id"], claims["member_id"], claims["paid_amount"], members["member_id"]):
        workbench.add_field(field)
    show("Select fields", workbench.validation)

    show(
        "Join on member_id",
        workbench.add_join(JoinCondition(left_field=claims["member_id"], right_field=members["member_id"])),
    )
    show(
        "Filter paid_amount > 1000",
        workbench.add_filter(
            FilterCondition(field=claims["paid_amount"], operator="greaterThan", value=1000)
        ),
    )

    saved = workbench.save()
    print(f"\nSaved as {saved.id} ({workbench.store.status(saved.id)})")

    print("\n--- SQL Preview ---")
    print(workbench.sql_preview())
    print("\n--- Performance Estimate ---")
    print(json.dumps(workbench.performance_estimate(), indent=2))

    result = await workbench.preview()
    if result is not None:
        print("\n--- Preview ---")
        print(json.dumps(result.to_wire(), indent=2))


if __name__ == "__main__":
    asyncio.run(main())
