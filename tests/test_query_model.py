"""
Unit tests for the pure query model operations.
"""

from extract_query.core.models import (
    AggregateConfig,
    FilterCondition,
    JoinCondition,
    QueryDefinition,
    QuerySource,
    SortConfig,
)
from extract_query.query import model


class TestAliases:
    """Alias generation for added sources"""

    def test_aliases_are_sequential(self, empty_query):
        query = model.add_source(empty_query, "claims-db", "claims")
        query = model.add_source(query, "member-data", "members")

        assert query.source_aliases() == ["s1", "s2"]
        assert query.sources[1].source_id == "member-data"
        assert query.sources[1].table == "members"

    def test_alias_not_reissued_after_removal(self, empty_query):
        query = model.add_source(empty_query, "a", "t1")
        query = model.add_source(query, "b", "t2")
        query = model.remove_source(query, 0)
        query = model.add_source(query, "c", "t3")

        assert query.source_aliases() == ["s2", "s3"]
        assert len(set(query.source_aliases())) == len(query.sources)

    def test_alias_counter_seeded_from_existing_aliases(self):
        query = QueryDefinition(
            id="q",
            name="Cloned",
            sources=[
                QuerySource(source_id="claims-db", alias="s1"),
                QuerySource(source_id="provider-data", alias="s3"),
            ],
        )

        assert model.next_alias_number(query) == 4
        assert model.add_source(query, "member-data").sources[-1].alias == "s4"


class TestPurity:
    def test_operations_do_not_mutate_input(self, claims_members_query, field_factory):
        before = claims_members_query.model_dump()

        model.add_source(claims_members_query, "x")
        model.remove_source(claims_members_query, 0)
        model.add_field(claims_members_query, field_factory("first_name", "string", "s2"))
        model.remove_field(claims_members_query, 0)
        model.remove_join(claims_members_query, 0)
        model.remove_filter(claims_members_query, 0)

        assert claims_members_query.model_dump() == before

    def test_out_of_range_index_returns_equal_copy(self, claims_members_query):
        for operation in (
            model.remove_source,
            model.remove_field,
            model.remove_join,
            model.remove_filter,
            model.remove_sort,
            model.remove_aggregate,
        ):
            result = operation(claims_members_query, 99)
            assert result == claims_members_query
            assert result is not claims_members_query
            assert operation(claims_members_query, -1) == claims_members_query

    def test_returned_lists_are_independent(self, claims_members_query, field_factory):
        result = model.add_field(claims_members_query, field_factory("x", "string", "s1"))
        result.joins.clear()

        assert len(claims_members_query.joins) == 1


class TestRemoveSource:
    def test_cascades_to_every_reference(self, claims_members_query, field_factory):
        member_id = field_factory("member_id", "string", "s2")
        query = model.add_sort(claims_members_query, SortConfig(field=member_id, direction="DESC"))
        query = model.add_filter(query, FilterCondition(field=member_id, operator="equals", value="M1"))
        query = model.set_group_by(query, [member_id])
        query = model.add_aggregate(
            query,
            AggregateConfig(field=field_factory("first_name", "string", "s2"), function="COUNT", alias="n"),
        )

        result = model.remove_source(query, 1)

        assert result.source_aliases() == ["s1"]
        assert all(f.source != "s2" for f in result.selected_fields)
        assert all(
            j.left_field.source != "s2" and j.right_field.source != "s2" for j in result.joins
        )
        assert all(f.field.source != "s2" for f in result.filters)
        assert result.group_by == []
        assert result.order_by == []
        assert result.aggregates == []
        # s1 references survive
        assert [f.name for f in result.selected_fields] == ["claim_id", "member_id", "paid_amount"]
        assert len(result.filters) == 1


class TestFieldsJoinsFilters:
    def test_remove_field_keeps_dependent_join(self, claims_members_query):
        # member_id on s1 is index 1 and used by the join
        result = model.remove_field(claims_members_query, 1)

        assert len(result.selected_fields) == 3
        assert len(result.joins) == 1

    def test_add_join_performs_no_validation(self, empty_query, field_factory):
        left = field_factory("a", "string", "s9")
        right = field_factory("b", "date", "s9")

        result = model.add_join(empty_query, JoinCondition(left_field=left, right_field=right, type="LEFT"))

        assert len(result.joins) == 1
        assert result.joins[0].type.value == "LEFT"

    def test_add_and_remove_filter(self, empty_query, field_factory):
        condition = FilterCondition(
            field=field_factory("a", "string", "s1"), operator="contains", value="x"
        )
        query = model.add_filter(empty_query, condition)
        assert query.filters == [condition]
        assert model.remove_filter(query, 0).filters == []

    def test_set_limit_and_rename(self, empty_query):
        query = model.set_limit(empty_query, 50)
        assert query.limit == 50
        assert model.set_limit(query, -5).limit is None

        renamed = model.rename(model.rename(query, "Renamed", "with description"), "Again")
        assert renamed.name == "Again"
        assert renamed.description == "with description"


class TestNewQuery:
    def test_new_query_defaults(self):
        query = model.new_query()

        assert query.id.startswith("query-")
        assert query.name == "New Query"
        assert query.sources == [] and query.selected_fields == []
        assert query.created_at == query.updated_at
        assert query.created_at.tzinfo is not None

    def test_clone_is_deep(self, claims_members_query):
        clone = model.clone_query(claims_members_query)
        clone.selected_fields.pop()

        assert len(claims_members_query.selected_fields) == 4
