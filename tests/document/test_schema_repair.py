"""Tests for SchemaDescriptor validation and repair (structural completeness, idempotence)."""
import pytest

from aidee.services.document.brief import BRIEF_SCHEMA, FALLBACK_BRIEF
from aidee.services.document.schema import FieldSpec, FieldType, SchemaDescriptor, repair


SMALL_SCHEMA = SchemaDescriptor(
    name="small",
    fields=(
        FieldSpec("title", FieldType.STRING, default="Untitled"),
        FieldSpec("tags", FieldType.STRING_ARRAY, default=["general"], non_empty=True),
        FieldSpec("notes", FieldType.STRING_ARRAY, default=[]),
        FieldSpec(
            "owner",
            FieldType.OBJECT,
            fields=(FieldSpec("name", FieldType.STRING, default="nobody"),),
        ),
        FieldSpec(
            "steps",
            FieldType.OBJECT_ARRAY,
            default=[{"title": "first"}],
            non_empty=True,
            fields=(
                FieldSpec("title", FieldType.STRING, default="step"),
                FieldSpec("done", FieldType.STRING, default="no"),
            ),
        ),
    ),
)


def _assert_complete(tree, fields):
    for spec in fields:
        assert spec.name in tree
        value = tree[spec.name]
        assert value is not None
        if spec.type == FieldType.OBJECT:
            _assert_complete(value, spec.fields)
        elif spec.type == FieldType.OBJECT_ARRAY:
            if spec.non_empty:
                assert len(value) >= 1
            for item in value:
                _assert_complete(item, spec.fields)
        elif spec.type == FieldType.STRING_ARRAY and spec.non_empty:
            assert len(value) >= 1


class TestRepair:
    @pytest.mark.parametrize("tree", [{}, None, [], "text", 42, {"title": None, "owner": None, "steps": None}])
    def test_missing_structure_is_filled(self, tree):
        result = repair(tree, SMALL_SCHEMA)
        _assert_complete(result, SMALL_SCHEMA.fields)
        assert result["title"] == "Untitled"
        assert result["tags"] == ["general"]
        assert result["owner"] == {"name": "nobody"}
        assert result["steps"] == [{"title": "first", "done": "no"}]

    def test_model_values_are_kept(self):
        tree = {
            "title": "Smart chair",
            "tags": ["outdoor", "camping"],
            "notes": ["n1"],
            "owner": {"name": "Kim"},
            "steps": [{"title": "sketch", "done": "yes"}],
        }
        assert repair(tree, SMALL_SCHEMA) == tree

    def test_empty_non_empty_array_gets_default(self):
        result = repair({"tags": [], "steps": []}, SMALL_SCHEMA)
        assert result["tags"] == ["general"]
        assert result["steps"] == [{"title": "first", "done": "no"}]

    def test_empty_optional_array_stays_empty(self):
        assert repair({"notes": []}, SMALL_SCHEMA)["notes"] == []

    def test_blank_strings_and_bad_items_are_dropped(self):
        result = repair({"title": "  ", "tags": ["", 3, "ok"], "steps": ["bad", {"title": ""}]}, SMALL_SCHEMA)
        assert result["title"] == "Untitled"
        assert result["tags"] == ["ok"]
        assert result["steps"] == [{"title": "step", "done": "no"}]

    def test_unknown_keys_are_carried_over(self):
        result = repair({"extra": {"a": 1}}, SMALL_SCHEMA)
        assert result["extra"] == {"a": 1}

    def test_input_is_not_mutated(self):
        tree = {"owner": {"name": ""}, "tags": []}
        repair(tree, SMALL_SCHEMA)
        assert tree == {"owner": {"name": ""}, "tags": []}

    @pytest.mark.parametrize(
        "tree",
        [
            {},
            None,
            {"title": "", "tags": [None], "steps": [{}], "owner": "x"},
            {"key_features": [], "double_diamond": {"discover": {"tasks": [{"owner": ""}]}}},
        ],
    )
    def test_idempotent(self, tree):
        for schema in (SMALL_SCHEMA, BRIEF_SCHEMA):
            once = repair(tree, schema)
            assert repair(once, schema) == once

    def test_brief_from_empty_tree_is_complete(self):
        result = repair({}, BRIEF_SCHEMA)
        _assert_complete(result, BRIEF_SCHEMA.fields)
        assert set(result["double_diamond"]) == {
            "discover", "define", "develop", "deliver", "overall_budget_time", "purpose_notes",
        }
        assert result["double_diamond"]["overall_budget_time"]["ratio"]["develop"] == "40%"
        assert set(result["expert_reviews"]) == {"pm", "designer", "engineer", "marketer"}

    def test_fallback_brief_is_already_complete(self):
        assert repair(FALLBACK_BRIEF, BRIEF_SCHEMA) == FALLBACK_BRIEF

    def test_partial_budget_guide_is_filled(self):
        tree = {"double_diamond": {"overall_budget_time": {"total_budget_krw": "10M KRW", "ratio": "half"}}}
        budget = repair(tree, BRIEF_SCHEMA)["double_diamond"]["overall_budget_time"]
        assert budget["total_budget_krw"] == "10M KRW"
        assert budget["total_time_weeks"] == "To be estimated"
        assert set(budget["ratio"]) == {"discover", "define", "develop", "deliver"}


class TestFieldSpecValidation:
    def test_field_without_default_or_required_rejected(self):
        with pytest.raises(ValueError):
            FieldSpec("title", FieldType.STRING)

    def test_object_needs_children(self):
        with pytest.raises(ValueError):
            FieldSpec("owner", FieldType.OBJECT)

    def test_non_empty_needs_default(self):
        with pytest.raises(ValueError):
            FieldSpec("tags", FieldType.STRING_ARRAY, default=[], non_empty=True)

    def test_default_type_checked(self):
        with pytest.raises(ValueError):
            FieldSpec("tags", FieldType.STRING_ARRAY, default="not-a-list")

    def test_duplicate_names_rejected(self):
        with pytest.raises(ValueError):
            SchemaDescriptor(
                name="dup",
                fields=(
                    FieldSpec("a", FieldType.STRING, default="x"),
                    FieldSpec("a", FieldType.STRING, default="y"),
                ),
            )

    def test_skeleton_mirrors_shape(self):
        skeleton = SMALL_SCHEMA.skeleton()
        assert isinstance(skeleton["tags"], list)
        assert isinstance(skeleton["owner"], dict)
        assert isinstance(skeleton["steps"][0], dict)
