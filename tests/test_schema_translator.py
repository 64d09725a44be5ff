from typing import Any

import pytest
from pydantic import BaseModel, TypeAdapter, ValidationError

from core.models import OptionalFieldPolicy, TranslationStats
from core.schema_translator import (
    ANY_SCHEMA,
    MAX_TOTAL_PROPERTIES,
    SchemaTooLargeError,
    translate,
    translate_tool_schema,
)
from tests.conftest import object_schema


def validate(schema: Any, value: Any) -> Any:
    return TypeAdapter(schema).validate_python(value)


# ----------------------------------------------------------------- malformed
@pytest.mark.parametrize("node", [None, 42, "string", ["a", "b"], True])
def test_malformed_node_becomes_passthrough(node):
    schema = translate(node, TranslationStats())
    assert schema is ANY_SCHEMA
    assert validate(schema, {"anything": [1, 2]}) == {"anything": [1, 2]}


@pytest.mark.parametrize("node", [{}, {"type": "unknown"}, {"type": "date"}, {"description": "no kind"}])
def test_unknown_kind_becomes_any(node):
    assert translate(node, TranslationStats()) is ANY_SCHEMA


def test_union_without_null_becomes_any():
    assert translate({"type": ["string", "number"]}, TranslationStats()) is ANY_SCHEMA


# -------------------------------------------------------------- scalar kinds
def test_string_and_enum():
    assert validate(translate({"type": "string"}, TranslationStats()), "x") == "x"

    stats = TranslationStats()
    schema = translate({"type": "string", "enum": ["a", "b", "c"]}, stats)
    for value in ("a", "b", "c"):
        assert validate(schema, value) == value
    with pytest.raises(ValidationError):
        validate(schema, "d")
    assert stats.enum_values == {"a", "b", "c"}
    assert stats.total_string_length == 3


def test_string_length_bounds():
    schema = translate({"type": "string", "minLength": 2, "maxLength": 3}, TranslationStats())
    assert validate(schema, "abc") == "abc"
    with pytest.raises(ValidationError):
        validate(schema, "a")
    with pytest.raises(ValidationError):
        validate(schema, "abcd")


def test_number_bounds():
    schema = translate({"type": "number", "minimum": 0, "maximum": 1}, TranslationStats())
    assert validate(schema, 0.5) == 0.5
    with pytest.raises(ValidationError):
        validate(schema, 1.5)
    with pytest.raises(ValidationError):
        validate(schema, -0.1)


def test_integer_is_integral():
    schema = translate({"type": "integer", "minimum": 1}, TranslationStats())
    assert validate(schema, 3) == 3
    with pytest.raises(ValidationError):
        validate(schema, 2.5)
    with pytest.raises(ValidationError):
        validate(schema, 0)


def test_boolean():
    schema = translate({"type": "boolean"}, TranslationStats())
    assert validate(schema, True) is True


def test_array_of_items():
    stats = TranslationStats()
    schema = translate({"type": "array", "items": {"type": "integer"}}, stats)
    assert validate(schema, [1, 2]) == [1, 2]
    with pytest.raises(ValidationError):
        validate(schema, ["x"])
    assert stats.max_nesting_level == 1


def test_array_without_items_accepts_anything():
    schema = translate({"type": "array"}, TranslationStats())
    assert validate(schema, [1, "a", None]) == [1, "a", None]


# ---------------------------------------------------------- nullable unions
def test_nullable_string():
    schema = translate({"type": ["string", "null"]}, TranslationStats())
    assert validate(schema, None) is None
    assert validate(schema, "x") == "x"
    with pytest.raises(ValidationError):
        validate(schema, {"not": "a string"})


def test_nullable_boolean():
    schema = translate({"type": ["boolean", "null"]}, TranslationStats())
    assert validate(schema, None) is None
    assert validate(schema, False) is False
    with pytest.raises(ValidationError):
        validate(schema, [1])


def test_null_alone_is_nullable_any():
    schema = translate({"type": ["null"]}, TranslationStats())
    assert validate(schema, None) is None
    assert validate(schema, {"x": 1}) == {"x": 1}


def test_nullable_enum_keeps_literals():
    schema = translate({"type": ["string", "null"], "enum": ["a", "b"]}, TranslationStats())
    assert validate(schema, "a") == "a"
    assert validate(schema, None) is None
    with pytest.raises(ValidationError):
        validate(schema, "z")


# ------------------------------------------------------------------ objects
def test_strict_object_rejects_unknown_keys():
    node = {
        "type": "object",
        "properties": {"x": {"type": "string"}},
        "required": ["x"],
        "additionalProperties": False,
    }
    schema = translate(node, TranslationStats())
    with pytest.raises(ValidationError):
        validate(schema, {"x": "a", "y": 1})


def test_open_object_passes_unknown_keys_through():
    node = {"type": "object", "properties": {"x": {"type": "string"}}, "required": ["x"]}
    schema = translate(node, TranslationStats())
    instance = validate(schema, {"x": "a", "y": 1})
    assert instance.model_dump(by_alias=True) == {"x": "a", "y": 1}


def test_object_without_properties_is_empty_model():
    schema = translate({"type": "object"}, TranslationStats())
    assert issubclass(schema, BaseModel)
    assert validate(schema, {"a": 1}).model_dump() == {"a": 1}


def test_nullable_policy_requires_key_but_allows_null():
    node = {"type": "object", "properties": {"x": {"type": "string", "default": "d"}}}
    schema = translate(node, TranslationStats(), policy=OptionalFieldPolicy.NULLABLE)
    with pytest.raises(ValidationError):
        validate(schema, {})
    assert validate(schema, {"x": None}).x is None


def test_optional_policy_allows_missing_key_and_uses_default():
    node = {
        "type": "object",
        "properties": {
            "x": {"type": "string", "default": "d"},
            "y": {"type": "integer"},
        },
    }
    schema = translate(node, TranslationStats(), policy=OptionalFieldPolicy.OPTIONAL_DEFAULT)
    instance = validate(schema, {})
    assert instance.x == "d"
    assert instance.y is None


def test_required_fields_are_required_under_both_policies():
    node = {"type": "object", "properties": {"x": {"type": "string"}}, "required": ["x"]}
    for policy in OptionalFieldPolicy:
        schema = translate(node, TranslationStats(), policy=policy)
        with pytest.raises(ValidationError):
            validate(schema, {})
        with pytest.raises(ValidationError):
            validate(schema, {"x": None})


def test_descriptions_are_attached():
    node = {
        "type": "object",
        "description": "Search input",
        "properties": {"query": {"type": "string", "description": "Search terms"}},
        "required": ["query"],
    }
    json_schema = translate(node, TranslationStats()).model_json_schema()
    assert json_schema["description"] == "Search input"
    assert json_schema["properties"]["query"]["description"] == "Search terms"


def test_unsafe_property_names_keep_wire_names():
    node = {
        "type": "object",
        "properties": {
            "per-page": {"type": "integer"},
            "class": {"type": "string"},
            "model_name": {"type": "string"},
            "json": {"type": "boolean"},
        },
        "required": ["per-page", "class", "model_name", "json"],
        "additionalProperties": False,
    }
    schema = translate(node, TranslationStats())
    payload = {"per-page": 10, "class": "bug", "model_name": "m", "json": True}
    assert validate(schema, payload).model_dump(by_alias=True) == payload
    assert set(schema.model_json_schema()["properties"]) == set(payload)


def test_nested_objects_and_depth():
    node = {
        "type": "object",
        "properties": {
            "filter": {
                "type": "object",
                "properties": {"labels": {"type": "array", "items": {"type": "string"}}},
                "required": ["labels"],
            }
        },
        "required": ["filter"],
    }
    stats = TranslationStats()
    schema = translate(node, stats)
    instance = validate(schema, {"filter": {"labels": ["bug"]}})
    assert instance.filter.labels == ["bug"]
    assert stats.total_properties == 2
    assert stats.max_nesting_level == 3


# ------------------------------------------------------------------ ceiling
def test_exactly_the_ceiling_is_accepted():
    node = object_schema(1, prefix="outer")
    node["properties"]["outer0"] = object_schema(MAX_TOTAL_PROPERTIES - 1)
    stats = TranslationStats()
    translate(node, stats)
    assert stats.total_properties == MAX_TOTAL_PROPERTIES


def test_one_over_the_ceiling_raises():
    node = object_schema(1, prefix="outer")
    node["properties"]["outer0"] = object_schema(MAX_TOTAL_PROPERTIES)
    with pytest.raises(SchemaTooLargeError) as excinfo:
        translate(node, TranslationStats())
    assert excinfo.value.total == MAX_TOTAL_PROPERTIES + 1
    assert excinfo.value.limit == MAX_TOTAL_PROPERTIES


def test_ceiling_counts_sibling_subtrees_together():
    node = {
        "type": "object",
        "properties": {
            "a": object_schema(50, prefix="a"),
            "b": object_schema(50, prefix="b"),
        },
    }
    with pytest.raises(SchemaTooLargeError):
        translate(node, TranslationStats())


# -------------------------------------------------------------- idempotence
def test_translation_is_repeatable(issue_tool):
    first = translate(issue_tool.raw_schema, TranslationStats(), name="Issues")
    second = translate(issue_tool.raw_schema, TranslationStats(), name="Issues")
    assert first.model_json_schema() == second.model_json_schema()


# ----------------------------------------------------------- tool root model
def test_tool_schema_root_is_always_a_model():
    model, stats = translate_tool_schema("gh-broken", None)
    assert issubclass(model, BaseModel)
    assert model.model_validate({"free": "form"}).model_dump() == {"free": "form"}
    assert stats.total_properties == 0


def test_tool_schema_translates_issue_tool(issue_tool):
    model, stats = translate_tool_schema(issue_tool.name, issue_tool.raw_schema)
    assert model.__name__ == "GhListIssuesInput"
    instance = model.model_validate({"owner": "tensorflow", "repo": "tensorflow", "state": None, "per_page": 5})
    assert instance.owner == "tensorflow"
    assert stats.total_properties == 4
    assert stats.enum_values == {"open", "closed", "all"}
    with pytest.raises(ValidationError):
        model.model_validate({"owner": "o", "repo": "r", "state": "merged", "per_page": 5})
