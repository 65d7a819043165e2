"""Tests for schema declaration and argument enforcement."""

import pytest
from gateway.schema import (
    FieldSpec,
    InvalidParamsError,
    array,
    boolean,
    obj,
    object_schema,
    string,
    validate_arguments,
)

FIELDS = {
    "data_id": string("Data identifier", required=True),
    "risk": string(enum=["low", "moderate", "high"], default="low"),
    "communities": array(),
    "mitigate": boolean(default=True),
    "permissions": obj(online=boolean(), label=string()),
}


class TestRendering:
    def test_object_schema(self):
        schema = object_schema(FIELDS)
        assert schema["type"] == "object"
        assert schema["required"] == ["data_id"]
        assert schema["properties"]["data_id"] == {"type": "string", "description": "Data identifier"}
        assert schema["properties"]["risk"]["enum"] == ["low", "moderate", "high"]
        assert schema["properties"]["risk"]["default"] == "low"
        assert schema["properties"]["communities"]["items"] == {"type": "string"}
        assert schema["properties"]["permissions"]["properties"]["online"] == {"type": "boolean"}

    def test_no_required_key_when_all_optional(self):
        assert "required" not in object_schema({"a": string()})

    def test_unknown_type_rejected(self):
        with pytest.raises(ValueError):
            FieldSpec("date")


class TestValidation:
    def test_defaults_filled(self):
        assert validate_arguments(FIELDS, {"data_id": "d1"}) == {
            "data_id": "d1",
            "risk": "low",
            "mitigate": True,
        }

    def test_undeclared_fields_dropped(self):
        out = validate_arguments(FIELDS, {"data_id": "d1", "extra": 1})
        assert "extra" not in out

    def test_missing_required(self):
        with pytest.raises(InvalidParamsError) as exc_info:
            validate_arguments(FIELDS, {})
        assert exc_info.value.problems == ["data_id: required"]

    def test_enum_violation(self):
        with pytest.raises(InvalidParamsError, match="risk: must be one of low, moderate, high"):
            validate_arguments(FIELDS, {"data_id": "d1", "risk": "extreme"})

    def test_every_problem_reported(self):
        with pytest.raises(InvalidParamsError) as exc_info:
            validate_arguments(FIELDS, {"mitigate": "yes", "communities": ["a", 2]})
        assert exc_info.value.problems == [
            "data_id: required",
            "communities[1]: expected string",
            "mitigate: expected boolean",
        ]

    def test_nested_object(self):
        out = validate_arguments(FIELDS, {"data_id": "d1", "permissions": {"online": True, "x": 1}})
        assert out["permissions"] == {"online": True}

    def test_nested_object_type_error(self):
        with pytest.raises(InvalidParamsError, match="permissions.online: expected boolean"):
            validate_arguments(FIELDS, {"data_id": "d1", "permissions": {"online": "no"}})

    def test_bool_is_not_a_number(self):
        with pytest.raises(InvalidParamsError):
            validate_arguments({"n": FieldSpec("number")}, {"n": True})

    def test_default_is_copied(self):
        fields = {"tags": FieldSpec("array", default=[])}
        first = validate_arguments(fields, {})
        first["tags"].append("x")
        assert validate_arguments(fields, {})["tags"] == []

    def test_error_code(self):
        with pytest.raises(InvalidParamsError) as exc_info:
            validate_arguments(FIELDS, {})
        assert exc_info.value.code == -32602
