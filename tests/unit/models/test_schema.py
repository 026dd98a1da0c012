"""Unit tests for parameter schema descriptors."""

from typing import Optional, Union

import pytest
from pydantic import BaseModel, Field

from mcpkit.logic.mcp.models.schema import (
    ParameterDescriptor,
    ParamType,
    SchemaDescriptor,
    accepts_var_keyword,
    param_type_for,
)


class TestParamTypeFor:
    """Test mapping of Python annotations."""

    @pytest.mark.parametrize(
        "annotation,expected",
        [
            (str, ParamType.STRING),
            (int, ParamType.NUMBER),
            (float, ParamType.NUMBER),
            (bool, ParamType.BOOLEAN),
            (list, ParamType.ARRAY),
            (list[int], ParamType.ARRAY),
            (dict, ParamType.OBJECT),
            (dict[str, int], ParamType.OBJECT),
            (Optional[int], ParamType.NUMBER),
            (Union[str, int], ParamType.STRING),
            (bytes, ParamType.STRING),
        ],
    )
    def test_annotations(self, annotation, expected):
        """Test each supported annotation."""
        assert param_type_for(annotation) == expected

    def test_pep604_optional(self):
        """Test X | None annotations."""
        assert param_type_for(float | None) == ParamType.NUMBER

    def test_pydantic_model_is_object(self):
        """Test nested models map to object."""
        class Point(BaseModel):
            x: int

        assert param_type_for(Point) == ParamType.OBJECT


class TestParameterDescriptor:
    """Test single parameter descriptors."""

    def test_default_description(self):
        """Test the generated description."""
        assert ParameterDescriptor("text").effective_description == "Parameter: text"
        assert ParameterDescriptor("text", description="Input").effective_description == "Input"

    def test_type_from_string(self):
        """Test that plain strings are accepted as types."""
        assert ParameterDescriptor("n", "integer").type is ParamType.INTEGER

    def test_empty_name_rejected(self):
        """Test that a name is required."""
        with pytest.raises(ValueError):
            ParameterDescriptor("")

    def test_frozen(self):
        """Test that descriptors are immutable."""
        param = ParameterDescriptor("a")
        with pytest.raises(AttributeError):
            param.required = False


class TestSchemaDescriptor:
    """Test schema construction and argument handling."""

    def test_from_callable(self):
        """Test inference from a handler signature."""
        def handler(text: str, count: int, loud: bool = False, *args, scale: float = 1.0):
            return text

        schema = SchemaDescriptor.from_callable(handler)

        assert schema.names == ["text", "count", "loud", "scale"]
        assert schema.required_names == ["text", "count"]
        assert schema.get("loud").type == ParamType.BOOLEAN
        assert schema.accepts_extra is False

    def test_from_callable_var_keyword(self):
        """Test that **kwargs marks the schema as accepting extra arguments."""
        def handler(text, **extra):
            return text

        schema = SchemaDescriptor.from_callable(handler)
        assert schema.names == ["text"]
        assert schema.get("text").type == ParamType.STRING
        assert schema.accepts_extra is True

    def test_from_model(self):
        """Test construction from a pydantic model."""
        class Args(BaseModel):
            title: str = Field(..., description="Note title")
            limit: int = 10
            tags: list[str] = Field(default_factory=list)

        schema = SchemaDescriptor.from_model(Args)
        assert schema.names == ["title", "limit", "tags"]
        assert schema.required_names == ["title"]
        assert schema.get("title").description == "Note title"
        assert schema.get("tags").type == ParamType.ARRAY

    def test_duplicate_names_rejected(self):
        """Test that parameter names are unique."""
        with pytest.raises(ValueError, match="Duplicate parameter names: a"):
            SchemaDescriptor.from_parameters([ParameterDescriptor("a"), ParameterDescriptor("a")])

    def test_to_json_schema(self):
        """Test the inputSchema rendering."""
        schema = SchemaDescriptor.from_parameters([
            ParameterDescriptor("text", ParamType.STRING),
            ParameterDescriptor("count", ParamType.NUMBER, required=False, description="How many"),
        ])
        assert schema.to_json_schema() == {
            "type": "object",
            "properties": {
                "text": {"type": "string", "description": "Parameter: text"},
                "count": {"type": "number", "description": "How many"},
            },
            "required": ["text"],
        }

    def test_empty_schema_has_no_required(self):
        """Test the schema of a handler without parameters."""
        assert SchemaDescriptor().to_json_schema() == {"type": "object", "properties": {}}

    def test_to_prompt_arguments(self):
        """Test prompt argument rendering keeps order."""
        schema = SchemaDescriptor.from_parameters([
            ParameterDescriptor("topic"),
            ParameterDescriptor("tone", required=False),
        ])
        arguments = [arg.to_wire() for arg in schema.to_prompt_arguments()]
        assert arguments == [
            {"name": "topic", "description": "Parameter: topic", "required": True},
            {"name": "tone", "description": "Parameter: tone", "required": False},
        ]

    def test_missing(self):
        """Test detection of absent required arguments."""
        schema = SchemaDescriptor.from_parameters([
            ParameterDescriptor("a"),
            ParameterDescriptor("b"),
            ParameterDescriptor("c", required=False),
        ])
        assert schema.missing({"b": 1}) == ["a"]
        assert schema.missing({"a": None, "b": 2}) == []


class TestCoercion:
    """Test lenient argument coercion."""

    @pytest.fixture
    def schema(self):
        return SchemaDescriptor.from_parameters([
            ParameterDescriptor("n", ParamType.NUMBER),
            ParameterDescriptor("i", ParamType.INTEGER),
            ParameterDescriptor("s", ParamType.STRING),
        ])

    def test_numeric_strings_become_numbers(self, schema):
        """Test int and float parsing."""
        assert schema.coerce({"n": "3", "i": " 42 "}) == {"n": 3, "i": 42}
        assert schema.coerce({"n": "2.5"}) == {"n": 2.5}
        assert schema.coerce({"n": "1e3"}) == {"n": 1000.0}

    def test_non_numeric_strings_untouched(self, schema):
        """Test that type mismatches are not errors."""
        assert schema.coerce({"n": "abc", "i": "", "s": "7"}) == {"n": "abc", "i": "", "s": "7"}

    def test_nan_and_infinity_untouched(self, schema):
        """Test that non-finite values are not produced."""
        assert schema.coerce({"n": "nan", "i": "inf"}) == {"n": "nan", "i": "inf"}

    def test_other_values_untouched(self, schema):
        """Test that non-string values and unknown keys pass through."""
        arguments = {"n": 1.5, "i": None, "extra": "5"}
        assert schema.coerce(arguments) == arguments

    def test_bind_filters_undeclared(self, schema):
        """Test that undeclared arguments are dropped unless **kwargs is accepted."""
        assert schema.bind({"n": 1, "extra": 2}) == {"n": 1}

    def test_bind_passes_extra(self):
        """Test that a schema accepting extras binds everything."""
        schema = SchemaDescriptor.from_parameters([ParameterDescriptor("a")], accepts_extra=True)
        assert schema.bind({"a": 1, "b": 2}) == {"a": 1, "b": 2}


def test_accepts_var_keyword():
    """Test detection of **kwargs."""
    def with_kwargs(a, **kw):
        pass

    def without(a, b=1):
        pass

    assert accepts_var_keyword(with_kwargs) is True
    assert accepts_var_keyword(without) is False
    assert accepts_var_keyword(print) is False
