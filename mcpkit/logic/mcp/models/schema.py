"""Registration-time schema descriptors for tool and prompt parameters.

A descriptor is built once when a handler is registered and never changes
afterwards. It can be declared explicitly, taken from a pydantic model, or
read from a handler's signature.
"""

import inspect
import types
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Callable, Iterable, Mapping, Optional, Union, get_args, get_origin

from pydantic import BaseModel

from .mcp_types import PromptArgument


class ParamType(str, Enum):
    """JSON Schema primitive types supported for parameters."""

    STRING = "string"
    NUMBER = "number"
    INTEGER = "integer"
    BOOLEAN = "boolean"
    ARRAY = "array"
    OBJECT = "object"

    def __str__(self) -> str:
        return self.value


# bool before int: bool is an int subclass
_PYTHON_TYPES = {
    bool: ParamType.BOOLEAN,
    str: ParamType.STRING,
    int: ParamType.NUMBER,
    float: ParamType.NUMBER,
    list: ParamType.ARRAY,
    tuple: ParamType.ARRAY,
    set: ParamType.ARRAY,
    dict: ParamType.OBJECT,
}


def param_type_for(annotation: Any) -> ParamType:
    """Map a Python annotation to a parameter type.

    Unknown and unannotated types fall back to string.
    """
    if annotation is inspect.Parameter.empty or annotation is Any:
        return ParamType.STRING

    origin = get_origin(annotation)
    if origin is Union or (hasattr(types, "UnionType") and origin is types.UnionType):
        members = [arg for arg in get_args(annotation) if arg is not type(None)]
        if len(members) == 1:
            return param_type_for(members[0])
        return ParamType.STRING
    if origin is not None:
        annotation = origin

    if inspect.isclass(annotation):
        if issubclass(annotation, BaseModel):
            return ParamType.OBJECT
        for python_type, param_type in _PYTHON_TYPES.items():
            if issubclass(annotation, python_type):
                return param_type
    return ParamType.STRING


@dataclass(frozen=True)
class ParameterDescriptor:
    """Declared parameter of a tool or prompt."""

    name: str
    type: ParamType = ParamType.STRING
    required: bool = True
    description: Optional[str] = None

    def __post_init__(self):
        if not self.name:
            raise ValueError("Parameter name must not be empty")
        object.__setattr__(self, "type", ParamType(self.type))

    @property
    def effective_description(self) -> str:
        return self.description or f"Parameter: {self.name}"


@dataclass(frozen=True)
class SchemaDescriptor:
    """Ordered, immutable set of parameter descriptors."""

    parameters: tuple[ParameterDescriptor, ...] = field(default_factory=tuple)
    accepts_extra: bool = False

    def __post_init__(self):
        names = [param.name for param in self.parameters]
        duplicates = sorted({name for name in names if names.count(name) > 1})
        if duplicates:
            raise ValueError(f"Duplicate parameter names: {', '.join(duplicates)}")

    @classmethod
    def from_parameters(
        cls,
        parameters: Iterable[ParameterDescriptor],
        accepts_extra: bool = False,
    ) -> "SchemaDescriptor":
        """Build a descriptor from an explicit ordered list."""
        return cls(parameters=tuple(parameters), accepts_extra=accepts_extra)

    @classmethod
    def from_model(cls, model: type[BaseModel]) -> "SchemaDescriptor":
        """Build a descriptor from a pydantic model's fields."""
        parameters = [
            ParameterDescriptor(
                name=info.alias or name,
                type=param_type_for(info.annotation),
                required=info.is_required(),
                description=info.description,
            )
            for name, info in model.model_fields.items()
        ]
        return cls.from_parameters(parameters)

    @classmethod
    def from_callable(cls, func: Callable[..., Any]) -> "SchemaDescriptor":
        """Build a descriptor from a handler's signature."""
        parameters = []
        accepts_extra = False
        for param in inspect.signature(func).parameters.values():
            if param.kind is inspect.Parameter.VAR_KEYWORD:
                accepts_extra = True
                continue
            if param.kind in (inspect.Parameter.VAR_POSITIONAL, inspect.Parameter.POSITIONAL_ONLY):
                continue
            parameters.append(
                ParameterDescriptor(
                    name=param.name,
                    type=param_type_for(param.annotation),
                    required=param.default is inspect.Parameter.empty,
                )
            )
        return cls.from_parameters(parameters, accepts_extra=accepts_extra)

    @property
    def names(self) -> list[str]:
        return [param.name for param in self.parameters]

    @property
    def required_names(self) -> list[str]:
        return [param.name for param in self.parameters if param.required]

    def get(self, name: str) -> Optional[ParameterDescriptor]:
        for param in self.parameters:
            if param.name == name:
                return param
        return None

    def to_json_schema(self) -> dict[str, Any]:
        """Render as a JSON Schema object definition."""
        schema: dict[str, Any] = {
            "type": "object",
            "properties": {
                param.name: {
                    "type": param.type.value,
                    "description": param.effective_description,
                }
                for param in self.parameters
            },
        }
        if self.required_names:
            schema["required"] = self.required_names
        return schema

    def to_prompt_arguments(self) -> list[PromptArgument]:
        return [
            PromptArgument(
                name=param.name,
                description=param.effective_description,
                required=param.required,
            )
            for param in self.parameters
        ]

    def missing(self, arguments: Mapping[str, Any]) -> list[str]:
        """Names of required parameters absent from the arguments."""
        return [name for name in self.required_names if name not in arguments]

    def coerce(self, arguments: Mapping[str, Any]) -> dict[str, Any]:
        """Apply lenient coercion: numeric strings become numbers for numeric parameters.

        Values of any other type are passed through untouched, and so are
        keys that are not declared.
        """
        coerced = dict(arguments)
        for name, value in arguments.items():
            param = self.get(name)
            if param is None or not isinstance(value, str):
                continue
            if param.type in (ParamType.NUMBER, ParamType.INTEGER):
                number = _parse_number(value)
                if number is not None:
                    coerced[name] = number
        return coerced

    def bind(self, arguments: Mapping[str, Any]) -> dict[str, Any]:
        """Keyword arguments for the handler; undeclared keys only when it takes **kwargs."""
        if self.accepts_extra:
            return dict(arguments)
        declared = set(self.names)
        return {name: value for name, value in arguments.items() if name in declared}


def accepts_var_keyword(func: Callable[..., Any]) -> bool:
    """Whether the callable takes **kwargs."""
    try:
        parameters = inspect.signature(func).parameters.values()
    except (TypeError, ValueError):
        return False
    return any(param.kind is inspect.Parameter.VAR_KEYWORD for param in parameters)


def _parse_number(value: str) -> Optional[Union[int, float]]:
    text = value.strip()
    if not text:
        return None
    try:
        return int(text)
    except ValueError:
        pass
    try:
        number = float(text)
    except ValueError:
        return None
    if number != number or number in (float("inf"), float("-inf")):
        return None
    return number
