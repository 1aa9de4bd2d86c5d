from __future__ import annotations

import inspect
import types
from dataclasses import dataclass
from datetime import date, datetime
from typing import Any, Callable, Dict, Iterable, List, Optional, Union, get_args, get_origin

JsonSchema = Dict[str, Any]

_SCALARS = (
    (bool, "boolean"),
    (int, "integer"),
    (float, "number"),
    (str, "string"),
    (dict, "object"),
    (list, "array"),
    (tuple, "array"),
)


def _unwrap_optional(annotation: Any) -> Any:
    if get_origin(annotation) in (Union, types.UnionType):
        members = [arg for arg in get_args(annotation) if arg is not type(None)]
        if len(members) == 1:
            return members[0]
    return annotation


def _schema_type(annotation: Any) -> str:
    """Map a parameter annotation onto a JSON schema type name.

    Calendar days travel as ISO strings, so ``date``/``datetime`` become
    ``"string"`` like anything unrecognized.
    """

    target = _unwrap_optional(annotation)
    target = get_origin(target) or target
    if isinstance(target, type):
        if issubclass(target, (date, datetime)):
            return "string"
        for python_type, name in _SCALARS:
            if issubclass(target, python_type):
                return name
    return "string"


@dataclass(frozen=True)
class ApiParameter:
    name: str
    kind: str
    required: bool
    default: Any = None

    @classmethod
    def from_signature(cls, param: inspect.Parameter) -> "ApiParameter":
        required = param.default is inspect.Parameter.empty
        return cls(
            name=param.name,
            kind=_schema_type(param.annotation),
            required=required,
            default=None if required else param.default,
        )

    def schema(self) -> JsonSchema:
        prop: JsonSchema = {"type": self.kind}
        if not self.required and isinstance(self.default, (str, int, float, bool)):
            prop["default"] = self.default
        return prop


@dataclass(frozen=True)
class ApiFunction:
    """A calendar operation exposed over the function-call HTTP surface."""

    name: str
    func: Callable[..., Any]
    description: str
    category: str
    tags: tuple[str, ...]
    parameters: tuple[ApiParameter, ...]

    @property
    def parameter_schema(self) -> JsonSchema:
        schema: JsonSchema = {
            "type": "object",
            "properties": {param.name: param.schema() for param in self.parameters},
        }
        required = [param.name for param in self.parameters if param.required]
        if required:
            schema["required"] = required
        return schema

    def describe(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "description": self.description,
            "category": self.category,
            "tags": list(self.tags),
            "parameters": self.parameter_schema,
        }

    def __call__(self, **kwargs: Any) -> Any:
        return self.func(**kwargs)


REGISTRY: Dict[str, ApiFunction] = {}


def register_api(
    name: str,
    *,
    description: str,
    category: str = "calendar",
    tags: Optional[Iterable[str]] = None,
) -> Callable[[Callable[..., Any]], Callable[..., Any]]:
    def decorator(func: Callable[..., Any]) -> Callable[..., Any]:
        if name in REGISTRY:
            raise ValueError(f"Calendar function '{name}' registered twice.")
        signature = inspect.signature(func, eval_str=True)
        REGISTRY[name] = ApiFunction(
            name=name,
            func=func,
            description=description,
            category=category,
            tags=tuple(tags or ()),
            parameters=tuple(ApiParameter.from_signature(param) for param in signature.parameters.values()),
        )
        return func

    return decorator


def get_api_functions() -> List[ApiFunction]:
    return sorted(REGISTRY.values(), key=lambda function: function.name)


def call_api(name: str, **kwargs: Any) -> Any:
    try:
        function = REGISTRY[name]
    except KeyError:
        raise KeyError(f"Unknown calendar function '{name}'.") from None
    return function(**kwargs)
