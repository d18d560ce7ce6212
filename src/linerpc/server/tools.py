"""
MIT License
Copyright (c) 2026 arpan404
See LICENSE file for full license text.

Tool catalog for the MCP server and the two built-in demo tools.

Each tool pairs an advertised JSON schema with a strict pydantic model used
to validate ``tools/call`` arguments, so what ``tools/list`` declares as
required is exactly what ``tools/call`` enforces.
"""

from __future__ import annotations

import inspect
import math
from collections.abc import Awaitable, Callable, Iterable
from dataclasses import dataclass, field
from typing import Any, Generic, TypeVar, Union

from pydantic import BaseModel, ConfigDict, Field, StrictFloat, StrictInt, StrictStr, field_validator

from ..jsonrpc import InvalidParamsError, MethodAlreadyRegisteredError

ArgsT = TypeVar("ArgsT", bound=BaseModel)

ToolFn = Callable[[ArgsT], Union[Any, Awaitable[Any]]]


@dataclass(frozen=True, slots=True)
class ToolSpec:
    name: str
    description: str
    parameters_schema: dict[str, Any] = field(default_factory=dict)


@dataclass(frozen=True)
class Tool(Generic[ArgsT]):
    spec: ToolSpec
    args_model: type[ArgsT]
    fn: ToolFn[ArgsT]

    def input_schema(self) -> dict[str, Any]:
        return {"type": "object", **self.spec.parameters_schema}

    def required_fields(self) -> list[str]:
        return [
            name
            for name, info in self.args_model.model_fields.items()
            if info.is_required()
        ]

    async def invoke(self, args: ArgsT) -> Any:
        result = self.fn(args)
        if inspect.isawaitable(result):
            result = await result
        return result


class ToolCatalog:
    """Stores tools by name, in registration order."""

    def __init__(self, tools: Iterable[Tool[Any]] = ()) -> None:
        self._tools: dict[str, Tool[Any]] = {}
        self.register_many(tools)

    def register(self, tool: Tool[Any], *, overwrite: bool = False) -> None:
        name = tool.spec.name
        if not overwrite and name in self._tools:
            raise MethodAlreadyRegisteredError(f"Tool already registered: {name}")
        self._tools[name] = tool

    def register_many(self, tools: Iterable[Tool[Any]], *, overwrite: bool = False) -> None:
        for t in tools:
            self.register(t, overwrite=overwrite)

    def get(self, name: str) -> Tool[Any] | None:
        return self._tools.get(name)

    def list(self) -> list[Tool[Any]]:
        return list(self._tools.values())

    def names(self) -> list[str]:
        return list(self._tools.keys())


# ---------------------------------------------------------------------------
# Built-in demo tools
# ---------------------------------------------------------------------------


class MathAddArgs(BaseModel):
    model_config = ConfigDict(strict=True, allow_inf_nan=False)

    a: Union[StrictInt, StrictFloat] = Field(description="First addend")
    b: Union[StrictInt, StrictFloat] = Field(description="Second addend")

    @field_validator("a", "b", mode="before")
    @classmethod
    def _reject_bool(cls, value: Any) -> Any:
        if isinstance(value, bool):
            raise ValueError("must be a number, not a boolean")
        return value


class EchoArgs(BaseModel):
    model_config = ConfigDict(strict=True)

    text: StrictStr = Field(description="Text to echo back")


def format_number(value: int | float) -> str:
    """Render a number the way a JSON peer would print it (``42.0`` -> ``"42"``)."""
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


def _math_add(args: MathAddArgs) -> str:
    total = args.a + args.b
    if isinstance(total, float) and not math.isfinite(total):
        raise InvalidParamsError(
            "Sum is out of range for a JSON number",
            data={"name": "math_add", "arguments": {"a": args.a, "b": args.b}},
        )
    return format_number(total)


def _echo(args: EchoArgs) -> str:
    return args.text


MATH_ADD_TOOL: Tool[MathAddArgs] = Tool(
    spec=ToolSpec(
        name="math_add",
        description="Add a and b and return the sum",
        parameters_schema={
            "properties": {
                "a": {"type": "number", "description": "First addend"},
                "b": {"type": "number", "description": "Second addend"},
            },
            "required": ["a", "b"],
        },
    ),
    args_model=MathAddArgs,
    fn=_math_add,
)

ECHO_TOOL: Tool[EchoArgs] = Tool(
    spec=ToolSpec(
        name="echo",
        description="Return the given text unchanged",
        parameters_schema={
            "properties": {
                "text": {"type": "string", "description": "Text to echo back"},
            },
            "required": ["text"],
        },
    ),
    args_model=EchoArgs,
    fn=_echo,
)


def default_tools() -> list[Tool[Any]]:
    return [MATH_ADD_TOOL, ECHO_TOOL]
