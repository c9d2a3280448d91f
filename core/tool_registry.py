"""
Tool registry contract.

Each tool declares its argument shape as a pydantic model. Decoding a
model-supplied argument string either yields a validated instance of that
model or raises ToolArgumentDecodeError; fields are never silently filled
in beyond the defaults the model itself declares.
"""

import logging
from dataclasses import dataclass
from types import MappingProxyType
from typing import Any, Awaitable, Callable, Dict, Iterable, Iterator, List, Mapping, Type

from pydantic import BaseModel, ValidationError

from .errors import ToolArgumentDecodeError

logger = logging.getLogger(__name__)

ToolHandler = Callable[[Any], Awaitable[str]]


@dataclass(frozen=True)
class Tool:
    """
    A named capability the model can call.

    Attributes:
        name: Name the model uses to call the tool
        description: What the tool does, shown to the model
        args_model: Pydantic model describing the arguments
        handler: Coroutine function taking an args_model instance, returning text
    """
    name: str
    description: str
    args_model: Type[BaseModel]
    handler: ToolHandler

    def decode(self, raw_arguments: str) -> BaseModel:
        """
        Decode the JSON argument string sent by the model.

        Raises:
            ToolArgumentDecodeError: If the payload is not valid JSON or does
                not match args_model
        """
        try:
            return self.args_model.model_validate_json(raw_arguments)
        except ValidationError as e:
            problems = "; ".join(
                f"{'.'.join(str(loc) for loc in err['loc']) or 'arguments'}: {err['msg']}"
                for err in e.errors()
            )
            raise ToolArgumentDecodeError(self.name, problems) from e

    async def invoke(self, args: BaseModel) -> str:
        return await self.handler(args)

    def descriptor(self) -> Dict[str, Any]:
        """
        Build the tool descriptor sent to the model endpoint.

        Returns:
            Chat-completions style {"type": "function", "function": {...}}
        """
        schema = self.args_model.model_json_schema()
        properties = {
            name: {key: value for key, value in prop.items() if key != "title"}
            for name, prop in schema.get("properties", {}).items()
        }
        return {
            "type": "function",
            "function": {
                "name": self.name,
                "description": self.description,
                "parameters": {
                    "type": "object",
                    "properties": properties,
                    "required": schema.get("required", []),
                },
            },
        }


class ToolRegistry(Mapping[str, Tool]):
    """
    Read-only mapping of tool name to Tool.

    Built once at start-up; profiles take subsets of it.
    """

    def __init__(self, tools: Iterable[Tool]):
        table: Dict[str, Tool] = {}
        for tool in tools:
            if tool.name in table:
                raise ValueError(f"Duplicate tool name: {tool.name}")
            table[tool.name] = tool
        self._tools = MappingProxyType(table)

    def __getitem__(self, name: str) -> Tool:
        return self._tools[name]

    def __iter__(self) -> Iterator[str]:
        return iter(self._tools)

    def __len__(self) -> int:
        return len(self._tools)

    def subset(self, names: Iterable[str]) -> "ToolRegistry":
        """
        Registry restricted to the given names, in the given order.

        Raises:
            KeyError: If a name is not registered
        """
        names = list(names)
        missing = [name for name in names if name not in self._tools]
        if missing:
            raise KeyError(f"Tools not registered: {missing}")
        return ToolRegistry(self._tools[name] for name in names)

    def descriptors(self) -> List[Dict[str, Any]]:
        """Descriptors for every tool, in registration order."""
        return [tool.descriptor() for tool in self._tools.values()]
