"""
custom_tool_server.py — Stdio server with an extra tool.

Registers a ``word_count`` tool next to the built-in ones and serves on
stdin/stdout. Point an ``mcp.config.json`` entry at it:

    {"mcpServers": {"words": {"command": "python", "args": ["examples/custom_tool_server.py"]}}}

Usage:
    linerpc-demo --server words
"""

import asyncio
import logging
import sys

from pydantic import BaseModel, ConfigDict, Field, StrictStr

from linerpc.server import ServerConfig, Tool, ToolCatalog, ToolSpec, create_dispatcher, default_tools, serve_stdio


class WordCountArgs(BaseModel):
    model_config = ConfigDict(strict=True)

    text: StrictStr = Field(description="Text to count words in")


word_count = Tool(
    spec=ToolSpec(
        name="word_count",
        description="Count whitespace-separated words",
        parameters_schema={
            "properties": {"text": {"type": "string", "description": "Text to count words in"}},
            "required": ["text"],
        },
    ),
    args_model=WordCountArgs,
    fn=lambda args: str(len(args.text.split())),
)


def main() -> None:
    logging.basicConfig(level=logging.INFO, stream=sys.stderr)
    catalog = ToolCatalog([*default_tools(), word_count])
    dispatcher = create_dispatcher(
        config=ServerConfig(name="word-tools", version="0.1.0"),
        tools=catalog,
    )
    asyncio.run(serve_stdio(dispatcher))


if __name__ == "__main__":
    main()
