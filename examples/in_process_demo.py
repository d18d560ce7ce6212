"""
in_process_demo.py — Client and server wired through an in-memory line pair.

Shows the full MCP flow (initialize, tools/list, tools/call) without spawning
a process, including concurrent calls answered out of order.

Usage:
    python examples/in_process_demo.py
"""

import asyncio
import json

from linerpc import InMemoryLineTransport, JsonRpcChannel, MCPClientSession, create_dispatcher, serve_transport
from linerpc.jsonrpc import JsonRpcCallError


async def main() -> None:
    client_end, server_end = InMemoryLineTransport.pair()
    server = asyncio.create_task(serve_transport(create_dispatcher(), server_end))

    async with MCPClientSession(JsonRpcChannel(client_end, name="in-process")) as session:
        init = await session.initialize("2025-06-18")
        print("initialize:", json.dumps(init, indent=2))

        for tool in await session.list_tools():
            print(f"tool {tool['name']}: {tool['description']}")

        sums = await asyncio.gather(
            *(session.call_tool("math_add", {"a": n, "b": n}) for n in range(5))
        )
        print("sums:", [item["content"][0]["text"] for item in sums])

        try:
            await session.call_tool("math_add", {"a": "x", "b": 2})
        except JsonRpcCallError as e:
            print(f"rejected: code={e.code} message={e.message!r} data={e.data}")

    await server


if __name__ == "__main__":
    asyncio.run(main())
