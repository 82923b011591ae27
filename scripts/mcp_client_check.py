# scripts/mcp_client_check.py
import asyncio, os

from mcp.client.session import ClientSession
from mcp.client.streamable_http import streamablehttp_client

async def main():
    url = os.getenv("BOUTIQUE_MCP_URL", "http://127.0.0.1:8000/mcp")

    async with streamablehttp_client(url) as (r, w, _):
        async with ClientSession(r, w) as s:
            await s.initialize()
            tools = await s.list_tools()
            print("TOOLS:", [t.name for t in tools.tools])

            result = await s.call_tool(
                "bill_preview",
                {"input": {
                    "items": [{"description": "Kurta stitching", "quantity": 2, "rate": 500}],
                    "tax_percent": 18,
                    "discount": {"value": 100, "kind": "amount"},
                }},
            )
            print("bill_preview:", result.content)

if __name__ == "__main__":
    asyncio.run(main())
