"""Answer one query with the example weather server."""
import asyncio
import os

from mcpconductor import MCPClient
from mcpconductor.llm import OpenAIClient

SYSTEM_PROMPT = """
You are an intelligent assistant with access to tools. Use your knowledge and available tools to solve problems proactively.
"""


async def main():
    llm_client = OpenAIClient(
        model=os.getenv("LLM_MODEL", "gpt-4o-mini"),
        api_key=os.getenv("OPENAI_API_KEY"),
        max_tokens=3000,
    )

    async with MCPClient(llm_client, "config/mcp_servers.json", system_prompt=SYSTEM_PROMPT) as client:
        response = await client.process_query("What's the weather in Sacramento?")
        print("\nResponse:\n" + response)


if __name__ == "__main__":
    asyncio.run(main())
