"""
Example weather tool server for trying the client locally.

Run through the client with a configuration such as:
    {"mcpServers": {"weather": {"command": "python", "args": ["examples/servers/weather_server.py"]}}}
"""
from mcp.server.fastmcp import Context, FastMCP

# Create an MCP server for weather lookups
mcp = FastMCP("WeatherServer")

# Simulated observations, keyed by lower-case city name
_CONDITIONS = {
    "sacramento": "72F sunny",
    "seattle": "55F light rain",
    "new york": "64F partly cloudy",
}


@mcp.tool()
async def get_weather(city: str, ctx: Context = None) -> str:
    """
    Get the current weather for a city.

    Args:
        city: Name of the city
        ctx: MCP context object

    Returns:
        Temperature and conditions as text
    """
    if ctx:
        await ctx.info(f"Looking up weather for {city}")

    return _CONDITIONS.get(city.strip().lower(), "70F clear")


@mcp.tool()
async def get_forecast(city: str, days: int = 3) -> str:
    """
    Get a simple multi-day forecast for a city.

    Args:
        city: Name of the city
        days: Number of days to forecast (1-7)

    Returns:
        One line per day
    """
    days = max(1, min(days, 7))
    today = _CONDITIONS.get(city.strip().lower(), "70F clear")
    return "\n".join(f"Day {day}: {today}" for day in range(1, days + 1))


if __name__ == "__main__":
    mcp.run()
