"""
Terminal front end for the MCP client
"""
