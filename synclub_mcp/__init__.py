"""SynClub MCP adapter: comic generation tools over the Model Context Protocol."""

__version__ = "0.6.0"
