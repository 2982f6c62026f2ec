"""Terminal agent that lets an LLM read, list, edit and delete local files."""

__version__ = "0.1.0"
