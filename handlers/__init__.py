"""Console input handling for Typepad."""

from handlers.command_handler import CommandHandler

__all__: list[str] = ["CommandHandler"]
