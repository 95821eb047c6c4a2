"""Prompts, notifications and clipboard access for the human in the loop."""

from ._console import ConsoleInteractionHost, match_choice
from ._protocol import InteractionHost, NotifyLevel

__all__ = [
    "ConsoleInteractionHost",
    "InteractionHost",
    "NotifyLevel",
    "match_choice",
]
