"""
LLM Integration Layer

Prompt composition and chat-completion requests.
"""

from .completion import CompletionClient
from .prompts import ReviewPromptComposer

__all__ = ['CompletionClient', 'ReviewPromptComposer']
