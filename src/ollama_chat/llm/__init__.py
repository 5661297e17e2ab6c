"""Ollama clients and the streaming decoder pipeline."""

from ollama_chat.llm.base import ChatBackend
from ollama_chat.llm.client import OllamaClient
from ollama_chat.llm.simulator import SimulatedClient
from ollama_chat.llm.think_tags import ThinkTagParser, step

__all__ = [
    "ChatBackend",
    "OllamaClient",
    "SimulatedClient",
    "ThinkTagParser",
    "step",
]
