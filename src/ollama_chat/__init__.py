"""Ollama Chat: terminal client for locally hosted Ollama models."""

__version__ = "0.1.0"
