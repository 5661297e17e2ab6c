"""Configuration management for Ollama Chat."""

from __future__ import annotations

from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, Field


class OllamaConfig(BaseModel):
    base_url: str = "http://localhost:11434/api"
    timeout: float = 120
    connect_timeout: float = 30
    read_timeout: float = 300  # per-read while streaming; local models can be slow to start


class UIConfig(BaseModel):
    default_model: str = ""  # skip the model selector when set
    show_thinking: bool = True
    simulate: bool = False  # offline simulator instead of a live server


class ChatConfig(BaseModel):
    ollama: OllamaConfig = Field(default_factory=OllamaConfig)
    ui: UIConfig = Field(default_factory=UIConfig)


CONFIG_FILENAME = "ollama_chat.yaml"


def load_config(
    config_path: str | Path | None = None,
) -> tuple[ChatConfig, Path | None]:
    """Load configuration from YAML file.

    Returns (config, resolved_path).  *resolved_path* is ``None`` when
    no file was found and built-in defaults are used.

    Search order (first match wins):
      1. Explicit ``--config`` path
      2. Current working directory: ``./ollama_chat.yaml``
      3. User config dir: ``~/.ollama_chat/ollama_chat.yaml``
    """
    if config_path is None:
        for d in (Path.cwd(), Path.home() / ".ollama_chat"):
            p = d / CONFIG_FILENAME
            if p.exists():
                config_path = p
                break

    resolved: Path | None = Path(config_path) if config_path else None
    if resolved and resolved.exists():
        with open(resolved) as f:
            raw: dict[str, Any] = yaml.safe_load(f) or {}
        return ChatConfig.model_validate(raw), resolved.resolve()

    if config_path is not None:
        raise FileNotFoundError(f"Config file not found: {config_path}")

    return ChatConfig(), None
