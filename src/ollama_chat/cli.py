"""CLI interface for Ollama Chat: model selector and streaming chat."""

from __future__ import annotations

import asyncio
import logging
import signal
import time
from contextlib import contextmanager
from typing import Any, Iterator

import click
from prompt_toolkit import PromptSession
from prompt_toolkit.completion import WordCompleter
from prompt_toolkit.formatted_text import HTML
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from ollama_chat import __version__
from ollama_chat.config import ChatConfig, load_config
from ollama_chat.errors import ChatClientError
from ollama_chat.llm import ChatBackend, OllamaClient, SimulatedClient
from ollama_chat.types import ClassifiedFragment

console = Console()

_logger = logging.getLogger(__name__)

_EXIT_CHOICES = ("exit", "q", "quit")


class StreamingDisplay:
    """Renders classified fragments to the terminal as they arrive."""

    def __init__(self, con: Console, show_thinking: bool = True):
        self.con = con
        self.show_thinking = show_thinking
        self._last_thinking: bool | None = None
        self._announced_thinking = False

    def begin(self):
        self._last_thinking = None
        self._announced_thinking = False
        self.con.print("\n[bold yellow]Ollama:[/bold yellow]")

    def handle(self, fragment: ClassifiedFragment):
        if fragment.is_thinking and not self.show_thinking:
            if not self._announced_thinking:
                self._announced_thinking = True
                self.con.print("[dim italic]thinking...[/dim italic]")
            self._last_thinking = True
            return

        # Hidden thinking already ended its status line.
        if self.show_thinking and self._last_thinking not in (None, fragment.is_thinking):
            self.con.print()
        self._last_thinking = fragment.is_thinking

        style = "dim italic" if fragment.is_thinking else "cyan"
        self.con.print(fragment.text, end="", style=style, markup=False, highlight=False)

    def finish(self, elapsed: float, cancelled: bool = False):
        self.con.print()
        if cancelled:
            self.con.print("[dim](cancelled)[/dim]")
        self.con.print(f"[dim]({elapsed:.1f}s)[/dim]\n")


@contextmanager
def _cancel_on_interrupt(cancel: asyncio.Event) -> Iterator[None]:
    """Turn Ctrl+C into a cooperative cancel while a reply streams."""
    loop = asyncio.get_running_loop()
    try:
        loop.add_signal_handler(signal.SIGINT, cancel.set)
        installed = True
    except (NotImplementedError, RuntimeError, ValueError):
        installed = False
    try:
        yield
    finally:
        if installed:
            loop.remove_signal_handler(signal.SIGINT)


# ---------------------------------------------------------------------------
# Screens
# ---------------------------------------------------------------------------

def _draw_chat_header(con: Console, model: str):
    con.clear()
    con.print(f"[bold bright_white]OLLAMA CHAT - Model: {escape(model)}[/bold bright_white]\n")
    con.print("[dim]Type 'exit' to return to model selection.[/dim]")
    con.print("[dim]Type 'clear' to clear the chat, '/quit' to leave.[/dim]\n")


async def select_model(backend: ChatBackend, session: Any, con: Console) -> str | None:
    """Let the user pick a model.  Returns ``None`` to exit."""
    while True:
        con.print("[bold bright_white]OLLAMA CHAT[/bold bright_white]\n")
        try:
            models = await backend.list_models()
        except ChatClientError as e:
            con.print(f"[red]Cannot list models: {escape(str(e))}[/red]")
            models = None
        else:
            if not models:
                con.print("[red]No models found. Make sure Ollama is running.[/red]")

        if not models:
            answer = (await session.prompt_async(
                "Press Enter to retry, or 'q' to quit: ")).strip().lower()
            if answer in _EXIT_CHOICES:
                return None
            continue

        names = [m.name for m in models]
        table = Table(title="Select model to chat with", border_style="dim")
        table.add_column("#", style="bold", width=4)
        table.add_column("Model")
        for i, name in enumerate(names, 1):
            table.add_row(str(i), escape(name))
        table.add_row("q", "[red]Exit[/red]")
        con.print(table)

        while True:
            choice = (await session.prompt_async(
                HTML("<b>model&gt; </b>"),
                completer=WordCompleter(names, sentence=True),
            )).strip()
            if choice.lower() in _EXIT_CHOICES:
                return None
            if choice.isdigit() and 1 <= int(choice) <= len(names):
                return names[int(choice) - 1]
            if choice in names:
                return choice
            if not choice:
                break  # refresh the list
            con.print(f"[red]Unknown model: {escape(choice)}[/red]")


async def run_turn(
    backend: ChatBackend, model: str, prompt: str, display: StreamingDisplay,
) -> bool:
    """Stream one reply.  Returns True if the user cancelled it."""
    cancel = asyncio.Event()
    start = time.monotonic()
    display.begin()
    with _cancel_on_interrupt(cancel):
        async for fragment in backend.stream_generation(model, prompt, cancel):
            display.handle(fragment)
    display.finish(time.monotonic() - start, cancelled=cancel.is_set())
    return cancel.is_set()


async def chat_session(
    backend: ChatBackend,
    model: str,
    session: Any,
    con: Console,
    show_thinking: bool = True,
    verbose: bool = False,
) -> bool:
    """Chat with *model* until the user leaves.  Returns True on ``/quit``."""
    display = StreamingDisplay(con, show_thinking=show_thinking)
    _draw_chat_header(con, model)

    while True:
        try:
            user_input = (await session.prompt_async(
                HTML("<ansigreen><b>You: </b></ansigreen>"))).strip()
        except KeyboardInterrupt:
            continue
        except EOFError:
            return True

        command = user_input.lower()
        if command == "exit":
            return False
        if command in ("/quit", "/exit", "/q"):
            return True
        if command == "clear":
            _draw_chat_header(con, model)
            continue
        if not user_input:
            continue

        try:
            await run_turn(backend, model, user_input, display)
        except ChatClientError as e:
            con.print(f"\n[red]Error: {escape(str(e))}[/red]\n")
            if verbose:
                con.print_exception()
        con.rule(style="dim")


async def run_app(
    backend: ChatBackend,
    config: ChatConfig,
    session: Any,
    con: Console,
    verbose: bool = False,
):
    """Alternate between the model selector and chat until the user exits."""
    preselected = config.ui.default_model or None
    try:
        while True:
            try:
                model = preselected or await select_model(backend, session, con)
            except (EOFError, KeyboardInterrupt):
                model = None
            preselected = None
            if model is None:
                break
            if await chat_session(
                backend, model, session, con,
                show_thinking=config.ui.show_thinking, verbose=verbose,
            ):
                break
    finally:
        await backend.close()
    con.print("[dim]Goodbye![/dim]")


def create_backend(config: ChatConfig) -> ChatBackend:
    if config.ui.simulate:
        return SimulatedClient()
    return OllamaClient(config.ollama)


@click.command()
@click.option("--config", "-c", "config_path", default=None,
              help="Path to ollama_chat.yaml (auto-detected from CWD or ~/.ollama_chat/)")
@click.option("--base-url", default=None, help="Ollama API base URL, e.g. http://localhost:11434/api")
@click.option("--model", "-m", default=None, help="Start chatting with this model directly")
@click.option("--simulate", is_flag=True, help="Use the offline simulator instead of a server")
@click.option("--hide-thinking", is_flag=True, help="Do not print <think> blocks")
@click.option("--verbose", "-v", is_flag=True, help="Verbose logging")
@click.version_option(__version__, prog_name="ollama-chat")
def main(config_path: str | None, base_url: str | None, model: str | None,
         simulate: bool, hide_thinking: bool, verbose: bool):
    """Ollama Chat - stream replies from local Ollama models."""
    if verbose:
        logging.basicConfig(level=logging.DEBUG)
    else:
        logging.basicConfig(level=logging.WARNING)

    try:
        config, config_file = load_config(config_path)
    except FileNotFoundError as e:
        raise click.UsageError(str(e)) from e
    _logger.debug("Config: %s", config_file or "defaults")

    if base_url:
        config.ollama.base_url = base_url
    if model:
        config.ui.default_model = model
    if simulate:
        config.ui.simulate = True
    if hide_thinking:
        config.ui.show_thinking = False

    session: PromptSession[str] = PromptSession()
    asyncio.run(run_app(create_backend(config), config, session, console, verbose=verbose))


if __name__ == "__main__":
    main()
