"""Interactive terminal chat with the filesystem agent."""

import asyncio
import json
import sys
from pathlib import Path

from pydantic import ValidationError
from rich.console import Console
from rich.markdown import Markdown
from rich.panel import Panel
from rich.prompt import Prompt
from rich.status import Status
from rich.table import Table
from rich.text import Text

from fsagent import __version__
from fsagent.clients import create_completion_client
from fsagent.config import Settings, get_settings
from fsagent.exceptions import CompletionError, ConfigurationError
from fsagent.models.conversation import Conversation
from fsagent.models.llm import ToolCall, ToolExecution
from fsagent.services.agent import AgentService, TurnObserver
from fsagent.services.prompts import get_system_prompt
from fsagent.tools.registry import ToolsRegistry
from fsagent.utils.logging import LogConfig, get_logger, setup_logging

logger = get_logger(__name__)

MAX_DISPLAYED_OUTPUT = 2000

EXIT_COMMANDS = {"/quit", "/exit", "quit", "exit"}


class ConsoleObserver(TurnObserver):
    """Renders agent progress to the terminal."""

    def __init__(self, console: Console):
        self.console = console
        self._status: Status | None = None

    def on_thinking(self) -> None:
        self._status = self.console.status("[dim]🧠 Thinking...[/dim]", spinner="dots")
        self._status.start()

    def on_thinking_done(self) -> None:
        if self._status is not None:
            self._status.stop()
            self._status = None

    def on_narration(self, text: str) -> None:
        self.console.print(Text("Agent: ", style="bold yellow") + Text(text))

    def on_tool_call(self, call: ToolCall) -> None:
        self.console.print(
            Text("Agent (calling tool): ", style="bold yellow")
            + Text(call.name, style="bold")
            + Text(f" {json.dumps(call.input, ensure_ascii=False)}", style="dim")
        )

    def on_tool_result(self, execution: ToolExecution) -> None:
        output = execution.output
        if len(output) > MAX_DISPLAYED_OUTPUT:
            hidden = len(output) - MAX_DISPLAYED_OUTPUT
            output = output[:MAX_DISPLAYED_OUTPUT] + f"\n... ({hidden} more chars)"
        self.console.print(
            Panel(
                Text(output),
                title="[bold magenta]Tool Output[/bold magenta]",
                border_style="red" if execution.is_error else "magenta",
            )
        )

    def on_invalid_tool_call(self, error: str) -> None:
        self.console.print(Text(f"❌ Invalid tool call: {error}", style="red"))

    def on_reply(self, text: str) -> None:
        self.console.print(
            Panel(
                Markdown(text or "_(empty reply)_"),
                title="[bold green]🤖 Agent[/bold green]",
                border_style="green",
                padding=(1, 2),
            )
        )

    def on_step_limit(self, max_steps: int) -> None:
        self.console.print(
            f"[yellow]⚠️ Step limit reached: the agent used {max_steps} tools without finishing. "
            "Send another message to let it continue.[/yellow]"
        )


class ChatCLI:
    """Interactive chat interface for the filesystem agent."""

    def __init__(self, agent: AgentService, console: Console | None = None):
        """Initialize chat CLI."""
        self.agent = agent
        self.console = console or Console()
        self.observer = ConsoleObserver(self.console)
        self.conversation = self._new_conversation()

    def _new_conversation(self) -> Conversation:
        return Conversation(system_prompt=get_system_prompt(self.agent.registry))

    async def start(self) -> None:
        """Start the interactive chat session.

        Raises:
            CompletionError: If the completion endpoint fails
        """
        self.console.print(
            Panel.fit(
                f"[bold blue]🤖 fsagent {__version__} - filesystem agent[/bold blue]\n"
                f"Provider: {self.agent.client.provider}\n"
                "Commands: /help, /tools, /stats, /clear, /quit",
                border_style="blue",
            )
        )

        try:
            while True:
                user_input = Prompt.ask("\n[bold cyan]You[/bold cyan]", console=self.console)

                if user_input.strip().lower() in EXIT_COMMANDS:
                    break
                if self._handle_command(user_input.strip()):
                    continue
                if user_input.strip() == "":
                    continue

                await self.agent.run_turn(self.conversation, user_input, observer=self.observer)

        except (KeyboardInterrupt, EOFError):
            pass
        finally:
            self.observer.on_thinking_done()
            self.console.print("\n[yellow]👋 Goodbye![/yellow]")

    def _handle_command(self, command: str) -> bool:
        """Run a slash command. Returns True if the input was a command."""
        command = command.lower()
        if command == "/help":
            self._show_help()
        elif command == "/tools":
            self._show_tools()
        elif command == "/stats":
            self._show_stats()
        elif command == "/clear":
            self.conversation = self._new_conversation()
            self.console.print("[yellow]🔄 Conversation cleared[/yellow]")
        else:
            return False
        return True

    def _show_tools(self) -> None:
        table = Table(title="Available Tools")
        table.add_column("Name", style="bold")
        table.add_column("Description")
        for tool in self.agent.registry.list_tools():
            table.add_row(tool.name, tool.description.splitlines()[0])
        self.console.print(table)

    def _show_stats(self) -> None:
        self.console.print(
            f"[cyan]Messages: {len(self.conversation)} | "
            f"Estimated tokens: ~{self.conversation.token_estimate}[/cyan]"
        )

    def _show_help(self) -> None:
        """Show help information."""
        help_text = """
[bold]Available Commands:[/bold]
• /help - Show this help message
• /tools - List the tools the agent can use
• /stats - Show transcript size
• /clear - Start a fresh conversation
• /quit or /exit - Exit the chat

[bold]Example Requests:[/bold]
1. "What files are in this directory?"
2. "Create a file named notes.txt with content hello"
3. "Rename the function foo to bar in utils.py"
4. "Delete the build directory"

[bold]Note:[/bold]
• The agent edits and deletes real files under your account's permissions
        """

        self.console.print(Panel(help_text.strip(), title="[cyan]❓ Help[/cyan]", border_style="cyan"))


def build_agent(settings: Settings) -> AgentService:
    """Wire the completion client and tools from settings.

    Raises:
        ConfigurationError: If the provider's API key is not set
    """
    workspace_root = Path(settings.workspace_root) if settings.workspace_root else None
    return AgentService(
        client=create_completion_client(settings),
        registry=ToolsRegistry(workspace_root=workspace_root),
        max_tool_steps=settings.max_tool_steps,
        context_warning_tokens=settings.context_warning_tokens,
    )


def main() -> None:
    """Main entry point for the chat CLI."""
    console = Console()

    try:
        settings = get_settings()
        setup_logging(LogConfig(level=settings.log_level))
        agent = build_agent(settings)
    except (ConfigurationError, ValidationError) as e:
        console.print(Text(f"❌ Configuration error: {e}", style="red"))
        sys.exit(1)

    chat = ChatCLI(agent, console)
    try:
        asyncio.run(chat.start())
    except KeyboardInterrupt:
        # Ctrl-C while a request was in flight; start() already said goodbye
        pass
    except CompletionError as e:
        logger.error(f"Completion request failed: {e}", exc_info=True)
        console.print(Text(f"❌ Fatal Error: {e}", style="red"))
        sys.exit(1)


if __name__ == "__main__":
    main()
