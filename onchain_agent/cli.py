import asyncio
import logging

import typer
from rich.console import Console
from rich.prompt import Prompt
from rich.table import Table
from typing_extensions import Annotated

from onchain_agent.client.onchain_agent import OnchainAgent
from onchain_agent.domains.execution import ToolExecutionData, ToolExecutionState
from onchain_agent.interfaces.services.callbacks import ToolExecutionCallback

# --- Basic Logging Configuration ---
logging.basicConfig(level=logging.WARNING, format="%(levelname)s:%(name)s:%(message)s")
# --- End Logging Configuration ---

app = typer.Typer()
console = Console()

STATE_STYLES = {
    ToolExecutionState.STARTED: "cyan",
    ToolExecutionState.IN_PROCESS: "blue",
    ToolExecutionState.COMPLETED: "green",
    ToolExecutionState.FAILED: "bold red",
}


class ConsoleCallback(ToolExecutionCallback):
    """Prints tool lifecycle events to the console."""

    def __init__(self, target: Console = console):
        self.console = target

    def on_tool_execution(self, data: ToolExecutionData) -> None:
        style = STATE_STYLES.get(data.state, "white")
        line = f"[{style}]{data.state.value:<10}[/{style}] [dim]{data.id[:8]}[/dim] {data.message}"
        if data.execution_time_ms is not None:
            line += f" [dim]({data.execution_time_ms:.0f} ms)[/dim]"
        if data.error is not None:
            line += f"\n  [red]{data.error}[/red]"
        self.console.print(line)


def _load_agent(config: str) -> OnchainAgent:
    try:
        with console.status("[bold green]Initializing agent...", spinner="dots"):
            agent = OnchainAgent(config_path=config)
            loaded = asyncio.run(agent.setup())
    except FileNotFoundError:
        console.print(
            f"[bold red]Error:[/bold red] Configuration file not found at '{config}'"
        )
        raise typer.Exit(code=1)
    except ValueError as e:
        console.print(f"[bold red]Error loading configuration:[/bold red] {e}")
        raise typer.Exit(code=1)
    except Exception as e:
        console.print(
            f"[bold red]An unexpected error occurred during initialization:[/bold red] {e}"
        )
        raise typer.Exit(code=1)
    if loaded:
        console.print(f"[dim]Loaded plugins: {', '.join(loaded)}[/dim]")
    return agent


@app.command()
def tools(
    config: Annotated[
        str, typer.Option(help="Path to the configuration JSON file.")
    ] = "config.json",
):
    """List the tools exposed by the configured plugins."""
    agent = _load_agent(config)
    table = Table(title="Tools")
    table.add_column("Name", style="bold")
    table.add_column("Description")
    for tool in agent.list_tools():
        table.add_row(tool["name"], tool["description"])
    console.print(table)


@app.command()
def chat(
    config: Annotated[
        str, typer.Option(help="Path to the configuration JSON file.")
    ] = "config.json",
    verbose: Annotated[
        bool, typer.Option(help="Show debug logging.")
    ] = False,
):
    """
    Start an interactive session with the Onchain Agent.
    Type 'exit' or 'quit' to end the session.
    """
    if verbose:
        logging.getLogger("onchain_agent").setLevel(logging.DEBUG)

    agent = _load_agent(config)
    agent.register_callback(ConsoleCallback())
    console.print("[green]Agent initialized. Start chatting![/green]")
    console.print("[dim]Type 'exit' or 'quit' to end.[/dim]")

    while True:
        try:
            user_message = Prompt.ask("[bold green]You[/bold green]")

            if user_message.lower() in ["exit", "quit"]:
                console.print("[yellow]Exiting chat session.[/yellow]")
                break

            if not user_message.strip():
                continue

            result = asyncio.run(agent.process(user_message))
            console.print(f"[bright_blue]Agent:[/bright_blue] {result}")

        except KeyboardInterrupt:
            console.print(
                "\n[yellow]Exiting chat session (KeyboardInterrupt).[/yellow]"
            )
            break
        except Exception as loop_error:
            console.print(
                f"[bold red]An error occurred in the chat loop:[/bold red] {loop_error}"
            )

    asyncio.run(agent.close())


if __name__ == "__main__":
    app()
