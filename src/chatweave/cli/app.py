"""Main CLI application using Typer."""
import asyncio
from pathlib import Path

import typer
from dotenv import load_dotenv
from rich.console import Console
from rich.markdown import Markdown
from rich.panel import Panel
from rich.table import Table

from ..memory import Message
from ..pipeline import EnrichmentOptions, ExchangeResult
from .providers import configure_logging, encode_image, get_config, get_pipeline

# Load environment variables
load_dotenv()

# Create Typer app
app = typer.Typer(
    name="chatweave",
    help="Conversational assistant with web search, tools, images and reasoning",
    no_args_is_help=True,
    add_completion=True,
)

# Console for rich output
console = Console()


@app.callback()
def main_options(
    verbose: bool = typer.Option(
        False,
        "--verbose",
        "-v",
        help="Show debug logging"
    )
):
    configure_logging(verbose)


def render_message(message: Message) -> None:
    """Print an assistant message with its enrichments."""
    if message.web_search:
        table = Table(show_header=True, header_style="bold cyan", title="Sources")
        table.add_column("#", style="dim", width=3)
        table.add_column("Title", style="cyan")
        table.add_column("Link", style="dim")
        for i, result in enumerate(message.web_search.results, 1):
            table.add_row(str(i), result.title, result.link)
        console.print(table)

    if message.thinking:
        console.print(Panel(Markdown(message.thinking), title="Thinking", border_style="dim"))
    if message.reasoning:
        console.print(Panel(Markdown(message.reasoning), title="Reasoning", border_style="dim"))

    console.print(Panel(Markdown(message.content), title="Assistant", border_style="green"))

    if message.images:
        for image in message.images:
            reference = image if len(image) < 120 else f"{image[:117]}..."
            console.print(f"[dim]Image: {reference}[/dim]")
    if message.tools_used and message.tools_used.explanation:
        console.print(f"[dim]{message.tools_used.explanation}[/dim]")


def report(result: ExchangeResult) -> None:
    render_message(result.assistant_message)
    if result.error:
        console.print(f"[red]Error: {result.error}[/red]")


@app.command()
def ask(
    message: str = typer.Argument(..., help="Message to send"),
    web_search: bool = typer.Option(
        False,
        "--web-search",
        "-w",
        help="Answer from web search results"
    ),
    reasoning: bool = typer.Option(
        False,
        "--reasoning",
        "-r",
        help="Reason step by step before answering"
    ),
    thinking: bool = typer.Option(
        False,
        "--thinking",
        "-t",
        help="Show the thinking process before answering"
    ),
    role: str | None = typer.Option(
        None,
        "--role",
        help="Persona id or name (see 'chatweave roles')"
    ),
    tool: str | None = typer.Option(
        None,
        "--tool",
        help="Run a tool: calculator, code-executor, translator, data-analysis, "
             "summarizer, time-service or any custom name"
    ),
    image: list[Path] = typer.Option(
        [],
        "--image",
        "-i",
        exists=True,
        dir_okay=False,
        help="Attach an image (repeatable)"
    ),
):
    """Send a single message and print the reply."""
    async def _ask():
        pipeline = get_pipeline(console)

        try:
            if role:
                pipeline.set_role(role)

            options = EnrichmentOptions(
                images=[encode_image(path) for path in image],
                use_reasoning=reasoning,
                use_web_search=web_search,
                use_thinking=thinking,
                tool=tool,
            )
            with console.status("[dim]Working...[/dim]"):
                result = await pipeline.process_message(message, options)

            report(result)
            if result.error:
                raise typer.Exit(code=1)

        except ValueError as e:
            console.print(f"[red]Error: {e}[/red]")
            raise typer.Exit(code=1)
        finally:
            await pipeline.close()

    asyncio.run(_ask())


@app.command()
def chat(
    role: str | None = typer.Option(
        None,
        "--role",
        help="Persona id or name (see 'chatweave roles')"
    ),
    web_search: bool = typer.Option(
        False,
        "--web-search",
        "-w",
        help="Answer from web search results"
    ),
    reasoning: bool = typer.Option(
        False,
        "--reasoning",
        "-r",
        help="Reason step by step before answering"
    ),
    thinking: bool = typer.Option(
        False,
        "--thinking",
        "-t",
        help="Show the thinking process before answering"
    ),
):
    """Interactive chat mode."""
    async def _chat():
        pipeline = get_pipeline(console)
        options = EnrichmentOptions(
            use_reasoning=reasoning,
            use_web_search=web_search,
            use_thinking=thinking,
        )

        try:
            if role:
                pipeline.set_role(role)

            console.print("[bold cyan]Chatweave Interactive Chat[/bold cyan]")
            console.print("[dim]Commands: /new, /role <name>, /quit[/dim]\n")

            while True:
                try:
                    user_input = console.input("[bold yellow]You:[/bold yellow] ").strip()

                    if not user_input:
                        continue

                    if user_input.lower() in ("/quit", "exit", "quit", "q"):
                        console.print("[dim]Goodbye![/dim]")
                        break

                    if user_input == "/new":
                        await pipeline.new_conversation()
                        console.print("[dim]Started a new conversation[/dim]")
                        continue

                    if user_input.startswith("/role"):
                        name = user_input[len("/role"):].strip()
                        try:
                            selected = pipeline.set_role(name or None)
                        except ValueError as e:
                            console.print(f"[red]{e}[/red]")
                            continue
                        label = selected.name if selected else "none"
                        console.print(f"[dim]Role: {label}[/dim]")
                        continue

                    with console.status("[dim]Working...[/dim]"):
                        result = await pipeline.process_message(user_input, options)

                    report(result)
                    console.print()

                except KeyboardInterrupt:
                    console.print("\n[dim]Goodbye![/dim]")
                    break
                except EOFError:
                    console.print("\n[dim]Goodbye![/dim]")
                    break

        finally:
            await pipeline.close()

    try:
        asyncio.run(_chat())
    except KeyboardInterrupt:
        pass


@app.command(name="tool")
def tool_command(
    name: str = typer.Argument(..., help="Tool name (known or custom)"),
    message: str = typer.Argument(..., help="Request for the tool"),
):
    """Run a single tool outside of a conversation."""
    async def _tool():
        pipeline = get_pipeline(console)
        try:
            with console.status(f"[dim]Running {name}...[/dim]"):
                result = await pipeline.tools.run_tool(message, name)

            console.print(Panel(Markdown(result.result), title=name, border_style="green"))
            if result.explanation:
                console.print(f"[dim]{result.explanation}[/dim]")
        finally:
            await pipeline.close()

    asyncio.run(_tool())


@app.command()
def roles():
    """List the built-in personas."""
    pipeline = get_pipeline(console)

    table = Table(show_header=True, header_style="bold cyan")
    table.add_column("Id", style="dim")
    table.add_column("Name", style="cyan")
    table.add_column("Description")
    for role in pipeline.roles:
        table.add_row(role.id, role.name, role.description)
    console.print(table)

    asyncio.run(pipeline.close())


@app.command()
def health():
    """Show which backends are configured."""
    config = get_config(console)

    def _status(label: str, value: str | None) -> None:
        if value:
            console.print(f"[green]+[/green] {label}: SET")
        else:
            console.print(f"[yellow]![/yellow] {label}: NOT SET")

    console.print(f"[dim]Text provider: {config.llm_provider}[/dim]")
    _status("Gemini API key", config.gemini_api_key)
    _status("OpenAI API key", config.openai_api_key)
    console.print(f"[dim]Search provider: {config.search_provider}[/dim]")
    _status("Groq API key", config.groq_api_key)
    _status("Tavily API key", config.tavily_api_key)
    console.print(f"[dim]Image provider: {config.image_provider} ({config.image_space})[/dim]")
    _status("Hugging Face token", config.hf_token)


def main():
    """Main entry point for the CLI."""
    app()


if __name__ == "__main__":
    main()
