"""Command-line checks for agent connections."""

from __future__ import annotations

import argparse
import os
from pathlib import Path
from typing import List, Optional

from rich.markdown import Markdown
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table

from agentstack.agent import Agent
from agentstack.catalog import get_model_catalog
from agentstack.config import AppConfig
from agentstack.connection import AgentConnection, ConfigurationError
from agentstack.console import console
from agentstack.form import ElementFactory, FormBuilder, SelectElement
from agentstack.llm import ModelClientError
from agentstack.logging import configure_logging, get_logger
from agentstack.platforms import PLATFORM_NAMES

LOGGER = get_logger(__name__)


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="Build an agent connection and check that the provider answers."
    )
    parser.add_argument(
        "--config-file",
        type=Path,
        help="Path to a config file (YAML or JSON, default: config.yaml in project root).",
    )
    parser.add_argument(
        "--env-file",
        type=Path,
        help="Path to a .env file with secrets such as AGENT_API_KEY (default: .env).",
    )
    parser.add_argument(
        "--platform",
        help="Provider to use: anthropic, gemini, ollama or chatgpt (the default).",
    )
    parser.add_argument("--model", help="Model identifier for the selected provider.")
    parser.add_argument("--api-key", help="API key for keyed providers.")
    parser.add_argument("--url", help="Host URL for Ollama, e.g. http://localhost:11434.")
    parser.add_argument(
        "--list-models",
        action="store_true",
        help="List catalog models for the selected provider and exit.",
    )
    parser.add_argument(
        "--remote",
        action="store_true",
        help="With --list-models, ask the provider instead of the packaged catalog.",
    )
    parser.add_argument(
        "--describe",
        action="store_true",
        help="Print the connection settings form and exit.",
    )
    parser.add_argument("--prompt", help="Send one prompt and print the answer instead of pinging.")
    parser.add_argument("--log-level", default="INFO", help="Python logging level (default: INFO).")
    return parser.parse_args(argv)


def apply_overrides(config: AppConfig, args: argparse.Namespace) -> None:
    if args.platform:
        config.connection.platform = args.platform
    if args.model:
        config.connection.model = args.model
    if args.api_key:
        config.connection.api_key = args.api_key
    if args.url:
        config.connection.url = args.url


def describe(connection: AgentConnection) -> int:
    builder = FormBuilder()
    connection.configure(builder, ElementFactory())

    table = Table(title=f"{connection.get_name()} Connection Settings", highlight=True)
    table.add_column("Name", style="cyan")
    table.add_column("Title")
    table.add_column("Kind", style="magenta")
    table.add_column("Help")
    for element in builder.elements:
        if isinstance(element, SelectElement):
            kind = f"select ({len(element.options)} options)"
        else:
            kind = f"input ({element.type})"
        table.add_row(element.name, element.title, kind, element.help or "")
    console.print(table)
    return 0


def list_models(config: AppConfig, connection: AgentConnection, *, remote: bool) -> int:
    platform = config.connection.platform
    if remote:
        try:
            agent = connection.get_connection(config.connection)
            names = [model.name for model in agent.platform.list_models()]
        except ConfigurationError as exc:
            console.print(Panel(str(exc), title="Configuration Error", style="error"))
            return 1
        except ModelClientError as exc:
            LOGGER.error("Failed to query models: %s", exc)
            return 1
        rows = [(name, "") for name in names]
        title = f"{agent.provider} models (remote)"
    else:
        catalog = get_model_catalog(platform, config)
        rows = [(name, entry.description) for name, entry in catalog.get_models().items()]
        title = f"{PLATFORM_NAMES.get(catalog.platform, catalog.platform)} models"

    if not rows:
        console.print(Panel("The provider reported no models.", title="Models Unavailable", style="warning"))
        return 0

    table = Table(title=title, box=None, highlight=True)
    table.add_column("#", style="cyan", justify="right")
    table.add_column("Name", style="magenta")
    table.add_column("Description")
    for idx, (name, description) in enumerate(rows, start=1):
        table.add_row(str(idx), name, description)
    console.print(table)
    return 0


def run_prompt(agent: Agent, prompt: str) -> int:
    console.print(f"[prompt]You:[/prompt] {escape(prompt)}")
    with console.status(f"[info]Calling {agent.provider}...[/info]"):
        try:
            answer = agent.ask(prompt)
        except ModelClientError as exc:
            console.print(Panel(f"Encountered a {agent.provider} error: {exc}", title="Provider Error", style="error"))
            return 1
    console.print(Markdown(answer) if answer else "[warning]No response received.[/warning]")
    return 0


def main(argv: Optional[List[str]] = None) -> int:
    args = parse_args(argv)
    configure_logging(args.log_level)

    if args.env_file:
        os.environ["ENV_FILE"] = str(args.env_file)

    config = AppConfig.load(config_path=args.config_file)
    apply_overrides(config, args)
    connection = AgentConnection(config=config)

    if args.describe:
        return describe(connection)
    if args.list_models:
        return list_models(config, connection, remote=args.remote)

    try:
        agent = connection.get_connection(config.connection)
    except ConfigurationError as exc:
        console.print(Panel(str(exc), title="Configuration Error", style="error"))
        return 1

    if args.prompt:
        return run_prompt(agent, args.prompt)

    with console.status(f"[info]Pinging {agent.provider} model {agent.model}...[/info]"):
        reachable = connection.ping(agent)
    if reachable:
        console.print(Panel(f"{agent.provider} model '{agent.model}' answered.", title="Ping", style="success"))
        return 0
    console.print(Panel(f"{agent.provider} model '{agent.model}' is not reachable.", title="Ping", style="error"))
    return 1


if __name__ == "__main__":  # pragma: no cover - CLI entry point
    raise SystemExit(main())
