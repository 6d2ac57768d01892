"""
pi-demo CLI — `pi-demo` command.

Commands:
  pi-demo auth login                       Save the server API key
  pi-demo payment approve <id>             Server-side approval
  pi-demo payment complete <id> <txid>     Server-side completion
  pi-demo payment get|cancel <id>          Inspect or cancel a payment
"""

import asyncio
import json
import logging
from pathlib import Path
from typing import Optional

try:
    import click
    from rich.console import Console
    from rich.logging import RichHandler
except ImportError:
    raise SystemExit("CLI requires extras: pip install pi-demo[cli]")

from pi_demo.transport.http import DEFAULT_BASE_URL, HttpClient

console = Console()
CONFIG_FILE = Path.home() / ".pi-demo" / "config.json"


def _load_config() -> dict:
    try:
        return json.loads(CONFIG_FILE.read_text())
    except (FileNotFoundError, json.JSONDecodeError):
        return {}


def _save_config(cfg: dict) -> None:
    CONFIG_FILE.parent.mkdir(parents=True, exist_ok=True)
    CONFIG_FILE.write_text(json.dumps(cfg, indent=2))


def _get_client(api_key: Optional[str] = None, base_url: Optional[str] = None) -> HttpClient:
    cfg = _load_config()
    key = api_key or cfg.get("api_key")
    if not key:
        console.print("[red]No API key. Set PI_API_KEY or run `pi-demo auth login` first.[/red]")
        raise SystemExit(1)
    return HttpClient(api_key=key, base_url=base_url or cfg.get("base_url", DEFAULT_BASE_URL))


def _run(coro):
    return asyncio.run(coro)


@click.group()
@click.version_option("0.1.0")
@click.option("-v", "--verbose", is_flag=True, help="Log lifecycle and HTTP activity")
def main(verbose: bool):
    """pi-demo CLI — developer-side calls for Pi payments."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=Console(stderr=True), show_path=False)],
    )


# Register subcommands from separate modules
from pi_demo.cli.auth import auth
from pi_demo.cli.payments import payment

main.add_command(auth)
main.add_command(payment)


if __name__ == "__main__":
    main()
