"""CLI: pi-demo auth login|status|logout"""

from typing import Optional

import click
from rich.console import Console

from pi_demo.transport.http import DEFAULT_BASE_URL

console = Console()


def _load_config() -> dict:
    from pi_demo.cli.main import _load_config
    return _load_config()


def _save_config(cfg: dict) -> None:
    from pi_demo.cli.main import _save_config
    _save_config(cfg)


@click.group()
def auth():
    """API key commands."""


@auth.command("login")
@click.option("--base-url", default=None, help="Platform API base URL")
def auth_login(base_url: Optional[str]):
    """Save the server API key from the developer portal."""
    cfg = _load_config()
    api_key = click.prompt("API key (sent as the Authorization header, e.g. \"Key abc123\")", hide_input=True)
    _save_config({**cfg, "api_key": api_key, "base_url": base_url or cfg.get("base_url", DEFAULT_BASE_URL)})
    console.print("[green]API key saved.[/green]")
    console.print("[dim]Saved to ~/.pi-demo/config.json[/dim]")


@auth.command("status")
def auth_status():
    """Show whether an API key is configured."""
    cfg = _load_config()
    if cfg.get("api_key"):
        console.print(f"[green]API key configured[/green] for {cfg.get('base_url', DEFAULT_BASE_URL)}")
    else:
        console.print("[yellow]No API key. Run `pi-demo auth login`.[/yellow]")


@auth.command("logout")
def auth_logout():
    """Clear the saved API key."""
    _save_config({})
    console.print("[green]API key removed.[/green]")
