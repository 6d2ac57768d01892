"""CLI: pi-demo payment approve|complete|get|cancel"""

import json
from typing import Any, Awaitable, Callable, Optional

import click
from rich.console import Console

from pi_demo.errors import PiDemoError
from pi_demo.payments import PaymentsAPI

console = Console()


def _get_client(api_key: Optional[str], base_url: Optional[str]):
    from pi_demo.cli.main import _get_client
    return _get_client(api_key, base_url)


def _run(coro):
    from pi_demo.cli.main import _run
    return _run(coro)


def _call(ctx: click.Context, status: str, fn: Callable[[PaymentsAPI], Awaitable[Any]]) -> Any:
    http = _get_client(ctx.obj["api_key"], ctx.obj["base_url"])

    async def _do():
        try:
            with console.status(status):
                return await fn(PaymentsAPI(http))
        finally:
            await http.close()

    try:
        return _run(_do())
    except PiDemoError as e:
        console.print(f"[red]{e.code}: {e}[/red]")
        raise SystemExit(1)


def _show(result: Any, json_output: bool, message: str) -> None:
    if json_output:
        click.echo(json.dumps(result, indent=2))
        return
    console.print(f"[green]{message}[/green]")
    if isinstance(result, dict):
        status = result.get("status") or {}
        flags = [k for k, v in status.items() if v]
        console.print(f"  amount: {result.get('amount')}  memo: {result.get('memo', '')!r}")
        console.print(f"  status: {', '.join(flags) or 'pending'}")
        tx = result.get("transaction")
        if tx:
            console.print(f"  txid: {tx.get('txid')}")


@click.group()
@click.option("--api-key", envvar="PI_API_KEY", default=None, help="Server API key (Authorization header value)")
@click.option("--base-url", envvar="PI_BASE_URL", default=None, help="Platform API base URL")
@click.pass_context
def payment(ctx: click.Context, api_key: Optional[str], base_url: Optional[str]):
    """Server-side payment calls."""
    ctx.obj = {"api_key": api_key, "base_url": base_url}


@payment.command("approve")
@click.argument("payment_id")
@click.option("--json-output", "--json", is_flag=True)
@click.pass_context
def payment_approve(ctx: click.Context, payment_id: str, json_output: bool):
    """Approve a payment that is ready for server approval."""
    result = _call(ctx, "Approving...", lambda api: api.approve(payment_id))
    _show(result, json_output, f"Payment {payment_id} approved.")


@payment.command("complete")
@click.argument("payment_id")
@click.argument("txid")
@click.option("--json-output", "--json", is_flag=True)
@click.pass_context
def payment_complete(ctx: click.Context, payment_id: str, txid: str, json_output: bool):
    """Complete a payment once its blockchain transaction exists."""
    result = _call(ctx, "Completing...", lambda api: api.complete(payment_id, txid))
    _show(result, json_output, f"Payment {payment_id} completed.")


@payment.command("get")
@click.argument("payment_id")
@click.option("--json-output", "--json", is_flag=True)
@click.pass_context
def payment_get(ctx: click.Context, payment_id: str, json_output: bool):
    """Show a payment."""
    result = _call(ctx, "Fetching...", lambda api: api.get(payment_id))
    _show(result, json_output, f"Payment {payment_id}")


@payment.command("cancel")
@click.argument("payment_id")
@click.option("--json-output", "--json", is_flag=True)
@click.pass_context
def payment_cancel(ctx: click.Context, payment_id: str, json_output: bool):
    """Cancel a payment."""
    result = _call(ctx, "Cancelling...", lambda api: api.cancel(payment_id))
    _show(result, json_output, f"Payment {payment_id} cancelled.")
