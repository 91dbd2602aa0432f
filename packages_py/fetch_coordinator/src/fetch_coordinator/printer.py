"""
Console tracing of requests and responses using Rich.

Only used when tracing is enabled on the coordinator config.
"""
import json
from typing import Any, Dict, Mapping, Optional

from rich.console import Console
from rich.panel import Panel
from rich.syntax import Syntax

console = Console(stderr=True)

SENSITIVE_HEADERS = ("authorization", "x-api-key", "x-csrf-token", "cookie")


def mask_sensitive(value: Optional[str], show_chars: int = 4) -> str:
    """
    Mask sensitive values for logging.

    Args:
        value: Value to mask
        show_chars: Number of characters to show before masking

    Returns:
        str: Masked value
    """
    if not value:
        return "<none>"
    if len(value) <= show_chars:
        return "*" * len(value)
    return value[:show_chars] + "***"


def mask_headers(headers: Optional[Mapping[str, str]]) -> Dict[str, str]:
    """Copy headers with sensitive values masked."""
    masked = dict(headers or {})
    for key in masked:
        if key.lower() in SENSITIVE_HEADERS:
            # keep the scheme visible ("Bearer ***")
            masked[key] = mask_sensitive(masked[key], 10)
    return masked


def format_body(body: Any) -> str:
    """Format body for pretty printing."""
    if body is None:
        return ""
    if isinstance(body, (dict, list)):
        return json.dumps(body, indent=2, ensure_ascii=False)
    if isinstance(body, bytes):
        try:
            return body.decode("utf-8")
        except UnicodeDecodeError:
            return f"<binary data: {len(body)} bytes>"
    return str(body)


def print_request(method: str, url: str, headers: Optional[Mapping[str, str]], body: Any = None) -> None:
    """Print an outgoing request panel."""
    console.print(Panel(f"[bold cyan]{method}[/bold cyan] {url}", title="[bold blue]Request[/bold blue]"))
    console.print("[bold]Headers:[/bold]", mask_headers(headers))
    if body:
        syntax = Syntax(format_body(body), "json", theme="monokai")
        console.print(Panel(syntax, title="[bold]Request Body[/bold]"))


def print_response(status: int, reason: str, url: str, headers: Optional[Mapping[str, str]]) -> None:
    """Print a received response panel."""
    color = "green" if 200 <= status < 300 else "red"
    console.print(
        Panel(
            f"[bold {color}]{status}[/bold {color}] {reason}",
            title=f"[bold blue]Response[/bold blue] ({url})",
        )
    )
    console.print("[bold]Headers:[/bold]", mask_headers(headers))


def print_transport_error(method: str, url: str, error: BaseException) -> None:
    """Print a transport failure panel."""
    console.print(
        Panel(
            f"[bold red]{type(error).__name__}[/bold red] {error}",
            title=f"[bold blue]Transport Error[/bold blue] ({method} {url})",
        )
    )
