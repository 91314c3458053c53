"""Line-oriented console logger for non-interactive runs."""

from rich.console import Console

from ui.log_utils import write_cli_log


class ConsoleLogger:
    """Print one line per proxy event."""

    def __init__(self, console: Console | None = None):
        self.console = console or Console()

    def log_request(self, method: str, url: str) -> None:
        self.console.print(f"[cyan]\\[proxy][/cyan] → {method} {url}", highlight=False)
        write_cli_log("REQUEST", url, method=method)

    def log_response(
        self,
        method: str,
        url: str,
        status: int,
        reason: str,
        *,
        redirected_url: str | None = None,
    ) -> None:
        style = "green" if status < 400 else "yellow"
        line = f"[cyan]\\[proxy][/cyan] ← [{style}]{status} {reason}[/{style}]"
        if redirected_url:
            line += f" (redirected to {redirected_url})"
        self.console.print(line, highlight=False)
        extra = {"redirected": redirected_url} if redirected_url else {}
        write_cli_log("RESPONSE", f"{status} {reason}", url=url, **extra)

    def log_error(self, url: str | None, status: int, message: str) -> None:
        target = f" {url}" if url else ""
        self.console.print(
            f"[red]\\[proxy] error {status}{target}:[/red] {message}",
            highlight=False,
        )
        write_cli_log("ERROR", message[:200], url=url or "-", status=status)
