"""Real-time CLI dashboard for proxy monitoring."""

from datetime import datetime
from threading import Lock

from rich.console import Console
from rich.layout import Layout
from rich.live import Live
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from core.config import Config
from ui.log_utils import write_cli_log

console = Console()


class RequestInfo:
    """Info about a single forwarded request."""

    def __init__(self, method: str, url: str, timestamp: datetime):
        self.method = method
        self.url = url
        self.status: int | None = None
        self.redirected = False
        self.timestamp = timestamp


class Dashboard:
    """Real-time dashboard showing recent forwarded requests."""

    def __init__(self, config: Config):
        self.config = config
        self._lock = Lock()
        self._recent: list[RequestInfo] = []
        self._max_recent = 10
        self._counts = {"requests": 0, "redirects": 0, "errors": 0}
        self._errors: list[str] = []
        self._live: Live | None = None

    def start(self) -> "Dashboard":
        """Start the live dashboard."""
        self._live = Live(
            self._build_layout(),
            console=console,
            refresh_per_second=4,
            screen=False,
        )
        self._live.start()
        return self

    def stop(self) -> None:
        """Stop the live dashboard."""
        if self._live:
            self._live.stop()

    def log_request(self, method: str, url: str) -> None:
        """Record a request about to be sent upstream."""
        with self._lock:
            self._counts["requests"] += 1
            self._recent.insert(0, RequestInfo(method, url, datetime.now()))
            self._recent = self._recent[: self._max_recent]
            self._refresh()
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
        """Attach the upstream status to the matching pending request."""
        with self._lock:
            info = self._find_pending(method, url)
            if info:
                info.status = status
                info.redirected = redirected_url is not None
            if redirected_url:
                self._counts["redirects"] += 1
            self._refresh()
            extra = {"redirected": redirected_url} if redirected_url else {}
            write_cli_log("RESPONSE", f"{status} {reason}", url=url, **extra)

    def log_error(self, url: str | None, status: int, message: str) -> None:
        """Log an error."""
        with self._lock:
            self._counts["errors"] += 1
            if url:
                info = self._find_pending("", url)
                if info:
                    info.status = status
            truncated = message[:60] + "..." if len(message) > 60 else message
            self._errors.insert(0, f"{status}: {truncated}")
            self._errors = self._errors[:3]
            self._refresh()
            write_cli_log("ERROR", message[:200], url=url or "-", status=status)

    def _find_pending(self, method: str, url: str) -> RequestInfo | None:
        for info in self._recent:
            if info.status is None and (not method or info.method == method):
                if info.url == url:
                    return info
        return None

    def _refresh(self) -> None:
        """Refresh the display."""
        if self._live:
            self._live.update(self._build_layout())

    def _build_layout(self) -> Layout:
        """Build the dashboard layout."""
        layout = Layout()

        layout.split_column(
            Layout(name="header", size=3),
            Layout(name="body"),
            Layout(name="footer", size=5),
        )

        layout["header"].update(self._build_header())
        layout["body"].update(self._build_requests_panel())
        layout["footer"].update(self._build_footer())

        return layout

    def _build_header(self) -> Panel:
        """Build header with stats."""
        stats = Text()
        stats.append("Git CORS Proxy", style="bold cyan")
        stats.append("  |  ")
        stats.append(f"Requests: {self._counts['requests']}", style="blue")
        stats.append("  |  ")
        stats.append(f"Redirects: {self._counts['redirects']}", style="magenta")
        stats.append("  |  ")
        stats.append(f"Errors: {self._counts['errors']}", style="red")
        stats.append("  |  ")
        stats.append(f"Port: {self.config.proxy.port}", style="dim")

        return Panel(stats, style="cyan")

    def _build_requests_panel(self) -> Panel:
        """Build recent requests panel."""
        if self._recent:
            table = Table(show_header=True, header_style="bold", expand=True, box=None)
            table.add_column("Time", style="dim", width=8)
            table.add_column("Method", width=7)
            table.add_column("Target", ratio=3)
            table.add_column("Status", width=8)

            for info in self._recent:
                table.add_row(
                    info.timestamp.strftime("%H:%M:%S"),
                    info.method,
                    info.url[:80] + "..." if len(info.url) > 80 else info.url,
                    self._format_status(info),
                )
            content = table
        else:
            content = Text("Waiting for requests...", style="dim")

        return Panel(content, title="[blue]Recent Requests[/blue]", border_style="blue")

    @staticmethod
    def _format_status(info: RequestInfo) -> str:
        if info.status is None:
            return "[dim]...[/dim]"
        style = "green" if info.status < 400 else "red"
        suffix = " ↪" if info.redirected else ""
        return f"[{style}]{info.status}{suffix}[/{style}]"

    def _build_footer(self) -> Panel:
        """Build footer with errors and help."""
        if self._errors:
            error_text = Text()
            for err in self._errors:
                error_text.append("! ", style="red bold")
                error_text.append(err + "\n", style="red")
            content = error_text
        else:
            content = Text(
                f"Proxy URLs look like http://localhost:{self.config.proxy.port}/github.com/user/repo.git",
                style="dim",
            )

        return Panel(content, title="[dim]Status[/dim]", border_style="dim")
