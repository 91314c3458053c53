"""CLI entry point for git-cors-proxy."""

import sys
from datetime import datetime

from rich.console import Console

from app import create_app
from core.config import load_config
from ui.console import ConsoleLogger
from ui.dashboard import Dashboard
from ui.log_utils import CLI_LOG_FILE, clear_logs, write_cli_log

console = Console()


def main():
    """Main CLI entry point."""
    config = load_config()
    plain = not console.is_terminal

    # Handle CLI arguments
    if len(sys.argv) > 1:
        arg = sys.argv[1]

        if arg == "--config":
            console.print(config.model_dump_json(indent=2))
            console.print(f"[bold]Log file:[/bold] {CLI_LOG_FILE}")
            return

        if arg in ("--help", "-h"):
            _print_help()
            return

        if arg == "--plain":
            plain = True
        else:
            console.print(f"[red][ERROR][/red] Unknown option: {arg}")
            _print_help()
            sys.exit(2)

    clear_logs()
    dashboard = None if plain else Dashboard(config)
    logger = dashboard or ConsoleLogger(console)

    import uvicorn

    app = create_app(config, logger)

    uvicorn_config = uvicorn.Config(
        app,
        host=config.proxy.host,
        port=config.proxy.port,
        log_level="warning",
    )
    server = uvicorn.Server(uvicorn_config)

    if dashboard:
        dashboard.start()
    else:
        console.print(f"Proxy listening on http://localhost:{config.proxy.port}")
    start_time = datetime.now()
    write_cli_log("STARTUP", "Proxy started", port=config.proxy.port)
    try:
        server.run()
    finally:
        duration = datetime.now() - start_time
        write_cli_log("SHUTDOWN", "Proxy stopped", duration=str(duration))
        if dashboard:
            dashboard.stop()


def _print_help():
    """Print help message."""
    help_text = """
[bold cyan]Git CORS Proxy[/bold cyan]

Forwards /{domain}/{path} to https://{domain}/{path} with CORS headers.

[bold]Usage:[/bold]
    git-cors-proxy              Start with live dashboard
    git-cors-proxy --plain      Start with one log line per request
    git-cors-proxy --config     Show effective configuration
    git-cors-proxy --help       Show this help

[bold]Environment:[/bold]
    PORT              Listening port (default 3000)
    HOST              Bind address (default 0.0.0.0)
    PROXY_DEBUG       Write a JSON log per forwarded request
    PROXY_USER_AGENT  User-Agent sent for non-git clients
    UPSTREAM_TIMEOUT  Upstream timeout in seconds (default 300)
"""
    console.print(help_text)


if __name__ == "__main__":
    main()
