"""CLI entrypoint for the tab manager."""

from __future__ import annotations

from pathlib import Path
from typing import Optional

import typer

from ui.cli import commands

app = typer.Typer(help="Open and saved browser window state")
config_app = typer.Typer(help="Configuration commands")


@app.command("sync")
def sync_cmd(
    snapshot: Path = typer.Argument(..., help="Host snapshot JSON (windows and folders)"),
    root: Optional[Path] = typer.Option(None, "--root", help="Directory holding config/"),
) -> None:
    """Sync a host snapshot and show the resulting state."""
    commands.sync(snapshot_path=snapshot, root=root)


@app.command("windows")
def windows_cmd(
    snapshot: Path = typer.Argument(..., help="Host snapshot JSON (windows and folders)"),
    window_type: Optional[str] = typer.Option(None, "--type", help="Only windows of this type"),
    root: Optional[Path] = typer.Option(None, "--root", help="Directory holding config/"),
) -> None:
    """List open windows."""
    commands.windows_list(snapshot_path=snapshot, window_type=window_type, root=root)


@config_app.command("show")
def config_show_cmd(root: Optional[Path] = typer.Option(None, "--root", help="Directory holding config/")) -> None:
    """Show effective configuration."""
    commands.config_show(root=root)


app.add_typer(config_app, name="config")


def main() -> None:
    """Console script entrypoint."""
    app()


if __name__ == "__main__":
    main()
