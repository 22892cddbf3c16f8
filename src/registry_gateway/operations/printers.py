"""
Human-readable output formatting.

Centralizes all CLI output formatting so commands stay thin.
"""
from __future__ import annotations

import typer
from rich.console import Console
from rich.table import Table

from ..types import AcceptedUpload, RepoCatalog, TagList, VerifiedManifest

_console = Console()


def print_catalog(catalog: RepoCatalog) -> None:
    """Print repositories one per line, sorted."""
    if not len(catalog):
        typer.echo("No repositories")
        return
    for repo in catalog:
        typer.echo(repo.value)


def print_tags(tags: TagList) -> None:
    """Print tags for one repository in backend order."""
    if not len(tags):
        typer.echo(f"No tags for {tags.repo_name}")
        return
    for tag in tags:
        typer.echo(f"{tags.repo_name}:{tag}")


def print_verified_manifest(vm: VerifiedManifest, verbose: bool = False) -> None:
    """
    Print a verification result.

    Args:
        vm: Verified manifest returned by the backend
        verbose: Render as a table with all fields
    """
    if verbose:
        table = Table(title="Verified manifest")
        table.add_column("Field", style="cyan")
        table.add_column("Value")
        table.add_row("Repository", vm.repo_name.value)
        table.add_row("Reference", vm.reference)
        table.add_row("Digest", vm.digest.value)
        table.add_row("Content type", vm.content_type)
        _console.print(table)
        return

    typer.echo(f"Reference: {vm.repo_name}:{vm.reference}")
    typer.echo(f"Digest: {vm.digest}")
    typer.echo(f"Content-Type: {vm.content_type}")


def print_upload_summary(accepted: AcceptedUpload, size: int) -> None:
    """Print the result of a completed upload."""
    typer.echo(f"Uploaded {_format_bytes(size)} to {accepted.repo_name}")
    typer.echo(f"Digest: {accepted.digest}")


def _format_bytes(size: int) -> str:
    """Format byte size in human-readable units."""
    for unit in ["B", "KB", "MB", "GB"]:
        if size < 1024:
            return f"{size:.0f} {unit}" if unit == "B" else f"{size:.1f} {unit}"
        size /= 1024
    return f"{size:.1f} TB"
