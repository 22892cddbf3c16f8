"""
Registry Gateway CLI

Thin commands over the RegistryGateway facade:
- catalog: List repositories known to the backend
- tags: List tags of a repository
- verify: Verify a manifest and show its digest and content type
- manifest: Print a manifest
- blob: Download a blob
- upload: Upload a file as a blob (request, write, complete)
- put-manifest: Write a manifest and verify it
- admit: Submit an admission review
"""
from __future__ import annotations

import hashlib
import logging
from pathlib import Path
from typing import Callable, TypeVar

import typer

from .cli_context import CLIContext
from .operations import RegistryGateway, run_and_exit
from .operations.printers import (
    print_catalog, print_tags, print_upload_summary, print_verified_manifest
)
from .types import AdmissionReview, Digest, RepoName

T = TypeVar("T")

app = typer.Typer(name="registry-gateway", help="Registry Gateway CLI")

DEFAULT_CHUNK_SIZE = 5 * 1024 * 1024


def _context() -> CLIContext:
    """Context for one command; replaced in tests."""
    return CLIContext.from_env()


def _with_gateway(action: Callable[[RegistryGateway], T]) -> T:
    context = _context()
    try:
        return action(context.gateway)
    finally:
        context.close()


@app.callback()
def main_callback(
    debug: bool = typer.Option(False, "--debug", help="Log backend calls to stderr")
) -> None:
    """Client for the registry backend RPC services."""
    logging.basicConfig(
        level=logging.DEBUG if debug else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )


@app.command()
def catalog() -> None:
    """List repositories known to the backend."""

    def _catalog() -> None:
        print_catalog(_with_gateway(lambda gw: gw.get_catalog()))

    run_and_exit(_catalog)


@app.command()
def tags(
    repo: str = typer.Argument(..., help="Repository name")
) -> None:
    """List tags of a repository."""

    def _tags() -> None:
        repo_name = RepoName(repo)
        print_tags(_with_gateway(lambda gw: gw.list_tags(repo_name)))

    run_and_exit(_tags)


@app.command()
def verify(
    repo: str = typer.Argument(..., help="Repository name"),
    reference: str = typer.Argument(..., help="Tag or digest"),
    verbose: bool = typer.Option(False, "--verbose", help="Show all fields as a table")
) -> None:
    """Verify a manifest and show its digest and content type."""

    def _verify() -> None:
        repo_name = RepoName(repo)
        vm = _with_gateway(lambda gw: gw.verify_manifest(repo_name, reference))
        print_verified_manifest(vm, verbose=verbose)

    run_and_exit(_verify)


@app.command()
def manifest(
    repo: str = typer.Argument(..., help="Repository name"),
    reference: str = typer.Argument(..., help="Tag or digest")
) -> None:
    """Print a manifest."""

    def _read(gw: RegistryGateway) -> bytes:
        with gw.get_reader_for_manifest(RepoName(repo), reference) as reader:
            return reader.read()

    def _manifest() -> None:
        typer.echo(_with_gateway(_read), nl=False)

    run_and_exit(_manifest)


@app.command()
def blob(
    repo: str = typer.Argument(..., help="Repository name"),
    digest: str = typer.Argument(..., help="Blob digest (sha256:...)"),
    output: Path = typer.Option(..., "--output", "-o", help="File to write the blob to")
) -> None:
    """Download a blob."""

    def _download(gw: RegistryGateway) -> int:
        written = 0
        with gw.get_reader_for_blob(RepoName(repo), Digest(digest)) as reader, open(output, "wb") as out:
            for chunk in reader:
                out.write(chunk)
                written += len(chunk)
        return written

    def _blob() -> None:
        written = _with_gateway(_download)
        typer.echo(f"Wrote {written} bytes to {output}")

    run_and_exit(_blob)


@app.command()
def upload(
    repo: str = typer.Argument(..., help="Repository name"),
    path: Path = typer.Argument(..., exists=True, dir_okay=False, help="File to upload"),
    chunk_size: int = typer.Option(DEFAULT_CHUNK_SIZE, "--chunk-size", min=1, help="Bytes per write")
) -> None:
    """Upload a file as a blob."""

    def _upload(gw: RegistryGateway) -> None:
        repo_name = RepoName(repo)
        info = gw.request_upload(repo_name)
        hasher = hashlib.sha256()
        size = 0
        with open(path, "rb") as src:
            chunk = src.read(chunk_size)
            while chunk:
                # Each chunk goes through its own sink, resuming the same upload
                with gw.get_write_sink_for_upload(repo_name, info.upload_id) as sink:
                    sink.write(chunk)
                hasher.update(chunk)
                size += len(chunk)
                chunk = src.read(chunk_size)
        accepted = gw.complete_upload(repo_name, info.upload_id, Digest(f"sha256:{hasher.hexdigest()}"))
        print_upload_summary(accepted, size)

    run_and_exit(lambda: _with_gateway(_upload))


@app.command("put-manifest")
def put_manifest(
    repo: str = typer.Argument(..., help="Repository name"),
    reference: str = typer.Argument(..., help="Tag to write"),
    path: Path = typer.Argument(..., exists=True, dir_okay=False, help="Manifest file")
) -> None:
    """Write a manifest and verify it."""

    def _put(gw: RegistryGateway) -> None:
        repo_name = RepoName(repo)
        with gw.get_write_sink_for_manifest(repo_name, reference) as sink:
            sink.write(path.read_bytes())
        print_verified_manifest(gw.verify_manifest(repo_name, reference))

    run_and_exit(lambda: _with_gateway(_put))


@app.command()
def admit(
    image: str = typer.Option(..., "--image", help="Image reference"),
    namespace: str = typer.Option(..., "--namespace", help="Namespace of the workload"),
    uid: str = typer.Option(..., "--uid", help="Admission request uid"),
    operation: str = typer.Option("CREATE", "--operation", help="Operation kind"),
    api_version: str = typer.Option("admission.k8s.io/v1", "--api-version", help="AdmissionReview API version")
) -> None:
    """Submit an admission review; exits 4 if the backend rejects it."""

    def _admit() -> None:
        review = AdmissionReview(
            api_version=api_version,
            uid=uid,
            image=image,
            namespace=namespace,
            operation=operation,
        )
        _with_gateway(lambda gw: gw.validate_admission(review))
        typer.echo(f"Admitted {image}")

    run_and_exit(_admit)


def main() -> None:
    """CLI entry point."""
    app()


if __name__ == "__main__":
    main()
