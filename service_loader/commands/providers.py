"""Provider inspection commands for the service-loader CLI."""

from __future__ import annotations

import sys
from pathlib import Path

import click
from rich.table import Table

from ..console import console
from ..context import LoadingContext
from ..declarations import read_declarations
from ..errors import ProviderNotFoundError
from ..errors import ResourceLookupError
from ..loader import discover_descriptors
from ..loader import discover_instances
from ..resolvers import ImportResolver
from ..settings import LoaderSettings
from ..settings import load_settings
from ..validation import capability_id

root_option = click.option(
    "--root",
    "-r",
    "roots",
    multiple=True,
    type=click.Path(path_type=Path),
    help="Extra search root (directory or zip archive), searched before configured roots",
)


def _load_settings(roots: tuple[Path, ...]) -> LoaderSettings:
    """Load settings, putting command-line roots first."""
    try:
        settings = load_settings()
    except ValueError as e:
        console.print(f"[red]Error:[/red] {e}")
        sys.exit(1)
    if roots:
        settings = settings.model_copy(update={"search_paths": list(roots) + settings.search_paths})
    return settings


def _normalize_id(capability: str) -> str:
    """Accept ``module:Class`` as well as ``module.Class``."""
    return capability.replace(":", ".")


def _summary(cls: type) -> str:
    """First line of a class docstring, or empty."""
    lines = (cls.__doc__ or "").strip().splitlines()
    return lines[0] if lines else ""


@click.command("files")
@click.argument("capability")
@root_option
def files_cmd(capability: str, roots: tuple[Path, ...]):
    """List declaration files found for CAPABILITY."""
    settings = _load_settings(roots)
    context = LoadingContext.from_settings(settings)
    service = _normalize_id(capability)

    try:
        resources = list(context.locate(service))
    except OSError as e:
        console.print(f"[red]Error:[/red] Failed to look up service providers for {service}: {e}")
        sys.exit(1)

    if not resources:
        console.print(f"[dim]No declaration files found for {service}[/dim]")
        return

    for resource in resources:
        console.print(resource.uri, highlight=False, soft_wrap=True)


@click.command("names")
@click.argument("capability")
@root_option
def names_cmd(capability: str, roots: tuple[Path, ...]):
    """List provider names declared for CAPABILITY, in load order."""
    settings = _load_settings(roots)
    context = LoadingContext.from_settings(settings)
    service = _normalize_id(capability)

    table = Table(title=f"Declared providers for {service}", show_header=True, header_style="bold cyan")
    table.add_column("#", style="dim", justify="right")
    table.add_column("Name", style="green")
    table.add_column("Declared in", style="magenta")

    count = 0
    try:
        for resource in context.locate(service):
            for name in read_declarations(resource):
                count += 1
                table.add_row(str(count), name, resource.uri)
    except OSError as e:
        console.print(f"[red]Error:[/red] Failed to look up service providers for {service}: {e}")
        sys.exit(1)

    if count == 0:
        console.print(f"[dim]No providers declared for {service}[/dim]")
        return

    console.print(table)


@click.command("list")
@click.argument("capability")
@root_option
@click.option("--instantiate", "-i", is_flag=True, help="Construct each provider instead of only loading its class")
def list_cmd(capability: str, roots: tuple[Path, ...], instantiate: bool):
    """Load the providers of CAPABILITY (``module.Class`` or ``module:Class``)."""
    try:
        capability_cls = ImportResolver().resolve(capability)
    except ProviderNotFoundError as e:
        console.print(f"[red]Error:[/red] {e}")
        sys.exit(1)

    if not isinstance(capability_cls, type):
        console.print(f"[red]Error:[/red] '{capability}' is not a class")
        sys.exit(1)

    settings = _load_settings(roots)
    context = LoadingContext.from_settings(settings)
    service = capability_id(capability_cls)

    try:
        if instantiate:
            providers = discover_instances(context, capability_cls, strict=settings.strict)
            rows = [(capability_id(type(p)), repr(p)) for p in providers]
        else:
            classes: list[type] = []
            discover_descriptors(capability_cls, context, classes, strict=settings.strict)
            rows = [(capability_id(cls), _summary(cls)) for cls in classes]
    except ResourceLookupError as e:
        console.print(f"[red]Error:[/red] {e}")
        sys.exit(1)

    if not rows:
        console.print(f"[dim]No providers found for {service}[/dim]")
        return

    table = Table(title=f"Providers for {service}", show_header=True, header_style="bold cyan")
    table.add_column("Provider", style="green")
    table.add_column("Instance" if instantiate else "Description")
    for provider, detail in rows:
        table.add_row(provider, detail)
    console.print(table)
