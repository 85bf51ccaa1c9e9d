"""service-loader CLI - inspect providers declared under META-INF/services."""

import click

from .commands import files_cmd
from .commands import list_cmd
from .commands import names_cmd
from .logging_setup import init_json_logging


@click.group(invoke_without_command=True)
@click.option("--log-file", type=click.Path(dir_okay=False), default=None, help="Write JSONL diagnostics here")
@click.option(
    "--log-level",
    type=click.Choice(["DEBUG", "INFO", "WARNING", "ERROR"], case_sensitive=False),
    default=None,
    help="Diagnostic log level (default: SERVICE_LOADER_LOG_LEVEL or WARNING)",
)
@click.pass_context
def cli(ctx: click.Context, log_file: str | None, log_level: str | None):
    """Discover service providers declared in META-INF/services files."""
    if log_file or log_level:
        init_json_logging(log_file, log_level)

    if ctx.invoked_subcommand is None:
        click.echo(ctx.get_help())
        ctx.exit()


cli.add_command(files_cmd)
cli.add_command(names_cmd)
cli.add_command(list_cmd)


def main():
    """Main entry point."""
    cli()


if __name__ == "__main__":
    main()
