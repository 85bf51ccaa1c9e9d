"""CLI commands for service-loader."""

from .providers import files_cmd
from .providers import list_cmd
from .providers import names_cmd

__all__ = ["files_cmd", "list_cmd", "names_cmd"]
