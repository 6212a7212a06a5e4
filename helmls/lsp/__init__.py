"""Language Server Protocol implementation for Helm chart templates."""

from .server import HelmLanguageServer, create_server

__all__ = [
    "HelmLanguageServer",
    "create_server",
]
