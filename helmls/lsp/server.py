"""pygls based Language Server entrypoint."""

from __future__ import annotations

import asyncio
import logging
import os
from typing import Any, Optional

from lsprotocol.types import InitializedParams, InitializeParams, MessageType
from pygls.server import LanguageServer

from helmls import __version__
from helmls.chart import Chart, ChartLoader
from helmls.config import ServerConfig
from helmls.errors import ConfigError

from .handlers import register_all
from .workspace import WorkspaceIndex

logger = logging.getLogger("helmls.lsp.server")


class HelmLanguageServer(LanguageServer):
    """Concrete LanguageServer holding the chart and open documents."""

    def __init__(self, config: Optional[ServerConfig] = None, loader: Optional[ChartLoader] = None) -> None:
        super().__init__(name="helmls", version=__version__)
        self.config = config or ServerConfig()
        self.chart = Chart()
        self.loader = loader
        self.workspace_index = WorkspaceIndex()
        register_all(self)
        self._register_lifecycle_handlers()

    def apply_initialization_options(self, options: Any) -> None:
        try:
            self.config = self.config.merged(options)
        except ConfigError as exc:
            logger.warning("Ignoring initializationOptions: %s", exc.format())

    async def load_chart(self, root_uri: Optional[str]) -> bool:
        """Fill :attr:`chart` for the workspace root.

        Failures only leave the chart empty; the server keeps serving.
        """

        if not self.config.load_chart or not root_uri:
            return False
        self.workspace_index.set_root(root_uri)
        loader = self.loader or ChartLoader(self.config)
        loop = asyncio.get_running_loop()
        loaded = await loop.run_in_executor(None, loader.load, self.chart, self.workspace_index.root_path)
        if not loaded:
            self.show_message_log("helm chart metadata unavailable, continuing without it", MessageType.Warning)
        return loaded

    def _register_lifecycle_handlers(self) -> None:
        workspace = self.workspace_index

        @self.feature("initialize")
        def _on_initialize(ls: "HelmLanguageServer", params: InitializeParams) -> None:
            ls.apply_initialization_options(params.initialization_options)

        @self.feature("initialized")
        async def _on_initialized(ls: "HelmLanguageServer", params: InitializedParams) -> None:  # noqa: ARG001
            root_uri = ls.workspace.root_uri
            workspace.set_root(root_uri)
            logger.info("Workspace root set to %s", workspace.root_path)
            await ls.load_chart(root_uri)


def create_server(config: Optional[ServerConfig] = None) -> HelmLanguageServer:
    return HelmLanguageServer(config=config)


def main(config: Optional[ServerConfig] = None) -> None:
    server = create_server(config)
    logger.info("Starting helm language server (pid=%s)", os.getpid())
    server.start_io()


if __name__ == "__main__":  # pragma: no cover
    main()
