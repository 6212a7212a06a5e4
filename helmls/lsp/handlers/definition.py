"""Definition handler."""

from __future__ import annotations

import logging

from lsprotocol.types import MessageType, TextDocumentPositionParams

from helmls.errors import HelmLSError

logger = logging.getLogger("helmls.lsp.definition")


def register(server) -> None:
    workspace = server.workspace_index

    @server.feature("textDocument/definition")
    def _definition(ls, params: TextDocumentPositionParams):
        try:
            return workspace.definition(params)
        except HelmLSError as exc:
            logger.warning("definition failed for %s: %s", params.text_document.uri, exc.format())
            ls.show_message_log(exc.format(), MessageType.Warning)
            return None
