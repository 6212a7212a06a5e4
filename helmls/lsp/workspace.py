"""Open document tracking for the helm language server."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Dict, List, Optional, Sequence

from lsprotocol.types import (
    Diagnostic,
    Location,
    TextDocumentContentChangeEvent,
    TextDocumentItem,
    TextDocumentPositionParams,
)
from pygls.uris import to_fs_path

from helmls.errors import SourceUnavailableError

from .state import DocumentState


class WorkspaceIndex:
    """Documents the editor has open, keyed by URI."""

    def __init__(self, root_uri: Optional[str] = None) -> None:
        self.logger = logging.getLogger("helmls.lsp.workspace")
        self.root_uri = root_uri
        self.root_path = self._resolve_root(root_uri)
        self._open_documents: Dict[str, DocumentState] = {}

    def set_root(self, root_uri: Optional[str]) -> None:
        self.root_uri = root_uri
        self.root_path = self._resolve_root(root_uri)

    # ------------------------------------------------------------------
    # Document lifecycle
    # ------------------------------------------------------------------
    def did_open(self, item: TextDocumentItem) -> List[Diagnostic]:
        document = DocumentState(uri=item.uri, text=item.text, version=item.version)
        self._open_documents[item.uri] = document
        return document.diagnostics_for_publish()

    def did_change(
        self,
        uri: str,
        version: int,
        changes: Sequence[TextDocumentContentChangeEvent],
    ) -> List[Diagnostic]:
        document = self._open_documents.get(uri)
        if document is None:
            document = DocumentState(uri=uri, text=self._read_document_from_fs(uri), version=version)
            self._open_documents[uri] = document
        next_text = self._apply_content_changes(document, changes)
        return document.update(next_text, version)

    def did_close(self, uri: str) -> None:
        self._open_documents.pop(uri, None)

    def document(self, uri: str) -> DocumentState:
        """The open document for *uri*, or a fresh read from disk."""

        document = self._open_documents.get(uri)
        if document is not None:
            return document
        return DocumentState(uri=uri, text=self._read_document_from_fs(uri), version=0)

    # ------------------------------------------------------------------
    # Diagnostics
    # ------------------------------------------------------------------
    def diagnostics(self, uri: str) -> List[Diagnostic]:
        document = self._open_documents.get(uri)
        if document is None:
            return []
        return document.diagnostics_for_publish()

    # ------------------------------------------------------------------
    # Definition
    # ------------------------------------------------------------------
    def definition(self, params: TextDocumentPositionParams) -> Optional[Location]:
        document = self.document(params.text_document.uri)
        location = document.definition(params.position)
        if location is None:
            self.logger.debug("no definition at %s:%s", params.text_document.uri, params.position)
        return location

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------
    def _apply_content_changes(
        self,
        document: DocumentState,
        changes: Sequence[TextDocumentContentChangeEvent],
    ) -> str:
        text = document.text
        for change in changes:
            change_range = getattr(change, "range", None)
            if change_range is None:
                text = change.text
            else:
                start = document.offset_at(change_range.start)
                end = document.offset_at(change_range.end)
                text = text[:start] + change.text + text[end:]
            # offsets of later changes refer to the already edited text
            document.set_text(text)
        return text

    def _read_document_from_fs(self, uri: str) -> str:
        try:
            path = Path(to_fs_path(uri))
        except (TypeError, ValueError) as exc:
            raise SourceUnavailableError(f"Cannot map {uri} to a file", path=uri) from exc
        try:
            return path.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as exc:
            raise SourceUnavailableError(f"Cannot read {path}: {exc}", path=str(path)) from exc

    def _resolve_root(self, root_uri: Optional[str]) -> Path:
        if root_uri:
            try:
                return Path(to_fs_path(root_uri))
            except (TypeError, ValueError):
                return Path(root_uri)
        return Path.cwd()


__all__ = ["WorkspaceIndex"]
