"""Minimal LSP server for ESTree JSON documents — diagnostics only."""

from __future__ import annotations

from pathlib import Path

from lsprotocol.types import (
    TEXT_DOCUMENT_DID_CHANGE,
    TEXT_DOCUMENT_DID_OPEN,
    Diagnostic,
    DiagnosticSeverity,
    DidChangeTextDocumentParams,
    DidOpenTextDocumentParams,
    Position,
    PublishDiagnosticsParams,
    Range,
    TextDocumentSyncKind,
)
from pygls.lsp.server import LanguageServer

from styledresolve import __version__
from styledresolve.cli import components_from_config, load_config
from styledresolve.errors import LoadError
from styledresolve.loader import load_program
from styledresolve.location import Span
from styledresolve.walker import resolve_program

SOURCE = "styledresolve"

server = LanguageServer("styledresolve-lsp", __version__, text_document_sync_kind=TextDocumentSyncKind.Full)


def _range(span: Span | None) -> Range:
    if span is None:
        return Range(start=Position(line=0, character=0), end=Position(line=0, character=1))
    return Range(
        start=Position(line=span.start.line - 1, character=span.start.column - 1),
        end=Position(line=span.end.line - 1, character=span.end.column - 1),
    )


def _components(ls: LanguageServer) -> dict[str, str]:
    """Custom components from styledresolve.toml at the workspace root."""
    root = getattr(ls.workspace, "root_path", None)
    if not root:
        return {}
    return components_from_config(load_config(None, Path(root)))


def _validate(ls: LanguageServer, uri: str) -> None:
    """Load and resolve the document, then publish diagnostics."""
    doc = ls.workspace.get_text_document(uri)
    source = doc.source
    filename = uri.rsplit("/", 1)[-1] if "/" in uri else uri
    diagnostics: list[Diagnostic] = []

    try:
        program = load_program(source, filename)
    except LoadError as exc:
        message = exc.message
        if exc.path:
            message += f" (at {exc.path})"
        diagnostics.append(
            Diagnostic(
                range=_range(exc.span),
                message=message,
                severity=DiagnosticSeverity.Error,
                source=SOURCE,
            )
        )
    else:
        ctx = resolve_program(program, filename, _components(ls))
        for diag in ctx.diagnostics:
            diagnostics.append(
                Diagnostic(
                    range=_range(diag.span),
                    message=diag.message,
                    severity=DiagnosticSeverity.Warning,
                    source=SOURCE,
                )
            )
        for definition in ctx.registry:
            count = len(definition.attrs)
            plural = "" if count == 1 else "s"
            diagnostics.append(
                Diagnostic(
                    range=_range(definition.span),
                    message=f"{definition.name} renders as <{definition.tag}> ({count} attribute{plural})",
                    severity=DiagnosticSeverity.Information,
                    source=SOURCE,
                )
            )

    ls.text_document_publish_diagnostics(
        PublishDiagnosticsParams(uri=uri, diagnostics=diagnostics)
    )


@server.feature(TEXT_DOCUMENT_DID_OPEN)
def did_open(ls: LanguageServer, params: DidOpenTextDocumentParams) -> None:
    _validate(ls, params.text_document.uri)


@server.feature(TEXT_DOCUMENT_DID_CHANGE)
def did_change(ls: LanguageServer, params: DidChangeTextDocumentParams) -> None:
    _validate(ls, params.text_document.uri)


def main() -> None:
    server.start_io()
