from __future__ import annotations

import logging
import uuid
from typing import Callable

from pydantic import ValidationError
from pygls.lsp.server import LanguageServer
from lsprotocol.types import (
    COMPLETION_ITEM_RESOLVE,
    INITIALIZE,
    INITIALIZED,
    TEXT_DOCUMENT_COMPLETION,
    TEXT_DOCUMENT_DID_CHANGE,
    TEXT_DOCUMENT_DID_CLOSE,
    TEXT_DOCUMENT_DID_OPEN,
    WORKSPACE_DID_CHANGE_CONFIGURATION,
    WORKSPACE_DID_CHANGE_WATCHED_FILES,
    WORKSPACE_DID_CHANGE_WORKSPACE_FOLDERS,
    CompletionItem,
    CompletionList,
    CompletionOptions,
    CompletionParams,
    DidChangeConfigurationParams,
    DidChangeTextDocumentParams,
    DidChangeWatchedFilesParams,
    DidChangeWorkspaceFoldersParams,
    DidCloseTextDocumentParams,
    DidOpenTextDocumentParams,
    InitializedParams,
    InitializeParams,
    LogMessageParams,
    MessageType,
    PublishDiagnosticsParams,
    Registration,
    RegistrationParams,
    TextDocumentSyncKind,
)

from uselsp import __version__
from uselsp.completion import CompletionProvider
from uselsp.config import ServerSettings, SessionConfig, parse_log_level
from uselsp.diagnostics import DiagnosticEngine, Finding, to_lsp_diagnostics
from uselsp.exceptions import UnresolvedEntry
from uselsp.positions import DocumentSource
from uselsp.schema import InitializationOptions

logger = logging.getLogger(__name__)


class UseLanguageServer(LanguageServer):
    """pygls server carrying the diagnostic engine and completion provider.

    `session` stays None until `initialize` has captured the client
    capabilities; it is never mutated afterwards.
    """

    def __init__(
        self,
        *args,
        engine: DiagnosticEngine | None = None,
        provider: CompletionProvider | None = None,
        **kwargs,
    ) -> None:
        super().__init__(*args, **kwargs)
        self.engine = engine if engine is not None else DiagnosticEngine()
        self.provider = provider if provider is not None else CompletionProvider()
        self.session: SessionConfig | None = None


server = UseLanguageServer(
    "uselsp",
    __version__,
    text_document_sync_kind=TextDocumentSyncKind.Incremental,
)


def configure(settings: ServerSettings, target: UseLanguageServer | None = None) -> None:
    """Apply resolved settings before the server starts serving."""
    target = target if target is not None else server
    target.engine = DiagnosticEngine(source=settings.diagnostic_source)


def _apply_initialization_options(options: object) -> None:
    if options is None:
        return
    try:
        parsed = InitializationOptions.model_validate(options)
    except ValidationError as exc:
        logger.warning("ignoring invalid initializationOptions: %s", exc)
        return
    level = parse_log_level(parsed.log_level)
    if level is not None:
        logging.getLogger("uselsp").setLevel(level)


def _console_log(ls: LanguageServer, message: str) -> None:
    logger.info(message)
    ls.window_log_message(LogMessageParams(type=MessageType.Log, message=message))


def validate_document(ls: UseLanguageServer, uri: str) -> list[Finding] | None:
    """Validate the current text of `uri` and publish the full finding set.

    The published set replaces whatever was published for `uri` before. A
    failure is logged and leaves the previous set in place; it never reaches
    other documents.
    """
    document = DocumentSource(ls.workspace.get_text_document(uri))
    try:
        findings = ls.engine.validate(document)
    except Exception:
        logger.exception("validation failed for %s", uri)
        return None
    logger.debug("publishing %d diagnostics for %s", len(findings), uri)
    ls.text_document_publish_diagnostics(
        PublishDiagnosticsParams(
            uri=uri,
            version=document.version,
            diagnostics=to_lsp_diagnostics(findings),
        )
    )
    return findings


@server.feature(INITIALIZE)
def initialize(ls: UseLanguageServer, params: InitializeParams) -> None:
    ls.session = SessionConfig.from_capabilities(params.capabilities)
    _apply_initialization_options(params.initialization_options)
    logger.debug("session capabilities: %s", ls.session)


@server.feature(INITIALIZED)
def initialized(ls: UseLanguageServer, params: InitializedParams) -> None:
    session = ls.session if ls.session is not None else SessionConfig()
    if session.configuration:
        ls.client_register_capability(
            RegistrationParams(
                registrations=[
                    Registration(
                        id=str(uuid.uuid4()),
                        method=WORKSPACE_DID_CHANGE_CONFIGURATION,
                    )
                ]
            )
        )


@server.feature(TEXT_DOCUMENT_DID_OPEN)
def did_open(ls: UseLanguageServer, params: DidOpenTextDocumentParams) -> None:
    validate_document(ls, params.text_document.uri)


@server.feature(TEXT_DOCUMENT_DID_CHANGE)
def did_change(ls: UseLanguageServer, params: DidChangeTextDocumentParams) -> None:
    validate_document(ls, params.text_document.uri)


@server.feature(TEXT_DOCUMENT_DID_CLOSE)
def did_close(ls: UseLanguageServer, params: DidCloseTextDocumentParams) -> None:
    ls.text_document_publish_diagnostics(
        PublishDiagnosticsParams(uri=params.text_document.uri, diagnostics=[])
    )


@server.feature(WORKSPACE_DID_CHANGE_CONFIGURATION)
def did_change_configuration(
    ls: UseLanguageServer, params: DidChangeConfigurationParams
) -> None:
    logger.debug("configuration change received")


@server.feature(WORKSPACE_DID_CHANGE_WATCHED_FILES)
def did_change_watched_files(
    ls: UseLanguageServer, params: DidChangeWatchedFilesParams
) -> None:
    _console_log(ls, "We received a file change event")


@server.feature(WORKSPACE_DID_CHANGE_WORKSPACE_FOLDERS)
def did_change_workspace_folders(
    ls: UseLanguageServer, params: DidChangeWorkspaceFoldersParams
) -> None:
    _console_log(ls, "Workspace folder change event received.")


@server.feature(TEXT_DOCUMENT_COMPLETION, CompletionOptions(resolve_provider=True))
def completions(ls: UseLanguageServer, params: CompletionParams | None = None) -> CompletionList:
    # The cursor position and document are not consulted.
    return CompletionList(is_incomplete=False, items=ls.provider.to_lsp_items())


@server.feature(COMPLETION_ITEM_RESOLVE)
def completion_resolve(ls: UseLanguageServer, item: CompletionItem) -> CompletionItem:
    try:
        return ls.provider.resolve_item(item)
    except UnresolvedEntry as exc:
        logger.warning("%s (label %r)", exc, item.label)
        return item


def start(start_fn: Callable[[], None] | None = None) -> None:
    """Start the language server over stdio."""
    (start_fn or server.start_io)()


def serve_tcp(host: str, port: int) -> None:
    server.start_tcp(host, port)


if __name__ == "__main__":  # pragma: no cover
    start()  # pragma: no cover
