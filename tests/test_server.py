from __future__ import annotations

import logging

import pytest

pytest.importorskip("pygls")
pytest.importorskip("lsprotocol")

from lsprotocol.types import (
    ClientCapabilities,
    CompletionItem,
    CompletionList,
    DidChangeTextDocumentParams,
    DidChangeWatchedFilesParams,
    DidChangeWorkspaceFoldersParams,
    DidCloseTextDocumentParams,
    DidOpenTextDocumentParams,
    InitializedParams,
    InitializeParams,
    TextDocumentIdentifier,
    TextDocumentItem,
    VersionedTextDocumentIdentifier,
    WorkspaceClientCapabilities,
    WorkspaceFoldersChangeEvent,
    WORKSPACE_DID_CHANGE_CONFIGURATION,
)
from pygls.workspace import TextDocument

from uselsp import server
from uselsp.completion import CompletionProvider
from uselsp.config import ServerSettings, SessionConfig
from uselsp.diagnostics import DiagnosticEngine

URI = "file:///tmp/script.use"
OTHER_URI = "file:///tmp/other.use"


class _DummyWorkspace:
    def __init__(self) -> None:
        self.documents: dict[str, TextDocument] = {}

    def put(self, uri: str, text: str, version: int = 1) -> None:
        self.documents[uri] = TextDocument(uri, text, version=version)

    def get_text_document(self, uri: str) -> TextDocument:
        return self.documents[uri]


class _DummyServer:
    def __init__(self, engine: DiagnosticEngine | None = None) -> None:
        self.workspace = _DummyWorkspace()
        self.engine = engine if engine is not None else DiagnosticEngine()
        self.provider = CompletionProvider()
        self.session: SessionConfig | None = None
        self.published = []
        self.log_messages = []
        self.registrations = []

    def text_document_publish_diagnostics(self, params) -> None:
        self.published.append(params)

    def window_log_message(self, params) -> None:
        self.log_messages.append(params)

    def client_register_capability(self, params) -> None:
        self.registrations.append(params)


class _ExplodingEngine(DiagnosticEngine):
    def validate(self, document):
        if "boom" in document.get_text():
            raise RuntimeError("rule crashed")
        return super().validate(document)


def _open_params(uri: str, text: str, version: int = 1) -> DidOpenTextDocumentParams:
    return DidOpenTextDocumentParams(
        text_document=TextDocumentItem(uri=uri, language_id="use", version=version, text=text)
    )


def _initialize_params(
    capabilities: ClientCapabilities | None = None,
    options: object = None,
) -> InitializeParams:
    return InitializeParams(
        process_id=None,
        root_uri=None,
        capabilities=capabilities or ClientCapabilities(),
        initialization_options=options,
    )


def test_did_open_publishes_findings() -> None:
    ls = _DummyServer()
    ls.workspace.put(URI, "buffer x=1\nif(true)\n", version=4)
    server.did_open(ls, _open_params(URI, "buffer x=1\nif(true)\n", version=4))
    assert len(ls.published) == 1
    params = ls.published[0]
    assert params.uri == URI
    assert params.version == 4
    assert [diagnostic.message.split(" ", 1)[0] for diagnostic in params.diagnostics] == [
        "buffer",
        "if(",
    ]
    assert params.diagnostics[1].range.start.line == 1


def test_did_change_replaces_previous_set() -> None:
    ls = _DummyServer()
    ls.workspace.put(URI, "if(x)", version=1)
    server.did_open(ls, _open_params(URI, "if(x)"))
    ls.workspace.put(URI, "if (x)", version=2)
    server.did_change(
        ls,
        DidChangeTextDocumentParams(
            text_document=VersionedTextDocumentIdentifier(uri=URI, version=2),
            content_changes=[],
        ),
    )
    assert len(ls.published) == 2
    assert len(ls.published[0].diagnostics) == 1
    assert ls.published[1].diagnostics == []
    assert ls.published[1].version == 2


def test_did_close_clears_diagnostics() -> None:
    ls = _DummyServer()
    server.did_close(ls, DidCloseTextDocumentParams(text_document=TextDocumentIdentifier(uri=URI)))
    assert ls.published[0].uri == URI
    assert ls.published[0].diagnostics == []


def test_failing_document_is_isolated(caplog: pytest.LogCaptureFixture) -> None:
    ls = _DummyServer(engine=_ExplodingEngine())
    ls.workspace.put(URI, "boom if(x)")
    ls.workspace.put(OTHER_URI, "if(x)")
    with caplog.at_level(logging.ERROR, logger="uselsp.server"):
        assert server.validate_document(ls, URI) is None
    findings = server.validate_document(ls, OTHER_URI)
    assert findings is not None and len(findings) == 1
    assert [params.uri for params in ls.published] == [OTHER_URI]
    assert any("validation failed" in record.getMessage() for record in caplog.records)


def test_initialize_captures_session_once() -> None:
    ls = _DummyServer()
    capabilities = ClientCapabilities(
        workspace=WorkspaceClientCapabilities(configuration=True, workspace_folders=True)
    )
    server.initialize(ls, _initialize_params(capabilities))
    assert ls.session == SessionConfig(configuration=True, workspace_folders=True)
    server.initialized(ls, InitializedParams())
    assert len(ls.registrations) == 1
    registration = ls.registrations[0].registrations[0]
    assert registration.method == WORKSPACE_DID_CHANGE_CONFIGURATION


def test_initialized_without_configuration_capability() -> None:
    ls = _DummyServer()
    server.initialize(ls, _initialize_params())
    server.initialized(ls, InitializedParams())
    assert ls.registrations == []


def test_initialization_options_set_log_level() -> None:
    package_logger = logging.getLogger("uselsp")
    previous = package_logger.level
    try:
        ls = _DummyServer()
        server.initialize(ls, _initialize_params(options={"logLevel": "debug"}))
        assert package_logger.level == logging.DEBUG
    finally:
        package_logger.setLevel(previous)


def test_invalid_initialization_options_are_ignored(caplog: pytest.LogCaptureFixture) -> None:
    ls = _DummyServer()
    with caplog.at_level(logging.WARNING, logger="uselsp.server"):
        server.initialize(ls, _initialize_params(options=["debug"]))
    assert ls.session == SessionConfig()
    assert any("initializationOptions" in record.getMessage() for record in caplog.records)


def test_completion_lists_full_catalog() -> None:
    ls = _DummyServer()
    result = server.completions(ls, None)
    assert isinstance(result, CompletionList)
    assert result.is_incomplete is False
    assert len(result.items) == 64
    assert result.items[2].label == "MAX"


def test_completion_resolve_merges_documentation() -> None:
    ls = _DummyServer()
    item = server.completion_resolve(ls, CompletionItem(label="MAX", data=2))
    assert item.insert_text.startswith("@MAX(")
    assert item.documentation.startswith("Returns the largest number")


def test_completion_resolve_unknown_id_returns_item(caplog: pytest.LogCaptureFixture) -> None:
    ls = _DummyServer()
    with caplog.at_level(logging.WARNING, logger="uselsp.server"):
        item = server.completion_resolve(ls, CompletionItem(label="stale", data=999))
    assert item.label == "stale"
    assert item.documentation is None
    assert item.insert_text is None
    assert any("999" in record.getMessage() for record in caplog.records)


@pytest.mark.parametrize("data", ["\u00b2", "\u0661\u0667", "17.0"])
def test_completion_resolve_non_ascii_digit_id_returns_item(data: str) -> None:
    ls = _DummyServer()
    item = server.completion_resolve(ls, CompletionItem(label="stale", data=data))
    assert item.documentation is None
    assert item.insert_text is None


def test_workspace_events_are_logged_to_client() -> None:
    ls = _DummyServer()
    server.did_change_watched_files(ls, DidChangeWatchedFilesParams(changes=[]))
    server.did_change_workspace_folders(
        ls,
        DidChangeWorkspaceFoldersParams(event=WorkspaceFoldersChangeEvent(added=[], removed=[])),
    )
    assert [params.message for params in ls.log_messages] == [
        "We received a file change event",
        "Workspace folder change event received.",
    ]


def test_module_server_is_wired() -> None:
    assert isinstance(server.server, server.UseLanguageServer)
    assert len(server.server.provider.list_completions()) == 64
    assert server.server.engine.source == "ex"


def test_configure_applies_diagnostic_source() -> None:
    ls = _DummyServer()
    server.configure(ServerSettings(diagnostic_source="use"), target=ls)
    ls.workspace.put(URI, "if(x)")
    findings = server.validate_document(ls, URI)
    assert findings is not None
    assert findings[0].source == "use"


def test_start_uses_given_entrypoint() -> None:
    calls: list[str] = []
    server.start(lambda: calls.append("started"))
    assert calls == ["started"]
