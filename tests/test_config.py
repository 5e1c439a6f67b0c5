from __future__ import annotations

import logging
from pathlib import Path

import pytest
from lsprotocol.types import (
    ClientCapabilities,
    PublishDiagnosticsClientCapabilities,
    TextDocumentClientCapabilities,
    WorkspaceClientCapabilities,
)
from pydantic import ValidationError

from uselsp.config import (
    DEFAULT_CONFIG_NAME,
    ServerSettings,
    SessionConfig,
    load_config,
    load_settings,
    parse_log_level,
)
from uselsp.schema import InitializationOptions


def test_missing_config_gives_defaults(tmp_path: Path) -> None:
    assert load_config(root=tmp_path) == {}
    assert load_settings(root=tmp_path, env={}) == ServerSettings()


def test_config_file_sections(tmp_path: Path) -> None:
    (tmp_path / DEFAULT_CONFIG_NAME).write_text(
        '[server]\nlog_level = "debug"\nlog_file = "uselsp.log"\n'
        '[diagnostics]\nsource = "use"\n',
        encoding="utf-8",
    )
    assert load_config(root=tmp_path)["server"]["log_level"] == "debug"
    settings = load_settings(root=tmp_path, env={})
    assert settings.log_level == logging.DEBUG
    assert settings.log_file == Path("uselsp.log")
    assert settings.diagnostic_source == "use"


def test_environment_overrides_file(tmp_path: Path) -> None:
    config = tmp_path / "custom.toml"
    config.write_text('[server]\nlog_level = "debug"\n', encoding="utf-8")
    env = {"USELSP_LOG_LEVEL": "error", "USELSP_LOG_FILE": str(tmp_path / "x.log")}
    settings = load_settings(config_path=config, env=env)
    assert settings.log_level == logging.ERROR
    assert settings.log_file == tmp_path / "x.log"


def test_malformed_config_is_ignored(
    tmp_path: Path, caplog: pytest.LogCaptureFixture
) -> None:
    (tmp_path / DEFAULT_CONFIG_NAME).write_text("[server\nlog_level=", encoding="utf-8")
    with caplog.at_level(logging.WARNING, logger="uselsp.config"):
        assert load_config(root=tmp_path) == {}
    assert any(DEFAULT_CONFIG_NAME in record.getMessage() for record in caplog.records)
    settings = load_settings(root=tmp_path, env={"USELSP_LOG_LEVEL": "loud"})
    assert settings.log_level == logging.WARNING


@pytest.mark.parametrize(
    ("raw", "expected"),
    [("debug", logging.DEBUG), (" Info ", logging.INFO), (10, 10), ("", None), ("loud", None), (None, None)],
)
def test_parse_log_level(raw: object, expected: int | None) -> None:
    assert parse_log_level(raw) == expected


def test_session_config_from_capabilities() -> None:
    capabilities = ClientCapabilities(
        workspace=WorkspaceClientCapabilities(configuration=True, workspace_folders=True),
        text_document=TextDocumentClientCapabilities(
            publish_diagnostics=PublishDiagnosticsClientCapabilities(related_information=True)
        ),
    )
    session = SessionConfig.from_capabilities(capabilities)
    assert session == SessionConfig(
        configuration=True,
        workspace_folders=True,
        diagnostic_related_information=True,
    )


def test_session_config_defaults() -> None:
    assert SessionConfig.from_capabilities(None) == SessionConfig()
    assert SessionConfig.from_capabilities(ClientCapabilities()) == SessionConfig()


def test_initialization_options() -> None:
    assert InitializationOptions.model_validate({"logLevel": "debug"}).log_level == "debug"
    assert InitializationOptions.model_validate({"other": 1}).log_level is None
    with pytest.raises(ValidationError):
        InitializationOptions.model_validate(["debug"])


def test_undecodable_config_is_ignored(tmp_path: Path) -> None:
    (tmp_path / DEFAULT_CONFIG_NAME).write_bytes(b"[server]\nlog_level = \"\xff\"\n")
    assert load_config(root=tmp_path) == {}
    assert load_settings(root=tmp_path, env={}) == ServerSettings()
