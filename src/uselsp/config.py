from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from datetime import date, datetime, time
from pathlib import Path
from typing import Mapping, TypeAlias
import tomllib

from lsprotocol.types import ClientCapabilities

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_NAME = "uselsp.toml"
DEFAULT_LOG_LEVEL = "warning"
DEFAULT_DIAGNOSTIC_SOURCE = "ex"

LOG_LEVEL_ENV = "USELSP_LOG_LEVEL"
LOG_FILE_ENV = "USELSP_LOG_FILE"

TomlScalar: TypeAlias = str | int | float | bool | None | date | datetime | time
TomlValue: TypeAlias = TomlScalar | list["TomlValue"] | dict[str, "TomlValue"]
TomlTable: TypeAlias = dict[str, TomlValue]


def load_config(root: Path | None = None, config_path: Path | None = None) -> TomlTable:
    """Read `uselsp.toml` from `root` (or the working directory).

    A missing file means defaults. An unreadable or malformed file also falls
    back to defaults, with a warning naming the file.
    """
    if config_path is None:
        config_path = (root if root is not None else Path.cwd()) / DEFAULT_CONFIG_NAME
    try:
        with config_path.open("rb") as handle:
            return tomllib.load(handle)
    except FileNotFoundError:
        return {}
    except (OSError, UnicodeDecodeError, tomllib.TOMLDecodeError) as exc:
        logger.warning("ignoring config file %s: %s", config_path, exc)
        return {}


def _section(data: TomlTable, name: str) -> TomlTable:
    section = data.get(name, {})
    return section if isinstance(section, dict) else {}


def parse_log_level(value: object) -> int | None:
    if isinstance(value, int) and not isinstance(value, bool):
        return value
    if not isinstance(value, str) or not value.strip():
        return None
    level = logging.getLevelName(value.strip().upper())
    return level if isinstance(level, int) else None


@dataclass(frozen=True)
class ServerSettings:
    log_level: int = logging.WARNING
    log_file: Path | None = None
    diagnostic_source: str = DEFAULT_DIAGNOSTIC_SOURCE


def load_settings(
    root: Path | None = None,
    config_path: Path | None = None,
    env: Mapping[str, str] | None = None,
) -> ServerSettings:
    """Resolve settings from `uselsp.toml`, then environment overrides."""
    env = os.environ if env is None else env
    data = load_config(root=root, config_path=config_path)
    server = _section(data, "server")
    diagnostics = _section(data, "diagnostics")

    raw_level = env.get(LOG_LEVEL_ENV, "").strip() or server.get("log_level")
    log_level = parse_log_level(raw_level)
    if log_level is None:
        log_level = parse_log_level(DEFAULT_LOG_LEVEL)

    raw_file = env.get(LOG_FILE_ENV, "").strip() or server.get("log_file")
    log_file = Path(raw_file) if isinstance(raw_file, str) and raw_file else None

    source = diagnostics.get("source")
    if not isinstance(source, str) or not source.strip():
        source = DEFAULT_DIAGNOSTIC_SOURCE
    return ServerSettings(log_level=log_level, log_file=log_file, diagnostic_source=source)


@dataclass(frozen=True)
class SessionConfig:
    """Client capabilities, captured once at `initialize`."""

    configuration: bool = False
    workspace_folders: bool = False
    diagnostic_related_information: bool = False

    @classmethod
    def from_capabilities(cls, capabilities: ClientCapabilities | None) -> SessionConfig:
        if capabilities is None:
            return cls()
        workspace = capabilities.workspace
        text_document = capabilities.text_document
        publish = text_document.publish_diagnostics if text_document is not None else None
        return cls(
            configuration=bool(workspace is not None and workspace.configuration),
            workspace_folders=bool(workspace is not None and workspace.workspace_folders),
            diagnostic_related_information=bool(
                publish is not None and publish.related_information
            ),
        )
