"""Configuration loading and deterministic merge order."""

from __future__ import annotations

import tomllib
from dataclasses import dataclass
from pathlib import Path

CONFIG_FILE_NAME = "pdb_srcindex.toml"
DATA_DIR_NAME = ".pdb_srcindex"

DEFAULT_TIMEOUT_SECONDS = 300
MAX_TIMEOUT_SECONDS = 3_600
DEFAULT_SERVER_URL = "http://localhost:8111"
DEFAULT_BUILD_ID = "0"


@dataclass(slots=True, frozen=True)
class ToolsConfig:
    """Locations and limits for the external executables."""

    srcsrv_home: Path
    jetsymbols_path: Path
    timeout_seconds: int


@dataclass(slots=True, frozen=True)
class IndexConfig:
    """Settings used to build the srcsrv stream."""

    server_url: str
    build_id: str
    source_root: Path


@dataclass(slots=True, frozen=True)
class PatcherConfig:
    """Fully merged patcher configuration."""

    project_root: Path
    working_dir: Path
    tools: ToolsConfig
    index: IndexConfig

    @property
    def audit_log_path(self) -> Path:
        """Return the JSONL audit log location under the project data directory."""
        return self.project_root / DATA_DIR_NAME / "audit.jsonl"

    def to_public_dict(self) -> dict[str, object]:
        """Return serializable config snapshot."""
        return {
            "project_root": str(self.project_root),
            "working_dir": str(self.working_dir),
            "tools": {
                "srcsrv_home": str(self.tools.srcsrv_home),
                "jetsymbols_path": str(self.tools.jetsymbols_path),
                "timeout_seconds": self.tools.timeout_seconds,
            },
            "index": {
                "server_url": self.index.server_url,
                "build_id": self.index.build_id,
                "source_root": str(self.index.source_root),
            },
        }


@dataclass(slots=True, frozen=True)
class CliOverrides:
    """Optional startup overrides applied at highest precedence."""

    working_dir: Path | None = None
    srcsrv_home: Path | None = None
    jetsymbols_path: Path | None = None
    timeout_seconds: int | None = None
    server_url: str | None = None
    build_id: str | None = None
    source_root: Path | None = None


def default_config(project_root: Path) -> PatcherConfig:
    """Build default config for a given project root."""
    resolved_root = project_root.resolve()
    return PatcherConfig(
        project_root=resolved_root,
        working_dir=resolved_root / DATA_DIR_NAME / "tmp",
        tools=ToolsConfig(
            srcsrv_home=resolved_root / "srcsrv",
            jetsymbols_path=resolved_root / "JetSymbols" / "JetSymbols.exe",
            timeout_seconds=DEFAULT_TIMEOUT_SECONDS,
        ),
        index=IndexConfig(
            server_url=DEFAULT_SERVER_URL,
            build_id=DEFAULT_BUILD_ID,
            source_root=resolved_root,
        ),
    )


def load_config_file(project_root: Path) -> dict[str, object]:
    """Load optional pdb_srcindex.toml from the project root."""
    config_path = project_root / CONFIG_FILE_NAME
    if not config_path.exists():
        return {}
    with config_path.open("rb") as handle:
        payload = tomllib.load(handle)
    if not isinstance(payload, dict):
        raise ValueError(f"{CONFIG_FILE_NAME} must contain a top-level table.")
    return payload


def _get_table(payload: dict[str, object], key: str) -> dict[str, object]:
    value = payload.get(key, {})
    if not isinstance(value, dict):
        raise ValueError(f"Config section '{key}' must be a table.")
    return value


def _optional_string(value: object, name: str, default: str) -> str:
    if value is None:
        return default
    if not isinstance(value, str) or not value.strip():
        raise ValueError(f"Config field '{name}' must be a non-empty string.")
    return value.strip()


def _optional_path(value: object, name: str, default: Path, base: Path) -> Path:
    if value is None:
        return default
    if not isinstance(value, str) or not value.strip():
        raise ValueError(f"Config field '{name}' must be a non-empty path string.")
    candidate = Path(value.strip())
    if not candidate.is_absolute():
        candidate = base / candidate
    return candidate.resolve()


def merge_config(
    base: PatcherConfig, file_payload: dict[str, object], overrides: CliOverrides
) -> PatcherConfig:
    """Merge defaults, config file, then CLI/startup overrides."""
    patch_payload = _get_table(file_payload, "patch")
    tools_payload = _get_table(file_payload, "tools")
    index_payload = _get_table(file_payload, "index")
    root = base.project_root

    merged = PatcherConfig(
        project_root=root,
        working_dir=_optional_path(
            patch_payload.get("working_dir"), "patch.working_dir", base.working_dir, root
        ),
        tools=ToolsConfig(
            srcsrv_home=_optional_path(
                tools_payload.get("srcsrv_home"),
                "tools.srcsrv_home",
                base.tools.srcsrv_home,
                root,
            ),
            jetsymbols_path=_optional_path(
                tools_payload.get("jetsymbols_path"),
                "tools.jetsymbols_path",
                base.tools.jetsymbols_path,
                root,
            ),
            timeout_seconds=_optional_positive_int_with_cap(
                tools_payload.get("timeout_seconds"),
                "tools.timeout_seconds",
                base.tools.timeout_seconds,
                MAX_TIMEOUT_SECONDS,
            ),
        ),
        index=IndexConfig(
            server_url=_optional_string(
                index_payload.get("server_url"), "index.server_url", base.index.server_url
            ),
            build_id=_optional_string(
                index_payload.get("build_id"), "index.build_id", base.index.build_id
            ),
            source_root=_optional_path(
                index_payload.get("source_root"),
                "index.source_root",
                base.index.source_root,
                root,
            ),
        ),
    )
    return apply_cli_overrides(merged, overrides)


def apply_cli_overrides(config: PatcherConfig, overrides: CliOverrides) -> PatcherConfig:
    """Apply startup overrides at highest precedence."""
    timeout_seconds = _optional_positive_int_with_cap(
        overrides.timeout_seconds,
        "overrides.timeout_seconds",
        config.tools.timeout_seconds,
        MAX_TIMEOUT_SECONDS,
    )
    tools = ToolsConfig(
        srcsrv_home=(overrides.srcsrv_home or config.tools.srcsrv_home).resolve(),
        jetsymbols_path=(overrides.jetsymbols_path or config.tools.jetsymbols_path).resolve(),
        timeout_seconds=timeout_seconds,
    )
    index = IndexConfig(
        server_url=_optional_string(
            overrides.server_url, "overrides.server_url", config.index.server_url
        ),
        build_id=_optional_string(overrides.build_id, "overrides.build_id", config.index.build_id),
        source_root=(overrides.source_root or config.index.source_root).resolve(),
    )
    working_dir = overrides.working_dir or config.working_dir
    return PatcherConfig(
        project_root=config.project_root,
        working_dir=working_dir.resolve(),
        tools=tools,
        index=index,
    )


def load_effective_config(
    project_root: Path, overrides: CliOverrides | None = None
) -> PatcherConfig:
    """Load effective config using merge order defaults -> config file -> overrides."""
    resolved_root = project_root.resolve()
    base = default_config(resolved_root)
    payload = load_config_file(resolved_root)
    return merge_config(base, payload, overrides or CliOverrides())


def _optional_positive_int_with_cap(
    value: object,
    name: str,
    default: int,
    cap: int | None,
) -> int:
    if value is None:
        return default
    if isinstance(value, bool) or not isinstance(value, int) or value < 1:
        raise ValueError(f"Config field '{name}' must be a positive integer.")
    if cap is not None and value > cap:
        raise ValueError(f"Config field '{name}' must be <= {cap}.")
    return value
