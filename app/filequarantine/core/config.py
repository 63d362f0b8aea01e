"""Configuration models and TOML I/O.

The configuration file has two sections::

    [quarantine]
    scan_roots = ["/srv/app"]
    quarantine_root = "/var/quarantine"
    extensions = ["sql", "bak", "log", "tmp", "old"]
    retention_days = 30
    min_file_age_minutes = 60
    truncate_logs = false
    truncate_size = "5MB"

    [email]
    enabled = false
    to = "admin@example.com"

Configuration is stored in ~/.config/file-quarantine/config.toml
"""

import logging
import os
import socket
import tomllib
from pathlib import Path
from tempfile import NamedTemporaryFile
from typing import Annotated

import tomli_w
from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from filequarantine.core.paths import get_config_path
from filequarantine.core.sizes import MB, UNIT_MULTIPLIERS, parse_size
from filequarantine.errors import (
    ConfigNotFoundError,
    ConfigParseError,
    ConfigurationInvalidError,
)

logger = logging.getLogger(__name__)

DEFAULT_EXTENSIONS: frozenset[str] = frozenset({"sql", "bak", "log", "tmp", "old"})

DEFAULT_EXCLUDE_PATTERNS: tuple[str, ...] = (
    "*/proc/*",
    "*/sys/*",
    "*/dev/*",
    "*/tmp/*",
    "*/.git/*",
    "*/node_modules/*",
)


class QuarantineConfig(BaseModel):
    """Validated, immutable settings for one maintenance run.

    Attributes:
        scan_roots: Directories scanned for candidates, in order.
        quarantine_root: Root of the mirrored quarantine tree.
        extensions: Lowercase extensions without a leading dot.
        retention_days: Quarantined files at least this many whole days
            old are deleted.
        min_file_age_minutes: Files younger than this are never touched.
        exclude_patterns: Glob patterns over full paths; matches are ignored.
        truncate_logs: Route ``.log`` files to truncation instead of quarantine.
        truncate_size: Byte threshold for log truncation.
        dry_run: Record decisions without modifying the filesystem.
    """

    model_config = ConfigDict(extra="forbid", frozen=True)

    scan_roots: Annotated[
        tuple[Path, ...],
        Field(description="Directories to scan"),
    ] = ()
    quarantine_root: Annotated[
        Path,
        Field(description="Root of the quarantine tree"),
    ] = Path("/var/quarantine")
    extensions: Annotated[
        frozenset[str],
        Field(description="File extensions to quarantine"),
    ] = DEFAULT_EXTENSIONS
    retention_days: Annotated[
        int,
        Field(ge=0, description="Days before quarantined files are deleted"),
    ] = 30
    min_file_age_minutes: Annotated[
        int,
        Field(ge=0, description="Minimum file age before quarantine"),
    ] = 60
    exclude_patterns: Annotated[
        tuple[str, ...],
        Field(description="Glob patterns for ignored paths"),
    ] = DEFAULT_EXCLUDE_PATTERNS
    truncate_logs: Annotated[
        bool,
        Field(description="Truncate .log files instead of quarantining them"),
    ] = False
    truncate_size: Annotated[
        int,
        Field(ge=0, description="Size in bytes that logs are truncated to"),
    ] = 5 * MB
    dry_run: Annotated[
        bool,
        Field(description="Simulate without modifying the filesystem"),
    ] = False

    @field_validator("extensions", mode="before")
    @classmethod
    def normalize_extensions(cls, v: object) -> object:
        """Lowercase extensions and strip leading dots and whitespace."""
        if isinstance(v, str):
            v = [v]
        if isinstance(v, (list, tuple, set, frozenset)):
            normalized = {str(ext).strip().lstrip(".").lower() for ext in v}
            return frozenset(ext for ext in normalized if ext)
        return v

    @field_validator("truncate_size", mode="before")
    @classmethod
    def parse_truncate_size(cls, v: object) -> object:
        """Accept human size strings such as "5MB"."""
        if isinstance(v, str):
            return parse_size(v)
        return v


class EmailConfig(BaseModel):
    """Settings for e-mailing the run report.

    Attributes:
        enabled: Send a report after each run.
        to: Recipient address.
        from_address: Sender address (defaults to quarantine@<hostname>).
        subject: Subject template; ``{date}`` and ``{hostname}`` are filled in.
        smtp_server: SMTP host. Empty means local sendmail.
        smtp_port: SMTP port.
        smtp_user: Optional SMTP login.
        smtp_password: Optional SMTP password.
        smtp_use_tls: Require STARTTLS.
        timeout_seconds: Timeout for the SMTP connection or sendmail.
    """

    model_config = ConfigDict(extra="forbid", frozen=True)

    enabled: bool = False
    to: str = "admin@example.com"
    from_address: str | None = None
    subject: str = "File Quarantine Report - {date}"
    smtp_server: str = ""
    smtp_port: Annotated[int, Field(ge=1, le=65535)] = 587
    smtp_user: str = ""
    smtp_password: str = ""
    smtp_use_tls: bool = True
    timeout_seconds: Annotated[int, Field(ge=1, le=600)] = 30

    @property
    def effective_from(self) -> str:
        """Sender address, falling back to quarantine@<hostname>."""
        if self.from_address:
            return self.from_address
        return f"quarantine@{socket.gethostname()}"


class AppConfig(BaseModel):
    """Complete configuration file contents."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    quarantine: QuarantineConfig = Field(default_factory=QuarantineConfig)
    email: EmailConfig = Field(default_factory=EmailConfig)


def load_config(path: Path | None = None) -> AppConfig:
    """Load configuration from a TOML file.

    Args:
        path: Path to the config file. If None, uses the default config path.

    Returns:
        Validated AppConfig object.

    Raises:
        ConfigNotFoundError: If the config file doesn't exist.
        ConfigParseError: If the TOML syntax is invalid.
        ConfigurationInvalidError: If the content doesn't match the schema.
    """
    config_path = path or get_config_path()

    if not config_path.exists():
        raise ConfigNotFoundError(f"Config file not found: {config_path}")

    try:
        with open(config_path, "rb") as f:
            data = tomllib.load(f)
    except tomllib.TOMLDecodeError as e:
        raise ConfigParseError(f"Invalid TOML syntax in {config_path}: {e}") from e
    except OSError as e:
        raise ConfigurationInvalidError(f"Failed to read config {config_path}: {e}") from e

    section = data.get("quarantine")
    if isinstance(section, dict) and "dry_run" in section:
        # dry_run is a per-invocation switch, not a stored setting
        logger.warning("Ignoring 'dry_run' in %s; use --dry-run instead", config_path)
        section.pop("dry_run")

    try:
        return AppConfig.model_validate(data)
    except (ValueError, ValidationError) as e:
        raise ConfigurationInvalidError(f"Invalid config content in {config_path}: {e}") from e


def save_config(config: AppConfig, path: Path | None = None) -> Path:
    """Save configuration to a TOML file.

    The file is written atomically by first writing to a temporary file
    and then using os.replace() for atomic rename.

    Args:
        config: The AppConfig object to save.
        path: Path to save the config. If None, uses the default config path.

    Returns:
        Path where the config was saved.

    Raises:
        ConfigurationInvalidError: If the file cannot be written.
    """
    config_path = path or get_config_path()

    tmp_path: Path | None = None
    try:
        config_path.parent.mkdir(parents=True, exist_ok=True)
        with NamedTemporaryFile(
            mode="wb",
            dir=config_path.parent,
            delete=False,
            suffix=".tmp",
        ) as f:
            tmp_path = Path(f.name)
            tomli_w.dump(config_to_dict(config), f)
        os.replace(str(tmp_path), str(config_path))
    except OSError as e:
        if tmp_path is not None and tmp_path.exists():
            tmp_path.unlink()
        raise ConfigurationInvalidError(f"Failed to write config {config_path}: {e}") from e

    return config_path


def config_to_dict(config: AppConfig) -> dict[str, object]:
    """Convert AppConfig to a dictionary for TOML serialization.

    Paths become strings, sets become sorted lists and the truncate
    size is written in human form. ``from_address`` is omitted when
    unset since TOML has no null.

    Args:
        config: The AppConfig to convert.

    Returns:
        Dictionary ready for TOML serialization.
    """
    q = config.quarantine
    quarantine: dict[str, object] = {
        "scan_roots": [str(root) for root in q.scan_roots],
        "quarantine_root": str(q.quarantine_root),
        "extensions": sorted(q.extensions),
        "retention_days": q.retention_days,
        "min_file_age_minutes": q.min_file_age_minutes,
        "exclude_patterns": list(q.exclude_patterns),
        "truncate_logs": q.truncate_logs,
        "truncate_size": _size_for_toml(q.truncate_size),
    }

    email = config.email.model_dump(exclude_none=True)

    return {"quarantine": quarantine, "email": email}


def _size_for_toml(size_bytes: int) -> str:
    """Render a byte count in the largest unit that divides it exactly."""
    for unit in ("GB", "MB", "KB"):
        multiplier = UNIT_MULTIPLIERS[unit]
        if size_bytes and size_bytes % multiplier == 0:
            return f"{size_bytes // multiplier}{unit}"
    return f"{size_bytes}B"
