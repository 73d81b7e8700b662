from __future__ import annotations

import json
from pathlib import Path

import yaml
from expandvars import expandvars
from pydantic import BaseModel, ConfigDict, Field, field_validator

DEFAULT_ADMIN_KEY_FILE = "../realm-object-server-data/keys/admin.json"


class AdminKey(BaseModel):
    """Contents of the test server's admin key file."""

    admin_token: str = Field(alias="ADMIN_TOKEN")


class ControllerConfig(BaseModel):
    model_config = ConfigDict(extra="forbid")
    host: str = "127.0.0.1"
    http_host: str = "localhost"
    http_port: int = 9080
    admin_path: str = "/__admin"
    admin_key_file: str = DEFAULT_ADMIN_KEY_FILE
    upload_settle_delay: float = 0.001
    path_prefix: str | None = None

    @field_validator("admin_path")
    @classmethod
    def admin_path_must_be_absolute(cls, v: str) -> str:
        if not v.startswith("/"):
            raise ValueError(f"admin_path '{v}' must start with '/'")
        return v

    @field_validator("upload_settle_delay")
    @classmethod
    def delay_must_not_be_negative(cls, v: float) -> float:
        if v < 0:
            raise ValueError("upload_settle_delay must not be negative")
        return v

    @property
    def auth_url(self) -> str:
        return f"http://{self.host}:{self.http_port}"

    def sync_url(self, path: str) -> str:
        """Build a realm:// URL for a server path (with or without leading slash)."""
        return f"realm://{self.host}:{self.http_port}/{path.lstrip('/')}"


def load_admin_token(path: Path | str) -> str:
    """Read the ADMIN_TOKEN from a key file.

    Read and parse errors propagate unchanged.
    """
    with open(path, encoding="utf-8") as f:
        raw = json.load(f)
    return AdminKey.model_validate(raw).admin_token


def load_config(path: Path) -> ControllerConfig:
    """Load and validate a controller config from a YAML file.

    Unset variables raise expandvars.UnboundVariable, bad YAML raises
    yaml.YAMLError and bad values raise pydantic.ValidationError.
    """
    config_dir = path.parent.resolve()

    text = expandvars(path.read_text(), nounset=True)
    raw = yaml.safe_load(text) or {}

    config = ControllerConfig.model_validate(raw)

    # Resolve a relative key file path relative to config file location
    key_path = Path(config.admin_key_file)
    if not key_path.is_absolute():
        config.admin_key_file = str((config_dir / key_path).resolve())

    return config
