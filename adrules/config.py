"""
Loading and validation of the AdRules sync configuration.
Pydantic describes the schema; YAML and JSON files are both accepted.
"""
from __future__ import annotations

import errno
import json
import os
from pathlib import Path
from typing import Any, List, Optional, Union

import yaml
from pydantic import BaseModel, ConfigDict, Field, field_validator

DEFAULT_USER_AGENT = "Mozilla/5.0 (compatible; AdRulesBot-Py/1.0)"
DEFAULT_TITLE = "5whys Adguard Home Rules List (Use with a lot of false rejects)"


class SyncConfig(BaseModel):
    """Configuration of one sync run."""
    model_config = ConfigDict(extra="forbid", frozen=True)

    rules_file: Path = Field(Path("setting/rules.txt"), description="File with the list of source URLs.")
    output_dir: Path = Field(Path("rules"), description="Directory for the final rule list.")
    publish_dir: Path = Field(Path("publish"), description="Directory the final rule list is copied to.")
    output_file: str = Field("output.txt", min_length=1, description="File name of the final rule list.")

    concurrency: int = Field(8, ge=1, description="Number of parallel downloads.")
    timeout: float = Field(45.0, gt=0, description="Timeout of a single download (seconds).")
    user_agent: str = Field(DEFAULT_USER_AGENT, min_length=1, description="User-Agent header.")
    min_success_ratio: float = Field(
        0.0, ge=0.0, le=1.0, description="Minimal share of sources that must download."
    )

    compiler: List[str] = Field(
        default_factory=lambda: ["hostlist-compiler"],
        min_length=1,
        description="Compiler command; `-i <in> -o <out>` is appended.",
    )

    title: str = Field(DEFAULT_TITLE, description="Title line of the header.")
    expires: str = Field("12 hours", description="Expires line of the header.")
    homepage: Optional[str] = Field(None, description="Homepage; defaults to the GitHub repository.")

    @field_validator("output_file")
    def _plain_file_name(cls, v: str) -> str:
        if Path(v).name != v:
            raise ValueError(f"output_file must be a bare file name, got {v!r}")
        return v

    @field_validator("compiler", mode="before")
    def _split_command(cls, v: Any) -> Any:
        if isinstance(v, str):
            return v.split()
        return v

    def resolve_homepage(self) -> str:
        """Configured homepage, or the GitHub page of ``$GITHUB_REPOSITORY``."""
        if self.homepage:
            return self.homepage
        return f"https://github.com/{os.getenv('GITHUB_REPOSITORY', '')}"


DEFAULT_CFG = Path("configs/default.yaml")


def _read_yaml(path: Path) -> dict[str, Any]:
    try:
        data = yaml.safe_load(path.read_text(encoding="utf-8")) or {}
    except yaml.YAMLError as exc:
        raise ValueError(f"Invalid YAML in {path}: {exc}") from exc
    if not isinstance(data, dict):
        raise TypeError(f"Top level of YAML must be a mapping, got {type(data).__name__}")
    return data


def _read_json(path: Path) -> dict[str, Any]:
    try:
        data = json.loads(path.read_text(encoding="utf-8")) or {}
    except json.JSONDecodeError as exc:
        raise ValueError(f"Invalid JSON in {path}: {exc}") from exc
    if not isinstance(data, dict):
        raise TypeError(f"Top level of JSON must be a mapping, got {type(data).__name__}")
    return data


def load_config(path: Union[str, Path, None]) -> SyncConfig:
    """
    Read YAML or JSON and return a validated SyncConfig.

    With ``path=None`` the default ``configs/default.yaml`` is used if it
    exists, otherwise the built-in defaults. An explicit path that does not
    exist raises FileNotFoundError.
    """
    if path is None:
        if not DEFAULT_CFG.is_file():
            return SyncConfig()
        path_obj = DEFAULT_CFG
    else:
        path_obj = Path(path).expanduser().resolve()
        if not path_obj.is_file():
            raise FileNotFoundError(errno.ENOENT, os.strerror(errno.ENOENT), str(path_obj))

    suffix = path_obj.suffix.lower()
    if suffix in (".yaml", ".yml"):
        data = _read_yaml(path_obj)
    elif suffix == ".json":
        data = _read_json(path_obj)
    else:
        raise ValueError(f"Unsupported config format: {suffix}")

    return SyncConfig(**data)


__all__ = ["SyncConfig", "load_config", "DEFAULT_CFG", "DEFAULT_USER_AGENT", "DEFAULT_TITLE"]
