"""Configuration loading for docsite (.docsite.yml)."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence

import yaml

CONFIG_FILENAME = ".docsite.yml"


class ConfigError(RuntimeError):
    """Raised when the configuration file cannot be parsed."""


@dataclass
class SiteConfig:
    """Site-wide metadata used for links and the LLM index."""

    name: str = "Documentation"
    description: Optional[str] = None
    base_url: str = ""
    base_path: str = ""
    github: Optional[str] = None
    registry: Optional[str] = None


@dataclass
class ApiConfig:
    """Where extracted API data lives and how packages are grouped."""

    data_dir: Path = Path("data/api")
    exclude_packages: List[str] = field(default_factory=list)
    group_prefixes: Dict[str, str] = field(default_factory=lambda: {"Clients": "client"})
    default_group: str = "Core"


@dataclass
class DocPageConfig:
    """A hand-written markdown page published alongside the API reference."""

    path: str
    file: Path
    title: str
    label: Optional[str] = None
    description: str = ""


@dataclass
class DocSiteConfig:
    """Represents the settings defined in .docsite.yml."""

    root: Path
    site: SiteConfig = field(default_factory=SiteConfig)
    api: ApiConfig = field(default_factory=ApiConfig)
    docs: List[DocPageConfig] = field(default_factory=list)
    output_dir: Optional[Path] = None

    @property
    def data_dir(self) -> Path:
        return self.api.data_dir if self.api.data_dir.is_absolute() else self.root / self.api.data_dir

    @property
    def resolved_output_dir(self) -> Path:
        output = self.output_dir or Path("dist")
        return output if output.is_absolute() else self.root / output


def load_config(config_path: Path) -> DocSiteConfig:
    """Load configuration from disk, returning defaults when absent."""
    config_file = _resolve_config_path(config_path)
    root = config_file.parent.resolve()

    if not config_file.exists():
        return DocSiteConfig(root=root)

    data = _read_config(config_file)
    if not isinstance(data, dict):
        raise ConfigError(f"{CONFIG_FILENAME} must contain a mapping at the root")

    site_data = _as_dict(data.get("site"))
    site = SiteConfig(
        name=_as_str(site_data.get("name")) or SiteConfig.name,
        description=_as_str(site_data.get("description")),
        base_url=(_as_str(site_data.get("base_url")) or "").rstrip("/"),
        base_path=(_as_str(site_data.get("base_path")) or "").rstrip("/"),
        github=_as_str(site_data.get("github")),
        registry=_as_str(site_data.get("registry")),
    )

    api_data = _as_dict(data.get("api"))
    api = ApiConfig()
    if api_data:
        data_dir = _as_str(api_data.get("data_dir"))
        if data_dir:
            api.data_dir = Path(data_dir)
        api.exclude_packages = _as_str_list(api_data.get("exclude_packages"))
        prefixes = _as_dict(api_data.get("group_prefixes"))
        if prefixes:
            api.group_prefixes = {str(group): str(prefix) for group, prefix in prefixes.items()}
        api.default_group = _as_str(api_data.get("default_group")) or api.default_group

    docs = [_doc_page(entry) for entry in _as_list(data.get("docs"))]
    output = _as_str(data.get("output_dir"))

    return DocSiteConfig(
        root=root,
        site=site,
        api=api,
        docs=docs,
        output_dir=Path(output) if output else None,
    )


def _doc_page(entry: Any) -> DocPageConfig:
    data = _as_dict(entry)
    path = _as_str(data.get("path"))
    file = _as_str(data.get("file"))
    if not path or not file:
        raise ConfigError("Each docs entry requires 'path' and 'file'")
    title = _as_str(data.get("title")) or path.strip("/") or "Home"
    return DocPageConfig(
        path=path,
        file=Path(file),
        title=title,
        label=_as_str(data.get("label")),
        description=_as_str(data.get("description")) or "",
    )


def _resolve_config_path(config_path: Path) -> Path:
    config_path = config_path.expanduser()
    if config_path.is_dir():
        return (config_path / CONFIG_FILENAME).resolve()
    return config_path.resolve()


def _read_config(path: Path) -> Any:
    text = path.read_text(encoding="utf-8")
    if not text.strip():
        return {}
    try:
        loaded = yaml.safe_load(text)
    except yaml.YAMLError as exc:
        raise ConfigError(f"Failed to parse {path.name}: {exc}") from exc
    return loaded or {}


def _as_dict(value: Any) -> Dict[str, Any]:
    return value if isinstance(value, dict) else {}


def _as_list(value: Any) -> List[Any]:
    return value if isinstance(value, list) else []


def _as_str(value: Any) -> Optional[str]:
    if isinstance(value, bool):
        return None
    return str(value) if isinstance(value, (str, int, float)) else None


def _as_str_list(value: Any) -> List[str]:
    if value is None:
        return []
    if isinstance(value, str):
        return [value]
    if isinstance(value, Sequence):
        return [str(item) for item in value if isinstance(item, (str, int, float))]
    return []
