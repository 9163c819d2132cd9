# config_utils.py - YAML Configuration System for Fumagen
"""
Fumagen configuration utilities with YAML file support.

Configuration Resolution Order (highest to lowest priority):
1. Environment variables (FUMAGEN_DATA_DIR, FUMAGEN_ORG, etc.)
2. fumagen.yaml in project root
3. ~/.fumagen/config.yaml (global defaults)
4. Built-in defaults

Usage:
    from fumagen.config_utils import get_config

    config = get_config()
    print(config.docs_dir)
    print(config.concurrency)
"""

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Optional

import yaml

from fumagen.tree import GITHUB_ORG, MIRROR_HOST


CONFIG_FILE_NAME = "fumagen.yaml"
FILES_BASE_URL = "https://open.osa.moe/openauto"
DEFAULT_CONCURRENCY = 10


@dataclass
class FumagenConfig:
    """Complete Fumagen configuration"""
    # Directories (relative values resolve against project_root)
    data_dir: Path = Path("data")
    repos_dir: Path = Path("repos")
    docs_dir: Path = Path("content/docs")

    # GitHub / download locations
    org: str = GITHUB_ORG
    mirror_host: str = MIRROR_HOST
    files_base_url: str = FILES_BASE_URL

    # Fetch settings
    concurrency: int = DEFAULT_CONCURRENCY

    # Paths (resolved at load time)
    project_root: Optional[Path] = None

    # Extra settings from config file
    extra: Dict[str, Any] = field(default_factory=dict)

    # Track where values came from (for debugging)
    _sources: Dict[str, str] = field(default_factory=dict)

    def resolve(self, path: Path) -> Path:
        """Resolve a configured directory against the project root."""
        path = Path(path).expanduser()
        if path.is_absolute() or self.project_root is None:
            return path
        return self.project_root / path

    @property
    def data_path(self) -> Path:
        return self.resolve(self.data_dir)

    @property
    def repos_path(self) -> Path:
        return self.resolve(self.repos_dir)

    @property
    def docs_path(self) -> Path:
        return self.resolve(self.docs_dir)


PATH_KEYS = ("data_dir", "repos_dir", "docs_dir")
STRING_KEYS = ("org", "mirror_host", "files_base_url")

ENV_VARS = {
    "FUMAGEN_DATA_DIR": "data_dir",
    "FUMAGEN_REPOS_DIR": "repos_dir",
    "FUMAGEN_DOCS_DIR": "docs_dir",
    "FUMAGEN_ORG": "org",
    "FUMAGEN_MIRROR_HOST": "mirror_host",
    "FUMAGEN_FILES_BASE_URL": "files_base_url",
    "FUMAGEN_CONCURRENCY": "concurrency",
}


class ConfigLoader:
    """Load configuration from multiple sources"""

    def __init__(self, project_dir: Optional[Path] = None):
        self.project_dir = Path(project_dir) if project_dir else Path.cwd()
        self.config = FumagenConfig(project_root=self.project_dir)

    def load(self) -> FumagenConfig:
        """Load configuration from all sources in priority order"""
        # Load in reverse priority (lowest first, higher overwrites)
        self._load_global_config()
        self._load_yaml_config()
        self._load_env_vars()
        return self.config

    def _load_global_config(self):
        """Load ~/.fumagen/config.yaml if it exists"""
        global_config = Path.home() / ".fumagen" / "config.yaml"
        if global_config.exists():
            self._load_yaml_file(global_config, "global")

    def _load_yaml_config(self):
        """Load fumagen.yaml from project root"""
        yaml_path = self.project_dir / CONFIG_FILE_NAME
        if yaml_path.exists():
            self._load_yaml_file(yaml_path, CONFIG_FILE_NAME)

    def _set(self, attr: str, value: Any, source_name: str):
        try:
            if attr in PATH_KEYS:
                value = Path(str(value)).expanduser()
            elif attr == "concurrency":
                value = int(value)
                if value < 1:
                    raise ValueError("must be at least 1")
            else:
                value = str(value)
        except (TypeError, ValueError) as e:
            print(f"[config:warn] Ignoring {attr}={value!r} from {source_name}: {e}")
            return
        setattr(self.config, attr, value)
        self.config._sources[attr] = source_name

    def _load_yaml_file(self, path: Path, source_name: str):
        """Load settings from a YAML file"""
        try:
            data = yaml.safe_load(path.read_text(encoding="utf-8")) or {}
        except (OSError, yaml.YAMLError) as e:
            print(f"[config:warn] Failed to parse {path}: {e}")
            return

        if not isinstance(data, dict):
            print(f"[config:warn] Expected a mapping in {path}, got {type(data).__name__}")
            return

        for key in (*PATH_KEYS, *STRING_KEYS):
            if key in data:
                self._set(key, data[key], source_name)

        # Handle nested fetch settings
        if "fetch" in data and isinstance(data["fetch"], dict):
            fetch = data["fetch"]
            if "concurrency" in fetch:
                self._set("concurrency", fetch["concurrency"], source_name)

        # Store any extra settings
        known_keys = {*PATH_KEYS, *STRING_KEYS, "fetch"}
        for key, value in data.items():
            if key not in known_keys:
                self.config.extra[key] = value

    def _load_env_vars(self):
        """Load from environment variables (highest priority)"""
        for var, attr in ENV_VARS.items():
            value = os.environ.get(var)
            if value:
                self._set(attr, value, f"env:{var}")


# ============================================================================
# Public API
# ============================================================================

def get_config(project_dir: Optional[Path] = None) -> FumagenConfig:
    """
    Get complete Fumagen configuration.

    Args:
        project_dir: Project directory (defaults to cwd)

    Returns:
        FumagenConfig with all settings resolved
    """
    loader = ConfigLoader(project_dir)
    return loader.load()


def create_config_template(include_comments: bool = True) -> str:
    """
    Generate a fumagen.yaml template.

    Args:
        include_comments: Whether to include explanatory comments

    Returns:
        YAML string ready to write to file
    """
    if include_comments:
        return f'''# Fumagen Configuration File
# Environment variables (FUMAGEN_*) override these values

# Training plans, grades_summary.json, lookup_table.toml
data_dir: data

# Downloaded READMEs (<repo>.mdx) and worktree manifests (<repo>.json)
repos_dir: repos

# Generated Fumadocs content
docs_dir: content/docs

# GitHub organization that owns the course repositories
org: {GITHUB_ORG}

# Mirror serving raw GitHub downloads
mirror_host: {MIRROR_HOST}

# Base URL of the <Files> component on course pages
files_base_url: {FILES_BASE_URL}

# Fetch settings
fetch:
  concurrency: {DEFAULT_CONCURRENCY}     # Parallel repository downloads
'''
    else:
        return f'''data_dir: data
repos_dir: repos
docs_dir: content/docs
org: {GITHUB_ORG}
mirror_host: {MIRROR_HOST}
files_base_url: {FILES_BASE_URL}
fetch:
  concurrency: {DEFAULT_CONCURRENCY}
'''
