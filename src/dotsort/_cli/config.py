"""Configuration loading from pyproject.toml."""

import tomllib
from dataclasses import dataclass
from pathlib import Path


class ConfigError(Exception):
    """Error in dotsort configuration."""


@dataclass(slots=True, frozen=True)
class DotsortConfig:
    """Configuration loaded from pyproject.toml.

    All relative paths are resolved from the project root (directory containing pyproject.toml).
    """

    graph: Path | None = None
    strict: bool = False
    project_root: Path | None = None


def find_pyproject_toml(start_dir: Path | None = None) -> Path | None:
    """Find pyproject.toml by walking up from start_dir.

    Args:
        start_dir: Starting directory. Defaults to current working directory.

    Returns:
        Path to pyproject.toml if found, None otherwise.

    """
    if start_dir is None:
        start_dir = Path.cwd()

    current = start_dir.resolve()

    while True:
        candidate = current / "pyproject.toml"
        if candidate.is_file():
            return candidate
        parent = current.parent
        if parent == current:
            # Reached filesystem root
            return None
        current = parent


def load_config(pyproject_path: Path) -> DotsortConfig:
    """Load and validate [tool.dotsort] config from pyproject.toml.

    Args:
        pyproject_path: Path to pyproject.toml

    Returns:
        Parsed DotsortConfig

    Raises:
        ConfigError: If the configuration is invalid

    """
    project_root = pyproject_path.parent

    with pyproject_path.open("rb") as f:
        try:
            data = tomllib.load(f)
        except tomllib.TOMLDecodeError as e:
            msg = f"Invalid TOML in {pyproject_path}: {e}"
            raise ConfigError(msg) from e

    section = data.get("tool", {}).get("dotsort", {})

    if not section:
        return DotsortConfig(project_root=project_root)

    graph_path: Path | None = None
    if "graph" in section:
        graph_value = section["graph"]
        if not isinstance(graph_value, str):
            msg = "Invalid [tool.dotsort].graph: expected string path"
            raise ConfigError(msg)
        graph_path = Path(graph_value)
        if not graph_path.is_absolute():
            graph_path = project_root / graph_path

    strict = section.get("strict", False)
    if not isinstance(strict, bool):
        msg = "Invalid [tool.dotsort].strict: expected boolean"
        raise ConfigError(msg)

    return DotsortConfig(graph=graph_path, strict=strict, project_root=project_root)


def get_config() -> DotsortConfig:
    """Get config from pyproject.toml in current directory or parents.

    Returns:
        DotsortConfig (may be empty if no pyproject.toml or no [tool.dotsort] section)

    """
    pyproject_path = find_pyproject_toml()
    if pyproject_path is None:
        return DotsortConfig()
    return load_config(pyproject_path)
