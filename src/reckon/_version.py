"""Version lookup for reckon."""

import tomllib
from importlib.metadata import PackageNotFoundError, version
from pathlib import Path

_PYPROJECT = Path(__file__).resolve().parents[2] / "pyproject.toml"


def get_version() -> str:
    """Return the source checkout's version, else the installed distribution's."""
    if _PYPROJECT.is_file():
        with _PYPROJECT.open("rb") as f:
            project = tomllib.load(f).get("project", {})
        if "version" in project:
            return str(project["version"])
    try:
        return version("reckon")
    except PackageNotFoundError:
        return "0.0.0"
