"""Package version lookup."""

import tomllib
from importlib.metadata import PackageNotFoundError
from importlib.metadata import version as _metadata_version
from pathlib import Path

_PYPROJECT = Path(__file__).parent.parent.parent / "pyproject.toml"


def get_version() -> str:
    """Version from a source checkout's pyproject.toml, else installed metadata."""
    if _PYPROJECT.exists():
        project = tomllib.loads(_PYPROJECT.read_text(encoding="utf-8")).get("project", {})
        if project.get("name") == "scriptbundle" and "version" in project:
            return str(project["version"])
    try:
        return _metadata_version("scriptbundle")
    except PackageNotFoundError:
        return "0.0.0"
