"""Version lookup for the ``--version`` flag.

Installed distributions report their metadata version. A source checkout
that was never installed falls back to ``[project].version`` in the
repository's pyproject.toml.
"""

import tomllib
from importlib.metadata import PackageNotFoundError, version
from pathlib import Path

DISTRIBUTION = "mathexpr"
UNKNOWN_VERSION = "0.0.0"

# src/mathexpr/_version.py -> repository root
_PYPROJECT = Path(__file__).resolve().parents[2] / "pyproject.toml"


def get_version() -> str:
    try:
        return version(DISTRIBUTION)
    except PackageNotFoundError:
        return _version_from_pyproject(_PYPROJECT)


def _version_from_pyproject(path: Path) -> str:
    try:
        with path.open("rb") as f:
            data = tomllib.load(f)
    except (OSError, tomllib.TOMLDecodeError):
        return UNKNOWN_VERSION
    return str(data.get("project", {}).get("version", UNKNOWN_VERSION))
