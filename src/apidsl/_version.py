"""Version lookup for apidsl."""

import tomllib
from importlib.metadata import PackageNotFoundError, version
from pathlib import Path

# Only present in a source checkout
_PYPROJECT = Path(__file__).resolve().parents[2] / "pyproject.toml"


def get_version() -> str:
    """Return the checkout's ``[project] version``, else the installed distribution's."""
    try:
        with _PYPROJECT.open("rb") as f:
            return str(tomllib.load(f)["project"]["version"])
    except (OSError, tomllib.TOMLDecodeError, KeyError):
        pass
    try:
        return version("apidsl")
    except PackageNotFoundError:
        return "0.0.0"


__version__ = get_version()
