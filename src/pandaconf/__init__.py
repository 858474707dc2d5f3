"""pandaconf — layered node configuration model and CLI."""

from importlib import metadata


def _project_version() -> str:
    """Resolve the project version from package metadata."""
    try:
        return metadata.version("pandaconf")
    except metadata.PackageNotFoundError:
        return "0.0.0-dev"


__version__ = _project_version()
