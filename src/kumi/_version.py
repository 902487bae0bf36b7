"""Single source of truth for the kumi version."""

from importlib.metadata import PackageNotFoundError, version


def get_version() -> str:
    """Version of the installed ``kumi`` distribution, or 0.0.0 from a bare source tree."""
    try:
        return version("kumi")
    except PackageNotFoundError:
        return "0.0.0"
