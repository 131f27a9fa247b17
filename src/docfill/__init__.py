"""Top-level package for docfill.

Provides subpackages:
- docfill.core – field model and error types
- docfill.extractor – field detection in template text
- docfill.builder – composition, pagination and PDF rendering
"""

def _get_version() -> str:
    """Get version from importlib.metadata (installed) or pyproject.toml (dev)."""
    try:
        from importlib.metadata import PackageNotFoundError, version as pkg_version
        return pkg_version("docfill")
    except PackageNotFoundError:
        pass

    from pathlib import Path
    pyproject = Path(__file__).resolve().parent.parent.parent / "pyproject.toml"
    if pyproject.exists():
        for line in pyproject.read_text().splitlines():
            if line.strip().startswith("version"):
                # Parse: version = "0.1.0"
                return line.split("=")[1].strip().strip('"').strip("'")
    return "0.0.0"

__version__ = _get_version()
__all__: list[str] = ["__version__"]
