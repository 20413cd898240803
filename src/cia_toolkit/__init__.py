"""Top-level package for the CIA Paper Toolkit.

Provides subpackages:
- cia_toolkit.text – normalisation, math notation and sub-part segmentation
- cia_toolkit.core – immutable paper models and payload validation
- cia_toolkit.builder – model assembly, weightage and the PDF/DOCX renderers
- cia_toolkit.cli – command line entry point
"""

def _get_version() -> str:
    """Get version from pyproject.toml (dev) or importlib.metadata (installed)."""
    from pathlib import Path

    pyproject = Path(__file__).resolve().parent.parent.parent / "pyproject.toml"
    if pyproject.exists():
        try:
            content = pyproject.read_text()
            for line in content.splitlines():
                if line.strip().startswith("version"):
                    # Parse: version = "0.3.0"
                    return line.split("=")[1].strip().strip('"').strip("'")
        except OSError:
            pass

    try:
        from importlib.metadata import version as pkg_version
        return pkg_version("cia-toolkit")
    except Exception:
        return "0.0.0"

__version__ = _get_version()
__copyright__ = "Copyright 2026 The CIA Toolkit Authors"
__all__: list[str] = ["__version__"]
