"""
Helm chart template language server.

The package resolves Go-template variables inside Helm chart templates to
the place they were declared.  It does not evaluate templates; it only
replays the block structure of a document (``if``/``else``/``with``/
``range`` ... ``end``) to know which ``$variables`` are visible at a given
line.

The code is organised into several modules:

* ``template`` – the action scanner, the scope stack that mirrors block
  nesting and the go-to-definition query built on top of them.
* ``chart`` – chart level metadata (default values, ``Chart.yaml`` and
  helper template names) loaded once through the ``helm`` binary.
* ``lsp`` – the pygls based language server wiring the above to an
  editor.
* ``cli`` – the ``helmls`` console entry point.
"""

import re
from pathlib import Path
from importlib import metadata as _metadata


def _local_version() -> str | None:
    root = Path(__file__).resolve().parents[1]
    pyproject = root / "pyproject.toml"
    if not pyproject.exists():
        return None
    try:
        text = pyproject.read_text(encoding="utf-8")
    except OSError:  # pragma: no cover - IO errors should not break imports
        return None
    match = re.search(r"^version\s*=\s*\"([^\"]+)\"", text, flags=re.MULTILINE)
    if match:
        return match.group(1)
    return None


try:  # pragma: no cover - metadata fallback for editable installs
    __version__ = _metadata.version("helmls")
except _metadata.PackageNotFoundError:  # pragma: no cover - source tree
    __version__ = _local_version() or "0.1.0"

__all__ = ["__version__"]
