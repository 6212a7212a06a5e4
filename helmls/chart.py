"""Chart level metadata shared by every request.

The ``helm`` binary is asked for the chart's default values and its
``Chart.yaml`` once, when the workspace opens.  Nothing on the
go-to-definition path needs this data yet; it is kept for features that
will.
"""

from __future__ import annotations

import logging
import subprocess
import threading
from contextlib import contextmanager
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Callable, Iterator, List, Optional, Sequence

import yaml

from .config import ServerConfig
from .errors import ChartToolError
from .template.scanner import scan_helpers

logger = logging.getLogger("helmls.chart")

CommandRunner = Callable[[Sequence[str], float], bytes]


class ReadWriteLock:
    """Many concurrent readers or a single writer."""

    def __init__(self) -> None:
        self._cond = threading.Condition(threading.Lock())
        self._readers = 0
        self._writing = False

    @contextmanager
    def reading(self) -> Iterator[None]:
        with self._cond:
            while self._writing:
                self._cond.wait()
            self._readers += 1
        try:
            yield
        finally:
            with self._cond:
                self._readers -= 1
                if self._readers == 0:
                    self._cond.notify_all()

    @contextmanager
    def writing(self) -> Iterator[None]:
        with self._cond:
            while self._writing or self._readers:
                self._cond.wait()
            self._writing = True
        try:
            yield
        finally:
            with self._cond:
                self._writing = False
                self._cond.notify_all()


@dataclass(frozen=True)
class ChartView:
    values: Any = None
    metadata: Any = None
    loaded: bool = False
    helpers: List[str] = field(default_factory=list)

    @property
    def name(self) -> Optional[str]:
        if isinstance(self.metadata, dict):
            return self.metadata.get("name")
        return None


class Chart:
    """Thread-safe holder for the metadata of the open chart."""

    def __init__(self) -> None:
        self._lock = ReadWriteLock()
        self._view = ChartView()

    @property
    def loaded(self) -> bool:
        with self.read() as view:
            return view.loaded

    @contextmanager
    def read(self) -> Iterator[ChartView]:
        with self._lock.reading():
            yield self._view

    def replace(self, view: ChartView) -> None:
        with self._lock.writing():
            self._view = view


def run_command(args: Sequence[str], timeout: float) -> bytes:
    try:
        result = subprocess.run(list(args), capture_output=True, timeout=timeout, check=False)
    except FileNotFoundError as exc:
        raise ChartToolError(f"{args[0]} executable not found") from exc
    except OSError as exc:
        raise ChartToolError(f"cannot run {args[0]}: {exc}") from exc
    except subprocess.TimeoutExpired as exc:
        raise ChartToolError(f"'{' '.join(args)}' timed out after {timeout}s") from exc
    if result.returncode != 0:
        stderr = result.stderr.decode("utf-8", errors="replace").strip()
        raise ChartToolError(f"'{' '.join(args)}' exited with {result.returncode}: {stderr}")
    return result.stdout


class ChartLoader:
    """Fills a :class:`Chart` from a chart directory."""

    def __init__(self, config: ServerConfig, runner: CommandRunner = run_command) -> None:
        self.config = config
        self.runner = runner

    def load(self, chart: Chart, root: Path) -> bool:
        """Load metadata for *root* into *chart*.

        Returns False and leaves *chart* empty when the chart tool fails;
        the server keeps working without metadata.
        """

        try:
            values = self._show("values", root)
            metadata = self._show("chart", root)
        except ChartToolError as exc:
            logger.warning("Chart metadata unavailable for %s: %s", root, exc.format())
            chart.replace(ChartView())
            return False
        helpers = self._helpers(root)
        chart.replace(ChartView(values=values, metadata=metadata, helpers=helpers, loaded=True))
        logger.info("Loaded chart %s with %d helper templates", root, len(helpers))
        return True

    def _show(self, what: str, root: Path) -> Any:
        output = self.runner([self.config.helm_command, "show", what, str(root)], self.config.chart_timeout)
        try:
            return yaml.safe_load(output)
        except yaml.YAMLError as exc:
            raise ChartToolError(f"helm show {what} printed invalid YAML: {exc}") from exc

    def _helpers(self, root: Path) -> List[str]:
        path = root / self.config.helpers_path
        try:
            text = path.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as exc:
            logger.debug("No helper templates at %s: %s", path, exc)
            return []
        names = scan_helpers(text)
        for name in names:
            logger.debug("helper template: %s", name)
        return names


__all__ = ["Chart", "ChartLoader", "ChartView", "ReadWriteLock", "run_command"]
