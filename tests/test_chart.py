import threading
from pathlib import Path
from typing import Dict, List, Sequence

import pytest

from helmls.chart import Chart, ChartLoader, ChartView, ReadWriteLock, run_command
from helmls.config import ServerConfig
from helmls.errors import ChartToolError

VALUES = b"replicaCount: 2\nimage:\n  repository: nginx\n"
CHART = b"apiVersion: v2\nname: demo\nversion: 0.1.0\n"
HELPERS = '{{- define "demo.name" -}}\nx\n{{- end }}\n{{ define "demo.labels" }}\n{{ end }}\n'


class FakeHelm:
    def __init__(self, outputs: Dict[str, bytes]) -> None:
        self.outputs = outputs
        self.calls: List[List[str]] = []

    def __call__(self, args: Sequence[str], timeout: float) -> bytes:
        self.calls.append(list(args))
        what = args[2]
        if what not in self.outputs:
            raise ChartToolError(f"helm show {what} failed")
        return self.outputs[what]


@pytest.fixture()
def chart_dir(tmp_path: Path) -> Path:
    templates = tmp_path / "templates"
    templates.mkdir()
    (templates / "_helpers.tpl").write_text(HELPERS, encoding="utf-8")
    return tmp_path


def test_loader_fills_chart(chart_dir: Path) -> None:
    helm = FakeHelm({"values": VALUES, "chart": CHART})
    chart = Chart()
    assert ChartLoader(ServerConfig(helm_command="helm3"), runner=helm).load(chart, chart_dir)
    with chart.read() as view:
        assert view.values["image"]["repository"] == "nginx"
        assert view.name == "demo"
        assert view.helpers == ["demo.name", "demo.labels"]
    assert helm.calls == [
        ["helm3", "show", "values", str(chart_dir)],
        ["helm3", "show", "chart", str(chart_dir)],
    ]
    assert chart.loaded


def test_missing_helpers_file_is_not_fatal(tmp_path: Path) -> None:
    chart = Chart()
    assert ChartLoader(ServerConfig(), runner=FakeHelm({"values": VALUES, "chart": CHART})).load(chart, tmp_path)
    with chart.read() as view:
        assert view.helpers == []


def test_tool_failure_leaves_chart_empty(chart_dir: Path) -> None:
    chart = Chart()
    chart.replace(ChartView(values={"stale": True}, loaded=True))
    assert not ChartLoader(ServerConfig(), runner=FakeHelm({"values": VALUES})).load(chart, chart_dir)
    assert not chart.loaded


def test_invalid_yaml_is_a_tool_failure(chart_dir: Path) -> None:
    helm = FakeHelm({"values": b"key: [unclosed\n", "chart": CHART})
    chart = Chart()
    assert not ChartLoader(ServerConfig(), runner=helm).load(chart, chart_dir)
    assert not chart.loaded


def test_run_command_reports_missing_executable() -> None:
    with pytest.raises(ChartToolError) as excinfo:
        run_command(["helmls-test-no-such-helm", "show", "values", "."], 1.0)
    assert "not found" in excinfo.value.message


def test_writer_waits_for_readers() -> None:
    lock = ReadWriteLock()
    written = threading.Event()

    def writer() -> None:
        with lock.writing():
            written.set()

    with lock.reading():
        with lock.reading():
            thread = threading.Thread(target=writer)
            thread.start()
            assert not written.wait(0.1)
    thread.join(timeout=2)
    assert written.is_set()


def test_readers_wait_for_writer() -> None:
    lock = ReadWriteLock()
    entered = threading.Event()

    def reader() -> None:
        with lock.reading():
            entered.set()

    with lock.writing():
        thread = threading.Thread(target=reader)
        thread.start()
        assert not entered.wait(0.1)
    thread.join(timeout=2)
    assert entered.is_set()


def test_empty_values_still_count_as_loaded(chart_dir: Path) -> None:
    chart = Chart()
    assert ChartLoader(ServerConfig(), runner=FakeHelm({"values": b"", "chart": CHART})).load(chart, chart_dir)
    assert chart.loaded
    with chart.read() as view:
        assert view.values is None


def test_run_command_reports_non_executable_helm(tmp_path: Path) -> None:
    helm = tmp_path / "helm"
    helm.write_text("not a program\n", encoding="utf-8")
    helm.chmod(0o644)
    with pytest.raises(ChartToolError) as excinfo:
        run_command([str(helm), "show", "values", "."], 1.0)
    assert "cannot run" in excinfo.value.message


def test_non_executable_helm_degrades_loader(tmp_path: Path) -> None:
    helm = tmp_path / "helm"
    helm.write_text("not a program\n", encoding="utf-8")
    helm.chmod(0o644)
    chart = Chart()
    assert not ChartLoader(ServerConfig(helm_command=str(helm))).load(chart, tmp_path)
    assert not chart.loaded


def test_undecodable_helpers_file_is_not_fatal(tmp_path: Path) -> None:
    templates = tmp_path / "templates"
    templates.mkdir()
    (templates / "_helpers.tpl").write_bytes(b'\xff\xfe{{ define "demo.name" }}{{ end }}\n')
    chart = Chart()
    assert ChartLoader(ServerConfig(), runner=FakeHelm({"values": VALUES, "chart": CHART})).load(chart, tmp_path)
    with chart.read() as view:
        assert view.helpers == []
