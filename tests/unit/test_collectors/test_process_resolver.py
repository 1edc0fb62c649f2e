"""
Unit tests for the top processes resolver.

psutil.process_iter is patched; no real process table is read.
"""

from unittest.mock import Mock, patch

import pytest

from statusmon.collectors.processes import ProcessResolver, format_process_value, rank_processes
from statusmon.models.records import ProcessInfo


def fake_process(pid, name, cpu, rss):
    proc = Mock()
    proc.info = {"pid": pid, "name": name, "cpu_percent": cpu, "memory_info": Mock(rss=rss)}
    return proc


PROCESSES = [
    fake_process(1, "systemd", 0.1, 12 * 1024 * 1024),
    fake_process(200, "firefox", 35.5, 900 * 1024 * 1024),
    fake_process(300, "code", 12.0, 1200 * 1024 * 1024),
    fake_process(400, "kworker", None, 0),
]


@pytest.mark.unit
class TestRankProcesses:
    """Test cases for ranking and value formatting."""

    def test_cpu_ranking(self):
        processes = [ProcessInfo("a", 1.0, 10), ProcessInfo("b", 50.25, 5), ProcessInfo("c", 7.0, 99)]

        ranking = rank_processes(processes, "cpu", limit=2)

        assert [p.name for p in ranking.processes] == ["b", "c"]
        assert ranking.values == ("50.2%", "7.0%")
        assert ranking.title == "Top CPU Processes"

    def test_memory_ranking(self):
        processes = [ProcessInfo("a", 1.0, 1024), ProcessInfo("b", 50.0, 2048)]

        ranking = rank_processes(processes, "memory")

        assert [p.name for p in ranking.processes] == ["b", "a"]
        assert ranking.values == ("2.00 MB", "1.00 MB")
        assert ranking.title == "Top Memory Processes"

    def test_unknown_sort_key(self):
        with pytest.raises(ValueError):
            rank_processes([], "io")

    def test_format_process_value(self):
        assert format_process_value(ProcessInfo("a", 3.14159, 0), "cpu") == "3.1%"
        assert format_process_value(ProcessInfo("a", 0.0, 512), "memory") == "512.00 KB"


@pytest.mark.unit
class TestProcessResolver:
    """Test cases for ProcessResolver."""

    def test_resolve_by_cpu(self):
        with patch("psutil.process_iter", return_value=PROCESSES):
            ranking = ProcessResolver(runner=None, sort_by="cpu", limit=2).resolve()

        assert [p.pid for p in ranking.processes] == [200, 300]

    def test_resolve_by_memory(self):
        with patch("psutil.process_iter", return_value=PROCESSES):
            ranking = ProcessResolver(runner=None, sort_by="memory", limit=3).resolve()

        assert [p.name for p in ranking.processes] == ["code", "firefox", "systemd"]
        assert ranking.values[0] == "1.17 GB"

    def test_missing_cpu_reads_as_zero(self):
        with patch("psutil.process_iter", return_value=PROCESSES):
            samples = ProcessResolver(runner=None).sample_processes()

        assert samples[3].cpu == 0.0
        assert samples[3].memory_kb == 0

    def test_psutil_failure_is_isolated(self):
        with patch("psutil.process_iter", side_effect=OSError("procfs gone")):
            ranking = ProcessResolver(runner=None, sort_by="memory").poll()

        assert ranking.sort_by == "memory"
        assert ranking.processes == ()
