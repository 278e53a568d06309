"""
Tests for perf stat integration.
"""

import shutil
import subprocess

import pytest
from unittest.mock import Mock, patch

from collection_loop.core.perf_counters import PerfCounters, parse_perf_output

PERF_OUTPUT = """\
# started on Mon Oct 19 10:00:00 2026

1234567,,cycles:u,1000,100.00,,
2345678,,instructions:u,1000,100.00,1.90,insn per cycle
<not supported>,,branch-misses,0,100.00,,
<not counted>,,cache-misses,0,0.00,,
"""


def _perf_works() -> bool:
    if shutil.which("perf") is None:
        return False
    result = subprocess.run(
        ["perf", "stat", "-x", ",", "-e", "instructions", "true"],
        capture_output=True,
        text=True,
    )
    return result.returncode == 0 and "instructions" in result.stderr


class TestParsePerfOutput:
    """Tests for parse_perf_output."""

    def test_parses_counted_events(self):
        counters = parse_perf_output(PERF_OUTPUT)

        assert counters == {"cycles": 1234567.0, "instructions": 2345678.0}

    def test_empty_output(self):
        assert parse_perf_output("") == {}

    def test_error_output(self):
        output = "Error:\nAccess to performance monitoring and observability operations is limited.\n"
        assert parse_perf_output(output) == {}


class TestPerfCounters:
    """Tests for PerfCounters."""

    def test_default_events(self):
        perf_counters = PerfCounters()
        assert "instructions" in perf_counters.events
        assert "cycles" in perf_counters.events

    def test_measure_without_perf(self):
        with patch("shutil.which", return_value=None):
            output, counters = PerfCounters().measure(lambda x: x * 2, 21)

        assert output == 42
        assert counters is None

    def test_get_version_missing_binary(self):
        perf_counters = PerfCounters(perf_binary="perf-binary-that-does-not-exist")
        assert perf_counters.available is False
        assert perf_counters.get_version() is None

    def test_measure_parses_stderr(self):
        proc = Mock()
        proc.poll.return_value = None
        proc.communicate.return_value = ("", PERF_OUTPUT)

        with patch("shutil.which", return_value="/usr/bin/perf"), patch(
            "subprocess.Popen", return_value=proc
        ) as popen:
            output, counters = PerfCounters(
                events=["cycles", "instructions"], attach_delay=0
            ).measure(lambda: "done")

        command = popen.call_args[0][0]
        assert command[:2] == ["perf", "stat"]
        assert "cycles,instructions" in command
        proc.send_signal.assert_called_once()
        assert output == "done"
        assert counters["instructions"] == 2345678.0

    def test_measure_no_counters(self):
        proc = Mock()
        proc.poll.return_value = 1
        proc.communicate.return_value = ("", "Error: permission denied\n")

        with patch("shutil.which", return_value="/usr/bin/perf"), patch(
            "subprocess.Popen", return_value=proc
        ):
            output, counters = PerfCounters(attach_delay=0).measure(lambda: 1)

        proc.send_signal.assert_not_called()
        assert output == 1
        assert counters is None

    def test_measure_spawn_failure(self, capsys):
        with patch("shutil.which", return_value="/usr/bin/perf"), patch(
            "subprocess.Popen", side_effect=OSError("exec format error")
        ):
            output, counters = PerfCounters(attach_delay=0).measure(lambda: 7)

        assert output == 7
        assert counters is None
        assert "Could not start perf" in capsys.readouterr().out

    @pytest.mark.perf
    @pytest.mark.skipif(not _perf_works(), reason="perf not available")
    def test_measure_real_perf(self):
        output, counters = PerfCounters(events=["instructions"]).measure(
            lambda: sum(range(100000))
        )

        assert output == sum(range(100000))
        assert counters is not None
        assert counters["instructions"] > 0


if __name__ == "__main__":
    pytest.main([__file__])
