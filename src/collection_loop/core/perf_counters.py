"""
Hardware performance counters through Linux ``perf stat``.
"""

import os
import shutil
import signal
import subprocess
import time
from typing import Any, Callable, Dict, Iterable, Optional, Tuple

from .config import DEFAULT_PERF_EVENTS


def parse_perf_output(output: str) -> Dict[str, float]:
    """Parse ``perf stat -x,`` CSV output.

    Args:
        output: Text written by perf to stderr

    Returns:
        Mapping of event name to counter value. Events perf could not count
        (``<not supported>``, ``<not counted>``) are left out.
    """
    counters = {}
    for line in output.splitlines():
        line = line.strip()
        if not line or line.startswith("#"):
            continue

        fields = line.split(",")
        if len(fields) < 3:
            continue

        raw_value, event = fields[0], fields[2]
        if not event:
            continue
        try:
            value = float(raw_value)
        except ValueError:
            continue

        # drop the ":u"/":k" modifiers perf appends in restricted mode
        counters[event.split(":")[0]] = value

    return counters


class PerfCounters:
    """Attach ``perf stat`` to this process while a callable runs."""

    def __init__(
        self,
        events: Optional[Iterable[str]] = None,
        perf_binary: str = "perf",
        attach_delay: float = 0.1,
    ):
        """Initialize perf counter collection.

        Args:
            events: perf event names to record
            perf_binary: Name or path of the perf executable
            attach_delay: Seconds to wait for perf to attach before running
        """
        self.events = list(events) if events else list(DEFAULT_PERF_EVENTS)
        self.perf_binary = perf_binary
        self.attach_delay = attach_delay

    @property
    def available(self) -> bool:
        """Check if the perf executable is on PATH."""
        return shutil.which(self.perf_binary) is not None

    def get_version(self) -> Optional[str]:
        """Get the perf version string."""
        try:
            result = subprocess.run(
                [self.perf_binary, "--version"],
                capture_output=True,
                text=True,
                check=True,
            )
            return result.stdout.strip()
        except (subprocess.CalledProcessError, FileNotFoundError):
            return None

    def measure(
        self, func: Callable, *args, **kwargs
    ) -> Tuple[Any, Optional[Dict[str, float]]]:
        """Run ``func`` with perf attached.

        Returns:
            Tuple of (func output, counters). Counters are None when perf is
            missing, not permitted, or recorded nothing.
        """
        if not self.available:
            return func(*args, **kwargs), None

        command = [
            self.perf_binary,
            "stat",
            "-x",
            ",",
            "-e",
            ",".join(self.events),
            "-p",
            str(os.getpid()),
        ]
        try:
            proc = subprocess.Popen(
                command,
                stdout=subprocess.DEVNULL,
                stderr=subprocess.PIPE,
                text=True,
            )
        except OSError as e:
            print(f"Warning: Could not start perf: {e}")
            return func(*args, **kwargs), None

        try:
            time.sleep(self.attach_delay)
            output = func(*args, **kwargs)
        finally:
            if proc.poll() is None:
                proc.send_signal(signal.SIGINT)
            try:
                _, stderr = proc.communicate(timeout=5)
            except subprocess.TimeoutExpired:
                proc.kill()
                _, stderr = proc.communicate()

        counters = parse_perf_output(stderr or "")
        return output, counters or None
