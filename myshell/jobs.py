"""Job table for background and suspended pipelines."""

from __future__ import annotations

import enum
import re
from dataclasses import dataclass
from typing import Iterator

MAX_JOBS = 128
MAX_CMDLINE = 1024

_LEADING_INT = re.compile(r"\s*([+-]?\d+)")


class JobState(enum.IntEnum):
    """Whether a job is running or has been stopped."""

    RUNNING = 0
    STOPPED = 1


@dataclass
class Job:
    """A job the shell keeps track of."""

    pid: int
    cmdline: str
    state: JobState = JobState.RUNNING


class JobTable:
    """An ordered, bounded list of jobs addressed by 1-based index."""

    def __init__(self, capacity: int = MAX_JOBS) -> None:
        if capacity < 1:
            raise ValueError("capacity must be positive")
        self.capacity = capacity
        self._jobs: list[Job] = []

    def __len__(self) -> int:
        return len(self._jobs)

    def __iter__(self) -> Iterator[Job]:
        return iter(list(self._jobs))

    def add(self, pid: int, cmdline: str, state: JobState = JobState.RUNNING) -> int | None:
        """Append a job and return its index, or None when the table is full.

        The command line is cut to fit the fixed command-line length.
        """
        if len(self._jobs) >= self.capacity:
            return None
        self._jobs.append(Job(pid, cmdline[: MAX_CMDLINE - 1], JobState(state)))
        return len(self._jobs)

    def remove(self, pid: int) -> tuple[int, Job] | None:
        """Remove the job with ``pid``; return its former index and the job.

        Later jobs move up one place. Returns None if no job has that pid.
        """
        index = self.index_of(pid)
        if index is None:
            return None
        return index, self._jobs.pop(index - 1)

    def get(self, index: int) -> Job | None:
        """The job at 1-based ``index``, or None if there is none."""
        if 1 <= index <= len(self._jobs):
            return self._jobs[index - 1]
        return None

    def index_of(self, pid: int) -> int | None:
        """The 1-based index of the job with ``pid``, or None."""
        for index, job in enumerate(self._jobs, start=1):
            if job.pid == pid:
                return index
        return None

    def listing(self) -> str:
        """The text printed by the ``jobs`` builtin, one line per job."""
        lines = []
        for index, job in enumerate(self._jobs, start=1):
            marker = "+" if index == 1 else "-"
            word = "running" if job.state is JobState.RUNNING else "suspended"
            lines.append(f"[{index}] \t{marker} {word} {job.cmdline:<5}\n")
        return "".join(lines)


def format_done(index: int, job: Job) -> str:
    """The notice printed when the job at ``index`` finishes."""
    marker = "+" if index == 1 else "-"
    return f"\n[{index}]   {marker} done\t{job.cmdline:>5}\n"


def parse_job_spec(token: str) -> int | None:
    """Read a ``%N`` job reference.

    Returns None when ``token`` does not start with ``%``; otherwise the
    leading integer after it, or 0 when there is none.
    """
    if not token.startswith("%"):
        return None
    match = _LEADING_INT.match(token[1:])
    return int(match.group(1)) if match else 0