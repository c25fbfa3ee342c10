"""Commands the shell carries out itself instead of starting a program."""

from __future__ import annotations

import os
from typing import Mapping, Sequence

from myshell.jobs import Job, JobTable, parse_job_spec

_BUILTINS = frozenset({"exit", "quit", "cd", "jobs", "fg", "bg", "kill", "&"})


class ExitShell(Exception):
    """Raised by the ``exit`` and ``quit`` builtins to end the shell."""

    def __init__(self, status: int = 0) -> None:
        super().__init__(status)
        self.status = status


def is_builtin(name: str | None) -> bool:
    """Whether ``name`` is handled by the shell itself."""
    return name in _BUILTINS


def change_directory(args: Sequence[str], environ: Mapping[str, str] | None = None) -> str:
    """Change the working directory to ``args[0]``, or to HOME when no argument is given.

    Returns the new working directory. Raises ValueError when HOME is needed
    but not set, and OSError when the directory cannot be entered.
    """
    env = os.environ if environ is None else environ
    if args:
        target = args[0]
    else:
        target = env.get("HOME")
        if target is None:
            raise ValueError("HOME not set")
    os.chdir(target)
    return os.getcwd()


def resolve_job(jobs: JobTable, args: Sequence[str]) -> Job | None:
    """Find the job a ``fg``/``bg``/``kill`` argument refers to.

    ``%N`` names the job at index N. With no argument the only job is meant,
    and there is none to pick when the table holds more or fewer than one.
    """
    if args:
        index = parse_job_spec(args[0])
        return None if index is None else jobs.get(index)
    return jobs.get(1) if len(jobs) == 1 else None