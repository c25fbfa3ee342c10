"""The interactive shell: prompt, builtins, pipelines and job control."""

from __future__ import annotations

import contextlib
import os
import signal
import sys
from typing import Any, Sequence, TextIO

from myshell.builtins import ExitShell, change_directory, is_builtin, resolve_job
from myshell.executor import Pipeline
from myshell.jobs import Job, JobState, JobTable, format_done, parse_job_spec
from myshell.parsing import Command, parse_pipeline

PROMPT = "CSE4100-SP-P2> "
_POSIX = os.name == "posix"


def _fd_stream(stream: Any) -> Any:
    """The stream itself if child processes can use it, otherwise None."""
    try:
        stream.fileno()
    except (AttributeError, OSError, ValueError):
        return None
    return stream


class Shell:
    """A read-evaluate loop over a pair of text streams."""

    def __init__(
        self,
        stdin: TextIO | None = None,
        stdout: TextIO | None = None,
        stderr: TextIO | None = None,
        prompt: str = PROMPT,
    ) -> None:
        self.stdin = sys.stdin if stdin is None else stdin
        self.stdout = sys.stdout if stdout is None else stdout
        self.stderr = sys.stderr if stderr is None else stderr
        self.prompt = prompt
        self.jobs = JobTable()
        self.last_status = 0
        self._pending: dict[int, list[int]] = {}
        self._orphans: list[int] = []
        self._interactive = False
        self._shell_pgid = os.getpgrp() if _POSIX else 0

    # output helpers

    def _write(self, text: str) -> None:
        self.stdout.write(text)
        self.stdout.flush()

    def _error(self, text: str) -> None:
        self.stderr.write(text)
        self.stderr.flush()

    def _give_terminal(self, pgid: int) -> None:
        if self._interactive:
            with contextlib.suppress(OSError):
                os.tcsetpgrp(self.stdin.fileno(), pgid)

    @staticmethod
    def _signal_group(pids: Sequence[int], sig: int) -> None:
        for pid in pids:
            with contextlib.suppress(ProcessLookupError, PermissionError):
                os.killpg(pid, sig)

    # evaluation

    def execute_line(self, line: str) -> int:
        """Run one command line and return the exit status of its last command.

        Builtins run in the shell; the remaining commands form one pipeline.
        Raises ExitShell on ``exit`` or ``quit``.
        """
        status = 0
        external: list[Command] = []
        for command in parse_pipeline(line):
            if command.name is None:
                continue
            if is_builtin(command.name):
                status = self._run_builtin(command)
            else:
                external.append(command)
        if external:
            status = self._launch(external)
        self.last_status = status
        return status

    def _run_builtin(self, command: Command) -> int:
        name, args = command.argv[0], command.argv[1:]
        if name in ("exit", "quit"):
            raise ExitShell(0)
        if name == "&":
            return 0
        if name == "cd":
            return self._cd(args)
        if name == "jobs":
            self._write(self.jobs.listing())
            return 0
        if name == "fg":
            return self._fg(args)
        if name == "bg":
            return self._bg(args)
        return self._kill(args)

    def _cd(self, args: list[str]) -> int:
        try:
            change_directory(args)
        except ValueError as exc:
            self._error(f"cd: {exc}\n")
            return 1
        except OSError as exc:
            target = args[0] if args else exc.filename
            self._error(f"cd: {target}: {exc.strerror or exc}\n")
            return 1
        return 0

    def _fg(self, args: list[str]) -> int:
        job = resolve_job(self.jobs, args)
        if job is None:
            self._error("fg: no such job\n")
            return 1
        pids = self._pending.get(job.pid, [job.pid])
        job.state = JobState.RUNNING
        self._give_terminal(job.pid)
        self._signal_group(pids, signal.SIGCONT)
        status, pending = self._wait_stages(pids)
        self._give_terminal(self._shell_pgid)
        if status is None:
            job.state = JobState.STOPPED
            self._pending[job.pid] = pending
            index = self.jobs.index_of(job.pid)
            self._write(f"\n[{index}]   + suspended {job.cmdline}\n")
            return 0
        self.jobs.remove(job.pid)
        self._pending.pop(job.pid, None)
        return status

    def _bg(self, args: list[str]) -> int:
        job = resolve_job(self.jobs, args)
        if job is None:
            self._error("bg: no such job\n")
            return 1
        job.state = JobState.RUNNING
        self._signal_group(self._pending.get(job.pid, [job.pid]), signal.SIGCONT)
        return 0

    def _kill(self, args: list[str]) -> int:
        index = parse_job_spec(args[0]) if args else None
        if index is None:
            return 0
        job = self.jobs.get(index)
        if job is None:
            return 0
        pids = self._pending.pop(job.pid, [job.pid])
        self._signal_group(pids, signal.SIGTERM)
        self._signal_group(pids, signal.SIGCONT)
        self._orphans.extend(pids)
        removed = self.jobs.remove(job.pid)
        if removed is not None:
            self._write(format_done(*removed))
        return 0

    def _launch(self, commands: list[Command]) -> int:
        background = commands[-1].background
        text = commands[-1].text
        self.stdout.flush()
        self.stderr.flush()
        pipeline = Pipeline(
            commands,
            _fd_stream(self.stdin),
            _fd_stream(self.stdout),
            _fd_stream(self.stderr),
        )
        pipeline.start()
        pids = pipeline.pids()
        if not pids:
            return 1
        if not _POSIX:
            statuses = pipeline.wait()
            return statuses[-1]
        incomplete = len(pids) < len(commands)
        leader = pids[-1]
        if background:
            index = self.jobs.add(leader, text, JobState.RUNNING)
            if index is not None:
                self._pending[leader] = list(pids)
                self._write(f"[{index}] {leader} \n")
            else:
                self._orphans.extend(pids)
            return 0
        self._give_terminal(leader)
        status, pending = self._wait_stages(pids)
        self._give_terminal(self._shell_pgid)
        if status is None:
            index = self.jobs.add(leader, text, JobState.STOPPED)
            if index is not None:
                self._pending[leader] = pending
                self._write(f"\n[{index}]   + suspended {text}\n")
            return 0
        return 1 if incomplete else status

    @staticmethod
    def _wait_stages(pids: Sequence[int]) -> tuple[int | None, list[int]]:
        """Wait for every pid; return the last one's status and no pending pids.

        If a stage stops, return None and the pids not yet finished.
        """
        finished: dict[int, int] = {}
        for pid in pids:
            try:
                _, raw = os.waitpid(pid, os.WUNTRACED)
            except ChildProcessError:
                finished[pid] = 0
                continue
            if os.WIFSTOPPED(raw):
                return None, [p for p in pids if p not in finished]
            finished[pid] = os.waitstatus_to_exitcode(raw)
        return finished[pids[-1]], []

    def reap(self) -> list[Job]:
        """Collect finished background jobs, announce them and return them."""
        if not _POSIX:
            return []
        self._orphans = [pid for pid in self._orphans if not self._reaped(pid)]
        finished: list[Job] = []
        for job in self.jobs:
            still = [pid for pid in self._pending.get(job.pid, []) if not self._reaped(pid)]
            if still:
                self._pending[job.pid] = still
                continue
            self._pending.pop(job.pid, None)
            removed = self.jobs.remove(job.pid)
            if removed is not None:
                self._write(format_done(*removed))
                finished.append(removed[1])
        return finished

    @staticmethod
    def _reaped(pid: int) -> bool:
        try:
            done, _ = os.waitpid(pid, os.WNOHANG)
        except ChildProcessError:
            return True
        return done != 0

    def run(self) -> int:
        """Prompt, read and execute lines until ``exit`` or end of input."""
        self._interactive = _POSIX and bool(_fd_stream(self.stdin)) and self.stdin.isatty()
        if self._interactive:
            signal.signal(signal.SIGTTOU, signal.SIG_IGN)
            signal.signal(signal.SIGTTIN, signal.SIG_IGN)
            self._give_terminal(self._shell_pgid)
        while True:
            self.reap()
            self._write(self.prompt)
            try:
                line = self.stdin.readline()
                if not line:
                    return 0
                self.execute_line(line)
            except ExitShell as exc:
                return exc.status
            except KeyboardInterrupt:
                self._write("\n")


def main(argv: Sequence[str] | None = None) -> int:
    """Start an interactive shell on the standard streams."""
    return Shell(sys.stdin, sys.stdout, sys.stderr).run()


if __name__ == "__main__":
    sys.exit(main())