"""Running pipelines of commands with pipes and file redirections."""

from __future__ import annotations

import contextlib
import errno
import os
import signal
import subprocess
import sys
from typing import IO, Any, Sequence

from myshell.parsing import Command, parse_pipeline

EXIT_FAILURE = 1
_CREATE_MODE = 0o644


class CommandNotFound(FileNotFoundError):
    """The program named by a command could not be found."""

    def __init__(self, name: str) -> None:
        super().__init__(errno.ENOENT, os.strerror(errno.ENOENT), name)
        self.name = name


def _child_setup() -> None:
    """Put the child in its own process group and restore job-control signals."""
    os.setpgid(0, 0)
    signal.signal(signal.SIGINT, signal.SIG_DFL)
    signal.signal(signal.SIGTSTP, signal.SIG_DFL)


class Pipeline:
    """A sequence of commands whose output feeds the next one's input."""

    def __init__(
        self,
        commands: Sequence[Command] | str,
        stdin: Any = None,
        stdout: Any = None,
        stderr: Any = None,
    ) -> None:
        if isinstance(commands, str):
            commands = parse_pipeline(commands)
        self.commands = list(commands)
        if not self.commands:
            raise ValueError("a pipeline needs at least one command")
        if any(not command.argv for command in self.commands):
            raise ValueError("every command in a pipeline needs a program name")
        self._stdin = stdin
        self._stdout = stdout
        self._stderr = stderr
        self._processes: list[subprocess.Popen | None] = []
        self._started = False
        self.errors: list[OSError] = []

    def _report(self, name: str | None, exc: OSError) -> None:
        """Write a ``name: reason`` line where the pipeline's errors go."""
        self.errors.append(exc)
        label = name or exc.filename or ""
        reason = exc.strerror or str(exc)
        message = f"{label}: {reason}\n"
        target = self._stderr
        if target is None:
            sys.stderr.write(message)
            sys.stderr.flush()
        elif isinstance(target, int):
            if target >= 0:
                os.write(target, message.encode())
        else:
            with contextlib.suppress(AttributeError, ValueError):
                target.flush()
            os.write(target.fileno(), message.encode())

    def _spawn(self, argv: list[str], stdin: Any, stdout: Any) -> subprocess.Popen:
        try:
            process = subprocess.Popen(
                argv,
                stdin=stdin,
                stdout=stdout,
                stderr=self._stderr,
                preexec_fn=_child_setup if os.name == "posix" else None,
            )
        except FileNotFoundError as exc:
            raise CommandNotFound(argv[0]) from exc
        if os.name == "posix":
            # The child may already have exec'd; its own setpgid covers that.
            with contextlib.suppress(OSError):
                os.setpgid(process.pid, process.pid)
        return process

    def start(self) -> None:
        """Launch every stage. Stages that cannot start are reported and fail."""
        if self._started:
            raise RuntimeError("pipeline already started")
        self._started = True
        upstream: IO[bytes] | None = None
        last = len(self.commands) - 1
        for position, command in enumerate(self.commands):
            if position == 0:
                stdin: Any = self._stdin
            else:
                stdin = upstream if upstream is not None else subprocess.DEVNULL
            stdout: Any = self._stdout if position == last else subprocess.PIPE
            process = None
            try:
                with contextlib.ExitStack() as files:
                    if command.stdin_path is not None:
                        try:
                            stdin = files.enter_context(open(command.stdin_path, "rb"))
                        except OSError as exc:
                            self._report(command.stdin_path, exc)
                            raise
                    if command.stdout_path is not None:
                        try:
                            fd = os.open(
                                command.stdout_path,
                                os.O_WRONLY | os.O_CREAT | os.O_TRUNC,
                                _CREATE_MODE,
                            )
                        except OSError as exc:
                            self._report(command.stdout_path, exc)
                            raise
                        stdout = files.enter_context(os.fdopen(fd, "wb"))
                    try:
                        process = self._spawn(command.argv, stdin, stdout)
                    except OSError as exc:
                        self._report(command.argv[0], exc)
                        raise
            except OSError:
                process = None
            finally:
                if upstream is not None:
                    upstream.close()
            self._processes.append(process)
            upstream = process.stdout if process is not None and position != last else None
        if upstream is not None:
            upstream.close()

    def wait(self) -> list[int]:
        """Wait for every stage and return their exit statuses in order.

        A stage that could not start has status 1; a stage killed by a
        signal has the negated signal number.
        """
        if not self._started:
            raise RuntimeError("pipeline not started")
        return [EXIT_FAILURE if process is None else process.wait() for process in self._processes]

    def pids(self) -> list[int]:
        """Process ids of the stages that were started."""
        return [process.pid for process in self._processes if process is not None]


def run_pipeline(
    commands: Sequence[Command] | str,
    stdin: Any = None,
    stdout: Any = None,
    stderr: Any = None,
) -> list[int]:
    """Run a pipeline to completion and return each stage's exit status."""
    pipeline = Pipeline(commands, stdin, stdout, stderr)
    pipeline.start()
    return pipeline.wait()