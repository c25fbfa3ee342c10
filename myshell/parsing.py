"""Command-line parsing: words, pipelines, background markers and redirections."""

from __future__ import annotations

from dataclasses import dataclass, field

_WHITESPACE = " \t\n\v\f\r"
_TRAILING = "\n "


def parseline(cmdline: str) -> tuple[list[str], bool]:
    """Split a simple command line on spaces and detect a trailing ``&``.

    Returns ``(argv, background)``. A blank line gives an empty argv and
    ``background`` True. A last word starting with ``&`` marks a background
    job and is removed.
    """
    if cmdline.endswith("\n"):
        cmdline = cmdline[:-1]
    argv = [word for word in cmdline.split(" ") if word]
    if not argv:
        return [], True
    if argv[-1].startswith("&"):
        return argv[:-1], True
    return argv, False


def _split(text: str, delim: str) -> list[str]:
    """Tokenize ``text`` on any character of ``delim``, trimming each token."""
    text = text.lstrip(_WHITESPACE).rstrip(_TRAILING)
    pieces = [text]
    for char in delim:
        pieces = [part for piece in pieces for part in piece.split(char)]
    tokens = []
    for piece in pieces:
        token = piece.lstrip(_WHITESPACE).rstrip(_TRAILING)
        if token:
            tokens.append(token)
    return tokens


def split_words(line: str) -> list[str]:
    """Split a single command into its space-separated words."""
    return _split(line, " ")


def split_pipeline(line: str) -> list[str]:
    """Split a command line into the trimmed commands between ``|`` characters."""
    return _split(line, "|")


def strip_background(tokens: list[str]) -> tuple[list[str], bool]:
    """Remove a trailing ``&`` word, or an ``&`` glued to the last word.

    Returns the remaining words and whether the command runs in the background.
    """
    if not tokens:
        return [], False
    last = tokens[-1]
    if last == "&":
        return list(tokens[:-1]), True
    if last.endswith("&"):
        return [*tokens[:-1], last[:-1]], True
    return list(tokens), False


def extract_redirections(tokens: list[str]) -> tuple[list[str], str | None, str | None]:
    """Separate ``<`` and ``>`` redirections from the argument words.

    Returns ``(argv, stdin_path, stdout_path)``. The argument list ends at the
    first redirection; later redirections still apply and override earlier
    ones. An operator with no file after it is an ordinary word.
    """
    argv: list[str] = []
    stdin_path: str | None = None
    stdout_path: str | None = None
    redirected = False
    words = iter(tokens)
    for word in words:
        if word in ("<", ">"):
            target = next(words, None)
            if target is not None:
                redirected = True
                if word == "<":
                    stdin_path = target
                else:
                    stdout_path = target
                continue
        if not redirected:
            argv.append(word)
    return argv, stdin_path, stdout_path


@dataclass
class Command:
    """One stage of a pipeline, ready to be run."""

    argv: list[str] = field(default_factory=list)
    stdin_path: str | None = None
    stdout_path: str | None = None
    background: bool = False
    text: str = ""

    @property
    def name(self) -> str | None:
        """The program name, or None for an empty command."""
        return self.argv[0] if self.argv else None


def parse_command(text: str) -> Command:
    """Parse one pipeline stage into a Command."""
    words, background = strip_background(split_words(text))
    argv, stdin_path, stdout_path = extract_redirections(words)
    return Command(
        argv=argv,
        stdin_path=stdin_path,
        stdout_path=stdout_path,
        background=background,
        text=text,
    )


def parse_pipeline(line: str) -> list[Command]:
    """Parse a full command line into its pipeline stages."""
    return [parse_command(segment) for segment in split_pipeline(line)]