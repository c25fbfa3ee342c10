# myshell

A small interactive shell for POSIX systems. It reads command lines, runs
programs found on `PATH`, and supports:

- pipelines joined with `|`
- input and output redirection with `<` and `>`
- background jobs with a trailing `&`, either as a separate word or glued
  to the last word (`sleep 5&`)
- the built-in commands `exit`, `quit`, `cd`, `jobs`, `fg`, `bg` and `kill`
- stopped foreground jobs (for example after Ctrl-Z) are kept in the job
  list as suspended

## Installing

```
pip install .
```

## Running

```
myshell
```

The shell prints its prompt, `CSE4100-SP-P2> `, and waits for a line. It
ends on `exit`, `quit` or end of input. Before each prompt it collects
finished background jobs and prints a `done` notice for each.

```
CSE4100-SP-P2> ls -l | grep py > listing.txt
CSE4100-SP-P2> sleep 30 &
[1] 41235
CSE4100-SP-P2> jobs
[1] 	+ running sleep 30 &
CSE4100-SP-P2> fg %1
```

### Built-in commands

| Command        | Effect                                                        |
|----------------|---------------------------------------------------------------|
| `exit`, `quit` | leave the shell                                               |
| `cd [dir]`     | change directory; with no argument go to `$HOME`              |
| `jobs`         | list background and stopped jobs                              |
| `fg [%n]`      | continue job `n` in the foreground (the only job if no `n`)   |
| `bg [%n]`      | continue job `n` in the background (the only job if no `n`)   |
| `kill %n`      | terminate job `n` and remove it from the job list             |

On a line with several `|`-separated commands, built-ins run in the shell
and the remaining commands form one pipeline.

## Using it from Python

`myshell.shell.Shell` can be driven directly. `execute_line` runs one line
and returns the exit status of its last command; `exit` and `quit` raise
`myshell.builtins.ExitShell`. Programs write to the shell's streams when
those have a file descriptor, and otherwise to the process's own.

```python
import sys
from myshell.shell import Shell

shell = Shell(stdin=sys.stdin, stdout=sys.stdout, stderr=sys.stderr, prompt="$ ")
status = shell.execute_line("echo hello | tr a-z A-Z")
```

Other modules:

- `myshell.parsing`: `parse_pipeline`, `parse_command` and the `Command`
  dataclass, plus `split_words`, `split_pipeline`, `strip_background`,
  `extract_redirections` and the simpler `parseline`.
- `myshell.executor`: `Pipeline` (`start`, `wait`, `pids`) and
  `run_pipeline`, which runs a pipeline and returns each stage's exit
  status; a missing program raises `CommandNotFound` inside the pipeline
  and is reported on its error stream.
- `myshell.jobs`: `JobTable`, `Job`, `JobState`, `format_done` and
  `parse_job_spec`.
- `myshell.builtins`: `change_directory`, `is_builtin`, `resolve_job` and
  `ExitShell`.
- `myshell.rio`: `RobustReader`, a buffered binary reader with `read` and
  `readline`; `read_exact`, `write_all` and `to_base`.
- `myshell.net`: `open_client` and `open_listener`, which return connected
  and listening TCP sockets.

## What it does not do

Words are separated by spaces only. There is no quoting or escaping, no
globbing, no variable expansion, no `;` or `&&` lists, no `>>` or `2>`
redirection, no scripts and no history or line editing.

## Running the tests

```
pip install .[test]
pytest
```