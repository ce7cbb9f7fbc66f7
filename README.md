# minishellpy

A small interactive command shell. It reads a line, splits it into words,
expands variables, builds a pipeline of commands with their redirections and
runs it, either through its own built-in commands or by starting programs
found on `PATH`.

## Installing

```
pip install .
```

## Starting the shell

```
minishellpy
```

The prompt shows the current directory on one line and an arrow on the next.
Type `exit` or press Ctrl-D to leave. `exit` followed by anything else is
reported as "too many arguments", and the shell leaves all the same.

## What the shell understands

- Words separated by spaces or tabs; single and double quotes group text,
  and single quotes stop variable expansion. Quotes are removed before a
  command runs.
- `$NAME` expands to the value of a variable (nothing if it is unset) and
  `$?` to the exit status of the last command.
- `NAME=value` words in a line that holds a single command (not a pipeline)
  set local shell variables; `export` makes them visible to programs.
- Pipes: `ls | grep py | wc -l`.
- Redirections: `< file`, `> file`, `>> file` and here-documents `<< END`.
  Where a command has several, the last input and the last output
  redirection are the ones used. Here-document lines are expanded for
  variables and kept in numbered `.temp_file_N` files in the current
  directory, which are removed once the line has run.
- Built-in commands: `echo` (with `-n`), `cd` (with `~` for `HOME`), `pwd`,
  `env`, `export` (with no arguments it lists exported variables in
  `declare -x` form), `unset` and `exit`.

Syntax errors such as unclosed quotes, a pipe with nothing before or after
it, or an unexpected `;` or `\` are reported and the line is not run. A
redirection whose file cannot be opened is reported, nothing runs and the
status is 1. A program that cannot be found is reported with status 127.

## Using it from Python

```python
import io
from minishellpy.shell import Shell

out = io.StringIO()
shell = Shell({"PATH": "/usr/bin:/bin", "PWD": "/tmp"}, out)
shell.execute("export GREETING=hello")
shell.execute("echo $GREETING")
print(out.getvalue())      # hello
print(shell.last_status)   # 0
```

`Shell.repl(reader)` runs the read loop with any function that takes a
prompt and returns a line, or `None` at the end of input.

The pieces can also be used on their own:

- `minishellpy.lexer.split_args` splits a line into words and raises
  `minishellpy.errors.ShellError` on a syntax error; `remove_quotes` strips
  quoting from a word.
- `minishellpy.expansion.expand_words` and `expand` replace variable
  references.
- `minishellpy.parser.parse` builds `Command` objects, each with its words
  and `Redirection`s.
- `minishellpy.executor.Executor` runs a list of commands against a
  `minishellpy.environment.Environment` and returns the last exit status;
  `find_executable` looks a name up on `PATH`.
- `minishellpy.heredoc.collect_heredoc` reads here-document lines up to a
  delimiter, and `HeredocFiles` hands out and removes their files.
- `minishellpy.builtins` holds the built-in commands as plain functions.

## What it does not do

There is no globbing, no `;`, `&&` or `||`, no backslash escapes, no
subshells and no job control. `exit` takes no status argument, and errors
from the shell itself are written to its output stream.

## Running the tests

```
pip install ".[test]"
pytest
```