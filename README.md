# minish

`minish` is a small shell engine for POSIX systems. It takes a command line
through the stages a classic Unix shell uses:

1. **Tokenizing** (`minish.tokenizer`). The line is split into words and the
   operators `|`, `<`, `>`, `>>` and `<<`. Quotes are respected.
2. **Expansion** (`minish.expansion`). `$NAME`, `$?` and `$_` are expanded.
   Text in single quotes stays literal and text in double quotes is expanded.
3. **Syntax checking** (`minish.syntax`). Misplaced pipes and redirections
   give the usual `syntax error near unexpected token` messages.
4. **Execution** (`minish.execution`). This covers builtins, external programs
   found on `PATH`, redirections, heredocs (`minish.heredoc`) and pipes.

The package uses only the standard library.

## The environment

Shell variables live in `minish.env.Environment`. It keeps them in insertion
order and holds the special `?` entry for the last exit status. It can also
hold names that were exported without a value.

```python
from minish.env import Environment

env = Environment.from_environ(["HOME=/home/user", "SHLVL=1"], "/tmp")
env.get("SHLVL")          # "2": the level is raised on start-up
"PATH" in env             # True: a default PATH is added when missing
env.set("GREETING", "hi")
env.append("GREETING", " there")
env.get("GREETING")       # "hi there"
env.set_status(127)
env.get("?")              # "127"
env.env_lines()           # the lines the `env` builtin prints
```

`from_environ` also accepts a mapping. With no arguments it reads
`os.environ` and the current directory.

## Tokenizing, expansion and syntax

```python
from minish.tokenizer import tokenize_input
from minish.expansion import expand_variable, remove_quotes
from minish.syntax import check_syntax, find_syntax_error

tokens = tokenize_input('echo "$GREETING" | cat > out.txt', env)
find_syntax_error(tokens)     # None when the line is well formed
check_syntax(tokens)          # prints the message and raises when it is not

remove_quotes("'a b'\"c\"")   # "a bc"
```

Each token is a `minish.tokens.Token` with a `value` and a `TokenType`
(`CMD`, `PIPE`, `IN`, `OUT`, `APPEND`, `HEREDOC`).

Both `tokenize_input` (when a quote is left open) and `check_syntax` raise
`minish.errors.ShellSyntaxError`. Before raising, each writes the message to
standard error.

## Builtins

`minish.builtins` provides `echo`, `cd`, `pwd`, `env`, `export`, `unset` and
`exit`. Each builtin takes the argument vector and the environment, and
records its status in `?`.

```python
from minish.builtins import builtin_echo, builtin_export, builtin_unset

builtin_export(["export", "A=1", "B+=x"], env)
builtin_unset(["unset", "A"], env)
builtin_echo(["echo", "-nnn", "no", "newline"], env)
```

`run_builtin(node, env)` runs a command node when it names a builtin and
returns whether it did. `exit` raises `minish.errors.ShellExit`, and so does
`minish.signals.handle_eof`. The interpreter keeps running; the caller
decides what to do with the exception's `status`.

## Command trees and execution

Commands are `minish.nodes.Node` objects. A command node has `cmd`, a list of
arguments; `command_from_tokens(tokens)` builds one from word tokens. A
redirection node has a redirection type, the command as `left`, and a node
naming the file as `right`. A pipe node has type `PIPE`, with the two sides
as `left` and `right`.

```python
from minish.nodes import Node
from minish.tokens import TokenType
from minish.heredoc import preorder_heredoc
from minish.execution import executing

tree = Node(
    type=TokenType.OUT,
    left=Node(cmd=["ls", "-l"]),
    right=Node(cmd=["listing.txt"]),
)
preorder_heredoc(tree, env)   # reads the bodies of any `<<` nodes first
executing(tree, env)
env.get("?")                  # exit status of the command
tree.close_fds()
```

Running a tree works like this:

- `executing` applies redirections by attaching descriptors to the process's
  own stdin and stdout. A caller that wants them back should save and restore
  descriptors 0 and 1 around the call.
- Builtins run in the current process.
- External programs and both sides of a pipe run in forked children.
- A pipe leaves the status of its right-hand side in `?`.

Heredoc bodies are read through a `reader` callable that takes a prompt and
returns a line, or `None` at end of input. The default reader is `input()`.
`collect_heredoc(delimiter, env, lines)` returns a body from any iterable of
lines. Lines are expanded unless the delimiter is quoted.

Exit statuses follow the usual shell conventions:

- 127: the command was not found.
- 126: permission was denied, or the path is a directory.
- 128 plus the signal number: the command was ended by a signal.

## What is not included

- There is no interactive prompt loop and no command to start.
- There is no parser that turns a full token list into a `Node` tree. Trees
  with pipes or redirections are built by the caller, as shown above.
- Only `command_from_tokens` builds nodes from tokens, and it builds a plain
  command node.

## Running the tests

Install the `test` extra, which provides pytest, and run `pytest` from the
project root.