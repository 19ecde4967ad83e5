"""A small shell engine: tokenizer, expansion, syntax checks, builtins, redirections, heredocs and pipes."""

__version__ = "1.0.0"

__all__ = [
    "builtins",
    "env",
    "errors",
    "execution",
    "expansion",
    "heredoc",
    "nodes",
    "signals",
    "syntax",
    "textutil",
    "tokenizer",
    "tokens",
]