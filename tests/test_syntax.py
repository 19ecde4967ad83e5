import pytest

from minish.errors import ShellSyntaxError
from minish.syntax import check_syntax, find_syntax_error
from minish.tokens import Token, TokenType

PIPE_MSG = "syntax error near unexpected token `|'"
NEWLINE_MSG = "syntax error near unexpected token `newline'"


def cmd(value):
    return Token(value, TokenType.CMD)


def test_leading_pipe():
    tokens = [Token("|", TokenType.PIPE), cmd("ls")]
    assert find_syntax_error(tokens) == PIPE_MSG


def test_trailing_pipe():
    tokens = [cmd("ls"), Token("|", TokenType.PIPE)]
    assert find_syntax_error(tokens) == PIPE_MSG


def test_double_pipe():
    tokens = [cmd("ls"), Token("|", TokenType.PIPE), Token("|", TokenType.PIPE), cmd("wc")]
    assert find_syntax_error(tokens) == PIPE_MSG


def test_redirection_without_file():
    tokens = [cmd("cat"), Token("<", TokenType.IN)]
    assert find_syntax_error(tokens) == NEWLINE_MSG


def test_redirection_followed_by_pipe():
    tokens = [cmd("cat"), Token(">", TokenType.OUT), Token("|", TokenType.PIPE), cmd("x")]
    assert find_syntax_error(tokens) == PIPE_MSG


def test_redirection_followed_by_redirection_names_second_token():
    tokens = [cmd("cat"), Token(">", TokenType.OUT), Token(">", TokenType.OUT), cmd("f")]
    assert find_syntax_error(tokens) == "syntax error near unexpected token `>'"


def test_valid_lines():
    assert find_syntax_error([]) is None
    tokens = [cmd("cat"), Token("<", TokenType.IN), cmd("in"), Token("|", TokenType.PIPE), cmd("wc")]
    assert find_syntax_error(tokens) is None


def test_check_syntax_raises_and_reports(capsys):
    with pytest.raises(ShellSyntaxError, match="newline"):
        check_syntax([Token(">>", TokenType.APPEND)])
    assert capsys.readouterr().err == NEWLINE_MSG + "\n"


def test_check_syntax_accepts_valid_line(capsys):
    assert check_syntax([cmd("ls"), cmd("-l")]) is None
    assert capsys.readouterr().err == ""