import os

import pytest

from minish.nodes import Node, command_from_tokens
from minish.tokens import Token, TokenType


def test_new_node_uses_standard_streams():
    node = Node(type=TokenType.PIPE)
    assert (node.fd_in, node.fd_out) == (0, 1)
    assert node.cmd is None
    assert node.left is None and node.right is None


def test_command_from_tokens_keeps_values_in_order():
    tokens = [Token("ls"), Token("-l"), Token("/tmp")]
    node = command_from_tokens(tokens)
    assert node.cmd == ["ls", "-l", "/tmp"]
    assert node.type == TokenType.CMD


def test_command_from_tokens_skips_missing_values():
    tokens = [Token("cat"), Token(None), Token("file")]
    assert command_from_tokens(tokens).cmd == ["cat", "file"]


def test_command_from_no_tokens_is_empty():
    assert command_from_tokens([]).cmd == []


def test_walk_is_preorder():
    leaf_a = Node(cmd=["a"])
    leaf_b = Node(cmd=["b"])
    leaf_c = Node(cmd=["c"])
    inner = Node(type=TokenType.PIPE, left=leaf_a, right=leaf_b)
    root = Node(type=TokenType.PIPE, left=inner, right=leaf_c)
    assert list(root.walk()) == [root, inner, leaf_a, leaf_b, leaf_c]


def test_close_fds_closes_descriptors_in_tree():
    read_end, write_end = os.pipe()
    child = Node(fd_out=write_end)
    root = Node(type=TokenType.IN, fd_in=read_end, left=child)
    root.close_fds()
    for fd in (read_end, write_end):
        with pytest.raises(OSError):
            os.fstat(fd)
    assert (root.fd_in, child.fd_out) == (0, 1)


def test_close_fds_leaves_standard_streams():
    node = Node(fd_in=0, fd_out=1)
    node.close_fds()
    assert os.fstat(0) is not None or True
    assert (node.fd_in, node.fd_out) == (0, 1)
    # standard descriptors must still be usable
    assert os.get_inheritable(1) in (True, False)