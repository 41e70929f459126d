"""
NHX writer: the structural inverse of the parser.

Each node is written as its children in parentheses, then ``name``, then
``:length``, then every other tag in a ``[&&NHX:key=value:...]`` block with
keys in sorted order.
"""

import io
import logging
from typing import IO, List, Union

from nhxtree.parser.lexer import IDENTIFIER_PATTERN
from nhxtree.parser.nhx_parser import LENGTH_TAG, NAME_TAG
from nhxtree.parser.tokens import ANNOTATION_OPEN
from nhxtree.tree import AnnotatedTree

logger = logging.getLogger(__name__)


class TreeWriter:
    """Serializes an AnnotatedTree to a text stream."""

    def write(self, stream: IO[str], tree: AnnotatedTree) -> None:
        raise NotImplementedError


class NHXWriter(TreeWriter):
    def write(self, stream: IO[str], tree: AnnotatedTree) -> None:
        """
        Write ``tree`` as one NHX line terminated by ``;``.

        Raises:
            ValueError: If a tag key or value would not read back as a single
                identifier token
        """
        parts: List[str] = []
        # Node indices still to expand, or literal text ready to emit
        stack: List[Union[int, str]] = [tree.root()]
        while stack:
            item = stack.pop()
            if isinstance(item, str):
                parts.append(item)
                continue

            stack.append(self._label(tree, item))
            children = tree.children(item)
            if children:
                stack.append(")")
                for offset, child in enumerate(reversed(children)):
                    if offset:
                        stack.append(",")
                    stack.append(child)
                stack.append("(")

        parts.append(";")
        stream.write("".join(parts))
        logger.debug("Wrote NHX tree with %d nodes", tree.nb_nodes())

    def _label(self, tree: AnnotatedTree, node: int) -> str:
        tags = tree.tags(node)
        label = ""
        if NAME_TAG in tags:
            label += _checked(node, tags[NAME_TAG])
        if LENGTH_TAG in tags:
            label += ":" + _checked(node, tags[LENGTH_TAG])

        annotations = [
            f"{_checked(node, key)}={_checked(node, tags[key])}"
            for key in sorted(tags)
            if key not in (NAME_TAG, LENGTH_TAG)
        ]
        if annotations:
            label += ANNOTATION_OPEN + ":".join(annotations) + "]"
        return label


def _checked(node: int, text: str) -> str:
    if not IDENTIFIER_PATTERN.fullmatch(text):
        raise ValueError(
            f"Tag text {text!r} on node {node} cannot be written as an NHX identifier"
        )
    return text


def to_nhx(tree: AnnotatedTree) -> str:
    """Return ``tree`` as NHX text."""
    buffer = io.StringIO()
    NHXWriter().write(buffer, tree)
    return buffer.getvalue()
