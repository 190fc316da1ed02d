"""
Minimal Newick parser for the demo tree canvas.
"""

from dataclasses import dataclass, field
from typing import List, Optional

_DELIMITERS = "(),:;"


class NewickError(ValueError):
    """Raised when a Newick string cannot be parsed"""

    def __init__(self, message, position):
        super().__init__(f"{message} at position {position}")
        self.position = position


@dataclass(eq=False)
class Node:
    name: str = ""
    length: float = 0.0
    children: List["Node"] = field(default_factory=list)

    @property
    def is_leaf(self):
        return not self.children

    def walk(self):
        """Yield this node and all descendants, depth first"""
        yield self
        for child in self.children:
            yield from child.walk()

    def leaves(self):
        return [node for node in self.walk() if node.is_leaf]

    def find(self, name) -> Optional["Node"]:
        for node in self.walk():
            if node.name == name:
                return node
        return None


class _Parser:
    def __init__(self, text):
        self.text = text
        self.pos = 0

    def peek(self):
        self._skip_whitespace()
        return self.text[self.pos] if self.pos < len(self.text) else ""

    def _skip_whitespace(self):
        while self.pos < len(self.text) and self.text[self.pos].isspace():
            self.pos += 1

    def expect(self, char):
        if self.peek() != char:
            found = self.peek() or "end of input"
            raise NewickError(f"Expected {char!r}, found {found!r}", self.pos)
        self.pos += 1

    def parse(self):
        node = self.node()
        self.expect(";")
        if self.peek():
            raise NewickError("Unexpected trailing data", self.pos)
        return node

    def node(self):
        node = Node()
        if self.peek() == "(":
            self.pos += 1
            node.children.append(self.node())
            while self.peek() == ",":
                self.pos += 1
                node.children.append(self.node())
            self.expect(")")
        node.name = self.label()
        if self.peek() == ":":
            self.pos += 1
            node.length = self.number()
        return node

    def label(self):
        self._skip_whitespace()
        if self.peek() == "'":
            end = self.text.find("'", self.pos + 1)
            if end < 0:
                raise NewickError("Unterminated quoted label", self.pos)
            name = self.text[self.pos + 1:end]
            self.pos = end + 1
            return name
        start = self.pos
        while self.pos < len(self.text) and self.text[self.pos] not in _DELIMITERS:
            self.pos += 1
        return self.text[start:self.pos].strip().replace("_", " ")

    def number(self):
        start = self.pos
        raw = self.label()
        try:
            return float(raw)
        except ValueError:
            raise NewickError(f"Invalid branch length {raw!r}", start) from None


def parse_newick(text):
    """
    Parse a Newick string into a Node tree.

    Args:
        text: Newick string terminated by ';'

    Returns:
        Root Node

    Raises:
        NewickError: If the string is malformed
    """
    return _Parser(text).parse()
