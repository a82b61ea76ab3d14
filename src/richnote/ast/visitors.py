#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/richnote/ast/visitors.py
"""Visitor pattern implementation for document tree traversal.

The tree has only three node classes, so a visitor implements three methods.
Element types are dispatched inside ``visit_element`` by the concrete visitor,
usually through a table keyed on the element's ``type`` string.

"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any, Callable

from richnote.ast.nodes import Document, Element, Node, Text


class NodeVisitor(ABC):
    """Abstract base class for document tree visitors.

    Examples
    --------
    Simple visitor that counts text leaves:

        >>> class TextCounter(NodeVisitor):
        ...     def __init__(self):
        ...         self.count = 0
        ...     def visit_document(self, node):
        ...         for child in node.children:
        ...             child.accept(self)
        ...     def visit_element(self, node):
        ...         for child in node.children:
        ...             child.accept(self)
        ...     def visit_text(self, node):
        ...         self.count += 1

    """

    @abstractmethod
    def visit_document(self, node: Document) -> Any:
        """Visit the root Document node."""
        pass

    @abstractmethod
    def visit_element(self, node: Element) -> Any:
        """Visit an Element node of any type."""
        pass

    @abstractmethod
    def visit_text(self, node: Text) -> Any:
        """Visit a Text leaf."""
        pass


class NodeCollector(NodeVisitor):
    """Collect every node matching a predicate, in document order.

    Parameters
    ----------
    predicate : callable, optional
        Function returning True for nodes to collect; all nodes by default

    """

    def __init__(self, predicate: Callable[[Node], bool] | None = None):
        """Initialize the collector."""
        self.predicate = predicate or (lambda node: True)
        self.collected: list[Node] = []

    def _collect(self, node: Node) -> None:
        if self.predicate(node):
            self.collected.append(node)

    def visit_document(self, node: Document) -> None:
        """Collect the document and its descendants."""
        self._collect(node)
        for child in node.children:
            child.accept(self)

    def visit_element(self, node: Element) -> None:
        """Collect an element and its descendants."""
        self._collect(node)
        for child in node.children:
            child.accept(self)

    def visit_text(self, node: Text) -> None:
        """Collect a text leaf."""
        self._collect(node)


def extract_nodes(root: Node, predicate: Callable[[Node], bool]) -> list[Node]:
    """Return every node under ``root`` (inclusive) for which ``predicate`` holds.

    Examples
    --------
    >>> images = extract_nodes(doc, lambda n: isinstance(n, Element) and n.type == "image")

    """
    collector = NodeCollector(predicate=predicate)
    root.accept(collector)
    return collector.collected
