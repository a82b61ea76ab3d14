#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/richnote/renderers/base.py
"""Base classes for document tree renderers.

A renderer turns a Document, or a bare list of top-level nodes, into a
string in its output format.

"""

from __future__ import annotations

from abc import ABC, abstractmethod
from io import BufferedIOBase, RawIOBase
from pathlib import Path
from typing import IO, Any, Sequence, Union

from richnote.ast import Document, Node
from richnote.exceptions import InvalidOptionsError
from richnote.options.base import BaseRendererOptions

RenderInput = Union[Document, Sequence[Node]]


class BaseRenderer(ABC):
    """Abstract base class for all document tree renderers.

    Parameters
    ----------
    options : BaseRendererOptions or None, default = None
        Format-specific rendering options

    Examples
    --------
    Creating a custom renderer:

        >>> class WordCountRenderer(BaseRenderer):
        ...     def render_to_string(self, doc):
        ...         return str(sum(len(node_string(n).split()) for n in self._top_level(doc)))

    """

    def __init__(self, options: BaseRendererOptions | None = None):
        """Initialize the renderer with optional configuration."""
        self.options = options or BaseRendererOptions()

    @abstractmethod
    def render_to_string(self, doc: RenderInput) -> str:
        """Render a document or list of top-level nodes to a string.

        Parameters
        ----------
        doc : Document or sequence of Node
            Tree to render

        Returns
        -------
        str
            Rendered text

        """
        pass

    def render(self, doc: RenderInput, output: Union[str, Path, IO[bytes], IO[str]]) -> None:
        """Render a tree and write the result to a path or stream.

        Parameters
        ----------
        doc : Document or sequence of Node
            Tree to render
        output : str, Path, IO[bytes] or IO[str]
            Output destination

        """
        self.write_text_output(self.render_to_string(doc), output)

    @staticmethod
    def _top_level(doc: RenderInput) -> list[Node]:
        if isinstance(doc, Document):
            return list(doc.children)
        return list(doc)

    @staticmethod
    def _validate_options_type(options: BaseRendererOptions | None, expected_type: type, renderer_name: str) -> None:
        """Validate that options are of the correct type for this renderer.

        Raises
        ------
        InvalidOptionsError
            If options are not None and not an instance of expected_type

        """
        if options is not None and not isinstance(options, expected_type):
            raise InvalidOptionsError(
                converter_name=renderer_name,
                expected_type=expected_type,
                received_type=type(options),
            )

    @staticmethod
    def write_text_output(text: str, output: Union[str, Path, IO[bytes], IO[str], Any]) -> None:
        """Write text output to a file path or an open stream.

        Binary streams receive UTF-8 bytes.

        Raises
        ------
        TypeError
            If output is neither a path nor a writable stream

        Examples
        --------
            >>> from io import StringIO
            >>> buffer = StringIO()
            >>> BaseRenderer.write_text_output("<p>Hi</p>", buffer)
            >>> buffer.getvalue()
            '<p>Hi</p>'

        """
        if isinstance(output, (str, Path)):
            Path(output).write_text(text, encoding="utf-8")
            return
        if not hasattr(output, "write"):
            raise TypeError(f"Unsupported output type: {type(output).__name__}")
        if isinstance(output, (BufferedIOBase, RawIOBase)):
            output.write(text.encode("utf-8"))
        else:
            output.write(text)
