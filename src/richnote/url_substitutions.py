#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/richnote/url_substitutions.py
"""Replacement of transient object URLs with data URLs at save time.

Images pasted as files are shown in the editor through short-lived
``blob:`` object URLs. Those URLs mean nothing once the session ends, so
each one is resolved to a ``data:`` URL in the background as soon as it
appears, and the HTML renderer swaps them in when the note is saved.
"""

from __future__ import annotations

import asyncio
import logging
import uuid
from typing import Awaitable, Callable, Optional

from richnote.constants import OBJECT_URL_SCHEME
from richnote.options.ingestion import IngestionOptions
from richnote.utils.images import convert_image_bytes

logger = logging.getLogger(__name__)

Resolver = Callable[[str], Awaitable[str]]


class ObjectUrlStore:
    """In-memory registry of binary objects addressed by ``blob:`` URLs.

    Examples
    --------
        >>> store = ObjectUrlStore()
        >>> url = store.create_object_url(b"<svg/>", "image/svg+xml")
        >>> url.startswith("blob:richnote/")
        True
        >>> store.get(url)
        (b'<svg/>', 'image/svg+xml')

    """

    def __init__(self) -> None:
        self._objects: dict[str, tuple[bytes, str]] = {}

    def create_object_url(self, data: bytes, mime_type: str) -> str:
        """Store an object and return a new URL for it."""
        url = f"{OBJECT_URL_SCHEME}richnote/{uuid.uuid4()}"
        self._objects[url] = (data, mime_type)
        return url

    def get(self, url: str) -> tuple[bytes, str]:
        """Return the bytes and MIME type stored under ``url``.

        Raises
        ------
        KeyError
            If the URL is unknown or has been revoked

        """
        return self._objects[url]

    def revoke(self, url: str) -> None:
        """Forget the object stored under ``url``; unknown URLs are ignored."""
        self._objects.pop(url, None)

    def __contains__(self, url: object) -> bool:
        return url in self._objects

    def __len__(self) -> int:
        return len(self._objects)


class UrlSubstitutions:
    """Background resolution of object URLs to data URLs.

    Parameters
    ----------
    resolver : callable, optional
        Coroutine function mapping an object URL to a data URL. By default
        the object is read from ``store`` and converted like an imported
        image file.
    store : ObjectUrlStore, optional
        Where object URLs are looked up by the default resolver
    options : IngestionOptions, optional
        Image size limits for the default resolver

    Examples
    --------
        >>> async def save(html_nodes, substitutions):
        ...     return serialize_html(html_nodes, await substitutions.current())

    """

    def __init__(
        self,
        resolver: Optional[Resolver] = None,
        store: Optional[ObjectUrlStore] = None,
        options: Optional[IngestionOptions] = None,
    ):
        self.store = store or ObjectUrlStore()
        self.options = options or IngestionOptions()
        self._resolver: Resolver = resolver or self._resolve_from_store
        self._pending: list[tuple[str, asyncio.Future[str]]] = []
        self._queued: list[str] = []

    def add(self, object_url: str) -> None:
        """Start resolving an object URL.

        Without a running event loop the URL is queued and resolution starts
        on the next call to :meth:`current`.
        """
        try:
            asyncio.get_running_loop()
        except RuntimeError:
            logger.debug("No running event loop, queueing %s", object_url)
            self._queued.append(object_url)
            return
        self._pending.append((object_url, asyncio.ensure_future(self._resolver(object_url))))

    def clear(self) -> None:
        """Drop every pending and queued resolution."""
        for _url, task in self._pending:
            task.cancel()
        self._pending = []
        self._queued = []

    async def current(self) -> dict[str, str]:
        """Wait for every pending resolution and return the successful ones.

        Returns
        -------
        dict of str to str
            Object URL to data URL

        """
        queued, self._queued = self._queued, []
        for object_url in queued:
            self.add(object_url)

        pending = list(self._pending)
        outcomes = await asyncio.gather(*(task for _url, task in pending), return_exceptions=True)

        substitutions: dict[str, str] = {}
        for (object_url, _task), outcome in zip(pending, outcomes):
            if isinstance(outcome, BaseException):
                logger.warning("URL substitution failed for %s: %r", object_url, outcome)
            else:
                substitutions[object_url] = outcome
        return substitutions

    async def _resolve_from_store(self, object_url: str) -> str:
        data, mime_type = self.store.get(object_url)
        converted = await asyncio.to_thread(convert_image_bytes, data, mime_type, None, self.options)
        return converted.data_url
