from __future__ import annotations

import logging
import os
from typing import Dict, Iterator, Optional, Protocol, Tuple

from howis.domain.name_key import derive_name

logger = logging.getLogger(__name__)

TEMPLATE_MARKER = "{}"


class Source(Protocol):
    """Supplies the remote URL for a name.

    Two implementations: a finite `TableSource` that hands out each entry once,
    and an inexhaustible `TemplateSource`.
    """

    def resolve(self, name: str) -> Optional[str]: ...

    def discard(self, name: str) -> None: ...

    def drain_remaining(self) -> Iterator[Tuple[str, str]]: ...


class TableSource:
    """Name -> URL table built from a URL list file.

    Entries are consumed: `resolve` and `discard` both remove the name, so
    whatever `drain_remaining` yields is exactly the set of URLs no local file
    (and no earlier run) claimed.
    """

    def __init__(self, urls: Optional[Dict[str, str]] = None):
        self._urls: Dict[str, str] = dict(urls or {})

    @classmethod
    def from_lines(cls, lines) -> "TableSource":
        urls: Dict[str, str] = {}
        for raw in lines:
            url = raw.strip()
            if not url:
                continue
            name = derive_name(url)
            if not name:
                logger.warning("Skipping URL with empty name: %s", url)
                continue
            # last one wins
            urls[name] = url
        return cls(urls)

    @classmethod
    def from_file(cls, path: str) -> "TableSource":
        with open(path, "r", encoding="utf-8") as f:
            source = cls.from_lines(f)
        logger.info("Loaded %d source URLs from %s", len(source), path)
        return source

    def __len__(self) -> int:
        return len(self._urls)

    def resolve(self, name: str) -> Optional[str]:
        return self._urls.pop(name, None)

    def discard(self, name: str) -> None:
        self._urls.pop(name, None)

    def drain_remaining(self) -> Iterator[Tuple[str, str]]:
        while self._urls:
            # consumed as it is yielded
            name, url = self._urls.popitem()
            yield name, url


class TemplateSource:
    """URL rule with a ``{}`` marker replaced by the name. Never runs out."""

    def __init__(self, pattern: str):
        self.pattern = pattern

    def resolve(self, name: str) -> Optional[str]:
        return self.pattern.replace(TEMPLATE_MARKER, name)

    def discard(self, name: str) -> None:
        pass

    def drain_remaining(self) -> Iterator[Tuple[str, str]]:
        return iter(())


def build_source(src: str) -> Source:
    """Classify `src` once at startup: an existing regular file is a URL list,
    anything else is a template string."""
    if src is None or src == "":
        raise ValueError("source is required")
    if os.path.isfile(src):
        return TableSource.from_file(src)
    if TEMPLATE_MARKER not in src:
        logger.warning("Source template %r has no %s marker; every name maps to the same URL", src, TEMPLATE_MARKER)
    return TemplateSource(src)
