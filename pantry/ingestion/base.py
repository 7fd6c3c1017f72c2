"""Abstract row source for the import pipeline."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Iterator

from pantry.schemas.raw import RawRow


class BaseSource(ABC):
    """Abstract base class for tabular sources."""

    name: str

    @abstractmethod
    def rows(self) -> Iterator[RawRow]:
        """Read the source and return its rows lazily, in input order.

        Must raise ``SourceReadError`` before yielding anything when the
        source cannot be read at all.
        """
