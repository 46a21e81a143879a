"""Registry of embedded-language formatters.

An embedder formats the text content of elements with a given name (for
example a stylesheet inside ``<style>``). It receives the raw content text
and the print configuration and returns the formatted text; any exception it
raises makes the printer fall back to regular layout for that element.
"""

from typing import Callable, Dict, Iterator, Optional

from xml_pretty_printer.shared import PrintConfig

Embedder = Callable[[str, PrintConfig], str]


class EmbedRegistry:
    """Map element names to embedder callables."""

    def __init__(self, embedders: Optional[Dict[str, Embedder]] = None) -> None:
        self._embedders: Dict[str, Embedder] = {}
        for name, embedder in (embedders or {}).items():
            self.register(name, embedder)

    def register(self, element_name: str, embedder: Embedder) -> None:
        """Register ``embedder`` for elements named ``element_name``.

        Raises:
            ValueError: If the name is empty
            TypeError: If ``embedder`` is not callable
        """
        if not element_name:
            raise ValueError("Embedder element name cannot be empty")
        if not callable(embedder):
            raise TypeError(f"Embedder for <{element_name}> must be callable")
        self._embedders[element_name] = embedder

    def unregister(self, element_name: str) -> bool:
        """Remove the embedder for ``element_name``; return whether one existed."""
        return self._embedders.pop(element_name, None) is not None

    def get(self, element_name: str) -> Optional[Embedder]:
        return self._embedders.get(element_name)

    def __contains__(self, element_name: object) -> bool:
        return element_name in self._embedders

    def __iter__(self) -> Iterator[str]:
        return iter(self._embedders)

    def __len__(self) -> int:
        return len(self._embedders)
