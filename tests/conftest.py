from collections.abc import Callable

import pytest

from sinos.sinos_source import SourceFile, Span


@pytest.fixture  # type: ignore[misc]
def source_file() -> Callable[[str], SourceFile]:
    """Wraps text in a SourceFile named ``<test>``."""
    return lambda text: SourceFile("<test>", text)


@pytest.fixture  # type: ignore[misc]
def make_span() -> Callable[[str, int, int], Span]:
    """Builds a span over a ``<test>`` SourceFile holding `text`."""
    return lambda text, index, length: Span(SourceFile("<test>", text), index, length)
