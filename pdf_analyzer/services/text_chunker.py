"""
Packs extracted page text into chunks sized for assistant messages.
"""

from typing import List, Sequence

from ..errors import ExtractionError
from ..models import Page

DEFAULT_MAX_CHUNK_SIZE = 2000


def chunk_pages(pages: Sequence[Page], max_chunk_size: int = DEFAULT_MAX_CHUNK_SIZE) -> List[str]:
    """
    Split page fragments into ordered chunks of at most ``max_chunk_size`` characters.

    Fragments are never split: a fragment that would overflow the current
    chunk starts the next one, and a fragment longer than the limit becomes
    a chunk of its own. Each page is flushed separately so chunks never
    span a page boundary.

    Args:
        pages: Pages in document order
        max_chunk_size: Maximum chunk length in characters

    Returns:
        List of non-empty chunk strings
    """
    if not isinstance(max_chunk_size, int) or max_chunk_size <= 0:
        raise ValueError("max_chunk_size must be a positive integer")

    chunks: List[str] = []

    for page_index, page in enumerate(pages):
        fragments = getattr(page, "fragments", None)
        if fragments is None:
            raise ExtractionError(f"Page {page_index + 1} has no fragment list")

        current = ""
        for fragment in fragments:
            text = getattr(fragment, "text", None)
            if text is None:
                raise ExtractionError(f"Page {page_index + 1} contains a fragment without text")

            if len(current) + len(text) > max_chunk_size:
                if current:
                    chunks.append(current)
                current = text
            else:
                current += text

        if current:
            chunks.append(current)

    return chunks
