"""
Text chunking task using RecursiveCharacterTextSplitter.

Splits extracted text on paragraph, line, sentence and word boundaries (in
that order, falling back to single characters), then prepends the tail of
each previous chunk so neighbouring chunks share context.

The splitter itself runs without overlap; overlap is added afterwards from
the previous raw piece. A duplicate-overlap check skips the prepend when the
piece already starts with that text. The default check compares the first
`probe_length` characters of the piece with the last `probe_length`
characters of the overlap text, which can miss partial overlaps and can
rarely match by coincidence. exact_overlap_detector is the strict variant.

Dependencies: langchain_text_splitters
System role: Chunking stage of document ingestion pipeline
"""

from functools import partial
from typing import Callable

from langchain_text_splitters import RecursiveCharacterTextSplitter

from ..models import Chunk

SEPARATORS = ["\n\n", "\n", ". ", " ", ""]

OverlapDetector = Callable[[str, str], bool]


def prefix_probe_detector(piece: str, overlap_text: str, probe_length: int = 50) -> bool:
    """Report overlap as present when the piece's head equals the overlap's tail."""
    return piece[:probe_length] == overlap_text[-probe_length:]


def exact_overlap_detector(piece: str, overlap_text: str) -> bool:
    """Report overlap as present only when the piece starts with the full overlap text."""
    return piece.startswith(overlap_text)


class ChunkingTask:
    """Split text into overlapping chunks."""

    def __init__(
        self,
        chunk_size: int = 1000,
        chunk_overlap: int = 200,
        overlap_probe_length: int = 50,
        overlap_detector: OverlapDetector | None = None,
    ) -> None:
        """
        Initialize chunking task with splitter configuration.

        Args:
            chunk_size: Maximum size of a split piece in characters
            chunk_overlap: Characters of the previous piece prepended to each chunk
            overlap_probe_length: Probe length for the default duplicate check
            overlap_detector: Custom duplicate check (piece, overlap_text) -> bool

        Raises:
            ValueError: Invalid size/overlap combination
        """
        if chunk_size <= 0:
            raise ValueError("chunk_size must be positive")
        if chunk_overlap < 0:
            raise ValueError("chunk_overlap must not be negative")
        if chunk_overlap >= chunk_size:
            raise ValueError("chunk_overlap must be smaller than chunk_size")

        self._chunk_size = chunk_size
        self._chunk_overlap = chunk_overlap
        self._overlap_detector = overlap_detector or partial(
            prefix_probe_detector, probe_length=overlap_probe_length
        )
        self._splitter = RecursiveCharacterTextSplitter(
            chunk_size=chunk_size,
            chunk_overlap=0,
            separators=SEPARATORS,
            keep_separator="end",
            strip_whitespace=True,
            length_function=len,
        )

    def split(self, text: str) -> list[str]:
        """
        Split text into non-overlapping pieces of at most chunk_size characters.

        Args:
            text: Text to split

        Returns:
            list[str]: Non-empty pieces in document order
        """
        if not text or not text.strip():
            return []
        return [piece for piece in self._splitter.split_text(text) if piece.strip()]

    def chunk(self, text: str) -> list[Chunk]:
        """
        Split text into chunks with enforced overlap.

        Args:
            text: Extracted document text

        Returns:
            list[Chunk]: Chunks in order; empty for empty or whitespace-only text
        """
        pieces = self.split(text)

        overlapped: list[tuple[str, int]] = []
        for i, piece in enumerate(pieces):
            overlap_length = 0
            if i > 0 and self._chunk_overlap > 0:
                overlap_text = pieces[i - 1][-self._chunk_overlap :]
                if not self._overlap_detector(piece, overlap_text):
                    piece = overlap_text + piece
                    overlap_length = len(overlap_text)
            overlapped.append((piece, overlap_length))

        # Metadata needs the final count, so it is assigned in a second pass
        total = len(overlapped)
        return [
            Chunk(
                text=chunk_text,
                sequence_index=index,
                total_chunks=total,
                char_length=len(chunk_text),
                overlap_length=overlap_length,
            )
            for index, (chunk_text, overlap_length) in enumerate(overlapped)
        ]
