from __future__ import annotations

import re
from dataclasses import dataclass

from src.domain.sources import DocumentLayout, get_source

# Glossary entries are separated by two or more blank lines
_GLOSSARY_SPLIT_RE = re.compile(r"\n\n{2,}")
# llms.txt documents separate sections with a horizontal rule on its own line
_RULE_SPLIT_RE = re.compile(r"^---+$", re.MULTILINE)

# Evaluated in order; the first kind found inside the window wins
SEMANTIC_BOUNDARIES: tuple[tuple[str, str], ...] = (
    ("paragraph", "\n\n"),
    ("sentence", ". "),
    ("word", " "),
)


@dataclass
class ChunkingConfig:
    chunk_size: int = 2000


def split_structural(content: str, layout: DocumentLayout) -> list[str]:
    pattern = _GLOSSARY_SPLIT_RE if layout is DocumentLayout.GLOSSARY else _RULE_SPLIT_RE
    return [s.strip() for s in pattern.split(content) if s.strip()]


def find_boundary(window: str) -> int:
    """Cut position after the highest-priority boundary in window, or -1."""
    for _kind, token in SEMANTIC_BOUNDARIES:
        idx = window.rfind(token)
        if idx != -1:
            return idx + len(token)
    return -1


class DocChunker:
    """Two-phase chunker: structural delimiter split, then size-bounded re-split.

    Pieces longer than ``chunk_size`` are cut at the last paragraph break inside
    the window, else the last sentence end, else the last space. Without any
    boundary the piece is hard-cut at ``chunk_size``, so a single word longer than
    the limit is split mid-word.
    """

    def __init__(self, cfg: ChunkingConfig | None = None) -> None:
        self.cfg = cfg or ChunkingConfig()
        if int(self.cfg.chunk_size) < 1:
            raise ValueError(f"chunk_size must be positive, got {self.cfg.chunk_size}")

    @property
    def chunk_size(self) -> int:
        return int(self.cfg.chunk_size)

    def chunk(self, domain: str, content: str) -> list[str]:
        layout = get_source(domain).layout
        out: list[str] = []
        for piece in split_structural(content or "", layout):
            if len(piece) <= self.chunk_size:
                out.append(piece)
            else:
                out.extend(self.split_by_size(piece))
        return out

    def split_by_size(self, text: str) -> list[str]:
        size = self.chunk_size
        if len(text) <= size:
            return [text]

        chunks: list[str] = []
        remaining = text
        while len(remaining) > size:
            cut = find_boundary(remaining[:size])
            if cut <= 0:
                cut = size
            head = remaining[:cut].strip()
            if head:
                chunks.append(head)
            remaining = remaining[cut:].strip()

        if remaining:
            chunks.append(remaining)
        return chunks
