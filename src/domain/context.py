from __future__ import annotations

from collections.abc import Iterable

from src.domain.document import ResultFragment


def assemble_context(fragments: Iterable[ResultFragment], k: int | None = None) -> str:
    """Assemble a prompt-ready context with lightweight citations.

    Format per fragment:
    [i] domain | score=N | url\nContent...
    """
    out: list[str] = []
    max_frags = float("inf") if k is None else int(k)
    for i, f in enumerate(fragments, 1):
        if i > max_frags:
            break
        header = f"[{i}] {f.domain} | score={f.relevance_score:g} | {f.url}".rstrip()
        out.append(header)
        out.append((f.content or "").strip())
    return "\n\n".join(out)
