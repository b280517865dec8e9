from __future__ import annotations

import asyncio
from collections.abc import Iterable
from typing import Any

from langchain_core.callbacks import (
    AsyncCallbackManagerForRetrieverRun,
    CallbackManagerForRetrieverRun,
)
from langchain_core.documents import Document
from langchain_core.retrievers import BaseRetriever

from src.domain.document import ResultFragment


def fragment_to_document(fragment: ResultFragment) -> Document:
    return Document(
        page_content=fragment.content,
        metadata={
            "source": fragment.url,
            "domain": fragment.domain,
            "url": fragment.url,
            "relevance_score": fragment.relevance_score,
            "is_full_document": fragment.is_full_document,
        },
    )


def fragments_to_documents(fragments: Iterable[ResultFragment]) -> list[Document]:
    return [fragment_to_document(f) for f in fragments]


class PermawebDocsRetriever(BaseRetriever):
    """LangChain retriever backed by the documentation query engine.

    ``engine`` is a ``DocsQueryUseCase`` (typed loosely so pydantic does not try
    to validate the dataclass).
    """

    engine: Any
    domains: list[str] | None = None
    max_results: int | None = None

    async def _aget_relevant_documents(
        self, query: str, *, run_manager: AsyncCallbackManagerForRetrieverRun
    ) -> list[Document]:
        fragments = await self.engine.query(
            query, domains=self.domains, max_results=self.max_results
        )
        return fragments_to_documents(fragments)

    def _get_relevant_documents(
        self, query: str, *, run_manager: CallbackManagerForRetrieverRun
    ) -> list[Document]:
        try:
            asyncio.get_running_loop()
        except RuntimeError:
            fragments = asyncio.run(
                self.engine.query(query, domains=self.domains, max_results=self.max_results)
            )
        else:
            raise RuntimeError(
                "PermawebDocsRetriever.invoke() cannot run inside an event loop; use ainvoke()"
            )
        return fragments_to_documents(fragments)
