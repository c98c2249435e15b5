"""Value types shared by retrieval and ingestion."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List


@dataclass(frozen=True, slots=True)
class Chunk:
    """Contiguous slice of a document; ``index`` is its position in the document."""

    doc_id: str
    index: int
    text: str

    @property
    def record_id(self) -> str:
        return record_id(self.doc_id, self.index)


@dataclass(slots=True)
class VectorRecord:
    id: str
    embedding: List[float]
    metadata: Dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_chunk(cls, chunk: Chunk, embedding: List[float]) -> "VectorRecord":
        return cls(
            id=chunk.record_id,
            embedding=list(embedding),
            metadata={"text": chunk.text, "doc_id": chunk.doc_id, "index": chunk.index},
        )


@dataclass(frozen=True, slots=True)
class Match:
    """Single nearest-neighbour hit as reported by the vector index."""

    id: str
    score: float
    metadata: Dict[str, Any] = field(default_factory=dict)


@dataclass(slots=True)
class QueryResult:
    matches: List[Match] = field(default_factory=list)


@dataclass(frozen=True, slots=True)
class MemorySnippet:
    text: str
    score: float
    source_metadata: Dict[str, Any] = field(default_factory=dict)


def record_id(doc_id: str, index: int) -> str:
    """Deterministic vector id for chunk ``index`` of ``doc_id``."""
    return f"{doc_id}:{index}"
