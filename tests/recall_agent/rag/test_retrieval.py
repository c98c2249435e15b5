import pytest

from recall_agent.memory.rag import embeddings, retrieval
from recall_agent.memory.rag.model import Match, QueryResult
from recall_agent.memory.rag.vector import vector_index


@pytest.mark.asyncio
async def test_retrieve_maps_matches_and_drops_empty_text(monkeypatch, fake_embed):
    async def fake_query(vec, top_k, *, return_metadata=True):
        assert top_k == 4 and return_metadata
        return QueryResult(matches=[
            Match(id="d:0", score=0.9, metadata={"text": "alpha", "doc_id": "d"}),
            Match(id="d:1", score=0.8, metadata={"text": ""}),
            Match(id="d:2", score=0.7, metadata={}),
            Match(id="d:3", score=0.6, metadata={"text": "beta"}),
        ])

    monkeypatch.setattr(vector_index, "query", fake_query)
    snippets = await retrieval.retrieve("what is alpha?", 4)

    assert [s.text for s in snippets] == ["alpha", "beta"]
    assert [s.score for s in snippets] == [0.9, 0.6]
    assert snippets[0].source_metadata == {"doc_id": "d"}
    assert fake_embed == ["what is alpha?"]


@pytest.mark.asyncio
async def test_retrieve_caps_results_at_k(fake_index, fake_embed):
    from recall_agent.memory.rag.model import VectorRecord

    for i in range(6):
        fake_index.records[f"d:{i}"] = VectorRecord(id=f"d:{i}", embedding=[], metadata={"text": f"t{i}"})

    snippets = await retrieval.retrieve("q", 4)
    assert len(snippets) == 4


@pytest.mark.asyncio
async def test_retrieve_with_zero_k_skips_lookup(fake_index, fake_embed):
    assert await retrieval.retrieve("anything", 0) == []
    assert fake_embed == [] and fake_index.query_calls == []


@pytest.mark.asyncio
async def test_recall_swallows_embedding_failure(monkeypatch, fake_index):
    async def broken_embed(text):
        raise RuntimeError("embedding service down")

    monkeypatch.setattr(embeddings, "embed", broken_embed)
    assert await retrieval.recall("hello", 4) == []
    assert fake_index.query_calls == []


@pytest.mark.asyncio
async def test_recall_swallows_query_failure(monkeypatch, fake_embed):
    async def broken_query(*args, **kwargs):
        raise ConnectionError("vector index unreachable")

    monkeypatch.setattr(vector_index, "query", broken_query)
    assert await retrieval.recall("hello", 4) == []


@pytest.mark.asyncio
async def test_recall_swallows_malformed_response(monkeypatch, fake_embed):
    async def malformed_query(*args, **kwargs):
        return {"matches": "not a list"}

    monkeypatch.setattr(vector_index, "query", malformed_query)
    assert await retrieval.recall("hello", 4) == []


def test_format_memory_uses_separator():
    from recall_agent.memory.rag.model import MemorySnippet

    text = retrieval.format_memory([MemorySnippet("a", 1.0), MemorySnippet("b", 0.5)])
    assert text == "a\n---\nb"
