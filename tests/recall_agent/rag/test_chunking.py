import pytest

from recall_agent.memory.rag.chunking import chunk_document, chunk_text


@pytest.mark.parametrize("size", [1, 3, 7, 800])
@pytest.mark.parametrize(
    "doc",
    ["", "a", "hello world", "x" * 799, "y" * 800, "z" * 801, "ünïcødé 🙂 " * 150],
)
def test_chunks_reconstruct_document(doc, size):
    chunks = chunk_text(doc, size)
    assert "".join(chunks) == doc
    assert all(len(c) == size for c in chunks[:-1])
    if chunks:
        assert 0 < len(chunks[-1]) <= size


def test_two_thousand_chars_make_three_chunks():
    chunks = chunk_text("q" * 2000, 800)
    assert [len(c) for c in chunks] == [800, 800, 400]


def test_empty_text_has_no_chunks():
    assert chunk_text("", 800) == []


def test_invalid_size_rejected():
    with pytest.raises(ValueError):
        chunk_text("abc", 0)


def test_chunk_document_assigns_indices_and_ids():
    chunks = chunk_document("doc", "abcdefg", 3)
    assert [(c.index, c.text) for c in chunks] == [(0, "abc"), (1, "def"), (2, "g")]
    assert [c.record_id for c in chunks] == ["doc:0", "doc:1", "doc:2"]
