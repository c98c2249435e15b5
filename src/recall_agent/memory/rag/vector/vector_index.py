"""Async helpers for interacting with the Milvus vector index."""

from __future__ import annotations
import asyncio
import json
import threading
from typing import Iterable, List

import numpy as np
from pymilvus import (
    Collection,
    CollectionSchema,
    DataType,
    FieldSchema,
    connections,
    utility,
)

from recall_agent.config import milvus, rag
from ..model import Match, QueryResult, VectorRecord
import logging

logger = logging.getLogger(__name__)

_collection: Collection | None = None
_collection_loaded = False
_collection_lock = threading.Lock()

_ID_MAX_LEN = 512
_METADATA_FIELDS = ["text", "doc_id", "chunk_index"]


def _normalize(v) -> list[float]:
    """Return a length-normalized embedding as a writable list."""

    # ``np.asarray`` can return a read-only view for buffer-backed inputs and
    # ``np.nan_to_num(copy=False)`` writes in place, so copy up-front.
    v = np.array(v, dtype=np.float32, copy=True)
    if v.shape != (rag.EMB_DIM,):
        v = v.reshape(-1)
        if v.shape[0] != rag.EMB_DIM:
            raise ValueError(
                f"Expected embedding of dim {rag.EMB_DIM}, got {v.shape[0]}"
            )
    np.nan_to_num(v, copy=False)
    n = float(np.linalg.norm(v))
    if n > 0:
        v /= n
    return v.tolist()


def _id_expr(ids: Iterable[str]) -> str:
    return f"id in {json.dumps(list(ids))}"


def _get_collection() -> Collection:
    """Return the singleton Milvus collection instance, connecting if needed."""

    global _collection, _collection_loaded

    if not milvus.ENABLE_MILVUS:
        raise RuntimeError("ENABLE_MILVUS is false; vector index is disabled")

    if _collection is not None and _collection_loaded:
        return _collection

    with _collection_lock:
        if _collection is not None and _collection_loaded:
            return _collection

        connections.connect(
            alias="default", uri=milvus.MILVUS_URI
        )
        name = milvus.MILVUS_COLLECTION

        index_params = {
            "index_type": "IVF_FLAT",
            "metric_type": "IP",
            "params": {"nlist": milvus.MILVUS_NLIST or 1024},
        }

        if not utility.has_collection(name):
            fields = [
                FieldSchema(
                    name="id",
                    dtype=DataType.VARCHAR,
                    is_primary=True,
                    auto_id=False,
                    max_length=_ID_MAX_LEN,
                ),
                FieldSchema(
                    name="embedding", dtype=DataType.FLOAT_VECTOR, dim=rag.EMB_DIM
                ),
                FieldSchema(
                    name="text", dtype=DataType.VARCHAR, max_length=milvus.MILVUS_TEXT_MAX_LEN
                ),
                FieldSchema(name="doc_id", dtype=DataType.VARCHAR, max_length=_ID_MAX_LEN),
                FieldSchema(name="chunk_index", dtype=DataType.INT64),
            ]
            schema = CollectionSchema(fields, description="Document chunk embeddings")
            _collection = Collection(name, schema)
            _collection.create_index("embedding", index_params)
        else:
            _collection = Collection(name)
            if not _collection.has_index():
                _collection.create_index("embedding", index_params)

        _collection.load()
        _collection_loaded = True

        return _collection


async def upsert(records: List[VectorRecord]) -> None:
    """Insert or replace ``records`` keyed by their id.

    Re-upserting an id overwrites the previous row instead of duplicating it.

    :param records: Records whose embeddings have length ``rag.EMB_DIM``.
    :returns: ``None``.
    """

    if not milvus.ENABLE_MILVUS:
        logger.info("ENABLE_MILVUS is false; skipping upsert")
        return

    if not records:
        return

    # Last write wins for ids repeated within one batch
    by_id = {r.id: r for r in records}
    ids = list(by_id)
    embeddings = [_normalize(r.embedding) for r in by_id.values()]
    texts = [str(r.metadata.get("text") or "") for r in by_id.values()]
    doc_ids = [str(r.metadata.get("doc_id") or "") for r in by_id.values()]
    indices = [int(r.metadata.get("index", -1)) for r in by_id.values()]

    def _run() -> None:
        col = _get_collection()
        col.delete(_id_expr(ids))  # idempotent upsert
        col.insert([ids, embeddings, texts, doc_ids, indices])

    await asyncio.to_thread(_run)


async def query(query_vec, top_k: int, *, return_metadata: bool = True) -> QueryResult:
    """Return the ``top_k`` nearest records to ``query_vec``.

    :param query_vec: Embedding vector to search with.
    :param top_k: Number of nearest neighbors to return.
    :param return_metadata: Include the stored ``text``/``doc_id``/``index``.
    :returns: :class:`QueryResult` with matches ordered by descending score.
    """

    if not milvus.ENABLE_MILVUS:
        logger.info("ENABLE_MILVUS is false; returning empty query results")
        return QueryResult()

    vec = _normalize(query_vec)

    def _run() -> QueryResult:
        col = _get_collection()
        res = col.search(
            data=[vec],
            anns_field="embedding",
            param={"metric_type": "IP", "params": {"nprobe": milvus.MILVUS_NPROBE}},
            limit=top_k,
            output_fields=_METADATA_FIELDS if return_metadata else None,
            consistency_level="Strong",
        )
        hits = res[0] if res else []
        matches: List[Match] = []
        for h in hits:
            metadata = {}
            if return_metadata:
                metadata = {
                    "text": h.entity.get("text"),
                    "doc_id": h.entity.get("doc_id"),
                    "index": h.entity.get("chunk_index"),
                }
            matches.append(Match(id=str(h.id), score=float(h.score), metadata=metadata))
        return QueryResult(matches=matches)

    return await asyncio.to_thread(_run)



async def flush() -> None:
    """Persist pending writes to the Milvus collection.

    :returns: ``None``.
    """

    if not milvus.ENABLE_MILVUS:
        logger.info("ENABLE_MILVUS is false; skipping flush")
        return

    await asyncio.to_thread(lambda: _get_collection().flush())
