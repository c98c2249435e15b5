import os
from pathlib import Path

_DATA_DIR = Path(__file__).resolve().parent.parent.parent.parent / "data"
_DEFAULT_SQLITE_PATH = _DATA_DIR / "memory.db"
_DEFAULT_SESSION_DIR = _DATA_DIR / "sessions"


class Rag:
    def __init__(self, config: dict | None = None) -> None:
        rag_cfg = (config or {}).get("recallagent", {}).get("retrieval", {})
        self.SQL_DB_DIR: str = str(rag_cfg.get("sql_db_dir", os.getenv("SQL_DB_DIR", str(_DEFAULT_SQLITE_PATH))))
        self.SESSION_DB_DIR: str = str(
            rag_cfg.get("session_db_dir", os.getenv("SESSION_DB_DIR", str(_DEFAULT_SESSION_DIR)))
        )
        self.EMB_MODEL_ID: str = str(rag_cfg.get("emb_model_id", os.getenv("EMB_MODEL_ID", "text-embedding-3-small")))
        self.EMB_DIM: int = int(rag_cfg.get("emb_dim", os.getenv("EMB_DIM", "1536")))
        self.CHUNK_SIZE: int = int(rag_cfg.get("chunk_size", os.getenv("CHUNK_SIZE", "800")))
        self.INGEST_CONCURRENCY: int = int(
            rag_cfg.get("ingest_concurrency", os.getenv("INGEST_CONCURRENCY", "4"))
        )
        self.STEP_MAX_ATTEMPTS: int = int(rag_cfg.get("step_max_attempts", os.getenv("STEP_MAX_ATTEMPTS", "3")))
        self.STEP_INITIAL_DELAY: float = float(
            rag_cfg.get("step_initial_delay", os.getenv("STEP_INITIAL_DELAY", "1.0"))
        )
        self.STEP_BACKOFF: float = float(rag_cfg.get("step_backoff", os.getenv("STEP_BACKOFF", "2.0")))
        self.STEP_MAX_DELAY: float = float(rag_cfg.get("step_max_delay", os.getenv("STEP_MAX_DELAY", "30.0")))

        if self.CHUNK_SIZE < 1:
            raise ValueError("CHUNK_SIZE must be >= 1")
