import os


class Milvus:
    def __init__(self, config: dict | None = None) -> None:
        section = (config or {}).get("recallagent", {}).get("milvus", {})

        def setting(key: str, env: str, default: str):
            return section.get(key, os.getenv(env, default))

        self.ENABLE_MILVUS: bool = str(setting("enable", "ENABLE_MILVUS", "1")).lower() in ("1", "true", "yes")
        self.MILVUS_HOST: str = str(setting("host", "MILVUS_HOST", "127.0.0.1"))
        self.MILVUS_PORT: int = int(setting("port", "MILVUS_PORT", "19530"))
        self.MILVUS_COLLECTION: str = str(setting("collection", "MILVUS_COLLECTION", "documents"))

        # IVF_FLAT index / search tuning
        self.MILVUS_NLIST: int = int(setting("nlist", "MILVUS_NLIST", "1024"))
        self.MILVUS_NPROBE: int = int(setting("nprobe", "MILVUS_NPROBE", "32"))

        # Upper bound for the stored chunk text; chunks are far smaller in practice.
        self.MILVUS_TEXT_MAX_LEN: int = int(setting("text_max_len", "MILVUS_TEXT_MAX_LEN", "65535"))

    @property
    def MILVUS_URI(self) -> str:
        return f"http://{self.MILVUS_HOST}:{self.MILVUS_PORT}"
