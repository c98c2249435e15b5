import os


def _flag(raw) -> bool:
    return str(raw).lower() in ("1", "true", "yes")


class LocalLLM:
    """Optional Ollama backend used in place of the OpenAI Responses API."""

    def __init__(self, config: dict | None = None) -> None:
        section = (config or {}).get("recallagent", {}).get("local_llm", {})

        def setting(key: str, env: str, default: str):
            return section.get(key, os.getenv(env, default))

        self.USE_LOCAL: bool = _flag(setting("use_local", "USE_LOCAL", "0"))
        self.LOCAL_MODEL_ID: str = str(setting("model_id", "LOCAL_MODEL_ID", "gpt-oss:20b"))
        self.LOCAL_SERVER_URL: str = str(setting("server_url", "LOCAL_SERVER_URL", "http://localhost:11434"))
        self.LOCAL_TEMPERATURE: float = float(setting("temperature", "LOCAL_TEMPERATURE", "0.7"))
        # Passed through to Ollama as-is ("5m", "-1", ...).
        self.LOCAL_KEEP_ALIVE: str = str(setting("keep_alive", "LOCAL_KEEP_ALIVE", "5m"))
