import logging
import os

logger = logging.getLogger(__name__)

DEFAULT_SYSTEM_PROMPT = (
    "You are a helpful assistant. If memory is provided, ground your answer in it briefly."
)
DEFAULT_SUMMARY_PROMPT = "Summarize briefly in bullet points."
GREETING_TEXT = "👋 How can I help?"
APOLOGY_TEXT = "Sorry, I hit an error and couldn't answer. Try again in a moment."
EMPTY_RESPONSE_TEXT = "⚠️ empty response from model"


class Core:
    def __init__(self, config: dict | None = None) -> None:
        cfg = (config or {}).get("recallagent", {})
        models_cfg = cfg.get("models", {})
        limits_cfg = cfg.get("limits", {})
        prompts_cfg = cfg.get("prompts", {})

        openai_env = str(cfg.get("openai_key_env", "OPENAI_API_KEY"))
        self.OPENAI_API_KEY: str | None = os.getenv(openai_env)

        self.MSG_MODEL_ID: str | None = models_cfg.get("message_model") or os.getenv("MSG_MODEL_ID")
        self.SUMMARY_MODEL_ID: str | None = (
            models_cfg.get("summary_model") or os.getenv("SUMMARY_MODEL_ID") or self.MSG_MODEL_ID
        )

        self.HISTORY_WINDOW: int = int(limits_cfg.get("history_window", os.getenv("HISTORY_WINDOW", "12")))
        self.MEMORY_K: int = int(limits_cfg.get("memory_k", os.getenv("MEMORY_K", "4")))
        self.SUMMARY_WINDOW: int = int(limits_cfg.get("summary_window", os.getenv("SUMMARY_WINDOW", "50")))

        self.SYSTEM_PROMPT: str = str(
            prompts_cfg.get("system", os.getenv("SYSTEM_PROMPT", DEFAULT_SYSTEM_PROMPT))
        )
        self.SUMMARY_PROMPT: str = str(
            prompts_cfg.get("summary", os.getenv("SUMMARY_PROMPT", DEFAULT_SUMMARY_PROMPT))
        )
        self.GREETING: str = str(prompts_cfg.get("greeting", GREETING_TEXT))
        self.APOLOGY: str = str(prompts_cfg.get("apology", APOLOGY_TEXT))

        required = [
            ("OPENAI_API_KEY", self.OPENAI_API_KEY),
            ("MSG_MODEL_ID", self.MSG_MODEL_ID),
        ]
        missing = [name for name, val in required if not val]
        if missing:
            raise ValueError(f"Missing environment variables: {', '.join(missing)}")

        if self.HISTORY_WINDOW < 1:
            raise ValueError("HISTORY_WINDOW must be >= 1")
