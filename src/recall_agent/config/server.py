import os


class Server:
    def __init__(self, config: dict | None = None) -> None:
        server_cfg = (config or {}).get("recallagent", {}).get("server", {})
        self.HOST: str = str(server_cfg.get("host", os.getenv("SERVER_HOST", "127.0.0.1")))
        self.PORT: int = int(server_cfg.get("port", os.getenv("SERVER_PORT", "8787")))
        self.LOG_LEVEL: str = str(server_cfg.get("log_level", os.getenv("SERVER_LOG_LEVEL", "info")))
