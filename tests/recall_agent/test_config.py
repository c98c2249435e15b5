import pytest

from recall_agent.config.core import Core
from recall_agent.config.loader import load_raw_config
from recall_agent.config.local_llm import LocalLLM
from recall_agent.config.milvus import Milvus
from recall_agent.config.rag import Rag


def test_missing_required_settings_raise(monkeypatch):
    monkeypatch.delenv("MSG_MODEL_ID", raising=False)
    with pytest.raises(ValueError, match="MSG_MODEL_ID"):
        Core({})


def test_toml_values_override_environment(tmp_path, monkeypatch):
    monkeypatch.setenv("HISTORY_WINDOW", "30")
    path = tmp_path / "config.toml"
    path.write_text(
        '[recallagent.models]\nmessage_model = "gpt-test"\n'
        "[recallagent.limits]\nhistory_window = 6\nmemory_k = 2\n"
        "[recallagent.retrieval]\nchunk_size = 100\n",
        encoding="utf-8",
    )
    raw = load_raw_config(path)

    core = Core(raw)
    assert core.MSG_MODEL_ID == "gpt-test"
    assert core.HISTORY_WINDOW == 6
    assert core.MEMORY_K == 2
    assert Rag(raw).CHUNK_SIZE == 100


def test_defaults(monkeypatch):
    for name in ("HISTORY_WINDOW", "MEMORY_K", "SUMMARY_WINDOW", "CHUNK_SIZE"):
        monkeypatch.delenv(name, raising=False)
    core = Core({})
    assert (core.HISTORY_WINDOW, core.MEMORY_K, core.SUMMARY_WINDOW) == (12, 4, 50)
    assert Rag({}).CHUNK_SIZE == 800


def test_missing_config_file_is_empty(tmp_path):
    assert load_raw_config(tmp_path / "absent.toml") == {}


def test_invalid_chunk_size_rejected(monkeypatch):
    monkeypatch.setenv("CHUNK_SIZE", "0")
    with pytest.raises(ValueError):
        Rag({})


def test_config_path_from_environment(tmp_path, monkeypatch):
    path = tmp_path / "custom.toml"
    path.write_text('[recallagent.server]\nport = 9000\n', encoding="utf-8")
    monkeypatch.setenv("RECALL_AGENT_CONFIG", str(path))

    assert load_raw_config() == {"recallagent": {"server": {"port": 9000}}}


def test_milvus_section(monkeypatch):
    monkeypatch.delenv("MILVUS_PORT", raising=False)
    cfg = Milvus({"recallagent": {"milvus": {"enable": "false", "host": "milvus.internal"}}})

    assert cfg.ENABLE_MILVUS is False
    assert cfg.MILVUS_URI == "http://milvus.internal:19530"


def test_local_llm_flags_from_environment(monkeypatch):
    monkeypatch.setenv("USE_LOCAL", "yes")
    monkeypatch.setenv("LOCAL_TEMPERATURE", "0.2")
    cfg = LocalLLM({})

    assert cfg.USE_LOCAL is True
    assert cfg.LOCAL_TEMPERATURE == 0.2
