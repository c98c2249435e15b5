from recall_agent.memory.log import Turn
from recall_agent.memory.rag import MemorySnippet
from recall_agent.response.assembler import assemble


def _turns():
    return [
        Turn(id=1, role="user", content="hi", timestamp=1),
        Turn(id=2, role="assistant", content="hello", timestamp=2),
        Turn(id=3, role="user", content="what is x?", timestamp=3),
    ]


def test_system_prompt_then_history_in_order():
    messages = assemble(_turns(), [], "be helpful")
    assert messages == [
        {"role": "system", "content": "be helpful"},
        {"role": "user", "content": "hi"},
        {"role": "assistant", "content": "hello"},
        {"role": "user", "content": "what is x?"},
    ]


def test_memory_is_appended_after_history():
    memory = [MemorySnippet("x is 1", 0.9), MemorySnippet("x is odd", 0.5)]
    messages = assemble(_turns(), memory, "be helpful")

    assert len(messages) == 5
    assert messages[-1] == {
        "role": "system",
        "content": "Relevant memory:\nx is 1\n---\nx is odd",
    }
    assert messages[3]["content"] == "what is x?"


def test_no_history_no_memory():
    assert assemble([], [], "sys") == [{"role": "system", "content": "sys"}]
