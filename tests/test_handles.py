"""Tests for handles, descriptors and references."""

from typing import Callable

from llm_model_registry import ModelDescriptor, ModelHandle, ModelReference


def test_descriptor_request_name() -> None:
    assert ModelDescriptor("kimi").request_name == "kimi"
    assert ModelDescriptor("kimi", api_name="moonshotai/kimi-k2-instruct").request_name == "moonshotai/kimi-k2-instruct"


def test_reference_is_a_tuple() -> None:
    reference = ModelReference("openai", "gpt-4.1")
    provider, model = reference
    assert (provider, model) == ("openai", "gpt-4.1")


def test_handle_delegates_to_adapter(make_adapter: Callable) -> None:
    handle = ModelHandle(make_adapter("groq"), "qwen/qwen3-32b")
    messages = [{"role": "user", "content": "hi"}]

    response = handle(messages, temperature=0.2)

    assert response == {"provider": "groq", "model": "qwen/qwen3-32b", "messages": messages, "temperature": 0.2}
    assert handle.provider == "groq"
    assert repr(handle) == "ModelHandle(provider='groq', api_name='qwen/qwen3-32b')"


def test_handles_compare_by_identity(make_adapter: Callable) -> None:
    adapter = make_adapter("groq")
    first = ModelHandle(adapter, "qwen/qwen3-32b")
    second = ModelHandle(adapter, "qwen/qwen3-32b")

    assert first != second
    assert len({first, second}) == 2
