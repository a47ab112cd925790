"""Tests for the per-family thinking adapters and their registry."""

import pytest

from chatbridge_sdk.models.conversation_types import ChatMessage, MessageRole
from chatbridge_sdk.models.generation import GenerationConfig, ProviderType
from chatbridge_sdk.models.thinking import ReasoningTrace
from chatbridge_sdk.thinking.claude import ClaudeThinkingAdapter
from chatbridge_sdk.thinking.gemini import GeminiThinkingAdapter
from chatbridge_sdk.thinking.grok import GrokThinkingAdapter
from chatbridge_sdk.thinking.ollama import OllamaThinkingAdapter
from chatbridge_sdk.thinking.openai import OpenAIResponsesThinkingAdapter, OpenAIThinkingAdapter
from chatbridge_sdk.thinking.registry import THINKING_ADAPTERS, get_thinking_adapter, has_thinking_adapter

ALL_ADAPTERS = [
    OpenAIThinkingAdapter,
    OpenAIResponsesThinkingAdapter,
    ClaudeThinkingAdapter,
    GeminiThinkingAdapter,
    GrokThinkingAdapter,
    OllamaThinkingAdapter,
]

USER = [ChatMessage(role=MessageRole.USER, content="What is 2+2?")]


class TestSupportsThinking:

    @pytest.mark.parametrize("adapter_class", ALL_ADAPTERS)
    @pytest.mark.parametrize("model_id", [None, "", "totally-unknown-model"])
    def test_unknown_models_are_not_reasoning(self, adapter_class, model_id):
        assert adapter_class().supports_thinking(model_id) is False

    @pytest.mark.parametrize("adapter_class,model_id,expected", [
        (OpenAIThinkingAdapter, "o1-preview", True),
        (OpenAIThinkingAdapter, "o3-mini", True),
        (OpenAIThinkingAdapter, "gpt-5", True),
        (OpenAIThinkingAdapter, "gpt-4o", False),
        (ClaudeThinkingAdapter, "claude-3-7-sonnet-20250219", True),
        (ClaudeThinkingAdapter, "claude-opus-4-20250514", True),
        (ClaudeThinkingAdapter, "claude-3-5-sonnet-20241022", False),
        (GeminiThinkingAdapter, "gemini-2.0-flash-thinking-exp", True),
        (GeminiThinkingAdapter, "gemini-2.5-flash-thinking", True),
        (GeminiThinkingAdapter, "gemini-2.5-pro", False),
        (GrokThinkingAdapter, "grok-3-mini", True),
        (GrokThinkingAdapter, "grok-2-1212", False),
        (OllamaThinkingAdapter, "deepseek-r1:14b", True),
        (OllamaThinkingAdapter, "qwen3-thinking", True),
        (OllamaThinkingAdapter, "llama3.3", False),
    ])
    def test_known_families(self, adapter_class, model_id, expected):
        assert adapter_class().supports_thinking(model_id) is expected

    def test_case_insensitive(self):
        assert OpenAIThinkingAdapter().supports_thinking("O3-MINI") is True


class TestOpenAIThinking:

    def test_plain_model_request_untouched(self):
        config = GenerationConfig(model="gpt-4o", temperature=0.4, reasoning_effort="high")
        request = OpenAIThinkingAdapter().build_thinking_request(USER, config)
        assert request["temperature"] == 0.4
        assert "reasoning_effort" not in request

    def test_reasoning_model_drops_sampling(self):
        config = GenerationConfig(model="o1", temperature=0.4, top_p=0.9, frequency_penalty=0.1,
                                  presence_penalty=0.1, reasoning_effort="bogus")
        request = OpenAIThinkingAdapter().build_thinking_request(USER, config)
        for field in ("temperature", "top_p", "frequency_penalty", "presence_penalty", "reasoning_effort"):
            assert field not in request
        assert request["max_completion_tokens"] == 2000

    def test_extract_priority_root_first(self):
        raw = {
            "reasoning_content": "root",
            "choices": [{"message": {"content": "4", "reasoning_content": "message"}}],
        }
        assert OpenAIThinkingAdapter().extract_thinking(raw).content == "root"

    def test_extract_reasoning_items_joined(self):
        raw = {
            "reasoning": {"effort": "low"},
            "output": [
                {"type": "reasoning", "id": "rs_1", "content": [{"text": "step one"}],
                 "summary": [{"text": "short"}]},
                {"type": "reasoning", "id": "rs_2", "content": [{"text": "step two"}]},
                {"type": "message", "content": [{"type": "output_text", "text": "4"}]},
            ],
        }
        trace = OpenAIThinkingAdapter().extract_thinking(raw)
        assert trace.content == "step one\nstep two"
        assert trace.summary == "short"
        assert trace.effort == "low"
        assert trace.provider_data["reasoning_item_ids"] == ["rs_1", "rs_2"]

    def test_extract_absent_is_none(self):
        raw = {"choices": [{"message": {"content": "4"}}]}
        assert OpenAIThinkingAdapter().extract_thinking(raw) is None

    def test_stream_chunk(self):
        chunk = {"choices": [{"delta": {"reasoning_content": "hmm"}, "finish_reason": None}]}
        decoded = OpenAIThinkingAdapter().extract_stream_thinking(chunk)
        assert decoded.thinking == "hmm"
        assert decoded.content is None
        assert decoded.done is False

    def test_validation_warnings(self):
        config = GenerationConfig(model="o3", temperature=0.5, reasoning_effort="extreme", max_tokens=200000)
        warnings = OpenAIThinkingAdapter().validate_reasoning_config(config).warnings
        assert len(warnings) == 3
        assert any("temperature" in w for w in warnings)
        assert any("extreme" in w for w in warnings)

    def test_effort_on_plain_model_warns(self):
        config = GenerationConfig(model="gpt-4o", reasoning_effort="low")
        warnings = OpenAIThinkingAdapter().validate_reasoning_config(config).warnings
        assert warnings == ["Model gpt-4o does not support reasoning; reasoning_effort will be ignored"]


class TestResponsesThinking:

    def test_reasoning_object(self):
        request = OpenAIResponsesThinkingAdapter().build_thinking_request(
            USER, GenerationConfig(model="o4-mini", reasoning_effort="minimal")
        )
        assert request["reasoning"] == {"summary": "auto", "effort": "minimal"}
        assert request["input"][0]["content"] == [{"type": "input_text", "text": "What is 2+2?"}]


class TestClaudeThinking:

    def test_no_controls_without_enable(self):
        request = ClaudeThinkingAdapter().build_thinking_request(USER, GenerationConfig(model="claude-opus-4"))
        assert "thinking" not in request
        assert request["temperature"] == 0.7

    def test_zero_budget_disables(self):
        config = GenerationConfig(model="claude-opus-4", enable_thinking=True, thinking_budget=0)
        assert "thinking" not in ClaudeThinkingAdapter().build_thinking_request(USER, config)

    @pytest.mark.parametrize("budget,expected", [(None, 4096), (-1, 4096), (100, 1024), (8000, 8000)])
    def test_budget_resolution(self, budget, expected):
        config = GenerationConfig(model="claude-opus-4", thinking_budget=budget)
        assert ClaudeThinkingAdapter().resolve_budget(config) == expected

    def test_max_tokens_kept_when_above_budget(self):
        config = GenerationConfig(model="claude-opus-4", enable_thinking=True, max_tokens=10000)
        request = ClaudeThinkingAdapter().build_thinking_request(USER, config)
        assert request["max_tokens"] == 10000
        assert request["thinking"]["budget_tokens"] == 4096

    def test_extract_joins_blocks_and_keeps_last_signature(self):
        raw = {"content": [
            {"type": "thinking", "thinking": "first", "signature": "s1"},
            {"type": "redacted_thinking", "data": "xxx"},
            {"type": "thinking", "thinking": "second", "signature": "s2"},
            {"type": "text", "text": "4"},
        ]}
        trace = ClaudeThinkingAdapter().extract_thinking(raw)
        assert trace.content == "first\nsecond"
        assert trace.signature == "s2"
        assert trace.provider_data == {"redacted_blocks": 1}

    def test_extract_without_blocks(self):
        assert ClaudeThinkingAdapter().extract_thinking({"content": [{"type": "text", "text": "4"}]}) is None

    def test_stream_events(self):
        adapter = ClaudeThinkingAdapter()
        assert adapter.extract_stream_thinking(
            {"type": "content_block_delta", "delta": {"type": "thinking_delta", "thinking": "t"}}
        ).thinking == "t"
        assert adapter.extract_stream_thinking(
            {"type": "content_block_delta", "delta": {"type": "text_delta", "text": "x"}}
        ).content == "x"
        assert adapter.extract_stream_thinking(
            {"type": "content_block_delta", "delta": {"type": "signature_delta", "signature": "s"}}
        ).signature == "s"
        assert adapter.extract_stream_thinking(
            {"type": "content_block_delta", "delta": {"type": "input_json_delta", "partial_json": "{"}}
        ) == adapter.extract_stream_thinking({"type": "ping"})
        assert adapter.extract_stream_thinking({"type": "message_stop"}).done is True

    def test_replayed_context_keeps_trace(self):
        trace = ReasoningTrace(content="t", signature="s")
        messages = [ChatMessage(role=MessageRole.ASSISTANT, content="4", thinking=trace)]
        assert ClaudeThinkingAdapter().prepare_context_with_thinking(messages)[0].thinking == trace

    def test_other_families_strip_trace(self):
        messages = [ChatMessage(role=MessageRole.ASSISTANT, content="4", thinking=ReasoningTrace(content="t"))]
        prepared = OpenAIThinkingAdapter().prepare_context_with_thinking(messages)
        assert prepared[0].thinking is None
        assert messages[0].thinking is not None

    def test_validation(self):
        config = GenerationConfig(model="claude-opus-4", thinking_budget=500, temperature=0.5, top_p=0.5)
        warnings = ClaudeThinkingAdapter().validate_reasoning_config(config).warnings
        assert len(warnings) == 3
        assert "1024" in warnings[0]


class TestGeminiThinking:

    def test_controls(self):
        config = GenerationConfig(model="gemini-2.5-flash-thinking", include_thoughts=False)
        request = GeminiThinkingAdapter().build_thinking_request(USER, config)
        assert request["generationConfig"]["thinkingConfig"] == {"includeThoughts": False}

    def test_no_controls_requested(self):
        request = GeminiThinkingAdapter().build_thinking_request(
            USER, GenerationConfig(model="gemini-2.5-flash-thinking")
        )
        assert "thinkingConfig" not in request["generationConfig"]

    def test_extract(self):
        raw = {
            "candidates": [{"content": {"parts": [
                {"text": "a", "thought": True},
                {"text": "b", "thought": True},
                {"text": "answer"},
            ]}}],
            "thoughtSignatures": ["root-sig"],
            "usageMetadata": {"thoughtsTokenCount": 7},
        }
        trace = GeminiThinkingAdapter().extract_thinking(raw)
        assert trace.content == "a\nb"
        assert trace.signature == "root-sig"
        assert trace.tokens == 7

    def test_extract_none(self):
        assert GeminiThinkingAdapter().extract_thinking({"candidates": []}) is None

    @pytest.mark.parametrize("reason,done", [("STOP", True), ("MAX_TOKENS", True), ("SAFETY", True),
                                             ("PROHIBITED_CONTENT", True), ("BLOCKLIST", True),
                                             (None, False), ("FINISH_REASON_UNSPECIFIED", False)])
    def test_stream_done(self, reason, done):
        candidate = {"content": {"parts": [{"text": "x"}]}}
        if reason:
            candidate["finishReason"] = reason
        assert GeminiThinkingAdapter().extract_stream_thinking({"candidates": [candidate]}).done is done

    def test_validation(self):
        config = GenerationConfig(model="gemini-2.5-flash-thinking", thinking_budget=0)
        warnings = GeminiThinkingAdapter().validate_reasoning_config(config).warnings
        assert len(warnings) == 2


class TestGrokThinking:

    def test_keeps_sampling(self):
        config = GenerationConfig(model="grok-4", temperature=0.3, reasoning_mode="ENABLED")
        request = GrokThinkingAdapter().build_thinking_request(USER, config)
        assert request["temperature"] == 0.3
        assert request["reasoning_mode"] == "enabled"

    def test_root_reasoning(self):
        raw = {"reasoning_content": "root", "reasoning_mode": "auto", "choices": [{"message": {"content": "4"}}]}
        trace = GrokThinkingAdapter().extract_thinking(raw)
        assert trace.content == "root"
        assert trace.provider_data == {"reasoning_mode": "auto"}

    def test_disabled_mode_warning(self):
        config = GenerationConfig(model="grok-3", reasoning_mode="disabled", enable_thinking=True)
        warnings = GrokThinkingAdapter().validate_reasoning_config(config).warnings
        assert any("disabled" in w for w in warnings)


class TestOllamaThinking:

    def test_extract_order(self):
        raw = {
            "message": {"content": "4", "reasoning_content": "first", "thinking": "second"},
            "reasoning_content": "third",
        }
        trace = OllamaThinkingAdapter().extract_thinking(raw)
        assert trace.content == "first"
        assert trace.provider_data == {"type": "ollama_reasoning_content"}

    def test_root_fallback(self):
        trace = OllamaThinkingAdapter().extract_thinking({"message": {"content": "4"}, "reasoning_content": "r"})
        assert trace.provider_data == {"type": "ollama_root_reasoning_content"}

    def test_validation_only_for_reasoning_models(self):
        adapter = OllamaThinkingAdapter()
        assert adapter.validate_reasoning_config(GenerationConfig(model="llama3.3")).warnings == []
        warnings = adapter.validate_reasoning_config(GenerationConfig(model="deepseek-r1", num_ctx=2048)).warnings
        assert len(warnings) == 3


class TestRegistry:

    def test_every_provider_has_adapter(self):
        assert set(THINKING_ADAPTERS) == set(ProviderType)

    def test_fresh_instances(self):
        first = get_thinking_adapter("claude")
        assert isinstance(first, ClaudeThinkingAdapter)
        assert get_thinking_adapter(ProviderType.CLAUDE) is not first

    def test_unknown_provider(self):
        assert has_thinking_adapter("mistral") is False
        with pytest.raises(ValueError):
            get_thinking_adapter("mistral")
