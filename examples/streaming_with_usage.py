"""
Example: Streaming with Usage Data

Streams a completion from each configured provider and prints the token usage
carried by the terminal fragment. Reasoning models also stream their trace.
"""

import asyncio

from chatbridge_sdk import ChatBridgeClient, ChatMessage, MessageRole


async def example_basic_streaming_with_usage(client: ChatBridgeClient, provider: str):
    """Stream one answer and report usage from the final fragment."""
    print(f"=== Streaming from {provider} ===\n")

    config = client.get_default_config(provider)
    if config is None:
        print(f"{provider} is not configured, skipping")
        return

    usage = None
    async for fragment in client.stream_chat(
        provider,
        [{"role": "user", "content": "Write a haiku about Python programming"}],
        config.model_copy(update={"max_tokens": 100}),
    ):
        print(fragment.content, end="", flush=True)
        if fragment.done:
            usage = fragment.usage

    print("\n\nUsage information:")
    if usage is None:
        print("  Not reported by this provider")
    else:
        print(f"  Prompt tokens: {usage.prompt_tokens}")
        print(f"  Completion tokens: {usage.completion_tokens}")
        print(f"  Total tokens: {usage.total_tokens}")


async def example_reasoning_stream(client: ChatBridgeClient):
    """Reasoning deltas arrive beside the answer text."""
    print("\n=== Reasoning Stream (Claude) ===\n")

    config = client.get_default_config("claude")
    if config is None:
        print("claude is not configured, skipping")
        return

    messages = [
        ChatMessage(role=MessageRole.SYSTEM, content="Keep answers short."),
        ChatMessage(role=MessageRole.USER, content="What is 17 * 23?"),
    ]
    config = config.model_copy(update={
        "model": "claude-sonnet-4-20250514",
        "enable_thinking": True,
        "thinking_budget": 2048,
    })

    thinking, answer = [], []
    async for fragment in client.stream_chat("claude", messages, config):
        if fragment.thinking:
            thinking.append(fragment.thinking.content)
        answer.append(fragment.content)

    print(f"Thinking: {''.join(thinking)}")
    print(f"Answer: {''.join(answer)}")


async def main():
    """Run all examples."""
    client = ChatBridgeClient()

    for provider in ("openai", "gemini", "ollama"):
        await example_basic_streaming_with_usage(client, provider)
        print("\n" + "=" * 50 + "\n")

    await example_reasoning_stream(client)


if __name__ == "__main__":
    asyncio.run(main())
