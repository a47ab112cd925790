"""CLI entry point for ChatBridge SDK."""

import argparse
import asyncio
import logging
import sys
from typing import Optional

from dotenv import load_dotenv

from .api.client import ChatBridgeClient
from .models.conversation_types import ChatMessage, MessageRole
from .providers.base import ChatBridgeError


def _default_config(client: ChatBridgeClient, provider: str, use_responses_api: bool = False):
    lookup = client.resolver.get_config(None, provider, use_responses_api)
    if not lookup.found:
        raise ChatBridgeError(lookup.error or client.resolver.get_config_error_message(provider))
    return lookup


async def chat(provider: str, model: str, prompt: str, stream: bool = False,
               temperature: Optional[float] = None, max_tokens: Optional[int] = None,
               thinking: bool = False, responses_api: bool = False) -> int:
    """Send one prompt and print the reply."""
    client = ChatBridgeClient()
    lookup = _default_config(client, provider, responses_api)

    params = {}
    if temperature is not None:
        params['temperature'] = temperature
    if max_tokens:
        params['max_tokens'] = max_tokens
    if thinking:
        params['enable_thinking'] = True
    if responses_api:
        params['use_responses_api'] = True
    config = client.resolver.to_generation_config(lookup, model, **params)
    messages = [ChatMessage(role=MessageRole.USER, content=prompt)]

    if stream:
        print(f"Streaming response from {provider}/{model}:\n")
        in_thinking = False
        async for fragment in client.stream_chat(lookup.resolved_provider, messages, config):
            if fragment.thinking and fragment.thinking.content:
                if not in_thinking:
                    print("[thinking] ", end='')
                    in_thinking = True
                print(fragment.thinking.content, end='', flush=True)
            if fragment.content:
                if in_thinking:
                    print("\n")
                    in_thinking = False
                print(fragment.content, end='', flush=True)
            if fragment.done and fragment.usage:
                print(f"\n\nTokens used: {fragment.usage.total_tokens}")
        print()
        return 0

    result = await client.chat(lookup.resolved_provider, messages, config)
    print(f"Response from {result.provider}/{result.model}:\n")
    if result.thinking:
        print(f"[thinking]\n{result.thinking.content}\n")
    print(result.content)
    if result.usage:
        print(f"\nTokens used: {result.usage.total_tokens}")
    return 0


async def list_models(provider: str) -> int:
    """List the chat models a provider exposes."""
    client = ChatBridgeClient()
    lookup = _default_config(client, provider)
    models = await client.list_models(lookup.resolved_provider, client.resolver.to_generation_config(lookup))

    print(f"Available {provider} models:")
    print("-" * 50)
    for model in models:
        print(f"{model.id}  ({model.display_name})")
    return 0


async def test_connection(provider: str) -> int:
    client = ChatBridgeClient()
    lookup = _default_config(client, provider)
    ok = await client.test_connection(lookup.resolved_provider, client.resolver.to_generation_config(lookup))
    print(f"{provider}: {'connected' if ok else 'connection failed'}")
    return 0 if ok else 1


def list_providers() -> int:
    client = ChatBridgeClient()
    for provider in client.get_supported_providers():
        configured = client.resolver.get_config(None, provider).found
        print(f"{'✓' if configured else '✗'} {provider}")
    return 0


def main(argv=None):
    """Main CLI function."""
    load_dotenv()

    parser = argparse.ArgumentParser(prog="chatbridge", description="ChatBridge SDK CLI")
    parser.add_argument('--verbose', '-v', action='store_true', help='Enable debug logging')
    subparsers = parser.add_subparsers(dest='command', help='Available commands')

    # Chat command
    chat_parser = subparsers.add_parser('chat', help='Send a prompt to a provider')
    chat_parser.add_argument('provider', help='Provider id (e.g., "openai", "claude")')
    chat_parser.add_argument('model', help='Model id (e.g., "gpt-4o")')
    chat_parser.add_argument('prompt', help='Text prompt')
    chat_parser.add_argument('--stream', action='store_true', help='Stream the response')
    chat_parser.add_argument('--temperature', type=float, help='Temperature (0.0-2.0)')
    chat_parser.add_argument('--max-tokens', type=int, help='Maximum tokens to generate')
    chat_parser.add_argument('--thinking', action='store_true', help='Request a reasoning trace')
    chat_parser.add_argument('--responses-api', action='store_true', help='Use the OpenAI Responses API')

    # List models command
    list_parser = subparsers.add_parser('list-models', help='List available models')
    list_parser.add_argument('provider', help='Provider id')

    # Test connection command
    test_parser = subparsers.add_parser('test-connection', help='Check provider credentials')
    test_parser.add_argument('provider', help='Provider id')

    subparsers.add_parser('providers', help='List supported providers')

    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s %(message)s",
    )

    try:
        if args.command == 'chat':
            code = asyncio.run(chat(
                args.provider,
                args.model,
                args.prompt,
                stream=args.stream,
                temperature=args.temperature,
                max_tokens=args.max_tokens,
                thinking=args.thinking,
                responses_api=args.responses_api,
            ))
        elif args.command == 'list-models':
            code = asyncio.run(list_models(args.provider))
        elif args.command == 'test-connection':
            code = asyncio.run(test_connection(args.provider))
        elif args.command == 'providers':
            code = list_providers()
        else:
            parser.print_help()
            code = 0
    except ChatBridgeError as e:
        print(f"Error: {e}", file=sys.stderr)
        code = 1

    sys.exit(code)


if __name__ == "__main__":
    main()
