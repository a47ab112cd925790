"""Core layers of the ChatBridge SDK.

- normalization: request parameters and usage numbers
- routing: provider aliasing and configuration resolution
"""

__all__ = []
