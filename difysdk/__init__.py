"""Synchronous client for the Dify application API: chat, conversations, messages, parameters and workflows."""

__version__ = "0.1.0"
__all__ = ["__version__"]