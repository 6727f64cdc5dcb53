# Model clients, request types and the streaming decoder.

from .clients import EchoDevClient, GeminiClient, ModelClient, create_model, provider_for
from .decoder import StreamDecoder, decode_stream, gemini_text
from .types import Message

__all__ = [
    "EchoDevClient",
    "GeminiClient",
    "Message",
    "ModelClient",
    "StreamDecoder",
    "create_model",
    "decode_stream",
    "gemini_text",
    "provider_for",
]
