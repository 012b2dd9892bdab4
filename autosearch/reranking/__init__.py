"""LLM re-ranking of heuristic job matches.

This module provides:
- Reranker: blends heuristic scores with a batched LLM judgment
- ChatCompletionClient / OpenAIChatClient: injected chat model clients
- build_chat_client: client factory honouring configuration and API key
"""

from .llm import ChatCompletionClient, OpenAIChatClient, build_chat_client
from .reranker import (
    FALLBACK_EXPLANATION,
    OMITTED_EXPLANATION,
    Reranker,
    blend_scores,
    filter_highlighted_skills,
)
from .schema import RerankResponse, RerankResult, parse_rerank_response

__all__ = [
    "Reranker",
    "blend_scores",
    "filter_highlighted_skills",
    "FALLBACK_EXPLANATION",
    "OMITTED_EXPLANATION",
    "ChatCompletionClient",
    "OpenAIChatClient",
    "build_chat_client",
    "RerankResult",
    "RerankResponse",
    "parse_rerank_response",
]
