"""Additional validation utilities for configuration."""

import warnings
from typing import Any, Dict, List


def check_for_warnings(config_dict: Dict[str, Any]) -> List[str]:
    """
    Check configuration for potential issues and return warnings.

    Args:
        config_dict: Raw configuration dictionary

    Returns:
        List of warning messages
    """
    warning_messages = []

    matching = config_dict.get("matching", {})
    if isinstance(matching, dict):
        retrieval_limit = matching.get("retrieval_limit", 200)
        pool_size = matching.get("rerank_pool_size", 50)

        # A pool larger than the retrieval limit can never be filled
        if isinstance(retrieval_limit, int) and isinstance(pool_size, int):
            if pool_size > retrieval_limit:
                warning_messages.append(
                    f"rerank_pool_size ({pool_size}) exceeds retrieval_limit ({retrieval_limit}); "
                    f"at most {retrieval_limit} jobs will be re-ranked"
                )

        if isinstance(retrieval_limit, int) and retrieval_limit > 1000:
            warning_messages.append(
                f"Large retrieval_limit ({retrieval_limit}) may slow down heuristic scoring"
            )

        if isinstance(pool_size, int) and pool_size > 50:
            warning_messages.append(
                f"Large rerank_pool_size ({pool_size}) increases LLM prompt size and cost"
            )

        scan_workers = matching.get("scan_workers", 1)
        if isinstance(scan_workers, int) and scan_workers > 16:
            warning_messages.append(
                f"High scan_workers ({scan_workers}) rarely speeds up the similarity scan"
            )

    llm = config_dict.get("llm", {})
    if isinstance(llm, dict):
        temperature = llm.get("temperature", 0.3)
        if isinstance(temperature, (int, float)) and temperature > 1.0:
            warning_messages.append(
                f"High llm.temperature ({temperature}) makes re-ranking scores less stable"
            )

    embeddings = config_dict.get("embeddings", {})
    if isinstance(embeddings, dict) and embeddings.get("provider") == "hashing":
        warning_messages.append(
            "Hashing embeddings are lexical only; use the openai provider for semantic retrieval"
        )

    return warning_messages


def emit_warnings(warning_messages: List[str]) -> None:
    """
    Emit warning messages using Python's warnings module.

    Args:
        warning_messages: List of warning messages to emit
    """
    for message in warning_messages:
        warnings.warn(message, UserWarning, stacklevel=2)
