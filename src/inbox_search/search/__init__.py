"""Gmail-style search over mail threads.

The pipeline is ``tokenize`` -> ``parse`` -> ``matches``, with folder
bucketing for browsing and a suggestion engine for the search box.
"""

from .evaluator import derive_facts, is_search_active, latest_message, matches, select_threads
from .folders import Bucket, bucket_counts, classify, in_bucket
from .parser import parse, parse_query
from .suggestions import (
    DEFAULT_CATALOG,
    OperatorSuggestion,
    Suggestion,
    active_chips,
    apply_suggestion,
    suggestions,
)
from .tokenizer import tokenize

__all__ = [
    "DEFAULT_CATALOG",
    "Bucket",
    "OperatorSuggestion",
    "Suggestion",
    "active_chips",
    "apply_suggestion",
    "bucket_counts",
    "classify",
    "derive_facts",
    "in_bucket",
    "is_search_active",
    "latest_message",
    "matches",
    "parse",
    "parse_query",
    "select_threads",
    "suggestions",
    "tokenize",
]
