"""
Readability-style main content extraction.

Pipeline: JSON-LD collection, preprocessing, metadata extraction, then up to
four scoring/selection/cleaning attempts with progressively relaxed
strictness flags.
"""

from .cleaner import ContentCleaner, is_data_table, titles_match
from .engine import Readability, parse
from .flags import MAX_ATTEMPTS, RetryState, StrictnessFlags, next_state
from .models import Article, Candidate
from .preprocessor import Preprocessor
from .scoring import CandidateScorer, rank_candidates
from .selector import ArticleSelector, Selection

__all__ = [
    "Article",
    "ArticleSelector",
    "Candidate",
    "CandidateScorer",
    "ContentCleaner",
    "MAX_ATTEMPTS",
    "Preprocessor",
    "Readability",
    "RetryState",
    "Selection",
    "StrictnessFlags",
    "is_data_table",
    "next_state",
    "parse",
    "rank_candidates",
    "titles_match",
]
