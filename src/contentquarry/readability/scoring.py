"""
Paragraph scoring and score propagation to candidate containers.
"""

from __future__ import annotations

import math
from typing import Dict, List, Optional

from bs4 import BeautifulSoup
from bs4.element import Tag

from ..config.config import ScoringThresholds
from ..dom.document import NodeIndex
from ..dom.utils import ancestors, attr, has_child_block_element, inner_text, link_density
from .constants import (
    COMMAS,
    DIV_WEIGHT_BLOCK,
    DIV_WEIGHT_PARAGRAPH,
    NEGATIVE,
    OK_MAYBE_CANDIDATE,
    PARAGRAPH_LIKE_TAGS,
    POSITIVE,
    SEED_TAGS,
    TAG_BASE_WEIGHTS,
    UNLIKELY_CANDIDATES,
    UNLIKELY_ROLES,
)
from .flags import StrictnessFlags
from .models import Candidate


def class_weight(tag: Tag, flags: StrictnessFlags, weight: float = 25.0) -> float:
    """Score contribution of the class and id attributes of ``tag``.

    Class and id are matched separately against the negative and positive
    patterns; each match adds or removes ``weight``. Zero unless
    ``WEIGHT_CLASSES`` is enabled.
    """
    if not flags & StrictnessFlags.WEIGHT_CLASSES:
        return 0.0

    total = 0.0
    for name in ("class", "id"):
        value = attr(tag, name)
        if not value:
            continue
        if NEGATIVE.search(value):
            total -= weight
        if POSITIVE.search(value):
            total += weight
    return total


def tag_weight(tag: Tag) -> float:
    if tag.name == "div":
        return DIV_WEIGHT_BLOCK if has_child_block_element(tag) else DIV_WEIGHT_PARAGRAPH
    return TAG_BASE_WEIGHTS.get(tag.name, 0.0)


def is_unlikely_candidate(tag: Tag) -> bool:
    """True if ``tag`` or an ancestor below ``<body>`` looks like page furniture."""
    role = attr(tag, "role").strip().lower()
    if role in UNLIKELY_ROLES:
        return True
    for node in (tag, *ancestors(tag)):
        if node.name == "body":
            break
        match_string = f"{attr(node, 'class')} {attr(node, 'id')}"
        if UNLIKELY_CANDIDATES.search(match_string) and not OK_MAYBE_CANDIDATE.search(match_string):
            return True
    return False


class CandidateScorer:
    """Scores paragraph-like seeds and propagates their scores to ancestors.

    The scorer never mutates the tree; every call builds a fresh candidate map
    keyed by ``NodeIndex`` handles.
    """

    def __init__(self, thresholds: Optional[ScoringThresholds] = None, link_density_modifier: float = 0.0) -> None:
        self.thresholds = thresholds or ScoringThresholds()
        self.link_density_modifier = link_density_modifier

    def score(self, soup: BeautifulSoup, index: NodeIndex, flags: StrictnessFlags) -> Dict[int, Candidate]:
        body = soup.body
        if body is None:
            return {}

        candidates: Dict[int, Candidate] = {}
        for seed in self.find_seeds(body, flags):
            text = inner_text(seed)
            content_score = self.content_score(text)

            targets: List[tuple[Tag, float]] = [(seed, content_score)]
            lineage = list(ancestors(seed, max_depth=2))
            if lineage:
                targets.append((lineage[0], content_score))
            if len(lineage) > 1:
                targets.append((lineage[1], content_score / self.thresholds.grandparent_divider))

            for node, share in targets:
                handle = index.get_handle(node)
                if handle is None:
                    continue
                candidate = candidates.get(handle)
                if candidate is None:
                    initial = tag_weight(node) + class_weight(node, flags, self.thresholds.class_weight)
                    candidate = Candidate(handle=handle, node=node, score=initial, initial_score=initial)
                    candidates[handle] = candidate
                candidate.score += share

        for candidate in candidates.values():
            candidate.score *= self.link_density_factor(candidate.node)
        return candidates

    def find_seeds(self, body: Tag, flags: StrictnessFlags) -> List[Tag]:
        """Return the paragraph-like elements below ``body`` that carry enough text."""
        seeds = []
        for tag in body.find_all(True):
            if tag.name in SEED_TAGS:
                pass
            elif tag.name in PARAGRAPH_LIKE_TAGS and not has_child_block_element(tag):
                pass
            else:
                continue
            if len(inner_text(tag)) < self.thresholds.min_paragraph_length:
                continue
            if flags & StrictnessFlags.STRIP_UNLIKELYS and is_unlikely_candidate(tag):
                continue
            seeds.append(tag)
        return seeds

    def content_score(self, text: str) -> float:
        """1 point per paragraph, 1 per comma and 1 per 100 characters (capped at 3)."""
        length_points = min(
            math.floor(len(text) / self.thresholds.chars_per_length_point),
            self.thresholds.max_length_points,
        )
        return 1.0 + len(COMMAS.findall(text)) + length_points

    def link_density_factor(self, node: Tag) -> float:
        factor = 1.0 - link_density(node) + self.link_density_modifier
        return max(0.0, min(1.0, factor))


def rank_candidates(candidates: Dict[int, Candidate], index: NodeIndex) -> List[Candidate]:
    """Order candidates by score, then shallower depth, then document position."""
    return sorted(
        candidates.values(),
        key=lambda candidate: (-candidate.score, index.depth(candidate.handle), candidate.handle),
    )
