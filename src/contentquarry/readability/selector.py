"""
Picks the best candidate container and merges plausible siblings into a
synthetic article root.
"""

from __future__ import annotations

import copy
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from bs4 import BeautifulSoup
from bs4.element import Tag

from ..config.config import ScoringThresholds
from ..dom.document import NodeIndex
from ..dom.utils import ancestors, attr, class_and_id, element_children, inner_text, link_density
from .constants import (
    ARTICLE_BODY_HINTS,
    LAYOUT_CONTAINER_HINTS,
    NAVIGATION_HINTS,
    OK_MAYBE_CANDIDATE,
    POSITIVE,
    SEMANTIC_CONTAINER_TAGS,
    SENTENCE_END,
    SIBLING_BLOCK_TAGS,
    UNLIKELY_CANDIDATES,
)
from .flags import StrictnessFlags
from .models import Candidate
from .scoring import class_weight, rank_candidates

PAGE_ID = "readability-page-1"
PAGE_CLASS = "page"


@dataclass
class Selection:
    """The chosen container, the siblings merged with it and the synthetic root holding copies of both."""

    top: Candidate
    root: Tag
    merged: List[Tag] = field(default_factory=list)
    pool: List[Candidate] = field(default_factory=list)


class ArticleSelector:
    def __init__(self, thresholds: Optional[ScoringThresholds] = None, nb_top_candidates: int = 5) -> None:
        self.thresholds = thresholds or ScoringThresholds()
        self.nb_top_candidates = nb_top_candidates

    def select(
        self,
        soup: BeautifulSoup,
        index: NodeIndex,
        candidates: Dict[int, Candidate],
        log: Optional[Any] = None,
    ) -> Optional[Selection]:
        """Choose the article container among ``candidates``.

        Returns ``None`` when there is no candidate at all. The tree is left
        untouched; the returned ``Selection.root`` holds deep copies. The
        choice is only logged when a bound ``log`` is passed in.
        """
        if not candidates:
            return None

        ranked = rank_candidates(candidates, index)
        pool = ranked[: self.nb_top_candidates]
        top = next((candidate for candidate in pool if self.is_viable(candidate)), pool[0])
        top = self.refine_downwards(top, candidates, index)
        top = self.promote_shared_parent(top, pool, candidates, index)
        top = self.promote_semantic_parent(top, candidates, index)
        top = self.climb_single_child_wrappers(top, candidates, index)
        top = self.promote_dense_wrapper_child(top, ranked, candidates)
        top = self.promote_semantic_descendant(top, ranked)

        merged = self.merge_siblings(top, candidates, index)
        root = soup.new_tag("div", attrs={"id": PAGE_ID, "class": PAGE_CLASS})
        for node in merged:
            if node.name == "body":
                for child in list(node.children):
                    root.append(copy.copy(child))
            else:
                root.append(copy.copy(node))

        if log is not None:
            log.debug(
                "Selected article container",
                tag=top.node.name,
                score=round(top.score, 3),
                merged=len(merged),
                pool=len(pool),
            )
        return Selection(top=top, root=root, merged=merged, pool=pool)

    def is_viable(self, candidate: Candidate) -> bool:
        """Reject short, link-heavy or navigation-like containers."""
        node = candidate.node
        t = self.thresholds
        if len(inner_text(node)) < t.viable_min_text_length and candidate.score < t.viable_min_score:
            return False
        density = link_density(node)
        if density > t.max_viable_link_density:
            return False
        if NAVIGATION_HINTS.search(class_and_id(node)) and density > t.navigation_link_density:
            return False
        return True

    def refine_downwards(self, top: Candidate, candidates: Dict[int, Candidate], index: NodeIndex) -> Candidate:
        """Descend while exactly one child candidate outscores the current container."""
        current = top
        while True:
            better = [
                candidates[handle]
                for handle in (index.get_handle(child) for child in element_children(current.node))
                if handle is not None and handle in candidates and candidates[handle].score > current.score
            ]
            if len(better) != 1:
                return current
            current = better[0]

    def promote_shared_parent(
        self, top: Candidate, pool: List[Candidate], candidates: Dict[int, Candidate], index: NodeIndex
    ) -> Candidate:
        """Move up to the nearest ancestor shared by several strong runners-up.

        Articles split into equally scored chunks otherwise lose every chunk
        but the first.
        """
        t = self.thresholds
        if top.score <= 0:
            return top

        runner_up_ancestors = [
            {id(node) for node in ancestors(candidate.node)}
            for candidate in pool
            if candidate.handle != top.handle and candidate.score >= top.score * t.shared_parent_score_ratio
        ]
        if len(runner_up_ancestors) < t.shared_parent_min_candidates:
            return top

        for parent in ancestors(top.node):
            if parent.name == "body":
                break
            shared = sum(1 for seen in runner_up_ancestors if id(parent) in seen)
            if shared >= t.shared_parent_min_candidates:
                return self._candidate_for(parent, top.score, candidates, index) or top
        return top

    def promote_semantic_parent(self, top: Candidate, candidates: Dict[int, Candidate], index: NodeIndex) -> Candidate:
        """Climb to an enclosing ``article``/``section``/``main`` that outscores the current choice."""
        t = self.thresholds
        threshold = top.score / t.semantic_parent_score_divider
        last_score = top.score
        for parent in ancestors(top.node):
            if parent.name == "body":
                break
            if parent.name not in SEMANTIC_CONTAINER_TAGS and attr(parent, "role").strip().lower() != "main":
                continue
            handle = index.get_handle(parent)
            candidate = candidates.get(handle) if handle is not None else None
            if candidate is None:
                continue
            if candidate.score < threshold:
                break
            if link_density(parent) > t.semantic_parent_max_link_density:
                continue
            if candidate.score > last_score:
                return candidate
            last_score = candidate.score
        return top

    def climb_single_child_wrappers(
        self, top: Candidate, candidates: Dict[int, Candidate], index: NodeIndex
    ) -> Candidate:
        """Replace the container by its parent while the parent wraps nothing else."""
        current = top
        parent = current.node.parent
        while isinstance(parent, Tag) and parent.name not in ("body", "html", "[document]"):
            if len(element_children(parent)) != 1:
                break
            promoted = self._candidate_for(parent, current.score, candidates, index)
            if promoted is None:
                break
            current = promoted
            parent = current.node.parent
        return current

    def promote_dense_wrapper_child(
        self, top: Candidate, ranked: List[Candidate], candidates: Dict[int, Candidate]
    ) -> Candidate:
        """Swap a link-heavy generic wrapper for its best low-link-density descendant."""
        t = self.thresholds
        if top.node.name in SEMANTIC_CONTAINER_TAGS:
            return top

        wrapper_density = link_density(top.node)
        best: Optional[Candidate] = None
        for candidate in ranked[: t.dense_child_scan]:
            if candidate.handle == top.handle or not _is_descendant(candidate.node, top.node):
                continue
            text_length = len(inner_text(candidate.node))
            if text_length < t.dense_child_min_text_length:
                continue
            density = link_density(candidate.node)
            if density >= t.dense_child_max_link_density:
                continue
            if density >= wrapper_density - t.dense_child_link_density_margin:
                continue
            match_string = class_and_id(candidate.node)
            if (
                class_weight(candidate.node, StrictnessFlags.WEIGHT_CLASSES, t.class_weight) < 0
                and not POSITIVE.search(match_string)
            ):
                continue
            if candidate.node.find("p") is None and text_length < t.dense_child_bare_text_length:
                continue
            if best is None or candidate.score > best.score:
                best = candidate

        if best is None:
            return top
        # Wrappers reached by climbing have no score of their own.
        wrapper_score = candidates[top.handle].score if top.handle in candidates else 0.0
        if wrapper_score <= 0 or best.score >= wrapper_score * t.dense_child_score_ratio:
            return best
        return top

    def promote_semantic_descendant(self, top: Candidate, ranked: List[Candidate]) -> Candidate:
        """Descend from a layout wrapper (``#content``, ``.container`` ...) into the article body it holds."""
        t = self.thresholds
        if top.score <= 0 or not LAYOUT_CONTAINER_HINTS.search(class_and_id(top.node)):
            return top

        best: Optional[Candidate] = None
        for candidate in ranked[: t.semantic_descendant_scan]:
            if candidate.handle == top.handle or not _is_descendant(candidate.node, top.node):
                continue
            if len(inner_text(candidate.node)) < t.semantic_descendant_min_text_length:
                continue
            if link_density(candidate.node) > t.semantic_descendant_max_link_density:
                continue
            hints = f"{class_and_id(candidate.node)} {attr(candidate.node, 'itemprop')}"
            if not ARTICLE_BODY_HINTS.search(hints):
                continue
            if candidate.score < top.score * t.semantic_descendant_score_ratio:
                continue
            if best is None or candidate.score > best.score:
                best = candidate
        return best or top

    @staticmethod
    def _candidate_for(
        node: Tag, score: float, candidates: Dict[int, Candidate], index: NodeIndex
    ) -> Optional[Candidate]:
        """The candidate of ``node``, or a fresh one inheriting ``score`` when it was never scored."""
        handle = index.get_handle(node)
        if handle is None:
            return None
        return candidates.get(handle) or Candidate(handle=handle, node=node, score=score, initial_score=0.0)

    def merge_siblings(self, top: Candidate, candidates: Dict[int, Candidate], index: NodeIndex) -> List[Tag]:
        """Return the top node together with the siblings that continue the article, in document order."""
        parent = top.node.parent
        if not isinstance(parent, Tag) or parent.name in ("html", "[document]"):
            return [top.node]

        threshold = max(self.thresholds.sibling_min_threshold, top.score * self.thresholds.sibling_score_ratio)
        top_class = attr(top.node, "class")
        merged = []
        for sibling in element_children(parent):
            if sibling is top.node:
                merged.append(sibling)
                continue

            handle = index.get_handle(sibling)
            score = candidates[handle].score if handle is not None and handle in candidates else 0.0
            bonus = 0.0
            if top_class and attr(sibling, "class") == top_class:
                bonus = top.score * self.thresholds.sibling_score_ratio

            if score + bonus >= threshold:
                merged.append(sibling)
            elif self.is_good_paragraph(sibling):
                merged.append(sibling)
            elif sibling.name == top.node.name and score >= threshold / 2:
                merged.append(sibling)
            elif self.should_keep_block(sibling, top.score):
                merged.append(sibling)
        return merged

    def is_good_paragraph(self, node: Tag) -> bool:
        if node.name != "p":
            return False
        match_string = class_and_id(node)
        if UNLIKELY_CANDIDATES.search(match_string) and not OK_MAYBE_CANDIDATE.search(match_string):
            return False

        text = inner_text(node)
        if not text:
            return False
        density = link_density(node)
        if len(text) > self.thresholds.sibling_paragraph_length:
            return density < self.thresholds.sibling_paragraph_link_density
        return density == 0 and SENTENCE_END.search(text) is not None

    def should_keep_block(self, node: Tag, top_score: float) -> bool:
        """Keep substantial lists, tables and sections that were never scored."""
        if node.name not in SIBLING_BLOCK_TAGS:
            return False
        if class_weight(node, StrictnessFlags.WEIGHT_CLASSES, self.thresholds.class_weight) < -25 and top_score < 100:
            return False

        length = len(inner_text(node))
        density = link_density(node)
        if not length or density > self.thresholds.max_viable_link_density:
            return False

        if node.name in ("ul", "ol"):
            return len(node.find_all("li")) >= 3 and length > 80 and density < 0.4
        if node.name == "table":
            return (len(node.find_all("p")) >= 2 or length > 200) and density < 0.45
        return length > 400 or (length > 140 and density < 0.35)


def _is_descendant(node: Tag, container: Tag) -> bool:
    return any(parent is container for parent in node.parents)
