"""
Post-selection cleanup of the article sub-tree.

``ContentCleaner.clean`` runs a fixed sequence of passes over the synthetic
article root and repeats the sequence until a full round changes nothing, so
cleaning an already cleaned tree is a no-op.
"""

from __future__ import annotations

import logging
import re
from typing import Callable, Iterable, List, Optional, Set

from bs4.element import NavigableString, Tag

from ..config.config import ScoringThresholds
from ..dom.urls import resolve_srcset, resolve_url
from ..dom.utils import (
    HEADING_TAGS,
    MEDIA_TAGS,
    ancestors,
    attr,
    class_and_id,
    count_tags,
    element_children,
    has_ancestor_tag,
    has_media,
    inner_text,
    is_allowed_video,
    is_phrasing_content,
    is_probably_visible,
    link_density,
    text_density,
)
from ..exceptions import InvalidURLError
from .constants import (
    AD_WORDS,
    COMMAS,
    CONDITIONALLY_CLEANED_TAGS,
    DIV_TO_P_ELEMS,
    FORM_CONTROL_TAGS,
    LOADING_WORDS,
    OK_MAYBE_CANDIDATE,
    POSITIVE,
    PRESENTATIONAL_ATTRIBUTES,
    PRESERVED_MEDIA_TAGS,
    SHARE_ELEMENTS,
    SIZE_ATTRIBUTE_TAGS,
    UNLIKELY_CANDIDATES,
    URL_ATTRIBUTES,
)
from .flags import StrictnessFlags
from .scoring import class_weight

logger = logging.getLogger(__name__)

TEXTISH_TAGS = ("span", "li", "td", *sorted(DIV_TO_P_ELEMS))
SHARE_ELEMENT_MAX_LENGTH = 500
SPAN_NEUTRAL_ATTRIBUTES = frozenset({"class", "style", "id"})
TABLE_WRAPPERS = ["thead", "tbody", "tfoot", "tr"]
_WHITESPACE = re.compile(r"\s+")

# Upper bound on cleaning rounds.
MAX_ROUNDS = 10


def is_data_table(table: Tag) -> bool:
    """Tell data tables apart from tables used for page layout."""
    if attr(table, "role").strip().lower() == "presentation":
        return False
    if attr(table, "datatable").strip() == "0":
        return False
    if table.has_attr("summary"):
        return True
    if table.find(["caption", "col", "colgroup", "thead", "tfoot", "th"]) is not None:
        return True
    if table.find("table") is not None:
        return False

    rows = 0
    columns = 0
    for row in table.find_all("tr"):
        rows += 1
        columns = max(columns, sum(1 for cell in element_children(row) if cell.name in ("td", "th")))
    return rows >= 2 and columns >= 2


def normalize_title(text: str) -> str:
    return _WHITESPACE.sub(" ", text).strip().lower()


def titles_match(first: str, second: str) -> bool:
    """Equal after normalization, or one contains the other and their lengths differ by under 20%."""
    a = normalize_title(first)
    b = normalize_title(second)
    if not a or not b:
        return False
    if a == b:
        return True
    shorter, longer = sorted((a, b), key=len)
    return len(shorter) / len(longer) > 0.8 and shorter in longer


class ContentCleaner:
    """Removes residual page furniture from the selected article and normalizes its markup."""

    def __init__(
        self,
        thresholds: Optional[ScoringThresholds] = None,
        keep_classes: bool = False,
        classes_to_preserve: Iterable[str] = ("page",),
        base_url: Optional[str] = None,
        link_density_modifier: float = 0.0,
    ) -> None:
        self.thresholds = thresholds or ScoringThresholds()
        self.link_density_modifier = link_density_modifier
        self.keep_classes = keep_classes
        self.classes_to_preserve: Set[str] = set(classes_to_preserve)
        self.base_url = base_url

    def clean(self, root: Tag, flags: StrictnessFlags = StrictnessFlags.ALL) -> int:
        """Clean ``root`` in place and return the number of changes made."""
        passes: List[Callable[[Tag, StrictnessFlags], int]] = [
            self._strip_unlikely,
            self._clean_presentational_attributes,
            self._convert_phrasing_divs,
            self._clean_conditionally,
            self._unwrap_layout_tables,
            self._remove_empty_blocks,
            self._unwrap_plain_spans,
            self._strip_classes,
            self._unwrap_javascript_links,
            self._resolve_urls,
        ]

        total = 0
        for _ in range(MAX_ROUNDS):
            changed = sum(clean_pass(root, flags) for clean_pass in passes)
            total += changed
            if not changed:
                break
        return total

    def remove_title_heading(self, root: Tag, title: Optional[str]) -> bool:
        """Remove the first ``h1``/``h2`` repeating ``title`` and any wrapper it leaves empty."""
        if not title:
            return False
        for heading in root.find_all(["h1", "h2"]):
            if not titles_match(heading.get_text(), title):
                continue
            wrapper = heading.parent
            heading.decompose()
            if (
                isinstance(wrapper, Tag)
                and wrapper is not root
                and wrapper.name in ("header", "hgroup")
                and not inner_text(wrapper)
                and not has_media(wrapper)
            ):
                wrapper.decompose()
            return True
        return False

    def _remove(self, node: Tag) -> None:
        """Decompose ``node``, moving its visible media in front of it first."""
        for media in node.find_all(list(PRESERVED_MEDIA_TAGS)):
            if media.find_parent(list(PRESERVED_MEDIA_TAGS)) is not None or not is_probably_visible(media):
                continue
            node.insert_before(media.extract())
        node.decompose()

    # --- Passes ---

    def _strip_unlikely(self, root: Tag, flags: StrictnessFlags) -> int:
        changed = 0
        for tag in root.find_all(True):
            if tag.decomposed or tag.name in MEDIA_TAGS:
                continue

            if tag.name == "nav" or tag.name in FORM_CONTROL_TAGS:
                self._remove(tag)
                changed += 1
                continue

            match_string = class_and_id(tag)
            if not match_string.strip():
                continue
            if SHARE_ELEMENTS.search(match_string) and len(inner_text(tag)) < SHARE_ELEMENT_MAX_LENGTH:
                self._remove(tag)
                changed += 1
                continue
            if (
                flags & StrictnessFlags.STRIP_UNLIKELYS
                and UNLIKELY_CANDIDATES.search(match_string)
                and not OK_MAYBE_CANDIDATE.search(match_string)
                and not POSITIVE.search(match_string)
            ):
                self._remove(tag)
                changed += 1
        return changed

    def _clean_presentational_attributes(self, root: Tag, flags: StrictnessFlags) -> int:
        changed = 0
        for tag in [root, *root.find_all(True)]:
            if tag.name == "svg" or has_ancestor_tag(tag, "svg"):
                continue
            names = [name for name in PRESENTATIONAL_ATTRIBUTES if tag.has_attr(name)]
            if tag.name in SIZE_ATTRIBUTE_TAGS:
                names.extend(name for name in ("width", "height") if tag.has_attr(name))
            for name in names:
                del tag[name]
            changed += len(names)
        return changed

    def _convert_phrasing_divs(self, root: Tag, flags: StrictnessFlags) -> int:
        changed = 0
        for div in root.find_all("div"):
            if not div.contents:
                continue
            if all(is_phrasing_content(child) for child in div.children):
                div.name = "p"
                changed += 1
        return changed

    def _clean_conditionally(self, root: Tag, flags: StrictnessFlags) -> int:
        if not flags & StrictnessFlags.CLEAN_CONDITIONALLY:
            return 0

        tables = root.find_all("table")
        data_table_ids = {id(table) for table in tables if is_data_table(table)}

        changed = 0
        for tag_name in CONDITIONALLY_CLEANED_TAGS:
            for node in root.find_all(tag_name):
                if node.decomposed:
                    continue
                if self._should_remove(node, flags, data_table_ids):
                    self._remove(node)
                    changed += 1
        return changed

    def _should_remove(self, node: Tag, flags: StrictnessFlags, data_table_ids: Set[int]) -> bool:
        text = inner_text(node)
        length = len(text)
        if length > self.thresholds.conditional_clean_max_length:
            return False

        is_list = node.name in ("ul", "ol")
        if not is_list:
            list_length = sum(len(inner_text(lst)) for lst in node.find_all(["ul", "ol"]))
            is_list = list_length / max(length, 1) > 0.9

        if node.name == "table" and id(node) in data_table_ids:
            return False
        for ancestor in ancestors(node):
            if ancestor.name == "code" or (ancestor.name == "table" and id(ancestor) in data_table_ids):
                return False
        if any(id(table) in data_table_ids for table in node.find_all("table")):
            return False

        density = link_density(node)
        weight = class_weight(node, flags, self.thresholds.class_weight)
        if weight < 0 and (density > 0.25 or length < 100):
            return True

        if len(COMMAS.findall(text)) >= 10:
            return False

        embeds = node.find_all(["object", "embed", "iframe"])
        if any(is_allowed_video(embed) for embed in embeds):
            return False

        if AD_WORDS.match(text) or LOADING_WORDS.match(text):
            return True

        paragraphs = count_tags(node, ["p"])
        images = count_tags(node, ["img"])
        list_items = count_tags(node, ["li"]) - 100
        inputs = count_tags(node, ["input"])
        heading_density = text_density(node, HEADING_TAGS)
        is_figure_child = has_ancestor_tag(node, "figure")

        should_remove = False
        if not is_figure_child and images > 1 and paragraphs and paragraphs / images < 0.5:
            should_remove = True
        if not is_list and list_items > paragraphs:
            should_remove = True
        if inputs > paragraphs // 3:
            should_remove = True
        if not is_list and not is_figure_child and heading_density < 0.9 and length < 25 and density > 0:
            should_remove = True
        if not is_list and weight < 25 and density > 0.2 + self.link_density_modifier:
            should_remove = True
        if weight >= 25 and density > 0.5 + self.link_density_modifier:
            should_remove = True
        if (len(embeds) == 1 and length < 75) or len(embeds) > 1:
            should_remove = True
        if not images and not text_density(node, TEXTISH_TAGS):
            should_remove = True

        # Image galleries built as lists: one image per item.
        if is_list and should_remove:
            simple_items = all(len(element_children(child)) <= 1 for child in element_children(node))
            item_count = count_tags(node, ["li"])
            if simple_items and item_count and images == item_count:
                return False
        return should_remove

    def _unwrap_layout_tables(self, root: Tag, flags: StrictnessFlags) -> int:
        changed = 0
        for table in reversed(root.find_all("table")):
            if table.decomposed or is_data_table(table):
                continue
            for cell in table.find_all(["td", "th"]):
                if cell.find_parent("table") is not table:
                    continue
                cell.name = "p" if all(is_phrasing_content(child) for child in cell.children) else "div"
            for wrapper in table.find_all(TABLE_WRAPPERS):
                if wrapper.find_parent("table") is table:
                    wrapper.unwrap()
            table.unwrap()
            changed += 1
        return changed

    def _remove_empty_blocks(self, root: Tag, flags: StrictnessFlags) -> int:
        changed = 0
        for tag in root.find_all(["p", *HEADING_TAGS]):
            if tag.decomposed:
                continue
            if not tag.get_text().strip() and not has_media(tag):
                tag.decompose()
                changed += 1
        return changed

    def _unwrap_plain_spans(self, root: Tag, flags: StrictnessFlags) -> int:
        changed = 0
        for span in root.find_all("span"):
            if set(span.attrs) <= SPAN_NEUTRAL_ATTRIBUTES:
                span.unwrap()
                changed += 1
        return changed

    def _strip_classes(self, root: Tag, flags: StrictnessFlags) -> int:
        if self.keep_classes:
            return 0
        changed = 0
        for tag in [root, *root.find_all(True)]:
            classes = tag.get("class")
            if classes is None:
                continue
            if isinstance(classes, str):
                classes = classes.split()
            kept = [name for name in classes if name in self.classes_to_preserve]
            if kept == list(classes):
                continue
            if kept:
                tag["class"] = kept
            else:
                del tag["class"]
            changed += 1
        return changed

    def _unwrap_javascript_links(self, root: Tag, flags: StrictnessFlags) -> int:
        changed = 0
        for link in root.find_all("a", href=True):
            if not attr(link, "href").strip().lower().startswith("javascript:"):
                continue
            if all(isinstance(child, NavigableString) for child in link.children):
                link.unwrap()
            else:
                link.name = "span"
                link.attrs = {}
            changed += 1
        return changed

    def _resolve_urls(self, root: Tag, flags: StrictnessFlags) -> int:
        if not self.base_url:
            return 0
        changed = 0
        for tag in [root, *root.find_all(True)]:
            for name in URL_ATTRIBUTES:
                value = tag.get(name)
                if not isinstance(value, str):
                    continue
                try:
                    resolved = resolve_url(self.base_url, value)
                except InvalidURLError as e:
                    logger.warning(f"Could not resolve {name} {value!r}: {e}")
                    continue
                if resolved != value:
                    tag[name] = resolved
                    changed += 1
            srcset = tag.get("srcset")
            if isinstance(srcset, str):
                resolved = resolve_srcset(self.base_url, srcset)
                if resolved != srcset:
                    tag["srcset"] = resolved
                    changed += 1
        return changed
