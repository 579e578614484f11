"""
Normalizes a freshly parsed document before scoring.
"""

from __future__ import annotations

import logging
from typing import List, Optional

from bs4 import BeautifulSoup
from bs4.element import Comment, NavigableString, PageElement, Tag

from ..dom.document import PARSER
from ..dom.utils import is_allowed_video, is_hidden, is_phrasing_content, is_whitespace, next_node
from ..exceptions import InvalidInputError

logger = logging.getLogger(__name__)


class Preprocessor:
    """Strips scripts, styles, comments, hidden and interactive elements in place."""

    def process(self, soup: BeautifulSoup) -> int:
        """Run every preprocessing step on ``soup`` and return the number of nodes changed.

        Raises:
            InvalidInputError: if the document has no ``<body>``.
        """
        if soup.find(True) is None:
            raise InvalidInputError("Document contains no elements")
        body = soup.body
        if body is None:
            raise InvalidInputError("Document has no body element")

        changed = 0
        changed += self._remove_scripts(soup)
        changed += self._remove_comments(soup)
        changed += self._unwrap_noscript_images(soup)
        changed += self._replace_fonts(soup)
        changed += self._remove_interactive(soup)
        changed += self._remove_hidden(body)
        changed += self._replace_brs(soup, body)

        logger.debug("Preprocessing changed %d nodes", changed)
        return changed

    def _remove_scripts(self, soup: BeautifulSoup) -> int:
        tags = soup.find_all(["script", "style"])
        for tag in tags:
            tag.decompose()
        return len(tags)

    def _remove_comments(self, soup: BeautifulSoup) -> int:
        comments = soup.find_all(string=lambda text: isinstance(text, Comment))
        for comment in comments:
            comment.extract()
        return len(comments)

    def _unwrap_noscript_images(self, soup: BeautifulSoup) -> int:
        """Expose lazy-loading fallbacks by unwrapping ``<noscript>`` blocks that hold images."""
        changed = 0
        for noscript in soup.find_all("noscript"):
            if noscript.decomposed:
                continue
            image = self._image_fragment(noscript.contents)
            if image is None:
                raw = noscript.get_text()
                if noscript.find(True) is not None or "<img" not in raw.lower():
                    continue
                fragment = BeautifulSoup(raw, PARSER)
                image = self._image_fragment(fragment.body.contents if fragment.body else [])
                if image is None:
                    continue
            noscript.replace_with(image.extract())
            changed += 1
        return changed

    @staticmethod
    def _image_fragment(nodes: List[PageElement]) -> Optional[Tag]:
        """The single element of ``nodes`` when it is, or holds, an ``<img>`` and no text sits beside it."""
        elements = [node for node in nodes if isinstance(node, Tag)]
        if len(elements) != 1 or any(not is_whitespace(node) for node in nodes if not isinstance(node, Tag)):
            return None
        element = elements[0]
        if element.name == "img" or element.find("img") is not None:
            return element
        return None

    def _replace_fonts(self, soup: BeautifulSoup) -> int:
        fonts = soup.find_all("font")
        for font in fonts:
            font.name = "span"
        return len(fonts)

    def _remove_interactive(self, soup: BeautifulSoup) -> int:
        # lxml does not treat <embed> as void and nests the following siblings inside it.
        for embed in soup.find_all("embed"):
            if embed.contents:
                embed.insert_after(*list(embed.contents))

        changed = 0
        for tag in soup.find_all(["form", "object", "embed"]):
            if tag.decomposed:
                continue
            if tag.name != "form" and is_allowed_video(tag):
                continue
            tag.decompose()
            changed += 1
        return changed

    def _remove_hidden(self, body: Tag) -> int:
        changed = 0
        for tag in body.find_all(True):
            if tag.decomposed:
                continue
            if is_hidden(tag):
                tag.decompose()
                changed += 1
        return changed

    def _replace_brs(self, soup: BeautifulSoup, body: Tag) -> int:
        """Turn runs of two or more ``<br>`` into paragraph boundaries.

        ``<div>foo<br>bar<br> <br><br>abc</div>`` becomes
        ``<div>foo<br>bar<p>abc</p></div>``.
        """
        changed = 0
        for br in body.find_all("br"):
            if br.decomposed or br.parent is None:
                continue

            replaced = False
            following = next_node(br.next_sibling)
            while isinstance(following, Tag) and following.name == "br":
                replaced = True
                sibling = following.next_sibling
                following.decompose()
                following = next_node(sibling)
            if not replaced:
                continue

            paragraph = soup.new_tag("p")
            br.replace_with(paragraph)
            changed += 1

            current = paragraph.next_sibling
            while current is not None:
                if isinstance(current, Tag) and current.name == "br":
                    after = next_node(current.next_sibling)
                    if isinstance(after, Tag) and after.name == "br":
                        break
                if not is_phrasing_content(current):
                    break
                sibling = current.next_sibling
                paragraph.append(current.extract())
                current = sibling

            trailing: List[NavigableString | Tag] = []
            for child in reversed(list(paragraph.children)):
                if not is_whitespace(child):
                    break
                trailing.append(child)
            for child in trailing:
                child.extract()

            parent = paragraph.parent
            if isinstance(parent, Tag) and parent.name == "p":
                parent.name = "div"
        return changed
