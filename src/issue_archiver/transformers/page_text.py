"""Page text resolution.

Each content unit contributes its plain text to exactly one physical page:
the page its range starts on. Every other page is blank. Text is sanitized
here, before it reaches the ALTO generator, so malformed captures degrade to
cleaned text instead of aborting the issue.
"""

import html
import logging
import re

from schemas.content_unit import ContentUnit
from schemas.issue import Issue
from schemas.page import PhysicalPage

logger = logging.getLogger(__name__)

# C0/C1 controls (except tab and newline), surrogates and XML non-characters
_UNPRINTABLE = re.compile(
    "[\x00-\x08\x0b\x0c\x0e-\x1f\x7f-\x9f\ud800-\udfff\ufffe\uffff]"
)

# Mailchimp merge tags such as *|MC_PREVIEW_TEXT|*
_MERGE_TAG = re.compile(r"\*\|[^|]+\|\*")
_INLINE_LINK = re.compile(r"https?://\S+|\bmailto:\S+", re.IGNORECASE)
# (), [] and parentheses holding no letters or digits
_EMPTY_BRACKETS = re.compile(r"\(\s*\)|\[\s*\]|\([\W_]*\)")
_SPACE_BEFORE_PUNCT = re.compile(r"\s+([,.;:!?])")
_RUNS_OF_BLANKS = re.compile(r"[ \t]{2,}")
_READ_MORE = re.compile(r"^read (the )?(story|opinion)\b", re.IGNORECASE)
_DIVIDER = re.compile(r"^[\s\-\u2014_*=]+$")
_LETTER = re.compile(r"[A-Za-z]")

NEWSLETTER_BOILERPLATE = (
    "unsubscribe",
    "update your preferences",
    "why did i get this",
    "copyright \u00a9",
    "add us to your address book",
    "list-manage.com",
    "view this email in your browser",
)
NEWSLETTER_CUTOFF = "referred by a friend"


def strip_html(text: str) -> str:
    """Strip HTML tags and unescape HTML entities.

    Examples:
        >>> strip_html("<p>Tom &amp; Jerry</p>")
        'Tom & Jerry'
    """
    stripped = re.sub(r"<[^>]+>", "", text)
    return html.unescape(stripped).strip()


def sanitize_text(text: str | bytes | None) -> str:
    """Make text safe to embed in XML.

    Bytes are decoded as UTF-8 with invalid sequences dropped. Control
    characters other than tab and newline are removed, line endings are
    normalized, and surrounding whitespace is trimmed.

    Examples:
        >>> sanitize_text(b"Hello\\x00 World\\xff")
        'Hello World'
    """
    if text is None:
        return ""
    if isinstance(text, bytes):
        text = text.decode("utf-8", errors="ignore")
    text = text.replace("\r\n", "\n").replace("\r", "\n")
    return _UNPRINTABLE.sub("", text).strip()


def _balance_parens(line: str) -> str:
    """Drop unmatched ')' left to right, then unmatched '(' right to left."""
    kept = []
    depth = 0
    for ch in line:
        if ch == ")":
            if depth == 0:
                continue
            depth -= 1
        elif ch == "(":
            depth += 1
        kept.append(ch)

    if depth:
        for i in range(len(kept) - 1, -1, -1):
            if depth and kept[i] == "(":
                del kept[i]
                depth -= 1
    return "".join(kept)


def _clean_newsletter_line(line: str) -> str:
    line = _INLINE_LINK.sub("", line.strip())
    line = _EMPTY_BRACKETS.sub("", line)
    line = _balance_parens(line)
    line = _SPACE_BEFORE_PUNCT.sub(r"\1", line)
    return _RUNS_OF_BLANKS.sub(" ", line).strip()


def _is_newsletter_noise(line: str) -> bool:
    lower = line.lower()
    if any(phrase in lower for phrase in NEWSLETTER_BOILERPLATE):
        return True
    if _READ_MORE.match(line) or _DIVIDER.match(line):
        return True
    return len(_LETTER.findall(line)) < 3


def filter_newsletter_text(text: str) -> str:
    """Reduce newsletter email text to its editorial content.

    Merge tags, inline links and empty brackets are removed from each line,
    and lines that are boilerplate, dividers, "Read the story" prompts or
    have fewer than three letters are dropped. Everything from "Referred by
    a friend" onwards is cut.

    Examples:
        >>> filter_newsletter_text("Top story (https://x.co/1)\\nUnsubscribe")
        'Top story'
    """
    if not text:
        return ""

    text = _MERGE_TAG.sub("", text)
    lines = (_clean_newsletter_line(line) for line in text.splitlines())
    out = "\n".join(line for line in lines if line and not _is_newsletter_noise(line))

    cut = out.lower().find(NEWSLETTER_CUTOFF)
    if cut != -1:
        out = out[:cut]
    return out.strip()


class PageTextResolver:
    """Map every physical page of an issue to its text block."""

    @staticmethod
    def unit_text(unit: ContentUnit) -> str:
        """Sanitized text of one unit; newsletters are also filtered."""
        text = sanitize_text(unit.plain_text)
        if unit.kind == "newsletter":
            text = filter_newsletter_text(text)
        return text

    def resolve(
        self,
        issue: Issue,
        image_names: list[str] | None = None,
    ) -> list[PhysicalPage]:
        """Derive the physical pages of an issue.

        Args:
            issue: Assembled issue
            image_names: Page image file names in page order, if images exist

        Returns:
            One PhysicalPage per page, in page order

        Raises:
            ValueError: If image_names does not have one entry per page
        """
        total = issue.total_pages
        if image_names is not None and len(image_names) != total:
            raise ValueError(
                f"Expected {total} page images, got {len(image_names)}"
            )

        start_text = {unit.start_page: self.unit_text(unit) for unit in issue.units}

        pages = [
            PhysicalPage(
                page_number=n,
                text=start_text.get(n, ""),
                image_name=image_names[n - 1] if image_names else None,
            )
            for n in range(1, total + 1)
        ]
        text_pages = sum(1 for p in pages if not p.is_blank)
        logger.debug(f"Resolved {total} pages for {issue.name} ({text_pages} with text)")
        return pages
