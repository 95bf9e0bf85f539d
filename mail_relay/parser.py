"""
Instruction parser — free text → {to, subject, body}.

Keyword/regex heuristics, no model calls. Subject extraction runs an
ordered list of strategies; the first one that matches wins and the
rest are skipped. When none match, DEFAULT_SUBJECT is used.

Examples:
    "Please send mail to test@example.com saying Dinner Invitation"
        → to="test@example.com", subject="Dinner Invitation"
    "Subject: Dinner Invitation\\n\\nDear Shlok, dinner is ready."
        → subject="Dinner Invitation", body="Dear Shlok, dinner is ready."
"""

import logging
import re
from typing import Callable, List, Optional, Tuple

from mail_relay.models import ParsedMessage

logger = logging.getLogger("mail-relay.parser")

DEFAULT_SUBJECT = "Email from Chat"

# "Subject: ..." / "subject - ..." on a line of its own
SUBJECT_LINE_RE = re.compile(r"^\s*subject\s*[:\-]\s*(.+)$", re.IGNORECASE | re.MULTILINE)

# Inline cue words; the subject runs to the next period, newline or end of text
INLINE_CUE_RE = re.compile(
    r"\b(?:saying|about|regarding|subject(?: is)?|re)\b[:\s-]+(.+?)(?=[.\n]|\Z)",
    re.IGNORECASE,
)

EMAIL_RE = re.compile(r"\b[\w.-]+@[\w.-]+\.\w+\b", re.ASCII)

_LEADING_BLANK_LINES_RE = re.compile(r"^\s*\n+")
_LEADING_PUNCT_RE = re.compile(r"^\s*[:,\-\s]+")

# (subject, remaining body) or None
SubjectMatch = Optional[Tuple[str, str]]
SubjectStrategy = Callable[[str], SubjectMatch]


# ── Subject Strategies ──────────────────────────────────────────────

def subject_from_label(body: str) -> SubjectMatch:
    """Explicit 'Subject:' line. The whole line is dropped from the body."""
    match = SUBJECT_LINE_RE.search(body)
    if not match:
        return None
    subject = match.group(1).strip()
    remaining = body.replace(match.group(0), "", 1).strip()
    remaining = _LEADING_BLANK_LINES_RE.sub("", remaining, count=1).strip()
    return subject, remaining


def subject_from_inline_cue(body: str) -> SubjectMatch:
    """Natural-language cue such as 'saying ...', 'about ...', 're: ...'."""
    match = INLINE_CUE_RE.search(body)
    if not match:
        return None
    subject = match.group(1).strip()
    remaining = body.replace(match.group(0), "", 1).strip()
    remaining = _LEADING_PUNCT_RE.sub("", remaining, count=1).strip()
    return subject, remaining


SUBJECT_STRATEGIES: List[SubjectStrategy] = [
    subject_from_label,
    subject_from_inline_cue,
]


def extract_subject(body: str) -> Tuple[str, str]:
    """
    Run the strategies in order, returning (subject, remaining body).

    A strategy that matches but captures only whitespace still keeps its
    body edit, and the next strategy sees the edited body.
    """
    for strategy in SUBJECT_STRATEGIES:
        result = strategy(body)
        if result is None:
            continue
        subject, body = result
        if subject:
            return subject, body
    return DEFAULT_SUBJECT, body


def extract_recipient(*candidates: str) -> str:
    """First email-shaped substring across the candidates, in order, or ''."""
    for text in candidates:
        match = EMAIL_RE.search(text)
        if match:
            return match.group(0)
    return ""


def parse_message_text(text) -> ParsedMessage:
    """
    Parse a free-text instruction into email fields.

    Never raises. Blank input returns all-empty fields, including an
    empty subject; any other input always gets a non-empty subject.
    """
    original = "" if text is None else str(text)
    working = original.strip()
    if not working:
        return ParsedMessage(to="", subject="", body="")

    subject, body = extract_subject(working)
    # Prefer the body (subject already removed), fall back to the full input
    to = extract_recipient(body, original)

    logger.debug("Parsed instruction: to=%r subject=%r body_len=%d", to, subject, len(body))
    return ParsedMessage(to=to, subject=subject, body=body)
