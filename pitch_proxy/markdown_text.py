"""Markdown to plain text conversion for model output.

The panel inserts model output straight into a design as text, so markdown
markup has to go. Conversion is an ordered pipeline of small named steps;
each one is a plain str -> str function and can be tested on its own.
"""
from __future__ import annotations

import re
from typing import Callable


JSON_FENCE_PATTERN = re.compile(r"```json\s*([\s\S]*?)\s*```")
IMAGE_PATTERN = re.compile(r"!\[.*?\]\(.*?\)")
LINK_PATTERN = re.compile(r"\[(.*?)\]\(.*?\)")
EMPHASIS_PATTERN = re.compile(r"(`|~~|[*_]{1,2})(.*?)\1")
BLOCKQUOTE_PATTERN = re.compile(r"^>[ \t]+", re.MULTILINE)
HEADER_PATTERN = re.compile(r"^#{1,6}[ \t]+", re.MULTILINE)
CODE_BLOCK_PATTERN = re.compile(r"```[\s\S]*?```")
UNORDERED_LIST_PATTERN = re.compile(r"^[ \t]*[-+*][ \t]+", re.MULTILINE)
ORDERED_LIST_PATTERN = re.compile(r"^[ \t]*\d+\.[ \t]+", re.MULTILINE)
HORIZONTAL_RULE_PATTERN = re.compile(r"^-{3,}$", re.MULTILINE)
BLANK_LINES_PATTERN = re.compile(r"\n{2,}")


def unwrap_json_fences(text: str) -> str:
    """```json ... ``` -> body, so pitch slide arrays survive as raw JSON."""
    return JSON_FENCE_PATTERN.sub(r"\1", text)


def strip_images(text: str) -> str:
    return IMAGE_PATTERN.sub("", text)


def strip_links(text: str) -> str:
    """[text](url) -> text"""
    return LINK_PATTERN.sub(r"\1", text)


def strip_emphasis(text: str) -> str:
    """Inline code, strikethrough, bold and italic markers."""
    return EMPHASIS_PATTERN.sub(r"\2", text)


def strip_blockquotes(text: str) -> str:
    return BLOCKQUOTE_PATTERN.sub("", text)


def strip_headers(text: str) -> str:
    return HEADER_PATTERN.sub("", text)


def strip_code_blocks(text: str) -> str:
    return CODE_BLOCK_PATTERN.sub("", text)


def strip_unordered_lists(text: str) -> str:
    return UNORDERED_LIST_PATTERN.sub("", text)


def strip_ordered_lists(text: str) -> str:
    return ORDERED_LIST_PATTERN.sub("", text)


def strip_horizontal_rules(text: str) -> str:
    return HORIZONTAL_RULE_PATTERN.sub("", text)


def collapse_blank_lines(text: str) -> str:
    return BLANK_LINES_PATTERN.sub("\n\n", text)


def unescape_dollars(text: str) -> str:
    return text.replace("\\$", "$")


def strip_stray_asterisks(text: str) -> str:
    return text.replace("*", "")


def trim(text: str) -> str:
    return text.strip()


PIPELINE: tuple[Callable[[str], str], ...] = (
    unwrap_json_fences,
    strip_images,
    strip_links,
    strip_emphasis,
    strip_blockquotes,
    strip_headers,
    strip_code_blocks,
    strip_unordered_lists,
    strip_ordered_lists,
    strip_horizontal_rules,
    collapse_blank_lines,
    unescape_dollars,
    strip_stray_asterisks,
    trim,
)


def apply_pipeline(text: str, steps: tuple[Callable[[str], str], ...] = PIPELINE) -> str:
    """Run each step once, in order."""
    for step in steps:
        text = step(text)
    return text


def markdown_to_plain_text(markdown: str | None) -> str:
    """
    Convert model markdown into plain text.

    The pipeline is re-run until the output stops changing. Every step only
    removes characters, so this terminates, and the result is a fixed point:
    markdown_to_plain_text(markdown_to_plain_text(x)) == markdown_to_plain_text(x).
    A later step can expose markup for an earlier one (e.g. "*- item"), which
    is what the extra passes pick up.
    """
    if not markdown:
        return ""

    text = apply_pipeline(markdown)
    while True:
        again = apply_pipeline(text)
        if again == text:
            return text
        text = again
