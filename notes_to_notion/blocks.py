"""
Markdown to Notion block conversion.

Parsing is delegated to markdown-it-py; this module only maps its token
stream onto Notion block objects. Nested lists are flattened and inline
formatting is limited to bold, italic, strikethrough, code and links.
"""
from __future__ import annotations

import logging
from typing import Dict, List, Optional

from markdown_it import MarkdownIt
from markdown_it.token import Token


# Notion rejects rich text content longer than 2000 characters.
CHUNK_SIZE = 1900

# Request limits of the Notion API for a single block and a single create call.
MAX_RICH_TEXT_ITEMS = 100
MAX_CHILD_BLOCKS = 100

logger = logging.getLogger(__name__)

NOTION_CODE_LANGUAGES = {
    "bash", "c", "c#", "c++", "css", "diff", "docker", "go", "graphql", "html", "java",
    "javascript", "json", "kotlin", "latex", "makefile", "markdown", "mermaid", "php",
    "plain text", "powershell", "python", "ruby", "rust", "scala", "shell", "sql",
    "swift", "toml", "typescript", "xml", "yaml",
}

_LANGUAGE_ALIASES = {
    "sh": "shell",
    "zsh": "shell",
    "js": "javascript",
    "ts": "typescript",
    "py": "python",
    "yml": "yaml",
    "md": "markdown",
    "cpp": "c++",
    "csharp": "c#",
    "dockerfile": "docker",
    "text": "plain text",
    "txt": "plain text",
}

_parser = MarkdownIt("commonmark").enable("strikethrough")


def chunk_text(text: str) -> List[str]:
    return [text[i : i + CHUNK_SIZE] for i in range(0, len(text), CHUNK_SIZE)] or [""]


def plain_rich_text(text: str) -> List[Dict]:
    """Unformatted rich text for a string, chunked and capped to what Notion accepts."""

    return _text_item(text, {}, None)[:MAX_RICH_TEXT_ITEMS]


def _text_item(content: str, annotations: Dict[str, bool], link: Optional[str]) -> List[Dict]:
    items: List[Dict] = []
    for chunk in chunk_text(content):
        text: Dict = {"content": chunk}
        if link:
            text["link"] = {"url": link}
        item: Dict = {"type": "text", "text": text}
        active = {key: True for key, value in annotations.items() if value}
        if active:
            item["annotations"] = active
        items.append(item)
    return items


def inline_to_rich_text(token: Token) -> List[Dict]:
    """Flatten an inline token's children into Notion rich text objects."""

    rich_text: List[Dict] = []
    annotations = {"bold": False, "italic": False, "strikethrough": False, "code": False}
    link: Optional[str] = None

    for child in token.children or []:
        kind = child.type
        if kind == "text" and child.content:
            rich_text.extend(_text_item(child.content, annotations, link))
        elif kind in ("softbreak", "hardbreak"):
            rich_text.extend(_text_item("\n", annotations, link))
        elif kind == "code_inline":
            rich_text.extend(_text_item(child.content, dict(annotations, code=True), link))
        elif kind == "image":
            rich_text.extend(_text_item(child.content or str(child.attrGet("src") or ""), annotations, link))
        elif kind == "strong_open":
            annotations["bold"] = True
        elif kind == "strong_close":
            annotations["bold"] = False
        elif kind == "em_open":
            annotations["italic"] = True
        elif kind == "em_close":
            annotations["italic"] = False
        elif kind == "s_open":
            annotations["strikethrough"] = True
        elif kind == "s_close":
            annotations["strikethrough"] = False
        elif kind == "link_open":
            href = child.attrGet("href")
            link = str(href) if href else None
        elif kind == "link_close":
            link = None
        elif kind == "html_inline" and child.content:
            rich_text.extend(_text_item(child.content, annotations, link))

    return rich_text


def _block(block_type: str, body: Dict) -> Dict:
    rich_text = body.get("rich_text")
    if rich_text is not None and len(rich_text) > MAX_RICH_TEXT_ITEMS:
        logger.warning(
            "Truncating %s block from %d to %d rich text items", block_type, len(rich_text), MAX_RICH_TEXT_ITEMS
        )
        body = dict(body, rich_text=rich_text[:MAX_RICH_TEXT_ITEMS])
    return {"object": "block", "type": block_type, block_type: body}


def _code_language(info: str) -> str:
    name = (info.strip().split() or ["plain text"])[0].lower()
    name = _LANGUAGE_ALIASES.get(name, name)
    return name if name in NOTION_CODE_LANGUAGES else "plain text"


def markdown_to_blocks(body: str) -> List[Dict]:
    """Convert a markdown document into a list of Notion block objects."""

    blocks: List[Dict] = []
    list_stack: List[str] = []
    heading: Optional[str] = None
    quote_depth = 0
    # True once the current list item has emitted its own block
    item_used = False

    for token in _parser.parse(body):
        kind = token.type

        if kind == "heading_open":
            level = min(int(token.tag[1:]), 3)
            heading = f"heading_{level}"
        elif kind == "heading_close":
            heading = None
        elif kind == "bullet_list_open":
            list_stack.append("bulleted_list_item")
        elif kind == "ordered_list_open":
            list_stack.append("numbered_list_item")
        elif kind in ("bullet_list_close", "ordered_list_close"):
            list_stack.pop()
        elif kind == "list_item_open":
            item_used = False
        elif kind == "blockquote_open":
            quote_depth += 1
        elif kind == "blockquote_close":
            quote_depth -= 1
        elif kind == "hr":
            blocks.append(_block("divider", {}))
        elif kind in ("fence", "code_block"):
            content = token.content.rstrip("\n")
            rich_text = _text_item(content, {}, None)
            language = _code_language(token.info) if kind == "fence" else "plain text"
            blocks.append(_block("code", {"rich_text": rich_text, "language": language}))
        elif kind == "html_block":
            blocks.append(_block("paragraph", {"rich_text": _text_item(token.content.rstrip("\n"), {}, None)}))
        elif kind == "inline":
            rich_text = inline_to_rich_text(token)
            if heading:
                block_type = heading
            elif list_stack and not item_used:
                block_type = list_stack[-1]
                item_used = True
            elif quote_depth:
                block_type = "quote"
            else:
                block_type = "paragraph"
            blocks.append(_block(block_type, {"rich_text": rich_text}))

    return blocks
