from __future__ import annotations

from pathlib import Path
from typing import Dict, Tuple

from .models import Document


def parse_front_matter_and_remainder(text: str) -> Tuple[Dict[str, str], str]:
    if not text.startswith("---"):
        return {}, text

    closing_idx = text.find("\n---", 3)
    if closing_idx == -1:
        return {}, text

    front_matter_chunk = text[3:closing_idx].strip()
    remainder = text[closing_idx + 4 :].lstrip("\r\n")

    data: Dict[str, str] = {}
    for raw_line in front_matter_chunk.splitlines():
        if ":" not in raw_line:
            continue
        key, value = raw_line.split(":", 1)
        data[key.strip()] = value.strip().strip('"').strip("'")
    return data, remainder


def parse_note(path: Path) -> Document:
    """Read a markdown note; id and title come from front matter when present, else the file name."""

    text = path.read_text(encoding="utf-8")
    front_matter, body = parse_front_matter_and_remainder(text)

    return Document(
        id=front_matter.get("id") or path.stem
        ,title=front_matter.get("title") or path.stem
        ,body=body
    )
