from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Tuple

import yaml

from .model import Divider

DEFAULT_KEYWORDS: Tuple[str, ...] = (
    "confidence",
    "strategy",
    "growth",
    "progress",
    "achievement",
    "believe",
    "overcome",
    "challenge",
)


@dataclass(frozen=True)
class FormatterConfig:
    keywords: Tuple[str, ...] = field(default=DEFAULT_KEYWORDS)
    callout_label: str = "Core Idea:"
    divider_label: str = Divider.label
    code_label_fallback: str = "code"


def load_config(path: str | Path) -> FormatterConfig:
    """Read formatter settings from a YAML mapping; missing keys keep defaults."""
    text = Path(path).read_text(encoding="utf-8")
    return parse_config(text)


def parse_config(text: str) -> FormatterConfig:
    data = yaml.safe_load(text) or {}
    if not isinstance(data, dict):
        raise ValueError("Config root must be a mapping with defined fields.")

    options = {}
    if "keywords" in data:
        keywords = data["keywords"]
        if not isinstance(keywords, (list, tuple)):
            raise ValueError("'keywords' must be a list of terms.")
        options["keywords"] = tuple(str(k).strip() for k in keywords if str(k).strip())
    for key in ("callout_label", "divider_label", "code_label_fallback"):
        value = data.get(key)
        if value:
            options[key] = str(value)
    return FormatterConfig(**options)
