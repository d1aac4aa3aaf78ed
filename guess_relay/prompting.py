# -*- coding: utf-8 -*-
from __future__ import annotations
from typing import Any, Dict, List

# 你画我猜：只要一个中文短词 + 置信度
GUESS_PROMPT = (
    "你正在玩你画我猜。根据玩家提供的涂鸦图片给出一个最可能的中文猜测。"
    '输出 JSON：{"guess":"<不超过8个字的中文词/短语>","confidence":<0到1的小数>}'
    '若无法判断，guess="不确定"，confidence=0.0。只输出JSON。'
)

# 与 prompt 中的兜底值保持一致
UNDETERMINED = "不确定"


def normalize_dataurl(image_data: str, image_mime: str = "image/png") -> str:
    """Return a data URL whether the input is bare base64 or already prefixed."""
    if not image_data:
        return ""
    if image_data.startswith("data:"):
        return image_data
    return f"data:{image_mime};base64,{image_data}"


def build_guess_messages(image_base64: str) -> List[Dict[str, Any]]:
    """Single user turn: the instruction text followed by the sketch as an image_url part."""
    return [
        {
            "role": "user",
            "content": [
                {"type": "text", "text": GUESS_PROMPT},
                {"type": "image_url", "image_url": {"url": normalize_dataurl(image_base64)}},
            ],
        }
    ]
