# -*- coding: utf-8 -*-
from __future__ import annotations
from typing import Literal, Optional
from pydantic import BaseModel, ConfigDict, Field


# ===== /guess 请求/响应 =====

class GuessRequest(BaseModel):
    # 前端只上传 PNG 的 base64 数据体（不带 dataURL 前缀）；带前缀也兼容
    model_config = ConfigDict(populate_by_name=True)

    image_base64: str = Field(..., alias="imageBase64")


class GuessResponse(BaseModel):
    guess: str
    confidence: Optional[float] = None


class ErrorResponse(BaseModel):
    error: str
    details: Optional[str] = None


class Health(BaseModel):
    status: Literal["ok"] = "ok"
    model: Optional[str] = None
    base_url: Optional[str] = None
