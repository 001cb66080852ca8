"""模型响应解析模块"""

from __future__ import annotations

import json
import logging
import re
from typing import Any, Mapping, Optional

from .exceptions import MalformedResponseError, NoAudioPayloadError
from .models import RESULT_FIELDS, ParseOutcome, TranslationResult

logger = logging.getLogger(__name__)

_CODE_FENCE = re.compile(r"^```(?:json)?\s*(.*?)\s*```$", re.DOTALL)
_REQUIRED_TEXT = ("translatedText", "meaning")


def _strip_fence(text: str) -> str:
    match = _CODE_FENCE.match(text)
    return match.group(1) if match else text


def try_parse_translation(raw: Optional[str]) -> ParseOutcome:
    """严格校验模型输出，返回 ParseOutcome 而不是抛出异常。"""
    text = _strip_fence((raw or "").strip()) or "{}"

    try:
        data = json.loads(text)
    except json.JSONDecodeError as exc:
        return ParseOutcome(error=MalformedResponseError(f"模型输出不是有效的 JSON: {exc}", raw or ""))

    if not isinstance(data, dict):
        return ParseOutcome(error=MalformedResponseError("模型输出不是 JSON 对象", raw or ""))

    for wire_name in RESULT_FIELDS:
        if wire_name not in data:
            return ParseOutcome(error=MalformedResponseError(f"缺少字段: {wire_name}", raw or ""))
        if not isinstance(data[wire_name], str):
            return ParseOutcome(error=MalformedResponseError(f"字段类型错误: {wire_name}", raw or ""))

    # 译文和释义不能为空
    for wire_name in _REQUIRED_TEXT:
        if not data[wire_name].strip():
            return ParseOutcome(error=MalformedResponseError(f"字段为空: {wire_name}", raw or ""))

    return ParseOutcome(value=TranslationResult.from_dict(data))


def parse_translation(raw: Optional[str]) -> TranslationResult:
    outcome = try_parse_translation(raw)
    if not outcome.ok:
        logger.warning("翻译结果解析失败: %s", outcome.error)
    return outcome.unwrap()


def _field(obj: Any, *names: str) -> Any:
    if not isinstance(obj, Mapping):
        return None
    for name in names:
        if name in obj:
            return obj[name]
    return None


def extract_inline_audio(response: Mapping[str, Any]) -> str:
    """返回第一个候选中第一个携带内联数据的部分的 base64 音频。"""
    candidates = _field(response, "candidates")
    if not isinstance(candidates, list) or not candidates:
        raise NoAudioPayloadError("模型未返回任何候选结果")

    content = _field(candidates[0], "content")
    parts = _field(content, "parts")
    if not isinstance(parts, list) or not parts:
        raise NoAudioPayloadError("候选结果中没有内容")

    for part in parts:
        inline = _field(part, "inlineData", "inline_data")
        data = _field(inline, "data")
        if isinstance(data, str) and data:
            return data

    raise NoAudioPayloadError("模型未返回有效的语音数据")


__all__ = [
    "try_parse_translation",
    "parse_translation",
    "extract_inline_audio",
]
