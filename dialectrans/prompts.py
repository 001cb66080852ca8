"""翻译与语音合成请求的构建。

这里只做纯粹的字符串和结构拼装，不涉及任何网络调用。
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from .constants import DEFAULT_VOICE, ROMANIZATION_HINTS, SOURCE_LANGUAGE_NAMES
from .exceptions import ValidationError
from .models import Dialect, TranslationMode

# 模型必须返回的 JSON 结构
TRANSLATION_SCHEMA: Dict[str, Any] = {
    "type": "object",
    "properties": {
        "translatedText": {"type": "string", "description": "翻译结果文本"},
        "phonetic": {"type": "string", "description": "拼音/注音标注"},
        "meaning": {"type": "string", "description": "含义/文化解释"},
        "dialectName": {"type": "string", "description": "方言名称"},
    },
    "required": ["translatedText", "phonetic", "meaning", "dialectName"],
    "additionalProperties": False,
}

_TO_DIALECT_INSTRUCTION = (
    "你是一位精通中国方言的语言学专家。请将用户输入的{source}翻译成指定的方言：{dialect}。"
    "请使用当地人日常真正会说的地道表达，而不是逐字替换汉字；"
    "同时注意该方言内部不同片区在读音上的差异。"
)

_TO_MANDARIN_INSTRUCTION = (
    "你是一位精通中国方言的语言学专家。"
    "请将用户输入的方言（{dialect}）翻译成标准普通话。"
)

_TO_DIALECT_PROMPT = """翻译文本: "{text}"。
要求返回：
1. 方言文字表达。
2. 该方言的拼音或注音（使用{romanization}）。
3. 意思的详细解释。"""

_TO_MANDARIN_PROMPT = """翻译文本: "{text}"。
要求返回：
1. 翻译后的标准普通话。
2. 原方言文本的读音标注（拼音）。
3. 对方言词汇的文化解释或意义。"""

_SPEECH_INSTRUCTION = (
    "请用{dialect}地区地道的口音、声调特点和语调节奏朗读下面这段文字，"
    "听起来要像土生土长的当地人：{text}"
)


@dataclass(frozen=True)
class TranslationRequest:
    """一次翻译请求的全部内容。"""

    system_instruction: str
    prompt: str
    dialect: Dialect
    mode: TranslationMode
    response_schema: Dict[str, Any] = field(default_factory=lambda: TRANSLATION_SCHEMA)

    def to_messages(self) -> List[Dict[str, str]]:
        return [
            {"role": "system", "content": self.system_instruction},
            {"role": "user", "content": self.prompt},
        ]

    def response_format(self) -> Dict[str, Any]:
        return {
            "type": "json_schema",
            "json_schema": {
                "name": "translation_result",
                "strict": True,
                "schema": self.response_schema,
            },
        }


@dataclass(frozen=True)
class SpeechRequest:
    """语音合成请求。

    方言身份只能通过指令文本传达：服务端只提供通用音色，没有按方言区分的声音。
    """

    instruction: str
    dialect: Dialect
    voice: str = DEFAULT_VOICE

    def payload(self) -> Dict[str, Any]:
        return {
            "contents": [{"parts": [{"text": self.instruction}]}],
            "generationConfig": {
                "responseModalities": ["AUDIO"],
                "speechConfig": {
                    "voiceConfig": {
                        "prebuiltVoiceConfig": {"voiceName": self.voice},
                    },
                },
            },
        }


def _require_text(text: Optional[str]) -> str:
    if not isinstance(text, str) or not text.strip():
        raise ValidationError("文本内容不能为空")
    return text


def build_translation_request(
    text: str,
    dialect: Dialect,
    mode: TranslationMode,
    source_lang: str = "auto",
) -> TranslationRequest:
    """根据翻译方向选择指令模板并嵌入原文。

    Args:
        text: 用户输入的原文，按原样嵌入提示词
        dialect: 目标（或源）方言
        mode: 翻译方向
        source_lang: 原文语言（zh/en/auto），只影响 TO_DIALECT 的指令措辞
    """
    text = _require_text(text)
    mode = TranslationMode(mode)

    if mode is TranslationMode.TO_DIALECT:
        source = SOURCE_LANGUAGE_NAMES.get(source_lang, SOURCE_LANGUAGE_NAMES["auto"])
        system_instruction = _TO_DIALECT_INSTRUCTION.format(source=source, dialect=dialect.label)
        romanization = ROMANIZATION_HINTS.get(dialect.name, "该方言通行的拼音方案")
        prompt = _TO_DIALECT_PROMPT.format(text=text, romanization=romanization)
    else:
        system_instruction = _TO_MANDARIN_INSTRUCTION.format(dialect=dialect.label)
        prompt = _TO_MANDARIN_PROMPT.format(text=text)

    return TranslationRequest(
        system_instruction=system_instruction,
        prompt=prompt,
        dialect=dialect,
        mode=mode,
    )


def build_speech_request(text: str, dialect: Dialect, voice: str = DEFAULT_VOICE) -> SpeechRequest:
    text = _require_text(text)
    return SpeechRequest(
        instruction=_SPEECH_INSTRUCTION.format(dialect=dialect.label, text=text),
        dialect=dialect,
        voice=voice,
    )


__all__ = [
    "TRANSLATION_SCHEMA",
    "TranslationRequest",
    "SpeechRequest",
    "build_translation_request",
    "build_speech_request",
]
