"""数据模型定义。"""

from __future__ import annotations

import time
import uuid
from dataclasses import asdict, dataclass, field, fields
from enum import Enum
from typing import Any, Dict, List, Optional, Tuple

from .constants import LANG_CODE_MAP
from .exceptions import MalformedResponseError, ValidationError


class Dialect(Enum):
    """可选的地方方言，值为提示词中使用的显示名称。"""

    CANTONESE = '粤语 (广州/香港)'
    TEOCHEW = '潮汕话 (潮州/汕头)'
    SHANGHAINESE = '吴语 (上海)'
    SUZHOUNESE = '吴语 (苏州)'
    HOKKIEN = '闽南语 (泉漳/台湾)'
    SICHUANESE = '西南官话 (四川/重庆)'
    BEIJING = '北京话'
    NORTHEASTERN = '东北话 (黑吉辽)'
    HAKKA = '客家语 (梅州/赣南)'
    HUNANESE = '湘语 (长沙)'
    GAN = '赣语 (南昌)'
    JIN = '晋语 (太原)'
    HAINANESE = '海南话'
    FUZHOU = '闽东语 (福州)'
    SHANDONG = '胶辽官话 (山东)'

    @property
    def label(self) -> str:
        return self.value

    @classmethod
    def from_label(cls, label: str) -> "Dialect":
        """按成员名或显示名称查找方言。"""
        if label in cls.__members__:
            return cls[label]
        for dialect in cls:
            if dialect.value == label:
                return dialect
        raise ValidationError(f"不支持的方言: {label}")


DIALECT_CATEGORIES: Dict[str, Tuple[Dialect, ...]] = {
    '岭南闽江': (
        Dialect.CANTONESE, Dialect.TEOCHEW, Dialect.HOKKIEN,
        Dialect.HAINANESE, Dialect.FUZHOU, Dialect.HAKKA,
    ),
    '吴越湘赣': (Dialect.SHANGHAINESE, Dialect.SUZHOUNESE, Dialect.HUNANESE, Dialect.GAN),
    '燕赵秦陇': (
        Dialect.BEIJING, Dialect.NORTHEASTERN, Dialect.SICHUANESE,
        Dialect.JIN, Dialect.SHANDONG,
    ),
}


class TranslationMode(str, Enum):
    """翻译方向。"""

    TO_DIALECT = 'TO_DIALECT'
    TO_MANDARIN = 'TO_MANDARIN'


# 模型输出中的字段名 -> TranslationResult 属性名
RESULT_FIELDS = {
    'translatedText': 'translated_text',
    'phonetic': 'phonetic',
    'meaning': 'meaning',
    'dialectName': 'dialect_name',
}


@dataclass(frozen=True)
class TranslationResult:
    """模型返回的翻译结果。"""

    translated_text: str
    phonetic: str
    meaning: str
    dialect_name: str

    def to_dict(self) -> Dict[str, str]:
        return {wire: getattr(self, attr) for wire, attr in RESULT_FIELDS.items()}

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "TranslationResult":
        return cls(**{attr: data[wire] for wire, attr in RESULT_FIELDS.items()})


@dataclass(frozen=True)
class HistoryItem(TranslationResult):
    """保存到历史记录中的一次成功翻译。"""

    id: str = ""
    original_text: str = ""
    timestamp: int = 0
    mode: TranslationMode = TranslationMode.TO_DIALECT

    @classmethod
    def create(
        cls,
        result: TranslationResult,
        original_text: str,
        mode: TranslationMode,
        timestamp: Optional[int] = None,
    ) -> "HistoryItem":
        return cls(
            translated_text=result.translated_text,
            phonetic=result.phonetic,
            meaning=result.meaning,
            dialect_name=result.dialect_name,
            id=uuid.uuid4().hex,
            original_text=original_text,
            timestamp=timestamp if timestamp is not None else int(time.time() * 1000),
            mode=mode,
        )

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = super().to_dict()
        data.update(
            id=self.id,
            originalText=self.original_text,
            timestamp=self.timestamp,
            mode=self.mode.value,
        )
        return data

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "HistoryItem":
        base = TranslationResult.from_dict(data)
        return cls(
            translated_text=base.translated_text,
            phonetic=base.phonetic,
            meaning=base.meaning,
            dialect_name=base.dialect_name,
            id=str(data['id']),
            original_text=str(data['originalText']),
            timestamp=int(data['timestamp']),
            mode=TranslationMode(data['mode']),
        )


@dataclass
class UserProfile:
    """可编辑的用户资料，每次修改都会持久化。"""

    nickname: str = '乡音守护人'
    hometown: str = '四川成都'
    bio: str = '寻根乡土，话出精彩。'
    joined_date: str = '2025.05.20'
    dialect_preference: str = '四川话'
    identity_verified: bool = True
    avatar: str = '🏮'

    @classmethod
    def field_names(cls) -> List[str]:
        return [f.name for f in fields(cls)]

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "UserProfile":
        known = set(cls.field_names())
        return cls(**{key: value for key, value in data.items() if key in known})


@dataclass(frozen=True)
class AtlasItem:
    """方言图鉴中的一条静态记录。"""

    name: str
    region: str
    description: str
    classic_phrase: str
    classic_meaning: str
    features: Tuple[str, ...]
    history: str


@dataclass(frozen=True)
class ParseOutcome:
    """严格解析的结果：要么是 value，要么是 error。"""

    value: Optional[TranslationResult] = None
    error: Optional[MalformedResponseError] = None

    @property
    def ok(self) -> bool:
        return self.error is None

    def unwrap(self) -> TranslationResult:
        if self.error is not None:
            raise self.error
        assert self.value is not None
        return self.value


@dataclass
class DetectedLanguage:
    """输入文本的语言检测结果。"""

    lang: str
    confidence: float
    details: Dict[str, object] = field(default_factory=dict)

    def __post_init__(self) -> None:
        self.lang = LANG_CODE_MAP.get(self.lang.lower(), self.lang.lower())

    def __repr__(self) -> str:  # pragma: no cover - 调试辅助
        return f"<DetectedLanguage lang={self.lang!r} confidence={self.confidence:.3f}>"


__all__ = [
    "Dialect",
    "DIALECT_CATEGORIES",
    "TranslationMode",
    "TranslationResult",
    "HistoryItem",
    "UserProfile",
    "AtlasItem",
    "ParseOutcome",
    "DetectedLanguage",
    "RESULT_FIELDS",
]
