"""
dialectrans - 方言翻译与方言语音合成客户端

提供普通话与各地方言之间的互译（附注音与文化解释）、方言语音合成与播放、
方言图鉴、本地翻译历史以及用户资料管理。
"""

__version__ = "0.3.0"

from .audio import AudioBuffer, AudioPlayer, PlaybackHandle, decode_pcm16
from .core import DialectTranslator
from .sync import DialectTranslatorSync, create
from .session import SessionController
from .storage import JsonFileStore, MemoryStore
from .models import (
    Dialect, DIALECT_CATEGORIES, TranslationMode, TranslationResult,
    HistoryItem, UserProfile, AtlasItem, ParseOutcome
)
from .exceptions import (
    DialectError, ConfigError, ValidationError, TransportError,
    MalformedResponseError, NoAudioPayloadError, InvalidAudioFormatError,
    CaptureError, PlaybackError
)

__all__ = [
    'DialectTranslator',
    'DialectTranslatorSync',
    'create',
    'SessionController',
    'AudioBuffer',
    'AudioPlayer',
    'PlaybackHandle',
    'decode_pcm16',
    'JsonFileStore',
    'MemoryStore',
    'Dialect',
    'DIALECT_CATEGORIES',
    'TranslationMode',
    'TranslationResult',
    'HistoryItem',
    'UserProfile',
    'AtlasItem',
    'ParseOutcome',
    'DialectError',
    'ConfigError',
    'ValidationError',
    'TransportError',
    'MalformedResponseError',
    'NoAudioPayloadError',
    'InvalidAudioFormatError',
    'CaptureError',
    'PlaybackError',
]
