"""会话控制器：串联翻译、语音、历史记录与用户资料。"""

from __future__ import annotations

import asyncio
import logging
from typing import Any, Callable, List, Optional, Protocol, Tuple

from .atlas import atlas_dialect, find_atlas_item
from .audio import AudioPlayer, PlaybackHandle
from .capture import SpeechCapture
from .constants import (
    COPIED_NOTICE,
    COPIED_NOTICE_SECONDS,
    HISTORY_LIMIT,
    HISTORY_STORAGE_KEY,
    PROFILE_STORAGE_KEY,
    SPEECH_FAILED_NOTICE,
    SPEECH_NOTICE_SECONDS,
    TRANSLATE_FAILED_NOTICE,
    TRANSLATE_NOTICE_SECONDS,
)
from .exceptions import CaptureError, DialectError, ValidationError
from .models import AtlasItem, Dialect, HistoryItem, TranslationMode, TranslationResult, UserProfile
from .storage import KeyValueStore

logger = logging.getLogger(__name__)


class TranslationClient(Protocol):
    async def translate(self, text: str, dialect: Dialect, mode: TranslationMode) -> TranslationResult:
        ...

    async def generate_speech(self, text: str, dialect: Dialect) -> str:
        ...


def push_history(
    history: List[HistoryItem], item: HistoryItem, limit: int = HISTORY_LIMIT
) -> List[HistoryItem]:
    """新记录放在最前面，超出上限的旧记录被丢弃。"""
    return [item, *history][:limit]


class SessionController:
    """单个客户端会话的全部可变状态。

    翻译和语音各有独立的忙碌标记，互不阻塞。重叠的翻译请求既不排队也不取消：
    最后完成的那个决定显示结果（不是最后发出的那个）。
    """

    def __init__(
        self,
        client: TranslationClient,
        store: KeyValueStore,
        player: Optional[AudioPlayer] = None,
        capture: Optional[SpeechCapture] = None,
        translate_notice_seconds: float = TRANSLATE_NOTICE_SECONDS,
        speech_notice_seconds: float = SPEECH_NOTICE_SECONDS,
    ) -> None:
        self.client = client
        self.store = store
        self.player = player or AudioPlayer()
        self.capture = capture
        self.translate_notice_seconds = translate_notice_seconds
        self.speech_notice_seconds = speech_notice_seconds

        self.input_text = ""
        self.dialect = Dialect.CANTONESE
        self.mode = TranslationMode.TO_DIALECT
        self.result: Optional[TranslationResult] = None
        self.loading = False
        self.audio_loading = False
        self.recording = False
        self.notice: Optional[str] = None
        self.selected_atlas: Optional[AtlasItem] = None
        self.profile = UserProfile()

        self._history: List[HistoryItem] = []
        self._notice_timer: Optional[asyncio.TimerHandle] = None

    @property
    def history(self) -> Tuple[HistoryItem, ...]:
        return tuple(self._history)

    def load(self) -> None:
        """从存储中读取历史记录和用户资料，损坏的记录被忽略。"""
        raw_history = self.store.get(HISTORY_STORAGE_KEY)
        if raw_history is not None:
            try:
                self._history = [HistoryItem.from_dict(entry) for entry in raw_history][:HISTORY_LIMIT]
            except (KeyError, TypeError, ValueError) as exc:
                logger.warning("历史记录已损坏，已忽略: %s", exc)

        raw_profile = self.store.get(PROFILE_STORAGE_KEY)
        if raw_profile is not None:
            try:
                self.profile = UserProfile.from_dict(raw_profile)
            except (AttributeError, TypeError) as exc:
                logger.warning("用户资料已损坏，已忽略: %s", exc)

    async def translate(self, text: Optional[str] = None) -> Optional[TranslationResult]:
        """翻译输入文本；失败时显示提示并保留之前的结果。"""
        text = self.input_text if text is None else text
        if not text or not text.strip():
            return None

        dialect, mode = self.dialect, self.mode
        self.loading = True
        try:
            result = await self.client.translate(text, dialect, mode)
        except DialectError as exc:
            logger.error("翻译失败: %s", exc)
            self.show_notice(TRANSLATE_FAILED_NOTICE, self.translate_notice_seconds)
            return None
        else:
            self.result = result
            self._save_to_history(result, text, mode)
            return result
        finally:
            self.loading = False

    async def speak(self, text: str, dialect: Optional[Dialect] = None) -> Optional[PlaybackHandle]:
        if not text or not text.strip():
            return None

        self.audio_loading = True
        try:
            audio = await self.client.generate_speech(text, dialect or self.dialect)
            return self.player.play(audio)
        except DialectError as exc:
            logger.error("语音合成失败: %s", exc)
            self.show_notice(SPEECH_FAILED_NOTICE, self.speech_notice_seconds)
            return None
        finally:
            self.audio_loading = False

    async def speak_atlas(self, item: Optional[AtlasItem] = None) -> Optional[PlaybackHandle]:
        item = item or self.selected_atlas
        if item is None:
            return None
        return await self.speak(item.classic_phrase, atlas_dialect(item) or self.dialect)

    def select_atlas(self, name: Optional[str]) -> Optional[AtlasItem]:
        self.selected_atlas = find_atlas_item(name) if name else None
        return self.selected_atlas

    def set_mode(self, mode: TranslationMode) -> None:
        self.mode = TranslationMode(mode)
        self.result = None

    def set_dialect(self, dialect: Dialect) -> None:
        self.dialect = dialect
        self.result = None

    def open_history(self, item_id: str) -> Optional[HistoryItem]:
        """重新显示一条历史记录，并切换到它当时的翻译方向。"""
        for item in self._history:
            if item.id == item_id:
                self.mode = item.mode
                self.result = item
                return item
        return None

    def clear_history(self) -> None:
        self._history = []
        self._persist(HISTORY_STORAGE_KEY, [])

    def update_profile(self, **changes: Any) -> UserProfile:
        unknown = set(changes) - set(UserProfile.field_names())
        if unknown:
            raise ValidationError(f"未知的资料字段: {', '.join(sorted(unknown))}")
        for name, value in changes.items():
            setattr(self.profile, name, value)
            self._persist(PROFILE_STORAGE_KEY, self.profile.to_dict())
        return self.profile

    def copy_text(self, text: str, clipboard: Callable[[str], Any]) -> bool:
        try:
            clipboard(text)
        except Exception as exc:
            logger.error("复制失败: %s", exc)
            return False
        self.show_notice(COPIED_NOTICE, COPIED_NOTICE_SECONDS)
        return True

    async def start_voice_input(self) -> Optional[str]:
        """录一段语音并把识别结果写入输入框。"""
        if self.capture is None or self.recording:
            return None

        self.input_text = ""
        self.recording = True
        try:
            self.capture.start()
            transcript = await self.capture.result()
        except CaptureError as exc:
            logger.warning("语音识别失败: %s", exc)
            return None
        finally:
            self.recording = False

        if transcript:
            self.input_text = transcript
        return transcript

    def stop_voice_input(self) -> None:
        if self.capture is not None and self.recording:
            self.capture.stop()

    def show_notice(self, message: str, duration: float) -> None:
        """显示短暂提示；新提示会替换旧提示，旧的计时器不会关掉新提示。"""
        self.notice = message
        if self._notice_timer is not None:
            self._notice_timer.cancel()
            self._notice_timer = None
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            return
        self._notice_timer = loop.call_later(duration, self._dismiss_notice, message)

    def _dismiss_notice(self, message: str) -> None:
        if self.notice == message:
            self.notice = None
        self._notice_timer = None

    def _save_to_history(self, result: TranslationResult, original: str, mode: TranslationMode) -> None:
        item = HistoryItem.create(result, original_text=original, mode=mode)
        self._history = push_history(self._history, item)
        self._persist(HISTORY_STORAGE_KEY, [entry.to_dict() for entry in self._history])

    def _persist(self, key: str, value: Any) -> None:
        try:
            self.store.set(key, value)
        except OSError as exc:
            logger.error("保存 %s 失败: %s", key, exc)
