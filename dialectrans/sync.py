"""同步封装。"""

from __future__ import annotations

import asyncio
from typing import Optional, Union

from .core import DialectTranslator
from .models import DetectedLanguage, Dialect, TranslationMode, TranslationResult


class DialectTranslatorSync:
    """DialectTranslator 的同步适配器，内部持有独立的事件循环。"""

    def __init__(
        self,
        api_key: Optional[str] = None,
        model_name: Optional[str] = None,
        base_url: Optional[str] = None,
        tts_model: Optional[str] = None,
        speech_url: Optional[str] = None,
        voice: Optional[str] = None,
        performance_mode: str = "balanced",
        **kwargs,
    ) -> None:
        self.translator = DialectTranslator(
            api_key=api_key,
            model_name=model_name,
            base_url=base_url,
            tts_model=tts_model,
            speech_url=speech_url,
            voice=voice,
            performance_mode=performance_mode,
            **kwargs,
        )
        self._initialized = False
        self._loop = asyncio.new_event_loop()

    def _ensure_initialized(self) -> None:
        if self._initialized:
            return
        self._loop.run_until_complete(self.translator.initialize())
        self._initialized = True

    def translate(
        self,
        text: str,
        dialect: Dialect,
        mode: Union[TranslationMode, str] = TranslationMode.TO_DIALECT,
    ) -> TranslationResult:
        self._ensure_initialized()
        return self._loop.run_until_complete(self.translator.translate(text, dialect, mode))

    def generate_speech(self, text: str, dialect: Dialect) -> str:
        self._ensure_initialized()
        return self._loop.run_until_complete(self.translator.generate_speech(text, dialect))

    def detect(self, text: str) -> DetectedLanguage:
        return self._loop.run_until_complete(self.translator.detect(text))

    def get_config(self) -> dict:
        return self.translator.get_config()

    def get_metrics(self) -> dict:
        return self.translator.metrics.get_metrics()

    def set_performance_config(self, **kwargs) -> None:
        self.translator.perf_config.update(kwargs)

    def __enter__(self) -> "DialectTranslatorSync":
        self._ensure_initialized()
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    def close(self) -> None:
        if self._loop.is_closed():
            return
        try:
            if self._initialized:
                self._loop.run_until_complete(self.translator.cleanup())
        finally:
            self._loop.close()
            self._initialized = False

    def __del__(self):  # pragma: no cover - 清理保障
        loop = getattr(self, "_loop", None)
        if loop is not None and not loop.is_closed() and not self._initialized:
            loop.close()


def create(*args, **kwargs) -> DialectTranslatorSync:
    return DialectTranslatorSync(*args, **kwargs)
