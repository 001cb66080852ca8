"""核心翻译模块。"""

from __future__ import annotations

import asyncio
import logging
import os
import time
from typing import Any, Dict, Optional, Union

import aiohttp
import openai
from dotenv import load_dotenv
from langdetect import DetectorFactory, detect_langs
from langdetect.lang_detect_exception import LangDetectException

from .audio import AudioPlayer, PlaybackHandle
from .constants import (
    DEFAULT_BASE_URL,
    DEFAULT_MODEL,
    DEFAULT_PERFORMANCE_CONFIG,
    DEFAULT_SPEECH_URL,
    DEFAULT_TTS_MODEL,
    DEFAULT_VOICE,
    ENV_API_KEY,
    ENV_API_KEY_FALLBACK,
    ENV_BASE_URL,
    ENV_MODEL,
    ENV_SPEECH_URL,
    ENV_TTS_MODEL,
    ENV_VOICE,
    PERFORMANCE_PROFILES,
)
from .exceptions import ConfigError, MalformedResponseError, NoAudioPayloadError, TransportError, ValidationError
from .models import DetectedLanguage, Dialect, TranslationMode, TranslationResult
from .parsing import extract_inline_audio, parse_translation
from .prompts import build_speech_request, build_translation_request
from .resources import ResourceManager
from .utils import PerformanceMetrics

logger = logging.getLogger(__name__)

load_dotenv()

_SUPPORTED_SOURCE_LANGS = {"zh", "en"}


class DialectTranslator:
    """方言翻译与语音合成的异步客户端。

    文本翻译走兼容 OpenAI 协议的 chat completions 接口，
    语音合成直接调用 generateContent REST 接口。所有调用都不做自动重试。
    """

    def __init__(
        self,
        api_key: Optional[str] = None,
        model_name: Optional[str] = None,
        base_url: Optional[str] = None,
        tts_model: Optional[str] = None,
        speech_url: Optional[str] = None,
        voice: Optional[str] = None,
        performance_mode: str = "balanced",
        **kwargs: Any,
    ) -> None:
        self.api_key = api_key or os.getenv(ENV_API_KEY) or os.getenv(ENV_API_KEY_FALLBACK)
        if not self.api_key:
            raise ConfigError(f"缺少 API Key，请设置环境变量 {ENV_API_KEY}")

        self.base_url = base_url or os.getenv(ENV_BASE_URL, DEFAULT_BASE_URL)
        self.model = model_name or os.getenv(ENV_MODEL, DEFAULT_MODEL)
        self.speech_url = speech_url or os.getenv(ENV_SPEECH_URL, DEFAULT_SPEECH_URL)
        self.tts_model = tts_model or os.getenv(ENV_TTS_MODEL, DEFAULT_TTS_MODEL)
        self.voice = voice or os.getenv(ENV_VOICE, DEFAULT_VOICE)

        if performance_mode not in PERFORMANCE_PROFILES:
            raise ConfigError(f"无效的性能模式: {performance_mode}")

        self.perf_config: Dict[str, Any] = DEFAULT_PERFORMANCE_CONFIG.copy()
        self.perf_config.update(PERFORMANCE_PROFILES[performance_mode])
        self.perf_config.update(kwargs)

        self.resources = ResourceManager(
            self.api_key,
            self.base_url,
            timeout=self.perf_config["timeout"],
            speech_timeout=self.perf_config["speech_timeout"],
        )
        self.metrics = PerformanceMetrics()

    async def initialize(self) -> None:
        await self.resources.initialize()

    async def cleanup(self) -> None:
        await self.resources.cleanup()

    async def detect(self, text: str) -> DetectedLanguage:
        """判断输入是普通话还是英文，无法判断时返回 auto。"""
        if not text.strip():
            return DetectedLanguage("auto", 0.0)

        DetectorFactory.seed = 0
        try:
            langs = detect_langs(text)
        except LangDetectException:
            return DetectedLanguage("auto", 0.0)
        if not langs:
            return DetectedLanguage("auto", 0.0)

        detected = DetectedLanguage(langs[0].lang, float(langs[0].prob))
        if detected.lang not in _SUPPORTED_SOURCE_LANGS:
            return DetectedLanguage("auto", detected.confidence)
        return detected

    async def translate(
        self,
        text: str,
        dialect: Dialect,
        mode: Union[TranslationMode, str] = TranslationMode.TO_DIALECT,
    ) -> TranslationResult:
        if not isinstance(text, str) or not text.strip():
            raise ValidationError("文本内容不能为空")
        mode = TranslationMode(mode)

        source_lang = "auto"
        if mode is TranslationMode.TO_DIALECT:
            source_lang = (await self.detect(text)).lang
        request = build_translation_request(text, dialect, mode, source_lang=source_lang)

        client = await self.resources.client_manager.get_client()
        start = time.time()
        try:
            response = await client.chat.completions.create(
                model=self.model,
                messages=request.to_messages(),
                response_format=request.response_format(),
                temperature=self.perf_config["temperature"],
                max_tokens=self.perf_config["max_tokens"],
            )
        except (openai.OpenAIError, asyncio.TimeoutError) as exc:
            self.metrics.record_request("translate", time.time() - start, False)
            logger.error("翻译请求失败: %s", exc)
            raise TransportError(f"翻译请求失败: {exc}") from exc

        raw = response.choices[0].message.content if response.choices else None
        try:
            result = parse_translation(raw)
        except MalformedResponseError:
            self.metrics.record_request("translate", time.time() - start, False)
            raise

        self.metrics.record_request("translate", time.time() - start, True)
        if result.dialect_name != dialect.label:
            logger.debug("模型返回的方言名称 %r 与请求的 %r 不一致", result.dialect_name, dialect.label)
        return result

    async def generate_speech(self, text: str, dialect: Dialect) -> str:
        """请求语音合成，返回 base64 编码的 24kHz 单声道 PCM。"""
        request = build_speech_request(text, dialect, voice=self.voice)
        start = time.time()
        try:
            body = await self._post_speech(request.payload())
        except TransportError:
            self.metrics.record_request("speech", time.time() - start, False)
            raise

        try:
            audio = extract_inline_audio(body)
        except NoAudioPayloadError:
            self.metrics.record_request("speech", time.time() - start, False)
            logger.warning("语音响应中没有音频数据，候选数: %d", len(body.get("candidates") or []))
            raise

        self.metrics.record_request("speech", time.time() - start, True)
        return audio

    async def speak(self, text: str, dialect: Dialect, player: AudioPlayer) -> PlaybackHandle:
        audio = await self.generate_speech(text, dialect)
        return player.play(audio)

    async def _post_speech(self, payload: Dict[str, Any]) -> Dict[str, Any]:
        session = await self.resources.session_manager.get_session()
        url = f"{self.speech_url.rstrip('/')}/models/{self.tts_model}:generateContent"
        try:
            async with session.post(url, json=payload) as resp:
                if resp.status >= 400:
                    detail = (await resp.text())[:500]
                    logger.error("语音服务返回错误: %s - %s", resp.status, detail)
                    raise TransportError(f"语音服务返回错误: {resp.status} - {detail}")
                body = await resp.json(content_type=None)
        except (aiohttp.ClientError, asyncio.TimeoutError, ValueError) as exc:
            logger.error("语音请求失败: %s", exc)
            raise TransportError(f"语音请求失败: {exc}") from exc

        if not isinstance(body, dict):
            raise TransportError("语音服务返回了非 JSON 对象")
        return body

    def get_config(self) -> Dict[str, object]:
        return {
            "api_key": f"{self.api_key[:4]}...",
            "base_url": self.base_url,
            "model": self.model,
            "speech_url": self.speech_url,
            "tts_model": self.tts_model,
            "voice": self.voice,
            "performance_config": self.perf_config,
        }

    async def __aenter__(self) -> "DialectTranslator":
        await self.initialize()
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.cleanup()
