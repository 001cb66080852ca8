"""音频解码与播放模块"""

from __future__ import annotations

import base64
import binascii
import logging
import threading
from dataclasses import dataclass
from typing import Any, Callable, Optional, Set, Tuple, Union

import numpy as np

from .constants import OUTPUT_CHANNELS, OUTPUT_SAMPLE_RATE, PCM_SCALE, SAMPLE_WIDTH
from .exceptions import InvalidAudioFormatError, PlaybackError

logger = logging.getLogger(__name__)

BytesLike = Union[bytes, bytearray, memoryview]

# (sample_rate, channels, fill, on_finished) -> 已创建但尚未启动的输出流
StreamFactory = Callable[[int, int, Callable[[np.ndarray, int], bool], Callable[[], None]], Any]


@dataclass(frozen=True)
class AudioBuffer:
    """按声道拆分的浮点采样，取值范围 [-1.0, 1.0)。"""

    sample_rate: int
    channels: Tuple[np.ndarray, ...]

    @property
    def channel_count(self) -> int:
        return len(self.channels)

    @property
    def frame_count(self) -> int:
        return len(self.channels[0]) if self.channels else 0

    @property
    def duration(self) -> float:
        return self.frame_count / self.sample_rate

    def channel(self, index: int) -> np.ndarray:
        return self.channels[index]

    def interleaved(self) -> np.ndarray:
        """返回 (帧数, 声道数) 的数组，供输出设备直接使用。"""
        return np.stack(self.channels, axis=1).astype(np.float32, copy=False)


def decode_base64_audio(payload: str) -> bytes:
    try:
        return base64.b64decode(payload, validate=True)
    except (binascii.Error, ValueError, TypeError) as exc:
        raise InvalidAudioFormatError(f"音频数据不是有效的 base64: {exc}") from exc


def decode_pcm16(data: BytesLike, sample_rate: int, channels: int) -> AudioBuffer:
    """把小端 16 位交错 PCM 解码为各声道的浮点采样。

    只读取传入的字节范围；memoryview 切片的偏移会被保留。
    末尾不足一帧的采样会被丢弃。
    """
    if channels < 1:
        raise InvalidAudioFormatError(f"无效的声道数: {channels}")
    if sample_rate <= 0:
        raise InvalidAudioFormatError(f"无效的采样率: {sample_rate}")

    try:
        view = memoryview(data).cast("B")
    except TypeError as exc:
        raise InvalidAudioFormatError(f"音频数据必须是连续的字节缓冲区: {exc}") from exc
    if view.nbytes % SAMPLE_WIDTH:
        raise InvalidAudioFormatError(f"字节长度 {view.nbytes} 不是 16 位采样的整数倍")

    samples = np.frombuffer(view, dtype="<i2")
    frame_count = samples.size // channels
    frames = samples[: frame_count * channels].reshape(frame_count, channels)

    return AudioBuffer(
        sample_rate=sample_rate,
        channels=tuple(
            frames[:, index].astype(np.float32) / np.float32(PCM_SCALE)
            for index in range(channels)
        ),
    )


class PlaybackHandle:
    """一次独立播放会话的句柄。"""

    def __init__(self, buffer: AudioBuffer) -> None:
        self.buffer = buffer
        self._samples = buffer.interleaved()
        self._position = 0
        self._stream: Any = None
        self._done = threading.Event()

    def attach(self, stream: Any) -> None:
        self._stream = stream

    def fill(self, outdata: np.ndarray, frames: int) -> bool:
        """向输出缓冲区写入下一段采样；返回 False 表示数据已写完。"""
        chunk = self._samples[self._position:self._position + frames]
        count = len(chunk)
        outdata[:count] = chunk
        if count < frames:
            outdata[count:] = 0
        self._position += count
        return self._position < len(self._samples)

    def mark_done(self) -> None:
        self._done.set()

    @property
    def done(self) -> bool:
        return self._done.is_set()

    def wait(self, timeout: Optional[float] = None) -> bool:
        return self._done.wait(timeout)

    def stop(self) -> None:
        if self._stream is not None and not self.done:
            self._stream.abort()
        self.close()

    def close(self) -> None:
        if self._stream is not None:
            self._stream.close()
            self._stream = None
        self._done.set()


def _sounddevice_stream(
    sample_rate: int,
    channels: int,
    fill: Callable[[np.ndarray, int], bool],
    on_finished: Callable[[], None],
) -> Any:
    try:
        import sounddevice as sd
    except (ImportError, OSError) as exc:
        raise PlaybackError(f"音频输出设备不可用: {exc}") from exc

    def callback(outdata, frames, time_info, status):
        if status:
            logger.debug("音频输出状态: %s", status)
        if not fill(outdata, frames):
            raise sd.CallbackStop

    return sd.OutputStream(
        samplerate=sample_rate,
        channels=channels,
        dtype="float32",
        callback=callback,
        finished_callback=on_finished,
    )


class AudioPlayer:
    """解码 base64 语音并立即开始播放，不等待播放结束。

    每次调用都会创建独立的输出流，并发请求互不合并。
    """

    def __init__(
        self,
        sample_rate: int = OUTPUT_SAMPLE_RATE,
        channels: int = OUTPUT_CHANNELS,
        stream_factory: Optional[StreamFactory] = None,
    ) -> None:
        self.sample_rate = sample_rate
        self.channels = channels
        self._stream_factory = stream_factory or _sounddevice_stream
        self._sessions: Set[PlaybackHandle] = set()

    def play(self, base64_audio: str) -> PlaybackHandle:
        raw = decode_base64_audio(base64_audio)
        buffer = decode_pcm16(raw, self.sample_rate, self.channels)
        self._reap()

        handle = PlaybackHandle(buffer)
        try:
            stream = self._stream_factory(
                buffer.sample_rate, buffer.channel_count, handle.fill, handle.mark_done
            )
            handle.attach(stream)
            stream.start()
        except PlaybackError:
            raise
        except Exception as exc:
            handle.close()
            raise PlaybackError(f"音频播放失败: {exc}") from exc

        self._sessions.add(handle)
        logger.debug("开始播放 %.2f 秒音频", buffer.duration)
        return handle

    def stop_all(self) -> None:
        for handle in list(self._sessions):
            handle.stop()
        self._sessions.clear()

    @property
    def active_sessions(self) -> int:
        self._reap()
        return len(self._sessions)

    def _reap(self) -> None:
        finished = {handle for handle in self._sessions if handle.done}
        for handle in finished:
            handle.close()
        self._sessions -= finished


__all__ = [
    "AudioBuffer",
    "AudioPlayer",
    "PlaybackHandle",
    "decode_base64_audio",
    "decode_pcm16",
]
