"""语音识别能力接口。

识别本身由外部提供（浏览器、系统服务等），这里只约定会话控制器使用的形状。
"""

from __future__ import annotations

from typing import Optional, Protocol

from .constants import CAPTURE_LANGUAGE


class SpeechCapture(Protocol):
    """一次录音对应一个识别结果。

    ``result()`` 返回识别出的文本；被取消或没有识别到内容时返回 None；
    识别失败时抛出 :class:`~dialectrans.exceptions.CaptureError`。
    """

    language: str

    def start(self) -> None:
        ...

    def stop(self) -> None:
        ...

    async def result(self) -> Optional[str]:
        ...


__all__ = ["SpeechCapture", "CAPTURE_LANGUAGE"]
