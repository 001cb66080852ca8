"""异常处理模块"""


class DialectError(Exception):
    """方言翻译器基础异常类"""
    pass


class ConfigError(DialectError):
    """配置错误"""
    pass


class ValidationError(DialectError):
    """输入验证错误"""
    pass


class TransportError(DialectError):
    """远程服务调用失败（网络、超时或服务端错误）"""
    pass


class MalformedResponseError(DialectError):
    """翻译模型输出无法解析或缺少必需字段"""

    def __init__(self, message: str, raw: str = "") -> None:
        super().__init__(message)
        self.raw = raw


class NoAudioPayloadError(DialectError):
    """语音响应中没有内联音频数据"""
    pass


class InvalidAudioFormatError(DialectError):
    """音频字节流不是完整的 16 位 PCM"""
    pass


class CaptureError(DialectError):
    """语音识别失败"""
    pass


class PlaybackError(DialectError):
    """音频输出设备不可用或播放失败"""
    pass
