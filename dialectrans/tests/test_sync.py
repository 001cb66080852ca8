"""同步接口测试模块"""

import json
from unittest.mock import AsyncMock, MagicMock, patch

import pytest

from dialectrans.exceptions import MalformedResponseError
from dialectrans.models import Dialect, TranslationMode, TranslationResult
from dialectrans.sync import DialectTranslatorSync, create

REPLY = TranslationResult("阿拉去白相", "ah la chi bah shian", "我们去玩", "上海话")


@pytest.fixture
def translator():
    """创建同步翻译器实例"""
    with create(api_key="test-key") as translator:
        yield translator


def test_basic_translation(translator):
    """测试基础翻译功能"""
    with patch.object(translator.translator, "translate", AsyncMock(return_value=REPLY)) as mocked:
        result = translator.translate("我们去玩", Dialect.SHANGHAINESE)
    assert result == REPLY
    mocked.assert_awaited_once_with("我们去玩", Dialect.SHANGHAINESE, TranslationMode.TO_DIALECT)


def test_error_handling(translator):
    """测试错误透传"""
    failing = AsyncMock(side_effect=MalformedResponseError("缺少字段: meaning"))
    with patch.object(translator.translator, "translate", failing):
        with pytest.raises(MalformedResponseError):
            translator.translate("你好", Dialect.SHANGHAINESE)


def test_generate_speech(translator):
    """测试同步语音合成"""
    with patch.object(translator.translator, "generate_speech", AsyncMock(return_value="AAAA")):
        assert translator.generate_speech("你好", Dialect.GAN) == "AAAA"


def test_reply_round_trip(translator):
    """测试真实解析路径：模型输出经客户端解析为结果"""
    raw = json.dumps(REPLY.to_dict(), ensure_ascii=False)
    response = MagicMock()
    response.choices = [MagicMock()]
    response.choices[0].message.content = raw
    client = MagicMock()
    client.chat.completions.create = AsyncMock(return_value=response)
    with patch.object(translator.translator.resources.client_manager, "get_client", AsyncMock(return_value=client)):
        result = translator.translate("我们去玩", Dialect.SHANGHAINESE, "TO_DIALECT")
    assert result == REPLY


def test_performance_config(translator):
    """测试性能配置"""
    translator.set_performance_config(timeout=5, temperature=0.0)
    config = translator.get_config()
    assert config['performance_config']['timeout'] == 5
    assert config['performance_config']['temperature'] == 0.0


def test_metrics(translator):
    """测试性能指标"""
    metrics = translator.get_metrics()
    assert metrics['total_requests'] == 0
    assert "operations" in metrics


def test_context_manager():
    """测试上下文管理器"""
    with DialectTranslatorSync(api_key="test-key") as translator:
        assert translator.get_config()["api_key"] == "test..."
    assert translator._loop.is_closed()


if __name__ == "__main__":
    pytest.main([__file__])
