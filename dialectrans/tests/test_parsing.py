"""请求构建与响应解析测试"""

import json

import pytest

from dialectrans.exceptions import MalformedResponseError, NoAudioPayloadError, ValidationError
from dialectrans.models import DIALECT_CATEGORIES, Dialect, TranslationMode, TranslationResult
from dialectrans.parsing import extract_inline_audio, parse_translation, try_parse_translation
from dialectrans.prompts import TRANSLATION_SCHEMA, build_speech_request, build_translation_request

VALID = {
    "translatedText": "食咗飯未啊",
    "phonetic": "sik6 zo2 faan6 mei6 aa3",
    "meaning": "问对方是否吃过饭",
    "dialectName": "粤语",
}


@pytest.mark.parametrize("dialect", list(Dialect))
@pytest.mark.parametrize("mode", list(TranslationMode))
def test_request_embeds_text(dialect, mode):
    """每种方言和方向的请求都包含原文和对应方向的指令"""
    request = build_translation_request("今晚一起吃饭", dialect, mode)
    assert '"今晚一起吃饭"' in request.prompt
    assert dialect.label in request.system_instruction
    if mode is TranslationMode.TO_DIALECT:
        assert f"翻译成指定的方言：{dialect.label}" in request.system_instruction
    else:
        assert "翻译成标准普通话" in request.system_instruction
    assert request.response_schema == TRANSLATION_SCHEMA


def test_request_romanization_hint():
    """粤语请求要求使用粤拼标注"""
    request = build_translation_request("你吃饭了吗", Dialect.CANTONESE, TranslationMode.TO_DIALECT)
    assert "粤拼" in request.prompt
    assert "不是逐字替换" in request.system_instruction


def test_request_source_language():
    """英文输入时指令说明原文是英文"""
    request = build_translation_request("Good morning", Dialect.HOKKIEN, TranslationMode.TO_DIALECT, source_lang="en")
    assert "英文" in request.system_instruction


def test_request_messages_and_format():
    request = build_translation_request("你好", Dialect.JIN, TranslationMode.TO_MANDARIN)
    messages = request.to_messages()
    assert [m["role"] for m in messages] == ["system", "user"]
    fmt = request.response_format()
    assert fmt["json_schema"]["strict"] is True
    assert fmt["json_schema"]["schema"]["required"] == ["translatedText", "phonetic", "meaning", "dialectName"]


@pytest.mark.parametrize("text", ["", "   ", None])
def test_request_rejects_blank(text):
    with pytest.raises(ValidationError):
        build_translation_request(text, Dialect.JIN, TranslationMode.TO_DIALECT)
    with pytest.raises(ValidationError):
        build_speech_request(text, Dialect.JIN)


def test_speech_request_payload():
    """方言身份通过指令文本传达，音色固定"""
    request = build_speech_request("爱拼才会赢", Dialect.HOKKIEN)
    payload = request.payload()
    instruction = payload["contents"][0]["parts"][0]["text"]
    assert "爱拼才会赢" in instruction
    assert Dialect.HOKKIEN.label in instruction
    assert "口音" in instruction
    assert payload["generationConfig"]["responseModalities"] == ["AUDIO"]
    voice = payload["generationConfig"]["speechConfig"]["voiceConfig"]["prebuiltVoiceConfig"]
    assert voice == {"voiceName": "Kore"}


def test_parse_example_reply():
    result = parse_translation(json.dumps(VALID, ensure_ascii=False))
    assert result == TranslationResult(
        translated_text="食咗飯未啊",
        phonetic="sik6 zo2 faan6 mei6 aa3",
        meaning="问对方是否吃过饭",
        dialect_name="粤语",
    )


def test_parse_round_trip():
    original = TranslationResult("好中意你", "hou2 zung1 ji3 nei5", "很喜欢你", "粤语")
    assert parse_translation(json.dumps(original.to_dict())) == original


def test_parse_trims_and_unfences():
    raw = "\n  ```json\n" + json.dumps(VALID) + "\n```  \n"
    assert parse_translation(raw).phonetic == VALID["phonetic"]


def test_parse_allows_empty_phonetic():
    result = parse_translation(json.dumps(dict(VALID, phonetic="")))
    assert result.phonetic == ""


@pytest.mark.parametrize("missing", list(VALID))
def test_parse_missing_field(missing):
    """缺少任一字段都失败，且不产生部分结果"""
    data = {k: v for k, v in VALID.items() if k != missing}
    outcome = try_parse_translation(json.dumps(data))
    assert not outcome.ok
    assert outcome.value is None
    assert missing in str(outcome.error)
    with pytest.raises(MalformedResponseError):
        parse_translation(json.dumps(data))


@pytest.mark.parametrize("raw", [None, "", "   ", "not json", "[1, 2]", '{"translatedText": 1}'])
def test_parse_malformed(raw):
    with pytest.raises(MalformedResponseError):
        parse_translation(raw)


def test_parse_non_string_field():
    outcome = try_parse_translation(json.dumps(dict(VALID, meaning=None)))
    assert not outcome.ok
    assert "meaning" in str(outcome.error)


def test_extract_first_inline_part():
    response = {
        "candidates": [
            {
                "content": {
                    "parts": [
                        {"text": "好的"},
                        {"inlineData": {"data": "Zmlyc3Q="}},
                        {"inlineData": {"data": "c2Vjb25k"}},
                    ]
                }
            },
            {"content": {"parts": [{"inlineData": {"data": "b3RoZXI="}}]}},
        ]
    }
    assert extract_inline_audio(response) == "Zmlyc3Q="


def test_extract_snake_case_part():
    response = {"candidates": [{"content": {"parts": [{"inline_data": {"data": "QUJD"}}]}}]}
    assert extract_inline_audio(response) == "QUJD"


@pytest.mark.parametrize(
    "response",
    [
        {},
        {"candidates": []},
        {"candidates": [{}]},
        {"candidates": [{"content": {"parts": []}}]},
        {"candidates": [{"content": {"parts": [{"text": "no audio"}]}}]},
        {"candidates": [{"content": {"parts": [{"inlineData": {"data": ""}}]}}]},
    ],
)
def test_extract_no_audio(response):
    with pytest.raises(NoAudioPayloadError):
        extract_inline_audio(response)


def test_dialect_lookup_and_categories():
    assert Dialect.from_label("CANTONESE") is Dialect.CANTONESE
    assert Dialect.from_label("吴语 (苏州)") is Dialect.SUZHOUNESE
    with pytest.raises(ValidationError):
        Dialect.from_label("火星话")

    grouped = [d for dialects in DIALECT_CATEGORIES.values() for d in dialects]
    assert sorted(grouped, key=lambda d: d.name) == sorted(Dialect, key=lambda d: d.name)


@pytest.mark.parametrize("field", ["translatedText", "meaning"])
def test_parse_rejects_empty_text_fields(field):
    """译文和释义不能为空字符串"""
    outcome = try_parse_translation(json.dumps(dict(VALID, **{field: "  "})))
    assert not outcome.ok
    assert field in str(outcome.error)


@pytest.mark.parametrize(
    "response",
    [
        {"candidates": {"content": {}}},
        {"candidates": "audio"},
        {"candidates": [{"content": {"parts": {"inlineData": {"data": "QUJD"}}}}]},
        {"candidates": [{"content": {"parts": [{"inlineData": {"data": 12345}}]}}]},
        {"candidates": [{"content": {"parts": [{"inlineData": ["QUJD"]}]}}]},
    ],
)
def test_extract_rejects_wrong_shapes(response):
    """结构不符合预期的响应一律视为没有音频"""
    with pytest.raises(NoAudioPayloadError):
        extract_inline_audio(response)


def test_extract_skips_non_string_data():
    response = {
        "candidates": [
            {"content": {"parts": [{"inlineData": {"data": 1}}, {"inlineData": {"data": "QUJD"}}]}}
        ]
    }
    assert extract_inline_audio(response) == "QUJD"
