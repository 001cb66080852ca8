"""常量和配置定义"""

# API 相关常量
DEFAULT_BASE_URL = "https://generativelanguage.googleapis.com/v1beta/openai/"
DEFAULT_SPEECH_URL = "https://generativelanguage.googleapis.com/v1beta"
DEFAULT_MODEL = "gemini-3-flash-preview"
DEFAULT_TTS_MODEL = "gemini-2.5-flash-preview-tts"
DEFAULT_VOICE = "Kore"

# 环境变量名称
ENV_API_KEY = "GEMINI_API_KEY"
ENV_API_KEY_FALLBACK = "API_KEY"
ENV_BASE_URL = "DIALECTRANS_BASE_URL"
ENV_SPEECH_URL = "DIALECTRANS_SPEECH_URL"
ENV_MODEL = "DIALECTRANS_MODEL"
ENV_TTS_MODEL = "DIALECTRANS_TTS_MODEL"
ENV_VOICE = "DIALECTRANS_VOICE"

# 音频参数（语音模型固定输出 24kHz 单声道 16 位 PCM）
OUTPUT_SAMPLE_RATE = 24000
OUTPUT_CHANNELS = 1
SAMPLE_WIDTH = 2
PCM_SCALE = 32768.0

# 性能配置
DEFAULT_PERFORMANCE_CONFIG = {
    'timeout': 30,
    'speech_timeout': 60,
    'temperature': 0.3,
    'max_tokens': 1024,
}

PERFORMANCE_PROFILES = {
    'fast': {
        'timeout': 15,
        'speech_timeout': 30,
        'temperature': 0.5,
        'max_tokens': 512,
    },
    'balanced': DEFAULT_PERFORMANCE_CONFIG,
    'accurate': {
        'timeout': 60,
        'speech_timeout': 90,
        'temperature': 0.1,
        'max_tokens': 2048,
    }
}

# 历史记录与持久化
HISTORY_LIMIT = 50
HISTORY_STORAGE_KEY = "huaxiazi_v6_history"
PROFILE_STORAGE_KEY = "huaxiazi_v6_profile"

# 提示消息及其显示时长（秒）
TRANSLATE_FAILED_NOTICE = "翻译遇到了点阻碍"
TRANSLATE_NOTICE_SECONDS = 2.0
SPEECH_FAILED_NOTICE = "语音失败，请检查网络"
SPEECH_NOTICE_SECONDS = 3.0
COPIED_NOTICE = "已收纳"
COPIED_NOTICE_SECONDS = 1.5

# 语音识别语言固定为普通话
CAPTURE_LANGUAGE = "zh-CN"

# 语言检测结果映射
LANG_CODE_MAP = {
    'zh-cn': 'zh',
    'zh-tw': 'zh',
    'zh': 'zh',
    'en': 'en',
}

SOURCE_LANGUAGE_NAMES = {
    'zh': '普通话',
    'en': '英文',
    'auto': '普通话或英文',
}

# 各方言的注音体系
ROMANIZATION_HINTS = {
    'CANTONESE': '粤拼',
    'TEOCHEW': '潮州话拼音',
    'SHANGHAINESE': '吴语拼音',
    'SUZHOUNESE': '吴语拼音',
    'HOKKIEN': '台罗拼音',
    'SICHUANESE': '四川话拼音',
    'BEIJING': '汉语拼音（标注儿化）',
    'NORTHEASTERN': '汉语拼音',
    'HAKKA': '客家话拼音',
    'HUNANESE': '长沙话拼音',
    'GAN': '南昌话拼音',
    'JIN': '晋语拼音',
    'HAINANESE': '海南话拼音',
    'FUZHOU': '平话字',
    'SHANDONG': '汉语拼音',
}
