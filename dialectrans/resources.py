"""资源管理模块"""

import aiohttp
import openai
import logging
from typing import Optional

logger = logging.getLogger(__name__)


class SessionManager:
    """管理语音合成所用的异步HTTP会话"""

    def __init__(self, api_key: str, timeout: float = 60):
        self.api_key = api_key
        self.timeout = timeout
        self._session: Optional[aiohttp.ClientSession] = None

    async def initialize(self):
        """初始化会话"""
        if not self._session or self._session.closed:
            self._session = aiohttp.ClientSession(
                headers={"x-goog-api-key": self.api_key},
                timeout=aiohttp.ClientTimeout(total=self.timeout),
            )

    async def get_session(self) -> aiohttp.ClientSession:
        """获取会话实例"""
        if not self._session or self._session.closed:
            await self.initialize()
        return self._session

    async def cleanup(self):
        """清理会话资源"""
        if self._session and not self._session.closed:
            await self._session.close()
        self._session = None


class ClientManager:
    """管理兼容 OpenAI 协议的文本生成客户端"""

    def __init__(self, api_key: str, base_url: str, timeout: float = 30):
        self.api_key = api_key
        self.base_url = base_url
        self.timeout = timeout
        self._client: Optional[openai.AsyncOpenAI] = None

    async def initialize(self):
        """初始化客户端"""
        if not self._client:
            # 不做自动重试
            self._client = openai.AsyncOpenAI(
                api_key=self.api_key,
                base_url=self.base_url,
                timeout=self.timeout,
                max_retries=0,
            )

    async def get_client(self) -> openai.AsyncOpenAI:
        """获取客户端实例"""
        if not self._client:
            await self.initialize()
        return self._client

    async def cleanup(self):
        """清理客户端资源"""
        if self._client:
            await self._client.close()
            self._client = None


class ResourceManager:
    """统一管理所有网络资源"""

    def __init__(self, api_key: str, base_url: str, timeout: float = 30, speech_timeout: float = 60):
        self.session_manager = SessionManager(api_key, timeout=speech_timeout)
        self.client_manager = ClientManager(api_key, base_url, timeout=timeout)
        self._is_initialized = False

    @property
    def is_initialized(self) -> bool:
        return self._is_initialized

    async def initialize(self):
        """初始化所有资源"""
        if not self._is_initialized:
            await self.session_manager.initialize()
            await self.client_manager.initialize()
            self._is_initialized = True
            logger.info("网络资源已初始化")

    async def cleanup(self):
        """清理所有资源"""
        try:
            await self.session_manager.cleanup()
            await self.client_manager.cleanup()
            self._is_initialized = False
            logger.info("网络资源已释放")
        except Exception as e:
            logger.error("释放网络资源时出错: %s", e)
            raise

    async def __aenter__(self):
        await self.initialize()
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self.cleanup()
