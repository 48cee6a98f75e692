"""
上游 LLM Provider (Kimi / Moonshot chat-completion)
"""

from abc import ABC, abstractmethod
from typing import Any, Callable, Dict, Optional, Sequence
import asyncio
import json
import logging
import time

import aiohttp

from models.persona_models import ChatMessage

logger = logging.getLogger(__name__)


class LLMProviderError(Exception):
    """上游调用失败的基类"""


class ConfigurationError(LLMProviderError):
    """缺少 API 凭证，未发起任何网络请求"""


class UpstreamTimeoutError(LLMProviderError):
    """请求在超时时间内未完成，已被取消"""

    def __init__(self, timeout: float):
        super().__init__(f"上游请求超时 ({timeout}秒)")
        self.timeout = timeout


class UpstreamError(LLMProviderError):
    """上游返回非 2xx 状态或无法解析的响应体"""

    def __init__(self, status: int, body: str):
        super().__init__(f"上游 API 错误: {status}")
        self.status = status
        self.body = body


class NetworkError(LLMProviderError):
    """连接、发送或读取时的传输层错误"""


class LLMProvider(ABC):
    @abstractmethod
    async def complete(
        self,
        messages: Sequence[ChatMessage],
        temperature: float = 0.8,
        max_tokens: Optional[int] = None,
    ) -> Dict[str, Any]:
        pass

    @abstractmethod
    def get_provider_name(self) -> str:
        pass

    @abstractmethod
    def is_available(self) -> bool:
        """是否已配置凭证"""
        pass


class KimiProvider(LLMProvider):
    """Moonshot Kimi chat-completion Provider"""

    def __init__(
        self,
        api_key: str,
        model: str = "moonshot-v1-8k",
        api_url: str = "https://api.moonshot.cn/v1/chat/completions",
        timeout: float = 25.0,
        session_factory: Callable[[], Any] = aiohttp.ClientSession,
    ):
        self.api_key = api_key
        self.model = model
        self.api_url = api_url
        self.timeout = timeout
        self.session_factory = session_factory

    def is_available(self) -> bool:
        return bool(self.api_key)

    def build_payload(
        self,
        messages: Sequence[ChatMessage],
        temperature: float,
        max_tokens: Optional[int] = None,
    ) -> Dict[str, Any]:
        payload: Dict[str, Any] = {
            "model": self.model,
            "messages": [
                m.model_dump() if isinstance(m, ChatMessage) else dict(m)
                for m in messages
            ],
            "temperature": temperature,
        }
        if max_tokens is not None:
            payload["max_tokens"] = max_tokens
        return payload

    def build_headers(self) -> Dict[str, str]:
        return {
            "Content-Type": "application/json",
            "Authorization": f"Bearer {self.api_key}",
        }

    async def complete(
        self,
        messages: Sequence[ChatMessage],
        temperature: float = 0.8,
        max_tokens: Optional[int] = None,
    ) -> Dict[str, Any]:
        if not self.is_available():
            logger.error("KimiProvider 不可用: 未配置 KIMI_API_KEY")
            raise ConfigurationError("未配置 KIMI_API_KEY")

        payload = self.build_payload(messages, temperature, max_tokens)
        start_time = time.time()

        try:
            result = await asyncio.wait_for(self._post(payload), timeout=self.timeout)
        except asyncio.TimeoutError:
            logger.warning(f"Kimi API 超时 ({self.timeout}秒)，已取消请求")
            raise UpstreamTimeoutError(self.timeout)
        except aiohttp.ClientError as e:
            logger.error(f"HTTP 客户端错误: {type(e).__name__}: {e}")
            raise NetworkError(f"HTTP 客户端错误: {e}") from e
        except OSError as e:
            logger.error(f"网络错误: {type(e).__name__}: {e}")
            raise NetworkError(f"网络错误: {e}") from e

        logger.info(f"Kimi API 响应完成 ({time.time() - start_time:.2f}秒)")
        return result

    async def _post(self, payload: Dict[str, Any]) -> Dict[str, Any]:
        async with self.session_factory() as session:
            async with session.post(self.api_url, headers=self.build_headers(), json=payload) as response:
                # 非 UTF-8 字节按替换字符解码
                body = await response.text(errors="replace")

                if not 200 <= response.status < 300:
                    logger.error(f"Kimi API 错误: 状态码 {response.status}")
                    logger.error(f"  错误内容: {body[:500]}")
                    raise UpstreamError(response.status, body)

                try:
                    return json.loads(body)
                except json.JSONDecodeError as e:
                    logger.error(f"Kimi 响应 JSON 解析失败: {e}")
                    raise UpstreamError(response.status, body) from e

    def get_provider_name(self) -> str:
        return f"Kimi {self.model}"


def extract_content(response: Any) -> Optional[str]:
    """取第一个 choice 的 message.content，任意一层缺失都返回 None"""
    if not isinstance(response, dict):
        return None
    choices = response.get("choices")
    if not isinstance(choices, list) or not choices:
        return None
    first = choices[0]
    if not isinstance(first, dict):
        return None
    message = first.get("message")
    if not isinstance(message, dict):
        return None
    content = message.get("content")
    return content if isinstance(content, str) else None


class LLMProviderFactory:
    """LLM Provider 工厂"""

    @staticmethod
    def create(settings) -> LLMProvider:
        provider = KimiProvider(
            api_key=settings.KIMI_API_KEY,
            model=settings.KIMI_MODEL,
            api_url=settings.KIMI_API_URL,
            timeout=settings.UPSTREAM_TIMEOUT,
        )
        if not provider.is_available():
            logger.error("缺少 KIMI_API_KEY，所有生成请求将返回兜底文案")
        return provider
