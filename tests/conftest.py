"""
Pytest 配置与公共 Fixtures
"""
import pytest
from fastapi.testclient import TestClient
import sys
import os

# 添加项目根目录，便于导入 main
sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))

from main import app, get_provider
from providers.llm_provider import LLMProvider


class FakeProvider(LLMProvider):
    """记录调用并返回预设结果的 Provider"""

    def __init__(self, result=None, error=None):
        self.result = result
        self.error = error
        self.calls = []

    async def complete(self, messages, temperature=0.8, max_tokens=None):
        self.calls.append({
            "messages": list(messages),
            "temperature": temperature,
            "max_tokens": max_tokens,
        })
        if self.error is not None:
            raise self.error
        return self.result

    def get_provider_name(self) -> str:
        return "Fake Provider"

    def is_available(self) -> bool:
        return True


def completion(content):
    """上游 chat-completion 响应"""
    return {"choices": [{"message": {"role": "assistant", "content": content}}]}


@pytest.fixture
def fake_provider():
    return FakeProvider(result=completion("默认回复"))


@pytest.fixture
def client(fake_provider):
    """FastAPI 测试客户端 (Provider 替换为 FakeProvider)"""
    app.dependency_overrides[get_provider] = lambda: fake_provider
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def story_request():
    return {
        "beast": "麒麟",
        "poemTitle": "静夜思",
        "poet": "李白",
        "poemText": "床前明月光，疑是地上霜。举头望明月，低头思故乡。"
    }


@pytest.fixture
def dialogue_request():
    return {"question": "明月几时有？"}


@pytest.fixture
def continuation_request():
    return {"firstLine": "窗前明月光"}
