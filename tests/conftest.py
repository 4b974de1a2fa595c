"""
Pytest configuration and fixtures
"""
import asyncio
import os
from typing import Any, List, Optional

import pytest

# Keep rate-limit counters in memory and never talk to the real endpoint.
os.environ["REDIS_URL"] = ""
os.environ["SILICONFLOW_API_KEY"] = ""

from fastapi.testclient import TestClient
from langchain_core.messages import AIMessage

from chinese_namer.config import Settings
from chinese_namer.generator import NameGenerator
from chinese_namer.llm_service import ModelClient
from chinese_namer.main import app, get_name_generator
from chinese_namer.rate_limit import RateLimiter, get_rate_limiter

VALID_JSON = """{
  "names": [
    {"chineseName": "乔安", "pinyin": "Qiáo ān", "chineseMeaning": "乔木挺拔，平安喜乐", "englishMeaning": "Tall as a tree, peaceful and joyful"},
    {"chineseName": "卓恩", "pinyin": "Zhuó ēn", "chineseMeaning": "卓越不凡，心怀感恩", "englishMeaning": "Outstanding and grateful"},
    {"chineseName": "俊朗", "pinyin": "Jùn lǎng", "chineseMeaning": "英俊开朗", "englishMeaning": "Handsome and cheerful"}
  ]
}"""


class FakeChatModel:
    """Stands in for ChatOpenAI: records prompts and answers from a script."""

    def __init__(self, content: Any = VALID_JSON, exc: Optional[Exception] = None, delay: float = 0):
        self.content = content
        self.exc = exc
        self.delay = delay
        self.calls: List[Any] = []
        self.cancelled = False

    async def ainvoke(self, messages):
        self.calls.append(messages)
        if self.delay:
            try:
                await asyncio.sleep(self.delay)
            except asyncio.CancelledError:
                self.cancelled = True
                raise
        if self.exc:
            raise self.exc
        if isinstance(self.content, str):
            return AIMessage(content=self.content)
        return self.content


def make_settings(**overrides) -> Settings:
    values = {"siliconflow_api_key": None, "llm_timeout_seconds": 1.0, "redis_url": ""}
    values.update(overrides)
    return Settings(_env_file=None, **values)


@pytest.fixture
def settings() -> Settings:
    return make_settings()


@pytest.fixture
def api_client():
    """Return a factory building a TestClient around a fake chat model and a fresh limiter."""
    clients = []

    def _build(llm: Any = None, max_requests: int = 10, **settings_overrides) -> TestClient:
        model = ModelClient(make_settings(**settings_overrides), llm=llm)
        generator = NameGenerator(model)
        limiter = RateLimiter(max_requests=max_requests, window_ms=15 * 60 * 1000, redis_url=None)
        app.dependency_overrides[get_name_generator] = lambda: generator
        app.dependency_overrides[get_rate_limiter] = lambda: limiter
        client = TestClient(app)
        clients.append(client)
        return client

    yield _build

    for client in clients:
        client.close()
    app.dependency_overrides.clear()
