import json
import os

# Must be set before wechat_digest.core.config is imported
os.environ["DATABASE_URL"] = "sqlite+aiosqlite://"
os.environ.setdefault("WECHAT_LOG_LEVEL", "DEBUG")

import httpx
import pytest
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool
from sqlmodel import SQLModel

import wechat_digest.models  # noqa: F401  registers tables
from wechat_digest.ai.providers import DeepSeekClient
from wechat_digest.ai.services.article_summarizer import ArticleSummarizer
from wechat_digest.scrapers.batch_fetcher import BatchFetcher
from wechat_digest.scrapers.wechat import WeChatArticleScraper
from wechat_digest.services.batch_summarize_service import BatchSummarizeService

ARTICLE_BASE = "https://mp.weixin.qq.com/s/"
LLM_URL = "https://llm.test/chat/completions"

PARAGRAPHS = [
    "人工智能正在深刻改变软件开发的方式，越来越多的团队开始引入自动化工具。",
    "本文总结了三个在生产环境中落地大模型应用时最常遇到的问题以及应对思路。",
    "第一是成本控制，第二是输出稳定性，第三是数据安全与合规方面的要求。",
]


def article_html(
    title="大模型落地的三个难题",
    author="技术前线",
    date="2024年3月5日",
    paragraphs=PARAGRAPHS,
):
    body = "".join(f"<p>{p}</p>" for p in paragraphs)
    return f"""
    <html><head><title>ignored</title></head><body>
      <h1 id="activity-name">  {title}  </h1>
      <div id="meta">
        <span class="profile_nickname">{author}</span>
        <em id="publish_time">{date}</em>
      </div>
      <div id="js_content">
        <script>var a = 1;</script>
        <style>.x {{ color: red; }}</style>
        {body}
        <div class="qr_code_pc_outer"><p>扫描二维码关注我们的公众号获取更多内容</p></div>
      </div>
    </body></html>
    """


def completion(content):
    return {"choices": [{"message": {"role": "assistant", "content": content}}]}


def summary_answer(**overrides):
    answer = {
        "summary": "文章讨论了大模型落地中的成本、稳定性与合规问题。",
        "keyPoints": ["成本控制", "输出稳定性", "数据安全"],
        "sentiment": "positive",
        "category": "科技",
    }
    answer.update(overrides)
    return "分析结果如下：\n" + json.dumps(answer, ensure_ascii=False)


class PageSite:
    """Serves canned article pages and counts fetches"""

    def __init__(self, pages=None):
        self.pages = dict(pages or {})
        self.calls = []

    def handler(self, request: httpx.Request) -> httpx.Response:
        url = str(request.url)
        self.calls.append(url)
        html = self.pages.get(url)
        if html is None:
            return httpx.Response(404, text="not found")
        return httpx.Response(200, text=html)

    def client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(transport=httpx.MockTransport(self.handler))


class FakeLLM:
    """Answers chat completions with canned content"""

    def __init__(self, answer=None, status_code=200):
        self.answer = answer if answer is not None else summary_answer()
        self.status_code = status_code
        self.requests = []

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(json.loads(request.content))
        if self.status_code != 200:
            return httpx.Response(self.status_code, text="upstream error")
        return httpx.Response(200, json=completion(self.answer))

    def client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(transport=httpx.MockTransport(self.handler))


@pytest.fixture
async def engine():
    engine = create_async_engine(
        "sqlite+aiosqlite://",
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )
    async with engine.begin() as conn:
        await conn.run_sync(SQLModel.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest.fixture
async def db(engine):
    session_factory = async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)
    async with session_factory() as session:
        yield session


@pytest.fixture
def site():
    return PageSite()


@pytest.fixture
def llm():
    return FakeLLM()


@pytest.fixture
async def scraper(site):
    async with site.client() as client:
        yield WeChatArticleScraper(client=client)


@pytest.fixture
async def summarizer(llm):
    async with llm.client() as client:
        ai_client = DeepSeekClient(api_url=LLM_URL, api_key="sk-test-key", client=client)
        yield ArticleSummarizer(ai_client, batch_delay=0)


@pytest.fixture
def batch_service(scraper, summarizer):
    return BatchSummarizeService(
        fetcher=BatchFetcher(scraper, window_size=2, batch_delay=0),
        summarizer=summarizer,
        article_delay=0,
    )
