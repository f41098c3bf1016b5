import httpx
import pytest

from wechat_digest.api.deps import get_batch_service
from wechat_digest.db.session import get_session
from wechat_digest.main import app
from wechat_digest.scrapers.wechat import INVALID_LINK_ERROR, WeChatArticleScraper
from wechat_digest.scrapers.batch_fetcher import BatchFetcher
from wechat_digest.services.batch_summarize_service import BatchSummarizeService

from .conftest import ARTICLE_BASE, article_html


@pytest.fixture
async def api(db, batch_service):
    async def override_session():
        yield db

    app.dependency_overrides[get_session] = override_session
    app.dependency_overrides[get_batch_service] = lambda: batch_service
    transport = httpx.ASGITransport(app=app)
    async with httpx.AsyncClient(transport=transport, base_url="http://test") as client:
        yield client
    app.dependency_overrides.clear()


async def test_health(api):
    response = await api.get("/api/health")

    assert response.status_code == 200
    assert response.json()["status"] == "ok"


async def test_batch_summarize(api, site):
    url = ARTICLE_BASE + "api"
    site.pages[url] = article_html(title="接口文章")

    response = await api.post("/api/batch-summarize", json={"urls": [url, "not-a-url"]})

    assert response.status_code == 200
    body = response.json()
    assert body["success"] is True
    assert body["totalProcessed"] == 2
    assert body["successCount"] == 1
    assert body["failCount"] == 1

    ok, bad = body["results"]
    assert ok["title"] == "接口文章"
    assert "error" not in ok
    assert set(ok["summary"]) == {"summary", "keyPoints", "sentiment", "category"}
    assert ok["summary"]["sentiment"] == "positive"
    assert bad == {"url": "not-a-url", "title": "无效链接", "error": INVALID_LINK_ERROR}


async def test_custom_host_scenario(db, site, summarizer):
    # Same flow against a non-default article host
    scraper = WeChatArticleScraper(client=site.client(), host="mp.example.com")
    service = BatchSummarizeService(
        fetcher=BatchFetcher(scraper, batch_delay=0), summarizer=summarizer, article_delay=0
    )
    site.pages["https://mp.example.com/s/abc"] = article_html()

    report = await service.summarize_urls(db, ["https://mp.example.com/s/abc", "not-a-url"])
    await scraper.client.aclose()

    assert report.total_processed == 2
    assert report.results[1].error == INVALID_LINK_ERROR
    assert report.success_count + report.fail_count == 2


@pytest.mark.parametrize(
    "body",
    [
        {},
        {"urls": []},
        {"urls": "https://mp.weixin.qq.com/s/abc"},
        {"urls": [ARTICLE_BASE + str(i) for i in range(21)]},
    ],
)
async def test_invalid_requests_are_rejected(api, site, body):
    response = await api.post("/api/batch-summarize", json=body)

    assert response.status_code == 400
    assert response.json()["success"] is False
    assert response.json()["error"]
    assert site.calls == []


async def test_account_name_is_used(api, site):
    url = ARTICLE_BASE + "named"
    site.pages[url] = article_html()

    await api.post("/api/batch-summarize", json={"urls": [url], "accountName": "我的公众号"})

    default_history = (await api.get("/api/batch-summarize/history")).json()
    named_history = (await api.get("/api/batch-summarize/history", params={"accountName": "我的公众号"})).json()
    assert default_history["pagination"]["total"] == 0
    assert named_history["pagination"]["total"] == 1


async def test_history(api, site):
    urls = [ARTICLE_BASE + f"hist{i}" for i in range(3)]
    for url in urls:
        site.pages[url] = article_html()
    await api.post("/api/batch-summarize", json={"urls": urls})

    response = await api.get("/api/batch-summarize/history", params={"page": 1, "limit": 2})

    assert response.status_code == 200
    body = response.json()
    assert body["success"] is True
    assert body["pagination"] == {"page": 1, "limit": 2, "total": 3, "pages": 2}
    assert len(body["data"]) == 2
    item = body["data"][0]
    assert item["url"] in urls
    assert item["summary"]["keyPoints"] == ["成本控制", "输出稳定性", "数据安全"]
    assert "publishDate" in item and "createdAt" in item


async def test_history_rejects_bad_page(api):
    response = await api.get("/api/batch-summarize/history", params={"page": 0})

    assert response.status_code == 400
    assert response.json()["success"] is False


def test_run_serves_app_with_uvicorn(mocker):
    from wechat_digest.core.config import settings
    from wechat_digest.main import run

    serve = mocker.patch("uvicorn.run")

    run()

    serve.assert_called_once()
    args, kwargs = serve.call_args
    assert args == ("wechat_digest.main:app",)
    assert kwargs["host"] == settings.HOST
    assert kwargs["port"] == settings.PORT
