"""
Shared pytest fixtures for platform extraction tests.

Provides reusable fixtures for:
- Configuration and settings
- Sample xiaohongshu and Google pages
- A fake clock for pacing tests
- Global state isolation
"""

import tempfile
from pathlib import Path
from typing import Generator

import pytest

from platform_extract.config import Settings, reset_settings
from platform_extract.dom import SoupDocument
from platform_extract.utils.logging import reset_logging
from platform_extract.utils.metrics import Metrics

XHS_SEARCH_URL = "https://www.xiaohongshu.com/search_result?keyword=pasta"
XHS_DETAIL_URL = "https://www.xiaohongshu.com/explore/abc123"
GOOGLE_SEARCH_URL = "https://www.google.com/search?q=python+asyncio"


@pytest.fixture(autouse=True)
def reset_global_state():
    """Reset cached settings, logging handlers and metrics around each test."""
    reset_settings()
    reset_logging()
    Metrics.reset()
    yield
    reset_settings()
    reset_logging()
    Metrics.reset()


@pytest.fixture
def temp_dir() -> Generator[Path, None, None]:
    """Provide a temporary directory that's cleaned up after the test."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


@pytest.fixture
def test_settings() -> Settings:
    """Default settings; platforms keep their shipped pacing policy."""
    return Settings()


class FakeClock:
    """
    Manually driven clock.

    ``sleep`` records the requested wait and advances time by it, so a
    paced batch runs instantly while still observing real elapsed values.
    """

    def __init__(self, start: float = 1000.0) -> None:
        self.now = start
        self.sleeps: list[float] = []

    def __call__(self) -> float:
        return self.now

    async def sleep(self, seconds: float) -> None:
        self.sleeps.append(seconds)
        self.now += seconds

    def advance(self, seconds: float) -> None:
        self.now += seconds


@pytest.fixture
def fake_clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def xhs_search_html() -> str:
    """
    Search page with three note cards.

    The second card has no real text and is dropped in preview mode.
    """
    return """
    <!DOCTYPE html>
    <html>
    <head><title>pasta - 小红书搜索</title></head>
    <body>
    <div class="feeds-container">
      <section class="note-item">
        <div class="cover-wrap">
          <a class="cover" href="/search_result/abc123?xsec_source=pc_search">
            <img src="https://sns-img.xhscdn.com/cover1.jpg" width="240" height="320">
          </a>
        </div>
        <div class="footer">
          <a class="title" href="/explore/abc123">
            <span>Creamy garlic pasta in fifteen minutes for busy weeknights</span>
          </a>
          <div class="card-bottom">
            <a class="author" href="/user/profile/u1">
              <img class="author-avatar" src="https://sns-avatar.xhscdn.com/avatar1.jpg" width="20" height="20">
              <span class="name">Chef Lin</span>
            </a>
            <span class="like-wrapper"><span class="count like-count">1.2万</span></span>
          </div>
        </div>
      </section>
      <section class="note-item">
        <a class="cover" href="/explore/def456">
          <img src="https://sns-img.xhscdn.com/cover2.jpg" width="240" height="320">
        </a>
        <div class="footer">
          <a class="title" href="/explore/def456"><span>Tiny</span></a>
        </div>
      </section>
      <section class="note-item">
        <div class="cover-wrap">
          <a class="cover" href="/search_result/ghi789">
            <img src="https://sns-img.xhscdn.com/cover3.jpg" width="240" height="300">
          </a>
        </div>
        <div class="footer">
          <a class="title" href="/explore/ghi789">
            <span>Lemon butter spaghetti that tastes like summer</span>
          </a>
          <div class="card-bottom">
            <a class="author" href="/user/profile/u3"><span class="name">Mia Cooks</span></a>
            <span class="like-wrapper"><span class="count like-count">3.4k</span></span>
          </div>
        </div>
      </section>
    </div>
    </body>
    </html>
    """


@pytest.fixture
def xhs_detail_html() -> str:
    """Note detail page with a hidden block and a script to ignore."""
    return """
    <!DOCTYPE html>
    <html>
    <head>
      <title>Creamy garlic pasta - 小红书</title>
      <script>var state = "ignore me please";</script>
    </head>
    <body>
    <article class="note-detail">
      <h1 id="detail-title" class="title">Creamy garlic pasta in fifteen minutes</h1>
      <a class="author" href="/user/profile/u1"><span class="username">Chef Lin</span></a>
      <div id="detail-desc" class="desc">
        <span class="note-text">
          <span>Boil the pasta until al dente. Melt butter with four cloves of garlic,
          add cream and parmesan, then toss everything together.</span>
          <a class="tag" href="/search_result?keyword=pasta">#pasta</a>
        </span>
      </div>
      <div class="secret" style="display: none">secret hidden text here</div>
      <script>console.log("not content either");</script>
    </article>
    </body>
    </html>
    """


@pytest.fixture
def google_search_html() -> str:
    """Results page with two organic results and one ad block."""
    return """
    <!DOCTYPE html>
    <html>
    <head><title>python asyncio - Google Search</title></head>
    <body>
    <div id="search"><div id="rso">
      <div class="g">
        <div class="yuRUbf">
          <a href="https://docs.python.org/3/library/asyncio.html">
            <h3>asyncio: Asynchronous I/O in Python 3 documentation</h3>
          </a>
          <cite>https://docs.python.org/3/library/asyncio.html</cite>
        </div>
        <div class="VwiC3b">asyncio is a library to write concurrent code using
          the async/await syntax. It is used as a foundation for multiple Python
          asynchronous frameworks.</div>
      </div>
      <div class="g">
        <div class="yuRUbf">
          <a href="/url?q=https://realpython.com/async-io-python/&amp;sa=U">
            <h3>Async IO in Python: A Complete Walkthrough</h3>
          </a>
        </div>
        <div class="VwiC3b"><span>Mar 5, 2024</span> - Async IO is a concurrent
          programming design that has received dedicated support in Python.</div>
      </div>
    </div></div>
    <div id="tads">
      <div class="g">
        <div class="yuRUbf">
          <a href="https://ads.example.com/python-course"><h3>Learn Python Fast Course</h3></a>
        </div>
        <div class="VwiC3b">Enroll now in the most popular python course online today.</div>
      </div>
    </div>
    </body>
    </html>
    """


@pytest.fixture
def xhs_search_page(xhs_search_html: str) -> SoupDocument:
    return SoupDocument(xhs_search_html, url=XHS_SEARCH_URL)


@pytest.fixture
def xhs_detail_page(xhs_detail_html: str) -> SoupDocument:
    return SoupDocument(xhs_detail_html, url=XHS_DETAIL_URL)


@pytest.fixture
def google_page(google_search_html: str) -> SoupDocument:
    return SoupDocument(google_search_html, url=GOOGLE_SEARCH_URL)
