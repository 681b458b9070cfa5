import logging
from typing import Optional
from urllib.parse import urlparse

import httpx
from bs4 import BeautifulSoup

from .errors import ListingFetchError
from .normalize import normalize_job_description

logger = logging.getLogger(__name__)

# Below this many characters a static fetch is assumed to have hit a JS shell
MIN_LISTING_CHARS = 100

# Longest job description handed on to the analyzer
MAX_LISTING_CHARS = 50_000

BROWSER_TIMEOUT = 30_000  # milliseconds

_USER_AGENT = (
    "Mozilla/5.0 (Macintosh; Intel Mac OS X 10_15_7) "
    "AppleWebKit/537.36 (KHTML, like Gecko) Chrome/124.0.0.0 Safari/537.36"
)
_BOILERPLATE_TAGS = ["script", "style", "nav", "footer", "header", "noscript"]
_PASTE_HINT = "Please paste the job description manually instead."

try:
    from playwright.async_api import async_playwright

    PLAYWRIGHT_AVAILABLE = True
except ImportError:
    PLAYWRIGHT_AVAILABLE = False
    logger.info("Playwright not installed; job listings that need JavaScript cannot be imported")


def check_listing_url(url: str) -> str:
    url = url.strip()
    parsed = urlparse(url)
    if parsed.scheme not in ("http", "https") or not parsed.netloc:
        raise ListingFetchError("Invalid URL. Please provide a valid HTTP or HTTPS URL.")
    return url


def listing_text_from_html(html: str) -> str:
    """Drop page chrome and return the visible text, normalized and capped."""
    soup = BeautifulSoup(html, "lxml")
    for tag in soup.find_all(_BOILERPLATE_TAGS):
        tag.decompose()
    text = normalize_job_description(soup.get_text(separator="\n", strip=True))
    return text[:MAX_LISTING_CHARS]


async def _fetch_static(
    url: str, timeout: float, transport: Optional[httpx.AsyncBaseTransport]
) -> str:
    async with httpx.AsyncClient(
        timeout=timeout,
        follow_redirects=True,
        headers={"User-Agent": _USER_AGENT},
        transport=transport,
    ) as client:
        response = await client.get(url)
        response.raise_for_status()
    return listing_text_from_html(response.text)


async def _fetch_rendered(url: str) -> str:
    async with async_playwright() as p:
        browser = await p.chromium.launch(headless=True)
        try:
            page = await browser.new_page(user_agent=_USER_AGENT)
            await page.goto(url, wait_until="networkidle", timeout=BROWSER_TIMEOUT)
            html = await page.content()
        finally:
            await browser.close()
    return listing_text_from_html(html)


async def fetch_job_listing(
    url: str,
    *,
    timeout: float = 15.0,
    transport: Optional[httpx.AsyncBaseTransport] = None,
) -> str:
    """Import a job description from a listing page.

    A plain HTTP fetch is tried first; pages that come back (nearly) empty
    are rendered with headless Chromium when Playwright is installed.
    """
    url = check_listing_url(url)

    try:
        text = await _fetch_static(url, timeout, transport)
    except httpx.HTTPError as exc:
        logger.warning("Static fetch failed for %s: %s", url, exc)
    else:
        if len(text) >= MIN_LISTING_CHARS:
            logger.info("Imported listing from %s (%d chars)", url, len(text))
            return text
        logger.info("Static fetch of %s returned %d chars, trying a browser", url, len(text))

    if not PLAYWRIGHT_AVAILABLE:
        raise ListingFetchError(
            "Could not read enough of the job listing at that URL. " + _PASTE_HINT
        )

    try:
        text = await _fetch_rendered(url)
    except Exception as exc:
        logger.error("Browser fetch also failed for %s: %s", url, exc)
        raise ListingFetchError(
            "Could not fetch the job listing from that URL. " + _PASTE_HINT
        ) from exc

    if len(text) < MIN_LISTING_CHARS:
        raise ListingFetchError(
            "The page did not contain enough text to identify a job listing. " + _PASTE_HINT
        )
    logger.info("Imported rendered listing from %s (%d chars)", url, len(text))
    return text
