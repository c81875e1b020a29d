"""Search result page loading and job tile parsing"""

import logging
import re

from playwright.async_api import Error as PlaywrightError
from playwright.async_api import TimeoutError as PlaywrightTimeoutError

from linkedin_autoapply.config import DELAYS
from linkedin_autoapply.errors import ListingParseError, PageLoadError, raise_if_closed
from linkedin_autoapply.models import JobPosting
from linkedin_autoapply.reasoning.normalize import deduplicate_text
from linkedin_autoapply.utils.timing import human_delay

log = logging.getLogger(__name__)

LINKEDIN_ROOT = "https://www.linkedin.com"

TILE_SELECTORS = (
    'li[data-occludable-job-id]',
    '.jobs-search-results__list-item',
    '.job-card-container',
    '.scaffold-layout__list-container li',
)

NO_RESULTS_SELECTOR = '.artdeco-empty-state__headline'
JOB_ID_IN_URL = re.compile(r'/jobs/view/(\d+)')

# One round trip per tile; hidden duplicate text is stripped before reading
READ_TILE_JS = """
(tile) => {
    const clean = el => {
        if (!el) return '';
        const copy = el.cloneNode(true);
        copy.querySelectorAll('.visually-hidden, .sr-only').forEach(n => n.remove());
        return (copy.textContent || '').replace(/\\s+/g, ' ').trim();
    };
    const link = tile.querySelector('a.job-card-container__link, a.job-card-list__title, a[href*="/jobs/view/"]');
    return {
        id: tile.getAttribute('data-occludable-job-id') || tile.getAttribute('data-job-id')
            || (tile.querySelector('[data-job-id]') || {getAttribute: () => ''}).getAttribute('data-job-id') || '',
        href: link ? link.getAttribute('href') || '' : '',
        title: clean(link),
        company: clean(tile.querySelector('.artdeco-entity-lockup__subtitle span, .job-card-container__primary-description')),
        location: clean(tile.querySelector('ul.job-card-container__metadata-wrapper li span, .job-card-container__metadata-item')),
        footer: clean(tile.querySelector('.job-card-container__footer-job-state, .job-card-container__footer-item')),
    };
}
"""


def listing_url(href):
    """Absolute listing URL without tracking query parameters"""
    href = (href or '').split('?')[0]
    if href and not href.startswith('http'):
        href = LINKEDIN_ROOT + href
    return href


def parse_tile(data):
    """JobPosting from raw tile data, or None when the tile has no id or link"""
    href = data.get('href', '')
    external_id = (data.get('id') or '').strip()
    if not external_id:
        match = JOB_ID_IN_URL.search(href)
        external_id = match.group(1) if match else ''
    if not external_id or not href:
        return None

    footer = (data.get('footer') or '').lower()
    apply_method = 'applied' if 'applied' in footer else ('easy_apply' if 'easy apply' in footer else '')
    return JobPosting(
        external_id=external_id,
        title=deduplicate_text(data.get('title', '')),
        company_name=deduplicate_text(data.get('company', '')),
        listing_url=listing_url(href),
        location=deduplicate_text(data.get('location', '')),
        apply_method=apply_method,
    )


def parse_tiles(raw_tiles):
    """
    Postings from a page's raw tiles.

    Unparsable tiles are dropped; a page where every tile fails raises
    ListingParseError. An empty page is simply empty.
    """
    postings = []
    for data in raw_tiles:
        posting = parse_tile(data)
        if posting is None:
            log.debug("Dropping unparsable tile: %s", data)
            continue
        postings.append(posting)
    if raw_tiles and not postings:
        raise ListingParseError(f"None of {len(raw_tiles)} job tiles could be parsed")
    return postings


class ResultsPageReader:
    """
    Loads one search result page and returns its postings.

    Only the "No results" headline yields an empty list. A page whose tiles
    never render, or whose reads fail, raises PageLoadError so the caller
    retries or skips it.
    """

    def __init__(self, page):
        self.page = page

    async def load(self, query, page_number):
        url = query.url_for_page(page_number)
        try:
            await self.page.goto(url, wait_until="domcontentloaded", timeout=30000)
        except PlaywrightError as e:
            raise_if_closed(e)
            raise PageLoadError(f"Could not load results page {page_number} for {query.describe()}: {e}") from e
        await human_delay(*DELAYS["page_transition"])

        try:
            raw = await self.read_tiles(query, page_number)
        except PlaywrightError as e:
            raise_if_closed(e)
            raise PageLoadError(f"Could not read results page {page_number} for {query.describe()}: {e}") from e
        return parse_tiles(raw)

    async def read_tiles(self, query, page_number):
        if await self.page.locator(NO_RESULTS_SELECTOR).first.is_visible():
            log.info("No results for %s (page %d)", query.describe(), page_number)
            return []

        tiles = None
        for selector in TILE_SELECTORS:
            locator = self.page.locator(selector)
            try:
                await locator.first.wait_for(state="attached", timeout=5000)
            except PlaywrightTimeoutError:
                continue
            tiles = locator
            break
        if tiles is None:
            raise PageLoadError(f"No job tiles rendered on page {page_number} for {query.describe()}")

        count = await tiles.count()
        raw = []
        for i in range(count):
            tile = tiles.nth(i)
            # Tiles render lazily; scrolling each into view fills in its text
            try:
                await tile.scroll_into_view_if_needed(timeout=2000)
                raw.append(await tile.evaluate(READ_TILE_JS))
            except PlaywrightError as e:
                raise_if_closed(e)
                log.debug("Tile %d unreadable: %s", i, e)
        if count and not raw:
            raise PageLoadError(f"None of {count} job tiles on page {page_number} could be read")
        return raw
