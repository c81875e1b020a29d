"""Search loop: expand criteria, walk result pages, admit postings, apply"""

import logging

from linkedin_autoapply.errors import ListingParseError, PageLoadError
from linkedin_autoapply.reporting.progress import POSTING_FINISHED, POSTING_STARTED, ProgressReporter
from linkedin_autoapply.search.criteria import expand_search_criteria
from linkedin_autoapply.utils.timing import Pacer

log = logging.getLogger(__name__)


class JobManager:
    """
    Runs every search query until exhausted, stopped, or a fatal error.

    Admission order for each posting: already in the SeenSet → duplicate;
    blacklisted → skipped (SeenSet untouched); tile already shows "Applied"
    → skipped. Only then is the posting added to the SeenSet and handed to
    the applier. Stop is checked at every query, page and posting boundary;
    an in-flight application always finishes.
    """

    def __init__(self, criteria, blacklist, reader, applier, context, settings, reporter=None, pacer=None):
        self.criteria = criteria
        self.blacklist = blacklist
        self.reader = reader
        self.applier = applier
        self.context = context
        self.settings = settings
        self.reporter = reporter or ProgressReporter()
        self.pacer = pacer or Pacer()

    @property
    def stopped(self):
        return self.context.stop.is_set()

    async def start(self):
        stats = self.context.stats
        queries = expand_search_criteria(self.criteria)
        log.info("Searching %d quer%s", len(queries), "y" if len(queries) == 1 else "ies")

        for query in queries:
            if self.stopped:
                log.info("Stop requested, ending search")
                break
            stats.queries_run += 1
            await self._run_query(query)

        log.info("Search finished: %s", stats.as_dict())
        return stats

    async def _load_page(self, query, page_number):
        """Postings for one page; None when the page is skipped"""
        attempts = max(1, self.settings.page_load_attempts)
        for attempt in range(1, attempts + 1):
            try:
                return await self.reader.load(query, page_number)
            except PageLoadError as e:
                log.warning("%s (attempt %d/%d)", e, attempt, attempts)
            except ListingParseError as e:
                log.warning("Skipping page %d of %s: %s", page_number, query.describe(), e)
                return None
        log.warning("Skipping page %d of %s after %d attempts", page_number, query.describe(), attempts)
        return None

    async def _run_query(self, query):
        log.info("Query: %s", query.describe())
        for page_number in range(self.settings.max_pages):
            if self.stopped:
                return
            if page_number > 0:
                await self.pacer.pause("between_pages")

            postings = await self._load_page(query, page_number)
            if postings is None:
                continue
            self.context.stats.pages_scanned += 1
            if not postings:
                log.info("No more results for %s", query.describe())
                return

            for posting in postings:
                if self.stopped:
                    return
                await self._process(posting)

    async def _process(self, posting):
        stats = self.context.stats
        seen = self.context.seen

        if posting.external_id in seen:
            stats.duplicates += 1
            log.debug("Duplicate posting %s", posting.external_id)
            return
        if self.blacklist.matches(posting):
            stats.blacklisted += 1
            log.info("Blacklisted: %s at %s", posting.title, posting.company_name)
            return
        if posting.already_applied:
            seen.add(posting.external_id)
            stats.skipped += 1
            log.info("Already applied: %s at %s", posting.title, posting.company_name)
            return

        seen.add(posting.external_id)
        self.reporter.emit(POSTING_STARTED, posting=posting)
        attempt = await self.applier.apply(posting)
        stats.record(attempt.outcome)
        self.reporter.emit(POSTING_FINISHED, posting=posting, attempt=attempt)
        await self.pacer.pause("between_postings")
