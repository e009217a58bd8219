"""
Subject lists per term, fetched concurrently once terms are known.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Awaitable, Callable, List, Optional

import httpx
from bs4 import BeautifulSoup

from .errors import FetchError, ParseError
from .hosts import SCHEDULE_PAGE_MARKER
from .models import SubjectInfo, SubjectRecord, TermRecord

logger = logging.getLogger(__name__)

SUBJECT_FIELD = "sel_subj"

SubjectFetch = Callable[[str, str], Awaitable[List[SubjectRecord]]]


def parse_subjects(body: str, term_id: str, url: str, host: str = "") -> List[SubjectRecord]:
    soup = BeautifulSoup(body, "html.parser")
    sel = soup.find("select", attrs={"name": SUBJECT_FIELD})
    if not sel:
        raise ParseError(url, reason=f"subject select not found for term {term_id}")

    subjects: List[SubjectRecord] = []
    for opt in sel.find_all("option"):
        value = opt.get("value", "").strip()
        if not value:
            continue
        label = "".join(opt.find_all(string=True, recursive=False)).strip()
        subjects.append(SubjectRecord(value=SubjectInfo(subject=value, text=label, term_id=term_id, host=host)))
    return subjects


class BannerSubjectFetcher:
    """
    Posts a term id to the form's submission URL and reads the subject
    <select> off the response.
    """

    def __init__(self, client: httpx.AsyncClient, host: str = "", term_field: str = "p_term"):
        self.client = client
        self.host = host
        self.term_field = term_field

    async def fetch(self, post_url: str, term_id: str) -> List[SubjectRecord]:
        try:
            resp = await self.client.post(
                post_url,
                data={"p_calling_proc": SCHEDULE_PAGE_MARKER, self.term_field: term_id},
            )
            resp.raise_for_status()
        except httpx.HTTPError as e:
            raise FetchError(post_url, term_id, reason=f"{type(e).__name__}: {e}") from e
        return parse_subjects(resp.text, term_id, post_url, self.host)


async def _fetch_for_term(post_url: str, term_id: str, fetch: SubjectFetch, timeout: Optional[float]) -> List[SubjectRecord]:
    try:
        if timeout is None:
            return await fetch(post_url, term_id)
        return await asyncio.wait_for(fetch(post_url, term_id), timeout)
    except FetchError as e:
        if e.term_id == term_id:
            raise
        raise FetchError(post_url, term_id, reason=str(e)) from e
    except asyncio.TimeoutError as e:
        raise FetchError(post_url, term_id, reason=f"timed out after {timeout}s") from e
    except Exception as e:
        raise FetchError(post_url, term_id, reason=f"{type(e).__name__}: {e}") from e


async def attach_subjects(
    terms: List[TermRecord],
    post_url: str,
    fetch: SubjectFetch,
    *,
    timeout: Optional[float] = None,
    deadline: Optional[float] = None,
    fail_fast: bool = True,
    log: logging.Logger = logger,
) -> List[TermRecord]:
    """
    Fetch every term's subjects at once and attach them to ``deps``.

    Args:
        terms (List[TermRecord]): discovered terms, ``deps`` still None
        post_url (str): the terms form's submission URL
        fetch (SubjectFetch): ``fetch(post_url, term_id) -> subjects``
        timeout (float, optional): per-term limit in seconds
        deadline (float, optional): limit for the whole fan-out in seconds
        fail_fast (bool): raise on the first failed term; otherwise mark the
            term with ``error`` and empty ``deps`` and keep going

    Raises:
        FetchError: naming the failed term id (or the post URL if the
            deadline passed)
    """

    async def attach(term: TermRecord) -> None:
        term_id = term.value.term_id
        log.debug("fetching subjects for term %s (%s)", term_id, term.value.text)
        try:
            subjects = await _fetch_for_term(post_url, term_id, fetch, timeout)
        except FetchError as e:
            if fail_fast:
                raise
            log.warning("keeping term without subjects: %s", e)
            term.deps = []
            term.error = str(e)
            return
        term.deps = subjects

    tasks = [asyncio.create_task(attach(term)) for term in terms]
    try:
        if deadline is None:
            await asyncio.gather(*tasks)
        else:
            await asyncio.wait_for(asyncio.gather(*tasks), deadline)
    except asyncio.TimeoutError as e:
        raise FetchError(post_url, reason=f"subjects not fetched within {deadline}s") from e
    finally:
        for task in tasks:
            if not task.done():
                task.cancel()
        await asyncio.gather(*tasks, return_exceptions=True)

    return terms
