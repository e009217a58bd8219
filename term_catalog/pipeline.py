"""
Build the terms -> subjects catalog for one Banner schedule search page.

Flow:
1) GET the schedule search page (p_term select + hidden fields).
2) Discover the current terms and build one request per term.
3) POST each term to the form's submission URL, all at once, and attach
   the subject lists.

Dev mode stores the finished catalog on disk and returns it on later runs
for the same URL without touching the network.
"""

from __future__ import annotations

import argparse
import asyncio
import dataclasses
import json
import logging
import pathlib
from datetime import datetime
from typing import List, Optional

import httpx
import requests

import config

from .cache import load_cache, save_cache
from .errors import FetchError, TermCatalogError
from .forms import extract_form
from .hosts import get_base_host, supports_page
from .models import TermDiscovery, TermRecord
from .subjects import BannerSubjectFetcher, attach_subjects
from .terms import discover_terms

logger = logging.getLogger(__name__)

CACHE_NAMESPACE = "terms"


def fetch_terms_page(url: str, session: requests.Session, timeout: float = config.TIMEOUT) -> str:
    try:
        resp = session.get(url, timeout=timeout)
        resp.raise_for_status()
    except requests.RequestException as e:
        raise FetchError(url, reason=f"{type(e).__name__}: {e}") from e
    return resp.text


async def fetch_all_subjects(
    discovery: TermDiscovery,
    host: str,
    client: Optional[httpx.AsyncClient] = None,
    timeout: Optional[float] = None,
    deadline: Optional[float] = None,
    fail_fast: bool = True,
    term_field: str = config.TERM_FIELD,
) -> List[TermRecord]:
    kwargs = dict(timeout=timeout, deadline=deadline, fail_fast=fail_fast)
    if client is not None:
        fetcher = BannerSubjectFetcher(client, host, term_field)
        return await attach_subjects(discovery.terms, discovery.post_url, fetcher.fetch, **kwargs)

    async with httpx.AsyncClient(
        timeout=httpx.Timeout(config.TIMEOUT),
        follow_redirects=True,
        headers={"User-Agent": config.USER_AGENT},
    ) as client:
        fetcher = BannerSubjectFetcher(client, host, term_field)
        return await attach_subjects(discovery.terms, discovery.post_url, fetcher.fetch, **kwargs)


def build_term_catalog(
    url: str,
    *,
    session: Optional[requests.Session] = None,
    client: Optional[httpx.AsyncClient] = None,
    dev: bool = False,
    data_dir: pathlib.Path = config.DEV_DATA_DIR,
    primary_host: str = config.PRIMARY_HOST,
    term_field: str = config.TERM_FIELD,
    reference_year: Optional[int] = None,
    timeout: Optional[float] = None,
    deadline: Optional[float] = None,
    fail_fast: bool = True,
) -> List[TermRecord]:
    if dev:
        cached = load_cache(data_dir, CACHE_NAMESPACE, url)
        if cached is not None:
            return cached

    if session is None:
        session = requests.Session()
        session.headers.update({"User-Agent": config.USER_AGENT})

    body = fetch_terms_page(url, session)
    discovery = discover_terms(
        body,
        url,
        extract_form=extract_form,
        reference_year=reference_year if reference_year is not None else datetime.now().year,
        primary_host=primary_host,
        term_field=term_field,
    )
    if not discovery.terms:
        return []

    terms = asyncio.run(
        fetch_all_subjects(
            discovery,
            get_base_host(url),
            client=client,
            timeout=timeout,
            deadline=deadline,
            fail_fast=fail_fast,
            term_field=term_field,
        )
    )

    if dev:
        save_cache(data_dir, CACHE_NAMESPACE, url, terms)
    return terms


def write_terms_json(terms: List[TermRecord], path: pathlib.Path) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    with path.open("w") as f:
        json.dump([dataclasses.asdict(t) for t in terms], f, indent=2)


def cli() -> None:
    parser = argparse.ArgumentParser(description="Discover current terms on a Banner schedule search page and fetch their subjects.")
    parser.add_argument("url", nargs="?", default=config.TERMS_URL, help=f"Schedule search page (default: {config.TERMS_URL})")
    parser.add_argument("-o", "--output", type=pathlib.Path, help="Write the catalog as JSON to this path")
    parser.add_argument("--dev", action="store_true", default=config.DEV, help="Read/write the on-disk dev cache")
    parser.add_argument("--timeout", type=float, help="Per-term subject fetch limit in seconds")
    parser.add_argument("--deadline", type=float, help="Limit for all subject fetches together, in seconds")
    parser.add_argument("--partial", action="store_true", help="Keep terms whose subject fetch failed (empty subjects)")
    parser.add_argument("-v", "--verbose", action="store_true", help="Debug-level logging")
    args = parser.parse_args()

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(levelname)s %(name)s: %(message)s",
    )
    logging.getLogger("httpx").setLevel(logging.WARNING)
    logging.getLogger("httpcore").setLevel(logging.WARNING)

    if not supports_page(args.url):
        logger.warning("%s does not look like a schedule search page", args.url)

    try:
        terms = build_term_catalog(
            args.url,
            dev=args.dev,
            timeout=args.timeout,
            deadline=args.deadline,
            fail_fast=not args.partial,
        )
    except TermCatalogError as e:
        raise SystemExit(str(e))

    if args.output:
        write_terms_json(terms, args.output)
        print(f"Wrote {len(terms)} term(s) to {args.output}")

    print(f"Found {len(terms)} term(s) at {args.url}")
    for term in terms:
        info = term.value
        label = f"{info.text} [{info.sub_college_name}]" if info.sub_college_name else info.text
        status = f"error: {term.error}" if term.error else f"{len(term.deps or [])} subjects"
        print(f"- {info.term_id}: {label} ({status})")
