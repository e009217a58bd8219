"""
Term discovery for Banner schedule search forms.

Flow:
1) Extract the form model from the terms page (p_term select + siblings).
2) Drop alternatives that are placeholders, too short, or too old.
3) Build one request payload per surviving term: every sibling field plus
   that term's selection.
4) Tag each term with the page host and apply the host's naming rules.

Everything here is pure; diagnostics go to the ``log`` argument.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from typing import Callable, List, Optional

from .errors import NotFoundError
from .hosts import get_base_host
from .models import (
    FormField,
    FormModel,
    PayloadEntry,
    RequestPayload,
    TermCandidate,
    TermDiscovery,
    TermInfo,
    TermPayloads,
    TermRecord,
)

logger = logging.getLogger(__name__)

RE_YEAR = re.compile(r"\d{4}")
RE_VIEW_ONLY = re.compile(r"\(view only\)", re.IGNORECASE)
RE_SUMMER_1 = re.compile(r"summer i$", re.IGNORECASE)
RE_SUMMER_2 = re.compile(r"summer ii$", re.IGNORECASE)
RE_WHITESPACE = re.compile(r"\s+")
RE_LAW = re.compile(r"LAW", re.IGNORECASE)
RE_CPS = re.compile(r"CPS", re.IGNORECASE)
RE_SEMESTER = re.compile(r"Semester", re.IGNORECASE)

# Term ids without a year in the label must start within this many years.
ID_YEAR_WINDOW = 3


@dataclass(frozen=True)
class NormalizedText:
    text: str
    sub_college_name: Optional[str] = None


def _id_year(term_id: str) -> Optional[int]:
    prefix = term_id[:4]
    if len(prefix) == 4 and prefix.isdecimal():
        return int(prefix)
    return None


def is_valid_term(term_id: str, text: str, reference_year: int, log: logging.Logger = logger) -> bool:
    """
    Keep terms whose label year is not in the past. Labels without a year
    fall back to the first four characters of the term id, which must be
    within ID_YEAR_WINDOW years of ``reference_year`` (exclusive).
    """
    m = RE_YEAR.search(text)
    if m:
        return int(m.group(0)) >= reference_year

    log.warning("could not find year for %r (term id %r)", text, term_id)
    id_year = _id_year(term_id)
    if id_year is None:
        return False
    return id_year + ID_YEAR_WINDOW > reference_year and id_year - ID_YEAR_WINDOW < reference_year


def clean_term_text(text: str) -> str:
    """Strip '(view only)' and spell out trailing Summer I / Summer II."""
    text = RE_VIEW_ONLY.sub("", text).strip()
    text = RE_SUMMER_1.sub("Summer 1", text)
    text = RE_SUMMER_2.sub("Summer 2", text)
    return text.strip()


def normalize_term_text(host: str, text: str, primary_host: str) -> NormalizedText:
    """
    Pull the LAW / CPS sub-college tag out of labels on ``primary_host``.
    Labels from any other host pass through untouched.
    """
    if host != primary_host:
        return NormalizedText(text=text)

    # Pad so a tag at either end of the label still reads as a word.
    padded = f" {text.lower()} "
    sub_college_name = None
    if " law " in padded:
        sub_college_name = "LAW"
        text = RE_LAW.sub("", text)
    elif " cps " in padded:
        sub_college_name = "CPS"
        text = RE_CPS.sub("", text)
    else:
        text = RE_SEMESTER.sub("", text)

    return NormalizedText(text=RE_WHITESPACE.sub(" ", text).strip(), sub_college_name=sub_college_name)


def _split_term_field(form: FormModel, term_field: str, url: str, log: logging.Logger) -> tuple[FormField, List[FormField]]:
    term_entry: Optional[FormField] = None
    other_entries: List[FormField] = []
    for field in form.fields:
        if field.name != term_field:
            other_entries.append(field)
        elif term_entry is None:
            term_entry = field
        else:
            log.error("duplicate %r field on form at %s, keeping the first: %r", term_field, url, term_entry)

    if term_entry is None:
        raise NotFoundError(url, term_field)
    return term_entry, other_entries


def _candidates(term_entry: FormField, url: str, log: logging.Logger) -> List[TermCandidate]:
    candidates: List[TermCandidate] = []
    for alt in term_entry.alternatives:
        if alt.name != term_entry.name:
            log.debug("alternative of %r has a different name, skipping: %r", term_entry.name, alt)
            continue

        text = alt.text.strip()
        if text.lower() == "none":
            continue
        text = clean_term_text(text)

        if len(text) < 2:
            log.warning("empty term text on form at %s: %r", url, alt)
            continue
        candidates.append(TermCandidate(term_id=alt.value, display_text=text))
    return candidates


def build_payloads(
    form: FormModel,
    term_field: str,
    reference_year: int,
    url: str = "",
    log: logging.Logger = logger,
) -> TermPayloads:
    """
    Set up one request per valid term: all the other form fields, unchanged,
    plus that term's entry. Payload order follows the form's option order.
    """
    url = url or form.submission_url
    term_entry, other_entries = _split_term_field(form, term_field, url, log)
    siblings = [PayloadEntry(name=f.name, value=f.value, text=f.text) for f in other_entries]

    payloads: List[RequestPayload] = []
    for candidate in _candidates(term_entry, url, log):
        if not is_valid_term(candidate.term_id, candidate.display_text, reference_year, log):
            continue
        payloads.append(siblings + [PayloadEntry(name=term_field, value=candidate.term_id, text=candidate.display_text)])

    return TermPayloads(post_url=form.submission_url, payloads=payloads)


def discover_terms(
    body: str,
    url: str,
    extract_form: Callable[[str, str], FormModel],
    reference_year: int,
    primary_host: str,
    term_field: str = "p_term",
    classify_host: Callable[[str], str] = get_base_host,
    log: logging.Logger = logger,
) -> TermDiscovery:
    form = extract_form(body, url)
    plan = build_payloads(form, term_field, reference_year, url=url, log=log)

    terms: List[TermInfo] = []
    for payload in plan.payloads:
        for entry in payload:
            if entry.name == term_field:
                terms.append(TermInfo(term_id=entry.value, text=entry.text))

    if not terms:
        log.error("found 0 terms on %s", url)
        return TermDiscovery(terms=[], post_url=plan.post_url)

    host = classify_host(url)
    records: List[TermRecord] = []
    for term in terms:
        normalized = normalize_term_text(host, term.text, primary_host)
        term.host = host
        term.text = normalized.text
        term.sub_college_name = normalized.sub_college_name
        records.append(TermRecord(value=term))

    return TermDiscovery(terms=records, post_url=plan.post_url)
