"""
Records passed between form extraction, term discovery and subject fetching.

Output records use the labeled format ``{type, value, deps}`` so a term and
its subjects serialize as one tree: terms -> subjects.
"""

from __future__ import annotations

import dataclasses
from typing import Any, Dict, List, Optional


@dataclasses.dataclass
class FormField:
    name: str
    value: str
    text: str = ""
    # For multi-option controls, one FormField per option.
    alternatives: List[FormField] = dataclasses.field(default_factory=list)


@dataclasses.dataclass
class FormModel:
    fields: List[FormField]
    submission_url: str


@dataclasses.dataclass(frozen=True)
class TermCandidate:
    term_id: str
    display_text: str


@dataclasses.dataclass(frozen=True)
class PayloadEntry:
    name: str
    value: str
    text: str = ""


# Sibling fields plus exactly one term selection.
RequestPayload = List[PayloadEntry]


@dataclasses.dataclass
class TermPayloads:
    post_url: str
    payloads: List[RequestPayload]


@dataclasses.dataclass
class SubjectInfo:
    subject: str
    text: str
    term_id: str
    host: str = ""


@dataclasses.dataclass
class SubjectRecord:
    value: SubjectInfo
    type: str = "subjects"
    deps: Optional[List[Any]] = None

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> SubjectRecord:
        return cls(
            value=SubjectInfo(**data["value"]),
            type=data.get("type", "subjects"),
            deps=data.get("deps"),
        )


@dataclasses.dataclass
class TermInfo:
    term_id: str
    text: str
    host: str = ""
    sub_college_name: Optional[str] = None


@dataclasses.dataclass
class TermRecord:
    value: TermInfo
    type: str = "terms"
    # None until subjects are attached.
    deps: Optional[List[SubjectRecord]] = None
    # Only set when a subject fetch failed in partial-success mode.
    error: Optional[str] = None

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> TermRecord:
        deps = data.get("deps")
        return cls(
            value=TermInfo(**data["value"]),
            type=data.get("type", "terms"),
            deps=None if deps is None else [SubjectRecord.from_dict(d) for d in deps],
            error=data.get("error"),
        )


@dataclasses.dataclass
class TermDiscovery:
    terms: List[TermRecord]
    post_url: str
