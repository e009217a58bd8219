"""
Default form extractor: turn a page's first usable <form> into a FormModel.

Flow:
1) Find the first <form> that has at least one named <select> or <input>.
2) Record each named control in document order; selects keep every
   <option> as an alternative.
3) Resolve the form action against the page URL.
"""

from __future__ import annotations

from typing import List, Optional
from urllib.parse import urljoin

from bs4 import BeautifulSoup, Tag

from .errors import ParseError
from .models import FormField, FormModel

IGNORED_INPUT_TYPES = {"submit", "reset", "button", "image"}


def _option_text(opt: Tag) -> str:
    # html.parser nests unclosed <option> tags, so only read direct text.
    return "".join(opt.find_all(string=True, recursive=False)).strip()


def _select_field(sel: Tag) -> FormField:
    name = sel.get("name", "")
    options = sel.find_all("option")
    if not options:
        return FormField(name=name, value="", text="")

    alternatives = [
        FormField(name=name, value=opt.get("value", _option_text(opt)).strip(), text=_option_text(opt))
        for opt in options
    ]
    selected = 0
    for i, opt in enumerate(options):
        if opt.has_attr("selected"):
            selected = i
            break
    current = alternatives[selected]
    return FormField(name=name, value=current.value, text=current.text, alternatives=alternatives)


def _input_field(inp: Tag) -> Optional[FormField]:
    input_type = (inp.get("type") or "text").lower()
    if input_type in IGNORED_INPUT_TYPES:
        return None
    if input_type in ("checkbox", "radio") and not inp.has_attr("checked"):
        return None
    return FormField(name=inp.get("name", ""), value=inp.get("value", ""))


def _form_fields(form: Tag) -> List[FormField]:
    fields: List[FormField] = []
    for control in form.find_all(["select", "input"]):
        if not control.get("name"):
            continue
        if control.name == "select":
            field = _select_field(control)
        else:
            field = _input_field(control)
        if field is not None:
            fields.append(field)
    return fields


def extract_form(body: str, url: str) -> FormModel:
    soup = BeautifulSoup(body, "html.parser")
    for form in soup.find_all("form"):
        fields = _form_fields(form)
        if not fields:
            continue
        action = (form.get("action") or "").strip()
        return FormModel(fields=fields, submission_url=urljoin(url, action) if action else url)
    raise ParseError(url)
