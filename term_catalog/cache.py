"""
On-disk JSON cache for dev runs, keyed by (namespace, source URL).
"""

from __future__ import annotations

import dataclasses
import hashlib
import json
import logging
import pathlib
from typing import List, Optional

from .models import TermRecord

logger = logging.getLogger(__name__)


def cache_path(data_dir: pathlib.Path, namespace: str, key: str) -> pathlib.Path:
    digest = hashlib.sha1(key.encode("utf-8")).hexdigest()
    return pathlib.Path(data_dir) / namespace / f"{digest}.json"


def load_cache(data_dir: pathlib.Path, namespace: str, key: str) -> Optional[List[TermRecord]]:
    path = cache_path(data_dir, namespace, key)
    if not path.exists():
        return None
    logger.info("Loaded %s from dev cache %s", key, path)
    return [TermRecord.from_dict(d) for d in json.loads(path.read_text())]


def save_cache(data_dir: pathlib.Path, namespace: str, key: str, terms: List[TermRecord]) -> pathlib.Path:
    path = cache_path(data_dir, namespace, key)
    path.parent.mkdir(parents=True, exist_ok=True)
    with path.open("w") as f:
        json.dump([dataclasses.asdict(t) for t in terms], f, indent=2)
    return path
