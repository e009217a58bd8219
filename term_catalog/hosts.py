from __future__ import annotations

from urllib.parse import urlparse

SCHEDULE_PAGE_MARKER = "bwckschd.p_disp_dyn_sched"


def get_base_host(url: str) -> str:
    """
    Reduce a URL's hostname to its registrable part, e.g.
    ``https://wl11gp.neu.edu/udcprod8/...`` -> ``neu.edu``.
    """
    try:
        hostname = urlparse(url).hostname or ""
    except ValueError:
        return ""
    labels = [label for label in hostname.lower().split(".") if label]
    if len(labels) <= 2:
        return ".".join(labels)
    return ".".join(labels[-2:])


def supports_page(url: str, marker: str = SCHEDULE_PAGE_MARKER) -> bool:
    return marker in url
