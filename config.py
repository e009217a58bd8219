# Configuration for term discovery.
#
# Update TERMS_URL / PRIMARY_HOST when pointing at another institution's
# Banner schedule search. Values here are read by the pipeline and CLI only
# and passed down explicitly.

import os
import pathlib

TERMS_URL = "https://wl11gp.neu.edu/udcprod8/bwckschd.p_disp_dyn_sched"

# Sub-college naming rules (LAW / CPS) only apply to this domain.
PRIMARY_HOST = "neu.edu"

# Name of the term <select> on the schedule search form.
TERM_FIELD = "p_term"

# Dev mode short-circuits the whole pipeline through an on-disk cache.
DEV = os.environ.get("TERM_CATALOG_DEV") == "1"
DEV_DATA_DIR = pathlib.Path("data/dev")

TIMEOUT = 30  # seconds
USER_AGENT = "term-catalog/0.1"
