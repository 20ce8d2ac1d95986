# paper_latest/core/http.py
import requests
from requests.adapters import HTTPAdapter

from .. import __version__

UA = f"paper-latest/{__version__}"

def make_session() -> requests.Session:
    # One attempt per request; a failed call is fatal for the run.
    adapter = HTTPAdapter(max_retries=0, pool_connections=2, pool_maxsize=2)
    s = requests.Session()
    s.mount("http://", adapter); s.mount("https://", adapter)
    s.headers.update({"User-Agent": UA})
    return s
