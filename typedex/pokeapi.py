# typedex/pokeapi.py
# Live PokeAPI access. Shared session with retries + timeout.

import requests
from requests.adapters import HTTPAdapter
from urllib3.util.retry import Retry

from typedex import config
from typedex.logger import log_action


def _build_session(total: int, backoff: float) -> requests.Session:
    s = requests.Session()
    retry = Retry(total=total, backoff_factor=backoff, status_forcelist=(429, 500, 502, 503, 504))
    adapter = HTTPAdapter(max_retries=retry)
    s.mount("https://", adapter)
    s.mount("http://", adapter)
    return s


class PokeApiClient:
    """Fetches pokemon and type payloads by name or id."""

    def __init__(self, base_url: str = None, timeout: float = None, session: requests.Session = None):
        self.base_url = (base_url or config.POKEAPI_BASE).rstrip("/")
        self.timeout = config.HTTP_TIMEOUT if timeout is None else timeout
        self.session = session or _build_session(config.RETRY_TOTAL, config.RETRY_BACKOFF)

    def url_for(self, kind: str, name_or_id) -> str:
        key = str(name_or_id).strip()
        if not key.isdigit():
            key = key.lower()
        return f"{self.base_url}/{config.KIND_DIRS[kind]}/{key}/"

    def _json_fetch(self, url: str):
        r = self.session.get(url, timeout=self.timeout)
        r.raise_for_status()
        return r.json()

    def fetch(self, kind: str, name_or_id):
        """Raw JSON for one record. requests errors propagate to the caller."""
        url = self.url_for(kind, name_or_id)
        log_action(f"REMOTE FETCH: {url}")
        return self._json_fetch(url)
