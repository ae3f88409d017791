from __future__ import annotations

"""Read-only client for the Fuseki dataset fed by the message consumer."""

from urllib.parse import quote_plus

import requests
from tenacity import retry, retry_if_exception_type, stop_after_attempt, wait_exponential

from sparqlRecipes.config import Settings
from sparqlRecipes.errors import SparqlRecipesError
from sparqlRecipes.results import FusekiResponse
from sparqlRecipes.utils.log_json import JsonLogger

_logger = JsonLogger("fuseki-client")


class FusekiError(SparqlRecipesError):
    """Raised when a Fuseki query does not answer 200."""


class FusekiClient:
    """Run SELECT queries against ``{base}{dataset}/query`` asking for CSV."""

    def __init__(self, settings: Settings, *, session: requests.Session | None = None) -> None:
        self.base_url = settings.fuseki_base_url
        self.dataset = settings.fuseki_dataset
        self.timeout = settings.http_timeout_s
        self.session = session or requests.Session()
        self.session.trust_env = False

    def query_url(self, query: str) -> str:
        return (
            f"{self.base_url}{self.dataset}/query?query={quote_plus(query)}"
            "&default-graph-uri=&output=csv&stylesheet="
        )

    @retry(
        reraise=True,
        stop=stop_after_attempt(3),
        wait=wait_exponential(multiplier=1, min=1),
        retry=retry_if_exception_type(requests.ConnectionError),
    )
    def query(self, query: str) -> str:
        """Execute ``query`` and return the raw CSV body."""

        resp = self.session.get(self.query_url(query), timeout=self.timeout)
        _logger.info("fuseki.query", status=resp.status_code, details={"query": query})
        if resp.status_code != 200:
            _logger.error("fuseki.query_failed", status=resp.status_code, preview=(resp.text or "")[:200])
            raise FusekiError(f"SPARQL query failed: {resp.status_code}")
        return resp.text

    def select(self, query: str, *, strip: bool = True) -> FusekiResponse:
        text = self.query(query)
        return FusekiResponse(text.strip() if strip else text)

    def status(self) -> int:
        resp = self.session.get(self.base_url, timeout=self.timeout)
        try:
            return resp.status_code
        finally:
            resp.close()

    def ping(self) -> bool:
        try:
            return self.status() == 200
        except requests.RequestException:
            return False

    def close(self) -> None:
        self.session.close()


__all__ = ["FusekiClient", "FusekiError"]
