"""Fedora 4 REST client used to build the recipes object graph."""

from __future__ import annotations

import requests
from tenacity import (
    RetryCallState,
    retry,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
)

from sparqlRecipes import recipes
from sparqlRecipes.config import Settings
from sparqlRecipes.errors import SparqlRecipesError
from sparqlRecipes.utils.log_json import JsonLogger

SPARQL_UPDATE = "application/sparql-update"
DUMMY_CONTENT = "garbage"

_logger = JsonLogger("fedora-client")


def _log_retry(retry_state: RetryCallState) -> None:
    exc = retry_state.outcome.exception() if retry_state.outcome else None
    wait_time = (
        getattr(retry_state.next_action, "sleep", None)
        if retry_state.next_action
        else None
    )
    method = url = ""
    if len(retry_state.args) >= 3:
        method, url = str(retry_state.args[1]), str(retry_state.args[2])
    _logger.warning(
        "fedora.retry",
        url=url,
        method=method,
        attempt=retry_state.attempt_number,
        wait_seconds=wait_time,
        error=str(exc) if exc else None,
    )


class FedoraError(SparqlRecipesError):
    """Raised when Fedora answers with a status other than the expected one."""

    def __init__(self, method: str, url: str, expected: int, actual: int) -> None:
        super().__init__(f"{method} {url} returned {actual}, expected {expected}")
        self.method = method
        self.url = url
        self.expected = expected
        self.actual = actual


class FedoraClient:
    """Create objects and datastreams and patch their properties."""

    def __init__(self, settings: Settings, *, session: requests.Session | None = None) -> None:
        self.settings = settings
        self.base_url = settings.fedora_base_url
        self.timeout = settings.http_timeout_s
        self.session = session or requests.Session()
        self.session.trust_env = False

    def uri_for_pid(self, pid: str) -> str:
        return f"{self.base_url}/rest/{pid}"

    @retry(
        reraise=True,
        stop=stop_after_attempt(3),
        wait=wait_exponential(multiplier=1, min=1),
        retry=retry_if_exception_type(requests.RequestException),
        before_sleep=_log_retry,
    )
    def _request(
        self,
        method: str,
        url: str,
        *,
        headers: dict[str, str] | None = None,
        data: str | bytes | None = None,
    ) -> int:
        resp = self.session.request(method, url, headers=headers, data=data, timeout=self.timeout)
        try:
            return resp.status_code
        finally:
            resp.close()

    def _expect(self, method: str, url: str, expected: int, **kwargs) -> None:
        status = self._request(method, url, **kwargs)
        _logger.info("fedora.request", url=url, status=status, method=method)
        if status != expected:
            _logger.error("fedora.unexpected_status", url=url, status=status, method=method, expected=expected)
            raise FedoraError(method, url, expected, status)

    def status(self, url: str | None = None) -> int:
        """Return the status code of a GET on ``url`` (the Fedora base by default)."""

        return self._request("GET", url or self.base_url)

    def put_object(self, pid: str) -> None:
        self._expect("PUT", self.uri_for_pid(pid), 201)

    def put_datastream(self, path: str, mime_type: str) -> None:
        """Create a binary at ``path`` holding a few bytes of ``mime_type`` content."""

        self._expect(
            "PUT",
            self.uri_for_pid(path),
            201,
            headers={"Content-Type": mime_type},
            data=DUMMY_CONTENT,
        )

    def update_properties(self, pid: str, sparql: str) -> None:
        self._expect(
            "PATCH",
            self.uri_for_pid(pid),
            204,
            headers={"Content-Type": SPARQL_UPDATE},
            data=sparql.encode("utf-8"),
        )

    def mark_as_indexable(self, pid: str) -> None:
        self.update_properties(pid, recipes.mark_indexable_update())

    def set_title(self, pid: str, title: str) -> None:
        self.update_properties(pid, recipes.set_title_update(self.uri_for_pid(pid), title))

    def insert_into_collection(self, pid: str, collection_pid: str) -> None:
        self.update_properties(
            pid,
            recipes.collection_member_update(self.uri_for_pid(pid), self.uri_for_pid(collection_pid)),
        )

    def link_hierarchical_collections(self, collection_pid: str, part_pid: str) -> None:
        self.update_properties(
            collection_pid,
            recipes.has_part_update(self.uri_for_pid(collection_pid), self.uri_for_pid(part_pid)),
        )

    def link_to_project(self, pid: str, project_pid: str) -> None:
        self.update_properties(
            pid,
            recipes.project_link_update(self.uri_for_pid(pid), self.uri_for_pid(project_pid)),
        )

    def close(self) -> None:
        self.session.close()


__all__ = ["FedoraClient", "FedoraError"]
