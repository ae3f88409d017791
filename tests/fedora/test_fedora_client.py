from __future__ import annotations

import io
import json
import logging

import pytest
import requests

from sparqlRecipes.config import Settings
from sparqlRecipes.fedora import FedoraClient, FedoraError

REST = "http://localhost:8080/fcrepo-webapp/rest"


@pytest.fixture()
def fedora():
    return FedoraClient(Settings())


@pytest.fixture()
def no_retry_sleep(monkeypatch):
    monkeypatch.setattr(FedoraClient._request.retry, "sleep", lambda _seconds: None)


def test_uri_for_pid(fedora):
    assert fedora.uri_for_pid("objects/101") == f"{REST}/objects/101"


def test_put_object_expects_created(fedora, requests_mock):
    requests_mock.put(f"{REST}/objects/101", status_code=201)
    fedora.put_object("objects/101")
    assert requests_mock.last_request.method == "PUT"
    assert not requests_mock.last_request.body


def test_put_object_conflict_raises(fedora, requests_mock):
    requests_mock.put(f"{REST}/objects/101", status_code=409)
    with pytest.raises(FedoraError) as excinfo:
        fedora.put_object("objects/101")
    err = excinfo.value
    assert (err.method, err.expected, err.actual) == ("PUT", 201, 409)
    assert err.url == f"{REST}/objects/101"


def test_put_datastream_sends_dummy_content(fedora, requests_mock):
    requests_mock.put(f"{REST}/objects/101/master", status_code=201)
    fedora.put_datastream("objects/101/master", "application/pdf")
    sent = requests_mock.last_request
    assert sent.headers["Content-Type"] == "application/pdf"
    assert sent.text == "garbage"


def test_update_properties_patches_sparql(fedora, requests_mock):
    requests_mock.patch(f"{REST}/objects/201", status_code=204)
    fedora.set_title("objects/201", "foo")
    sent = requests_mock.last_request
    assert sent.method == "PATCH"
    assert sent.headers["Content-Type"] == "application/sparql-update"
    assert sent.text == (
        "prefix dc: <http://purl.org/dc/elements/1.1/>"
        f" insert data {{ <{REST}/objects/201> dc:title 'foo' . }}"
    )


def test_update_properties_wrong_status_raises(fedora, requests_mock):
    requests_mock.patch(f"{REST}/objects/201", status_code=400)
    with pytest.raises(FedoraError):
        fedora.mark_as_indexable("objects/201")


def test_link_hierarchical_collections_patches_parent(fedora, requests_mock):
    requests_mock.patch(f"{REST}/objects/col1", status_code=204)
    fedora.link_hierarchical_collections("objects/col1", "objects/col2")
    assert f"<{REST}/objects/col2>" in requests_mock.last_request.text
    assert "rels-ext#hasPart" in requests_mock.last_request.text


def test_status_returns_code(fedora, requests_mock):
    requests_mock.get("http://localhost:8080/fcrepo-webapp", status_code=200)
    assert fedora.status() == 200


def test_transport_errors_are_retried(fedora, requests_mock, no_retry_sleep):
    m = requests_mock.put(
        f"{REST}/objects/102",
        [{"exc": requests.ConnectionError}, {"status_code": 201}],
    )
    fedora.put_object("objects/102")
    assert m.call_count == 2


def test_transport_errors_give_up_after_three_attempts(fedora, requests_mock, no_retry_sleep):
    m = requests_mock.put(f"{REST}/objects/102", exc=requests.ConnectionError)
    with pytest.raises(requests.ConnectionError):
        fedora.put_object("objects/102")
    assert m.call_count == 3


def test_retries_are_logged_with_method_and_url(fedora, requests_mock, no_retry_sleep, monkeypatch):
    stream = io.StringIO()
    handler = logging.StreamHandler(stream)
    handler.setFormatter(logging.Formatter("%(message)s"))
    monkeypatch.setattr(logging.getLogger("sparqlrecipes.fedora-client.json"), "handlers", [handler])
    requests_mock.put(
        f"{REST}/objects/102",
        [{"exc": requests.ConnectionError("refused")}, {"status_code": 201}],
    )
    fedora.put_object("objects/102")
    events = [json.loads(line) for line in stream.getvalue().splitlines()]
    retries = [e for e in events if e["event"] == "fedora.retry"]
    assert len(retries) == 1
    assert retries[0]["level"] == "WARNING"
    assert retries[0]["url"] == f"{REST}/objects/102"
    assert retries[0]["details"]["method"] == "PUT"
    assert retries[0]["details"]["attempt"] == 1
    assert "refused" in retries[0]["details"]["error"]
