from __future__ import annotations

import re

import pytest

from sparqlRecipes import fixtures
from sparqlRecipes.config import Settings, profile_for_version
from sparqlRecipes.fedora import FedoraClient

REST = "http://localhost:8080/fcrepo-webapp/rest/"
ANY_REST = re.compile(re.escape(REST) + ".*")


@pytest.fixture()
def fedora(requests_mock):
    requests_mock.put(ANY_REST, status_code=201)
    requests_mock.patch(ANY_REST, status_code=204)
    return FedoraClient(Settings())


def _calls(requests_mock):
    return [(r.method, r.url[len(REST):]) for r in requests_mock.request_history]


def test_populate_builds_object_graph_in_order(fedora, requests_mock):
    fixtures.populate(fedora, profile_for_version(None))
    calls = _calls(requests_mock)
    assert calls[:4] == [
        ("PUT", "objects/101"),
        ("PATCH", "objects/101"),
        ("PUT", "objects/101/master"),
        ("PATCH", "objects/101/master/fcr:metadata"),
    ]
    assert calls[8:14] == [
        ("PUT", "objects/103"),
        ("PATCH", "objects/103"),
        ("PUT", "objects/103/master"),
        ("PUT", "objects/103/text"),
        ("PATCH", "objects/103/text/fcr:metadata"),
        ("PATCH", "objects/103/master/fcr:metadata"),
    ]
    assert calls[-3:] == [
        ("PUT", "objects/proj1"),
        ("PATCH", "objects/proj1"),
        ("PATCH", "objects/obj1"),
    ]
    assert len(calls) == 37


def test_populate_datastream_mime_types(fedora, requests_mock):
    fixtures.populate(fedora, profile_for_version(None))
    mime = {
        r.url[len(REST):]: r.headers["Content-Type"]
        for r in requests_mock.request_history
        if r.method == "PUT" and r.url.endswith(("/master", "/text"))
    }
    assert mime == {
        "objects/101/master": "application/pdf",
        "objects/102/master": "text/plain",
        "objects/103/master": "application/pdf",
        "objects/103/text": "text/plain",
    }


def test_populate_links_collections_and_project(fedora, requests_mock):
    fixtures.populate(fedora, profile_for_version(None))
    bodies = [r.text for r in requests_mock.request_history if r.method == "PATCH"]
    assert f"insert data {{ <{REST}objects/col1> <http://some-vocabulary.org/rels-ext#hasPart> <{REST}objects/col2> . }}" in bodies
    assert f"insert data {{ <{REST}objects/col2> <http://some-vocabulary.org/rels-ext#hasPart> <{REST}objects/col3> . }}" in bodies
    assert (
        f"insert data {{ <{REST}objects/obj3> <http://some-vocabulary.org/rels-ext#isMemberOfCollection>"
        f" <{REST}objects/col3> . }}"
    ) in bodies
    assert f"prefix ex: <http://example.org/> insert data {{ <{REST}objects/obj1> ex:project <{REST}objects/proj1> . }}" in bodies


def test_populate_legacy_profile_paths(fedora, requests_mock):
    fixtures.populate(fedora, profile_for_version("4.0.0-beta-03"))
    calls = _calls(requests_mock)
    assert calls[2:4] == [
        ("PUT", "objects/101/master/fcr:content"),
        ("PATCH", "objects/101/master"),
    ]


def test_setup_waits_for_indexing(fedora, monkeypatch):
    slept = []
    monkeypatch.setattr(fixtures.time, "sleep", slept.append)
    fixtures.setup_test_objects(fedora, profile_for_version(None), Settings(indexing_wait_s=15))
    assert slept == [15]


def test_setup_without_wait(fedora, monkeypatch):
    slept = []
    monkeypatch.setattr(fixtures.time, "sleep", slept.append)
    fixtures.setup_test_objects(fedora, profile_for_version(None), Settings(), wait=False)
    assert slept == []
