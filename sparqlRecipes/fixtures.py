from __future__ import annotations

"""The fixed object graph the recipes are checked against."""

import time

from sparqlRecipes.config import RepositoryProfile, Settings
from sparqlRecipes.fedora import FedoraClient
from sparqlRecipes.utils.log_json import JsonLogger

PID_101 = "objects/101"
PID_102 = "objects/102"
PID_103 = "objects/103"
PID_201 = "objects/201"
TITLE = "foo"

PID_COL1 = "objects/col1"
PID_COL2 = "objects/col2"
PID_COL3 = "objects/col3"
PID_OBJ1 = "objects/obj1"
PID_OBJ2 = "objects/obj2"
PID_OBJ3 = "objects/obj3"

PID_PROJ1 = "objects/proj1"

_logger = JsonLogger("fixtures")


def _indexable_object(fedora: FedoraClient, pid: str) -> None:
    fedora.put_object(pid)
    fedora.mark_as_indexable(pid)


def populate(fedora: FedoraClient, profile: RepositoryProfile) -> None:
    """Create the recipes objects in Fedora, in dependency order."""

    content = profile.datastream_content_url_suffix
    metadata = profile.datastream_url_suffix

    _indexable_object(fedora, PID_101)
    fedora.put_datastream(f"{PID_101}/master{content}", "application/pdf")
    fedora.mark_as_indexable(f"{PID_101}/master{metadata}")

    _indexable_object(fedora, PID_102)
    fedora.put_datastream(f"{PID_102}/master{content}", "text/plain")
    fedora.mark_as_indexable(f"{PID_102}/master{metadata}")

    _indexable_object(fedora, PID_103)
    fedora.put_datastream(f"{PID_103}/master{content}", "application/pdf")
    fedora.put_datastream(f"{PID_103}/text{content}", "text/plain")
    fedora.mark_as_indexable(f"{PID_103}/text{metadata}")
    fedora.mark_as_indexable(f"{PID_103}/master{metadata}")

    _indexable_object(fedora, PID_201)
    fedora.set_title(PID_201, TITLE)

    for pid in (PID_COL1, PID_COL2, PID_COL3):
        _indexable_object(fedora, pid)

    for pid, collection in ((PID_OBJ1, PID_COL1), (PID_OBJ2, PID_COL2), (PID_OBJ3, PID_COL3)):
        _indexable_object(fedora, pid)
        fedora.insert_into_collection(pid, collection)

    fedora.link_hierarchical_collections(PID_COL1, PID_COL2)
    fedora.link_hierarchical_collections(PID_COL2, PID_COL3)

    _indexable_object(fedora, PID_PROJ1)
    fedora.link_to_project(PID_OBJ1, PID_PROJ1)


def setup_test_objects(
    fedora: FedoraClient,
    profile: RepositoryProfile,
    settings: Settings,
    *,
    wait: bool = True,
) -> None:
    """Populate Fedora and give the consumer time to index into Fuseki."""

    _logger.info("fixtures.populate", url=fedora.base_url, snapshot=profile.snapshot)
    populate(fedora, profile)
    if wait and settings.indexing_wait_s:
        _logger.info("fixtures.wait_for_indexing", seconds=settings.indexing_wait_s)
        time.sleep(settings.indexing_wait_s)


__all__ = [
    "PID_101",
    "PID_102",
    "PID_103",
    "PID_201",
    "PID_COL1",
    "PID_COL2",
    "PID_COL3",
    "PID_OBJ1",
    "PID_OBJ2",
    "PID_OBJ3",
    "PID_PROJ1",
    "TITLE",
    "populate",
    "setup_test_objects",
]
