from __future__ import annotations

from sparqlRecipes import recipes
from sparqlRecipes.config import profile_for_version

BASE = "http://localhost:8080/fcrepo-webapp/rest/"


def test_mark_indexable_update_targets_patched_resource():
    update = recipes.mark_indexable_update()
    assert update.startswith("PREFIX dc: <http://purl.org/dc/elements/1.1/>\n")
    assert '<> indexing:hasIndexingTransformation "default";' in update
    assert "rdf:type indexing:Indexable }" in update
    assert update.endswith("WHERE { }")


def test_set_title_update():
    assert recipes.set_title_update(BASE + "objects/201", "foo") == (
        "prefix dc: <http://purl.org/dc/elements/1.1/>"
        " insert data { <" + BASE + "objects/201> dc:title 'foo' . }"
    )


def test_relationship_updates():
    member = recipes.collection_member_update(BASE + "o", BASE + "c")
    assert member == (
        "insert data { <" + BASE + "o>"
        " <http://some-vocabulary.org/rels-ext#isMemberOfCollection>"
        " <" + BASE + "c> . }"
    )
    part = recipes.has_part_update(BASE + "c1", BASE + "c2")
    assert "<http://some-vocabulary.org/rels-ext#hasPart>" in part
    project = recipes.project_link_update(BASE + "o", BASE + "p")
    assert project == (
        "prefix ex: <http://example.org/> insert data { <" + BASE + "o> ex:project <" + BASE + "p> . }"
    )


def test_text_datastream_query_follows_profile():
    current = recipes.objects_with_text_datastream_query(profile_for_version(None))
    assert '?ds fcrepo:mixinTypes "fedora:NonRdfSourceDescription" .' in current
    assert "'/text/fcr:metadata'" in current

    legacy = recipes.objects_with_text_datastream_query(profile_for_version("4.0.0-beta-02"))
    assert '?ds fcrepo:mixinTypes "fedora:datastream" .' in legacy
    assert "'/text')" in legacy


def test_pdf_datastream_query_uses_content_relation():
    current = recipes.objects_with_pdf_datastream_query(profile_for_version(None))
    assert "?ds <http://www.iana.org/assignments/relation/describes> ?content ." in current
    assert '?content ebucore:hasMimeType "application/pdf"' in current
    legacy = recipes.objects_with_pdf_datastream_query(profile_for_version("4.0.0-beta-01"))
    assert "?ds fcrepo:hasContent ?content ." in legacy


def test_project_or_collection_queries_share_pattern():
    select = recipes.project_or_collection_query(BASE + "p", BASE + "c")
    count = recipes.count_project_or_collection_query(BASE + "p", BASE + "c")
    assert "select ?obj where {" in select
    assert "select (count(distinct ?obj) as ?count) where {" in count
    for text in (select, count):
        assert "{ ?obj ex:project <" + BASE + "p> }\n  UNION\n" in text
        assert "{ ?obj rels:isMemberOfCollection <" + BASE + "c> }" in text


def test_nested_collection_query_walks_has_part():
    query = recipes.nested_collection_members_query(BASE + "col1")
    assert "<" + BASE + "col1> rels:hasPart* ?col" in query
