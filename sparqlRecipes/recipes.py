from __future__ import annotations

"""SPARQL text for the Fedora 4 "SPARQL Recipes".

Updates are sent to Fedora as ``application/sparql-update`` PATCH bodies;
queries are run against the Fuseki dataset the message consumer feeds.
"""

from sparqlRecipes.config import RepositoryProfile

DC = "http://purl.org/dc/elements/1.1/"
RDF = "http://www.w3.org/1999/02/22-rdf-syntax-ns#"
FCREPO = "http://fedora.info/definitions/v4/repository#"
INDEXING = "http://fedora.info/definitions/v4/indexing#"
EBUCORE = "http://www.ebu.ch/metadata/ontologies/ebucore/ebucore#"
RELS_EXT = "http://some-vocabulary.org/rels-ext#"
EX = "http://example.org/"

IS_MEMBER_OF_COLLECTION = f"{RELS_EXT}isMemberOfCollection"
HAS_PART = f"{RELS_EXT}hasPart"


def mark_indexable_update() -> str:
    """Flag the patched resource for the default indexing transformation."""

    return (
        f"PREFIX dc: <{DC}>\n"
        f"PREFIX rdf: <{RDF}>\n"
        f"PREFIX indexing: <{INDEXING}>\n"
        "DELETE { }\n"
        "INSERT {\n"
        '  <> indexing:hasIndexingTransformation "default";\n'
        "  rdf:type indexing:Indexable }\n"
        "WHERE { }"
    )


def set_title_update(uri: str, title: str) -> str:
    return f"prefix dc: <{DC}> insert data {{ <{uri}> dc:title '{title}' . }}"


def collection_member_update(uri: str, collection_uri: str) -> str:
    return f"insert data {{ <{uri}> <{IS_MEMBER_OF_COLLECTION}> <{collection_uri}> . }}"


def has_part_update(collection_uri: str, part_uri: str) -> str:
    return f"insert data {{ <{collection_uri}> <{HAS_PART}> <{part_uri}> . }}"


def project_link_update(uri: str, project_uri: str) -> str:
    return f"prefix ex: <{EX}> insert data {{ <{uri}> ex:project <{project_uri}> . }}"


def objects_with_text_datastream_query(profile: RepositoryProfile) -> str:
    """Recipe 1b: objects that have a datastream called ``text``."""

    return (
        f"prefix fcrepo: <{FCREPO}>\n"
        "select ?object where { \n"
        f'    ?ds fcrepo:mixinTypes "{profile.datastream_mixin_type}" .\n'
        "    ?ds fcrepo:hasParent ?object . \n"
        f"    filter(str(?ds)=concat(str(?object),'/text{profile.datastream_url_suffix}')) \n"
        "}"
    )


def objects_with_pdf_datastream_query(profile: RepositoryProfile) -> str:
    """Recipe 1c: objects with a datastream whose content is a PDF."""

    return (
        f"prefix fcrepo: <{FCREPO}>\n"
        f"prefix ebucore: <{EBUCORE}>\n"
        "select ?object where { \n"
        f'    ?ds fcrepo:mixinTypes "{profile.datastream_mixin_type}" .\n'
        "    ?ds fcrepo:hasParent ?object . \n"
        f"    ?ds {profile.datastream_relation} ?content .\n"
        '    ?content ebucore:hasMimeType "application/pdf" \n'
        "}"
    )


def titled_objects_query() -> str:
    """Recipe 2b: every object with a ``dc:title``."""

    return f"prefix dc: <{DC}>\nselect ?object ?title where {{ ?object dc:title ?title }}"


def collection_members_query() -> str:
    """Recipe 3e: every (object, collection) membership pair."""

    return f"select ?obj ?col where {{ ?obj <{IS_MEMBER_OF_COLLECTION}> ?col }}"


def nested_collection_members_query(collection_uri: str) -> str:
    """Recipe 3f: members of a collection or of any collection below it."""

    return (
        f"prefix rels: <{RELS_EXT}>\n"
        "select ?obj where {\n"
        f"  <{collection_uri}> rels:hasPart* ?col\n"
        "  . ?obj rels:isMemberOfCollection ?col\n"
        "}"
    )


def _project_or_collection_pattern(project_uri: str, collection_uri: str) -> str:
    return (
        f"  {{ ?obj ex:project <{project_uri}> }}\n"
        "  UNION\n"
        f"  {{ ?obj rels:isMemberOfCollection <{collection_uri}> }}\n"
    )


def project_or_collection_query(project_uri: str, collection_uri: str) -> str:
    """Recipe 3h: objects linked to a project or a member of a collection."""

    return (
        f"prefix rels: <{RELS_EXT}>\n"
        f"prefix ex: <{EX}>\n"
        "select ?obj where {\n"
        f"{_project_or_collection_pattern(project_uri, collection_uri)}"
        "}"
    )


def count_project_or_collection_query(project_uri: str, collection_uri: str) -> str:
    """Distinct count of the objects matched by recipe 3h."""

    return (
        f"prefix rels: <{RELS_EXT}>\n"
        f"prefix ex: <{EX}>\n"
        "select (count(distinct ?obj) as ?count) where {\n"
        f"{_project_or_collection_pattern(project_uri, collection_uri)}"
        "}"
    )


__all__ = [
    "collection_member_update",
    "collection_members_query",
    "count_project_or_collection_query",
    "has_part_update",
    "mark_indexable_update",
    "nested_collection_members_query",
    "objects_with_pdf_datastream_query",
    "objects_with_text_datastream_query",
    "project_link_update",
    "project_or_collection_query",
    "set_title_update",
    "titled_objects_query",
]
