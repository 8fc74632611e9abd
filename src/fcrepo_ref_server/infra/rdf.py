# src/fcrepo_ref_server/infra/rdf.py
"""
Property graphs: SPARQL Update application and turtle rendering.

User properties are stored subject-free (predicate -> values) so a resource
can be moved or copied without rewriting triples; the subject is supplied
whenever the properties are turned back into a graph.
"""
from __future__ import annotations

from typing import Iterable, Optional, Tuple

from rdflib import Graph, Literal, Namespace, URIRef
from rdflib.namespace import RDF, XSD
from rdflib.plugins.sparql import prepareUpdate

from fcrepo_ref_server.models import Properties, ResourceKind, ResourceRecord
from fcrepo_ref_server.ports.storage import InvalidPatch

LDP = Namespace("http://www.w3.org/ns/ldp#")
FEDORA = Namespace("http://fedora.info/definitions/v4/repository#")
EBUCORE = Namespace("http://www.ebu.ch/metadata/ontologies/ebucore/ebucore#")

SPARQL_UPDATE_MEDIA_TYPE = "application/sparql-update"
TURTLE_MEDIA_TYPE = "text/turtle"

SERVER_MANAGED_PREDICATES = frozenset({
    LDP.contains,
    FEDORA.hasParent,
    FEDORA.created,
    FEDORA.lastModified,
    EBUCORE.hasMimeType,
})
_SERVER_MANAGED_TYPE_PREFIXES = (str(LDP), str(FEDORA))


def _is_server_managed(predicate: URIRef, obj) -> bool:
    if predicate in SERVER_MANAGED_PREDICATES:
        return True
    return predicate == RDF.type and str(obj).startswith(_SERVER_MANAGED_TYPE_PREFIXES)


def to_graph(properties: Properties, subject: URIRef) -> Graph:
    g = Graph()
    for predicate, values in properties.items():
        for value in values:
            g.add((subject, predicate, value))
    return g


def from_graph(graph: Graph, subject: URIRef) -> Properties:
    out: Properties = {}
    for _, predicate, obj in graph.triples((subject, None, None)):
        if _is_server_managed(predicate, obj):
            continue
        out.setdefault(predicate, set()).add(obj)
    return out


def apply_update(properties: Properties, subject: URIRef, sparql_update: str) -> Properties:
    """
    Run a SPARQL Update against a scratch graph and return the resulting
    properties. The input mapping is never touched, so a failure at any
    point leaves the resource as it was.
    """
    try:
        update = prepareUpdate(sparql_update, base=str(subject))
    except Exception as e:
        raise InvalidPatch(f"Malformed SPARQL update: {e}") from e

    scratch = to_graph(properties, subject)
    try:
        scratch.update(update)
    except Exception as e:
        raise InvalidPatch(f"SPARQL update failed: {e}") from e
    return from_graph(scratch, subject)


def type_triples(subject: URIRef, kind: ResourceKind) -> Iterable[Tuple]:
    if kind == ResourceKind.DATASTREAM:
        yield subject, RDF.type, LDP.NonRDFSource
        yield subject, RDF.type, FEDORA.Binary
    else:
        yield subject, RDF.type, LDP.RDFSource
        yield subject, RDF.type, LDP.Container
        yield subject, RDF.type, FEDORA.Container
    yield subject, RDF.type, FEDORA.Resource


def describe(
    record: ResourceRecord,
    subject: URIRef,
    parent: Optional[URIRef] = None,
    children: Iterable[Tuple[URIRef, ResourceKind]] = (),
) -> bytes:
    """Render a resource (or a frozen view of one) as turtle."""
    g = to_graph(record.properties, subject)
    g.bind("ldp", LDP)
    g.bind("fedora", FEDORA)
    g.bind("ebucore", EBUCORE)

    for triple in type_triples(subject, record.kind):
        g.add(triple)
    g.add((subject, FEDORA.created, Literal(record.created_at, datatype=XSD.dateTime)))
    g.add((subject, FEDORA.lastModified, Literal(record.last_modified, datatype=XSD.dateTime)))
    if parent is not None:
        g.add((subject, FEDORA.hasParent, parent))
    if record.content is not None:
        g.add((subject, EBUCORE.hasMimeType, Literal(record.content.content_type)))
    for child, kind in children:
        g.add((subject, LDP.contains, child))
        for triple in type_triples(child, kind):
            g.add(triple)

    data = g.serialize(format="turtle")
    return data.encode("utf-8") if isinstance(data, str) else data
