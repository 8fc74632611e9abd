# tests/test_resources_api.py
from rdflib import Graph, URIRef

from tests.conftest import DC, REST_URL, insert_literal

NON_RDF = '<http://www.w3.org/ns/ldp#NonRDFSource>;rel="type"'
LDP_CONTAINS = URIRef("http://www.w3.org/ns/ldp#contains")


def test_put_object_201_with_location(client):
    r = client.put("/rest/books")
    assert r.status_code == 201, r.text
    assert r.headers["location"] == REST_URL + "books"

    g = client.get("/rest/books")
    assert g.status_code == 200, g.text
    assert g.headers["content-type"].startswith("text/turtle")

def test_put_existing_409(client):
    assert client.put("/rest/dup").status_code == 201
    r = client.put("/rest/dup")
    assert r.status_code == 409
    assert r.json()["error"]["code"] == "conflict"

def test_put_invalid_path_400(client):
    r = client.put("/rest/a/fcr:nope")
    assert r.status_code == 400

def test_post_mints_child_under_container(client):
    assert client.put("/rest/parent").status_code == 201
    r = client.post("/rest/parent")
    assert r.status_code == 201, r.text
    location = r.headers["location"]
    assert location.startswith(REST_URL + "parent/")
    assert client.head(location).status_code == 200

def test_post_at_root_mints_identifier(client):
    r = client.post("/rest/")
    assert r.status_code == 201
    minted = r.headers["location"][len(REST_URL):]
    assert minted and "/" not in minted

def test_root_lists_children(client):
    client.put("/rest/one")
    client.put("/rest/two")
    r = client.get("/rest/")
    assert r.status_code == 200
    g = Graph().parse(data=r.text, format="turtle")
    children = set(g.objects(URIRef(REST_URL), LDP_CONTAINS))
    assert children == {URIRef(REST_URL + "one"), URIRef(REST_URL + "two")}

def test_datastream_roundtrip_and_head(client):
    r = client.put(
        "/rest/obj/ds",
        content=b"hello",
        headers={"Content-Type": "text/plain", "Link": NON_RDF},
    )
    assert r.status_code == 201, r.text

    g = client.get("/rest/obj/ds")
    assert g.status_code == 200
    assert g.content == b"hello"
    assert g.headers["content-type"] == "text/plain"

    h = client.head("/rest/obj/ds")
    assert h.status_code == 200
    assert "NonRDFSource" in h.headers["link"]

def test_replace_content_204(client):
    client.put("/rest/ds", content=b"one", headers={"Content-Type": "text/plain", "Link": NON_RDF})
    r = client.put("/rest/ds/fcr:content", content=b"two", headers={"Content-Type": "application/json"})
    assert r.status_code == 204, r.text
    g = client.get("/rest/ds")
    assert g.content == b"two"
    assert g.headers["content-type"] == "application/json"

def test_replace_content_on_object_409(client):
    client.put("/rest/plain")
    r = client.put("/rest/plain/fcr:content", content=b"x", headers={"Content-Type": "text/plain"})
    assert r.status_code == 409

def test_patch_properties_then_read(client):
    client.put("/rest/props")
    r = client.patch(
        "/rest/props",
        content=insert_literal(DC + "title", "Moby Dick"),
        headers={"Content-Type": "application/sparql-update"},
    )
    assert r.status_code == 204, r.text
    g = Graph().parse(data=client.get("/rest/props").text, format="turtle")
    titles = [str(o) for o in g.objects(URIRef(REST_URL + "props"), URIRef(DC + "title"))]
    assert titles == ["Moby Dick"]

def test_patch_wrong_media_type_415(client):
    client.put("/rest/props2")
    r = client.patch("/rest/props2", content="INSERT DATA {}", headers={"Content-Type": "text/plain"})
    assert r.status_code == 415

def test_patch_malformed_400(client):
    client.put("/rest/props3")
    r = client.patch(
        "/rest/props3",
        content="INSERT DATA { <> <",
        headers={"Content-Type": "application/sparql-update"},
    )
    assert r.status_code == 400
    assert r.json()["error"]["code"] == "bad_request"

def test_datastream_metadata_patch(client):
    client.put("/rest/dsm", content=b"x", headers={"Content-Type": "text/plain", "Link": NON_RDF})
    r = client.patch(
        "/rest/dsm/fcr:metadata",
        content=insert_literal(DC + "identifier", "test"),
        headers={"Content-Type": "application/sparql-update"},
    )
    assert r.status_code == 204, r.text
    g = Graph().parse(data=client.get("/rest/dsm/fcr:metadata").text, format="turtle")
    assert (URIRef(REST_URL + "dsm"), URIRef(DC + "identifier"), None) in g

def test_delete_then_410_then_tombstone_removed_404(client):
    client.put("/rest/doomed")
    assert client.delete("/rest/doomed").status_code == 204

    g = client.get("/rest/doomed")
    assert g.status_code == 410
    assert "410 Gone" in g.json()["error"]["message"]
    assert client.put("/rest/doomed").status_code == 410

    assert client.delete("/rest/doomed/fcr:tombstone").status_code == 204
    assert client.get("/rest/doomed").status_code == 404

def test_children_of_tombstone_are_gone(client):
    client.put("/rest/tree/leaf")
    client.delete("/rest/tree")
    assert client.get("/rest/tree/leaf").status_code == 410

def test_move_and_copy_verbs(client):
    client.put("/rest/from/child")
    m = client.request("MOVE", "/rest/from", headers={"Destination": REST_URL + "to"})
    assert m.status_code == 201, m.text
    assert m.headers["location"] == REST_URL + "to"
    assert client.get("/rest/from").status_code == 410
    assert client.get("/rest/to/child").status_code == 200

    c = client.request("COPY", "/rest/to", headers={"Destination": "copied"})
    assert c.status_code == 201, c.text
    assert client.get("/rest/to").status_code == 200
    assert client.get("/rest/copied/child").status_code == 200

def test_move_requires_destination(client):
    client.put("/rest/nodest")
    r = client.request("MOVE", "/rest/nodest")
    assert r.status_code == 400

def test_move_to_foreign_repository_400(client):
    client.put("/rest/local")
    r = client.request("MOVE", "/rest/local", headers={"Destination": "http://elsewhere.example/rest/x"})
    assert r.status_code == 400

def test_location_of_non_ascii_path_is_percent_encoded(client):
    r = client.put("/rest/caf%C3%A9/%E6%97%A5%E6%9C%AC")
    assert r.status_code == 201, r.text
    assert r.headers["location"] == REST_URL + "caf%C3%A9/%E6%97%A5%E6%9C%AC"
    assert client.head(r.headers["location"]).status_code == 200

def test_redirect_url_with_semicolon_is_kept_whole(client):
    target = "http://example.org/a;b=1/c"
    r = client.put(
        "/rest/semi",
        headers={
            "Link": NON_RDF,
            "Content-Type": f'message/external-body; access-type=URL; URL="{target}"',
        },
    )
    assert r.status_code == 201, r.text
    g = client.get("/rest/semi", follow_redirects=False)
    assert g.status_code == 307
    assert g.headers["location"] == target
