import pytest

from newsroom.tags.service import normalize_tag_names


def test_normalize_tag_names():
    assert normalize_tag_names([" a", "b ", "a", "", "  "]) == ["a", "b"]


@pytest.mark.parametrize("resource", ["categories", "tags"])
async def test_crud_cycle(client, editor, resource):
    created = await client.post(f"/api/{resource}", json={"name": "  Politics "}, headers=editor.headers)
    assert created.status_code == 201
    item = created.json()
    assert item["name"] == "Politics"

    assert (await client.get(f"/api/{resource}/{item['id']}")).json() == item
    assert [i["name"] for i in (await client.get(f"/api/{resource}")).json()] == ["Politics"]

    renamed = await client.put(f"/api/{resource}/{item['id']}", json={"name": "World"}, headers=editor.headers)
    assert renamed.status_code == 200
    assert renamed.json()["name"] == "World"

    assert (await client.delete(f"/api/{resource}/{item['id']}", headers=editor.headers)).status_code == 204
    assert (await client.get(f"/api/{resource}/{item['id']}")).status_code == 404


@pytest.mark.parametrize(
    "resource, detail",
    [("categories", "Category name already in use"), ("tags", "Tag name already in use")],
)
async def test_duplicate_names_are_rejected(client, editor, resource, detail):
    first = (await client.post(f"/api/{resource}", json={"name": "One"}, headers=editor.headers)).json()
    await client.post(f"/api/{resource}", json={"name": "Two"}, headers=editor.headers)

    dup = await client.post(f"/api/{resource}", json={"name": "Two"}, headers=editor.headers)
    assert dup.status_code == 400
    assert dup.json()["detail"] == detail

    rename = await client.put(f"/api/{resource}/{first['id']}", json={"name": "Two"}, headers=editor.headers)
    assert rename.status_code == 400


@pytest.mark.parametrize("resource", ["categories", "tags"])
async def test_missing_items_are_404(client, editor, resource):
    assert (await client.get(f"/api/{resource}/9999")).status_code == 404
    assert (await client.put(f"/api/{resource}/9999", json={"name": "x"}, headers=editor.headers)).status_code == 404
    assert (await client.delete(f"/api/{resource}/9999", headers=editor.headers)).status_code == 404


async def test_blank_name_is_invalid(client, editor):
    resp = await client.post("/api/categories", json={"name": "   "}, headers=editor.headers)
    assert resp.status_code == 400
    assert resp.json()["errors"][0]["field"] == "name"


async def test_category_in_use_cannot_be_deleted(client, editor, journalist, make_article, category_id):
    article = await make_article(journalist, title="Anchored")

    resp = await client.delete(f"/api/categories/{category_id}", headers=editor.headers)
    assert resp.status_code == 400
    assert resp.json()["detail"] == "Category is in use"

    await client.delete(f"/api/articles/{article['id']}", headers=journalist.headers)
    assert (await client.delete(f"/api/categories/{category_id}", headers=editor.headers)).status_code == 204


async def test_deleting_tag_only_detaches_it(client, editor, journalist, make_article):
    article = await make_article(journalist, title="Tagged twice", tags=["keep", "drop"])
    drop_id = next(t["id"] for t in article["tags"] if t["name"] == "drop")

    assert (await client.delete(f"/api/tags/{drop_id}", headers=editor.headers)).status_code == 204

    current = await client.get(f"/api/articles/{article['id']}")
    assert current.status_code == 200
    assert [t["name"] for t in current.json()["tags"]] == ["keep"]


@pytest.mark.parametrize("resource", ["categories", "tags"])
@pytest.mark.parametrize("item_id", [0, 2**31])
async def test_out_of_range_ids_are_invalid_input(client, editor, resource, item_id):
    assert (await client.get(f"/api/{resource}/{item_id}")).status_code == 400
    resp = await client.put(f"/api/{resource}/{item_id}", json={"name": "x"}, headers=editor.headers)
    assert resp.status_code == 400
    assert (await client.delete(f"/api/{resource}/{item_id}", headers=editor.headers)).status_code == 400
