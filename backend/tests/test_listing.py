import pytest

from newsroom.articles.listing import ArticleFilter, split_tag_params


@pytest.fixture()
async def newsroom_articles(journalist, make_article, make_category, category_id):
    tennis_id = await make_category("Tennis")
    await make_article(journalist, title="Cup final preview", content="The big match", tags=["cup"])
    await make_article(
        journalist, title="Tennis open", subtitle="Grand slam CUP", content="Serve", categoryId=tennis_id, tags=["slam"]
    )
    await make_article(journalist, title="Transfer news", content="No tags here")
    await make_article(journalist, title="Weather", content="A sunny cup of tea", tags=["misc"])


def _titles(resp) -> set:
    return {a["title"] for a in resp.json()["articles"]}


def test_split_tag_params():
    assert split_tag_params(None) == []
    assert split_tag_params(["a,b", " c ", ","]) == ["a", "b", "c"]


def test_filter_skip():
    assert ArticleFilter(page=1, limit=10).skip == 0
    assert ArticleFilter(page=3, limit=20).skip == 40


async def test_search_is_case_insensitive_over_title_subtitle_and_content(client, newsroom_articles):
    resp = await client.get("/api/articles", params={"search": "cUp"})
    assert resp.status_code == 200
    assert _titles(resp) == {"Cup final preview", "Tennis open", "Weather"}
    assert resp.json()["totalArticles"] == 3


async def test_search_treats_wildcards_literally(client, newsroom_articles):
    resp = await client.get("/api/articles", params={"search": "%"})
    assert resp.json()["totalArticles"] == 0


async def test_category_filter_matches_name(client, newsroom_articles):
    resp = await client.get("/api/articles", params={"category": "Football"})
    assert _titles(resp) == {"Cup final preview", "Transfer news", "Weather"}

    resp = await client.get("/api/articles", params={"category": "Golf"})
    assert resp.json()["articles"] == []
    assert resp.json()["totalArticles"] == 0


@pytest.mark.parametrize("query", ["tags=cup,slam", "tags=cup&tags=slam"])
async def test_tags_filter_matches_any(client, newsroom_articles, query):
    resp = await client.get(f"/api/articles?{query}")
    assert _titles(resp) == {"Cup final preview", "Tennis open"}


async def test_filters_combine_with_and(client, newsroom_articles):
    resp = await client.get("/api/articles", params={"category": "Football", "tags": "cup,slam"})
    assert _titles(resp) == {"Cup final preview"}

    resp = await client.get("/api/articles", params={"category": "Football", "search": "cup"})
    assert _titles(resp) == {"Cup final preview", "Weather"}


async def test_pagination_reports_total_and_window(client, journalist, make_article):
    for n in range(1, 26):
        await make_article(journalist, title=f"Story {n:02d}")

    resp = await client.get(
        "/api/articles", params={"limit": 10, "page": 2, "sortBy": "createdAt", "sortOrder": "asc"}
    )
    assert resp.status_code == 200
    body = resp.json()
    assert body["totalArticles"] == 25
    assert body["page"] == 2
    assert body["limit"] == 10
    assert [a["title"] for a in body["articles"]] == [f"Story {n:02d}" for n in range(11, 21)]

    last = (await client.get("/api/articles", params={"limit": 10, "page": 3})).json()
    assert len(last["articles"]) == 5
    beyond = (await client.get("/api/articles", params={"limit": 10, "page": 4})).json()
    assert beyond["articles"] == []
    assert beyond["totalArticles"] == 25


async def test_default_order_is_newest_first(client, journalist, make_article):
    for title in ("First", "Second", "Third"):
        await make_article(journalist, title=title)
    body = (await client.get("/api/articles")).json()
    assert [a["title"] for a in body["articles"]] == ["Third", "Second", "First"]
    assert body["page"] == 1
    assert body["limit"] == 10


async def test_sort_by_title_and_views(client, journalist, make_article):
    bravo = await make_article(journalist, title="Bravo", status="PUBLISHED")
    await make_article(journalist, title="Alpha", status="PUBLISHED")
    await make_article(journalist, title="Charlie", status="PUBLISHED")
    await client.get(f"/api/articles/{bravo['id']}")

    by_title = (await client.get("/api/articles", params={"sortBy": "title", "sortOrder": "asc"})).json()
    assert [a["title"] for a in by_title["articles"]] == ["Alpha", "Bravo", "Charlie"]

    by_views = (await client.get("/api/articles", params={"sortBy": "viewsCount", "sortOrder": "desc"})).json()
    assert by_views["articles"][0]["title"] == "Bravo"
    assert by_views["articles"][0]["viewsCount"] == 1


@pytest.mark.parametrize(
    "params",
    [{"limit": 0}, {"limit": 101}, {"page": 0}, {"sortBy": "views"}, {"sortOrder": "sideways"}],
)
async def test_invalid_listing_params(client, params):
    resp = await client.get("/api/articles", params=params)
    assert resp.status_code == 400
