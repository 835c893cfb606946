import pytest

@pytest.fixture
def published_post(admin_client, post_data):
    return admin_client.post("/api/posts", json=post_data).json()

class TestFavoriteWrites:
    def test_favorite_post(self, reader_client, published_post):
        """测试收藏文章"""
        response = reader_client.put(f"/api/favorites/{published_post['id']}")
        assert response.status_code == 200
        assert response.json() == {"result": "ok"}
        assert reader_client.get("/api/favorites").json() == {"post_ids": [published_post["id"]]}

    def test_favorite_twice_is_idempotent(self, client, reader_client, published_post):
        """测试重复收藏是幂等的"""
        reader_client.put(f"/api/favorites/{published_post['id']}")
        response = reader_client.put(f"/api/favorites/{published_post['id']}")
        assert response.status_code == 200
        assert response.json() == {"result": "duplicate"}

        assert reader_client.get("/api/favorites").json()["post_ids"] == [published_post["id"]]
        counts = client.post("/api/favorites/counts", json={"post_ids": [published_post["id"]]}).json()
        assert counts == {published_post["id"]: 1}

    def test_unfavorite(self, reader_client, published_post):
        """测试取消收藏"""
        reader_client.put(f"/api/favorites/{published_post['id']}")
        response = reader_client.delete(f"/api/favorites/{published_post['id']}")
        assert response.status_code == 204
        assert reader_client.get("/api/favorites").json()["post_ids"] == []
        # removing again is a no-op
        assert reader_client.delete(f"/api/favorites/{published_post['id']}").status_code == 204

    def test_favorite_requires_login(self, client, published_post):
        """测试未登录不能收藏"""
        assert client.put(f"/api/favorites/{published_post['id']}").status_code == 401
        assert client.get("/api/favorites").status_code == 401

    def test_cannot_favorite_draft(self, reader_client, admin_client, post_data):
        draft = admin_client.post("/api/posts", json={**post_data, "origin": "assisted"}).json()
        assert reader_client.put(f"/api/favorites/{draft['id']}").status_code == 404

    def test_cannot_favorite_missing_post(self, reader_client):
        assert reader_client.put("/api/favorites/missing").status_code == 404

class TestFavoriteCounts:
    def test_counts_per_post(self, client, reader_client, admin_client, post_data):
        """测试批量获取收藏数"""
        first = admin_client.post("/api/posts", json=post_data).json()
        second = admin_client.post("/api/posts", json=post_data).json()
        reader_client.put(f"/api/favorites/{first['id']}")
        admin_client.put(f"/api/favorites/{first['id']}")

        counts = client.post("/api/favorites/counts", json={"post_ids": [first["id"], second["id"]]}).json()
        # posts with no favorites are omitted
        assert counts == {first["id"]: 2}

    def test_counts_empty_list(self, client):
        response = client.post("/api/favorites/counts", json={"post_ids": []})
        assert response.status_code == 200
        assert response.json() == {}

    def test_count_in_post_response(self, client, reader_client, published_post):
        reader_client.put(f"/api/favorites/{published_post['id']}")
        assert client.get(f"/api/posts/{published_post['id']}").json()["favorites_count"] == 1

    def test_deleting_post_removes_favorites(self, client, reader_client, admin_client, published_post):
        """测试删除文章时删除收藏"""
        reader_client.put(f"/api/favorites/{published_post['id']}")
        admin_client.delete(f"/api/posts/{published_post['id']}")
        assert reader_client.get("/api/favorites").json()["post_ids"] == []
