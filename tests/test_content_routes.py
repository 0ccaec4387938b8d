from app.models.comment import Comment
from app.models.playlist import PlaylistVideo


def _playlist(client, headers, name="Favourites"):
    response = client.post("/api/playlists/", json={"name": name, "description": "mine"}, headers=headers)
    assert response.status_code == 201
    return response.json()


class TestPlaylists:
    def test_add_keeps_order_and_duplicates(self, client, make_user, make_video, auth_headers):
        alice = make_user("alice")
        v1, v2 = make_video(alice, "one"), make_video(alice, "two")
        playlist = _playlist(client, auth_headers(alice))

        for video in (v2, v1, v2):
            response = client.patch(f"/api/playlists/add/{video.id}/{playlist['id']}", headers=auth_headers(alice))
            assert response.status_code == 200

        assert response.json()["video_ids"] == [v2.id, v1.id, v2.id]

    def test_remove_video(self, client, make_user, make_video, auth_headers):
        alice = make_user("alice")
        v1, v2 = make_video(alice, "one"), make_video(alice, "two")
        playlist = _playlist(client, auth_headers(alice))
        for video in (v1, v2):
            client.patch(f"/api/playlists/add/{video.id}/{playlist['id']}", headers=auth_headers(alice))

        response = client.patch(f"/api/playlists/remove/{v1.id}/{playlist['id']}", headers=auth_headers(alice))
        assert response.status_code == 200
        assert response.json()["video_ids"] == [v2.id]

        again = client.patch(f"/api/playlists/remove/{v1.id}/{playlist['id']}", headers=auth_headers(alice))
        assert again.status_code == 404

    def test_only_owner_can_modify(self, client, session, make_user, make_video, auth_headers):
        alice, mallory = make_user("alice"), make_user("mallory")
        video = make_video(alice)
        playlist = _playlist(client, auth_headers(alice))

        assert client.patch(f"/api/playlists/add/{video.id}/{playlist['id']}", headers=auth_headers(mallory)).status_code == 403
        assert client.patch(f"/api/playlists/{playlist['id']}", json={"name": "mine now"}, headers=auth_headers(mallory)).status_code == 403
        assert client.delete(f"/api/playlists/{playlist['id']}", headers=auth_headers(mallory)).status_code == 403
        assert session.query(PlaylistVideo).count() == 0
        assert client.get(f"/api/playlists/{playlist['id']}").json()["name"] == "Favourites"

    def test_missing_playlist_is_not_found_before_forbidden(self, client, make_user, make_video, auth_headers):
        mallory = make_user("mallory")
        video = make_video(mallory)
        assert client.patch(f"/api/playlists/add/{video.id}/999", headers=auth_headers(mallory)).status_code == 404

    def test_update_and_delete(self, client, make_user, auth_headers):
        alice = make_user("alice")
        playlist = _playlist(client, auth_headers(alice))

        updated = client.patch(f"/api/playlists/{playlist['id']}", json={"name": "Renamed"}, headers=auth_headers(alice))
        assert updated.json()["name"] == "Renamed"
        assert updated.json()["description"] == "mine"

        assert client.delete(f"/api/playlists/{playlist['id']}", headers=auth_headers(alice)).status_code == 200
        assert client.get(f"/api/playlists/{playlist['id']}").status_code == 404

    def test_list_by_user(self, client, make_user, auth_headers):
        alice = make_user("alice")
        _playlist(client, auth_headers(alice), "first")
        _playlist(client, auth_headers(alice), "second")

        names = [p["name"] for p in client.get(f"/api/playlists/user/{alice.id}").json()]
        assert names == ["first", "second"]
        assert client.get("/api/playlists/user/999").status_code == 404

    def test_name_required(self, client, make_user, auth_headers):
        alice = make_user("alice")
        response = client.post("/api/playlists/", json={"name": "  "}, headers=auth_headers(alice))
        assert response.status_code == 400


class TestVideos:
    def test_publish_uses_media_store(self, client, make_user, auth_headers, media):
        alice = make_user("alice")
        response = client.post(
            "/api/videos/",
            data={"title": "Launch", "description": "day one", "duration": "42.0"},
            files={
                "video_file": ("clip.mp4", b"video", "video/mp4"),
                "thumbnail": ("thumb.png", b"image", "image/png"),
            },
            headers=auth_headers(alice),
        )
        assert response.status_code == 201
        body = response.json()
        assert body["video_file"] == "https://media.test/videos/clip.mp4"
        assert body["thumbnail"] == "https://media.test/thumbnails/thumb.png"
        assert body["duration"] == 42.0
        assert body["owner_id"] == alice.id

    def test_only_owner_can_update_or_delete(self, client, make_user, make_video, auth_headers):
        alice, mallory = make_user("alice"), make_user("mallory")
        video = make_video(alice, "original")

        assert client.patch(f"/api/videos/{video.id}", json={"title": "pwned"}, headers=auth_headers(mallory)).status_code == 403
        assert client.delete(f"/api/videos/{video.id}", headers=auth_headers(mallory)).status_code == 403
        assert client.get(f"/api/videos/{video.id}").json()["title"] == "original"

    def test_unpublished_is_hidden_from_others(self, client, make_user, make_video, auth_headers):
        alice, bob = make_user("alice"), make_user("bob")
        video = make_video(alice)

        toggled = client.patch(f"/api/videos/{video.id}/publish", headers=auth_headers(alice))
        assert toggled.json()["is_published"] is False

        assert client.get(f"/api/videos/{video.id}").status_code == 404
        assert client.get(f"/api/videos/{video.id}", headers=auth_headers(bob)).status_code == 404
        assert client.get(f"/api/videos/{video.id}", headers=auth_headers(alice)).status_code == 200
        assert client.get("/api/videos/channel/alice").json() == []
        assert len(client.get("/api/videos/channel/alice", headers=auth_headers(alice)).json()) == 1

    def test_delete_removes_comments(self, client, session, make_user, make_video, auth_headers):
        alice = make_user("alice")
        video = make_video(alice)
        client.post(f"/api/comments/{video.id}", json={"content": "nice"}, headers=auth_headers(alice))

        assert client.delete(f"/api/videos/{video.id}", headers=auth_headers(alice)).status_code == 200
        assert session.query(Comment).count() == 0


class TestCommentsAndTweets:
    def test_comment_lifecycle(self, client, make_user, make_video, auth_headers):
        alice, bob = make_user("alice"), make_user("bob")
        video = make_video(alice)

        created = client.post(f"/api/comments/{video.id}", json={"content": "first!"}, headers=auth_headers(bob))
        assert created.status_code == 201
        comment_id = created.json()["id"]

        assert client.patch(f"/api/comments/c/{comment_id}", json={"content": "edited"}, headers=auth_headers(alice)).status_code == 403
        assert client.patch(f"/api/comments/c/{comment_id}", json={"content": "edited"}, headers=auth_headers(bob)).json()["content"] == "edited"
        assert [c["content"] for c in client.get(f"/api/comments/{video.id}").json()] == ["edited"]
        assert client.delete(f"/api/comments/c/{comment_id}", headers=auth_headers(bob)).status_code == 200

    def test_comment_on_missing_video(self, client, make_user, auth_headers):
        bob = make_user("bob")
        assert client.post("/api/comments/999", json={"content": "hi"}, headers=auth_headers(bob)).status_code == 404

    def test_tweet_lifecycle(self, client, make_user, auth_headers):
        alice, bob = make_user("alice"), make_user("bob")
        tweet = client.post("/api/tweets/", json={"content": "hello"}, headers=auth_headers(alice)).json()

        assert client.delete(f"/api/tweets/{tweet['id']}", headers=auth_headers(bob)).status_code == 403
        assert [t["content"] for t in client.get(f"/api/tweets/user/{alice.id}").json()] == ["hello"]
        assert client.patch(f"/api/tweets/{tweet['id']}", json={"content": "bye"}, headers=auth_headers(alice)).json()["content"] == "bye"
        assert client.delete(f"/api/tweets/{tweet['id']}", headers=auth_headers(alice)).status_code == 200
        assert client.get(f"/api/tweets/user/{alice.id}").json() == []

    def test_blank_tweet(self, client, make_user, auth_headers):
        alice = make_user("alice")
        assert client.post("/api/tweets/", json={"content": " "}, headers=auth_headers(alice)).status_code == 400


def test_health(client):
    assert client.get("/health").json()["status"] == "ok"
