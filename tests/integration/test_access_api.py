"""Integration tests for ownership, visibility and parent cleanup across the API."""

API = "/api/v1"


class TestEndToEndScenario:
    """Two accounts sharing and deleting content."""

    def test_alice_and_bob(self, client, api, media_storage):
        """Test the full publish, read, forbidden delete and orphaned comment flow."""
        api.register("alice", "p@ss1234")
        api.register("bob")

        login = client.post(f"{API}/auth/login", json={"username": "alice", "password": "p@ss1234"})
        assert login.status_code == 200
        assert login.json()["access_token"] and login.json()["refresh_token"]
        client.cookies.clear()
        alice_headers = api.bearer(login.json())
        bob_headers = api.bearer(api.login("bob"))

        video = api.publish_video(alice_headers, title="V1")
        assert video["is_published"] is True
        video_id = video["id"]

        read = client.get(f"{API}/videos/{video_id}", headers=bob_headers)
        assert read.status_code == 200
        assert read.json()["title"] == "V1"

        forbidden = client.delete(f"{API}/videos/{video_id}", headers=bob_headers)
        assert forbidden.status_code == 403
        assert forbidden.json()["type"] == "Forbidden"

        comment = client.post(
            f"{API}/comments/video/{video_id}", json={"content": "Nice"}, headers=bob_headers
        )
        assert comment.status_code == 201
        comment_id = comment.json()["id"]

        deleted = client.delete(f"{API}/videos/{video_id}", headers=alice_headers)
        assert deleted.status_code == 200
        assert video["video_url"] in media_storage.deleted
        assert video["thumbnail_url"] in media_storage.deleted

        gone = client.get(f"{API}/comments/{comment_id}", headers=bob_headers)
        assert gone.status_code == 410
        body = gone.json()
        assert body["type"] == "ParentGone"
        assert body["parent_type"] == "video"
        assert body["parent_id"] == video_id
        assert body["removed"] >= 1

        again = client.get(f"{API}/comments/{comment_id}", headers=bob_headers)
        assert again.status_code == 404
        assert again.json()["type"] == "NotFound"


class TestVisibility:
    """Unpublished resources are only visible to their owner."""

    def test_unpublished_video_hidden_from_others(self, client, api, alice, bob):
        """Test owner, other account and anonymous reads of an unpublished video."""
        video = api.publish_video(alice["headers"])
        toggled = client.patch(f"{API}/videos/{video['id']}/publish", headers=alice["headers"])
        assert toggled.status_code == 200
        assert toggled.json()["is_published"] is False

        assert client.get(f"{API}/videos/{video['id']}", headers=alice["headers"]).status_code == 200
        assert client.get(f"{API}/videos/{video['id']}", headers=bob["headers"]).status_code == 404
        assert client.get(f"{API}/videos/{video['id']}").status_code == 404

    def test_publish_toggle_twice_restores_state(self, client, api, alice):
        """Test two publish toggles return the video to its starting state."""
        video = api.publish_video(alice["headers"])

        client.patch(f"{API}/videos/{video['id']}/publish", headers=alice["headers"])
        second = client.patch(f"{API}/videos/{video['id']}/publish", headers=alice["headers"])

        assert second.json()["is_published"] is True

    def test_video_listing_filters_unpublished(self, client, api, alice, bob):
        """Test listings show others only published videos."""
        api.publish_video(alice["headers"], title="Public")
        hidden = api.publish_video(alice["headers"], title="Draft")
        client.patch(f"{API}/videos/{hidden['id']}/publish", headers=alice["headers"])

        own = client.get(f"{API}/videos", params={"user_id": alice["account"]["id"]}, headers=alice["headers"])
        other = client.get(f"{API}/videos", params={"user_id": alice["account"]["id"]}, headers=bob["headers"])
        anonymous = client.get(f"{API}/videos")

        assert {v["title"] for v in own.json()["items"]} == {"Public", "Draft"}
        assert [v["title"] for v in other.json()["items"]] == ["Public"]
        assert other.json()["total"] == 1
        assert [v["title"] for v in anonymous.json()["items"]] == ["Public"]

    def test_video_listing_pagination_and_search(self, client, api, alice):
        """Test limit clamping, paging and text search."""
        for i in range(3):
            api.publish_video(alice["headers"], title=f"Clip {i}")
        api.publish_video(alice["headers"], title="Sunset")

        first = client.get(f"{API}/videos", params={"page": 1, "limit": 2}).json()
        assert len(first["items"]) == 2
        assert first["total"] == 4
        assert first["has_next"] is True

        clamped = client.get(f"{API}/videos", params={"limit": 500}).json()
        assert clamped["limit"] == 20

        found = client.get(f"{API}/videos", params={"query": "sunset"}).json()
        assert [v["title"] for v in found["items"]] == ["Sunset"]

    def test_video_search_matches_wildcards_literally(self, client, api, alice):
        """Test percent and underscore in a search are not LIKE wildcards."""
        api.publish_video(alice["headers"], title="100% real")
        api.publish_video(alice["headers"], title="1000 real")

        percent = client.get(f"{API}/videos", params={"query": "0%"}).json()
        underscore = client.get(f"{API}/videos", params={"query": "10_0"}).json()

        assert [v["title"] for v in percent["items"]] == ["100% real"]
        assert underscore["items"] == []

    def test_comments_on_hidden_video(self, client, api, alice, bob):
        """Test commenting on a video the caller cannot see."""
        video = api.publish_video(alice["headers"])
        client.patch(f"{API}/videos/{video['id']}/publish", headers=alice["headers"])

        response = client.post(
            f"{API}/comments/video/{video['id']}", json={"content": "Hi"}, headers=bob["headers"]
        )

        assert response.status_code == 404


class TestOwnership:
    """Mutations by non-owners are forbidden; missing resources are not found."""

    def test_update_video_forbidden_for_other_account(self, client, api, alice, bob):
        video = api.publish_video(alice["headers"])

        response = client.patch(
            f"{API}/videos/{video['id']}", data={"title": "Mine now"}, headers=bob["headers"]
        )

        assert response.status_code == 403

    def test_update_video_by_owner(self, client, api, alice, media_storage):
        """Test replacing the thumbnail discards the old one."""
        video = api.publish_video(alice["headers"])

        response = client.patch(
            f"{API}/videos/{video['id']}",
            data={"title": "Renamed"},
            files={"thumbnail": ("new.png", b"new-png", "image/png")},
            headers=alice["headers"],
        )

        assert response.status_code == 200
        data = response.json()
        assert data["title"] == "Renamed"
        assert data["thumbnail_url"] != video["thumbnail_url"]
        assert media_storage.deleted == [video["thumbnail_url"]]

    def test_delete_missing_video(self, client, alice):
        response = client.delete(f"{API}/videos/999", headers=alice["headers"])

        assert response.status_code == 404

    def test_mutation_requires_authentication(self, client, api, alice):
        video = api.publish_video(alice["headers"])

        response = client.delete(f"{API}/videos/{video['id']}")

        assert response.status_code == 401

    def test_tweet_ownership(self, client, alice, bob):
        """Test tweet update and delete by owner and non-owner."""
        created = client.post(f"{API}/tweets", json={"content": "hello"}, headers=alice["headers"])
        assert created.status_code == 201
        tweet_id = created.json()["id"]

        assert client.patch(
            f"{API}/tweets/{tweet_id}", json={"content": "hijack"}, headers=bob["headers"]
        ).status_code == 403
        assert client.delete(f"{API}/tweets/{tweet_id}", headers=bob["headers"]).status_code == 403

        updated = client.patch(
            f"{API}/tweets/{tweet_id}", json={"content": "hello again"}, headers=alice["headers"]
        )
        assert updated.json()["content"] == "hello again"

        listed = client.get(f"{API}/tweets/user/{alice['account']['id']}").json()
        assert listed["total"] == 1

        assert client.delete(f"{API}/tweets/{tweet_id}", headers=alice["headers"]).status_code == 200
        assert client.get(f"{API}/tweets/user/{alice['account']['id']}").json()["total"] == 0

    def test_comment_ownership(self, client, api, alice, bob):
        video = api.publish_video(alice["headers"])
        comment = client.post(
            f"{API}/comments/video/{video['id']}", json={"content": "First"}, headers=bob["headers"]
        ).json()

        forbidden = client.patch(
            f"{API}/comments/{comment['id']}", json={"content": "Edited"}, headers=alice["headers"]
        )
        assert forbidden.status_code == 403

        updated = client.patch(
            f"{API}/comments/{comment['id']}", json={"content": "Edited"}, headers=bob["headers"]
        )
        assert updated.status_code == 200
        assert updated.json()["content"] == "Edited"
        assert updated.json()["parent_type"] == "video"


class TestParentCleanup:
    """Dependents of deleted parents are removed on first access."""

    def test_comments_listing_after_tweet_deleted(self, client, alice, bob):
        """Test listing comments of a deleted tweet reports the removed comments."""
        tweet = client.post(f"{API}/tweets", json={"content": "hi"}, headers=alice["headers"]).json()
        client.post(f"{API}/comments/tweet/{tweet['id']}", json={"content": "a"}, headers=bob["headers"])
        client.post(f"{API}/comments/tweet/{tweet['id']}", json={"content": "b"}, headers=bob["headers"])
        client.delete(f"{API}/tweets/{tweet['id']}", headers=alice["headers"])

        gone = client.get(f"{API}/comments/tweet/{tweet['id']}")
        assert gone.status_code == 410
        assert gone.json()["removed"] == 2

        missing = client.get(f"{API}/comments/tweet/{tweet['id']}")
        assert missing.status_code == 404

    def test_like_on_comment_of_deleted_video(self, client, api, alice, bob):
        """Test liking a comment whose video is gone removes the comment and its likes."""
        video = api.publish_video(alice["headers"])
        comment = client.post(
            f"{API}/comments/video/{video['id']}", json={"content": "c"}, headers=bob["headers"]
        ).json()
        liked = client.post(f"{API}/likes/comment/{comment['id']}", headers=alice["headers"])
        assert liked.json()["liked"] is True
        client.delete(f"{API}/videos/{video['id']}", headers=alice["headers"])

        response = client.post(f"{API}/likes/comment/{comment['id']}", headers=bob["headers"])

        assert response.status_code == 410
        assert response.json()["removed"] == 2
        assert client.get(f"{API}/comments/{comment['id']}").status_code == 404

    def test_playlist_entry_removed_with_video(self, client, api, alice):
        """Test a deleted video disappears from playlists after cleanup."""
        video = api.publish_video(alice["headers"])
        playlist = client.post(
            f"{API}/playlists",
            json={"name": "Favourites", "video_ids": [video["id"]]},
            headers=alice["headers"],
        ).json()
        assert [v["id"] for v in playlist["videos"]] == [video["id"]]

        client.delete(f"{API}/videos/{video['id']}", headers=alice["headers"])
        assert client.post(f"{API}/likes/video/{video['id']}", headers=alice["headers"]).status_code == 410

        fetched = client.get(f"{API}/playlists/{playlist['id']}", headers=alice["headers"])
        assert fetched.json()["videos"] == []

    def test_delete_comment_removes_its_likes(self, client, api, alice, bob):
        video = api.publish_video(alice["headers"])
        comment = client.post(
            f"{API}/comments/video/{video['id']}", json={"content": "c"}, headers=bob["headers"]
        ).json()
        client.post(f"{API}/likes/comment/{comment['id']}", headers=alice["headers"])

        deleted = client.delete(f"{API}/comments/{comment['id']}", headers=bob["headers"])

        assert deleted.status_code == 200
        assert client.post(f"{API}/likes/comment/{comment['id']}", headers=alice["headers"]).status_code == 404
