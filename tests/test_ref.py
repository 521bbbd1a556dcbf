"""Tests for database references."""

import pytest

from firebase_client import ClientConfig, Ref, order_by, shallow


class TestRefConstruction:
    def test_from_url(self, config):
        ref = Ref("https://test-db.firebaseio.com", config=config)
        assert ref.path == "/"
        assert ref.key is None
        assert ref.url == "https://test-db.firebaseio.com/.json"

    def test_url_with_path(self, config):
        ref = Ref("https://test-db.firebaseio.com/users/alice", config=config)
        assert ref.path == "/users/alice"
        assert ref.key == "alice"

    def test_json_suffix_is_stripped(self, config):
        ref = Ref("https://test-db.firebaseio.com/users.json", config=config)
        assert ref.path == "/users"

    def test_url_from_config(self):
        config = ClientConfig(url="https://from-config.firebaseio.com", auth=None)
        ref = Ref(config=config)
        assert str(ref) == "https://from-config.firebaseio.com/"

    def test_missing_url(self, config):
        with pytest.raises(ValueError, match="URL required"):
            Ref(config=config)

    @pytest.mark.parametrize("url", ["test-db.firebaseio.com", "ftp://test-db", "https://"])
    def test_invalid_url(self, config, url):
        with pytest.raises(ValueError, match="Invalid database URL"):
            Ref(url, config=config)

    def test_auth_overrides_config(self, config):
        ref = Ref("https://test-db.firebaseio.com", auth="token", config=config)
        assert ref.config.auth == "token"
        assert config.auth is None


class TestRefNavigation:
    def test_child(self, db):
        child = db.ref("users/alice")
        assert child.path == "/users/alice"
        assert child.key == "alice"

    def test_slash_operator(self, db):
        assert (db / "users" / "alice") == db.ref("users/alice")

    def test_leading_and_trailing_slashes_ignored(self, db):
        assert db.ref("/users/").path == "/users"
        assert db.ref("//users//alice/").path == "/users/alice"

    def test_parent_and_root(self, db):
        child = db.ref("users/alice/profile")
        assert child.parent == db.ref("users/alice")
        assert child.root == db
        assert db.parent is None

    def test_children_share_config_and_transport(self, db, server):
        server.respond(200, 1)
        child = db.ref("a/b")
        assert child.config is db.config
        assert child.get() == 1

    def test_rules_path(self, db):
        assert db.ref("/.settings/rules").url == "https://test-db.firebaseio.com/.settings/rules.json"

    def test_keys_are_url_quoted(self, db):
        assert db.ref("users/a b").url == "https://test-db.firebaseio.com/users/a%20b.json"

    @pytest.mark.parametrize("path", ["users/a#b", "users/$key", "a[0]", "bad]", "tab\there"])
    def test_invalid_keys_rejected(self, db, path):
        with pytest.raises(ValueError, match="Invalid key"):
            db.ref(path)

    def test_overlong_key_rejected(self, db):
        with pytest.raises(ValueError, match="768 bytes"):
            db.ref("k" * 769)

    def test_refs_are_hashable(self, db):
        assert len({db / "a", db.ref("a"), db / "b"}) == 2


class TestClientAndRequest:
    def test_get_request(self, db):
        client, request = db.ref("users").client_and_request("get")
        with client:
            assert request.method == "GET"
            assert request.url.path == "/users.json"
            assert request.url.params["auth"] == "secret"
            assert request.headers["User-Agent"] == "firebase-client-tests"
            assert "Content-Type" not in request.headers

    def test_body_sets_content_type(self, db):
        client, request = db.client_and_request("PUT", b'{"a":1}')
        with client:
            assert request.headers["Content-Type"] == "application/json"
            assert request.content == b'{"a":1}'

    def test_options_applied(self, db):
        client, request = db.client_and_request("GET", None, order_by("age"), shallow())
        with client:
            assert request.url.params["orderBy"] == '"age"'
            assert request.url.params["shallow"] == "true"

    def test_access_token_param(self, config):
        config.auth_param = "access_token"
        ref = Ref("https://test-db.firebaseio.com", auth="oauth", config=config)
        client, request = ref.client_and_request("GET")
        with client:
            assert request.url.params["access_token"] == "oauth"
            assert "auth" not in request.url.params

    def test_no_auth(self, config):
        ref = Ref("https://test-db.firebaseio.com", config=config)
        client, request = ref.client_and_request("DELETE")
        with client:
            assert "auth" not in request.url.params

    @pytest.mark.parametrize("method", ["HEAD", "OPTIONS", "TRACE", ""])
    def test_unsupported_method(self, db, method):
        with pytest.raises(ValueError, match="Unsupported method"):
            db.client_and_request(method)


class TestRefOperations:
    def test_method_shortcuts(self, db, server):
        server.respond(200, {"name": "-Nabc"})
        server.respond(200, {})
        server.respond(200, {})
        server.respond(200, None)
        server.respond(200, {"v": 1})

        messages = db / "messages"
        key = messages.push({"text": "hi"})
        messages.ref(key).set({"text": "hello"})
        messages.ref(key).update({"read": True})
        messages.ref(key).remove()
        value = messages.get(shallow())

        assert key == "-Nabc"
        assert [r.method for r in server.requests] == ["POST", "PUT", "PATCH", "DELETE", "GET"]
        assert server.requests[1].url.path == "/messages/-Nabc.json"
        assert server.last_request.url.params["shallow"] == "true"
        assert value == {"v": 1}

    def test_rules_shortcuts(self, db, server):
        server.respond(200, raw=b'{"rules":{}}')
        server.respond(200, {})
        server.respond(200, {})

        raw = db.get_rules_json()
        db.set_rules_json(raw)
        db.set_rules({"rules": {".read": True}})

        assert raw == b'{"rules":{}}'
        assert all(r.url.path == "/.settings/rules.json" for r in server.requests)
