"""Tests for notiondb.utils.redact."""

from notiondb.utils import redact


class TestRedact:
    def test_authorization_header_redacted(self):
        result = redact({"Authorization": "Bearer ntn_secret123456"})
        assert "ntn_secret123456" not in result["Authorization"]
        assert result["Authorization"] == "Bearer <redacted>"

    def test_known_token_keeps_last_four(self):
        token = "my-secret-token"
        result = redact({"token": token}, token=token)
        assert token not in result["token"]
        assert result["token"] == "<redacted:...oken>"

    def test_short_token_fully_masked(self):
        result = redact({"note": "abc"}, token="abc")
        assert result["note"] == "<redacted:...****>"

    def test_token_scrubbed_from_nested_bodies(self):
        token = "secret_abcdefgh"
        payload = {
            "response_body": {"message": f"bad token {token}"},
            "items": [{"text": token}, 3],
        }
        result = redact(payload, token=token)
        assert token not in str(result)
        assert result["items"][1] == 3

    def test_sensitive_key_non_string_redacted(self):
        assert redact({"password": 12345})["password"] == "<redacted>"

    def test_case_insensitive_keys(self):
        result = redact({"X-Api-Key": {"nested": "v"}})
        assert result["X-Api-Key"] == "<redacted>"

    def test_input_not_mutated(self):
        payload = {"Authorization": "Bearer abc", "body": {"a": 1}}
        redact(payload)
        assert payload == {"Authorization": "Bearer abc", "body": {"a": 1}}

    def test_non_sensitive_values_untouched(self):
        payload = {"method": "GET", "response_status": 200}
        assert redact(payload) == payload
