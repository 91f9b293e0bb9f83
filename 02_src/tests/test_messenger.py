"""Tests for the Messenger client and webhook security helpers."""

import json

import httpx
import pytest

from conftest import make_client
from nestbot.errors import DeliveryError, SignatureError
from nestbot.messenger import MessengerClient, WebhookPayload, sign, verify_challenge, verify_signature


class TestMessengerClient:
    """Tests for MessengerClient.send_text()."""

    async def test_posts_text_to_send_api(self):
        seen = []

        def handler(request):
            seen.append(request)
            return httpx.Response(200, json={"recipient_id": "user1", "message_id": "mid.1"})

        async with make_client(handler) as client:
            result = await MessengerClient(client, "page_token").send_text("user1", "Hello!")

        assert result["message_id"] == "mid.1"
        request = seen[0]
        assert request.method == "POST"
        assert request.url.path == "/v18.0/me/messages"
        assert request.url.params["access_token"] == "page_token"
        assert json.loads(request.content) == {
            "recipient": {"id": "user1"},
            "message": {"text": "Hello!"},
        }

    async def test_error_envelope_raises(self):
        def handler(request):
            return httpx.Response(
                400,
                json={"error": {"message": "(#100) No matching user found", "code": 100}},
            )

        async with make_client(handler) as client:
            with pytest.raises(DeliveryError, match="No matching user"):
                await MessengerClient(client, "page_token").send_text("ghost", "Hello!")

    async def test_non_json_reply_raises(self):
        async with make_client(lambda r: httpx.Response(502, text="Bad Gateway")) as client:
            with pytest.raises(DeliveryError, match="502"):
                await MessengerClient(client, "page_token").send_text("user1", "Hello!")

    async def test_transport_error_raises(self):
        def handler(request):
            raise httpx.ConnectError("unreachable")

        async with make_client(handler) as client:
            with pytest.raises(DeliveryError):
                await MessengerClient(client, "page_token").send_text("user1", "Hello!")


class TestVerifySignature:
    """Tests for verify_signature()."""

    BODY = b'{"object":"page","entry":[]}'

    @pytest.mark.parametrize("method", ["sha1", "sha256"])
    def test_valid_signature(self, method):
        verify_signature(self.BODY, sign(self.BODY, "app_secret", method), "app_secret")

    def test_uppercase_hex_accepted(self):
        method, digest = sign(self.BODY, "app_secret").split("=")
        verify_signature(self.BODY, f"{method}={digest.upper()}", "app_secret")

    def test_wrong_secret(self):
        with pytest.raises(SignatureError, match="validate"):
            verify_signature(self.BODY, sign(self.BODY, "other_secret"), "app_secret")

    def test_tampered_body(self):
        signature = sign(self.BODY, "app_secret")
        with pytest.raises(SignatureError):
            verify_signature(self.BODY + b" ", signature, "app_secret")

    @pytest.mark.parametrize("header", ["garbage", "sha1=", "=abc"])
    def test_malformed_header(self, header):
        with pytest.raises(SignatureError):
            verify_signature(self.BODY, header, "app_secret")

    def test_unsupported_method(self):
        with pytest.raises(SignatureError, match="Unsupported"):
            verify_signature(self.BODY, "md5=abc", "app_secret")

    def test_non_ascii_digest(self):
        with pytest.raises(SignatureError):
            verify_signature(self.BODY, "sha1=\u00e9\u00e9", "app_secret")


class TestVerifyChallenge:
    """Tests for verify_challenge()."""

    def test_subscribe_with_matching_token(self):
        assert verify_challenge("subscribe", "verify_token", "12345", "verify_token") == "12345"

    def test_wrong_token(self):
        assert verify_challenge("subscribe", "nope", "12345", "verify_token") is None

    def test_non_ascii_token(self):
        assert verify_challenge("subscribe", "v\u00e9rify", "12345", "verify_token") is None

    def test_wrong_mode(self):
        assert verify_challenge("unsubscribe", "verify_token", "12345", "verify_token") is None

    def test_missing_fields(self):
        assert verify_challenge(None, None, None, "verify_token") is None
        assert verify_challenge("subscribe", "verify_token", None, "verify_token") is None


class TestWebhookPayload:
    """Tests for webhook payload parsing."""

    def test_text_message(self):
        payload = WebhookPayload.model_validate(
            {
                "object": "page",
                "entry": [
                    {
                        "id": "page1",
                        "time": 1,
                        "messaging": [
                            {
                                "sender": {"id": "user1"},
                                "recipient": {"id": "page1"},
                                "timestamp": 1,
                                "message": {"mid": "m1", "text": "hi"},
                            }
                        ],
                    }
                ],
            }
        )
        event = payload.entry[0].messaging[0]
        assert event.sender.id == "user1"
        assert event.message.text == "hi"
        assert not event.message.is_echo

    def test_numeric_ids_become_strings(self):
        payload = WebhookPayload.model_validate(
            {"object": "page", "entry": [{"messaging": [{"sender": {"id": 123}}]}]}
        )
        assert payload.entry[0].messaging[0].sender.id == "123"

    def test_non_message_event_has_no_message(self):
        payload = WebhookPayload.model_validate(
            {
                "object": "page",
                "entry": [{"messaging": [{"sender": {"id": "u"}, "delivery": {"mids": ["m1"]}}]}],
            }
        )
        assert payload.entry[0].messaging[0].message is None
