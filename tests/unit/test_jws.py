"""Unit tests for compact JWS helpers."""

import pytest

from fxa_oauth.core.auth.jws import (
    b64url_decode,
    b64url_encode,
    decode_jws,
    signing_input,
    split_jws,
    unbundle,
)


@pytest.mark.unit
class TestBase64Url:
    def test_encode_strips_padding(self):
        assert b64url_encode(b"a") == "YQ"

    def test_encode_is_url_safe(self):
        assert b64url_encode(b"\xfb\xff") == "-_8"

    def test_decode_restores_padding(self):
        assert b64url_decode("YQ") == b"a"

    def test_decode_rejects_garbage(self):
        with pytest.raises(ValueError):
            b64url_decode("é")


@pytest.mark.unit
class TestDecodeJws:
    def test_decodes_header_and_payload(self):
        token = signing_input({"alg": "DS128"}, {"aud": "https://a.example", "exp": 5}) + ".sig"
        header, payload = decode_jws(token)
        assert header == {"alg": "DS128"}
        assert payload == {"aud": "https://a.example", "exp": 5}

    def test_signing_input_is_compact_json(self):
        header_part, payload_part = signing_input({"alg": "RS256"}, {"exp": 1}).split(".")
        assert b64url_decode(header_part) == b'{"alg":"RS256"}'
        assert b64url_decode(payload_part) == b'{"exp":1}'

    def test_rejects_wrong_part_count(self):
        with pytest.raises(ValueError, match="expected 3 parts"):
            split_jws("a.b")

    def test_rejects_empty_token(self):
        with pytest.raises(ValueError, match="empty"):
            split_jws("")

    def test_rejects_non_json_segment(self):
        token = f"{b64url_encode(b'not json')}.{b64url_encode(b'{}')}.sig"
        with pytest.raises(ValueError, match="JSON"):
            decode_jws(token)

    def test_rejects_non_object_segment(self):
        token = f"{b64url_encode(b'[1]')}.{b64url_encode(b'{}')}.sig"
        with pytest.raises(ValueError, match="JSON objects"):
            decode_jws(token)


@pytest.mark.unit
class TestUnbundle:
    def test_splits_certificates_and_assertion(self):
        certs, assertion = unbundle("c1~c2~assertion")
        assert certs == ["c1", "c2"]
        assert assertion == "assertion"

    @pytest.mark.parametrize("bundle", ["assertion", "~assertion", "cert~"])
    def test_requires_certificate_and_assertion(self, bundle):
        with pytest.raises(ValueError):
            unbundle(bundle)
