"""Tests for the announcement codec."""

import json

import pytest

from conftest import persist_payload
from qaku_cache.codec import decode, decode_announcement
from qaku_cache.errors import DecodeError
from qaku_cache.models import AnnouncementKind


class TestDecode:
    """Tests for decode()."""

    def test_decode_persist_request(self):
        """Test decoding a well-formed persist announcement."""
        request = decode(persist_payload("zCID1"))

        assert request.content_id == "zCID1"
        assert request.owner == "alice"
        assert request.integrity_hash == "h1"

    def test_decode_full_envelope(self):
        """Test that signature and signer are captured."""
        announcement = decode_announcement(
            persist_payload(signature="0xsig", signer="0xabc")
        )

        assert announcement.kind is AnnouncementKind.PERSIST
        assert announcement.timestamp == 1700000000
        assert announcement.signature == "0xsig"
        assert announcement.signer == "0xabc"

    def test_decode_optional_fields_missing(self):
        """Test that only cid is required in the payload."""
        data = json.dumps({"type": "persist", "payload": {"cid": "zOnly"}}).encode()

        announcement = decode_announcement(data)
        assert announcement.request.content_id == "zOnly"
        assert announcement.request.owner == ""
        assert announcement.timestamp is None
        assert announcement.signer == ""


class TestDecodeErrors:
    """Tests for malformed announcements."""

    @pytest.mark.parametrize(
        "data",
        [
            b"not json",
            b"\xff\xfe\x00",
            b"[1, 2, 3]",
            b'"persist"',
        ],
    )
    def test_not_an_object(self, data):
        """Test that non-JSON and non-object payloads are rejected."""
        with pytest.raises(DecodeError):
            decode(data)

    def test_missing_cid(self):
        """Test that a payload without cid is rejected."""
        data = json.dumps({"type": "persist", "payload": {"owner": "alice"}}).encode()
        with pytest.raises(DecodeError, match="cid"):
            decode(data)

    def test_empty_cid(self):
        """Test that a blank cid is rejected."""
        with pytest.raises(DecodeError):
            decode(persist_payload("  "))

    def test_missing_payload(self):
        """Test that an envelope without payload is rejected."""
        with pytest.raises(DecodeError):
            decode(json.dumps({"type": "persist"}).encode())

    @pytest.mark.parametrize("kind", [None, "delete", 42])
    def test_unknown_kind(self, kind):
        """Test that missing or unknown types are rejected."""
        envelope = {"payload": {"cid": "zCID1"}}
        if kind is not None:
            envelope["type"] = kind
        with pytest.raises(DecodeError, match="type"):
            decode(json.dumps(envelope).encode())

    def test_bad_timestamp(self):
        """Test that a non-integer timestamp is rejected."""
        with pytest.raises(DecodeError, match="timestamp"):
            decode(persist_payload(timestamp="yesterday"))

    def test_non_string_owner(self):
        """Test that typed fields must be strings."""
        data = json.dumps(
            {"type": "persist", "payload": {"cid": "zCID1", "owner": 7}}
        ).encode()
        with pytest.raises(DecodeError, match="owner"):
            decode(data)


class TestContentId:
    """Tests for content identifier validation."""

    @pytest.mark.parametrize(
        "cid",
        ["zEvil?x=1#", "../../debug/info#", "a/b", "..", "z CID", "zCID%2F"],
    )
    def test_rejects_non_cid_characters(self, cid):
        """Test that cids outside the multibase alphabet are rejected."""
        with pytest.raises(DecodeError, match="invalid cid"):
            decode(persist_payload(cid))

    def test_surrounding_whitespace_is_rejected(self):
        """Test that the cid is not silently rewritten."""
        with pytest.raises(DecodeError):
            decode(persist_payload(" zCID1"))

    @pytest.mark.parametrize(
        "cid",
        ["zDvZRwzmAbCdEf123", "bafybeigdyrzt5sfp7udm7hu76uh7y26nf3efuylqabf3oclgtqy55fbzdi", "uAXASIN-_x"],
    )
    def test_accepts_multibase_cids(self, cid):
        """Test that common multibase encodings pass unchanged."""
        assert decode(persist_payload(cid)).content_id == cid
