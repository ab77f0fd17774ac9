"""Tests for the event model: ids, signatures, tags and (de)serialization."""

from __future__ import annotations

import dataclasses
import json

import pytest
from coincurve import PrivateKey

from giftwrap.core.exceptions import MalformedPlaintextError, SignatureInvalidError, SigningError
from giftwrap.crypto.random import SeededRandomSource
from giftwrap.events import event as event_module
from giftwrap.events.event import (
    Event,
    EventBuilder,
    Kind,
    Tag,
    build_signed,
    compute_id,
    serialize_for_id,
    tweaked,
)

FIXED_TIME = 1_700_000_000


def fixed_clock() -> float:
    return FIXED_TIME + 0.75


# =============================================================================
# Tags
# =============================================================================


class TestTag:
    """Tests for Tag."""

    def test_public_key_tag(self, bob):
        tag = Tag.public_key(bob.public_key)
        assert tag.to_list() == ["p", bob.public_key.to_hex()]
        assert tag.name == "p"
        assert tag.value == bob.public_key.to_hex()

    def test_of(self):
        assert Tag.of("t", "dispute", "extra").to_list() == ["t", "dispute", "extra"]

    def test_name_only(self):
        tag = Tag.of("e")
        assert tag.value is None

    def test_empty_rejected(self):
        with pytest.raises(ValueError):
            Tag(())

    def test_non_string_rejected(self):
        with pytest.raises(ValueError):
            Tag.from_list(["p", 5])  # type: ignore[list-item]


# =============================================================================
# Timestamps
# =============================================================================


class TestTweaked:
    """Tests for randomized timestamps."""

    def test_within_window(self):
        rng = SeededRandomSource(b"tweak")
        for _ in range(200):
            ts = tweaked(3600, rng, clock=fixed_clock)
            assert FIXED_TIME - 3600 < ts <= FIXED_TIME

    def test_not_constant(self):
        rng = SeededRandomSource(b"tweak")
        values = {tweaked(172800, rng, clock=fixed_clock) for _ in range(20)}
        assert len(values) > 1

    def test_window_must_be_positive(self):
        with pytest.raises(ValueError):
            tweaked(0)


# =============================================================================
# Building and verifying
# =============================================================================


class TestBuildSigned:
    """Tests for build_signed (the inner statement)."""

    def test_fields(self, alice):
        note = build_signed(alice, "hello", clock=fixed_clock)
        assert note.kind == Kind.TEXT_NOTE
        assert note.content == "hello"
        assert note.pubkey == alice.public_key
        assert note.created_at == FIXED_TIME
        assert note.tags == ()

    def test_verifies(self, alice):
        build_signed(alice, "hello").verify()

    def test_id_is_hash_of_canonical_form(self, alice):
        note = build_signed(alice, "hello", clock=fixed_clock)
        assert note.id == compute_id(alice.public_key, FIXED_TIME, Kind.TEXT_NOTE, (), "hello").hex()

    def test_canonical_form(self, alice):
        raw = serialize_for_id(alice.public_key, 5, Kind.TEXT_NOTE, [Tag.of("t", "x")], 'a "q"\n')
        expected = f'[0,"{alice.public_key.to_hex()}",5,1,[["t","x"]],"a \\"q\\"\\n"]'
        assert raw == expected.encode("utf-8")

    def test_canonical_form_keeps_unicode(self, alice):
        raw = serialize_for_id(alice.public_key, 5, Kind.TEXT_NOTE, [], "ü")
        assert "ü".encode("utf-8") in raw

    def test_signing_failure_propagates(self, alice, monkeypatch):
        monkeypatch.setattr(event_module.signing, "sign", lambda secret, digest, rng=None: bytes(64))
        with pytest.raises(SigningError):
            build_signed(alice, "hello")


class TestEventBuilder:
    """Tests for EventBuilder."""

    def test_custom_kind_tags_and_time(self, alice, bob):
        event = (
            EventBuilder(Kind.GIFT_WRAP, "payload")
            .add_tags([Tag.public_key(bob.public_key), Tag.of("t", "x")])
            .custom_created_at(42)
            .sign_with_keys(alice)
        )
        assert event.kind == Kind.GIFT_WRAP
        assert event.created_at == 42
        assert [t.name for t in event.tags] == ["p", "t"]
        assert event.public_keys() == [bob.public_key]
        event.verify()


class TestVerify:
    """Tests for Event.verify."""

    @pytest.fixture
    def note(self, alice):
        return build_signed(alice, "original")

    def test_altered_content(self, note):
        with pytest.raises(SignatureInvalidError):
            dataclasses.replace(note, content="altered").verify()

    def test_altered_timestamp(self, note):
        with pytest.raises(SignatureInvalidError):
            dataclasses.replace(note, created_at=note.created_at + 1).verify()

    def test_reassigned_author(self, note, bob):
        with pytest.raises(SignatureInvalidError):
            dataclasses.replace(note, pubkey=bob.public_key).verify()

    def test_corrupted_signature(self, note):
        sig = bytearray(bytes.fromhex(note.sig))
        sig[0] ^= 0xFF
        forged = dataclasses.replace(note, sig=sig.hex())
        assert forged.verify_id()
        with pytest.raises(SignatureInvalidError) as exc_info:
            forged.verify()
        assert exc_info.value.event_id == note.id

    def test_non_hex_signature(self, note):
        assert not dataclasses.replace(note, sig="zz").verify_signature()

    def test_consistent_forgery_by_other_key(self, note, bob):
        # Valid id for bob's pubkey, but signed with nothing bob owns
        forged_id = compute_id(bob.public_key, note.created_at, note.kind, note.tags, note.content).hex()
        forged = dataclasses.replace(note, pubkey=bob.public_key, id=forged_id)
        with pytest.raises(SignatureInvalidError):
            forged.verify()


# =============================================================================
# Serialization
# =============================================================================


class TestSerialization:
    """Tests for as_json / from_json."""

    def test_round_trip(self, alice):
        note = build_signed(alice, "round trip ✓")
        restored = Event.from_json(note.as_json())
        assert restored == note
        restored.verify()

    def test_field_order(self, alice):
        keys = list(json.loads(build_signed(alice, "x").as_json()))
        assert keys == ["id", "pubkey", "created_at", "kind", "tags", "content", "sig"]

    def test_not_json(self):
        with pytest.raises(MalformedPlaintextError):
            Event.from_json("not json")

    def test_not_an_object(self):
        with pytest.raises(MalformedPlaintextError):
            Event.from_json("[1, 2, 3]")

    @pytest.mark.parametrize("field", ["id", "pubkey", "created_at", "kind", "tags", "content", "sig"])
    def test_missing_field(self, alice, field):
        data = build_signed(alice, "x").to_dict()
        del data[field]
        with pytest.raises(MalformedPlaintextError) as exc_info:
            Event.from_dict(data)
        assert exc_info.value.field == field

    @pytest.mark.parametrize(
        "field,value",
        [
            ("created_at", "123"),
            ("created_at", True),
            ("kind", 1.5),
            ("content", 7),
            ("tags", {"p": "x"}),
            ("tags", ["p"]),
            ("tags", [[]]),
            ("tags", [["p", 3]]),
            ("pubkey", "00" * 32 + "00"),
            ("pubkey", "ff" * 32),
        ],
    )
    def test_bad_field(self, alice, field, value):
        data = build_signed(alice, "x").to_dict()
        data[field] = value
        with pytest.raises(MalformedPlaintextError):
            Event.from_dict(data)


# =============================================================================
# Text that cannot be hashed
# =============================================================================


class TestUnencodableText:
    """Lone surrogates parse from JSON but have no UTF-8 form."""

    def test_build_signed(self, alice):
        with pytest.raises(SigningError):
            build_signed(alice, "\ud800")

    def test_builder_tag(self, alice):
        with pytest.raises(SigningError):
            EventBuilder.text_note("x").add_tags([Tag.of("t", "\udfff")]).sign_with_keys(alice)

    def test_parse_content(self, alice):
        data = build_signed(alice, "x").to_dict()
        data["content"] = "\ud800"
        with pytest.raises(MalformedPlaintextError) as exc_info:
            Event.from_dict(data)
        assert exc_info.value.field == "content"

    def test_parse_escaped_content(self, alice):
        text = build_signed(alice, "x").as_json().replace('"content":"x"', '"content":"\\ud800"')
        with pytest.raises(MalformedPlaintextError):
            Event.from_json(text)

    def test_parse_tag(self, alice):
        data = build_signed(alice, "x").to_dict()
        data["tags"] = [["t", "\ud800"]]
        with pytest.raises(MalformedPlaintextError) as exc_info:
            Event.from_dict(data)
        assert exc_info.value.field == "tags"

    def test_verify_reports_invalid(self, alice):
        note = dataclasses.replace(build_signed(alice, "x"), content="\ud800")
        assert not note.verify_id()
        with pytest.raises(SignatureInvalidError):
            note.verify()


# =============================================================================
# Notes signed elsewhere
# =============================================================================


class TestForeignNotes:
    """Notes signed directly with libsecp256k1 verify like our own."""

    def test_schnorr_signed_note(self, alice):
        digest = compute_id(alice.public_key, FIXED_TIME, Kind.TEXT_NOTE, (), "signed elsewhere")
        data = {
            "id": digest.hex(),
            "pubkey": alice.public_key.to_hex(),
            "created_at": FIXED_TIME,
            "kind": 1,
            "tags": [],
            "content": "signed elsewhere",
            "sig": PrivateKey(alice.secret_key.data).sign_schnorr(digest).hex(),
        }
        Event.from_json(json.dumps(data)).verify()
