"""Unit tests for ProfileNormalizer."""

from dataclasses import dataclass, field
from typing import Any, Dict

import pytest

from oauthbridge.domains.oauth.profile import ProfileNormalizer
from oauthbridge.domains.oauth.types import TokenPair

ACCESS = TokenPair(token="access-token", token_secret="access-secret")

TWITTER_PAYLOAD = {
    "id": 12345,
    "id_str": "12345",
    "name": "Alice Example",
    "screen_name": "alice",
    "location": "Amsterdam",
    "description": "Writes code",
    "profile_image_url": "http://pbs.twimg.com/profile_images/1/a_normal.png",
    "url": "https://alice.example.com",
    "followers_count": 10,
}


def _normalizer() -> ProfileNormalizer:
    return ProfileNormalizer(
        profile_url_template="https://twitter.com/{nickname}", profile_url_key="twitter"
    )


def test_full_twitter_payload():
    profile = _normalizer().normalize(TWITTER_PAYLOAD, ACCESS, provider="twitter")

    assert profile.provider == "twitter"
    assert profile.uid == "12345"
    assert profile.info.name == "Alice Example"
    assert profile.info.nickname == "alice"
    assert profile.info.location == "Amsterdam"
    assert profile.info.description == "Writes code"
    assert profile.info.image == "http://pbs.twimg.com/profile_images/1/a_normal.png"
    assert profile.info.urls == {
        "website": "https://alice.example.com",
        "twitter": "https://twitter.com/alice",
    }
    assert profile.credentials.token == "access-token"
    assert profile.credentials.secret == "access-secret"
    assert profile.raw == TWITTER_PAYLOAD


# ===========================================================================
# Absent fields (table-driven)
# ===========================================================================


@dataclass
class InfoCase:
    desc: str
    raw: Dict[str, Any]
    expected_info: Dict[str, Any]
    absent: list = field(default_factory=list)


INFO_CASES = [
    InfoCase(
        "only id and screen name",
        {"id": "1", "screen_name": "bob"},
        {"nickname": "bob", "urls": {"twitter": "https://twitter.com/bob"}},
        ["name", "location", "description", "image"],
    ),
    InfoCase(
        "null values are omitted",
        {"id": "1", "screen_name": "bob", "location": None, "url": None},
        {"nickname": "bob", "urls": {"twitter": "https://twitter.com/bob"}},
        ["location"],
    ),
    InfoCase(
        "no screen name means no profile url",
        {"id": "1", "name": "Bob", "url": "https://bob.example"},
        {"name": "Bob", "urls": {"website": "https://bob.example"}},
        ["nickname"],
    ),
    InfoCase(
        "empty string is kept",
        {"id": "1", "description": ""},
        {"description": "", "urls": {}},
        ["name"],
    ),
]


@pytest.mark.parametrize("case", INFO_CASES, ids=lambda c: c.desc)
def test_build_info(case: InfoCase):
    info = _normalizer().build_info(case.raw)
    dumped = info.as_dict()

    assert dumped == case.expected_info
    for name in case.absent:
        assert name not in dumped


# ===========================================================================
# uid extraction (table-driven)
# ===========================================================================


@dataclass
class UidCase:
    desc: str
    raw: Dict[str, Any]
    expected: Any


UID_CASES = [
    UidCase("string id", {"id": "42"}, "42"),
    UidCase("numeric id becomes string", {"id": 42}, "42"),
    UidCase("missing id", {"screen_name": "x"}, None),
    UidCase("null id", {"id": None}, None),
    UidCase("empty id", {"id": ""}, None),
]


@pytest.mark.parametrize("case", UID_CASES, ids=lambda c: c.desc)
def test_extract_uid(case: UidCase):
    assert _normalizer().extract_uid(case.raw) == case.expected


def test_normalize_without_uid_raises():
    with pytest.raises(ValueError):
        _normalizer().normalize({"screen_name": "x"}, ACCESS, provider="twitter")


def test_custom_field_map():
    normalizer = ProfileNormalizer({"uid": "user_id", "info.nickname": "login"})
    profile = normalizer.normalize(
        {"user_id": 7, "login": "carol", "name": "ignored"}, ACCESS, provider="other"
    )

    assert profile.uid == "7"
    assert profile.info.as_dict() == {"nickname": "carol", "urls": {}}


def test_as_dict_omits_absent_info_fields():
    profile = _normalizer().normalize({"id": "1"}, ACCESS, provider="twitter")
    assert profile.as_dict()["info"] == {"urls": {}}


@pytest.mark.parametrize(
    "template",
    ["https://twitter.com/{nickname}", "https://twitter.com/{screen_name}"],
)
def test_profile_url_template_placeholders(template):
    normalizer = ProfileNormalizer(profile_url_template=template, profile_url_key="twitter")
    info = normalizer.build_info({"id": 1, "screen_name": "alice"})
    assert info.urls == {"twitter": "https://twitter.com/alice"}
