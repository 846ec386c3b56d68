from __future__ import annotations

import json

import pytest

from nicoapi.adapters.cookie_loader import CookieFileSource, StaticCredentialSource, load_credential
from nicoapi.core.domain.models import Cookie, Credential
from nicoapi.core.errors import ValidationError

EXPORT = [
    {
        "domain": ".nicovideo.jp",
        "hostOnly": False,
        "httpOnly": True,
        "name": "user_session",
        "path": "/",
        "sameSite": "lax",
        "secure": True,
        "value": "user_session_1_abc",
    },
    {"domain": "nicovideo.jp", "name": "nicosid", "value": "17000"},
    {"domain": ".google.com", "name": "NID", "value": "tracking"},
]


def write(tmp_path, payload) -> object:
    path = tmp_path / "cookies.json"
    path.write_text(payload if isinstance(payload, str) else json.dumps(payload), encoding="utf-8")
    return path


def test_bare_list_is_filtered_to_niconico(tmp_path):
    credential = load_credential(write(tmp_path, EXPORT))

    assert [cookie.name for cookie in credential.cookies] == ["user_session", "nicosid"]
    assert credential.cookies[0].http_only is True
    assert credential.user_id is None


def test_object_form_carries_user_id(tmp_path):
    credential = load_credential(write(tmp_path, {"userId": "12345", "cookies": EXPORT}))

    assert credential.user_id == "12345"


def test_explicit_user_id_wins(tmp_path):
    credential = load_credential(write(tmp_path, {"userId": "12345", "cookies": EXPORT}), user_id="999")

    assert credential.user_id == "999"


def test_domain_filter_can_be_disabled(tmp_path):
    credential = load_credential(write(tmp_path, EXPORT), domain_suffix=None)

    assert len(credential.cookies) == 3


@pytest.mark.parametrize("payload", ["not json", "42", json.dumps([{"value": "missing name"}])])
def test_bad_files_raise_validation_error(tmp_path, payload):
    with pytest.raises(ValidationError):
        load_credential(write(tmp_path, payload))


def test_missing_file_raises_validation_error(tmp_path):
    with pytest.raises(ValidationError, match="cannot read"):
        load_credential(tmp_path / "nope.json")


async def test_file_source_rereads_the_file(tmp_path):
    path = write(tmp_path, [{"name": "user_session", "value": "old"}])
    source = CookieFileSource(path)

    first = await source.load()
    path.write_text(json.dumps([{"name": "user_session", "value": "new"}]), encoding="utf-8")
    second = await source.load()

    assert first.cookies[0].value == "old"
    assert second.cookies[0].value == "new"


async def test_static_source_returns_its_credential():
    credential = Credential(cookies=(Cookie(name="a", value="b"),))

    assert await StaticCredentialSource(credential).load() is credential
