import pytest

from errtrail.domain.models import TrailPayload
from errtrail.infrastructure.codec import decode, encode


def test_encode_is_compact() -> None:
    payload = TrailPayload(code="c", trail=(("s", 1, "x"),))
    assert encode(payload) == '["c",["s",1,"x"]]'


def test_encode_keeps_unicode_by_default() -> None:
    payload = TrailPayload(code="ошибка", trail=(("s",),))
    assert encode(payload) == '["ошибка",["s"]]'


def test_encode_can_escape_unicode(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("ERRTRAIL_ENSURE_ASCII", "true")
    payload = TrailPayload(code="é", trail=(("s",),))
    assert encode(payload) == '["\\u00e9",["s"]]'


def test_encode_falls_back_to_plain_dump(
    monkeypatch: pytest.MonkeyPatch, errtrail_logs: pytest.LogCaptureFixture
) -> None:
    def boom(*args: object, **kwargs: object) -> str:
        raise TypeError("cannot encode")

    monkeypatch.setattr("errtrail.infrastructure.codec.json.dumps", boom)
    payload = TrailPayload(code="c", trail=(("s",),))
    assert encode(payload) == "c (('s',),)"
    assert "cannot encode" in errtrail_logs.text


def test_decode_sequence_form() -> None:
    payload = decode('["c",["s","ctx"],["t",1.5,[1,2]]]')
    assert payload == TrailPayload(code="c", trail=(("s", "ctx"), ("t", 1.5, (1, 2))))


def test_decode_lowercase_object_form() -> None:
    payload = decode('{"code": "c", "trail": [["s"]]}')
    assert payload is not None
    assert payload.code == "c"
    assert payload.trail == (("s",),)


@pytest.mark.parametrize("text", ["plain", "", "[", '["c"]', '"c"', "{}"])
def test_decode_rejects(text: str) -> None:
    assert decode(text) is None


def test_decode_logs_rejections(errtrail_logs: pytest.LogCaptureFixture) -> None:
    assert decode("[nope") is None
    assert "not a serialized error" in errtrail_logs.text
