import base64

import pytest

from drop_series_plotter.data.loaders import decode_text_bytes, decode_upload_contents, load_text_file, pair_uploads


def _payload(raw: bytes) -> str:
    return "data:text/plain;base64," + base64.b64encode(raw).decode("ascii")


def test_decode_upload_contents():
    assert decode_upload_contents(_payload(b"1 2\n3 4\n")) == "1 2\n3 4\n"


def test_bom_is_stripped():
    assert decode_text_bytes("\ufeff1,2".encode("utf-8")) == "1,2"


def test_legacy_encoding_fallback():
    assert decode_text_bytes(b"1 2 \xb5m") == "1 2 \u00b5m"


@pytest.mark.parametrize("contents", [None, "", "no-comma-here"])
def test_bad_upload_payloads(contents):
    with pytest.raises(ValueError):
        decode_upload_contents(contents)


def test_pair_uploads_multi_and_single():
    files = pair_uploads([_payload(b"1"), _payload(b"2")], ["a.txt", "b.txt"])
    assert files == [("a.txt", _payload(b"1")), ("b.txt", _payload(b"2"))]

    assert pair_uploads(_payload(b"3"), "c.txt") == [("c.txt", _payload(b"3"))]
    assert pair_uploads(_payload(b"4"), None) == [("Dataset 1", _payload(b"4"))]
    assert pair_uploads(None, None) == []


def test_pair_uploads_leaves_broken_payloads_encoded():
    assert pair_uploads(["broken", _payload(b"5")], ["bad.txt", "ok.txt"]) == [
        ("bad.txt", "broken"),
        ("ok.txt", _payload(b"5")),
    ]


def test_load_text_file(tmp_path):
    path = tmp_path / "trace.dat"
    path.write_bytes(b"0 1\n1 2\n")

    name, text = load_text_file(str(path))

    assert name == "trace.dat"
    assert text == "0 1\n1 2\n"
