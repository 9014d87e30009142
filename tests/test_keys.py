import io
import json
from keyload.crypto import ed25519_generate, ed25519_public_pem, compute_pubkey_fingerprint
from keyload.keys import read_keys
from keyload.utils import b64e


def _stream(*lines):
    return io.BytesIO(("\n".join(lines) + "\n").encode("utf-8"))


def test_valid_records_decode(key_line):
    results = list(read_keys(_stream(key_line("alice"), key_line("bob", status="pending"))))
    assert [r.ok for r in results] == [True, True]
    assert [r.record.owner for r in results] == ["alice", "bob"]
    assert results[1].record.status == "pending"
    assert results[0].record.fingerprint == compute_pubkey_fingerprint(results[0].record.pubkey_b64)


def test_pem_record_normalized_to_raw():
    _, pub = ed25519_generate()
    line = json.dumps({"owner": "carol", "pubkey_pem": ed25519_public_pem(pub)})
    (result,) = read_keys(_stream(line))
    assert result.ok
    assert result.record.pubkey_b64 == b64e(pub)


def test_failures_do_not_end_the_stream(key_line):
    lines = [
        key_line("a"),
        "{not json",
        json.dumps({"pubkey_b64": "AAAA"}),
        key_line("b", status="lost"),
        key_line("c", fingerprint="0" * 32),
        json.dumps(["a", "list"]),
        key_line("d"),
    ]
    results = list(read_keys(_stream(*lines)))
    assert len(results) == 7
    assert [r.record.owner for r in results if r.ok] == ["a", "d"]

    errors = [str(r.error) for r in results if not r.ok]
    assert errors[0].startswith("line 2: invalid JSON")
    assert "missing owner" in errors[1]
    assert "unknown status" in errors[2]
    assert "fingerprint mismatch" in errors[3]
    assert "expected a JSON object" in errors[4]


def test_blank_and_comment_lines_skipped(key_line):
    results = list(read_keys(_stream("# exported keyring", "", key_line(), "   ")))
    assert len(results) == 1
    assert results[0].line == 3


def test_invalid_utf8_is_a_record_failure(key_line):
    fp = io.BytesIO(b"\xff\xfe\n" + key_line().encode("utf-8") + b"\n")
    results = list(read_keys(fp))
    assert not results[0].ok and "not UTF-8" in str(results[0].error)
    assert results[1].ok


def test_stream_is_lazy_and_single_pass(key_line):
    fp = _stream(key_line("a"), key_line("b"))
    it = read_keys(fp)
    first = next(it)
    assert first.record.owner == "a"
    assert fp.tell() < len(fp.getvalue())
    assert [r.record.owner for r in it] == ["b"]
    assert list(it) == []


def test_byte_order_mark_before_first_record(key_line):
    data = b"\xef\xbb\xbf" + (key_line("a") + "\n" + key_line("b") + "\n").encode("utf-8")
    results = list(read_keys(io.BytesIO(data)))
    assert [r.ok for r in results] == [True, True]
    assert [r.record.owner for r in results] == ["a", "b"]


def test_byte_order_mark_after_first_line_is_rejected(key_line):
    data = (key_line("a") + "\n").encode("utf-8") + b"\xef\xbb\xbf" + (key_line("b") + "\n").encode("utf-8")
    results = list(read_keys(io.BytesIO(data)))
    assert [r.ok for r in results] == [True, False]
    assert "line 2" in str(results[1].error)
