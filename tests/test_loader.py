import logging
from keyload.errors import StorageError
from keyload.inserter import insert_batch
from keyload.loader import load_file, load_patterns
from keyload.storage import InMemoryStorage

# CMD Line Usage: pytest -v -s --log-cli-level=DEBUG tests/test_loader.py


class FailingStorage(InMemoryStorage):
    """Rejects the insert calls whose 1-based number is listed in fail_on."""

    def __init__(self, fail_on=(1,)):
        super().__init__()
        self.fail_on = set(fail_on)
        self.calls = []

    def insert(self, keys):
        self.calls.append(len(keys))
        if len(self.calls) in self.fail_on:
            raise StorageError("disk full")
        return super().insert(keys)


def test_valid_and_invalid_records_split(tmp_path, key_line, write_keys, caplog):
    f = write_keys(tmp_path / "mixed.keys", [
        key_line("a"), "garbage", key_line("b"), '{"owner": ""}', key_line("c"),
    ])
    storage = InMemoryStorage()

    with caplog.at_level(logging.INFO, logger="keyload"):
        result = load_file(storage, str(f))

    assert (result.loaded, result.failed) == (3, 2)
    assert result.inserted and result.error is None
    assert storage.count_keys() == 3
    assert storage.batches == 1
    assert sum("error reading key" in r.message for r in caplog.records) == 2
    assert f"loaded 3 keys from {str(f)!r}" in caplog.text


def test_empty_file_still_inserts_empty_batch(tmp_path):
    f = tmp_path / "empty.keys"
    f.write_text("")
    storage = InMemoryStorage()
    result = load_file(storage, str(f))
    assert result.inserted and result.loaded == 0
    assert storage.batches == 1


def test_open_failure_skips_decode_and_insert(tmp_path, caplog):
    storage = InMemoryStorage()
    result = load_file(storage, str(tmp_path / "gone.keys"))
    assert not result.inserted
    assert result.error
    assert storage.batches == 0
    assert "failed to open" in caplog.text


def test_insert_failure_does_not_stop_next_file(tmp_path, key_line, write_keys, caplog):
    write_keys(tmp_path / "a.keys", [key_line("a1"), key_line("a2")])
    write_keys(tmp_path / "b.keys", [key_line("b1")])
    storage = FailingStorage(fail_on=(1,))

    results = load_patterns(storage, [str(tmp_path / "a.keys"), str(tmp_path / "b.keys")])

    assert [r.inserted for r in results] == [False, True]
    assert results[0].error == "disk full"
    assert storage.count_keys() == 1
    assert "failed to insert keys from" in caplog.text


def test_insert_batch_times_the_call():
    storage = InMemoryStorage()
    result = insert_batch(storage, [], "x.keys")
    assert result.inserted
    assert result.elapsed >= 0.0


def test_unmatched_and_malformed_patterns_are_skipped(tmp_path, key_line, write_keys, caplog):
    write_keys(tmp_path / "good.keys", [key_line()])
    storage = InMemoryStorage()

    results = load_patterns(storage, [
        str(tmp_path / "nothing-*.keys"),
        str(tmp_path / "bad[.keys"),
        str(tmp_path / "*.keys"),
    ])

    assert [r.path for r in results] == [str(tmp_path / "good.keys")]
    assert "no files match" in caplog.text
    assert "failed to match" in caplog.text
    assert storage.count_keys() == 1


def test_files_processed_in_argument_order(tmp_path, key_line, write_keys):
    write_keys(tmp_path / "z.keys", [key_line()])
    write_keys(tmp_path / "sub" / "a.keys", [key_line()])
    write_keys(tmp_path / "sub" / "b.keys", [key_line()])

    results = load_patterns(InMemoryStorage(), [str(tmp_path / "z.keys"), str(tmp_path / "sub" / "*.keys")])
    assert [r.path for r in results] == [
        str(tmp_path / "z.keys"), str(tmp_path / "sub" / "a.keys"), str(tmp_path / "sub" / "b.keys"),
    ]
