# tests/test_sequence.py
import threading

import pytest

from pico_factory import DuplicateDefinitionError, Sequence, SequenceNotFoundError, SequenceRegistry


class TestSequence:
    def test_starts_at_one_by_default(self):
        seq = Sequence()
        assert [seq.next(), seq.next(), seq.next()] == [1, 2, 3]

    def test_custom_start(self):
        seq = Sequence(5)
        assert [seq.next(), seq.next(), seq.next()] == [5, 6, 7]

    def test_generator_formats_each_number(self):
        seq = Sequence(generator=lambda n: f"person{n}@example.com")
        assert seq.next() == "person1@example.com"
        assert seq.next() == "person2@example.com"

    def test_peek_does_not_advance(self):
        seq = Sequence(3)
        assert seq.peek() == 3
        assert seq.peek() == 3
        assert seq.next() == 3
        assert seq.peek() == 4

    def test_rewind_restarts_from_start(self):
        seq = Sequence(10)
        seq.next()
        seq.next()
        seq.rewind()
        assert seq.next() == 10

    def test_rejects_non_callable_generator(self):
        with pytest.raises(TypeError, match="callable"):
            Sequence(1, "not callable")

    def test_generator_failure_still_consumes_the_number(self):
        def gen(n):
            if n == 1:
                raise RuntimeError("bad")
            return n

        seq = Sequence(generator=gen)
        with pytest.raises(RuntimeError):
            seq.next()
        assert seq.next() == 2

    def test_concurrent_next_never_repeats(self):
        seq = Sequence()
        results: list[int] = []
        lock = threading.Lock()

        def worker():
            local = [seq.next() for _ in range(200)]
            with lock:
                results.extend(local)

        threads = [threading.Thread(target=worker) for _ in range(8)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        assert len(results) == 1600
        assert sorted(results) == list(range(1, 1601))


class TestSequenceRegistry:
    def test_register_and_next(self, sequences):
        sequences.register("email", generator=lambda n: f"person{n}@example.com")
        assert sequences.next("email") == "person1@example.com"
        assert sequences.next("email") == "person2@example.com"

    def test_lookup_returns_none_for_unknown(self, sequences):
        assert sequences.lookup("nope") is None

    def test_get_raises_for_unknown(self, sequences):
        with pytest.raises(SequenceNotFoundError, match="No such sequence: nope") as exc:
            sequences.get("nope")
        assert exc.value.name == "nope"

    def test_duplicate_registration_is_rejected(self, sequences):
        original = sequences.register("email")
        with pytest.raises(DuplicateDefinitionError, match="Sequence already defined: email"):
            sequences.register("email", 100)
        assert sequences.get("email") is original

    def test_default_start_applies_when_start_omitted(self):
        reg = SequenceRegistry(default_start=0)
        reg.register("n")
        reg.register("m", 7)
        assert reg.next("n") == 0
        assert reg.next("m") == 7
        assert reg.default_start == 0

    def test_container_protocol(self, sequences):
        sequences.register("a")
        sequences.register("b")
        assert "a" in sequences
        assert "c" not in sequences
        assert len(sequences) == 2
        assert list(sequences) == ["a", "b"]
        assert sequences.names() == ("a", "b")

    def test_rewind_all(self, sequences):
        sequences.register("a")
        sequences.register("b", 10)
        sequences.next("a")
        sequences.next("b")
        sequences.rewind()
        assert sequences.next("a") == 1
        assert sequences.next("b") == 10

    def test_clear_drops_everything(self, sequences):
        sequences.register("a")
        sequences.clear()
        assert len(sequences) == 0
        assert sequences.lookup("a") is None
        sequences.register("a")
