"""Smoke tests for the jarofuzz Python API surface."""

from __future__ import annotations

import pytest

import jarofuzz
import jarofuzz.utils as utils
from jarofuzz.distance import Jaro


# ---------------------------------------------------------------------------
# Meta
# ---------------------------------------------------------------------------
def test_version() -> None:
    assert isinstance(jarofuzz.__version__, str)
    assert jarofuzz.__version__ != ""


def test_reexports() -> None:
    assert jarofuzz.CachedJaro is Jaro.CachedJaro
    assert jarofuzz.MultiJaro is Jaro.MultiJaro


# ---------------------------------------------------------------------------
# Jaro
# ---------------------------------------------------------------------------
class TestJaro:
    def test_martha(self) -> None:
        assert Jaro.similarity("MARTHA", "MARHTA") == pytest.approx(0.9444444444)

    def test_dixon(self) -> None:
        assert Jaro.similarity("DIXON", "DICKSONX") == pytest.approx(0.7667, abs=1e-3)

    def test_empty(self) -> None:
        assert Jaro.similarity("", "") == 1.0
        assert Jaro.similarity("A", "") == 0.0
        assert Jaro.distance("A", "") == 1.0

    def test_identical(self) -> None:
        assert Jaro.similarity("ABC", "ABC") == 1.0
        assert Jaro.normalized_distance("ABC", "ABC") == 0.0

    def test_score_cutoff(self) -> None:
        assert Jaro.similarity("AB", "BA", score_cutoff=0.9) == 0.0
        assert Jaro.similarity("MARTHA", "MARHTA", score_cutoff=0.9) == pytest.approx(
            0.9444444444
        )
        assert Jaro.similarity("MARTHA", "MARHTA", score_cutoff=0.95) == 0.0

    def test_distance(self) -> None:
        assert Jaro.distance("MARTHA", "MARHTA") == pytest.approx(1 - 0.9444444444)
        assert Jaro.distance("MARTHA", "MARHTA", score_cutoff=0.01) == 1.0
        assert Jaro.normalized_distance("MARTHA", "MARHTA", score_cutoff=0.1) == pytest.approx(
            1 - 0.9444444444
        )

    def test_none_returns_zero(self) -> None:
        assert Jaro.similarity(None, "foo") == 0.0
        assert Jaro.similarity("foo", None) == 0.0
        assert Jaro.distance(None, "foo") == 1.0

    def test_processor(self) -> None:
        assert Jaro.similarity("MARTHA", "martha", processor=str.lower) == 1.0
        assert (
            Jaro.similarity("Hello World!", "hello world", processor=utils.default_process)
            == 1.0
        )

    def test_generic_sequences(self) -> None:
        assert Jaro.similarity(["M", "A", "R"], "MAR") == 1.0
        assert Jaro.similarity(iter([1, 2, 3]), [1, 2, 3]) == 1.0
        assert Jaro.similarity(("ab", "cd"), ("cd", "ab")) == 0.0

    def test_unhashable_symbols(self) -> None:
        with pytest.raises(TypeError):
            Jaro.similarity([[1], [2], [3]], [[1], [3], [2]])

    def test_long_sequences(self) -> None:
        s1 = "the quick brown fox jumps over the lazy dog " * 4
        s2 = "the quick brown fox jumped over a lazy dog " * 4
        score = Jaro.similarity(s1, s2)
        assert 0.5 < score < 1.0
        assert score == Jaro.similarity(s2, s1)


class TestCachedJaro:
    def test_reuses_pattern(self) -> None:
        scorer = Jaro.CachedJaro("MARTHA")
        assert scorer.similarity("MARHTA") == pytest.approx(0.9444444444)
        assert scorer.similarity("MARTHA") == 1.0
        assert scorer.similarity("") == 0.0
        assert scorer.normalized_similarity("XYZ") == 0.0

    def test_distance(self) -> None:
        scorer = Jaro.CachedJaro("MARTHA")
        assert scorer.distance("MARHTA") == pytest.approx(1 - 0.9444444444)
        assert scorer.normalized_distance("MARHTA", score_cutoff=0.01) == 1.0
        assert scorer.distance(None) == 1.0

    def test_processor(self) -> None:
        scorer = Jaro.CachedJaro("MARTHA", processor=str.lower)
        assert scorer.similarity("Martha") == 1.0
        assert scorer.similarity(None) == 0.0


# ---------------------------------------------------------------------------
# utils
# ---------------------------------------------------------------------------
class TestUtils:
    def test_default_process_basic(self) -> None:
        result = utils.default_process("Hello, World!")
        assert result == "hello  world"

    def test_default_process_lowercase(self) -> None:
        assert utils.default_process("ABC") == "abc"

    def test_default_process_none(self) -> None:
        result = utils.default_process(None)  # type: ignore[arg-type]
        assert result == ""
