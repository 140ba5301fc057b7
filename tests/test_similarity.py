"""Tests for vector_store.similarity."""

import pytest

from vector_store.similarity import cosine_similarity


class TestCosineSimilarity:
    def test_self_similarity_is_one(self):
        v = [0.3, -1.2, 4.5, 0.01]
        assert cosine_similarity(v, v) == pytest.approx(1.0)

    def test_orthogonal(self):
        assert cosine_similarity([1.0, 0.0], [0.0, 1.0]) == pytest.approx(0.0)

    def test_opposite(self):
        assert cosine_similarity([1.0, 2.0], [-1.0, -2.0]) == pytest.approx(-1.0)

    def test_scale_invariant(self):
        assert cosine_similarity([1.0, 1.0], [5.0, 5.0]) == pytest.approx(1.0)

    def test_known_value(self):
        assert cosine_similarity([1.0, 0.0], [0.82, 0.5724]) == pytest.approx(0.82, abs=1e-3)

    def test_unequal_length_is_zero(self):
        assert cosine_similarity([1.0, 2.0, 3.0], [1.0, 2.0]) == 0.0

    def test_empty_is_zero(self):
        assert cosine_similarity([], []) == 0.0
        assert cosine_similarity([], [1.0]) == 0.0

    def test_zero_vector_is_zero(self):
        assert cosine_similarity([0.0, 0.0], [1.0, 1.0]) == 0.0
        assert cosine_similarity([1.0, 1.0], [0.0, 0.0]) == 0.0

    def test_returns_plain_float(self):
        assert type(cosine_similarity([1.0, 2.0], [2.0, 1.0])) is float
