"""
MessageWall Backend - Like Policy Unit Tests
==============================================

What:  Tests for the pure next-count rules (no database involved).

What we test:
    ✅ Directional: add → +1, remove / other / absent → −1
    ✅ Directional: clamped at 0, never negative over any action sequence
    ✅ Increment: always +1, action ignored, NULL treated as 0
    ✅ Policy lookup by configuration name
"""

import itertools

import pytest

from app.services.like_policy import (
    DirectionalPolicy,
    IncrementPolicy,
    get_like_policy,
)


class TestDirectionalPolicy:

    def setup_method(self):
        self.policy = DirectionalPolicy()

    def test_add_increments(self):
        assert self.policy.apply(4, "add") == 5

    def test_remove_decrements(self):
        assert self.policy.apply(4, "remove") == 3

    def test_unknown_action_decrements(self):
        """Any value other than 'add' counts as a removal."""
        assert self.policy.apply(4, "ADD") == 3
        assert self.policy.apply(4, "like") == 3

    def test_missing_action_decrements(self):
        assert self.policy.apply(4, None) == 3

    @pytest.mark.parametrize("action", [1, 0, True, {"action": "add"}, ["add"], 2.5])
    def test_non_string_action_decrements(self, action):
        assert self.policy.apply(4, action) == 3

    def test_null_count_treated_as_zero(self):
        assert self.policy.apply(None, "add") == 1
        assert self.policy.apply(None, "remove") == 0

    def test_remove_at_zero_stays_zero(self):
        assert self.policy.apply(0, "remove") == 0

    def test_never_negative_for_any_sequence(self):
        for actions in itertools.product(["add", "remove"], repeat=6):
            likes = 0
            for action in actions:
                likes = self.policy.apply(likes, action)
                assert likes >= 0

    def test_responds_with_count(self):
        assert self.policy.returns_record is False


class TestIncrementPolicy:

    def setup_method(self):
        self.policy = IncrementPolicy()

    def test_increments(self):
        assert self.policy.apply(7) == 8

    def test_ignores_action(self):
        assert self.policy.apply(7, "remove") == 8

    def test_null_count_becomes_one(self):
        assert self.policy.apply(None) == 1

    def test_repeated_calls_accumulate(self):
        likes = 0
        for _ in range(5):
            likes = self.policy.apply(likes)
        assert likes == 5

    def test_responds_with_record(self):
        assert self.policy.returns_record is True


class TestGetLikePolicy:

    def test_known_names(self):
        assert isinstance(get_like_policy("directional"), DirectionalPolicy)
        assert isinstance(get_like_policy("increment"), IncrementPolicy)

    def test_unknown_name_rejected(self):
        with pytest.raises(ValueError, match="Unknown like policy"):
            get_like_policy("toggle")
