"""Tests for the break catalog."""

from __future__ import annotations

from unittest.mock import patch

from beo.interventions import INTERVENTIONS, get_intervention, get_random_intervention


class TestCatalog:
    def test_ids_unique(self) -> None:
        ids = [i.id for i in INTERVENTIONS]
        assert len(ids) == len(set(ids)) == 5

    def test_every_activity_described(self) -> None:
        assert all(i.description and i.duration_minutes > 0 for i in INTERVENTIONS)

    def test_lookup(self) -> None:
        walk = get_intervention("walk")
        assert walk is not None
        assert walk.duration_minutes == 10
        assert get_intervention("nap") is None

    def test_random_choice_from_catalog(self) -> None:
        assert get_random_intervention() in INTERVENTIONS

    def test_random_uses_uniform_choice(self) -> None:
        with patch("beo.interventions.random.choice", return_value=INTERVENTIONS[2]) as choice:
            assert get_random_intervention() is INTERVENTIONS[2]
        choice.assert_called_once_with(INTERVENTIONS)
