"""Tests for ColonyConfig."""

import pytest

from apiary.core.config import ColonyConfig


class TestConfigDefaults:
    def test_default_experiment_name(self):
        assert ColonyConfig().experiment_name == "default"

    def test_default_expansion_settings(self):
        c = ColonyConfig()
        assert c.flowers_needed_for_expansion == 3
        assert c.new_flowers_to_spawn == 3
        assert c.expansion_distance == 2

    def test_default_prices_and_marks(self):
        c = ColonyConfig()
        assert c.worker_cost == 30
        assert c.connector_cost == 10
        assert c.wax_low_water == 50
        assert c.nectar_low_water == 30

    def test_default_rates(self):
        assert ColonyConfig().generation_rates == {"hive": 1.0, "flower": 0.5}

    def test_rates_not_shared(self):
        c1 = ColonyConfig()
        c2 = ColonyConfig()
        c1.generation_rates["hive"] = 9.0
        assert c2.generation_rates["hive"] == 1.0


class TestSerialization:
    def test_to_dict_roundtrip(self):
        c = ColonyConfig(experiment_name="test", grid_radius=6)
        c2 = ColonyConfig.from_dict(c.to_dict())
        assert c2.experiment_name == "test"
        assert c2.grid_radius == 6

    def test_to_dict_copies_rates(self):
        c = ColonyConfig()
        d = c.to_dict()
        d["generation_rates"]["flower"] = 5.0
        assert c.generation_rates["flower"] == 0.5

    def test_to_json_roundtrip(self):
        c = ColonyConfig(experiment_name="json_test", random_seed=7)
        c2 = ColonyConfig.from_json(c.to_json())
        assert c2.experiment_name == "json_test"
        assert c2.random_seed == 7
        assert c2.generation_rates == c.generation_rates

    def test_diff(self):
        c1 = ColonyConfig(experiment_name="a", worker_cost=30)
        c2 = ColonyConfig(experiment_name="b", worker_cost=20)
        diffs = c1.diff(c2)
        assert diffs["worker_cost"] == (30, 20)
        assert "experiment_name" in diffs
        assert "grid_radius" not in diffs

    def test_unknown_key_rejected(self):
        with pytest.raises(TypeError):
            ColonyConfig.from_dict({"initial_population": 50})

    @pytest.mark.parametrize("rates", [{"hive": 1.0}, {"flower": 0.5}, {}])
    def test_missing_generation_rate_rejected(self, rates):
        with pytest.raises(ValueError):
            ColonyConfig.from_dict({"generation_rates": rates})
