"""
Tests for YAML configuration loading and validation.
"""

import os
import shutil
import tempfile
import unittest

import yaml

from packing.config_loader import (
    genetic_config_from_config,
    load_config,
    manifest_from_config,
    shape_from_config,
    validate_config,
)
from packing.exceptions import ConfigurationError, ConstraintError, MissingParameterError
from packing.shapes import Annulus


def _sample_config():
    return {
        "domain": {"kind": "annulus", "parameters": {"innerRadius": 2.0, "outerRadius": 6.0}},
        "manifest": [
            {"category": "tomato", "variety_id": 1, "variety_name": "San Marzano",
             "radius": 0.5, "quantity": 4},
            {"category": "basil", "variety_id": 7, "variety_name": "Genovese",
             "radius": 0.25, "quantity": 6},
        ],
        "genetic": {"population_size": 20, "generation_count": 10},
        "optimization": {"random_seed": 42, "workers": 2, "time_budget": None},
    }


class TestLoadConfig(unittest.TestCase):
    """Test reading configuration files."""

    def setUp(self):
        self.temp_dir = tempfile.mkdtemp()

    def tearDown(self):
        shutil.rmtree(self.temp_dir)

    def _write(self, name, text):
        path = os.path.join(self.temp_dir, name)
        with open(path, 'w') as f:
            f.write(text)
        return path

    def test_load_valid_file(self):
        path = self._write("config.yaml", yaml.safe_dump(_sample_config()))
        config = load_config(path)
        self.assertEqual(config["domain"]["kind"], "annulus")

    def test_missing_file(self):
        with self.assertRaises(ConfigurationError):
            load_config(os.path.join(self.temp_dir, "missing.yaml"))

    def test_invalid_yaml(self):
        path = self._write("broken.yaml", "domain: [unclosed\n")
        with self.assertRaises(ConfigurationError):
            load_config(path)

    def test_empty_file(self):
        path = self._write("empty.yaml", "")
        with self.assertRaises(ConfigurationError):
            load_config(path)


class TestBuilders(unittest.TestCase):
    """Test conversion of configuration sections."""

    def test_shape_from_config(self):
        shape = shape_from_config(_sample_config())
        self.assertEqual(shape, Annulus(2.0, 6.0))

    def test_shape_errors_pass_through(self):
        config = _sample_config()
        config["domain"]["parameters"] = {"innerRadius": 6.0, "outerRadius": 2.0}
        with self.assertRaises(ConstraintError):
            shape_from_config(config)

        config["domain"]["parameters"] = {"innerRadius": 1.0}
        with self.assertRaises(MissingParameterError):
            shape_from_config(config)

    def test_manifest_from_config(self):
        manifest = manifest_from_config(_sample_config())
        self.assertEqual(manifest.total_quantity, 10)
        self.assertEqual(manifest.max_radius, 0.5)

    def test_manifest_missing_keys(self):
        config = _sample_config()
        del config["manifest"][0]["radius"]
        with self.assertRaises(ConfigurationError):
            manifest_from_config(config)

    def test_genetic_config(self):
        ga_config = genetic_config_from_config(_sample_config())
        self.assertEqual(ga_config.population_size, 20)
        self.assertEqual(ga_config.generation_count, 10)
        self.assertEqual(ga_config.random_seed, 42)
        self.assertEqual(ga_config.workers, 2)
        self.assertIsNone(ga_config.time_budget)

    def test_auto_time_budget(self):
        config = _sample_config()
        config["optimization"]["time_budget"] = "auto"
        ga_config = genetic_config_from_config(config)
        self.assertAlmostEqual(ga_config.time_budget, 5.0 + 0.1 * 10)

    def test_invalid_genetic_options(self):
        config = _sample_config()
        config["genetic"]["elite_fraction"] = 1.5
        with self.assertRaises(ConfigurationError):
            genetic_config_from_config(config)

        config = _sample_config()
        config["genetic"]["island_count"] = 4
        with self.assertRaises(ConfigurationError):
            genetic_config_from_config(config)

    def test_negative_seed_rejected(self):
        for seed in (-5, -1, True, 1.5):
            config = _sample_config()
            config["optimization"]["random_seed"] = seed
            with self.assertRaises(ConfigurationError):
                genetic_config_from_config(config)

    def test_seed_forms(self):
        config = _sample_config()
        config["optimization"]["random_seed"] = "17"
        self.assertEqual(genetic_config_from_config(config).random_seed, 17)

        config["optimization"]["random_seed"] = 0
        self.assertEqual(genetic_config_from_config(config).random_seed, 0)

        config["optimization"]["random_seed"] = None
        self.assertIsNone(genetic_config_from_config(config).random_seed)


class TestValidateConfig(unittest.TestCase):
    """Test issue collection."""

    def test_valid_config(self):
        self.assertEqual(validate_config(_sample_config()), [])

    def test_collects_issues(self):
        config = _sample_config()
        del config["domain"]
        config["manifest"][1]["quantity"] = 0
        config["genetic"]["population_size"] = 1
        issues = validate_config(config)
        self.assertEqual(len(issues), 3)
        self.assertTrue(any("domain" in issue for issue in issues))

    def test_missing_domain_parameter(self):
        config = _sample_config()
        config["domain"] = {"kind": "frame", "parameters": {"innerWidth": 1}}
        issues = validate_config(config)
        self.assertEqual(len(issues), 3)

    def test_negative_seed_is_reported(self):
        config = _sample_config()
        config["optimization"]["random_seed"] = -5
        issues = validate_config(config)
        self.assertEqual(len(issues), 1)
        self.assertIn("random_seed", issues[0])


if __name__ == '__main__':
    unittest.main()
