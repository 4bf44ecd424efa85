"""
Configuration Loading System

Loads YAML configuration files and converts them to the domain shape,
item manifest and GA configuration used by the packing engine.
"""

import time
from typing import Any, Dict, List, Optional

import yaml

from ga_engine.data_models import GAConfig
from ga_engine.orchestration import default_time_budget

from .exceptions import ConfigurationError, ConstraintError, MissingParameterError
from .manifest import Manifest, ManifestEntry
from .shapes import Shape, ShapeKind, build_shape

GENETIC_KEYS = (
    "population_size",
    "generation_count",
    "mutation_probability",
    "initial_mutation_strength",
    "crossover_probability",
    "tournament_size",
    "elite_fraction",
    "max_retry_attempts",
    "max_sampling_attempts",
)

MANIFEST_KEYS = ("category", "variety_id", "variety_name", "radius", "quantity")


def load_config(config_path: str = "config.yaml") -> Dict[str, Any]:
    """Load configuration from YAML file"""
    try:
        with open(config_path, 'r') as f:
            config = yaml.safe_load(f)
    except FileNotFoundError:
        raise ConfigurationError(f"Configuration file not found: {config_path}")
    except yaml.YAMLError as e:
        raise ConfigurationError(f"Invalid YAML in configuration file: {e}")

    if config is None:
        raise ConfigurationError(f"Configuration file is empty: {config_path}")
    if not isinstance(config, dict):
        raise ConfigurationError(f"Configuration root must be a mapping: {config_path}")
    return config


def shape_from_config(config: Dict[str, Any]) -> Shape:
    """
    Build the domain shape from the 'domain' section

    Raises:
        ConfigurationError: If the section is missing or malformed
        MissingParameterError, ConstraintError: From shape validation
    """
    domain_config = config.get("domain")
    if not isinstance(domain_config, dict):
        raise ConfigurationError("Missing required section: domain")
    if "kind" not in domain_config:
        raise ConfigurationError("Domain section must define 'kind'")

    parameters = domain_config.get("parameters") or {}
    if not isinstance(parameters, dict):
        raise ConfigurationError("Domain 'parameters' must be a mapping")
    return build_shape(domain_config["kind"], parameters)


def manifest_from_config(config: Dict[str, Any]) -> Manifest:
    """Build the item manifest from the 'manifest' list"""
    manifest_config = config.get("manifest")
    if not isinstance(manifest_config, list):
        raise ConfigurationError("Missing required section: manifest (expected a list of items)")

    entries = []
    for position, item in enumerate(manifest_config):
        if not isinstance(item, dict):
            raise ConfigurationError(f"Manifest item {position} must be a mapping")
        missing = [key for key in MANIFEST_KEYS if key not in item]
        if missing:
            raise ConfigurationError(f"Manifest item {position} is missing: {', '.join(missing)}")

        entries.append(ManifestEntry(
            category=str(item["category"]),
            variety_id=item["variety_id"],
            variety_name=str(item["variety_name"]),
            radius=item["radius"],
            quantity=item["quantity"],
        ))
    return Manifest(entries)


def _resolve_seed(random_seed: Any) -> Optional[int]:
    # "random" draws a fresh seed and prints it so the run can be reproduced
    if random_seed == "random":
        random_seed = int(time.time() * 1000000) % 2147483647
        print(f"Using random seed: {random_seed}")
        return random_seed
    if random_seed is None:
        return None
    if isinstance(random_seed, str) and random_seed.isdigit():
        return int(random_seed)
    if isinstance(random_seed, int) and not isinstance(random_seed, bool) and random_seed >= 0:
        return random_seed
    raise ConfigurationError(f"random_seed must be a non-negative integer, null or 'random', got: {random_seed!r}")


def genetic_config_from_config(config: Dict[str, Any], total_genes: Optional[int] = None) -> GAConfig:
    """
    Build a GAConfig from the 'genetic' and 'optimization' sections

    Args:
        config: Loaded configuration
        total_genes: Genes per candidate, needed for time_budget "auto"
            (derived from the manifest if omitted)

    Returns:
        Validated GAConfig
    """
    genetic_config = config.get("genetic") or {}
    optimization_config = config.get("optimization") or {}

    unknown = sorted(set(genetic_config) - set(GENETIC_KEYS))
    if unknown:
        raise ConfigurationError(f"Unknown genetic options: {', '.join(unknown)}")

    time_budget = optimization_config.get("time_budget")
    if time_budget == "auto":
        if total_genes is None:
            total_genes = manifest_from_config(config).total_quantity
        time_budget = default_time_budget(total_genes)

    ga_config = GAConfig(
        **genetic_config,
        random_seed=_resolve_seed(optimization_config.get("random_seed")),
        workers=optimization_config.get("workers"),
        time_budget=time_budget,
    )
    ga_config.validate()
    return ga_config


def get_logging_config(config: Dict[str, Any]) -> Dict[str, Any]:
    """Get logging configuration with defaults filled in"""
    logging_config = config.get("logging") or {}
    return {
        "level": logging_config.get("level", "INFO"),
        "file": logging_config.get("file"),
    }


def validate_config(config: Dict[str, Any]) -> List[str]:
    """
    Validate configuration and return list of issues

    Returns:
        List of validation error messages (empty if valid)
    """
    issues = []

    # Check required sections
    for section in ("domain", "manifest"):
        if section not in config:
            issues.append(f"Missing required section: {section}")

    if "domain" in config:
        domain_config = config["domain"] if isinstance(config["domain"], dict) else {}
        try:
            kind = ShapeKind.parse(domain_config.get("kind"))
        except ConstraintError as e:
            issues.append(f"Domain: {e}")
        else:
            parameters = domain_config.get("parameters") if isinstance(domain_config.get("parameters"), dict) else {}
            missing = [key for key in kind.required_parameters if parameters.get(key) is None]
            for key in missing:
                issues.append(f"Domain {kind.value} is missing parameter: {key}")
            if not missing:
                try:
                    shape_from_config(config)
                except (ConstraintError, MissingParameterError, ConfigurationError) as e:
                    issues.append(f"Domain: {e}")

    if "manifest" in config:
        manifest_config = config["manifest"]
        if not manifest_config:
            issues.append("No manifest items defined")
        elif not isinstance(manifest_config, list):
            issues.append("Manifest must be a list of items")
        else:
            for position, item in enumerate(manifest_config):
                label = item.get("variety_name", position) if isinstance(item, dict) else position
                try:
                    manifest_from_config({"manifest": [item]})
                except (ConstraintError, ConfigurationError) as e:
                    issues.append(f"Manifest item {label}: {e}")

    genetic_config = config.get("genetic") or {}
    unknown = sorted(set(genetic_config) - set(GENETIC_KEYS))
    if unknown:
        issues.append(f"Unknown genetic options: {', '.join(unknown)}")

    optimization_config = config.get("optimization") or {}
    random_seed = optimization_config.get("random_seed")
    if random_seed != "random":
        try:
            _resolve_seed(random_seed)
        except ConfigurationError as e:
            issues.append(str(e))

    time_budget = optimization_config.get("time_budget")
    if time_budget == "auto":
        time_budget = None
    if not unknown:
        try:
            GAConfig(
                **genetic_config,
                workers=optimization_config.get("workers"),
                time_budget=time_budget,
            ).validate()
        except ConfigurationError as e:
            issues.append(f"Genetic options: {e}")

    return issues


def print_config_summary(config_path: str = "config.yaml"):
    """Print a summary of the configuration"""
    try:
        config = load_config(config_path)

        print("=" * 50)
        print("CONFIGURATION SUMMARY")
        print("=" * 50)

        # Domain info
        domain_config = config.get("domain") or {}
        print(f"Domain: {domain_config.get('kind', 'N/A')}")
        for key, value in (domain_config.get("parameters") or {}).items():
            print(f"  {key}: {value}")

        # Manifest info
        manifest_config = config.get("manifest") or []
        total = sum(item.get("quantity", 0) for item in manifest_config if isinstance(item, dict))
        print(f"\nManifest ({len(manifest_config)} varieties, {total} items):")
        for item in manifest_config:
            if isinstance(item, dict):
                print(f"  {item.get('category', '?')}/{item.get('variety_name', '?')}: "
                      f"{item.get('quantity', 0)} items, radius={item.get('radius', 'N/A')}")

        # Genetic info
        genetic_config = config.get("genetic") or {}
        print(f"\nPopulation: {genetic_config.get('population_size', GAConfig.population_size)}")
        print(f"Generations: {genetic_config.get('generation_count', GAConfig.generation_count)}")
        optimization_config = config.get("optimization") or {}
        print(f"Random seed: {optimization_config.get('random_seed', 'None')}")
        print(f"Workers: {optimization_config.get('workers', 'Auto')}")

        # Validation
        issues = validate_config(config)
        if issues:
            print(f"\nValidation Issues ({len(issues)}):")
            for issue in issues:
                print(f"  - {issue}")
        else:
            print("\nConfiguration is valid ✓")

        print("=" * 50)

    except ConfigurationError as e:
        print(f"Configuration Error: {e}")
