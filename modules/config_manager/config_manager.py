import json
import os
import hashlib
import sys
import logging
import dataclasses
import typing
import jsonschema
import psutil
from datetime import datetime
from enum import Enum
from pathlib import Path
from typing import Dict, Any, Optional

from modules.algorithm_catalog import Algorithm, AlgorithmCatalog, Distance, Kernel, TaskKind
from modules.config_manager.settings import Settings
from modules.evaluation_engine import Metric, check_metric_task
from utils.exceptions import ConfigurationError
from utils import constants

PROFILES = {
    'regression': Settings.default_regression,
    'classification': Settings.default_classification,
    'empty': Settings,
}

_ENUM_FIELDS = {'distance': Distance, 'kernel': Kernel}


class ConfigurationManager:
    """
    Manages system configuration loading, validation, and access.
    Turns a JSON configuration file into a validated `Settings` value.
    """

    def __init__(self, config_path: str = "config/config.json",
                 schema_path: str = "config/schema.json"):
        """
        Initialize the ConfigurationManager.

        Args:
            config_path (str): Path to the user configuration JSON.
            schema_path (str): Path to the JSON schema definition.
        """
        self.config_path = config_path
        self.schema_path = schema_path
        self.config: Dict[str, Any] = {}
        self.schema: Dict[str, Any] = {}
        self.run_id: Optional[str] = None
        self.logger = logging.getLogger("config_manager")

    def load_and_validate(self) -> Dict[str, Any]:
        """
        Main entry point. Loads config, validates schema/logic/resources.

        Returns:
            Dict[str, Any]: The validated configuration.

        Raises:
            ConfigurationError: If any validation step fails.
        """
        self.config = self._load_json(self.config_path)
        self.schema = self._load_json(self.schema_path)

        self._validate_schema()
        self._validate_logic()
        self._validate_resources()

        return self.config

    def build_settings(self, config: Optional[Dict[str, Any]] = None) -> Settings:
        """
        Build the immutable `Settings` described by a validated configuration.
        """
        config = self.config if config is None else config

        profile = config.get('profile', 'empty')
        settings = PROFILES[profile]()

        if 'task' in config:
            settings = settings.with_task_kind(TaskKind(config['task']))
        if 'sort_by' in config:
            settings = settings.sorted_by(Metric.from_name(config['sort_by']))

        cv = config.get('cross_validation', {})
        settings = settings.with_number_of_folds(cv.get('folds', settings.number_of_folds))
        settings = settings.shuffle_data(cv.get('shuffle', settings.shuffle), cv.get('seed'))

        execution = config.get('execution', {})
        settings = settings.with_n_jobs(
            execution.get('n_jobs', settings.n_jobs),
            execution.get('variant_n_jobs', settings.variant_n_jobs),
        )

        outputs = config.get('outputs', {})
        if outputs.get('save_models', False):
            settings = settings.with_results_dir(outputs.get('base_results_dir', 'results'))

        settings = settings.with_verbose(config.get('logging', {}).get('level', 'INFO').upper() == 'DEBUG')

        for name in config.get('include', []):
            settings = settings.include(Algorithm.from_name(name))
        for name, values in config.get('algorithms', {}).items():
            algorithm = Algorithm.from_name(name)
            settings = settings.with_params(self._build_params(algorithm, values))
        for name in config.get('skip', []):
            settings = settings.skip(Algorithm.from_name(name))

        return settings

    def generate_run_id(self) -> str:
        """
        Generate or retrieve a unique run identifier based on timestamp.
        """
        if not self.run_id:
            self.run_id = datetime.now().strftime("%Y%m%d_%H%M%S")
        return self.run_id

    def save_artifacts(self, output_dir: str) -> None:
        """
        Save the configuration used, its SHA256 hash and run metadata.
        """
        config_dir = Path(output_dir)
        config_dir.mkdir(parents=True, exist_ok=True)

        with open(config_dir / "config_used.json", 'w') as f:
            json.dump(self.config, f, indent=2)

        config_str = json.dumps(self.config, sort_keys=True)
        config_hash = hashlib.sha256(config_str.encode()).hexdigest()

        with open(config_dir / "config_hash.txt", 'w') as f:
            f.write(config_hash)

        metadata = {
            'run_id': self.run_id,
            'start_time': datetime.now().isoformat(),
            'python_version': sys.version,
            'platform': sys.platform,
            'config_hash': config_hash,
            'working_directory': os.getcwd()
        }

        with open(config_dir / "run_metadata.json", 'w') as f:
            json.dump(metadata, f, indent=2)

    def _load_json(self, path: str) -> Dict[str, Any]:
        """Safely load a JSON file."""
        if not os.path.exists(path):
            raise ConfigurationError(f"File not found: {path}")
        try:
            with open(path, 'r') as f:
                return json.load(f)
        except json.JSONDecodeError as e:
            raise ConfigurationError(f"Invalid JSON in {path}: {str(e)}")

    def _validate_schema(self) -> None:
        """Validate config structure against JSON schema."""
        try:
            jsonschema.validate(instance=self.config, schema=self.schema)
        except jsonschema.ValidationError as e:
            raise ConfigurationError(f"Schema validation failed: {e.message}")

    def _validate_logic(self) -> None:
        """Logical validation beyond what the schema can express."""
        profile = self.config.get('profile', 'empty')
        if profile not in PROFILES:
            raise ConfigurationError(f"Unknown profile '{profile}'. Available: {sorted(PROFILES)}")

        task = self.config.get('task')
        if task is not None:
            try:
                TaskKind(task)
            except ValueError:
                raise ConfigurationError(f"Unknown task kind '{task}'.")

        sort_by = self.config.get('sort_by')
        if sort_by is not None:
            try:
                metric = Metric.from_name(sort_by)
            except ValueError as e:
                raise ConfigurationError(str(e))
            if task is not None:
                check_metric_task(metric, TaskKind(task))

        cv = self.config.get('cross_validation', {})
        folds = cv.get('folds', constants.DEFAULT_NUMBER_OF_FOLDS)
        if folds < 2:
            raise ConfigurationError(f"cross_validation.folds must be >= 2, got {folds}.")
        if cv.get('seed', 0) < 0:
            raise ConfigurationError("cross_validation.seed must be non-negative.")

        execution = self.config.get('execution', {})
        for key in ('n_jobs', 'variant_n_jobs'):
            if key in execution:
                n_jobs = execution[key]
                if n_jobs == 0 or n_jobs < -1:
                    raise ConfigurationError(
                        f"execution.{key} must be -1 (all cores) or a positive integer, got {n_jobs}"
                    )

        for key in ('skip', 'include'):
            for name in self.config.get(key, []):
                self._algorithm(name)
        for name, values in self.config.get('algorithms', {}).items():
            self._build_params(self._algorithm(name), values)

    def _validate_resources(self) -> None:
        """Warn when requested workers exceed the available CPUs."""
        cpu_count = psutil.cpu_count(logical=True) or 1
        execution = self.config.get('execution', {})
        n_jobs = execution.get('n_jobs', 1)
        variant_n_jobs = execution.get('variant_n_jobs', 1)

        for key, value in (('n_jobs', n_jobs), ('variant_n_jobs', variant_n_jobs)):
            if value > cpu_count:
                self.logger.warning(
                    f"execution.{key} ({value}) exceeds available CPUs ({cpu_count}). "
                    "Workers will be oversubscribed."
                )

        effective = (cpu_count if n_jobs == -1 else n_jobs) * (cpu_count if variant_n_jobs == -1 else variant_n_jobs)
        self.logger.debug(f"Worker budget validated: {effective} concurrent fits (CPUs: {cpu_count})")

    @staticmethod
    def _algorithm(name: str) -> Algorithm:
        try:
            return Algorithm.from_name(name)
        except ValueError as e:
            raise ConfigurationError(str(e))

    @staticmethod
    def _build_params(algorithm: Algorithm, values: Dict[str, Any]):
        """Build the parameter record for `algorithm` from JSON values."""
        params_type = AlgorithmCatalog.entry(algorithm).params_type
        known = {f.name: f for f in dataclasses.fields(params_type)}

        unknown = sorted(set(values) - set(known))
        if unknown:
            raise ConfigurationError(f"Unknown parameters for {algorithm}: {unknown}")

        kwargs = {}
        for key, value in values.items():
            if key in _ENUM_FIELDS:
                kwargs[key] = ConfigurationManager._enum_value(_ENUM_FIELDS[key], value, algorithm)
            elif isinstance(value, list):
                kwargs[key] = tuple(value)
            else:
                kwargs[key] = value

        try:
            return params_type(**kwargs)
        except TypeError as e:
            raise ConfigurationError(f"Invalid parameters for {algorithm}: {e}")

    @staticmethod
    def _enum_value(enum_type: typing.Type[Enum], value: str, algorithm: Algorithm):
        try:
            return enum_type[str(value).upper()]
        except KeyError:
            raise ConfigurationError(
                f"Unknown {enum_type.__name__.lower()} '{value}' for {algorithm}. "
                f"Available: {[m.name.lower() for m in enum_type]}"
            )
