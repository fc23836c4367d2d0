"""
Scenario Loader

Loads a FundLaunchScenario from a YAML document. Top-level keys match the
FundLaunchScenario fields; the plugin registry cannot be expressed in YAML
and is supplied by the caller.
"""

import logging
from pathlib import Path
from typing import Optional, Union

import yaml
from pydantic import ValidationError

from .scenario import FundLaunchScenario
from ..plugins.registry import StrategyPluginRegistry

logger = logging.getLogger(__name__)


class ScenarioLoader:
    """
    Pydantic-based scenario loader.

    Raises FileNotFoundError for a missing file and ValueError for malformed
    YAML or a document that fails validation. Risk limit rule violations
    surface as ConfigValidationError.
    """

    def __init__(self):
        self.logger = logger

    def load_from_yaml(self, file_path: Union[str, Path],
                       plugin_registry: Optional[StrategyPluginRegistry] = None) -> FundLaunchScenario:
        """
        Load and validate a scenario.

        Args:
            file_path: Path to YAML scenario file
            plugin_registry: Optional registry attached to the scenario

        Returns:
            FundLaunchScenario: Validated scenario

        Raises:
            FileNotFoundError: If the scenario file does not exist
            ValueError: If the YAML is malformed or fails validation
        """
        file_path = Path(file_path)
        if not file_path.exists():
            raise FileNotFoundError(f"Scenario file not found: {file_path}")

        try:
            with open(file_path, 'r') as f:
                scenario_data = yaml.safe_load(f)
        except yaml.YAMLError as e:
            raise ValueError(f"Invalid YAML file: {e}") from e

        if not isinstance(scenario_data, dict):
            raise ValueError("Scenario file must contain a mapping")

        self.logger.info(f"Loading scenario from {file_path}")
        scenario = self.load_from_dict(scenario_data, plugin_registry)
        self.logger.info(
            f"Scenario validated: {len(scenario.signals)} signals, "
            f"{len(scenario.strategy_books)} strategy books, "
            f"{len(scenario.policy_overrides)} policy overrides"
        )
        return scenario

    def load_from_dict(self, scenario_data: dict,
                       plugin_registry: Optional[StrategyPluginRegistry] = None) -> FundLaunchScenario:
        """Validate an already-parsed scenario mapping."""
        data = dict(scenario_data)
        if plugin_registry is not None:
            data['plugin_registry'] = plugin_registry

        try:
            return FundLaunchScenario(**data)
        except ValidationError as e:
            error_msg = self._format_validation_error(e, "scenario")
            raise ValueError(f"Scenario validation failed:\n{error_msg}") from e

    def _format_validation_error(self, error: ValidationError, section: str) -> str:
        """
        Format Pydantic validation error into user-friendly message.

        Args:
            error: Pydantic ValidationError
            section: Configuration section name

        Returns:
            str: Formatted error message
        """
        lines = [f"Configuration validation failed for '{section}':"]

        for err in error.errors():
            field_path = " -> ".join(str(x) for x in err['loc'])
            field_path = f"{section}.{field_path}" if field_path else section

            lines.append(f"  • {field_path}: {err['msg']}")
            if 'type' in err:
                lines.append(f"    Expected type: {err['type']}")

            if 'input' in err:
                input_value = err['input']
                if isinstance(input_value, str) and len(input_value) > 50:
                    input_value = input_value[:50] + "..."
                lines.append(f"    Input value: {input_value}")

        return "\n".join(lines)
