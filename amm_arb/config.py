"""
Scan configuration: schema validation with Pydantic and YAML loading.
"""

from decimal import Decimal
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

import yaml
from pydantic import BaseModel, Field, ValidationError as PydanticValidationError
from pydantic import field_validator

from .exceptions import ConfigurationError, ValidationError
from .risk import DEFAULT_LIQUIDITY_FLOOR
from .sizing import DEFAULT_TEST_AMOUNTS


class ScanConfig(BaseModel):
    """Parameters for one arbitrage scan"""

    max_pool_usage_pct: Decimal = Field(
        default=Decimal("5"),
        gt=0,
        le=100,
        description="Max percent of the shallowest reserve a trade may use",
    )
    min_profit_pct: Decimal = Field(
        default=Decimal("0.1"),
        ge=0,
        description="Opportunities must beat this profit percent to be reported",
    )
    fee_rate: Decimal = Field(
        default=Decimal("0.003"), ge=0, lt=1, description="Swap fee as decimal"
    )
    max_price_impact_pct: Decimal = Field(
        default=Decimal("20"),
        gt=0,
        description="Total price impact must stay below this percent",
    )
    liquidity_floor: int = Field(
        default=DEFAULT_LIQUIDITY_FLOOR,
        ge=0,
        description="Reserve floor (raw units) below which a route is riskier",
    )
    test_amounts: List[Decimal] = Field(
        default_factory=lambda: [Decimal(a) for a in DEFAULT_TEST_AMOUNTS],
        description="Candidate start amounts in raw units of the start token",
    )
    display_count: int = Field(
        default=10, ge=0, le=1000, description="Opportunities shown on console"
    )
    known_decimals: Dict[str, int] = Field(
        default_factory=dict, description="Token id -> decimals overrides"
    )
    default_decimals: int = Field(
        default=9, ge=0, le=36, description="Decimals for tokens with none known"
    )

    @field_validator("test_amounts")
    @classmethod
    def validate_test_amounts(cls, v):
        if not v:
            raise ValueError("test_amounts cannot be empty")
        for amount in v:
            if amount <= 0:
                raise ValueError(f"test_amounts must be positive: {amount}")
        return sorted(v)

    @field_validator("known_decimals")
    @classmethod
    def validate_known_decimals(cls, v):
        for token, decimals in v.items():
            if not token:
                raise ValueError("known_decimals keys cannot be empty")
            if decimals < 0:
                raise ValueError(f"Decimals for {token} cannot be negative: {decimals}")
        return v

    model_config = {
        "extra": "forbid",
        "frozen": True,
    }


def validate_scan_config(config_dict: Dict[str, Any]) -> ScanConfig:
    """
    Validate a scan configuration dictionary.

    Raises:
        ValidationError: If configuration is invalid
    """
    try:
        return ScanConfig(**config_dict)
    except PydanticValidationError as e:
        raise ValidationError(
            f"Configuration validation failed: {e}", {"errors": e.errors()}
        ) from e


def load_yaml_config(config_path: Union[str, Path]) -> Dict[str, Any]:
    """Load and parse YAML configuration file."""
    config_path = Path(config_path)

    if not config_path.exists():
        raise ConfigurationError(f"Configuration file not found: {config_path}")

    try:
        with open(config_path, "r") as f:
            config_dict = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise ConfigurationError(f"Invalid YAML in {config_path}: {e}") from e

    if config_dict is None:
        return {}
    if not isinstance(config_dict, dict):
        raise ConfigurationError(
            f"Config file must contain a YAML mapping: {config_path}"
        )
    return config_dict


def load_config(
    config_path: Optional[Union[str, Path]] = None,
    overrides: Optional[Dict[str, Any]] = None,
) -> ScanConfig:
    """
    Load scan configuration.

    Args:
        config_path: Optional YAML file; defaults apply when omitted
        overrides: Values that replace file values (e.g., from CLI flags);
            None values are ignored

    Returns:
        Validated ScanConfig

    Raises:
        ConfigurationError: If the file cannot be read
        ValidationError: If values fail schema validation
    """
    config_dict = load_yaml_config(config_path) if config_path else {}
    for key, value in (overrides or {}).items():
        if value is not None:
            config_dict[key] = value
    return validate_scan_config(config_dict)


def get_default_config() -> ScanConfig:
    """Default configuration for tests or fallback purposes."""
    return ScanConfig()
