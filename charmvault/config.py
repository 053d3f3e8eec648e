"""
CharmVault Validator Configuration
"""

from __future__ import annotations
import json
import logging
from dataclasses import dataclass, field, asdict
from typing import List, Optional

from charmvault.constants import (
    DISTRIBUTION_MODE_DEFERRED,
    DISTRIBUTION_MODE_STRICT,
    DISTRIBUTION_MODES,
    DEFAULT_DISTRIBUTION_FEE_SATS,
)
from charmvault.errors import ConfigError

logger = logging.getLogger(__name__)


@dataclass
class PolicyConfig:
    """
    Contract policy switches.

    distribution_mode:
        "deferred" - distribution checks only status and burn; deadline and
                     payout amounts are NOT verified
        "strict"   - additionally require an elapsed deadline and per-
                     beneficiary payouts
    """
    distribution_mode: str = DISTRIBUTION_MODE_DEFERRED
    distribution_fee_sats: int = DEFAULT_DISTRIBUTION_FEE_SATS
    collect_all_diagnostics: bool = False

    @property
    def strict_distribution(self) -> bool:
        return self.distribution_mode == DISTRIBUTION_MODE_STRICT

    def validate(self) -> List[str]:
        """Returns list of policy errors (empty if valid)."""
        errors = []

        if self.distribution_mode not in DISTRIBUTION_MODES:
            errors.append(
                f"Invalid distribution_mode: {self.distribution_mode!r} "
                f"(expected one of {sorted(DISTRIBUTION_MODES)})"
            )

        if not _is_int(self.distribution_fee_sats):
            errors.append(f"distribution_fee_sats must be an integer, got {self.distribution_fee_sats!r}")
        elif self.distribution_fee_sats < 0:
            errors.append("distribution_fee_sats cannot be negative")

        if not isinstance(self.collect_all_diagnostics, bool):
            errors.append(
                f"collect_all_diagnostics must be a boolean, got {self.collect_all_diagnostics!r}"
            )

        return errors

    def ensure_valid(self) -> "PolicyConfig":
        """Raise ConfigError if validate() reports problems."""
        problems = self.validate()
        if problems:
            raise ConfigError(problems)
        return self


@dataclass
class LogConfig:
    """Logging configuration."""
    level: str = "INFO"
    file: Optional[str] = None
    format: str = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    max_size_mb: int = 100
    backup_count: int = 5

    def validate(self) -> List[str]:
        """Returns list of logging errors (empty if valid)."""
        errors = []

        if not isinstance(self.level, str) or not isinstance(
            getattr(logging, self.level.upper(), None), int
        ):
            errors.append(f"Invalid log level: {self.level!r}")

        if self.file is not None and not isinstance(self.file, str):
            errors.append(f"Log file must be a path string, got {self.file!r}")

        if not isinstance(self.format, str):
            errors.append(f"Log format must be a string, got {self.format!r}")

        if not _is_int(self.max_size_mb):
            errors.append(f"max_size_mb must be an integer, got {self.max_size_mb!r}")
        elif self.max_size_mb < 1:
            errors.append("max_size_mb must be at least 1")

        if not _is_int(self.backup_count):
            errors.append(f"backup_count must be an integer, got {self.backup_count!r}")
        elif self.backup_count < 0:
            errors.append("backup_count cannot be negative")

        return errors


def _is_int(value: object) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


@dataclass
class ValidatorConfig:
    """
    Complete validator configuration.
    """
    policy: PolicyConfig = field(default_factory=PolicyConfig)
    log: LogConfig = field(default_factory=LogConfig)

    def validate(self) -> List[str]:
        """
        Validate configuration.

        Returns:
            List of validation errors (empty if valid)
        """
        return self.policy.validate() + self.log.validate()

    def ensure_valid(self) -> "ValidatorConfig":
        """Raise ConfigError if validate() reports problems."""
        problems = self.validate()
        if problems:
            raise ConfigError(problems)
        return self

    def save(self, path: str) -> None:
        """Save configuration to file."""
        with open(path, 'w') as f:
            json.dump(self.to_dict(), f, indent=2)

        logger.info(f"Configuration saved to {path}")

    @classmethod
    def load(cls, path: str) -> "ValidatorConfig":
        """Load configuration from file."""
        with open(path, 'r') as f:
            data = json.load(f)

        if not isinstance(data, dict):
            raise ConfigError([f"Config root must be an object, got {type(data).__name__}"])

        config = cls()

        try:
            if "policy" in data:
                config.policy = PolicyConfig(**data["policy"])

            if "log" in data:
                config.log = LogConfig(**data["log"])
        except TypeError as e:
            raise ConfigError([str(e)]) from e

        config.ensure_valid()
        logger.info(f"Configuration loaded from {path}")
        return config

    @classmethod
    def default(cls) -> "ValidatorConfig":
        """Default configuration: distribution checks deferred."""
        return cls()

    @classmethod
    def default_strict(cls) -> "ValidatorConfig":
        """Configuration with deadline and payout checks on distribution."""
        config = cls()
        config.policy.distribution_mode = DISTRIBUTION_MODE_STRICT
        return config

    def to_dict(self) -> dict:
        """Export configuration as dictionary."""
        return {
            "policy": asdict(self.policy),
            "log": asdict(self.log),
        }


def setup_logging(config: LogConfig) -> None:
    """Configure logging based on config."""
    level = getattr(logging, config.level.upper(), logging.INFO)

    handlers = [logging.StreamHandler()]

    if config.file:
        from logging.handlers import RotatingFileHandler
        file_handler = RotatingFileHandler(
            config.file,
            maxBytes=config.max_size_mb * 1024 * 1024,
            backupCount=config.backup_count,
        )
        handlers.append(file_handler)

    logging.basicConfig(
        level=level,
        format=config.format,
        handlers=handlers,
        force=True,
    )
