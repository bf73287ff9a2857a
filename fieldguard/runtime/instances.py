# Copyright (c) 2025 Artoo Corporation
# Licensed under the Business Source License 1.1 (see LICENSE).
# Change Date: 2029-09-08  •  Change License: LGPL-3.0-or-later

"""Process-wide, named validator instances."""

from __future__ import annotations

import logging
import threading
from typing import Any, Dict, Optional

from ..config import ValidatorConfig
from ..exceptions import ConfigurationError
from ..validator import Validator

logger = logging.getLogger(__name__)

DEFAULT_INSTANCE = "default"

_VALIDATORS: Dict[str, Validator] = {}
_LOCK = threading.Lock()


def configure_validator(
    config: Optional[ValidatorConfig] = None,
    *,
    instance_name: str = DEFAULT_INSTANCE,
    **kwargs: Any,
) -> Validator:
    """Create (or replace) the validator registered under *instance_name*.

    Without an explicit *config* the settings are read from ``FIELDGUARD_*``
    environment variables.
    """

    validator = Validator(config or ValidatorConfig.from_env(), **kwargs)
    with _LOCK:
        replaced = instance_name in _VALIDATORS
        _VALIDATORS[instance_name] = validator
    logger.debug("%s validator instance '%s'", "Replaced" if replaced else "Configured", instance_name)
    return validator


def get_validator(instance_name: str = DEFAULT_INSTANCE) -> Validator:
    """Return a configured validator.

    The default instance is created from the environment on first use; any
    other name must have been configured explicitly.
    """

    validator = _VALIDATORS.get(instance_name)
    if validator is not None:
        return validator
    if instance_name != DEFAULT_INSTANCE:
        raise ConfigurationError(
            f"Validator instance '{instance_name}' is not configured; call configure_validator() first"
        )
    with _LOCK:
        validator = _VALIDATORS.get(instance_name)
        if validator is None:
            validator = Validator(ValidatorConfig.from_env())
            _VALIDATORS[instance_name] = validator
    return validator


def shutdown_validator(instance_name: str = DEFAULT_INSTANCE) -> None:
    with _LOCK:
        _VALIDATORS.pop(instance_name, None)


def shutdown_all_validators() -> None:
    with _LOCK:
        _VALIDATORS.clear()


__all__ = [
    "DEFAULT_INSTANCE",
    "configure_validator",
    "get_validator",
    "shutdown_all_validators",
    "shutdown_validator",
]
