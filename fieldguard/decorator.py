# Copyright (c) 2025 Artoo Corporation
# Licensed under the Business Source License 1.1 (see LICENSE).
# Change Date: 2029-09-08  •  Change License: LGPL-3.0-or-later

# fieldguard/decorator.py

import functools
import inspect
import logging
import threading
import weakref
from typing import Any, Callable, Hashable, Iterable, Mapping, Optional, Union

from .exceptions import ConstraintViolationError
from .runtime import check_parameter_names, get_validator, validate_arguments
from .validation.adapters import ValidationAdapter
from .validation.groups import normalize_groups
from .validation.schema import TypeSchema
from .validator import Validator

logger = logging.getLogger(__name__)

# Sentinel object to detect if a parameter was provided by the user
_sentinel = object()


def validated_arguments(
    parameters: Optional[Mapping[str, Any]] = None,
    *,
    groups: Union[Hashable, Iterable[Hashable]] = (),
    validator: Optional[Validator] = None,
    instance_name: str = "default",
    on_violation: Any = _sentinel,
    locale: Optional[str] = None,
    **param_specs: Any,
):
    """
    Validate a function's arguments before it runs.

    Constraints are declared per parameter, using the same value specs as a
    declaration table:

    .. code-block:: python

        @validated_arguments(
            name=["NotBlank"],
            tags={"constraints": ["NotEmpty"], "elements": ["NotNull"]},
            count=[{"constraint": "Positive"}],
        )
        def create_ship(name, tags, count=1): ...

    Parameters whose names clash with this decorator's own keywords can be
    declared through the positional *parameters* mapping instead.

    :param groups: Group or groups active for the check. Defaults to the
                   default group.
    :param validator: Validator to use. When omitted, the named process-wide
                      instance is looked up on each call.
    :param instance_name: Name of the process-wide validator instance.
    :param on_violation: Optional. If it is a callable, it is invoked (with the
                         ``ConstraintViolationError`` when it accepts an
                         argument) and its result returned in place of the
                         call. Any other value is returned directly. If not
                         provided, the ``ConstraintViolationError`` is raised.
    :param locale: Locale for violation messages.
    """

    active_groups = normalize_groups(groups)
    specs = dict(parameters or {})
    specs.update(param_specs)

    def decorator(func: Callable):
        label = f"{func.__module__}.{func.__qualname__}"
        signature = inspect.signature(func)
        allowed_params = tuple(signature.parameters.keys())
        has_var_kwargs = any(
            param.kind == inspect.Parameter.VAR_KEYWORD
            for param in signature.parameters.values()
        )
        check_parameter_names(label, specs, allowed_params, has_var_kwargs=has_var_kwargs)
        schema = TypeSchema.from_mapping(specs, name=label)

        adapters: "weakref.WeakKeyDictionary[Validator, ValidationAdapter]" = weakref.WeakKeyDictionary()
        adapters_lock = threading.Lock()

        def _resolve() -> "tuple[Validator, ValidationAdapter]":
            active = validator or get_validator(instance_name)
            adapter = adapters.get(active)
            if adapter is None:
                with adapters_lock:
                    adapter = adapters.get(active)
                    if adapter is None:
                        adapter = active.parameters(schema, name=label)
                        adapters[active] = adapter
                        logger.debug("Built parameter adapter for %s", label)
            return active, adapter

        def _check(args, kwargs) -> Optional[ConstraintViolationError]:
            active, adapter = _resolve()
            bound = signature.bind(*args, **kwargs)
            bound.apply_defaults()
            arguments = dict(bound.arguments)
            # Keyword arguments collected by **kwargs are validated by name.
            for param in signature.parameters.values():
                if param.kind == inspect.Parameter.VAR_KEYWORD:
                    arguments.update(arguments.pop(param.name, {}))
            return validate_arguments(
                active,
                adapter,
                arguments,
                groups=active_groups,
                locale=locale,
                label=label,
            )

        @functools.wraps(func)
        def sync_wrapper(*args, **kwargs):
            """Wrapper for synchronous functions."""
            error = _check(args, kwargs)
            if error is not None:
                return _handle_violation(error)
            return func(*args, **kwargs)

        @functools.wraps(func)
        async def async_wrapper(*args, **kwargs):
            """Wrapper for asynchronous functions."""
            error = _check(args, kwargs)
            if error is not None:
                result = _handle_violation(error)
                if inspect.isawaitable(result):
                    return await result
                return result
            return await func(*args, **kwargs)

        def _handle_violation(error: ConstraintViolationError):
            """Executes the user-supplied `on_violation` handler or raises by default."""

            if on_violation is _sentinel:
                raise error

            # Static value supplied (e.g. None/False)
            if not callable(on_violation):
                return on_violation

            if _accepts_argument(on_violation):
                return on_violation(error)
            return on_violation()

        if inspect.iscoroutinefunction(func):
            wrapper = async_wrapper
        else:
            wrapper = sync_wrapper

        wrapper.__fieldguard_parameters__ = schema
        return wrapper

    return decorator


def _accepts_argument(handler: Callable) -> bool:
    try:
        params = inspect.signature(handler).parameters.values()
    except (TypeError, ValueError):
        return True
    return any(
        param.kind in (inspect.Parameter.POSITIONAL_ONLY, inspect.Parameter.POSITIONAL_OR_KEYWORD, inspect.Parameter.VAR_POSITIONAL)
        for param in params
    )


__all__ = ["validated_arguments"]
