# Copyright (c) 2025 Artoo Corporation
# Licensed under the Business Source License 1.1 (see LICENSE).
# Change Date: 2029-09-08  •  Change License: LGPL-3.0-or-later

"""Ship Demo: Validating a Nested Object Graph.

This demo validates a small fleet model: a ship with a crew map whose members
carry task lists. It shows nested property paths, groups, localized
messages, early detection of declaration typos, and argument validation.

Run with:
    python examples/ship_demo.py
"""

import tempfile
from dataclasses import dataclass, field
from typing import Dict, List, Optional

from fieldguard import (
    ConfigurationError,
    ConstraintViolationError,
    Validator,
    ValidatorConfig,
    validated_arguments,
)


@dataclass
class CrewMember:
    name: str
    tasks: List[Optional[str]] = field(default_factory=list)


@dataclass
class Ship:
    name: str
    code: str = ""
    crew: Dict[str, Optional[CrewMember]] = field(default_factory=dict)


DECLARATIONS = """
types:
  __main__.Ship:
    name: [NotBlank]
    code:
      - {constraint: Pattern, regexp: "[A-Z]{3}", groups: [Registry]}
    crew:
      keys: [NotBlank]
      values:
        constraints: [NotNull]
        valid: true
  __main__.CrewMember:
    name: [NotBlank]
    tasks:
      elements: [NotNull, NotBlank]
"""


def _print_violations(violations):
    if not violations:
        print("  ✅ valid")
    for violation in violations:
        print(f"  ❌ {violation.path or '<root>'}: {violation.message}")


def demo_nested_paths(validator):
    print("\n" + "=" * 70)
    print("DEMO 1: Nested Paths")
    print("=" * 70)

    ship = Ship(
        name="",
        crew={
            "bob": CrewMember(name="Bob", tasks=["swab", None]),
            "ann": None,
        },
    )
    _print_violations(validator.check(ship))


def demo_groups(validator):
    print("\n" + "=" * 70)
    print("DEMO 2: Groups")
    print("=" * 70)

    ship = Ship(name="Argo", code="argo")
    print("\nDefault group:")
    _print_violations(validator.check(ship))
    print("\nRegistry group:")
    _print_violations(validator.check(ship, "Registry"))


def demo_locales(validator):
    print("\n" + "=" * 70)
    print("DEMO 3: Localized Messages")
    print("=" * 70)

    _print_violations(validator.check(Ship(name=" "), locale="de"))


def demo_typo_detection():
    print("\n" + "=" * 70)
    print("DEMO 4: Declaration Typos Fail Early")
    print("=" * 70)

    try:
        Validator().schema({"name": ["NotBlnk"]})
    except ConfigurationError as error:
        print(f"\n  ✅ Caught at build time: {error}")


def demo_arguments(validator):
    print("\n" + "=" * 70)
    print("DEMO 5: Argument Validation")
    print("=" * 70)

    @validated_arguments(validator=validator, name=["NotBlank"], crew_size=["Positive"])
    def commission(name, crew_size=1):
        return f"{name} commissioned with {crew_size} crew"

    print(f"\n  {commission('Argo', 12)}")
    try:
        commission("", 0)
    except ConstraintViolationError as error:
        _print_violations(error.violations)


def main():
    validator = Validator(ValidatorConfig(added_locales=("de",)))
    with tempfile.NamedTemporaryFile(mode="w", suffix=".yaml", delete=False) as f:
        f.write(DECLARATIONS)
        path = f.name
    validator.load_types(path)

    demo_nested_paths(validator)
    demo_groups(validator)
    demo_locales(validator)
    demo_typo_detection()
    demo_arguments(validator)


if __name__ == "__main__":
    main()
