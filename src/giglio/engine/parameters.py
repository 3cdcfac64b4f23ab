"""Cartesian expansion of a module's parameter declarations."""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from typing import Any

from giglio.domain.models import NO_PARAMETERS, ParameterSet, PassParameters


def expand_parameters(
    declarations: Mapping[str, Sequence[Any]],
) -> list[PassParameters]:
    """Return every combination of the declared parameter values.

    Combinations vary the last-declared parameter fastest::

        >>> expand_parameters({"a": [1, 2], "b": [10, 20]})
        [{'a': 1, 'b': 10}, {'a': 1, 'b': 20}, {'a': 2, 'b': 10}, {'a': 2, 'b': 20}]

    A module without parameters still gets exactly one pass, marked by
    ``NO_PARAMETERS``. A parameter with no candidate values leaves
    nothing to run.
    """
    if not declarations:
        return [NO_PARAMETERS]

    combinations: list[ParameterSet] = [{}]
    for name, values in declarations.items():
        combinations = [{**combo, name: value} for combo in combinations for value in values]
    return combinations
