"""Broadest-wins merge of access values and access matrices.

Combining grants from several sources (a client's direct grants, each
of its roles, each ancestor role) must never narrow access: whatever
one source allows stays allowed.

Rules, in priority order:

1. ``Full`` with anything is ``Full``.
2. ``Denied`` with ``Denied`` is ``Denied``.
3. ``Denied`` with anything else is the other value.
4. Two projections merge field by field (:func:`merge_fields`).
5. Any other pair involving a ``Filtered`` value keeps the value merged
   last. There is no defined precedence between two filters, or between
   a filter and a projection; the order in which sources are folded is
   not guaranteed, so callers must not rely on which one survives.
"""

from __future__ import annotations

import logging
from functools import reduce
from typing import Any, Iterable, Mapping

from .constants import Operation
from .values import DENIED, FULL, AccessValue, Denied, Filtered, Full, Projected

logger = logging.getLogger(__name__)

AccessMatrix = dict[Operation, AccessValue]
ResourceMap = dict[str, AccessMatrix]


def _hidden(fields: Mapping[str, Any]) -> list[str]:
    # Any zero gives the projection exclusion semantics; inclusion
    # entries alongside it are redundant.
    return [key for key, value in fields.items() if value == 0]


def merge_fields(fields1: Mapping[str, Any], fields2: Mapping[str, Any]) -> AccessValue:
    """Merge two field projections into the broadest projection.

    A field is visible in the result if either side lets it through:

    - Two inclusion projections are unioned. A field both sides list
      with different values is dropped.
    - An exclusion merged with an inclusion keeps only the excluded
      fields the inclusion does not mention. A field one side includes
      (``1``) can never end up hidden by the other side's ``0``.
    - Two exclusion projections keep only the fields both exclude.
    - When nothing survives the result is :data:`FULL`.

    Example::

        merge_fields({"fieldOne": 1, "fieldTwo": 2}, {"fieldThree": 1})
        # Projected({"fieldOne": 1, "fieldTwo": 2, "fieldThree": 1})

        merge_fields({"fieldOne": 1, "fieldThree": 1}, {"fieldThree": 0, "fieldFour": 0})
        # Projected({"fieldFour": 0})
    """
    hidden1 = _hidden(fields1)
    hidden2 = _hidden(fields2)

    if hidden1 and hidden2:
        result = {key: 0 for key in hidden1 if key in hidden2}
    elif hidden1:
        result = {key: 0 for key in hidden1 if key not in fields2}
    elif hidden2:
        result = {key: 0 for key in hidden2 if key not in fields1}
    else:
        result = {}
        for key in list(fields1) + [k for k in fields2 if k not in fields1]:
            if key in fields1 and key in fields2 and fields1[key] != fields2[key]:
                continue
            result[key] = fields1[key] if key in fields1 else fields2[key]

    if not result:
        return FULL
    return Projected(fields=result)


def merge(a: AccessValue, b: AccessValue) -> AccessValue:
    """Combine two access values, broadest wins.

    Args:
        a: Value accumulated so far.
        b: Candidate value from another source.

    Returns:
        The merged value. Neither input is modified.
    """
    if isinstance(a, Full) or isinstance(b, Full):
        return FULL
    if isinstance(a, Denied):
        return b
    if isinstance(b, Denied):
        return a
    if isinstance(a, Projected) and isinstance(b, Projected):
        return merge_fields(a.fields, b.fields)
    if isinstance(a, (Filtered, Projected)) and isinstance(b, (Filtered, Projected)):
        if a != b:
            logger.debug("Merging %r with %r keeps the latter (no filter precedence)", a, b)
        return b
    raise TypeError(f"Cannot merge {type(a).__name__} with {type(b).__name__}")


def merge_all(values: Iterable[AccessValue]) -> AccessValue:
    """Reduce any number of access values with :func:`merge`, starting from ``DENIED``."""
    return reduce(merge, values, DENIED)


def merge_matrices(matrix1: Mapping[Operation, AccessValue], matrix2: Mapping[Operation, AccessValue]) -> AccessMatrix:
    """Merge two access matrices operation by operation.

    Returns a new sparse matrix: operations that end up denied are omitted.
    """
    merged: AccessMatrix = {}
    for operation in list(matrix1) + [op for op in matrix2 if op not in matrix1]:
        value = merge(matrix1.get(operation, DENIED), matrix2.get(operation, DENIED))
        if not isinstance(value, Denied):
            merged[operation] = value
    return merged


def merge_resource_maps(resources1: Mapping[str, AccessMatrix], resources2: Mapping[str, AccessMatrix]) -> ResourceMap:
    """Merge two resource → matrix maps resource by resource.

    Resources whose merged matrix is empty are omitted.
    """
    merged: ResourceMap = {}
    for resource in list(resources1) + [r for r in resources2 if r not in resources1]:
        matrix = merge_matrices(resources1.get(resource, {}), resources2.get(resource, {}))
        if matrix:
            merged[resource] = matrix
    return merged


__all__ = [
    "AccessMatrix",
    "ResourceMap",
    "merge",
    "merge_all",
    "merge_fields",
    "merge_matrices",
    "merge_resource_maps",
]
