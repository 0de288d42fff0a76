"""Claim label selectors: models, validation and constraint extraction.

A claim narrows the zones its volume may land in with a Kubernetes-style
label selector restricted to two keys (zone and region) and two operators
(``In`` and ``NotIn``). :func:`validate_selector` rejects anything else before
any set arithmetic runs. The extractors below return ``None`` for a missing
entry so the resolver can skip constraints that do not apply.

Example selector::

    matchExpressions:
      - key: failure-domain.beta.kubernetes.io/zone
        operator: In
        values: [us-east-1a, us-east-2a, us-east-3a]
      - key: failure-domain.beta.kubernetes.io/zone
        operator: In
        values: [us-east-3a, us-east-4a]

``match_expressions(selector, ZONE_KEY, Operator.IN)`` returns both value sets
separately, so the resolver intersects them one after the other and only
``us-east-3a`` survives.
"""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field

from zone_placer.errors import SelectorValidationError

ZONE_KEY = "failure-domain.beta.kubernetes.io/zone"
REGION_KEY = "failure-domain.beta.kubernetes.io/region"

ALLOWED_KEYS: frozenset[str] = frozenset({ZONE_KEY, REGION_KEY})


class Operator(str, Enum):
    IN = "In"
    NOT_IN = "NotIn"


ALLOWED_OPERATORS: frozenset[str] = frozenset(op.value for op in Operator)


class LabelSelectorRequirement(BaseModel):
    """One ``matchExpressions`` entry.

    ``operator`` stays a plain string: unsupported operators must reach
    :func:`validate_selector` rather than fail model construction.
    """

    model_config = ConfigDict(extra="forbid")

    key: str
    operator: str
    values: list[str] = Field(default_factory=list)


class LabelSelector(BaseModel):
    """Selector attached to a claim."""

    model_config = ConfigDict(extra="forbid", populate_by_name=True)

    match_labels: dict[str, str] = Field(default_factory=dict, alias="matchLabels")
    match_expressions: list[LabelSelectorRequirement] = Field(
        default_factory=list, alias="matchExpressions"
    )

    def is_empty(self) -> bool:
        return not self.match_labels and not self.match_expressions


def validate_selector(selector: LabelSelector | None) -> bool:
    """Validate a claim selector.

    Returns ``True`` when there is no selector, or it has neither labels nor
    expressions; ``False`` for a valid selector that constrains something.

    Raises:
        SelectorValidationError: On a key other than zone/region, an operator
            other than In/NotIn, or an expression without values.
    """
    if selector is None or selector.is_empty():
        return True
    for label in selector.match_labels:
        if label not in ALLOWED_KEYS:
            raise SelectorValidationError(
                f'key "{label}" is not permitted in selector.matchLabels', key=label
            )
    for expr in selector.match_expressions:
        if expr.key not in ALLOWED_KEYS:
            raise SelectorValidationError(
                f'key "{expr.key}" is not permitted in selector.matchExpressions',
                key=expr.key,
                operator=expr.operator,
            )
        if expr.operator not in ALLOWED_OPERATORS:
            raise SelectorValidationError(
                f'operator "{expr.operator}" is not permitted in selector.matchExpressions',
                key=expr.key,
                operator=expr.operator,
            )
        if not expr.values:
            raise SelectorValidationError(
                f'key "{expr.key}", operator "{expr.operator}" pair does not contain '
                "any value(s) in selector.matchExpressions",
                key=expr.key,
                operator=expr.operator,
            )
    return False


def match_label(selector: LabelSelector | None, key: str) -> str | None:
    """Return the ``matchLabels`` value for *key*, or ``None`` if absent."""
    if selector is None:
        return None
    return selector.match_labels.get(key)


def match_expressions(
    selector: LabelSelector | None, key: str, operator: Operator | str
) -> list[frozenset[str]] | None:
    """Return one value set per expression matching (*key*, *operator*).

    Sets are kept in declaration order and never merged. Returns ``None`` when
    no expression matches.
    """
    if selector is None:
        return None
    op = operator.value if isinstance(operator, Operator) else operator
    found = [
        frozenset(expr.values)
        for expr in selector.match_expressions
        if expr.key == key and expr.operator == op and expr.values
    ]
    return found or None
