"""
Expression Placeholder Generation

DynamoDB expressions cannot reference reserved words (``name``, ``status``,
``data`` ...) or arbitrary values directly. Every attribute used in a key
condition or filter expression is therefore referenced through a pair of
placeholders::

    #name  ->  ExpressionAttributeNames  {'#name': 'name'}
    :name  ->  ExpressionAttributeValues {':name': 'order-1'}

``build_expression_fragment`` derives that pair for a single attribute.
``ExpressionBuilder`` collects fragments for one request and keeps tokens
unique when two attributes would map to the same placeholder.
"""

import re
from typing import Any, Dict, Optional

from pydantic import BaseModel, ConfigDict, Field

_INVALID_TOKEN_CHARS = re.compile(r'[^A-Za-z0-9_]')


class Attribute(BaseModel):
    """An attribute name and the value a condition compares it with."""

    name: str = Field(..., min_length=1, description="Attribute name as stored in the table")
    value: Any = Field(..., description="Value used in the condition")

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)


class ExpressionFragment(BaseModel):
    """Placeholder tokens for one attribute plus their lookup mappings."""

    name_token: str
    value_token: str
    names: Dict[str, str]
    values: Dict[str, Any]

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)


def _token_base(name: str) -> str:
    return _INVALID_TOKEN_CHARS.sub('_', name)


def build_expression_fragment(attribute: Attribute, suffix: Optional[int] = None) -> ExpressionFragment:
    """Build placeholder tokens for an attribute.

    Tokens are derived from the attribute name only, so two attributes
    sharing a name produce the same tokens. Use ``ExpressionBuilder`` when
    several attributes go into one expression.

    Args:
        attribute: Attribute to reference
        suffix: Optional positional suffix appended to both tokens

    Returns:
        ExpressionFragment with tokens and single-entry mappings

    Example:
        >>> fragment = build_expression_fragment(Attribute(name='status', value='ACTIVE'))
        >>> fragment.name_token, fragment.value_token
        ('#status', ':status')
        >>> fragment.names, fragment.values
        ({'#status': 'status'}, {':status': 'ACTIVE'})
    """
    base = _token_base(attribute.name)
    if suffix:
        base = f"{base}_{suffix}"

    name_token = f"#{base}"
    value_token = f":{base}"
    return ExpressionFragment(
        name_token=name_token,
        value_token=value_token,
        names={name_token: attribute.name},
        values={value_token: attribute.value},
    )


class ExpressionBuilder:
    """Accumulates placeholder mappings for a single request.

    A token already bound to the same name (or value) is reused. A token
    bound to something else gets a positional suffix (``#id_1``, ``:id_1``)
    until both tokens are free, so combined expressions never silently
    rebind a placeholder.
    """

    def __init__(self):
        self.names: Dict[str, str] = {}
        self.values: Dict[str, Any] = {}

    def _collides(self, fragment: ExpressionFragment) -> bool:
        name_taken = fragment.name_token in self.names and \
            self.names[fragment.name_token] != fragment.names[fragment.name_token]
        value_taken = fragment.value_token in self.values and \
            not _same_value(self.values[fragment.value_token], fragment.values[fragment.value_token])
        return name_taken or value_taken

    def add(self, attribute: Attribute) -> ExpressionFragment:
        """Register an attribute and return its (possibly suffixed) fragment."""
        fragment = build_expression_fragment(attribute)
        suffix = 0
        while self._collides(fragment):
            suffix += 1
            fragment = build_expression_fragment(attribute, suffix)

        self.names.update(fragment.names)
        self.values.update(fragment.values)
        return fragment

    def equals(self, attribute: Attribute) -> str:
        """Return ``#name = :name`` for an attribute."""
        fragment = self.add(attribute)
        return f"{fragment.name_token} = {fragment.value_token}"

    def begins_with(self, attribute: Attribute) -> str:
        """Return ``begins_with(#name, :name)`` for an attribute."""
        fragment = self.add(attribute)
        return f"begins_with({fragment.name_token}, {fragment.value_token})"

    def contains(self, attribute: Attribute) -> str:
        """Return ``contains(#name, :name)`` for an attribute."""
        fragment = self.add(attribute)
        return f"contains({fragment.name_token}, {fragment.value_token})"


def _same_value(left: Any, right: Any) -> bool:
    # bool is an int subclass: True must not reuse the token of 1
    return type(left) is type(right) and left == right


__all__ = [
    "Attribute",
    "ExpressionFragment",
    "ExpressionBuilder",
    "build_expression_fragment",
]
