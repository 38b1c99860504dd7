"""
Value Translation Layer

Converts plain Python items into DynamoDB's typed wire format and back,
on top of boto3's ``TypeSerializer`` / ``TypeDeserializer``.

Before serialization each value is normalised according to ``TranslateConfig``:

- ``None`` values inside mappings are dropped (``remove_none_values``)
- pydantic models, dataclasses and plain objects become mappings
  (``convert_class_instance_to_map``)
- floats become ``Decimal`` (``convert_floats_to_decimal``)
- datetimes and dates are stored as ISO-8601 strings, enum members as their value

None of this validates item shape; DynamoDB rejects malformed items itself.
"""

import dataclasses
import logging
from collections.abc import Mapping
from datetime import date, datetime
from decimal import Decimal
from enum import Enum
from typing import Any, Dict, Optional

from boto3.dynamodb.types import Binary, TypeDeserializer, TypeSerializer
from pydantic import BaseModel, ConfigDict, Field

from .exceptions import ValidationError

logger = logging.getLogger(__name__)


class TranslateConfig(BaseModel):
    """Marshalling options applied by ``DocumentTranslator``."""

    remove_none_values: bool = Field(
        default=True,
        description="Drop mapping entries whose value is None instead of storing NULL"
    )

    convert_class_instance_to_map: bool = Field(
        default=True,
        description="Flatten pydantic models, dataclasses and plain objects to mappings"
    )

    convert_floats_to_decimal: bool = Field(
        default=True,
        description="Convert float values to Decimal before serialization"
    )

    wrap_numbers: bool = Field(
        default=True,
        description="Return numbers as Decimal; when False they become int or float"
    )

    model_config = ConfigDict(frozen=True)


class NativeNumberDeserializer(TypeDeserializer):
    """Deserializer returning int/float instead of Decimal."""

    def _deserialize_n(self, value: str) -> Any:
        number = Decimal(value)
        if number == number.to_integral_value():
            return int(number)
        return float(number)


class DocumentTranslator:
    """Marshalls plain items to DynamoDB attribute values and back."""

    _PASSTHROUGH_TYPES = (str, bytes, bytearray, bool, int, Decimal, Binary)

    def __init__(self, translate_config: Optional[TranslateConfig] = None):
        self.config = translate_config or TranslateConfig()
        self._serializer = TypeSerializer()
        if self.config.wrap_numbers:
            self._deserializer = TypeDeserializer()
        else:
            self._deserializer = NativeNumberDeserializer()

    # -------------------------------------------------------------------------
    # Normalisation
    # -------------------------------------------------------------------------

    def normalize(self, value: Any) -> Any:
        """Normalise a value according to the translate configuration."""
        if value is None or isinstance(value, self._PASSTHROUGH_TYPES):
            return value

        if isinstance(value, float):
            if self.config.convert_floats_to_decimal:
                return Decimal(str(value))
            return value

        if isinstance(value, Enum):
            return self.normalize(value.value)

        if isinstance(value, datetime):
            return value.isoformat()
        if isinstance(value, date):
            return value.isoformat()

        if isinstance(value, Mapping):
            return self._normalize_mapping(value)

        if isinstance(value, (list, tuple)):
            return [self.normalize(element) for element in value]

        if isinstance(value, (set, frozenset)):
            return {self.normalize(element) for element in value}

        if self.config.convert_class_instance_to_map:
            converted = self._instance_to_map(value)
            if converted is not None:
                return self._normalize_mapping(converted)

        return value

    def _normalize_mapping(self, mapping: Mapping) -> Dict[str, Any]:
        normalized = {}
        for key, value in mapping.items():
            if value is None and self.config.remove_none_values:
                continue
            normalized[key] = self.normalize(value)
        return normalized

    @staticmethod
    def _instance_to_map(value: Any) -> Optional[Dict[str, Any]]:
        if isinstance(value, BaseModel):
            return value.model_dump()
        if dataclasses.is_dataclass(value) and not isinstance(value, type):
            return dataclasses.asdict(value)
        if hasattr(value, '__dict__') and not isinstance(value, type):
            return {k: v for k, v in vars(value).items() if not k.startswith('_')}
        return None

    # -------------------------------------------------------------------------
    # Serialization
    # -------------------------------------------------------------------------

    def marshall_value(self, value: Any) -> Dict[str, Any]:
        """Serialize a single value to a DynamoDB attribute value."""
        normalized = self.normalize(value)
        try:
            return self._serializer.serialize(normalized)
        except TypeError as e:
            logger.error(f"Failed to serialize value of type {type(normalized).__name__}: {e}")
            raise ValidationError(f"Cannot serialize value for DynamoDB: {e}", original_error=e) from e

    def marshall(self, item: Any) -> Dict[str, Dict[str, Any]]:
        """Serialize an item (mapping or class instance) to DynamoDB format.

        Raises:
            ValidationError: If the item is not a mapping after normalisation,
                or holds a value the serializer does not support
        """
        normalized = self.normalize(item)
        if not isinstance(normalized, Mapping):
            raise ValidationError(
                f"Item must translate to a mapping, got {type(item).__name__}"
            )

        marshalled = {}
        for name, value in normalized.items():
            try:
                marshalled[name] = self._serializer.serialize(value)
            except TypeError as e:
                logger.error(f"Failed to serialize attribute '{name}': {e}")
                raise ValidationError(
                    f"Cannot serialize attribute '{name}' for DynamoDB: {e}",
                    errors={name: str(e)},
                    original_error=e
                ) from e
        return marshalled

    def marshall_values(self, values: Mapping) -> Dict[str, Dict[str, Any]]:
        """Serialize an ExpressionAttributeValues mapping, keeping every token."""
        return {token: self.marshall_value(value) for token, value in values.items()}

    def unmarshall(self, item: Mapping) -> Dict[str, Any]:
        """Deserialize a DynamoDB item to plain Python values."""
        return {name: self._deserializer.deserialize(value) for name, value in item.items()}

    def translate_output(self, response: Mapping) -> Dict[str, Any]:
        """Unmarshall the item-bearing fields of a raw DynamoDB response."""
        output = dict(response)

        for field in ('Item', 'Attributes', 'LastEvaluatedKey'):
            if output.get(field) is not None:
                output[field] = self.unmarshall(output[field])

        if output.get('Items') is not None:
            output['Items'] = [self.unmarshall(item) for item in output['Items']]

        if output.get('UnprocessedItems'):
            output['UnprocessedItems'] = {
                table: [self._unmarshall_write_request(request) for request in requests]
                for table, requests in output['UnprocessedItems'].items()
            }

        return output

    def _unmarshall_write_request(self, request: Mapping) -> Dict[str, Any]:
        if 'PutRequest' in request:
            return {'PutRequest': {'Item': self.unmarshall(request['PutRequest']['Item'])}}
        if 'DeleteRequest' in request:
            return {'DeleteRequest': {'Key': self.unmarshall(request['DeleteRequest']['Key'])}}
        return dict(request)


__all__ = [
    "TranslateConfig",
    "DocumentTranslator",
    "NativeNumberDeserializer",
]
