"""
Tests for the value translation layer (translation.py).
"""

from dataclasses import dataclass
from datetime import date, datetime, timezone
from decimal import Decimal
from enum import Enum
from typing import Optional

import pytest
from pydantic import BaseModel

from dynamodb_adapter.exceptions import ValidationError
from dynamodb_adapter.translation import DocumentTranslator, TranslateConfig


class Status(Enum):
    ACTIVE = "ACTIVE"


class Customer(BaseModel):
    customer_id: str
    nickname: Optional[str] = None


@dataclass
class Address:
    city: str
    zip_code: Optional[str] = None


class Plain:
    def __init__(self):
        self.name = "plain"
        self._secret = "hidden"


class Opaque:
    __slots__ = ()


@pytest.fixture
def translator():
    return DocumentTranslator()


class TestTranslateConfig:
    """Test TranslateConfig defaults."""

    def test_defaults(self):
        config = TranslateConfig()

        assert config.remove_none_values is True
        assert config.convert_class_instance_to_map is True
        assert config.convert_floats_to_decimal is True
        assert config.wrap_numbers is True


class TestMarshall:
    """Test DocumentTranslator.marshall()."""

    def test_scalars(self, translator):
        marshalled = translator.marshall({'s': 'text', 'n': 5, 'b': True, 'bin': b'\x00'})

        assert marshalled['s'] == {'S': 'text'}
        assert marshalled['n'] == {'N': '5'}
        assert marshalled['b'] == {'BOOL': True}
        assert 'B' in marshalled['bin']

    def test_none_values_dropped_recursively(self, translator):
        marshalled = translator.marshall({'pk': 'a', 'gone': None, 'nested': {'keep': 1, 'gone': None}})

        assert marshalled == {
            'pk': {'S': 'a'},
            'nested': {'M': {'keep': {'N': '1'}}},
        }

    def test_none_values_kept_when_disabled(self):
        translator = DocumentTranslator(TranslateConfig(remove_none_values=False))

        assert translator.marshall({'pk': 'a', 'empty': None}) == {
            'pk': {'S': 'a'},
            'empty': {'NULL': True},
        }

    def test_none_inside_list_is_null(self, translator):
        assert translator.marshall({'values': [1, None]}) == {
            'values': {'L': [{'N': '1'}, {'NULL': True}]}
        }

    def test_floats_become_decimal(self, translator):
        assert translator.marshall({'price': 19.99}) == {'price': {'N': '19.99'}}

    def test_floats_rejected_without_conversion(self):
        translator = DocumentTranslator(TranslateConfig(convert_floats_to_decimal=False))

        with pytest.raises(ValidationError, match="price"):
            translator.marshall({'price': 19.99})

    def test_datetime_enum_and_date(self, translator):
        created = datetime(2024, 1, 1, 10, 0, tzinfo=timezone.utc)

        marshalled = translator.marshall({
            'created_at': created,
            'day': date(2024, 1, 2),
            'status': Status.ACTIVE,
        })

        assert marshalled['created_at'] == {'S': '2024-01-01T10:00:00+00:00'}
        assert marshalled['day'] == {'S': '2024-01-02'}
        assert marshalled['status'] == {'S': 'ACTIVE'}

    def test_pydantic_model_item(self, translator):
        marshalled = translator.marshall(Customer(customer_id='c-1'))

        assert marshalled == {'customer_id': {'S': 'c-1'}}

    def test_nested_dataclass_and_plain_object(self, translator):
        marshalled = translator.marshall({'pk': 'a', 'address': Address(city='Oslo'), 'obj': Plain()})

        assert marshalled['address'] == {'M': {'city': {'S': 'Oslo'}}}
        assert marshalled['obj'] == {'M': {'name': {'S': 'plain'}}}

    def test_class_instances_rejected_without_conversion(self):
        translator = DocumentTranslator(TranslateConfig(convert_class_instance_to_map=False))

        with pytest.raises(ValidationError, match="address"):
            translator.marshall({'pk': 'a', 'address': Address(city='Oslo')})

        with pytest.raises(ValidationError, match="must translate to a mapping"):
            translator.marshall(Customer(customer_id='c-1'))

    def test_unsupported_value(self, translator):
        with pytest.raises(ValidationError) as exc_info:
            translator.marshall({'pk': 'a', 'opaque': Opaque()})

        assert exc_info.value.errors.keys() == {'opaque'}
        assert isinstance(exc_info.value.original_error, TypeError)

    def test_sets(self, translator):
        assert translator.marshall({'tags': {'x'}}) == {'tags': {'SS': ['x']}}

    def test_marshall_values_keeps_none(self, translator):
        assert translator.marshall_values({':a': 'x', ':b': None}) == {
            ':a': {'S': 'x'},
            ':b': {'NULL': True},
        }


class TestUnmarshall:
    """Test DocumentTranslator.unmarshall() and translate_output()."""

    def test_numbers_wrapped_by_default(self, translator):
        item = translator.unmarshall({'n': {'N': '5'}, 'f': {'N': '1.5'}})

        assert item == {'n': Decimal('5'), 'f': Decimal('1.5')}
        assert isinstance(item['n'], Decimal)

    def test_native_numbers(self):
        translator = DocumentTranslator(TranslateConfig(wrap_numbers=False))

        item = translator.unmarshall({'n': {'N': '5'}, 'f': {'N': '1.5'}, 'ns': {'NS': ['1', '2']}})

        assert item == {'n': 5, 'f': 1.5, 'ns': {1, 2}}
        assert isinstance(item['n'], int)
        assert isinstance(item['f'], float)

    def test_translate_output(self, translator):
        response = {
            'Items': [{'pk': {'S': 'a'}}],
            'LastEvaluatedKey': {'pk': {'S': 'a'}},
            'Count': 1,
        }

        assert translator.translate_output(response) == {
            'Items': [{'pk': 'a'}],
            'LastEvaluatedKey': {'pk': 'a'},
            'Count': 1,
        }

    def test_translate_output_item_and_attributes(self, translator):
        response = {'Item': {'pk': {'S': 'a'}}, 'Attributes': {'n': {'N': '1'}}}

        assert translator.translate_output(response) == {'Item': {'pk': 'a'}, 'Attributes': {'n': Decimal('1')}}

    def test_translate_output_without_item(self, translator):
        assert translator.translate_output({'ResponseMetadata': {}}) == {'ResponseMetadata': {}}

    def test_translate_unprocessed_items(self, translator):
        response = {
            'UnprocessedItems': {
                'items': [
                    {'PutRequest': {'Item': {'pk': {'S': 'a'}}}},
                    {'DeleteRequest': {'Key': {'pk': {'S': 'b'}}}},
                ]
            }
        }

        assert translator.translate_output(response)['UnprocessedItems'] == {
            'items': [
                {'PutRequest': {'Item': {'pk': 'a'}}},
                {'DeleteRequest': {'Key': {'pk': 'b'}}},
            ]
        }
