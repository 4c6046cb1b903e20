"""
Tests for schema and generated data containers.
"""
import dataclasses
from typing import Any

import pytest
from schemaexport import ConfigurationError, EntityDefinition, GeneratedData
from schemaexport import PropertyDefinition, Schema
from schemaexport.data import get_instances

from tests.fixtures import postponed
from tests.fixtures.models import Company, Customer, Order, Product


class TestSchema:

    def test_generation_order_defaults_to_declaration(self):
        schema = Schema([EntityDefinition(Company), EntityDefinition(Customer)])
        assert schema.generation_order == (Company, Customer)

    def test_explicit_generation_order(self):
        schema = Schema([EntityDefinition(Customer), EntityDefinition(Company)],
                        generation_order=[Company, Customer])
        assert schema.generation_order == (Company, Customer)
        assert [e.entity_type for e in schema.entities] == [Customer, Company]

    def test_entity_lookup(self):
        definition = EntityDefinition(Company, table_name='companies')
        schema = Schema([definition])
        assert schema.entity(Company) is definition
        assert schema.entity(Order) is None

    def test_duplicate_entity_rejected(self):
        with pytest.raises(ConfigurationError):
            Schema([EntityDefinition(Company), EntityDefinition(Company)])


class TestEntityDefinition:

    def test_property_lookup(self):
        name = PropertyDefinition('name', column_name='company_name')
        definition = EntityDefinition(Company, properties=[name])
        assert definition.properties == (name,)
        assert definition.property('name') is name
        assert definition.property('id') is None

    def test_duplicate_property_rejected(self):
        with pytest.raises(ConfigurationError):
            EntityDefinition(Company, properties=(PropertyDefinition('name'),
                                                  PropertyDefinition('name')))

    def test_immutable(self):
        definition = EntityDefinition(Company)
        with pytest.raises(dataclasses.FrozenInstanceError):
            definition.table_name = 'other'


class TestPropertyDefinitionOutputType:

    def test_no_conversion(self):
        definition = PropertyDefinition('name')
        assert definition.has_conversion is False
        assert definition.output_type is None

    def test_declared(self):
        assert PropertyDefinition('x', conversion=lambda v: v, returns=int).output_type is int

    def test_from_annotation(self):
        def to_cents(value) -> int:
            return int(value * 100)
        assert PropertyDefinition('x', conversion=to_cents).output_type is int

    def test_postponed_annotation(self):
        """Unresolvable parameter annotations do not hide the return type"""
        assert PropertyDefinition('amount', conversion=postponed.to_cents).output_type is int

    def test_class_conversion(self):
        assert PropertyDefinition('x', conversion=str).output_type is str

    def test_unknown(self):
        assert PropertyDefinition('x', conversion=lambda v: v).output_type is Any


class TestGeneratedData:

    def test_preserves_order(self):
        data = GeneratedData([(Product, [1]), (Company, [2, 3])])
        assert list(data) == [Product, Company]
        assert data.get(Company) == (2, 3)

    def test_from_mapping(self):
        companies = [Company(1, 'a')]
        data = GeneratedData({Company: companies})
        assert data[Company] == tuple(companies)
        assert len(data) == 1

    def test_missing_type_is_empty(self):
        data = GeneratedData()
        assert data.get(Company) == ()
        assert get_instances(data, Company) == ()

    def test_get_instances_from_plain_dict(self):
        assert get_instances({}, Company) == ()
        assert get_instances({Company: [1]}, Company) == [1]

    def test_read_only_copy(self):
        companies = [Company(1, 'a')]
        data = GeneratedData({Company: companies})
        companies.append(Company(2, 'b'))
        assert len(data.get(Company)) == 1


if __name__ == '__main__':
    __import__('pytest').main([__file__])
