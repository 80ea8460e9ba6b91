"""
Tests for ModelViewModel: snapshot diffing over plain, dataclass and pydantic models.
"""
from dataclasses import dataclass
from functools import cached_property
from typing import ClassVar

import pytest
from pydantic import BaseModel, PrivateAttr

from dynview import MISSING, MemberNotFoundError, ModelViewModel
from dynview.core.mirror import members_of


class Person:
    first_name: str
    last_name: str
    species: ClassVar[str] = "human"

    def __init__(self, first_name="John", last_name="Doe"):
        self.first_name = first_name
        self.last_name = last_name

    @property
    def full_name(self):
        return f"{self.first_name} {self.last_name}"

    def rename(self, first_name, last_name):
        self.first_name = first_name
        self.last_name = last_name
        return self.full_name

    def _internal(self):
        pass

    @staticmethod
    def helper():
        pass


@dataclass
class Counter:
    value: int = 0

    @property
    def doubled(self):
        return self.value * 2

    def increment(self, step=1):
        self.value += step


class Invoice(BaseModel):
    price: float
    quantity: int = 1

    @property
    def total(self):
        return self.price * self.quantity


class TestMembers:
    def test_plain_class_members(self):
        members = members_of(Person)
        assert members.properties == ("first_name", "last_name", "full_name")
        assert members.methods == ("rename",)

    def test_dataclass_members(self):
        members = members_of(Counter)
        assert members.properties == ("value", "doubled")
        assert members.methods == ("increment",)

    def test_pydantic_members_skip_base_model_api(self):
        members = members_of(Invoice)
        assert members.properties == ("price", "quantity", "total")
        assert "model_dump" not in members.methods

    def test_cached_property_is_a_property(self):
        class Report:
            @cached_property
            def summary(self):
                return "ok"

        assert members_of(Report).properties == ("summary",)

    def test_member_table_is_shared_per_type(self):
        first = ModelViewModel(Person())
        second = ModelViewModel(Person("A", "B"))
        assert first.members is second.members
        assert members_of(Person) is first.members


class TestSnapshot:
    def test_get_reads_snapshot(self):
        vm = ModelViewModel(Person("Ada", "Lovelace"))
        assert vm.get("full_name") == "Ada Lovelace"
        assert vm.first_name == "Ada"
        assert vm["last_name"] == "Lovelace"
        assert vm.get("missing") is MISSING

    def test_direct_model_changes_are_not_seen_until_notified(self, recorder):
        person = Person()
        vm = ModelViewModel(person)
        vm.property_changed.connect(recorder)

        person.first_name = "Jane"
        assert vm.first_name == "John"

        vm.notify_changed_properties()
        assert vm.first_name == "Jane"
        assert recorder.names == ["first_name", "full_name"]

    def test_set_notifies_dependent_properties(self, recorder):
        vm = ModelViewModel(Person())
        vm.property_changed.connect(recorder)

        vm.set("first_name", "Jane")

        assert recorder.names == ["first_name", "full_name"]
        assert "last_name" not in recorder.names
        assert vm.model.first_name == "Jane"
        assert vm.full_name == "Jane Doe"

    def test_attribute_assignment_writes_model(self, recorder):
        vm = ModelViewModel(Person())
        vm.property_changed.connect(recorder)
        vm.last_name = "Smith"
        assert vm.model.last_name == "Smith"
        assert recorder.names == ["last_name", "full_name"]

    def test_setting_same_value_raises_nothing(self, recorder):
        vm = ModelViewModel(Person())
        vm.property_changed.connect(recorder)
        vm.set("first_name", "John")
        assert recorder.names == []

    def test_unknown_property_set_fails(self, recorder):
        vm = ModelViewModel(Person())
        vm.property_changed.connect(recorder)
        with pytest.raises(MemberNotFoundError):
            vm.set("middle_name", "X")
        with pytest.raises(AttributeError):
            vm.middle_name = "X"
        assert recorder.names == []


class TestInvoke:
    def test_invoke_notifies_changes(self, recorder):
        vm = ModelViewModel(Counter())
        vm.property_changed.connect(recorder)

        vm.invoke("increment", 2)

        assert vm.value == 2
        assert vm.doubled == 4
        assert recorder.names == ["value", "doubled"]

    def test_method_call_through_attribute(self, recorder):
        vm = ModelViewModel(Person())
        vm.property_changed.connect(recorder)

        result = vm.rename("Grace", "Doe")

        assert result == "Grace Doe"
        assert recorder.names == ["first_name", "full_name"]

    def test_unknown_method_fails_without_notification(self, recorder):
        vm = ModelViewModel(Person())
        vm.property_changed.connect(recorder)

        with pytest.raises(MemberNotFoundError):
            vm.invoke("explode")
        with pytest.raises(MemberNotFoundError):
            vm.invoke("_internal")
        with pytest.raises(MemberNotFoundError):
            vm.invoke("helper")

        assert recorder.names == []

    def test_pydantic_model(self, recorder):
        vm = ModelViewModel(Invoice(price=2.5))
        vm.property_changed.connect(recorder)
        vm.quantity = 4
        assert vm.total == 10.0
        assert recorder.names == ["quantity", "total"]


class TestConstruction:
    def test_from_class(self):
        vm = ModelViewModel(Person)
        assert isinstance(vm.model, Person)
        assert vm.full_name == "John Doe"

    def test_from_zero_arg_function(self):
        vm = ModelViewModel(lambda: Person("Ada", "L"))
        assert vm.first_name == "Ada"

    def test_from_factory(self):
        vm = ModelViewModel.from_factory(lambda: Counter(value=3))
        assert vm.doubled == 6

    def test_model_is_not_copied(self):
        person = Person()
        vm = ModelViewModel(person)
        vm.first_name = "Jane"
        assert person.first_name == "Jane"

    def test_contains_and_keys(self):
        vm = ModelViewModel(Counter())
        assert "value" in vm
        assert "increment" not in vm
        assert vm.keys() == ["value", "doubled"]


def test_pydantic_private_attributes_do_not_add_methods():
    class Account(BaseModel):
        balance: int = 0
        _audit: list = PrivateAttr(default_factory=list)

        def deposit(self, amount):
            self.balance += amount

    assert members_of(Account).methods == ("deposit",)
