"""Unit tests for model descriptors and records."""
import copy

import pydantic
import pytest

from validation_matchers import (
    AssociationKind,
    AssociationTypeError,
    AttributeType,
    ModelDescriptor,
    PresenceRule,
    Record,
    Translations,
    UnknownAttributeError,
    define_model,
)


class TestDefineModel:
    def test_attributes_and_associations(self) -> None:
        model = define_model(
            "Parent",
            {"name": "string", "age": AttributeType.INTEGER},
            {"children": "has_many", "tags": {"kind": "has_and_belongs_to_many"}},
        )
        assert model.name == "parent"
        assert [a.name for a in model.attributes] == ["name", "age"]
        assert model.attribute("age").type is AttributeType.INTEGER  # type: ignore[union-attr]
        assert model.association("tags").kind is AssociationKind.HAS_AND_BELONGS_TO_MANY  # type: ignore[union-attr]
        assert model.declares("children")
        assert not model.declares("missing")

    def test_duplicate_names_rejected(self) -> None:
        with pytest.raises(pydantic.ValidationError, match="duplicate"):
            define_model("example", {"items": "string"}, {"items": "has_many"})

    def test_invalid_model_name_rejected(self) -> None:
        with pytest.raises(pydantic.ValidationError):
            define_model("not a name")

    def test_unknown_attribute_type_rejected(self) -> None:
        with pytest.raises(pydantic.ValidationError):
            define_model("example", {"attr": "uuid"})


class TestValidationBuilders:
    def test_builders_return_new_descriptor(self, example_model: ModelDescriptor) -> None:
        required = example_model.validates_presence_of("attr")
        assert example_model.validations == ()
        assert required.validations == (PresenceRule(attribute="attr"),)

    def test_rules_for(self, example_model: ModelDescriptor) -> None:
        model = example_model.validates_presence_of("attr").validates_format_of("attr", "a")
        assert [r.kind for r in model.rules_for("attr")] == ["presence", "format"]
        assert model.rules_for("other") == ()

    def test_rule_on_undeclared_name_rejected(self, example_model: ModelDescriptor) -> None:
        with pytest.raises(pydantic.ValidationError, match="undeclared"):
            example_model.validates_presence_of("missing")

    def test_presence_of_several_names(self) -> None:
        model = define_model("example", {"a": "string", "b": "string"})
        model = model.validates_presence_of("a", "b", message="required")
        assert [(r.attribute, r.message) for r in model.validations] == [
            ("a", "required"),
            ("b", "required"),
        ]


class TestRecordValues:
    def test_defaults(self, example_model: ModelDescriptor) -> None:
        record = example_model.new()
        assert isinstance(record, Record)
        assert record.attr is None
        assert record.model_name == "example"
        assert record.descriptor is example_model

    def test_assignment_coerces(self) -> None:
        record = define_model("counter", {"count": "integer", "on": "boolean"}).new()
        record.count = "3"
        record.on = "true"
        assert record.count == 3
        assert record.on is True

    def test_bad_value_rejected(self) -> None:
        record = define_model("counter", {"count": "integer"}).new()
        with pytest.raises(pydantic.ValidationError):
            record.count = "three"

    def test_unknown_name(self, example_model: ModelDescriptor) -> None:
        record = example_model.new()
        with pytest.raises(UnknownAttributeError) as exc_info:
            record.read("missing")
        assert exc_info.value.model == "example"
        assert exc_info.value.name == "missing"
        with pytest.raises(UnknownAttributeError):
            record.missing = 1
        assert not hasattr(record, "missing")

    def test_to_dict(self, child_model: ModelDescriptor) -> None:
        parent = define_model("parent", {"name": "string"}, {"children": "has_many"})
        record = parent.new(name="p", children=[child_model.new(name="c")])
        assert record.to_dict() == {"name": "p", "children": [{"name": "c"}]}


class TestAssociations:
    def test_empty_by_default(self) -> None:
        record = define_model("parent", associations={"children": "has_many"}).new()
        assert record.children == []

    def test_associate_appends(self, child_model: ModelDescriptor) -> None:
        record = define_model("parent", associations={"children": "has_many"}).new()
        first, second = child_model.new(name="a"), child_model.new(name="b")
        record.associate("children", first)
        record.associate("children", second)
        assert record.children == [first, second]

    def test_target_is_enforced(self, example_model: ModelDescriptor) -> None:
        parent = define_model(
            "parent", associations={"children": {"kind": "has_many", "target": "Child"}}
        )
        record = parent.new()
        with pytest.raises(AssociationTypeError, match="'child' records"):
            record.associate("children", example_model.new())

    def test_non_records_rejected(self) -> None:
        record = define_model("parent", associations={"children": "has_many"}).new()
        with pytest.raises(AssociationTypeError):
            record.children = ["not a record"]

    def test_associate_unknown_name(self, example_model: ModelDescriptor) -> None:
        with pytest.raises(UnknownAttributeError):
            example_model.new().associate("children")


class TestValidate:
    def test_valid_record(self, required_example_model: ModelDescriptor) -> None:
        record = required_example_model.new(attr="x")
        assert record.is_valid()
        assert record.errors.to_dict() == {}

    def test_errors_are_repopulated(self, required_example_model: ModelDescriptor) -> None:
        record = required_example_model.new()
        assert not record.is_valid()
        assert record.errors.on("attr") == ("can't be blank",)
        record.attr = "x"
        assert record.is_valid()
        assert record.errors.on("attr") == ()

    def test_rules_run_in_order(self, example_model: ModelDescriptor) -> None:
        model = example_model.validates_presence_of("attr").validates_format_of("attr", "abc")
        errors = model.new().validate()
        assert errors.on("attr") == ("can't be blank", "is invalid")

    def test_uses_given_translations(self, required_example_model: ModelDescriptor) -> None:
        translations = Translations()
        translations.store("en", "orm.errors.messages.blank", "is required")
        errors = required_example_model.new().validate(translations)
        assert errors.on("attr") == ("is required",)

    def test_validate_returns_errors_property(
        self, required_example_model: ModelDescriptor
    ) -> None:
        record = required_example_model.new()
        assert record.validate() is record.errors


class TestCopy:
    def test_copy_keeps_values(self, example_model: ModelDescriptor) -> None:
        record = example_model.new(attr="x")
        duplicate = copy.copy(record)
        assert duplicate.attr == "x"
        assert duplicate.descriptor is example_model
        duplicate.attr = "y"
        assert record.attr == "x"

    def test_copy_has_own_association_list(self, child_model: ModelDescriptor) -> None:
        record = define_model("parent", associations={"children": "has_many"}).new()
        child = child_model.new(name="a")
        record.associate("children", child)
        duplicate = copy.copy(record)
        duplicate.associate("children", child_model.new(name="b"))
        assert record.children == [child]
        assert duplicate.children[0] is child

    def test_deepcopy(self, required_example_model: ModelDescriptor) -> None:
        record = required_example_model.new(attr="x")
        duplicate = copy.deepcopy(record)
        assert duplicate.attr == "x"
        assert duplicate.model_name == "example"
        assert duplicate.is_valid()

    def test_assigning_number_to_string_attribute(
        self, example_model: ModelDescriptor
    ) -> None:
        record = example_model.new()
        record.attr = 5
        assert record.attr == "5"
