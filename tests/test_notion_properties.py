"""
Tests for Notion property parsing and extraction.
"""

import pytest

from catalog_api.services.notion.properties import (
    Files,
    Formula,
    Relation,
    RichText,
    Select,
    Title,
    Unknown,
    Url,
    all_relation_ids,
    first_image,
    first_text,
    image_value,
    number_value,
    parse_properties,
    parse_property,
    relation_ids,
    text_value,
)
from tests.fakes import files, formula_number, relation, rich_text, select, title, url


class TestParseProperty:

    def test_uses_type_discriminator(self):
        assert parse_property(title("Hola")) == Title(("Hola",))
        assert parse_property(rich_text("x")) == RichText(("x",))
        assert parse_property(select("Camisetas")) == Select("Camisetas")
        assert parse_property(url("https://a.b")) == Url("https://a.b")
        assert parse_property(relation("a", "b")) == Relation(("a", "b"))

    def test_shape_fallback_without_type(self):
        assert parse_property({"title": [{"plain_text": "Sin tipo"}]}) == Title(("Sin tipo",))
        assert parse_property({"relation": [{"id": "r1"}]}) == Relation(("r1",))

    def test_unknown_type(self):
        parsed = parse_property({"type": "checkbox", "checkbox": True})
        assert isinstance(parsed, Unknown)
        assert parsed.type == "checkbox"

    @pytest.mark.parametrize("raw", [None, "text", 3, []])
    def test_non_dict_is_unknown(self, raw):
        assert isinstance(parse_property(raw), Unknown)

    def test_null_select_is_empty(self):
        assert parse_property({"type": "select", "select": None}) == Select("")

    def test_relation_skips_items_without_id(self):
        assert parse_property({"type": "relation", "relation": [{"id": "a"}, {}, {"id": ""}]}) == Relation(("a",))

    def test_parse_properties_non_dict(self):
        assert parse_properties(None) == {}


class TestTextValue:

    @pytest.mark.parametrize(
        "raw,expected",
        [
            (title("Nombre"), "Nombre"),
            (rich_text("Texto"), "Texto"),
            (select("Opción"), "Opción"),
            ({"type": "formula", "formula": {"type": "string", "string": "calc"}}, "calc"),
            (url("https://acme.test"), "https://acme.test"),
            (formula_number(3), ""),
            (relation("x"), ""),
            (title(""), ""),
        ],
    )
    def test_text_value(self, raw, expected):
        assert text_value(parse_property(raw)) == expected

    def test_missing_property(self):
        assert text_value(None) == ""

    def test_only_first_fragment_is_used(self):
        raw = {"type": "title", "title": [{"plain_text": "Primero"}, {"plain_text": " segundo"}]}
        assert text_value(parse_property(raw)) == "Primero"

    def test_first_text_skips_empty_candidates(self):
        props = parse_properties({"Name": title(""), "Nombre": rich_text("Acme SA")})
        assert first_text(props, ("Name", "Nombre", "Company")) == "Acme SA"
        assert first_text(props, ("Company",), default="Empresa") == "Empresa"


class TestImageValue:

    def test_url_first(self):
        assert image_value(parse_property(url("https://img/a.png"))) == "https://img/a.png"

    def test_hosted_file(self):
        assert image_value(parse_property(files("https://s3/logo.png"))) == "https://s3/logo.png"

    def test_external_file(self):
        assert image_value(parse_property(files("https://cdn/logo.png", external=True))) == "https://cdn/logo.png"

    def test_empty_files(self):
        assert image_value(Files()) == ""

    def test_first_image_across_names(self):
        props = parse_properties({"Logo": files(), "Imagen": url("https://img/x.jpg")})
        assert first_image(props, ("Logo", "logo", "Image", "Imagen")) == "https://img/x.jpg"


class TestNumberValue:

    def test_formula_number(self):
        assert number_value(parse_property(formula_number(12.5))) == 12.5

    def test_plain_number(self):
        assert number_value(parse_property({"type": "number", "number": 7})) == 7.0

    def test_missing_or_null(self):
        assert number_value(None) == 0
        assert number_value(parse_property(formula_number(None))) == 0
        assert number_value(Formula(string="7")) == 0


class TestRelationIds:

    def test_named_relations(self):
        props = parse_properties({
            "Empresa": relation("a", "b"),
            "Company": relation("c"),
            "Other": relation("z"),
            "Name": title("x"),
        })
        assert relation_ids(props, ["Empresa", "Company", "Missing", "Name"]) == ["a", "b", "c"]

    def test_all_relations_ignores_names(self):
        props = parse_properties({
            "Cliente": relation("a"),
            "Proveedor": relation("b"),
            "Name": title("x"),
        })
        assert sorted(all_relation_ids(props)) == ["a", "b"]
