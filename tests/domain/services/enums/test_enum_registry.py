#!/usr/bin/env python3

"""Unit tests for EnumRegistry and the enum declaration parser."""

import pytest

from dwarf_argspec.domain.exceptions import EnumParseError
from dwarf_argspec.domain.services.enums import EnumRegistry, parse_enum_string


class TestParseEnumString:
    """Tests for parse_enum_string()."""

    @pytest.mark.unit
    def test_explicit_values_keep_order(self):
        """Test enumerators are kept in declaration order."""
        info = parse_enum_string("enum color { RED=0,GREEN=1,BLUE=5 }")
        assert info.name == "color"
        assert [(e.name, e.value) for e in info.enumerators] == [
            ("RED", 0),
            ("GREEN", 1),
            ("BLUE", 5),
        ]

    @pytest.mark.unit
    def test_implicit_values_continue_from_previous(self):
        """Test enumerators without a value follow the previous one."""
        info = parse_enum_string("enum e { A, B = 10, C, D=-2, E }")
        assert [(e.name, e.value) for e in info.enumerators] == [
            ("A", 0),
            ("B", 10),
            ("C", 11),
            ("D", -2),
            ("E", -1),
        ]

    @pytest.mark.unit
    def test_hex_values_and_trailing_comma(self):
        """Test hex literals and a trailing comma are accepted."""
        info = parse_enum_string("enum flags { F_READ=0x1, F_WRITE=0x2, };")
        assert [e.value for e in info.enumerators] == [1, 2]

    @pytest.mark.unit
    def test_synthesized_names_are_accepted(self):
        """Test CU-derived names containing slashes parse."""
        info = parse_enum_string("enum src/main_c_2d { X=1 }")
        assert info.name == "src/main_c_2d"

    @pytest.mark.unit
    @pytest.mark.parametrize(
        "declaration",
        [
            "color { RED=0 }",
            "enum color RED=0",
            "enum color { }",
            "enum color { 1RED=0 }",
            "enum color { RED=zero }",
        ],
    )
    def test_malformed_declarations_raise(self, declaration):
        """Test malformed declarations raise EnumParseError."""
        with pytest.raises(EnumParseError):
            parse_enum_string(declaration)


class TestRegistry:
    """Tests for registration and trace-time lookup."""

    @pytest.mark.unit
    def test_register_then_lookup(self, registry):
        """Test registered enums can be looked up and rendered."""
        registry.register("color", "RED=0,GREEN=1,BLUE=5")

        assert "color" in registry
        assert len(registry) == 1
        assert registry.names() == ["color"]
        assert registry.declarations() == ["enum color { RED=0,GREEN=1,BLUE=5 }"]
        assert registry.render_value("color", 5) == "BLUE"
        assert registry.render_value("color", 3) == "3"

    @pytest.mark.unit
    def test_render_unknown_enum_prints_number(self, registry):
        """Test rendering an unregistered enum falls back to the number."""
        assert registry.render_value("missing", -4) == "-4"

    @pytest.mark.unit
    def test_reregistration_overwrites(self, registry):
        """Test a later registration replaces the earlier definition."""
        registry.register("mode", "A=0")
        registry.register("mode", "A=0,B=1")
        assert len(registry) == 1
        assert registry.render_value("mode", 1) == "B"

    @pytest.mark.unit
    def test_register_failure_is_not_raised(self, registry):
        """Test a declaration that fails to parse is only logged."""
        registry.register("bad", "not an enumerator")
        assert "bad" not in registry

    @pytest.mark.unit
    def test_clear(self, registry):
        """Test clear() empties the registry."""
        registry.register("color", "RED=0")
        registry.clear()
        assert len(registry) == 0

    @pytest.mark.unit
    def test_registries_are_independent(self):
        """Test two registries do not share definitions."""
        first, second = EnumRegistry(), EnumRegistry()
        first.register("color", "RED=0")
        assert "color" not in second


class TestExtractMembers:
    """Tests for reading enumerators from DWARF."""

    @pytest.mark.unit
    def test_members_in_declaration_order(self, cu):
        """Test extraction keeps DIE order and values."""
        color = cu.enum("color", [("RED", 0), ("GREEN", 1), ("BLUE", 5)])
        members = EnumRegistry.extract_members(color)
        assert [(m.name, m.value) for m in members] == [("RED", 0), ("GREEN", 1), ("BLUE", 5)]

    @pytest.mark.unit
    def test_stops_at_first_non_enumerator(self, cu):
        """Test only the leading run of enumerator children is read."""
        color = cu.enum("color", [("RED", 0)])
        cu.die("DW_TAG_variable", "junk", parent=color)
        cu.die("DW_TAG_enumerator", "LATE", parent=color).set_attr(
            "DW_AT_const_value", "DW_FORM_sdata", 9
        )
        assert [m.name for m in EnumRegistry.extract_members(color)] == ["RED"]

    @pytest.mark.unit
    def test_no_children_is_empty(self, cu):
        """Test an enum declaration without children has no members."""
        assert EnumRegistry.extract_members(cu.enum("opaque", [])) == []

    @pytest.mark.unit
    def test_signed_underlying_type_sign_extends(self, cu):
        """Test fixed-size forms are sign-extended for signed enums."""
        int_t = cu.base("int", encoding=0x05)
        enum = cu.enum("e", [("NEG", 0xFF), ("POS", 0x7F)], form="DW_FORM_data1", underlying=int_t)
        assert [m.value for m in EnumRegistry.extract_members(enum)] == [-1, 127]

    @pytest.mark.unit
    def test_unsigned_underlying_type_keeps_value(self, cu):
        """Test unsigned enums keep large fixed-size values."""
        uint_t = cu.base("unsigned int", encoding=0x08)
        enum = cu.enum("e", [("BIG", 0xFF)], form="DW_FORM_data1", underlying=uint_t)
        assert [m.value for m in EnumRegistry.extract_members(enum)] == [255]

    @pytest.mark.unit
    def test_underlying_type_through_typedef(self, cu):
        """Test the underlying base type is found through a typedef."""
        int_t = cu.typedef("int32_t", cu.base("int", encoding=0x05))
        enum = cu.enum("e", [("NEG", 0xFFFF)], form="DW_FORM_data2", underlying=int_t)
        assert [m.value for m in EnumRegistry.extract_members(enum)] == [-1]

    @pytest.mark.unit
    def test_enumerator_without_value_is_skipped(self, cu):
        """Test enumerators lacking DW_AT_const_value are skipped."""
        enum = cu.enum("e", [("A", 1)])
        cu.die("DW_TAG_enumerator", "B", parent=enum)
        assert [m.name for m in EnumRegistry.extract_members(enum)] == ["A"]

    @pytest.mark.unit
    def test_data16_value_is_decoded(self, cu):
        """Test 128-bit enumerators given as byte lists are decoded."""
        uint128 = cu.base("unsigned __int128", encoding=0x07)
        big = list((1 << 100).to_bytes(16, "little"))
        one = list((1).to_bytes(16, "little"))
        enum = cu.enum(
            "wide", [("A", one), ("B", big)], form="DW_FORM_data16", underlying=uint128
        )

        assert [(m.name, m.value) for m in EnumRegistry.extract_members(enum)] == [
            ("A", 1),
            ("B", 1 << 100),
        ]

    @pytest.mark.unit
    def test_signed_data16_value(self, cu):
        """Test byte list values of signed enums are two's complement."""
        int128 = cu.base("__int128", encoding=0x05)
        enum = cu.enum("wide", [("NEG", [0xFF] * 16)], form="DW_FORM_data16", underlying=int128)
        assert [m.value for m in EnumRegistry.extract_members(enum)] == [-1]

    @pytest.mark.unit
    def test_non_integer_value_is_skipped(self, cu):
        """Test values that are neither integers nor byte blocks are skipped."""
        enum = cu.enum("e", [("A", 1)])
        cu.die("DW_TAG_enumerator", "B", parent=enum).set_attr(
            "DW_AT_const_value", "DW_FORM_exprloc", [0x30]
        )
        assert [m.name for m in EnumRegistry.extract_members(enum)] == ["A"]


class TestNameFor:
    """Tests for enum naming."""

    @pytest.mark.unit
    def test_named_enum_uses_own_name(self, cu):
        """Test DW_AT_name wins when present."""
        assert EnumRegistry.name_for(cu.enum("color", [("RED", 0)])) == "color"

    @pytest.mark.unit
    def test_anonymous_enum_uses_cu_and_offset(self, make_cu):
        """Test the synthesized name is CU name plus CU-relative hex offset."""
        cu = make_cu(name="my file (v1.2)+x.c", cu_offset=0x100)
        anon = cu.enum(None, [("A", 0)])
        relative = anon.offset - 0x100

        name = EnumRegistry.name_for(anon)

        assert name == f"my_file__v1_2__x_c_{relative:x}"
        assert not any(c in name for c in "+-.() ")

    @pytest.mark.unit
    def test_anonymous_enum_in_unnamed_cu(self, make_cu):
        """Test the placeholder used when the CU has no name."""
        cu = make_cu(name=None)
        anon = cu.enum(None, [("A", 0)])
        assert EnumRegistry.name_for(anon) == f"unnamed_{anon.offset:x}"
