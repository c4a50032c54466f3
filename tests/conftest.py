"""Pytest configuration and shared fixtures."""

import sys
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Iterator, Optional

import pytest

# Add src directory to path for imports
src_path = Path(__file__).parent.parent / "src"
if str(src_path) not in sys.path:
    sys.path.insert(0, str(src_path))

from dwarf_argspec.domain.services.enums import EnumRegistry
from dwarf_argspec.domain.services.parsing import TypeChainResolver


@dataclass
class FakeAttribute:
    """Stand-in for pyelftools' AttributeValue (only the fields we read)."""

    name: str
    form: str
    value: Any


class FakeDIE:
    """Minimal DIE with the attribute/child/reference API the code uses."""

    def __init__(self, cu: "FakeCU", tag: str, offset: int, name: Optional[str] = None):
        self.cu = cu
        self.tag = tag
        self.offset = offset
        self.attributes: dict[str, FakeAttribute] = {}
        self.children: list["FakeDIE"] = []
        self._refs: dict[str, "FakeDIE"] = {}
        if name is not None:
            self.set_attr("DW_AT_name", "DW_FORM_string", name.encode("utf-8"))

    @property
    def has_children(self) -> bool:
        return bool(self.children)

    def iter_children(self) -> Iterator["FakeDIE"]:
        return iter(self.children)

    def set_attr(self, name: str, form: str, value: Any) -> "FakeDIE":
        self.attributes[name] = FakeAttribute(name, form, value)
        return self

    def set_type(self, target: "FakeDIE", form: str = "DW_FORM_ref4") -> "FakeDIE":
        """Point DW_AT_type at ``target``."""
        self._refs["DW_AT_type"] = target
        return self.set_attr("DW_AT_type", form, target.offset - self.cu.cu_offset)

    def set_dangling_type(self, form: str = "DW_FORM_ref4") -> "FakeDIE":
        """DW_AT_type whose reference cannot be resolved."""
        return self.set_attr("DW_AT_type", form, 0xDEAD)

    def get_DIE_from_attribute(self, name: str) -> "FakeDIE":
        return self._refs[name]


class FakeCU:
    """Compile unit that hands out DIEs with increasing offsets."""

    def __init__(self, name: Optional[str] = "test.c", cu_offset: int = 0):
        self.cu_offset = cu_offset
        self._next_offset = cu_offset + 0xB
        self._dies: list[FakeDIE] = []
        self.top = self._new("DW_TAG_compile_unit", name)

    def _new(self, tag: str, name: Optional[str]) -> FakeDIE:
        die = FakeDIE(self, tag, self._next_offset, name)
        self._next_offset += 0x10
        self._dies.append(die)
        return die

    def die(self, tag: str, name: Optional[str] = None, parent: Optional[FakeDIE] = None) -> FakeDIE:
        die = self._new(tag, name)
        (parent or self.top).children.append(die)
        return die

    def get_top_DIE(self) -> FakeDIE:
        return self.top

    def iter_DIEs(self) -> Iterator[FakeDIE]:
        return iter(self._dies)

    # -- type helpers ----------------------------------------------------------

    def base(self, name: str, encoding: int = 0x05) -> FakeDIE:
        return self.die("DW_TAG_base_type", name).set_attr(
            "DW_AT_encoding", "DW_FORM_data1", encoding
        )

    def wrap(self, tag: str, target: Optional[FakeDIE], name: Optional[str] = None) -> FakeDIE:
        die = self.die(tag, name)
        if target is not None:
            die.set_type(target)
        return die

    def pointer(self, target: Optional[FakeDIE]) -> FakeDIE:
        return self.wrap("DW_TAG_pointer_type", target)

    def const(self, target: FakeDIE) -> FakeDIE:
        return self.wrap("DW_TAG_const_type", target)

    def typedef(self, name: str, target: FakeDIE) -> FakeDIE:
        return self.wrap("DW_TAG_typedef", target, name)

    def enum(
        self,
        name: Optional[str],
        members: list[tuple[str, int]],
        form: str = "DW_FORM_sdata",
        underlying: Optional[FakeDIE] = None,
    ) -> FakeDIE:
        enum_die = self.die("DW_TAG_enumeration_type", name)
        if underlying is not None:
            enum_die.set_type(underlying)
        for member_name, value in members:
            self.die("DW_TAG_enumerator", member_name, parent=enum_die).set_attr(
                "DW_AT_const_value", form, value
            )
        return enum_die

    def function(
        self,
        name: Optional[str],
        params: list[FakeDIE],
        ret: Optional[FakeDIE] = None,
    ) -> FakeDIE:
        func = self.die("DW_TAG_subprogram", name)
        if ret is not None:
            func.set_type(ret)
        for i, param_type in enumerate(params):
            self.die("DW_TAG_formal_parameter", f"p{i}", parent=func).set_type(param_type)
        return func

    def param(self, type_die: FakeDIE) -> FakeDIE:
        """A formal parameter DIE typed ``type_die``."""
        return self.die("DW_TAG_formal_parameter", "p").set_type(type_die)


@pytest.fixture
def cu() -> FakeCU:
    """Fresh fake compile unit named test.c."""
    return FakeCU()


@pytest.fixture
def registry() -> EnumRegistry:
    """Empty enum registry."""
    return EnumRegistry()


@pytest.fixture
def resolver(registry: EnumRegistry) -> TypeChainResolver:
    """Resolver with a small depth bound."""
    return TypeChainResolver(registry, max_depth=16)


@pytest.fixture
def make_cu() -> type[FakeCU]:
    """Factory for compile units with a custom name or offset."""
    return FakeCU
