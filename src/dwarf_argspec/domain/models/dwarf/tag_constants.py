#!/usr/bin/env python3

"""DWARF tag, form and type-name constants used for argument classification.

Only pointer-kind tags change the pointer depth of a type chain. Every other
wrapper (reference, array, const, volatile, typedef, ...) is passed through
by following its DW_AT_type.
"""

BASE_TYPE_TAG = "DW_TAG_base_type"
ENUMERATION_TYPE_TAG = "DW_TAG_enumeration_type"
ENUMERATOR_TAG = "DW_TAG_enumerator"
FORMAL_PARAMETER_TAG = "DW_TAG_formal_parameter"
SUBPROGRAM_TAG = "DW_TAG_subprogram"

# Links that count as one level of indirection
POINTER_TAGS = frozenset(
    {
        "DW_TAG_pointer_type",  # *
        "DW_TAG_ptr_to_member_type",  # Class::*
    }
)

# Attribute forms whose value refers to another DIE
REFERENCE_FORMS = frozenset(
    {
        "DW_FORM_ref1",
        "DW_FORM_ref2",
        "DW_FORM_ref4",
        "DW_FORM_ref8",
        "DW_FORM_ref_udata",
        "DW_FORM_ref_addr",
        "DW_FORM_ref_sig8",
        "DW_FORM_ref_sup4",
        "DW_FORM_ref_sup8",
        "DW_FORM_GNU_ref_alt",
    }
)

# Fixed-size constant forms, in bytes; DW_FORM_sdata is already signed
FIXED_DATA_FORM_SIZES = {
    "DW_FORM_data1": 1,
    "DW_FORM_data2": 2,
    "DW_FORM_data4": 4,
    "DW_FORM_data8": 8,
}

# Forms whose value pyelftools returns as a list of bytes (little endian)
BLOCK_VALUE_FORMS = frozenset(
    {"DW_FORM_data16", "DW_FORM_block", "DW_FORM_block1", "DW_FORM_block2", "DW_FORM_block4"}
)

# DW_AT_encoding values of signed base types
SIGNED_ENCODINGS = frozenset(
    {
        0x05,  # DW_ATE_signed
        0x06,  # DW_ATE_signed_char
    }
)

# Base types printed as a character, or a string one pointer away
CHAR_TYPE_NAMES = frozenset({"char", "signed char"})

# Base types passed in floating point registers, with their bit size
FLOAT_TYPE_SIZES = {
    "float": 32,
    "double": 64,
}

# Characters not allowed in a synthesized enum name
FORBIDDEN_ENUM_NAME_CHARS = "+-.() "
