import logging

import pytest
from pydantic import ValidationError

from classbytes import (
    STD_POOL, app_class, attribute, class_bytes, class_ref, header, method, pool, s4, u1, u2, utf8,
)
from jclassdump.binary.codecs.access_flags import CLASS_FLAGS, METHOD_FLAGS, expand_flags
from jclassdump.binary.codecs.bytecursor import Cursor
from jclassdump.binary.codecs.constant_pool import decode_constant_pool
from jclassdump.binary.errors import (
    BadMagic, OutOfBounds, ParseError, TypeMismatch, UnresolvedIndex, UnsupportedFeature, UnsupportedTag,
)
from jclassdump.binary.reader import (
    decode_classfile, iter_constants, parse_file, resolve_class_name, resolve_utf8, summarize_file,
)
from jclassdump.config import DecodeOptions
from jclassdump.models.classfile import ClassFile
from jclassdump.models.constants import ConstantPool


def _pool(*entries):
    return ConstantPool(decode_constant_pool(Cursor(b"".join(entries)), len(entries) + 1))


def test_full_decode():
    cf = parse_file(app_class())
    assert cf.magic == "cafebabe"
    assert (cf.minor, cf.major) == (0, 52)
    assert len(cf.constants_pool) == 7
    assert [e.tag for e in cf.constants_pool] == [
        "CONSTANT_Class", "CONSTANT_Utf8", "CONSTANT_Class", "CONSTANT_Utf8",
        "CONSTANT_Utf8", "CONSTANT_Utf8", "CONSTANT_Utf8",
    ]
    assert cf.access_flags.names == ("PUBLIC", "SUPER")
    assert cf.this_class == "App"
    assert cf.super_class == "java/lang/Object"
    assert cf.interfaces_count == 0 and cf.fields_count == 0
    (m,) = cf.methods
    assert m.access_flags.names == ("PUBLIC", "STATIC")
    assert (m.name_index, m.descriptor_index) == (5, 6)
    (code,) = m.attributes
    assert code.attribute_name_index == 7
    assert code.attribute_length == 2
    assert code.info == b"\x01\x02"
    assert cf.attributes == []


def test_parse_file_reads_path(tmp_path):
    p = tmp_path / "App.class"
    p.write_bytes(app_class())
    assert ClassFile.from_binary(p).this_class == "App"
    assert parse_file(str(p)).super_class == "java/lang/Object"


def test_empty_pool_then_this_class_is_unresolved():
    data = header(0, 52) + pool() + u2(0x0021) + u2(1) + u2(2)
    with pytest.raises(UnresolvedIndex) as exc:
        parse_file(data)
    assert exc.value.index == 1
    assert exc.value.pool_size == 0
    assert list(iter_constants(data)) == []


def test_resolve_class_name_follows_class_to_utf8():
    p = _pool(class_ref(2), utf8("App"))
    assert resolve_class_name(p, 1) == "App"
    assert resolve_class_name(p, 1) == resolve_class_name(p, 1)


@pytest.mark.parametrize("index", [0, 3, 0xFFFF])
def test_resolve_outside_pool(index):
    p = _pool(class_ref(2), utf8("App"))
    with pytest.raises(UnresolvedIndex) as exc:
        resolve_class_name(p, index)
    assert exc.value.index == index


def test_resolve_wrong_variant():
    p = _pool(class_ref(2), utf8("App"), class_ref(1), class_ref(9))
    with pytest.raises(TypeMismatch) as exc:
        resolve_class_name(p, 2)
    assert (exc.value.index, exc.value.expected, exc.value.found) == (2, "CONSTANT_Class", "CONSTANT_Utf8")
    # Class whose name points at another Class
    with pytest.raises(TypeMismatch):
        resolve_class_name(p, 3)
    # Class whose name points past the pool
    with pytest.raises(UnresolvedIndex):
        resolve_class_name(p, 4)
    with pytest.raises(TypeMismatch):
        resolve_utf8(p, 1)


def test_super_class_zero_is_not_defaulted():
    with pytest.raises(UnresolvedIndex) as exc:
        parse_file(class_bytes(super_=0))
    assert exc.value.index == 0


def test_class_flags_expand_by_bitmask():
    flags = expand_flags(0x0021, CLASS_FLAGS)
    assert flags.names == ("PUBLIC", "SUPER")
    assert "PUBLIC" in flags and "FINAL" not in flags
    assert expand_flags(0x8000 | 0x0400 | 0x0200, CLASS_FLAGS).names == ("INTERFACE", "ABSTRACT", "MODULE")
    assert expand_flags(0, CLASS_FLAGS).names == ()


def test_method_flags_use_their_own_table():
    assert expand_flags(0x0020, METHOD_FLAGS).names == ("SYNCHRONIZED",)
    assert expand_flags(0x00C0, METHOD_FLAGS).names == ("BRIDGE", "VARARGS")
    # unnamed bits are kept in the mask only
    f = expand_flags(0x0200 | 0x0001, METHOD_FLAGS)
    assert f.names == ("PUBLIC",) and f.mask == 0x0201


@pytest.mark.parametrize("kw, feature", [({"interfaces": 3}, "interfaces"), ({"fields": 1}, "fields")])
def test_nonzero_interfaces_or_fields_stop_at_count(kw, feature):
    data = class_bytes(**kw)
    cur = Cursor(data)
    with pytest.raises(UnsupportedFeature) as exc:
        decode_classfile(cur)
    counts_at = len(header()) + len(pool(*STD_POOL)) + 6
    if feature == "fields":
        counts_at += 2
    assert exc.value.feature == feature
    assert exc.value.offset == counts_at
    assert cur.tell() == counts_at + 2


def test_attribute_payload_overrun():
    data = class_bytes()[:-2]  # drop methods_count
    data += u2(1) + u2(0x0001) + u2(5) + u2(6) + u2(1) + u2(7) + s4(5) + b"\x01\x02\x03"
    with pytest.raises(OutOfBounds) as exc:
        parse_file(data)
    assert exc.value.need == 5
    assert exc.value.available == 3


def test_negative_attribute_length():
    data = class_bytes(methods=(method(0x0001, 5, 6, u2(7) + s4(-1)),))
    with pytest.raises(OutOfBounds):
        parse_file(data)


@pytest.mark.parametrize("cut", [0, 3, 7, 9, 20])
def test_truncated_input(cut):
    with pytest.raises(OutOfBounds):
        parse_file(app_class()[:cut])


def test_unknown_tag_aborts_whole_decode():
    entries = STD_POOL + (u1(2) + u2(0),)
    with pytest.raises(UnsupportedTag):
        parse_file(class_bytes(entries=entries))


def test_all_errors_are_parse_errors():
    for exc in (OutOfBounds, UnsupportedTag, UnresolvedIndex, TypeMismatch, UnsupportedFeature, BadMagic):
        assert issubclass(exc, ParseError)
        assert issubclass(exc, ValueError)


def test_magic_only_checked_on_request():
    data = header(magic="deadbeef") + app_class()[8:]
    assert parse_file(data).magic == "deadbeef"
    with pytest.raises(BadMagic):
        parse_file(data, DecodeOptions(check_magic=True))
    assert parse_file(app_class(), DecodeOptions(check_magic=True)).this_class == "App"


def test_class_attributes_after_methods():
    cf = parse_file(app_class() + u2(1) + attribute(7, b"xy"))
    assert len(cf.attributes) == 1
    assert cf.attributes[0].info == b"xy"


def test_trailing_bytes_are_logged(caplog):
    with caplog.at_level(logging.WARNING):
        cf = parse_file(app_class() + u2(0) + b"\xff\xff")
    assert cf.attributes == []
    assert "trailing" in caplog.text


def test_wide_slots_end_to_end():
    entries = (
        u1(5) + s4(0) + s4(3),   # 1 (+2 shadow)
        class_ref(4),            # 3
        utf8("App"),             # 4
        class_ref(6),            # 5
        utf8("java/lang/Object"),  # 6
    )
    data = header() + pool(*entries, count=7) + u2(0x0021) + u2(3) + u2(5) + u2(0) + u2(0) + u2(0)
    cf = parse_file(data, DecodeOptions(wide_slots=True))
    assert len(cf.constants_pool) == 6
    assert cf.constants_pool.slot(1).value == 3
    assert cf.constants_pool.slot(2) is None
    assert cf.this_class == "App"
    with pytest.raises(TypeMismatch) as exc:
        resolve_class_name(cf.constants_pool, 2)
    assert exc.value.found == "unusable slot"


def test_summary_resolves_method_names():
    s = summarize_file(app_class())
    assert s["version"] == "52.0"
    assert s["constant_pool_count"] == 8
    assert s["this_class"] == "App"
    assert s["access_flags"] == ["PUBLIC", "SUPER"]
    assert s["methods"] == ["main([Ljava/lang/String;)V"]


def test_iter_constants_streams_pool():
    pairs = list(iter_constants(app_class()))
    assert [i for i, _ in pairs] == list(range(1, 8))
    assert pairs[1][1].text == "App"


def test_decoded_tree_is_frozen():
    cf = parse_file(app_class())
    with pytest.raises(ValidationError):
        cf.this_class = "Other"
