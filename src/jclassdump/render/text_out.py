from __future__ import annotations
from typing import List, Optional
from ..binary.errors import ParseError
from ..binary.reader import resolve_utf8
from ..models.classfile import ClassFile
from ..models.constants import ConstantPool, ConstantPoolEntry

_INDEX_FIELDS = (
    "name_index", "string_index", "class_index", "name_and_type_index",
    "descriptor_index", "reference_index",
)


def _name_or_index(pool: ConstantPool, index: int) -> str:
    try:
        resolve_utf8(pool, index)
    except ParseError:
        return f"#{index}"
    return pool.slot(index).readable


def describe_constant(entry: Optional[ConstantPoolEntry]) -> str:
    """One-line description of a pool slot, e.g. `Class  #2`."""
    if entry is None:
        return "(unusable)"
    kind = entry.tag.removeprefix("CONSTANT_")
    if entry.tag == "CONSTANT_Utf8":
        return f"{kind:<20}{entry.readable}"
    if entry.tag in ("CONSTANT_Integer", "CONSTANT_Float", "CONSTANT_Long", "CONSTANT_Double"):
        return f"{kind:<20}{entry.value!r}"
    refs = [f"#{getattr(entry, f)}" for f in _INDEX_FIELDS if hasattr(entry, f)]
    if entry.tag == "CONSTANT_MethodHandle":
        refs.insert(0, entry.reference_kind_name)
    elif entry.tag in ("CONSTANT_Dynamic", "CONSTANT_InvokeDynamic"):
        # bootstrap index points into BootstrapMethods, not the pool
        refs = [f"{entry.bootstrap_method_attr_index}:#{entry.name_and_type_index}"]
    return f"{kind:<20}{' '.join(refs)}"


def render_text(file: ClassFile) -> str:
    """javap -v style listing of the decoded tree."""
    pool = file.constants_pool
    lines: List[str] = [
        f"class {file.this_class} extends {file.super_class}",
        f"  magic: {file.magic}",
        f"  minor version: {file.minor}",
        f"  major version: {file.major}",
        f"  flags: (0x{file.access_flags.mask:04x}) {', '.join(file.access_flags.names)}",
        f"  interfaces: {file.interfaces_count}, fields: {file.fields_count}, "
        f"methods: {len(file.methods)}, attributes: {len(file.attributes)}",
        "Constant pool:",
    ]
    width = len(str(len(pool)))
    for i, entry in enumerate(pool, start=1):
        lines.append(f"  {'#' + str(i):>{width + 1}} = {describe_constant(entry)}")

    lines.append("Methods:")
    for m in file.methods:
        name = _name_or_index(pool, m.name_index)
        desc = _name_or_index(pool, m.descriptor_index)
        lines.append(f"  {name}{desc}")
        lines.append(f"    flags: (0x{m.access_flags.mask:04x}) {', '.join(m.access_flags.names)}")
        for a in m.attributes:
            lines.append(f"    {_name_or_index(pool, a.attribute_name_index)}: {a.attribute_length} bytes")

    if file.attributes:
        lines.append("Attributes:")
        for a in file.attributes:
            lines.append(f"  {_name_or_index(pool, a.attribute_name_index)}: {a.attribute_length} bytes")
    return "\n".join(lines) + "\n"
