"""Static table of well-known platform and utility type names."""

from __future__ import annotations

from types import MappingProxyType
from typing import Mapping, Optional

MDN_BASE = "https://developer.mozilla.org/en-US/docs/Web/JavaScript"
TS_BASE = "https://www.typescriptlang.org/docs/handbook"

_GLOBAL_OBJECTS = (
    "Array",
    "Promise",
    "Map",
    "Set",
    "WeakMap",
    "WeakSet",
    "Date",
    "RegExp",
    "Error",
    "Function",
    "ArrayBuffer",
    "Uint8Array",
    "Int8Array",
    "Uint16Array",
    "Int16Array",
    "Uint32Array",
    "Int32Array",
    "Float32Array",
    "Float64Array",
    "DataView",
    "JSON",
    "Iterator",
    "AsyncIterator",
    "Generator",
    "AsyncGenerator",
)

_links: dict[str, str] = {
    # JavaScript primitives
    "string": f"{MDN_BASE}/Reference/Global_Objects/String",
    "number": f"{MDN_BASE}/Reference/Global_Objects/Number",
    "boolean": f"{MDN_BASE}/Reference/Global_Objects/Boolean",
    "symbol": f"{MDN_BASE}/Reference/Global_Objects/Symbol",
    "bigint": f"{MDN_BASE}/Reference/Global_Objects/BigInt",
    "null": f"{MDN_BASE}/Reference/Operators/null",
    "undefined": f"{MDN_BASE}/Reference/Global_Objects/undefined",
    "object": f"{MDN_BASE}/Reference/Global_Objects/Object",
}
_links.update({name: f"{MDN_BASE}/Reference/Global_Objects/{name}" for name in _GLOBAL_OBJECTS})
_links.update(
    {
        "Iterable": f"{MDN_BASE}/Reference/Iteration_protocols#the_iterable_protocol",
        "AsyncIterable": (
            f"{MDN_BASE}/Reference/Iteration_protocols"
            "#the_async_iterator_and_async_iterable_protocols"
        ),
        # TypeScript utility types
        "Partial": f"{TS_BASE}/utility-types.html#partialtype",
        "Required": f"{TS_BASE}/utility-types.html#requiredtype",
        "Readonly": f"{TS_BASE}/utility-types.html#readonlytype",
        "Record": f"{TS_BASE}/utility-types.html#recordkeys-type",
        "Pick": f"{TS_BASE}/utility-types.html#picktype-keys",
        "Omit": f"{TS_BASE}/utility-types.html#omittype-keys",
        "Exclude": f"{TS_BASE}/utility-types.html#excludeuniontype-excludedmembers",
        "Extract": f"{TS_BASE}/utility-types.html#extracttype-union",
        "NonNullable": f"{TS_BASE}/utility-types.html#nonnullabletype",
        "ReturnType": f"{TS_BASE}/utility-types.html#returntypetype",
        "Parameters": f"{TS_BASE}/utility-types.html#parameterstype",
        "InstanceType": f"{TS_BASE}/utility-types.html#instancetypetype",
        "Awaited": f"{TS_BASE}/utility-types.html#awaitedtype",
        # TypeScript special types
        "void": f"{TS_BASE}/2/basic-types.html#void",
        "never": f"{TS_BASE}/2/basic-types.html#never",
        "any": f"{TS_BASE}/2/basic-types.html#any",
        "unknown": f"{TS_BASE}/2/basic-types.html#unknown",
    }
)

BUILTIN_TYPE_LINKS: Mapping[str, str] = MappingProxyType(_links)
del _links


def is_builtin_type(type_name: str) -> bool:
    """Return True when ``type_name`` is in the built-in table."""
    return type_name in BUILTIN_TYPE_LINKS


def get_builtin_type_url(type_name: str) -> Optional[str]:
    """Return the documentation URL for a built-in type, if any."""
    return BUILTIN_TYPE_LINKS.get(type_name)


__all__ = ["BUILTIN_TYPE_LINKS", "get_builtin_type_url", "is_builtin_type"]
