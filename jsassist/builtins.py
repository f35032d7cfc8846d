"""Builtin type catalog: ECMA-262 (5th edition) section 15 globals and prototypes.

Each entry maps a member name to its wire-encoded type. Every analysis run
gets fresh Record instances from instantiate(), so user code can never
mutate the catalog itself.
"""

from __future__ import annotations

from .model import OBJECT, Definition, Record, parse_type

GLOBAL_MEMBERS: dict[str, str] = {
    "decodeURI": "?String:uri",
    "encodeURI": "?String:uri",
    "eval": "?Object:toEval",
    "parseInt": "?Number:str,[radix]",
    "parseFloat": "?Number:str,[radix]",
    "this": "Global",
    "Math": "Math",
    "JSON": "JSON",
    "Object": "?Object:[val]",
    "Function": "?Function:",
    "Array": "?Array:[val]",
    "Boolean": "?Boolean:[val]",
    "Number": "?Number:[val]",
    "Date": "?Date:[val]",
    "RegExp": "?RegExp:[val]",
    "Error": "?Error:[err]",
}

BUILTIN_RECORDS: dict[str, dict[str, str]] = {
    "Object": {
        "prototype": "Object",
        "toString": "?String:",
        "toLocaleString": "?String:",
        "valueOf": "?Object:",
        "hasOwnProperty": "?boolean:property",
        "isPrototypeOf": "?boolean:object",
        "propertyIsEnumerable": "?boolean:property",
    },
    "Function": {
        "apply": "?Object:func,[argArray]",
        "arguments": "Arguments",
        "bind": "?Object:func,[args...]",
        "call": "?Object:func,[args...]",
        "caller": "Function",
        "length": "Number",
        "name": "String",
    },
    "Array": {
        "concat": "?Array:first,[rest...]",
        "join": "?String:separator",
        "length": "Number",
        "pop": "?Object:",
        "push": "?Object:[vals...]",
        "reverse": "?Array:",
        "shift": "?Object:",
        "slice": "?Array:start,deleteCount,[items...]",
        "splice": "?Array:start,end",
        "sort": "?Array:[sorter]",
        "unshift": "?Number:[items...]",
        "indexOf": "?Number:searchElement,[fromIndex]",
        "lastIndexOf": "?Number:searchElement,[fromIndex]",
        "every": "?Boolean:callbackFn,[thisArg]",
        "some": "?Boolean:callbackFn,[thisArg]",
        "forEach": "?Object:callbackFn,[thisArg]",
        "map": "?Array:callbackFn,[thisArg]",
        "filter": "?Array:callbackFn,[thisArg]",
        "reduce": "?Array:callbackFn,[initialValue]",
        "reduceRight": "?Array:callbackFn,[initialValue]",
    },
    "String": {
        "charAt": "?String:index",
        "charCodeAt": "?Number:index",
        "concat": "?String:array",
        "indexOf": "?Number:searchString",
        "lastIndexOf": "?Number:searchString",
        "length": "Number",
        "localeCompare": "?Number:Object",
        "match": "?Boolean:regexp",
        "replace": "?String:searchValue,replaceValue",
        "search": "?String:regexp",
        "slice": "?String:start,end",
        "split": "?Array:separator,[limit]",
        "substring": "?String:start,end",
        "toLocaleUpperCase": "?String:",
        "toLowerCase": "?String:",
        "toLocaleLowerCase": "?String:",
        "toUpperCase": "?String:",
        "trim": "?String:",
    },
    "Boolean": {},
    "Number": {
        "toExponential": "?Number:digits",
        "toFixed": "?Number:digits",
        "toPrecision": "?Number:digits",
    },
    "Math": {
        "E": "Number",
        "LN2": "Number",
        "LN10": "Number",
        "LOG2E": "Number",
        "LOG10E": "Number",
        "PI": "Number",
        "SQRT1_2": "Number",
        "SQRT2": "Number",
        "abs": "?Number:val",
        "acos": "?Number:val",
        "asin": "?Number:val",
        "atan": "?Number:val",
        "atan2": "?Number:val1,val2",
        "ceil": "?Number:val",
        "cos": "?Number:val",
        "exp": "?Number:val",
        "floor": "?Number:val",
        "log": "?Number:val",
        "max": "?Number:val1,val2",
        "min": "?Number:val1,val2",
        "pow": "?Number:x,y",
        "random": "?Number:",
        "round": "?Number:val",
        "sin": "?Number:val",
        "sqrt": "?Number:val",
        "tan": "?Number:val",
    },
    "Date": {
        "toDateString": "?String:",
        "toTimeString": "?String:",
        "toUTCString": "?String:",
        "toISOString": "?String:",
        "toJSON": "?Object:key",
        "toLocaleDateString": "?String:",
        "toLocaleTimeString": "?String:",
        "getTime": "?Number:",
        "getTimezoneOffset": "?Number:",
        "getDay": "?Number:",
        "getUTCDay": "?Number:",
        "getFullYear": "?Number:",
        "getUTCFullYear": "?Number:",
        "getHours": "?Number:",
        "getUTCHours": "?Number:",
        "getMinutes": "?Number:",
        "getUTCMinutes": "?Number:",
        "getSeconds": "?Number:",
        "getUTCSeconds": "?Number:",
        "getMilliseconds": "?Number:",
        "getUTCMilliseconds": "?Number:",
        "getMonth": "?Number:",
        "getUTCMonth": "?Number:",
        "getDate": "?Number:",
        "getUTCDate": "?Number:",
        "setTime": "?Number:",
        "setTimezoneOffset": "?Number:",
        "setDay": "?Number:dayOfWeek",
        "setUTCDay": "?Number:dayOfWeek",
        "setFullYear": "?Number:year,[month],[date]",
        "setUTCFullYear": "?Number:year,[month],[date]",
        "setHours": "?Number:hour,[min],[sec],[ms]",
        "setUTCHours": "?Number:hour,[min],[sec],[ms]",
        "setMinutes": "?Number:min,[sec],[ms]",
        "setUTCMinutes": "?Number:min,[sec],[ms]",
        "setSeconds": "?Number:sec,[ms]",
        "setUTCSeconds": "?Number:sec,[ms]",
        "setMilliseconds": "?Number:ms",
        "setUTCMilliseconds": "?Number:ms",
        "setMonth": "?Number:month,[date]",
        "setUTCMonth": "?Number:month,[date]",
        "setDate": "?Number:date",
        "setUTCDate": "?Number:gate",
    },
    "RegExp": {
        "g": "Object",
        "i": "Object",
        "gi": "Object",
        "m": "Object",
        "source": "String",
        "global": "Boolean",
        "ignoreCase": "Boolean",
        "multiline": "Boolean",
        "lastIndex": "Boolean",
        "exec": "?Array:str",
        "test": "?Boolean:str",
    },
    "Error": {
        "name": "String",
        "message": "String",
        "stack": "String",
    },
    "Arguments": {
        "callee": "Function",
        "length": "Number",
    },
    "JSON": {
        "parse": "?Object:str",
        "stringify": "?String:obj",
    },
}


def _members(entries: dict[str, str]) -> dict[str, Definition]:
    return {name: Definition(parse_type(text)) for name, text in entries.items()}


def instantiate() -> dict[str, Record]:
    """Fresh type table seeded with Global and the builtin records."""
    types: dict[str, Record] = {
        "Global": Record(_members(GLOBAL_MEMBERS), Definition(OBJECT), builtin=False),
    }
    for name, entries in BUILTIN_RECORDS.items():
        proto = None if name == "Object" else Definition(OBJECT)
        types[name] = Record(_members(entries), proto, builtin=True)
    return types


def clear_builtin_globals(types: dict[str, Record]) -> None:
    """Strip the catalog's initial globals and prototype from the Global record."""
    record = types.get("Global")
    if record is None:
        return
    for name in GLOBAL_MEMBERS:
        record.members.pop(name, None)
    record.proto = None
