#!/usr/bin/env python3

"A small, pluggable positional-argument parsing engine."
__version__ = "0.1.0"


# please leave this copyright notice in binary distributions.
license = """
argslot/__init__.py
part of the Argslot software package
Copyright 2026 by the Argslot authors
All rights reserved.

Permission is hereby granted, free of charge, to any person obtaining a
copy of this software and associated documentation files (the "Software"),
to deal in the Software without restriction, including without limitation
the rights to use, copy, modify, merge, publish, distribute, sublicense,
and/or sell copies of the Software, and to permit persons to whom the
Software is furnished to do so, subject to the following conditions:

The above copyright notice and this permission notice shall be included
in all copies or substantial portions of the Software.

THE SOFTWARE IS PROVIDED "AS IS", WITHOUT WARRANTY OF ANY KIND,
EXPRESS OR IMPLIED, INCLUDING BUT NOT LIMITED TO THE WARRANTIES OF
MERCHANTABILITY, FITNESS FOR A PARTICULAR PURPOSE AND NONINFRINGEMENT.
IN NO EVENT SHALL THE AUTHORS OR COPYRIGHT HOLDERS BE LIABLE FOR ANY CLAIM,
DAMAGES OR OTHER LIABILITY, WHETHER IN AN ACTION OF CONTRACT,
TORT OR OTHERWISE, ARISING FROM, OUT OF OR IN CONNECTION WITH THE SOFTWARE
OR THE USE OR OTHER DEALINGS IN THE SOFTWARE.
"""

# set to 1 to print the event log after every parse
want_prints = 0


import big.all as big
from collections.abc import Mapping
import decimal
import math
import numbers
import re


__all__ = [
    "ArgslotBaseException",
    "ConfigurationError",
    "SchemaError",
    "SchemaTypeError",
    "SchemaArityError",
    "SchemaOrderError",
    "SchemaSlotError",
    "UnknownTypeError",
    "UsageError",
    "NoMatchingTypeError",
    "TokenValidationError",
    "ArgumentCountMismatchError",
    "TypeDescriptor",
    "TypeRegistry",
    "Slot",
    "Parser",
    ]


class ArgslotBaseException(Exception):
    pass

class ConfigurationError(ArgslotBaseException):
    """
    Raised when the Argslot API is used improperly.
    """
    pass


class SchemaError(ConfigurationError):
    """
    Raised when a usage schema is malformed.

    index is the position of the offending slot
    in the schema, or None if the schema as a whole
    is at fault.
    """
    def __init__(self, message, index=None):
        super().__init__(message)
        self.index = index

class SchemaTypeError(SchemaError):
    pass

class SchemaArityError(SchemaError):
    pass

class SchemaOrderError(SchemaError):
    pass

class SchemaSlotError(SchemaError):
    pass

class UnknownTypeError(SchemaError):
    def __init__(self, message, index=None, type=None):
        super().__init__(message, index)
        self.type = type


class UsageError(ArgslotBaseException):
    """
    Raised when Argslot processes invalid tokens.

    value is the offending raw value (or, for errors
    about a whole group of tokens, the list of them).
    index is its absolute position in the token stream.
    type is the type name, or list of type names, attempted.
    """

    default_message = "invalid argument"

    def __init__(self, value=None, index=None, type=None, message=None):
        if message is None:
            message = f"{self.default_message} {value!r} at position {index}, expected {_describe_type(type)}"
        super().__init__(message)
        self.value = value
        self.index = index
        self.type = type
        self.message = message

class NoMatchingTypeError(UsageError):
    default_message = "no matching type for"

class TokenValidationError(UsageError):
    default_message = "invalid value"

class ArgumentCountMismatchError(UsageError):
    pass


def _describe_type(type):
    if isinstance(type, (list, tuple)):
        return "one of " + ", ".join(repr(t) for t in type)
    return repr(type)


class TypeDescriptor:
    """
    A named bundle of a validity check and a coercion.

        check(value, options) returns true if value
            can be converted to this type.
        exec(value, options) returns the converted value.
            It's only called after check() succeeds.

    options is the slot's bag of extra settings, passed
    through untouched.
    """
    def __init__(self, name, check, exec, info=None):
        self.name = name
        self.check = check
        self.exec = exec
        self.info = info if info is not None else name

    def __repr__(self):
        return f"<{self.__class__.__name__} {self.name!r} info={self.info!r}>"


def check_string(value, options=None):
    return isinstance(value, str)

def exec_string(value, options=None):
    return str(value)


# plain decimal notation only: optional sign, digits, optional fraction.
# no exponents, so a short token can't describe an enormous integer.
_number_re = re.compile(r"[-+]?(?:[0-9]+(?:\.[0-9]*)?|\.[0-9]+)")

# same as Python's default limit for int <-> str conversion
max_number_digits = 4300

def _to_decimal(value):
    if isinstance(value, bool):
        return None
    if isinstance(value, str):
        value = value.strip()
        if not _number_re.fullmatch(value):
            return None
        value = decimal.Decimal(value)
    elif isinstance(value, decimal.Decimal):
        pass
    elif isinstance(value, numbers.Integral):
        return decimal.Decimal(int(value))
    elif isinstance(value, numbers.Real):
        if not math.isfinite(value):
            return None
        # Fractions have no exact decimal form; truncate first.
        return decimal.Decimal(math.trunc(value))
    else:
        return None
    if not value.is_finite():
        return None
    if value.adjusted() >= max_number_digits:
        return None
    return value

def check_number(value, options=None):
    return _to_decimal(value) is not None

def exec_number(value, options=None):
    return int(_to_decimal(value))


builtin_types = (
    TypeDescriptor("string", check_string, exec_string, info="String"),
    TypeDescriptor("number", check_number, exec_number, info="Number"),
    )


class TypeRegistry:
    """
    Maps type names to TypeDescriptor objects.

    A fresh registry contains the built-in "string"
    and "number" types, unless builtins is false.
    """
    def __init__(self, *, builtins=True):
        self.types = {}
        if builtins:
            for descriptor in builtin_types:
                self.types[descriptor.name] = descriptor

    def __repr__(self):
        return f"<{self.__class__.__name__} {list(self.types)}>"

    def __contains__(self, name):
        return name in self.types

    def __iter__(self):
        return iter(self.types)

    def __len__(self):
        return len(self.types)

    def register(self, descriptor):
        """
        Adds descriptor to the registry, replacing any
        type already registered under the same name.

        descriptor may be a TypeDescriptor, or a mapping
        with the keys "name", "check", "exec", and
        (optionally) "info".
        """
        if isinstance(descriptor, Mapping):
            descriptor = TypeDescriptor(
                descriptor.get("name"),
                descriptor.get("check"),
                descriptor.get("exec"),
                info=descriptor.get("info"),
                )
        elif not isinstance(descriptor, TypeDescriptor):
            raise ConfigurationError(f"can't register {descriptor!r}, must be a TypeDescriptor or a mapping")

        name = descriptor.name
        if not (name and isinstance(name, str)):
            raise ConfigurationError(f"can't register type, name must be a non-empty string, not {name!r}")
        if not callable(descriptor.check):
            raise ConfigurationError(f"can't register type {name!r}, check must be callable")
        if not callable(descriptor.exec):
            raise ConfigurationError(f"can't register type {name!r}, exec must be callable")
        self.types[name] = descriptor
        return descriptor

    def find(self, name):
        "Returns the TypeDescriptor registered as name, or None."
        return self.types.get(name)

    def remove(self, name):
        self.types.pop(name, None)


class Slot:
    """
    One element of a usage schema.

        type is a type name, or a list of type names
            to try in order.
        required is true if the slot must be satisfied.
            None means "use the parser's default".
        count, if not None, is the exact number of
            consecutive tokens the slot consumes.
            The slot then produces a list.
        options are passed to the type's check and exec.
    """
    def __init__(self, type, required=None, count=None, **options):
        self.type = type
        self.required = required
        self.count = count
        self.options = options

    @classmethod
    def from_mapping(cls, mapping):
        options = dict(mapping)
        type = options.pop("type", None)
        required = options.pop("required", None)
        count = options.pop("count", None)
        return cls(type, required=required, count=count, **options)

    def __repr__(self):
        return f"<{self.__class__.__name__} type={self.type!r} required={self.required!r} count={self.count!r} options={self.options!r}>"

    @property
    def type_names(self):
        if isinstance(self.type, (list, tuple)):
            return list(self.type)
        return [self.type]

    @property
    def is_union(self):
        return isinstance(self.type, (list, tuple))


class Parser:
    """
    Parses a sequence of tokens against a usage schema.

    Each Parser owns a TypeRegistry.  If you don't pass one in,
    it creates one containing the built-in types.

    default_required is used for slots that don't say
    whether or not they're required.
    """
    def __init__(self, *, registry=None, default_required=True):
        if registry is None:
            registry = TypeRegistry()
        self.registry = registry
        self.default_required = default_required
        self.log = big.Log()

    def __repr__(self):
        return f"<{self.__class__.__name__} registry={self.registry!r}>"

    def register(self, descriptor):
        return self.registry.register(descriptor)

    def find(self, name):
        return self.registry.find(name)

    def remove(self, name):
        self.registry.remove(name)

    def parse_type(self, type_name, value, options=None):
        """
        Checks and converts a single value as type_name.

        Returns a tuple (success, converted_value).
        If the check fails, converted_value is None.
        """
        descriptor = self.registry.find(type_name)
        if descriptor is None:
            raise UnknownTypeError(f"unknown type {type_name!r}", type=type_name)
        if options is None:
            options = {}
        if not descriptor.check(value, options):
            return (False, None)
        return (True, descriptor.exec(value, options))

    def _parse_union(self, type_names, value, options):
        for type_name in type_names:
            success, converted = self.parse_type(type_name, value, options)
            if success:
                return (True, converted)
        return (False, None)

    def _normalize_schema(self, schema):
        if not isinstance(schema, (list, tuple)):
            raise SchemaTypeError(f"schema must be a list, not {type(schema).__name__}")

        slots = []
        for index, slot in enumerate(schema):
            if isinstance(slot, Mapping):
                slot = Slot.from_mapping(slot)
            elif not isinstance(slot, Slot):
                raise SchemaSlotError(f"slot {index} must be a Slot or a mapping, not {slot!r}", index)
            slots.append(slot)

        optional = [index for index, slot in enumerate(slots) if not self._required(slot)]
        if len(optional) > 1:
            raise SchemaArityError("only one slot may be optional", optional[-1])
        if optional and (optional[0] != len(slots) - 1):
            raise SchemaOrderError("the optional slot must be the last slot", optional[0])

        for index, slot in enumerate(slots):
            if slot.is_union:
                if not slot.type:
                    raise SchemaSlotError(f"slot {index} has an empty list of types", index)
            type_names = slot.type_names
            for type_name in type_names:
                if not (type_name and isinstance(type_name, str)):
                    raise SchemaSlotError(f"slot {index} has an illegal type name {type_name!r}", index)
            count = slot.count
            if count is not None:
                if isinstance(count, bool) or not isinstance(count, int) or (count < 1):
                    raise SchemaSlotError(f"slot {index} count must be a positive integer, not {count!r}", index)
            for type_name in type_names:
                if type_name not in self.registry:
                    raise UnknownTypeError(f"slot {index} uses unknown type {type_name!r}", index, type_name)
        return slots

    def _required(self, slot):
        if slot.required is None:
            return self.default_required
        # only an explicit False makes a slot optional
        return slot.required is not False

    def parse(self, tokens, schema):
        """
        Converts tokens according to schema.

        tokens is a sequence of raw values.  schema is a list
        of Slot objects (or mappings with the same fields).

        Returns a list with one entry per slot.  Slots with
        a count produce a list of values.  An optional slot
        that isn't satisfied produces nothing.

        Raises a ConfigurationError subclass if schema is bad,
        and a UsageError subclass if tokens don't fit schema.
        """
        self.log = big.Log()
        self.log("parse start")

        slots = self._normalize_schema(schema)
        tokens = list(tokens)
        parsed = []
        cursor = 0

        for index, slot in enumerate(slots):
            required = self._required(slot)
            type = slot.type
            options = slot.options

            if (not required) and (cursor >= len(tokens)):
                self.log(f"slot {index}: optional, no tokens left")
                break

            if slot.count is None:
                self.log(f"slot {index}: {type!r} at {cursor}")
                self._parse_single(slot, required, tokens, cursor, parsed)
                cursor += 1
                continue

            self.log(f"slot {index}: {slot.count} x {type!r} at {cursor}")
            self._parse_group(slot, tokens, cursor, parsed)
            cursor += slot.count

        self.log("parse complete")
        if want_prints:
            self.log.print()
        return parsed

    def _parse_single(self, slot, required, tokens, cursor, parsed):
        type = slot.type
        if cursor >= len(tokens):
            if slot.is_union:
                raise NoMatchingTypeError(None, cursor, type, f"missing argument at position {cursor}, expected {_describe_type(type)}")
            raise TokenValidationError(None, cursor, type, f"missing argument at position {cursor}, expected {_describe_type(type)}")

        value = tokens[cursor]
        if slot.is_union:
            success, converted = self._parse_union(type, value, slot.options)
            if not success:
                raise NoMatchingTypeError(value, cursor, type)
        else:
            success, converted = self.parse_type(type, value, slot.options)
            if not success:
                if required:
                    raise TokenValidationError(value, cursor, type)
                self.log(f"optional slot rejected {value!r}")
                return
        parsed.append(converted)

    def _parse_group(self, slot, tokens, cursor, parsed):
        type = slot.type
        count = slot.count
        window = tokens[cursor:cursor + count]

        # each token tries the whole candidate list on its own,
        # so one group may mix member types of a union.
        values = []
        for offset, value in enumerate(window):
            if slot.is_union:
                success, converted = self._parse_union(type, value, slot.options)
                if not success:
                    raise NoMatchingTypeError(window, cursor, type)
            else:
                success, converted = self.parse_type(type, value, slot.options)
                if not success:
                    raise TokenValidationError(value, cursor + offset, type)
            values.append(converted)

        if len(values) < count:
            raise ArgumentCountMismatchError(window, cursor, type, "argument count does not match declared count.")
        parsed.append(values)
