#
#  This file is part of projsync
#
#  Copyright (C) 2026 projsync contributors
#
#  Permission is hereby granted, free of charge, to any person obtaining a copy
#  of this software and associated documentation files (the "Software"), to
#  deal in the Software without restriction, including without limitation the
#  rights to use, copy, modify, merge, publish, distribute, sublicense, and/or
#  sell copies of the Software, and to permit persons to whom the Software is
#  furnished to do so, subject to the following conditions:
#
#  The above copyright notice and this permission notice shall be included in
#  all copies or substantial portions of the Software.
#
#  THE SOFTWARE IS PROVIDED "AS IS", WITHOUT WARRANTY OF ANY KIND, EXPRESS OR
#  IMPLIED, INCLUDING BUT NOT LIMITED TO THE WARRANTIES OF MERCHANTABILITY,
#  FITNESS FOR A PARTICULAR PURPOSE AND NONINFRINGEMENT. IN NO EVENT SHALL THE
#  AUTHORS OR COPYRIGHT HOLDERS BE LIABLE FOR ANY CLAIM, DAMAGES OR OTHER
#  LIABILITY, WHETHER IN AN ACTION OF CONTRACT, TORT OR OTHERWISE, ARISING
#  FROM, OUT OF OR IN CONNECTION WITH THE SOFTWARE OR THE USE OR OTHER DEALINGS
#  IN THE SOFTWARE.
#


"""
This module defines types interface as well as basic types. The types -- i.e.
objects derived from :class:`projsync.vartypes.Type` -- are used to verify
validity of field values and to bring them into canonical form.

Values are plain Python objects: strings, booleans, lists of strings or
:class:`projsync.model.CustomBuildRule` instances. :const:`None` always means
"not set" and :data:`projsync.model.INHERIT` means "inherit from project";
types never see these two, they are handled by :class:`projsync.props.Field`.
"""

from projsync.error import TypeError


class Type(object):
    """
    Base class for all field types.

    .. attribute:: name

       Human-readable name of the type, e.g. "path" or "bool".
    """
    name = None

    #: Value used for fields of this type that are neither set nor inherited.
    empty = None

    def normalize(self, value):
        """
        Normalizes *value* to be of this type, if it can be done. Returns the
        normalized value, which may be *value* itself.
        """
        return value

    def validate(self, value):
        """
        Validates if *value* is of this type. If it isn't, throws
        :exc:`projsync.error.TypeError` with description of the error.
        """
        raise NotImplementedError

        return self.name



class BoolType(Type):
    """
    Boolean value type. Strings "true" and "false" (in any case) are accepted
    too, as that's how they appear in project files.
    """
    name = "bool"
    empty = False

    def normalize(self, value):
        if isinstance(value, str):
            low = value.strip().lower()
            if low == "true":
                return True
            if low == "false":
                return False
        return value

    def validate(self, value):
        if not isinstance(value, bool):
            raise TypeError(self, value)


class StringType(Type):
    """
    Any string value.
    """
    name = "string"
    empty = ""

    def validate(self, value):
        if not isinstance(value, str):
            raise TypeError(self, value)


class PathType(StringType):
    """
    A file or directory name. Paths are stored with Windows separators, as
    project files use them; directory paths always end with a separator.
    """
    name = "path"

    def __init__(self, is_dir=False):
        self.is_dir = is_dir

    def normalize(self, value):
        if not isinstance(value, str) or not value:
            return value
        value = value.replace("/", "\\")
        if self.is_dir and not value.endswith("\\"):
            value += "\\"
        return value


class EnumType(Type):
    """
    Enum type. The value must be one of allowed values passed to the
    constructor. Matching is case-insensitive and aliases are accepted, but
    the stored value is always the canonical spelling.

    .. attribute:: allowed_values

       List of allowed values (strings).
    """
    name = "enum"

    def __init__(self, name, allowed_values, aliases=None):
        self.name = name
        assert allowed_values, "list of values cannot be empty"
        self.allowed_values = list(allowed_values)
        self._lookup = dict((x.lower(), x) for x in self.allowed_values)
        if aliases:
            for alias, value in aliases.items():
                assert value in self.allowed_values
                self._lookup[alias.lower()] = value

    def format_allowed_values(self):
        return ", ".join('"%s"' % x for x in self.allowed_values)

    def normalize(self, value):
        if isinstance(value, str):
            return self._lookup.get(value.strip().lower(), value)
        return value

    def validate(self, value):
        if value not in self.allowed_values:
            raise TypeError(self, value,
                            msg="must be one of %s" % self.format_allowed_values())


class ListType(Type):
    """
    Type for a delimited list of strings, e.g. preprocessor definitions or
    include directories. Values are stored as Python lists; a string is
    split on :attr:`sep`.

    .. attribute:: sep

       Separator used in project files for this list.
    """
    empty = ()

    def __init__(self, sep=";", item_type=None):
        self.sep = sep
        self.item_type = item_type if item_type is not None else StringType()
        self.name = "list of %ss" % self.item_type

    def split(self, text):
        """Splits project file representation of the list into items."""
        text = text.replace("\r", "").replace("\n", "")
        if self.sep == " ":
            return text.split()
        return [x for x in text.split(self.sep) if x]

    def join(self, items):
        return self.sep.join(items)

    def normalize(self, value):
        if isinstance(value, str):
            value = self.split(value)
        if isinstance(value, (list, tuple)):
            return [self.item_type.normalize(x) for x in value]
        return value

    def validate(self, value):
        if not isinstance(value, list):
            raise TypeError(self, value)
        for i in value:
            self.item_type.validate(i)


class CommandsType(Type):
    """
    Build event commands. Multiple commands are separated by new lines.
    """
    name = "commands"
    empty = ""

    def normalize(self, value):
        if isinstance(value, (list, tuple)):
            value = "\n".join(value)
        if isinstance(value, str):
            value = value.replace("\r\n", "\n").replace("\r", "\n")
        return value

    def validate(self, value):
        if not isinstance(value, str):
            raise TypeError(self, value)


class BuildRuleType(Type):
    """
    Custom build rule attached to a file.
    """
    name = "build rule"

    def validate(self, value):
        from projsync.model import CustomBuildRule
        if not isinstance(value, CustomBuildRule):
            raise TypeError(self, value)
