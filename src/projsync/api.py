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
Extension points. Output formats are implemented as subclasses of
:class:`ScriptFormat`; defining such a class with a ``name`` registers it,
importing :mod:`projsync.plugins` is enough to make all built-in formats
available.
"""

from abc import ABCMeta, abstractmethod


# Registers every class that sets ``name`` with the extension type it derives
# from. For internal use only.
class _ExtensionMetaclass(ABCMeta):
    def __init__(cls, name, bases, dct):
        super(_ExtensionMetaclass, cls).__init__(name, bases, dct)

        if name == "Extension":
            return
        if cls.__base__ is Extension:
            # a new extension type, e.g. ScriptFormat
            cls._registry = {}
            return
        if cls.name is None:
            # shared implementation, e.g. ScriptFormatBase
            return

        kind = cls.extension_type()
        other = kind._registry.get(cls.name)
        if other is not None:
            raise RuntimeError('%s "%s" is implemented twice: by %s.%s and %s.%s' %
                               (kind.__name__, cls.name,
                                other.__module__, other.__name__,
                                cls.__module__, cls.__name__))
        kind._registry[cls.name] = cls


# singleton instances, keyed by (extension type, name)
_instances = {}


class Extension(metaclass=_ExtensionMetaclass):
    """
    Base class of extension types.

    Implementations are singletons, obtained by their name from the
    extension type:

        lua = ScriptFormat.get("lua")

    .. attribute:: name

       User-visible name of the implementation, e.g. the value of the
       ``--format`` option for script formats.
    """
    name = None

    @classmethod
    def extension_type(cls):
        """Returns the extension type class *cls* implements."""
        while cls.__base__ is not Extension:
            cls = cls.__base__
        return cls

    @classmethod
    def get(cls, name):
        """
        Returns the instance of implementation *name*. Unknown names raise
        :exc:`projsync.error.UnsupportedError` listing the known ones.
        """
        kind = cls.extension_type()
        key = (kind, name)
        if key not in _instances:
            try:
                impl = kind._registry[name]
            except KeyError:
                from projsync.error import UnsupportedError
                raise UnsupportedError('unknown %s "%s" (available: %s)' %
                                       (kind.__name__, name, ", ".join(kind.names())))
            _instances[key] = impl()
        return _instances[key]

    @classmethod
    def names(cls):
        """Sorted names of all registered implementations."""
        return sorted(cls.extension_type()._registry)


class ScriptFormat(Extension):
    """
    Dialect of generated build scripts.

    .. attribute:: extension

       Extension of generated files, without the dot.

    .. attribute:: solution_suffix

       Appended to the solution name in the generated file name, so that
       scripts of a solution and of its project with the same name differ.

    .. attribute:: describes_projects

       False for formats that can only write solutions.
    """
    extension = None
    solution_suffix = "_sln"
    describes_projects = True

    @abstractmethod
    def generate_project(self, project, filename, solution=None):
        """
        Writes script describing *project* into *filename*.

        :param solution: The solution the project belongs to, if any.

        Returns the :class:`projsync.io.OutputFile` that was committed.
        """
        raise NotImplementedError

    @abstractmethod
    def generate_solution(self, solution, filename, project_scripts):
        """
        Writes script describing *solution* into *filename*.

        :param project_scripts: Dictionary mapping projects converted
            together with the solution to paths of their scripts, relative
            to the solution script.
        """
        raise NotImplementedError

    def __str__(self):
        return "%s format" % self.name
