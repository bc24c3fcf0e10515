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
Exceptions raised by projsync and helpers for reporting them. Every error
may carry a position: the solution, project, file or input file it relates
to. Code deep down doesn't know it, so :class:`error_context` fills it in on
the way up.
"""

import threading

import logging
logger = logging.getLogger("projsync.error")


class Error(Exception):
    """
    Base class for all projsync errors.

    ``str(e)`` gives ``pos: msg``, the way compilers report errors.

    .. attribute:: msg

        The message alone.

    .. attribute:: pos

        Where the error happened (e.g. ``project "foo"`` or an input file
        name), or :const:`None` if not known.
    """
    def __init__(self, msg, pos=None):
        super(Error, self).__init__(msg)
        self.msg = msg
        self.pos = pos

    def __str__(self):
        if not self.pos:
            return self.msg
        return "%s: %s" % (self.pos, self.msg)


class SelectionError(Error):
    """
    Mistake in a build script's use of the selection cursor: no active
    solution or project, no configurations declared, or a filter that
    doesn't select anything.
    """
    pass


class NotFoundError(Error):
    """A file, project or configuration referenced by name doesn't exist."""
    pass


class IdentityError(Error):
    """Malformed identifier, e.g. uuid() argument that is almost a GUID."""
    pass


class IdentityConflictError(IdentityError):
    """
    Two distinct entities of one solution would get the same identifier.

    .. attribute:: first
    .. attribute:: second

        Names of the two entities, the one owning the identifier first.
    """
    def __init__(self, identifier, first, second, pos=None):
        msg = 'uuid "%s" is already used by "%s", cannot use it for "%s" too' % (identifier, first, second)
        super(IdentityConflictError, self).__init__(msg, pos)
        self.identifier = identifier
        self.first = first
        self.second = second


class UnsupportedError(Error):
    """Value or feature projsync doesn't know, e.g. unknown kind() or format."""
    pass


class ParserError(Error):
    """Broken or unexpected content of a native solution or project file."""
    pass


class TypeError(Error):
    """
    Value that doesn't fit the type of the field it is assigned to.

    .. attribute:: detail

        Explanation of what is wrong with the value, or :const:`None`.

    .. seealso:: :class:`projsync.vartypes.Type`
    """
    def __init__(self, type, value, msg=None, pos=None):
        text = 'value "%s" is not a valid %s value' % (value, type)
        if msg:
            text = "%s: %s" % (text, msg)
        super(TypeError, self).__init__(text, pos)
        self.detail = msg


# error_context instances entered in the current thread, innermost last
_active = threading.local()

def _contexts():
    try:
        return _active.contexts
    except AttributeError:
        _active.contexts = []
        return _active.contexts


def current_pos():
    """Position of the innermost :class:`error_context` that has one."""
    for ctx in reversed(_contexts()):
        pos = ctx.pos
        if pos:
            return pos
    return None


class error_context:
    """
    Adds position to :exc:`Error` exceptions raised without one inside the
    ``with`` block, and to warnings logged there:

    .. code-block:: python

       with error_context(project):
          compactor.project_directives()

    *context* is a string or any object; its ``source_pos`` attribute is used
    if it has one, ``str()`` otherwise.
    """
    def __init__(self, context):
        self.context = context

    def __enter__(self):
        _contexts().append(self)

    def __exit__(self, exc_type, exc_value, traceback):
        _contexts().pop()
        if isinstance(exc_value, Error) and exc_value.pos is None:
            exc_value.pos = self.pos

    @property
    def pos(self):
        if self.context is None:
            return None
        return getattr(self.context, "source_pos", None) or str(self.context)


def warning(msg, *args, **kwargs):
    """
    Logs warning *msg* formatted with *args*, as logging functions do.

    The position is taken from the *pos* keyword argument if given, from the
    active :class:`error_context` otherwise:

    .. code-block:: python

       projsync.error.warning("file %s ignored", path, pos=project)
    """
    pos = kwargs["pos"] if "pos" in kwargs else current_pos()
    logger.warning(msg % args, extra={"pos": pos})
