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
Readers of native Visual Studio files. :func:`load` recognizes the kind of
the file by its content and returns either a
:class:`projsync.model.Solution` or a :class:`projsync.model.Project`.
"""

from projsync.error import ParserError, NotFoundError


SOLUTION_SIGNATURE = "Microsoft Visual Studio Solution File"


def read_text(path):
    """
    Returns content of text file *path*, without BOM. Invalid UTF-8 is an
    error reported at its line, not replaced.
    """
    try:
        with open(path, "rb") as f:
            data = f.read()
    except IOError as e:
        raise NotFoundError("cannot read %s: %s" % (path, e.strerror))
    try:
        return data.decode("utf-8-sig")
    except UnicodeDecodeError as e:
        line = data.count(b"\n", 0, e.start) + 1
        raise ParserError("invalid UTF-8 byte 0x%02x at offset %d" % (data[e.start], e.start),
                          pos="%s:%d" % (path, line))


def load(path):
    """Loads solution or project file *path*."""
    lines = read_text(path).splitlines()
    header = "\n".join(lines[:2])

    if SOLUTION_SIGNATURE in header:
        from projsync.parser.sln import load_solution
        return load_solution(path)
    elif header.lstrip().startswith("<"):
        from projsync.parser.vcxproj import load_project
        return load_project(path)
    else:
        raise ParserError("unrecognized file format, expected solution or project file", pos=path)
