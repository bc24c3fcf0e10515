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
Deterministic identifiers for solutions, projects and folders.

Visual Studio identifies everything by GUIDs. Random GUIDs would make every
regenerated file differ from the previous one, so the identifiers are derived
from names instead: the same name always yields the same identifier, in any
process and on any machine.
"""

import re
import hashlib

import logging
logger = logging.getLogger("projsync.identity")

from projsync.error import IdentityError, IdentityConflictError


#: Prefix used for solution folder identifiers, so that a folder named the
#: same as a project doesn't get the project's identifier.
FOLDER_SALT = "!#¤%!#¤%"

#: Suffix used for solution identifiers, for the same reason.
SOLUTION_SUFFIX = "_solution"

GUID_RE = re.compile(r"^[{(]?([0-9A-Fa-f]{8}-[0-9A-Fa-f]{4}-[0-9A-Fa-f]{4}-[0-9A-Fa-f]{4}-[0-9A-Fa-f]{12})[)}]?$")


def identifier_for(name):
    """
    Returns identifier for the given *name*, e.g.
    ``{706C7567-696E-7300-0000-000000000000}`` for "plugins".

    UTF-8 encoding of names shorter than 16 bytes is used directly (padded
    with zeros), longer names are hashed with SHA-1 and the first 16 bytes of
    the digest are used. The bytes are formatted in order, i.e. the result is
    a hex dump and not a GUID in its usual mixed-endian byte order.
    """
    data = name.encode("utf-8")
    if len(data) < 16:
        raw = data + b"\0" * (16 - len(data))
    else:
        raw = hashlib.sha1(data).digest()[:16]
    h = raw.hex().upper()
    return "{%s-%s-%s-%s-%s}" % (h[0:8], h[8:12], h[12:16], h[16:20], h[20:32])


def parse_guid(text):
    """
    Returns canonical form (upper case, in braces) of GUID given in *text* or
    :const:`None` if *text* isn't a GUID.
    """
    m = GUID_RE.match(text.strip())
    if m is None:
        return None
    return "{%s}" % m.group(1).upper()


def uuid_for(name_or_guid):
    """
    Interprets argument of the uuid() script function: either an explicit
    GUID, which is used as-is, or any other string, from which an identifier
    is generated using :func:`identifier_for()`.
    """
    guid = parse_guid(name_or_guid)
    if guid is not None:
        return guid
    if "{" in name_or_guid or "}" in name_or_guid:
        raise IdentityError('invalid uuid value "%s"' % name_or_guid)
    return identifier_for(name_or_guid)


def folder_identifier(path):
    """Identifier of the solution folder at *path* (e.g. "libs/3rdparty")."""
    return identifier_for(FOLDER_SALT + path)


def solution_identifier(name):
    """Identifier of the solution *name*, used when it doesn't have one."""
    return identifier_for(name + SOLUTION_SUFFIX)


class IdentityRegistry(object):
    """
    Keeps track of identifiers used within one solution and refuses to give
    the same identifier to two different entities.
    """
    def __init__(self):
        self._owners = {}

    def __contains__(self, identifier):
        return identifier.upper() in self._owners

    def owner(self, identifier):
        """Returns name of the entity owning *identifier* or None."""
        return self._owners.get(identifier.upper())

    def register(self, identifier, owner):
        """
        Records that *owner* (entity name) uses *identifier*. Registering the
        same pair again is fine; registering a different owner throws
        :exc:`projsync.error.IdentityConflictError`.
        """
        key = identifier.upper()
        existing = self._owners.get(key)
        if existing is not None and existing != owner:
            raise IdentityConflictError(identifier, existing, owner)
        logger.debug("identifier %s used by %s", identifier, owner)
        self._owners[key] = owner

    def release(self, identifier):
        self._owners.pop(identifier.upper(), None)
