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
Built-in script formats. Importing this package registers all of them with
:class:`projsync.api.ScriptFormat`.
"""

import sys
import logging
__logger = logging.getLogger("projsync.plugins")


def __find_all_plugins():
    """
    Finds all built-in plugins and yields their names.
    """
    import pkgutil
    for _, name, _ in pkgutil.walk_packages(__path__):
        yield name


# import all plugins:
__all__ = list(__find_all_plugins())
from . import *
assert __all__, "No plugins found - broken projsync installation?"

__logger.debug("loaded plugins:")
for p in __all__:
    m = sys.modules["projsync.plugins.%s" % p]
    __logger.debug("    %-25s (from %s)", m.__name__, m.__file__)
