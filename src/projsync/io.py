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
Writing of generated scripts. A script is only written when its content
differs from what is already on disk, so that converting unchanged input
again leaves the files, and their timestamps, alone.
"""

import os
import os.path
import sys

import logging
logger = logging.getLogger("projsync.io")


# Pretend to write files, but don't touch the disk
dry_run = False

# Print unified diff against the existing file instead of writing it
diff_only = False

# Write the file even if its content wouldn't change
force_output = False

# Statistics of commit() results since the last reset()
num_created = 0
num_modified = 0
num_unchanged = 0

EOL_WINDOWS = "win"
EOL_UNIX    = "unix"

# filename -> (creator, create_for) of every OutputFile created
_all_written_files = {}


def reset():
    """
    Clears statistics and the record of written files, for running several
    conversions in one process.
    """
    global num_created, num_modified, num_unchanged
    _all_written_files.clear()
    num_created = num_modified = num_unchanged = 0


def _relative(filename):
    try:
        return os.path.relpath(filename)
    except ValueError:
        # different drive on Windows
        return filename


def _read_existing(filename):
    try:
        with open(filename, "rb") as f:
            return f.read()
    except IOError:
        return None


class OutputFile(object):
    """
    Generated file. Text is accumulated with write() and nothing happens on
    disk until commit() is called::

      f = io.OutputFile("hello.lua", io.EOL_WINDOWS, creator=fmt, create_for=project)
      f.write(text)
      f.commit()

    Two OutputFile objects for the same filename are an error: it means two
    projects (or a project and a solution) would overwrite each other's
    script.
    """
    def __init__(self, filename, eol, charset="utf-8",
                 creator=None, create_for=None):
        """
        :param filename:   Output file, absolute or relative to CWD.
        :param eol:        EOL_WINDOWS or EOL_UNIX; write() always takes
                           ``\\n`` line endings.
        :param charset:    Encoding of the file.
        :param creator:    What writes the file (a script format), for
                           error messages.
        :param create_for: What the file describes (a project or solution).
        """
        previous = _all_written_files.get(filename)
        if previous is not None:
            from projsync.error import Error
            raise Error("conflict in file %s, generated both by %s for %s and %s for %s" %
                        (filename, previous[0], previous[1], creator, create_for))
        _all_written_files[filename] = (creator, create_for)

        self.filename = filename
        self.eol = eol
        self.charset = charset
        self.text = ""

    def write(self, text):
        self.text += text

    def encoded(self):
        """Content of the file as it will be written."""
        text = self.text
        if self.eol == EOL_WINDOWS:
            text = text.replace("\n", "\r\n")
        return text.encode(self.charset)

    def _show_diff(self, old, new):
        from difflib import unified_diff
        old_lines = old.decode(self.charset, "replace").splitlines(True) if old is not None else []
        new_lines = new.decode(self.charset).splitlines(True)
        for line in unified_diff(old_lines, new_lines,
                                 os.path.normpath(os.path.join("old", self.filename)),
                                 os.path.normpath(os.path.join("new", self.filename))):
            sys.stdout.write(line)

    def commit(self):
        """
        Writes the file if its content changed (or :data:`force_output` is
        set). Returns true if the file was written, or would have been in
        :data:`dry_run` mode.
        """
        global num_created, num_modified, num_unchanged
        data = self.encoded()
        old = None if force_output else _read_existing(self.filename)

        if old == data:
            num_unchanged += 1
            logger.info(".\t%s", _relative(self.filename))
            return False
        if diff_only:
            self._show_diff(old, data)
            return False

        if old is None and not os.path.exists(self.filename):
            num_created += 1
            status = "A"
        else:
            num_modified += 1
            status = "U"
        logger.info("%s\t%s", status, _relative(self.filename))

        if dry_run:
            return True

        directory = os.path.dirname(self.filename)
        if directory and not os.path.isdir(directory):
            os.makedirs(directory)
        with open(self.filename, "wb") as f:
            f.write(data)
        return True
