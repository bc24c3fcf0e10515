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
Helpers for dumping the model into human-readable form.
"""

from projsync.props import INHERIT


def dump_solution(solution):
    """
    Returns string with dumped, human-readable description of *solution*,
    which is an instance of :class:`projsync.model.Solution`.
    """
    out = "solution %s {\n" % solution.name
    if solution.format_version:
        out += "  format %s\n" % solution.format_version
    if solution.guid:
        out += "  uuid %s\n" % solution.guid
    if solution.config_keys:
        out += "  configurations %s\n" % " ".join(str(k) for k in solution.config_keys)
    out += _indent(_dump_children(solution.root))
    out += "}\n"
    for p in solution.all_projects():
        if not p.is_folder and (p.configurations or p.files):
            out += "\n" + dump_project(p)
    return out.strip()


def _dump_children(node):
    out = ""
    for c in node.children:
        if c.is_folder:
            out += "folder %s {\n" % c.name
            out += _indent(_dump_children(c))
            out += "}\n"
        else:
            out += "%s%s %s\n" % ("external " if c.is_external else "",
                                  c.name, c.guid or "")
    return out


def dump_project(project):
    """
    Returns string with dumped, human-readable description of *project*,
    which is an instance of :class:`projsync.model.Project`. Only values
    that differ from the defaults are shown.
    """
    out = "project %s {\n" % project.name
    if project.path:
        out += "  path %s\n" % project.path
    if project.guid:
        out += "  uuid %s\n" % project.guid
    if project.dependencies:
        out += "  dependencies %s\n" % " ".join(project.dependencies)
    for c in project.configurations:
        settings = _dump_record(c)
        out += "  configuration %s {\n" % (c.key,)
        out += _indent(_indent(settings))
        out += "  }\n"
    if project.files:
        out += "  files {\n"
        out += _indent(_indent("\n".join(_dump_file(f) for f in project.files)))
        out += "  }\n"
    out += "}\n"
    return out


def _dump_file(f):
    out = "%s (%s)" % (f.path, f.include_type)
    if f.project_guid:
        out += " -> %s" % f.project_guid
    per_config = ""
    for c in f.configurations:
        settings = _dump_record(c)
        if settings:
            per_config += "%s {\n%s}\n" % (c.key, _indent(settings))
    if per_config:
        out += " {\n" + _indent(per_config) + "}"
    return out


def _dump_value(value):
    if isinstance(value, list):
        return "[%s]" % ", ".join(value)
    return str(value)


def _dump_record(record):
    out = ""
    for field in record.fields():
        value = field.get(record)
        if value is INHERIT or value == field.initial_value(record.for_file):
            continue
        if isinstance(value, (list, tuple)) and not value:
            continue
        out += "%s = %s\n" % (field.name, _dump_value(value))
    return out


def _indent(text):
    lines = text.split("\n")
    out = ""
    for x in lines:
        if x != "":
            x = "  %s" % x
            out += "%s\n" % x
    return out
