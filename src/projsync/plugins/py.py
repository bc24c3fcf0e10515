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
Python builder scripts. Each script defines ``build(b)``, which describes the
project or solution by calling methods of :class:`projsync.builder.Builder`.
"""

from projsync.plugins.scriptbase import ScriptWriter, ScriptFormatBase, script_path


class PyWriter(ScriptWriter):
    comment_prefix = "#"
    nest_solution_entries = False

    def quote(self, text):
        text = text.replace("\\", "\\\\").replace('"', '\\"')
        text = text.replace("\r", "").replace("\n", "\\n")
        return '"%s"' % text

    def call(self, func, *args):
        return "b.%s(%s)" % (func, ", ".join(self.quote(a) for a in args))

    def call_raw(self, func, *args):
        return "b.%s(%s)" % (func, ", ".join(args))

    def list_call(self, func, items):
        return self.call(func, *items)

    def bool_value(self, value):
        return "True" if value else "False"

    def begin_block(self, terms):
        self.line("with %s:" % self.list_call("filter", terms))
        self.indent()

    def end_block(self):
        self.dedent()

    def files_call(self, paths):
        return "b.files(\n%s\n)" % "\n".join("%s%s," % (self.indent_unit, self.quote(p)) for p in paths)

    def render_buildrule(self, value, **kwargs):
        args = [("command", value.command)]
        if value.message:
            args.append(("message", value.message))
        if value.outputs:
            args.append(("outputs", value.outputs))
        if value.additional_inputs:
            args.append(("additional_inputs", value.additional_inputs))
        lines = ["%s%s=%s," % (self.indent_unit, k, self.quote(v)) for k, v in args]
        if not value.link_objects:
            lines.append("%slink_objects=False," % self.indent_unit)
        return "b.buildrule(\n%s\n)" % "\n".join(lines)

    def write_project_header(self, project, references):
        self.line("def build(b):")
        self.indent()
        self.line(self.call("project", project.name))
        if project.format_version is not None:
            self.line(self.call_raw("vsver", str(project.format_version)))
        self.line(self.list_call("configurations", project.configuration_names()))
        self.line(self.list_call("platforms", project.platforms()))
        if project.guid is not None:
            self.line(self.call("uuid", project.guid[1:-1]))
        if project.language and project.language != "C++":
            self.line(self.call("language", project.language))
        if project.windows_sdk_version:
            self.line(self.call("systemversion", project.windows_sdk_version))
        for r in references:
            guid = r.project_guid[1:-1] if r.project_guid else ""
            self.line(self.call("referencesProject", script_path(r.path), guid))
        self.line()
        self.dedent()

    def write_solution_header(self, solution):
        self.line("def build(b):")
        self.indent()
        self.line(self.call("solution", solution.name))
        if solution.format_version is not None:
            self.line(self.call_raw("vsver", str(solution.format_version)))
        if solution.visual_studio_version:
            self.line(self.call("VisualStudioVersion", solution.visual_studio_version))
        if solution.minimum_visual_studio_version:
            self.line(self.call("MinimumVisualStudioVersion", solution.minimum_visual_studio_version))
        guid = self.solution_guid(solution)
        if guid is not None:
            self.line(self.call("uuid", guid[1:-1]))
        self.line(self.list_call("configurations", solution.configuration_names()))
        self.line(self.list_call("platforms", solution.platforms()))
        self.dedent()

    def write_project_include(self, script):
        self.line(self.call("invoke_script", script))


class PyFormat(ScriptFormatBase):
    """
    Python scripts run by :meth:`projsync.builder.Builder.invoke_script`,
    the imperative dialect.
    """
    name = "py"
    extension = "py"
    writer_class = PyWriter
