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
premake5 Lua scripts.
"""

import os.path

from projsync.plugins.scriptbase import ScriptWriter, ScriptFormatBase, script_path


RUNTIME_LIBRARIES = {
    "MultiThreaded":         ("On", "Release"),
    "MultiThreadedDebug":    ("On", "Debug"),
    "MultiThreadedDLL":      ("Off", "Release"),
    "MultiThreadedDebugDLL": ("Off", "Debug"),
    }

EXCEPTION_HANDLING = {
    "false":      "Off",
    "Sync":       "On",
    "Async":      "SEH",
    "SyncCThrow": "CThrow",
    }

C_DIALECTS = {
    "stdc11": "C11",
    "stdc17": "C17",
    }

CPP_DIALECTS = {
    "stdcpp14":     "C++14",
    "stdcpp17":     "C++17",
    "stdcpp20":     "C++20",
    "stdcpplatest": "C++latest",
    }


class LuaWriter(ScriptWriter):
    comment_prefix = "--"

    def quote(self, text):
        text = text.replace("\\", "\\\\").replace('"', '\\"')
        text = text.replace("\r", "").replace("\n", "\\r\\n")
        return '"%s"' % text

    def call(self, func, *args):
        if len(args) == 1:
            return "%s %s" % (func, self.quote(args[0]))
        return "%s(%s)" % (func, ", ".join(self.quote(a) for a in args))

    def call_raw(self, func, *args):
        return "%s(%s)" % (func, ", ".join(args))

    def list_call(self, func, items):
        return "%s { %s }" % (func, ", ".join(self.quote(i) for i in items))

    def bool_value(self, value):
        return "true" if value else "false"

    def begin_block(self, terms):
        self.line(self.list_call("filter", terms))
        self.indent()

    def end_block(self):
        self.dedent()
        self.line()

    def reset_filters(self):
        self.line("filter {}")
        self.line()
        super(LuaWriter, self).reset_filters()

    def files_call(self, paths):
        return "files {\n%s\n}" % ",\n".join(self.indent_unit + self.quote(p) for p in paths)

    # premake has no direct counterparts of these, use what is closest
    def render_objdir(self, value, **kwargs):
        if value:
            # "!" stops premake from appending its own subdirectories
            return self.call("objdir", value + "!")

    def render_link_incremental(self, value, **kwargs):
        if not value:
            return self.list_call("flags", ["NoIncrementalLink"])

    def render_multiprocessor(self, value, **kwargs):
        if value:
            return self.list_call("flags", ["MultiProcessorCompile"])

    def render_build_event(self, value, step, **kwargs):
        if step == "PreLinkEvent":
            return None
        return super(LuaWriter, self).render_build_event(value, step=step, **kwargs)

    def render_runtime_library(self, value, **kwargs):
        static, runtime = RUNTIME_LIBRARIES[value]
        return "%s\n%s" % (self.call("staticruntime", static), self.call("runtime", runtime))

    def render_exception_handling(self, value, **kwargs):
        return self.call("exceptionhandling", EXCEPTION_HANDLING[value])

    def render_basic_runtime_checks(self, value, **kwargs):
        if value == "Default":
            return self.list_call("flags", ["NoRuntimeChecks"])

    def render_c_standard(self, value, **kwargs):
        if value in C_DIALECTS:
            return self.call("cdialect", C_DIALECTS[value])

    def render_cpp_standard(self, value, **kwargs):
        if value in CPP_DIALECTS:
            return self.call("cppdialect", CPP_DIALECTS[value])

    def render_rtti(self, value, **kwargs):
        return self.call("rtti", "On" if value else "Off")

    def render_buildrule(self, value, **kwargs):
        entries = [("description", value.message),
                   ("commands", value.command),
                   ("output", value.outputs)]
        if value.additional_inputs:
            entries.append(("inputs", value.additional_inputs))
        lines = ["%s%s = %s," % (self.indent_unit, k, self.quote(v)) for k, v in entries]
        if not value.link_objects:
            lines.append("%slinkobjects = false," % self.indent_unit)
        return "buildrule {\n%s\n}" % "\n".join(lines)

    def write_project_header(self, project, references):
        for r in references:
            self.write_reference(r)
        self.line(self.call("project", project.name))
        self.indent()
        self.line(self.call("location", "."))
        self.line("configurations { %s }" % ", ".join(self.quote(n) for n in project.configuration_names()))
        self.line("platforms { %s }" % ", ".join(self.quote(p) for p in project.platforms()))
        if project.guid is not None:
            self.line(self.call("uuid", project.guid[1:-1]))
        if project.windows_sdk_version:
            self.line(self.call("systemversion", project.windows_sdk_version))
        for r in references:
            self.line(self.list_call("links", [self.reference_name(r)]))
        self.dedent()

    def reference_name(self, ref):
        return os.path.splitext(os.path.basename(script_path(ref.path)))[0]

    def write_reference(self, ref):
        self.line(self.call("externalproject", self.reference_name(ref)))
        self.indent()
        self.line(self.call("location", os.path.dirname(script_path(ref.path)) or "."))
        if ref.project_guid:
            self.line(self.call("uuid", ref.project_guid[1:-1]))
        self.line(self.call("kind", "SharedLib"))
        self.dedent()
        self.line()

    def write_solution_header(self, solution):
        self.line(self.call("solution", solution.name))
        self.indent()
        if solution.format_version is not None:
            self.comment("vsver %d" % solution.format_version)
        if solution.visual_studio_version:
            self.comment("VisualStudioVersion %s" % solution.visual_studio_version)
        if solution.minimum_visual_studio_version:
            self.comment("MinimumVisualStudioVersion %s" % solution.minimum_visual_studio_version)
        guid = self.solution_guid(solution)
        if guid is not None:
            self.line(self.call("uuid", guid[1:-1]))
        self.line("configurations { %s }" % ", ".join(self.quote(n) for n in solution.configuration_names()))
        self.line("platforms { %s }" % ", ".join(self.quote(p) for p in solution.platforms()))
        self.dedent()

    def write_project_include(self, script):
        self.line("include %s" % self.quote(script))


class LuaFormat(ScriptFormatBase):
    """
    premake5 Lua scripts, the declarative dialect.
    """
    name = "lua"
    extension = "lua"
    writer_class = LuaWriter
