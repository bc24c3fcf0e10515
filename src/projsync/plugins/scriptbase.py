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
Common code of script formats. :class:`ScriptWriter` knows how to lay out a
project or solution script and how every field is expressed; derived writers
only provide the syntax of calls, lists and filter blocks.
"""

import os.path

import logging
logger = logging.getLogger("projsync.scriptbase")

from projsync.api import ScriptFormat
from projsync.compaction import ProjectCompactor, Scope
from projsync.error import error_context
from projsync.io import OutputFile, EOL_WINDOWS
from projsync.model import IncludeType


class PchSourceLine(str):
    """
    Line setting the file that creates precompiled header. It is written
    without any file filter around it.
    """
    pass


#: Names used for ConfigurationType (and SubSystem) in scripts.
KIND_NAMES = {
    "Application":        "WindowedApp",
    "ConsoleApplication": "ConsoleApp",
    "DynamicLibrary":     "SharedLib",
    "StaticLibrary":      "StaticLib",
    "Utility":            "Utility",
    "Makefile":           "Makefile",
    }

#: Names used for Optimization values in scripts.
OPTIMIZE_NAMES = {
    "Custom":   "custom",
    "Disabled": "off",
    "Full":     "full",
    "MinSpace": "size",
    "MaxSpeed": "speed",
    }

CHARACTER_SET_NAMES = {
    "NotSet":    "NotSet",
    "Unicode":   "Unicode",
    "MultiByte": "MBCS",
    }

#: Script functions for list fields.
LIST_FUNCTIONS = {
    "PreprocessorDefinitions":      "defines",
    "AdditionalUsingDirectories":   "usingdirs",
    "AdditionalIncludeDirectories": "includedirs",
    "AdditionalDependencies":       "links",
    "AdditionalLibraryDirectories": "libdirs",
    "IncludePath":                  "sysincludedirs",
    "LibraryPath":                  "syslibdirs",
    "DisableSpecificWarnings":      "disablewarnings",
    }

# Lists are split into several calls when the line gets longer than this.
MAX_LIST_LINE = 120


def script_path(path):
    """Paths in scripts always use forward slashes."""
    return path.replace("\\", "/")


class ScriptWriter(object):
    """
    Builds text of one script.

    The syntax hooks (:meth:`call`, :meth:`list_call`, :meth:`quote`, ...)
    must be implemented by derived classes; the ``render_*`` methods may be
    overridden where a dialect expresses a setting differently.
    """
    indent_unit = "    "
    comment_prefix = None
    # whether lines describing a solution's project are nested below it
    nest_solution_entries = True

    def __init__(self):
        self.lines = []
        self.level = 0
        self.filters_active = False
        self._renderers = {
            "kind":                      self.render_kind,
            "UseDebugLibraries":         self.render_symbols,
            "PlatformToolset":           self.render_toolset,
            "CharacterSet":              self.render_characterset,
            "UseOfMfc":                  self.render_use_of_mfc,
            "OutDir":                    self.render_targetdir,
            "IntDir":                    self.render_objdir,
            "TargetName":                self.render_targetname,
            "TargetExt":                 self.render_targetextension,
            "Optimization":              self.render_optimize,
            "WholeProgramOptimization":  self.render_whole_program_optimization,
            "LinkIncremental":           self.render_link_incremental,
            "MultiProcessorCompilation": self.render_multiprocessor,
            "PreBuildEvent":             self.render_build_event,
            "PreLinkEvent":              self.render_build_event,
            "PostBuildEvent":            self.render_build_event,
            "ExcludedFromBuild":         self.render_excluded,
            "PrecompiledHeader":         self.render_pch,
            "AdditionalOptions":         self.render_buildoptions,
            "LinkAdditionalOptions":     self.render_linkoptions,
            "ObjectFileName":            self.render_objectfilename,
            "RuntimeLibrary":            self.render_runtime_library,
            "ExceptionHandling":         self.render_exception_handling,
            "BasicRuntimeChecks":        self.render_basic_runtime_checks,
            "LanguageStandard_C":        self.render_c_standard,
            "LanguageStandard":          self.render_cpp_standard,
            "RuntimeTypeInfo":           self.render_rtti,
            "CustomBuildRule":           self.render_buildrule,
            }

    # -----------------------------------------------------------------------
    # syntax hooks
    # -----------------------------------------------------------------------

    def quote(self, text):
        raise NotImplementedError

    def call(self, func, *args):
        """Returns call of script function *func* with quoted string arguments."""
        raise NotImplementedError

    def call_raw(self, func, *args):
        """Like call(), but the arguments are inserted as they are."""
        raise NotImplementedError

    def list_call(self, func, items):
        """Returns call of *func* taking a list of strings."""
        raise NotImplementedError

    def bool_value(self, value):
        raise NotImplementedError

    def begin_block(self, terms):
        """Starts block of lines applying only to filter *terms*."""
        raise NotImplementedError

    def end_block(self):
        raise NotImplementedError

    def reset_filters(self):
        """Ends effect of any previous filter."""
        self.filters_active = False

    def begin_script(self, source):
        """Writes whatever must be in front of the script."""
        self.comment("Generated by projsync from %s, changes will be overwritten." % script_path(source))
        self.line()

    def end_script(self):
        pass

    # -----------------------------------------------------------------------
    # output
    # -----------------------------------------------------------------------

    def line(self, text=""):
        if not text:
            self.lines.append("")
            return
        prefix = self.indent_unit * self.level
        for l in text.split("\n"):
            self.lines.append(prefix + l if l else "")

    def comment(self, text):
        self.line("%s %s" % (self.comment_prefix, text))

    def indent(self):
        self.level += 1

    def dedent(self):
        assert self.level > 0
        self.level -= 1

    def nest(self):
        if self.nest_solution_entries:
            self.indent()

    def unnest(self):
        if self.nest_solution_entries:
            self.dedent()

    def text(self):
        return "\n".join(self.lines) + "\n"

    # -----------------------------------------------------------------------
    # rendering of fields
    # -----------------------------------------------------------------------

    def render(self, step, value, file):
        """
        Returns line expressing *value* of compaction *step*, or :const:`None`
        if there's nothing to write. *file* is the :class:`SourceFile` the
        value belongs to, or :const:`None` for project settings.
        """
        return self._renderers[step](value, file=file, step=step)

    def render_list(self, field, items):
        """
        Returns lines adding *items* to list *field*. Long lists are split
        into several calls.
        """
        func = LIST_FUNCTIONS[field]
        out = []
        chunk = []
        for item in items:
            chunk.append(item)
            if len(self.list_call(func, chunk)) > MAX_LIST_LINE:
                out.append(self.list_call(func, chunk))
                chunk = []
        if chunk:
            out.append(self.list_call(func, chunk))
        return out

    def render_kind(self, value, **kwargs):
        return self.call("kind", KIND_NAMES[value])

    def render_symbols(self, value, **kwargs):
        return self.call("symbols", "on" if value else "off")

    def render_toolset(self, value, **kwargs):
        if value:
            return self.call("toolset", value)

    def render_characterset(self, value, **kwargs):
        return self.call("characterset", CHARACTER_SET_NAMES[value])

    def render_use_of_mfc(self, value, **kwargs):
        if value == "Static":
            return self.call("flags", "StaticRuntime")

    def render_targetdir(self, value, **kwargs):
        if value:
            return self.call("targetdir", value)

    def render_objdir(self, value, **kwargs):
        if value:
            return self.call("objdir", value)

    def render_targetname(self, value, **kwargs):
        if value:
            return self.call("targetname", value)

    def render_targetextension(self, value, **kwargs):
        if value:
            return self.call("targetextension", value)

    def render_optimize(self, value, **kwargs):
        return self.call("optimize", OPTIMIZE_NAMES[value])

    def render_whole_program_optimization(self, value, **kwargs):
        if value == "UseLinkTimeCodeGeneration":
            return self.list_call("flags", ["LinkTimeOptimization"])

    def render_link_incremental(self, value, **kwargs):
        return self.call_raw("LinkIncremental", self.bool_value(value))

    def render_multiprocessor(self, value, **kwargs):
        return self.call_raw("MultiProcessorCompilation", self.bool_value(value))

    def render_build_event(self, value, step, **kwargs):
        if not value:
            return None
        func = step[:-len("Event")].lower() + "commands"
        return self.list_call(func, [value])

    def render_excluded(self, value, file, **kwargs):
        if file is None or not value:
            return None
        return self.list_call("flags", ["ExcludeFromBuild"])

    def render_pch(self, value, file, **kwargs):
        if value.mode == "NotUsing":
            return self.list_call("flags", ["NoPch"])
        if value.mode == "Create":
            line = self.call("pchsource", script_path(value.file))
            return PchSourceLine(line) if file is not None else line
        return self.call("pchheader", value.file)

    def _passthrough(self, func, value):
        value = value.replace(" %(AdditionalOptions)", "").strip()
        if value:
            return self.call(func, value)

    def render_buildoptions(self, value, **kwargs):
        return self._passthrough("buildoptions", value)

    def render_linkoptions(self, value, **kwargs):
        return self._passthrough("linkoptions", value)

    def render_objectfilename(self, value, **kwargs):
        if value:
            return self.call("objectfilename", value)

    def render_runtime_library(self, value, **kwargs):
        return self.call("RuntimeLibrary", value)

    def render_exception_handling(self, value, **kwargs):
        return self.call("ExceptionHandling", value)

    def render_basic_runtime_checks(self, value, **kwargs):
        return self.call("BasicRuntimeChecks", value)

    def render_c_standard(self, value, **kwargs):
        return self.call("CLanguageStandard", value)

    def render_cpp_standard(self, value, **kwargs):
        return self.call("CppLanguageStandard", value)

    def render_rtti(self, value, **kwargs):
        return self.call_raw("RunTimeTypeInformation", self.bool_value(value))

    def render_buildrule(self, value, **kwargs):
        raise NotImplementedError

    # -----------------------------------------------------------------------
    # directives
    # -----------------------------------------------------------------------

    def scope_terms(self, scope):
        if scope.kind == Scope.CONFIGURATION:
            return [scope.value]
        elif scope.kind == Scope.PLATFORM:
            return ["platforms:%s" % scope.value]
        else:
            return [scope.value.name, "platforms:%s" % scope.value.platform]

    def write_lines_block(self, terms, lines):
        self.begin_block(terms)
        for l in lines:
            self.line(l)
        self.end_block()
        self.filters_active = True

    def write_directives(self, directives, file=None):
        """
        Writes compacted *directives*: global lines first, then one filter
        block per scope. For files, every block is restricted to the file.
        """
        wrote_filters = False
        file_term = ["files:%s" % script_path(file.path)] if file is not None else []
        for scope, lines in directives.items():
            if scope.is_global:
                if file is None:
                    for l in lines:
                        self.line(l)
                    continue
                rest = []
                for l in lines:
                    if isinstance(l, PchSourceLine):
                        if self.filters_active:
                            self.reset_filters()
                        self.line(l)
                    else:
                        rest.append(l)
                if rest:
                    self.write_lines_block(file_term, rest)
            else:
                self.write_lines_block(self.scope_terms(scope) + file_term, lines)
                wrote_filters = True
        if wrote_filters and file is None:
            self.reset_filters()

    # -----------------------------------------------------------------------
    # scripts
    # -----------------------------------------------------------------------

    def write_project_header(self, project):
        """Writes project declaration and its structural settings."""
        raise NotImplementedError

    def write_project_references(self, references):
        raise NotImplementedError

    def write_files(self, files):
        paths = [script_path(f.path) for f in files]
        self.line(self.files_call(paths))

    def files_call(self, paths):
        raise NotImplementedError

    def write_project(self, project, source):
        """
        Writes script describing *project*, read from file *source*.
        """
        self.begin_script(source)
        references = [f for f in project.files
                      if f.include_type == IncludeType.PROJECT_REFERENCE]
        self.write_project_header(project, references)
        self.indent()

        compactor = ProjectCompactor(project, self)
        self.write_directives(compactor.project_directives())

        files = sorted((f for f in project.files if not f.is_reference),
                       key=lambda f: f.path)
        if files:
            self.write_files(files)
        for f in project.files:
            with error_context(f):
                self.write_directives(compactor.file_directives(f), f)

        self.dedent()
        self.end_script()

    def solution_guid(self, solution):
        return solution.identifier()

    def write_solution_header(self, solution):
        raise NotImplementedError

    def write_group(self, path):
        self.line()
        self.line(self.call("group", path))

    def write_project_include(self, script):
        raise NotImplementedError

    def write_external_project(self, project):
        path = script_path(project.path or project.name)
        name = os.path.splitext(os.path.basename(path))[0]
        directory = os.path.dirname(path) if project.path else ""
        self.line(self.call("externalproject", name))
        self.nest()
        self.line(self.call("location", script_path(directory) or "."))
        if project.guid is not None:
            self.line(self.call("uuid", project.guid[1:-1]))
        self.line(self.call("language", project.language or "C++"))
        self.line(self.call("kind", "SharedLib"))
        self.unnest()

    def write_solution(self, solution, source, project_scripts):
        """
        Writes script describing *solution*, read from file *source*.
        Projects found in *project_scripts* are included from their scripts,
        others are described as external projects.
        """
        self.begin_script(source)
        self.write_solution_header(solution)
        self.indent()
        group = ""
        for p in solution.all_projects():
            if p.is_folder:
                continue
            g = solution.folder_path(p)
            if g != group:
                self.write_group(g)
                group = g
            self.line()
            if p in project_scripts and not p.is_external:
                self.write_project_include(script_path(project_scripts[p]))
            else:
                self.write_external_project(p)
            with error_context(p):
                deps = solution.dependencies_by_name(p)
            if deps:
                self.line()
                self.nest()
                for d in deps:
                    self.line(self.call("dependson", d))
                self.unnest()
        self.dedent()
        self.end_script()


class ScriptFormatBase(ScriptFormat):
    """
    Implementation of :class:`projsync.api.ScriptFormat` on top of a
    :class:`ScriptWriter` class given in :attr:`writer_class`.
    """
    writer_class = None
    eol = EOL_WINDOWS

    def _commit(self, filename, text, obj):
        f = OutputFile(filename, self.eol, creator=self, create_for=obj)
        f.write(text)
        f.commit()
        return f

    def project_text(self, project, source):
        """Returns text of the script for *project*."""
        w = self.writer_class()
        with error_context(project):
            w.write_project(project, source)
        return w.text()

    def solution_text(self, solution, source, project_scripts):
        """Returns text of the script for *solution*."""
        w = self.writer_class()
        with error_context(solution):
            w.write_solution(solution, source, project_scripts)
        return w.text()

    def generate_project(self, project, filename, solution=None, source=None):
        if source is None:
            source = project.path or project.name
        logger.debug("generating %s script for %s", self.name, project)
        return self._commit(filename, self.project_text(project, os.path.basename(source)), project)

    def generate_solution(self, solution, filename, project_scripts, source=None):
        if source is None:
            source = solution.path or solution.name
        logger.debug("generating %s script for %s", self.name, solution)
        return self._commit(filename,
                            self.solution_text(solution, os.path.basename(source), project_scripts),
                            solution)
