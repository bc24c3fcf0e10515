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
The script API. Python build scripts are functions ``build(b)`` that receive
a :class:`Builder` and describe solutions and projects by calling its
methods, e.g.::

    def build(b):
        b.project("hello")
        b.configurations("Debug", "Release")
        b.platforms("Win32", "x64")
        b.kind("ConsoleApp")
        with b.filter("Debug"):
            b.defines("_DEBUG")

The builder keeps the active solution and project and the *selection*: the
configurations (or file configurations) that field setters apply to. The
selection is changed with :meth:`Builder.filter` or :meth:`Builder.select`.
"""

import os
import os.path
import re
import glob
import runpy

import logging
logger = logging.getLogger("projsync.builder")

from projsync import props
from projsync.error import (Error, SelectionError, NotFoundError,
                            UnsupportedError, IdentityError, error_context)
from projsync.identity import uuid_for, parse_guid, identifier_for
from projsync.model import (Project, Solution, CustomBuildRule, IncludeType,
                            make_config_keys, normalize_path)


_KINDS = {
    "application":        ("Application", "Windows"),
    "windowedapp":        ("Application", "Windows"),
    "consoleapplication": ("Application", "Console"),
    "consoleapp":         ("Application", "Console"),
    "dynamiclibrary":     ("DynamicLibrary", "Windows"),
    "sharedlib":          ("DynamicLibrary", "Windows"),
    "staticlibrary":      ("StaticLibrary", "Windows"),
    "staticlib":          ("StaticLibrary", "Windows"),
    "utility":            ("Utility", "Windows"),
    "makefile":           ("Makefile", "Windows"),
    }

# symbols() values: (GenerateDebugInformation, UseDebugLibraries)
_SYMBOLS = {
    "on":        ("OptimizeForDebugging", True),
    "off":       ("No", False),
    "fastlink":  ("OptimizeForFasterLinking", True),
    "fulldebug": ("OptimizeForSharingAndPublishing", True),
    }

# optimize() values: (Optimization, FunctionLevelLinking, IntrinsicFunctions,
#                     EnableCOMDATFolding, OptimizeReferences)
_OPTIMIZE = {
    "custom": ("Custom", True, True, False, False),
    "off":    ("Disabled", False, False, False, False),
    "full":   ("Full", True, True, True, True),
    "on":     ("Full", True, True, True, True),
    "size":   ("MinSpace", True, True, False, False),
    "speed":  ("MaxSpeed", True, True, False, False),
    }

_LANGUAGES = {
    None:  ("C++", "Default"),
    "C":   ("C", "CompileAsC"),
    "C++": ("C++", "CompileAsCpp"),
    "C#":  ("C#", None),
    }

_FILTER_TAGS = ("configurations", "platforms", "files")


class _FilterBlock(object):
    """
    Returned by :meth:`Builder.filter`. When used in a ``with`` statement,
    everything is selected again at the end of the block.
    """
    def __init__(self, builder):
        self.builder = builder

    def __enter__(self):
        return self.builder

    def __exit__(self, exc_type, exc_value, traceback):
        if exc_type is None and self.builder.active_project is not None:
            self.builder.filter()
        return False


class Builder(object):
    """
    Context of running build scripts.

    .. attribute:: solutions

       Solutions defined so far.

    .. attribute:: projects

       Projects defined outside of any solution.

    .. attribute:: active_solution
    .. attribute:: active_project

       The active solution and project, or :const:`None`.

    .. attribute:: selected_configs
    .. attribute:: selected_file_configs

       Project configurations and file configurations selected by the last
       filter of the respective kind.

    .. attribute:: last_scope_was_file_specific

       True if the last filter selected files; setters that apply to files
       then use :attr:`selected_file_configs`.
    """
    def __init__(self, work_dir=None):
        if work_dir is None:
            work_dir = os.getcwd()
        self.work_dir = os.path.abspath(work_dir)
        self.solutions = []
        self.projects = []
        self.active_solution = None
        self.active_project = None
        self.group_path = ""
        self._script_dirs = []
        self._configuration_names = ["Debug", "Release"]
        self._platforms = []
        self._reset_selection()

    def _reset_selection(self):
        self.selected_configs = []
        self.selected_file_configs = []
        self.selected_filters = None
        self.last_scope_was_file_specific = False

    # -----------------------------------------------------------------------
    # running scripts
    # -----------------------------------------------------------------------

    @property
    def script_dir(self):
        """Directory of the script being run."""
        if self._script_dirs:
            return self._script_dirs[-1]
        return self.work_dir

    def run_script(self, path):
        """
        Runs Python build script *path*: the script is executed and its
        ``build()`` function is called with this builder.
        """
        path = os.path.abspath(path)
        if not os.path.isfile(path):
            raise NotFoundError('script "%s" doesn\'t exist' % path)
        logger.debug("running script %s", path)
        self._script_dirs.append(os.path.dirname(path))
        try:
            with error_context(os.path.relpath(path, self.work_dir)):
                namespace = runpy.run_path(path, run_name="__projsync__")
                build = namespace.get("build")
                if not callable(build):
                    raise Error("script doesn't define build() function")
                build(self)
        finally:
            self._script_dirs.pop()

    def invoke_script(self, path):
        """
        Runs another script; relative *path* is relative to the directory of
        the script being run.
        """
        self.run_script(os.path.join(self.script_dir, path.replace("\\", "/")))

    def finish(self):
        """
        Ends the last project and returns list of all solutions built.
        Projects that aren't part of any solution are in :attr:`projects`.
        """
        self._specify_project(None)
        for s in self.solutions:
            s.remove_empty_folders()
        return self.solutions

    # -----------------------------------------------------------------------
    # solutions and projects
    # -----------------------------------------------------------------------

    def _require_solution(self):
        if self.active_solution is None:
            raise SelectionError('no solution specified (use solution("name") to specify one)')
        return self.active_solution

    def _require_project(self):
        if self.active_project is None:
            raise SelectionError('no project specified (use project("name") to specify one)')
        return self.active_project

    def _base_dir(self):
        # project paths are relative to the solution, or to the working
        # directory for projects without a solution
        if self.active_solution is not None and self.active_solution.path:
            return os.path.dirname(os.path.abspath(self.active_solution.path))
        return self.work_dir

    def _relative_dir(self, directory):
        rel = os.path.relpath(directory, self._base_dir())
        return "" if rel == os.curdir else normalize_path(rel)

    def project_dir(self, project=None):
        """Returns absolute directory of *project* (the active one by default)."""
        if project is None:
            project = self._require_project()
        return os.path.normpath(os.path.join(self._base_dir(),
                                             os.path.dirname(project.path).replace("\\", "/")))

    def solution(self, name):
        """
        Starts solution *name* or selects it again if it was already
        defined. The solution file is placed in the working directory.
        """
        self._specify_project(None)
        for s in self.solutions:
            if s.name == name:
                self.active_solution = s
                return s
        path = os.path.join(self.work_dir, name)
        if not path.endswith(".sln"):
            path += ".sln"
        self.active_solution = Solution(name, path)
        self.solutions.append(self.active_solution)
        self.group_path = ""
        logger.debug("new solution %s", name)
        return self.active_solution

    def _specify_project(self, name, external=False):
        if self.active_project is not None and self.active_solution is None:
            if not any(p is self.active_project for p in self.projects):
                self.projects.append(self.active_project)
        self.active_project = None
        self._reset_selection()
        if name is None:
            return None

        existing = None
        if self.active_solution is not None:
            existing = self.active_solution.get_project(name)
        else:
            existing = next((p for p in self.projects if p.name == name), None)
        if existing is not None:
            self.active_project = existing
            return existing

        directory = self._relative_dir(self.script_dir)
        path = os.path.join(directory, name + ".vcxproj") if directory else name + ".vcxproj"
        p = Project(name, normalize_path(path))
        p.is_external = external
        p.guid = identifier_for(name)
        if self.active_solution is not None:
            parent = self.active_solution.folder(self.group_path)
            self.active_solution.add_project(p, parent)
        self.active_project = p
        logger.debug("new %sproject %s (%s)", "external " if external else "", name, p.path)
        return p

    def project(self, name):
        """Starts project *name*, or selects it again."""
        p = self._specify_project(name)
        p.is_external = False
        return p

    def externalproject(self, name):
        """
        Adds reference to a project that isn't described by scripts, only
        referred to (by :meth:`location` and :meth:`uuid`).
        """
        p = self._specify_project(name, external=True)
        p.is_external = True
        return p

    def group(self, path):
        """Places following projects into solution folder *path*."""
        self.group_path = path.replace("\\", "/").strip("/")

    def location(self, path):
        """
        Without a project, sets the working directory. Otherwise sets
        directory of the project, relative to the script being run.
        """
        if self.active_project is None:
            directory = os.path.join(self.script_dir, path)
            if not os.path.isdir(directory):
                raise NotFoundError('path "%s" doesn\'t exist' % path)
            self.work_dir = os.path.abspath(directory)
            return
        directory = os.path.normpath(os.path.join(self.script_dir, path.replace("\\", "/")))
        if not self.active_project.is_external and not os.path.isdir(directory):
            raise NotFoundError('path "%s" doesn\'t exist' % path)
        rel = self._relative_dir(directory)
        name = self.active_project.name + ".vcxproj"
        self.active_project.path = "%s\\%s" % (rel, name) if rel else name

    def uuid(self, name_or_guid):
        """
        Sets identifier of the active project (or solution, if there's no
        active project). The argument is either a GUID or any unique string
        the identifier is generated from.
        """
        guid = uuid_for(name_or_guid)
        if self.active_project is None and self.active_solution is None:
            self._require_project()
        if self.active_solution is not None:
            owner = self.active_project.name if self.active_project is not None else self.active_solution.name
            self.active_solution.identities.register(guid, owner)
        if self.active_project is not None:
            old = self.active_project.guid
            if old is not None and old != guid and self.active_solution is not None:
                self.active_solution.identities.release(old)
            self.active_project.guid = guid
        else:
            self.active_solution.guid = guid
        return guid

    def _generate_keys(self):
        if self.active_project is None:
            solution = self._require_solution()
            solution.config_keys = make_config_keys(self._configuration_names, self._platforms)
            return
        if self.active_project.configurations:
            raise SelectionError("configurations() and platforms() must be used before the project is configured using other functions")
        self.active_project.config_keys = make_config_keys(self._configuration_names, self._platforms)

    def configurations(self, *names):
        """Sets configurations of the active project or solution."""
        self._configuration_names = _unique(names)
        self._generate_keys()

    def platforms(self, *names):
        """Sets platforms of the active project or solution."""
        self._platforms = _unique(names)
        self._generate_keys()

    def vsver(self, year):
        """Sets Visual Studio version (e.g. 2017) of the project or solution."""
        if self.active_project is not None:
            self.active_project.format_version = int(year)
        else:
            self._require_solution().format_version = int(year)

    def VisualStudioVersion(self, version):
        self._require_solution().visual_studio_version = version

    def MinimumVisualStudioVersion(self, version):
        self._require_solution().minimum_visual_studio_version = version

    def language(self, lang=None):
        """
        Sets programming language of the project: "C", "C++" or "C#". Without
        argument, the compiler decides per file.
        """
        project = self._require_project()
        try:
            language, compile_as = _LANGUAGES[lang]
        except KeyError:
            raise UnsupportedError('language "%s" is not supported' % lang)
        if compile_as is not None and not project.is_external and project.config_keys:
            for c in self._selected():
                if props.get_field("CompileAs").applies_to(c):
                    c["CompileAs"] = compile_as
        if not self.last_scope_was_file_specific:
            project.language = language

    def systemversion(self, version):
        """Sets Windows SDK version used by the project."""
        self._require_project().windows_sdk_version = version

    def dependson(self, *names):
        """Adds build order dependencies on projects *names*."""
        self._require_project().dependencies.extend(names)

    def referencesProject(self, path, guid=None):
        """
        Adds reference to project file *path*. The referenced project's
        identifier is read from the file unless *guid* is given; *guid* may
        also be any string the identifier is generated from (an empty string
        means the project file's name).
        """
        project = self._require_project()
        if guid is None:
            from projsync.parser.vcxproj import read_project_guid
            full = os.path.join(self.project_dir(), path.replace("\\", "/"))
            if not os.path.isfile(full):
                raise NotFoundError('referenced project "%s" doesn\'t exist; you can give its uuid '
                                    'to avoid reading it, e.g. referencesProject("%s", "{...}")' % (path, path))
            guid = read_project_guid(full)
        else:
            canonical = parse_guid(guid)
            if canonical is None:
                if "{" in guid or "}" in guid:
                    raise IdentityError('invalid uuid value "%s"' % guid)
                canonical = identifier_for(guid or os.path.splitext(os.path.basename(path.replace("\\", "/")))[0])
            guid = canonical
        f = project.add_file(path, IncludeType.PROJECT_REFERENCE)
        f.project_guid = guid

    def configmap(self, *pairs):
        """
        Maps solution configurations to project configurations, e.g.
        ``configmap("Release", "Debug")`` builds the project in Debug
        configuration when the solution is built in Release. Both full keys
        ("Release|Win32") and configuration names or platforms can be used.
        """
        solution = self._require_solution()
        project = self._require_project()
        if len(pairs) % 2:
            raise Error("configmap() requires pairs of solution and project configurations")
        keys = [str(k) for k in solution.config_keys]
        if len(project.sln_configurations) != len(keys):
            project.sln_configurations = list(keys)
        for i in range(0, len(pairs), 2):
            source = pairs[i].lower()
            target = pairs[i + 1]
            method = None
            for n, key in enumerate(solution.config_keys):
                if "|" in source:
                    if source == str(key).lower():
                        project.sln_configurations[n] = target
                    continue
                if method is None:
                    if source == key.name.lower():
                        method = "name"
                    elif source == key.platform.lower():
                        method = "platform"
                if method == "name" and source == key.name.lower():
                    project.sln_configurations[n] = "%s|%s" % (target, key.platform)
                elif method == "platform" and source == key.platform.lower():
                    project.sln_configurations[n] = "%s|%s" % (key.name, target)

    # -----------------------------------------------------------------------
    # selection
    # -----------------------------------------------------------------------

    def select(self, configuration=None, platform=None, files=None):
        """
        Selects configurations that following setters apply to.

        :param configuration: Configuration name pattern (regular
            expression matched at the start of the name).
        :param platform: Platform pattern (matched at the end).
        :param files: If given, path or wildcard of the project's files;
            the selection then consists of those files' configurations.

        Everything is checked before the selection is changed.
        """
        project = self._require_project()
        if not project.config_keys:
            raise SelectionError("configurations() and platforms() must be specified before using this "
                                 "function; the number of configurations and platforms must be non-zero")

        selected_files = None
        if files is not None:
            selected_files = self._find_files(files)

        pattern = "^%s" % configuration if configuration is not None else ".*?"
        pattern += r"\|"
        pattern += "%s$" % platform if platform is not None else ".*"
        try:
            regex = re.compile(pattern)
        except re.error as e:
            raise SelectionError('invalid filter pattern "%s": %s' % (pattern, e))
        indexes = [i for i, k in enumerate(project.config_keys) if regex.search(str(k))]
        if not indexes:
            details = []
            if configuration is not None:
                details.append("* by configuration pattern '%s', project has only following configurations: %s" %
                               (configuration, ", ".join(project.configuration_names())))
            if platform is not None:
                details.append("* by platform pattern '%s', project has only following platforms: %s" %
                               (platform, ", ".join(project.platforms())))
            raise SelectionError("filter did not select any configuration:\n" + "\n".join(details))

        project.materialize_slots()
        if selected_files is not None:
            self.selected_file_configs = [f.configurations[i] for f in selected_files for i in indexes]
            self.last_scope_was_file_specific = True
        else:
            self.selected_configs = [project.configurations[i] for i in indexes]
            self.last_scope_was_file_specific = False
            self.selected_filters = (configuration, platform)

    def filter(self, *terms):
        """
        Selects configurations using premake-style terms: ``"Debug"`` or
        ``"configurations:Debug"``, ``"platforms:Win32"``, ``"files:a.cpp"``.
        Without arguments, selects the whole project.

        The return value can be used as a context manager, in which case the
        whole project is selected again at the end of the block.
        """
        self._require_project()
        criteria = {}
        for t in terms:
            tag, sep, value = t.partition(":")
            if not sep:
                criteria["configurations"] = t
                continue
            tag = tag.lower()
            if tag not in _FILTER_TAGS:
                raise UnsupportedError('filter tag "%s" is not supported' % tag)
            criteria[tag] = value
        self.select(criteria.get("configurations"),
                    criteria.get("platforms"),
                    criteria.get("files"))
        return _FilterBlock(self)

    def _find_files(self, pattern):
        files = self._require_project().find_files(pattern)
        if not files:
            raise NotFoundError('file not found: "%s"; files must be registered with files() first' % pattern)
        return files

    def _selected(self, force_project=False):
        if force_project or not self.last_scope_was_file_specific:
            if not self.selected_configs:
                self.select()
            return self.selected_configs
        return self.selected_file_configs

    def assign(self, field, value, project_only=None):
        """
        Sets *field* (name) to *value* in all selected configurations.
        Project-only fields always apply to the project's configurations.
        """
        f = props.get_field(field)
        if project_only is None:
            project_only = f.project_only
        if value is not None and value is not props.INHERIT:
            value = f.type.normalize(value)
            f.type.validate(value)
        records = self._selected(project_only)
        if not f.applies_to(records[0]):
            raise SelectionError('%s cannot be set for individual files' % field)
        for r in records:
            f.set(r, value)

    def _append(self, field, items, sep, project_only=None):
        f = props.get_field(field)
        if project_only is None:
            project_only = f.project_only
        records = self._selected(project_only)
        for r in records:
            current = f.get(r)
            if f.is_list:
                f.set(r, list(current or []) + f.type.normalize(sep.join(items)))
            else:
                addition = sep.join(items)
                f.set(r, current + sep + addition if current else addition)

    # -----------------------------------------------------------------------
    # project settings
    # -----------------------------------------------------------------------

    def kind(self, kind, system=None):
        """
        Sets kind of the project: "Application" (or "WindowedApp"),
        "ConsoleApp", "SharedLib", "StaticLib", "Utility" or "Makefile".
        Project-only.
        """
        project = self._require_project()
        if system is not None and system.lower() != "windows":
            raise UnsupportedError('os value "%s" is not supported, only "windows" is' % system)
        try:
            configuration_type, subsystem = _KINDS[kind.lower()]
        except KeyError:
            raise UnsupportedError('kind value "%s" is not supported, supported values are: %s' %
                                   (kind, ", ".join(sorted(set(_KINDS)))))
        if configuration_type == "Utility":
            project.keyword = None
            for p in project.platforms():
                if p.lower() not in ("win32", "x64"):
                    raise UnsupportedError("utility projects can be defined only on platform 'Win32' or 'x64', not '%s'" % p)
        elif project.keyword is None:
            project.keyword = "Win32Proj"
        if project.is_external:
            return
        for c in self._selected(True):
            c["ConfigurationType"] = configuration_type
            c["SubSystem"] = subsystem

    def symbols(self, value):
        """
        Debug symbols: "on", "off", "fastlink" or "fulldebug". Also selects
        debug runtime libraries. Project-only.
        """
        try:
            info, debug_libs = _SYMBOLS[value.lower()]
        except KeyError:
            raise UnsupportedError("allowed symbols() values are: on, off, fastlink, fulldebug")
        for c in self._selected(True):
            c["GenerateDebugInformation"] = info
            c["UseDebugLibraries"] = debug_libs

    def optimize(self, level):
        """
        Optimization level: "off", "size", "speed", "full" (or "on") or
        "custom". Applies to files too.
        """
        try:
            settings = _OPTIMIZE[level.lower()]
        except KeyError:
            raise UnsupportedError("allowed optimize() values are: off, size, speed, on (or full), custom")
        names = ("Optimization", "FunctionLevelLinking", "IntrinsicFunctions",
                 "EnableCOMDATFolding", "OptimizeReferences")
        for c in self._selected():
            for name, value in zip(names, settings):
                f = props.get_field(name)
                if f.applies_to(c):
                    f.set(c, value)

    def toolset(self, toolset):
        """Platform toolset, e.g. "v141". Project-only."""
        self.assign("PlatformToolset", toolset)

    def characterset(self, charset):
        """"Unicode", "MBCS" or "NotSet". Project-only."""
        self.assign("CharacterSet", charset)

    def targetdir(self, directory):
        self.assign("OutDir", directory)

    def objdir(self, directory):
        self.assign("IntDir", directory.rstrip("!"))

    def targetname(self, name):
        self.assign("TargetName", name)

    def targetextension(self, extension):
        self.assign("TargetExt", extension)

    def pchheader(self, header):
        """Uses precompiled header *header* in the selected configurations."""
        for c in self._selected(True):
            c["PrecompiledHeader"] = "Use"
            c["PrecompiledHeaderFile"] = header

    def pchsource(self, source):
        """
        Makes file *source* create the precompiled header, in configurations
        matching the last project filter.
        """
        saved = (self.selected_file_configs, self.last_scope_was_file_specific)
        configuration, platform = self.selected_filters or (None, None)
        self.select(configuration, platform, files=source)
        try:
            for c in self.selected_file_configs:
                c["PrecompiledHeader"] = "Create"
        finally:
            self.selected_file_configs, self.last_scope_was_file_specific = saved

    def flags(self, *flags):
        """
        Sets flags: "LinkTimeOptimization", "MFC", "StaticRuntime" (project
        only), "NoPch", "ExcludeFromBuild" (files too).
        """
        project = self._require_project()
        for flag in flags:
            f = flag.lower()
            if f == "linktimeoptimization":
                self.assign("WholeProgramOptimization", "UseLinkTimeCodeGeneration")
            elif f == "mfc":
                project.keyword = "MFCProj"
                for c in self._selected(True):
                    if c["UseOfMfc"] in (None, "false"):
                        c["UseOfMfc"] = "Dynamic"
            elif f == "staticruntime":
                self.assign("UseOfMfc", "Static")
            elif f == "nopch":
                self.assign("PrecompiledHeader", "NotUsing")
            elif f in ("excludefrombuild", "excludedfrombuild"):
                self.assign("ExcludedFromBuild", True)
            elif f == "noincrementallink":
                self.assign("LinkIncremental", False)
            elif f == "multiprocessorcompile":
                self.assign("MultiProcessorCompilation", True)
            else:
                raise UnsupportedError('flag "%s" is not supported' % flag)

    def defines(self, *defines):
        self._append("PreprocessorDefinitions", defines, ";")

    def includedirs(self, *dirs):
        self._append("AdditionalIncludeDirectories", dirs, ";")

    def usingdirs(self, *dirs):
        self._append("AdditionalUsingDirectories", dirs, ";")

    def disablewarnings(self, *warnings):
        self._append("DisableSpecificWarnings", warnings, ";")

    def sysincludedirs(self, *dirs):
        self._append("IncludePath", dirs, ";")

    def syslibdirs(self, *dirs):
        self._append("LibraryPath", dirs, ";")

    def links(self, *libraries):
        self._append("AdditionalDependencies", libraries, ";")

    def libdirs(self, *dirs):
        self._append("AdditionalLibraryDirectories", dirs, ";")

    def buildoptions(self, *options):
        self._append("AdditionalOptions", options, " ")

    def linkoptions(self, *options):
        self._append("LinkAdditionalOptions", options, " ")

    def objectfilename(self, name):
        self.assign("ObjectFileName", name)

    def prebuildcommands(self, *commands):
        self._append("PreBuildEvent", commands, "\n")

    def prelinkcommands(self, *commands):
        self._append("PreLinkEvent", commands, "\n")

    def postbuildcommands(self, *commands):
        self._append("PostBuildEvent", commands, "\n")

    def RuntimeLibrary(self, value):
        self.assign("RuntimeLibrary", value)

    def ExceptionHandling(self, value):
        self.assign("ExceptionHandling", value)

    def BasicRuntimeChecks(self, value):
        self.assign("BasicRuntimeChecks", value)

    def FunctionLevelLinking(self, value=True):
        self.assign("FunctionLevelLinking", value)

    def IntrinsicFunctions(self, value=True):
        self.assign("IntrinsicFunctions", value)

    def LinkIncremental(self, value=True):
        self.assign("LinkIncremental", value)

    def CLanguageStandard(self, value):
        self.assign("LanguageStandard_C", value)

    def CppLanguageStandard(self, value):
        self.assign("LanguageStandard", value)

    def MultiProcessorCompilation(self, value=True):
        self.assign("MultiProcessorCompilation", value)

    def RunTimeTypeInformation(self, value=True):
        self.assign("RuntimeTypeInfo", value)

    # -----------------------------------------------------------------------
    # files
    # -----------------------------------------------------------------------

    def buildrule(self, rule=None, **kwargs):
        """
        Sets custom build rule of the selected files. Either pass a
        :class:`projsync.model.CustomBuildRule` or its fields as keyword
        arguments (``command``, ``message``, ``outputs``, ...).
        """
        if rule is None:
            rule = CustomBuildRule(**kwargs)
        self._require_project()
        if not self.last_scope_was_file_specific:
            raise SelectionError('buildrule() only applies to files, select them with filter("files:...") first')
        for c in self.selected_file_configs:
            c["CustomBuildRule"] = rule

    def files(self, *patterns):
        """
        Adds files to the project. Plain paths are added as they are;
        wildcards (``*``, ``**`` for subdirectories) are matched in the
        project's directory and must match something, unless prefixed with
        ``?``. Use ``??`` for a path that really starts with ``?``.
        """
        project = self._require_project()
        for pattern in patterns:
            mandatory = True
            if pattern.startswith("??"):
                pattern = pattern[1:]
            elif pattern.startswith("?"):
                pattern = pattern[1:]
                mandatory = False

            if any(c in pattern for c in "*?["):
                found = self._match_files(pattern)
                if not found:
                    if mandatory:
                        raise NotFoundError('no file found which is specified by pattern "%s"; if the file is '
                                            'generated during build, mark it as optional with "?" in front of it '
                                            '(files were searched in "%s")' % (pattern, self.project_dir()))
                    found = [pattern]
            else:
                found = [pattern]

            for path in found:
                f = project.add_file(path)
                if os.path.splitext(f.path)[1].lower() == ".def":
                    self.assign("ModuleDefinitionFile", f.path)

    def _match_files(self, pattern):
        directory = self.project_dir()
        matches = glob.glob(os.path.join(directory, pattern.replace("\\", "/")), recursive=True)
        return sorted(os.path.relpath(m, directory) for m in matches if os.path.isfile(m))

    def removefiles(self, *patterns):
        """
        With the whole project selected, removes files from the project.
        With files selected, excludes them from build in the selected
        configurations instead.
        """
        project = self._require_project()
        for pattern in patterns:
            for f in project.find_files(pattern):
                if not self.last_scope_was_file_specific:
                    project.remove_file(f)
                    continue
                for c in f.configurations:
                    if any(c is x for x in self.selected_file_configs):
                        c["ExcludedFromBuild"] = True


def _unique(items):
    out = []
    for i in items:
        if i not in out:
            out.append(i)
    return out
