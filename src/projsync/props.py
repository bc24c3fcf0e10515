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
Registry of configuration fields.

Every per-configuration setting of a project or of a source file is described
by a :class:`Field` instance. The list of fields is closed and ordered; code
that needs to walk all settings (readers, compaction, dumping) iterates over
:func:`all_fields()` instead of inspecting attribute names.
"""

from projsync.vartypes import (BoolType, StringType, PathType, EnumType,
                               ListType, CommandsType, BuildRuleType)


class _Inherit(object):
    """
    Type of :data:`INHERIT`. There's only ever one instance.
    """
    _instance = None

    def __new__(cls):
        if cls._instance is None:
            cls._instance = object.__new__(cls)
        return cls._instance

    def __repr__(self):
        return "INHERIT"

    def __copy__(self):
        return self

    def __deepcopy__(self, memo):
        return self

#: Value of a field that takes its value from the project configuration at
#: the same position. :const:`None` is used for fields that are not set at all.
INHERIT = _Inherit()


class Field(object):
    """
    Describes one configuration setting.

    .. attribute:: name

       Name of the field, which is also the name of the element used for it
       in MSBuild project files (e.g. ``OutDir`` or ``Optimization``).

    .. attribute:: type

       Type of the value, as :class:`projsync.vartypes.Type` instance.

    .. attribute:: default

       Value that new configurations start with. If not given, the type's
       empty value is used; :const:`None` means "not set".

    .. attribute:: project_only

       Field is only meaningful for the project as a whole and never for an
       individual source file (e.g. ``OutDir``).

    .. attribute:: inheritable

       File configurations start with :data:`INHERIT` for this field and get
       the value from the project configuration at the same position.

    .. attribute:: forced_default

       Value that is assumed as the global default when reducing the field to
       scoped directives, instead of the most common one.
    """
    _default_unset = object()

    def __init__(self, name, type, default=_default_unset, project_only=False,
                 inheritable=False, forced_default=None, doc=None):
        self.name = name
        self.type = type
        if default is Field._default_unset:
            default = type.empty
        self.default = default
        self.project_only = project_only
        self.inheritable = inheritable
        self.forced_default = forced_default
        self.__doc__ = doc

    def __repr__(self):
        return "Field(%s)" % self.name

    @property
    def is_list(self):
        return isinstance(self.type, ListType)

    def initial_value(self, for_file):
        """
        Returns value for this field in a new configuration record, which is
        a file configuration if *for_file* is true.
        """
        if self.inheritable and for_file:
            return INHERIT
        if isinstance(self.default, (list, tuple)):
            return list(self.default)
        return self.default

    def applies_to(self, record):
        return self.name in record.values

    def get(self, record):
        """Returns value of the field in *record*."""
        return record.values[self.name]

    def set(self, record, value):
        """
        Sets the field in *record* to *value*, after bringing it into canonical
        form and checking it. :const:`None` and :data:`INHERIT` are always
        accepted.
        """
        if value is not None and value is not INHERIT:
            value = self.type.normalize(value)
            self.type.validate(value)
        elif value is INHERIT:
            assert self.inheritable, "field %s can't be inherited" % self.name
        if self.name not in record.values:
            raise KeyError("field %s doesn't apply to %s" % (self.name, record))
        record.values[self.name] = value


def _bool(name, doc, **kwargs):
    return Field(name, BoolType(), doc=doc, **kwargs)

def _opt_bool(name, doc, **kwargs):
    return Field(name, BoolType(), default=None, doc=doc, **kwargs)

def _string(name, doc, **kwargs):
    return Field(name, StringType(), doc=doc, **kwargs)

def _list(name, doc, sep=";", **kwargs):
    return Field(name, ListType(sep), doc=doc, **kwargs)


CONFIGURATION_TYPE = EnumType("kind",
        ["Application", "DynamicLibrary", "StaticLibrary", "Utility", "Makefile"],
        aliases={"sharedlib": "DynamicLibrary",
                 "staticlib": "StaticLibrary",
                 "windowedapp": "Application"})

SUBSYSTEM = EnumType("subsystem", ["NotSet", "Windows", "Console", "Native"])

DEBUG_INFORMATION = EnumType("debug information",
        ["No", "OptimizeForDebugging", "OptimizeForFasterLinking",
         "OptimizeForSharingAndPublishing"],
        aliases={"true": "OptimizeForDebugging",
                 "false": "No",
                 "DebugFastLink": "OptimizeForFasterLinking",
                 "DebugFull": "OptimizeForSharingAndPublishing"})

CHARACTER_SET = EnumType("character set", ["NotSet", "Unicode", "MultiByte"],
        aliases={"none": "NotSet", "mbcs": "MultiByte"})

USE_OF_MFC = EnumType("use of MFC", ["false", "Static", "Dynamic"])

WHOLE_PROGRAM_OPTIMIZATION = EnumType("whole program optimization",
        ["NoWholeProgramOptimization", "UseLinkTimeCodeGeneration",
         "PGInstrument", "PGOptimize", "PGUpdate"],
        aliases={"true": "UseLinkTimeCodeGeneration",
                 "false": "NoWholeProgramOptimization"})

PRECOMPILED_HEADER = EnumType("precompiled header use",
        ["NotUsing", "Create", "Use"])

OPTIMIZATION = EnumType("optimization",
        ["Custom", "Disabled", "MinSpace", "MaxSpeed", "Full"])

RUNTIME_LIBRARY = EnumType("runtime library",
        ["MultiThreaded", "MultiThreadedDebug", "MultiThreadedDLL",
         "MultiThreadedDebugDLL"])

EXCEPTION_HANDLING = EnumType("exception handling",
        ["false", "Async", "Sync", "SyncCThrow"])

BASIC_RUNTIME_CHECKS = EnumType("basic runtime checks",
        ["Default", "StackFrameRuntimeCheck", "UninitializedLocalUsageCheck",
         "EnableFastChecks"])

COMPILE_AS = EnumType("compile as", ["Default", "CompileAsC", "CompileAsCpp"])

C_LANGUAGE_STANDARD = EnumType("C language standard",
        ["Default", "stdc11", "stdc17"])

CPP_LANGUAGE_STANDARD = EnumType("C++ language standard",
        ["Default", "stdcpp14", "stdcpp17", "stdcpp20", "stdcpplatest"])


def std_project_fields():
    """Creates list of fields that only exist on project configurations."""
    return [
        Field("ConfigurationType",
              type=CONFIGURATION_TYPE,
              project_only=True,
              doc="Kind of the output (application, library, ...)."),
        Field("SubSystem",
              type=SUBSYSTEM,
              project_only=True,
              doc="Linker subsystem, distinguishes console applications."),
        _bool("UseDebugLibraries", project_only=True,
              doc="Link with debug versions of runtime libraries."),
        Field("GenerateDebugInformation",
              type=DEBUG_INFORMATION,
              project_only=True,
              doc="How the linker generates debugging information."),
        _string("PlatformToolset", project_only=True,
                doc="Compiler toolset, e.g. v141."),
        Field("CharacterSet",
              type=CHARACTER_SET,
              project_only=True,
              doc="Character set used by Windows API."),
        Field("UseOfMfc",
              type=USE_OF_MFC,
              project_only=True,
              forced_default="Dynamic",
              doc="Whether and how MFC is linked."),
        Field("WholeProgramOptimization",
              type=WHOLE_PROGRAM_OPTIMIZATION,
              project_only=True,
              doc="Link time code generation."),
        Field("OutDir",
              type=PathType(is_dir=True),
              project_only=True,
              doc="Output directory."),
        Field("IntDir",
              type=PathType(is_dir=True),
              project_only=True,
              doc="Intermediate directory."),
        _string("TargetName", project_only=True,
                doc="Output file name without extension."),
        _string("TargetExt", project_only=True,
                doc="Output file extension, including the dot."),
        _opt_bool("LinkIncremental", project_only=True,
                  doc="Incremental linking."),
        _bool("EnableCOMDATFolding", project_only=True,
              doc="Identical COMDAT folding (/OPT:ICF)."),
        _bool("OptimizeReferences", project_only=True,
              doc="Eliminate unreferenced functions and data (/OPT:REF)."),
        _string("ModuleDefinitionFile", project_only=True,
                doc="Module definition (.def) file."),
        Field("PreBuildEvent", type=CommandsType(), project_only=True,
              doc="Commands run before the build."),
        Field("PreLinkEvent", type=CommandsType(), project_only=True,
              doc="Commands run before linking."),
        Field("PostBuildEvent", type=CommandsType(), project_only=True,
              doc="Commands run after the build."),
        _list("IncludePath", project_only=True,
              doc="System include directories."),
        _list("LibraryPath", project_only=True,
              doc="System library directories."),
        _list("AdditionalDependencies", project_only=True,
              doc="Libraries and objects to link with."),
        _list("AdditionalLibraryDirectories", project_only=True,
              doc="Library search directories."),
        _opt_bool("MultiProcessorCompilation", project_only=True,
                  doc="Compile multiple files in parallel (/MP)."),
        ]


def std_file_fields():
    """Creates list of fields applicable to both projects and files."""
    return [
        _bool("ExcludedFromBuild",
              doc="Don't build in this configuration."),
        Field("PrecompiledHeader",
              type=PRECOMPILED_HEADER,
              default=INHERIT,
              inheritable=True,
              doc="Whether a precompiled header is created, used or not used."),
        _string("PrecompiledHeaderFile",
                doc="Precompiled header, in the #include form."),
        Field("Optimization",
              type=OPTIMIZATION,
              default=None,
              inheritable=True,
              doc="Optimization level."),
        _list("PreprocessorDefinitions",
              doc="Preprocessor symbols to define."),
        _list("AdditionalUsingDirectories",
              doc="Directories searched for #using references."),
        _list("AdditionalIncludeDirectories",
              doc="Include directories."),
        _list("DisableSpecificWarnings",
              doc="Compiler warnings to disable."),
        _string("AdditionalOptions",
                doc="Options passed to the compiler as-is."),
        _string("LinkAdditionalOptions",
                doc="Options passed to the linker as-is."),
        _string("ObjectFileName",
                doc="Object file name or directory."),
        _opt_bool("FunctionLevelLinking",
                  doc="Package functions as COMDATs (/Gy)."),
        _opt_bool("IntrinsicFunctions",
                  doc="Use intrinsic functions (/Oi)."),
        Field("RuntimeLibrary", type=RUNTIME_LIBRARY, default=None,
              doc="C runtime library to use."),
        Field("ExceptionHandling", type=EXCEPTION_HANDLING, default=None,
              doc="C++ exception handling model."),
        Field("BasicRuntimeChecks", type=BASIC_RUNTIME_CHECKS, default=None,
              doc="Basic runtime error checks."),
        Field("CompileAs", type=COMPILE_AS, default=None,
              doc="Language the sources are compiled as."),
        Field("LanguageStandard_C", type=C_LANGUAGE_STANDARD, default=None,
              doc="C language standard."),
        Field("LanguageStandard", type=CPP_LANGUAGE_STANDARD, default=None,
              doc="C++ language standard."),
        _opt_bool("RuntimeTypeInfo",
                  doc="Run-time type information."),
        Field("CustomBuildRule", type=BuildRuleType(), default=None,
              doc="Custom build step for the file."),
        ]


_all_fields = std_project_fields() + std_file_fields()
_fields_by_name = dict((f.name, f) for f in _all_fields)


def all_fields():
    """Returns list of all fields, in registry order."""
    return _all_fields

def project_fields():
    """Returns fields present on project configurations."""
    return [f for f in _all_fields if f.name != "CustomBuildRule"]

def file_fields():
    """Returns fields present on file configurations."""
    return [f for f in _all_fields if not f.project_only]

def get_field(name):
    """
    Returns field with given name. Throws :exc:`KeyError` if there's no such
    field.
    """
    return _fields_by_name[name]
