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
Reduction of per-configuration values to scoped directives.

A project stores a value of every setting for every configuration key, but
scripts describe them much more compactly: a global value, overridden for
some configuration name or platform, and only exceptionally for an exact
configuration. :func:`compact` finds such a description for one field;
:class:`ProjectCompactor` runs it over all fields of a project and its files.

The result of compaction are :class:`Directives`, rendered lines grouped by
:class:`Scope`. Replaying them in the order Global, configuration name,
platform, exact key gives back the original values.
"""

from collections import namedtuple, OrderedDict

import logging
logger = logging.getLogger("projsync.compaction")

from projsync import props
from projsync.props import INHERIT
from projsync.model import IncludeType


class Scope(namedtuple("Scope", ["kind", "value"])):
    """
    Breadth at which a directive applies. Use the :data:`Scope.GLOBAL`
    constant or one of the class methods to create scopes.
    """
    __slots__ = ()

    # kinds, in replay order
    GLOBAL_KIND = 0
    CONFIGURATION = 1
    PLATFORM = 2
    KEY = 3

    @classmethod
    def by_configuration(cls, name):
        return cls(cls.CONFIGURATION, name)

    @classmethod
    def by_platform(cls, platform):
        return cls(cls.PLATFORM, platform)

    @classmethod
    def by_key(cls, key):
        return cls(cls.KEY, key)

    @property
    def is_global(self):
        return self.kind == Scope.GLOBAL_KIND

    def matches(self, key):
        """Returns true if the scope applies to configuration *key*."""
        if self.kind == Scope.GLOBAL_KIND:
            return True
        elif self.kind == Scope.CONFIGURATION:
            return self.value == key.name
        elif self.kind == Scope.PLATFORM:
            return self.value == key.platform
        else:
            return self.value == key

    def __str__(self):
        if self.kind == Scope.GLOBAL_KIND:
            return "global"
        elif self.kind == Scope.CONFIGURATION:
            return "configuration %s" % self.value
        elif self.kind == Scope.PLATFORM:
            return "platform %s" % self.value
        else:
            return "configuration %s" % str(self.value)

Scope.GLOBAL = Scope(Scope.GLOBAL_KIND, None)


class Directives(object):
    """
    Lines produced by compaction, grouped by scope. Scopes are kept in the
    order in which they were first used; a scope stays known even if its
    lines are later taken out (see :meth:`take`).
    """
    def __init__(self):
        self._lines = OrderedDict()

    def add(self, scope, line):
        self._lines.setdefault(scope, []).append(line)

    def __contains__(self, scope):
        return scope in self._lines

    def __getitem__(self, scope):
        return self._lines.get(scope, [])

    def __bool__(self):
        return any(self._lines.values())

    def scopes(self):
        """Returns all scopes used so far, in first-seen order."""
        return list(self._lines.keys())

    def take(self, scope, predicate):
        """
        Removes lines of *scope* for which *predicate* is true and returns
        them.
        """
        lines = self._lines.get(scope, [])
        taken = [x for x in lines if predicate(x)]
        if taken:
            lines[:] = [x for x in lines if not predicate(x)]
        return taken

    def extend(self, scope, lines):
        if lines:
            self._lines.setdefault(scope, []).extend(lines)

    def items(self):
        """
        Yields (scope, lines) pairs for non-empty scopes: the global scope
        first, then other scopes in first-seen order.
        """
        lines = self._lines.get(Scope.GLOBAL)
        if lines:
            yield (Scope.GLOBAL, lines)
        for scope, lines in self._lines.items():
            if lines and not scope.is_global:
                yield (scope, lines)

    def replay(self, config_keys):
        """
        Returns dictionary mapping every key from *config_keys* to the list of
        lines that apply to it, in the order they take effect.
        """
        out = OrderedDict()
        for key in config_keys:
            applied = []
            for kind in (Scope.GLOBAL_KIND, Scope.CONFIGURATION, Scope.PLATFORM, Scope.KEY):
                for scope, lines in self._lines.items():
                    if scope.kind == kind and scope.matches(key):
                        applied.extend(lines)
            out[key] = applied
        return out


_missing = object()


def _choose_default(values):
    # the value with strictly highest number of occurrences, if any
    counts = OrderedDict()
    for v in values:
        if v is None:
            continue
        counts[v] = counts.get(v, 0) + 1
    if not counts:
        return None
    top = max(counts.values())
    winners = [v for v, n in counts.items() if n == top]
    if len(winners) == 1:
        return winners[0]
    return None


def compact(config_keys, values, render, directives, forced_default=None):
    """
    Finds scoped directives for one field and adds them to *directives*.

    :param config_keys: List of :class:`projsync.model.ConfigKey`.
    :param values: Values of the field, one per key; :const:`None` means the
        field is not set in that configuration and is ignored.
    :param render: Function converting a value to a line; may return an
        empty value if there's nothing to write for the value.
    :param directives: :class:`Directives` to add lines to. Scopes already
        present there are preferred.
    :param forced_default: Value to use as the global default instead of
        the most common one.

    Returns ordered dictionary with the chosen scope of every distinct
    (scope, value) assignment.
    """
    assert len(config_keys) == len(values)

    check_names = len(set(k.name for k in config_keys)) > 1
    check_platforms = len(set(k.platform for k in config_keys)) > 1

    default = forced_default
    if default is None:
        default = _choose_default(values)

    # Weigh configuration names and platforms whose configurations all share
    # the same value. Once some configuration disagrees, the axis is out.
    weights = OrderedDict()
    axis_value = {}
    usable = {}
    for key, value in zip(config_keys, values):
        if value is None:
            continue
        for scope in (Scope.by_configuration(key.name), Scope.by_platform(key.platform)):
            if scope in usable:
                if not usable[scope]:
                    continue
                if axis_value[scope] != value:
                    usable[scope] = False
                    weights.pop(scope, None)
                    continue
            else:
                usable[scope] = True
                axis_value[scope] = value
            if default is None or value != default:
                weights[scope] = weights.get(scope, 0) + 1

    for scope in directives.scopes():
        weights[scope] = weights.get(scope, 0) + 1

    # a scope covering just one configuration isn't worth it
    eligible = set(s for s, w in weights.items() if w > 1)

    assigned = OrderedDict()
    for key, value in zip(config_keys, values):
        if value is None:
            continue
        if assigned.get(Scope.GLOBAL, _missing) == value:
            continue

        by_name = Scope.by_configuration(key.name)
        by_platform = Scope.by_platform(key.platform)
        if assigned.get(by_name, _missing) == value or \
           assigned.get(by_platform, _missing) == value:
            continue

        if default is not None and value == default:
            assigned[Scope.GLOBAL] = value
            continue

        use_name = check_names and by_name not in assigned
        if use_name and by_name in eligible:
            assigned[by_name] = value
            continue

        use_platform = check_platforms and by_platform not in assigned
        if use_platform and by_platform in eligible:
            assigned[by_platform] = value
            continue

        assigned[Scope.by_key(key)] = value

    for scope, value in assigned.items():
        line = render(value)
        if not line:
            continue
        directives.add(scope, line)

    return assigned


def compact_list(config_keys, lists, render, directives):
    """
    Compacts a list-valued field one element at a time.

    Elements are taken in the order they first appear. For each of them, the
    value in a configuration is the element itself if the configuration's
    list contains it, or an empty string if it doesn't; this is compacted
    with :func:`compact` and *render* is called with either.
    """
    remaining = [list(x) if x else [] for x in lists]
    while True:
        element = _missing
        for r in remaining:
            if r:
                element = r[0]
                break
        if element is _missing:
            break
        values = []
        for r in remaining:
            if element in r:
                r.remove(element)
                values.append(element)
            else:
                values.append("")
        compact(config_keys, values, render, directives)


def resolve_inheritance(field, project_configs, file_configs=None,
                        project_default=None):
    """
    Returns values of *field* with :data:`projsync.props.INHERIT` replaced by
    concrete values.

    Project configurations that inherit get *project_default*. If
    *file_configs* is given, values of the file are returned instead, with
    inherited ones taken from the project configuration at the same
    position. The model isn't modified.
    """
    def project_value(i):
        v = field.get(project_configs[i])
        return project_default if v is INHERIT else v

    if file_configs is None:
        return [project_value(i) for i in range(len(project_configs))]

    assert len(file_configs) == len(project_configs)
    values = []
    for i, fc in enumerate(file_configs):
        v = field.get(fc)
        values.append(project_value(i) if v is INHERIT else v)
    return values


class PchUse(namedtuple("PchUse", ["mode", "file"])):
    """
    Precompiled header setting combined with the file it refers to: the
    source file for "Create", the header for "Use".
    """
    __slots__ = ()

PCH_NOT_USING = PchUse("NotUsing", "")


class ListEntry(namedtuple("ListEntry", ["field", "item"])):
    """Placeholder line for one element of a list field."""
    __slots__ = ()


#: List fields in the order they are compacted and written.
LIST_FIELDS = [
    "PreprocessorDefinitions",
    "AdditionalUsingDirectories",
    "AdditionalIncludeDirectories",
    "AdditionalDependencies",
    "AdditionalLibraryDirectories",
    "IncludePath",
    "LibraryPath",
    "DisableSpecificWarnings",
    ]

#: Fields compacted for projects before the file list, in this order.
#: "kind" combines ConfigurationType and SubSystem.
PROJECT_STEPS = [
    "kind",
    "UseDebugLibraries",
    "PlatformToolset",
    "CharacterSet",
    "UseOfMfc",
    "OutDir",
    "IntDir",
    "TargetName",
    "TargetExt",
    "Optimization",
    "WholeProgramOptimization",
    "LinkIncremental",
    "MultiProcessorCompilation",
    "PreBuildEvent",
    "PreLinkEvent",
    "PostBuildEvent",
    ]

#: Fields compacted for both projects and files, after PROJECT_STEPS.
ENTRY_STEPS = [
    "ExcludedFromBuild",
    "PrecompiledHeader",
    "AdditionalOptions",
    "LinkAdditionalOptions",
    "ObjectFileName",
    "RuntimeLibrary",
    "ExceptionHandling",
    "BasicRuntimeChecks",
    "LanguageStandard_C",
    "LanguageStandard",
    "RuntimeTypeInfo",
    "CustomBuildRule",
    ]

# steps that only make sense for compiled sources
_COMPILE_STEPS = set(["PrecompiledHeader", "AdditionalOptions", "LinkAdditionalOptions"])


def effective_include_type(f):
    """Files with a custom build rule are built as custom build items."""
    if f.has_custom_build_rule:
        return IncludeType.CUSTOM_BUILD
    return f.include_type


class ProjectCompactor(object):
    """
    Produces :class:`Directives` for a project and for each of its files.

    The *renderer* must provide ``render(step, value, file)``, returning a
    line or an empty value, and ``render_list(field, items)``, returning a
    list of lines for the given list field elements.

    Fields are always processed in the same order (:data:`PROJECT_STEPS`,
    :data:`ENTRY_STEPS`, :data:`LIST_FIELDS`), because scopes chosen for
    earlier fields are preferred for later ones.
    """
    def __init__(self, project, renderer):
        self.project = project
        self.renderer = renderer

    @property
    def keys(self):
        return self.project.config_keys

    def _render_with(self, step, file):
        return lambda value: self.renderer.render(step, value, file)

    def _compact(self, step, values, directives, file=None, forced_default=None):
        compact(self.keys, values, self._render_with(step, file), directives,
                forced_default)

    def _kind_values(self):
        out = []
        for c in self.project.configurations:
            kind = c["ConfigurationType"]
            if kind == "Application" and c["SubSystem"] == "Console":
                kind = "ConsoleApplication"
            out.append(kind)
        return out

    def _pch_values(self, file_configs, file):
        project_configs = self.project.configurations
        modes = resolve_inheritance(props.get_field("PrecompiledHeader"),
                                    project_configs, file_configs,
                                    project_default="NotUsing")
        records = file_configs if file_configs is not None else project_configs
        values = []
        for i, mode in enumerate(modes):
            if mode is None:
                values.append(None)
            elif mode == "Create":
                values.append(PchUse(mode, file.path if file is not None else ""))
            elif mode == "Use":
                header = records[i]["PrecompiledHeaderFile"] or \
                         project_configs[i]["PrecompiledHeaderFile"]
                values.append(PchUse(mode, header))
            else:
                values.append(PCH_NOT_USING)
        return values

    def _overridden(self, field, records):
        return any(field.get(r) is not INHERIT for r in records)

    def _entries(self, records, directives, file=None):
        include_type = IncludeType.CLCOMPILE if file is None else effective_include_type(file)
        file_configs = records if file is not None else None
        for step in ENTRY_STEPS:
            if step in _COMPILE_STEPS and include_type != IncludeType.CLCOMPILE:
                continue
            if step == "CustomBuildRule" and include_type != IncludeType.CUSTOM_BUILD:
                continue
            field = props.get_field(step)
            if not field.applies_to(records[0]):
                continue
            if step == "PrecompiledHeader":
                if file is not None and not self._overridden(field, records):
                    continue
                values = self._pch_values(file_configs, file)
            else:
                values = [field.get(r) for r in records]
            self._compact(step, values, directives, file, field.forced_default)

        for name in LIST_FIELDS:
            field = props.get_field(name)
            if not field.applies_to(records[0]):
                continue
            compact_list(self.keys, [field.get(r) for r in records],
                         lambda item, name=name: ListEntry(name, item),
                         directives)
        self._group_lists(directives)

    def _group_lists(self, directives):
        for name in LIST_FIELDS:
            for scope in directives.scopes():
                entries = directives.take(scope, lambda x, name=name:
                                          isinstance(x, ListEntry) and x.field == name)
                items = [e.item for e in entries if e.item and not _is_inherit_marker(name, e.item)]
                if items:
                    directives.extend(scope, self.renderer.render_list(name, items))

    def project_directives(self):
        """Returns directives for the project's own settings."""
        directives = Directives()
        records = self.project.configurations
        if not records:
            return directives
        logger.debug("compacting project %s", self.project.name)
        for step in PROJECT_STEPS:
            if step == "kind":
                self._compact(step, self._kind_values(), directives)
                continue
            field = props.get_field(step)
            values = [None if v is INHERIT else v for v in (field.get(r) for r in records)]
            self._compact(step, values, directives, forced_default=field.forced_default)
        self._entries(records, directives)
        return directives

    def file_directives(self, f):
        """Returns directives for source file *f*."""
        directives = Directives()
        if not f.configurations or f.is_reference:
            return directives
        records = f.configurations
        opt = props.get_field("Optimization")
        if self._overridden(opt, records):
            self._compact("Optimization",
                          resolve_inheritance(opt, self.project.configurations, records),
                          directives, f)
        self._entries(records, directives, f)
        return directives


def _is_inherit_marker(name, item):
    return item in ("%%(%s)" % name, "$(%s)" % name)
