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
In-memory model of solutions and projects.

A project is built for a list of configuration keys (``Debug|Win32``,
``Release|x64`` and so on). Every per-configuration array -- the project's
:attr:`Project.configurations` and each file's
:attr:`SourceFile.configurations` -- is addressed by position in that list,
so all of them must have the same length; :meth:`Project.materialize_slots`
takes care of that.
"""

import os.path
import fnmatch
import copy
from collections import namedtuple

import logging
logger = logging.getLogger("projsync.model")

from projsync import error, props
from projsync.props import INHERIT
from projsync.identity import (identifier_for, folder_identifier, solution_identifier,
                               IdentityRegistry)


class ConfigKey(namedtuple("ConfigKey", ["name", "platform"])):
    """
    Configuration key, i.e. a (configuration name, platform) pair.
    Represented as ``Name|Platform`` in project files.
    """
    __slots__ = ()

    SEPARATOR = "|"

    def __str__(self):
        return "%s|%s" % (self.name, self.platform)

    @staticmethod
    def parse(text):
        """Creates key from its ``Name|Platform`` form."""
        name, sep, platform = text.partition(ConfigKey.SEPARATOR)
        if not sep:
            raise error.Error('invalid configuration "%s", expected "Name|Platform"' % text)
        return ConfigKey(name, platform)


def make_config_keys(names, platforms):
    """
    Returns keys for all combinations of *names* and *platforms*, ordered by
    platform first.
    """
    return [ConfigKey(n, p) for p in platforms for n in names]


class CustomBuildRule(namedtuple("CustomBuildRule",
                                 ["command", "message", "outputs",
                                  "additional_inputs", "link_objects"])):
    """
    Custom build step attached to a file. Immutable, so that equal rules
    in different configurations compare equal.
    """
    __slots__ = ()

    def __new__(cls, command, message="", outputs="", additional_inputs="",
                link_objects=True):
        return super(CustomBuildRule, cls).__new__(cls, command, message,
                                                   outputs, additional_inputs,
                                                   link_objects)


class _Record(object):
    """
    Base class for per-configuration records. Values are kept in
    :attr:`values` dictionary keyed by field name, with one entry for every
    field that applies to the record.
    """
    for_file = False

    def __init__(self, key):
        self.key = key
        self.values = dict((f.name, f.initial_value(self.for_file))
                           for f in self.fields())

    @classmethod
    def fields(cls):
        raise NotImplementedError

    def __getitem__(self, name):
        return props.get_field(name).get(self)

    def __setitem__(self, name, value):
        props.get_field(name).set(self, value)

    def clone(self):
        c = copy.copy(self)
        c.values = dict((k, list(v) if isinstance(v, list) else v)
                        for k, v in self.values.items())
        return c

    def __repr__(self):
        return "%s(%s)" % (self.__class__.__name__, self.key)


class Configuration(_Record):
    """
    Settings of a project in one configuration.

    .. attribute:: key

       :class:`ConfigKey` of the configuration.
    """
    @classmethod
    def fields(cls):
        return props.project_fields()


class FileConfiguration(_Record):
    """
    Settings of a source file in one configuration. Inheritable fields start
    as :data:`projsync.props.INHERIT`.
    """
    for_file = True

    @classmethod
    def fields(cls):
        return props.file_fields()


class IncludeType(object):
    """
    Item types of project files, as used by MSBuild.
    """
    CLCOMPILE = "ClCompile"
    CLINCLUDE = "ClInclude"
    RESOURCE_COMPILE = "ResourceCompile"
    IMAGE = "Image"
    TEXT = "Text"
    NONE = "None"
    CUSTOM_BUILD = "CustomBuild"
    PROJECT_REFERENCE = "ProjectReference"
    REFERENCE = "Reference"

    ALL = [CLCOMPILE, CLINCLUDE, RESOURCE_COMPILE, IMAGE, TEXT, NONE,
           CUSTOM_BUILD, PROJECT_REFERENCE, REFERENCE]

    _by_extension = {
        ".c":   CLCOMPILE,
        ".cc":  CLCOMPILE,
        ".cpp": CLCOMPILE,
        ".cxx": CLCOMPILE,
        ".h":   CLINCLUDE,
        ".hpp": CLINCLUDE,
        ".rc":  RESOURCE_COMPILE,
        ".ico": IMAGE,
        ".txt": TEXT,
        }

    @staticmethod
    def for_path(path):
        """Returns default include type for file *path*."""
        ext = os.path.splitext(path)[1].lower()
        return IncludeType._by_extension.get(ext, IncludeType.NONE)


def normalize_path(path):
    """Converts *path* to the Windows form used in project files."""
    path = path.replace("/", "\\")
    while path.startswith(".\\"):
        path = path[2:]
    return path


class SourceFile(object):
    """
    A file of a project.

    .. attribute:: path

       Path relative to the project directory, with Windows separators.

    .. attribute:: include_type

       One of :class:`IncludeType` values.

    .. attribute:: configurations

       List of :class:`FileConfiguration` records, aligned with the project's
       configuration keys once materialized.

    .. attribute:: project_guid

       For project references, identifier of the referenced project.

    .. attribute:: hint_path

       For assembly references, the hint path, if any.
    """
    def __init__(self, path, include_type=None):
        self.path = normalize_path(path)
        if include_type is None:
            include_type = IncludeType.for_path(self.path)
        self.include_type = include_type
        self.configurations = []
        self.project_guid = None
        self.hint_path = None

    @property
    def is_reference(self):
        return self.include_type in (IncludeType.PROJECT_REFERENCE,
                                     IncludeType.REFERENCE)

    @property
    def has_custom_build_rule(self):
        return any(c["CustomBuildRule"] is not None for c in self.configurations)

    @property
    def source_pos(self):
        return 'file "%s"' % self.path

    def clone(self):
        c = copy.copy(self)
        c.configurations = [x.clone() for x in self.configurations]
        return c

    def __repr__(self):
        return "SourceFile(%s)" % self.path


class Project(object):
    """
    A project, or a folder node of a solution's tree.

    .. attribute:: name

       Name of the project. For the solution's root node, :const:`None`.

    .. attribute:: path

       Path of the native project file relative to the solution, with
       Windows separators (for folders, just the folder name).

    .. attribute:: guid

       Identifier of the project, in canonical braced form.

    .. attribute:: config_keys

       List of :class:`ConfigKey` the project is built for.

    .. attribute:: configurations

       Project settings, one :class:`Configuration` per key.

    .. attribute:: files

       List of :class:`SourceFile`.

    .. attribute:: dependencies

       Build order dependencies, as identifiers or project names.

    .. attribute:: parent
    .. attribute:: children

       Links of the solution's folder tree.

    .. attribute:: is_external

       True for projects that are only referenced and not managed.

    .. attribute:: is_folder

       True for solution folders.
    """
    def __init__(self, name=None, path=None, guid=None):
        self.name = name
        self.path = path
        self.guid = guid
        self.type_guid = None
        self.config_keys = []
        self.configurations = []
        self.files = []
        self.dependencies = []
        self.parent = None
        self.children = []
        self.is_external = False
        self.is_folder = False
        self.language = "C++"
        self.keyword = None
        self.windows_sdk_version = None
        self.format_version = None
        self.sln_configurations = []
        self.sln_build = []

    def __repr__(self):
        return "Project(%s)" % self.name

    @property
    def source_pos(self):
        if self.is_folder:
            return 'folder "%s"' % self.name
        return 'project "%s"' % self.name

    def configuration_names(self):
        """Returns list of distinct configuration names, in order."""
        return _unique(k.name for k in self.config_keys)

    def platforms(self):
        """Returns list of distinct platforms, in order."""
        return _unique(k.platform for k in self.config_keys)

    def _grow(self, records, cls):
        while len(records) < len(self.config_keys):
            records.append(cls(self.config_keys[len(records)]))

    def materialize_slots(self):
        """
        Creates missing per-configuration records of the project and of all
        its files, so that every such list has as many entries as there are
        configuration keys. Existing records are kept.
        """
        self._grow(self.configurations, Configuration)
        for f in self.files:
            self._grow(f.configurations, FileConfiguration)

    def get_file(self, path):
        """
        Returns :class:`SourceFile` with given *path* (compared
        case-insensitively) or :const:`None`.
        """
        path = normalize_path(path).lower()
        for f in self.files:
            if f.path.lower() == path:
                return f
        return None

    def find_files(self, pattern):
        """
        Returns list of files matching *pattern*, which may be a plain path
        or a wildcard.
        """
        if not any(c in pattern for c in "*?["):
            f = self.get_file(pattern)
            return [f] if f is not None else []
        pattern = normalize_path(pattern).lower()
        return [f for f in self.files if fnmatch.fnmatchcase(f.path.lower(), pattern)]

    def add_file(self, path, include_type=None):
        """
        Adds file to the project, unless it is already there; either way,
        returns the :class:`SourceFile` object.
        """
        f = self.get_file(path)
        if f is not None:
            return f
        f = SourceFile(path, include_type)
        if self.configurations:
            self._grow(f.configurations, FileConfiguration)
        self.files.append(f)
        logger.debug("%s: added file %s (%s)", self.name, f.path, f.include_type)
        return f

    def remove_file(self, f):
        self.files.remove(f)
        logger.debug("%s: removed file %s", self.name, f.path)

    def all_children(self):
        """Yields all nodes below this one, depth first."""
        for c in self.children:
            yield c
            for x in c.all_children():
                yield x

    def _clone(self, objmap):
        c = copy.copy(self)
        objmap[self] = c
        c.config_keys = list(self.config_keys)
        c.configurations = [x.clone() for x in self.configurations]
        c.files = [x.clone() for x in self.files]
        c.dependencies = list(self.dependencies)
        c.sln_configurations = list(self.sln_configurations)
        c.sln_build = list(self.sln_build)
        c.children = [x._clone(objmap) for x in self.children]
        for x in c.children:
            x.parent = c
        return c

    def clone(self):
        """
        Makes an independent copy of the project, including its subtree. The
        copy's parent is the same as the original's.
        """
        return self._clone({})


def _unique(items):
    out = []
    for i in items:
        if i not in out:
            out.append(i)
    return out


class Solution(object):
    """
    A solution: a set of projects organized in a tree of folders.

    .. attribute:: name
    .. attribute:: path

       Path of the solution file.

    .. attribute:: projects

       Flat list of all projects and folders, in the order they were added.

    .. attribute:: config_keys

       Solution configurations.

    .. attribute:: root

       Synthetic root node of the folder tree.

    .. attribute:: format_version

       Visual Studio release year, e.g. 2017.
    """
    def __init__(self, name, path=None):
        self.name = name
        self.path = path
        self.projects = []
        self.config_keys = []
        self.root = Project()
        self.root.is_folder = True
        self.format_version = None
        self.visual_studio_version = None
        self.minimum_visual_studio_version = None
        self.guid = None
        self.identities = IdentityRegistry()

    def __repr__(self):
        return "Solution(%s)" % self.name

    @property
    def source_pos(self):
        return 'solution "%s"' % self.name

    def configuration_names(self):
        return _unique(k.name for k in self.config_keys)

    def platforms(self):
        return _unique(k.platform for k in self.config_keys)

    def register_identity(self, project):
        if project.guid is not None:
            self.identities.register(project.guid, project.name)

    def identifier(self):
        """
        Returns identifier of the solution. Solutions for Visual Studio 2017
        and newer that weren't given one get it generated from the name.
        """
        if self.guid is not None:
            return self.guid
        if self.format_version is not None and self.format_version >= 2017:
            return solution_identifier(self.name)
        return None

    def add_project(self, project, parent=None):
        """
        Adds *project* to the solution, under folder *parent* (the root if
        not specified).
        """
        if parent is None:
            parent = self.root
        self.register_identity(project)
        self.projects.append(project)
        parent.children.append(project)
        project.parent = parent
        return project

    def get_project(self, name):
        for p in self.projects:
            if not p.is_folder and p.name == name:
                return p
        return None

    def get_project_by_guid(self, guid):
        guid = guid.upper()
        for p in self.projects:
            if p.guid is not None and p.guid.upper() == guid:
                return p
        return None

    def folder(self, path):
        """
        Returns folder node for *path* (e.g. ``libs/3rdparty``), creating
        any missing folders.
        """
        node = self.root
        so_far = ""
        for part in path.replace("\\", "/").split("/"):
            if not part:
                continue
            so_far = "%s/%s" % (so_far, part) if so_far else part
            for c in node.children:
                if c.is_folder and c.name == part:
                    node = c
                    break
            else:
                f = Project(part, part, folder_identifier(so_far))
                f.is_folder = True
                node = self.add_project(f, node)
                logger.debug("created solution folder %s", so_far)
        return node

    def folder_path(self, project):
        """Returns path of folders containing *project*, e.g. ``libs/3rdparty``."""
        parts = []
        p = project.parent
        while p is not None and p is not self.root:
            parts.insert(0, p.name)
            p = p.parent
        return "/".join(parts)

    def remove_empty_folders(self, node=None):
        """
        Removes folders that contain no projects, directly or in subfolders.
        """
        if node is None:
            node = self.root
        for c in list(node.children):
            if not c.is_folder:
                continue
            self.remove_empty_folders(c)
            if not c.children:
                node.children.remove(c)
                self.projects.remove(c)
                c.parent = None
                self.identities.release(c.guid)
                logger.debug("removed empty folder %s", c.name)

    def all_projects(self):
        """Yields all nodes of the tree (folders too), depth first."""
        return self.root.all_children()

    def dependencies_by_name(self, project):
        """
        Returns names of projects *project* depends on. Dependencies given by
        identifier are translated to names; an unknown identifier is an error.
        """
        from projsync.identity import parse_guid
        names = []
        for d in project.dependencies:
            if parse_guid(d) is None:
                names.append(d)
                continue
            p = self.get_project_by_guid(parse_guid(d))
            if p is None:
                raise error.NotFoundError('unknown project dependency "%s"' % d,
                                          pos=project.source_pos)
            names.append(p.name)
        return names

    def clone(self):
        """
        Makes a deep copy of the solution. Tree links of the copy point to the
        copied projects, not to the original ones.
        """
        c = copy.copy(self)
        objmap = {}
        c.root = self.root._clone(objmap)
        c.root.parent = None
        c.projects = [objmap[p] for p in self.projects]
        c.config_keys = list(self.config_keys)
        c.identities = copy.deepcopy(self.identities)
        return c

    def check_invariants(self):
        """
        Verifies that the folder tree and the flat list of projects agree and
        that per-configuration lists are aligned with configuration keys.
        """
        in_tree = list(self.all_projects())
        for p in in_tree:
            count = sum(1 for x in self.projects if x is p)
            assert count == 1, "%s is %d times in the project list" % (p, count)
        for p in self.projects:
            assert any(p is x for x in in_tree), "%s is not in the tree" % p
            assert p.parent is not None and any(p is x for x in p.parent.children), \
                   "%s has broken parent link" % p
            if p.configurations:
                assert len(p.configurations) == len(p.config_keys), \
                       "%s has misaligned configurations" % p
                for f in p.files:
                    assert len(f.configurations) == len(p.config_keys), \
                           "%s in %s has misaligned configurations" % (f, p)
