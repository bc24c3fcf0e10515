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
Reading of solution (.sln) files.
"""

import os.path
import re

import logging
logger = logging.getLogger("projsync.parser.sln")

from projsync.error import ParserError, error_context, warning
from projsync.identity import parse_guid
from projsync.parser import read_text
from projsync.model import Solution, Project, ConfigKey, normalize_path


FOLDER_TYPE_GUID = "{2150E333-8FDC-42A3-9474-1A3956D46DE8}"

#: Languages of known project types.
PROJECT_TYPES = {
    "{8BC9CEB8-8B4A-11D0-8D11-00A0C91BC942}": "C++",
    "{FAE04EC0-301F-11D3-BF4B-00C04F79EFBC}": "C#",
    }

_FORMAT_VERSION_RE = re.compile(r"^\s*Microsoft Visual Studio Solution File, Format Version ([0-9.]+)", re.M)
_VS_NUMBER_RE = re.compile(r"^# Visual Studio (Express |Version )?([0-9]+)", re.M)
_PROJECT_RE = re.compile(
        r'^Project\("(?P<type>\{[A-Fa-f0-9-]+\})"\) = "(?P<name>.*?)", "(?P<path>.*?)", '
        r'"(?P<guid>\{[A-Fa-f0-9-]+\})"[ \t]*\n(?P<body>.*?)^EndProject[ \t]*$',
        re.M | re.S)
_DEPENDENCIES_RE = re.compile(r"ProjectSection\(ProjectDependencies\)[^\n]*\n(.*?)EndProjectSection", re.S)
_GUID_PAIR_RE = re.compile(r"^\s*(\{[A-Fa-f0-9-]+\})\s*=\s*(\{[A-Fa-f0-9-]+\})\s*$", re.M)
_PROJECT_CONFIG_RE = re.compile(
        r"^\s*(\{[A-Fa-f0-9-]+\})\.(.*?\|.*?)\.(ActiveCfg|Build\.0|Deploy\.0)\s*=\s*(.*?)\s*$", re.M)
_ASSIGNMENT_RE = re.compile(r"^\s*(.*?)\s*=\s*(.*?)\s*$", re.M)


def _section(text, name):
    m = re.search(r"GlobalSection\(%s\)[^\n]*\n(.*?)EndGlobalSection" % re.escape(name), text, re.S)
    return m.group(1) if m else ""


def format_version_from_vs_number(number):
    """
    Translates the version in the "# Visual Studio 15" line of solution
    files to the release year.
    """
    if number > 2000:
        return number
    known = {14: 2015, 15: 2017, 16: 2019}
    if number in known:
        return known[number]
    return (number - 14) * 2 + 2015


def load_solution(path):
    """
    Reads solution file *path* and returns :class:`projsync.model.Solution`.
    Projects are not read, only their entries in the solution; use
    :func:`load_projects` for that.
    """
    text = read_text(path).replace("\r\n", "\n")

    name = os.path.splitext(os.path.basename(path))[0]
    solution = Solution(name, path)
    with error_context(path):
        if _FORMAT_VERSION_RE.search(text) is None:
            raise ParserError("not a Visual Studio solution file")
        m = _VS_NUMBER_RE.search(text)
        if m is not None:
            solution.format_version = format_version_from_vs_number(int(m.group(2)))
        for attr, key in (("visual_studio_version", "VisualStudioVersion"),
                          ("minimum_visual_studio_version", "MinimumVisualStudioVersion")):
            m = re.search(r"^%s = ([0-9.]+)" % key, text, re.M)
            if m is not None:
                setattr(solution, attr, m.group(1))

        for m in _PROJECT_RE.finditer(text):
            solution.projects.append(_read_project_entry(solution, m))

        _read_configurations(solution, text)
        _read_tree(solution, text)

        for key, value in _ASSIGNMENT_RE.findall(_section(text, "ExtensibilityGlobals")):
            if key == "SolutionGuid":
                solution.guid = parse_guid(value)

    logger.debug("loaded solution %s with %d projects", name, len(solution.projects))
    return solution


def _read_project_entry(solution, m):
    type_guid = m.group("type").upper()
    p = Project(guid=parse_guid(m.group("guid")))
    p.type_guid = type_guid
    if type_guid == FOLDER_TYPE_GUID:
        p.is_folder = True
        p.name = m.group("name")
        p.path = m.group("name")
    else:
        p.path = normalize_path(m.group("path"))
        p.name = os.path.splitext(os.path.basename(p.path.replace("\\", "/")))[0]
        p.language = PROJECT_TYPES.get(type_guid, "C++")

    deps = _DEPENDENCIES_RE.search(m.group("body"))
    if deps is not None:
        p.dependencies = [parse_guid(a) for a, _ in _GUID_PAIR_RE.findall(deps.group(1))]

    solution.register_identity(p)
    return p


def _read_configurations(solution, text):
    solution.config_keys = []
    for key, _ in _ASSIGNMENT_RE.findall(_section(text, "SolutionConfigurationPlatforms")):
        if key:
            solution.config_keys.append(ConfigKey.parse(key))
    keys = [str(k) for k in solution.config_keys]

    for guid, sln_config, action, project_config in _PROJECT_CONFIG_RE.findall(
                                            _section(text, "ProjectConfigurationPlatforms")):
        p = solution.get_project_by_guid(guid)
        if p is None or sln_config not in keys:
            continue
        while len(p.sln_configurations) < len(keys):
            p.sln_configurations.append(None)
            p.sln_build.append(False)
        index = keys.index(sln_config)
        if action == "ActiveCfg":
            p.sln_configurations[index] = project_config
        elif action.startswith("Build"):
            p.sln_build[index] = True


def _read_tree(solution, text):
    for child_guid, parent_guid in _GUID_PAIR_RE.findall(_section(text, "NestedProjects")):
        child = solution.get_project_by_guid(child_guid)
        parent = solution.get_project_by_guid(parent_guid)
        if child is None or parent is None:
            raise ParserError("nested project %s refers to unknown project" % child_guid)
        parent.children.append(child)
        child.parent = parent
    for p in solution.projects:
        if p.parent is None:
            solution.root.children.append(p)
            p.parent = solution.root


def load_projects(solution):
    """
    Reads project files of all projects in the *solution*. Projects whose
    files aren't Visual C++ projects or don't exist are marked as external.
    """
    from projsync.parser.vcxproj import load_project
    base = os.path.dirname(os.path.abspath(solution.path))
    for p in solution.projects:
        if p.is_folder:
            continue
        full = os.path.join(base, p.path.replace("\\", "/"))
        if not p.path.lower().endswith(".vcxproj"):
            p.is_external = True
            continue
        if not os.path.isfile(full):
            warning("project file %s doesn't exist, treating it as external", p.path, pos=solution.source_pos)
            p.is_external = True
            continue
        load_project(full, p)
