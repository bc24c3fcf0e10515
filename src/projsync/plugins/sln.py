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
Native Visual Studio solution files. The ``sln`` format writes the solution
model back as a ``.sln`` file, so that a solution described by a Python
script can be opened in the IDE.
"""

import io

import logging
logger = logging.getLogger("projsync.plugins.sln")

from projsync.api import ScriptFormat
from projsync.error import UnsupportedError, error_context, warning
from projsync.identity import parse_guid
from projsync.io import OutputFile, EOL_WINDOWS
from projsync.parser.sln import FOLDER_TYPE_GUID, PROJECT_TYPES


#: Project type GUIDs by language, for projects without a known type.
LANGUAGE_TYPE_GUIDS = dict((lang, guid) for guid, lang in PROJECT_TYPES.items())

DEFAULT_FORMAT_VERSION = 2015

# written when the solution doesn't specify them; Visual Studio rewrites
# the file on load without these lines
DEFAULT_VISUAL_STUDIO_VERSIONS = {2017: "15.0.28307.136"}
DEFAULT_VISUAL_STUDIO_VERSION = "16.0.28315.86"
DEFAULT_MINIMUM_VISUAL_STUDIO_VERSION = "10.0.40219.1"


def vs_number(year):
    """
    Returns the number written in the "# Visual Studio N" line for Visual
    Studio *year*.
    """
    known = {2015: 14, 2017: 15, 2019: 16}
    if year in known:
        return known[year]
    return 14 + (year - 2015) // 2


def project_type_guid(project):
    if project.is_folder:
        return FOLDER_TYPE_GUID
    if project.type_guid is not None:
        return project.type_guid
    return LANGUAGE_TYPE_GUIDS.get(project.language, LANGUAGE_TYPE_GUIDS["C++"])


def map_configuration(project, index, conf):
    """
    Returns tuple of the project configuration used when the solution is
    built in configuration *conf* (with index *index*) and of whether the
    project is built in it.
    """
    build = True
    keys = [str(k) for k in project.config_keys]
    if index < len(project.sln_configurations) and project.sln_configurations[index]:
        mapped = project.sln_configurations[index]
    elif project.is_external or not keys or conf in keys:
        mapped = conf
    else:
        name, _, platform = conf.partition("|")
        if (platform == "x86" and name in project.configuration_names() and
                "Win32" in project.platforms()):
            mapped = "%s|Win32" % name
        else:
            # Not buildable, but Visual Studio wants every configuration mapped.
            build = False
            mapped = next((k for k in keys if k.startswith(name)), keys[0])
    if index < len(project.sln_build):
        build = project.sln_build[index]
    return mapped, build


class SolutionFileWriter(object):
    """
    Writes solution in the native format into *outf*, any object with the
    ``write()`` method taking text with ``\\n`` line endings.
    """
    def __init__(self, solution, outf):
        self.solution = solution
        self.outf = outf

    def write(self):
        with error_context(self.solution):
            self.write_header()
            self.write_projects()
            self.outf.write("Global\n")
            self.write_configurations()
            self.write_tree()
            self.write_globals()
            self.outf.write("EndGlobal\n")

    def write_header(self):
        solution = self.solution
        outf = self.outf
        year = solution.format_version or DEFAULT_FORMAT_VERSION
        outf.write("\n")
        outf.write("Microsoft Visual Studio Solution File, Format Version %s\n" %
                   ("11.00" if year <= 2010 else "12.00"))
        if year <= 2013:
            outf.write("# Visual Studio %d\n" % year)
        elif vs_number(year) >= 16:
            outf.write("# Visual Studio Version %d\n" % vs_number(year))
        else:
            outf.write("# Visual Studio %d\n" % vs_number(year))
        if year >= 2017:
            version = (solution.visual_studio_version or
                       DEFAULT_VISUAL_STUDIO_VERSIONS.get(year, DEFAULT_VISUAL_STUDIO_VERSION))
            outf.write("VisualStudioVersion = %s\n" % version)
        if year >= 2015:
            outf.write("MinimumVisualStudioVersion = %s\n" %
                       (solution.minimum_visual_studio_version or DEFAULT_MINIMUM_VISUAL_STUDIO_VERSION))

    def dependency_guids(self, project):
        guids = []
        for d in project.dependencies:
            guid = parse_guid(d)
            if guid is None:
                other = self.solution.get_project(d)
                if other is None:
                    warning('unknown project dependency "%s" ignored', d, pos=project.source_pos)
                    continue
                guid = other.guid
            guids.append(guid.upper())
        return guids

    def write_projects(self):
        outf = self.outf
        for p in self.solution.projects:
            outf.write('Project("%s") = "%s", "%s", "%s"\n' %
                       (project_type_guid(p), p.name, p.path or p.name, p.guid.upper()))
            if p.dependencies:
                outf.write("\tProjectSection(ProjectDependencies) = postProject\n")
                for guid in self.dependency_guids(p):
                    outf.write("\t\t%s = %s\n" % (guid, guid))
                outf.write("\tEndProjectSection\n")
            outf.write("EndProject\n")

    def write_configurations(self):
        outf = self.outf
        confs = [str(k) for k in self.solution.config_keys]
        outf.write("\tGlobalSection(SolutionConfigurationPlatforms) = preSolution\n")
        for conf in confs:
            outf.write("\t\t%s = %s\n" % (conf, conf))
        outf.write("\tEndGlobalSection\n")

        outf.write("\tGlobalSection(ProjectConfigurationPlatforms) = postSolution\n")
        for p in self.solution.projects:
            if p.is_folder:
                continue
            guid = p.guid.upper()
            for index, conf in enumerate(confs):
                mapped, build = map_configuration(p, index, conf)
                outf.write("\t\t%s.%s.ActiveCfg = %s\n" % (guid, conf, mapped))
                if build:
                    outf.write("\t\t%s.%s.Build.0 = %s\n" % (guid, conf, mapped))
        outf.write("\tEndGlobalSection\n")
        outf.write("\tGlobalSection(SolutionProperties) = preSolution\n")
        outf.write("\t\tHideSolutionNode = FALSE\n")
        outf.write("\tEndGlobalSection\n")

    def write_tree(self):
        root = self.solution.root
        # breadth first, the order Visual Studio uses
        nodes = list(root.children)
        i = 0
        while i < len(nodes):
            nodes.extend(nodes[i].children)
            i += 1
        nested = [p for p in nodes if p.parent is not root]
        if not nested:
            return
        self.outf.write("\tGlobalSection(NestedProjects) = preSolution\n")
        for p in nested:
            self.outf.write("\t\t%s = %s\n" % (p.guid.upper(), p.parent.guid.upper()))
        self.outf.write("\tEndGlobalSection\n")

    def write_globals(self):
        guid = self.solution.identifier()
        if guid is None:
            return
        self.outf.write("\tGlobalSection(ExtensibilityGlobals) = postSolution\n")
        self.outf.write("\t\tSolutionGuid = %s\n" % guid)
        self.outf.write("\tEndGlobalSection\n")


class SlnFormat(ScriptFormat):
    """
    Visual Studio solution file. Only solutions can be written in this
    format, their projects are referenced by their project files.
    """
    name = "sln"
    extension = "sln"
    solution_suffix = ""
    describes_projects = False

    def solution_text(self, solution):
        """Returns text of the solution file, with ``\\n`` line endings."""
        out = io.StringIO()
        SolutionFileWriter(solution, out).write()
        return out.getvalue()

    def generate_project(self, project, filename, solution=None, source=None):
        raise UnsupportedError("%s can't describe a project without a solution" % self,
                               pos=project.source_pos)

    def generate_solution(self, solution, filename, project_scripts, source=None):
        logger.debug("writing solution file for %s", solution)
        f = OutputFile(filename, EOL_WINDOWS, charset="utf-8-sig",
                       creator=self, create_for=solution)
        f.write(self.solution_text(solution))
        f.commit()
        return f
