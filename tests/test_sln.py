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
Writing solutions back in the native format.
"""

import os.path
import shutil
import pytest

import projsync.io
import projsync.plugins
import projsync.tool
from projsync.api import ScriptFormat
from projsync.error import UnsupportedError
from projsync.identity import identifier_for, folder_identifier, solution_identifier
from projsync.model import Project, Solution, ConfigKey
from projsync.parser.sln import load_solution
from projsync.plugins.sln import map_configuration, vs_number

hello_dir = os.path.join(os.path.dirname(__file__), "projects", "hello")

CPP = "{8BC9CEB8-8B4A-11D0-8D11-00A0C91BC942}"
FOLDER = "{2150E333-8FDC-42A3-9474-1A3956D46DE8}"


def test_vs_numbers():
    assert vs_number(2015) == 14
    assert vs_number(2017) == 15
    assert vs_number(2019) == 16
    assert vs_number(2022) == 17

def test_hello_is_written_back_unchanged():
    path = os.path.join(hello_dir, "hello.sln")
    s = load_solution(path)
    with open(path, "rb") as f:
        expected = f.read().decode("utf-8").replace("\r\n", "\n")
    assert ScriptFormat.get("sln").solution_text(s) == expected


SOLUTION_SCRIPT = """
def build(b):
    b.solution("demo")
    b.vsver(2017)
    b.configurations("Debug", "Release")
    b.platforms("Win32", "x64")

    b.project("app")
    b.configurations("Debug", "Release")
    b.platforms("Win32")
    b.kind("ConsoleApp")
    b.dependson("engine")

    b.group("libs")
    b.project("engine")
    b.configurations("Debug", "Release")
    b.platforms("Win32", "x64")
    b.kind("StaticLib")
"""

def test_solution_from_script(tmpdir):
    projsync.io.reset()
    tmpdir.join("demo.py").write(SOLUTION_SCRIPT)
    assert projsync.tool.main(["-q", "-f", "sln", str(tmpdir.join("demo.py"))]) == 0
    assert projsync.io.num_created == 1

    data = tmpdir.join("demo.sln").read_binary()
    assert data.startswith(b"\xef\xbb\xbf\r\n")
    lines = data.decode("utf-8-sig").split("\r\n")

    app = identifier_for("app")
    engine = identifier_for("engine")
    libs = folder_identifier("libs")
    assert lines[:12] == [
        "",
        "Microsoft Visual Studio Solution File, Format Version 12.00",
        "# Visual Studio 15",
        "VisualStudioVersion = 15.0.28307.136",
        "MinimumVisualStudioVersion = 10.0.40219.1",
        'Project("%s") = "app", "app.vcxproj", "%s"' % (CPP, app),
        "\tProjectSection(ProjectDependencies) = postProject",
        "\t\t%s = %s" % (engine, engine),
        "\tEndProjectSection",
        "EndProject",
        'Project("%s") = "libs", "libs", "%s"' % (FOLDER, libs),
        "EndProject",
        ]
    assert lines[12] == 'Project("%s") = "engine", "engine.vcxproj", "%s"' % (CPP, engine)

    # app has no x64 configurations: mapped, but not built
    assert "\t\t%s.Debug|x64.ActiveCfg = Debug|Win32" % app in lines
    assert "\t\t%s.Debug|x64.Build.0 = Debug|Win32" % app not in lines
    assert "\t\t%s.Release|Win32.Build.0 = Release|Win32" % app in lines
    assert "\t\t%s.Release|x64.Build.0 = Release|x64" % engine in lines

    nested = lines.index("\tGlobalSection(NestedProjects) = preSolution")
    assert lines[nested + 1] == "\t\t%s = %s" % (engine, libs)
    assert "\t\tSolutionGuid = %s" % solution_identifier("demo") in lines
    assert lines[-2:] == ["EndGlobal", ""]

    # and the written solution reads back the same
    s = load_solution(str(tmpdir.join("demo.sln")))
    assert [p.name for p in s.all_projects()] == ["app", "libs", "engine"]
    assert s.dependencies_by_name(s.get_project("app")) == ["engine"]
    assert s.get_project("app").sln_build == [True, True, False, False]

def test_unchanged_solution_is_not_rewritten(tmpdir):
    projsync.io.reset()
    tmpdir.join("demo.py").write(SOLUTION_SCRIPT)
    assert projsync.tool.main(["-q", "-f", "sln", str(tmpdir.join("demo.py"))]) == 0
    projsync.io.reset()
    assert projsync.tool.main(["-q", "-f", "sln", str(tmpdir.join("demo.py"))]) == 0
    assert projsync.io.num_unchanged == 1

def test_configuration_mapping():
    p = Project("p", "p.vcxproj")
    p.config_keys = [ConfigKey("Debug", "Win32"), ConfigKey("Release", "Win32")]
    assert map_configuration(p, 0, "Debug|Win32") == ("Debug|Win32", True)
    assert map_configuration(p, 1, "Release|x86") == ("Release|Win32", True)
    assert map_configuration(p, 2, "Release|ARM") == ("Release|Win32", False)
    assert map_configuration(p, 3, "Profile|ARM") == ("Debug|Win32", False)

    p.sln_configurations = ["Release|Win32"]
    p.sln_build = [False]
    assert map_configuration(p, 0, "Debug|Win32") == ("Release|Win32", False)

    p.is_external = True
    p.config_keys = []
    assert map_configuration(p, 1, "Release|x64") == ("Release|x64", True)

def test_unknown_dependency_is_skipped(caplog):
    s = Solution("s", "s.sln")
    p = s.add_project(Project("a", "a.vcxproj", identifier_for("a")))
    p.dependencies = ["missing"]
    text = ScriptFormat.get("sln").solution_text(s)
    assert "\tProjectSection(ProjectDependencies) = postProject\n\tEndProjectSection\n" in text
    assert "missing" in caplog.text
    # no format version given: Visual Studio 2015 is assumed
    assert "# Visual Studio 14\n" in text
    assert "\nVisualStudioVersion" not in text
    assert "SolutionGuid" not in text

def test_input_is_not_overwritten(tmpdir):
    target = tmpdir.join("hello")
    shutil.copytree(hello_dir, str(target))
    projsync.io.reset()
    before = target.join("hello.sln").read_binary()
    assert projsync.tool.main(["-q", "-f", "sln", str(target.join("hello.sln"))]) == 1
    assert target.join("hello.sln").read_binary() == before

    projsync.io.reset()
    assert projsync.tool.main(["-q", "-f", "sln", "-p", "copy_", str(target.join("hello.sln"))]) == 0
    copy = target.join("copy_hello.sln").read_binary().decode("utf-8-sig")
    assert copy == before.decode("utf-8")

def test_projects_cannot_be_written():
    p = Project("p", "p.vcxproj")
    with pytest.raises(UnsupportedError):
        ScriptFormat.get("sln").generate_project(p, "p.sln")
