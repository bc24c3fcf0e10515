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
Tests of the script API: solutions, projects, selection and setters.
"""

import os.path
import pytest

from projsync.builder import Builder
from projsync.error import (SelectionError, NotFoundError, UnsupportedError,
                            IdentityConflictError)
from projsync.identity import identifier_for
from projsync.model import ConfigKey, IncludeType
from projsync.props import INHERIT


def new_project(tmpdir, name="hello"):
    b = Builder(str(tmpdir))
    b.project(name)
    b.configurations("Debug", "Release")
    b.platforms("Win32", "x64")
    return b


def test_keys_are_platform_major(tmpdir):
    b = new_project(tmpdir)
    assert b.active_project.config_keys == [ConfigKey("Debug", "Win32"),
                                            ConfigKey("Release", "Win32"),
                                            ConfigKey("Debug", "x64"),
                                            ConfigKey("Release", "x64")]
    # records are only created when something is set
    assert b.active_project.configurations == []

def test_select_without_configurations(tmpdir):
    b = Builder(str(tmpdir))
    b.project("hello")
    with pytest.raises(SelectionError) as e:
        b.defines("FOO")
    assert "configurations() and platforms()" in e.value.msg

def test_setters_need_project(tmpdir):
    b = Builder(str(tmpdir))
    with pytest.raises(SelectionError):
        b.kind("ConsoleApp")

def test_select_missing_file(tmpdir):
    b = new_project(tmpdir)
    b.files("hello.cpp")
    with pytest.raises(NotFoundError) as e:
        b.select(files="missing.cpp")
    assert 'file not found: "missing.cpp"' in e.value.msg
    assert [f.path for f in b.active_project.files] == ["hello.cpp"]

def test_select_by_platform_narrows(tmpdir):
    b = new_project(tmpdir)
    b.select(platform="Win32")
    b.assign("OutDir", "bin32")
    p = b.active_project
    assert [c["OutDir"] for c in p.configurations] == ["bin32\\", "bin32\\", "", ""]

def test_select_nothing_is_an_error(tmpdir):
    b = new_project(tmpdir)
    b.defines("BEFORE")
    with pytest.raises(SelectionError) as e:
        b.select(configuration="Profile")
    assert "filter did not select any configuration" in e.value.msg
    assert "Debug, Release" in e.value.msg
    # the previous selection stays
    b.defines("AFTER")
    for c in b.active_project.configurations:
        assert c["PreprocessorDefinitions"] == ["BEFORE", "AFTER"]

def test_filter_block_reselects_project(tmpdir):
    b = new_project(tmpdir)
    with b.filter("Debug"):
        b.defines("_DEBUG")
    b.defines("COMMON")
    values = [c["PreprocessorDefinitions"] for c in b.active_project.configurations]
    assert values == [["_DEBUG", "COMMON"], ["COMMON"], ["_DEBUG", "COMMON"], ["COMMON"]]

def test_filter_terms(tmpdir):
    b = new_project(tmpdir)
    with b.filter("Release", "platforms:x64"):
        b.targetname("hello64")
    assert [c["TargetName"] for c in b.active_project.configurations] == ["", "", "", "hello64"]
    with pytest.raises(UnsupportedError):
        b.filter("system:windows")

def test_file_selection(tmpdir):
    b = new_project(tmpdir)
    b.files("a.cpp", "b.cpp")
    with b.filter("Release", "files:a.cpp"):
        b.flags("ExcludeFromBuild")
    a, bfile = b.active_project.files
    assert [c["ExcludedFromBuild"] for c in a.configurations] == [False, True, False, True]
    assert not any(c["ExcludedFromBuild"] for c in bfile.configurations)
    assert not any(c["ExcludedFromBuild"] for c in b.active_project.configurations)

def test_project_only_field_ignores_file_selection(tmpdir):
    b = new_project(tmpdir)
    b.files("a.cpp")
    b.filter("files:a.cpp")
    b.kind("ConsoleApp")
    assert all(c["ConfigurationType"] == "Application" and c["SubSystem"] == "Console"
               for c in b.active_project.configurations)

def test_kind(tmpdir):
    b = new_project(tmpdir)
    b.kind("StaticLib")
    assert b.active_project.configurations[0]["ConfigurationType"] == "StaticLibrary"
    with pytest.raises(UnsupportedError):
        b.kind("Framework")
    with pytest.raises(UnsupportedError):
        b.kind("ConsoleApp", "linux")

def test_symbols_and_optimize(tmpdir):
    b = new_project(tmpdir)
    with b.filter("Debug"):
        b.symbols("on")
        b.optimize("off")
    with b.filter("Release"):
        b.symbols("off")
        b.optimize("speed")
    debug, release = b.active_project.configurations[0:2]
    assert debug["UseDebugLibraries"] is True
    assert debug["GenerateDebugInformation"] == "OptimizeForDebugging"
    assert debug["Optimization"] == "Disabled"
    assert release["Optimization"] == "MaxSpeed"
    assert release["FunctionLevelLinking"] is True
    with pytest.raises(UnsupportedError):
        b.optimize("fastest")

def test_lists_append(tmpdir):
    b = new_project(tmpdir)
    b.defines("A", "B")
    b.defines("C")
    b.includedirs("include")
    b.buildoptions("/W4")
    b.buildoptions("/utf-8")
    c = b.active_project.configurations[0]
    assert c["PreprocessorDefinitions"] == ["A", "B", "C"]
    assert c["AdditionalIncludeDirectories"] == ["include"]
    assert c["AdditionalOptions"] == "/W4 /utf-8"

def test_build_events(tmpdir):
    b = new_project(tmpdir)
    b.postbuildcommands("echo one")
    b.postbuildcommands("echo two")
    assert b.active_project.configurations[0]["PostBuildEvent"] == "echo one\necho two"

def test_flags(tmpdir):
    b = new_project(tmpdir)
    b.flags("LinkTimeOptimization", "MFC", "NoPch")
    c = b.active_project.configurations[0]
    assert c["WholeProgramOptimization"] == "UseLinkTimeCodeGeneration"
    assert c["UseOfMfc"] == "Dynamic"
    assert c["PrecompiledHeader"] == "NotUsing"
    assert b.active_project.keyword == "MFCProj"
    with pytest.raises(UnsupportedError):
        b.flags("Unknown")

def test_pch(tmpdir):
    b = new_project(tmpdir)
    b.files("stdafx.cpp", "hello.cpp")
    b.pchheader("stdafx.h")
    b.pchsource("stdafx.cpp")
    p = b.active_project
    assert all(c["PrecompiledHeader"] == "Use" for c in p.configurations)
    assert all(c["PrecompiledHeaderFile"] == "stdafx.h" for c in p.configurations)
    stdafx, hello = p.files
    assert all(c["PrecompiledHeader"] == "Create" for c in stdafx.configurations)
    assert all(c["PrecompiledHeader"] is INHERIT for c in hello.configurations)
    # project selection is kept
    b.defines("X")
    assert p.configurations[0]["PreprocessorDefinitions"] == ["X"]
    assert stdafx.configurations[0]["PreprocessorDefinitions"] == []

def test_files_wildcards(tmpdir):
    tmpdir.join("src").ensure(dir=True)
    tmpdir.join("src", "a.cpp").write("")
    tmpdir.join("src", "b.cpp").write("")
    tmpdir.join("src", "sub", "c.cpp").write("", ensure=True)
    b = new_project(tmpdir)
    b.files("src/**/*.cpp", "hello.def")
    paths = [f.path for f in b.active_project.files]
    assert "src\\a.cpp" in paths
    assert "src\\sub\\c.cpp" in paths
    assert "hello.def" in paths
    assert b.active_project.configurations[0]["ModuleDefinitionFile"] == "hello.def"

def test_files_wildcard_must_match(tmpdir):
    b = new_project(tmpdir)
    with pytest.raises(NotFoundError) as e:
        b.files("*.cxx")
    assert "mark it as optional" in e.value.msg
    b.files("?gen/*.cxx")
    assert [f.path for f in b.active_project.files] == ["gen\\*.cxx"]

def test_removefiles(tmpdir):
    b = new_project(tmpdir)
    b.files("a.cpp", "b.cpp", "c.h")
    b.removefiles("b.cpp")
    assert [f.path for f in b.active_project.files] == ["a.cpp", "c.h"]
    with b.filter("Debug", "files:a.cpp"):
        b.removefiles("a.cpp")
    a = b.active_project.get_file("a.cpp")
    assert [c["ExcludedFromBuild"] for c in a.configurations] == [True, False, True, False]

def test_buildrule(tmpdir):
    b = new_project(tmpdir)
    b.files("version.txt")
    with pytest.raises(SelectionError):
        b.buildrule(command="gen")
    with b.filter("files:version.txt"):
        b.buildrule(command="gen version.txt", message="Generating", outputs="version.h")
    f = b.active_project.files[0]
    assert f.include_type == IncludeType.TEXT
    assert f.has_custom_build_rule
    assert f.configurations[0]["CustomBuildRule"].outputs == "version.h"

def test_uuid(tmpdir):
    b = Builder(str(tmpdir))
    b.solution("all")
    b.project("hello")
    assert b.uuid("hello") == identifier_for("hello")
    b.project("other")
    with pytest.raises(IdentityConflictError):
        b.uuid("hello")
    b.project("hello")
    b.uuid("hello2")
    b.project("other")
    b.uuid("hello")
    assert b.active_project.guid == identifier_for("hello")

def test_default_uuid_is_reserved(tmpdir):
    b = Builder(str(tmpdir))
    b.solution("s")
    b.configurations("Debug")
    b.platforms("Win32")
    b.project("A")
    assert b.active_project.guid == identifier_for("A")
    b.project("B")
    with pytest.raises(IdentityConflictError):
        b.uuid("A")

def test_default_uuid_without_solution(tmpdir):
    b = new_project(tmpdir)
    b.finish()
    assert b.projects[0].guid == identifier_for("hello")

def test_configurations_after_setters(tmpdir):
    b = new_project(tmpdir)
    b.defines("X")
    with pytest.raises(SelectionError):
        b.platforms("Win32")

def test_solution_and_groups(tmpdir):
    b = Builder(str(tmpdir))
    b.solution("all")
    b.configurations("Debug", "Release")
    b.platforms("Win32")
    b.group("libs/3rdparty")
    b.project("zlib")
    b.group("")
    b.project("app")
    b.dependson("zlib")
    b.group("empty")
    solutions = b.finish()
    assert len(solutions) == 1
    s = solutions[0]
    assert s.config_keys == [ConfigKey("Debug", "Win32"), ConfigKey("Release", "Win32")]
    assert s.folder_path(s.get_project("zlib")) == "libs/3rdparty"
    assert s.folder_path(s.get_project("app")) == ""
    assert s.dependencies_by_name(s.get_project("app")) == ["zlib"]
    assert [p.name for p in s.all_projects()] == ["libs", "3rdparty", "zlib", "app"]
    s.check_invariants()

def test_standalone_projects(tmpdir):
    b = Builder(str(tmpdir))
    b.project("one")
    b.project("two")
    b.finish()
    assert [p.name for p in b.projects] == ["one", "two"]
    assert b.projects[0].path == "one.vcxproj"

def test_location(tmpdir):
    tmpdir.join("src").ensure(dir=True)
    b = new_project(tmpdir)
    b.location("src")
    assert b.active_project.path == "src\\hello.vcxproj"
    with pytest.raises(NotFoundError):
        b.location("nonexistent")

def test_references_project(tmpdir):
    b = new_project(tmpdir)
    with pytest.raises(NotFoundError):
        b.referencesProject("../lib/lib.vcxproj")
    b.referencesProject("../lib/lib.vcxproj", "lib")
    f = b.active_project.files[0]
    assert f.include_type == IncludeType.PROJECT_REFERENCE
    assert f.project_guid == identifier_for("lib")
    assert f.path == "..\\lib\\lib.vcxproj"

def test_references_project_reads_guid(tmpdir):
    lib = os.path.join(os.path.dirname(__file__), "projects", "hello", "lib", "lib.vcxproj")
    b = new_project(tmpdir)
    b.referencesProject(lib)
    assert b.active_project.files[0].project_guid == "{6C696200-0000-0000-0000-000000000000}"

def test_run_script(tmpdir):
    tmpdir.join("hello.cpp").write("")
    script = tmpdir.join("hello.py")
    script.write("""
def build(b):
    b.project("hello")
    b.configurations("Debug", "Release")
    b.platforms("Win32")
    b.kind("ConsoleApp")
    b.files("*.cpp")
    with b.filter("Debug"):
        b.defines("_DEBUG")
""")
    b = Builder(str(tmpdir))
    b.run_script(str(script))
    b.finish()
    p = b.projects[0]
    assert [f.path for f in p.files] == ["hello.cpp"]
    assert p.configurations[0]["PreprocessorDefinitions"] == ["_DEBUG"]

def test_script_errors_have_position(tmpdir):
    script = tmpdir.join("bad.py")
    script.write("""
def build(b):
    b.project("hello")
    b.kind("ConsoleApp")
""")
    b = Builder(str(tmpdir))
    with pytest.raises(SelectionError) as e:
        b.run_script(str(script))
    assert e.value.pos == "bad.py"

def test_script_without_build(tmpdir):
    script = tmpdir.join("empty.py")
    script.write("x = 1\n")
    with pytest.raises(Exception) as e:
        Builder(str(tmpdir)).run_script(str(script))
    assert "build()" in str(e.value)
