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
Misc tests of projsync's internals' correctness.
"""

import os.path
import pytest

import projsync.dumper
import projsync.io
from projsync.error import Error, TypeError
from projsync.model import (Solution, Project, ConfigKey, CustomBuildRule,
                            IncludeType, make_config_keys)
from projsync.parser.sln import load_solution, load_projects

projects_dir = os.path.join(os.path.dirname(__file__), "projects")


def load_hello():
    s = load_solution(os.path.join(projects_dir, "hello", "hello.sln"))
    load_projects(s)
    return s


def test_model_cloning():
    model = load_hello()
    model_copy = model.clone()
    model_txt = projsync.dumper.dump_solution(model)
    model_copy_txt = projsync.dumper.dump_solution(model_copy)
    assert model_txt == model_copy_txt
    model_copy.check_invariants()

def test_cloning_is_deep():
    model = load_hello()
    model_copy = model.clone()
    hello = model.get_project("hello")
    hello_copy = model_copy.get_project("hello")
    assert hello_copy is not hello
    assert hello_copy.parent is model_copy.root
    hello_copy.configurations[0]["PreprocessorDefinitions"] = ["CHANGED"]
    hello_copy.files[0].configurations[0]["ExcludedFromBuild"] = True
    assert hello.configurations[0]["PreprocessorDefinitions"] != ["CHANGED"]
    assert not hello.files[0].configurations[0]["ExcludedFromBuild"]
    lib_copy = model_copy.get_project("lib")
    assert lib_copy.parent is model_copy.get_project_by_guid("{A2A3C5A1-44B9-4E8C-9D0E-5B4E1C2F9A10}")

def test_project_clone_keeps_parent():
    s = Solution("s")
    folder = s.folder("libs")
    p = s.add_project(Project("a", "a.vcxproj"), folder)
    c = p.clone()
    assert c.parent is folder
    assert c is not p

def test_remove_empty_folders():
    s = Solution("s")
    s.folder("empty/deeper")
    full = s.folder("full")
    s.add_project(Project("a", "a.vcxproj"), full)
    s.remove_empty_folders()
    assert [p.name for p in s.all_projects()] == ["full", "a"]
    assert [p.name for p in s.projects] == ["full", "a"]
    s.check_invariants()
    # the removed folder's identifier is free again
    s.folder("empty")
    s.check_invariants()

def test_invariants_detect_broken_tree():
    s = Solution("s")
    p = s.add_project(Project("a", "a.vcxproj"))
    s.root.children.remove(p)
    with pytest.raises(AssertionError):
        s.check_invariants()

def test_materialize_slots():
    p = Project("a", "a.vcxproj")
    f = p.add_file("a.cpp")
    p.config_keys = make_config_keys(["Debug"], ["Win32"])
    p.materialize_slots()
    p.configurations[0]["OutDir"] = "bin"
    p.config_keys = make_config_keys(["Debug", "Release"], ["Win32"])
    p.materialize_slots()
    assert len(p.configurations) == 2
    assert len(f.configurations) == 2
    assert p.configurations[0]["OutDir"] == "bin\\"
    assert p.configurations[1].key == ConfigKey("Release", "Win32")

def test_files():
    p = Project("a", "a.vcxproj")
    f = p.add_file("src/a.cpp")
    assert f.path == "src\\a.cpp"
    assert f.include_type == IncludeType.CLCOMPILE
    assert p.add_file("SRC\\A.cpp") is f
    assert p.add_file("res/app.rc").include_type == IncludeType.RESOURCE_COMPILE
    assert p.add_file("readme").include_type == IncludeType.NONE
    assert p.find_files("src/*.cpp") == [f]
    assert p.find_files("*.h") == []
    p.remove_file(f)
    assert p.get_file("src/a.cpp") is None

def test_field_types():
    p = Project("a", "a.vcxproj")
    p.config_keys = make_config_keys(["Debug"], ["Win32"])
    p.materialize_slots()
    c = p.configurations[0]
    c["CharacterSet"] = "mbcs"
    assert c["CharacterSet"] == "MultiByte"
    c["LinkIncremental"] = "False"
    assert c["LinkIncremental"] is False
    c["PreprocessorDefinitions"] = "A;B;;C"
    assert c["PreprocessorDefinitions"] == ["A", "B", "C"]
    with pytest.raises(TypeError):
        c["Optimization"] = "Fastest"
    with pytest.raises(KeyError):
        p.add_file("a.cpp")
        p.materialize_slots()
        p.files[0].configurations[0]["OutDir"] = "bin"

def test_dependencies_by_name():
    s = Solution("s")
    a = s.add_project(Project("a", "a.vcxproj", "{6C696200-0000-0000-0000-000000000000}"))
    b = s.add_project(Project("b", "b.vcxproj"))
    b.dependencies = ["{6c696200-0000-0000-0000-000000000000}", "c"]
    assert s.dependencies_by_name(b) == ["a", "c"]
    b.dependencies = ["{00000000-0000-0000-0000-000000000001}"]
    with pytest.raises(Error):
        s.dependencies_by_name(b)

def test_custom_build_rule_defaults():
    r = CustomBuildRule("gen")
    assert r == CustomBuildRule("gen", "", "", "", True)
    assert r.link_objects


def test_file_io_unix(tmpdir):
    projsync.io.reset()
    p = tmpdir.join("textfile")
    f = projsync.io.OutputFile(str(p), projsync.io.EOL_UNIX)
    f.write("one\ntwo\n")
    f.commit()
    text_read = p.read("rb")
    assert text_read == b"one\ntwo\n"

def test_file_io_win(tmpdir):
    projsync.io.reset()
    p = tmpdir.join("textfile")
    f = projsync.io.OutputFile(str(p), projsync.io.EOL_WINDOWS)
    f.write("one\ntwo\n")
    f.commit()
    text_read = p.read("rb")
    assert text_read == b"one\r\ntwo\r\n"

def test_file_io_unchanged(tmpdir):
    projsync.io.reset()
    p = tmpdir.join("textfile")
    p.write_binary(b"one\r\n")
    os.utime(str(p), (1000000, 1000000))
    f = projsync.io.OutputFile(str(p), projsync.io.EOL_WINDOWS)
    f.write("one\n")
    assert not f.commit()
    assert p.mtime() == 1000000
    assert projsync.io.num_unchanged == 1
    assert projsync.io.num_created == 0

def test_file_io_dry_run(tmpdir):
    projsync.io.reset()
    p = tmpdir.join("textfile")
    projsync.io.dry_run = True
    try:
        f = projsync.io.OutputFile(str(p), projsync.io.EOL_UNIX)
        f.write("one\n")
        f.commit()
    finally:
        projsync.io.dry_run = False
    assert not p.exists()
    assert projsync.io.num_created == 1

def test_file_io_conflict(tmpdir):
    projsync.io.reset()
    p = str(tmpdir.join("textfile"))
    projsync.io.OutputFile(p, projsync.io.EOL_UNIX, creator="one", create_for="a")
    with pytest.raises(Error):
        projsync.io.OutputFile(p, projsync.io.EOL_UNIX, creator="two", create_for="b")
