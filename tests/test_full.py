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
Full conversions: native files to scripts, and scripts back to the model.
"""

import os.path
import shutil
import pytest

import projsync.dumper
import projsync.io
import projsync.plugins
import projsync.tool
from projsync.api import ScriptFormat
from projsync.builder import Builder
from projsync.error import UnsupportedError
from projsync.parser.vcxproj import load_project

from indir import in_directory

projects_dir = os.path.join(os.path.dirname(__file__), "projects")


@pytest.fixture
def hello(tmpdir):
    """Copy of the hello solution that may be converted in place."""
    target = tmpdir.join("hello")
    shutil.copytree(os.path.join(projects_dir, "hello"), str(target))
    projsync.io.reset()
    return target


def read_text(path):
    return path.read_binary().decode("utf-8").replace("\r\n", "\n")

def block(text, header):
    """Returns lines of the filter block starting with *header*."""
    lines = text.split("\n")
    start = lines.index(header) + 1
    indent = len(header) - len(header.lstrip()) + 4
    out = []
    for l in lines[start:]:
        if not l.startswith(" " * indent):
            break
        out.append(l.strip())
    return out


LIB_LUA = """\
-- Generated by projsync from lib.vcxproj, changes will be overwritten.

project "lib"
    location "."
    configurations { "Debug", "Release" }
    platforms { "Win32", "x64" }
    uuid "6C696200-0000-0000-0000-000000000000"
    kind "StaticLib"
    toolset "v141"
    characterset "MBCS"
    flags { "NoPch" }
    buildoptions "/utf-8"
    filter { "Debug" }
        symbols "on"

    filter { "Release" }
        symbols "off"

    filter {}

    files {
        "include/lib.h",
        "lib.c"
    }
"""

LIB_PY = """\
# Generated by projsync from lib.vcxproj, changes will be overwritten.

def build(b):
    b.project("lib")
    b.vsver(2017)
    b.configurations("Debug", "Release")
    b.platforms("Win32", "x64")
    b.uuid("6C696200-0000-0000-0000-000000000000")

    b.kind("StaticLib")
    b.toolset("v141")
    b.characterset("MBCS")
    b.flags("NoPch")
    b.buildoptions("/utf-8")
    with b.filter("Debug"):
        b.symbols("on")
    with b.filter("Release"):
        b.symbols("off")
    b.files(
        "include/lib.h",
        "lib.c",
    )
"""

def test_lua_project():
    p = load_project(os.path.join(projects_dir, "hello", "lib", "lib.vcxproj"))
    assert ScriptFormat.get("lua").project_text(p, "lib.vcxproj") == LIB_LUA

def test_py_project():
    p = load_project(os.path.join(projects_dir, "hello", "lib", "lib.vcxproj"))
    assert ScriptFormat.get("py").project_text(p, "lib.vcxproj") == LIB_PY

def test_formats():
    assert ScriptFormat.names() == ["lua", "py", "sln"]
    with pytest.raises(UnsupportedError):
        ScriptFormat.get("cmake")


def test_convert_solution(hello):
    assert projsync.tool.main(["-q", str(hello.join("hello.sln"))]) == 0
    assert projsync.io.num_created == 3

    sln = read_text(hello.join("hello_sln.lua"))
    assert sln.startswith("-- Generated by projsync from hello.sln")
    assert 'solution "hello"' in sln
    assert '    uuid "3F6B1E2A-9C4D-4B7E-8A21-6D5C0F9E4B33"' in sln
    assert '    include "hello/hello.lua"' in sln
    assert '        dependson "lib"' in sln
    assert '    group "libs"' in sln
    assert '    include "lib/lib.lua"' in sln
    assert '    externalproject "tools"' in sln
    assert '        language "C#"' in sln
    assert sln.index('group "libs"') < sln.index('include "lib/lib.lua"') < sln.index('externalproject "tools"')

    assert read_text(hello.join("lib", "lib.lua")) == LIB_LUA

def test_converted_project(hello):
    assert projsync.tool.main(["-q", str(hello.join("hello.sln"))]) == 0
    lua = read_text(hello.join("hello", "hello.lua"))

    # the referenced project comes before the project itself
    assert lua.index('externalproject "lib"') < lua.index('project "hello"')
    assert '    location "../lib"' in lua
    assert '    links { "lib" }' in lua
    assert '    systemversion "10.0.17763.0"' in lua
    assert '    kind "ConsoleApp"' in lua
    assert '    pchheader "stdafx.h"' in lua
    assert '    defines { "_CONSOLE" }' in lua
    assert "%(PreprocessorDefinitions)" not in lua

    debug = block(lua, '    filter { "Debug" }')
    assert 'symbols "on"' in debug
    assert 'targetdir "bin\\\\Debug\\\\"' in debug
    assert 'optimize "off"' in debug
    assert 'defines { "_DEBUG" }' in debug
    release = block(lua, '    filter { "Release" }')
    assert 'optimize "speed"' in release
    assert 'flags { "NoIncrementalLink" }' in release
    assert block(lua, '    filter { "platforms:Win32" }') == ['defines { "WIN32" }']
    assert block(lua, '    filter { "Release", "platforms:x64" }') == \
           ['postbuildcommands { "copy \\"$(TargetPath)\\" \\"$(SolutionDir)dist\\"" }']

    # file settings
    assert '    pchsource "stdafx.cpp"' in lua
    assert block(lua, '    filter { "Release", "files:debug_only.cpp" }') == ['flags { "ExcludeFromBuild" }']
    rule = block(lua, '    filter { "files:version.txt" }')
    assert rule[0] == "buildrule {"
    assert 'commands = "python make_version.py version.txt version.h",' in rule
    assert 'linkobjects = false,' in rule

def test_regeneration_is_stable(hello):
    sln = str(hello.join("hello.sln"))
    assert projsync.tool.main(["-q", sln]) == 0
    first = hello.join("hello", "hello.lua").read_binary()
    projsync.io.reset()
    assert projsync.tool.main(["-q", sln]) == 0
    assert projsync.io.num_created == 0
    assert projsync.io.num_modified == 0
    assert projsync.io.num_unchanged == 3
    assert hello.join("hello", "hello.lua").read_binary() == first

def test_dry_run(hello):
    try:
        assert projsync.tool.main(["-q", "--dry-run", "-f", "py", str(hello.join("lib", "lib.vcxproj"))]) == 0
        assert projsync.io.num_created == 1
        assert not hello.join("lib", "lib.py").exists()
    finally:
        projsync.io.dry_run = False

def test_prefix_and_output(hello):
    with in_directory(str(hello)):
        assert projsync.tool.main(["-q", "-s", "-p", "premake_", "hello.sln"]) == 0
        assert hello.join("premake_hello_sln.lua").exists()
        assert not hello.join("lib", "premake_lib.lua").exists()
        # with -s, all projects are described as external ones
        sln = read_text(hello.join("premake_hello_sln.lua"))
        assert 'externalproject "hello"' in sln
        projsync.io.reset()
        assert projsync.tool.main(["-q", "-o", "custom.lua", "lib/lib.vcxproj"]) == 0
        assert hello.join("custom.lua").exists()

def test_several_formats(hello):
    lib = str(hello.join("lib", "lib.vcxproj"))
    assert projsync.tool.main(["-q", "-f", "lua", "-f", "py", lib]) == 0
    assert projsync.io.num_created == 2
    assert read_text(hello.join("lib", "lib.lua")) == LIB_LUA
    assert read_text(hello.join("lib", "lib.py")) == LIB_PY
    assert projsync.tool.main(["-q", "-f", "lua", "-f", "py", "-o", "x", lib]) == 3

def test_errors_exit_with_status(hello, capsys):
    assert projsync.tool.main(["-f", "cmake", str(hello.join("hello.sln"))]) == 1
    assert projsync.tool.main([str(hello.join("missing.sln"))]) == 1
    assert projsync.tool.main([]) == 3

def test_dump(hello, capsys):
    assert projsync.tool.main(["--dump", str(hello.join("hello.sln"))]) == 0
    out = capsys.readouterr().out
    assert out.startswith("solution hello {")
    assert "folder libs {" in out


ROUND_TRIP_SCRIPT = """
def build(b):
    b.project("hello")
    b.configurations("Debug", "Release")
    b.platforms("Win32", "x64")
    b.uuid("hello")
    b.kind("ConsoleApp")
    b.toolset("v141")
    b.pchheader("stdafx.h")
    b.defines("_CONSOLE")
    b.includedirs("include")
    with b.filter("Debug"):
        b.symbols("on")
        b.optimize("off")
        b.targetdir("bin/Debug")
        b.defines("_DEBUG")
    with b.filter("Release"):
        b.symbols("off")
        b.optimize("speed")
        b.targetdir("bin/Release")
        b.defines("NDEBUG")
    with b.filter("platforms:Win32"):
        b.defines("WIN32")
    with b.filter("Release", "platforms:x64"):
        b.postbuildcommands("copy a b")
    b.files("a.cpp", "gen.txt", "stdafx.cpp", "stdafx.h")
    b.pchsource("stdafx.cpp")
    with b.filter("Release", "files:a.cpp"):
        b.flags("ExcludeFromBuild")
    with b.filter("files:gen.txt"):
        b.buildrule(command="gen gen.txt", message="Generating", outputs="gen.h")
"""

def test_py_round_trip(tmpdir):
    """
    A project built by a script, written as a script again and executed,
    must give the same model.
    """
    src = tmpdir.join("src").ensure(dir=True)
    src.join("hello.py").write(ROUND_TRIP_SCRIPT)
    b = Builder(str(src))
    b.run_script(str(src.join("hello.py")))
    b.finish()
    original = b.projects[0]

    out = tmpdir.join("out").ensure(dir=True)
    text = ScriptFormat.get("py").project_text(original, "hello.py")
    out.join("hello.py").write(text)
    b2 = Builder(str(out))
    b2.run_script(str(out.join("hello.py")))
    b2.finish()
    regenerated = b2.projects[0]

    assert projsync.dumper.dump_project(regenerated) == projsync.dumper.dump_project(original)
    # and the script is a fixed point
    assert ScriptFormat.get("py").project_text(regenerated, "hello.py") == text

def test_script_input(tmpdir):
    projsync.io.reset()
    tmpdir.join("hello.py").write(ROUND_TRIP_SCRIPT)
    assert projsync.tool.main(["-q", str(tmpdir.join("hello.py"))]) == 0
    lua = read_text(tmpdir.join("hello.lua"))
    assert 'project "hello"' in lua
    assert '    uuid "68656C6C-6F00-0000-0000-000000000000"' in lua

def test_projects_get_default_uuid(tmpdir):
    projsync.io.reset()
    tmpdir.join("plain.py").write("""
def build(b):
    b.project("plain")
    b.configurations("Debug")
    b.platforms("Win32")
    b.kind("StaticLib")
""")
    assert projsync.tool.main(["-q", str(tmpdir.join("plain.py"))]) == 0
    lua = read_text(tmpdir.join("plain.lua"))
    assert '    uuid "706C6169-6E00-0000-0000-000000000000"' in lua
