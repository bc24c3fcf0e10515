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
Reading of Visual C++ project (.vcxproj) files.

Settings are looked up in the field registry by the element name, with a few
exceptions listed in :data:`RENAMED`. Elements that aren't known are ignored.
"""

import os.path
import re
import xml.etree.ElementTree

import logging
logger = logging.getLogger("projsync.parser.vcxproj")

from projsync import props
from projsync.error import ParserError, TypeError, error_context, warning
from projsync.identity import parse_guid, identifier_for
from projsync.model import (Project, ConfigKey, CustomBuildRule, IncludeType,
                            normalize_path)


XMLNS = {
    "ms" : "http://schemas.microsoft.com/developer/msbuild/2003"
}

_CONDITION_RE = re.compile(r"^\s*'\$\(Configuration\)\|\$\(Platform\)'\s*==\s*'([^'|]*)\|([^']*)'\s*$")

#: Versions of ToolsVersion attribute.
TOOLS_VERSIONS = {
    "4.0":     2010,
    "12.0":    2013,
    "14.0":    2015,
    "15.0":    2017,
    "16.0":    2019,
    "Current": 2019,
    }

#: Fields whose element name differs, keyed by (parent element, element).
RENAMED = {
    ("Link", "AdditionalOptions"): "LinkAdditionalOptions",
    ("Lib", "AdditionalOptions"):  "LinkAdditionalOptions",
    }

# tool elements in ItemDefinitionGroup that hold settings
_TOOLS = ("ClCompile", "Link", "Lib", "ResourceCompile", "Midl")

_BUILD_EVENTS = ("PreBuildEvent", "PreLinkEvent", "PostBuildEvent")

# item metadata forming a custom build rule
_BUILD_RULE_METADATA = {
    "Command":          "command",
    "Message":          "message",
    "Outputs":          "outputs",
    "AdditionalInputs": "additional_inputs",
    "LinkObjects":      "link_objects",
    }

_ITEM_TYPES = set(IncludeType.ALL)

_FIELD_NAMES = set(f.name for f in props.all_fields())


def _tag(node):
    """Returns element name without the namespace."""
    t = node.tag
    return t[t.index("}") + 1:] if t.startswith("{") else t


def parse_condition(condition):
    """
    Returns :class:`projsync.model.ConfigKey` from a Condition attribute
    of the usual form, ``'$(Configuration)|$(Platform)'=='Debug|Win32'``,
    or :const:`None` if the condition is something else.
    """
    m = _CONDITION_RE.match(condition)
    if m is None:
        return None
    return ConfigKey(m.group(1), m.group(2))


def read_project_guid(path):
    """Returns identifier of the project in file *path*."""
    root = xml.etree.ElementTree.parse(path).getroot()
    guid = root.findtext("{%(ms)s}PropertyGroup/{%(ms)s}ProjectGuid" % XMLNS)
    if guid is None or parse_guid(guid) is None:
        raise ParserError("project doesn't have valid ProjectGuid", pos=path)
    return parse_guid(guid)


class _ProjectReader(object):
    """
    Fills :class:`projsync.model.Project` from the parsed XML tree.
    """
    def __init__(self, project, root, path):
        self.project = project
        self.root = root
        self.path = path

    def keys_for(self, node, inherited=None):
        """
        Returns indexes of configurations *node* applies to, taking its
        Condition into account, or :const:`None` if the condition is not
        understood.
        """
        condition = node.get("Condition")
        if condition is None:
            return inherited if inherited is not None else list(range(len(self.project.config_keys)))
        key = parse_condition(condition)
        if key is None:
            logger.debug("%s: ignoring element with condition %s", self.path, condition)
            return None
        try:
            index = self.project.config_keys.index(key)
        except ValueError:
            warning("configuration %s isn't declared in ProjectConfigurations", key, pos=self.path)
            return None
        if inherited is not None and index not in inherited:
            return []
        return [index]

    def set(self, records, name, text):
        field = props.get_field(name)
        value = text if text is not None else ""
        for r in records:
            if not field.applies_to(r):
                logger.debug("%s: %s doesn't apply to %s", self.path, name, r)
                return
            try:
                field.set(r, value)
            except TypeError as e:
                warning("ignoring %s: %s", name, e.msg, pos=self.path)
                return

    def read(self):
        p = self.project
        p.config_keys = [ConfigKey.parse(x.get("Include"))
                         for x in self.root.findall("{%(ms)s}ItemGroup/{%(ms)s}ProjectConfiguration" % XMLNS)]
        p.configurations = []
        p.materialize_slots()
        p.format_version = TOOLS_VERSIONS.get(self.root.get("ToolsVersion"))

        for node in self.root:
            tag = _tag(node)
            if tag == "PropertyGroup":
                self.read_property_group(node)
            elif tag == "ItemDefinitionGroup":
                self.read_item_definitions(node)
            elif tag == "ItemGroup":
                self.read_items(node)

        if p.format_version == 2010 and any(c["PlatformToolset"] == "v110" for c in p.configurations):
            p.format_version = 2012

    def read_property_group(self, node):
        p = self.project
        if node.get("Label") == "Globals":
            for child in node:
                tag = _tag(child)
                text = (child.text or "").strip()
                if tag == "ProjectGuid":
                    p.guid = parse_guid(text)
                elif tag == "Keyword":
                    p.keyword = text
                elif tag == "WindowsTargetPlatformVersion":
                    p.windows_sdk_version = text
            return
        indexes = self.keys_for(node)
        if indexes is None:
            return
        for child in node:
            tag = _tag(child)
            if tag not in _FIELD_NAMES:
                continue
            child_indexes = self.keys_for(child, indexes)
            if not child_indexes:
                continue
            self.set([p.configurations[i] for i in child_indexes], tag, child.text)

    def read_item_definitions(self, node):
        indexes = self.keys_for(node)
        if not indexes:
            return
        records = [self.project.configurations[i] for i in indexes]
        for tool in node:
            tool_tag = _tag(tool)
            if tool_tag in _BUILD_EVENTS:
                command = tool.findtext("{%(ms)s}Command" % XMLNS)
                if command is not None:
                    self.set(records, tool_tag, command)
                continue
            if tool_tag not in _TOOLS:
                continue
            for child in tool:
                self.read_setting(records, tool_tag, child)

    def read_setting(self, records, tool_tag, child):
        tag = _tag(child)
        name = RENAMED.get((tool_tag, tag), tag)
        if name not in _FIELD_NAMES:
            return
        self.set(records, name, child.text)

    def read_items(self, node):
        p = self.project
        for item in node:
            include_type = _tag(item)
            if include_type == "ProjectConfiguration" or include_type not in _ITEM_TYPES:
                continue
            path = item.get("Include")
            if not path:
                continue
            f = p.add_file(path, include_type)
            with error_context(f):
                self.read_item(f, item)

    def read_item(self, f, item):
        rules = {}
        for child in item:
            tag = _tag(child)
            if f.include_type == IncludeType.PROJECT_REFERENCE and tag == "Project":
                f.project_guid = parse_guid(child.text or "")
                continue
            if f.include_type == IncludeType.REFERENCE and tag == "HintPath":
                f.hint_path = child.text
                continue
            indexes = self.keys_for(child)
            if not indexes:
                continue
            if f.include_type == IncludeType.CUSTOM_BUILD and tag in _BUILD_RULE_METADATA:
                for i in indexes:
                    rules.setdefault(i, {})[_BUILD_RULE_METADATA[tag]] = child.text or ""
                continue
            name = RENAMED.get((f.include_type, tag), tag)
            if name not in _FIELD_NAMES:
                continue
            self.set([f.configurations[i] for i in indexes], name, child.text)

        for i, rule in sorted(rules.items()):
            if not rule.get("command"):
                continue
            if "link_objects" in rule:
                rule["link_objects"] = rule["link_objects"].strip().lower() != "false"
            f.configurations[i]["CustomBuildRule"] = CustomBuildRule(**rule)


def load_project(path, project=None):
    """
    Reads project file *path*. If *project* is given (an entry read from a
    solution), it is filled in, otherwise a new project is created.
    """
    try:
        root = xml.etree.ElementTree.parse(path).getroot()
    except xml.etree.ElementTree.ParseError as e:
        raise ParserError("invalid project file: %s" % e, pos=path)
    if _tag(root) != "Project":
        raise ParserError("not a Visual Studio project file", pos=path)

    if project is None:
        name = os.path.splitext(os.path.basename(path))[0]
        project = Project(name, normalize_path(os.path.basename(path)))
    with error_context(path):
        _ProjectReader(project, root, path).read()
    if project.guid is None:
        project.guid = identifier_for(project.name)
        warning("project doesn't have ProjectGuid, using %s", project.guid, pos=path)
    logger.debug("loaded project %s: %d configurations, %d files",
                 project.name, len(project.config_keys), len(project.files))
    return project
