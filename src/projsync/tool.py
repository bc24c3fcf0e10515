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
The ``projsync`` command: converts a solution or a project (or a Python
build script) into build scripts of the chosen formats, or a script back into
a native solution file.
"""

import sys
import os.path
import logging
from optparse import OptionParser, OptionGroup
from time import time


class ProjsyncFormatter(logging.Formatter):

    def __init__(self):
        logging.Formatter.__init__(self, fmt=logging.BASIC_FORMAT)

    def format(self, record):
        level = record.levelno
        if level == logging.ERROR or level == logging.WARNING or level == logging.INFO:
            msg = ""
            if hasattr(record, "pos") and record.pos:
                msg = "%s: " % record.pos
            if level != logging.INFO:
                msg += "%s: " % record.levelname.lower()
            msg += record.getMessage()
            return msg
        else:
            return logging.Formatter.format(self, record)


class ProjsyncOptionParser(OptionParser):
    def get_version(self):
        import projsync.version
        return "projsync %s" % projsync.version.get_version()


def make_parser():
    parser = ProjsyncOptionParser(usage="%prog [options] FILE.sln|FILE.vcxproj|SCRIPT.py",
                                  version="projsync")
    parser.add_option(
            "-f", "--format",
            action="append", dest="formats", default=None,
            metavar="FORMAT",
            help="format of generated files: lua (default), py or sln; may be given several times")
    parser.add_option(
            "-o", "--output",
            action="store", dest="output", default=None,
            metavar="NAME",
            help="name of the generated script for the solution or project")
    parser.add_option(
            "-p", "--prefix",
            action="store", dest="prefix", default="",
            help="prefix of generated script names")
    parser.add_option(
            "-s", "--solution-only",
            action="store_true", dest="solution_only", default=False,
            help="only convert the solution, describe its projects as external ones")
    parser.add_option(
            "-v", "--verbose",
            action="store_true", dest="verbose", default=False,
            help="show verbose output")
    parser.add_option(
            "-q", "--quiet",
            action="store_true", dest="quiet", default=False,
            help="only show errors")
    parser.add_option(
            "", "--dry-run",
            action="store_true", dest="dry_run", default=False,
            help="don't write any files, just pretend to do it")
    parser.add_option(
            "", "--diff",
            action="store_true", dest="diff_only", default=False,
            help="only output diffs instead of modifying the files, implies --dry-run")
    parser.add_option(
            "", "--touch",
            action="store_true", dest="force", default=False,
            help="touch output files even if they're unchanged")

    debug_group = OptionGroup(parser, "Debug Options")
    debug_group.add_option(
            "", "--debug",
            action="store_true", dest="debug", default=False,
            help="show debug log and tracebacks")
    debug_group.add_option(
            "", "--dump",
            action="store_true", dest="dump", default=False,
            help="dump the model to stdout instead of generating output")
    parser.add_option_group(debug_group)
    return parser


def script_name(name, fmt, prefix="", suffix=""):
    """Returns file name of the script generated for *name*."""
    return "%s%s%s.%s" % (prefix, name, suffix, fmt.extension)


def check_not_input(filename, input_path, fmt):
    """Refuses to write *filename* if it is the file being converted."""
    if os.path.abspath(filename) == os.path.abspath(input_path):
        from projsync.error import Error
        raise Error("%s output would overwrite the input file, use -o or -p to name it differently" % fmt,
                    pos=input_path)


def convert_solution(solution, fmt, options, input_path, with_projects=True):
    """
    Writes scripts for *solution* and, if *with_projects*, for its projects,
    next to the solution file. Projects without scripts are described as
    external ones.
    """
    base = os.path.dirname(os.path.abspath(solution.path))

    project_scripts = {}
    if with_projects and fmt.describes_projects:
        for p in solution.all_projects():
            if p.is_folder or p.is_external or not p.config_keys:
                continue
            rel = os.path.join(os.path.dirname(p.path.replace("\\", "/")),
                               script_name(p.name, fmt, options.prefix))
            fmt.generate_project(p, os.path.join(base, rel), solution,
                                 source=p.path.replace("\\", "/"))
            project_scripts[p] = rel

    if options.output:
        filename = options.output
    else:
        filename = os.path.join(base, script_name(solution.name, fmt, options.prefix,
                                                  fmt.solution_suffix))
    check_not_input(filename, input_path, fmt)
    fmt.generate_solution(solution, filename, project_scripts, source=solution.path)


def convert_project(project, path, fmt, options, input_path):
    """Writes script for standalone *project* read from *path*."""
    if options.output:
        filename = options.output
    else:
        filename = os.path.join(os.path.dirname(os.path.abspath(path)),
                                script_name(project.name, fmt, options.prefix))
    check_not_input(filename, input_path, fmt)
    fmt.generate_project(project, filename, source=path)


def load_input(path):
    """
    Returns tuple of solutions and standalone projects described by *path*.
    """
    import projsync.parser
    from projsync.builder import Builder
    from projsync.model import Solution

    if path.lower().endswith(".py"):
        b = Builder(os.path.dirname(os.path.abspath(path)))
        b.run_script(path)
        return b.finish(), list(b.projects)
    model = projsync.parser.load(path)
    if isinstance(model, Solution):
        return [model], []
    return [], [model]


def main(argv=None):
    if argv is None:
        argv = sys.argv[1:]

    parser = make_parser()
    options, args = parser.parse_args(argv)

    if len(args) != 1:
        sys.stderr.write("incorrect number of arguments, exactly 1 input file required\n")
        return 3

    if options.diff_only and options.force:
        sys.stderr.write("--diff and --touch options can't be used together\n")
        return 3

    if options.output and options.formats and len(options.formats) > 1:
        sys.stderr.write("--output can't be used with more than one format\n")
        return 3

    logger = logging.getLogger()
    log_handler = logging.StreamHandler()
    log_handler.setFormatter(ProjsyncFormatter())
    logger.addHandler(log_handler)
    previous_level = logger.level

    if options.debug or options.verbose:
        log_level = logging.DEBUG
    elif options.quiet:
        log_level = logging.ERROR
    else:
        log_level = logging.WARNING
    logger.setLevel(log_level)

    # imported this late so that logging is already configured
    import projsync.error
    import projsync.dumper
    import projsync.io
    import projsync.plugins
    from projsync.api import ScriptFormat

    try:
        start_time = time()
        projsync.io.reset()
        projsync.io.dry_run = options.dry_run or options.diff_only
        projsync.io.diff_only = options.diff_only
        projsync.io.force_output = options.force

        formats = [ScriptFormat.get(name) for name in options.formats or ["lua"]]
        solutions, projects = load_input(args[0])

        if options.dump:
            for s in solutions:
                print(projsync.dumper.dump_solution(s))
            for p in projects:
                print(projsync.dumper.dump_project(p))
            return 0

        from_script = args[0].lower().endswith(".py")
        if not from_script and not options.solution_only:
            from projsync.parser.sln import load_projects
            for s in solutions:
                load_projects(s)
        for fmt in formats:
            for s in solutions:
                convert_solution(s, fmt, options, args[0], not options.solution_only)
            for p in projects:
                if from_script:
                    source = os.path.join(os.path.dirname(os.path.abspath(args[0])),
                                          p.path.replace("\\", "/"))
                else:
                    source = args[0]
                convert_project(p, source, fmt, options, args[0])
        if not options.quiet:
            print("created files: %d, updated files: %d, unchanged files: %d (time: %.1fs)" %
                  (projsync.io.num_created, projsync.io.num_modified,
                   projsync.io.num_unchanged, time() - start_time))

    except KeyboardInterrupt:
        if options.debug:
            raise
        return 2
    except IOError as e:
        if options.debug:
            raise
        logging.error(e)
        return 1
    except projsync.error.Error as e:
        if options.debug:
            raise
        logging.error(e.msg, extra={"pos": e.pos})
        return 1
    finally:
        logger.removeHandler(log_handler)
        logger.setLevel(previous_level)
    return 0


if __name__ == "__main__":
    sys.exit(main())
