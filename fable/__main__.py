"""CLI entry point for the Fable interpreter.

Usage:
    python -m fable [-v|-vv|-vvv|-vvvv] <story_file>
    python -m fable [-v...] --emit-ast <story_file>
    python -m fable [-v...] --ast <ast_json_file>

Options:
  -v            Increase debug verbosity (can be repeated)
  --emit-ast    Classify the given story file and emit an AST JSON file
  --ast         Run a previously emitted AST JSON file

Debug information is written to `debug.txt` in the current directory when
verbosity is greater than zero.
"""

import argparse
import json
import sys
from pathlib import Path
from .ast_json import story_to_obj, story_from_obj
from .errors import FableError
from .interpreter import Interpreter
from .parser import parse_story
from .std.io import read_script


def run(story, verbosity: int) -> None:
    interpreter = Interpreter(debug_level=verbosity)
    try:
        interpreter.run(story)
    except FableError as e:
        print(f"Runtime error: {e}", file=sys.stderr)
        sys.exit(1)


def main(argv: list[str] | None = None) -> None:
    parser = argparse.ArgumentParser(description="Fable story interpreter")
    parser.add_argument('-v', action='count', default=0, help='increase debug verbosity (can be repeated)')
    group = parser.add_mutually_exclusive_group()
    group.add_argument('--emit-ast', metavar='STORY_FILE', help='emit AST JSON for the given story file')
    group.add_argument('--ast', metavar='AST_JSON_FILE', help='run a story from an AST JSON file')
    parser.add_argument('story', nargs='?', help='story file to run')
    args = parser.parse_args(argv)

    # Emit AST mode
    if args.emit_ast:
        story_file = Path(args.emit_ast)
        if not story_file.exists():
            print(f"Error: file {story_file} not found", file=sys.stderr)
            sys.exit(1)
        try:
            story = parse_story(read_script(str(story_file)))
        except FableError as e:
            print(f"Error: {e}", file=sys.stderr)
            sys.exit(1)
        out_path = story_file.with_name(story_file.name + '.ast.json')
        with open(out_path, 'w', encoding='utf-8') as out:
            json.dump(story_to_obj(story), out, ensure_ascii=False, indent=2)
        print(str(out_path))
        return

    # Run from AST JSON
    if args.ast:
        ast_path = Path(args.ast)
        if not ast_path.exists():
            print(f"Error: file {ast_path} not found", file=sys.stderr)
            sys.exit(1)
        with open(ast_path, 'r', encoding='utf-8') as f:
            data = json.load(f)
        run(story_from_obj(data), args.v)
        return

    # Default: run story file
    if not args.story:
        parser.error('missing story file; or use --emit-ast/--ast')
    story_file = Path(args.story)
    if not story_file.exists():
        print(f"Error: file {story_file} not found", file=sys.stderr)
        sys.exit(1)
    try:
        source = read_script(str(story_file))
    except FableError as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)
    run(parse_story(source), args.v)

if __name__ == '__main__':
    main()
