from __future__ import annotations
import argparse, json, logging, sys
from .config import DecodeOptions
from .binary.errors import ParseError
from .models.classfile import ClassFile

logger = logging.getLogger("jclassdump")

def _options(args) -> DecodeOptions:
    return DecodeOptions(wide_slots=args.wide_slots, check_magic=args.check_magic)

def cmd_info(args):
    # Fast path: digest only
    if args.summary:
        from .binary.reader import summarize_file
        print(json.dumps(summarize_file(args.input, _options(args)), indent=2))
        return 0

    f = ClassFile.from_binary(args.input, _options(args))
    if args.format == "text":
        sys.stdout.write(f.to_text())
    else:
        print(f.to_json())
    return 0

def cmd_to_json(args):
    f = ClassFile.from_binary(args.input, _options(args))
    with open(args.output, "w", encoding="utf-8") as out:
        out.write(f.to_json())
        out.write("\n")
    logger.info("wrote %s", args.output)
    return 0

def cmd_constants(args):
    from .binary.reader import iter_constants
    from .render.text_out import describe_constant
    # decode the whole pool before printing anything
    slots = list(iter_constants(args.input, _options(args)))
    for idx, entry in slots:
        print(f"#{idx} = {describe_constant(entry)}")
    return 0

def build_parser():
    p = argparse.ArgumentParser(prog="jclassdump", description="JVM class file decoder")
    p.add_argument("-v", "--verbose", action="store_true", help="Log decode progress to stderr")
    p.add_argument("--wide-slots", action="store_true",
                   help="Give Long/Double constants two pool slots, as the JVM does")
    p.add_argument("--check-magic", action="store_true", help="Reject files whose magic is not CAFEBABE")
    sub = p.add_subparsers(dest="cmd", required=True)

    sp = sub.add_parser("info", help="print the decoded class as JSON or text")
    sp.add_argument("input", help="Path to .class file")
    sp.add_argument("--summary", action="store_true", help="Print a short digest (names, version, methods)")
    sp.add_argument("--format", default="json", choices=["json", "text"])
    sp.set_defaults(func=cmd_info)

    sp = sub.add_parser("to-json", help="write the decoded class as JSON to a file")
    sp.add_argument("input")
    sp.add_argument("output")
    sp.set_defaults(func=cmd_to_json)

    sp = sub.add_parser("constants", help="list constant pool slots, one per line")
    sp.add_argument("input")
    sp.set_defaults(func=cmd_constants)

    return p

def main(argv=None):
    ns = build_parser().parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if ns.verbose else logging.WARNING,
        format="%(levelname)s: %(message)s",
    )
    try:
        return ns.func(ns)
    except ParseError as e:
        print(f"error: {ns.input}: {type(e).__name__}: {e}", file=sys.stderr)
        return 1
    except OSError as e:
        print(f"error: {e}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    raise SystemExit(main())
