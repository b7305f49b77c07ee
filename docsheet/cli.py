"""Extract tables or text from a PDF/HTML document into an Excel workbook"""
import argparse
import os
import sys

from .config import Config
from .pipeline import ExtractionPipeline
from .utils import set_log_level


def print_progress(value):
    end = "\n" if value >= 100 else ""
    print(f"\rProcessing... {value}%", end=end, flush=True)


def build_parser():
    p = argparse.ArgumentParser(
        prog="docsheet",
        description="Extract tables from PDF or HTML documents into an .xlsx workbook")
    p.add_argument("input", help="Input PDF or HTML file")
    p.add_argument("-o", "--output", help="Output workbook (default: ocr_result.xlsx)")
    p.add_argument("--mime-type", help="Override the detected MIME type")
    p.add_argument("--scale", type=float, help="Render scale for OCR pages")
    p.add_argument("--row-tolerance", type=float, help="Row clustering tolerance")
    p.add_argument("--lang", help="OCR language")
    p.add_argument("--no-angle-cls", action="store_true", help="Disable text angle classifier")
    p.add_argument("--html-parser", help="BeautifulSoup parser (html.parser, html5lib, lxml)")
    p.add_argument("-q", "--quiet", action="store_true", help="Do not print progress")
    p.add_argument("-v", "--verbose", action="store_true", help="Debug logging")
    return p


def config_from_args(args):
    config = Config.from_env()
    overrides = {
        "render_scale": args.scale,
        "row_tolerance": args.row_tolerance,
        "ocr_lang": args.lang,
        "html_parser": args.html_parser,
    }
    values = {k: v for k, v in vars(config).items()}
    values.update({k: v for k, v in overrides.items() if v is not None})
    if args.no_angle_cls:
        values["ocr_use_angle_cls"] = False
    if args.verbose:
        values["log_level"] = "DEBUG"
    return Config(**values)


def main(argv=None):
    args = build_parser().parse_args(argv)
    if not os.path.exists(args.input):
        print(f"ERROR: file not found: {args.input}")
        return 2
    try:
        config = config_from_args(args)
    except ValueError as e:
        print(f"ERROR: {e}")
        return 2
    set_log_level(config.log_level)

    pipeline = ExtractionPipeline(config, progress=None if args.quiet else print_progress)
    result = pipeline.extract_file(args.input, mime_type=args.mime_type)
    if result.failed:
        print(f"ERROR: {result.text}")
        return 1

    print(f"{result.message} ({result.method.label})")
    if result.is_table:
        print(f"{len(result.tables)} table(s), {sum(len(t) for t in result.tables)} row(s)")
    out_path = pipeline.export(result, args.output)
    print(f"Wrote workbook to: {out_path}")
    return 0


if __name__ == '__main__':
    sys.exit(main())
