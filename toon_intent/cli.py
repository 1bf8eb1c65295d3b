#!/usr/bin/env python3
"""toon-intent - convert files or stdin to intent notation.

Usage:
    toon-intent [input] [-f FORMAT] [-o output.toon] [-b] [--exact] [--json]
    toon-intent --detect [input]
    toon-intent --batch <dir> [--glob '*.json'] [--output-dir <dir>]
"""

from __future__ import annotations

import argparse
import json
import sys
from pathlib import Path

from .config import get_settings
from .orchestrator import ToonConverter
from .schema import ConversionResult, InputFormat
from .tokens import count_tokens_exact
from .utils.logging import init as init_logging
from .utils.logging import logger

__all__ = ["convert_file", "convert_batch", "main"]


def _benchmark(source: str, result: ConversionResult, exact: bool) -> dict:
    stats = result.stats()
    bench: dict = stats.model_dump(by_alias=True)
    if exact:
        bench["exact"] = {
            "input": count_tokens_exact(source),
            "output": count_tokens_exact(result.tokens),
        }
    return bench


def convert_file(
    path: Path,
    *,
    converter: ToonConverter,
    fmt: InputFormat = InputFormat.AUTO,
    output: Path | None = None,
) -> ConversionResult:
    """Convert one file, optionally writing the notation next to ``output``."""
    result = converter.convert(path.read_text(encoding="utf-8"), fmt)
    if output:
        output.write_text(result.tokens + "\n", encoding="utf-8")
    return result


def convert_batch(
    input_dir: Path,
    *,
    converter: ToonConverter,
    pattern: str = "*",
    fmt: InputFormat = InputFormat.AUTO,
    output_dir: Path | None = None,
) -> dict:
    """Convert every file under ``input_dir`` matching ``pattern``.

    Args:
        input_dir: Directory to search recursively.
        converter: Converter to use.
        pattern: Glob for candidate files.
        fmt: Requested format for every file.
        output_dir: Directory for ``.toon`` files, laid out like ``input_dir``.

    Returns:
        Aggregate statistics and per-file results.
    """
    files = sorted(p for p in input_dir.rglob(pattern) if p.is_file())
    if not files:
        raise ValueError(f"No files matching {pattern!r} in {input_dir}")

    if output_dir:
        output_dir.mkdir(parents=True, exist_ok=True)

    results: list[dict] = []
    total_in, total_out = 0, 0

    for i, path in enumerate(files, 1):
        logger.info(f"[{i}/{len(files)}] {path.name}")
        try:
            out = None
            if output_dir:
                # mirrors the input tree: sub/a.json -> <output_dir>/sub/a.toon
                out = output_dir / path.relative_to(input_dir).with_suffix(".toon")
                out.parent.mkdir(parents=True, exist_ok=True)
            result = convert_file(path, converter=converter, fmt=fmt, output=out)
        except (OSError, UnicodeDecodeError) as e:
            logger.warning(f"Could not read {path}: {e}")
            results.append({"file": str(path), "status": "error", "error": str(e)})
            continue

        if result.is_error:
            logger.warning(f"{path}: {result.tokens}")
            results.append({"file": str(path), "status": "error", "error": result.tokens, "format": str(result.format)})
            continue

        total_in += result.input_token_estimate
        total_out += result.token_count
        results.append({
            "file": str(path),
            "status": "success",
            "format": str(result.format),
            "benchmark": result.stats().model_dump(by_alias=True),
        })

    savings = f"{(total_in - total_out) / total_in * 100:.1f}%" if total_in else "N/A"
    return {
        "processed": len(results),
        "successful": sum(1 for r in results if r["status"] == "success"),
        "failed": sum(1 for r in results if r["status"] == "error"),
        "aggregate": {"total_input_tokens": total_in, "total_output_tokens": total_out, "savings": savings},
        "files": results,
    }


def _build_parser() -> argparse.ArgumentParser:
    """Build CLI argument parser."""
    formats = [f.value for f in InputFormat]
    p = argparse.ArgumentParser(
        prog="toon-intent",
        description="Convert JSON, YAML, HTML, React/JSX or text to compact intent notation",
    )
    p.add_argument("input", type=Path, nargs="?", help="Input file (default: stdin)")
    p.add_argument("-f", "--format", choices=formats, help="Input format (default: auto)")
    p.add_argument("-o", "--output", type=Path, help="Output file")
    p.add_argument("-b", "--benchmark", action="store_true", help="Show token savings")
    p.add_argument("--exact", action="store_true", help="Add exact cl100k_base counts to the benchmark")
    p.add_argument("--json", action="store_true", help="Print the full result record as JSON")
    p.add_argument("--detect", action="store_true", help="Only print the detected format")
    p.add_argument("--batch", type=Path, metavar="DIR", help="Batch convert a directory")
    p.add_argument("--glob", default="*", help="File pattern for --batch (default: *)")
    p.add_argument("--output-dir", type=Path, help="Output directory for --batch")
    p.add_argument("-v", "--verbose", action="count", default=0, help="Increase log verbosity")
    return p


def main(argv: list[str] | None = None) -> int:
    """CLI entry point."""
    args = _build_parser().parse_args(argv)
    settings = get_settings()

    level = {0: None, 1: "INFO"}.get(args.verbose, "DEBUG")
    init_logging(level)

    converter = ToonConverter(settings.chars_per_token)
    fmt = InputFormat.parse(args.format) if args.format else settings.default_format

    if args.batch:
        try:
            summary = convert_batch(
                args.batch,
                converter=converter,
                pattern=args.glob,
                fmt=fmt,
                output_dir=args.output_dir,
            )
        except ValueError as e:
            print(f"toon-intent: {e}", file=sys.stderr)
            return 1
        print(json.dumps(summary, indent=2))
        return 0 if summary["failed"] == 0 else 1

    source = args.input.read_text(encoding="utf-8") if args.input else sys.stdin.read()

    if args.detect:
        print(converter.detect_format(source))
        return 0

    result = converter.convert(source, fmt)

    if args.output:
        args.output.write_text(result.tokens + "\n", encoding="utf-8")
    elif args.json:
        record = result.to_record()
        if args.benchmark:
            record["benchmark"] = _benchmark(source, result, args.exact)
        print(json.dumps(record, indent=2))
    else:
        print(result.tokens)

    if args.benchmark and not args.json:
        bench = _benchmark(source, result, args.exact)
        line = (
            f"Tokens: {bench['inputTokens']} input → {bench['outputTokens']} TOON "
            f"({bench['savingsPercentage']}% savings, {result.format})"
        )
        if args.exact:
            line += f" | cl100k_base: {bench['exact']['input']} → {bench['exact']['output']}"
        print(line, file=sys.stderr)

    return 1 if result.is_error else 0


if __name__ == "__main__":
    sys.exit(main())
