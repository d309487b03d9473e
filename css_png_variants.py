#!/usr/bin/env python3

from __future__ import annotations

import io
import os
import sys
import json
import argparse
import logging
from typing import Any, Dict, List, Optional, Tuple
from urllib.parse import urljoin, urlsplit

import requests
from PIL import Image
from tqdm import tqdm
from tqdm.contrib.logging import logging_redirect_tqdm

from css_png_refs import extract_png_urls, filter_paths
from mask_recolor import recolor_mask
from palette_colors import ConfigError, parse_colors, rgb_to_hex

DEFAULT_OUTPUT = "output_images"
DEFAULT_TIMEOUT = 30
USER_AGENT = "Mozilla/5.0 (X11; Linux x86_64) AppleWebKit/537.36 (KHTML, like Gecko) Chrome/124.0.0.0 Safari/537.36"
CONFIG_KEYS = {"base_url", "output", "colors", "filters", "timeout"}

# ANSI colors for terminal highlighting
RED = "\033[31m"
RESET = "\033[0m"


class StylesheetError(RuntimeError):
    pass


# ------------- Logging -------------

def setup_logging(verbose: bool) -> None:
    level = logging.DEBUG if verbose else logging.INFO
    fmt = "%(asctime)s | %(levelname)s | %(message)s"
    logging.basicConfig(level=level, format=fmt)


# ------------- Config -------------

def load_config(config_file: str) -> Dict[str, Any]:
    try:
        with open(os.path.expanduser(config_file), "r", encoding="utf-8") as f:
            cfg = json.load(f)
    except (OSError, json.JSONDecodeError) as e:
        raise ConfigError(f"cannot read config {config_file}: {e}")

    if not isinstance(cfg, dict):
        raise ConfigError("config must be a JSON object")
    unknown = set(cfg) - CONFIG_KEYS
    if unknown:
        raise ConfigError(f"unknown config keys: {', '.join(sorted(unknown))}")
    for key in ("colors", "filters"):
        value = cfg.get(key)
        if isinstance(value, str):
            cfg[key] = [value]
        elif value is not None and (not isinstance(value, list) or not all(isinstance(v, str) for v in value)):
            raise ConfigError(f"config.{key} must be a list of strings")
    return cfg


def merge_options(args: argparse.Namespace, cfg: Dict[str, Any]) -> Dict[str, Any]:
    # CLI overrides
    opts = {
        "base_url": cfg.get("base_url"),
        "output": cfg.get("output") or DEFAULT_OUTPUT,
        "colors": cfg.get("colors") or [],
        "filters": cfg.get("filters") or [],
        "timeout": cfg.get("timeout", DEFAULT_TIMEOUT),
    }
    if args.base_url is not None:
        opts["base_url"] = args.base_url
    if args.output is not None:
        opts["output"] = args.output
    if args.color is not None:
        opts["colors"] = args.color
    if args.filter is not None:
        opts["filters"] = args.filter
    if args.timeout is not None:
        opts["timeout"] = args.timeout

    try:
        opts["timeout"] = float(opts["timeout"])
    except (TypeError, ValueError):
        raise ConfigError(f"timeout must be a number, got {opts['timeout']!r}")
    if opts["timeout"] <= 0:
        raise ConfigError("timeout must be positive")

    if opts["base_url"] is not None:
        if not isinstance(opts["base_url"], str):
            raise ConfigError("base_url must be a string")
        try:
            urlsplit(opts["base_url"])
        except ValueError as e:
            raise ConfigError(f"invalid base_url {opts['base_url']!r}: {e}")
    return opts


# ------------- Fetching -------------

def is_remote(source: str) -> bool:
    return source.lower().startswith(("http://", "https://"))


def new_session() -> requests.Session:
    session = requests.Session()
    session.headers.update({"User-Agent": USER_AGENT})
    return session


def read_css(source: str, session: requests.Session, timeout: float = DEFAULT_TIMEOUT) -> str:
    if is_remote(source):
        try:
            response = session.get(source, timeout=timeout)
            response.raise_for_status()
        except requests.RequestException as e:
            raise StylesheetError(f"cannot fetch stylesheet {source}: {e}")
        return response.text

    try:
        with open(os.path.expanduser(source), "r", encoding="utf-8") as f:
            return f.read()
    except (OSError, UnicodeDecodeError) as e:
        raise StylesheetError(f"cannot read stylesheet {source}: {e}")


def resolve_image_url(ref: str, base_url: Optional[str]) -> Optional[str]:
    if is_remote(ref):
        return ref
    if base_url:
        return urljoin(base_url, ref)
    return None


def fetch_image(url: str, session: requests.Session, timeout: float = DEFAULT_TIMEOUT) -> Image.Image:
    response = session.get(url, timeout=timeout)
    response.raise_for_status()

    with Image.open(io.BytesIO(response.content)) as img:
        img.load()
        return img.convert("RGBA")


# ------------- Output -------------

def output_path_for(output_root: str, color_name: str, ref: str) -> str:
    rel = ref.lstrip("/")
    return os.path.join(output_root, color_name, *rel.split("/"))


def save_variant(image: Image.Image, out_path: str) -> None:
    out_dir = os.path.dirname(out_path)
    if out_dir:
        os.makedirs(out_dir, exist_ok=True)
    image.save(out_path)


# ------------- Pipeline -------------

def new_summary() -> Dict[str, int]:
    return {
        "references": 0,
        "skipped": 0,
        "fetch_failed": 0,
        "saved": 0,
        "save_failed": 0,
        "planned": 0,
    }


def process_reference(
    ref: str,
    colors: Dict[str, Tuple[int, int, int]],
    base_url: Optional[str],
    output_root: str,
    session: requests.Session,
    timeout: float,
    summary: Dict[str, int],
    dry_run: bool = False,
) -> None:
    try:
        url = resolve_image_url(ref, base_url)
    except ValueError as e:
        logging.error(f"Cannot resolve {ref}: {e}")
        summary["fetch_failed"] += 1
        return

    if url is None:
        logging.warning(f"Skipping (no base URL): {ref}")
        summary["skipped"] += 1
        return

    if dry_run:
        for name in colors:
            logging.info(f"[dry run] {url} -> {output_path_for(output_root, name, ref)}")
            summary["planned"] += 1
        return

    logging.debug(f"Fetching {url}")
    try:
        source = fetch_image(url, session, timeout)
    except (requests.RequestException, OSError, ValueError, Image.DecompressionBombError) as e:
        logging.error(f"Failed to load {url}: {e}")
        summary["fetch_failed"] += 1
        return

    for name, rgb in colors.items():
        out_path = output_path_for(output_root, name, ref)
        try:
            save_variant(recolor_mask(source, rgb), out_path)
        except (OSError, ValueError) as e:
            logging.error(f"Failed to save {out_path} ({name} {rgb_to_hex(rgb)}): {e}")
            summary["save_failed"] += 1
            continue
        logging.info(f"Saved {out_path}")
        summary["saved"] += 1


def generate_variants(
    css_text: str,
    colors: Dict[str, Tuple[int, int, int]],
    base_url: Optional[str] = None,
    output_root: str = DEFAULT_OUTPUT,
    filters: Optional[List[str]] = None,
    session: Optional[requests.Session] = None,
    timeout: float = DEFAULT_TIMEOUT,
    dry_run: bool = False,
) -> Dict[str, int]:
    """Write one recolored copy of every .png the stylesheet references, per color.

    A reference that cannot be resolved or fetched, or a variant that cannot
    be written, is logged and counted in the returned summary; the run goes
    on with the rest.
    """
    summary = new_summary()

    paths = extract_png_urls(css_text)
    if filters:
        logging.info(f"Applying filters: {', '.join(filters)}")
        paths = filter_paths(paths, filters)
    summary["references"] = len(paths)

    if not paths:
        logging.info("No .png URLs to process.")
        return summary

    logging.info(f"Generating variants for: {', '.join(f'{n} {rgb_to_hex(c)}' for n, c in colors.items())}")

    if session is None:
        session = new_session()

    with logging_redirect_tqdm():
        for ref in tqdm(paths, desc="Recoloring images", ncols=80):
            process_reference(ref, colors, base_url, output_root, session, timeout, summary, dry_run)

    return summary


# ------------- CLI -------------

def build_parser() -> argparse.ArgumentParser:
    ap = argparse.ArgumentParser(description="Generate recolored variants of the .png mask icons referenced by a stylesheet.")
    ap.add_argument("css_source", help="Local CSS file path or http(s) URL")
    ap.add_argument("--base_url", default=None, help="Base URL for resolving relative image paths")
    ap.add_argument("--output", default=None, help=f"Output root directory (default: {DEFAULT_OUTPUT})")
    ap.add_argument("--color", action="append", default=None, help="Color as name:RRGGBB or name:#RRGGBB; repeatable")
    ap.add_argument("--filter", action="append", default=None, help="Glob pattern to exclude matching paths; repeatable")
    ap.add_argument("--timeout", type=float, default=None, help=f"HTTP timeout in seconds (default: {DEFAULT_TIMEOUT})")
    ap.add_argument("--config", default=None, help="Path to configuration JSON")
    ap.add_argument("--dry_run", action="store_true", help="List planned outputs without fetching images")
    ap.add_argument("--verbose", action="store_true", help="Verbose logging")
    return ap


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    setup_logging(args.verbose)

    # Validate everything before touching the network
    try:
        cfg = load_config(args.config) if args.config else {}
        opts = merge_options(args, cfg)
        colors = parse_colors(opts["colors"])
    except ConfigError as e:
        logging.error(f"Config error: {e}")
        return 2

    session = new_session()
    try:
        css_text = read_css(args.css_source, session, opts["timeout"])
    except StylesheetError as e:
        logging.error(str(e))
        return 1

    summary = generate_variants(
        css_text,
        colors,
        base_url=opts["base_url"],
        output_root=opts["output"],
        filters=opts["filters"],
        session=session,
        timeout=opts["timeout"],
        dry_run=args.dry_run,
    )
    print(json.dumps(summary, indent=2))

    failed = summary["fetch_failed"] + summary["save_failed"]
    if failed > 0:
        logging.error(RED + f"FAILED (images + variants): {failed}" + RESET)
    return 0


if __name__ == "__main__":
    sys.exit(main())

# Run example: python css_png_variants.py styles.css --base_url https://example.com/css/ --color green:008000 --color red:#ff0000 --filter 'vendor/*'
