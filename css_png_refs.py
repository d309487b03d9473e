import argparse
import fnmatch
import re
import sys
from typing import Iterable, List

COMMENT_RE = re.compile(r'/\*.*?\*/', re.DOTALL)
WHITESPACE_RE = re.compile(r'\s+')
# url( + optional quote + path ending in .png + optional ?query/#fragment + optional quote + )
PNG_URL_RE = re.compile(r'url\(\s*[\'"]?([^\'"()?#]*?\.png)(?:[?#][^\'"()]*)?[\'"]?\s*\)', re.IGNORECASE)


def strip_comments(css_text: str) -> str:
    return COMMENT_RE.sub('', css_text)


def clean_reference(ref: str) -> str:
    ref = ref.strip().strip('\'"')
    for sep in ('?', '#'):
        if sep in ref:
            ref = ref.split(sep, 1)[0]
    return ref.strip()


def extract_png_urls(css_text: str) -> List[str]:
    """Return the distinct .png references of a stylesheet, in first-seen order."""
    text = WHITESPACE_RE.sub(' ', strip_comments(css_text))

    urls = []
    seen = set()
    for match in PNG_URL_RE.finditer(text):
        ref = clean_reference(match.group(1))
        if not ref or ref in seen:
            continue
        seen.add(ref)
        urls.append(ref)
    return urls


def is_excluded(path: str, patterns: Iterable[str]) -> bool:
    return any(fnmatch.fnmatchcase(path, pattern) for pattern in patterns)


def filter_paths(paths: Iterable[str], patterns: Iterable[str]) -> List[str]:
    patterns = list(patterns or [])
    if not patterns:
        return list(paths)
    return [p for p in paths if not is_excluded(p, patterns)]


def main(argv=None) -> int:
    parser = argparse.ArgumentParser(description='List the .png images referenced by a stylesheet.')
    parser.add_argument('--css', required=True, help='Path to the stylesheet')
    parser.add_argument('--filter', action='append', default=[], help='Glob pattern to exclude; repeatable')
    args = parser.parse_args(argv)

    try:
        with open(args.css, 'r', encoding='utf-8') as f:
            css_text = f.read()
    except OSError as e:
        print(f"Error reading {args.css}: {e}", file=sys.stderr)
        return 1

    for path in filter_paths(extract_png_urls(css_text), args.filter):
        print(path)
    return 0


if __name__ == '__main__':
    sys.exit(main())

# Run example: python css_png_refs.py --css styles.css --filter 'icons/*'
