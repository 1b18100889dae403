#!/usr/bin/env python3
"""Debug script to inspect how an input is tokenized and filtered."""

import argparse
import sys

from htmlfilter import HtmlFilter, OpenTag, parse_attributes, tokenize


def debug_input(html, whitelist=None):
    print(f"Input: {html!r}")
    print("\nTokens:")
    for token in tokenize(html):
        print(f"  {token!r}")
        if isinstance(token, OpenTag) and token.raw_attributes:
            print(f"      attributes: {parse_attributes(token.raw_attributes)}")

    if whitelist is not None:
        print("\nFilter trace:")
        result = HtmlFilter(whitelist, debug=True, collect_errors=True).filter(html)
        print(f"\nOutput ({result.passes} pass(es)): {result.html!r}")
        for error in result.errors:
            print(f"  {error}")


def _parse_whitelist(entries):
    # "img:src,alt" -> {"img": ["src", "alt"]}, "p" -> {"p": None}
    whitelist = {}
    for entry in entries:
        tag, _, attrs = entry.partition(":")
        whitelist[tag] = [a for a in attrs.split(",") if a] if attrs else None
    return whitelist


def main():
    parser = argparse.ArgumentParser(description="Show the token stream of an HTML snippet")
    parser.add_argument("html", nargs="?", help="HTML to inspect (default: read stdin)")
    parser.add_argument(
        "--allow", "-a",
        nargs="*",
        metavar="TAG[:ATTR,...]",
        help="Also filter with this whitelist and print the trace",
    )
    args = parser.parse_args()

    html = args.html if args.html is not None else sys.stdin.read()
    whitelist = _parse_whitelist(args.allow) if args.allow is not None else None
    debug_input(html, whitelist)


if __name__ == "__main__":
    main()
