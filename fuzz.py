#!/usr/bin/env python3
"""
Random fuzzer for htmlfilter.
Generates invalid/malformed HTML and checks that filtering never crashes,
never hangs, is idempotent and only lets whitelisted markup through.
"""

import argparse
import random
import string
import sys
import time
import traceback

from htmlfilter import DEFAULT_WHITELIST, HtmlFilter, OpenTag, Tokenizer, parse_attributes

# Fuzzing strategies
TAGS = [
    "div", "span", "p", "a", "img", "table", "tr", "td", "ul", "ol", "li",
    "form", "input", "button", "select", "option", "textarea", "script", "style",
    "head", "body", "html", "title", "meta", "link", "br", "hr", "h1", "h2",
    "iframe", "object", "embed", "video", "audio", "source", "svg", "math",
    "template", "noscript", "pre", "code", "blockquote", "b", "i", "em", "strong",
]

SELF_CLOSING_TAGS = ["meta", "base", "link", "hr", "br", "wbr", "col", "img", "area", "input", "embed", "param", "source"]

ATTRIBUTES = [
    "id", "class", "style", "href", "src", "alt", "title", "name", "value", "type",
    "onclick", "onload", "onerror", "data-x", "aria-label", "role", "tabindex",
    "disabled", "readonly", "checked", "selected", "hidden", "xml:lang",
]

SPECIAL_CHARS = [
    "\x00", "\x0b", "\x0c", "\x7f",  # Control chars
    "\ufffd",  # Replacement character
    "\u00a0",  # Non-breaking space
    "\u2028", "\u2029",  # Line/paragraph separators
    "\u200b",  # Zero-width space
    "\ufeff",  # BOM
]

HANG_SECONDS = 5.0

WHITELISTS = {
    "default": DEFAULT_WHITELIST,
    "disabled": None,
    "narrow": {"p": None, "b": [], "a": ["href"], "img": ["src", "alt"], "input": ["checked", "type"]},
}


def random_string(min_len=0, max_len=20):
    """Generate random ASCII string."""
    length = random.randint(min_len, max_len)
    return "".join(random.choices(string.ascii_letters + string.digits, k=length))


def random_whitespace():
    """Generate random whitespace (including weird ones)."""
    ws = [" ", "\t", "\n", "\r", "\f", "\v", "\x00", ""]
    return "".join(random.choices(ws, k=random.randint(0, 5)))


def fuzz_tag_name():
    """Generate malformed tag names."""
    strategies = [
        lambda: random.choice(TAGS),  # Valid tag
        lambda: random.choice(TAGS).upper(),  # Uppercase
        lambda: random.choice(TAGS) + random_string(1, 5),  # Tag with suffix
        lambda: random_string(1, 10),  # Random string
        lambda: "",  # Empty
        lambda: random.choice(SPECIAL_CHARS) + random.choice(TAGS),  # Special prefix
        lambda: random.choice(TAGS) + random.choice(SPECIAL_CHARS),  # Special suffix
        lambda: "0" + random.choice(TAGS),  # Numeric prefix
        lambda: "-" + random.choice(TAGS),  # Dash prefix
        lambda: random.choice(TAGS) + "/" + random.choice(TAGS),  # Slash in name
        lambda: " " + random.choice(TAGS),  # Space prefix
    ]
    return random.choice(strategies)()


def fuzz_attribute():
    """Generate malformed attributes."""
    name_strategies = [
        lambda: random.choice(ATTRIBUTES),
        lambda: random.choice(ATTRIBUTES).upper(),
        lambda: random_string(1, 15),
        lambda: "",
        lambda: "on" + random_string(2, 8),  # Event handler
        lambda: random.choice(SPECIAL_CHARS),
        lambda: "=",
        lambda: '"',
        lambda: "'",
        lambda: "<",
        lambda: ">",
    ]

    value_strategies = [
        lambda: random_string(0, 50),
        lambda: '"' + random_string() + '"',  # Extra quotes
        lambda: "'" + random_string() + "'",
        lambda: "<script>alert(1)</script>",
        lambda: "javascript:alert(1)",
        lambda: "--><script>x</script>",
        lambda: random.choice(SPECIAL_CHARS) * random.randint(1, 10),
        lambda: "\n" * random.randint(1, 5) + random_string(),
        lambda: "",
        lambda: "x" * random.randint(100, 1000),  # Long value
    ]

    quote_styles = [
        ('="', '"'),
        ("='", "'"),
        ("=", ""),  # Unquoted
        ("= ", ""),  # Space after equals
        ("", ""),  # No value
        ('="', ""),  # Unclosed quote
        ("='", ""),  # Unclosed single quote
        ("==", ""),  # Double equals
    ]

    name = random.choice(name_strategies)()
    value = random.choice(value_strategies)()
    quote_start, quote_end = random.choice(quote_styles)

    return f"{name}{quote_start}{value}{quote_end}"


def fuzz_open_tag():
    """Generate malformed opening tags."""
    tag = fuzz_tag_name()
    ws1 = random_whitespace()

    attrs = [fuzz_attribute() for _ in range(random.randint(0, 5))]
    attr_str = " ".join(attrs)

    ws2 = random_whitespace()

    closings = [">", "/>", " >", "/ >", "", ">>", ">>>", "/>>", ">/"]
    closing = random.choice(closings)

    # Sometimes corrupt the opening
    openings = ["<", "< ", "<\x00", "<<", "<!!", "<!", "<?", "</"]
    opening = random.choice(openings) if random.random() < 0.2 else "<"

    return f"{opening}{tag}{ws1}{attr_str}{ws2}{closing}"


def fuzz_close_tag():
    """Generate malformed closing tags."""
    tag = fuzz_tag_name()
    ws = random_whitespace()

    variants = [
        f"</{tag}>",
        f"</ {tag}>",
        f"</{tag} >",
        f"</{tag}{ws}>",
        f"</{tag}",  # Unclosed
        f"</{tag}/>",  # Self-closing end tag
        f"<//{tag}>",  # Double slash
        f"</{tag} garbage>",  # Extra content
        f"</ {tag} {fuzz_attribute()}>",  # Attribute in end tag
        "</>",
    ]
    return random.choice(variants)


def fuzz_comment():
    """Generate malformed comments."""
    content = random_string(0, 50)

    variants = [
        f"<!--{content}-->",
        f"<!-{content}-->",
        f"<!--{content}->",
        f"<!--{content}",
        f"<!---{content}--->",
        "<!---->",
        "<!-->",
        f"<!--{content}---->{content}-->",
        f"<!--<script>{content}</script>-->",
        f"<!--<!--{content}-->-->",
    ]
    return random.choice(variants)


def fuzz_text():
    """Generate text with stray markup characters."""
    variants = [
        lambda: random_string(1, 30),
        lambda: random_string() + " < " + random_string(),
        lambda: random_string() + " > " + random_string(),
        lambda: "&amp;&lt;&gt;" + random_string(),
        lambda: "".join(random.choices(SPECIAL_CHARS, k=random.randint(1, 5))),
        lambda: "<" * random.randint(1, 5),
    ]
    return random.choice(variants)()


def fuzz_script():
    """Generate script blocks, including split and nested ones."""
    body = random.choice(["alert(1)", "if (a < b) {}", "'</div>'", "<!--", random_string()])
    variants = [
        f"<script>{body}</script>",
        f"<SCRIPT>{body}</SCRIPT>",
        f"<script>{body}",
        f"<scr<script></script>ipt>{body}</scr<b></b>ipt>",
        f"<<script></script>script>{body}<</script>/script>",
        f"<style>{body}</style>",
    ]
    return random.choice(variants)


def fuzz_nested_structure(depth=0, max_depth=10):
    """Generate nested elements, some of them mismatched."""
    if depth >= max_depth or random.random() < 0.3:
        return fuzz_text()
    tag = random.choice(TAGS)
    inner = "".join(fuzz_nested_structure(depth + 1, max_depth) for _ in range(random.randint(0, 3)))
    close = random.choice([tag, tag, random.choice(TAGS), ""])
    closing = f"</{close}>" if close else ""
    return f"<{tag}>{inner}{closing}"


def fuzz_self_closing():
    """Generate void tags in every shape."""
    tag = random.choice(SELF_CLOSING_TAGS + ["textarea", "object"])
    attrs = " ".join(fuzz_attribute() for _ in range(random.randint(0, 3)))
    return random.choice([f"<{tag} {attrs}>", f"<{tag} {attrs}/>", f"<{tag}>x</{tag}>"])


def fuzz_many_attributes():
    """Generate a tag with many (and duplicate) attributes."""
    tag = random.choice(TAGS)
    attrs = " ".join(fuzz_attribute() for _ in range(random.randint(10, 50)))
    return f"<{tag} {attrs}>"


def fuzz_deeply_nested():
    """Generate deeply nested disallowed elements."""
    depth = random.randint(50, 300)
    tag = random.choice(TAGS)
    return f"<{tag}>" * depth + random_string() + f"</{tag}>" * random.randint(0, depth)


def fuzz_comment_runs():
    """Generate long runs of nested or unterminated comments."""
    count = random.randint(100, 2000)
    return random.choice([
        "<!--" * count + random_string() + "-->" * random.randint(0, count),
        "<!-- x" * count + ">",
        "<<x></x>" * count + "b>",
    ])


def generate_fuzzed_html():
    """Generate a complete fuzzed HTML document."""
    parts = []

    num_elements = random.randint(1, 20)
    for _ in range(num_elements):
        element_type = random.choices(
            [
                fuzz_open_tag,
                fuzz_close_tag,
                fuzz_comment,
                fuzz_text,
                fuzz_script,
                fuzz_nested_structure,
                fuzz_self_closing,
                fuzz_many_attributes,
                fuzz_deeply_nested,
                fuzz_comment_runs,
            ],
            weights=[20, 10, 8, 15, 6, 8, 6, 2, 1, 1],
        )[0]
        parts.append(element_type())

    return "".join(parts)


def check_invariants(engine, output):
    """Return a description of the first broken invariant, or None."""
    again = engine.filter(output).html
    if again != output:
        return f"not idempotent: {output[:200]!r} -> {again[:200]!r}"

    whitelist = engine.whitelist
    if not whitelist.enabled:
        return None
    for token in Tokenizer(output):
        if not isinstance(token, OpenTag):
            continue
        if not whitelist.is_tag_allowed(token.name):
            return f"disallowed tag <{token.name}> in output"
        allowed = whitelist.allowed_attributes_for(token.name) or frozenset()
        extra = set(parse_attributes(token.raw_attributes)) - allowed
        if extra:
            return f"disallowed attributes {sorted(extra)} on <{token.name}>"
    return None


def run_fuzzer(whitelist_name, num_tests, seed=None, verbose=False):
    """Filter ``num_tests`` generated documents and report every failure."""
    if seed is not None:
        random.seed(seed)
    engine = HtmlFilter(WHITELISTS[whitelist_name])
    failures = []

    print(f"Fuzzing htmlfilter ({whitelist_name} whitelist) with {num_tests} test cases...")
    start_time = time.time()
    for i in range(num_tests):
        html = generate_fuzzed_html()
        try:
            start = time.perf_counter()
            output = engine.filter(html).html
            elapsed = time.perf_counter() - start
            if elapsed > HANG_SECONDS:
                failures.append(("hang", i, html, f"{elapsed:.2f}s"))
                continue
            problem = check_invariants(engine, output)
            if problem:
                failures.append(("violation", i, html, problem))
        except Exception:
            failures.append(("crash", i, html, traceback.format_exc()))
        if verbose and failures and failures[-1][1] == i:
            print(f"  {failures[-1][0].upper()}: test {i}")

    elapsed_total = time.time() - start_time
    print(f"{num_tests - len(failures)}/{num_tests} passed in {elapsed_total:.2f}s")
    for kind, i, html, detail in failures[:10]:
        print(f"\n{kind.upper()} test #{i}: {html[:200]!r}")
        print(f"  {detail}")
    if len(failures) > 10:
        print(f"\n... and {len(failures) - 10} more failures")
    return not failures


def main():
    parser = argparse.ArgumentParser(description="Fuzz htmlfilter with invalid input")
    parser.add_argument("--whitelist", "-w", choices=sorted(WHITELISTS), default="default")
    parser.add_argument("--num-tests", "-n", type=int, default=1000)
    parser.add_argument("--seed", "-s", type=int, default=None, help="Random seed for reproducibility")
    parser.add_argument("--verbose", "-v", action="store_true")
    args = parser.parse_args()

    success = run_fuzzer(args.whitelist, args.num_tests, seed=args.seed, verbose=args.verbose)
    sys.exit(0 if success else 1)


if __name__ == "__main__":
    main()
