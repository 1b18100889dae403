#!/usr/bin/env python3
"""Profile htmlfilter to find performance bottlenecks."""

import cProfile
import io
import pstats

from htmlfilter import DEFAULT_WHITELIST, HtmlFilter

# Sample HTML
html = """
<div class="container">
    <p onclick="track()">Paragraph <b>1</b> with <a href="/x" target="_blank">a link</a></p>
    <p>Paragraph 2<img src="a.png" alt="A" onerror="bad()"></p>
    <script>alert(1)</script>
    <!-- a comment -->
    <table>
        <tr><td>Cell 1</td><td>Cell 2</td></tr>
        <tr><td>Cell 3</td><td>Cell 4</td></tr>
    </table>
</div>
""" * 100  # Repeat for more meaningful results

engine = HtmlFilter(DEFAULT_WHITELIST)

# Profile
pr = cProfile.Profile()
pr.enable()

for _ in range(10):
    result = engine.filter(html)
    _ = result.html

pr.disable()

# Print stats
s = io.StringIO()
ps = pstats.Stats(pr, stream=s).sort_stats("cumulative")
ps.print_stats(50)  # Top 50 functions
print(s.getvalue())
