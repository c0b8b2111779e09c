# Author : Eshan Roy <eshanized@proton.me>
# SPDX-License-Identifier: MIT

"""
Input formatting for the classifier.

fastText reads one example per line, so a newline in the middle of a text
ends the example early and the rest is silently ignored. Every text goes
through format_input before it reaches the classifier, in the predict API
and in the benchmark alike.
"""

import re

# \s covers \n, \r, tabs and the unicode line/paragraph separators.
_WHITESPACE_RUNS = re.compile(r"\s+")


def format_input(text: str) -> str:
    """Collapse every whitespace run (line breaks included) to one space and strip the ends."""
    return _WHITESPACE_RUNS.sub(" ", text).strip()
