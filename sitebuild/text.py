"""Literal text operations used by the pipeline.

Placeholder substitution and asset path rewriting are plain substring
operations, no HTML or CSS parsing.
"""

import re
from collections import Counter


# Any single-line `<!-- X -->` comment; find_placeholders keeps only the
# upper-case ones, so `<!-- Main content -->` style comments are ignored.
PLACEHOLDER_RE = re.compile(r'<!-- (\S(?:(?:(?!-->)[^\n])*?\S)?) -->')


def _is_marker_name(name):
    return name == name.upper() and any(c.isalnum() for c in name)


def placeholder_for(name):
    """Return the template marker for a component directory name."""
    return f'<!-- {name.upper()} -->'


def replace_placeholder(template, name, content):
    """Replace the first `<!-- NAME -->` marker in template with content.

    Parameters
    ----------
    template : str
        Page text.
    name : str
        Component directory name; its upper-case form is the marker name.
    content : str
        Inserted verbatim.

    Returns
    -------
    str : template with the marker replaced, or unchanged if absent.
    """
    return template.replace(placeholder_for(name), content, 1)


def find_placeholders(template):
    """Count the placeholder markers in a template.

    Returns
    -------
    Counter of {NAME: occurrences}, in order of first appearance.
    """
    return Counter(name for name in PLACEHOLDER_RE.findall(template)
                   if _is_marker_name(name))


def rewrite_asset_paths(text, rewrites):
    """Apply literal prefix rewrites to text.

    Each `old: new` pair replaces every occurrence of `old`, case-sensitive,
    in mapping order.
    """
    for old, new in rewrites.items():
        text = text.replace(old, new)
    return text
