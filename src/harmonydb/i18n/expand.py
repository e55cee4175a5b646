"""Placeholder expansion for translated UI strings.

Translated strings carry two kinds of placeholders:

    {name}          replaced by args["name"]
    {link|text}     replaced by an <a> built from args["link"]; the anchor text
                    is args["text"] when present, else the literal "text"

Only keys present in ``args`` are touched, so a string can be expanded in
stages. Anchor attributes and text are HTML-escaped; the rest of the string
is left as translated.
"""

import re
from collections.abc import Mapping
from typing import Any

from markupsafe import escape


def _text_anchor(attributes: Mapping[str, Any], text: Any) -> str:
    rendered = " ".join(
        f'{key}="{escape(attributes[key])}"' for key in sorted(attributes)
    )
    return f"<a {rendered}>{escape(text)}</a>"


def _anchor(args: Mapping[str, Any], href_key: str, text_key: str) -> str:
    href = args.get(href_key)
    if href is None:
        return f"{{{href_key}|{text_key}}}"

    attributes = href if isinstance(href, Mapping) else {"href": href}
    return _text_anchor(attributes, args.get(text_key, text_key))


def expand(template: str | None, args: Mapping[str, Any] | None = None) -> str:
    """Expand ``{name}`` and ``{link|text}`` placeholders.

    Args:
        template: Translated string
        args: Placeholder values. A link value is either an href string or a
            mapping of anchor attributes.

    Returns:
        Expanded string; ``""`` for an empty template.

    Examples:
        >>> expand("Merged into {release}", {"release": "Abbey Road"})
        'Merged into Abbey Road'
        >>> expand("See {edit|edit #1}", {"edit": "/edit/1"})
        'See <a href="/edit/1">edit #1</a>'
    """
    if not template:
        return ""
    if not args:
        return template

    keys = "|".join(re.escape(key) for key in args)
    links_regex = re.compile(rf"\{{({keys})\|(.*?)\}}")
    names_regex = re.compile(rf"\{{({keys})\}}")

    expanded = links_regex.sub(lambda m: _anchor(args, m.group(1), m.group(2)), template)
    return names_regex.sub(lambda m: str(args[m.group(1)]), expanded)
