#!/usr/bin/env python3
# Ticket: 0001_field_spec_scaffolding
# Design: DESIGN.md
"""
Naming Inflection

Deterministic, pure helpers for the naming conventions that link table names,
record types and accessors:

    pluralize("category")   → "categories"
    singularize("people")   → "person"
    studly("blog_posts")    → "BlogPosts"
    camel("BlogPost")       → "blogPost"
    snake("BlogPost")       → "blog_post"

The rules cover regular English suffixes, a small irregular table and a set of
uncountable words. They approximate a natural-language pluralizer; words
outside the tables may inflect imperfectly (e.g. "cactus" stays "cactus").
Case of the input's first letter is preserved for irregulars.
"""

import re


# ---------------------------------------------------------------------------
# Word tables
# ---------------------------------------------------------------------------

IRREGULAR = {
    "child": "children",
    "foot": "feet",
    "goose": "geese",
    "man": "men",
    "mouse": "mice",
    "ox": "oxen",
    "person": "people",
    "tooth": "teeth",
    "woman": "women",
    "criterion": "criteria",
    "datum": "data",
    "medium": "media",
    "movie": "movies",
    "cookie": "cookies",
}

IRREGULAR_SINGULAR = {plural: singular for singular, plural in IRREGULAR.items()}

UNCOUNTABLE = frozenset([
    "audio", "equipment", "feedback", "fish", "information", "metadata",
    "money", "news", "rice", "series", "sheep", "species", "traffic",
])

_PLURAL_RULES = [
    (re.compile(r"(quiz)$", re.I), r"\1zes"),
    (re.compile(r"(matr|vert|ind)(ix|ex)$", re.I), r"\1ices"),
    (re.compile(r"(x|ch|ss|sh|zz)$", re.I), r"\1es"),
    (re.compile(r"([^aeiouy]|qu)y$", re.I), r"\1ies"),
    (re.compile(r"(?:([^f])fe|([lr])f)$", re.I), r"\1\2ves"),
    (re.compile(r"(bus|alias|status|campus)$", re.I), r"\1es"),
    (re.compile(r"(octop|vir)us$", re.I), r"\1i"),
    (re.compile(r"(analy|ba|diagno|parenthe|progno|synop|the)sis$", re.I), r"\1ses"),
    (re.compile(r"s$", re.I), "s"),
    (re.compile(r"$"), "s"),
]

_SINGULAR_RULES = [
    (re.compile(r"(quiz)zes$", re.I), r"\1"),
    (re.compile(r"(matr)ices$", re.I), r"\1ix"),
    (re.compile(r"(vert|ind)ices$", re.I), r"\1ex"),
    (re.compile(r"(bus|alias|status|campus)es$", re.I), r"\1"),
    (re.compile(r"(octop|vir)i$", re.I), r"\1us"),
    (re.compile(r"(analy|ba|diagno|parenthe|progno|synop|the)ses$", re.I), r"\1sis"),
    (re.compile(r"(x|ch|ss|sh|zz)es$", re.I), r"\1"),
    (re.compile(r"([^aeiouy]|qu)ies$", re.I), r"\1y"),
    (re.compile(r"([lr])ves$", re.I), r"\1f"),
    (re.compile(r"([^f])ves$", re.I), r"\1fe"),
    (re.compile(r"(ss)$", re.I), r"\1"),
    (re.compile(r"(us)$", re.I), r"\1"),
    (re.compile(r"s$", re.I), ""),
]


def _match_case(source: str, target: str) -> str:
    if source[:1].isupper():
        return target[:1].upper() + target[1:]
    return target


def _split_last_word(word: str) -> tuple[str, str]:
    """Split "blog_post" → ("blog_", "post") and "BlogPost" → ("Blog", "Post")."""
    match = re.search(r"([A-Z]?[a-z0-9]+|[A-Z]+)$", word)
    if not match:
        return "", word
    return word[:match.start()], match.group(1)


# ---------------------------------------------------------------------------
# Number
# ---------------------------------------------------------------------------


def pluralize(word: str) -> str:
    """Return the plural form of the last word in an identifier."""
    if not word:
        return word
    head, last = _split_last_word(word)
    lower = last.lower()
    if lower in UNCOUNTABLE:
        return word
    if lower in IRREGULAR:
        return head + _match_case(last, IRREGULAR[lower])
    if lower in IRREGULAR_SINGULAR:
        return word
    for pattern, replacement in _PLURAL_RULES:
        if pattern.search(last):
            return head + pattern.sub(replacement, last, count=1)
    return word


def singularize(word: str) -> str:
    """Return the singular form of the last word in an identifier."""
    if not word:
        return word
    head, last = _split_last_word(word)
    lower = last.lower()
    if lower in UNCOUNTABLE:
        return word
    if lower in IRREGULAR_SINGULAR:
        return head + _match_case(last, IRREGULAR_SINGULAR[lower])
    if lower in IRREGULAR:
        return word
    for pattern, replacement in _SINGULAR_RULES:
        if pattern.search(last):
            return head + pattern.sub(replacement, last, count=1)
    return word


# ---------------------------------------------------------------------------
# Case conversion
# ---------------------------------------------------------------------------


def _words(name: str) -> list[str]:
    spaced = re.sub(r"([a-z0-9])([A-Z])", r"\1 \2", name)
    spaced = re.sub(r"([A-Z]+)([A-Z][a-z])", r"\1 \2", spaced)
    return [w for w in re.split(r"[\s_\-]+", spaced) if w]


def studly(name: str) -> str:
    """blog_posts → BlogPosts"""
    return "".join(w[:1].upper() + w[1:] for w in _words(name))


def camel(name: str) -> str:
    """blog_posts → blogPosts, BlogPost → blogPost"""
    value = studly(name)
    return value[:1].lower() + value[1:]


def snake(name: str) -> str:
    """BlogPost → blog_post"""
    return "_".join(w.lower() for w in _words(name))


def strip_suffix(name: str, suffix: str) -> str:
    """Strip one trailing suffix ("author_id", "_id" → "author")."""
    if suffix and name.endswith(suffix) and len(name) > len(suffix):
        return name[: -len(suffix)]
    return name
