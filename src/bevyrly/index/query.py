"""Query language: tokens, sigils and display mode.

A query is a space separated list of tokens. Each token may start with a
sigil selecting the category it is matched against; a token without one is
matched against every category. A leading ``:`` on the whole query asks for
long (full declaration) output.

Splitting is literal: ``"a  b"`` yields an empty middle token, which matches
every identifier of its category.
"""

from __future__ import annotations

from dataclasses import dataclass

from bevyrly.index.models import Category, QueryMode

LONG_PREFIX = ":"

SIGILS: dict[str, Category] = {
    "&": Category.QUERY,
    "*": Category.MUT_QUERY,
    ">": Category.EVENT_WRITE,
    "<": Category.EVENT_READ,
    "#": Category.RES,
    "$": Category.MUT_RES,
    "+": Category.WITH,
    "-": Category.WITHOUT,
}

QUERY_HELP = """\
Query systems by the types their parameters reference.

  &X   reads component X         Query<&X>
  *X   writes component X        Query<&mut X>
  #X   reads resource X          Res<X>
  $X   writes resource X         ResMut<X>, NonSendMut<X>
  <X   reads events X            EventReader<X>
  >X   writes events X           EventWriter<X>
  +X   filters with X            With<X>
  -X   filters without X         Without<X>
  X    references X anywhere

Names match by case-sensitive substring. Space separated tokens must all
match. Start the query with ':' to print full declarations instead of
one line per system.

Example:  :&Transform *Velocity +Player
"""


@dataclass(frozen=True, slots=True)
class QueryToken:
    """One query token resolved to a category and a substring pattern."""

    category: Category
    pattern: str


@dataclass(frozen=True, slots=True)
class ParsedQuery:
    tokens: tuple[QueryToken, ...]
    mode: QueryMode


def parse_token(token: str) -> QueryToken:
    """Resolve a token's sigil. Anything else is a pattern over ``ANY``."""
    category = SIGILS.get(token[:1])
    if category is None:
        return QueryToken(Category.ANY, token)
    return QueryToken(category, token[1:])


def parse_query(text: str) -> ParsedQuery:
    """Split query text into tokens and pick the display mode."""
    mode = QueryMode.SHORT
    if text.startswith(LONG_PREFIX):
        mode = QueryMode.LONG
        text = text[len(LONG_PREFIX) :].strip()

    return ParsedQuery(tuple(parse_token(part) for part in text.split(" ")), mode)
