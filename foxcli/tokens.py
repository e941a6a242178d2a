r"""
foxcli tokenizer: turn an argument vector or a raw line into classified tokens.

Classification (first rule that applies)
- a token that starts with a double quote (raw lines only) → WORD, never an option.
- "--" → TERMINATOR: everything after it is positional.
- "--name", "--name=value", "--name:value" → LONG (the first "=" or ":"
  before any whitespace splits).
- "-" followed by a non-digit ("-v", "-abc", "-ofile") → SHORT cluster.
- anything else, including "-" and negative numbers ("-5") → WORD.

Raw lines
- whitespace separates tokens outside double quotes and collapses;
- a quoted span belongs to one token and adjacent text joins it
  (--msg="a b" → LONG msg, value "a b");
- "" is an empty token; an unterminated quote raises UnterminatedQuoteError.

Pre-split vectors (sys.argv style) are taken verbatim: quote characters are
literal and every element is exactly one token.
"""
import enum
import re
from collections.abc import Iterable
from typing import NamedTuple

from .faults import UnterminatedQuoteError
from .utils import ordinal

QUOTE = '"'


class TokenKind(enum.Enum):
    WORD = "word"
    SHORT = "short"
    LONG = "long"
    TERMINATOR = "terminator"


class Token(NamedTuple):
    """
    One classified token.

    - kind: TokenKind.
    - text: the raw token text (quotes removed for raw lines).
    - name: option name (LONG) or option cluster (SHORT); None otherwise.
    - value: inline value of a LONG token ("" when empty), None when absent.
    - quoted: the token started with a quoted span.
    - index: 1-based position in the stream.
    """
    kind: TokenKind
    text: str
    name: str | None = None
    value: str | None = None
    quoted: bool = False
    index: int = 1


def split(line, /):
    """
    Split a raw line into (text, quoted) pairs.

    Raises
    - UnterminatedQuoteError: when a double quote is never closed.
    """
    if not isinstance(line, str):
        raise TypeError("split() argument must be a string")

    fragments = []
    quoted = inside = started = False
    count = 0
    for character in line:
        if inside:
            if character == QUOTE:
                inside = False
            else:
                fragments.append(character)
        elif character == QUOTE:
            quoted = quoted or not started
            inside = started = True
        elif character.isspace():
            if started:
                count += 1
                yield "".join(fragments), quoted
                fragments.clear()
                quoted = started = False
        else:
            fragments.append(character)
            started = True

    if inside:
        raise UnterminatedQuoteError(
            "unterminated quote in the %s token" % ordinal(count + 1),
            input="".join(fragments),
            index=count + 1,
            hint="close the quoted text with a matching '\"'"
        )
    if started:
        yield "".join(fragments), quoted


def classify(text, /, quoted=False, index=1):
    """
    Classify one raw token (see the module rules) and return its Token.
    """
    if quoted:
        return Token(TokenKind.WORD, text, quoted=True, index=index)
    if text == "--":
        return Token(TokenKind.TERMINATOR, text, index=index)
    if text.startswith("--"):
        if match := re.fullmatch(r"(?P<name>[^=:\s]*)[=:](?P<value>.*)", text[2:], re.DOTALL):
            return Token(TokenKind.LONG, text, match["name"], match["value"], index=index)
        return Token(TokenKind.LONG, text, text[2:], index=index)
    if text.startswith("-") and len(text) > 1 and not text[1].isdigit():
        return Token(TokenKind.SHORT, text, text[1:], index=index)
    return Token(TokenKind.WORD, text, index=index)


def _tokens(pairs):
    for index, (text, quoted) in enumerate(pairs, 1):
        yield classify(text, quoted, index)


def _verbatim(source):
    for item in source:
        if not isinstance(item, str):
            raise TypeError("tokenize() argument must be a string or an iterable of strings")
        yield item, False


def tokenize(source, /):
    """
    Return a lazy, non-restartable iterator of Tokens.

    Parameters
    - source: str (one raw line) or Iterable[str] (a pre-split vector).

    Raises
    - TypeError: when source is neither (or the vector holds a non-string).
    - UnterminatedQuoteError: while iterating a raw line with an open quote.
    """
    if isinstance(source, str):
        return _tokens(split(source))
    if isinstance(source, Iterable):
        return _tokens(_verbatim(source))
    raise TypeError("tokenize() argument must be a string or an iterable of strings")


__all__ = (
    "TokenKind",
    "Token",
    "split",
    "classify",
    "tokenize",
)
