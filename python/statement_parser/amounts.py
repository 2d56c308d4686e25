"""
Amount and Date Lexical Helpers

Locale-aware parsing of the numeric and date tokens found in Russian bank
statements: grouping spaces, decimal commas, explicit signs and currency marks.
"""

import re
from datetime import date
from decimal import Decimal, InvalidOperation

MAX_DESCRIPTION_LENGTH = 500

# \s covers the non-breaking (U+00A0) and narrow non-breaking (U+202F) spaces used for grouping
_SPACES = re.compile(r"\s+")
_CURRENCY = re.compile(r"(?:₽|\$|€|руб\.?|rub|usd|eur)", re.IGNORECASE)

# Amount token with optional sign and grouping spaces: "8 000,00", "+1 250.50", "-400,00"
AMOUNT_TOKEN = r"(?:[+\-−]?\d{1,3}(?:\s\d{3})*[.,]\d{2}|[+\-−]?\d+[.,]\d{2})"

_DATE_PATTERNS = [
    (re.compile(r'(\d{2})\.(\d{2})\.(\d{4})'), "dmy"),
    (re.compile(r'(\d{4})-(\d{2})-(\d{2})'), "ymd"),
    (re.compile(r'(\d{2})/(\d{2})/(\d{4})'), "dmy"),
    (re.compile(r'(\d{2})\.(\d{2})\.(\d{2})(?!\d)'), "dmy_short"),
]


def parse_signed_amount(amount_str: str | None) -> Decimal | None:
    """Parse an amount token into a signed Decimal.

    Handles grouping spaces, decimal comma or point, leading "+"/"-",
    parenthesised negatives and currency marks.

    Args:
        amount_str: Raw amount text

    Returns:
        Signed Decimal, or None if the text is not a number
    """
    if amount_str is None:
        return None

    cleaned = _CURRENCY.sub('', amount_str)
    cleaned = _SPACES.sub('', cleaned)
    if not cleaned:
        return None

    is_negative = False
    if cleaned.startswith('(') and cleaned.endswith(')'):
        cleaned = cleaned[1:-1]
        is_negative = True

    if cleaned[:1] in ('-', '−'):
        cleaned = cleaned[1:]
        is_negative = True
    elif cleaned[:1] == '+':
        cleaned = cleaned[1:]

    # With both separators present the last one is the decimal point
    if ',' in cleaned and '.' in cleaned:
        if cleaned.rfind(',') > cleaned.rfind('.'):
            cleaned = cleaned.replace('.', '').replace(',', '.')
        else:
            cleaned = cleaned.replace(',', '')
    else:
        cleaned = cleaned.replace(',', '.')

    if not re.fullmatch(r'\d+(?:\.\d+)?', cleaned):
        return None

    try:
        amount = Decimal(cleaned)
    except InvalidOperation:
        return None

    return -amount if is_negative else amount


def parse_amount(amount_str: str | None) -> Decimal | None:
    """Parse an amount token into an unsigned magnitude.

    Returns:
        Absolute Decimal value, or None if unparsable
    """
    amount = parse_signed_amount(amount_str)
    return abs(amount) if amount is not None else None


def has_plus_sign(amount_str: str) -> bool:
    """Check whether an amount token carries an explicit "+" (income marker)."""
    return amount_str.strip().startswith('+')


def parse_date(date_str: str | None) -> date | None:
    """Parse a statement date token.

    Accepts DD.MM.YYYY, YYYY-MM-DD, DD/MM/YYYY and DD.MM.YY, with any
    trailing time component ignored.

    Args:
        date_str: Raw date text

    Returns:
        Calendar date, or None if no supported date is found
    """
    if not date_str:
        return None

    text = date_str.strip()

    for pattern, order in _DATE_PATTERNS:
        match = pattern.search(text)
        if not match:
            continue

        first, second, third = (int(g) for g in match.groups())
        try:
            if order == "ymd":
                return date(first, second, third)
            if order == "dmy_short":
                return date(2000 + third, second, first)
            return date(third, second, first)
        except ValueError:
            return None

    return None


def clean_description(text: str | None, fallback: str = "") -> str:
    """Collapse whitespace and truncate a description."""
    if not text:
        return fallback

    cleaned = _SPACES.sub(' ', text).strip()
    if not cleaned:
        return fallback

    return cleaned[:MAX_DESCRIPTION_LENGTH]


def recase_description(text: str) -> str:
    """Normalize the case of a statement description.

    All-uppercase merchant text ("TIMEWEB.CLOUD SANKT-PETERBU RUS") is
    re-cased word by word, capitalizing each hyphen-separated part
    ("Timeweb.cloud Sankt-Peterbu Rus"). Mixed-case text only gets its
    first letter capitalized.
    """
    text = text.strip()
    if not text:
        return text

    if text.isupper():
        words = []
        for word in text.split():
            parts = [part[:1].upper() + part[1:].lower() for part in word.split('-')]
            words.append('-'.join(parts))
        return ' '.join(words)

    return text[0].upper() + text[1:]
