import re

# Any run of whitespace, including the gap in 'CSCI 200'
WHITESPACE = re.compile(r'\s+')


def normalize_code(raw: str | None) -> str:
    """
    Normalizes a course code to its canonical catalog key.
    Handles: 'csci200', ' CSCI200 ', 'csci 200', 'Csci\t200'  ->  'CSCI200'
    Returns '' for None or whitespace-only input.

    Idempotent: normalize_code(normalize_code(x)) == normalize_code(x).
    """
    if not raw:
        return ""
    return WHITESPACE.sub('', str(raw)).upper()
