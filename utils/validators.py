import re

DATE_KEY_RE = re.compile(r"^\d{4}-\d{2}-\d{2}$")

def is_valid_date_key(date_str: str) -> bool:
    return bool(DATE_KEY_RE.match(date_str))
