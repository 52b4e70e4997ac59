# util/functions.py
from typing import List

MIN_KEYWORD_LEN = 3


def highlight_keywords(question: str) -> List[str]:
    """
    - Lower-case, whitespace-split `question`.
    - Keep unique tokens longer than two characters, in first-seen order.
    Clients use these to mark matches inside returned passages.
    """
    seen: List[str] = []
    for token in (question or "").lower().split():
        token = token.strip()
        if len(token) >= MIN_KEYWORD_LEN and token not in seen:
            seen.append(token)
    return seen
