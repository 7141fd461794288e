import re
import string
from collections import Counter

_STRIP = string.punctuation + "“”‘’"


# ========= Utils =========
def normalize_text(s):
    return s.strip().lower()


def tokenize(s):
    """Lowercase whitespace split. Punctuation stays attached to the token."""
    return s.lower().split()


def words(s):
    """Tokens with surrounding punctuation removed; empty leftovers are dropped."""
    out = []
    for token in tokenize(s):
        w = token.strip(_STRIP)
        if w:
            out.append(w)
    return out


def sentences(s):
    # "a. b." -> ["a", " b", ""]: the trailing piece is kept on purpose,
    # complexity is measured against it
    return re.split(r"[.!?]+", s)


def extract_keywords(message, stop_words, max_keywords=5):
    candidates = [
        w for w in tokenize(message)
        if len(w) > 2 and w not in stop_words and w.isalpha()
    ]
    # Counter keeps first-seen order for equal counts
    return [w for w, _ in Counter(candidates).most_common(max_keywords)]
