"""Context-aware filter for name-shaped pattern matches.

Capitalized bigrams are everywhere in structured documents (headers,
field labels, job titles), so every NAME candidate from the pattern
layer goes through an ordered cascade of veto and acceptance rules
before it is reported.  The first rule that fires decides.
"""

from __future__ import annotations
import re

# How far around a candidate the filter looks
CONTEXT_WINDOW = 150
NEAR_WINDOW = 30
ROLE_WINDOW = 50

NAME_BOOST = 0.05
NAME_CONFIDENCE_CAP = 0.99

# ── Rule 1: document structure ───────────────────────────────────────

_STRUCTURE_NOUNS = re.compile(
    r"\b(?:document|record|notes?|form|report|file|header|title|section|chapter"
    r"|policy|manual|guide|instructions?)\b",
    re.IGNORECASE,
)
_STRUCTURE_PHRASES = re.compile(
    r"\b(?:library\s+card|book\s+title|return\s+date|due\s+date|document\s+type|form\s+name)\b",
    re.IGNORECASE,
)
_HEADER_COLON = re.compile(r":$")
_LIST_ITEM = re.compile(r"^\s*[-•*]\s*$")
_LABEL_BEFORE = re.compile(
    r"\b(?:type|category|classification|status|level|grade|rank|position)\s*:\s*$",
    re.IGNORECASE,
)

# ── Rule 2: role or identifier after the name ───────────────────────

_ROLE_AFTER = re.compile(
    r"\b(?:employee|staff|worker|manager|director|supervisor|coordinator|administrator"
    r"|assistant|specialist|analyst|engineer|developer|designer|consultant|advisor"
    r"|representative|associate|intern|volunteer|participant|applicant|candidate"
    r"|recipient|beneficiary)\b",
    re.IGNORECASE,
)
_IDENTIFIER_AFTER = re.compile(r"\b(?:id|number|code|ref|reference)\b", re.IGNORECASE)

# ── Rule 3: strong person context before the name ───────────────────

_PERSON_CONTEXT_BEFORE = [
    re.compile(r"\b(?:dr\.?|mr\.?|mrs\.?|ms\.?|miss|prof\.?|doctor)\s*$", re.IGNORECASE),
    re.compile(
        r"\b(?:patient|client|customer|visitor|guest|resident|student|member)\s+"
        r"(?:name\s*[:.]?\s*)?$",
        re.IGNORECASE,
    ),
    re.compile(
        r"\b(?:signed|written|created|prepared|reviewed|approved)\s+by\s*:?\s*$",
        re.IGNORECASE,
    ),
    re.compile(r"\b(?:dear|hello|hi|sincerely|regards|from|to|cc|bcc)\s*[:,]?\s*$", re.IGNORECASE),
    re.compile(r"\b(?:contact|author|creator|owner|holder)\s*[:.]?\s*$", re.IGNORECASE),
]

# ── Rule 4: honorific inside the span ───────────────────────────────

HONORIFIC = re.compile(r"^(?:Dr\.?|Mr\.?|Mrs\.?|Ms\.?|Miss|Prof\.?)\s+", re.IGNORECASE)

_NAME_PART = re.compile(r"^[A-Z][a-z]+$")

_STREET_END = re.compile(
    r"\b(?:Street|Avenue|Road|Boulevard|Lane|Drive|Court|Place|Way|Circle|Tower|Building)$"
)

COMMON_FIRST_NAMES = frozenset({
    "emily", "sarah", "michael", "john", "jane", "david", "lisa", "robert", "mary", "james",
    "rajesh", "priya", "kumar", "chen", "wang", "singh", "patel", "johnson", "smith", "brown",
    "garcia", "miller", "davis", "rodriguez", "martinez", "hernandez", "lopez", "gonzalez",
    "wilson", "anderson", "thomas", "taylor", "moore", "jackson", "martin", "lee", "perez",
    "thompson", "white", "harris", "sanchez", "clark", "ramirez", "lewis", "robinson", "walker",
    "young", "allen", "king", "wright", "scott", "torres", "nguyen", "hill", "flores", "green",
    "jessica", "ashley", "jennifer", "elizabeth", "linda", "barbara", "susan", "patricia",
    "william", "richard", "joseph", "charles", "daniel", "matthew", "anthony", "mark",
})

# Capitalized words that open a sentence or a line but are never part of a name
LEAD_IN_WORDS = frozenset({
    "contact", "dear", "hello", "hi", "call", "email", "emailed", "ask", "tell", "thanks",
    "thank", "sincerely", "regards", "cheers", "from", "to", "cc", "bcc", "attn", "please",
    "meet", "with", "by", "for", "and", "or", "the", "this", "that", "when", "if", "today",
    "yesterday", "tomorrow", "patient", "client", "customer", "student", "author", "owner",
    "signed", "prepared", "reviewed", "approved", "written", "created", "name", "per",
})

# Place names that would otherwise pass as two-word person names
KNOWN_PLACES = frozenset({
    "new york", "los angeles", "san diego", "san antonio", "san francisco", "san jose",
    "las vegas", "kansas city", "virginia beach", "colorado springs", "long beach",
    "new orleans", "santa ana", "corpus christi", "jersey city", "chula vista",
    "fort wayne", "baton rouge", "north las vegas", "san bernardino", "des moines",
    "moreno valley", "huntington beach", "little rock", "grand rapids", "salt lake city",
    "grand prairie", "newport news", "overland park", "santa clarita", "garden grove",
    "fort lauderdale", "santa rosa", "rancho cucamonga", "cape coral", "sioux falls",
    "pembroke pines", "elk grove", "fort collins", "thousand oaks", "cedar rapids",
    "sioux city", "round rock", "federal way", "coral springs", "miami gardens",
    "south bend", "west valley city", "sterling heights", "new haven", "united states",
    "united kingdom", "new jersey", "new mexico", "north carolina", "south carolina",
    "north dakota", "south dakota", "west virginia", "rhode island", "new hampshire",
    "fort worth", "el paso", "oklahoma city",
})


def trim_candidate(text: str, start: int, end: int) -> tuple[int, int] | None:
    """Drop capitalized lead-in words from the front of a name candidate.

    Returns the trimmed (start, end) or None when fewer than two words
    would remain.
    """
    span = text[start:end]
    offset = 0
    while True:
        m = re.match(r"(\S+)(\s+)", span[offset:])
        if m is None or m.group(1).lower() not in LEAD_IN_WORDS:
            break
        offset += m.end()

    remaining = span[offset:]
    if len(remaining.split()) < 2:
        return None
    return start + offset, end


def is_valid_person_name(name: str, full_text: str, position: int) -> bool:
    """Decide whether a name-shaped span at ``position`` is a real person."""
    end = position + len(name)
    before = full_text[max(0, position - CONTEXT_WINDOW):position]
    after = full_text[end:end + CONTEXT_WINDOW]
    near_before = before[-NEAR_WINDOW:]
    near_after = after[:NEAR_WINDOW]

    # 1. document structure
    for chunk in (name, near_before, near_after):
        if _STRUCTURE_NOUNS.search(chunk) or _STRUCTURE_PHRASES.search(chunk):
            return False
    line_start = full_text.rfind("\n", 0, position) + 1
    if _HEADER_COLON.search(before) or _LIST_ITEM.match(full_text[line_start:position]):
        return False
    if _LABEL_BEFORE.search(before):
        return False

    # 2. role / identifier right after
    role_zone = after[:ROLE_WINDOW]
    if _ROLE_AFTER.search(role_zone) or _IDENTIFIER_AFTER.search(role_zone):
        return False

    # places and street names are never people, whatever precedes them
    if " ".join(HONORIFIC.sub("", name).split()).lower() in KNOWN_PLACES:
        return False
    if _STREET_END.search(name):
        return False

    # 3. strong person context
    if any(p.search(before) for p in _PERSON_CONTEXT_BEFORE):
        return True

    # 4. honorific in the span itself
    if HONORIFIC.match(name):
        return True

    return has_name_structure(name)


def has_name_structure(name: str) -> bool:
    """2–3 Title-case words of 2–15 letters each."""
    parts = name.split()
    if len(parts) < 2 or len(parts) > 3:
        return False
    return all(2 <= len(p) <= 15 and _NAME_PART.match(p) for p in parts)


def name_confidence(name: str, base: float) -> float:
    """Boost confidence when the first name is a common one."""
    parts = HONORIFIC.sub("", name).split()
    if parts and parts[0].lower() in COMMON_FIRST_NAMES:
        return round(min(NAME_CONFIDENCE_CAP, base + NAME_BOOST), 4)
    return base
