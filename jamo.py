"""Jamo tables: raw indices, cluster fusion and syllable synthesis.

Raw indices follow the Hangul Compatibility Jamo block, so a consonant's bare
display is 0x3131 + raw and a vowel's is 0x314F + (raw - 30).
"""

# ㄱ ㄲ ㄳ ㄴ ㄵ ㄶ ㄷ ㄸ ㄹ ㄺ ㄻ ㄼ ㄽ ㄾ ㄿ ㅀ ㅁ ㅂ ㅃ ㅄ ㅅ ㅆ ㅇ ㅈ ㅉ ㅊ ㅋ ㅌ ㅍ ㅎ
CONSONANTS = "ㄱㄲㄳㄴㄵㄶㄷㄸㄹㄺㄻㄼㄽㄾㄿㅀㅁㅂㅃㅄㅅㅆㅇㅈㅉㅊㅋㅌㅍㅎ"
VOWELS = "ㅏㅐㅑㅒㅓㅔㅕㅖㅗㅘㅙㅚㅛㅜㅝㅞㅟㅠㅡㅢㅣ"

VOWEL_BASE = len(CONSONANTS)  # 30
JAMO_COUNT = VOWEL_BASE + len(VOWELS)  # 51

CONSONANT_DISPLAY_BASE = 0x3131
VOWEL_DISPLAY_BASE = 0x314F

SYLLABLE_BASE = 0xAC00
JUNGSUNG_COUNT = 21
JONGSUNG_COUNT = 28

# Cluster positions
LEAD, VOWEL, TAIL = range(3)

POSITION_NAMES = {
    LEAD: 'lead',
    VOWEL: 'vowel',
    TAIL: 'tail',
}


def raw_index(ch):
    pos = CONSONANTS.find(ch)
    if pos >= 0:
        return pos
    pos = VOWELS.find(ch)
    if pos >= 0:
        return VOWEL_BASE + pos
    raise ValueError("Not a compatibility jamo: %r" % (ch,))


def jamo_char(raw):
    if is_consonant(raw):
        return CONSONANTS[raw]
    if is_vowel(raw):
        return VOWELS[raw - VOWEL_BASE]
    raise ValueError("Raw jamo index out of range: %r" % (raw,))


def is_consonant(raw):
    return raw is not None and 0 <= raw < VOWEL_BASE


def is_vowel(raw):
    return raw is not None and VOWEL_BASE <= raw < JAMO_COUNT


# Chosung position per consonant raw index. Cluster consonants map to their
# second member; they never reach synthesis as a lead.
CHOSUNG_ORDER = (
    0, 1, 9, 2, 12, 18, 3, 4, 5, 0,
    6, 7, 9, 16, 17, 18, 6, 7, 8, 9,
    9, 10, 11, 12, 13, 14, 15, 16, 17, 18,
)

# Jongsung position per consonant raw index; 0 means the consonant cannot end
# a syllable (ㄸ ㅃ ㅉ).
JONGSUNG_ORDER = (
    1, 2, 3, 4, 5, 6, 7, 0, 8, 9,
    10, 11, 12, 13, 14, 15, 16, 17, 0, 18,
    19, 20, 21, 22, 0, 23, 24, 25, 26, 27,
)


def _cluster_table(pairs):
    table = {}
    for (first, second), fused in pairs.items():
        table[(raw_index(first), raw_index(second))] = raw_index(fused)
    return table


# Shared by the lead and tail positions.
CONSONANT_CLUSTERS = _cluster_table({
    ("ㄱ", "ㅅ"): "ㄳ",
    ("ㄴ", "ㅈ"): "ㄵ",
    ("ㄴ", "ㅎ"): "ㄶ",
    ("ㄹ", "ㄱ"): "ㄺ",
    ("ㄹ", "ㅁ"): "ㄻ",
    ("ㄹ", "ㅂ"): "ㄼ",
    ("ㄹ", "ㅅ"): "ㄽ",
    ("ㄹ", "ㅌ"): "ㄾ",
    ("ㄹ", "ㅍ"): "ㄿ",
    ("ㄹ", "ㅎ"): "ㅀ",
    ("ㅂ", "ㅅ"): "ㅄ",
})

VOWEL_DIPHTHONGS = _cluster_table({
    ("ㅗ", "ㅏ"): "ㅘ",
    ("ㅗ", "ㅐ"): "ㅙ",
    ("ㅗ", "ㅣ"): "ㅚ",
    ("ㅗ", "ㅗ"): "ㅛ",
    ("ㅘ", "ㅣ"): "ㅙ",
    ("ㅜ", "ㅓ"): "ㅝ",
    ("ㅜ", "ㅔ"): "ㅞ",
    ("ㅜ", "ㅣ"): "ㅟ",
    ("ㅜ", "ㅜ"): "ㅠ",
    ("ㅝ", "ㅣ"): "ㅞ",
    ("ㅡ", "ㅣ"): "ㅢ",
    ("ㅏ", "ㅏ"): "ㅑ",
    ("ㅏ", "ㅣ"): "ㅐ",
    ("ㅑ", "ㅣ"): "ㅒ",
    ("ㅓ", "ㅣ"): "ㅔ",
    ("ㅓ", "ㅓ"): "ㅕ",
    ("ㅕ", "ㅣ"): "ㅖ",
})

_CLUSTERS_BY_POSITION = {
    LEAD: CONSONANT_CLUSTERS,
    VOWEL: VOWEL_DIPHTHONGS,
    TAIL: CONSONANT_CLUSTERS,
}


def fuse(position, current, incoming):
    """Return the raw index `current` and `incoming` fuse into at `position`,
    or None when the pair does not form a cluster there."""
    if current is None or incoming is None:
        return None
    try:
        table = _CLUSTERS_BY_POSITION[position]
    except KeyError:
        raise ValueError("Unknown cluster position: %r" % (position,))
    return table.get((current, incoming))


def chosung_order(lead):
    if not is_consonant(lead):
        raise ValueError("Not a consonant raw index: %r" % (lead,))
    return CHOSUNG_ORDER[lead]


def jungsung_order(vowel):
    if not is_vowel(vowel):
        raise ValueError("Not a vowel raw index: %r" % (vowel,))
    return vowel - VOWEL_BASE


def jongsung_order(trail):
    if trail is None:
        return 0
    if not is_consonant(trail):
        raise ValueError("Not a consonant raw index: %r" % (trail,))
    return JONGSUNG_ORDER[trail]


def synthesize(lead, vowel, trail=None):
    """Compose one Hangul syllable code point.

    A trail whose jongsung order is 0 yields the open syllable; callers that
    care about degenerate finals check jongsung_order() first.
    """
    cho = chosung_order(lead)
    jung = jungsung_order(vowel)
    jong = jongsung_order(trail)
    return SYLLABLE_BASE + (cho * JUNGSUNG_COUNT + jung) * JONGSUNG_COUNT + jong


def bare_consonant(raw):
    if not is_consonant(raw):
        raise ValueError("Not a consonant raw index: %r" % (raw,))
    return CONSONANT_DISPLAY_BASE + raw


def bare_vowel(raw):
    if not is_vowel(raw):
        raise ValueError("Not a vowel raw index: %r" % (raw,))
    return VOWEL_DISPLAY_BASE + (raw - VOWEL_BASE)


def display(lead, vowel, trail=None):
    """Code point shown for a resolved (lead, vowel, trail) triple."""
    if vowel is None:
        return bare_consonant(lead)
    if lead is None:
        return bare_vowel(vowel)
    return synthesize(lead, vowel, trail)
