from collections import namedtuple

from jamo import raw_index, is_consonant, is_vowel

CONSONANT, VOWEL, NOT_JAMO = range(3)

KIND_NAMES = {
    CONSONANT: 'consonant',
    VOWEL: 'vowel',
    NOT_JAMO: 'not-jamo',
}

KeyJamo = namedtuple('KeyJamo', ['kind', 'index'])

# Dubeolsik layout, keys a..z
UNSHIFTED = "ㅁㅠㅊㅇㄷㄹㅎㅗㅑㅓㅏㅣㅡㅜㅐㅔㅂㄱㄴㅅㅕㅍㅈㅌㅛㅋ"
SHIFTED = "ㅁㅠㅊㅇㄸㄹㅎㅗㅑㅓㅏㅣㅡㅜㅒㅖㅃㄲㄴㅆㅕㅍㅉㅌㅛㅋ"

# 26 unshifted entries followed by 26 shifted ones
KEY_TABLE = tuple(raw_index(ch) for ch in UNSHIFTED + SHIFTED)

_NOT_JAMO = KeyJamo(NOT_JAMO, None)


def classify(code, shifted=False):
    """Map a key code (or a one-character string) to a KeyJamo.

    Uppercase letters always use the shifted half of the layout; lowercase
    letters use it only while shift is active.
    """
    if isinstance(code, str):
        if len(code) != 1:
            return _NOT_JAMO
        code = ord(code)

    if 0x61 <= code <= 0x7A:  # a-z
        slot = code - 0x61
        if shifted:
            slot += 26
    elif 0x41 <= code <= 0x5A:  # A-Z
        slot = code - 0x41 + 26
    else:
        return _NOT_JAMO

    raw = KEY_TABLE[slot]
    if is_consonant(raw):
        return KeyJamo(CONSONANT, raw)
    if is_vowel(raw):
        return KeyJamo(VOWEL, raw)
    return _NOT_JAMO
