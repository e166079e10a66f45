"""
Tests for the jamo composition automaton.

Keys are typed on the dubeolsik layout: r=ㄱ s=ㄴ e=ㄷ f=ㄹ q=ㅂ t=ㅅ d=ㅇ
g=ㅎ k=ㅏ j=ㅓ h=ㅗ n=ㅜ m=ㅡ l=ㅣ, E=ㄸ, and '<' is a backspace.
"""

import itertools

import pytest

import hangul
import keymap
from hangul import (
    HangulAutomaton,
    STATE_EMPTY, STATE_LEAD, STATE_LEAD_CLUSTER, STATE_VOWEL,
    STATE_LEAD_VOWEL, STATE_LEAD_VOWEL_TAIL, STATE_LEAD_VOWEL_TAIL_CLUSTER,
)


@pytest.mark.parametrize("keys, committed, preedit, state", [
    # S0
    ("r", "", "ㄱ", STATE_LEAD),
    ("k", "", "ㅏ", STATE_VOWEL),
    # S1
    ("rt", "", "ㄳ", STATE_LEAD_CLUSTER),
    ("rs", "ㄱ", "ㄴ", STATE_LEAD),
    ("gk", "", "하", STATE_LEAD_VOWEL),
    # S2
    ("rte", "ㄳ", "ㄷ", STATE_LEAD),
    ("rtk", "ㄱ", "사", STATE_LEAD_VOWEL),
    # S3
    ("kr", "ㅏ", "ㄱ", STATE_LEAD),
    ("hk", "", "ㅘ", STATE_VOWEL),
    ("hh", "", "ㅛ", STATE_VOWEL),
    ("hkl", "", "ㅙ", STATE_VOWEL),
    ("kh", "ㅏ", "ㅗ", STATE_VOWEL),
    # S4
    ("gks", "", "한", STATE_LEAD_VOWEL_TAIL),
    ("rkE", "가", "ㄸ", STATE_LEAD),
    ("rhk", "", "과", STATE_LEAD_VOWEL),
    ("rkj", "가", "ㅓ", STATE_VOWEL),
    # S5
    ("ekfr", "", "닭", STATE_LEAD_VOWEL_TAIL_CLUSTER),
    ("rkse", "간", "ㄷ", STATE_LEAD),
    ("rktk", "가", "사", STATE_LEAD_VOWEL),
    # S6
    ("ekfre", "닭", "ㄷ", STATE_LEAD),
    ("ekfrk", "달", "가", STATE_LEAD_VOWEL),
])
def test_forward_transitions(automaton, buffer, type_keys, keys, committed, preedit, state):
    type_keys(automaton, keys)
    assert buffer.committed == committed
    assert buffer.preedit == preedit
    assert automaton.state == state


@pytest.mark.parametrize("keys, text", [
    ("dkssud", "안녕"),
    ("gksrmf", "한글"),
    ("qkfq", "밟"),
    ("dlfrdj", "읽어"),
    ("rhkdlf", "과일"),
    ("dnjs", "원"),
])
def test_words(automaton, buffer, type_keys, keys, text):
    type_keys(automaton, keys)
    automaton.flush()
    assert buffer.committed == text
    assert buffer.preedit == ""


@pytest.mark.parametrize("keys, preedit, state", [
    ("gks<", "하", STATE_LEAD_VOWEL),
    ("gks<<", "ㅎ", STATE_LEAD),
    ("gks<<<", "", STATE_EMPTY),
    ("rt<", "ㄱ", STATE_LEAD),
    ("hk<", "ㅗ", STATE_VOWEL),
    ("hk<<", "", STATE_EMPTY),
    ("k<", "", STATE_EMPTY),
    ("rhk<", "고", STATE_LEAD_VOWEL),
    ("rhk<<", "ㄱ", STATE_LEAD),
    ("ekfr<", "달", STATE_LEAD_VOWEL_TAIL),
    ("ekfr<<", "다", STATE_LEAD_VOWEL),
    ("hkl<", "ㅘ", STATE_VOWEL),
    # only the latest fusion is undone
    ("hkl<<", "", STATE_EMPTY),
])
def test_backspace_transitions(automaton, buffer, type_keys, keys, preedit, state):
    type_keys(automaton, keys)
    assert buffer.committed == ""
    assert buffer.preedit == preedit
    assert automaton.state == state


def test_backspace_after_resyllabification(automaton, buffer, type_keys):
    type_keys(automaton, "rktk<")
    assert buffer.committed == "가"
    assert buffer.preedit == "ㅅ"
    assert automaton.state == STATE_LEAD


def test_han_operations(recording_automaton, recorder, type_keys):
    type_keys(recording_automaton, "gks<<<")
    assert recorder.ops == [
        ("start_new", "ㅎ"),
        ("replace", "하"),
        ("replace", "한"),
        ("replace", "하"),
        ("replace", "ㅎ"),
        ("clear", None),
    ]


def test_new_lead_reasserts_previous_jamo(recording_automaton, recorder, type_keys):
    type_keys(recording_automaton, "rs")
    assert recorder.ops == [
        ("start_new", "ㄱ"),
        ("replace", "ㄱ"),
        ("append_new", "ㄴ"),
    ]


def test_resyllabification_operations(recording_automaton, recorder, type_keys):
    type_keys(recording_automaton, "rktk")
    assert recorder.ops == [
        ("start_new", "ㄱ"),
        ("replace", "가"),
        ("replace", "갓"),
        ("replace", "가"),
        ("append_new", "사"),
    ]


@pytest.mark.parametrize("keys", [
    "rs", "rte", "rtk", "kr", "kh", "rkE", "rkj", "rkse", "rktk",
    "ekfre", "ekfrk", "dkssud", "gksrmf", "dlfrdj", "rhkdlf",
])
def test_append_is_always_preceded_by_replace(recording_automaton, recorder, type_keys, keys):
    type_keys(recording_automaton, keys)
    names = [name for name, _ in recorder.ops]
    assert "append_new" in names
    for pos, name in enumerate(names):
        if name == "append_new":
            assert names[pos - 1] == "replace"


def test_flush_commits_and_resets(recording_automaton, recorder, type_keys):
    type_keys(recording_automaton, "gks")
    recording_automaton.flush()
    assert recorder.ops[-1] == ("commit", None)
    assert recording_automaton.state == STATE_EMPTY
    assert recording_automaton.build.is_empty()


def test_flush_when_empty_emits_nothing(recording_automaton, recorder):
    recording_automaton.flush()
    assert recorder.ops == []


def test_non_jamo_key_commits_syllable(automaton, buffer, type_keys):
    type_keys(automaton, "gks")
    assert automaton.process_code("1") is False
    assert buffer.committed == "한"
    assert buffer.preedit == ""
    assert automaton.state == STATE_EMPTY


def test_jamo_key_is_consumed(automaton):
    assert automaton.process_code("g") is True
    assert automaton.process_code(ord("k")) is True


def test_shift_selects_doubled_consonant(automaton, buffer):
    automaton.process_code("r", shifted=True)
    automaton.process_code("k")
    assert buffer.preedit == "까"


def test_backspace_when_empty_is_idempotent(recording_automaton, recorder):
    for _ in range(3):
        assert recording_automaton.backspace() is False
    assert recorder.ops == []
    assert recording_automaton.state == STATE_EMPTY
    assert recording_automaton.build.is_empty()


def test_backspace_passes_through_after_commit(automaton, buffer, type_keys):
    type_keys(automaton, "gks")
    automaton.flush()
    assert automaton.backspace() is False
    assert buffer.committed == "한"


@pytest.mark.parametrize("keys", [
    "g", "gks", "rt", "hkl", "ekfr", "rktk", "dkssud", "rkE", "qkfq",
    "rte", "rtk", "hkr", "ekfrk", "gksrmf", "dlfrdj", "kkk", "rrrr",
])
def test_round_trip_returns_to_empty(automaton, buffer, type_keys, keys):
    type_keys(automaton, keys)
    type_keys(automaton, "<" * len(keys))
    assert automaton.state == STATE_EMPTY
    assert automaton.build.is_empty()
    assert automaton.build.lead == [None, None]
    assert automaton.build.vowel == [None, None]
    assert automaton.build.tail == [None, None]
    assert buffer.preedit == ""


@pytest.mark.parametrize("keys", ["g", "gk", "gks", "rt", "hkl", "ekfr", "rhk", "qkfq"])
def test_round_trip_single_syllable_leaves_no_text(automaton, buffer, type_keys, keys):
    type_keys(automaton, keys)
    type_keys(automaton, "<" * len(keys))
    assert buffer.text == ""


def test_lead_clusters_disabled(buffer, type_keys):
    automaton = HangulAutomaton(buffer, lead_clusters=False)
    type_keys(automaton, "rt")
    assert buffer.committed == "ㄱ"
    assert buffer.preedit == "ㅅ"
    assert automaton.state == STATE_LEAD
    # final clusters are unaffected
    type_keys(automaton, "kf")
    assert buffer.preedit == "살"
    type_keys(automaton, "r")
    assert buffer.preedit == "삵"


def test_char_backspace_mode(buffer, type_keys):
    automaton = HangulAutomaton(buffer, backspace_mode=hangul.BACKSPACE_CHAR)
    type_keys(automaton, "gks")
    assert automaton.backspace() is True
    assert buffer.text == ""
    assert automaton.state == STATE_EMPTY
    assert automaton.backspace() is False


def test_unknown_backspace_mode(buffer):
    with pytest.raises(ValueError):
        HangulAutomaton(buffer, backspace_mode="WORD")


def test_composed_string(automaton, type_keys):
    assert automaton.composed_string() == ""
    type_keys(automaton, "gks")
    assert automaton.composed_string() == "한"


def test_reset_drops_state_silently(recording_automaton, recorder, type_keys):
    type_keys(recording_automaton, "gks")
    count = len(recorder.ops)
    recording_automaton.reset()
    assert len(recorder.ops) == count
    assert recording_automaton.state == STATE_EMPTY


def test_transition_tables_are_exhaustive(automaton):
    states = list(hangul.STATE_NAMES)
    kinds = [keymap.CONSONANT, keymap.VOWEL]
    assert set(automaton._forward) == set(itertools.product(states, kinds))
    assert set(automaton._backward) == set(states) - {STATE_EMPTY}
