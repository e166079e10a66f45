import logging

import jamo
import keymap
from jamo import bare_consonant, bare_vowel, display, fuse, jongsung_order, synthesize

logger = logging.getLogger(__name__)

STATE_EMPTY, \
STATE_LEAD, \
STATE_LEAD_CLUSTER, \
STATE_VOWEL, \
STATE_LEAD_VOWEL, \
STATE_LEAD_VOWEL_TAIL, \
STATE_LEAD_VOWEL_TAIL_CLUSTER = range(7)

STATE_NAMES = {
    STATE_EMPTY: 'empty',
    STATE_LEAD: 'lead',
    STATE_LEAD_CLUSTER: 'lead-cluster',
    STATE_VOWEL: 'vowel',
    STATE_LEAD_VOWEL: 'lead-vowel',
    STATE_LEAD_VOWEL_TAIL: 'lead-vowel-tail',
    STATE_LEAD_VOWEL_TAIL_CLUSTER: 'lead-vowel-tail-cluster',
}

BACKSPACE_JASO = "JASO"
BACKSPACE_CHAR = "CHAR"
BACKSPACE_MODES = (BACKSPACE_JASO, BACKSPACE_CHAR)


class ComposingSink(object):
    """Receiver of provisional-text operations.

    Operations arrive in the order the automaton emits them and are never
    batched across key events. Code points are ints.
    """

    def start_new(self, codepoint):
        """Begin a fresh provisional span showing one character."""
        raise NotImplementedError

    def replace(self, codepoint):
        """Overwrite the character of the current provisional span."""
        raise NotImplementedError

    def append_new(self, codepoint):
        """Commit the current span, then start a new one with codepoint."""
        raise NotImplementedError

    def clear(self):
        """Remove the provisional span without committing anything."""
        raise NotImplementedError

    def commit(self):
        """Commit the provisional span with no new span started."""
        raise NotImplementedError


class SyllableBuild(object):
    # Each position keeps two slots: the jamo typed first and the jamo that
    # fused into it. `jamo` holds the effective (post-fusion) lead, vowel and
    # tail used for display. Empty slots are None since ㄱ is raw index 0.
    #
    # For the vowel the first slot is the vowel as it was before the latest
    # fusion, so fusion chains (ㅗ ㅏ ㅣ -> ㅙ) undo one step at a time.

    def __init__(self):
        self.clear()

    def clear(self):
        self.lead = [None, None]
        self.vowel = [None, None]
        self.tail = [None, None]
        self.jamo = [None, None, None]

    def is_empty(self):
        return self.jamo == [None, None, None]

    def current(self):
        if self.is_empty():
            return None
        return display(*self.jamo)

    def __repr__(self):
        return "SyllableBuild(lead=%r, vowel=%r, tail=%r, jamo=%r)" % (
            self.lead, self.vowel, self.tail, self.jamo)


class HangulAutomaton(object):
    """Dubeolsik jamo composition state machine.

    Feeds one key event at a time and reports every change of the composing
    text to `sink`. Forward transitions are looked up in a table keyed by
    (state, jamo kind); backspace transitions by state alone.

    Whenever a span is finished and a new one started, the finished syllable
    is written with `replace` right before `append_new`, even when its text
    did not change, since the sink's content cannot be read back.
    """

    def __init__(self, sink, lead_clusters=True, backspace_mode=BACKSPACE_JASO):
        if backspace_mode not in BACKSPACE_MODES:
            raise ValueError("Unknown backspace mode: %r" % (backspace_mode,))
        self.sink = sink
        self.lead_clusters = lead_clusters
        self.backspace_mode = backspace_mode
        self.state = STATE_EMPTY
        self.build = SyllableBuild()

        self._forward = {
            (STATE_EMPTY, keymap.CONSONANT): self._empty_consonant,
            (STATE_EMPTY, keymap.VOWEL): self._empty_vowel,
            (STATE_LEAD, keymap.CONSONANT): self._lead_consonant,
            (STATE_LEAD, keymap.VOWEL): self._lead_vowel,
            (STATE_LEAD_CLUSTER, keymap.CONSONANT): self._lead_cluster_consonant,
            (STATE_LEAD_CLUSTER, keymap.VOWEL): self._lead_cluster_vowel,
            (STATE_VOWEL, keymap.CONSONANT): self._vowel_consonant,
            (STATE_VOWEL, keymap.VOWEL): self._vowel_vowel,
            (STATE_LEAD_VOWEL, keymap.CONSONANT): self._syllable_consonant,
            (STATE_LEAD_VOWEL, keymap.VOWEL): self._syllable_vowel,
            (STATE_LEAD_VOWEL_TAIL, keymap.CONSONANT): self._tail_consonant,
            (STATE_LEAD_VOWEL_TAIL, keymap.VOWEL): self._tail_vowel,
            (STATE_LEAD_VOWEL_TAIL_CLUSTER, keymap.CONSONANT): self._tail_cluster_consonant,
            (STATE_LEAD_VOWEL_TAIL_CLUSTER, keymap.VOWEL): self._tail_cluster_vowel,
        }
        self._backward = {
            STATE_LEAD: self._delete_lead,
            STATE_LEAD_CLUSTER: self._delete_lead_cluster,
            STATE_VOWEL: self._delete_vowel,
            STATE_LEAD_VOWEL: self._delete_syllable_vowel,
            STATE_LEAD_VOWEL_TAIL: self._delete_tail,
            STATE_LEAD_VOWEL_TAIL_CLUSTER: self._delete_tail_cluster,
        }

    def reset(self):
        self.state = STATE_EMPTY
        self.build.clear()

    def composed_string(self):
        current = self.build.current()
        if current is None:
            return ""
        return chr(current)

    def process_code(self, code, shifted=False):
        """Handle a printable key. Returns False for keys that are not jamo;
        those commit the syllable in progress and are left to the host."""
        key = keymap.classify(code, shifted)
        if key.kind == keymap.NOT_JAMO:
            self.flush()
            return False
        self.feed(key)
        return True

    def feed(self, key):
        previous = self.state
        self._forward[(self.state, key.kind)](key.index)
        logger.debug("%s + %s %s -> %s %r", STATE_NAMES[previous],
                     keymap.KIND_NAMES[key.kind], jamo.jamo_char(key.index),
                     STATE_NAMES[self.state], self.build)

    def backspace(self):
        """Undo one key. Returns False when nothing is being composed, in
        which case the host should delete committed text itself."""
        if self.state == STATE_EMPTY:
            return False
        previous = self.state
        if self.backspace_mode == BACKSPACE_CHAR:
            self.sink.clear()
            self.reset()
        else:
            self._backward[self.state]()
        logger.debug("%s + backspace -> %s %r", STATE_NAMES[previous],
                     STATE_NAMES[self.state], self.build)
        return True

    def flush(self):
        # Separator, non-jamo key, cursor move or mode switch
        if self.state != STATE_EMPTY:
            self.sink.commit()
            logger.debug("%s + flush -> %s", STATE_NAMES[self.state],
                         STATE_NAMES[STATE_EMPTY])
        self.reset()

    # Build helpers

    def _begin_lead(self, consonant):
        self.build.clear()
        self.build.lead[0] = consonant
        self.build.jamo[0] = consonant
        self.state = STATE_LEAD

    def _begin_vowel(self, vowel):
        self.build.clear()
        self.build.vowel[0] = vowel
        self.build.jamo[1] = vowel
        self.state = STATE_VOWEL

    def _begin_syllable(self, consonant, vowel):
        self.build.clear()
        self.build.lead[0] = consonant
        self.build.vowel[0] = vowel
        self.build.jamo[0] = consonant
        self.build.jamo[1] = vowel
        self.state = STATE_LEAD_VOWEL

    def _fuse_vowel(self, vowel):
        b = self.build
        fused = fuse(jamo.VOWEL, b.jamo[1], vowel)
        if fused is None:
            return False
        b.vowel = [b.jamo[1], vowel]
        b.jamo[1] = fused
        return True

    def _finish_and_begin(self, finished, started):
        self.sink.replace(finished)
        self.sink.append_new(started)

    # Forward transitions

    def _empty_consonant(self, consonant):
        self._begin_lead(consonant)
        self.sink.start_new(bare_consonant(consonant))

    def _empty_vowel(self, vowel):
        self._begin_vowel(vowel)
        self.sink.start_new(bare_vowel(vowel))

    def _lead_consonant(self, consonant):
        b = self.build
        fused = None
        if self.lead_clusters:
            fused = fuse(jamo.LEAD, b.lead[0], consonant)
        if fused is not None:
            b.lead[1] = consonant
            b.jamo[0] = fused
            self.state = STATE_LEAD_CLUSTER
            self.sink.replace(bare_consonant(fused))
        else:
            finished = b.current()
            self._begin_lead(consonant)
            self._finish_and_begin(finished, bare_consonant(consonant))

    def _lead_vowel(self, vowel):
        b = self.build
        b.vowel[0] = vowel
        b.jamo[1] = vowel
        self.state = STATE_LEAD_VOWEL
        self.sink.replace(synthesize(b.jamo[0], vowel))

    def _lead_cluster_consonant(self, consonant):
        finished = self.build.current()
        self._begin_lead(consonant)
        self._finish_and_begin(finished, bare_consonant(consonant))

    def _lead_cluster_vowel(self, vowel):
        # ㄱ ㅅ ㅏ -> ㄱ 사
        first, second = self.build.lead
        self._begin_syllable(second, vowel)
        self._finish_and_begin(bare_consonant(first), synthesize(second, vowel))

    def _vowel_consonant(self, consonant):
        finished = self.build.current()
        self._begin_lead(consonant)
        self._finish_and_begin(finished, bare_consonant(consonant))

    def _vowel_vowel(self, vowel):
        if self._fuse_vowel(vowel):
            self.sink.replace(self.build.current())
        else:
            finished = self.build.current()
            self._begin_vowel(vowel)
            self._finish_and_begin(finished, bare_vowel(vowel))

    def _syllable_consonant(self, consonant):
        b = self.build
        if jongsung_order(consonant) == 0:
            # ㄸ ㅃ ㅉ never end a syllable
            finished = b.current()
            self._begin_lead(consonant)
            self._finish_and_begin(finished, bare_consonant(consonant))
            return
        b.tail[0] = consonant
        b.jamo[2] = consonant
        self.state = STATE_LEAD_VOWEL_TAIL
        self.sink.replace(b.current())

    def _syllable_vowel(self, vowel):
        if self._fuse_vowel(vowel):
            self.sink.replace(self.build.current())
        else:
            finished = self.build.current()
            self._begin_vowel(vowel)
            self._finish_and_begin(finished, bare_vowel(vowel))

    def _tail_consonant(self, consonant):
        b = self.build
        fused = fuse(jamo.TAIL, b.tail[0], consonant)
        if fused is not None:
            b.tail[1] = consonant
            b.jamo[2] = fused
            self.state = STATE_LEAD_VOWEL_TAIL_CLUSTER
            self.sink.replace(b.current())
        else:
            finished = b.current()
            self._begin_lead(consonant)
            self._finish_and_begin(finished, bare_consonant(consonant))

    def _tail_vowel(self, vowel):
        # The final consonant moves on to lead the next syllable: 갓 ㅏ -> 가 사
        b = self.build
        moved = b.tail[0]
        finished = synthesize(b.jamo[0], b.jamo[1])
        self._begin_syllable(moved, vowel)
        self._finish_and_begin(finished, synthesize(moved, vowel))

    def _tail_cluster_consonant(self, consonant):
        finished = self.build.current()
        self._begin_lead(consonant)
        self._finish_and_begin(finished, bare_consonant(consonant))

    def _tail_cluster_vowel(self, vowel):
        # Only the second member moves: 닭 ㅏ -> 달 가
        b = self.build
        first, second = b.tail
        finished = synthesize(b.jamo[0], b.jamo[1], first)
        self._begin_syllable(second, vowel)
        self._finish_and_begin(finished, synthesize(second, vowel))

    # Backspace transitions

    def _delete_lead(self):
        self.sink.clear()
        self.reset()

    def _delete_lead_cluster(self):
        b = self.build
        b.lead[1] = None
        b.jamo[0] = b.lead[0]
        self.state = STATE_LEAD
        self.sink.replace(b.current())

    def _delete_vowel(self):
        b = self.build
        if b.vowel[1] is None:
            self.sink.clear()
            self.reset()
            return
        b.jamo[1] = b.vowel[0]
        b.vowel[1] = None
        self.sink.replace(b.current())

    def _delete_syllable_vowel(self):
        b = self.build
        if b.vowel[1] is not None:
            b.jamo[1] = b.vowel[0]
            b.vowel[1] = None
        else:
            b.vowel[0] = None
            b.jamo[1] = None
            self.state = STATE_LEAD
        self.sink.replace(b.current())

    def _delete_tail(self):
        b = self.build
        b.tail = [None, None]
        b.jamo[2] = None
        self.state = STATE_LEAD_VOWEL
        self.sink.replace(b.current())

    def _delete_tail_cluster(self):
        b = self.build
        b.tail[1] = None
        b.jamo[2] = b.tail[0]
        self.state = STATE_LEAD_VOWEL_TAIL
        self.sink.replace(b.current())
