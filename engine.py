import argparse
import logging
import sys

import gi
gi.require_version('IBus', '1.0')
from gi.repository import IBus, GLib

from config import load_config
from hangul import ComposingSink, HangulAutomaton

logger = logging.getLogger(__name__)

__version__ = "1.0.0"

BUS_NAME = "org.freedesktop.IBus.SMK"
ENGINE_NAME = "smk"

INPUT_MODE_PROP = "InputMode"

_MODIFIER_NAMES = {
    "Shift": IBus.ModifierType.SHIFT_MASK,
    "Control": IBus.ModifierType.CONTROL_MASK,
    "Ctrl": IBus.ModifierType.CONTROL_MASK,
    "Alt": IBus.ModifierType.MOD1_MASK,
    "Super": IBus.ModifierType.SUPER_MASK,
}

_HOTKEY_MASK = (IBus.ModifierType.SHIFT_MASK | IBus.ModifierType.CONTROL_MASK |
                IBus.ModifierType.MOD1_MASK | IBus.ModifierType.SUPER_MASK)

_COMMAND_MASK = (IBus.ModifierType.CONTROL_MASK | IBus.ModifierType.MOD1_MASK |
                 IBus.ModifierType.SUPER_MASK)

# Keys that end a syllable and are then inserted by the application
_SEPARATOR_KEYS = (IBus.KEY_space, IBus.KEY_Return, IBus.KEY_KP_Enter,
                   IBus.KEY_Tab, IBus.KEY_Escape)

# Modifier presses arrive as key events of their own; the modifier state
# is read from the key that follows
_MODIFIER_KEYS = (IBus.KEY_Shift_L, IBus.KEY_Shift_R,
                  IBus.KEY_Control_L, IBus.KEY_Control_R,
                  IBus.KEY_Alt_L, IBus.KEY_Alt_R,
                  IBus.KEY_Meta_L, IBus.KEY_Meta_R,
                  IBus.KEY_Super_L, IBus.KEY_Super_R,
                  IBus.KEY_Caps_Lock, IBus.KEY_ISO_Level3_Shift)


def parse_hotkey(text):
    """Parse "Shift+space" style key names into (keyval, modifier mask).
    Returns None when the key name is unknown."""
    parts = [p.strip() for p in text.split("+") if p.strip()]
    if not parts:
        return None
    mods = 0
    for name in parts[:-1]:
        if name not in _MODIFIER_NAMES:
            return None
        mods |= _MODIFIER_NAMES[name]
    keyval = IBus.keyval_from_name(parts[-1])
    if keyval in (0, IBus.KEY_VoidSymbol):
        return None
    return keyval, int(mods)


class IBusSink(ComposingSink):
    """Shows the composing syllable as underlined preedit text."""

    def __init__(self, engine):
        self.engine = engine
        self.preedit = ""

    def start_new(self, codepoint):
        self.preedit = chr(codepoint)
        self._update()

    def replace(self, codepoint):
        self.preedit = chr(codepoint)
        self._update()

    def append_new(self, codepoint):
        self._commit_preedit()
        self.preedit = chr(codepoint)
        self._update()

    def clear(self):
        self.preedit = ""
        self._update()

    def commit(self):
        self._commit_preedit()
        self.preedit = ""
        self._update()

    def _commit_preedit(self):
        if self.preedit:
            self.engine.commit_text(IBus.Text.new_from_string(self.preedit))

    def _update(self):
        if self.preedit:
            text = IBus.Text.new_from_string(self.preedit)
            text.set_attributes(IBus.AttrList())
            text.append_attribute(IBus.AttrType.UNDERLINE,
                                  IBus.AttrUnderline.SINGLE, 0, len(self.preedit))
            self.engine.update_preedit_text(text, len(self.preedit), True)
        else:
            self.engine.hide_preedit_text()


class SMKEngine(IBus.Engine):
    def __init__(self):
        super().__init__()
        self.sink = IBusSink(self)
        self.hangul = HangulAutomaton(self.sink)
        self.config = load_config()
        self.apply_config()
        self.hangul_mode = self.config["StartInHangul"]
        self.mode_prop = None

    def apply_config(self):
        self.hangul.lead_clusters = self.config["EnableLeadClusters"]
        self.hangul.backspace_mode = self.config["BackspaceMode"]
        self.toggle_keys = []
        for name in self.config["ToggleKeys"]:
            hotkey = parse_hotkey(name)
            if hotkey is None:
                logger.warning("Ignoring unknown toggle key %r", name)
            else:
                self.toggle_keys.append(hotkey)

    def is_toggle_key(self, keyval, state):
        mods = int(state & _HOTKEY_MASK)
        for toggle_keyval, toggle_mods in self.toggle_keys:
            if keyval == toggle_keyval and mods == toggle_mods:
                return True
        return False

    def do_process_key_event(self, keyval, keycode, state):
        # Ignore key releases
        if state & IBus.ModifierType.RELEASE_MASK:
            return False

        if self.is_toggle_key(keyval, state):
            self.toggle_mode()
            return True

        if not self.hangul_mode:
            return False

        if keyval in _MODIFIER_KEYS:
            return False

        # Ctrl/Alt/Super combinations belong to the application
        if state & _COMMAND_MASK:
            self.hangul.flush()
            return False

        if keyval == IBus.KEY_BackSpace:
            return self.hangul.backspace()

        if keyval in _SEPARATOR_KEYS:
            self.hangul.flush()
            return False

        if 32 <= keyval <= 126:
            shifted = bool(state & IBus.ModifierType.SHIFT_MASK)
            # Caps Lock alone must not select the doubled consonants
            if state & IBus.ModifierType.LOCK_MASK and not shifted:
                keyval = ord(chr(keyval).lower())
            return self.hangul.process_code(keyval, shifted)

        # Cursor movement and any other key end the syllable
        self.hangul.flush()
        return False

    def toggle_mode(self):
        self.hangul.flush()
        self.hangul_mode = not self.hangul_mode
        logger.info("Input mode: %s", "hangul" if self.hangul_mode else "latin")
        self.update_mode_prop()

    def mode_label(self):
        return "한" if self.hangul_mode else "EN"

    def update_mode_prop(self):
        if self.mode_prop is None:
            return
        label = IBus.Text.new_from_string(self.mode_label())
        self.mode_prop.set_label(label)
        self.mode_prop.set_symbol(label)
        self.update_property(self.mode_prop)

    def do_focus_in(self):
        props = IBus.PropList()
        if self.config["EnableIndicator"]:
            label = IBus.Text.new_from_string(self.mode_label())
            self.mode_prop = IBus.Property(
                key=INPUT_MODE_PROP,
                prop_type=IBus.PropType.NORMAL,
                label=label,
                symbol=label,
                tooltip=IBus.Text.new_from_string("Switch Hangul/Latin input"),
                sensitive=True,
                visible=True)
            props.append(self.mode_prop)
        self.register_properties(props)

    def do_focus_out(self):
        self.hangul.flush()

    def do_reset(self):
        # The application moved the cursor or changed the selection
        self.hangul.flush()

    def do_disable(self):
        self.hangul.flush()

    def do_property_activate(self, prop_name, state):
        if prop_name == INPUT_MODE_PROP:
            self.toggle_mode()


def component():
    comp = IBus.Component(
        name=BUS_NAME,
        description="SMK Hangul input method",
        version=__version__,
        license="Apache-2.0",
        author="",
        homepage="",
        command_line="ibus-engine-smk --ibus",
        textdomain="ibus-smk")
    comp.add_engine(IBus.EngineDesc(
        name=ENGINE_NAME,
        longname="SMK Hangul",
        description="Korean dubeolsik input method",
        language="ko",
        license="Apache-2.0",
        author="",
        icon="",
        layout="us"))
    return comp


def main(argv=None):
    parser = argparse.ArgumentParser(prog="ibus-engine-smk")
    parser.add_argument("--ibus", action="store_true",
                        help="started by ibus-daemon")
    parser.add_argument("--debug", action="store_true",
                        help="log every composition step")
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.debug else logging.INFO,
        format="%(asctime)s %(name)s %(levelname)s: %(message)s")

    IBus.init()
    bus = IBus.Bus()
    if not bus.is_connected():
        logger.error("Cannot connect to ibus-daemon")
        return 1

    main_loop = GLib.MainLoop()
    bus.connect("disconnected", lambda bus: main_loop.quit())

    factory = IBus.Factory.new(bus.get_connection())
    factory.add_engine(ENGINE_NAME, SMKEngine.__gtype__)

    if args.ibus:
        bus.request_name(BUS_NAME, 0)
    else:
        bus.register_component(component())

    main_loop.run()
    return 0


if __name__ == "__main__":
    sys.exit(main())
