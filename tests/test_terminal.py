import io
import os

import pytest

from feed_pager import terminal
from feed_pager.navigation import Action, action_for_key
from feed_pager.terminal import key_name


def test_arrow_sequences_map_to_bound_names():
    assert key_name("\x1b", "[C") == "right"
    assert key_name("\x1b", "[D") == "left"
    assert key_name("\x1b", "OA") == "up"
    assert action_for_key(key_name("\x1b", "[C")) is Action.MOVE_RIGHT


def test_bare_escape_quits():
    assert key_name("\x1b") == "esc"
    assert action_for_key(key_name("\x1b")) is Action.QUIT


def test_paging_sequences():
    assert key_name("\x1b", "[5~") == "pgup"
    assert key_name("\x1b", "[6~") == "pgdown"
    assert key_name(" ") == "space"


def test_control_characters():
    assert key_name("\x03") == "ctrl+c"
    assert key_name("\x15") == "ctrl+u"
    assert action_for_key(key_name("\x04")) is Action.HALF_PAGE_DOWN


def test_printable_keys_pass_through():
    assert key_name("l") == "l"
    assert key_name("?") == "?"


def test_wheel_reports_map_to_scrolling():
    assert key_name("\x1b", "[<64;10;5M") == "wheelup"
    assert key_name("\x1b", "[<65;10;5M") == "wheeldown"
    assert action_for_key(key_name("\x1b", "[<64;10;5M")) is Action.SCROLL_UP
    assert action_for_key(key_name("\x1b", "[<65;10;5M")) is Action.SCROLL_DOWN


def test_other_mouse_reports_are_unbound():
    assert key_name("\x1b", "[<0;10;5M") == "mouse"
    assert key_name("\x1b", "[<64;10;5m") == "mouse"
    assert action_for_key("mouse") is None


def test_mouse_sequences_read_past_six_characters():
    assert not terminal._sequence_complete("[<64;1")
    assert not terminal._sequence_complete("[<64;10;5")
    assert terminal._sequence_complete("[<64;10;5M")
    assert terminal._sequence_complete("[5~")
    assert terminal._sequence_complete("[A")


def test_mouse_reporting_is_switched_off_on_exit():
    output = io.StringIO()
    with open(os.devnull) as devnull:
        term = terminal.Terminal(devnull)
        with pytest.raises(RuntimeError):
            with term.mouse_reporting(output):
                assert output.getvalue() == terminal.MOUSE_ON
                raise RuntimeError("boom")

    assert output.getvalue() == terminal.MOUSE_ON + terminal.MOUSE_OFF
