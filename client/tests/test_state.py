import pytest

from nothingbox_core.errors import InvalidTransition
from nothingbox_core.models import User
from nothingbox_core.state import SessionState

from conftest import make_entry

BOB = User(id="u_bob", username=None, country="France", country_code="FR", total_time=70)


def test_defaults():
    state = SessionState()
    assert state.is_loading
    assert not state.is_active
    assert state.active_tab == "global"
    assert state.show_leaderboard
    assert state.global_board == [] and state.country_board == []


def test_cannot_begin_without_user():
    state = SessionState()
    with pytest.raises(InvalidTransition):
        state.begin_session()
    assert not state.is_active


def test_cannot_tick_while_idle():
    state = SessionState()
    state.on_user_loaded(BOB)
    with pytest.raises(InvalidTransition):
        state.advance()
    assert state.session_time == 70


def test_advance_adds_exactly_one():
    state = SessionState()
    state.on_user_loaded(BOB)
    state.begin_session()
    for _ in range(12):
        state.advance()
    assert state.session_time == 82


def test_cannot_dismiss_registration_without_user():
    state = SessionState()
    state.on_registration_needed()
    with pytest.raises(InvalidTransition):
        state.on_registration_dismissed()
    assert state.show_registration


def test_new_registration_starts_from_service_total():
    state = SessionState()
    state.on_registration_needed()
    state.on_registered(User(id="u_new", username="zed", is_registered=True))
    assert state.phase == "READY"
    assert state.session_time == 0


def test_apply_leaderboards_replaces_wholesale():
    state = SessionState()
    state.apply_leaderboards({"global": [make_entry("a", 1), make_entry("b", 2)], "country": []})
    state.apply_leaderboards({"global": [make_entry("c", 3)], "country": [make_entry("d", 4)]})
    assert [e.user_id for e in state.global_board] == ["c"]
    assert [e.user_id for e in state.board_for("country")] == ["d"]
