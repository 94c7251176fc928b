"""Tests for the session phase machine."""

import pytest

from engine.npc import NpcDecision
from engine.session import GameSession, Phase


def _position_of(event, origin_index: int) -> int:
    for position, option in enumerate(event.presented_options, start=1):
        if option.origin_index == origin_index:
            return position
    raise AssertionError(origin_index)


@pytest.fixture
def make_session(small_catalog, scripted):
    def _make(*draws, config=None) -> GameSession:
        session = GameSession(
            config=config,
            catalog=small_catalog,
            rng=scripted(*draws, seed=11),
            clock=lambda: 0.0,
        )
        assert session.start("Test")
        return session

    return _make


class TestStart:
    def test_blank_name_is_refused(self, small_catalog):
        session = GameSession(catalog=small_catalog)
        assert session.start("   ") is False
        assert session.phase is Phase.START
        assert session.state is None

    def test_commands_before_start_are_ignored(self, small_catalog):
        session = GameSession(catalog=small_catalog)
        assert session.choose(1) is None
        assert session.probe_npc(0) is None
        assert session.end_day() is Phase.START
        assert session.accept_promotion() is None

    def test_start_enters_event_phase(self, make_session):
        session = make_session()
        assert session.phase is Phase.EVENT
        assert session.state.player.name == "Test"

    def test_restart(self, make_session):
        session = make_session()
        session.choose(1)
        session.restart()
        assert session.phase is Phase.START
        assert session.state is None
        assert session.start("Again")
        assert session.state.player.skill == 0


class TestDayFlow:
    def test_plain_day_advances(self, make_session):
        session = make_session()
        state = session.state
        session.choose(_position_of(state.today_event, 1))
        assert session.message == "📖 story 1"
        assert session.end_day() is Phase.EVENT
        assert state.day == 2

    def test_zero_stress_death_over_two_days(self, make_session):
        session = make_session(0.5, 0.1)
        assert session.end_day() is Phase.EVENT
        assert session.state.player.zero_stress_streak == 1

        assert session.end_day() is Phase.GAME_OVER
        player = session.state.player
        assert not player.alive
        assert player.died_from_zero_stress
        assert session.message.startswith("【你这样子天天都没有压力，跟咸鱼有什么分别？？？？】")
        assert "天数: 1" in session.message
        assert "游玩时间: 0:00:00" in session.message
        assert "修仙境界: 凡人境" in session.message

    def test_game_over_blocks_commands(self, make_session):
        session = make_session(0.0)
        session.state.player.skill = -1
        session.end_day()
        assert session.phase is Phase.GAME_OVER
        assert session.choose(1) is None
        assert session.probe_npc(0) is None
        assert session.end_day() is Phase.GAME_OVER
        session.restart()
        assert session.phase is Phase.START


class TestPromotion:
    def _ready(self, session):
        session.choose(_position_of(session.state.today_event, 0))
        return session.end_day()

    def test_promotion_prompt(self, make_session):
        session = make_session()
        assert self._ready(session) is Phase.PROMOTION
        assert "失败率: 5%" in session.message
        assert session.state.day == 1

    def test_successful_promotion(self, make_session):
        session = make_session(0.999, 0.5)
        self._ready(session)
        result = session.accept_promotion()
        assert result.success
        assert session.message == "恭喜晋升到炼气期阶！"
        assert session.phase is Phase.EVENT
        assert session.state.day == 2
        assert session.state.player.tier_level == 2

    def test_failed_promotion_can_be_rolled_again(self, make_session):
        session = make_session(0.999, 0.0, 0.0)
        self._ready(session)
        first = session.accept_promotion()
        assert not first.success
        assert session.phase is Phase.PROMOTION
        assert session.state.player.skill == 30
        assert session.state.player.promotion_attempts == 1

        second = session.accept_promotion()
        assert second is not None
        assert not second.success
        assert second.skill_lost == 15
        assert session.state.player.skill == 15
        assert session.state.player.promotion_attempts == 2
        assert session.phase is Phase.PROMOTION
        assert session.state.day == 1

    def test_retry_after_failure_can_succeed_below_requirement(self, make_session):
        session = make_session(0.999, 0.0, 0.5)
        self._ready(session)
        session.accept_promotion()
        assert not session.state.player.can_promote()

        result = session.accept_promotion()
        assert result.success
        player = session.state.player
        assert player.tier_level == 2
        assert player.promotion_attempts == 0
        assert session.phase is Phase.EVENT
        assert session.state.day == 2

    def test_decline_after_failure(self, make_session):
        session = make_session(0.999, 0.0)
        self._ready(session)
        session.accept_promotion()
        session.decline_promotion()
        assert session.phase is Phase.EVENT
        assert session.state.day == 2
        assert session.state.player.promotion_attempts == 1

    def test_decline_outside_promotion_is_ignored(self, make_session):
        session = make_session()
        session.decline_promotion()
        assert session.state.day == 1


class TestWeeklyPhase:
    def test_weekly_event_interrupts_the_day(self, make_session):
        session = make_session(config={"game": {"days_per_week": 2}})
        state = session.state
        session.choose(_position_of(state.today_event, 1))
        assert session.end_day() is Phase.EVENT
        assert state.weekly_event is not None

        session.choose(_position_of(state.today_event, 1))
        assert session.phase is Phase.WEEKLY_EVENT
        assert session.message.endswith("⚠️ 周事件触发：weekly 0")
        assert not session.can_advance()
        assert session.end_day() is Phase.WEEKLY_EVENT

        assert session.probe_npc(0) is not None
        assert session.resolve_npc(NpcDecision.REJECT) is not None

        outcome = session.choose(_position_of(state.weekly_event, 1))
        assert outcome.applied
        assert session.phase is Phase.EVENT
        assert session.message.endswith("周事件完成！")
        assert state.weekly_event is None

    def test_invalid_weekly_position_keeps_phase(self, make_session):
        session = make_session(config={"game": {"days_per_week": 2}})
        session.choose(_position_of(session.state.today_event, 1))
        session.end_day()
        session.choose(_position_of(session.state.today_event, 1))
        assert session.choose(7) is None
        assert session.phase is Phase.WEEKLY_EVENT
