"""Tests for the Agent model.

Tests verify:
1. Style scores are validated and frozen
2. Splash is applied once and only boosts its own style
3. Relative power can be shifted and reset to baseline
4. describe() formatting
"""

import pytest
from pydantic import ValidationError

from valsim.models.agent import Agent, Role, SplashStyle
from valsim.roster import create_agent


class TestAgentConstruction:
    """Tests for building agents."""

    def test_defaults(self):
        agent = Agent(
            name="Test",
            role=Role.DUELIST,
            aggro=4,
            control=3,
            midrange=2,
            baseline_relative_power=5,
        )
        assert agent.splash == SplashStyle.NONE
        assert agent.current_relative_power == 5.0
        assert agent.splash_applied is False

    def test_negative_style_rejected(self):
        with pytest.raises(ValidationError):
            Agent(
                name="Broken",
                role=Role.SENTINEL,
                aggro=-1,
                control=3,
                midrange=2,
                baseline_relative_power=5,
            )

    def test_validation_error_is_value_error(self):
        with pytest.raises(ValueError):
            Agent(name="", role=Role.SENTINEL, aggro=1, control=1, midrange=1, baseline_relative_power=1)

    def test_style_scores_are_frozen(self):
        agent = create_agent("Jett")
        with pytest.raises(ValidationError):
            agent.aggro = 1.0

    def test_key_is_lower_case(self):
        assert create_agent("KAY/O").key == "kay/o"


class TestSplash:
    """Tests for the one-off splash bonus."""

    def test_aggro_splash(self):
        """Jett: 9 aggro + 2 splash."""
        jett = create_agent("Jett")
        assert jett.true_aggro == 9.0

        assert jett.apply_splash() is True
        assert jett.true_aggro == 11.0
        assert jett.true_control == 2.0
        assert jett.true_midrange == 0.0

    def test_midrange_splash(self):
        """Fade: 5 midrange + 3 splash."""
        fade = create_agent("Fade")
        fade.apply_splash()
        assert fade.true_midrange == 8.0
        assert fade.true_aggro == 3.0

    def test_control_splash(self):
        """Cypher: 7 control + 2 splash."""
        cypher = create_agent("Cypher")
        cypher.apply_splash()
        assert cypher.true_control == 9.0

    def test_splash_is_idempotent(self):
        jett = create_agent("Jett")
        jett.apply_splash()
        assert jett.apply_splash() is False
        assert jett.true_aggro == 11.0

    def test_no_splash_agent_unchanged(self):
        omen = create_agent("Omen")
        omen.apply_splash()
        assert (omen.true_aggro, omen.true_control, omen.true_midrange) == (3.0, 6.0, 2.0)


class TestRelativePower:
    """Tests for map-driven relative power changes."""

    def test_change_and_reset(self):
        sova = create_agent("Sova")
        sova.change_relative_power(-3)
        sova.change_relative_power(1)
        assert sova.current_relative_power == 8.0
        assert sova.baseline_relative_power == 10.0

        sova.reset_relative_power()
        assert sova.current_relative_power == 10.0


class TestDescribe:
    """Tests for the one-line stat summary."""

    def test_describe_before_splash(self):
        assert create_agent("Jett").describe() == "Jett, 9.0/2.0/0.0, Relative Power: 7.0"

    def test_describe_after_splash(self):
        jett = create_agent("Jett")
        jett.apply_splash()
        assert str(jett) == "Jett, 11.0/2.0/0.0, Relative Power: 7.0"
