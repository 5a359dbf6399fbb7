"""Tests for LevelService."""

import asyncio
import logging

import pytest

from services import LevelService
from utils.exceptions import ServiceError


@pytest.fixture
def level_service(provider):
    asyncio.run(provider.sync_all())
    return LevelService(gamedata_provider=provider)


def test_activity_level_uses_activity_name(level_service):
    info = level_service.describe_level("ID_ACT1", "S1", "act1")

    assert info.stage_id == "act1"
    assert info.stage_name == "Stage One"
    assert info.zone_name == "Act One"
    assert info.activity_name == "Side Story One"
    assert info.category == "Side Story One"


def test_tower_level_uses_tower_name(level_service):
    info = level_service.describe_level("Obt/Tower/level_tower_n_1_1", "LT-1")

    assert info.zone_type == "CLIMB_TOWER"
    assert info.tower_name == "Tower One"
    assert info.activity_name is None
    assert info.category == "Tower One"


def test_mainline_level_uses_zone_type(level_service):
    info = level_service.describe_level("obt/main/level_main_01-07", "1-7")

    assert info.code == "1-7"
    assert info.zone_name == "Episode 01 Dark Age"
    assert info.category == "MAINLINE"


def test_stage_without_zone_keeps_stage_fields(level_service, caplog):
    with caplog.at_level(logging.ERROR):
        info = level_service.describe_level("", "R1", "camp_r_01")

    assert info.stage_name == "Campaign"
    assert info.zone_name is None
    assert info.category is None
    assert "Zone not found" in caplog.text


def test_unknown_level_returns_minimal_info(level_service, caplog):
    with caplog.at_level(logging.WARNING):
        info = level_service.describe_level("ID_NOPE", "X-1", "nope")

    assert info.level_id == "ID_NOPE"
    assert info.code == "X-1"
    assert info.stage_name is None
    assert info.category is None
    assert "ID_NOPE" in caplog.text


def test_describe_operators(level_service):
    names = level_service.describe_operators(
        ["char_002_amiya", "char_1_243", "token_10000_silent_healrb"]
    )

    assert names == {
        "char_002_amiya": "Amiya",
        "char_1_243": "Operator 243",
        "token_10000_silent_healrb": None,
    }


def test_level_or_stage_id_required(level_service):
    with pytest.raises(ServiceError):
        level_service.describe_level("", "1-7", None)


def test_missing_level_id_falls_back_to_stage_id(level_service):
    info = level_service.describe_level(None, "S1", "act1")

    assert info.level_id is None
    assert info.stage_id == "act1"
    assert info.stage_name == "Stage One"
    assert info.category == "Side Story One"


def test_none_level_and_stage_id_rejected(level_service):
    with pytest.raises(ServiceError):
        level_service.describe_level(None, "1-7", None)
