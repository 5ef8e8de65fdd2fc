"""
Unit tests for the settings-backed location mode authority.
"""
import json
from unittest.mock import patch

import pytest

from locationpanel.core.authority import SettingsModeAuthority
from locationpanel.utils.config import ConfigError, ConfigManager


@pytest.fixture
def config_manager(tmp_path):
    return ConfigManager(tmp_path / "locationpanel_test.json")


@pytest.fixture
def authority(q_app, config_manager):
    a = SettingsModeAuthority(config_manager)
    yield a
    a.stop()


def record(authority):
    announcements = []
    authority.mode_changed.connect(lambda mode, restricted: announcements.append((mode, restricted)))
    return announcements


def test_defaults(authority):
    assert authority.get_current_mode() == 3
    assert authority.is_restricted() is False


def test_set_mode_persists(authority, config_manager):
    authority.set_mode(1)
    assert authority.get_current_mode() == 1
    assert ConfigManager(config_manager.config_path).load()["location_mode"] == 1


def test_announces_only_while_active(authority):
    announcements = record(authority)
    authority.set_mode(0)
    authority.refresh()
    assert announcements == []

    authority.start()
    authority.set_mode(2)
    authority.refresh()
    assert announcements == [(2, False), (2, False)]

    authority.stop()
    authority.refresh()
    assert len(announcements) == 2


def test_restricted_user_cannot_change_mode(q_app, config_manager):
    config_manager.config_path.write_text(json.dumps({"location_mode": 3, "restricted": True}), encoding="utf-8")
    authority = SettingsModeAuthority(config_manager)
    announcements = record(authority)
    authority.start()

    authority.set_mode(0)

    assert authority.get_current_mode() == 3
    assert announcements == [(3, True)]
    assert ConfigManager(config_manager.config_path).load()["location_mode"] == 3
    authority.stop()


def test_unknown_mode_is_refused(authority, config_manager):
    with patch.object(config_manager, "save") as mock_save:
        authority.set_mode(7)
    mock_save.assert_not_called()
    assert authority.get_current_mode() == 3


def test_failed_save_reverts_and_reannounces(authority, config_manager):
    announcements = record(authority)
    authority.start()
    with patch.object(config_manager, "save", side_effect=ConfigError("disk full")):
        authority.set_mode(0)
    assert authority.get_current_mode() == 3
    assert announcements == [(3, False)]


def test_external_change_is_announced(authority, config_manager):
    announcements = record(authority)
    file_changes = []
    authority.config_file_changed.connect(lambda: file_changes.append(True))
    authority.start()

    config_manager.config_path.write_text(json.dumps({"location_mode": 0, "restricted": True}), encoding="utf-8")
    authority._on_file_changed(str(config_manager.config_path))

    assert announcements == [(0, True)]
    assert file_changes == [True]
    assert authority.get_current_mode() == 0


def test_external_change_without_mode_change_is_quiet(authority, config_manager):
    announcements = record(authority)
    authority.start()
    authority._on_file_changed(str(config_manager.config_path))
    assert announcements == []


def test_start_and_stop_are_idempotent(authority):
    authority.start()
    authority.start()
    assert authority.active
    authority.stop()
    authority.stop()
    assert not authority.active
