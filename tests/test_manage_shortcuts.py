# tests/test_manage_shortcuts.py

import json
from unittest import mock

import pytest

import manage
from apps.core.models import User

pytestmark = pytest.mark.django_db


def test_only_project_shortcuts_are_exposed():
    assert set(manage.SHORTCUTS) == {'setup', 'backup', 'reset'}


def test_backup_exports_tracker_data(tmp_path, monkeypatch):
    User.objects.create_user('pintor', 'pintor@example.com', 'segredo123')
    monkeypatch.chdir(tmp_path)

    manage.backup()

    [backup_file] = tmp_path.glob('backup_tracker_*.json')
    models = {entry['model'] for entry in json.loads(backup_file.read_text())}
    assert {'core.user', 'board.stage'} <= models


def test_reset_requires_confirmation():
    with mock.patch('builtins.input', return_value='n'), \
            mock.patch('django.core.management.call_command') as call_command:
        manage.reset()

    call_command.assert_not_called()


def test_reset_recreates_demo_data():
    with mock.patch('builtins.input', return_value='y'), \
            mock.patch('django.core.management.call_command') as call_command:
        manage.reset()

    assert [c.args[0] for c in call_command.call_args_list] == ['flush', 'migrate', 'seed']
    call_command.assert_called_with('seed', reset=True)


def test_setup_creates_superuser_and_seeds():
    with mock.patch('django.core.management.call_command') as call_command:
        manage.setup()

    assert User.objects.filter(username='admin', is_superuser=True).exists()
    call_command.assert_called_with('seed', reset=True)
