# tests/test_seed_and_signals.py

from io import StringIO

import pytest
from django.core.management import call_command

from apps.board.models import Miniature, Stage
from apps.core.models import User

pytestmark = pytest.mark.django_db


def test_new_user_gets_default_stages():
    user = User.objects.create_user('Admin', 'Admin@Example.com', 'segredo123')

    assert user.username == 'admin'
    assert user.email == 'admin@example.com'
    assert user.id.startswith('user_')
    assert Stage.objects.filter(user=user, is_default=True).count() == 8


def test_deleting_user_removes_stages_and_miniatures():
    user = User.objects.create_user('pintor', 'pintor@example.com', 'segredo123')
    stage = Stage.objects.filter(user=user).first()
    Miniature.objects.create(user=user, stage=stage, name='Knight')

    user.delete()

    assert Stage.objects.count() == 0
    assert Miniature.objects.count() == 0


def test_seed_creates_demo_user():
    out = StringIO()

    call_command('seed', stdout=out)

    user = User.objects.get(email='demo@mymini.local')
    assert Stage.objects.filter(user=user).count() == 8
    assert Miniature.objects.filter(user=user).count() == 8
    assert 'DADOS DE DEMONSTRAÇÃO CRIADOS' in out.getvalue()


def test_seed_does_not_duplicate_without_reset():
    call_command('seed', stdout=StringIO())
    out = StringIO()

    call_command('seed', stdout=out)

    assert User.objects.filter(email='demo@mymini.local').count() == 1
    assert 'Use --reset' in out.getvalue()


def test_seed_reset_recreates_user():
    call_command('seed', stdout=StringIO())
    first_id = User.objects.get(email='demo@mymini.local').id

    call_command('seed', '--reset', stdout=StringIO())

    user = User.objects.get(email='demo@mymini.local')
    assert user.id != first_id
    assert Miniature.objects.filter(user=user).count() == 8
