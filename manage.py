#!/usr/bin/env python
"""
Django's command-line utility for administrative tasks.

MyMini Tracker - Acompanhamento de pintura de miniaturas

Atalhos além dos comandos do Django:
    python manage.py setup     migrações, estáticos, superusuário e dados demo
    python manage.py backup    exporta usuários, estágios e miniaturas em JSON
    python manage.py reset     apaga tudo e recria os dados demo
"""

import os
import sys
from datetime import datetime

ADMIN_CREDENTIALS = ('admin', 'admin@mymini.local', 'admin123')
BACKUP_APPS = ('core', 'board')


# === ATALHOS ===

def setup():
    from django.core.management import call_command
    from apps.core.models import User

    print("🚀 Configurando MyMini Tracker...")
    call_command('migrate', interactive=False)
    call_command('collectstatic', interactive=False, verbosity=0)

    username, email, password = ADMIN_CREDENTIALS
    if not User.objects.filter(is_superuser=True).exists():
        User.objects.create_superuser(username, email, password)
        print(f"👤 Superusuário criado: {username}/{password}")

    # O seed cria o usuário demo com os estágios padrão e miniaturas de exemplo
    call_command('seed', reset=True)
    print("✅ Setup concluído!")


def backup():
    from django.core.management import call_command

    backup_file = f"backup_tracker_{datetime.now():%Y%m%d_%H%M%S}.json"
    call_command('dumpdata', *BACKUP_APPS, indent=2, output=backup_file)
    print(f"✅ Backup criado: {backup_file}")


def reset():
    from django.core.management import call_command

    confirm = input("⚠️  Isso irá apagar TODOS os dados. Continuar? (y/N): ")
    if confirm.lower() != 'y':
        return

    print("🗑️  Resetando banco de dados...")
    call_command('flush', interactive=False)
    call_command('migrate', interactive=False)
    call_command('seed', reset=True)
    print("✅ Reset concluído!")


SHORTCUTS = {
    'setup': setup,
    'backup': backup,
    'reset': reset,
}


def main():
    """Run administrative tasks."""

    # Configuração padrão para desenvolvimento
    os.environ.setdefault('DJANGO_SETTINGS_MODULE', 'config.settings.development')

    try:
        import django
        from django.core.management import CommandError, execute_from_command_line
    except ImportError as exc:
        raise ImportError(
            "Couldn't import Django. Are you sure it's installed and "
            "available on your PYTHONPATH environment variable? Did you "
            "forget to activate a virtual environment?"
        ) from exc

    shortcut = SHORTCUTS.get(sys.argv[1]) if len(sys.argv) > 1 else None
    if shortcut is None:
        execute_from_command_line(sys.argv)
        return

    django.setup()
    try:
        shortcut()
    except CommandError as e:
        print(f"❌ {e}")
        sys.exit(1)


if __name__ == '__main__':
    main()
