# apps/core/management/commands/seed.py

from django.core.exceptions import ValidationError
from django.core.management.base import BaseCommand, CommandError
from django.db import connection, transaction

from apps.board.schemas import MiniatureDraft
from apps.board.services import miniature_service, stage_service
from apps.core.auth_service import auth_service
from apps.core.models import User

# (nome, descrição, índice do estágio padrão)
MINIATURAS_EXEMPLO = [
    ('Space Marine Captain', 'Primaris captain with power sword', 0),
    ('Necron Warriors x10', 'Squad of ten warriors', 1),
    ('Ork Boyz', 'Mob of twenty boyz', 2),
    ('Eldar Farseer', 'Character model, lots of freehand', 3),
    ('Tyranid Hive Tyrant', 'Large centerpiece model', 4),
    ('Stormcast Liberators', 'Five models with hammers', 5),
    ('Dwarf Ironbreakers', 'Heavy armour, metallics', 6),
    ('Plague Marine Champion', 'Rust and grime weathering', 7),
]


class Command(BaseCommand):
    help = 'Cria usuário de demonstração com estágios padrão e miniaturas de exemplo'

    def add_arguments(self, parser):
        parser.add_argument('--email', default='demo@mymini.local')
        parser.add_argument('--username', default='demo')
        parser.add_argument('--password', default='demo12345')
        parser.add_argument(
            '--reset',
            action='store_true',
            help='Remove o usuário de demonstração existente antes de recriar'
        )

    def handle(self, *args, **options):
        self.stdout.write('🌱 Populando dados de demonstração...')

        self._testar_conectividade_banco()

        email = options['email'].strip().lower()
        existente = User.objects.filter(email=email).first()

        if existente and not options['reset']:
            self.stdout.write(self.style.WARNING(
                f'⚠️  Usuário {email} já existe. Use --reset para recriar.'
            ))
            return

        with transaction.atomic():
            if existente:
                existente.delete()
                self.stdout.write('  🗑️  Usuário anterior removido')

            try:
                user, token = auth_service.register(email, options['username'], options['password'])
            except ValidationError as e:
                raise CommandError(f'Não foi possível criar o usuário: {"; ".join(e.messages)}')

            stages = stage_service.list_or_initialize(user)
            self.stdout.write(f'  ✅ {len(stages)} estágios padrão')

            for nome, descricao, indice in MINIATURAS_EXEMPLO:
                stage = stages[min(indice, len(stages) - 1)]
                miniature_service.create(user, MiniatureDraft(
                    name=nome,
                    description=descricao,
                    stage_id=stage.id,
                ))
            self.stdout.write(f'  ✅ {len(MINIATURAS_EXEMPLO)} miniaturas de exemplo')

        self.stdout.write(
            self.style.SUCCESS(
                '\n✅ DADOS DE DEMONSTRAÇÃO CRIADOS!\n'
                f'  📧 Email: {email}\n'
                f'  🔑 Senha: {options["password"]}\n'
                f'  🎫 Token: {token}\n'
            )
        )

    def _testar_conectividade_banco(self):
        """Testa conectividade básica"""
        self.stdout.write('  🔗 Testando conectividade do banco...')

        with connection.cursor() as cursor:
            cursor.execute("SELECT 1")
            result = cursor.fetchone()

        if result[0] != 1:
            raise CommandError("Banco não está respondendo corretamente")
