import apps.core.utils
import django.core.validators
import django.db.models.deletion
from django.conf import settings
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name='Stage',
            fields=[
                ('id', models.CharField(default=apps.core.utils.generate_stage_id, editable=False, max_length=40, primary_key=True, serialize=False)),
                ('name', models.CharField(max_length=50)),
                ('description', models.TextField(blank=True, default='')),
                ('color', models.CharField(choices=[('gray', 'Gray'), ('yellow', 'Yellow'), ('orange', 'Orange'), ('purple', 'Purple'), ('pink', 'Pink'), ('indigo', 'Indigo'), ('emerald', 'Emerald'), ('green', 'Green'), ('blue', 'Blue'), ('red', 'Red')], default='gray', max_length=20)),
                ('sort_order', models.IntegerField(default=0)),
                ('is_default', models.BooleanField(default=False)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
                ('user', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='stages', to=settings.AUTH_USER_MODEL)),
            ],
            options={
                'db_table': 'stage',
                'ordering': ['sort_order', 'created_at'],
                'indexes': [models.Index(fields=['user', 'sort_order'], name='stage_user_sort_idx')],
            },
        ),
        migrations.CreateModel(
            name='Miniature',
            fields=[
                ('id', models.CharField(default=apps.core.utils.generate_miniature_id, editable=False, max_length=40, primary_key=True, serialize=False)),
                ('name', models.CharField(max_length=200)),
                ('description', models.TextField(blank=True, default='')),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
                ('image_url', models.URLField(blank=True, default='', max_length=500)),
                ('estimated_hours', models.DecimalField(blank=True, decimal_places=2, max_digits=6, null=True, validators=[django.core.validators.MinValueValidator(0)])),
                ('actual_hours', models.DecimalField(blank=True, decimal_places=2, max_digits=6, null=True, validators=[django.core.validators.MinValueValidator(0)])),
                ('difficulty', models.CharField(blank=True, choices=[('beginner', 'Beginner'), ('intermediate', 'Intermediate'), ('advanced', 'Advanced'), ('expert', 'Expert')], default='', max_length=20)),
                ('notes', models.TextField(blank=True, default='')),
                ('stage', models.ForeignKey(on_delete=django.db.models.deletion.RESTRICT, related_name='miniatures', to='board.stage')),
                ('user', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='miniatures', to=settings.AUTH_USER_MODEL)),
            ],
            options={
                'db_table': 'miniature',
                'ordering': ['created_at'],
                'indexes': [models.Index(fields=['user', 'stage'], name='miniature_user_stage_idx')],
            },
        ),
    ]
