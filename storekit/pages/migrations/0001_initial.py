from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = []

    operations = [
        migrations.CreateModel(
            name='PageElement',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('page_identifier', models.CharField(db_index=True, max_length=100, verbose_name='Сторінка')),
                ('element_type', models.CharField(max_length=50, verbose_name='Тип блоку')),
                ('order', models.IntegerField(default=0, verbose_name='Порядок')),
                ('config', models.JSONField(blank=True, default=dict, verbose_name='Налаштування')),
                ('created_at', models.DateTimeField(auto_now_add=True, verbose_name='Створено')),
                ('updated_at', models.DateTimeField(auto_now=True, verbose_name='Оновлено')),
            ],
            options={
                'verbose_name': 'Блок сторінки',
                'verbose_name_plural': 'Блоки сторінки',
                'ordering': ['order', 'id'],
                'indexes': [models.Index(fields=['page_identifier', 'order'], name='idx_pageelement_page_order')],
            },
        ),
    ]
