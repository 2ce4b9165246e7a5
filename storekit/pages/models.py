from django.db import models

HOMEPAGE = 'homepage'


class PageElement(models.Model):
    """
    Блок конструктора страницы.

    page_identifier группирует блоки одной страницы ('homepage'),
    element_type ссылается на реестр pages.element_types, config хранит
    параметры блока как JSON-объект.
    """
    page_identifier = models.CharField(max_length=100, db_index=True, verbose_name='Сторінка')
    element_type = models.CharField(max_length=50, verbose_name='Тип блоку')
    order = models.IntegerField(default=0, verbose_name='Порядок')
    config = models.JSONField(default=dict, blank=True, verbose_name='Налаштування')
    created_at = models.DateTimeField(auto_now_add=True, verbose_name='Створено')
    updated_at = models.DateTimeField(auto_now=True, verbose_name='Оновлено')

    class Meta:
        verbose_name = 'Блок сторінки'
        verbose_name_plural = 'Блоки сторінки'
        ordering = ['order', 'id']
        indexes = [
            models.Index(fields=['page_identifier', 'order'], name='idx_pageelement_page_order'),
        ]

    def __str__(self):
        return f'{self.page_identifier}:{self.element_type}#{self.order}'
