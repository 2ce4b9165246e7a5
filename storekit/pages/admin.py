from django.contrib import admin

from .models import PageElement


@admin.register(PageElement)
class PageElementAdmin(admin.ModelAdmin):
    list_display = ('id', 'page_identifier', 'element_type', 'order', 'updated_at')
    list_filter = ('page_identifier', 'element_type')
    ordering = ('page_identifier', 'order', 'id')
