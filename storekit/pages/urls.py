"""
Back-office URLs редактора главной (подключаются под /backoffice/homepage/).
"""
from django.urls import path

from . import views

urlpatterns = [
    path('', views.homepage_editor, name='homepage_editor'),
    path('add/<str:element_type>/', views.element_create, name='homepage_element_create'),
    path('<int:element_id>/edit/', views.element_edit, name='homepage_element_edit'),
    path('<int:element_id>/delete/', views.element_delete, name='homepage_element_delete'),
    path('<int:element_id>/move/<str:direction>/', views.element_move, name='homepage_element_move'),
]
