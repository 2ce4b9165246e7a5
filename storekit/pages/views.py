"""
Homepage editor views (back-office).

Содержит views для:
- Списка блоков главной с drag-and-drop (reorder через JSON API)
- Добавления блока выбранного типа
- Редактирования и удаления блока
- Сдвига блока вверх/вниз
"""

from django.contrib import messages
from django.http import Http404
from django.shortcuts import redirect, render
from django.views.decorators.http import require_POST

from accounts.permissions import admin_required
from storefront.models import Product
from storekit.errors import NotFoundError, ServiceError, ValidationFailed

from . import services
from .element_types import ELEMENT_TYPES
from .models import HOMEPAGE


def _element_or_404(element_id):
    try:
        return services.get_element(HOMEPAGE, element_id)
    except (NotFoundError, ValidationFailed):
        raise Http404('Element not found')


def _form_context(element_type, form, element=None):
    return {
        'element_type': element_type,
        'form': form,
        'element': element,
        'products': Product.objects.order_by('name').only('pk', 'name', 'slug'),
    }


@admin_required
def homepage_editor(request):
    return render(request, 'backoffice/homepage_editor.html', {
        'elements': services.list_elements(HOMEPAGE),
        'element_types': ELEMENT_TYPES.values(),
        'page_identifier': HOMEPAGE,
    })


@admin_required
def element_create(request, element_type):
    definition = ELEMENT_TYPES.get(element_type)
    if definition is None:
        raise Http404('Unknown element type')

    form = definition.form_class(request.POST or None)
    if request.method == 'POST' and form.is_valid():
        try:
            services.create_element(HOMEPAGE, definition.name, form.to_config(), form.cleaned_data.get('order'))
        except ServiceError as exc:
            form.add_error(None, exc.message)
        else:
            messages.success(request, f'Блок «{definition.label}» додано')
            return redirect('homepage_editor')

    return render(request, 'backoffice/element_form.html', _form_context(definition, form))


@admin_required
def element_edit(request, element_id):
    element = _element_or_404(element_id)
    definition = ELEMENT_TYPES.get(element.element_type)
    if definition is None:
        raise Http404('Unknown element type')

    if request.method == 'POST':
        form = definition.form_class(request.POST)
        if form.is_valid():
            data = {'config': form.to_config()}
            if form.cleaned_data.get('order') is not None:
                data['order'] = form.cleaned_data['order']
            try:
                services.update_element(HOMEPAGE, element.pk, data)
            except ServiceError as exc:
                form.add_error(None, exc.message)
            else:
                messages.success(request, 'Блок оновлено')
                return redirect('homepage_editor')
    else:
        form = definition.form_class.from_config(element.config, order=element.order)

    return render(request, 'backoffice/element_form.html', _form_context(definition, form, element))


@admin_required
@require_POST
def element_delete(request, element_id):
    try:
        services.delete_element(HOMEPAGE, element_id)
    except (NotFoundError, ValidationFailed):
        raise Http404('Element not found')
    messages.success(request, 'Блок видалено')
    return redirect('homepage_editor')


@admin_required
@require_POST
def element_move(request, element_id, direction):
    try:
        moved = services.move_element(HOMEPAGE, element_id, direction)
    except NotFoundError:
        raise Http404('Element not found')
    except ServiceError as exc:
        messages.error(request, exc.message)
    else:
        if not moved:
            messages.info(request, 'Блок вже на краю сторінки')
    return redirect('homepage_editor')
