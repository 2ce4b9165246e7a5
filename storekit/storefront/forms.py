from django import forms

from .models import AttributeDefinition, Category, Product, ProductImage, Tag


# Виджет с поддержкой множественной загрузки
class MultiFileInput(forms.ClearableFileInput):
    allow_multiple_selected = True


# Поле, умеющее принимать список файлов (или пусто) без ошибки "No file was submitted"
class MultiFileField(forms.ImageField):
    def clean(self, data, initial=None):
        # Пустое значение: это ок для required=False
        if not data:
            return []
        # Если пришёл список/кортеж, валидируем каждый файл как обычный ImageField
        if isinstance(data, (list, tuple)):
            cleaned = []
            errors = []
            for f in data:
                try:
                    cleaned.append(super().clean(f, initial))
                except forms.ValidationError as e:
                    errors.extend(e.error_list)
            if errors:
                raise forms.ValidationError(errors)
            return cleaned
        # Одиночный файл (на случай, если браузер не поддерживает multiple)
        return [super().clean(data, initial)]


class CategoryForm(forms.Form):
    name = forms.CharField(
        label="Назва",
        max_length=200,
        widget=forms.TextInput(attrs={"class": "form-control"})
    )
    parent = forms.ModelChoiceField(
        label="Батьківська категорія",
        queryset=Category.objects.order_by('name'),
        required=False,
        empty_label="— верхній рівень —",
        widget=forms.Select(attrs={"class": "form-control"})
    )

    def __init__(self, *args, instance=None, **kwargs):
        if instance is not None:
            kwargs.setdefault('initial', {'name': instance.name, 'parent': instance.parent_id})
        super().__init__(*args, **kwargs)
        if instance is not None and instance.pk:
            self.fields['parent'].queryset = Category.objects.exclude(pk=instance.pk).order_by('name')

    def to_service_data(self):
        parent = self.cleaned_data.get('parent')
        return {'name': self.cleaned_data['name'], 'parent': parent.pk if parent else ''}


class TagForm(forms.Form):
    name = forms.CharField(
        label="Назва",
        max_length=200,
        widget=forms.TextInput(attrs={"class": "form-control"})
    )

    def to_service_data(self):
        return {'name': self.cleaned_data['name']}


class AttributeDefinitionForm(forms.Form):
    name = forms.CharField(
        label="Назва атрибута",
        max_length=100,
        widget=forms.TextInput(attrs={"class": "form-control"})
    )
    possible_values = forms.CharField(
        label="Можливі значення (через кому)",
        required=False,
        widget=forms.TextInput(attrs={"class": "form-control", "placeholder": "S, M, L"})
    )

    def __init__(self, *args, instance=None, **kwargs):
        if instance is not None:
            kwargs.setdefault('initial', {
                'name': instance.name,
                'possible_values': ', '.join(instance.possible_values or []),
            })
        super().__init__(*args, **kwargs)

    def to_service_data(self):
        return {
            'name': self.cleaned_data['name'],
            'possible_values': self.cleaned_data.get('possible_values', ''),
        }


class ProductForm(forms.ModelForm):
    """
    Форма товара для back-office.

    Поля attr_<id> добавляются динамически по AttributeDefinition: Select,
    если у атрибута есть possible_values, иначе текстовое поле.
    """
    # множественный аплоад: безопасно обрабатываем список файлов
    extra_images = MultiFileField(
        label="Зображення",
        required=False,
        widget=MultiFileInput(attrs={
            "multiple": True,
            "accept": "image/*",
            "class": "form-control"
        })
    )
    remove_images = forms.ModelMultipleChoiceField(
        label="Видалити зображення",
        queryset=ProductImage.objects.none(),
        required=False,
        widget=forms.CheckboxSelectMultiple,
    )

    class Meta:
        model = Product
        fields = ["name", "description", "price", "stock_quantity", "category", "tags"]
        widgets = {
            "name": forms.TextInput(attrs={"class": "form-control"}),
            "description": forms.Textarea(attrs={"rows": 6, "class": "form-control"}),
            "price": forms.NumberInput(attrs={"class": "form-control", "step": "0.01", "min": "0"}),
            "stock_quantity": forms.NumberInput(attrs={"class": "form-control", "min": "0"}),
            "category": forms.Select(attrs={"class": "form-control"}),
            "tags": forms.CheckboxSelectMultiple,
        }

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self.fields['category'].queryset = Category.objects.order_by('name')
        self.fields['tags'].queryset = Tag.objects.order_by('name')

        if self.instance.pk:
            self.fields['remove_images'].queryset = self.instance.images.all()
            current = {
                attr.definition_id: attr.value
                for attr in self.instance.custom_attributes.all()
            }
        else:
            current = {}

        self.attribute_definitions = list(AttributeDefinition.objects.order_by('name'))
        for definition in self.attribute_definitions:
            field_name = f'attr_{definition.pk}'
            if definition.possible_values:
                choices = [('', '—')] + [(value, value) for value in definition.possible_values]
                self.fields[field_name] = forms.ChoiceField(
                    label=definition.name,
                    choices=choices,
                    required=False,
                    widget=forms.Select(attrs={"class": "form-control"}),
                )
            else:
                self.fields[field_name] = forms.CharField(
                    label=definition.name,
                    max_length=255,
                    required=False,
                    widget=forms.TextInput(attrs={"class": "form-control"}),
                )
            if definition.pk in current:
                self.initial[field_name] = current[definition.pk]

    def attribute_fields(self):
        return [self[f'attr_{definition.pk}'] for definition in self.attribute_definitions]

    def to_service_data(self):
        data = self.cleaned_data
        category = data.get('category')
        payload = {
            'name': data['name'],
            'description': data.get('description') or '',
            'price': str(data['price']),
            'stock_quantity': data.get('stock_quantity') or 0,
            'category': category.pk if category else '',
            'tags': [tag.pk for tag in data.get('tags') or []],
            'custom_attributes': [
                {'definition': definition.pk, 'value': data.get(f'attr_{definition.pk}') or ''}
                for definition in self.attribute_definitions
            ],
        }
        if self.instance.pk:
            removed = {image.pk for image in data.get('remove_images') or []}
            payload['keep_images'] = [
                pk for pk in self.instance.images.values_list('pk', flat=True) if pk not in removed
            ]
        return payload
