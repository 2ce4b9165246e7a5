"""
Forms для редактора главной: по одной на тип блока.

Каждая форма умеет собрать config (to_config) и заполниться из него
(from_config). Ключи config остаются в camelCase, как их читают шаблоны.
"""

from django import forms


class ElementConfigForm(forms.Form):
    order = forms.IntegerField(
        label="Порядок",
        required=False,
        help_text="Порожньо = в кінець сторінки",
        widget=forms.NumberInput(attrs={"class": "form-control"})
    )

    # имя поля формы -> ключ config
    config_keys = {}

    @classmethod
    def from_config(cls, config, order=None, **kwargs):
        initial = {field: (config or {}).get(key, '') for field, key in cls.config_keys.items()}
        initial['order'] = order
        return cls(initial=initial, **kwargs)

    def to_config(self):
        return {key: self.cleaned_data.get(field) or '' for field, key in self.config_keys.items()}


class HeroBannerForm(ElementConfigForm):
    title = forms.CharField(label="Заголовок", max_length=200,
                            widget=forms.TextInput(attrs={"class": "form-control"}))
    subtitle = forms.CharField(label="Підзаголовок", max_length=300, required=False,
                               widget=forms.TextInput(attrs={"class": "form-control"}))
    image_url = forms.CharField(label="URL зображення", max_length=500, required=False,
                                widget=forms.URLInput(attrs={"class": "form-control"}))
    button_text = forms.CharField(label="Текст кнопки", max_length=100, required=False,
                                  widget=forms.TextInput(attrs={"class": "form-control"}))
    button_link = forms.CharField(label="Посилання кнопки", max_length=500, required=False,
                                  widget=forms.TextInput(attrs={"class": "form-control"}))

    config_keys = {
        'title': 'title',
        'subtitle': 'subtitle',
        'image_url': 'imageUrl',
        'button_text': 'buttonText',
        'button_link': 'buttonLink',
    }


class ProductCarouselForm(ElementConfigForm):
    title = forms.CharField(label="Заголовок", max_length=200,
                            widget=forms.TextInput(attrs={"class": "form-control"}))
    product_ids = forms.CharField(
        label="ID товарів (через кому, у порядку показу)",
        required=False,
        widget=forms.TextInput(attrs={"class": "form-control", "placeholder": "12, 7, 31"})
    )

    config_keys = {'title': 'title'}

    @classmethod
    def from_config(cls, config, order=None, **kwargs):
        form = super().from_config(config, order=order, **kwargs)
        form.initial['product_ids'] = ', '.join(str(pk) for pk in (config or {}).get('productIds', []))
        return form

    def clean_product_ids(self):
        raw = self.cleaned_data.get('product_ids') or ''
        ids = []
        for part in raw.split(','):
            part = part.strip()
            if not part:
                continue
            if not part.isdigit() or int(part) < 1:
                raise forms.ValidationError(f"Некоректний ID товару: {part}")
            ids.append(int(part))
        return ids

    def to_config(self):
        config = super().to_config()
        config['productIds'] = self.cleaned_data.get('product_ids') or []
        return config


class TextBlockForm(ElementConfigForm):
    content = forms.CharField(label="Текст", widget=forms.Textarea(attrs={"rows": 8, "class": "form-control"}))

    config_keys = {'content': 'content'}
