"""Tailwind styling shared by the back-office forms."""

from django import forms

_BASE = (
    "w-full border rounded-lg px-3 py-2 text-sm "
    "focus:outline-none focus:ring-2 focus:ring-indigo-500 focus:border-transparent"
)

# First match wins; NumberInput before the generic fallback so amounts align right
WIDGET_CLASSES = [
    (forms.CheckboxInput, "rounded border-gray-300 text-indigo-600 focus:ring-indigo-500 h-4 w-4"),
    (forms.Textarea, _BASE + " border-gray-300 resize-y"),
    ((forms.Select, forms.SelectMultiple), _BASE + " border-gray-300 bg-white"),
    (forms.NumberInput, _BASE + " border-gray-300 text-right"),
]
ERROR_CLASSES = "border-red-500 bg-red-50"


def widget_classes(widget):
    for widget_type, classes in WIDGET_CLASSES:
        if isinstance(widget, widget_type):
            return classes
    return _BASE + " border-gray-300"


class TailwindFormMixin:
    """Styles every widget and outlines fields that failed validation in red."""

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        for field in self.fields.values():
            field.widget.attrs.setdefault("class", widget_classes(field.widget))

    def full_clean(self):
        super().full_clean()
        for name in self.errors:
            field = self.fields.get(name)
            if field is None:
                continue
            field.widget.attrs["class"] = f"{field.widget.attrs.get('class', '')} {ERROR_CLASSES}".strip()
            field.widget.attrs["aria-invalid"] = "true"
