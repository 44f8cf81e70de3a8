"""Tests for the shared Tailwind form styling."""

from django import forms

from accounts.forms import ERROR_CLASSES, TailwindFormMixin


class SampleForm(TailwindFormMixin, forms.Form):
    nom = forms.CharField()
    montant = forms.DecimalField()
    notes = forms.CharField(widget=forms.Textarea, required=False)
    urgent = forms.BooleanField(required=False)


class TestTailwindFormMixin:
    def test_classes_per_widget(self):
        form = SampleForm()
        assert "text-right" in form.fields["montant"].widget.attrs["class"]
        assert "resize-y" in form.fields["notes"].widget.attrs["class"]
        assert "h-4 w-4" in form.fields["urgent"].widget.attrs["class"]
        assert form.fields["nom"].widget.attrs["class"].startswith("w-full")

    def test_invalid_fields_are_flagged(self):
        form = SampleForm(data={"nom": "", "montant": "abc"})
        assert not form.is_valid()
        assert ERROR_CLASSES in form.fields["montant"].widget.attrs["class"]
        assert form.fields["nom"].widget.attrs["aria-invalid"] == "true"
        assert "aria-invalid" not in form.fields["notes"].widget.attrs

    def test_explicit_class_is_kept(self):
        class Custom(TailwindFormMixin, forms.Form):
            code = forms.CharField(widget=forms.TextInput(attrs={"class": "font-mono"}))

        assert Custom().fields["code"].widget.attrs["class"] == "font-mono"
