from django import forms

from .models import ALL_DIFFICULTIES, Difficulty


class RecipeForm(forms.Form):
    """
    The fixed part of the create-recipe form.

    Ingredients and steps are variable-length and live in the session draft
    (see services.drafts); this form only covers the scalar fields.
    """
    title = forms.CharField(
        max_length=200,
        widget=forms.TextInput(attrs={"class": "form-control", "placeholder": "Recipe title"}),
    )
    description = forms.CharField(
        widget=forms.Textarea(attrs={"rows": 3, "class": "form-control"}),
    )
    cooking_time = forms.IntegerField(
        min_value=1,
        label="Cooking Time (minutes)",
        widget=forms.NumberInput(attrs={"min": 1, "class": "form-control"}),
    )
    difficulty = forms.ChoiceField(
        choices=Difficulty.choices,
        initial=Difficulty.MEDIUM,
        widget=forms.Select(attrs={"class": "form-select"}),
    )

    def clean_title(self):
        title = (self.cleaned_data.get("title") or "").strip()
        if not title:
            raise forms.ValidationError("Please enter a title.")
        return title

    def clean_description(self):
        description = (self.cleaned_data.get("description") or "").strip()
        if not description:
            raise forms.ValidationError("Please enter a description.")
        return description


class CommentForm(forms.Form):
    content = forms.CharField(
        widget=forms.Textarea(attrs={
            "rows": 3,
            "class": "form-control",
            "placeholder": "Add a comment...",
        }),
    )


class RecipeSearchForm(forms.Form):
    """Listing filters. The difficulty select submits itself on change."""

    q = forms.CharField(
        required=False,
        widget=forms.TextInput(attrs={"class": "form-control", "placeholder": "Search recipes..."}),
    )
    difficulty = forms.ChoiceField(
        required=False,
        choices=[(ALL_DIFFICULTIES, "All Difficulties"), *Difficulty.choices],
        widget=forms.Select(attrs={"class": "form-select", "onchange": "this.form.submit()"}),
    )
