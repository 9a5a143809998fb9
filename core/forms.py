from django import forms

from .models import PropertyType, Room, StaffUser


# --- 1. PROPERTY TYPE FORM ---
class PropertyTypeForm(forms.ModelForm):
    class Meta:
        model = PropertyType
        fields = "__all__"
        widgets = {
            "check_in_time": forms.TimeInput(attrs={"type": "time"}),
            "check_out_time": forms.TimeInput(attrs={"type": "time"}),
            "rules_and_regulations": forms.Textarea(attrs={"rows": 4}),
            "wifi_details": forms.Textarea(attrs={"rows": 2}),
        }

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        # Rooms are generated once at creation
        if self.instance.pk and "room_prefix" in self.fields:
            self.fields["room_prefix"].disabled = True

    def clean_room_prefix(self):
        return (self.cleaned_data.get("room_prefix") or "").strip().upper()


class RoomForm(forms.ModelForm):
    class Meta:
        model = Room
        fields = ("room_number", "is_available")

    def clean_room_number(self):
        room_number = (self.cleaned_data.get("room_number") or "").strip().upper()
        if not room_number:
            raise forms.ValidationError("Room number cannot be empty.")
        return room_number


# --- 2. BOOKING REQUEST REVIEW ---
class BookingReviewForm(forms.Form):
    admin_notes = forms.CharField(
        required=False,
        label="Admin Notes",
        help_text="Required when rejecting. Shared with the agent.",
        widget=forms.Textarea(attrs={"rows": 3, "class": "vLargeTextField"}),
    )


# --- 3. STAFF ACCOUNT FORM ---
class StaffUserForm(forms.ModelForm):
    password = forms.CharField(
        required=False,
        strip=False,
        widget=forms.PasswordInput(render_value=False),
        help_text="Leave blank to keep the current password.",
    )

    class Meta:
        model = StaffUser
        fields = ("email", "password", "full_name", "phone", "role", "is_active")

    def clean(self):
        cleaned_data = super().clean()
        if not self.instance.pk and not cleaned_data.get("password"):
            self.add_error("password", "⚠️ A password is required for new staff.")
        return cleaned_data

    def save(self, commit=True):
        staff = super().save(commit=False)
        password = self.cleaned_data.get("password")
        if password:
            staff.set_password(password)
        if commit:
            staff.save()
        return staff


# --- 4. PUBLIC GUEST PHOTO UPLOAD ---
class MultipleFileInput(forms.ClearableFileInput):
    allow_multiple_selected = True


class MultipleImageField(forms.ImageField):
    def __init__(self, *args, **kwargs):
        kwargs.setdefault("widget", MultipleFileInput(attrs={"accept": "image/*"}))
        super().__init__(*args, **kwargs)

    def clean(self, data, initial=None):
        single_clean = super().clean
        if isinstance(data, (list, tuple)):
            if not data:
                raise forms.ValidationError(self.error_messages["required"], code="required")
            return [single_clean(d, initial) for d in data]
        return [single_clean(data, initial)]


class GuestPhotoForm(forms.Form):
    photos = MultipleImageField(
        label="Guest Photos",
        error_messages={"required": "Please upload at least one photo."},
    )
