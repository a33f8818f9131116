from django.contrib import admin
from .identity import SequenceIdGenerator
from .services import draw_client_id
from .models import Client, Visit, Note, IdentitySequence

# Client Admin
@admin.register(Client)
class ClientAdmin(admin.ModelAdmin):
    list_display = ['id', 'client_id', 'name', 'gender', 'dob', 'phone', 'status', 'created_at']
    search_fields = ['name', 'client_id', 'phone']
    list_filter = ['status', 'gender']
    readonly_fields = ['client_id', 'created_at']

    def save_model(self, request, obj, form, change):
        if not obj.client_id:
            obj.client_id = draw_client_id(SequenceIdGenerator())
        super().save_model(request, obj, form, change)

# Visit Admin
@admin.register(Visit)
class VisitAdmin(admin.ModelAdmin):
    list_display = ['id', 'client', 'program', 'date', 'doctor']
    search_fields = ['client__name', 'client__client_id', 'doctor']
    list_filter = ['program']
    raw_id_fields = ['client']

# Note Admin
@admin.register(Note)
class NoteAdmin(admin.ModelAdmin):
    list_display = ['id', 'client', 'program', 'created_by', 'created_at']
    search_fields = ['client__name', 'client__client_id', 'created_by']
    raw_id_fields = ['client']

@admin.register(IdentitySequence)
class IdentitySequenceAdmin(admin.ModelAdmin):
    list_display = ['name', 'last_value']
    readonly_fields = ['name', 'last_value']
