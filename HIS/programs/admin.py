from django.contrib import admin
from .models import Program, Enrollment

@admin.register(Program)
class ProgramAdmin(admin.ModelAdmin):
    list_display = ['id', 'name', 'code']
    search_fields = ['name', 'code']

@admin.register(Enrollment)
class EnrollmentAdmin(admin.ModelAdmin):
    list_display = ['id', 'client', 'program', 'enroll_date', 'status', 'risk_level', 'follow_up_required']
    search_fields = ['client__name', 'client__client_id', 'program__name', 'program__code']
    list_filter = ['program', 'status', 'risk_level', 'follow_up_required']
    raw_id_fields = ['client']
