from django.db import models
from django.utils import timezone
from clients.models import Client


class Program(models.Model):
    REQUIRED_INFO_CHOICES = (
        ('testResults', 'Test results'),
        ('medication', 'Medication'),
        ('symptoms', 'Symptoms'),
        ('followup', 'Follow-up'),
    )

    name = models.CharField(max_length=100)
    # Always stored upper-case
    code = models.CharField(max_length=32, unique=True)
    description = models.TextField()
    required_info = models.JSONField(default=list, blank=True)

    class Meta:
        ordering = ['id']

    def __str__(self):
        return f"{self.name} ({self.code})"


class Enrollment(models.Model):
    STATUS_CHOICES = (
        ('active', 'Active'),
        ('inactive', 'Inactive'),
        ('completed', 'Completed'),
    )
    SEVERITY_CHOICES = (
        ('mild', 'Mild'),
        ('moderate', 'Moderate'),
        ('severe', 'Severe'),
    )
    RISK_CHOICES = (
        ('low', 'Low'),
        ('medium', 'Medium'),
        ('high', 'High'),
    )

    client = models.ForeignKey(Client, on_delete=models.CASCADE, related_name='enrollments')
    program = models.ForeignKey(Program, on_delete=models.PROTECT, related_name='enrollments')
    enroll_date = models.DateTimeField(default=timezone.now)
    notes = models.TextField(blank=True, null=True)
    status = models.CharField(max_length=15, choices=STATUS_CHOICES, default='active')
    symptom_severity = models.CharField(max_length=10, choices=SEVERITY_CHOICES, blank=True, null=True)
    risk_level = models.CharField(max_length=10, choices=RISK_CHOICES, blank=True, null=True)
    follow_up_required = models.BooleanField(default=False)

    class Meta:
        unique_together = ('client', 'program')
        ordering = ['-enroll_date', '-id']

    def __str__(self):
        return f"{self.client} -> {self.program}"
