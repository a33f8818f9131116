from django.db import models
from django.utils import timezone


class Client(models.Model):
    """A person registered in the system under a generated, human-readable id."""
    GENDER_CHOICES = (
        ('male', 'Male'),
        ('female', 'Female'),
        ('other', 'Other'),
    )
    STATUS_CHOICES = (
        ('active', 'Active'),
        ('inactive', 'Inactive'),
    )

    client_id = models.CharField(max_length=32, unique=True)
    name = models.CharField(max_length=255)
    dob = models.DateField()
    gender = models.CharField(max_length=10, choices=GENDER_CHOICES)
    phone = models.CharField(max_length=32)
    address = models.TextField()
    email = models.EmailField(blank=True, null=True)
    emergency_contact = models.CharField(max_length=255)
    status = models.CharField(max_length=10, choices=STATUS_CHOICES, default='active')
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ['-id']

    def __str__(self):
        return f"{self.name} ({self.client_id})"


class IdentitySequence(models.Model):
    """Monotonic counter backing generated client ids."""
    name = models.CharField(max_length=50, unique=True)
    last_value = models.PositiveBigIntegerField(default=0)

    def __str__(self):
        return f"{self.name}: {self.last_value}"


# Append-only clinical records
class Visit(models.Model):
    client = models.ForeignKey(Client, on_delete=models.CASCADE, related_name='visits')
    program = models.ForeignKey('programs.Program', on_delete=models.PROTECT, related_name='visits')
    date = models.DateTimeField(default=timezone.now)
    doctor = models.CharField(max_length=255)
    purpose = models.TextField()

    class Meta:
        ordering = ['-date', '-id']

    def __str__(self):
        return f"{self.client} visit on {self.date:%Y-%m-%d}"


class Note(models.Model):
    client = models.ForeignKey(Client, on_delete=models.CASCADE, related_name='notes')
    program = models.ForeignKey(
        'programs.Program', on_delete=models.SET_NULL, null=True, blank=True, related_name='notes'
    )
    content = models.TextField()
    created_by = models.CharField(max_length=255)
    created_at = models.DateTimeField(default=timezone.now)

    class Meta:
        ordering = ['-created_at', '-id']

    def __str__(self):
        return f"Note for {self.client} by {self.created_by}"
