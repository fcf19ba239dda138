from django.db import models
from django.utils import timezone


class Account(models.Model):
    class Role(models.TextChoices):
        ADMIN = "admin", "Admin"
        RESELLER = "reseller", "Reseller"
        USER = "user", "User"

    email = models.EmailField(unique=True)
    full_name = models.CharField(max_length=255)
    role = models.CharField(max_length=16, choices=Role.choices, default=Role.USER)
    is_active = models.BooleanField(default=True)
    created_at = models.DateTimeField(default=timezone.now)
    updated_at = models.DateTimeField(default=timezone.now)

    def __str__(self):
        return self.email

    @property
    def is_reseller(self):
        return self.role == self.Role.RESELLER and self.is_active


class Project(models.Model):
    """A published invitation microsite. Settlement only reads `reseller` and flips `is_paid`."""

    class Status(models.TextChoices):
        DRAFT = "draft", "Draft"
        PUBLISHED = "published", "Published"
        ARCHIVED = "archived", "Archived"

    owner = models.ForeignKey(Account, on_delete=models.PROTECT, related_name="projects")
    reseller = models.ForeignKey(
        Account,
        on_delete=models.PROTECT,
        null=True,
        blank=True,
        related_name="resold_projects",
    )
    subdomain = models.CharField(max_length=50, unique=True)
    bride_name = models.CharField(max_length=255)
    groom_name = models.CharField(max_length=255)
    status = models.CharField(max_length=16, choices=Status.choices, default=Status.DRAFT)
    is_paid = models.BooleanField(default=False)
    created_at = models.DateTimeField(default=timezone.now)
    updated_at = models.DateTimeField(default=timezone.now)

    def __str__(self):
        return self.subdomain
