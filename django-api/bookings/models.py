"""Django ORM models (persistence layer).

These models handle database concerns. Domain logic lives in domain/.
"""

from django.db import models

from bookings.domain import EventId, Level


class Occurrence(models.Model):
    """Persistence model for one dated instance of the recurring event.

    Booking state is kept as text in ``description`` so organizers can edit
    it by hand; ``version`` is bumped on every change of that text, whether
    it comes from the service or from a manual save.
    """

    event_date = models.DateField(unique=True)
    name = models.CharField(max_length=255)
    starts_at = models.DateTimeField()
    location = models.CharField(max_length=255, blank=True)
    description = models.TextField(blank=True)
    version = models.PositiveIntegerField(default=1)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["starts_at"]
        indexes = [
            models.Index(fields=["starts_at"], name="occurrence_starts_at_idx"),
        ]

    def __str__(self) -> str:
        return f"{self.name} - {self.event_date}"

    def save(self, *args, **kwargs):
        self.event_date = EventId.from_start(self.starts_at).value
        if self.pk is not None:
            current = (
                Occurrence.objects.filter(pk=self.pk).values_list("description", "version").first()
            )
            if current is not None and current[0] != self.description:
                self.version = current[1] + 1
        super().save(*args, **kwargs)


class Member(models.Model):
    """Persistence model for the member directory."""

    LEVEL_CHOICES = [(level.name, level.name.title()) for level in Level]

    name = models.CharField(max_length=255)
    email = models.EmailField(unique=True)
    level = models.CharField(max_length=16, choices=LEVEL_CHOICES, default=Level.BASIC.name)

    class Meta:
        ordering = ["name"]

    def __str__(self) -> str:
        return f"{self.name} <{self.email}>"
