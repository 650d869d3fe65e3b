from django.db import models


class Layer(models.Model):
    name = models.CharField(max_length=255)
    description = models.TextField(blank=True)
    layer_rule = models.CharField(max_length=1024, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["pk"]

    def __str__(self):
        return self.name


class Widget(models.Model):
    widget_type = models.CharField(max_length=64)
    title = models.CharField(max_length=255, blank=True)
    zone = models.CharField(max_length=64, db_index=True)
    # String-encoded integer; unparseable values sort as 0.
    position = models.CharField(max_length=32, blank=True, default="")
    layer = models.ForeignKey(
        Layer,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="widgets",
    )
    config = models.JSONField(default=dict, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["pk"]

    @property
    def is_orphaned(self) -> bool:
        return self.layer_id is None

    def __str__(self):
        return f"{self.widget_type} in {self.zone} (position={self.position})"
