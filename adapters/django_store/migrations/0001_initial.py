from django.db import migrations, models
import django.db.models.deletion


class Migration(migrations.Migration):
    initial = True

    dependencies = []

    operations = [
        migrations.CreateModel(
            name="BookingRecord",
            fields=[
                ("id", models.CharField(max_length=64, primary_key=True, serialize=False)),
                ("branch_id", models.CharField(max_length=64)),
                ("client_id", models.CharField(blank=True, max_length=64, null=True)),
                ("client_name", models.CharField(blank=True, default="", max_length=255)),
                (
                    "status",
                    models.CharField(
                        choices=[
                            ("PENDING", "Pending"),
                            ("CONFIRMED", "Confirmed"),
                            ("IN_SERVICE", "In service"),
                            ("COMPLETED", "Completed"),
                            ("CANCELLED", "Cancelled"),
                            ("NO_SHOW", "No show"),
                        ],
                        default="PENDING",
                        max_length=20,
                    ),
                ),
                ("scheduled_at", models.DateTimeField()),
                ("duration_minutes", models.PositiveIntegerField(default=60)),
                ("service_lines", models.JSONField(default=list)),
                ("product_lines", models.JSONField(default=list)),
                ("discount", models.JSONField(blank=True, null=True)),
                ("tax_rate", models.DecimalField(decimal_places=4, default=0, max_digits=6)),
                ("cancellation_reason", models.TextField(blank=True, null=True)),
                ("history", models.JSONField(default=list)),
                ("created_at", models.DateTimeField(blank=True, null=True)),
                ("updated_at", models.DateTimeField(blank=True, null=True)),
            ],
            options={
                "db_table": "salon_bookings",
                "ordering": ["scheduled_at", "id"],
                "indexes": [
                    models.Index(
                        fields=["branch_id", "status"],
                        name="idx_booking_branch_status",
                    )
                ],
            },
        ),
        migrations.CreateModel(
            name="ArrivalRecord",
            fields=[
                ("id", models.CharField(max_length=64, primary_key=True, serialize=False)),
                ("branch_id", models.CharField(max_length=64)),
                ("booking_id", models.CharField(blank=True, max_length=64, null=True)),
                ("client_name", models.CharField(max_length=255)),
                (
                    "status",
                    models.CharField(
                        choices=[
                            ("ARRIVED", "Arrived"),
                            ("IN_SERVICE", "In service"),
                            ("COMPLETED", "Completed"),
                            ("CANCELLED", "Cancelled"),
                        ],
                        default="ARRIVED",
                        max_length=20,
                    ),
                ),
                ("arrived_at", models.DateTimeField()),
                ("started_at", models.DateTimeField(blank=True, null=True)),
                ("finished_at", models.DateTimeField(blank=True, null=True)),
            ],
            options={
                "db_table": "salon_arrivals",
                "ordering": ["arrived_at", "id"],
                "indexes": [
                    models.Index(
                        fields=["branch_id", "status"],
                        name="idx_arrival_branch_status",
                    )
                ],
                "constraints": [
                    models.UniqueConstraint(
                        condition=models.Q(status__in=["ARRIVED", "IN_SERVICE"]),
                        fields=("booking_id",),
                        name="uq_arrival_open_per_booking",
                    ),
                ],
            },
        ),
        migrations.CreateModel(
            name="PromotionRecord",
            fields=[
                ("id", models.CharField(max_length=64, primary_key=True, serialize=False)),
                ("code", models.CharField(max_length=32)),
                ("branch_id", models.CharField(blank=True, max_length=64, null=True)),
                ("name", models.CharField(max_length=255)),
                ("description", models.TextField(blank=True, default="")),
                ("discount_kind", models.CharField(max_length=20)),
                ("discount_value", models.DecimalField(decimal_places=2, max_digits=12)),
                ("applicable_to", models.CharField(default="all", max_length=20)),
                ("specific_item_ids", models.JSONField(default=list)),
                ("usage_policy", models.CharField(max_length=20)),
                ("max_uses", models.PositiveIntegerField(blank=True, null=True)),
                ("usage_count", models.PositiveIntegerField(default=0)),
                ("active", models.BooleanField(default=True)),
                ("start_date", models.DateTimeField()),
                ("end_date", models.DateTimeField()),
                ("created_at", models.DateTimeField(blank=True, null=True)),
            ],
            options={
                "db_table": "salon_promotions",
                "ordering": ["code", "id"],
                "constraints": [
                    models.UniqueConstraint(
                        fields=("code", "branch_id"),
                        name="uq_promotion_branch_code",
                    ),
                    models.UniqueConstraint(
                        condition=models.Q(branch_id__isnull=True),
                        fields=("code",),
                        name="uq_promotion_global_code",
                    ),
                ],
            },
        ),
        migrations.CreateModel(
            name="PromotionRedemption",
            fields=[
                (
                    "id",
                    models.BigAutoField(
                        auto_created=True,
                        primary_key=True,
                        serialize=False,
                        verbose_name="ID",
                    ),
                ),
                ("client_id", models.CharField(max_length=64)),
                ("booking_id", models.CharField(blank=True, max_length=64, null=True)),
                ("redeemed_at", models.DateTimeField(auto_now_add=True)),
                (
                    "promotion",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.PROTECT,
                        related_name="redemptions",
                        to="salon_store.promotionrecord",
                    ),
                ),
            ],
            options={
                "db_table": "salon_promotion_redemptions",
                "constraints": [
                    models.UniqueConstraint(
                        fields=("promotion", "client_id"),
                        name="uq_redemption_promotion_client",
                    ),
                ],
            },
        ),
    ]
