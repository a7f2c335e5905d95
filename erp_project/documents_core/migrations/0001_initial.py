from decimal import Decimal

import django.db.models.deletion
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = []

    operations = [
        migrations.CreateModel(
            name="Company",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("name", models.CharField(max_length=200)),
                ("slug", models.SlugField(max_length=80, unique=True)),
                ("currency_code", models.CharField(default="USD", max_length=10)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
            ],
            options={
                "verbose_name_plural": "companies",
            },
        ),
        migrations.CreateModel(
            name="Account",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("code", models.CharField(max_length=32)),
                ("name", models.CharField(max_length=200)),
                ("ac_type", models.CharField(choices=[("asset", "Asset"), ("liability", "Liability"), ("equity", "Equity"), ("income", "Income"), ("expense", "Expense")], default="asset", max_length=10)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("company", models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, to="documents_core.company")),
            ],
            options={
                "indexes": [models.Index(fields=["company", "code"], name="account_company_code_idx")],
                "constraints": [models.UniqueConstraint(fields=("company", "code"), name="uq_company_account_code")],
            },
        ),
        migrations.CreateModel(
            name="AuditLog",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("action", models.CharField(max_length=50)),
                ("object_type", models.CharField(max_length=100)),
                ("object_id", models.CharField(max_length=100)),
                ("changes", models.JSONField(blank=True, null=True)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("company", models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, to="documents_core.company")),
            ],
            options={
                "indexes": [
                    models.Index(fields=["company", "created_at"], name="auditlog_company_created_idx"),
                    models.Index(fields=["object_type", "object_id"], name="auditlog_object_idx"),
                ],
            },
        ),
        migrations.CreateModel(
            name="Customer",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("name", models.CharField(max_length=200)),
                ("email", models.EmailField(blank=True, max_length=254, null=True)),
                ("payment_terms_days", models.IntegerField(default=30)),
                ("company", models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, to="documents_core.company")),
            ],
            options={
                "indexes": [models.Index(fields=["company", "name"], name="customer_company_name_idx")],
                "constraints": [models.UniqueConstraint(fields=("company", "name"), name="uq_company_customer_name")],
            },
        ),
        migrations.CreateModel(
            name="Vendor",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("name", models.CharField(max_length=200)),
                ("email", models.EmailField(blank=True, max_length=254, null=True)),
                ("payment_terms_days", models.IntegerField(default=30)),
                ("company", models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, to="documents_core.company")),
            ],
            options={
                "indexes": [models.Index(fields=["company", "name"], name="vendor_company_name_idx")],
                "constraints": [models.UniqueConstraint(fields=("company", "name"), name="uq_company_vendor_name")],
            },
        ),
        migrations.CreateModel(
            name="Item",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("sku", models.CharField(blank=True, max_length=80, null=True)),
                ("name", models.CharField(max_length=200)),
                ("sellable", models.BooleanField(default=True)),
                ("purchasable", models.BooleanField(default=True)),
                ("sell_price", models.DecimalField(blank=True, decimal_places=4, max_digits=18, null=True)),
                ("cost_price", models.DecimalField(blank=True, decimal_places=4, max_digits=18, null=True)),
                ("company", models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, to="documents_core.company")),
            ],
            options={
                "indexes": [models.Index(fields=["company", "name"], name="item_company_name_idx")],
                "constraints": [models.UniqueConstraint(fields=("company", "sku"), name="uq_company_item_sku")],
            },
        ),
        migrations.CreateModel(
            name="ItemEntry",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("reference_type", models.CharField(choices=[("SaleEstimate", "Sale estimate"), ("SaleInvoice", "Sale invoice"), ("Bill", "Bill")], max_length=32)),
                ("reference_id", models.PositiveBigIntegerField()),
                ("index", models.PositiveIntegerField(default=1)),
                ("description", models.TextField(blank=True, default="")),
                ("quantity", models.DecimalField(decimal_places=4, default=Decimal("1"), max_digits=14)),
                ("rate", models.DecimalField(decimal_places=4, default=Decimal("0.00"), max_digits=18)),
                ("discount", models.DecimalField(decimal_places=2, default=Decimal("0.00"), max_digits=5)),
                ("amount", models.DecimalField(decimal_places=2, default=Decimal("0.00"), max_digits=18)),
                ("company", models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, to="documents_core.company")),
                ("item", models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name="entries", to="documents_core.item")),
            ],
            options={
                "ordering": ["reference_id", "index", "id"],
                "indexes": [models.Index(fields=["company", "reference_type", "reference_id"], name="ie_company_reference_idx")],
                "constraints": [
                    models.CheckConstraint(condition=models.Q(("quantity__gte", 0), ("rate__gte", 0)), name="ie_non_negative_amounts"),
                    models.CheckConstraint(condition=models.Q(("discount__gte", 0), ("discount__lte", 100)), name="ie_discount_percentage"),
                ],
            },
        ),
        migrations.CreateModel(
            name="NumberSeries",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("code", models.CharField(max_length=50)),
                ("prefix", models.CharField(blank=True, default="", max_length=50)),
                ("next_number", models.PositiveIntegerField(default=1)),
                ("min_width", models.PositiveSmallIntegerField(default=5)),
                ("company", models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name="number_series", to="documents_core.company")),
            ],
            options={
                "ordering": ["code"],
                "constraints": [models.UniqueConstraint(fields=("company", "code"), name="uq_company_number_series")],
            },
        ),
        migrations.CreateModel(
            name="SaleEstimate",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("estimate_number", models.CharField(blank=True, max_length=64, null=True)),
                ("reference", models.CharField(blank=True, default="", max_length=64)),
                ("estimate_date", models.DateField()),
                ("expiration_date", models.DateField(blank=True, null=True)),
                ("note", models.TextField(blank=True, default="")),
                ("terms_conditions", models.TextField(blank=True, default="")),
                ("amount", models.DecimalField(decimal_places=2, default=Decimal("0.00"), max_digits=18)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("company", models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, to="documents_core.company")),
                ("customer", models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name="estimates", to="documents_core.customer")),
            ],
            options={
                "indexes": [
                    models.Index(fields=["company", "estimate_number"], name="estimate_company_number_idx"),
                    models.Index(fields=["company", "customer"], name="estimate_company_customer_idx"),
                ],
                "constraints": [models.UniqueConstraint(fields=("company", "estimate_number"), name="uq_estimate_company_number")],
            },
        ),
        migrations.CreateModel(
            name="SaleInvoice",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("invoice_no", models.CharField(blank=True, max_length=64, null=True)),
                ("reference_no", models.CharField(blank=True, default="", max_length=64)),
                ("invoice_date", models.DateField()),
                ("due_date", models.DateField(blank=True, null=True)),
                ("status", models.CharField(choices=[("draft", "Draft"), ("delivered", "Delivered")], default="draft", max_length=10)),
                ("invoice_message", models.TextField(blank=True, default="")),
                ("terms_conditions", models.TextField(blank=True, default="")),
                ("amount", models.DecimalField(decimal_places=2, default=Decimal("0.00"), max_digits=18)),
                ("payment_amount", models.DecimalField(decimal_places=2, default=Decimal("0.00"), max_digits=18)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("company", models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, to="documents_core.company")),
                ("customer", models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name="invoices", to="documents_core.customer")),
            ],
            options={
                "indexes": [
                    models.Index(fields=["company", "invoice_no"], name="invoice_company_number_idx"),
                    models.Index(fields=["company", "customer"], name="invoice_company_customer_idx"),
                ],
                "constraints": [
                    models.UniqueConstraint(fields=("company", "invoice_no"), name="uq_sale_invoice_company_number"),
                    models.CheckConstraint(condition=models.Q(("payment_amount__gte", 0)), name="si_non_negative_payment"),
                ],
            },
        ),
        migrations.CreateModel(
            name="Bill",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("bill_number", models.CharField(blank=True, max_length=64, null=True)),
                ("reference_no", models.CharField(blank=True, default="", max_length=64)),
                ("bill_date", models.DateField()),
                ("due_date", models.DateField(blank=True, null=True)),
                ("status", models.CharField(choices=[("draft", "Draft"), ("open", "Open")], default="draft", max_length=20)),
                ("note", models.TextField(blank=True, default="")),
                ("amount", models.DecimalField(decimal_places=2, default=Decimal("0.00"), max_digits=18)),
                ("payment_amount", models.DecimalField(decimal_places=2, default=Decimal("0.00"), max_digits=18)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("company", models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, to="documents_core.company")),
                ("vendor", models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name="bills", to="documents_core.vendor")),
            ],
            options={
                "indexes": [
                    models.Index(fields=["company", "bill_number"], name="bill_company_number_idx"),
                    models.Index(fields=["company", "vendor"], name="bill_company_vendor_idx"),
                ],
                "constraints": [models.UniqueConstraint(fields=("company", "bill_number"), name="uq_bill_company_number")],
            },
        ),
        migrations.CreateModel(
            name="PaymentReceive",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("payment_receive_no", models.CharField(blank=True, max_length=64, null=True)),
                ("reference_no", models.CharField(blank=True, default="", max_length=64)),
                ("payment_date", models.DateField()),
                ("description", models.TextField(blank=True, default="")),
                ("amount", models.DecimalField(decimal_places=2, default=Decimal("0.00"), max_digits=18)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("company", models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, to="documents_core.company")),
                ("customer", models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name="payment_receives", to="documents_core.customer")),
                ("deposit_account", models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name="payment_receives", to="documents_core.account")),
            ],
            options={
                "indexes": [
                    models.Index(fields=["company", "payment_receive_no"], name="payment_company_number_idx"),
                    models.Index(fields=["company", "customer"], name="payment_company_customer_idx"),
                ],
                "constraints": [models.UniqueConstraint(fields=("company", "payment_receive_no"), name="uq_payment_receive_company_number")],
            },
        ),
        migrations.CreateModel(
            name="PaymentReceiveEntry",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("index", models.PositiveIntegerField(default=1)),
                ("payment_amount", models.DecimalField(decimal_places=2, default=Decimal("0.00"), max_digits=18)),
                ("company", models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, to="documents_core.company")),
                ("invoice", models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name="payment_entries", to="documents_core.saleinvoice")),
                ("payment_receive", models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name="payment_entries", to="documents_core.paymentreceive")),
            ],
            options={
                "ordering": ["payment_receive_id", "index", "id"],
                "indexes": [models.Index(fields=["company", "payment_receive"], name="pre_company_payment_idx")],
                "constraints": [models.CheckConstraint(condition=models.Q(("payment_amount__gt", 0)), name="pre_positive_payment_amount")],
            },
        ),
    ]
