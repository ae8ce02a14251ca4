from django.contrib import admin

from apps.catalog.models import ProductVariant


@admin.register(ProductVariant)
class ProductVariantAdmin(admin.ModelAdmin):
    """ARS prices are maintained by the dollar cascade, so they are read-only here."""

    list_display = ('product_name', 'color_name', 'stock', 'price_usd', 'price_ars', 'updated_at')
    search_fields = ('product_name', 'color_name')
    readonly_fields = ('id', 'price_ars', 'created_at', 'updated_at')
    ordering = ('product_name', 'color_name')
