from django.contrib import admin

from apps.orders.models import Order


@admin.register(Order)
class OrderAdmin(admin.ModelAdmin):

    list_display = ('order_number', 'status', 'total_amount', 'total_amount_ars', 'exchange_rate', 'created_at')
    list_filter = ('status',)
    search_fields = ('order_number',)
    readonly_fields = ('id', 'total_amount_ars', 'exchange_rate', 'created_at', 'updated_at')
