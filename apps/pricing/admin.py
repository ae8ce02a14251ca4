"""
Django Admin configuration for the Pricing app.
The dollar rate is a singleton: it can be inspected and refreshed, not added or deleted.
"""

from django.contrib import admin, messages

from apps.pricing.application.tasks import cascade_dollar_prices
from apps.pricing.domain.exceptions import SourceUnavailable
from apps.pricing.domain.services import DollarRateService
from apps.pricing.infrastructure.persistence.models import DollarRate


@admin.register(DollarRate)
class DollarRateAdmin(admin.ModelAdmin):
    """Admin interface for the DollarRate singleton."""

    list_display = (
        'effective_value',
        'base_value',
        'get_markup',
        'provider_name',
        'source_fetched_at',
        'updated_at',
    )
    readonly_fields = (
        'id',
        'key',
        'base_value',
        'effective_value',
        'provider_name',
        'source_fetched_at',
        'created_at',
        'updated_at',
    )
    actions = ['refresh_from_providers', 'force_price_cascade']

    fieldsets = (
        ('Rate', {
            'fields': ('base_value', 'effective_value', 'provider_name', 'source_fetched_at')
        }),
        ('Markup', {
            'fields': ('markup_value', 'markup_is_percentage')
        }),
        ('Metadata', {
            'fields': ('id', 'key', 'created_at', 'updated_at'),
            'classes': ('collapse',)
        }),
    )

    def has_add_permission(self, request):
        return False

    def has_delete_permission(self, request, obj=None):
        return False

    def get_markup(self, obj):
        """Display markup as '10%' or '+50'."""
        if obj.markup_is_percentage:
            return f"{obj.markup_value.normalize():f}%"
        return f"+{obj.markup_value.normalize():f}"
    get_markup.short_description = 'Markup'

    def save_model(self, request, obj, form, change):
        """Route markup edits through the service so the effective value is recomputed."""
        result = DollarRateService.update_markup_config(
            form.cleaned_data['markup_value'],
            form.cleaned_data['markup_is_percentage'],
        )
        if result.effective_value_changed:
            cascade_dollar_prices.delay()
            self.message_user(request, 'Price cascade dispatched for the new effective value.')

    @admin.action(description='Refresh dollar rate from providers')
    def refresh_from_providers(self, request, queryset):
        try:
            result = DollarRateService.refresh_rate()
        except SourceUnavailable as e:
            self.message_user(request, f'Could not refresh the dollar rate: {e}', level=messages.ERROR)
            return

        if result.changed:
            cascade_dollar_prices.delay()
            self.message_user(
                request,
                f'Dollar rate updated to {result.rate.effective_value}. Price cascade dispatched.'
            )
        else:
            self.message_user(request, f'Dollar rate unchanged at {result.rate.effective_value}.')

    @admin.action(description='Force price cascade')
    def force_price_cascade(self, request, queryset):
        task = cascade_dollar_prices.delay()
        self.message_user(request, f'Price cascade dispatched with ID: {task.id}')
